"""Tests for CSV/XLSX ingestion."""

from pathlib import Path

import pandas as pd
import pytest

from allocprep.ingestion import read_table
from allocprep.normalization import map_and_normalize_tasks, parse_number


class TestReadCsv:
    """Tests for CSV reading."""

    def test_cells_stay_raw(self, tmp_path: Path) -> None:
        """Test that cells are kept as strings and not turned into NaN."""
        path = tmp_path / "tasks.csv"
        path.write_text("TaskID,Duration,Notes\nT1,2,NA\nT2,,\n", encoding="utf-8")

        table = read_table(path)
        assert table.headers == ["TaskID", "Duration", "Notes"]
        assert table.rows == [
            {"TaskID": "T1", "Duration": "2", "Notes": "NA"},
            {"TaskID": "T2", "Duration": "", "Notes": ""},
        ]
        assert table.source == path

    def test_blank_rows_skipped(self, tmp_path: Path) -> None:
        """Test that empty lines and all-blank rows are dropped."""
        path = tmp_path / "clients.csv"
        path.write_text("ClientID,Name\nC1,Acme\n\n , \nC2,Globex\n", encoding="utf-8")
        assert [r["ClientID"] for r in read_table(path).rows] == ["C1", "C2"]

    def test_utf8_bom(self, tmp_path: Path) -> None:
        """Test that a byte-order mark does not leak into the first header."""
        path = tmp_path / "bom.csv"
        path.write_bytes("\ufeffClientID,Name\nC1,Zoë\n".encode())
        table = read_table(path)
        assert table.headers[0] == "ClientID"
        assert table.rows[0]["Name"] == "Zoë"

    def test_latin1_fallback(self, tmp_path: Path) -> None:
        """Test decoding files that are not valid UTF-8."""
        path = tmp_path / "latin.csv"
        path.write_bytes("WorkerID,WorkerName\nW1,Jos\xe9\n".encode("latin-1"))
        assert read_table(path).rows[0]["WorkerName"] == "José"

    def test_separator_sniffing(self, tmp_path: Path) -> None:
        """Test that a null separator detects semicolons."""
        path = tmp_path / "tasks.csv"
        path.write_text("TaskID;Duration\nT1;2\nT2;3\n", encoding="utf-8")
        table = read_table(path, sep=None)
        assert table.headers == ["TaskID", "Duration"]
        assert table.rows[1] == {"TaskID": "T2", "Duration": "3"}

    def test_quoted_delimiters(self, tmp_path: Path) -> None:
        """Test that quoted list cells survive the default separator."""
        path = tmp_path / "clients.csv"
        path.write_text('ClientID,Tasks\nC1,"T1,T2"\n', encoding="utf-8")
        assert read_table(path).rows[0]["Tasks"] == "T1,T2"


class TestReadExcel:
    """Tests for workbook reading."""

    def test_xlsx(self, tmp_path: Path) -> None:
        """Test reading the first sheet of a workbook."""
        path = tmp_path / "tasks.xlsx"
        pd.DataFrame(
            {
                "task_id": ["T1", None, "T2"],
                "duration": [2, None, 3],
                "skills": ["welding", None, None],
            }
        ).to_excel(path, index=False, engine="openpyxl")

        table = read_table(path)
        assert table.headers == ["task_id", "duration", "skills"]
        assert [r["task_id"] for r in table.rows] == ["T1", "T2"]
        assert parse_number(table.rows[0]["duration"]) == 2
        assert table.rows[1]["skills"] is None

        result = map_and_normalize_tasks(table.rows, table.headers)
        assert [t.RequiredSkills for t in result.mapped] == [["welding"], []]
        assert [t.Duration for t in result.mapped] == [2, 3]

    def test_named_sheet(self, tmp_path: Path) -> None:
        """Test selecting a worksheet by name."""
        path = tmp_path / "book.xlsx"
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            pd.DataFrame({"a": [1]}).to_excel(writer, sheet_name="First", index=False)
            pd.DataFrame({"WorkerID": ["W1"]}).to_excel(writer, sheet_name="Workers", index=False)
        assert read_table(path, sheet="Workers").headers == ["WorkerID"]


class TestReadErrors:
    """Tests for rejected inputs."""

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test that a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            read_table(tmp_path / "nope.csv")

    def test_unsupported_format(self, tmp_path: Path) -> None:
        """Test that unknown suffixes are rejected."""
        path = tmp_path / "data.json"
        path.write_text("[]", encoding="utf-8")
        with pytest.raises(ValueError, match="Unsupported file format"):
            read_table(path)
