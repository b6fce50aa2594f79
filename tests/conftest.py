"""Pytest configuration and shared fixtures."""

import sys
from pathlib import Path
from typing import Any

import pytest
import structlog

from allocprep.schemas import Client, Task, Worker


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Restore structlog defaults so a test's logging config (e.g. a CLI run's
    captured, later-closed stderr) does not leak into other tests."""
    yield
    structlog.reset_defaults()
    # Module-level loggers cache their first binding; drop it so they rebind
    # against the current configuration.
    for name, module in list(sys.modules.items()):
        if name == "allocprep" or name.startswith("allocprep."):
            for value in vars(module).values():
                if isinstance(value, structlog._config.BoundLoggerLazyProxy):
                    value.__dict__.pop("bind", None)


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def client_rows() -> tuple[list[dict[str, Any]], list[str]]:
    """Create a clients upload with aliased headers and mixed list encodings."""
    headers = ["client_id", "Name", " Priority ", "tasks", "group", "meta", "Notes"]
    rows = [
        {
            "client_id": "C1",
            "Name": "Acme",
            " Priority ": "3",
            "tasks": "T1, T2",
            "group": "enterprise",
            "meta": '{"region": "north"}',
            "Notes": "vip",
        },
        {
            "client_id": "  ",
            "Name": "Nameless",
            " Priority ": "9",
            "tasks": '["T3"]',
            "group": "",
            "meta": "",
            "Notes": "",
        },
        {
            "client_id": "C3",
            "Name": "Initech",
            " Priority ": "abc",
            "tasks": "T1|T9",
            "group": "smb",
            "meta": "{broken",
            "Notes": "",
        },
    ]
    return rows, headers


@pytest.fixture
def sample_clients() -> list[Client]:
    """Create valid canonical clients."""
    return [
        Client(ClientID="C1", ClientName="Acme", PriorityLevel=1, RequestedTaskIDs=["T1"]),
        Client(ClientID="C2", ClientName="Globex", PriorityLevel=5, RequestedTaskIDs=["T1", "T2"]),
    ]


@pytest.fixture
def sample_workers() -> list[Worker]:
    """Create valid canonical workers."""
    return [
        Worker(
            WorkerID="W1",
            WorkerName="Ana",
            Skills=["welding", "Painting"],
            AvailableSlots=[1, 2, 3],
            MaxLoadPerPhase=2,
            WorkerGroup="crew-a",
        ),
        Worker(
            WorkerID="W2",
            WorkerName="Bo",
            Skills=["carpentry"],
            AvailableSlots=[2],
            MaxLoadPerPhase=0,
        ),
    ]


@pytest.fixture
def sample_tasks() -> list[Task]:
    """Create valid canonical tasks."""
    return [
        Task(
            TaskID="T1",
            TaskName="Frame",
            Category="build",
            Duration=2,
            RequiredSkills=["welding"],
            PreferredPhases=[1, 2],
            MaxConcurrent=1,
        ),
        Task(
            TaskID="T2",
            TaskName="Finish",
            Duration=1,
            RequiredSkills=["painting"],
            PreferredPhases=[2, 3],
            MaxConcurrent=2,
        ),
        Task(
            TaskID="T3",
            TaskName="Audit",
            Duration=4,
            RequiredSkills=[],
            PreferredPhases=[3, 4, 5],
            MaxConcurrent=1,
        ),
    ]


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Write a small set of input CSVs to a temporary directory."""
    (tmp_path / "clients.csv").write_text(
        "ClientID,Name,Priority,Tasks,Group,Attributes\n"
        'C1,Acme,3,"T1,T2",enterprise,"{""region"": ""north""}"\n'
        "C2,Globex,5,T3,smb,\n",
        encoding="utf-8",
    )
    (tmp_path / "workers.csv").write_text(
        "worker_id,worker_name,skill,slots,max_load,group\n"
        'W1,Ana,"welding,painting",1-3,2,crew-a\n'
        "W2,Bo,inspection,2,1,crew-b\n",
        encoding="utf-8",
    )
    (tmp_path / "tasks.csv").write_text(
        "task_id,task_name,duration,req_skills,preferred,concurrency\n"
        "T1,Frame,2,welding,1-2,1\n"
        'T2,Finish,1,painting,"[2,3]",2\n'
        "T3,Audit,3,inspection,3,1\n",
        encoding="utf-8",
    )
    return tmp_path


@pytest.fixture
def config_file(data_dir: Path, tmp_path: Path) -> Path:
    """Write a configuration pointing at the sample CSVs."""
    path = tmp_path / "project.yaml"
    path.write_text(
        "project: test-project\n"
        "data:\n"
        f"  root: {data_dir.as_posix()}\n"
        "  clients: clients.csv\n"
        "  workers: workers.csv\n"
        "  tasks: tasks.csv\n"
        "output:\n"
        f"  root: {(tmp_path / 'output').as_posix()}\n"
        "logging:\n"
        "  level: WARNING\n",
        encoding="utf-8",
    )
    return path
