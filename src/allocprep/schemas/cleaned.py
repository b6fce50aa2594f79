"""
Pandera schemas for the cleaned export tables.

These are structural contracts for the files written by the export layer:
identifier and text columns are present and string typed, list and mapping
columns are serialized JSON text. Value ranges are not enforced here because
invalid rows are exported as-is for the user to fix.
"""

import pandera.pandas as pa
from pandera.typing import Series


class CleanedClientSchema(pa.DataFrameModel):
    """Schema for ``clients.cleaned.csv``."""

    ClientID: Series[str] = pa.Field(description="Client identifier (may be blank)")
    ClientName: Series[str] = pa.Field(description="Display name")
    RequestedTaskIDs: Series[str] = pa.Field(
        description="JSON array of requested task identifiers",
        str_startswith="[",
    )
    GroupTag: Series[str] = pa.Field(nullable=True, description="Client group")
    AttributesJSON: Series[str] = pa.Field(
        nullable=True, description="JSON object text, raw text if it failed to parse"
    )

    class Config:
        """Schema configuration."""

        name = "CleanedClientSchema"
        strict = False  # Numeric columns are not type-checked
        coerce = True


class CleanedWorkerSchema(pa.DataFrameModel):
    """Schema for ``workers.cleaned.csv``."""

    WorkerID: Series[str] = pa.Field(description="Worker identifier (may be blank)")
    WorkerName: Series[str] = pa.Field(description="Display name")
    Skills: Series[str] = pa.Field(
        description="JSON array of skill tags",
        str_startswith="[",
    )
    AvailableSlots: Series[str] = pa.Field(
        description="JSON array of phase numbers",
        str_startswith="[",
    )
    WorkerGroup: Series[str] = pa.Field(nullable=True, description="Worker group")

    class Config:
        """Schema configuration."""

        name = "CleanedWorkerSchema"
        strict = False
        coerce = True


class CleanedTaskSchema(pa.DataFrameModel):
    """Schema for ``tasks.cleaned.csv``."""

    TaskID: Series[str] = pa.Field(description="Task identifier (may be blank)")
    TaskName: Series[str] = pa.Field(description="Display name")
    Category: Series[str] = pa.Field(nullable=True, description="Task category")
    RequiredSkills: Series[str] = pa.Field(
        description="JSON array of skill tags",
        str_startswith="[",
    )
    PreferredPhases: Series[str] = pa.Field(
        description="JSON array of phase numbers",
        str_startswith="[",
    )

    class Config:
        """Schema configuration."""

        name = "CleanedTaskSchema"
        strict = False
        coerce = True
