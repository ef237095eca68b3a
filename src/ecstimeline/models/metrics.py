"""Ingestion metrics model."""

from pydantic import BaseModel, Field


class IngestMetrics(BaseModel):
    """Counters for one CLI ingestion run.

    Emitted to stderr in verbose mode so stdout stays machine-readable.
    """

    step_name: str = Field(
        ...,
        description="Command that produced the metrics (e.g., 'build')",
    )

    duration_ms: int = Field(
        ...,
        ge=0,
        description="Execution time in milliseconds",
    )

    inputs: int = Field(
        default=0,
        ge=0,
        description="Number of input documents read",
    )

    bytes_read: int = Field(
        default=0,
        ge=0,
        description="Bytes read from input",
    )

    events_parsed: int = Field(
        default=0,
        ge=0,
        description="Canonical events produced across all inputs",
    )

    events_added: int = Field(
        default=0,
        ge=0,
        description="Events kept after id-based deduplication",
    )

    duplicates: int = Field(
        default=0,
        ge=0,
        description="Events dropped because their id was already present",
    )

    hosts: int = Field(
        default=0,
        ge=0,
        description="Hosts in the rebuilt registry",
    )

    connections: int = Field(
        default=0,
        ge=0,
        description="Cross-host connection edges",
    )

    model_config = {"extra": "forbid"}
