"""Pydantic models for the ECS timeline builder."""

from ecstimeline.models.error import ErrorCode, StructuredError
from ecstimeline.models.metrics import IngestMetrics

__all__ = [
    "ErrorCode",
    "StructuredError",
    "IngestMetrics",
]
