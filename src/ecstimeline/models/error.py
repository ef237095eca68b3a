"""Structured error model for the ECS timeline builder."""

from typing import Any

from pydantic import BaseModel, Field


class StructuredError(BaseModel):
    """Structured error response format.

    Every error surfaced by the engine or the CLI follows this schema so
    callers can branch on ``code`` and show ``remediation`` to the user.
    """

    code: str = Field(
        ...,
        pattern=r"^[A-Z][A-Z0-9_]*$",
        description="Error code (e.g., INVALID_FORMAT)",
        examples=[
            "INVALID_FORMAT",
            "PARSE_ERROR",
            "AMBIGUOUS_INPUT",
            "VALIDATION_ERROR",
        ],
    )

    message: str = Field(
        ...,
        description="Human-readable error message",
    )

    remediation: str = Field(
        ...,
        description="Suggested fix or next step",
    )

    retryable: bool = Field(
        ...,
        description="Whether retry may succeed",
    )

    context: dict[str, Any] | None = Field(
        default=None,
        description="Additional context (line number, input type, etc.)",
    )

    model_config = {"extra": "forbid"}


class ErrorCode:
    """Standard error codes."""

    INVALID_FORMAT = "INVALID_FORMAT"
    PARSE_ERROR = "PARSE_ERROR"
    AMBIGUOUS_INPUT = "AMBIGUOUS_INPUT"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    IO_ERROR = "IO_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
