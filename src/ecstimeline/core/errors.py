"""Structured error handling for the ECS timeline builder."""

import sys
from typing import Any, NoReturn

from ecstimeline.models.error import ErrorCode, StructuredError

SUPPORTED_FORMATS_HINT = (
    "Wrap objects in an array: [{...}, {...}], "
    "or use NDJSON: one minified object per line"
)


class EcsTimelineError(Exception):
    """Base exception for engine and CLI errors.

    Wraps a StructuredError for consistent error handling.
    """

    def __init__(
        self,
        code: str,
        message: str,
        remediation: str,
        retryable: bool = False,
        context: dict[str, Any] | None = None,
    ):
        self.error = StructuredError(
            code=code,
            message=message,
            remediation=remediation,
            retryable=retryable,
            context=context,
        )
        super().__init__(message)

    def to_structured(self) -> StructuredError:
        """Convert to StructuredError."""
        return self.error

    def to_structured_error(self) -> dict:
        """Convert to JSON-serializable dict for output."""
        return self.error.model_dump(mode="json", exclude_none=True)


class FormatError(EcsTimelineError):
    """Input text is not recognizable JSON or NDJSON."""

    def __init__(
        self,
        message: str = "Input does not appear to be valid JSON",
        code: str = ErrorCode.INVALID_FORMAT,
        remediation: str = "Provide a JSON array, a single JSON object or NDJSON",
        context: dict[str, Any] | None = None,
    ):
        super().__init__(
            code=code,
            message=message,
            remediation=remediation,
            retryable=False,
            context=context,
        )


class ArrayParseError(FormatError):
    """A document starting with '[' failed to parse."""

    def __init__(self, reason: str):
        super().__init__(
            message=f"Failed to parse JSON array: {reason}",
            code=ErrorCode.PARSE_ERROR,
            remediation="Fix the JSON syntax inside the array",
            context={"reason": reason},
        )


class AmbiguousMultiObjectError(FormatError):
    """Back-to-back JSON objects without array wrapping or newlines."""

    def __init__(self) -> None:
        super().__init__(
            message=(
                "Multiple JSON objects detected. Please use one of these formats:\n"
                "- Wrap objects in an array: [{...}, {...}]\n"
                "- Use NDJSON: one minified object per line"
            ),
            code=ErrorCode.AMBIGUOUS_INPUT,
            remediation=SUPPORTED_FORMATS_HINT,
        )


class InvalidInputError(EcsTimelineError):
    """Input is neither text, a record, nor a sequence of records."""

    def __init__(self, input_type: str):
        super().__init__(
            code=ErrorCode.VALIDATION_ERROR,
            message=f"Invalid input type: {input_type}",
            remediation="Pass a JSON/NDJSON string, a mapping or a list of mappings",
            retryable=False,
            context={"type": input_type},
        )


class InputReadError(EcsTimelineError):
    """An input file could not be read."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(
            code=ErrorCode.IO_ERROR,
            message=message,
            remediation="Check file permissions and path accessibility",
            retryable=True,
            context={"path": path} if path else None,
        )


def handle_error(error: EcsTimelineError | Exception, exit_code: int = 1) -> NoReturn:
    """Output an error in structured form and exit.

    Args:
        error: The error to handle
        exit_code: Exit code to use
    """
    from ecstimeline.cli.output import output_error

    if isinstance(error, EcsTimelineError):
        output_error(error.to_structured())
    else:
        structured = StructuredError(
            code=ErrorCode.INTERNAL_ERROR,
            message=str(error),
            remediation="This is an unexpected error. Please report it.",
            retryable=False,
            context={"type": type(error).__name__},
        )
        output_error(structured)

    sys.exit(exit_code)
