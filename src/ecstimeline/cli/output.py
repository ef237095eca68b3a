"""Output formatting for the CLI.

Implements JSON, JSONL, and human-readable output modes.
stdout contains only machine-readable results.
stderr carries logs and diagnostics.
"""

import json
import sys
from collections.abc import Iterator
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel

OutputFormat = Literal["json", "jsonl", "human"]

_output_format: OutputFormat = "json"


def set_output_format(format: OutputFormat) -> None:
    """Set the global output format."""
    global _output_format
    _output_format = format


class JSONEncoder(json.JSONEncoder):
    """JSON encoder aware of datetimes, pydantic models and to_dict() objects."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, datetime):
            return obj.isoformat()
        if isinstance(obj, BaseModel):
            return obj.model_dump(mode="json")
        if hasattr(obj, "to_dict"):
            return obj.to_dict()
        if isinstance(obj, (set, frozenset, tuple)):
            return list(obj)
        return super().default(obj)


def _plain(data: Any) -> Any:
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json")
    if hasattr(data, "to_dict"):
        return data.to_dict()
    return data


def output_json(data: Any, file: Any = None) -> None:
    """Output data as JSON to stdout.

    Args:
        data: Data to output (dict, list, model or object with to_dict())
        file: Output file (defaults to stdout)
    """
    if file is None:
        file = sys.stdout

    json.dump(_plain(data), file, cls=JSONEncoder, ensure_ascii=False)
    file.write("\n")
    file.flush()


def output_jsonl(records: Iterator[Any], file: Any = None) -> None:
    """Output records as JSONL (one JSON object per line) to stdout."""
    if file is None:
        file = sys.stdout

    for record in records:
        json.dump(_plain(record), file, cls=JSONEncoder, ensure_ascii=False)
        file.write("\n")
    file.flush()


def output_human(data: Any, title: str | None = None, file: Any = None) -> None:
    """Output data in human-readable format to stdout."""
    if file is None:
        file = sys.stdout

    if title:
        file.write(f"\n{title}\n")
        file.write("=" * len(title) + "\n\n")

    data = _plain(data)

    if isinstance(data, dict):
        _format_dict(data, file)
    elif isinstance(data, list):
        _format_list(data, file)
    else:
        file.write(str(data) + "\n")

    file.flush()


def output_human_table(
    records: list[dict[str, Any]],
    columns: list[str] | None = None,
    title: str | None = None,
    file: Any = None,
    max_width: int = 50,
) -> None:
    """Output records as a human-readable table.

    Args:
        records: List of record dictionaries
        columns: Columns to display (auto-detect if None)
        title: Optional title for the table
        file: Output file (defaults to stdout)
        max_width: Maximum column width
    """
    if file is None:
        file = sys.stdout

    if not records:
        file.write("No records.\n")
        return

    if title:
        file.write(f"\n{title}\n")
        file.write("=" * len(title) + "\n\n")

    if columns is None:
        columns = _auto_detect_columns(records)

    widths = {col: len(col) for col in columns}
    for record in records[:100]:
        for col in columns:
            value = _get_nested_value(record, col)
            widths[col] = min(max_width, max(widths[col], len(_cell(value))))

    header = " | ".join(col.ljust(widths[col])[:widths[col]] for col in columns)
    file.write(header + "\n")
    file.write("-" * len(header) + "\n")

    for record in records:
        row = []
        for col in columns:
            value_str = _cell(_get_nested_value(record, col))
            if len(value_str) > widths[col]:
                value_str = value_str[: widths[col] - 3] + "..."
            row.append(value_str.ljust(widths[col]))
        file.write(" | ".join(row) + "\n")

    file.write(f"\nTotal: {len(records)} records\n")
    file.flush()


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    return str(value)


def _auto_detect_columns(records: list[dict[str, Any]]) -> list[str]:
    """Pick display columns based on record shape."""
    first = records[0]

    if "summary" in first and "host" in first:
        return ["timestamp", "host.hostname", "category", "summary"]

    if "source_host" in first and "dest_host" in first:
        return ["timestamp", "source_host", "dest_host", "dest_port", "protocol"]

    if "ips" in first:
        return ["hostname", "ips"]

    return list(first.keys())[:6]


def _get_nested_value(record: dict[str, Any], key: str) -> Any:
    """Get a nested value using dot notation (e.g., 'host.hostname')."""
    value: Any = record
    for part in key.split("."):
        if isinstance(value, dict) and part in value:
            value = value[part]
        else:
            return None
    return value


def _format_dict(data: dict[str, Any], file: Any, indent: int = 0) -> None:
    prefix = "  " * indent
    for key, value in data.items():
        if isinstance(value, dict):
            file.write(f"{prefix}{key}:\n")
            _format_dict(value, file, indent + 1)
        elif isinstance(value, list):
            file.write(f"{prefix}{key}:\n")
            _format_list(value, file, indent + 1)
        else:
            file.write(f"{prefix}{key}: {value}\n")


def _format_list(data: list[Any], file: Any, indent: int = 0) -> None:
    prefix = "  " * indent
    for i, item in enumerate(data):
        if isinstance(item, dict):
            file.write(f"{prefix}[{i}]:\n")
            _format_dict(item, file, indent + 1)
        else:
            file.write(f"{prefix}- {item}\n")


def output(data: Any, format: OutputFormat | None = None, **kwargs: Any) -> None:
    """Output data in the specified format (uses the global format if None)."""
    if format is None:
        format = _output_format

    if format == "jsonl" and isinstance(data, list):
        output_jsonl(iter(data), **kwargs)
    elif format == "human":
        output_human(data, **kwargs)
    else:
        output_json(data, **kwargs)


def output_error(error: Any, file: Any = None) -> None:
    """Output an error to stdout in the current format.

    Errors are output to stdout (not stderr) for programmatic handling.
    """
    output(error, file=file)


class OutputFormatter:
    """Encapsulates output formatting for commands."""

    def __init__(self, format: OutputFormat = "json"):
        self.format = format

    def output(self, data: Any, title: str | None = None) -> None:
        """Output data in the configured format."""
        if self.format == "human":
            output_human(data, title=title)
        else:
            output(data, format=self.format)

    def error(self, error: Any) -> None:
        """Output error in the configured format."""
        output_error(error)

    def stream(self, records: list[Any], title: str | None = None) -> None:
        """Output a record list as JSONL, a JSON array or a table."""
        if self.format == "human":
            output_human_table([_plain(r) for r in records], title=title)
        elif self.format == "jsonl":
            output_jsonl(iter(records))
        else:
            output_json([_plain(r) for r in records])

    def is_human(self) -> bool:
        """Check if output format is human-readable."""
        return self.format == "human"
