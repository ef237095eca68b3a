"""Nested field access for schema-tolerant ECS records.

ECS documents exported from Elasticsearch may carry any field either as a
scalar or as an array (``host.ip: ["10.0.0.1", "10.0.0.2"]``). Every
extractor reads fields through these helpers, and every multi-field
fallback is declared below as an ordered tuple of dotted paths evaluated by
:func:`get_first_value`. The tuple order is the tie-break policy.
"""

from collections.abc import Mapping, Sequence
from typing import Any

FieldChain = tuple[str, ...]

TIMESTAMP_FIELDS: FieldChain = (
    "@timestamp",
    "event.created",
    "event.ingested",
    "event.start",
)

HOSTNAME_FIELDS: FieldChain = (
    "host.hostname",
    "host.name",
    "agent.name",
    "observer.hostname",
    "observer.name",
)

HOST_IP_FIELDS: FieldChain = (
    "host.ip",
    "observer.ip",
)

CATEGORY_FIELDS: FieldChain = (
    "event.category",
    "event.type",
)

ACTION_FIELDS: FieldChain = (
    "event.action",
    "event.type",
)

PROTOCOL_FIELDS: FieldChain = (
    "network.transport",
    "network.protocol",
)

ID_HOST_FIELDS: FieldChain = (
    "host.hostname",
    "host.name",
    "host.ip",
)


def get_nested_value(record: Any, path: str, default: Any = None) -> Any:
    """Get a value using dot notation (e.g., 'host.os.name').

    Falsy values such as ``0``, ``False`` and ``""`` are returned as-is;
    only a missing key or ``None`` falls back to ``default``.
    """
    if not record or not path:
        return default

    current = record
    for key in path.split("."):
        if not isinstance(current, Mapping):
            return default
        current = current.get(key)
        if current is None:
            return default
    return current


def normalize_value(value: Any) -> Any:
    """Return the first element of a list value, or the value itself."""
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        return value[0] if len(value) > 0 else None
    return value


def get_nested_string(record: Any, path: str, default: Any = None) -> Any:
    """Get a nested value, collapsing array fields to their first element."""
    return normalize_value(get_nested_value(record, path, default))


def get_first_value(record: Any, paths: FieldChain, default: Any = None) -> Any:
    """Return the value of the first path that is present and non-empty.

    Args:
        record: Record to read from
        paths: Dotted paths in priority order
        default: Returned when no path yields a value

    Returns:
        The raw (possibly array) value of the winning path
    """
    for path in paths:
        value = get_nested_value(record, path)
        if value is not None and value != "":
            return value
    return default


def get_first_string(record: Any, paths: FieldChain, default: Any = None) -> Any:
    """Like :func:`get_first_value`, collapsing arrays to their first element."""
    return normalize_value(get_first_value(record, paths, default))
