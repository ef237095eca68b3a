"""Ingestion pipeline: input shape detection and per-record normalization.

Accepts a list of raw ECS records, a single record, or text holding a JSON
array, a single (possibly pretty-printed) JSON object, or NDJSON. Records
exported from Elasticsearch (``{"_id": ..., "_source": {...}}``) are
unwrapped, keeping ``_id`` as the event identifier.
"""

import json
import re
from collections.abc import Iterable, Iterator, Mapping
from datetime import datetime
from typing import Any

from ecstimeline.core import logging as log
from ecstimeline.core.errors import (
    AmbiguousMultiObjectError,
    ArrayParseError,
    FormatError,
    InvalidInputError,
)
from ecstimeline.models.error import ErrorCode
from ecstimeline.normalizer.classify import extract_category, extract_details, extract_summary
from ecstimeline.normalizer.connection import extract_connection_info
from ecstimeline.normalizer.events import CanonicalEvent
from ecstimeline.normalizer.fields import ID_HOST_FIELDS, get_first_string, get_nested_string
from ecstimeline.normalizer.resolve import epoch_millis, extract_host_identifier, parse_timestamp

ENVELOPE_ID_KEY = "_id"
ENVELOPE_SOURCE_KEY = "_source"

_BACK_TO_BACK_OBJECTS = re.compile(r"}\s*{")


def load_records(data: Any) -> list[Any]:
    """Turn caller input into a list of raw records.

    Args:
        data: JSON/NDJSON text (str or bytes), a mapping, or a sequence of mappings

    Returns:
        List of raw records in input order

    Raises:
        FormatError: Text is not JSON shaped or cannot be parsed
        InvalidInputError: Unsupported input type
    """
    if isinstance(data, bytes):
        data = decode_text(data)

    if isinstance(data, str):
        return _load_text(data)
    if isinstance(data, Mapping):
        return [data]
    if isinstance(data, (list, tuple)):
        return list(data)

    raise InvalidInputError(type(data).__name__)


def decode_text(data: bytes) -> str:
    """Decode UTF-8 input, dropping a leading byte order mark.

    Raises:
        FormatError: Input is not valid UTF-8
    """
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise FormatError(
            message=f"Input is not valid UTF-8: {e.reason} at byte {e.start}",
            remediation="Re-export the events as UTF-8 encoded JSON or NDJSON",
            context={"reason": e.reason, "position": e.start},
        ) from e


def _load_text(text: str) -> list[Any]:
    trimmed = text.strip()

    if trimmed.startswith("["):
        try:
            return json.loads(trimmed)
        except json.JSONDecodeError as e:
            raise ArrayParseError(str(e)) from e

    if not trimmed.startswith("{"):
        raise FormatError()

    try:
        return [json.loads(trimmed)]
    except json.JSONDecodeError as document_error:
        records = _load_ndjson(trimmed)
        if records:
            return records
        if _BACK_TO_BACK_OBJECTS.search(trimmed):
            raise AmbiguousMultiObjectError() from document_error
        raise FormatError(
            message=f"Failed to parse JSON: {document_error}",
            code=ErrorCode.PARSE_ERROR,
            remediation="Fix the JSON syntax or provide one object per line",
        ) from document_error


def _load_ndjson(text: str) -> list[dict[str, Any]]:
    """Parse one JSON object per non-blank line, skipping bad lines."""
    records = []
    for line_number, line in enumerate(text.split("\n"), start=1):
        if not line.strip():
            continue
        try:
            value = json.loads(line)
        except json.JSONDecodeError as e:
            log.warning(f"Failed to parse line {line_number}: {e}", line=line_number)
            continue
        if not isinstance(value, dict):
            log.warning(f"Line {line_number} is not a JSON object, skipping", line=line_number)
            continue
        records.append(value)
    return records


def unwrap_envelope(raw: Mapping[str, Any]) -> tuple[str | None, dict[str, Any]]:
    """Split an Elasticsearch hit into its outer ``_id`` and inner payload.

    ``_id`` is honoured without ``_source`` too, which is the shape peers
    exchange (``{"_id": ..., **payload}``).
    """
    outer_id = raw.get(ENVELOPE_ID_KEY)
    source = raw.get(ENVELOPE_SOURCE_KEY)
    payload = source if isinstance(source, Mapping) and source else raw
    return (str(outer_id) if outer_id not in (None, "") else None), dict(payload)


def generate_event_id(record: dict[str, Any], timestamp: datetime, index: int) -> str:
    """Return event.id, or an id derived from time, host and batch position.

    The derived form is deterministic, so re-parsing the same batch yields
    the same ids.
    """
    event_id = get_nested_string(record, "event.id")
    if event_id not in (None, ""):
        return str(event_id)

    host = get_first_string(record, ID_HOST_FIELDS) or "unknown"
    return f"{epoch_millis(timestamp)}-{host}-{index}"


def parse_event(raw: Mapping[str, Any], index: int) -> CanonicalEvent | None:
    """Normalize a single raw record.

    Args:
        raw: Raw record, optionally wrapped in an Elasticsearch envelope
        index: Position of the record in its input batch

    Returns:
        CanonicalEvent, or None if the record has no valid timestamp
    """
    outer_id, record = unwrap_envelope(raw)

    timestamp = parse_timestamp(record)
    if timestamp is None:
        log.debug(f"Event {index} has no valid timestamp, skipping", index=index)
        return None

    return CanonicalEvent(
        id=outer_id or generate_event_id(record, timestamp, index),
        timestamp=timestamp,
        host=extract_host_identifier(record),
        category=extract_category(record),
        connection=extract_connection_info(record),
        summary=extract_summary(record),
        details=extract_details(record),
        raw=record,
    )


def iter_events(records: Iterable[Any]) -> Iterator[CanonicalEvent]:
    """Normalize a stream of raw records, skipping ones that can't be normalized."""
    for index, raw in enumerate(records):
        if not isinstance(raw, Mapping):
            log.warning(f"Record {index} is not a JSON object, skipping", index=index)
            continue
        event = parse_event(raw, index)
        if event is not None:
            yield event


def parse_events(data: Any) -> list[CanonicalEvent]:
    """Parse raw ECS input into canonical events.

    Args:
        data: JSON/NDJSON text, a single record, or a list of records

    Returns:
        Canonical events in input order; records without a usable
        timestamp are omitted
    """
    return list(iter_events(load_records(data)))
