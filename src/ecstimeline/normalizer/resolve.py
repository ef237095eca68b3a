"""Event time and host identity resolution."""

from datetime import UTC, datetime, timedelta
from typing import Any

from ecstimeline.normalizer.events import UNKNOWN_IDENTITY, HostIdentity
from ecstimeline.normalizer.fields import (
    HOST_IP_FIELDS,
    HOSTNAME_FIELDS,
    TIMESTAMP_FIELDS,
    get_first_string,
    get_nested_string,
)

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def parse_timestamp(record: dict[str, Any]) -> datetime | None:
    """Parse the event time from the first populated ECS date field.

    Only the first non-empty candidate is parsed. If it is malformed the
    record has no timestamp, even when a later field would have parsed.

    Returns:
        Timezone-aware UTC datetime, or None
    """
    value = get_first_string(record, TIMESTAMP_FIELDS)
    if value is None or value == "":
        return None
    return _to_datetime(value)


def _to_datetime(value: Any) -> datetime | None:
    """Convert an ISO-8601 string or epoch milliseconds to a UTC datetime."""
    if isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        try:
            return EPOCH + timedelta(milliseconds=value)
        except (OverflowError, ValueError):
            return None

    if not isinstance(value, str):
        return None

    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def epoch_millis(timestamp: datetime) -> int:
    """Milliseconds since the Unix epoch."""
    return (timestamp - EPOCH) // timedelta(milliseconds=1)


def extract_host_identifier(record: dict[str, Any]) -> HostIdentity:
    """Determine the host an event belongs to.

    Uses the host.*, agent.* and observer.* names and addresses first.
    Network appliance logs often leave those empty, so the flow's source
    and then destination address are tried before falling back to the
    Unknown sentinel.
    """
    hostname = get_first_string(record, HOSTNAME_FIELDS)
    ip = get_first_string(record, HOST_IP_FIELDS)

    if hostname or ip:
        name = str(hostname or ip)
        return HostIdentity(
            hostname=name,
            ip=str(ip) if ip else None,
            display_name=name,
        )

    for path in ("source.ip", "destination.ip"):
        address = get_nested_string(record, path)
        if address:
            address = str(address)
            return HostIdentity(hostname=address, ip=address, display_name=address)

    return UNKNOWN_IDENTITY
