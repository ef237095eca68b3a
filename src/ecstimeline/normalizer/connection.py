"""Per-record network flow extraction."""

from typing import Any

from ecstimeline.normalizer.events import ConnectionInfo
from ecstimeline.normalizer.fields import (
    PROTOCOL_FIELDS,
    get_first_string,
    get_nested_string,
    get_nested_value,
)

IPV4_LOOPBACK = "127.0.0.1"
IPV6_LOOPBACK_PREFIX = "::1"


def _is_loopback(address: str) -> bool:
    return address == IPV4_LOOPBACK or address.startswith(IPV6_LOOPBACK_PREFIX)


def extract_connection_info(record: dict[str, Any]) -> ConnectionInfo | None:
    """Extract the source/destination flow from ECS source.*, destination.*
    and network.* fields.

    Returns:
        ConnectionInfo, or None when either address is missing, both are
        equal, or either is a loopback address
    """
    source_ip = get_nested_string(record, "source.ip")
    dest_ip = get_nested_string(record, "destination.ip")

    if not source_ip or not dest_ip:
        return None

    source_ip = str(source_ip)
    dest_ip = str(dest_ip)

    if source_ip == dest_ip or _is_loopback(source_ip) or _is_loopback(dest_ip):
        return None

    return ConnectionInfo(
        source_ip=source_ip,
        source_port=get_nested_string(record, "source.port"),
        source_hostname=get_nested_string(record, "source.domain"),
        source_bytes=get_nested_value(record, "source.bytes"),
        source_packets=get_nested_value(record, "source.packets"),
        dest_ip=dest_ip,
        dest_port=get_nested_string(record, "destination.port"),
        dest_hostname=get_nested_string(record, "destination.domain"),
        dest_bytes=get_nested_value(record, "destination.bytes"),
        dest_packets=get_nested_value(record, "destination.packets"),
        protocol=get_first_string(record, PROTOCOL_FIELDS),
        direction=get_nested_string(record, "network.direction"),
        community_id=get_nested_string(record, "network.community_id"),
        network_type=get_nested_string(record, "network.type"),
        network_bytes=get_nested_value(record, "network.bytes"),
    )
