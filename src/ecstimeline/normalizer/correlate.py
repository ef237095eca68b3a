"""Cross-host connection identification."""

from collections.abc import Iterable

from ecstimeline.normalizer.events import CanonicalEvent, ConnectionEdge
from ecstimeline.normalizer.registry import HostRegistry


def identify_connections(
    events: Iterable[CanonicalEvent],
    registry: HostRegistry,
) -> list[ConnectionEdge]:
    """Emit one directed edge per event whose flow links two different hosts.

    Both flow addresses are resolved through the registry. Flows whose ends
    resolve to the same hostname (case-insensitive) are intra-host and
    dropped. Edges keep event order and are not merged.
    """
    edges = []

    for event in events:
        conn = event.connection
        if conn is None:
            continue

        source_host = registry.resolve_ip(conn.source_ip)
        dest_host = registry.resolve_ip(conn.dest_ip)

        if source_host.lower() == dest_host.lower():
            continue

        edges.append(ConnectionEdge(
            event_id=event.id,
            timestamp=event.timestamp,
            source_host=source_host,
            source_ip=conn.source_ip,
            source_port=conn.source_port,
            dest_host=dest_host,
            dest_ip=conn.dest_ip,
            dest_port=conn.dest_port,
            protocol=conn.protocol,
            direction=conn.direction,
            community_id=conn.community_id,
        ))

    return edges
