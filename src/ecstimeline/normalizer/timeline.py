"""Timeline assembly for callers that accumulate events over time.

The engine itself keeps no state. A :class:`Timeline` is an immutable
snapshot of the accumulated events together with the host registry and
connection edges derived from all of them; ingesting more input returns a
new snapshot.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from ecstimeline.normalizer.correlate import identify_connections
from ecstimeline.normalizer.events import CanonicalEvent, ConnectionEdge, EventCategory
from ecstimeline.normalizer.pipeline import ENVELOPE_ID_KEY, parse_events
from ecstimeline.normalizer.registry import HostRegistry, build_host_registry

CATEGORIES: tuple[EventCategory, ...] = (
    "network",
    "file",
    "process",
    "authentication",
    "registry",
    "other",
)


@dataclass(frozen=True)
class Timeline:
    """Accumulated events plus the registry and connections derived from them."""

    events: tuple[CanonicalEvent, ...] = ()
    registry: HostRegistry = field(default_factory=HostRegistry)
    connections: tuple[ConnectionEdge, ...] = ()

    def ingest(self, data: Any) -> tuple["Timeline", list[CanonicalEvent]]:
        """Parse new input and merge it into a new timeline.

        Args:
            data: Anything accepted by :func:`parse_events`

        Returns:
            Tuple of (new timeline, events that were not already present)
        """
        merged, added = merge_events(self.events, parse_events(data))
        if not added:
            return self, added
        return build_timeline(merged), added

    def to_dict(self, include_raw: bool = False) -> dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "events": [e.to_dict(include_raw=include_raw) for e in self.events],
            "hosts": [h.to_dict() for h in self.registry.get_host_list()],
            "connections": [c.to_dict() for c in self.connections],
            "stats": timeline_stats(self),
        }


def build_timeline(events: Iterable[CanonicalEvent]) -> Timeline:
    """Derive registry and connections from the complete event list."""
    events = tuple(events)
    registry = build_host_registry(events)
    return Timeline(
        events=events,
        registry=registry,
        connections=tuple(identify_connections(events, registry)),
    )


def merge_events(
    existing: Sequence[CanonicalEvent],
    incoming: Iterable[CanonicalEvent],
) -> tuple[list[CanonicalEvent], list[CanonicalEvent]]:
    """Append incoming events whose id is not already present.

    Returns:
        Tuple of (merged list, newly added events)
    """
    seen = {e.id for e in existing}
    added = []
    for event in incoming:
        if event.id in seen:
            continue
        seen.add(event.id)
        added.append(event)
    return [*existing, *added], added


def to_wire(events: Iterable[CanonicalEvent]) -> list[dict[str, Any]]:
    """Raw payloads tagged with their event id, the form sent to peers.

    Peers re-derive every normalized field from the payload; the ``_id``
    key keeps ids stable across participants.
    """
    return [{**e.raw, ENVELOPE_ID_KEY: e.id} for e in events]


def export_raw(events: Iterable[CanonicalEvent]) -> list[dict[str, Any]]:
    """Raw payloads as originally ingested."""
    return [e.raw for e in events]


def filter_events(
    events: Iterable[CanonicalEvent],
    categories: Iterable[str],
) -> list[CanonicalEvent]:
    """Keep only events in the given categories."""
    visible = set(categories)
    return [e for e in events if e.category in visible]


def format_duration(seconds: float) -> str:
    """Format duration in human-readable form."""
    seconds = int(seconds)
    minutes, secs = divmod(seconds, 60)
    hours, minutes = divmod(minutes, 60)
    days, hours = divmod(hours, 24)

    if days > 0:
        return f"{days}d {hours}h"
    elif hours > 0:
        return f"{hours}h {minutes}m"
    elif minutes > 0:
        return f"{minutes}m {secs}s"
    return f"{secs}s"


def timeline_stats(timeline: Timeline) -> dict[str, Any]:
    """Event, host and connection counts plus the covered time span."""
    stats: dict[str, Any] = {
        "events": len(timeline.events),
        "hosts": len(timeline.registry.get_host_list()),
        "connections": len(timeline.connections),
        "categories": {c: 0 for c in CATEGORIES},
        "timespan": "-",
    }
    for event in timeline.events:
        stats["categories"][event.category] += 1

    if timeline.events:
        first = min(e.timestamp for e in timeline.events)
        last = max(e.timestamp for e in timeline.events)
        stats["first_seen"] = first.isoformat()
        stats["last_seen"] = last.isoformat()
        if len(timeline.events) > 1:
            stats["timespan"] = format_duration((last - first).total_seconds())

    return stats
