"""Normalization and correlation engine for ECS telemetry.

Provides:
- parse_events: raw ECS input -> CanonicalEvents
- build_host_registry: CanonicalEvents -> HostRegistry
- identify_connections: CanonicalEvents + HostRegistry -> ConnectionEdges
- Timeline: accumulated snapshot of all three
"""

from ecstimeline.normalizer.correlate import identify_connections
from ecstimeline.normalizer.events import (
    CanonicalEvent,
    ConnectionEdge,
    ConnectionInfo,
    HostIdentity,
)
from ecstimeline.normalizer.pipeline import parse_event, parse_events
from ecstimeline.normalizer.registry import HostEntry, HostRegistry, build_host_registry
from ecstimeline.normalizer.timeline import (
    Timeline,
    build_timeline,
    export_raw,
    filter_events,
    merge_events,
    timeline_stats,
    to_wire,
)

__all__ = [
    "CanonicalEvent",
    "ConnectionEdge",
    "ConnectionInfo",
    "HostEntry",
    "HostIdentity",
    "HostRegistry",
    "Timeline",
    "build_host_registry",
    "build_timeline",
    "export_raw",
    "filter_events",
    "identify_connections",
    "merge_events",
    "parse_event",
    "parse_events",
    "timeline_stats",
    "to_wire",
]
