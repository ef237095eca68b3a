"""ECS timeline builder.

Normalizes Elastic Common Schema telemetry into canonical timeline events,
groups them by host and identifies host-to-host network connections.
"""

__version__ = "0.3.0"

from ecstimeline.normalizer import (  # noqa: E402
    CanonicalEvent,
    ConnectionEdge,
    ConnectionInfo,
    HostIdentity,
    HostRegistry,
    Timeline,
    build_host_registry,
    build_timeline,
    identify_connections,
    parse_events,
)

__all__ = [
    "__version__",
    "CanonicalEvent",
    "ConnectionEdge",
    "ConnectionInfo",
    "HostIdentity",
    "HostRegistry",
    "Timeline",
    "build_host_registry",
    "build_timeline",
    "identify_connections",
    "parse_events",
]
