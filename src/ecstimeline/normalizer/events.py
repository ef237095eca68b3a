"""Canonical event model produced by the normalizer."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

EventCategory = Literal["network", "file", "process", "authentication", "registry", "other"]

UNKNOWN_HOST = "Unknown"


@dataclass(frozen=True)
class HostIdentity:
    """Host an event is attributed to (its swim lane)."""

    hostname: str
    ip: str | None = None
    display_name: str | None = None

    @property
    def is_unknown(self) -> bool:
        return self.hostname == UNKNOWN_HOST

    def to_dict(self) -> dict[str, Any]:
        return {
            "hostname": self.hostname,
            "ip": self.ip,
            "display_name": self.display_name or self.hostname,
        }


UNKNOWN_IDENTITY = HostIdentity(hostname=UNKNOWN_HOST, ip=None, display_name=UNKNOWN_HOST)


@dataclass(frozen=True)
class ConnectionInfo:
    """Network flow carried by a single event."""

    source_ip: str
    dest_ip: str
    source_port: Any = None
    source_hostname: str | None = None
    source_bytes: Any = None
    source_packets: Any = None
    dest_port: Any = None
    dest_hostname: str | None = None
    dest_bytes: Any = None
    dest_packets: Any = None
    protocol: str | None = None
    direction: str | None = None
    community_id: str | None = None
    network_type: str | None = None
    network_bytes: Any = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON output, omitting empty fields."""
        result = {"source_ip": self.source_ip, "dest_ip": self.dest_ip}
        for name in (
            "source_port", "source_hostname", "source_bytes", "source_packets",
            "dest_port", "dest_hostname", "dest_bytes", "dest_packets",
            "protocol", "direction", "community_id", "network_type", "network_bytes",
        ):
            value = getattr(self, name)
            if value is not None:
                result[name] = value
        return result


@dataclass
class CanonicalEvent:
    """A normalized timeline event derived from one raw ECS record."""

    id: str
    timestamp: datetime
    host: HostIdentity
    category: EventCategory
    summary: str
    connection: ConnectionInfo | None = None
    details: dict[str, dict[str, Any]] = field(default_factory=dict)
    raw: dict[str, Any] = field(default_factory=dict)

    def to_dict(self, include_raw: bool = False) -> dict[str, Any]:
        """Convert to dictionary for JSON output."""
        result = {
            "id": self.id,
            "timestamp": self.timestamp.isoformat(),
            "host": self.host.to_dict(),
            "category": self.category,
            "summary": self.summary,
        }
        if self.connection:
            result["connection"] = self.connection.to_dict()
        if self.details:
            result["details"] = self.details
        if include_raw:
            result["raw"] = self.raw
        return result


@dataclass(frozen=True)
class ConnectionEdge:
    """Directed host-to-host connection resolved through the host registry."""

    event_id: str
    timestamp: datetime
    source_host: str
    dest_host: str
    source_ip: str
    dest_ip: str
    source_port: Any = None
    dest_port: Any = None
    protocol: str | None = None
    direction: str | None = None
    community_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result = {
            "event_id": self.event_id,
            "timestamp": self.timestamp.isoformat(),
            "source_host": self.source_host,
            "source_ip": self.source_ip,
            "dest_host": self.dest_host,
            "dest_ip": self.dest_ip,
        }
        if self.source_port is not None:
            result["source_port"] = self.source_port
        if self.dest_port is not None:
            result["dest_port"] = self.dest_port
        if self.protocol:
            result["protocol"] = self.protocol
        if self.direction:
            result["direction"] = self.direction
        if self.community_id:
            result["community_id"] = self.community_id
        return result
