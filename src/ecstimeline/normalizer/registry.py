"""Host registry built from a full set of canonical events.

The registry is a value: :func:`build_host_registry` derives it from scratch
for the event list it is given. An address first seen in a later batch can
change how earlier events resolve, so callers rebuild it from the whole
accumulated event list after every ingestion.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from ecstimeline.normalizer.events import CanonicalEvent


@dataclass(frozen=True)
class HostEntry:
    """A logical host and every address observed for it."""

    hostname: str
    ips: tuple[str, ...] = ()
    display_name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "hostname": self.hostname,
            "ips": list(self.ips),
            "display_name": self.display_name or self.hostname,
        }


@dataclass(frozen=True)
class HostRegistry:
    """Deduplicated hosts keyed by lowercased hostname, with an IP index."""

    hosts: Mapping[str, HostEntry] = field(default_factory=dict)
    ip_to_host: Mapping[str, str] = field(default_factory=dict)

    def resolve_ip(self, ip: str) -> str:
        """Resolve an address to its hostname, or return the address unchanged."""
        key = self.ip_to_host.get(ip)
        if key is not None and key in self.hosts:
            return self.hosts[key].hostname
        return ip

    def get_host_list(self) -> list[HostEntry]:
        """All hosts in first-seen order."""
        return list(self.hosts.values())

    def get_host(self, hostname: str) -> HostEntry | None:
        """Look up a host case-insensitively."""
        return self.hosts.get(hostname.lower())

    def __len__(self) -> int:
        return len(self.hosts)


class _HostAccumulator:
    """Mutable scratch state used only while building a registry."""

    def __init__(self) -> None:
        self._names: dict[str, tuple[str, str]] = {}
        self._ips: dict[str, dict[str, None]] = {}

    def add(self, hostname: str, display_name: str | None, ip: str | None) -> None:
        key = hostname.lower()
        if key not in self._names:
            self._names[key] = (hostname, display_name or hostname)
            self._ips[key] = {}
        if ip:
            self._ips[key][ip] = None

    def freeze(self) -> HostRegistry:
        hosts: dict[str, HostEntry] = {}
        ip_to_host: dict[str, str] = {}

        for key, (hostname, display_name) in self._names.items():
            ips = tuple(self._ips[key])
            hosts[key] = HostEntry(hostname=hostname, ips=ips, display_name=display_name)
            for ip in ips:
                ip_to_host[ip] = key

        return HostRegistry(
            hosts=MappingProxyType(hosts),
            ip_to_host=MappingProxyType(ip_to_host),
        )


def build_host_registry(events: Iterable[CanonicalEvent]) -> HostRegistry:
    """Aggregate event host identities into a host registry.

    Every event with a known host contributes its hostname and address.
    Flow endpoints named via source.domain / destination.domain are
    registered too, so peers that only appear in network data get a lane.

    Args:
        events: The complete accumulated list of canonical events

    Returns:
        A new HostRegistry
    """
    acc = _HostAccumulator()

    for event in events:
        if event.host and not event.host.is_unknown:
            acc.add(event.host.hostname, event.host.display_name, event.host.ip)

        conn = event.connection
        if conn is None:
            continue
        if conn.source_hostname:
            acc.add(str(conn.source_hostname), None, conn.source_ip)
        if conn.dest_hostname:
            acc.add(str(conn.dest_hostname), None, conn.dest_ip)

    return acc.freeze()
