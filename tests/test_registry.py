"""Tests for the host registry and connection identification."""

import pytest

from ecstimeline.normalizer.correlate import identify_connections
from ecstimeline.normalizer.pipeline import parse_events
from ecstimeline.normalizer.registry import build_host_registry

TS = "2024-01-15T10:30:00.000Z"


class TestBuildHostRegistry:
    def test_collapses_duplicate_hosts(self):
        events = parse_events([
            {"@timestamp": TS, "host": {"hostname": "server-01", "ip": "192.168.1.10"}},
            {"@timestamp": TS, "host": {"hostname": "server-01", "ip": "192.168.1.10"}},
            {"@timestamp": TS, "host": {"hostname": "server-02", "ip": "192.168.1.20"}},
        ])

        hosts = build_host_registry(events).get_host_list()

        assert [h.hostname for h in hosts] == ["server-01", "server-02"]
        assert hosts[0].ips == ("192.168.1.10",)

    def test_case_insensitive_key(self):
        events = parse_events([
            {"@timestamp": TS, "host": {"hostname": "DC01", "ip": "10.0.0.1"}},
            {"@timestamp": TS, "host": {"hostname": "dc01", "ip": "10.0.0.2"}},
        ])

        registry = build_host_registry(events)

        assert len(registry) == 1
        entry = registry.get_host("Dc01")
        assert entry.hostname == "DC01"
        assert entry.ips == ("10.0.0.1", "10.0.0.2")

    def test_resolve_ip(self):
        events = parse_events([
            {"@timestamp": TS, "host": {"hostname": "web-server", "ip": "10.0.0.100"}},
        ])

        registry = build_host_registry(events)

        assert registry.resolve_ip("10.0.0.100") == "web-server"
        assert registry.resolve_ip("10.0.0.200") == "10.0.0.200"

    def test_unknown_hosts_excluded(self):
        events = parse_events([{"@timestamp": TS, "process": {"name": "bash"}}])
        assert build_host_registry(events).get_host_list() == []

    def test_flow_domains_registered(self):
        events = parse_events([{
            "@timestamp": TS,
            "observer": {"name": "fw01"},
            "source": {"ip": "10.0.0.1", "domain": "laptop.corp"},
            "destination": {"ip": "10.0.0.9", "domain": "db.corp"},
        }])

        registry = build_host_registry(events)

        assert [h.hostname for h in registry.get_host_list()] == ["fw01", "laptop.corp", "db.corp"]
        assert registry.resolve_ip("10.0.0.9") == "db.corp"
        assert registry.get_host("db.corp").display_name == "db.corp"

    def test_registry_is_read_only(self):
        registry = build_host_registry(parse_events([
            {"@timestamp": TS, "host": {"hostname": "h", "ip": "10.0.0.1"}},
        ]))
        with pytest.raises(TypeError):
            registry.hosts["x"] = None


class TestIdentifyConnections:
    def test_cross_host_connection(self, client_server_records):
        events = parse_events(client_server_records)
        registry = build_host_registry(events)

        connections = identify_connections(events, registry)

        assert len(connections) == 1
        edge = connections[0]
        assert edge.source_host == "client"
        assert edge.dest_host == "server"
        assert edge.event_id == events[0].id
        assert edge.timestamp == events[0].timestamp
        assert edge.source_ip == "192.168.1.100"
        assert edge.dest_port == 443
        assert edge.protocol == "tcp"

    def test_unresolved_address_kept_as_label(self, firewall_record):
        events = parse_events([firewall_record])
        connections = identify_connections(events, build_host_registry(events))

        assert len(connections) == 1
        assert connections[0].source_host == "192.168.1.100"
        assert connections[0].dest_host == "10.0.0.50"

    def test_intra_host_alias_dropped(self):
        events = parse_events([{
            "@timestamp": TS,
            "host": {"hostname": "web", "ip": "10.0.0.1"},
            "source": {"ip": "10.0.0.1"},
            "destination": {"ip": "10.0.0.9", "domain": "WEB"},
        }])

        assert identify_connections(events, build_host_registry(events)) == []

    def test_repeated_flows_not_merged(self, client_server_records):
        flow = dict(client_server_records[0], **{"@timestamp": "2024-01-15T10:35:00Z"})
        events = parse_events([*client_server_records, flow])

        connections = identify_connections(events, build_host_registry(events))

        assert [c.event_id for c in connections] == [events[0].id, events[2].id]
