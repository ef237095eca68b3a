"""Shared fixtures for the ECS timeline tests."""

import pytest

TS = "2024-01-15T10:30:00.000Z"


@pytest.fixture
def firewall_record() -> dict:
    """Network appliance log with no host.* fields."""
    return {
        "@timestamp": TS,
        "event": {"category": ["network"], "action": "flow_allowed"},
        "source": {"ip": "192.168.1.100", "port": 54321},
        "destination": {"ip": "10.0.0.50", "port": 443},
        "network": {"transport": "tcp", "direction": "outbound"},
    }


@pytest.fixture
def client_server_records() -> list[dict]:
    """A client host with a flow to a server host seen in a second event."""
    return [
        {
            "@timestamp": "2024-01-15T10:30:00.000Z",
            "host": {"hostname": "client", "ip": "192.168.1.100"},
            "source": {"ip": "192.168.1.100", "port": 54321},
            "destination": {"ip": "192.168.1.200", "port": 443},
            "network": {"transport": "tcp"},
        },
        {
            "@timestamp": "2024-01-15T10:31:00.000Z",
            "host": {"hostname": "server", "ip": "192.168.1.200"},
            "event": {"category": ["process"], "action": "start"},
            "process": {"name": "nginx", "pid": 812},
        },
    ]


@pytest.fixture
def es_export() -> list[dict]:
    """Elasticsearch search hits."""
    return [
        {
            "_id": "abc123",
            "_index": "logs-endpoint",
            "_source": {
                "@timestamp": TS,
                "host": {"hostname": "es-host"},
                "event": {"id": "inner-id", "category": ["authentication"], "action": "logon"},
                "user": {"name": "alice"},
            },
        },
    ]
