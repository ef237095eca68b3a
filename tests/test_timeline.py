"""Tests for timeline accumulation, wire form and stats."""

import pytest

from ecstimeline.normalizer.pipeline import parse_events
from ecstimeline.normalizer.timeline import (
    Timeline,
    build_timeline,
    export_raw,
    filter_events,
    format_duration,
    merge_events,
    timeline_stats,
    to_wire,
)

TS = "2024-01-15T10:30:00.000Z"


class TestMergeEvents:
    def test_deduplicates_by_id(self, es_export):
        existing = parse_events(es_export)
        merged, added = merge_events(existing, parse_events(es_export))

        assert added == []
        assert [e.id for e in merged] == ["abc123"]

    def test_appends_new_events(self, client_server_records):
        first = parse_events(client_server_records[:1])
        second = parse_events([{"_id": "x", **client_server_records[1]}])

        merged, added = merge_events(first, second)

        assert [e.id for e in merged] == [first[0].id, "x"]
        assert added == second


class TestTimeline:
    def test_later_batch_changes_resolution(self, client_server_records):
        timeline, added = Timeline().ingest(client_server_records[:1])
        assert len(added) == 1
        assert timeline.connections[0].dest_host == "192.168.1.200"

        server = {"_id": "server-evt", **client_server_records[1]}
        timeline, added = timeline.ingest([server])

        assert len(added) == 1
        assert len(timeline.events) == 2
        assert len(timeline.connections) == 1
        assert timeline.connections[0].dest_host == "server"

    def test_duplicate_ingest_returns_same_snapshot(self, es_export):
        timeline, _ = Timeline().ingest(es_export)
        again, added = timeline.ingest(es_export)

        assert added == []
        assert again is timeline

    def test_to_dict(self, client_server_records):
        timeline = build_timeline(parse_events(client_server_records))
        result = timeline.to_dict()

        assert len(result["events"]) == 2
        assert [h["hostname"] for h in result["hosts"]] == ["client", "server"]
        assert result["connections"][0]["source_host"] == "client"
        assert "raw" not in result["events"][0]
        assert "raw" in timeline.to_dict(include_raw=True)["events"][0]


class TestWireAndExport:
    def test_wire_round_trip_keeps_ids(self, client_server_records):
        events = parse_events(client_server_records)
        wire = to_wire(events)

        assert all("_id" in payload for payload in wire)
        assert [e.id for e in parse_events(wire)] == [e.id for e in events]

    def test_wire_reparse_recomputes_fields(self, es_export):
        events = parse_events(es_export)
        peer_events = parse_events(to_wire(events))

        assert peer_events[0].category == events[0].category
        assert peer_events[0].summary == events[0].summary

    def test_wire_id_overrides_leftover_envelope_id(self):
        events = parse_events([{"x": 1}, {"_id": "", "@timestamp": TS, "host": {"name": "h"}}])
        wire = to_wire(events)

        assert events[0].id == "1705314600000-h-1"
        assert wire[0]["_id"] == events[0].id
        assert [e.id for e in parse_events(wire)] == [events[0].id]

    def test_export_raw(self, es_export):
        raw = export_raw(parse_events(es_export))
        assert raw == [es_export[0]["_source"]]


class TestStatsAndFilters:
    def test_stats(self, client_server_records):
        stats = timeline_stats(build_timeline(parse_events(client_server_records)))

        assert stats["events"] == 2
        assert stats["hosts"] == 2
        assert stats["connections"] == 1
        assert stats["timespan"] == "1m 0s"
        assert stats["categories"]["process"] == 1
        assert stats["categories"]["other"] == 1

    def test_stats_single_event(self, es_export):
        stats = timeline_stats(build_timeline(parse_events(es_export)))
        assert stats["timespan"] == "-"

    def test_stats_empty(self):
        stats = timeline_stats(Timeline())
        assert stats["events"] == 0
        assert "first_seen" not in stats

    def test_filter_events(self, client_server_records):
        events = parse_events(client_server_records)
        assert [e.category for e in filter_events(events, ["process"])] == ["process"]
        assert filter_events(events, []) == []

    @pytest.mark.parametrize(
        "seconds, expected",
        [
            (45, "45s"),
            (125, "2m 5s"),
            (3 * 3600 + 120, "3h 2m"),
            (2 * 86400 + 5 * 3600, "2d 5h"),
        ],
    )
    def test_format_duration(self, seconds, expected):
        assert format_duration(seconds) == expected
