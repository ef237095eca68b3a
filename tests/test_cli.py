"""Tests for the click CLI."""

import json

import pytest
from click.testing import CliRunner

from ecstimeline.cli.main import cli


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def ndjson_file(tmp_path, client_server_records):
    path = tmp_path / "events.ndjson"
    path.write_text("\n".join(json.dumps(r) for r in client_server_records))
    return path


class TestBuildCommand:
    def test_build_json(self, runner, ndjson_file):
        result = runner.invoke(cli, ["build", str(ndjson_file)])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert len(data["events"]) == 2
        assert [h["hostname"] for h in data["hosts"]] == ["client", "server"]
        assert data["connections"][0]["dest_host"] == "server"
        assert data["stats"]["connections"] == 1

    def test_build_deduplicates_across_files(self, runner, tmp_path, es_export):
        first = tmp_path / "a.json"
        second = tmp_path / "b.json"
        first.write_text(json.dumps(es_export))
        second.write_text(json.dumps(es_export))

        result = runner.invoke(cli, ["build", str(first), str(second)])

        assert result.exit_code == 0
        assert len(json.loads(result.stdout)["events"]) == 1

    def test_category_filter(self, runner, ndjson_file):
        result = runner.invoke(cli, ["build", str(ndjson_file), "--category", "process"])

        data = json.loads(result.stdout)
        assert [e["category"] for e in data["events"]] == ["process"]
        assert data["stats"]["events"] == 2

    def test_stdin(self, runner, client_server_records):
        result = runner.invoke(cli, ["build", "-"], input=json.dumps(client_server_records))

        assert result.exit_code == 0
        assert len(json.loads(result.stdout)["events"]) == 2

    def test_format_error(self, runner, tmp_path):
        bad = tmp_path / "bad.txt"
        bad.write_text("not json at all")

        result = runner.invoke(cli, ["build", str(bad)])

        assert result.exit_code == 1
        assert json.loads(result.stdout)["code"] == "INVALID_FORMAT"

    def test_invalid_utf8_file(self, runner, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_bytes(b'\xff{"@timestamp": "2024-01-15T10:30:00Z"}')

        result = runner.invoke(cli, ["build", str(bad)])

        assert result.exit_code == 1
        assert json.loads(result.stdout)["code"] == "INVALID_FORMAT"

    def test_invalid_utf8_stdin(self, runner):
        result = runner.invoke(cli, ["build", "-"], input=b"\xff\xfe")

        assert result.exit_code == 1
        assert json.loads(result.stdout)["code"] == "INVALID_FORMAT"

    def test_missing_file(self, runner, tmp_path):
        result = runner.invoke(cli, ["build", str(tmp_path / "absent.json")])

        assert result.exit_code == 1
        assert json.loads(result.stdout)["code"] == "IO_ERROR"

    def test_human_format(self, runner, ndjson_file):
        result = runner.invoke(cli, ["-f", "human", "build", str(ndjson_file)])

        assert result.exit_code == 0
        assert "Hosts" in result.stdout
        assert "client" in result.stdout


class TestListCommands:
    def test_hosts_jsonl(self, runner, ndjson_file):
        result = runner.invoke(cli, ["-f", "jsonl", "hosts", str(ndjson_file)])

        lines = [json.loads(line) for line in result.stdout.splitlines()]
        assert [h["hostname"] for h in lines] == ["client", "server"]
        assert lines[0]["ips"] == ["192.168.1.100"]

    def test_connections(self, runner, ndjson_file):
        result = runner.invoke(cli, ["connections", str(ndjson_file)])

        edges = json.loads(result.stdout)
        assert len(edges) == 1
        assert edges[0]["source_host"] == "client"

    def test_export_wire(self, runner, tmp_path, es_export):
        path = tmp_path / "export.json"
        path.write_text(json.dumps(es_export))

        result = runner.invoke(cli, ["export", "--wire", str(path)])

        payloads = json.loads(result.stdout)
        assert payloads[0]["_id"] == "abc123"
        assert payloads[0]["host"]["hostname"] == "es-host"

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert "ecstimeline" in result.output
