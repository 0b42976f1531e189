"""Tests for the ``graph`` command group."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from graphtoll.cli import cli
from tests.conftest import TRIANGLE, TRIANGLE_COST


def _create(cli_runner: CliRunner, owner: str = "alice", funds: str = "5") -> str:
    cli_runner.invoke(cli, ["tokens", "refill", owner, funds])
    result = cli_runner.invoke(
        cli,
        ["--principal", owner, "--json", "graph", "create", "-"],
        input=json.dumps(TRIANGLE),
    )
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)["data"]["graph_id"]


@pytest.mark.usefixtures("_isolated_root")
class TestGraphCreate:
    def test_create_from_stdin(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["tokens", "refill", "alice", "5"])
        result = cli_runner.invoke(
            cli, ["--principal", "alice", "graph", "create", "-"], input=json.dumps(TRIANGLE)
        )
        assert result.exit_code == 0
        assert "OK" in result.stdout
        assert "create_graph" in result.stdout
        assert "graph_id: gph_" in result.stdout

    def test_create_from_file(self, cli_runner: CliRunner, tmp_path) -> None:  # noqa: ANN001
        path = tmp_path / "triangle.json"
        path.write_text(json.dumps(TRIANGLE))
        cli_runner.invoke(cli, ["tokens", "refill", "alice", "5"])
        result = cli_runner.invoke(
            cli, ["--principal", "alice", "--json", "graph", "create", str(path)]
        )
        assert result.exit_code == 0
        data = json.loads(result.stdout)["data"]
        assert data["cost"] == pytest.approx(TRIANGLE_COST)
        assert data["residual_balance"] == pytest.approx(5 - TRIANGLE_COST)
        assert data["node_count"] == 3
        assert data["edge_count"] == 3

    def test_create_requires_principal(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["graph", "create", "-"], input=json.dumps(TRIANGLE))
        assert result.exit_code == 2
        assert "--principal" in result.stderr

    def test_create_bad_json(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli, ["--principal", "alice", "graph", "create", "-"], input="{not json"
        )
        assert result.exit_code == 2
        assert "not valid JSON" in result.stderr

    def test_create_huge_int_literal(self, cli_runner: CliRunner) -> None:
        raw = '{"A": {"B": ' + "1" * 5000 + "}}"
        result = cli_runner.invoke(cli, ["--principal", "alice", "graph", "create", "-"], input=raw)
        assert result.exit_code == 2
        assert "not valid JSON" in result.stderr
        assert "Traceback" not in result.output

    def test_create_invalid_graph(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["tokens", "refill", "alice", "5"])
        result = cli_runner.invoke(
            cli,
            ["--principal", "alice", "--json", "graph", "create", "-"],
            input=json.dumps({"A": {"B": -1}}),
        )
        assert result.exit_code == 1
        assert json.loads(result.stderr)["error"]["code"] == "INVALID_GRAPH"

    def test_create_without_funds(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli, ["--principal", "alice", "graph", "create", "-"], input=json.dumps(TRIANGLE)
        )
        assert result.exit_code == 1
        assert "ERROR" in result.stderr
        assert "INSUFFICIENT_TOKENS" in result.stderr
        listed = cli_runner.invoke(cli, ["--json", "graph", "list"])
        assert json.loads(listed.stdout)["data"]["count"] == 0


@pytest.mark.usefixtures("_isolated_root")
class TestGraphRead:
    def test_show(self, cli_runner: CliRunner) -> None:
        graph_id = _create(cli_runner)
        result = cli_runner.invoke(cli, ["graph", "show", graph_id])
        assert result.exit_code == 0
        assert graph_id in result.stdout
        assert "A → B  3" in result.stdout
        assert "owner: alice" in result.stdout

    def test_show_unknown(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["graph", "show", "gph_missing"])
        assert result.exit_code == 1
        assert "GRAPH_NOT_FOUND" in result.stderr

    def test_list_filters_by_owner(self, cli_runner: CliRunner) -> None:
        first = _create(cli_runner, "alice")
        _create(cli_runner, "bob")
        result = cli_runner.invoke(cli, ["--json", "graph", "list", "--owner", "alice"])
        assert result.exit_code == 0
        items = json.loads(result.stdout)["data"]["items"]
        assert [item["graph_id"] for item in items] == [first]

    def test_list_quiet_prints_ids(self, cli_runner: CliRunner) -> None:
        graph_id = _create(cli_runner)
        result = cli_runner.invoke(cli, ["-q", "graph", "list"])
        assert result.stdout.strip() == graph_id


@pytest.mark.usefixtures("_isolated_root")
class TestGraphPath:
    def test_path_charges_executor(self, cli_runner: CliRunner) -> None:
        graph_id = _create(cli_runner)
        cli_runner.invoke(cli, ["tokens", "refill", "bob", "1"])
        result = cli_runner.invoke(
            cli, ["--principal", "bob", "--json", "graph", "path", graph_id, "A", "C"]
        )
        assert result.exit_code == 0
        data = json.loads(result.stdout)["data"]
        assert data["path"] == ["A", "B", "C"]
        assert data["cost"] == 4.0
        assert data["tokens_charged"] == pytest.approx(TRIANGLE_COST)
        assert data["residual_balance"] == pytest.approx(1 - TRIANGLE_COST)

    def test_path_human_output(self, cli_runner: CliRunner) -> None:
        graph_id = _create(cli_runner)
        result = cli_runner.invoke(
            cli, ["--principal", "alice", "graph", "path", graph_id, "A", "C"]
        )
        assert result.exit_code == 0
        assert "A → B → C" in result.stdout
        assert "Path cost: 4.0" in result.stdout

    def test_no_path_is_free(self, cli_runner: CliRunner) -> None:
        graph_id = _create(cli_runner)
        cli_runner.invoke(cli, ["tokens", "refill", "bob", "1"])
        result = cli_runner.invoke(
            cli, ["--principal", "bob", "graph", "path", graph_id, "C", "A"]
        )
        assert result.exit_code == 1
        assert "NO_PATH" in result.stderr
        balance = cli_runner.invoke(cli, ["--json", "tokens", "balance", "bob"])
        assert json.loads(balance.stdout)["data"]["balance"] == 1.0

    def test_unknown_node(self, cli_runner: CliRunner) -> None:
        graph_id = _create(cli_runner)
        result = cli_runner.invoke(
            cli, ["--principal", "alice", "graph", "path", graph_id, "A", "Z"]
        )
        assert result.exit_code == 1
        assert "NODE_NOT_FOUND" in result.stderr

    def test_path_requires_principal(self, cli_runner: CliRunner) -> None:
        graph_id = _create(cli_runner)
        result = cli_runner.invoke(cli, ["graph", "path", graph_id, "A", "C"])
        assert result.exit_code == 2

    def test_trips_recorded(self, cli_runner: CliRunner) -> None:
        graph_id = _create(cli_runner)
        cli_runner.invoke(cli, ["--principal", "alice", "graph", "path", graph_id, "A", "C"])
        cli_runner.invoke(cli, ["--principal", "alice", "graph", "path", graph_id, "C", "A"])
        result = cli_runner.invoke(cli, ["--json", "graph", "trips", "--executor", "alice"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)["data"]
        assert data["count"] == 1
        assert data["items"][0]["path"] == ["A", "B", "C"]
