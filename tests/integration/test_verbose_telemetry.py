"""End-to-end integration tests for verbose telemetry.

Validates the full pipeline:
  CLI flag (-v) -> AppContext -> enable_telemetry() -> @traced service methods
  -> span tree in ServiceResult.meta -> renderer outputs hierarchical span tree.
"""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from graphtoll.cli import cli
from tests.conftest import TRIANGLE, TRIANGLE_COST


def _graph(runner: CliRunner) -> str:
    runner.invoke(cli, ["tokens", "refill", "alice", "5"])
    result = runner.invoke(
        cli, ["--principal", "alice", "--json", "graph", "create", "-"], input=json.dumps(TRIANGLE)
    )
    return json.loads(result.stdout)["data"]["graph_id"]


@pytest.mark.usefixtures("_isolated_root")
class TestVerboseTelemetry:
    """Test --verbose produces telemetry span tree in output."""

    def setup_method(self) -> None:
        self.runner = CliRunner()

    def test_verbose_path_shows_telemetry(self) -> None:
        graph_id = _graph(self.runner)
        result = self.runner.invoke(
            cli, ["-v", "--principal", "alice", "graph", "path", graph_id, "A", "C"]
        )
        assert result.exit_code == 0
        assert "meta:" in result.stdout
        assert "GraphService.compute_path" in result.stdout
        assert "dijkstra" in result.stdout
        assert f"tokens={TRIANGLE_COST}" in result.stdout

    def test_verbose_json_has_span_tree(self) -> None:
        graph_id = _graph(self.runner)
        result = self.runner.invoke(
            cli, ["-v", "--json", "--principal", "alice", "graph", "path", graph_id, "A", "C"]
        )
        assert result.exit_code == 0
        span = json.loads(result.stdout)["meta"]["telemetry"]
        assert span["name"] == "GraphService.compute_path"
        assert span["tokens"] == pytest.approx(TRIANGLE_COST)
        child = span["children"][0]
        assert child["name"] == "dijkstra"
        assert child["annotations"] == {"nodes": 3, "edges": 3}

    def test_non_verbose_has_no_meta(self) -> None:
        result = self.runner.invoke(cli, ["--json", "tokens", "balance", "alice"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["meta"] is None
