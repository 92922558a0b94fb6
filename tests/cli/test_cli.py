import json
import logging
from pathlib import Path

import pytest

from topotrace import cli
from topotrace.logging import reset_logging, setup_root_logger
from topotrace.model.graph import SAMPLE_GRAPH, Graph, Link, Node
from topotrace.model.loader import save_graph_file

# Utilities


def extract_json_from_stdout(output: str) -> str:
    """Return the JSON payload from stdout that may include status lines.

    This helper isolates the first balanced JSON object for reliable parsing.
    """
    json_start = output.find("{")
    if json_start == -1:
        return output

    brace_count = 0
    json_end = -1
    for i in range(json_start, len(output)):
        if output[i] == "{":
            brace_count += 1
        elif output[i] == "}":
            brace_count -= 1
            if brace_count == 0:
                json_end = i + 1
                break
    return output[json_start:json_end] if json_end != -1 else output


@pytest.fixture(autouse=True)
def _restore_logging():
    """CLI flags change the global level; put it back after each test."""
    yield
    reset_logging()
    setup_root_logger()


@pytest.fixture
def sample_file(tmp_path: Path) -> Path:
    path = tmp_path / "sample.json"
    save_graph_file(SAMPLE_GRAPH, path)
    return path


@pytest.fixture
def flow_file(tmp_path: Path) -> Path:
    path = tmp_path / "flow.yaml"
    path.write_text(
        """
nodes: [{id: A}, {id: B}, {id: C}]
links:
  - {source: A, target: B, capacity: 5}
  - {source: B, target: C, capacity: 3}
  - {source: A, target: C, capacity: 1}
"""
    )
    return path


# run command


def test_run_prints_logs_and_summary(sample_file: Path, capsys) -> None:
    cli.main(["run", str(sample_file), "-a", "dijkstra", "-s", "n1", "-e", "n5"])
    out = capsys.readouterr().out
    assert "OSPF route found: Router A -> Switch 1 -> Router B (total metric 25)" in out
    assert "✅ dijkstra finished in" in out


def test_run_json_payload(flow_file: Path, capsys) -> None:
    cli.main(["run", str(flow_file), "-a", "max_flow", "-s", "A", "-e", "C", "--json"])
    payload = json.loads(extract_json_from_stdout(capsys.readouterr().out))
    assert payload["algorithm"] == "max_flow"
    assert payload["maxFlow"] == 4
    assert payload["flowDetails"]["A->B"] == 3
    assert len(payload["steps"]) == len(payload["logs"])


def test_run_json_stdout_is_pure_json(flow_file: Path, capsys) -> None:
    """Status logging goes to stderr, so stdout parses as one JSON document."""
    reset_logging()
    setup_root_logger()
    cli.main(
        ["run", str(flow_file), "-a", "max_flow", "-s", "A", "-e", "C", "--json", "-v"]
    )
    captured = capsys.readouterr()
    assert json.loads(captured.out)["maxFlow"] == 4
    assert "Running max_flow on 3 nodes" in captured.err
    assert "Debug logging enabled" in captured.err


def test_run_steps_view(sample_file: Path, capsys) -> None:
    cli.main(["run", str(sample_file), "--algorithm", "kruskal", "--steps"])
    out = capsys.readouterr().out
    assert "[  0] Link cost audit" in out
    assert "currentLinkId: n1->n3" in out
    assert "mstLinks:" in out


def test_run_writes_output_file(sample_file: Path, tmp_path: Path) -> None:
    output = tmp_path / "out" / "result.json"
    cli.main(["run", str(sample_file), "-a", "bfs", "-s", "n1", "-o", str(output)])
    data = json.loads(output.read_text())
    assert data["visited"] == ["n1", "n2", "n3", "n4", "n5"]
    assert data["steps"][0]["visited"] == []


def test_run_reports_rejection(tmp_path: Path, capsys) -> None:
    path = tmp_path / "directed.json"
    save_graph_file(
        Graph(nodes=[Node("A"), Node("B")], links=[Link("A", "B")], is_directed=True),
        path,
    )
    cli.main(["run", str(path), "-a", "prim"])
    out = capsys.readouterr().out
    assert "❌ prim rejected: Prim error" in out


def test_run_missing_start_exits(sample_file: Path, capsys) -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["run", str(sample_file), "-a", "bfs"])
    assert exc_info.value.code == 1
    assert "--start is required for bfs" in capsys.readouterr().out


def test_run_unknown_node_exits(sample_file: Path, capsys) -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["run", str(sample_file), "-a", "dfs", "-s", "ghost"])
    assert exc_info.value.code == 1
    assert "❌ ERROR: Failed to run algorithm: KeyError" in capsys.readouterr().out


def test_run_missing_file(tmp_path: Path, capsys) -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["run", str(tmp_path / "missing.yaml"), "-a", "prim"])
    assert exc_info.value.code == 1
    assert "Graph file not found" in capsys.readouterr().out


def test_run_invalid_algorithm_rejected_by_argparse(sample_file: Path) -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["run", str(sample_file), "-a", "floyd"])
    assert exc_info.value.code == 2


# show command


def test_show_default_edge_list(sample_file: Path, capsys) -> None:
    cli.main(["show", str(sample_file)])
    out = capsys.readouterr().out
    assert "Router A -- Switch 1 [weight=10]" in out


def test_show_adj_list(sample_file: Path, capsys) -> None:
    cli.main(["show", str(sample_file), "--view", "adj_list"])
    assert "PC 1: Router A(5)" in capsys.readouterr().out


def test_show_invalid_document(tmp_path: Path, capsys) -> None:
    path = tmp_path / "bad.yaml"
    path.write_text("links: []\n")
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["show", str(path)])
    assert exc_info.value.code == 1
    assert "❌ ERROR: Failed to load graph: ValidationError" in capsys.readouterr().out


# global options


def test_no_arguments_prints_help(capsys) -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.main([])
    assert exc_info.value.code == 0
    assert "usage: topotrace" in capsys.readouterr().out


def test_verbose_sets_debug(sample_file: Path) -> None:
    cli.main(["--verbose", "show", str(sample_file)])
    assert logging.getLogger("topotrace").level == logging.DEBUG


def test_quiet_sets_warning(sample_file: Path) -> None:
    cli.main(["--quiet", "show", str(sample_file)])
    assert logging.getLogger("topotrace").level == logging.WARNING
    cli.main(["show", str(sample_file)])
    assert logging.getLogger("topotrace").level == logging.INFO
