import json
from pathlib import Path

from typer.testing import CliRunner

from task_graph_engine.cli import app

runner = CliRunner()
EXAMPLES = Path(__file__).resolve().parent.parent / "examples"


def _ex(name: str) -> str:
    return str(EXAMPLES / name)


def _json(args: list[str]) -> dict:
    r = runner.invoke(app, args + ["--format", "json"])
    assert r.exit_code == 0, r.output
    return json.loads(r.stdout)


def test_reach_bfs_and_dfs():
    for method in ("bfs", "dfs"):
        payload = _json(["reach", _ex("basic-tasks.yaml"), "--start", "1", "--method", method])
        assert payload["result"] == {"start": 1, "method": method, "reachable": 3}


def test_reach_text():
    r = runner.invoke(app, ["reach", _ex("basic-tasks.yaml"), "--start", "2"])
    assert r.exit_code == 0, r.output
    assert "Reachable from 2: 3 (bfs)" in r.stdout


def test_reach_with_iterative_config():
    r = runner.invoke(
        app,
        ["reach", _ex("basic-tasks.yaml"), "--start", "1", "--method", "dfs", "--config", _ex("engine-config.yaml")],
    )
    assert r.exit_code == 0, r.output
    assert "Reachable from 1: 3 (dfs)" in r.stdout


def test_reach_start_out_of_range():
    r = runner.invoke(app, ["reach", _ex("basic-tasks.yaml"), "--start", "500"])
    assert r.exit_code == 2
    assert "E_INVALID_VERTEX" in r.output


def test_reach_unknown_method():
    r = runner.invoke(app, ["reach", _ex("basic-tasks.yaml"), "--start", "1", "--method", "astar"])
    assert r.exit_code == 2
    assert "E_UNKNOWN_ALGORITHM" in r.output


def test_scc_lists_task_components_only():
    payload = _json(["scc", _ex("basic-tasks.yaml")])
    assert payload["result"]["components"] == [[1], [2], [3]]


def test_scc_finds_cycle():
    payload = _json(["scc", _ex("cyclic-tasks.yaml")])
    comps = payload["result"]["components"]
    assert [4, 5, 6] in [sorted(c) for c in comps]
    assert sorted(v for c in comps for v in c) == [0, 4, 5, 6, 7]


def test_mst_kruskal():
    payload = _json(["mst", _ex("basic-tasks.yaml")])
    assert payload["result"]["edges"] == [[2, 1, 3], [3, 1, 4]]
    assert payload["result"]["total_weight"] == 7


def test_mst_prim_defaults_to_first_task():
    payload = _json(["mst", _ex("basic-tasks.yaml"), "--algorithm", "prim"])
    assert payload["result"]["edges"] == [[1, 2, 3], [1, 3, 4]]
    assert payload["result"]["total_weight"] == 7


def test_mst_text():
    r = runner.invoke(app, ["mst", _ex("basic-tasks.yaml")])
    assert r.exit_code == 0, r.output
    assert r.stdout.splitlines() == ["2 - 1 (3)", "3 - 1 (4)", "Total weight: 7"]


def test_shortest_path_both_algorithms():
    for algorithm in ("dijkstra", "bellman-ford"):
        payload = _json(["shortest-path", _ex("basic-tasks.yaml"), "--start", "1", "--algorithm", algorithm])
        assert payload["result"]["negative_cycle"] is False
        assert payload["result"]["distances"] == {"1": 0, "2": 3, "3": 4}


def test_shortest_path_directed():
    payload = _json(["shortest-path", _ex("basic-tasks.yaml"), "--start", "3", "--directed"])
    assert payload["result"]["distances"] == {"3": 0}


def test_shortest_path_text_omits_unreachable():
    r = runner.invoke(app, ["shortest-path", _ex("basic-tasks.yaml"), "--start", "0"])
    assert r.exit_code == 0, r.output
    assert r.stdout.splitlines() == ["Distances from 0:", "0: 0"]


def test_max_flow_clrs():
    for algorithm in ("edmonds-karp", "ford-fulkerson"):
        payload = _json(
            ["max-flow", _ex("clrs-capacities.yaml"), "--source", "0", "--sink", "5", "--algorithm", algorithm]
        )
        assert payload["result"]["max_flow"] == 23
        assert payload["result"]["algorithm"] == algorithm


def test_max_flow_text():
    r = runner.invoke(app, ["max-flow", _ex("clrs-capacities.yaml"), "--source", "0", "--sink", "5"])
    assert r.exit_code == 0, r.output
    assert r.stdout.startswith("Max flow 0 -> 5: 23 (edmonds-karp, ")


def test_max_flow_sink_out_of_range():
    r = runner.invoke(app, ["max-flow", _ex("clrs-capacities.yaml"), "--source", "0", "--sink", "9"])
    assert r.exit_code == 2
    assert "E_INVALID_VERTEX" in r.output


def test_max_flow_bad_capacity_file(tmp_path: Path):
    p = tmp_path / "caps.json"
    p.write_text(json.dumps({"vertex_count": 2, "edges": [{"from": 0, "to": 1, "capacity": -1}]}), encoding="utf-8")
    r = runner.invoke(app, ["max-flow", str(p), "--source", "0", "--sink", "1", "--format", "json"])
    assert r.exit_code == 2
    payload = json.loads(r.stdout)
    assert [e["code"] for e in payload["errors"]] == ["E_NEGATIVE_CAPACITY"]


def test_verbose_flag_accepted():
    r = runner.invoke(app, ["--verbose", "reach", _ex("basic-tasks.yaml"), "--start", "1"])
    assert r.exit_code == 0, r.output


def _chain_file(tmp_path: Path, n: int) -> str:
    tasks = [{"id": 0, "depends_on": []}] + [{"id": i, "depends_on": [i - 1]} for i in range(1, n)]
    p = tmp_path / "chain.json"
    p.write_text(json.dumps({"tasks": tasks}), encoding="utf-8")
    return str(p)


def test_long_dependency_chain_does_not_overflow(tmp_path: Path):
    chain = _chain_file(tmp_path, 1500)
    common = ["--vertex-count", "2000"]

    payload = _json(["scc", chain] + common)
    assert len(payload["result"]["components"]) == 1500

    payload = _json(["reach", chain, "--start", "0", "--method", "dfs"] + common)
    assert payload["result"]["reachable"] == 1500

    payload = _json(["lint", chain] + common)
    assert payload["ok"] is True


def test_mst_kruskal_rejects_start():
    r = runner.invoke(app, ["mst", _ex("basic-tasks.yaml"), "--start", "1"])
    assert r.exit_code == 2
    assert "E_UNSUPPORTED_OPTION" in r.output
