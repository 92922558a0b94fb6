"""Cross-checks of the traced algorithms against NetworkX on random topologies."""

import math
import random

import networkx as nx
import pytest
from pytest import approx

from topotrace.algorithms import run_algorithm
from topotrace.algorithms.euler import EulerKind, check_eulerian
from topotrace.model.graph import Graph, Link, Node
from topotrace.model.nx import to_networkx

SEEDS = range(12)


def random_graph(seed, directed=False, n_nodes=7, n_links=11):
    rng = random.Random(seed)
    ids = [f"N{i}" for i in range(n_nodes)]
    links = []
    for _ in range(n_links):
        source, target = rng.sample(ids, 2)
        links.append(
            Link(source, target, weight=rng.randint(1, 9), capacity=rng.randint(1, 6))
        )
    return Graph(nodes=[Node(i) for i in ids], links=links, is_directed=directed)


@pytest.mark.parametrize("directed", [False, True])
@pytest.mark.parametrize("seed", SEEDS)
def test_dijkstra_matches_networkx(seed, directed):
    graph = random_graph(seed, directed)
    expected = nx.single_source_dijkstra_path_length(to_networkx(graph), "N0")
    result = run_algorithm("dijkstra", graph, "N0")
    for node_id, distance in result.distances.items():
        if node_id in expected:
            assert distance == approx(expected[node_id])
        else:
            assert distance == math.inf
            assert node_id in result.unreachable


@pytest.mark.parametrize("seed", SEEDS)
def test_bellman_ford_matches_dijkstra(seed):
    graph = random_graph(seed, directed=True)
    dj = run_algorithm("dijkstra", graph, "N0")
    bf = run_algorithm("bellman_ford", graph, "N0")
    assert dict(bf.distances) == dict(dj.distances)


@pytest.mark.parametrize("seed", SEEDS)
def test_shortest_path_is_a_real_route(seed):
    graph = random_graph(seed, directed=True)
    result = run_algorithm("dijkstra", graph, "N0", "N6")
    if result.path is None:
        assert result.distances["N6"] == math.inf
        return
    G = to_networkx(graph)
    cost = sum(G[u][v]["weight"] for u, v in zip(result.path, result.path[1:]))
    assert cost == approx(result.distances["N6"])


@pytest.mark.parametrize("directed", [False, True])
@pytest.mark.parametrize("seed", SEEDS)
def test_max_flow_matches_networkx(seed, directed):
    graph = random_graph(seed, directed)
    expected = nx.maximum_flow_value(to_networkx(graph), "N0", "N6", capacity="capacity")
    result = run_algorithm("max_flow", graph, "N0", "N6")
    assert result.max_flow == approx(expected)


@pytest.mark.parametrize("seed", SEEDS)
def test_flow_is_conserved(seed):
    graph = random_graph(seed)
    result = run_algorithm("max_flow", graph, "N0", "N6")
    balance = {node_id: 0.0 for node_id in graph.node_ids()}
    for key, value in result.flow_details.items():
        source, target = key.split("->")
        balance[source] -= value
        balance[target] += value
    for node_id, net in balance.items():
        if node_id == "N0":
            assert net == approx(-result.max_flow)
        elif node_id == "N6":
            assert net == approx(result.max_flow)
        else:
            assert net == approx(0)


@pytest.mark.parametrize("seed", SEEDS)
def test_spanning_tree_cost_matches_networkx(seed):
    graph = random_graph(seed, n_links=14)
    G = to_networkx(graph)
    forest = nx.minimum_spanning_tree(G, weight="weight")
    expected = sum(data["weight"] for _, _, data in forest.edges(data=True))

    kruskal = run_algorithm("kruskal", graph)
    assert kruskal.total_cost == approx(expected)
    if nx.is_connected(G):
        prim = run_algorithm("prim", graph)
        assert prim.total_cost == approx(expected)
        assert len(prim.mst_links) == len(graph.nodes) - 1


@pytest.mark.parametrize("directed", [False, True])
@pytest.mark.parametrize("seed", SEEDS)
def test_bipartite_matches_networkx(seed, directed):
    graph = random_graph(seed, directed, n_links=6)
    expected = nx.is_bipartite(to_networkx(graph).to_undirected())
    result = run_algorithm("bipartite", graph)
    assert result.is_bipartite == expected
    if expected:
        zone_of = {n: 0 for n in result.bipartite_sets.set_a}
        zone_of.update({n: 1 for n in result.bipartite_sets.set_b})
        for link in graph.links:
            assert zone_of[link.source] != zone_of[link.target]


def eulerian_graph(seed, directed, open_path=False, n_nodes=6, n_walks=3):
    """Union of random closed walks through ``N0``; every degree is balanced.

    With ``open_path`` one random link is dropped, which leaves exactly two
    unbalanced nodes while keeping every link attached to ``N0``.

    Returns:
        The graph (links shuffled) and the dropped link, if any.
    """
    rng = random.Random(seed)
    ids = [f"N{i}" for i in range(n_nodes)]
    hub = ids[0]
    links = []
    for _ in range(n_walks):
        walk = [hub]
        for _ in range(rng.randint(1, 4)):
            walk.append(rng.choice([n for n in ids if n != walk[-1]]))
        if walk[-1] == hub:
            walk.append(rng.choice(ids[1:]))
        walk.append(hub)
        links.extend(Link(u, v) for u, v in zip(walk, walk[1:]))
    dropped = links.pop(rng.randrange(len(links))) if open_path else None
    rng.shuffle(links)
    graph = Graph(nodes=[Node(i) for i in ids], links=links, is_directed=directed)
    return graph, dropped


def assert_covers_every_link(graph, walk):
    assert len(walk) == len(graph.links) + 1
    remaining = [(link.source, link.target) for link in graph.links]
    for u, v in zip(walk, walk[1:]):
        if (u, v) in remaining:
            remaining.remove((u, v))
        else:
            assert not graph.is_directed, f"{u}->{v} is not a link"
            remaining.remove((v, u))
    assert remaining == []


@pytest.mark.parametrize("open_path", [False, True])
@pytest.mark.parametrize("directed", [False, True])
@pytest.mark.parametrize("seed", range(60))
def test_euler_walks_on_eulerian_graphs(seed, directed, open_path):
    graph, dropped = eulerian_graph(seed, directed, open_path)
    check = check_eulerian(graph)
    assert check.kind is (EulerKind.PATH if open_path else EulerKind.CIRCUIT)

    for name in ("fleury", "hierholzer"):
        result = run_algorithm(name, graph)
        assert result.ok, result.error
        walk = result.euler_path
        assert_covers_every_link(graph, walk)
        assert walk[0] == check.start
        if not open_path:
            assert walk[-1] == walk[0]
        elif directed:
            # Dropping u -> v leaves v with a spare exit and u with a spare entry
            assert (walk[0], walk[-1]) == (dropped.target, dropped.source)
        else:
            assert {walk[0], walk[-1]} == {dropped.source, dropped.target}


@pytest.mark.parametrize("directed", [False, True])
@pytest.mark.parametrize("seed", range(20))
def test_euler_walks_reject_or_cover(seed, directed):
    """Arbitrary graphs are either rejected up front or fully covered."""
    graph = random_graph(seed, directed, n_nodes=5, n_links=7)
    feasible = check_eulerian(graph).feasible
    for name in ("fleury", "hierholzer"):
        result = run_algorithm(name, graph)
        if feasible:
            assert result.ok, result.error
            assert_covers_every_link(graph, result.euler_path)
        else:
            assert not result.ok
            assert len(result.steps) == 1
