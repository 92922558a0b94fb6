"""Sample topologies shared by the algorithm tests."""

import pytest

from topotrace.model.graph import SAMPLE_GRAPH, Graph, Link, Node


def make_graph(node_ids, links, directed=False):
    """Build a graph from ids and ``(source, target, weight[, capacity])`` tuples."""
    return Graph(
        nodes=[Node(n) for n in node_ids],
        links=[Link(*link) for link in links],
        is_directed=directed,
    )


@pytest.fixture
def triangle():
    #        [1]       [2]
    #   A ───────► B ───────► C
    #   │                     ▲
    #   └─────────────────────┘
    #             [4]
    return make_graph("ABC", [("A", "B", 1), ("B", "C", 2), ("A", "C", 4)])


@pytest.fixture
def flow_triangle():
    # Capacity:
    #   A-B [5], B-C [3], A-C [1]
    return make_graph(
        "ABC", [("A", "B", 1, 5), ("B", "C", 1, 3), ("A", "C", 1, 1)]
    )


@pytest.fixture
def sample_network():
    # Router A ─10─ Switch 1 ─8─ Server
    #    │             │           │
    #    5            15          20
    #    │             │           │
    #  PC 1         Router B ──────┘
    return SAMPLE_GRAPH


@pytest.fixture
def square():
    #   A ── B
    #   │    │
    #   D ── C
    return make_graph(
        "ABCD", [("A", "B", 1), ("B", "C", 1), ("C", "D", 1), ("D", "A", 1)]
    )


@pytest.fixture
def square_directed():
    #       [1]        [1]
    #   ┌────────►B─────────┐
    #   A                   C
    #   └────────►D─────────┘
    #       [2]        [2]
    return make_graph(
        "ABCD",
        [("A", "B", 1), ("B", "C", 1), ("A", "D", 2), ("D", "C", 2)],
        directed=True,
    )


@pytest.fixture
def two_islands():
    # A ── B     C ── D
    return make_graph("ABCD", [("A", "B", 3), ("C", "D", 1)])


@pytest.fixture
def negative_directed():
    # A ─4─► B ─1─► D
    # │      ▲
    # 2     -1
    # ▼      │
    # C ─────┘
    return make_graph(
        "ABCD",
        [("A", "B", 4), ("A", "C", 2), ("C", "B", -1), ("B", "D", 1)],
        directed=True,
    )


@pytest.fixture
def negative_cycle():
    # A ─1─► B ─(-2)─► C, C ─1─► B
    return make_graph(
        "ABC", [("A", "B", 1), ("B", "C", -2), ("C", "B", 1)], directed=True
    )


@pytest.fixture
def bowtie():
    # Two triangles sharing C; every degree is even.
    #   A       D
    #   │ ╲   ╱ │
    #   │   C   │
    #   │ ╱   ╲ │
    #   B       E
    return make_graph(
        "ABCDE",
        [
            ("A", "B", 1),
            ("B", "C", 1),
            ("C", "A", 1),
            ("C", "D", 1),
            ("D", "E", 1),
            ("E", "C", 1),
        ],
    )


@pytest.fixture
def kite():
    # Open Euler path: A and B have odd degree.
    #   A ── B ── C
    #         ╲   │
    #           D
    return make_graph(
        "ABCD", [("A", "B", 1), ("B", "C", 1), ("C", "D", 1), ("D", "B", 1)]
    )


@pytest.fixture
def directed_trap():
    # A has a loop through B and a dead end at C; listing A->C first tempts
    # a naive walk into the dead end.
    return make_graph(
        "ABC", [("A", "C", 1), ("A", "B", 1), ("B", "A", 1)], directed=True
    )


@pytest.fixture
def clique4():
    ids = "ABCD"
    return make_graph(
        ids, [(u, v, 1) for i, u in enumerate(ids) for v in ids[i + 1 :]]
    )
