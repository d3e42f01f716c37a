import pytest

from graphroom.adjacency import build_matrix, order_nodes
from graphroom.geometry import self_loop_indices
from graphroom.graph import Edge, EdgeDirection, Node
from graphroom.graph_store import GraphStore


def matrix_of(store):
    snapshot = store.snapshot()
    return build_matrix(snapshot.nodes, snapshot.edges)


@pytest.fixture
def pair():
    store = GraphStore()
    store.add_node((10, 10))
    store.add_node((50, 50))
    return store


def test_single_directed_edge(pair):
    pair.create_edge("1", "2", 3, EdgeDirection.FORWARD)
    matrix = matrix_of(pair)

    assert matrix.order == ("1", "2")
    assert matrix.rows == ((0, 3), (0, 0))


def test_self_loop_counted_once(pair):
    pair.create_edge("1", "1", 2, EdgeDirection.FORWARD)
    pair.create_edge("2", "2", 4, EdgeDirection.UNDIRECTED)
    matrix = matrix_of(pair)

    assert matrix.cell("1", "1") == 2
    assert matrix.cell("2", "2") == 4
    assert self_loop_indices(pair.edges) == {"1-1-1": 0, "2-2-2": 0}


def test_mirrored_pair(pair):
    pair.create_edge("1", "2", 1)
    pair.create_edge("2", "1", 1)
    assert matrix_of(pair).rows == ((0, 1), (1, 0))


def test_undirected_edge_is_symmetric(pair):
    pair.create_edge("2", "1", 5, EdgeDirection.UNDIRECTED)
    matrix = matrix_of(pair)
    assert matrix.cell("1", "2") == matrix.cell("2", "1") == 5


def test_parallel_edges_accumulate(pair):
    pair.create_edge("1", "2", 1)
    pair.create_edge("1", "2", 2)
    pair.create_edge("1", "2", 3, EdgeDirection.UNDIRECTED)
    matrix = matrix_of(pair)

    assert matrix.cell("1", "2") == 6
    assert matrix.cell("2", "1") == 3


def test_unknown_endpoints_are_skipped():
    matrix = build_matrix([Node("a")], [Edge("e", "a", "zz", 7, True)])
    assert matrix.rows == ((0,),)


def test_empty_graph():
    matrix = build_matrix([], [])
    assert matrix.size == 0
    assert matrix.as_table() == ([{'name': 'node', 'label': '', 'field': 'node', 'align': 'left'}], [])


def test_numeric_first_ordering():
    nodes = [Node(i) for i in ["b10", "10", "B2", "2", "alpha", "1.5"]]
    assert [n.id for n in order_nodes(nodes)] == ["1.5", "2", "10", "alpha", "B2", "b10"]


def test_labels_and_table_shape(pair):
    pair.rename_node("1", "Start")
    pair.rename_node("2", "")
    pair.create_edge("1", "2", 3)
    columns, rows = matrix_of(pair).as_table()

    assert [c['label'] for c in columns] == ['', 'Start', '2']
    assert rows == [
        {'id': '1', 'node': 'Start', 'c0': 0, 'c1': 3},
        {'id': '2', 'node': '2', 'c0': 0, 'c1': 0},
    ]


def test_rows_are_keyed_by_node_id_when_labels_repeat(pair):
    pair.rename_node("1", "A")
    pair.rename_node("2", "A")
    _, rows = matrix_of(pair).as_table()

    assert [r['node'] for r in rows] == ['A', 'A']
    assert [r['id'] for r in rows] == ['1', '2']


def test_projection_does_not_mutate_inputs(pair):
    pair.create_edge("1", "2", 3)
    before = pair.snapshot()
    matrix_of(pair)
    assert pair.snapshot() == before
