"""
Adjacency matrix projection for Graph Room.

build_matrix() maps nodes and edges to an N x N integer matrix of summed edge
weights. Rows and columns follow the numeric-first node ordering. The result
is read-only; the projector never touches the GraphStore.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Tuple

import networkx as nx

from graphroom.graph import Edge, Node
from graphroom.utils import NodeId, coerce_weight, numeric_first_key


@dataclass(frozen=True)
class AdjacencyMatrix:
    order: Tuple[NodeId, ...]
    labels: Tuple[str, ...]
    rows: Tuple[Tuple[int, ...], ...]

    @property
    def size(self) -> int:
        return len(self.order)

    def cell(self, source: NodeId, target: NodeId) -> int:
        return self.rows[self.order.index(source)][self.order.index(target)]

    def as_table(self) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
        """
        Columns and rows in the shape ui.table expects.

        The first column holds the row node's display name; each other column
        is keyed by its position so arbitrary node ids are safe as field names.
        Each row carries its node id under 'id' since labels need not be unique.
        """
        columns = [{'name': 'node', 'label': '', 'field': 'node', 'align': 'left'}]
        columns += [
            {'name': f'c{j}', 'label': label, 'field': f'c{j}', 'align': 'center'}
            for j, label in enumerate(self.labels)
        ]
        rows = []
        for i, values in enumerate(self.rows):
            row = {'id': self.order[i], 'node': self.labels[i]}
            row.update({f'c{j}': v for j, v in enumerate(values)})
            rows.append(row)
        return columns, rows


def order_nodes(nodes: Iterable[Node]) -> List[Node]:
    return sorted(nodes, key=lambda n: numeric_first_key(n.id))


def build_matrix(nodes: Iterable[Node], edges: Iterable[Edge]) -> AdjacencyMatrix:
    """
    Project a graph onto its weighted adjacency matrix.

    Directed edges add their weight to [i][j]. Undirected edges add it to
    [i][j] and [j][i], except self-loops which add it once to [i][i].
    Edges referencing unknown nodes are skipped. Parallel edges accumulate.
    """
    ordered = order_nodes(nodes)
    order = tuple(n.id for n in ordered)

    graph = nx.DiGraph()
    graph.add_nodes_from(order)

    def add_weight(u, v, w):
        if graph.has_edge(u, v):
            graph[u][v]['weight'] += w
        else:
            graph.add_edge(u, v, weight=w)

    for edge in edges:
        if edge.source not in graph or edge.target not in graph:
            continue
        w = coerce_weight(edge.weight)
        add_weight(edge.source, edge.target, w)
        if not edge.directed and edge.source != edge.target:
            add_weight(edge.target, edge.source, w)

    rows = tuple(
        tuple(graph[u][v]['weight'] if graph.has_edge(u, v) else 0 for v in order)
        for u in order
    )
    return AdjacencyMatrix(order=order, labels=tuple(n.display_name for n in ordered), rows=rows)
