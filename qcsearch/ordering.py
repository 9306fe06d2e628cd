"""Vertex orderings, core reduction and triangle counting on whole graphs."""

import math
from collections import deque
from dataclasses import dataclass

from .csr import CSRGraph
from .linear_heap import ListLinearHeap
from .utility import Timer

__all__ = [
    "DegeneracyResult",
    "TwoHopOrder",
    "ShrinkResult",
    "OrientedGraph",
    "degeneracy",
    "two_hop_adjacency",
    "two_hop_degeneracy_indexed",
    "two_hop_degeneracy",
    "shrink_graph",
    "oriented_triangle_counting",
    "reorganize_oriented_graph",
]


@dataclass
class DegeneracyResult:
    """Outcome of degeneracy peeling."""

    upper_bound: int
    peel_sequence: list
    core: list
    max_core: int


@dataclass
class TwoHopOrder:
    """Peeling order by two-hop degree and its statistics."""

    peel_sequence: list
    core: list
    max_core: int
    upper_bound: int
    two_hop_degree: list
    max_two_hop: int
    min_two_hop: int


@dataclass
class ShrinkResult:
    """Graph reduced to the vertices that may still belong to a better solution."""

    graph: CSRGraph
    peel_sequence: list
    out_mapping: list
    rid: dict


@dataclass
class OrientedGraph:
    """Edges oriented from lower to higher peeling rank, with triangle counts."""

    out_neighbours: list
    out_triangles: list
    triangle_count: int


def degeneracy(graph, gamma, k, best, verbose=False):
    """Peel ``graph`` in degeneracy order.

    Updates ``best`` in place when a dense suffix of the peeling order is
    larger than it, and returns the upper bound together with the order.
    """
    timer = Timer()
    n = graph.n
    threshold = len(best) - k
    degree = [graph.degree(u) for u in range(n)]
    edge_count = sum(degree) // 2

    removed = [u for u in range(n) if degree[u] < threshold]
    pending = deque(removed)
    while pending:
        u = pending.popleft()
        degree[u] = 0
        for w in graph.neighbours(u):
            if degree[w] > 0:
                if degree[w] == threshold:
                    removed.append(w)
                    pending.append(w)
                degree[w] -= 1
                edge_count -= 1

    upper_bound = n if len(removed) < n else len(best)
    visited = [False] * n
    for u in removed:
        visited[u] = True
    remaining = [u for u in range(n) if not visited[u]]
    core = [0] * n
    order = []
    max_core = 0
    new_size = len(remaining)

    if new_size:
        heap = ListLinearHeap(n, max(n - 1, 0))
        heap.init(new_size, new_size - 1, remaining, degree)
        idx = n
        t_ub = 0
        for i in range(new_size):
            left = new_size - i
            if idx == n and edge_count >= math.ceil(gamma * (left * (left - 1) / 2.0)):
                idx = i
            u, key = heap.pop_min()
            max_core = max(max_core, key)
            core[u] = max_core
            order.append(u)
            visited[u] = True
            t_ub = max(t_ub, min(core[u] + k + 1, left))
            for w in graph.neighbours(u):
                if not visited[w]:
                    heap.decrement(w, 1)
            edge_count -= key
        upper_bound = min(
            upper_bound,
            t_ub,
            max_core + math.floor((1 + math.sqrt(1 + 8 * k)) / 2),
        )
        if new_size - idx > len(best):
            best[:] = order[idx:]
            if not verbose:
                print(f"Find a QC of size: {new_size - idx}")
        if verbose:
            print(
                f"*** HeuriQDC size: {len(best)}, MaxCore: {max_core}, UB: {upper_bound}, "
                f"Heuri Time: {timer.elapsed() / 1_000_000:.2f}"
            )
    return DegeneracyResult(upper_bound, removed + order, core, max_core)


def _within_two_hops(graph, u, removed=None):
    """Vertices at distance one or two from ``u``, avoiding removed vertices."""

    def blocked(v):
        return removed is not None and removed[v]

    seen = {u}
    first = []
    for v in graph.neighbours(u):
        if v not in seen and not blocked(v):
            seen.add(v)
            first.append(v)
    found = list(first)
    for v in first:
        for w in graph.neighbours(v):
            if w not in seen and not blocked(w):
                seen.add(w)
                found.append(w)
    return found


def two_hop_adjacency(graph):
    """Return ``(pstart2hop, adj2hop, deg2hop)`` listing every two-hop neighbourhood."""
    pstart2hop = [0]
    adj2hop = []
    deg2hop = []
    for u in range(graph.n):
        reach = _within_two_hops(graph, u)
        adj2hop.extend(reach)
        deg2hop.append(len(reach))
        pstart2hop.append(len(adj2hop))
    return pstart2hop, adj2hop, deg2hop


def _peel_by_two_hop(n, deg2hop, reach_of):
    heap = ListLinearHeap(n, max(n - 1, 0))
    heap.init(n, n - 1, range(n), deg2hop)
    visited = [False] * n
    core = [0] * n
    order = []
    max_core = 0
    for _ in range(n):
        u, key = heap.pop_min()
        max_core = max(max_core, key)
        core[u] = max_core
        order.append(u)
        visited[u] = True
        for w in reach_of(u, visited):
            if not visited[w]:
                heap.decrement(w, 1)
    return TwoHopOrder(
        peel_sequence=order,
        core=core,
        max_core=max_core,
        upper_bound=max_core,
        two_hop_degree=list(deg2hop),
        max_two_hop=max(deg2hop, default=0),
        min_two_hop=min(deg2hop, default=n),
    )


def two_hop_degeneracy_indexed(n, pstart2hop, adj2hop, deg2hop):
    """Peel by two-hop degree using a precomputed two-hop adjacency."""

    def reach_of(u, _visited):
        return adj2hop[pstart2hop[u]:pstart2hop[u + 1]]

    return _peel_by_two_hop(n, deg2hop, reach_of)


def two_hop_degeneracy(graph):
    """Peel by two-hop degree, recomputing neighbourhoods among surviving vertices."""
    deg2hop = [len(_within_two_hops(graph, u)) for u in range(graph.n)]

    def reach_of(u, visited):
        return _within_two_hops(graph, u, visited)

    return _peel_by_two_hop(graph.n, deg2hop, reach_of)


def shrink_graph(graph, peel_sequence, core, k, best_size):
    """Keep only the vertices with ``core + k + 1 > best_size`` and renumber them."""
    keep = [u for u in range(graph.n) if core[u] + k + 1 > best_size]
    rid = {u: index for index, u in enumerate(keep)}
    pstart = [0]
    edges = []
    for u in keep:
        edges.extend(rid[w] for w in graph.neighbours(u) if w in rid)
        pstart.append(len(edges))
    peel = [rid[v] for v in peel_sequence if v in rid]
    return ShrinkResult(CSRGraph(len(keep), pstart, edges), peel, keep, rid)


def oriented_triangle_counting(graph, peel_sequence):
    """Orient each edge towards the later vertex of ``peel_sequence`` and count
    the triangles on every oriented edge."""
    n = graph.n
    if sorted(peel_sequence) != list(range(n)):
        raise ValueError("peel sequence must be a permutation of the vertices")
    rank = [0] * n
    for position, v in enumerate(peel_sequence):
        rank[v] = position
    out = [[w for w in graph.neighbours(u) if rank[w] > rank[u]] for u in range(n)]
    triangles = [[0] * len(targets) for targets in out]
    total = 0
    for u in range(n):
        position_of = {w: j for j, w in enumerate(out[u])}
        for j, v in enumerate(out[u]):
            for k, x in enumerate(out[v]):
                closing = position_of.get(x)
                if closing is not None:
                    triangles[u][j] += 1
                    triangles[v][k] += 1
                    triangles[u][closing] += 1
                    total += 1
    return OrientedGraph(out, triangles, total)


def reorganize_oriented_graph(graph, oriented):
    """Number the edges and rebuild sorted adjacency lists.

    Returns ``(neighbours, edge_ids, edge_list, tri_cnt)``: ``neighbours[u]`` is
    sorted, ``edge_ids[u][i]`` is the id of the edge to ``neighbours[u][i]``,
    ``edge_list[e]`` is the oriented pair of edge ``e`` and ``tri_cnt[e]`` its
    triangle count.
    """
    incident = [[] for _ in range(graph.n)]
    edge_list = []
    tri_cnt = []
    for u in range(graph.n):
        for w, count in zip(oriented.out_neighbours[u], oriented.out_triangles[u]):
            edge = len(edge_list)
            edge_list.append((u, w))
            tri_cnt.append(count)
            incident[u].append((w, edge))
            incident[w].append((u, edge))
    neighbours = []
    edge_ids = []
    for entries in incident:
        entries.sort()
        neighbours.append([w for w, _ in entries])
        edge_ids.append([edge for _, edge in entries])
    return neighbours, edge_ids, edge_list, tri_cnt