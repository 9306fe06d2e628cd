import pytest

from qcsearch import ordering
from qcsearch.csr import from_edge_list


def complete(n):
    return from_edge_list(n, [(a, b) for a in range(n) for b in range(a + 1, n)])


def triangle_with_pendant():
    return from_edge_list(4, [(0, 1), (1, 2), (0, 2), (0, 3)])


MIXED_EDGES = [(0, 1), (1, 2), (2, 0), (2, 3), (3, 4), (4, 5), (5, 3), (1, 5), (6, 0)]


def test_degeneracy_complete_graph_is_whole_solution():
    best = []
    result = ordering.degeneracy(complete(3), 1.0, 0, best, verbose=True)
    assert sorted(best) == [0, 1, 2]
    assert result.upper_bound == 3
    assert result.max_core == 2


def test_degeneracy_path_finds_an_edge():
    graph = from_edge_list(3, [(0, 1), (1, 2)])
    best = []
    ordering.degeneracy(graph, 1.0, 0, best)
    assert len(best) == 2
    assert best[1] in graph.neighbours(best[0])


def test_degeneracy_order_is_permutation_with_monotone_core():
    graph = from_edge_list(7, MIXED_EDGES)
    result = ordering.degeneracy(graph, 0.8, 1, [])
    assert sorted(result.peel_sequence) == list(range(7))
    cores = [result.core[v] for v in result.peel_sequence]
    assert cores == sorted(cores)


def test_degeneracy_keeps_larger_solution():
    best = [9, 8, 7, 6]
    result = ordering.degeneracy(complete(3), 1.0, 0, best)
    assert best == [9, 8, 7, 6]
    assert result.upper_bound == len(best)


def test_two_hop_adjacency_of_star():
    graph = from_edge_list(5, [(0, leaf) for leaf in range(1, 5)])
    pstart2hop, adj2hop, deg2hop = ordering.two_hop_adjacency(graph)
    assert deg2hop == [graph.n - 1] * graph.n
    assert pstart2hop[-1] == len(adj2hop)
    for u in range(graph.n):
        reach = adj2hop[pstart2hop[u]:pstart2hop[u + 1]]
        assert sorted(reach) == [v for v in range(graph.n) if v != u]


def test_two_hop_orders_agree_on_complete_graph():
    graph = complete(4)
    indexed = ordering.two_hop_degeneracy_indexed(graph.n, *ordering.two_hop_adjacency(graph))
    dynamic = ordering.two_hop_degeneracy(graph)
    assert indexed.peel_sequence == dynamic.peel_sequence
    assert indexed.core == dynamic.core
    assert dynamic.max_core == graph.n - 1
    assert dynamic.upper_bound == dynamic.max_core


def test_two_hop_degeneracy_is_permutation():
    graph = from_edge_list(7, MIXED_EDGES)
    result = ordering.two_hop_degeneracy(graph)
    assert sorted(result.peel_sequence) == list(range(7))
    assert result.min_two_hop <= result.max_two_hop
    cores = [result.core[v] for v in result.peel_sequence]
    assert cores == sorted(cores)


def test_shrink_graph_drops_low_core_vertices():
    graph = triangle_with_pendant()
    order = ordering.degeneracy(graph, 1.0, 0, [])
    shrunk = ordering.shrink_graph(graph, order.peel_sequence, order.core, 0, 2)
    assert shrunk.out_mapping == [0, 1, 2]
    assert shrunk.graph.n == 3
    assert sorted(shrunk.peel_sequence) == [0, 1, 2]
    for a in range(shrunk.graph.n):
        for b in shrunk.graph.neighbours(a):
            assert shrunk.out_mapping[b] in graph.neighbours(shrunk.out_mapping[a])


def test_shrink_graph_keeps_everything_when_no_bound():
    graph = triangle_with_pendant()
    order = ordering.degeneracy(graph, 1.0, 0, [])
    shrunk = ordering.shrink_graph(graph, order.peel_sequence, order.core, 0, 0)
    assert shrunk.graph.pstart == graph.pstart
    assert shrunk.graph.edges == graph.edges
    assert shrunk.peel_sequence == order.peel_sequence


def test_oriented_triangle_counting_complete_graph():
    graph = complete(4)
    oriented = ordering.oriented_triangle_counting(graph, [0, 1, 2, 3])
    assert oriented.out_neighbours[0] == [1, 2, 3]
    assert oriented.out_neighbours[3] == []
    counts = [c for row in oriented.out_triangles for c in row]
    assert sum(counts) == 3 * oriented.triangle_count
    assert len(set(counts)) == 1


def test_oriented_triangle_counting_rejects_bad_sequence():
    with pytest.raises(ValueError):
        ordering.oriented_triangle_counting(complete(3), [0, 0, 1])


def test_reorganize_oriented_graph():
    graph = from_edge_list(7, MIXED_EDGES)
    order = ordering.degeneracy(graph, 1.0, 0, [])
    oriented = ordering.oriented_triangle_counting(graph, order.peel_sequence)
    neighbours, edge_ids, edge_list, tri_cnt = ordering.reorganize_oriented_graph(graph, oriented)
    assert len(edge_list) == graph.m // 2
    assert len(tri_cnt) == len(edge_list)
    assert sum(tri_cnt) == 3 * oriented.triangle_count
    for u in range(graph.n):
        assert neighbours[u] == sorted(graph.neighbours(u))
        for w, edge in zip(neighbours[u], edge_ids[u]):
            assert set(edge_list[edge]) == {u, w}