from itertools import combinations

import pytest

from qcsearch.csr import from_edge_list
from qcsearch.heuristic import HeuristicSearcher
from qcsearch.linear_heap import ListLinearHeap


def _searcher(graph, gamma, best):
    return HeuristicSearcher(
        graph.n, graph.m, graph.pstart, graph.edges, gamma, graph.max_degree(), best
    )


def _is_quasi_clique(graph, vertices, gamma):
    inside = set(vertices)
    count = sum(1 for u in inside for v in graph.neighbours(u) if v in inside)
    size = len(inside)
    return count >= gamma * size * (size - 1)


def _complete(n):
    return from_edge_list(n, list(combinations(range(n), 2)))


def test_complete_graph_found_whole():
    graph = _complete(4)
    best = []
    result = _searcher(graph, 1.0, best).search(best)
    assert result is best
    assert sorted(best) == list(range(4))


def test_path_gives_an_edge():
    graph = from_edge_list(3, [(0, 1), (1, 2)])
    best = []
    _searcher(graph, 1.0, best).search(best)
    assert len(best) == 2
    assert best[1] in graph.neighbours(best[0])


@pytest.mark.parametrize("gamma", [0.5, 0.7, 0.9, 1.0])
def test_result_is_quasi_clique(gamma):
    edges = list(combinations(range(5), 2)) + [(4, 5), (5, 6), (6, 7), (7, 4), (2, 8)]
    graph = from_edge_list(9, edges)
    best = []
    _searcher(graph, gamma, best).search(best)
    assert len(best) == len(set(best))
    assert len(best) >= 5
    assert _is_quasi_clique(graph, best, gamma)


def test_larger_existing_solution_kept():
    graph = from_edge_list(3, [(0, 1), (1, 2)])
    best = [7, 8, 9, 10]
    _searcher(graph, 1.0, best).search(best)
    assert best == [7, 8, 9, 10]


def test_induce_neighbourhood_of_star_centre():
    graph = from_edge_list(4, [(0, 1), (0, 2), (0, 3), (1, 2)])
    searcher = _searcher(graph, 1.0, [])
    searcher.induce_neighbourhood(0)
    assert searcher.id_s[0] == 0
    assert sorted(searcher.id_s) == list(range(4))
    assert searcher.n_s == 4
    assert searcher.m_s == 4
    assert sum(searcher.deg_s) == 2 * searcher.m_s
    assert searcher.seq_s == list(range(searcher.n_s))


def test_induce_neighbourhood_excludes_far_vertices():
    graph = from_edge_list(4, [(0, 1), (1, 2), (2, 3)])
    searcher = _searcher(graph, 1.0, [])
    searcher.induce_neighbourhood(0)
    assert sorted(searcher.id_s) == [0, 1]
    assert searcher.m_s == 1


def test_degeneracy_heuristic_and_clear():
    graph = _complete(4)
    searcher = _searcher(graph, 1.0, [])
    heap = ListLinearHeap(graph.max_degree() + 1, graph.max_degree())
    searcher.induce_neighbourhood(0)
    returned = searcher.degeneracy_heuristic(0, graph.degree(0), heap)
    assert returned == graph.n
    assert sorted(searcher.heu_qc) == list(range(4))
    assert searcher.lb == len(searcher.heu_qc)
    assert searcher.seq_s == []
    searcher.clear()
    assert searcher.id_s == [] and searcher.adj_list == []


def test_edgeless_graph_gives_single_vertex():
    graph = from_edge_list(3, [])
    best = []
    _searcher(graph, 0.9, best).search(best)
    assert len(best) == 1
    assert best[0] in range(graph.n)