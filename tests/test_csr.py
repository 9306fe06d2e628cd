import struct

import pytest

from qcsearch.csr import CSRGraph, from_edge_list, read_binary_graph, write_solution


def _write_bin(path, adjacency):
    n = len(adjacency)
    m = sum(len(a) for a in adjacency)
    with open(path, "wb") as out:
        out.write(struct.pack("<3i", 4, n, m))
        out.write(struct.pack(f"<{n}i", *(len(a) for a in adjacency)))
        for neighbours in adjacency:
            out.write(struct.pack(f"<{len(neighbours)}i", *neighbours))


def test_read_cleans_loops_and_duplicates(tmp_path):
    path = tmp_path / "g.bin"
    _write_bin(path, [[2, 1, 0, 1], [0], [0, 2]])
    graph = read_binary_graph(path)
    assert graph.n == 3
    assert graph.neighbours(0) == [1, 2]
    assert graph.neighbours(1) == [0]
    assert graph.neighbours(2) == [0]
    assert graph.m == len(graph.edges)


def test_read_round_trip_of_clean_graph(tmp_path):
    adjacency = [[1, 2, 3], [0, 2], [0, 1], [0], []]
    path = tmp_path / "g.bin"
    _write_bin(path, adjacency)
    graph = read_binary_graph(path)
    assert [graph.neighbours(u) for u in range(graph.n)] == adjacency
    assert graph.max_degree() == max(len(a) for a in adjacency)


def test_read_rejects_bad_vertex_id(tmp_path):
    path = tmp_path / "g.bin"
    _write_bin(path, [[5], []])
    with pytest.raises(ValueError):
        read_binary_graph(path)


def test_read_rejects_truncated_file(tmp_path):
    path = tmp_path / "g.bin"
    _write_bin(path, [[1], [0]])
    path.write_bytes(path.read_bytes()[:-4])
    with pytest.raises(ValueError):
        read_binary_graph(path)


def test_from_edge_list_is_symmetric():
    pairs = [(0, 1), (1, 2), (2, 0), (3, 1)]
    graph = from_edge_list(4, pairs)
    assert graph.m == 2 * len(pairs)
    for a, b in pairs:
        assert b in graph.neighbours(a)
        assert a in graph.neighbours(b)
    assert sum(graph.degree(u) for u in range(4)) == graph.m


def test_from_edge_list_keeps_insertion_order():
    graph = from_edge_list(3, [(0, 2), (0, 1)])
    assert graph.neighbours(0) == [2, 1]


def test_from_edge_list_rejects_out_of_range():
    with pytest.raises(ValueError):
        from_edge_list(2, [(0, 2)])


def test_empty_graph_degree():
    graph = from_edge_list(0, [])
    assert graph.max_degree() == 0
    assert graph.m == 0


def test_pstart_length_checked():
    with pytest.raises(ValueError):
        CSRGraph(2, [0, 0], [])


def test_write_solution_format(tmp_path):
    path = tmp_path / "KDC.txt"
    write_solution(path, [5, 1, 2])
    assert path.read_text() == "3\n1 2 5 "


def test_write_empty_solution(tmp_path):
    path = tmp_path / "KDC.txt"
    write_solution(path, [])
    assert path.read_text() == "0\n"