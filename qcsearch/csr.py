"""Compressed adjacency representation of undirected graphs and its file formats."""

import struct
from dataclasses import dataclass
from pathlib import Path

__all__ = ["CSRGraph", "read_binary_graph", "from_edge_list", "write_solution"]

_INT = struct.Struct("<i")


@dataclass
class CSRGraph:
    """Graph on vertices ``0..n-1``; neighbours of ``u`` are ``edges[pstart[u]:pstart[u+1]]``."""

    n: int
    pstart: list
    edges: list

    def __post_init__(self):
        if len(self.pstart) != self.n + 1:
            raise ValueError("pstart must hold n + 1 offsets")

    @property
    def m(self):
        """Number of directed adjacency entries (twice the undirected edge count)."""
        return self.pstart[self.n]

    def degree(self, u):
        return self.pstart[u + 1] - self.pstart[u]

    def neighbours(self, u):
        return self.edges[self.pstart[u]:self.pstart[u + 1]]

    def max_degree(self):
        return max((self.degree(u) for u in range(self.n)), default=0)


def _unpack_ints(data, offset, count):
    if count < 0:
        raise ValueError(f"negative count {count} in graph file")
    try:
        values = struct.unpack_from(f"<{count}i", data, offset)
    except struct.error as exc:
        raise ValueError("graph file is truncated") from exc
    return list(values), offset + count * _INT.size


def read_binary_graph(path):
    """Read a binary graph file, dropping self loops and parallel edges."""
    data = Path(path).read_bytes()
    (_, n, _), offset = _unpack_ints(data, 0, 3)
    degrees, offset = _unpack_ints(data, offset, n)
    pstart = [0]
    edges = []
    for vertex, degree in enumerate(degrees):
        neighbours, offset = _unpack_ints(data, offset, degree)
        bad = [w for w in neighbours if not 0 <= w < n]
        if bad:
            raise ValueError(f"vertex id {bad[0]} wrong")
        edges.extend(sorted(set(neighbours) - {vertex}))
        pstart.append(len(edges))
    return CSRGraph(n, pstart, edges)


def from_edge_list(n, edge_list):
    """Build a graph from undirected ``(a, b)`` pairs, each stored in both directions."""
    edge_list = list(edge_list)
    degree = [0] * n
    for a, b in edge_list:
        if not (0 <= a < n and 0 <= b < n):
            raise ValueError(f"edge ({a}, {b}) outside vertex range 0..{n - 1}")
        degree[a] += 1
        degree[b] += 1
    pstart = [0]
    for d in degree:
        pstart.append(pstart[-1] + d)
    cursor = pstart[:-1]
    edges = [0] * pstart[-1]
    for a, b in edge_list:
        edges[cursor[a]] = b
        cursor[a] += 1
        edges[cursor[b]] = a
        cursor[b] += 1
    return CSRGraph(n, pstart, edges)


def write_solution(path, vertices):
    """Write the solution size, then its vertices in increasing order."""
    ordered = sorted(vertices)
    with open(path, "w", encoding="ascii") as out:
        out.write(f"{len(ordered)}\n")
        out.write("".join(f"{v} " for v in ordered))