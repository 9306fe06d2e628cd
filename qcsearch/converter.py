"""Conversion of text graph formats into the binary graph format."""

import struct
import sys
from pathlib import Path

from .csr import CSRGraph
from .utility import integer_to_string

__all__ = [
    "read_dimacs",
    "read_snap",
    "read_dimacs10",
    "write_binary_graph",
    "default_output_path",
    "main",
]

_UINT_SIZE = 4


def _leading_ints(text):
    """Integers at the start of ``text``, stopping at the first token that is not one."""
    values = []
    for token in text.split():
        try:
            values.append(int(token))
        except ValueError:
            break
    return values


def _graph_from_pairs(pairs):
    """Renumber the endpoints of ``pairs`` densely and build an undirected graph."""
    adjacency = {}
    for a, b in pairs:
        if a == b:
            continue
        adjacency.setdefault(a, set()).add(b)
        adjacency.setdefault(b, set()).add(a)

    nodes = sorted(adjacency)
    ids = {node: index for index, node in enumerate(nodes)}
    if any(node != index for index, node in enumerate(nodes)):
        print("Node ids are not preserved! ")

    pstart = [0]
    edges = []
    for node in nodes:
        edges.extend(sorted(ids[w] for w in adjacency[node]))
        pstart.append(len(edges))
    graph = CSRGraph(len(nodes), pstart, edges)
    print(
        f"n = {integer_to_string(graph.n)}, "
        f"(undirected) m = {integer_to_string(graph.m // 2)}"
    )
    return graph


def read_dimacs(path):
    """Read a DIMACS clique-format file (``p`` header, ``e a b`` edge lines)."""
    with open(path, encoding="utf-8") as infile:
        lines = iter(infile.read().splitlines())
    for line in lines:
        if line.startswith("p"):
            break
    else:
        raise ValueError(f"no problem line in {path}")

    pairs = []
    line_number = 1
    for line in lines:
        if not line:
            continue
        if not line.startswith("e"):
            print(f"ERROR in line {line_number}", file=sys.stderr)
            continue
        values = _leading_ints(line[1:])
        if len(values) < 2:
            raise ValueError(f"malformed edge line: {line!r}")
        pairs.append((values[0], values[1]))
        line_number += 1
    return _graph_from_pairs(pairs)


def read_snap(path):
    """Read a SNAP edge list: one ``from to`` pair per line, ``#`` starts a comment."""
    pairs = []
    with open(path, encoding="utf-8") as infile:
        for line in infile:
            stripped = line.lstrip(" ").rstrip("\r\n")
            if not stripped or stripped.startswith("#"):
                continue
            values = _leading_ints(stripped)
            if len(values) < 2:
                raise ValueError(f"malformed edge line: {line.rstrip()!r}")
            pairs.append((values[0], values[1]))
    return _graph_from_pairs(pairs)


def read_dimacs10(path):
    """Read a DIMACS10 (METIS) adjacency file with 1-based vertex ids."""
    with open(path, encoding="utf-8") as infile:
        lines = iter(infile.read().splitlines())
    header = next(lines, "")
    while header.startswith("%"):
        header = next(lines, "")

    values = _leading_ints(header)
    if len(values) < 2:
        raise ValueError(f"malformed header in {path}")
    n, m = values[0], values[1]
    fmt = values[2] if len(values) > 2 else 0
    if fmt != 0:
        raise ValueError(f"Format of {path} is not supported yet")
    m *= 2

    pstart = [0]
    edges = []
    for u in range(n):
        neighbours = [v - 1 for v in _leading_ints(next(lines, ""))]
        edges.extend(sorted(v for v in neighbours if v != u))
        pstart.append(len(edges))
    if len(edges) != m:
        raise ValueError(
            f"{path} declares {m // 2} edges but lists {len(edges)} adjacency entries"
        )
    print(f"n:{n} m:{m // 2}")
    return CSRGraph(n, pstart, edges)


def write_binary_graph(path, graph):
    """Write ``graph`` as: word size, n, m, the n degrees, then the m neighbour ids."""
    degrees = [graph.degree(u) for u in range(graph.n)]
    values = [_UINT_SIZE, graph.n, graph.m, *degrees, *graph.edges[: graph.m]]
    Path(path).write_bytes(struct.pack(f"<{len(values)}I", *values))


def default_output_path(path):
    """Replace everything after the last dot of ``path`` with ``bin``."""
    text = str(path)
    dot = text.rfind(".")
    if dot < 0:
        raise ValueError(f"{text!r} has no file suffix")
    return text[: dot + 1] + "bin"


def main(argv=None):
    """Convert a DIMACS text graph into the binary format."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        print("text2bin textfile [binfile]")
        return 1
    if len(args) > 2:
        print("Redundant args!")
        return 1
    text_path = args[0]
    try:
        bin_path = args[1] if len(args) == 2 else default_output_path(text_path)
        graph = read_dimacs(text_path)
        write_binary_graph(bin_path, graph)
    except FileNotFoundError:
        print(f"can not find file {text_path}", file=sys.stderr)
        return 1
    except (OSError, ValueError) as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0