"""Command line entry point for the quasi-clique search."""

import sys

from .graph import Graph

__all__ = ["main"]

_RULE = "-" * 89


def main(argv=None):
    """Search the binary graph ``argv[0]`` for a maximum ``argv[1]``-quasi-clique."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) < 2:
        print("usage: qcsearch GRAPH_FILE GAMMA", file=sys.stderr)
        return 1
    path = args[0]
    try:
        gamma = float(args[1])
    except ValueError:
        print(f"invalid gamma: {args[1]!r}", file=sys.stderr)
        return 1

    print("\n" + _RULE)
    graph = Graph(path, gamma)
    print(f"#Filename={path}\n#gamma={gamma:f}")
    try:
        graph.read()
    except OSError as exc:
        print(f"Can not open file: {path} ({exc})", file=sys.stderr)
        return 1
    except ValueError as exc:
        print(exc, file=sys.stderr)
        return 1
    graph.set_k()
    graph.print_info()
    graph.search()
    graph.write("KDC.txt")
    print(_RULE + "\n")
    return 0