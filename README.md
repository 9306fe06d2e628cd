# qcsearch

Finds a maximum gamma-quasi-clique in an undirected graph. A gamma-quasi-clique is a set
of vertices whose induced subgraph has an edge density of at least `gamma`.

The search (`qcsearch.graph.Graph.search`) runs in stages:

1. A degeneracy ordering by two-hop degree. Its maximum core is the upper bound.
2. A heuristic that peels the closed neighbourhood of every vertex in degeneracy order.
   It keeps the largest suffix that meets the density, and this gives a lower bound.
3. Core reduction (`shrink_graph`), then orientation and triangle counting, then
   core-truss peeling of the remaining graph.
4. For each vertex in turn, taken in order of its current degree, a subgraph within two
   hops is induced and pruned (`Graph.induce_subgraph`). This subgraph is then searched
   by branch and bound (`QuasiCliqueBB.search_two_hop`) for quasi-cliques that contain the
   vertex. The vertex is then peeled away.

The number of missing edges allowed is `k = floor((1 - gamma) * n * (n - 1) / 2)`, set by
`Graph.set_k`.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

There are no runtime dependencies beyond the standard library.

## Input format

The search reads a binary graph file made of little-endian 32-bit integers in this order:

- the size of an integer (ignored when the file is read),
- `n`,
- `m`, the number of directed adjacency entries,
- the `n` degrees,
- the adjacency lists.

Self-loops and parallel edges are dropped when the file is read. A vertex id outside
`0..n-1`, or a file that ends too early, raises `ValueError`.

A DIMACS clique-format text graph (a `p` line followed by `e u v` lines) can be converted
with this command:

```
qcsearch-tobin graph.clq [graph.bin]
```

Vertex ids are renumbered densely in increasing order. If no output path is given,
everything after the last dot of the input path is replaced with `bin`.

## Searching

```
qcsearch graph.bin 0.9
```

The first argument is the binary graph and the second is `gamma`. The command prints
statistics while it runs. The vertex set it finds is written to `KDC.txt` in the working
directory: the size on the first line, then the vertex ids in increasing order, each
followed by a space. The command exits with status 1 if an argument is missing, if
`gamma` is not a number, or if the graph file cannot be read.

## Library use

```python
from qcsearch.graph import Graph

g = Graph("graph.bin", 0.9)
g.read()
g.set_k()
best = g.search()   # list of vertex ids
g.write("KDC.txt")
```

The building blocks can also be used on their own:

- `qcsearch.csr`: `CSRGraph`, `read_binary_graph`, `from_edge_list`, `write_solution`
- `qcsearch.converter`: `read_dimacs`, `read_snap`, `read_dimacs10`,
  `write_binary_graph`, `default_output_path`
- `qcsearch.ordering`: `degeneracy`, `two_hop_adjacency`, `two_hop_degeneracy`,
  `two_hop_degeneracy_indexed`, `shrink_graph`, `oriented_triangle_counting`,
  `reorganize_oriented_graph`
- `qcsearch.heuristic`: `HeuristicSearcher`
- `qcsearch.branch_bound`: `QuasiCliqueBB` and its `SearchStats` counters
- `qcsearch.linear_heap`: `ListLinearHeap`, a bucket heap over integer keys
- `qcsearch.utility`: `Timer` (microseconds) and `integer_to_string`, which groups digits
  with commas

## Limitations

- `qcsearch-tobin` reads DIMACS clique files only. SNAP edge lists and DIMACS10 (METIS)
  adjacency files can be read only from Python, with `read_snap` and `read_dimacs10`.
  Their result can then be written with `write_binary_graph`.
- The whole graph is held in memory as Python lists, and the search runs in a single
  thread.
- The output path of the `qcsearch` command is fixed to `KDC.txt`.