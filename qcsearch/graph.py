"""Maximum gamma-quasi-clique search over a whole graph."""

import math
from bisect import bisect_right

from .branch_bound import QuasiCliqueBB, SearchStats
from .csr import CSRGraph, read_binary_graph, write_solution
from .heuristic import HeuristicSearcher
from .linear_heap import ListLinearHeap
from .ordering import (
    oriented_triangle_counting,
    reorganize_oriented_graph,
    shrink_graph,
    two_hop_degeneracy,
)
from .utility import Timer

__all__ = ["Graph"]

_UNBOUNDED_K = 2**31 - 1


class Graph:
    """A graph read from a binary file and searched for its largest gamma-quasi-clique.

    ``k`` bounds the number of missing edges a solution may have.  During the
    exact search the working adjacency lives in ``adj_edges``/``adj_eids``:
    the live neighbours of ``u`` are at positions ``adj_pstart[u]`` up to
    ``adj_pend[u]``, and deleted edges are dropped lazily.
    """

    def __init__(self, path, gamma):
        self.path = str(path)
        self.gamma = gamma
        self.k = _UNBOUNDED_K
        self.n = 0
        self.m = 0
        self.max_deg = 0
        self.csr = CSRGraph(0, [0], [])
        self.best = []
        self.stats = SearchStats()
        self.adj_pstart = [0]
        self.adj_pend = []
        self.adj_edges = []
        self.adj_eids = []
        self.edge_list = []
        self.tri_cnt = []
        self.deleted = []
        self.degree = []
        self.exists = []
        self.active_edgelist = []

    def read(self):
        """Load the graph file, dropping self loops and parallel edges."""
        self.csr = read_binary_graph(self.path)
        self.n = self.csr.n
        self.m = self.csr.m
        self.max_deg = self.csr.max_degree()
        print(f"\tn = {self.n}; m = {self.m // 2} (undirected)")
        return self.csr

    def set_k(self):
        """Derive the missing-edge bound from gamma and the vertex count."""
        self.k = math.floor((1 - self.gamma) * self.n * (self.n - 1) / 2.0)
        return self.k

    def print_info(self):
        density = self.m / (self.n * (self.n - 1)) if self.n > 1 else 0.0
        print(f"graph={self.path}")
        print(
            f"n={self.n}, m={self.m}, max degree={self.max_deg}, dense={density:.3f}"
        )
        print(f"gamma={self.gamma:f}\n ", end="")
        print(f"miss edges upper bound: {self.k}")

    def write(self, path="KDC.txt"):
        """Write the best solution found."""
        write_solution(path, self.best)

    # ------------------------------------------------------------------ search

    def search(self):
        """Find a maximum gamma-quasi-clique; the result is kept in ``best``."""
        print("enter search")
        timer = Timer()
        self.best = []
        best = self.best
        csr = self.csr

        print("2 hop degen order")
        order = two_hop_degeneracy(csr)
        print(
            f"The max 2hop is: {order.max_two_hop}, the min 2hop is: {order.min_two_hop}"
        )
        print(
            f"MaxCore2hop: {order.max_core}, UB: {order.upper_bound}, "
            f"Order Time: {timer.elapsed() / 1_000_000:.2f}"
        )
        ub = order.upper_bound

        print("enter heuristc search")
        print(f"the bestSz is: {len(best)}")
        heuristic = HeuristicSearcher(
            csr.n, csr.m, csr.pstart, csr.edges, self.gamma, self.max_deg, best
        )
        heuristic.search(best)
        print(f"bestSz after the heu search: {len(best)}")

        if len(best) < ub:
            self._exact_search(order, ub, timer)
        else:
            print(
                f"\tMaxKDC Size: {len(best)}, Search Time: {0.0:.2f}, "
                f"Total Time: {timer.elapsed() / 1_000_000:.2f}"
            )
            print("Search Tree Size: 0, the sum of induced graphs: 0")
        return best

    def _exact_search(self, order, ub, timer):
        best = self.best
        old_size = len(best)
        shrunk = shrink_graph(self.csr, order.peel_sequence, order.core, self.k, len(best))
        graph = shrunk.graph
        n, m = graph.n, graph.m
        print(f"*** Core Shrink: n = {n}, m = {m // 2} ")

        self._load_search_graph(graph, shrunk.peel_sequence)
        heap = ListLinearHeap(n, max(n - 1, 0))
        heap.init(n, n - 1, shrunk.peel_sequence, self.degree)

        removed = []
        d = len(best) - self.k
        m -= 2 * self.peeling(n, heap, removed, d, d - 1)
        remaining = n - len(removed)
        density = m / remaining / (remaining - 1) * 100 if remaining > 1 else 0.0
        print(
            f"*** Core-Truss Shrink: n = {remaining}, m = {m // 2}, "
            f"Density = {density:.2f}%"
        )

        search_timer = Timer()
        print("enter two hop search")
        print(f"current QC size: {len(best)}")
        for i in range(n):
            if not m or len(best) >= ub:
                break
            popped = heap.pop_min()
            if popped is None:
                break
            u, key = popped
            d = len(best) - self.k
            if key < d:
                if self.degree[u]:
                    m -= 2 * self.peeling(n, heap, [u], d, d - 1)
                continue
            ids, vp = self.induce_subgraph(u)
            previous = len(best)
            if len(ids) > previous and ub > previous:
                print(f"enter subgraph {i} search")
                solver = QuasiCliqueBB()
                solver.load_subgraph(self.gamma, len(ids), vp, best, ub)
                print(solver.info())
                solver.search_two_hop(best)
                self._absorb(solver.stats)
                if len(best) != previous:
                    best[:] = [ids[v] for v in best]
                print(f"current QC size: {len(best)}")
            d = len(best) - self.k
            m -= 2 * self.peeling(n, heap, [u], d, d - 1)

        if len(best) > old_size:
            best[:] = [shrunk.out_mapping[v] for v in best]

        print(
            f"\tMaxKDC Size: {len(best)}, "
            f"Search Time: {search_timer.elapsed() / 1_000_000:.2f}, "
            f"Total Time: {timer.elapsed() / 1_000_000:.2f}"
        )
        print(
            f"Search Tree Size: {self.stats.tree_count}, prune1: {self.stats.prune1}, "
            f"ub_prune: {self.stats.ub_prune}"
        )

    def _absorb(self, stats):
        self.stats.tree_count += stats.tree_count
        self.stats.prune1 += stats.prune1
        self.stats.ub_prune += stats.ub_prune

    def _load_search_graph(self, graph, peel_sequence):
        """Orient ``graph`` by ``peel_sequence``, count triangles and set up the
        working adjacency used by peeling and subgraph extraction."""
        oriented = oriented_triangle_counting(graph, peel_sequence)
        neighbours, edge_ids, edge_list, tri_cnt = reorganize_oriented_graph(
            graph, oriented
        )
        self.adj_pstart = [0]
        self.adj_edges = []
        self.adj_eids = []
        for adjacent, ids in zip(neighbours, edge_ids):
            self.adj_edges.extend(adjacent)
            self.adj_eids.extend(ids)
            self.adj_pstart.append(len(self.adj_edges))
        self.adj_pend = self.adj_pstart[1:]
        self.edge_list = edge_list
        self.tri_cnt = tri_cnt
        self.deleted = [False] * len(edge_list)
        self.active_edgelist = list(range(len(edge_list)))
        self.degree = [len(adjacent) for adjacent in neighbours]
        self.exists = [0] * graph.n

    # ------------------------------------------------------- adjacency helpers

    def _current(self, u):
        return self.adj_edges[self.adj_pstart[u]:self.adj_pend[u]]

    def _compact(self, u):
        """Drop deleted edges from ``u``'s list; return its live ``(w, edge)`` pairs."""
        start, end = self.adj_pstart[u], self.adj_pend[u]
        live = [
            (w, e)
            for w, e in zip(self.adj_edges[start:end], self.adj_eids[start:end])
            if not self.deleted[e]
        ]
        new_end = start + len(live)
        self.adj_edges[start:new_end] = [w for w, _ in live]
        self.adj_eids[start:new_end] = [e for _, e in live]
        self.adj_pend[u] = new_end
        return live

    def find_edge(self, w, begin, end):
        """Binary-search ``w`` in the sorted slice ``adj_edges[begin:end]``.

        Returns ``(edge_id, begin)``: the id of the live edge found (or None)
        and the position from which a search for a larger target may start.
        """
        if begin >= end:
            return None, begin
        position = max(begin, bisect_right(self.adj_edges, w, begin, end) - 1)
        if self.adj_edges[position] == w:
            edge = self.adj_eids[position]
            if not self.deleted[edge]:
                return edge, position
        return None, position

    # ----------------------------------------------------------------- peeling

    def _lose_triangle(self, edge, qe, t_threshold):
        if self.tri_cnt[edge] == t_threshold:
            qe.append(edge)
        self.tri_cnt[edge] -= 1

    def _lose_degree(self, v, qv, d_threshold, critical_vertex):
        old = self.degree[v]
        self.degree[v] = old - 1
        if old == d_threshold:
            qv.append(v)
            return v == critical_vertex
        return False

    def peeling(self, critical_vertex, heap, qv, d_threshold, t_threshold):
        """Remove the vertices queued in ``qv`` and every vertex or edge that
        falls below the degree or triangle threshold as a result.

        ``qv`` is extended with the vertices that got removed.  Returns the
        number of deleted edges, or 0 as soon as ``critical_vertex`` is hit.
        """
        deleted = self.deleted
        qe = []
        if t_threshold > 0:
            kept = []
            for edge in self.active_edgelist:
                if deleted[edge]:
                    continue
                (qe if self.tri_cnt[edge] < t_threshold else kept).append(edge)
            self.active_edgelist = kept

        deleted_edges = 0
        qv_index = 0
        while qv_index < len(qv) or qe:
            if not qe:
                u = qv[qv_index]
                qv_index += 1
                incident = self._compact(u)
                for w, edge in incident:
                    self.exists[w] = 1
                    deleted[edge] = True
                deleted_edges += len(incident)
                self.degree[u] = 0
                if heap is not None:
                    heap.delete(u)
                try:
                    for v, _ in incident:
                        for x, edge in self._compact(v):
                            if x > v and self.exists[x]:
                                self._lose_triangle(edge, qe, t_threshold)
                        if self._lose_degree(v, qv, d_threshold, critical_vertex):
                            return 0
                        if heap is not None:
                            heap.decrement(v, 1)
                finally:
                    for w, _ in incident:
                        self.exists[w] = 0

            j = 0
            while j < len(qe):
                edge = qe[j]
                j += 1
                u, v = self.edge_list[edge]
                tri_n = self.tri_cnt[edge]
                deleted[edge] = True
                if self._lose_degree(u, qv, d_threshold, critical_vertex):
                    return 0
                if self._lose_degree(v, qv, d_threshold, critical_vertex):
                    return 0
                if heap is not None:
                    heap.decrement(u, 1)
                    heap.decrement(v, 1)
                deleted_edges += 1

                if self.degree[u] < self.degree[v]:
                    u, v = v, u
                if self.degree[u] > self.degree[v] * 2:
                    start = self.adj_pstart[u]
                    for w, v_edge in self._compact(v):
                        if not tri_n:
                            continue
                        found, start = self.find_edge(w, start, self.adj_pend[u])
                        if found is not None:
                            tri_n -= 1
                            self._lose_triangle(found, qe, t_threshold)
                            self._lose_triangle(v_edge, qe, t_threshold)
                else:
                    live_u = self._compact(u)
                    live_v = self._compact(v)
                    a = b = 0
                    while a < len(live_u) and b < len(live_v):
                        wu, eu = live_u[a]
                        wv, ev = live_v[b]
                        if wu == wv:
                            self._lose_triangle(eu, qe, t_threshold)
                            self._lose_triangle(ev, qe, t_threshold)
                            a += 1
                            b += 1
                        elif wu < wv:
                            a += 1
                        else:
                            b += 1
            qe = []
        return deleted_edges

    # ---------------------------------------------------- subgraph extraction

    def induce_subgraph(self, u):
        """Subgraph around ``u`` within two hops, pruned by the current best size.

        Returns ``(ids, vp)``: ``ids[0]`` is ``u``, then its kept neighbours,
        then kept two-hop vertices; ``vp`` lists edges between positions in ids.
        """
        exists = self.exists
        k = self.k
        best = len(self.best)

        ids = [u]
        exists[u] = 1
        for v, _ in self._compact(u):
            ids.append(v)
            exists[v] = 2

        inner_degree = {}
        queue = []
        for v in ids[1:]:
            inner_degree[v] = sum(1 for w, _ in self._compact(v) if exists[w] == 2)
            if inner_degree[v] + 2 + k <= best:
                queue.append(v)
        position = 0
        while position < len(queue):
            x = queue[position]
            position += 1
            exists[x] = 10
            for w in self._current(x):
                if exists[w] == 2:
                    inner_degree[w] -= 1
                    if inner_degree[w] + 2 + k == best:
                        queue.append(w)

        if len(ids) - len(queue) + k <= best:
            for v in ids:
                exists[v] = 0
            return [], []

        first_ring = len(ids)
        for v in ids[1:first_ring]:
            if exists[v] != 2:
                continue
            for w in self._current(v):
                if not exists[w]:
                    ids.append(w)
                    exists[w] = 3
                    inner_degree[w] = 1
                elif exists[w] == 3:
                    inner_degree[w] += 1

        kept = [u]
        for v in ids[1:first_ring]:
            if exists[v] == 10:
                exists[v] = 0
            else:
                kept.append(v)
        inner = len(kept)
        for v in ids[first_ring:]:
            if inner_degree[v] + 2 + k - 1 <= best:
                exists[v] = 0
            else:
                kept.append(v)

        rid = {v: index for index, v in enumerate(kept)}
        vp = []
        for v in kept[:inner]:
            for w in self._current(v):
                if exists[w] and w > v:
                    vp.append((rid[v], rid[w]))
        for v in kept[inner:]:
            for w, _ in self._compact(v):
                if w > v and exists[w]:
                    vp.append((rid[v], rid[w]))
        for v in kept:
            exists[v] = 0
        return kept, vp

    def extract_subgraph(self, u):
        """Subgraph induced by ``u``, its neighbours and their neighbours.

        Edges between two vertices of the outer ring are included too.
        Returns ``(ids, vp)`` as :meth:`induce_subgraph` does.
        """
        exists = self.exists
        ids = [u]
        exists[u] = 1
        for v, _ in self._compact(u):
            ids.append(v)
            exists[v] = 1
        first_ring = len(ids)
        for v in ids[1:first_ring]:
            for w, _ in self._compact(v):
                if not exists[w]:
                    ids.append(w)
                    exists[w] = 1

        rid = {v: index for index, v in enumerate(ids)}
        vp = []
        for v in ids[:first_ring]:
            for w in self._current(v):
                if w > v:
                    vp.append((rid[v], rid[w]))
        for v in ids[first_ring:]:
            for w, _ in self._compact(v):
                if w > v and exists[w]:
                    vp.append((rid[v], rid[w]))
        for v in ids:
            exists[v] = 0
        return ids, vp

    def extract_graph(self, degree):
        """Remaining graph on the vertices with non-zero ``degree``, renumbered."""
        ids = [v for v, d in enumerate(degree) if d]
        rid = {v: index for index, v in enumerate(ids)}
        vp = []
        for v in ids:
            start, end = self.adj_pstart[v], self.adj_pend[v]
            for w, edge in zip(self.adj_edges[start:end], self.adj_eids[start:end]):
                if not self.deleted[edge] and v < w:
                    vp.append((rid[v], rid[w]))
        return ids, vp