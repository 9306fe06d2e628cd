"""Branch-and-bound search for maximum gamma-quasi-cliques."""

import sys
from contextlib import contextmanager
from dataclasses import dataclass
from itertools import accumulate

from .utility import Timer

__all__ = ["SearchStats", "QuasiCliqueBB"]


@dataclass
class SearchStats:
    """Counters collected during a branch-and-bound search."""

    tree_count: int = 0
    ub_prune: int = 0
    prune1: int = 0


@contextmanager
def _recursion_headroom(depth):
    previous = sys.getrecursionlimit()
    sys.setrecursionlimit(max(previous, depth))
    try:
        yield
    finally:
        sys.setrecursionlimit(previous)


class QuasiCliqueBB:
    """Exact search for the largest gamma-quasi-clique of a small graph.

    All vertices live in ``pc``: ``pc[:p_end]`` is the partial solution P,
    ``pc[p_end:c_end]`` the candidate set C and ``pc[c_end:]`` the excluded
    set X.  ``pc_rid`` maps a vertex to its position in ``pc``.
    """

    def __init__(self):
        self.n = 0
        self.m = 0
        self.max_deg = 0
        self.min_deg = 0
        self.gamma = 0.0
        self.ub = 0
        self.lb = 0
        self.p_end = 0
        self.c_end = 0
        self.me_in_p = 0
        self.me_in_g = 0
        self.tree_idx = 0
        self.pstart = []
        self.edges = []
        self.pc = []
        self.pc_rid = []
        self.nei_in_p = []
        self.nei_in_g = []
        self.qc = []
        self.stats = SearchStats()
        self._adjacent = []

    def _setup(self, neighbour_lists):
        n = len(neighbour_lists)
        self.n = n
        self.c_end = n
        self.p_end = 0
        self.me_in_p = 0
        self.pstart = [0]
        self.edges = []
        for neighbours in neighbour_lists:
            self.edges.extend(neighbours)
            self.pstart.append(len(self.edges))
        self._adjacent = [set(neighbours) for neighbours in neighbour_lists]
        self.pc = list(range(n))
        self.pc_rid = list(range(n))
        self.nei_in_p = [0] * n
        self.nei_in_g = [len(neighbours) for neighbours in neighbour_lists]
        self.max_deg = max([self.max_deg, *self.nei_in_g])
        self.min_deg = min([n, *self.nei_in_g])

    def _neighbours(self, u):
        return self.edges[self.pstart[u]:self.pstart[u + 1]]

    def load_graph(self, n, pstart, pend, edges):
        """Load a graph whose neighbours of ``i`` are ``edges[pstart[i]:pend[i]]``."""
        lists = [list(edges[pstart[i]:pend[i]]) for i in range(n)]
        for neighbours in lists:
            for v in neighbours:
                if not 0 <= v < n:
                    raise ValueError(f"vertex {v} outside 0..{n - 1}")
        self._setup(lists)
        self.m = len(self.edges)
        self.me_in_g = n * (n - 1) // 2 - self.m // 2
        density = self.m / (n * (n - 1)) if n > 1 else 0.0
        print(
            f"load graph of size n={n}, m={self.m // 2} (undirected), "
            f"density={density:.5f}, max degree={self.max_deg}"
        )

    def load_subgraph(self, gamma, n, vp, best, ub):
        """Load a subgraph on ``0..n-1`` given by the undirected pairs ``vp``."""
        self.gamma = gamma
        self.ub = ub
        self.tree_idx = 0
        self.lb = len(best)
        adjacency = [set() for _ in range(n)]
        for u, v in vp:
            if not (0 <= u < n and 0 <= v < n):
                raise ValueError(f"edge ({u}, {v}) outside vertex range 0..{n - 1}")
            if u != v:
                adjacency[u].add(v)
                adjacency[v].add(u)
        self._setup([sorted(neighbours) for neighbours in adjacency])
        self.m = len(self.edges) // 2
        self.me_in_g = n * (n - 1) // 2 - self.m

    def info(self):
        """Size and degree summary of the loaded graph."""
        return (
            f"vertex num: {self.n}, edge num: {self.m}\n"
            f"max degree: {self.max_deg}, min degree: {self.min_deg}"
        )

    def search(self, gamma, ub, best):
        """Search the whole graph; improve ``best`` in place and return it."""
        self.gamma = gamma
        self.ub = ub
        self.lb = len(best)
        if self.n == 0:
            return best
        u = self.pc[0]
        with _recursion_headroom(2 * self.n + 1000):
            self.c_to_p(u)
            self.branch(1)
            self.p_to_x(u)
            self.branch(1)
            self.x_to_c(u)
        if self.lb > len(best):
            best[:] = self.qc[: self.lb]
        return best

    def search_two_hop(self, best):
        """Search for quasi-cliques that contain vertex 0; improve ``best`` in place."""
        if self.n == 0:
            return best
        timer = Timer()
        u = self.pc[0]
        with _recursion_headroom(2 * self.n + 1000):
            self.c_to_p(u)
            self.branch(1)
            self.p_to_c(u)
        if self.lb > len(best):
            print("renew result")
            best[:] = self.qc
        print(
            f"subgraph search complete, search time: {timer.elapsed() / 1_000_000:.2f}, "
            f"treeCnt: {self.stats.tree_count}"
        )
        return best

    def sort_bound(self):
        """Colouring-based upper bound on the size of a quasi-clique extending P."""
        p_end, c_end = self.p_end, self.c_end
        buckets = [[] for _ in range(p_end + 1)]
        for u in self.pc[p_end:c_end]:
            buckets[p_end - self.nei_in_p[u]].append(u)

        forbidden = {}
        colour_size = [0]
        weights = []
        for missing, bucket in enumerate(buckets):
            for u in bucket:
                used = forbidden.get(u, ())
                colour = 0
                while colour in used:
                    colour += 1
                if colour == len(colour_size):
                    colour_size.append(0)
                for w in self._neighbours(u):
                    forbidden.setdefault(w, set()).add(colour)
                colour_size[colour] += 1
                weights.append(missing + colour_size[colour] - 1)

        prefix = list(accumulate(sorted(weights)))
        for i in range(c_end - 1, p_end - 1, -1):
            pairs = i * (i + 1) // 2
            if pairs - self.me_in_p - prefix[i - p_end] >= self.gamma * i * (i + 1) / 2.0:
                return i + 1
        return 0

    def verify_qc(self):
        """Whether the stored solution meets the gamma density."""
        size = len(self.qc)
        if size == 0:
            print("trivial gamma quasi clique")
            return True
        edge_count = sum(
            1
            for i, u in enumerate(self.qc)
            for v in self.qc[i + 1:]
            if self.is_adjacent(u, v)
        )
        if 2.0 * edge_count >= self.gamma * size * (size - 1):
            return True
        density = 2.0 * edge_count / (size * (size - 1))
        print(f"QC vNum: {size}, QC eNum: {edge_count}, QC density: {density:.2f}")
        return False

    def verify_two_hop(self, end):
        """Whether every non-adjacent pair touching a non-neighbour of ``pc[0]``
        has a common neighbour among ``pc[:end]``."""
        members = self.pc[:end]
        u0 = self.pc[0]
        far = [v for v in members[1:] if not self.is_adjacent(u0, v)]
        for u in members:
            for v in far:
                if u == v or self.is_adjacent(u, v):
                    continue
                if not any(
                    w != u and w != v and self.is_adjacent(u, w) and self.is_adjacent(v, w)
                    for w in members
                ):
                    return False
        return True

    def branch(self, level):
        """Explore the subtree rooted at the current (P, C, X) state."""
        self.tree_idx += 1
        if self.c_end <= self.lb:
            return
        p = self.p_end
        if p > self.lb and p * (p - 1) - 2 * self.me_in_p >= self.gamma * p * (p - 1):
            if self.verify_two_hop(p):
                self.store(p)
                print(f"P_end: {p}, MEInP: {self.me_in_p}")
                if not self.verify_qc():
                    print(f"tree cnt: {self.stats.tree_count}")
        c = self.c_end
        if c * (c - 1) - 2 * self.me_in_g >= self.gamma * c * (c - 1):
            self.stats.prune1 += 1
            if self.verify_two_hop(c):
                self.store(c)
                return
        if self.sort_bound() <= self.lb:
            self.stats.ub_prune += 1
            return
        if self.p_end >= self.c_end:
            return
        self.stats.tree_count += 1

        u = self.pc[self.p_end]
        self.c_to_p(u)
        self.branch(level + 1)
        self.p_to_x(u)
        self.branch(level + 1)
        self.x_to_c(u)

    def choose_vertex(self):
        """Candidate with the most neighbours in P, ties broken by degree in P and C."""
        candidates = self.pc[self.p_end:self.c_end]
        if not candidates:
            raise ValueError("candidate set is empty")
        best = candidates[0]
        for v in candidates[1:]:
            if self.vertex_precedes(v, best):
                best = v
        return best

    def vertex_precedes(self, u, v):
        """Whether ``u`` is a strictly better branching vertex than ``v``."""
        if self.nei_in_p[u] != self.nei_in_p[v]:
            return self.nei_in_p[u] > self.nei_in_p[v]
        return self.nei_in_g[u] > self.nei_in_g[v]

    def c_to_p(self, u):
        """Move candidate ``u`` into the partial solution."""
        if not self.in_c(u):
            raise ValueError(f"vertex {u} is not a candidate")
        self.swap_positions(self.pc_rid[u], self.p_end)
        self.p_end += 1
        self.me_in_p += self.p_end - 1 - self.nei_in_p[u]
        for v in self._neighbours(u):
            self.nei_in_p[v] += 1

    def p_to_c(self, u):
        """Move ``u`` from the partial solution back to the candidates."""
        if not self.in_p(u):
            raise ValueError(f"vertex {u} is not in the partial solution")
        self.p_end -= 1
        self.swap_positions(self.pc_rid[u], self.p_end)
        self.me_in_p -= self.p_end - self.nei_in_p[u]
        for v in self._neighbours(u):
            self.nei_in_p[v] -= 1

    def p_to_x(self, u):
        """Move ``u`` from the partial solution to the excluded set."""
        if not self.in_p(u):
            raise ValueError(f"vertex {u} is not in the partial solution")
        self.p_end -= 1
        self.swap_positions(self.pc_rid[u], self.p_end)
        self.me_in_p -= self.p_end - self.nei_in_p[u]
        self.c_end -= 1
        self.swap_positions(self.p_end, self.c_end)
        self.me_in_g -= self.c_end - self.nei_in_g[u]
        for v in self._neighbours(u):
            self.nei_in_p[v] -= 1
            self.nei_in_g[v] -= 1

    def x_to_c(self, u):
        """Move ``u`` from the excluded set back to the candidates."""
        if not self.in_x(u):
            raise ValueError(f"vertex {u} is not excluded")
        self.swap_positions(self.pc_rid[u], self.c_end)
        self.c_end += 1
        self.me_in_g += self.c_end - 1 - self.nei_in_g[u]
        for v in self._neighbours(u):
            self.nei_in_g[v] += 1

    def store(self, new_lb):
        """Record the first ``new_lb`` vertices of ``pc`` as the best solution."""
        self.lb = new_lb
        self.qc = self.pc[:new_lb]

    def swap_positions(self, i, j):
        self.pc[i], self.pc[j] = self.pc[j], self.pc[i]
        self.pc_rid[self.pc[i]] = i
        self.pc_rid[self.pc[j]] = j

    def in_p(self, u):
        return 0 <= self.pc_rid[u] < self.p_end

    def in_c(self, u):
        return self.p_end <= self.pc_rid[u] < self.c_end

    def in_x(self, u):
        return self.c_end <= self.pc_rid[u] < self.n

    def is_adjacent(self, u, v):
        return v in self._adjacent[u]