"""Neighbourhood-based degeneracy heuristic for large quasi-cliques."""

import math

from .linear_heap import ListLinearHeap

__all__ = ["HeuristicSearcher"]


class HeuristicSearcher:
    """Finds a lower bound for the maximum gamma-quasi-clique.

    For every vertex ``u`` the subgraph induced by ``u`` and its neighbours is
    peeled in degeneracy order; the largest suffix of the peeling order whose
    edge count reaches the gamma density threshold becomes a candidate.
    """

    def __init__(self, n, m, pstart, edges, gamma, max_deg, best):
        self.n = n
        self.m = m
        self.pstart = pstart
        self.edges = edges
        self.gamma = gamma
        self.max_deg = max_deg
        self.lb = len(best)
        self.ub = n
        self.n_s = 0
        self.m_s = 0
        self.id_s = []
        self.rid_s = {}
        self.deg_s = []
        self.core_s = []
        self.seq_s = []
        self.adj_list = []
        self.heu_qc = []

    def _neighbours(self, v):
        return self.edges[self.pstart[v]:self.pstart[v + 1]]

    def induce_neighbourhood(self, u):
        """Build the subgraph induced by ``u`` and its neighbours, ``u`` first."""
        self.id_s = [u, *self._neighbours(u)]
        self.rid_s = {v: index for index, v in enumerate(self.id_s)}
        self.n_s = len(self.id_s)
        self.core_s = [0] * self.n_s
        self.seq_s = list(range(self.n_s))
        self.adj_list = [
            [self.rid_s[w] for w in self._neighbours(v) if w in self.rid_s]
            for v in self.id_s
        ]
        self.deg_s = [len(adjacent) for adjacent in self.adj_list]
        self.m_s = sum(self.deg_s) // 2

    def degeneracy_heuristic(self, u0, u_deg, heap):
        """Peel the induced subgraph and keep the densest qualifying suffix."""
        sub_size = 1 + u_deg
        max_core = 0
        edge_count = self.m_s
        idx = sub_size
        visited = [False] * sub_size
        heap.init(sub_size, sub_size - 1, self.seq_s, self.deg_s)
        for i in range(sub_size):
            remaining = sub_size - i
            if idx == sub_size and edge_count >= math.ceil(
                self.gamma * (remaining * (remaining - 1) / 2.0)
            ):
                idx = i
            u, key = heap.pop_min()
            max_core = max(max_core, key)
            self.core_s[u] = max_core
            visited[u] = True
            self.seq_s[i] = u
            for v in self.adj_list[u]:
                if not visited[v]:
                    heap.decrement(v, 1)
            edge_count -= key

        if sub_size - idx > len(self.heu_qc):
            print("renew heuQC")
            self.lb = sub_size - idx
            self.heu_qc = [self.id_s[self.seq_s[i]] for i in range(idx, sub_size)]
            if u0 not in self.heu_qc:
                print(f"error, not include u: {u0}")

        self.seq_s = []
        return self.n

    def clear(self):
        """Forget the current induced subgraph."""
        self.id_s = []
        self.rid_s = {}
        self.adj_list = []
        self.deg_s = []

    def search(self, best):
        """Run the heuristic from every vertex; improve ``best`` in place and return it."""
        max_n = 1 + self.max_deg
        heap = ListLinearHeap(max_n, max_n - 1)
        for u in range(self.n):
            self.induce_neighbourhood(u)
            u_deg = len(self.adj_list[self.rid_s[u]])
            self.ub = self.degeneracy_heuristic(u, u_deg, heap)
            self.clear()
        if self.lb > len(best):
            best[:] = self.heu_qc[: self.lb]
            print("renew the result in heuristic search")
        return best