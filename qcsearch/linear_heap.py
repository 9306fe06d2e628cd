"""Bucket-based priority queue over small integer keys."""

from itertools import islice

__all__ = ["ListLinearHeap"]


class ListLinearHeap:
    """Min-priority queue of vertices keyed by integers in ``[0, key_cap]``.

    Vertices sharing a key are kept in a bucket; the most recently inserted
    vertex of a bucket is the first to be returned.
    """

    def __init__(self, n, key_cap):
        self.n = n
        self.key_cap = key_cap
        self.min_key = self.max_key = key_cap
        self._keys = [self._absent] * n
        self._buckets = [{} for _ in range(max(key_cap + 1, 0))]

    @property
    def _absent(self):
        return self.key_cap + 1

    def init(self, n, key_cap, ids, keys):
        """Fill the heap with the first ``n`` of ``ids``, keyed by ``keys[id]``."""
        if key_cap > self.key_cap:
            raise ValueError(f"key cap {key_cap} exceeds heap capacity {self.key_cap}")
        self._reset()
        self.min_key = self.max_key = key_cap
        for vertex in islice(ids, n):
            if not 0 <= vertex < self.n:
                raise IndexError(f"vertex {vertex} outside heap of size {self.n}")
            key = keys[vertex]
            if not 0 <= key <= key_cap:
                raise ValueError(f"key {key} of vertex {vertex} outside [0, {key_cap}]")
            self._keys[vertex] = key
            self._buckets[key][vertex] = None
            self.min_key = min(self.min_key, key)

    def _reset(self):
        self._keys = [self._absent] * self.n
        for bucket in self._buckets:
            bucket.clear()

    def clear(self):
        """Remove every vertex."""
        self._reset()
        self.min_key = self.max_key = 0

    def get_key(self, vertex):
        """Current key of ``vertex``; ``key_cap + 1`` once it has left the heap."""
        return self._keys[vertex]

    def get_ids(self):
        """All vertices still in the heap, in increasing key order."""
        return [
            vertex
            for key in range(max(self.min_key, 0), self.max_key + 1)
            for vertex in reversed(self._buckets[key])
        ]

    def _advance(self):
        while self.min_key <= self.max_key and (
            self.min_key < 0 or not self._buckets[self.min_key]
        ):
            self.min_key += 1
        return self.min_key <= self.max_key

    def get_min(self):
        """Return ``(vertex, key)`` with the smallest key, or None when empty."""
        if not self._advance():
            return None
        return next(reversed(self._buckets[self.min_key])), self.min_key

    def pop_min(self):
        """Remove and return ``(vertex, key)`` with the smallest key, or None."""
        if not self._advance():
            return None
        key = self.min_key
        vertex, _ = self._buckets[key].popitem()
        self._keys[vertex] = self._absent
        return vertex, key

    def decrement(self, vertex, dec):
        """Lower the key of ``vertex`` by ``dec``; returns the new key, 0 if absent."""
        key = self._keys[vertex]
        if key > self.key_cap:
            return 0
        new_key = key - dec
        if new_key < 0:
            raise ValueError(f"key of vertex {vertex} would become negative")
        del self._buckets[key][vertex]
        self._buckets[new_key][vertex] = None
        self._keys[vertex] = new_key
        self.min_key = min(self.min_key, new_key)
        return new_key

    def delete(self, vertex):
        """Remove ``vertex`` from the heap if it is still there."""
        key = self._keys[vertex]
        if key > self.key_cap:
            return
        del self._buckets[key][vertex]
        self._keys[vertex] = self._absent