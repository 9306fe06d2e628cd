import pytest

from qcsearch.linear_heap import ListLinearHeap


def _heap(keys):
    n = len(keys)
    heap = ListLinearHeap(n, n - 1)
    heap.init(n, n - 1, range(n), keys)
    return heap


def _drain(heap):
    popped = []
    while (item := heap.pop_min()) is not None:
        popped.append(item)
    return popped


def test_pop_order_is_by_key():
    keys = [3, 0, 2, 1, 4, 2]
    popped = _drain(_heap(keys))
    assert sorted(v for v, _ in popped) == list(range(len(keys)))
    assert [k for _, k in popped] == sorted(keys)
    assert all(keys[v] == k for v, k in popped)


def test_ties_return_latest_inserted_first():
    heap = _heap([1, 1, 1])
    assert [v for v, _ in _drain(heap)] == [2, 1, 0]


def test_empty_heap_pops_none():
    heap = ListLinearHeap(0, -1)
    heap.init(0, -1, [], [])
    assert heap.pop_min() is None
    assert heap.get_min() is None


def test_get_min_does_not_remove():
    heap = _heap([2, 0, 1])
    assert heap.get_min() == heap.get_min()
    assert heap.pop_min() == (1, 0)


def test_decrement_moves_vertex_forward():
    heap = _heap([3, 2, 3, 3])
    assert heap.decrement(0, 2) == 1
    assert heap.get_key(0) == 1
    assert heap.pop_min() == (0, 1)


def test_decrement_of_popped_vertex_is_ignored():
    heap = _heap([0, 2, 2])
    vertex, _ = heap.pop_min()
    assert heap.decrement(vertex, 1) == 0
    assert heap.get_key(vertex) == heap.key_cap + 1


def test_decrement_below_zero_rejected():
    heap = _heap([0, 1])
    with pytest.raises(ValueError):
        heap.decrement(0, 1)


def test_delete_removes_vertex():
    heap = _heap([1, 0, 2])
    heap.delete(1)
    heap.delete(1)
    remaining = [v for v, _ in _drain(heap)]
    assert remaining == [0, 2]


def test_get_ids_lists_members_by_key():
    keys = [2, 0, 1, 0]
    heap = _heap(keys)
    ids = heap.get_ids()
    assert sorted(ids) == [0, 1, 2, 3]
    assert [keys[v] for v in ids] == sorted(keys)


def test_init_uses_only_listed_vertices():
    heap = ListLinearHeap(5, 4)
    heap.init(2, 4, [3, 1, 0], [0, 4, 0, 2, 0])
    assert sorted(heap.get_ids()) == [1, 3]


def test_init_rejects_out_of_range_vertex():
    heap = ListLinearHeap(2, 1)
    with pytest.raises(IndexError):
        heap.init(1, 1, [5], [0] * 6)


def test_init_rejects_key_over_cap():
    heap = ListLinearHeap(3, 2)
    with pytest.raises(ValueError):
        heap.init(3, 1, range(3), [0, 2, 1])


def test_clear_empties_and_allows_reinit():
    heap = _heap([1, 0, 2])
    heap.clear()
    assert heap.pop_min() is None
    heap.init(3, 2, range(3), [2, 2, 0])
    assert heap.pop_min() == (2, 0)