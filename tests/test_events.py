import threading

import pytest

from gamenet.events import EventQueue, EventQueueEmpty, EventQueueFull


def test_fifo_order():
    q = EventQueue(4)
    for item in ("a", "b", "c"):
        q.push(item)
    assert [q.pop(), q.pop(), q.pop()] == ["a", "b", "c"]


def test_len_tracks_pushes_and_pops():
    q = EventQueue(3)
    assert len(q) == 0
    q.push(1)
    q.push(2)
    assert len(q) == 2
    q.pop()
    assert len(q) == 1


def test_push_when_full_raises_and_keeps_contents():
    q = EventQueue(2)
    q.push(1)
    q.push(2)
    with pytest.raises(EventQueueFull):
        q.push(3)
    assert len(q) == 2
    assert q.pop() == 1


def test_pop_when_empty_raises():
    q = EventQueue(2)
    with pytest.raises(EventQueueEmpty):
        q.pop()


def test_zero_capacity_rejects_every_push():
    q = EventQueue(0)
    with pytest.raises(EventQueueFull):
        q.push("x")
    assert len(q) == 0


def test_negative_capacity_rejected():
    with pytest.raises(ValueError):
        EventQueue(-1)


def test_wraparound_preserves_order():
    q = EventQueue(3)
    out = []
    for i in range(10):
        q.push(i)
        if len(q) == 3:
            out.append(q.pop())
    while len(q):
        out.append(q.pop())
    assert out == list(range(10))


def test_concurrent_pushes_are_all_kept():
    q = EventQueue(1000)

    def worker(base):
        for i in range(100):
            q.push(base + i)

    threads = [threading.Thread(target=worker, args=(n * 100,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(q) == 800
    items = sorted(q.pop() for _ in range(800))
    assert items == list(range(800))