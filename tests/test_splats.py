"""Tests for the splat queue and splat / source records."""

import threading

import pytest

from fluidsim.flow.fluid import Source, Splat, SplatQueue


class TestSplat:

    def test_scalar_impulse(self):
        assert Splat(0.5, 0.5, 0.3).impulse == (0.3, 0.0)

    def test_values_normalised_to_float_tuples(self):
        splat = Splat(0.1, 0.2, [1, 2], [1, 0, 0])
        assert splat.impulse == (1.0, 2.0)
        assert splat.color == (1.0, 0.0, 0.0)

    def test_frozen(self):
        with pytest.raises(AttributeError):
            Splat(0.0, 0.0).u = 1.0

    def test_source_defaults(self):
        source = Source(0.5, 0.1)
        assert source.radius == 0.04
        assert source.density == 1.0


class TestSplatQueue:

    def test_fifo(self):
        q = SplatQueue(8)
        for i in range(5):
            q.put(Splat(i / 10, 0.0))
        batch = q.take(3)
        assert [s.u for s in batch] == [0.0, 0.1, 0.2]
        assert [s.u for s in q.take(10)] == [0.3, 0.4]
        assert len(q) == 0

    def test_full_queue_rejects(self):
        q = SplatQueue(2)
        assert q.put(Splat(0.0, 0.0))
        assert q.put(Splat(0.1, 0.0))
        assert not q.put(Splat(0.2, 0.0))
        assert [s.u for s in q.take(5)] == [0.0, 0.1]

    def test_take_empty(self):
        assert SplatQueue(4).take(4) == ()

    def test_clear(self):
        q = SplatQueue(4)
        q.put(Splat(0.0, 0.0))
        q.clear()
        assert len(q) == 0

    def test_concurrent_producers(self):
        q = SplatQueue(1000)

        def produce() -> None:
            for _ in range(100):
                q.put(Splat(0.5, 0.5))

        threads = [threading.Thread(target=produce) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(q.take(1000)) == 400
