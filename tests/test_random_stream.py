"""
Tests for the seeded random stream.

Run with:
    pytest tests/test_random_stream.py -v
"""

import numpy as np

from nucleon_mc.core.random import RandomStream


def test_same_seed_same_sequence():
    a = RandomStream(3)
    b = RandomStream(3)
    np.testing.assert_array_equal(a.normal((4, 4)), b.normal((4, 4)))
    assert a.uniform() == b.uniform()
    assert a.gamma(1.5) == b.gamma(1.5)
    assert a.integers(10, 20) == b.integers(10, 20)


def test_draw_ranges():
    stream = RandomStream(0)
    for _ in range(1000):
        u = stream.uniform()
        assert 0.0 <= u < 1.0
        assert 5 <= stream.integers(5, 8) < 8
        assert stream.gamma(0.5) >= 0.0


def test_spawned_streams_are_independent_and_reproducible():
    children_1 = RandomStream(9).spawn(3)
    children_2 = RandomStream(9).spawn(3)

    draws_1 = [c.uniform() for c in children_1]
    draws_2 = [c.uniform() for c in children_2]
    assert draws_1 == draws_2
    assert len(set(draws_1)) == 3
