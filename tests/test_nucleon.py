"""
Tests for nucleon state and positioning.

Run with:
    pytest tests/test_nucleon.py -v
"""

import numpy as np
import pytest

from nucleon_mc.core.nucleon import Nucleon, Nucleus
from nucleon_mc.core.random import RandomStream
from nucleon_mc.physics.profile import NucleonProfile
from nucleon_mc.physics.random_field import RandomFieldGenerator


@pytest.fixture
def profile():
    stream = RandomStream(21)
    field = RandomFieldGenerator(grid=(64, 64), extent=(6.4, 6.4), variance=1.0,
                                 correlation_length=0.2, kernel_width=0.5,
                                 stream=stream, shape=1.0)
    return NucleonProfile(width=0.5, fluctuation=1.0, field_generator=field,
                          cross_section=6.4)


def test_new_nucleon_is_not_participant():
    nucleon = Nucleon()
    assert not nucleon.is_participant
    assert (nucleon.x, nucleon.y) == (0.0, 0.0)


def test_public_state_is_read_only():
    nucleon = Nucleon()
    with pytest.raises(AttributeError):
        nucleon.x = 1.0
    with pytest.raises(AttributeError):
        nucleon.is_participant = True


def test_set_positions_assigns_coordinates(profile):
    nucleus = Nucleus(3)
    xy = np.array([[0.1, -0.2], [1.0, 2.0], [-3.5, 0.0]])
    nucleus.set_positions(xy, profile)

    np.testing.assert_array_equal(nucleus.positions(), xy)
    assert nucleus[1].x == 1.0 and nucleus[1].y == 2.0


def test_repositioning_resets_participation(profile):
    profile.field_generator.run()
    nucleus_a = Nucleus(1)
    nucleus_b = Nucleus(1)
    nucleus_a.set_positions(np.zeros((1, 2)), profile)
    nucleus_b.set_positions(np.zeros((1, 2)), profile)

    # Large parameter: the pair always collides
    profile.cross_sec_param = 20.0
    assert profile.participate(nucleus_a[0], nucleus_b[0])
    assert nucleus_a.n_participants == 1

    nucleus_a.set_positions(np.ones((1, 2)), profile)
    assert not nucleus_a[0].is_participant
    assert nucleus_b[0].is_participant


def test_anchors_drawn_fi_then_fj_within_bounds(profile):
    nucleus = Nucleus(50)
    reference = RandomStream(21)
    nucleus.set_positions(np.zeros((50, 2)), profile)

    (lo1, hi1), (lo2, hi2) = profile.field_generator.anchor_bounds()
    for nucleon in nucleus:
        assert nucleon.fi == reference.integers(lo1, hi1 + 1)
        assert nucleon.fj == reference.integers(lo2, hi2 + 1)
        assert lo1 <= nucleon.fi <= hi1
        assert lo2 <= nucleon.fj <= hi2


def test_repositioning_redraws_anchors(profile):
    nucleus = Nucleus(20)
    nucleus.set_positions(np.zeros((20, 2)), profile)
    first = [(n.fi, n.fj) for n in nucleus]
    nucleus.set_positions(np.zeros((20, 2)), profile)
    second = [(n.fi, n.fj) for n in nucleus]
    assert first != second


@pytest.mark.parametrize("shape", [(2, 2), (3, 3), (3,)])
def test_wrong_position_shape_rejected(profile, shape):
    nucleus = Nucleus(3)
    with pytest.raises(ValueError):
        nucleus.set_positions(np.zeros(shape), profile)


def test_empty_nucleus_rejected():
    with pytest.raises(ValueError):
        Nucleus(0)


def test_container_protocol():
    nucleus = Nucleus(4)
    assert len(nucleus) == 4
    assert len(list(nucleus)) == 4
    assert nucleus.participants().dtype == np.bool_
    assert "A=4" in repr(nucleus)
