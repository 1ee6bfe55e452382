"""
Tests for the event driver: draw order, reproducibility, parallel runs.

Run with:
    pytest tests/test_engine.py -v
"""

import numpy as np
import pytest

from nucleon_mc.collision.engine import CollisionEngine, EventResult
from nucleon_mc.config import ProfileConfig

from conftest import RecordingStream


def _events(n_events, n_a=4, n_b=5, spread=0.8, offset=0.0, seed=0):
    rng = np.random.default_rng(seed)
    events = []
    for _ in range(n_events):
        a = rng.normal(0.0, spread, (n_a, 2))
        b = rng.normal(0.0, spread, (n_b, 2))
        b[:, 0] += offset
        events.append((a, b))
    return events


def _assert_same(results_1, results_2):
    assert len(results_1) == len(results_2)
    for r1, r2 in zip(results_1, results_2):
        assert r1.index == r2.index
        np.testing.assert_array_equal(r1.participants_a, r2.participants_a)
        np.testing.assert_array_equal(r1.participants_b, r2.participants_b)
        np.testing.assert_array_equal(r1.prefactors_a, r2.prefactors_a)
        np.testing.assert_array_equal(r1.prefactors_b, r2.prefactors_b)


def test_event_result_shapes(small_config):
    engine = CollisionEngine(small_config)
    (a, b), = _events(1)
    result = engine.run_event(a, b)

    assert isinstance(result, EventResult)
    assert result.participants_a.shape == (4,)
    assert result.participants_b.shape == (5,)
    assert result.prefactors_a.shape == (4,)
    assert np.all(result.prefactors_a > 0)
    assert 0 <= result.n_participants <= 9
    assert engine.profile.field_generator.n_realizations == 1


def test_same_seed_same_events(small_config):
    events = _events(6)
    first = CollisionEngine(small_config).run_events(events)
    second = CollisionEngine(small_config).run_events(events)
    _assert_same(first, second)


def test_different_seed_changes_events(small_config):
    events = _events(6)
    other = ProfileConfig.from_dict(dict(small_config.to_dict(), seed=8))
    first = CollisionEngine(small_config).run_events(events)
    second = CollisionEngine(other).run_events(events)
    assert any(not np.array_equal(r1.prefactors_a, r2.prefactors_a)
               for r1, r2 in zip(first, second))


def test_draw_order_per_event(small_config):
    stream = RecordingStream(small_config.seed)
    engine = CollisionEngine(small_config, stream=stream)
    (a, b), = _events(1)
    engine.run_event(a, b)

    n_nucleons = len(a) + len(b)
    calls = stream.calls
    assert calls[0] == 'normal'
    assert calls[1:1 + 2 * n_nucleons] == ['integers'] * (2 * n_nucleons)
    gammas = calls[1 + 2 * n_nucleons:1 + 3 * n_nucleons]
    assert gammas == ['gamma'] * n_nucleons
    rest = calls[1 + 3 * n_nucleons:]
    assert set(rest) <= {'uniform'}
    assert len(rest) <= len(a) * len(b)


def test_separated_nuclei_never_participate(small_config):
    stream = RecordingStream(small_config.seed)
    engine = CollisionEngine(small_config, stream=stream)
    results = engine.run_events(_events(3, offset=50.0))

    assert all(r.n_participants == 0 for r in results)
    assert 'uniform' not in stream.calls


def test_strong_coupling_makes_everyone_participate(small_config):
    config = ProfileConfig.from_dict(dict(small_config.to_dict(),
                                          cross_section=None, cross_sec_param=25.0))
    engine = CollisionEngine(config)
    positions = np.zeros((3, 2))
    result = engine.run_event(positions, positions)

    assert result.participants_a.all()
    assert result.participants_b.all()
    assert result.n_participants == 6


def test_event_indices(small_config):
    engine = CollisionEngine(small_config)
    results = engine.run_events(_events(3), first_index=10)
    assert [r.index for r in results] == [10, 11, 12]
    assert engine.run_event(*_events(1)[0]).index == 3


def test_worker_config_bakes_in_calibration(small_config):
    engine = CollisionEngine(small_config)
    data = engine.worker_config()
    assert data['cross_section'] is None
    assert data['cross_sec_param'] == pytest.approx(engine.profile.cross_sec_param)
    assert ProfileConfig.from_dict(data).cross_sec_param == data['cross_sec_param']


def test_parallel_run_is_reproducible(small_config):
    events = _events(5)
    engine = CollisionEngine(small_config)
    first = engine.run_events_parallel(events, n_processes=2)
    second = engine.run_events_parallel(events, n_processes=2)

    assert [r.index for r in first] == list(range(5))
    _assert_same(first, second)
