"""
Tests for HDF5 snapshots.

Run with:
    pytest tests/test_io.py -v
"""

import numpy as np
import pytest

from nucleon_mc.collision.engine import CollisionEngine
from nucleon_mc.io import load_events, load_field, save_events, save_field
from nucleon_mc.physics.random_field import RandomFieldGenerator


def test_field_round_trip(tmp_path, small_generator):
    small_generator.run()
    path = tmp_path / "field.h5"
    save_field(path, small_generator)
    data = load_field(path)

    np.testing.assert_array_equal(data['field'], small_generator.field)
    np.testing.assert_array_equal(data['density'], small_generator.density)
    np.testing.assert_array_equal(data['kernel'], small_generator.kernel.values)
    assert data['grid'] == (64, 64)
    assert data['extent'] == (6.4, 6.4)
    assert data['shape'] == 1.0
    assert data['cut'] == small_generator.cut
    assert data['n_realizations'] == 1


def test_field_without_shape(tmp_path):
    gen = RandomFieldGenerator(grid=(32, 32), extent=(6.4, 6.4), variance=1.0,
                               correlation_length=0.2, kernel_width=0.3, seed=0)
    gen.run()
    path = tmp_path / "field.h5"
    save_field(path, gen)
    assert load_field(path)['shape'] is None


def test_unrun_field_rejected(tmp_path, small_generator):
    with pytest.raises(RuntimeError):
        save_field(tmp_path / "field.h5", small_generator)


def test_events_round_trip(tmp_path, small_config):
    engine = CollisionEngine(small_config)
    rng = np.random.default_rng(1)
    events = [(rng.normal(0, 0.7, (3, 2)), rng.normal(0, 0.7, (4, 2))) for _ in range(3)]
    results = engine.run_events(events)

    path = tmp_path / "events.h5"
    save_events(path, results)
    loaded = load_events(path)

    assert [r.index for r in loaded] == [0, 1, 2]
    for original, restored in zip(results, loaded):
        np.testing.assert_array_equal(original.participants_a, restored.participants_a)
        np.testing.assert_array_equal(original.participants_b, restored.participants_b)
        np.testing.assert_array_equal(original.prefactors_b, restored.prefactors_b)
        assert original.n_participants == restored.n_participants
