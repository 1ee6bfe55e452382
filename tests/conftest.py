"""Shared fixtures and test doubles."""

import pytest

from nucleon_mc.config import ProfileConfig
from nucleon_mc.core.random import RandomStream
from nucleon_mc.physics.random_field import RandomFieldGenerator


class RecordingStream(RandomStream):
    """RandomStream that logs the kind of every draw."""

    def __init__(self, seed=None):
        super().__init__(seed)
        self.calls = []

    def normal(self, size=None):
        self.calls.append('normal')
        return super().normal(size)

    def uniform(self):
        self.calls.append('uniform')
        return super().uniform()

    def gamma(self, shape):
        self.calls.append('gamma')
        return super().gamma(shape)

    def integers(self, low, high):
        self.calls.append('integers')
        return super().integers(low, high)


class ScriptedStream:
    """Stream returning preset uniforms; counts every draw."""

    def __init__(self, uniforms=(), gamma_value=1.0):
        self.uniforms = list(uniforms)
        self.gamma_value = gamma_value
        self.n_draws = 0

    def uniform(self):
        self.n_draws += 1
        return self.uniforms.pop(0)

    def gamma(self, shape):
        self.n_draws += 1
        return self.gamma_value * shape

    def integers(self, low, high):
        self.n_draws += 1
        return low


class ConstantField:
    """Field generator double with a fixed fluctuation norm."""

    def __init__(self, kf=1.0, stream=None):
        self.kf = kf
        self.stream = stream if stream is not None else ScriptedStream()
        self.n_queries = 0

    def calculate_fluct_norm(self, fiA, fjA, fiB, fjB, dx, dy):
        self.n_queries += 1
        return self.kf

    def draw_anchors(self, stream=None):
        return 0, 0

    def get_field(self, i, j):
        return self.kf


@pytest.fixture
def small_config():
    return ProfileConfig(width=0.5, fluctuation=1.0, cross_section=6.4,
                         grid=(64, 64), extent=(6.4, 6.4),
                         field_variance=1.0, correlation_length=0.2, seed=7)


@pytest.fixture
def small_generator():
    return RandomFieldGenerator(grid=(64, 64), extent=(6.4, 6.4), variance=1.0,
                                correlation_length=0.2, kernel_width=0.5,
                                seed=3, shape=1.0)
