"""
Pluggable numeric backends.

The field generator and the inverse-CDF table only talk to these three
interfaces, so another FFT or special-function library can be dropped in
without touching the algorithms:

    SpectralTransform2D   forward / unnormalized inverse 2-D DFT
    SpecialFunctions      regularized lower incomplete gamma, normal upper tail
    MonotoneInterpolator  build an evaluator from a monotone table
"""

import numpy as np
import scipy.fft
import scipy.special
from scipy.interpolate import PchipInterpolator
from typing import Callable, Protocol


class SpectralTransform2D(Protocol):
    def forward(self, a: np.ndarray) -> np.ndarray:
        """Forward transform, exp(-2πi k·x), no normalization."""
        ...

    def inverse(self, a: np.ndarray) -> np.ndarray:
        """Inverse transform, exp(+2πi k·x), no normalization."""
        ...


class SpecialFunctions(Protocol):
    def gamma_cdf(self, k: float, x: np.ndarray) -> np.ndarray:
        """Regularized lower incomplete gamma function P(k, x)."""
        ...

    def normal_sf(self, g):
        """Standard-normal upper tail Q(g) = 1 - Φ(g)."""
        ...


class MonotoneInterpolator(Protocol):
    def build(self, xp: np.ndarray, fp: np.ndarray) -> Callable[[np.ndarray], np.ndarray]:
        """Return an evaluator of the table (xp strictly increasing)."""
        ...


class ScipyFFT:
    """scipy.fft backend (default)."""

    def __init__(self, workers: int = 1):
        self.workers = workers

    def forward(self, a: np.ndarray) -> np.ndarray:
        return scipy.fft.fft2(a, workers=self.workers)

    def inverse(self, a: np.ndarray) -> np.ndarray:
        # norm="forward" leaves the inverse without the 1/N factor
        return scipy.fft.ifft2(a, norm="forward", workers=self.workers)


class NumpyFFT:
    """numpy.fft backend."""

    def forward(self, a: np.ndarray) -> np.ndarray:
        return np.fft.fft2(a)

    def inverse(self, a: np.ndarray) -> np.ndarray:
        return np.fft.ifft2(a, norm="forward")


class ScipySpecialFunctions:
    """scipy.special backend."""

    def gamma_cdf(self, k: float, x: np.ndarray) -> np.ndarray:
        return scipy.special.gammainc(k, x)

    def normal_sf(self, g):
        # ndtr(-g) keeps precision in the upper tail where 1 - ndtr(g) cancels
        return scipy.special.ndtr(-np.asarray(g, dtype=np.float64))


class LinearInterpolator:
    """Piecewise-linear interpolation (np.interp)."""

    def build(self, xp: np.ndarray, fp: np.ndarray) -> Callable[[np.ndarray], np.ndarray]:
        xp = np.asarray(xp, dtype=np.float64)
        fp = np.asarray(fp, dtype=np.float64)
        return lambda x: np.interp(x, xp, fp)


class PchipMonotoneInterpolator:
    """Monotone cubic (PCHIP) interpolation."""

    def build(self, xp: np.ndarray, fp: np.ndarray) -> Callable[[np.ndarray], np.ndarray]:
        return PchipInterpolator(xp, fp, extrapolate=False)
