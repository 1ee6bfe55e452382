"""
2-D periodic Gaussian random field for sub-nucleon density fluctuations.

One realization per event is synthesized spectrally:

    1. white noise w(x) ~ N(0, 1) on an N1×N2 grid
    2. W(k) = FFT[w]
    3. Φ(k) = Var_k · exp(½·coeff_k·(k1² + k2²)) · W(k)
    4. φ(x) = IFFT[Φ] (unnormalized, real part)

with
    Var_k   = sqrt(σ² · 2π·lx² / (N1·N2·L1·L2))
    coeff_k = -2π²·lx²

so that φ is homogeneous with variance σ² and Gaussian two-point function
<φ(x)φ(x+r)> = σ²·exp(-r²/(2·lx²)).

Each nucleon reads a (2·cut+1)² patch of the field around its anchor cell.
The overlap of two patches, weighted by a normalized Gaussian smoothing
kernel of width w, gives the fluctuation norm

    Kf = Σ_{|i|,|j|≤cut} ρ(A + (i,j)) · ρ(B + (i,j)) · K(i, j)·ΔA

which approximates the continuum convolution ∫ρ_A ρ_B exp(-r²/w²)/(πw²) d²r.
"""

import logging
import numpy as np
import numba
from typing import Optional, Tuple

from nucleon_mc.core.random import RandomStream
from nucleon_mc.physics.backends import (
    MonotoneInterpolator,
    ScipyFFT,
    SpecialFunctions,
    SpectralTransform2D,
)
from nucleon_mc.physics.gamma_icdf import GammaInverseCDF

logger = logging.getLogger(__name__)


class KernelTable:
    """
    Truncated, normalized Gaussian smoothing kernel on the field grid.

    Indexed by signed cell offsets: ``table[i, j]`` for |i|, |j| <= cut.
    Values are a density [1/fm²]; ``weights`` are values × cell area and sum
    to one.
    """

    def __init__(self, cut: int, width: float, dx1: float, dx2: float):
        """
        Parameters:
            cut: Half-width of the table in cells
            width: Kernel width w [fm]
            dx1, dx2: Grid spacing along each axis [fm]
        """
        self.cut = int(cut)
        self.width = float(width)
        self.cell_area = dx1 * dx2

        offsets = np.arange(-self.cut, self.cut + 1)
        r1 = offsets[:, None] * dx1
        r2 = offsets[None, :] * dx2
        values = np.exp(-(r1**2 + r2**2) / self.width**2) / (np.pi * self.width**2)

        # Renormalize away the truncation and discretization error
        values /= values.sum() * self.cell_area

        self.values = values
        self.weights = values * self.cell_area

    @property
    def size(self) -> int:
        return 2 * self.cut + 1

    def __getitem__(self, offset: Tuple[int, int]) -> float:
        i, j = offset
        if abs(i) > self.cut or abs(j) > self.cut:
            raise IndexError(f"Kernel offset ({i}, {j}) outside ±{self.cut}")
        return float(self.values[i + self.cut, j + self.cut])

    def integral(self) -> float:
        """Σ values × cell area (1 up to rounding)."""
        return float(self.values.sum() * self.cell_area)

    def __repr__(self) -> str:
        return f"KernelTable(cut={self.cut}, width={self.width}, size={self.size}²)"


@numba.njit(fastmath=True, cache=True)
def window_overlap(density: np.ndarray, weights: np.ndarray, cut: int,
                   fiA: int, fjA: int, fiB: int, fjB: int) -> float:
    """
    Kernel-weighted overlap of two field patches.

    Parameters:
        density: (N1, N2) field realization
        weights: (2·cut+1, 2·cut+1) kernel weights (sum to 1)
        cut: Half-width of the window in cells
        fiA, fjA: Anchor cell of patch A
        fiB, fjB: Anchor cell of patch B

    Returns:
        Σ ρ(A+o)·ρ(B+o)·weight(o) over the window
    """
    n1, n2 = density.shape
    total = 0.0
    for i in range(-cut, cut + 1):
        ia = (fiA + i) % n1
        ib = (fiB + i) % n1
        for j in range(-cut, cut + 1):
            ja = (fjA + j) % n2
            jb = (fjB + j) % n2
            total += density[ia, ja] * density[ib, jb] * weights[i + cut, j + cut]
    return total


class RandomFieldGenerator:
    """
    Periodic, homogeneous 2-D Gaussian random field with a smoothing kernel.

    Usage:
        gen = RandomFieldGenerator(grid=(256, 256), extent=(25.6, 25.6),
                                   variance=1.0, correlation_length=0.2,
                                   kernel_width=0.5, seed=1, shape=1.0)
        gen.run()                         # new realization
        phi = gen.get_field(10, 20)
        Kf = gen.calculate_fluct_norm(100, 100, 102, 99, dx, dy)
    """

    def __init__(self, grid: Tuple[int, int], extent: Tuple[float, float],
                 variance: float, correlation_length: float,
                 kernel_width: float,
                 stream: Optional[RandomStream] = None,
                 seed: Optional[int] = None,
                 shape: Optional[float] = None,
                 transform: Optional[SpectralTransform2D] = None,
                 special: Optional[SpecialFunctions] = None,
                 interpolator: Optional[MonotoneInterpolator] = None):
        """
        Initialize generator.

        Parameters:
            grid: (N1, N2) number of cells
            extent: (L1, L2) physical size of the periodic box [fm]
            variance: Target variance σ² of the Gaussian field
            correlation_length: Correlation length lx [fm]
            kernel_width: Smoothing kernel width w [fm]
            stream: Random stream (a new one seeded with ``seed`` if None)
            seed: Seed used only when ``stream`` is None
            shape: Gamma shape k; if set, overlaps are computed on the
                   unit-mean Gamma density icdf(φ/σ) instead of φ
            transform: 2-D spectral backend (scipy.fft by default)
            special: Special-function backend for the inverse CDF
            interpolator: Interpolator for the inverse CDF
        """
        N1, N2 = (int(n) for n in grid)
        L1, L2 = (float(l) for l in extent)

        if N1 <= 0 or N2 <= 0:
            raise ValueError(f"Grid size must be positive, got ({N1}, {N2})")
        if L1 <= 0 or L2 <= 0:
            raise ValueError(f"Grid extent must be positive, got ({L1}, {L2})")
        if not variance > 0:
            raise ValueError(f"Field variance must be positive, got {variance}")
        if not correlation_length > 0:
            raise ValueError(f"Correlation length must be positive, got {correlation_length}")
        if not kernel_width > 0:
            raise ValueError(f"Kernel width must be positive, got {kernel_width}")

        self.N1, self.N2 = N1, N2
        self.L1, self.L2 = L1, L2
        self.variance = float(variance)
        self.correlation_length = float(correlation_length)
        self.kernel_width = float(kernel_width)

        self.stream = stream if stream is not None else RandomStream(seed)
        self.transform = transform if transform is not None else ScipyFFT()

        # Grid spacing
        self.dx1 = L1 / N1
        self.dx2 = L2 / N2

        # Spectral scale and Gaussian decay
        lx = self.correlation_length
        self.var_k = np.sqrt(self.variance * 2.0 * np.pi * lx**2 / (N1 * N2 * L1 * L2))
        self.coeff_k = -2.0 * np.pi**2 * lx**2
        self._propagator = self._build_propagator()

        # Smoothing kernel (3σ rule in grid units along the first axis)
        self.cut = int(3.0 * self.kernel_width * N1 / L1)
        if 2 * self.cut + 1 > min(N1, N2):
            raise ValueError(f"Grid ({N1}, {N2}) too small for a kernel window of "
                             f"{2 * self.cut + 1} cells")
        self.kernel = KernelTable(self.cut, self.kernel_width, self.dx1, self.dx2)

        # Optional Gamma density view
        self.shape = None if shape is None else float(shape)
        self.icdf = None
        if self.shape is not None:
            self.icdf = GammaInverseCDF(self.shape, special=special,
                                        interpolator=interpolator)

        # Latest realization
        self.field = None
        self.density = None
        self.n_realizations = 0

        logger.info("Random field: grid=%dx%d, extent=%gx%g fm, variance=%g, "
                    "lx=%g fm, kernel w=%g fm (cut=%d), gamma shape=%s",
                    N1, N2, L1, L2, self.variance, lx, self.kernel_width,
                    self.cut, self.shape)

    def _build_propagator(self) -> np.ndarray:
        """Var_k·exp(½·coeff_k·(s1² + s2²)) with wrap-to-negative frequencies."""
        i = np.arange(self.N1)
        j = np.arange(self.N2)
        s1 = np.minimum(i, self.N1 - i) / self.L1
        s2 = np.minimum(j, self.N2 - j) / self.L2
        nr2 = 0.5 * self.coeff_k * (s1[:, None]**2 + s2[None, :]**2)
        return self.var_k * np.exp(nr2)

    def real_space_white_noise(self) -> np.ndarray:
        """Unit-variance white noise, filled row-major from the stream."""
        noise = self.stream.normal((self.N1, self.N2))
        return noise.astype(np.complex128)

    def apply_k_space_propagation(self, phi_k: np.ndarray) -> np.ndarray:
        """Shape the spectrum in place and return it."""
        phi_k *= self._propagator
        return phi_k

    def run(self) -> np.ndarray:
        """
        Generate a new realization.

        Returns:
            (N1, N2) real field φ
        """
        phi_x = self.real_space_white_noise()
        phi_k = self.transform.forward(phi_x)
        phi_k = self.apply_k_space_propagation(phi_k)
        phi_x = self.transform.inverse(phi_k)

        self.field = np.ascontiguousarray(phi_x.real)
        if self.icdf is not None:
            self.density = self.icdf(self.field / np.sqrt(self.variance))
        else:
            self.density = self.field
        self.n_realizations += 1
        return self.field

    def _require_realization(self):
        if self.field is None:
            raise RuntimeError("No field realization yet; call run() first")

    def get_field(self, i: int, j: int) -> float:
        """Gaussian field value at cell (i mod N1, j mod N2)."""
        self._require_realization()
        return float(self.field[i % self.N1, j % self.N2])

    def get_density(self, i: int, j: int) -> float:
        """Density used in overlaps at cell (i mod N1, j mod N2)."""
        self._require_realization()
        return float(self.density[i % self.N1, j % self.N2])

    def substructure(self, ic: int, jc: int, i: int, j: int) -> float:
        """Field value at offset (i, j) from anchor (ic, jc)."""
        return self.get_field(ic + i, jc + j)

    def calculate_fluct_norm(self, fiA: int, fjA: int, fiB: int, fjB: int,
                             dx: float, dy: float) -> float:
        """
        Kernel-weighted overlap Kf of the patches anchored at A and B.

        The sum runs over the density view: the unit-mean Gamma density
        icdf(φ/σ) when a shape is set, otherwise the Gaussian field φ itself.
        get_field() always returns φ, so with a shape set Kf is not built
        from get_field() values.

        Parameters:
            fiA, fjA: Anchor cell of nucleon A
            fiB, fjB: Anchor cell of nucleon B
            dx, dy: Transverse separation A - B [fm] (unused by the grid sum)

        Returns:
            Kf
        """
        self._require_realization()
        return window_overlap(self.density, self.kernel.weights, self.cut,
                              fiA, fjA, fiB, fjB)

    def anchor_bounds(self) -> Tuple[Tuple[int, int], Tuple[int, int]]:
        """Inclusive anchor ranges keeping every window inside the grid."""
        return ((self.cut, self.N1 - 1 - self.cut),
                (self.cut, self.N2 - 1 - self.cut))

    def draw_anchors(self, stream: Optional[RandomStream] = None) -> Tuple[int, int]:
        """
        Draw a patch anchor (fi, fj), fi first.

        Parameters:
            stream: Stream to draw from (the generator's own if None)
        """
        stream = stream if stream is not None else self.stream
        (lo1, hi1), (lo2, hi2) = self.anchor_bounds()
        fi = stream.integers(lo1, hi1 + 1)
        fj = stream.integers(lo2, hi2 + 1)
        return fi, fj

    def __repr__(self) -> str:
        return (f"RandomFieldGenerator(grid=({self.N1}, {self.N2}), "
                f"extent=({self.L1}, {self.L2}), variance={self.variance}, "
                f"lx={self.correlation_length}, cut={self.cut})")


# ============================================================================
# Example Usage
# ============================================================================

if __name__ == "__main__":
    gen = RandomFieldGenerator(grid=(256, 256), extent=(25.6, 25.6),
                               variance=1.0, correlation_length=0.4,
                               kernel_width=0.5, seed=1, shape=1.0)

    samples = []
    for _ in range(10):
        samples.append(gen.run().ravel())
    samples = np.concatenate(samples)

    print(f"\n{gen}")
    print(f"  Kernel integral: {gen.kernel.integral():.6f}")
    print(f"  Field variance: {np.var(samples):.4f} (target {gen.variance})")
    print(f"  Density mean: {np.mean(gen.density):.4f} (expected ~1)")

    (lo, hi), _ = gen.anchor_bounds()
    print(f"  Anchor range: [{lo}, {hi}]")
    print(f"  Self-overlap Kf at ({lo}, {lo}): "
          f"{gen.calculate_fluct_norm(lo, lo, lo, lo, 0.0, 0.0):.4f}")
