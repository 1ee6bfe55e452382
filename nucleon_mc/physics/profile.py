"""
Nucleon thickness profile and pairwise participation sampling.

Every nucleon has a Gaussian transverse thickness of width w, truncated at
a fixed radius and scaled by a Gamma-distributed fluctuation:

    T(r) = γ/(2π·w²) · exp(-r²/(2·w²)),   γ ~ Gamma(k, 1/k)

Two nucleons at impact parameter b collide with probability

    P(b) = 1 - exp(-Kf · exp(x - b²/(4·w²)))

where Kf is the overlap of the nucleons' patches of the sub-nucleon random
field and x ("cross_sec_param") is calibrated so that, at Kf = 1, the
b-integrated probability reproduces the inelastic cross section σ_NN:

    σ_NN = ∫ 2πb·P(b) db  (b < b_max)
         = 4π·w² · [T + E1(eˣ) - E1(e^(x - T))],   T = b_max²/(4·w²)
"""

import logging
import math
import numpy as np
import scipy.special
from scipy.optimize import brentq
from typing import Optional

from nucleon_mc.core.random import RandomStream
from nucleon_mc.core.nucleon import Nucleon
from nucleon_mc.physics.fast_exp import FastExp
from nucleon_mc.physics.random_field import RandomFieldGenerator

logger = logging.getLogger(__name__)

# Truncation radius and max impact parameter in units of the nucleon width
TRUNC_RADIUS_WIDTHS = 3.0
MAX_IMPACT_WIDTHS = 6.0

# Search bracket for the cross section parameter
CROSS_SEC_PARAM_BRACKET = (-10.0, 20.0)

# math.exp overflows just above 709.78; exp(709) already exceeds any uniform
MAX_EXP_ARG = 709.0


def cross_section_from_param(cross_sec_param: float, width_sqr: float,
                             max_impact_sqr: float) -> float:
    """
    Inelastic cross section [fm²] implied by a cross section parameter.

    Parameters:
        cross_sec_param: Dimensionless parameter x
        width_sqr: Nucleon width squared w² [fm²]
        max_impact_sqr: Maximum impact parameter squared [fm²]

    Returns:
        σ_NN [fm²] at unit fluctuation norm
    """
    t_max = 0.25 * max_impact_sqr / width_sqr
    c = math.exp(cross_sec_param)
    integral = (t_max + scipy.special.exp1(c)
                - scipy.special.exp1(c * math.exp(-t_max)))
    return 4.0 * math.pi * width_sqr * float(integral)


def calibrate_cross_sec_param(cross_section: float, width_sqr: float,
                              max_impact_sqr: float) -> float:
    """
    Solve σ(x) = cross_section for the cross section parameter x.

    Raises:
        ValueError: if the cross section is not reachable for this width and
                    max impact parameter
    """
    if not cross_section > 0:
        raise ValueError(f"Cross section must be positive, got {cross_section}")

    lo, hi = CROSS_SEC_PARAM_BRACKET
    sigma_lo = cross_section_from_param(lo, width_sqr, max_impact_sqr)
    sigma_hi = cross_section_from_param(hi, width_sqr, max_impact_sqr)
    if not sigma_lo < cross_section < sigma_hi:
        raise ValueError(
            f"Unable to fit cross section {cross_section} fm² "
            f"(reachable range [{sigma_lo:.4g}, {sigma_hi:.4g}] fm²) -- "
            f"nucleon width too small?")

    return brentq(
        lambda x: cross_section_from_param(x, width_sqr, max_impact_sqr) - cross_section,
        lo, hi, xtol=1e-12)


class NucleonProfile:
    """
    Properties shared by all nucleons: thickness profile, cross section and
    fluctuations. Samples nucleon-nucleon participation.

    Usage:
        profile = NucleonProfile.from_config(config)
        profile.field_generator.run()
        profile.fluctuate()
        t = profile.thickness(0.25)
        hit = profile.participate(nucleon_a, nucleon_b)
    """

    def __init__(self, width: float, fluctuation: float,
                 field_generator,
                 cross_section: Optional[float] = None,
                 cross_sec_param: Optional[float] = None,
                 trunc_radius: Optional[float] = None,
                 max_impact: Optional[float] = None,
                 stream: Optional[RandomStream] = None):
        """
        Initialize profile.

        Parameters:
            width: Gaussian nucleon width w [fm]
            fluctuation: Gamma shape k of the per-nucleon fluctuation
            field_generator: RandomFieldGenerator supplying Kf
            cross_section: Target inelastic σ_NN [fm²] (calibrates x)
            cross_sec_param: Pre-tuned x (instead of cross_section)
            trunc_radius: Thickness truncation radius [fm] (default 3w)
            max_impact: Max impact parameter for participation [fm] (default 6w)
            stream: Random stream (the field generator's if None)
        """
        if not width > 0:
            raise ValueError(f"Nucleon width must be positive, got {width}")
        if not fluctuation > 0:
            raise ValueError(f"Fluctuation shape must be positive, got {fluctuation}")
        if (cross_section is None) == (cross_sec_param is None):
            raise ValueError("Give exactly one of cross_section or cross_sec_param")

        if trunc_radius is None:
            trunc_radius = TRUNC_RADIUS_WIDTHS * width
        if max_impact is None:
            max_impact = MAX_IMPACT_WIDTHS * width
        if not trunc_radius > 0 or not max_impact > 0:
            raise ValueError(f"Truncation radius and max impact must be positive, "
                             f"got {trunc_radius}, {max_impact}")

        self.width_sqr = float(width)**2
        self.trunc_radius_sqr = float(trunc_radius)**2
        self.max_impact_sqr = float(max_impact)**2
        self.fluctuation = float(fluctuation)

        # Cached -1/(2w²) for the thickness exponential
        self._neg_one_div_two_width_sqr = -0.5 / self.width_sqr

        if cross_sec_param is None:
            cross_sec_param = calibrate_cross_sec_param(
                cross_section, self.width_sqr, self.max_impact_sqr)
            logger.info("Calibrated cross_sec_param=%.6f for σ_NN=%g fm²",
                        cross_sec_param, cross_section)
        self.cross_sec_param = float(cross_sec_param)

        self.field_generator = field_generator
        if stream is None:
            stream = field_generator.stream
        self.stream = stream

        self.fast_exp = FastExp(self._neg_one_div_two_width_sqr * self.trunc_radius_sqr,
                                0.0, 1000)

        self.prefactor = 1.0 / (2.0 * math.pi * self.width_sqr)

    @classmethod
    def from_config(cls, config, stream: Optional[RandomStream] = None) -> "NucleonProfile":
        """
        Build a profile and its field generator from a ProfileConfig.

        Parameters:
            config: nucleon_mc.config.ProfileConfig
            stream: Stream shared by field and profile (seeded from config if None)
        """
        if stream is None:
            stream = RandomStream(config.seed)

        field = RandomFieldGenerator(
            grid=config.grid,
            extent=config.extent,
            variance=config.field_variance,
            correlation_length=config.correlation_length,
            kernel_width=config.kernel_width,
            stream=stream,
            shape=config.fluctuation,
        )
        return cls(width=config.width,
                   fluctuation=config.fluctuation,
                   field_generator=field,
                   cross_section=None if config.cross_sec_param is not None
                   else config.cross_section,
                   cross_sec_param=config.cross_sec_param,
                   trunc_radius=config.trunc_radius,
                   max_impact=config.max_impact,
                   stream=stream)

    def radius(self) -> float:
        """Thickness truncation radius [fm]."""
        return math.sqrt(self.trunc_radius_sqr)

    def max_impact(self) -> float:
        """Maximum impact parameter for participation [fm]."""
        return math.sqrt(self.max_impact_sqr)

    def cross_section(self) -> float:
        """σ_NN [fm²] implied by the current cross_sec_param at Kf = 1."""
        return cross_section_from_param(self.cross_sec_param, self.width_sqr,
                                        self.max_impact_sqr)

    def fluctuate(self) -> float:
        """
        Redraw the thickness prefactor γ/(2π·w²) with γ ~ Gamma(k, 1/k).

        Call once per nucleon before evaluating its thickness.

        Returns:
            New prefactor
        """
        gamma = self.stream.gamma(self.fluctuation) / self.fluctuation
        self.prefactor = gamma / (2.0 * math.pi * self.width_sqr)
        return self.prefactor

    def thickness(self, distance_sqr):
        """
        Thickness at squared distance(s) from the nucleon center.

        Parameters:
            distance_sqr: Scalar or array of r² [fm²]

        Returns:
            T(r) [1/fm²], zero beyond the truncation radius
        """
        if np.ndim(distance_sqr) == 0:
            if distance_sqr > self.trunc_radius_sqr:
                return 0.0
            return self.prefactor * self.fast_exp(
                self._neg_one_div_two_width_sqr * distance_sqr)

        d2 = np.asarray(distance_sqr, dtype=np.float64)
        inside = d2 <= self.trunc_radius_sqr
        result = np.zeros_like(d2)
        result[inside] = self.prefactor * self.fast_exp(
            self._neg_one_div_two_width_sqr * d2[inside])
        return result

    def substructure(self, ic: int, jc: int, i: int, j: int) -> float:
        """Field value at offset (i, j) from anchor (ic, jc)."""
        return self.field_generator.get_field(ic + i, jc + j)

    def participate(self, A: Nucleon, B: Nucleon) -> bool:
        """
        Randomly decide whether a pair of nucleons collides.

        Consumes no random numbers if both are already participants or the
        pair is beyond the max impact parameter, otherwise exactly one
        uniform.

        Returns:
            True if the pair participates
        """
        if A.is_participant and B.is_participant:
            return True

        dx = A.x - B.x
        dy = A.y - B.y
        distance_sqr = dx * dx + dy * dy

        if distance_sqr > self.max_impact_sqr:
            return False

        # Sample 1 - P = exp(-Kf·exp(x - b²/4w²)) < U instead of P > 1 - U
        kf = self.field_generator.calculate_fluct_norm(A.fi, A.fj, B.fi, B.fj, dx, dy)
        exponent = -kf * math.exp(self.cross_sec_param - 0.25 * distance_sqr / self.width_sqr)

        # Negative Kf (raw Gaussian field) can push the exponent past float range
        if exponent > MAX_EXP_ARG:
            one_minus_prob = math.inf
        else:
            one_minus_prob = math.exp(exponent)

        if one_minus_prob < self.stream.uniform():
            # Participation is only ever set here (see Nucleon._set_participant)
            A._set_participant()
            B._set_participant()
            return True

        return False

    def __repr__(self) -> str:
        return (f"NucleonProfile(width={math.sqrt(self.width_sqr):.3f} fm, "
                f"k={self.fluctuation}, cross_sec_param={self.cross_sec_param:.4f})")


# ============================================================================
# Example Usage
# ============================================================================

if __name__ == "__main__":
    width = 0.5
    for sigma in [4.0, 6.4, 7.0]:
        x = calibrate_cross_sec_param(sigma, width**2, (MAX_IMPACT_WIDTHS * width)**2)
        print(f"  σ_NN = {sigma:4.1f} fm²  ->  cross_sec_param = {x:8.4f}")
