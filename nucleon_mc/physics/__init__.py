"""Physics module: Random field, inverse CDF, thickness profile."""

from nucleon_mc.physics.gamma_icdf import GammaInverseCDF
from nucleon_mc.physics.random_field import RandomFieldGenerator, KernelTable
from nucleon_mc.physics.fast_exp import FastExp
from nucleon_mc.physics.profile import NucleonProfile

__all__ = ["GammaInverseCDF", "RandomFieldGenerator", "KernelTable", "FastExp",
           "NucleonProfile"]
