"""
NUCLEON_MC: Nucleon participation with sub-nucleon field fluctuations

Monte Carlo sampling of nucleon-nucleon participation for one collision
event, using a calibrated inelastic cross section and a spatially
correlated random density field.

Modules:
    core: Random stream, nucleon and nucleus state
    physics: Random field, Gamma inverse CDF, thickness profile
    collision: Event driver (serial and multiprocess)
    config: YAML configuration
    io: HDF5 snapshots
"""

__version__ = "0.1.0"

from nucleon_mc.core.random import RandomStream
from nucleon_mc.core.nucleon import Nucleon, Nucleus
from nucleon_mc.physics.gamma_icdf import GammaInverseCDF
from nucleon_mc.physics.random_field import RandomFieldGenerator, KernelTable
from nucleon_mc.physics.profile import NucleonProfile
from nucleon_mc.collision.engine import CollisionEngine, EventResult
from nucleon_mc.config import ProfileConfig

__all__ = [
    "RandomStream",
    "Nucleon",
    "Nucleus",
    "GammaInverseCDF",
    "RandomFieldGenerator",
    "KernelTable",
    "NucleonProfile",
    "CollisionEngine",
    "EventResult",
    "ProfileConfig",
]
