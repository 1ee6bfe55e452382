"""Core module: Random stream and nucleon state."""

from nucleon_mc.core.random import RandomStream
from nucleon_mc.core.nucleon import Nucleon, Nucleus

__all__ = ["RandomStream", "Nucleon", "Nucleus"]
