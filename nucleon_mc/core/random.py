"""
Seeded random stream shared by the field generator, nucleons and profile.

Every random number used in an event comes from one ordered stream, so a
fixed seed reproduces an event bit-for-bit:

    1. grid fill (N1*N2 standard normals, row-major)
    2. anchor integers (fi, fj per nucleon)
    3. one gamma deviate per NucleonProfile.fluctuate()
    4. zero or one uniform per NucleonProfile.participate()
"""

import numpy as np
from typing import List, Optional


class RandomStream:
    """
    Thin wrapper around a NumPy Generator exposing the draws the model needs.

    Usage:
        stream = RandomStream(seed=42)
        noise = stream.normal((256, 256))
        workers = stream.spawn(4)   # independent child streams
    """

    def __init__(self, seed: Optional[int] = None,
                 seed_sequence: Optional[np.random.SeedSequence] = None):
        """
        Initialize stream.

        Parameters:
            seed: Integer seed (None draws fresh OS entropy)
            seed_sequence: Explicit SeedSequence (overrides seed)
        """
        if seed_sequence is None:
            seed_sequence = np.random.SeedSequence(seed)
        self.seed_sequence = seed_sequence
        self.generator = np.random.Generator(np.random.PCG64(seed_sequence))

    def normal(self, size=None):
        """Standard-normal deviates."""
        return self.generator.standard_normal(size)

    def uniform(self) -> float:
        """Uniform real in [0, 1)."""
        return float(self.generator.random())

    def gamma(self, shape: float) -> float:
        """Gamma deviate with unit scale."""
        return float(self.generator.standard_gamma(shape))

    def integers(self, low: int, high: int) -> int:
        """Uniform integer in [low, high)."""
        return int(self.generator.integers(low, high))

    def spawn(self, n: int) -> List["RandomStream"]:
        """Create n statistically independent child streams."""
        return [RandomStream(seed_sequence=child)
                for child in self.seed_sequence.spawn(n)]

    def __repr__(self) -> str:
        return f"RandomStream(entropy={self.seed_sequence.entropy})"
