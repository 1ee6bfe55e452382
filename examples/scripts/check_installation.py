#!/usr/bin/env python3
"""
Quick script to verify installation.

Run this after setting up the environment to check everything works.
"""

import sys
import time

print("="*70)
print("nucleon_mc Installation Check")
print("="*70)

# 1. Third-party packages
print("\n1. Checking imports...")
try:
    import numpy as np
    print("   ✓ NumPy:", np.__version__)
    import scipy
    print("   ✓ SciPy:", scipy.__version__)
    import numba
    print("   ✓ Numba:", numba.__version__)
    import h5py
    print("   ✓ h5py:", h5py.__version__)
    import yaml
    print("   ✓ PyYAML:", yaml.__version__)
except ImportError as e:
    print(f"   ✗ Import failed: {e}")
    sys.exit(1)

# 2. Package
print("\n2. Checking nucleon_mc imports...")
try:
    from nucleon_mc import (CollisionEngine, GammaInverseCDF, NucleonProfile,
                            ProfileConfig, RandomFieldGenerator)
    print("   ✓ nucleon_mc imported")
except ImportError as e:
    print(f"   ✗ Failed: {e}")
    sys.exit(1)

# 3. Gamma inverse CDF
print("\n3. Checking Gamma inverse CDF...")
icdf = GammaInverseCDF(1.0)
median = icdf(0.0)
print(f"   ✓ k = 1 median: {median:.4f} (expected {np.log(2):.4f})")

# 4. Field generation and JIT compilation
print("\n4. Checking random field and Numba overlap...")
gen = RandomFieldGenerator(grid=(128, 128), extent=(12.8, 12.8), variance=1.0,
                           correlation_length=0.2, kernel_width=0.5, seed=0, shape=1.0)
gen.run()
gen.calculate_fluct_norm(20, 20, 40, 40, 0.0, 0.0)  # warm up

start = time.time()
for _ in range(1000):
    gen.calculate_fluct_norm(20, 20, 40, 40, 0.0, 0.0)
elapsed = (time.time() - start) / 1000
print(f"   ✓ Field variance: {gen.field.var():.3f}")
print(f"   ✓ Overlap: {elapsed*1e6:.1f} µs per call")

# 5. Cross-section calibration
print("\n5. Checking cross-section calibration...")
config = ProfileConfig(grid=(128, 128), extent=(12.8, 12.8), seed=0)
profile = NucleonProfile.from_config(config)
print(f"   ✓ σ = {config.cross_section} fm² -> x = {profile.cross_sec_param:.4f}")

# 6. One event
print("\n6. Checking one event...")
engine = CollisionEngine(config)
rng = np.random.default_rng(0)
result = engine.run_event(rng.normal(0, 1.5, (16, 2)), rng.normal(0, 1.5, (16, 2)))
print(f"   ✓ Participants: {result.n_participants} / 32")

print("\n" + "="*70)
print("Installation check complete!")
print("="*70)
