"""
Participants vs Impact Parameter

Samples Pb-Pb-like events at several impact parameters and plots the mean
number of participants. Nucleon positions are drawn from a Woods-Saxon
density here; the engine itself only consumes positions.

Also compares serial and process-pool throughput.

Usage:
    python examples/scripts/participants_vs_impact.py [config.yaml]
"""

import numpy as np
import matplotlib.pyplot as plt
import time
from pathlib import Path
import sys

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from nucleon_mc.collision.engine import CollisionEngine
from nucleon_mc.config import ProfileConfig
from nucleon_mc.io import save_events
from nucleon_mc.logging_config import setup_logging


def sample_woods_saxon(rng, n_nucleons: int, radius: float = 6.62,
                       surface: float = 0.546) -> np.ndarray:
    """
    Transverse positions of a spherical Woods-Saxon nucleus.

    Parameters:
        rng: numpy Generator
        n_nucleons: Mass number
        radius: Half-density radius [fm]
        surface: Surface thickness [fm]

    Returns:
        (n_nucleons, 2) array of (x, y) [fm], centered
    """
    r_max = radius + 10 * surface
    xyz = np.empty((0, 3))
    while len(xyz) < n_nucleons:
        trial = rng.uniform(-r_max, r_max, (4 * n_nucleons, 3))
        r = np.linalg.norm(trial, axis=1)
        keep = rng.random(len(r)) < 1.0 / (1.0 + np.exp((r - radius) / surface))
        xyz = np.vstack([xyz, trial[keep & (r < r_max)]])
    xy = xyz[:n_nucleons, :2]
    return xy - xy.mean(axis=0)


def build_events(n_events: int, impact: float, n_nucleons: int = 208, seed: int = 0):
    """Event positions with nucleus A shifted by -b/2 and B by +b/2."""
    rng = np.random.default_rng(seed)
    events = []
    for _ in range(n_events):
        a = sample_woods_saxon(rng, n_nucleons)
        b = sample_woods_saxon(rng, n_nucleons)
        a[:, 0] -= impact / 2
        b[:, 0] += impact / 2
        events.append((a, b))
    return events


def scan_impact(engine: CollisionEngine, impacts, n_events: int = 20):
    """
    Mean and spread of Npart per impact parameter.

    Returns:
        means, stds: Arrays over impacts
    """
    means, stds = [], []
    for b in impacts:
        results = engine.run_events(build_events(n_events, b, seed=int(10 * b)))
        npart = np.array([r.n_participants for r in results])
        means.append(npart.mean())
        stds.append(npart.std())
        print(f"  b = {b:5.1f} fm: <Npart> = {npart.mean():6.1f} ± {npart.std():5.1f}")
    return np.array(means), np.array(stds)


def compare_throughput(engine: CollisionEngine, n_events: int = 40, n_processes: int = 4):
    """Time serial vs parallel sampling of the same events."""
    events = build_events(n_events, impact=7.0)

    start = time.time()
    engine.run_events(events)
    serial = time.time() - start

    start = time.time()
    results = engine.run_events_parallel(events, n_processes=n_processes)
    parallel = time.time() - start

    print(f"\nThroughput ({n_events} events):")
    print(f"  Serial:   {serial:.2f} s ({n_events/serial:.1f} events/sec)")
    print(f"  Parallel: {parallel:.2f} s on {n_processes} processes "
          f"({n_events/parallel:.1f} events/sec)")
    print(f"  Speedup:  {serial/parallel:.2f}x")
    return results


if __name__ == "__main__":
    setup_logging()

    if len(sys.argv) > 1:
        config = ProfileConfig.from_yaml(sys.argv[1])
    else:
        config = ProfileConfig(seed=42)

    engine = CollisionEngine(config)

    print(f"\n{'='*70}")
    print(f"Participants vs Impact Parameter")
    print(f"{'='*70}")
    print(f"  {engine.profile}")
    print(f"  Cross section: {engine.profile.cross_section():.3f} fm²")
    print(f"{'='*70}\n")

    impacts = np.arange(0.0, 16.0, 2.0)
    means, stds = scan_impact(engine, impacts)

    results = compare_throughput(engine)
    out_dir = Path(__file__).parent
    save_events(out_dir / 'events_b7.h5', results)

    plt.figure(figsize=(10, 6))
    plt.errorbar(impacts, means, yerr=stds, fmt='o-', color='b',
                 linewidth=2, capsize=4, label='Monte Carlo')
    plt.xlabel('Impact parameter [fm]', fontsize=14, fontweight='bold')
    plt.ylabel('Participants', fontsize=14, fontweight='bold')
    plt.title('Pb+Pb participants', fontsize=16, fontweight='bold')
    plt.grid(True, alpha=0.3, linestyle='--')
    plt.legend(fontsize=12)
    plt.tight_layout()

    save_path = out_dir / 'participants_vs_impact.png'
    plt.savefig(save_path, dpi=200, bbox_inches='tight')
    print(f"\nFigure saved: {save_path}")
    plt.show()
