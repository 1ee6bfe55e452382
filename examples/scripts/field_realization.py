"""
Random Field Realization - Simple Example

Draws one realization of the substructure field and plots the Gaussian
field, the Gamma density used for overlaps, and the smoothing kernel.

This example validates:
    - Field variance matches the target variance
    - Neighbour correlation follows exp(-r²/2lx²)
    - Density has unit mean
    - Kernel integrates to one

Usage:
    python examples/scripts/field_realization.py [config.yaml]
"""

import numpy as np
import matplotlib.pyplot as plt
from pathlib import Path
import sys

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from nucleon_mc.config import ProfileConfig
from nucleon_mc.logging_config import setup_logging
from nucleon_mc.physics.random_field import RandomFieldGenerator


def build_generator(config: ProfileConfig) -> RandomFieldGenerator:
    return RandomFieldGenerator(
        grid=config.grid,
        extent=config.extent,
        variance=config.field_variance,
        correlation_length=config.correlation_length,
        kernel_width=config.kernel_width,
        seed=config.seed,
        shape=config.fluctuation,
    )


def field_statistics(gen: RandomFieldGenerator, n_realizations: int = 20):
    """
    Average field statistics over several realizations.

    Returns:
        variance, neighbour correlation, density mean
    """
    variances, correlations, means = [], [], []
    for _ in range(n_realizations):
        gen.run()
        field = gen.field
        variances.append(field.var())
        correlations.append(np.mean(field * np.roll(field, 1, axis=0)) / field.var())
        means.append(gen.density.mean())
    return np.mean(variances), np.mean(correlations), np.mean(means)


def plot_realization(gen: RandomFieldGenerator, save_path=None):
    """
    Plot field, density and kernel side by side.

    Parameters:
        gen: Generator holding a realization
        save_path: Path to save figure (optional)
    """
    fig, axes = plt.subplots(1, 3, figsize=(16, 5))
    extent = [0, gen.L1, 0, gen.L2]

    im = axes[0].imshow(gen.field.T, origin='lower', extent=extent, cmap='RdBu_r')
    axes[0].set_title('Gaussian field', fontsize=14, fontweight='bold')
    fig.colorbar(im, ax=axes[0], fraction=0.046)

    im = axes[1].imshow(gen.density.T, origin='lower', extent=extent, cmap='viridis')
    axes[1].set_title('Density', fontsize=14, fontweight='bold')
    fig.colorbar(im, ax=axes[1], fraction=0.046)

    half_1 = (gen.cut + 0.5) * gen.dx1
    half_2 = (gen.cut + 0.5) * gen.dx2
    im = axes[2].imshow(gen.kernel.values.T, origin='lower',
                        extent=[-half_1, half_1, -half_2, half_2], cmap='magma')
    axes[2].set_title(f'Kernel (cut = {gen.cut})', fontsize=14, fontweight='bold')
    fig.colorbar(im, ax=axes[2], fraction=0.046)

    for ax in axes:
        ax.set_xlabel('x [fm]', fontsize=12)
        ax.set_ylabel('y [fm]', fontsize=12)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=200, bbox_inches='tight')
        print(f"Figure saved: {save_path}")

    return fig


if __name__ == "__main__":
    setup_logging()

    if len(sys.argv) > 1:
        config = ProfileConfig.from_yaml(sys.argv[1])
    else:
        config = ProfileConfig(seed=42)

    gen = build_generator(config)
    variance, correlation, density_mean = field_statistics(gen)

    expected_corr = np.exp(-gen.dx1**2 / (2 * config.correlation_length**2))

    print(f"\n{'='*70}")
    print(f"Results:")
    print(f"{'='*70}")
    print(f"  Grid: {gen.N1} x {gen.N2}, spacing {gen.dx1:.3f} fm")
    print(f"  Field variance: {variance:.4f} (target {config.field_variance})")
    print(f"  Neighbour correlation: {correlation:.4f} (expected {expected_corr:.4f})")
    print(f"  Density mean: {density_mean:.4f} (expected 1.0)")
    print(f"  Kernel integral: {gen.kernel.integral():.6f}")
    print(f"{'='*70}\n")

    save_path = Path(__file__).parent / 'field_realization.png'
    plot_realization(gen, save_path=save_path)
    plt.show()
