"""
HDF5 snapshots of field realizations and event records.

Layout of a field file:

    /field      (N1, N2) Gaussian realization
    /density    (N1, N2) density used for overlaps
    /kernel     (2·cut+1, 2·cut+1) kernel density
    attrs: grid, extent, variance, correlation_length, kernel_width, cut,
           shape (-1 if unset), n_realizations

Layout of an events file: one group per event, '/event_000000', ..., holding
participant masks and prefactors for both nuclei.
"""

import logging
import h5py
import numpy as np
from pathlib import Path
from typing import Iterable, List, Union

from nucleon_mc.collision.engine import EventResult
from nucleon_mc.physics.random_field import RandomFieldGenerator

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def save_field(path: PathLike, generator: RandomFieldGenerator):
    """
    Write the latest realization of a generator.

    Raises:
        RuntimeError: if the generator has not run yet
    """
    if generator.field is None:
        raise RuntimeError("No field realization yet; call run() first")

    with h5py.File(path, 'w') as f:
        f.create_dataset('field', data=generator.field, compression='gzip')
        f.create_dataset('density', data=generator.density, compression='gzip')
        f.create_dataset('kernel', data=generator.kernel.values)
        f.attrs['grid'] = (generator.N1, generator.N2)
        f.attrs['extent'] = (generator.L1, generator.L2)
        f.attrs['variance'] = generator.variance
        f.attrs['correlation_length'] = generator.correlation_length
        f.attrs['kernel_width'] = generator.kernel_width
        f.attrs['cut'] = generator.cut
        f.attrs['shape'] = -1.0 if generator.shape is None else generator.shape
        f.attrs['n_realizations'] = generator.n_realizations

    logger.info("Saved field snapshot to %s", path)


def load_field(path: PathLike) -> dict:
    """
    Read a field snapshot.

    Returns:
        Dict with 'field', 'density', 'kernel' arrays and the attributes
    """
    with h5py.File(path, 'r') as f:
        data = {name: f[name][...] for name in ('field', 'density', 'kernel')}
        for key, value in f.attrs.items():
            data[key] = value

    data['grid'] = tuple(int(n) for n in data['grid'])
    data['extent'] = tuple(float(l) for l in data['extent'])
    data['shape'] = None if data['shape'] < 0 else float(data['shape'])
    return data


def save_events(path: PathLike, results: Iterable[EventResult]):
    """Write event records, one group per event."""
    n = 0
    with h5py.File(path, 'w') as f:
        for result in results:
            group = f.create_group(f'event_{result.index:06d}')
            group.attrs['index'] = result.index
            group.attrs['n_participants'] = result.n_participants
            group.create_dataset('participants_a', data=result.participants_a)
            group.create_dataset('participants_b', data=result.participants_b)
            group.create_dataset('prefactors_a', data=result.prefactors_a)
            group.create_dataset('prefactors_b', data=result.prefactors_b)
            n += 1

    logger.info("Saved %d events to %s", n, path)


def load_events(path: PathLike) -> List[EventResult]:
    """Read event records written by save_events, in index order."""
    results = []
    with h5py.File(path, 'r') as f:
        for name in sorted(f.keys()):
            group = f[name]
            results.append(EventResult(
                index=int(group.attrs['index']),
                participants_a=np.asarray(group['participants_a'][...], dtype=np.bool_),
                participants_b=np.asarray(group['participants_b'][...], dtype=np.bool_),
                prefactors_a=group['prefactors_a'][...],
                prefactors_b=group['prefactors_b'][...],
            ))
    return results
