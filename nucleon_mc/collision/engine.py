"""
Event driver for nucleon participation sampling.

Runs the per-event sequence on one random stream:

    1. new random field realization
    2. place nucleus A then nucleus B (anchor draws)
    3. fluctuate every nucleon (A then B)
    4. participate() for every (a, b) pair, A-major

Nucleon positions (already shifted by the impact parameter) come from the
caller. Parallel runs give each worker process its own generator, profile
and child stream, so results depend only on the seed and the worker count.
"""

import logging
import numpy as np
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from tqdm import tqdm

from nucleon_mc.config import ProfileConfig
from nucleon_mc.core.nucleon import Nucleus
from nucleon_mc.core.random import RandomStream
from nucleon_mc.physics.profile import NucleonProfile

logger = logging.getLogger(__name__)

Positions = np.ndarray
EventPositions = Tuple[Positions, Positions]


@dataclass
class EventResult:
    """Outcome of one event."""

    index: int
    participants_a: np.ndarray
    participants_b: np.ndarray
    prefactors_a: np.ndarray
    prefactors_b: np.ndarray

    @property
    def n_participants(self) -> int:
        return int(self.participants_a.sum() + self.participants_b.sum())


class CollisionEngine:
    """
    Samples participants for events built from externally supplied nucleon
    positions.

    Example:
        engine = CollisionEngine(ProfileConfig(seed=1))
        result = engine.run_event(xy_a, xy_b)
        print(result.n_participants)
    """

    def __init__(self, config: ProfileConfig, stream: Optional[RandomStream] = None):
        """
        Parameters:
            config: Profile and field configuration
            stream: Random stream (seeded from config.seed if None)
        """
        self.config = config
        self.stream = stream if stream is not None else RandomStream(config.seed)
        self.profile = NucleonProfile.from_config(config, stream=self.stream)

        # Nuclei are allocated once per size and repositioned every event
        self._nuclei: Dict[Tuple[str, int], Nucleus] = {}
        self.n_events = 0

    def _nucleus(self, label: str, n_nucleons: int) -> Nucleus:
        key = (label, n_nucleons)
        if key not in self._nuclei:
            self._nuclei[key] = Nucleus(n_nucleons)
        return self._nuclei[key]

    def run_event(self, positions_a: Positions, positions_b: Positions,
                  index: Optional[int] = None) -> EventResult:
        """
        Sample one event.

        Parameters:
            positions_a: (A, 2) transverse positions of nucleus A [fm]
            positions_b: (B, 2) transverse positions of nucleus B [fm]
            index: Event label (running counter if None)

        Returns:
            EventResult
        """
        profile = self.profile
        profile.field_generator.run()

        nucleus_a = self._nucleus('A', len(positions_a))
        nucleus_b = self._nucleus('B', len(positions_b))
        nucleus_a.set_positions(positions_a, profile)
        nucleus_b.set_positions(positions_b, profile)

        prefactors_a = np.array([profile.fluctuate() for _ in nucleus_a])
        prefactors_b = np.array([profile.fluctuate() for _ in nucleus_b])

        for a in nucleus_a:
            for b in nucleus_b:
                profile.participate(a, b)

        if index is None:
            index = self.n_events
        self.n_events += 1

        return EventResult(
            index=index,
            participants_a=nucleus_a.participants(),
            participants_b=nucleus_b.participants(),
            prefactors_a=prefactors_a,
            prefactors_b=prefactors_b,
        )

    def run_events(self, events: Sequence[EventPositions], verbose: bool = False,
                   first_index: int = 0) -> List[EventResult]:
        """
        Sample a sequence of events serially.

        Parameters:
            events: (positions_a, positions_b) per event
            verbose: Show a progress bar
            first_index: Index of the first event

        Returns:
            One EventResult per event
        """
        results = []
        for i, (pos_a, pos_b) in enumerate(tqdm(events, desc="Events",
                                               disable=not verbose)):
            results.append(self.run_event(pos_a, pos_b, index=first_index + i))

        if verbose and results:
            npart = np.array([r.n_participants for r in results])
            logger.info("%d events: <Npart> = %.2f (min %d, max %d)",
                        len(results), npart.mean(), npart.min(), npart.max())
        return results

    def worker_config(self) -> dict:
        """Config dict for workers with the calibrated parameter baked in."""
        data = self.config.to_dict()
        data['cross_section'] = None
        data['cross_sec_param'] = self.profile.cross_sec_param
        return data

    def run_events_parallel(self, events: Sequence[EventPositions],
                            n_processes: Optional[int] = None,
                            verbose: bool = False) -> List[EventResult]:
        """
        Sample events across a process pool.

        Events are split into one contiguous batch per worker; each batch
        runs on a fresh engine with a child stream spawned from config.seed.

        Parameters:
            events: (positions_a, positions_b) per event
            n_processes: Number of worker processes (default: cpu_count)
            verbose: Show a progress bar over batches

        Returns:
            One EventResult per event, in input order
        """
        import multiprocessing as mp

        events = list(events)
        if n_processes is None:
            n_processes = mp.cpu_count()
        n_processes = max(1, min(n_processes, len(events)))

        config_data = self.worker_config()
        children = np.random.SeedSequence(self.config.seed).spawn(n_processes)

        bounds = np.linspace(0, len(events), n_processes + 1).astype(int)
        tasks = [(config_data, children[w], list(events[bounds[w]:bounds[w + 1]]),
                  int(bounds[w]))
                 for w in range(n_processes)]

        logger.info("Parallel run: %d events on %d processes", len(events), n_processes)

        with mp.Pool(n_processes) as pool:
            batches = list(tqdm(pool.imap(_run_batch, tasks), total=len(tasks),
                                desc="Batches", disable=not verbose))

        return [result for batch in batches for result in batch]


def _run_batch(task) -> List[EventResult]:
    """
    Worker entry point for run_events_parallel.

    Must be top-level for pickling.
    """
    config_data, seed_sequence, events, first_index = task
    config = ProfileConfig.from_dict(config_data)
    engine = CollisionEngine(config, stream=RandomStream(seed_sequence=seed_sequence))
    return engine.run_events(events, first_index=first_index)
