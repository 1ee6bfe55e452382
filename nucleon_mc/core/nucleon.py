"""
Nucleon state for one collision event.

A Nucleon stores its transverse position, the anchor cell of its patch on
the random field, and whether it is a participant. These are globally
readable but only set through ``Nucleus`` (position) and
``NucleonProfile.participate`` (participant status).
"""

import numpy as np
from typing import Iterator


class Nucleon:
    """
    Single nucleon.

    Constructed once and repositioned every event.
    """

    __slots__ = ('_x', '_y', '_fi', '_fj', '_participant')

    def __init__(self):
        self._x = 0.0
        self._y = 0.0
        self._fi = 0
        self._fj = 0
        self._participant = False

    @property
    def x(self) -> float:
        """Transverse x position [fm]."""
        return self._x

    @property
    def y(self) -> float:
        """Transverse y position [fm]."""
        return self._y

    @property
    def fi(self) -> int:
        """Row of the field patch center."""
        return self._fi

    @property
    def fj(self) -> int:
        """Column of the field patch center."""
        return self._fj

    @property
    def is_participant(self) -> bool:
        return self._participant

    def _set_position(self, x: float, y: float, fi: int, fj: int):
        """Set position and field anchors; resets participant status."""
        self._x = float(x)
        self._y = float(y)
        self._participant = False
        self._fi = int(fi)
        self._fj = int(fj)

    def _set_participant(self):
        # Capability of NucleonProfile.participate only; nothing else calls it
        self._participant = True

    def __repr__(self) -> str:
        return (f"Nucleon(x={self._x:.3f}, y={self._y:.3f}, "
                f"anchor=({self._fi}, {self._fj}), "
                f"participant={self._participant})")


class Nucleus:
    """
    Fixed-size container of nucleons whose positions are supplied externally.

    Usage:
        nucleus = Nucleus(208)
        nucleus.set_positions(xy, profile)   # xy.shape == (208, 2)
        mask = nucleus.participants()
    """

    def __init__(self, n_nucleons: int):
        """
        Parameters:
            n_nucleons: Number of nucleons (mass number A)
        """
        if n_nucleons < 1:
            raise ValueError(f"Nucleus needs at least one nucleon, got {n_nucleons}")
        self.nucleons = [Nucleon() for _ in range(n_nucleons)]

    def set_positions(self, positions: np.ndarray, profile) -> None:
        """
        Place every nucleon and draw its field anchors.

        Anchors are drawn from the profile's stream (fi then fj, nucleon by
        nucleon) so that each patch window stays inside the field grid.

        Parameters:
            positions: (A, 2) array of transverse (x, y) positions [fm]
            profile: NucleonProfile owning the field generator and stream
        """
        positions = np.asarray(positions, dtype=np.float64)
        if positions.shape != (len(self.nucleons), 2):
            raise ValueError(f"Expected positions of shape ({len(self.nucleons)}, 2), "
                             f"got {positions.shape}")

        field = profile.field_generator
        stream = profile.stream
        for nucleon, (x, y) in zip(self.nucleons, positions):
            fi, fj = field.draw_anchors(stream)
            nucleon._set_position(x, y, fi, fj)

    def participants(self) -> np.ndarray:
        """Boolean participant mask."""
        return np.array([n.is_participant for n in self.nucleons], dtype=np.bool_)

    @property
    def n_participants(self) -> int:
        return int(np.sum(self.participants()))

    def positions(self) -> np.ndarray:
        """(A, 2) array of current positions."""
        return np.array([(n.x, n.y) for n in self.nucleons], dtype=np.float64)

    def __len__(self) -> int:
        return len(self.nucleons)

    def __iter__(self) -> Iterator[Nucleon]:
        return iter(self.nucleons)

    def __getitem__(self, index: int) -> Nucleon:
        return self.nucleons[index]

    def __repr__(self) -> str:
        return f"Nucleus(A={len(self)}, participants={self.n_participants})"
