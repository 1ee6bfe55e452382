"""
Run configuration.

Parameters are read from a YAML file (or a plain dict) into a validated
ProfileConfig. Lengths are in fm, cross sections in fm².

Example YAML:

    width: 0.5
    fluctuation: 1.0
    cross_section: 6.4
    grid: [256, 256]
    extent: [25.6, 25.6]
    field_variance: 1.0
    correlation_length: 0.2
    seed: 42
"""

import logging
import yaml
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Optional, Tuple, Union

logger = logging.getLogger(__name__)


@dataclass
class ProfileConfig:
    """Nucleon profile and random field parameters."""

    width: float = 0.5
    fluctuation: float = 1.0
    cross_section: Optional[float] = 6.4
    cross_sec_param: Optional[float] = None
    trunc_radius: Optional[float] = None
    max_impact: Optional[float] = None
    grid: Tuple[int, int] = (256, 256)
    extent: Tuple[float, float] = (25.6, 25.6)
    field_variance: float = 1.0
    correlation_length: float = 0.2
    kernel_width: Optional[float] = None
    seed: Optional[int] = None

    def __post_init__(self):
        self.grid = tuple(int(n) for n in self.grid)
        self.extent = tuple(float(l) for l in self.extent)
        if self.kernel_width is None:
            self.kernel_width = self.width
        self.validate()

    def validate(self):
        """Reject configurations that cannot produce valid physics."""
        if len(self.grid) != 2 or min(self.grid) <= 0:
            raise ValueError(f"grid must be two positive integers, got {self.grid}")
        if len(self.extent) != 2 or min(self.extent) <= 0:
            raise ValueError(f"extent must be two positive lengths, got {self.extent}")

        positive = {
            'width': self.width,
            'fluctuation': self.fluctuation,
            'field_variance': self.field_variance,
            'correlation_length': self.correlation_length,
            'kernel_width': self.kernel_width,
        }
        for name in ('cross_section', 'trunc_radius', 'max_impact'):
            if getattr(self, name) is not None:
                positive[name] = getattr(self, name)

        for name, value in positive.items():
            if not value > 0:
                raise ValueError(f"{name} must be positive, got {value}")

        if self.cross_section is None and self.cross_sec_param is None:
            raise ValueError("Either cross_section or cross_sec_param is required")

    @classmethod
    def from_dict(cls, data: dict) -> "ProfileConfig":
        """Build from a mapping, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown configuration keys: {sorted(unknown)}. "
                             f"Available: {sorted(known)}")
        # A tuned parameter replaces the cross section default
        if data.get('cross_sec_param') is not None and 'cross_section' not in data:
            data = dict(data, cross_section=None)
        return cls(**data)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "ProfileConfig":
        """Load from a YAML file."""
        path = Path(path)
        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Configuration file {path} must contain a mapping")
        config = cls.from_dict(data)
        logger.info("Loaded configuration from %s", path)
        return config

    def to_dict(self) -> dict:
        data = asdict(self)
        data['grid'] = list(self.grid)
        data['extent'] = list(self.extent)
        return data

    def to_yaml(self, path: Union[str, Path]):
        """Write to a YAML file."""
        with open(path, 'w') as f:
            yaml.safe_dump(self.to_dict(), f, sort_keys=False)
