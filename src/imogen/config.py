"""Run settings and their allowed ranges."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

# (from, to, step) for each tunable setting.
SETTING_BOUNDS: Dict[str, Tuple[int, int, int]] = {
    'render_width': (50, 500, 50),
    'output_width': (100, 5000, 100),
    'population_size': (6, 50, 1),
    'num_genes': (50, 5000, 10),
    'max_age': (3, 1000, 1),
}


@dataclass
class Settings:
    """Configuration for an evolution session."""

    # Width the target is scaled to before evolving against it
    render_width: int = 150
    # Width of images written by save
    output_width: int = 1000

    population_size: int = 15
    num_genes: int = 400
    max_age: int = 15

    # Seed for the random generator, None for fresh entropy
    seed: Optional[int] = None

    def validate(self) -> 'Settings':
        """Check every bounded field, raising ValueError on the first bad one."""
        for name, (low, high, _) in SETTING_BOUNDS.items():
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise ValueError(f"{name} must be an integer, got {value!r}")
            if not low <= value <= high:
                raise ValueError(f"{name} must be between {low} and {high}, got {value}")
        return self

    def with_updates(self, **changes: Any) -> 'Settings':
        """Return a validated copy with ``changes`` applied."""
        return replace(self, **changes).validate()

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'Settings':
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in d.items() if k in names}).validate()


def load_settings(path: str | Path) -> Settings:
    """Read settings from a JSON file."""
    with open(path) as f:
        return Settings.from_dict(json.load(f))


def save_settings(settings: Settings, path: str | Path) -> None:
    """Write settings to a JSON file."""
    with open(path, 'w') as f:
        json.dump(settings.to_dict(), f, indent=2)
