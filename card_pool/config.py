"""Pool settings and the default probability mass per rarity."""
from __future__ import annotations

import random
from typing import Dict, Optional

from pydantic import BaseModel, Field, field_validator

from .enums import Rarity

DEFAULT_RARITY_MASS: Dict[Rarity, float] = {
    Rarity.COMMON: 0.6,
    Rarity.UNCOMMON: 0.25,
    Rarity.RARE: 0.1,
    Rarity.EPIC: 0.04,
    Rarity.LEGENDARY: 0.01,
}


class PoolSettings(BaseModel):
    """Knobs the owning pool passes down to the resolver and the draw engine."""

    rarity_mass: Dict[Rarity, float] = Field(default_factory=lambda: dict(DEFAULT_RARITY_MASS))
    tolerance: float = 1e-9
    seed: Optional[int] = None

    @field_validator("rarity_mass")
    @classmethod
    def check_masses(cls, value: Dict[Rarity, float]) -> Dict[Rarity, float]:
        for rarity, mass in value.items():
            if not 0.0 <= mass <= 1.0:
                raise ValueError(f"mass for {rarity.label} must be in [0, 1], got {mass}")
        if sum(value.values()) > 1.0 + 1e-9:
            raise ValueError("rarity masses must not sum above 1")
        return value

    @field_validator("tolerance")
    @classmethod
    def check_tolerance(cls, value: float) -> float:
        if value < 0:
            raise ValueError("tolerance must be non-negative")
        return value

    def make_random(self) -> random.Random:
        return random.Random(self.seed)
