"""Monte-Carlo helpers for checking a pool's empirical draw distribution."""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict

import numpy as np

from .engine import DrawEngine
from .models import Card


@dataclass
class SimulationReport:
    """Draw counts next to the probabilities the index was built from."""

    draws: int
    counts: Dict[Card, int] = field(default_factory=dict)
    expected: Dict[Card, float] = field(default_factory=dict)

    @property
    def frequencies(self) -> Dict[Card, float]:
        if self.draws == 0:
            return {card: 0.0 for card in self.expected}
        return {card: self.counts.get(card, 0) / self.draws for card in self._all_cards()}

    @property
    def max_abs_error(self) -> float:
        """Largest gap between an observed frequency and its expected probability.

        Limited cards that run out during the run pull their observed share
        toward the nothing card, so only unlimited pools should expect this to
        shrink with more draws.
        """

        cards = self._all_cards()
        if not cards or self.draws == 0:
            return 0.0
        observed = np.array([self.counts.get(card, 0) for card in cards], dtype=np.float64)
        expected = np.array([self.expected.get(card, 0.0) for card in cards], dtype=np.float64)
        return float(np.max(np.abs(observed / self.draws - expected)))

    def _all_cards(self) -> list:
        cards = list(self.expected)
        cards.extend(card for card in self.counts if card not in self.expected)
        return cards


def simulate(engine: DrawEngine, draws: int, *, progress_bar: bool = False) -> SimulationReport:
    expected: Dict[Card, float] = {}
    for card in engine.index.cards:
        expected[card] = expected.get(card, 0.0) + card.real_probability
    counts = Counter(engine.draw_many(draws, progress_bar=progress_bar))
    return SimulationReport(draws=draws, counts=dict(counts), expected=expected)
