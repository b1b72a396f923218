"""A minimal in-memory pool that owns cards and keeps a draw engine current."""
from __future__ import annotations

import threading
from typing import Iterable, List, Optional, Tuple

from loguru import logger

from .config import PoolSettings
from .engine import DrawEngine, RandomSource
from .enums import Rarity
from .models import Card
from .resolver import Resolution, resolve_probabilities
from .search_line import SamplingIndex, build_index


class CardPool:
    """Owns a set of cards and the engine built from their latest resolution.

    Any change to the pool's composition re-resolves every probability and
    swaps in a freshly built engine under the pool's write lock. Draws never
    take that lock; they use whichever engine was current when they started.
    """

    def __init__(
        self,
        cards: Iterable[Card] = (),
        settings: Optional[PoolSettings] = None,
        random_source: Optional[RandomSource] = None,
    ) -> None:
        self.settings = settings or PoolSettings()
        self._cards: List[Card] = list(cards)
        self._rng = random_source if random_source is not None else self.settings.make_random()
        self._write_lock = threading.Lock()
        self._resolution: Resolution
        self._engine: DrawEngine
        self._resolution, self._engine = self._build(self._cards)

    # ------------------------------------------------------------------
    # Composition
    # ------------------------------------------------------------------

    def refresh(self) -> DrawEngine:
        with self._write_lock:
            self._resolution, self._engine = self._build(self._cards)
            return self._engine

    def add(self, *cards: Card) -> None:
        with self._write_lock:
            candidates = self._cards + list(cards)
            # A failed resolution leaves the cards and the live engine untouched.
            self._resolution, self._engine = self._build(candidates)
            self._cards = candidates

    def remove(self, card: Card) -> None:
        """Remove ``card`` from the pool and rebuild.

        The card is flagged before the new engine is swapped in, so a draw
        racing this call may still land on it in the old index. The engine
        turns such a hit into the nothing outcome.
        """

        with self._write_lock:
            card.mark_removed()
            self._resolution, self._engine = self._build(self._cards)

    def _build(self, cards: List[Card]) -> Tuple[Resolution, DrawEngine]:
        resolution = resolve_probabilities(
            cards,
            self.settings.rarity_mass,
            tolerance=self.settings.tolerance,
        )
        engine = DrawEngine(build_index(resolution), self._rng)
        logger.info(
            "Pool refreshed: {} drawable cards, nothing probability {:.6f}",
            len(resolution.cards),
            resolution.nothing_probability,
        )
        return resolution, engine

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @property
    def cards(self) -> List[Card]:
        return list(self._cards)

    @property
    def engine(self) -> DrawEngine:
        return self._engine

    @property
    def index(self) -> SamplingIndex:
        return self._engine.index

    @property
    def resolution(self) -> Resolution:
        return self._resolution

    @property
    def nothing_probability(self) -> float:
        return self.resolution.nothing_probability

    # ------------------------------------------------------------------
    # Draws
    # ------------------------------------------------------------------

    def draw(self) -> Card:
        return self.engine.draw()

    def draw_in_rarity(self, rarity: Rarity) -> Card:
        return self.engine.draw_in_rarity(rarity)

    def draw_many(self, count: int, *, progress_bar: bool = False) -> List[Card]:
        return self.engine.draw_many(count, progress_bar=progress_bar)
