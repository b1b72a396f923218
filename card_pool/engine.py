"""Draw engine: random value in, one card out."""
from __future__ import annotations

import random
from typing import Iterable, List, Optional, Protocol

from loguru import logger
from tqdm import trange

from .enums import Rarity
from .errors import RangeError
from .models import Card, NothingCard
from .search_line import SamplingIndex


class RandomSource(Protocol):
    """Anything with a ``random()`` returning floats in ``[0, 1)``."""

    def random(self) -> float:
        ...


def claim_stock(card: Card) -> bool:
    """Claim one unit of a card's stock; always true for unlimited cards."""

    return card.try_claim()


class DrawEngine:
    """Resolves draws against a sampling index and settles limited stock.

    A draw that lands on a card whose stock was just taken by a racing caller,
    or on a card removed since the index was built, returns the nothing card
    instead of searching again.
    """

    def __init__(self, index: SamplingIndex, random_source: Optional[RandomSource] = None) -> None:
        if len(index) == 0:
            raise RangeError("A draw engine needs a non-empty sampling index.")
        self.index = index
        self.rng: RandomSource = random_source if random_source is not None else random.Random()
        self.nothing_card = self._find_nothing_card(index)

    @staticmethod
    def _find_nothing_card(index: SamplingIndex) -> NothingCard:
        for card in reversed(index.cards):
            if isinstance(card, NothingCard):
                return card
        return NothingCard()

    def draw(self) -> Card:
        return self.draw_from(self.rng.random())

    def draw_from(self, probability: float) -> Card:
        return self._settle(self.index.search(probability))

    def draw_in_rarity(self, rarity: Rarity) -> Card:
        """Draw a card of ``rarity`` only, weighted by the cards' real probabilities."""

        start, end = self.index.rarity_range(rarity)
        return self._settle(self.index.search(self.rng.random(), start, end))

    def draw_many(self, count: int, *, progress_bar: bool = False) -> List[Card]:
        iterator: Iterable[int]
        if progress_bar:
            iterator = trange(count, desc="Drawing")
        else:
            iterator = range(count)
        return [self.draw() for _ in iterator]

    def _settle(self, candidate: Card) -> Card:
        if candidate.is_nothing_card:
            return candidate
        if candidate.is_removed:
            # Removed after this index was built; the pool is swapping in a new one.
            return self.nothing_card
        if claim_stock(candidate):
            return candidate
        logger.debug("Stock exhausted for {}, falling back to nothing", candidate.card_name)
        return self.nothing_card
