"""Cumulative-probability search line used to turn a random value into a card."""
from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple, Union

import numpy as np
from loguru import logger

from .enums import Rarity
from .errors import RangeError
from .models import Card, NothingCard
from .resolver import Resolution


class SamplingIndex:
    """Ordered ``(interval_start, card)`` pairs with O(log n) lookup.

    Every key is the start of its card's interval (included) and the end of the
    previous card's interval (excluded). ``leftmost_card`` owns the interval
    beginning at ``0`` and answers any value that falls left of the first key
    examined by the search.
    """

    def __init__(
        self,
        entries: Sequence[Tuple[float, Card]],
        *,
        leftmost_card: Optional[Card] = None,
        rarity_ranges: Optional[Dict[Rarity, Tuple[int, int]]] = None,
    ) -> None:
        self._keys: List[float] = [float(key) for key, _ in entries]
        self._cards: List[Card] = [card for _, card in entries]
        if leftmost_card is None and self._cards:
            leftmost_card = self._cards[0]
        self.leftmost_card = leftmost_card
        self._rarity_ranges: Dict[Rarity, Tuple[int, int]] = dict(rarity_ranges or {})

    def __len__(self) -> int:
        return len(self._keys)

    @property
    def keys(self) -> np.ndarray:
        keys = np.asarray(self._keys, dtype=np.float64)
        keys.setflags(write=False)
        return keys

    @property
    def cards(self) -> List[Card]:
        return list(self._cards)

    def rarity_range(self, rarity: Rarity) -> Tuple[int, int]:
        """Index bounds of a rarity run, ending at the breakpoint after its last card."""

        try:
            return self._rarity_ranges[rarity]
        except KeyError:
            raise RangeError(f"No drawable cards of rarity {rarity!r} in the index.") from None

    @property
    def rarities(self) -> List[Rarity]:
        return list(self._rarity_ranges)

    def search(
        self,
        probability: float,
        start_index: Optional[int] = None,
        end_index: Optional[int] = None,
    ) -> Card:
        """Return the card whose interval contains ``probability``.

        With ``start_index``/``end_index`` the search is confined to that slice
        of the line and ``probability`` (still taken from ``[0, 1)``) is mapped
        linearly onto the slice's own span first.
        """

        if not self._keys:
            raise RangeError("Cannot search an empty sampling index.")
        if start_index is None and end_index is None:
            return self._binary_search(probability, 0, len(self._keys) - 1)
        if start_index is None or end_index is None:
            raise RangeError("start_index and end_index must be given together.")
        self._check_bounds(start_index, end_index)
        low = self._keys[start_index]
        high = self._keys[end_index]
        corrected = probability * (high - low) + low
        return self._binary_search(corrected, start_index, end_index)

    def _check_bounds(self, start_index: int, end_index: int) -> None:
        if start_index > end_index:
            raise RangeError(
                f"start_index {start_index} is larger than end_index {end_index}."
            )
        if start_index < 0 or end_index >= len(self._keys):
            raise RangeError(
                f"Bounds [{start_index}, {end_index}] fall outside an index of {len(self._keys)} entries."
            )

    def _binary_search(self, probability: float, start_index: int, end_index: int) -> Card:
        if start_index > end_index:
            raise RangeError(
                f"start_index {start_index} is larger than end_index {end_index}."
            )
        keys = self._keys
        while True:
            if start_index == end_index:
                if keys[start_index] <= probability:
                    return self._cards[start_index]
                # The value falls before this card starts.
                if start_index == 0:
                    return self.leftmost_card
                return self._cards[start_index - 1]
            middle = (start_index + end_index) // 2
            if keys[middle] > probability:
                end_index = middle - 1
            else:
                start_index = middle + 1
            if end_index < start_index:
                end_index = start_index


def build_index(
    resolved: Union[Resolution, Sequence[Card]],
    nothing_probability: Optional[float] = None,
) -> SamplingIndex:
    """Lay resolved cards out on a cumulative line, nothing card last.

    Cards with zero probability take no room on the line. The nothing card is
    always appended, even when its probability is zero, so the last rarity run
    still has a closing breakpoint for :meth:`SamplingIndex.search` sub-ranges.
    """

    if isinstance(resolved, Resolution):
        cards = resolved.cards
        nothing_card = resolved.nothing_card
    else:
        if nothing_probability is None:
            raise ValueError("nothing_probability is required when building from cards.")
        cards = list(resolved)
        nothing_card = NothingCard(nothing_probability)

    drawable = [card for card in cards if not card.is_removed and card.real_probability > 0.0]
    line = drawable + [nothing_card]
    probabilities = np.array([card.real_probability for card in line], dtype=np.float64)
    starts = np.concatenate(([0.0], np.cumsum(probabilities)[:-1]))

    rarity_ranges: Dict[Rarity, Tuple[int, int]] = {}
    scattered = set()
    for position, card in enumerate(drawable):
        if card.rarity is None:
            continue
        first, end = rarity_ranges.get(card.rarity, (position, position))
        if end != position:
            scattered.add(card.rarity)
        rarity_ranges[card.rarity] = (first, position + 1)
    # Sub-range draws only make sense for rarities laid out contiguously.
    for rarity in scattered:
        del rarity_ranges[rarity]

    logger.debug(
        "Built sampling index with {} entries, line total {:.12f}",
        len(line),
        float(probabilities.sum()),
    )
    return SamplingIndex(
        list(zip(starts.tolist(), line)),
        leftmost_card=line[0],
        rarity_ranges=rarity_ranges,
    )
