"""Turns rarity masses, presets and same-rarity ratios into real probabilities."""
from __future__ import annotations

import math
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional

from loguru import logger

from .enums import Rarity
from .errors import ConfigurationError
from .models import Card, NothingCard, Preset

DEFAULT_TOLERANCE = 1e-9


@dataclass
class Resolution:
    """Outcome of a single resolution pass over a pool."""

    cards: List[Card]
    nothing_probability: float
    nothing_card: NothingCard = field(init=False)

    def __post_init__(self) -> None:
        self.nothing_card = NothingCard(self.nothing_probability)

    @property
    def total_probability(self) -> float:
        return sum(card.real_probability for card in self.cards) + self.nothing_probability


def _tier(rarity: Optional[Rarity]) -> int:
    return rarity.tier if rarity is not None else 0


def resolve_probabilities(
    cards: Iterable[Card],
    rarity_mass: Mapping[Rarity, float],
    *,
    tolerance: float = DEFAULT_TOLERANCE,
) -> Resolution:
    """Assign ``real_probability`` to every card of the pool.

    Preset cards take their probability as is. The remaining cards of each
    rarity share that rarity's mass in proportion to their weights. Removed
    cards are zeroed and left out of the result. Whatever is left over becomes
    the nothing probability; a pool whose cards claim more than ``1`` raises
    :class:`ConfigurationError`.
    """

    for rarity, mass in rarity_mass.items():
        if not (math.isfinite(mass) and 0.0 <= mass <= 1.0):
            raise ConfigurationError(f"Mass for {rarity!r} must be in [0, 1], got {mass!r}.")

    active: List[Card] = []
    for card in cards:
        if card.is_removed:
            card._assign_probability(0.0)
            continue
        if card.is_nothing_card:
            continue
        active.append(card)

    # Nothing is written back to the cards until the pool is known to be valid.
    probabilities: Dict[int, float] = {}
    weighted: Dict[Optional[Rarity], List[Card]] = defaultdict(list)
    for card in active:
        setting = card.probability_setting
        if isinstance(setting, Preset):
            probabilities[id(card)] = setting.probability
        else:
            weighted[card.rarity].append(card)

    for rarity, group in weighted.items():
        if rarity not in rarity_mass:
            raise ConfigurationError(f"No probability mass configured for rarity {rarity!r}.")
        mass = rarity_mass[rarity]
        total_weight = sum(card.weight for card in group)
        if not math.isfinite(total_weight):
            raise ConfigurationError(f"Weights of rarity {rarity!r} do not sum to a finite value.")
        for card in group:
            probabilities[id(card)] = mass * card.weight / total_weight

    assigned = math.fsum(probabilities.values())
    remainder = 1.0 - assigned
    if remainder < -tolerance:
        logger.error("Pool overcommitted: assigned probability {:.12f} exceeds 1", assigned)
        raise ConfigurationError(
            f"Assigned probability {assigned!r} exceeds 1; the pool is overcommitted."
        )
    nothing_probability = 0.0 if abs(remainder) <= tolerance else remainder

    for card in active:
        card._assign_probability(probabilities[id(card)])

    # Stable sort keeps input order inside a rarity.
    active.sort(key=lambda card: _tier(card.rarity))
    logger.debug(
        "Resolved {} cards across {} rarities, nothing probability {:.6f}",
        len(active),
        len({card.rarity for card in active}),
        nothing_probability,
    )
    return Resolution(cards=active, nothing_probability=nothing_probability)
