"""Card types and the probability settings attached to them."""
from __future__ import annotations

import math
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, List, Optional, TypeVar, Union

from .enums import CardAttributes, Rarity
from .errors import ConfigurationError

T = TypeVar("T")


@dataclass(frozen=True)
class Preset:
    """Final probability relative to the entire pool."""

    probability: float

    def __post_init__(self) -> None:
        if not 0.0 <= self.probability <= 1.0:
            raise ConfigurationError(
                f"Preset probability must be in [0, 1], got {self.probability!r}."
            )


@dataclass(frozen=True)
class RelativeWeight:
    """Weight relative to the other cards of the same rarity."""

    ratio: float

    def __post_init__(self) -> None:
        if not (math.isfinite(self.ratio) and self.ratio > 0.0):
            raise ConfigurationError(f"Ratio must be a positive finite number, got {self.ratio!r}.")


ProbabilitySetting = Union[Preset, RelativeWeight]


class Card(ABC):
    """One weighted entry of a draw pool.

    A card carries its rarity, the probability input it was configured with
    (either a :class:`Preset` or a :class:`RelativeWeight`, never both) and the
    ``real_probability`` assigned by the resolver. Cards created with a positive
    ``total_count`` are limited: every successful draw claims one unit of stock
    and the card stops being handed out once the stock is gone.
    """

    def __init__(
        self,
        rarity: Optional[Rarity] = None,
        *,
        preset_probability: Optional[float] = None,
        ratio_amount_same_rarity: Optional[float] = None,
        total_count: int = 0,
    ) -> None:
        if preset_probability is not None and ratio_amount_same_rarity is not None:
            raise ConfigurationError(
                "A card takes either a preset probability or a same-rarity ratio, not both."
            )
        self.rarity = rarity
        self._setting: Optional[ProbabilitySetting] = None
        if preset_probability is not None:
            self._setting = Preset(float(preset_probability))
        elif ratio_amount_same_rarity is not None:
            self._setting = RelativeWeight(float(ratio_amount_same_rarity))

        self._real_probability = 0.0
        self._attributes = CardAttributes.NONE
        self._stock_lock = threading.Lock()
        self._total_count = 0
        self._remain_count = 0
        if total_count:
            self.total_count = total_count

    # ------------------------------------------------------------------
    # Probability inputs
    # ------------------------------------------------------------------

    @property
    def probability_setting(self) -> Optional[ProbabilitySetting]:
        return self._setting

    @property
    def preset_probability(self) -> Optional[float]:
        if isinstance(self._setting, Preset):
            return self._setting.probability
        return None

    @preset_probability.setter
    def preset_probability(self, value: Optional[float]) -> None:
        if value is None:
            if isinstance(self._setting, Preset):
                self._setting = None
            return
        if isinstance(self._setting, RelativeWeight):
            raise ConfigurationError(
                "Cannot set preset_probability when ratio_amount_same_rarity is already set."
            )
        self._setting = Preset(float(value))

    @property
    def ratio_amount_same_rarity(self) -> Optional[float]:
        if isinstance(self._setting, RelativeWeight):
            return self._setting.ratio
        return None

    @ratio_amount_same_rarity.setter
    def ratio_amount_same_rarity(self, value: Optional[float]) -> None:
        if value is None:
            if isinstance(self._setting, RelativeWeight):
                self._setting = None
            return
        if isinstance(self._setting, Preset):
            raise ConfigurationError(
                "Cannot set ratio_amount_same_rarity when preset_probability is already set."
            )
        self._setting = RelativeWeight(float(value))

    @property
    def weight(self) -> float:
        """Same-rarity weight, ``1`` when no ratio was configured."""

        if isinstance(self._setting, RelativeWeight):
            return self._setting.ratio
        return 1.0

    # ------------------------------------------------------------------
    # Resolved state
    # ------------------------------------------------------------------

    @property
    def real_probability(self) -> float:
        return self._real_probability

    def _assign_probability(self, probability: float) -> None:
        self._real_probability = 0.0 if self.is_removed else probability

    @property
    def attributes(self) -> CardAttributes:
        return self._attributes

    @property
    def is_removed(self) -> bool:
        return bool(self._attributes & CardAttributes.REMOVED)

    def mark_removed(self) -> None:
        self._attributes |= CardAttributes.REMOVED
        self._real_probability = 0.0

    def _reset_removed(self) -> None:
        self._attributes &= ~CardAttributes.REMOVED

    @property
    def is_nothing_card(self) -> bool:
        return isinstance(self, NothingCard)

    # ------------------------------------------------------------------
    # Limited stock
    # ------------------------------------------------------------------

    @property
    def total_count(self) -> int:
        return self._total_count

    @total_count.setter
    def total_count(self, value: int) -> None:
        with self._stock_lock:
            self._total_count = value
            self._remain_count = value
            if value > 0:
                self._attributes |= CardAttributes.LIMITED
            else:
                self._attributes &= ~CardAttributes.LIMITED

    @property
    def remain_count(self) -> int:
        return max(0, self._remain_count)

    @property
    def is_limited_card(self) -> bool:
        return bool(self._attributes & CardAttributes.LIMITED)

    @property
    def is_exhausted(self) -> bool:
        return self.is_limited_card and self._remain_count <= 0

    def try_claim(self) -> bool:
        """Take one unit of stock, returning whether the draw may keep this card.

        Unlimited cards always succeed. The stock is re-checked under the lock,
        so a losing racer reports failure without touching the counter.
        """

        if not self.is_limited_card:
            return True
        if self._remain_count <= 0:
            return False
        with self._stock_lock:
            if self._remain_count <= 0:
                return False
            self._remain_count -= 1
            remaining = self._remain_count
        return remaining >= 0

    # ------------------------------------------------------------------
    # Presentation
    # ------------------------------------------------------------------

    @property
    @abstractmethod
    def card_name(self) -> str:
        ...

    def __str__(self) -> str:
        label = self.rarity.label if self.rarity is not None else "-"
        return f"{self.card_name} ---- {self.real_probability:.5%} [{label}]"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.card_name!r}, p={self.real_probability:.6g})"


class NothingCard(Card):
    """Sentinel that absorbs whatever probability the configured cards leave."""

    def __init__(self, remain_real_probability: float = 0.0) -> None:
        super().__init__()
        self._real_probability = remain_real_probability

    @property
    def card_name(self) -> str:
        return "Nothing"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, NothingCard)

    def __hash__(self) -> int:
        return 13131313


class ValueCard(Card, Generic[T]):
    """A card wrapping an arbitrary payload."""

    def __init__(
        self,
        rarity: Rarity,
        card_info: T,
        *,
        preset_probability: Optional[float] = None,
        ratio_amount_same_rarity: Optional[float] = None,
        total_count: int = 0,
    ) -> None:
        super().__init__(
            rarity,
            preset_probability=preset_probability,
            ratio_amount_same_rarity=ratio_amount_same_rarity,
            total_count=total_count,
        )
        self.card_info = card_info

    @classmethod
    def create_multi_cards(cls, rarity: Rarity, *values: T) -> List["ValueCard[T]"]:
        return [cls(rarity, value) for value in values]

    @property
    def card_name(self) -> str:
        return str(self.card_info)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ValueCard):
            return self.card_info == other.card_info
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.card_info)
