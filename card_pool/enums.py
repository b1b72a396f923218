"""Core enumerations used across the card pool."""
from __future__ import annotations

from enum import Enum, Flag, auto


class Rarity(Enum):
    """Card rarities group cards before probability mass is shared out."""

    COMMON = ("Common", 1)
    UNCOMMON = ("Uncommon", 2)
    RARE = ("Rare", 3)
    EPIC = ("Epic", 4)
    LEGENDARY = ("Legendary", 5)

    def __init__(self, label: str, tier: int) -> None:
        self.label = label
        self.tier = tier


class CardAttributes(Flag):
    """State flags carried by every card."""

    NONE = 0
    REMOVED = auto()
    LIMITED = auto()
