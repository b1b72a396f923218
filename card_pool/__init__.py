"""Public entrypoints for the card pool sampling core."""
from . import log
from .config import DEFAULT_RARITY_MASS, PoolSettings
from .engine import DrawEngine, claim_stock
from .enums import CardAttributes, Rarity
from .errors import CardPoolError, ConfigurationError, RangeError
from .models import Card, NothingCard, Preset, RelativeWeight, ValueCard
from .pool import CardPool
from .resolver import Resolution, resolve_probabilities
from .search_line import SamplingIndex, build_index
from .simulation import SimulationReport, simulate

__all__ = [
    "Card",
    "CardAttributes",
    "CardPool",
    "CardPoolError",
    "ConfigurationError",
    "DEFAULT_RARITY_MASS",
    "DrawEngine",
    "NothingCard",
    "PoolSettings",
    "Preset",
    "RangeError",
    "Rarity",
    "RelativeWeight",
    "Resolution",
    "SamplingIndex",
    "SimulationReport",
    "ValueCard",
    "build_index",
    "claim_stock",
    "log",
    "resolve_probabilities",
    "simulate",
]
