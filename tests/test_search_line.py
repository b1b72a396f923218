import random

import numpy as np
import pytest

from card_pool import (
    NothingCard,
    RangeError,
    Rarity,
    SamplingIndex,
    ValueCard,
    build_index,
    resolve_probabilities,
)


def _preset_index(*probabilities):
    cards = [
        ValueCard(Rarity.COMMON, f"card {idx}", preset_probability=p)
        for idx, p in enumerate(probabilities)
    ]
    resolution = resolve_probabilities(cards, {})
    return build_index(resolution), cards


def _random_index(seed):
    rng = random.Random(seed)
    cards = []
    for idx in range(rng.randint(1, 30)):
        rarity = rng.choice(list(Rarity))
        cards.append(ValueCard(rarity, idx, ratio_amount_same_rarity=rng.uniform(0.5, 5.0)))
    masses = {rarity: rng.uniform(0.05, 0.19) for rarity in Rarity}
    return build_index(resolve_probabilities(cards, masses))


def test_keys_are_cumulative_starts():
    index, cards = _preset_index(0.25, 0.25, 0.5)
    assert index.keys.tolist() == [0.0, 0.25, 0.5, 1.0]
    assert index.cards[:3] == cards
    assert index.cards[-1] == NothingCard()
    assert index.leftmost_card is cards[0]
    with pytest.raises(ValueError):
        index.keys[0] = 0.5


def test_search_zero_returns_leftmost_card():
    index, _ = _preset_index(0.1, 0.3)
    assert index.search(0.0) is index.leftmost_card


def test_search_hits_each_interval():
    index, cards = _preset_index(0.1, 0.3)
    assert index.search(0.05) is cards[0]
    assert index.search(0.1) is cards[1]
    assert index.search(0.399) is cards[1]
    assert index.search(0.41).is_nothing_card
    assert index.search(0.999).is_nothing_card


@pytest.mark.parametrize("seed", range(25))
def test_interval_boundaries_are_left_inclusive_right_exclusive(seed):
    index = _random_index(seed)
    keys = index.keys.tolist()
    cards = index.cards
    ends = keys[1:] + [1.0]
    for key, end, card in zip(keys, ends, cards):
        if end <= key:
            continue
        assert index.search(key) is card
        assert index.search(float(np.nextafter(end, 0.0))) is card
        assert index.search((key + end) / 2) is card


def test_removed_card_is_never_found():
    kept = ValueCard(Rarity.COMMON, "kept")
    dropped = ValueCard(Rarity.COMMON, "dropped")
    dropped.mark_removed()
    index = build_index(resolve_probabilities([kept, dropped], {Rarity.COMMON: 0.5}))
    found = {index.search(x / 1000).card_name for x in range(1000)}
    assert found == {"kept", "Nothing"}


def test_sub_range_remaps_probability():
    index, cards = _preset_index(0.5, 0.5)
    assert index.keys.tolist()[:2] == [0.0, 0.5]
    # 0.05 maps to 0.05 * (0.5 - 0.0) + 0.0 = 0.025
    assert index.search(0.05, 0, 1) is cards[0]
    assert index.search(0.99, 1, 2) is cards[1]


@pytest.mark.parametrize("seed", range(10))
def test_sub_range_matches_full_search_on_remapped_value(seed):
    index = _random_index(seed)
    keys = index.keys.tolist()
    last = len(keys) - 1
    for start in range(last + 1):
        for end in range(start, last + 1):
            for x in (0.0, 0.13, 0.5, 0.77):
                remapped = x * (keys[end] - keys[start]) + keys[start]
                assert index.search(x, start, end) is index.search(remapped)


def test_sub_range_bounds_are_checked():
    index, _ = _preset_index(0.25, 0.25, 0.5)
    with pytest.raises(RangeError):
        index.search(0.5, 2, 1)
    with pytest.raises(RangeError):
        index.search(0.5, 0, 10)
    with pytest.raises(RangeError):
        index.search(0.5, 0)


def test_range_error_is_an_index_error():
    index, _ = _preset_index(0.5)
    with pytest.raises(IndexError):
        index.search(0.5, 1, 0)


def test_empty_index_cannot_be_searched():
    with pytest.raises(RangeError):
        SamplingIndex([]).search(0.5)


def test_empty_pool_index_holds_only_nothing():
    index = build_index(resolve_probabilities([], {}))
    assert len(index) == 1
    assert index.search(0.0).is_nothing_card
    assert index.search(0.7).is_nothing_card


def test_single_card_pool():
    card = ValueCard(Rarity.RARE, "only", preset_probability=1.0)
    index = build_index(resolve_probabilities([card], {}))
    assert index.search(0.0) is card
    assert index.search(0.999999) is card


def test_build_from_cards_and_nothing_probability():
    cards = ValueCard.create_multi_cards(Rarity.COMMON, "a", "b")
    resolution = resolve_probabilities(cards, {Rarity.COMMON: 0.8})
    index = build_index(resolution.cards, resolution.nothing_probability)
    assert index.keys.tolist() == pytest.approx([0.0, 0.4, 0.8])
    with pytest.raises(ValueError):
        build_index(resolution.cards)


def test_rarity_ranges_close_on_the_next_breakpoint():
    common = ValueCard.create_multi_cards(Rarity.COMMON, "c1", "c2")
    rare = ValueCard.create_multi_cards(Rarity.RARE, "r1", "r2", "r3")
    index = build_index(
        resolve_probabilities(common + rare, {Rarity.COMMON: 0.6, Rarity.RARE: 0.3})
    )
    assert index.rarity_range(Rarity.COMMON) == (0, 2)
    assert index.rarity_range(Rarity.RARE) == (2, 5)
    assert index.cards[5].is_nothing_card
    assert set(index.rarities) == {Rarity.COMMON, Rarity.RARE}
    with pytest.raises(RangeError):
        index.rarity_range(Rarity.LEGENDARY)
