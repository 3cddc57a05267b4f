"""
Unit tests for domain-stratified sampling.

All tests pass a seeded random.Random so results are reproducible.
"""

import random
from collections import Counter
from dataclasses import dataclass

import pytest

from secplus.content.domains import FLASHCARD_FILL_ORDER, FLASHCARD_TARGETS, QUESTION_TARGETS
from secplus.content.sampling import StratifiedSampler, scale_targets, shuffled


@dataclass
class Item:
    id: int
    domain: str | None


def make_items(counts: dict[str, int]) -> list[Item]:
    items = []
    for domain, n in counts.items():
        items.extend(Item(len(items), domain) for _ in range(n))
    return items


class TestScaleTargets:
    """Tests for target rescaling."""

    def test_unchanged_at_base_total(self):
        assert scale_targets(FLASHCARD_TARGETS, 300) == FLASHCARD_TARGETS

    @pytest.mark.parametrize("total", [1, 10, 100, 150, 295, 600])
    def test_sums_to_total(self, total):
        assert sum(scale_targets(FLASHCARD_TARGETS, total).values()) == total

    def test_proportional(self):
        assert scale_targets(FLASHCARD_TARGETS, 150) == {"1": 18, "2": 36, "3": 20, "4": 43, "5": 33}


class TestStratifiedSampler:
    """Tests for the quota sampler."""

    def test_quota_respected_with_ample_pool(self, rng):
        items = make_items({"1": 50, "2": 90, "3": 50, "4": 100, "5": 80})
        sample = StratifiedSampler(FLASHCARD_TARGETS, 300, FLASHCARD_FILL_ORDER, rng).sample(items)

        counts = Counter(i.domain for i in sample)
        assert len(sample) == 300
        for domain, target in FLASHCARD_TARGETS.items():
            assert counts[domain] == target

    def test_no_duplicates(self, rng):
        items = make_items({"1": 50, "2": 90, "3": 50, "4": 100, "5": 80})
        sample = StratifiedSampler(QUESTION_TARGETS, 295, rng=rng).sample(items)

        ids = [i.id for i in sample]
        assert len(ids) == len(set(ids))

    def test_top_up_follows_fill_order(self, rng):
        """Domain 1 is short by 30; domain 4 is drawn first to fill the gap."""
        items = make_items({"1": 6, "2": 72, "3": 39, "4": 200, "5": 66})
        sample = StratifiedSampler(FLASHCARD_TARGETS, 300, FLASHCARD_FILL_ORDER, rng).sample(items)

        counts = Counter(i.domain for i in sample)
        assert len(sample) == 300
        assert counts["1"] == 6
        assert counts["4"] == 87 + 30

    def test_top_up_from_pooled_leftovers(self, rng):
        items = make_items({"1": 0, "2": 100, "3": 100, "4": 100, "5": 100})
        sample = StratifiedSampler(QUESTION_TARGETS, 295, rng=rng).sample(items)

        counts = Counter(i.domain for i in sample)
        assert len(sample) == 295
        assert counts["1"] == 0

    def test_shortfall_returns_everything(self, rng):
        items = make_items({"1": 3, "2": 4, "3": 2, "4": 5, "5": 1})
        sample = StratifiedSampler(FLASHCARD_TARGETS, 300, FLASHCARD_FILL_ORDER, rng).sample(items)

        assert sorted(i.id for i in sample) == list(range(15))

    def test_never_exceeds_total(self, rng):
        items = make_items({"1": 500, "2": 500, "3": 500, "4": 500, "5": 500})
        sample = StratifiedSampler(FLASHCARD_TARGETS, 120, FLASHCARD_FILL_ORDER, rng).sample(items)

        assert len(sample) == 120

    def test_missing_domain_defaults_to_one(self, rng):
        items = [Item(i, None) for i in range(10)]
        sampler = StratifiedSampler({"1": 5, "2": 5}, 5, rng=rng)

        assert len(sampler.sample(items)) == 5

    def test_seeded_runs_are_reproducible(self):
        items = make_items({"1": 50, "2": 90, "3": 50, "4": 100, "5": 80})
        first = StratifiedSampler(FLASHCARD_TARGETS, 300, rng=random.Random(7)).sample(items)
        second = StratifiedSampler(FLASHCARD_TARGETS, 300, rng=random.Random(7)).sample(items)

        assert [i.id for i in first] == [i.id for i in second]


def test_shuffled_returns_copy(rng):
    items = [1, 2, 3, 4, 5]
    result = shuffled(items, rng)

    assert sorted(result) == items
    assert items == [1, 2, 3, 4, 5]
