"""
Domain-stratified sampling.

Draws a fixed-size subset with per-domain quotas, tops up under-filled quotas
from other domains, and reshuffles the result. Randomness comes from an
injectable ``random.Random`` so callers (and tests) can seed it; the default
is an unseeded instance, so production runs differ from run to run.
"""

from __future__ import annotations

import random
from collections import defaultdict
from collections.abc import Callable, Sequence
from typing import Generic, TypeVar

from loguru import logger

from .domains import DEFAULT_DOMAIN

T = TypeVar("T")


def shuffled(items: Sequence[T], rng: random.Random) -> list[T]:
    """Return a shuffled copy of ``items``."""
    copy = list(items)
    rng.shuffle(copy)
    return copy


def scale_targets(targets: dict[str, int], total: int) -> dict[str, int]:
    """
    Rescale per-domain targets so they sum to ``total``.

    Uses largest-remainder rounding, so the configured targets come back
    unchanged when ``total`` equals their sum.
    """
    base_total = sum(targets.values())
    if base_total <= 0 or total == base_total:
        return dict(targets)

    exact = {d: t * total / base_total for d, t in targets.items()}
    scaled = {d: int(v) for d, v in exact.items()}
    remainder = total - sum(scaled.values())
    by_fraction = sorted(exact, key=lambda d: exact[d] - scaled[d], reverse=True)
    for d in by_fraction[:remainder]:
        scaled[d] += 1
    return scaled


def _default_key(item) -> str:
    domain = getattr(item, "domain", None)
    return str(domain) if domain else DEFAULT_DOMAIN


class StratifiedSampler(Generic[T]):
    """
    Per-domain quota sampler.

    Args:
        targets: Domain id -> quota. Rescaled when it does not sum to ``total``.
        total: Size of the final sample (upper bound).
        fill_order: Domains to pull extra items from, in order, when quotas
            leave the sample short. When None, leftovers from every domain are
            pooled and drawn at random instead.
        rng: Random source. Defaults to an unseeded ``random.Random``.
        key: Maps an item to its domain id.
    """

    def __init__(
        self,
        targets: dict[str, int],
        total: int,
        fill_order: Sequence[str] | None = None,
        rng: random.Random | None = None,
        key: Callable[[T], str] = _default_key,
    ):
        self.total = total
        self.targets = scale_targets(targets, total)
        self.fill_order = tuple(fill_order) if fill_order else None
        self.rng = rng or random.Random()
        self.key = key

    def sample(self, items: Sequence[T]) -> list[T]:
        buckets: dict[str, list[int]] = defaultdict(list)
        for index, item in enumerate(items):
            buckets[self.key(item)].append(index)

        chosen: list[int] = []
        for domain, target in self.targets.items():
            pool = shuffled(buckets.get(domain, []), self.rng)
            take = min(target, len(pool))
            if take < target:
                logger.debug(f"Domain {domain}: {len(pool)} candidates for quota {target}")
            chosen.extend(pool[:take])

        need = self.total - len(chosen)
        if need > 0:
            chosen.extend(self._top_up(buckets, set(chosen), need))

        if len(chosen) < self.total:
            logger.warning(
                f"Sample short of target: {len(chosen)}/{self.total} "
                f"(pool exhausted at {len(items)} items)"
            )

        return [items[i] for i in shuffled(chosen, self.rng)]

    def _top_up(self, buckets: dict[str, list[int]], used: set[int], need: int) -> list[int]:
        extra: list[int] = []
        if self.fill_order:
            for domain in self.fill_order:
                if need <= 0:
                    break
                unused = [i for i in buckets.get(domain, []) if i not in used]
                surplus = shuffled(unused, self.rng)[:need]
                extra.extend(surplus)
                need -= len(surplus)
        else:
            remaining = sorted(i for indices in buckets.values() for i in indices if i not in used)
            extra = shuffled(remaining, self.rng)[:need]
        return extra
