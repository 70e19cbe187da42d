"""Seeded randomness helpers.

Every generator component receives its ``random.Random`` explicitly; nothing
in the package touches the module-level ``random`` state. Reproducing a
puzzle therefore only requires the top-level seed.
"""

from __future__ import annotations

import random
from typing import Optional, Sequence, TypeVar, Union

T = TypeVar("T")

Seed = Union[int, str, None]


def create_rng(seed: Seed = None) -> random.Random:
    """Return a generator seeded from ``seed`` (``None`` means nondeterministic)."""

    return random.Random(seed)


def derive_seed(rng: random.Random) -> int:
    """Draw a child seed for one generation attempt."""

    return rng.randint(0, 1_000_000)


def geometric_choice(
    rng: random.Random,
    ranked: Sequence[T],
    top_k: int = 5,
    decay: float = 0.5,
) -> T:
    """Pick one of the first ``top_k`` ranked items with weights ``decay ** i``.

    The first item is the most likely pick, but lower ranked items keep a
    chance so repeated runs do not always produce the same layout.
    """

    if not ranked:
        raise ValueError("geometric_choice requires at least one candidate")
    pool = list(ranked[: max(1, top_k)])
    weights = [decay ** index for index in range(len(pool))]
    return rng.choices(pool, weights=weights, k=1)[0]


def weighted_key(rng: random.Random, weights: dict) -> Optional[object]:
    """Return a key of ``weights`` chosen proportionally to its value."""

    keys = [key for key, weight in weights.items() if weight > 0]
    if not keys:
        return None
    return rng.choices(keys, weights=[weights[key] for key in keys], k=1)[0]
