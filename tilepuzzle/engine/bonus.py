"""Bonus tile placement on a carved board."""

from __future__ import annotations

import random
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from ..core.constants import BONUS_PRIORITY, ORTHOGONAL_STEPS, BonusType, Bounds, manhattan
from ..core.exceptions import ConfigError
from ..core.rng import geometric_choice
from ..utils.logger import get_logger
from .board import Position


LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class BonusPolicy:
    """Placement preferences for one bonus tier."""

    edge_preference: float
    min_distance: int
    allow_adjacent: bool


def _default_counts() -> Dict[BonusType, int]:
    return {BonusType.TW: 2, BonusType.DW: 3, BonusType.TL: 4, BonusType.DL: 4}


def _default_policies() -> Dict[BonusType, BonusPolicy]:
    return {
        BonusType.TW: BonusPolicy(edge_preference=0.8, min_distance=3, allow_adjacent=False),
        BonusType.DW: BonusPolicy(edge_preference=0.5, min_distance=2, allow_adjacent=False),
        BonusType.TL: BonusPolicy(edge_preference=0.6, min_distance=2, allow_adjacent=False),
        BonusType.DL: BonusPolicy(edge_preference=0.5, min_distance=1, allow_adjacent=True),
    }


@dataclass
class BonusConfig:
    counts: Dict[BonusType, int] = field(default_factory=_default_counts)
    policies: Dict[BonusType, BonusPolicy] = field(default_factory=_default_policies)
    priority: Tuple[BonusType, ...] = BONUS_PRIORITY
    top_k: int = 5
    decay: float = 0.5
    # Nudge each tier towards the emptier top/bottom and left/right halves.
    balance_halves: bool = False

    def validate(self) -> None:
        for tier in self.priority:
            if self.counts.get(tier, 0) < 0:
                raise ConfigError(f"Negative bonus count for {tier.value}")
            if self.counts.get(tier, 0) and tier not in self.policies:
                raise ConfigError(f"Missing placement policy for {tier.value}")
        if self.top_k < 1:
            raise ConfigError("top_k must be at least 1")


@dataclass
class BonusLayout:
    bonuses: Dict[Position, BonusType]

    def counts(self) -> Dict[BonusType, int]:
        counts = Counter(self.bonuses.values())
        counts.pop(BonusType.START, None)
        return dict(counts)

    def shortfall(self, targets: Dict[BonusType, int]) -> Dict[BonusType, int]:
        """Tiers that received fewer cells than requested, with the missing amount."""

        placed = self.counts()
        return {
            tier: target - placed.get(tier, 0)
            for tier, target in targets.items()
            if placed.get(tier, 0) < target
        }


@dataclass
class _HalfBalance:
    top: int = 0
    bottom: int = 0
    left: int = 0
    right: int = 0


class BonusPlacer:
    """Assigns bonus tiers to playable cells, scarcest tier first."""

    def __init__(self, config: BonusConfig, rng: random.Random) -> None:
        config.validate()
        self.config = config
        self.rng = rng

    def place(self, playable: Sequence[Sequence[bool]]) -> BonusLayout:
        size = len(playable)
        center = size // 2
        bounds = Bounds(size, size)
        bonuses: Dict[Position, BonusType] = {(center, center): BonusType.START}

        for tier in self.config.priority:
            target = self.config.counts.get(tier, 0)
            if not target:
                continue
            policy = self.config.policies[tier]
            balance = _HalfBalance()
            placed = 0
            for _ in range(target):
                eligible = self._eligible_cells(playable, bonuses, bounds, policy)
                if not eligible:
                    break
                # Shuffle before the stable sort so equal scores carry no positional bias.
                self.rng.shuffle(eligible)
                ranked = sorted(
                    eligible,
                    key=lambda pos: self._score(pos, size, policy, balance),
                    reverse=True,
                )
                row, col = geometric_choice(self.rng, ranked, self.config.top_k, self.config.decay)
                bonuses[(row, col)] = tier
                self._track(balance, row, col, center)
                placed += 1
            if placed < target:
                LOGGER.debug("Placed %s/%s %s bonuses", placed, target, tier.value)

        return BonusLayout(bonuses=bonuses)

    def _eligible_cells(
        self,
        playable: Sequence[Sequence[bool]],
        bonuses: Dict[Position, BonusType],
        bounds: Bounds,
        policy: BonusPolicy,
    ) -> List[Position]:
        center = bounds.rows // 2
        cells: List[Position] = []
        for r in range(bounds.rows):
            for c in range(bounds.cols):
                if not playable[r][c] or (r, c) in bonuses:
                    continue
                if manhattan(r, c, center, center) < policy.min_distance:
                    continue
                if not policy.allow_adjacent and any(
                    (r + dr, c + dc) in bonuses for dr, dc in ORTHOGONAL_STEPS
                ):
                    continue
                cells.append((r, c))
        return cells

    def _score(self, pos: Position, size: int, policy: BonusPolicy, balance: _HalfBalance) -> float:
        row, col = pos
        edge_distance = min(row, col, size - 1 - row, size - 1 - col)
        closeness = 1 - edge_distance / (size // 2)
        score = closeness * policy.edge_preference + (1 - closeness) * (1 - policy.edge_preference)
        if self.config.balance_halves:
            score += self._balance_adjustment(balance, row, col, size // 2)
        return score

    @staticmethod
    def _balance_adjustment(balance: _HalfBalance, row: int, col: int, center: int) -> float:
        adjustment = 0.0
        mine, other = (balance.top, balance.bottom) if row < center else (balance.bottom, balance.top)
        if mine > other:
            adjustment -= 1.0
        elif mine < other:
            adjustment += 0.8
        mine, other = (balance.left, balance.right) if col < center else (balance.right, balance.left)
        if mine > other:
            adjustment -= 0.5
        elif mine < other:
            adjustment += 0.4
        return adjustment

    @staticmethod
    def _track(balance: _HalfBalance, row: int, col: int, center: int) -> None:
        if row < center:
            balance.top += 1
        else:
            balance.bottom += 1
        if col < center:
            balance.left += 1
        else:
            balance.right += 1


def place_bonuses(
    playable: Sequence[Sequence[bool]],
    rng: random.Random,
    config: Optional[BonusConfig] = None,
) -> BonusLayout:
    """Tag bonus cells on ``playable``; the center is always the start cell."""

    return BonusPlacer(config or BonusConfig(), rng).place(playable)
