"""Board shape carving.

Each archetype starts from a fully playable square and kills cells in the
first half of the board only, mirroring every carve through the center so
the result is symmetric under 180 degree rotation. A final flood fill from
the center removes anything the carving cut off.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..core.constants import ORTHOGONAL_STEPS, Archetype, Bounds, manhattan
from ..core.exceptions import ConfigError
from ..core.rng import weighted_key
from ..utils.logger import get_logger
from .board import Mask, Position, flood_fill, mirror


LOGGER = get_logger(__name__)


def _default_archetype_weights() -> Dict[Archetype, float]:
    return {archetype: 1.0 for archetype in Archetype}


@dataclass
class ShapeConfig:
    size: int = 9
    center_protection_radius: int = 2
    archetype_weights: Dict[Archetype, float] = field(default_factory=_default_archetype_weights)
    archetype: Optional[Archetype] = None
    edge_keep_probability: float = 0.5
    corridor_gap_probability: float = 0.3
    corridor_second_wall_probability: float = 0.4
    scattered_grow_probability: float = 0.3
    open_hole_probability: float = 0.4

    def validate(self) -> None:
        if self.size < 3:
            raise ConfigError(f"Board size must be at least 3, got {self.size}")
        if self.center_protection_radius < 1:
            raise ConfigError("Center protection radius must be positive")
        if self.archetype is None and not any(w > 0 for w in self.archetype_weights.values()):
            raise ConfigError("At least one archetype needs a positive weight")


@dataclass
class ShapeResult:
    playable: Mask
    archetype: Archetype

    @property
    def playable_count(self) -> int:
        return sum(1 for row in self.playable for alive in row if alive)


class BoardShapeGenerator:
    """Carves a symmetric, connected playable mask for one archetype."""

    def __init__(self, config: ShapeConfig, rng: random.Random) -> None:
        config.validate()
        self.config = config
        self.rng = rng
        self.size = config.size
        self.center = config.size // 2
        self.bounds = Bounds(config.size, config.size)

    def generate(self) -> ShapeResult:
        archetype = self.config.archetype or weighted_key(self.rng, self.config.archetype_weights)
        mask: Mask = [[True] * self.size for _ in range(self.size)]
        carve = {
            Archetype.DIAMOND: self._carve_diamond,
            Archetype.CORRIDOR: self._carve_corridor,
            Archetype.SCATTERED: self._carve_scattered,
            Archetype.OPEN: self._carve_open,
        }[archetype]
        carve(mask)
        enforce_connectivity(mask)
        result = ShapeResult(playable=mask, archetype=archetype)
        LOGGER.debug("Carved %s board with %s playable cells", archetype.value, result.playable_count)
        return result

    # ------------------------------------------------------------------
    # Geometry helpers
    # ------------------------------------------------------------------
    def _distance(self, row: int, col: int) -> int:
        return manhattan(row, col, self.center, self.center)

    def _protected(self, row: int, col: int) -> bool:
        # A cell is protected when it or its mirror lies near the center.
        radius = self.config.center_protection_radius
        mr, mc = mirror(self.size, row, col)
        return self._distance(row, col) < radius or self._distance(mr, mc) < radius

    def _in_first_half(self, row: int, col: int) -> bool:
        return row < self.center or (row == self.center and col < self.center)

    def _kill(self, mask: Mask, row: int, col: int) -> None:
        if self._protected(row, col):
            return
        mask[row][col] = False
        mr, mc = mirror(self.size, row, col)
        mask[mr][mc] = False

    def _randint(self, low: int, high: int) -> int:
        return self.rng.randint(low, max(low, high))

    def _cut_corners(self, mask: Mask, depth: int) -> None:
        """Kill a triangle of ``depth`` diagonals in every corner."""

        last = self.size - 1
        for r in range(depth):
            for c in range(depth - r):
                for row, col in ((r, c), (r, last - c), (last - r, c), (last - r, last - c)):
                    if not self._protected(row, col):
                        mask[row][col] = False

    def _interior_candidates(self, mask: Mask) -> List[Position]:
        return [
            (r, c)
            for r in range(1, self.size - 1)
            for c in range(1, self.size - 1)
            if self._in_first_half(r, c) and not self._protected(r, c) and mask[r][c]
        ]

    # ------------------------------------------------------------------
    # Archetypes
    # ------------------------------------------------------------------
    def _carve_diamond(self, mask: Mask) -> None:
        margin = self.rng.randint(2, 3)
        limit = self.center + margin - 1
        for r in range(self.size):
            for c in range(self.size):
                if not self._in_first_half(r, c):
                    continue
                distance = self._distance(r, c)
                if distance <= limit:
                    continue
                # The boundary ring is ragged rather than a clean diagonal.
                if distance == limit + 1 and self.rng.random() < self.config.edge_keep_probability:
                    continue
                self._kill(mask, r, c)

        if self.center - 1 < 2:
            return
        for _ in range(self.rng.randint(1, 3)):
            offset = self.rng.randint(2, self.center - 1)
            row, col = self.rng.choice(((offset, offset), (offset, self.size - 1 - offset)))
            if mask[row][col]:
                self._kill(mask, row, col)

    def _carve_corridor(self, mask: Mask) -> None:
        horizontal = self.rng.random() < 0.5
        first = self.rng.randint(1, 2)
        offsets = [first]
        if self.rng.random() < self.config.corridor_second_wall_probability:
            second = self._randint(3, self.size // 2 - 1)
            if second != first:
                offsets.append(second)

        for offset in offsets:
            line = self.center - offset
            if line < 0:
                continue
            # Mirroring the wall at center - offset yields its partner at center + offset.
            for i in range(self.size):
                row, col = (line, i) if horizontal else (i, line)
                if self._protected(row, col):
                    continue
                if min(i, self.size - 1 - i) < 2:
                    continue
                if self.rng.random() < self.config.corridor_gap_probability:
                    continue
                self._kill(mask, row, col)

        self._cut_corners(mask, self.rng.randint(1, 2))

    def _carve_scattered(self, mask: Mask) -> None:
        holes = self.rng.randint(4, 7)
        candidates = self._interior_candidates(mask)
        self.rng.shuffle(candidates)
        placed = 0
        for row, col in candidates:
            if placed >= holes:
                break
            if not mask[row][col]:
                continue
            if any(
                self.bounds.contains(row + dr, col + dc)
                and mask[row + dr][col + dc]
                and self._protected(row + dr, col + dc)
                for dr, dc in ORTHOGONAL_STEPS
            ):
                continue
            self._kill(mask, row, col)
            if self.rng.random() < self.config.scattered_grow_probability:
                grow = [
                    (row + dr, col + dc)
                    for dr, dc in ORTHOGONAL_STEPS
                    if self.bounds.contains(row + dr, col + dc)
                    and mask[row + dr][col + dc]
                    and not self._protected(row + dr, col + dc)
                    and self._in_first_half(row + dr, col + dc)
                ]
                if grow:
                    self._kill(mask, *self.rng.choice(grow))
            placed += 1

        self._cut_corners(mask, self.rng.randint(0, 1) + 1)

    def _carve_open(self, mask: Mask) -> None:
        self._cut_corners(mask, self.rng.randint(1, 2))
        if self.rng.random() < self.config.open_hole_probability:
            candidates = self._interior_candidates(mask)
            if candidates:
                self._kill(mask, *self.rng.choice(candidates))


def enforce_connectivity(mask: Mask) -> Mask:
    """Kill every playable cell (and its mirror) the center cannot reach."""

    size = len(mask)
    center = size // 2
    mask[center][center] = True
    mr, mc = mirror(size, center, center)
    mask[mr][mc] = True
    reachable = flood_fill(mask, (center, center))
    for r in range(size):
        for c in range(size):
            if mask[r][c] and (r, c) not in reachable:
                mask[r][c] = False
                mr, mc = mirror(size, r, c)
                mask[mr][mc] = False
    return mask


def generate_shape(rng: random.Random, config: Optional[ShapeConfig] = None) -> ShapeResult:
    """Carve a board shape for ``config`` using ``rng``."""

    return BoardShapeGenerator(config or ShapeConfig(), rng).generate()
