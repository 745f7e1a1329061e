"""Shared constants and enumerations for the layout generator."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple


class Direction(str, Enum):
    """Canonical wall directions, always stored from the lower-indexed cell."""

    RIGHT = "right"
    DOWN = "down"


class Move(str, Enum):
    """Player moves accepted by a play session."""

    UP = "up"
    RIGHT = "right"
    DOWN = "down"
    LEFT = "left"


class TemplateKind(str, Enum):
    """All path templates the generator knows about."""

    AUTO = "auto"
    DFS = "dfs"
    SERPENTINE = "serpentine"
    SPIRAL = "spiral"
    COLUMN = "column"
    DIAGONAL = "diagonal"
    CENTER = "center"
    RINGS = "rings"
    BLOCK = "block"
    TILE = "tile"
    CHECKERBOARD = "checkerboard"
    CHECKER2 = "checker2"
    SPOKES = "spokes"
    TRUESPOKES = "truespokes"
    CORNER = "corner"
    PERIMETER = "perimeter"
    DIAGSTRIPES = "diagstripes"
    HILBERT = "hilbert"


ORTHOGONAL_STEPS: Tuple[Tuple[int, int], ...] = ((0, -1), (1, 0), (0, 1), (-1, 0))

MOVE_DELTAS: Dict[Move, Tuple[int, int]] = {
    Move.UP: (0, -1),
    Move.RIGHT: (1, 0),
    Move.DOWN: (0, 1),
    Move.LEFT: (-1, 0),
}

# Heaviest on the DFS and base serpentine generators; sums to 1.0.
TEMPLATE_WEIGHTS: Dict[TemplateKind, float] = {
    TemplateKind.DFS: 0.20,
    TemplateKind.SERPENTINE: 0.14,
    TemplateKind.SPIRAL: 0.06,
    TemplateKind.COLUMN: 0.06,
    TemplateKind.DIAGONAL: 0.04,
    TemplateKind.CENTER: 0.05,
    TemplateKind.RINGS: 0.05,
    TemplateKind.BLOCK: 0.05,
    TemplateKind.TILE: 0.05,
    TemplateKind.CHECKERBOARD: 0.03,
    TemplateKind.CHECKER2: 0.03,
    TemplateKind.SPOKES: 0.04,
    TemplateKind.TRUESPOKES: 0.04,
    TemplateKind.CORNER: 0.05,
    TemplateKind.PERIMETER: 0.05,
    TemplateKind.DIAGSTRIPES: 0.03,
    TemplateKind.HILBERT: 0.03,
}


@dataclass(frozen=True)
class Preset:
    """A difficulty preset offered to players."""

    key: str
    label: str
    cols: int
    rows: int
    anchor_count: int
    min_gap: int
    wall_pct: float
    target_ms: int
    template: Optional[TemplateKind] = None
    apply_transforms: bool = True


PRESETS: Dict[str, Preset] = {
    "zip": Preset(
        key="zip",
        label="Zip 6x6 (12)",
        cols=6,
        rows=6,
        anchor_count=12,
        min_gap=2,
        wall_pct=0.0,
        target_ms=60_000,
        template=TemplateKind.SERPENTINE,
        apply_transforms=False,
    ),
    "beginner": Preset("beginner", "Beginner (6x6)", 6, 6, 10, 2, 0.00, 45_000),
    "standard": Preset("standard", "Standard (6x6)", 6, 6, 12, 3, 0.04, 60_000),
    "advanced": Preset("advanced", "Advanced (6x6)", 6, 6, 12, 5, 0.08, 75_000),
    "expert": Preset("expert", "Expert (6x6)", 6, 6, 12, 7, 0.12, 90_000),
}

DEFAULT_QUICK_BUDGET_MS = 250
DEFAULT_CONFIRM_BUDGET_MS = 4_000
DEFAULT_MAX_ATTEMPTS = 40
DEFAULT_DFS_ATTEMPTS = 6
DEFAULT_DFS_TIME_LIMIT_MS = 60


@dataclass(frozen=True)
class Bounds:
    """Simple rectangle bounds helper."""

    cols: int
    rows: int

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.cols and 0 <= y < self.rows

    @property
    def size(self) -> int:
        return self.cols * self.rows
