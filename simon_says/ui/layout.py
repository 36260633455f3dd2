"""Layout and timing constants for the Simon Says playback window."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

from ..game import Level, TileKind

# Tile metrics
TILE_SIZE: int = 64
BOARD_OUTER_PADDING: int = 1

# Seconds between two fired actions while a plan runs
SIMULATION_INTERVAL: float = 0.5

# Colors expressed as RGB tuples
BACKGROUND_COLOR: Tuple[int, int, int] = (12, 14, 26)
GRID_LINE_COLOR: Tuple[int, int, int] = (58, 64, 96)
PLAYER_COLOR: Tuple[int, int, int] = (255, 205, 117)
FACING_COLOR: Tuple[int, int, int] = (20, 24, 44)
TILE_COLORS: Dict[TileKind, Tuple[int, int, int]] = {
    TileKind.START: (86, 108, 134),
    TileKind.BASIC: (59, 93, 201),
    TileKind.ICE: (164, 222, 240),
    TileKind.WALL: (65, 83, 105),
    TileKind.CW_ROT: (239, 125, 87),
    TileKind.CCW_ROT: (177, 62, 83),
    TileKind.FINISH: (12, 196, 15),
}


@dataclass(frozen=True)
class BoardGeometry:
    """Maps level coordinates onto surface pixels."""

    origin: Tuple[int, int]
    columns: int
    rows: int
    cell_size: int

    @property
    def size(self) -> Tuple[int, int]:
        padding = 2 * BOARD_OUTER_PADDING * self.cell_size
        return self.columns * self.cell_size + padding, self.rows * self.cell_size + padding

    def cell_rect(self, position: Tuple[int, int]) -> Tuple[int, int, int, int]:
        column = position[0] - self.origin[0] + BOARD_OUTER_PADDING
        row = position[1] - self.origin[1] + BOARD_OUTER_PADDING
        return column * self.cell_size, row * self.cell_size, self.cell_size, self.cell_size


def compute_geometry(level: Level, cell_size: int = TILE_SIZE) -> BoardGeometry:
    """Fit the level's bounding box, plus a ring of void cells, on the board."""

    min_x, min_y, max_x, max_y = level.bounds()
    return BoardGeometry(
        origin=(min_x, min_y),
        columns=max_x - min_x + 1,
        rows=max_y - min_y + 1,
        cell_size=cell_size,
    )
