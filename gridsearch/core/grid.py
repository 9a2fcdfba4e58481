# gridsearch/core/grid.py
#!/usr/bin/env python3
from dataclasses import dataclass, field
from typing import List, Optional
import random

from gridsearch.core.types import Cell, CellKind

# down, up, right, left: fixes tie-break order for every strategy
DIRECTIONS = ((1, 0), (-1, 0), (0, 1), (0, -1))
DEFAULT_WALL_DENSITY = 0.18
MIN_SIZE = 2


def _blank(size: int) -> List[List[CellKind]]:
    return [[CellKind.EMPTY] * size for _ in range(size)]


@dataclass
class Grid:
    size: int
    kinds: List[List[CellKind]] = field(default_factory=list)   # [row][col]
    start: Optional[Cell] = None
    end: Optional[Cell] = None

    def __post_init__(self):
        if self.size < MIN_SIZE:
            raise ValueError(f"grid size must be at least {MIN_SIZE}, got {self.size}")
        if not self.kinds:
            self.kinds = _blank(self.size)
        assert len(self.kinds) == self.size and all(len(r) == self.size for r in self.kinds), \
            "kinds size mismatch"

    # -------------------- queries --------------------

    @property
    def cell_count(self) -> int:
        return self.size * self.size

    def in_bounds(self, c: Cell) -> bool:
        r, col = c
        return 0 <= r < self.size and 0 <= col < self.size

    def kind_of(self, c: Cell) -> CellKind:
        r, col = c
        return self.kinds[r][col]

    def is_wall(self, c: Cell) -> bool:
        return self.kind_of(c) is CellKind.WALL

    def index(self, c: Cell) -> int:
        r, col = c
        return r * self.size + col

    def cell_at(self, i: int) -> Cell:
        return divmod(i, self.size)

    def neighbors(self, c: Cell) -> List[Cell]:
        """In-bounds, non-wall 4-neighbors of c, always in DIRECTIONS order."""
        r, col = c
        out: List[Cell] = []
        for dr, dc in DIRECTIONS:
            n = (r + dr, col + dc)
            if self.in_bounds(n) and not self.is_wall(n):
                out.append(n)
        return out

    def is_ready(self) -> bool:
        return self.start is not None and self.end is not None and self.start != self.end

    def walls(self) -> List[Cell]:
        return [(r, c) for r in range(self.size) for c in range(self.size)
                if self.kinds[r][c] is CellKind.WALL]

    # -------------------- editing --------------------

    def set_cell_kind(self, r: int, c: int, kind: CellKind) -> bool:
        """Paint one cell. Returns False when nothing changed."""
        cell = (r, c)
        if not self.in_bounds(cell):
            return False
        kind = CellKind(kind)
        current = self.kinds[r][c]

        if kind is CellKind.START:
            if self.start is not None:
                self._put(self.start, CellKind.EMPTY)
            if cell == self.end:
                self.end = None
            self._put(cell, CellKind.START)
            self.start = cell
        elif kind is CellKind.END:
            if self.end is not None:
                self._put(self.end, CellKind.EMPTY)
            if cell == self.start:
                self.start = None
            self._put(cell, CellKind.END)
            self.end = cell
        elif kind is CellKind.WALL:
            # walls only go on empty cells; start/end must be erased first
            if current is not CellKind.EMPTY:
                return False
            self._put(cell, CellKind.WALL)
        else:
            if cell == self.start:
                self.start = None
            if cell == self.end:
                self.end = None
            if current is CellKind.EMPTY:
                return False
            self._put(cell, CellKind.EMPTY)
        return True

    def reset(self, preserve_walls: bool = True) -> None:
        """Back to a pre-run layout. Start/end always survive."""
        if preserve_walls:
            return
        for r, c in self.walls():
            self.kinds[r][c] = CellKind.EMPTY

    def clear_all(self) -> None:
        self.kinds = _blank(self.size)
        self.start = None
        self.end = None

    def resize(self, n: int) -> None:
        if n < MIN_SIZE:
            raise ValueError(f"grid size must be at least {MIN_SIZE}, got {n}")
        self.size = n
        self.clear_all()

    def randomize_walls(self, density: float = DEFAULT_WALL_DENSITY,
                        rng: Optional[random.Random] = None) -> int:
        """Clear the grid, then wall each cell with probability `density`."""
        if not 0.0 <= density <= 1.0:
            raise ValueError(f"wall density must be within [0, 1], got {density}")
        rng = rng or random.Random()
        self.clear_all()
        placed = 0
        for r in range(self.size):
            for c in range(self.size):
                if rng.random() < density:
                    self.kinds[r][c] = CellKind.WALL
                    placed += 1
        return placed

    def seed_endpoints(self) -> None:
        """Default start/end placement for a fresh grid."""
        n = self.size
        mid = n // 3
        self.set_cell_kind(mid, n // 4, CellKind.START)
        self.set_cell_kind(n - mid - 1, int(n * 0.75), CellKind.END)

    def _put(self, c: Cell, kind: CellKind) -> None:
        r, col = c
        self.kinds[r][col] = kind

    @classmethod
    def from_rows(cls, rows: List[str]) -> "Grid":
        """Build from text rows: '.' empty, '#' wall, 'S' start, 'E' end."""
        grid = cls(len(rows))
        symbols = {".": CellKind.EMPTY, "#": CellKind.WALL, "S": CellKind.START, "E": CellKind.END}
        assert all(len(row) == grid.size for row in rows), "rows must form a square"
        for r, row in enumerate(rows):
            for c, ch in enumerate(row):
                grid.set_cell_kind(r, c, symbols[ch])
        return grid
