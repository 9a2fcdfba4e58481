# gridsearch/core/path.py
#!/usr/bin/env python3
from array import array
from typing import List

from gridsearch.core.grid import Grid
from gridsearch.core.types import Cell

NO_PARENT = -1


def new_parent_arena(grid: Grid) -> array:
    """One slot per cell index; NO_PARENT until the search sets it."""
    return array('i', [NO_PARENT] * grid.cell_count)


def reconstruct_path(parent: array, grid: Grid) -> List[Cell]:
    """Start -> end following the parent arena, or [] if the chain never reaches start."""
    if not grid.is_ready():
        return []
    start_i = grid.index(grid.start)
    cur = grid.index(grid.end)
    idx: List[int] = []
    # a valid chain visits every cell at most once
    for _ in range(grid.cell_count):
        idx.append(cur)
        if cur == start_i:
            idx.reverse()
            return [grid.cell_at(i) for i in idx]
        cur = parent[cur]
        if cur == NO_PARENT:
            return []
    return []


def interior(path: List[Cell]) -> List[Cell]:
    """Cells strictly between start and end, in reveal order (end side first)."""
    return list(reversed(path[1:-1]))
