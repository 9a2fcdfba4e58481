# gridsearch/core/dfs.py
#!/usr/bin/env python3
"""
Depth-first search, one pacing interval per step().

Recursive pre-order DFS flattened onto an explicit stack of
(cell, neighbor iterator) frames. A step enters the pending cell and then
walks the frames until the next unvisited neighbor turns up; that neighbor
becomes the new pending cell. Backtracking costs no extra steps.
"""

from array import array
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from gridsearch.core.grid import Grid
from gridsearch.core.path import new_parent_arena, reconstruct_path
from gridsearch.core.types import StepResult, Cell

Frame = Tuple[Cell, Iterator[Cell]]


@dataclass
class DFSAlgo:
    name: str = "DFS"

    grid: Optional[Grid] = None
    stack: List[Frame] = field(default_factory=list)
    pending: Optional[Cell] = None
    seen: bytearray = field(default_factory=bytearray)
    parent: array = field(default_factory=lambda: array('i'))
    explored: int = 0
    done: bool = False
    no_path: bool = False

    def init(self, grid: Grid) -> None:
        self.grid = grid
        self.reset()

    def reset(self) -> None:
        self.stack.clear()
        self.pending = None
        self.explored = 0
        self.done = False
        self.no_path = False
        if self.grid is None or not self.grid.is_ready():
            self.seen = bytearray()
            self.parent = array('i')
            return
        self.seen = bytearray(self.grid.cell_count)
        self.parent = new_parent_arena(self.grid)
        self.pending = self.grid.start

    def _marks(self, c: Cell) -> bool:
        return c != self.grid.start and c != self.grid.end

    def step(self) -> StepResult:
        if self.grid is None or not self.grid.is_ready():
            return StepResult(status="idle", metrics={"algo": self.name})

        if self.done:
            path = reconstruct_path(self.parent, self.grid)
            return StepResult(status="done", path=path, metrics=self._metrics(path_len=len(path) - 1))

        if self.no_path:
            return StepResult(status="no_path", metrics=self._metrics())

        closed: List[Cell] = []
        current = self.pending

        if self.pending is not None:
            u = self.pending
            self.pending = None
            self.seen[self.grid.index(u)] = 1
            self.explored += 1
            if self._marks(u):
                closed.append(u)
            if u == self.grid.end:
                self.done = True
                path = reconstruct_path(self.parent, self.grid)
                return StepResult(status="done", closed=closed, current=u, path=path,
                                  metrics=self._metrics(path_len=len(path) - 1))
            self.stack.append((u, iter(self.grid.neighbors(u))))

        while self.stack:
            node, it = self.stack[-1]
            for v in it:
                v_i = self.grid.index(v)
                if self.seen[v_i]:
                    continue
                self.parent[v_i] = self.grid.index(node)
                self.pending = v
                opened = [v] if self._marks(v) else []
                return StepResult(status="running", opened=opened, closed=closed,
                                  current=current or node, metrics=self._metrics())
            self.stack.pop()

        self.no_path = True
        return StepResult(status="no_path", closed=closed, current=current, metrics=self._metrics())

    def _metrics(self, path_len: int = 0) -> dict:
        return {
            "algo": self.name,
            "explored": self.explored,
            "frontier_size": len(self.stack),
            "depth": len(self.stack),
            "path_len": max(0, path_len),
        }
