# gridsearch/core/ids.py
#!/usr/bin/env python3
"""
Iterative deepening DFS, one pacing interval per step().

Runs a depth-limited DFS with limits 1, 2, ... up to the number of cells.
Each limit starts from a fresh parent arena and expansion map. A cell is
expanded again when it is reached with more remaining depth than the last
time, so the first limit that reaches the end yields a shortest path.

A pass that ends with every reached cell expanded has explored the whole
reachable region, and a deeper limit would only repeat it. The run then
ends with no path instead of climbing on to the cell-count bound.

The explored counter is never reset between limits: re-expanding the same
cells on every deeper pass is the cost of iterative deepening.
"""

from array import array
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Set, Tuple

from gridsearch.core.grid import Grid
from gridsearch.core.path import new_parent_arena, reconstruct_path
from gridsearch.core.types import StepResult, Cell

NOT_EXPANDED = -1

Frame = Tuple[Cell, int, Iterator[Cell]]   # (cell, remaining depth, neighbors)


@dataclass
class IDSAlgo:
    name: str = "IDS"

    grid: Optional[Grid] = None
    limit: int = 0
    max_depth: int = 0
    stack: List[Frame] = field(default_factory=list)
    pending: Optional[Tuple[Cell, int]] = None
    expanded_at: array = field(default_factory=lambda: array('i'))  # remaining depth when expanded
    cut_off: Set[int] = field(default_factory=set)                  # reached with no depth left
    parent: array = field(default_factory=lambda: array('i'))
    explored: int = 0
    done: bool = False
    no_path: bool = False

    def init(self, grid: Grid) -> None:
        self.grid = grid
        self.reset()

    def reset(self) -> None:
        self.stack.clear()
        self.cut_off.clear()
        self.pending = None
        self.explored = 0
        self.limit = 0
        self.done = False
        self.no_path = False
        if self.grid is None or not self.grid.is_ready():
            self.max_depth = 0
            self.expanded_at = array('i')
            self.parent = array('i')
            return
        self.max_depth = self.grid.cell_count
        self._next_limit()

    def _next_limit(self) -> bool:
        """Start the next depth-limited pass. False once the bound is exceeded."""
        self.limit += 1
        self.stack.clear()
        self.cut_off.clear()
        if self.limit > self.max_depth:
            self.limit = self.max_depth
            self.pending = None
            return False
        self.parent = new_parent_arena(self.grid)
        self.expanded_at = array('i', [NOT_EXPANDED] * self.grid.cell_count)
        self.pending = (self.grid.start, self.limit)
        return True

    def _pass_was_cut_short(self) -> bool:
        return any(self.expanded_at[i] == NOT_EXPANDED for i in self.cut_off)

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
        current: Optional[Cell] = None

        while True:
            if self.pending is not None:
                u, remaining = self.pending
                self.pending = None
                current = u
                if remaining == 0:
                    if u == self.grid.end:
                        self.done = True
                        path = reconstruct_path(self.parent, self.grid)
                        return StepResult(status="done", closed=closed, current=u, path=path,
                                          metrics=self._metrics(path_len=len(path) - 1))
                    self.cut_off.add(self.grid.index(u))
                else:
                    self.expanded_at[self.grid.index(u)] = remaining
                    self.explored += 1
                    if self._marks(u) and u not in closed:
                        closed.append(u)
                    self.stack.append((u, remaining, iter(self.grid.neighbors(u))))

            while self.stack:
                node, remaining, it = self.stack[-1]
                for v in it:
                    v_i = self.grid.index(v)
                    if self.expanded_at[v_i] >= remaining - 1:
                        continue
                    self.parent[v_i] = self.grid.index(node)
                    self.pending = (v, remaining - 1)
                    opened = [v] if self._marks(v) else []
                    return StepResult(status="running", opened=opened, closed=closed,
                                      current=current or node, metrics=self._metrics())
                self.stack.pop()

            # this limit is exhausted
            if not self._pass_was_cut_short() or not self._next_limit():
                self.no_path = True
                return StepResult(status="no_path", closed=closed, current=current,
                                  metrics=self._metrics())

    def _metrics(self, path_len: int = 0) -> dict:
        return {
            "algo": self.name,
            "explored": self.explored,
            "frontier_size": len(self.stack),
            "depth": self.limit,
            "path_len": max(0, path_len),
        }
