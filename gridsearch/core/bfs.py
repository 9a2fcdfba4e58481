# gridsearch/core/bfs.py
#!/usr/bin/env python3

from array import array
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, List, Optional

from gridsearch.core.grid import Grid
from gridsearch.core.path import new_parent_arena, reconstruct_path
from gridsearch.core.types import StepResult, Cell


@dataclass
class BFSAlgo:
    name: str = "BFS"

    grid: Optional[Grid] = None
    queue: Deque[Cell] = field(default_factory=deque)
    seen: bytearray = field(default_factory=bytearray)     # enqueued or expanded, by cell index
    parent: array = field(default_factory=lambda: array('i'))
    explored: int = 0
    done: bool = False
    no_path: bool = False

    def init(self, grid: Grid) -> None:
        self.grid = grid
        self.reset()

    def reset(self) -> None:
        self.queue.clear()
        self.explored = 0
        self.done = False
        self.no_path = False
        if self.grid is None or not self.grid.is_ready():
            self.seen = bytearray()
            self.parent = array('i')
            return
        self.seen = bytearray(self.grid.cell_count)
        self.parent = new_parent_arena(self.grid)

        s = self.grid.start
        self.queue.append(s)
        self.seen[self.grid.index(s)] = 1

    def _marks(self, c: Cell) -> bool:
        """Start and end keep their own look; everything else gets overlays."""
        return c != self.grid.start and c != self.grid.end

    def step(self) -> StepResult:
        """Expand one queued cell."""
        if self.grid is None or not self.grid.is_ready():
            return StepResult(status="idle", metrics={"algo": self.name})

        if self.done:
            path = reconstruct_path(self.parent, self.grid)
            return StepResult(status="done", path=path, metrics=self._metrics(path_len=len(path) - 1))

        if self.no_path:
            return StepResult(status="no_path", metrics=self._metrics())

        if not self.queue:
            self.no_path = True
            return StepResult(status="no_path", metrics=self._metrics())

        u = self.queue.popleft()
        self.explored += 1
        closed = [u] if self._marks(u) else []

        if u == self.grid.end:
            self.done = True
            path = reconstruct_path(self.parent, self.grid)
            return StepResult(status="done", closed=closed, current=u, path=path,
                              metrics=self._metrics(path_len=len(path) - 1))

        opened_now: List[Cell] = []
        u_i = self.grid.index(u)
        for v in self.grid.neighbors(u):
            v_i = self.grid.index(v)
            if self.seen[v_i]:
                continue
            self.seen[v_i] = 1
            self.parent[v_i] = u_i
            self.queue.append(v)
            if self._marks(v):
                opened_now.append(v)

        return StepResult(status="running", opened=opened_now, closed=closed, current=u,
                          metrics=self._metrics())

    def _metrics(self, path_len: int = 0) -> dict:
        return {
            "algo": self.name,
            "explored": self.explored,
            "frontier_size": len(self.queue),
            "depth": None,
            "path_len": max(0, path_len),
        }
