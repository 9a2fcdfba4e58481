# gridsearch/core/control.py
#!/usr/bin/env python3
"""
Run control for the search algorithms.

- CellSink: what a renderer implements to watch a run.
- Pacing: delay between steps (floored) and between path-reveal cells.
- SearchController: one run at a time, cooperative cancellation, and the
  grid edits that must wait while a run is in flight.

A run can be driven two ways:
- run()/run_bfs()/...: blocking loop of step -> sleep(delay).
- begin() + tick(): the host's own loop calls tick() every frame; a unit of
  work happens only once the pacing interval has elapsed.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional
import logging
import random
import time

from gridsearch.core.bfs import BFSAlgo
from gridsearch.core.dfs import DFSAlgo
from gridsearch.core.grid import DEFAULT_WALL_DENSITY, Grid
from gridsearch.core.ids import IDSAlgo
from gridsearch.core.path import interior
from gridsearch.core.types import Cell, CellKind, CellState, SearchOutcome

logger = logging.getLogger(__name__)

MIN_STEP_MS = 10
PATH_REVEAL_MS = 20
DEFAULT_STEP_MS = 30

ALGORITHMS = {
    "bfs": BFSAlgo,
    "dfs": DFSAlgo,
    "ids": IDSAlgo,
}


def make_algo(name: str):
    key = name.lower()
    if key not in ALGORITHMS:
        raise ValueError(f"unknown search strategy {name!r}; expected one of {sorted(ALGORITHMS)}")
    return ALGORITHMS[key]()


class CellSink:
    """Receives run events. Every hook is optional."""

    def on_cell_state(self, cell: Cell, state: CellState) -> None:
        pass

    def on_explored_count_changed(self, n: int) -> None:
        pass

    def on_path_length_changed(self, n: int) -> None:
        pass

    def on_clear(self) -> None:
        """Drop every frontier/visited/path mark."""
        pass


@dataclass
class Pacing:
    step_ms: int = DEFAULT_STEP_MS
    path_ms: int = PATH_REVEAL_MS

    def __post_init__(self):
        if self.step_ms < 0 or self.path_ms < 0:
            raise ValueError("pacing delays cannot be negative")

    @property
    def step_delay(self) -> float:
        return max(MIN_STEP_MS, self.step_ms) / 1000.0

    @property
    def path_delay(self) -> float:
        return self.path_ms / 1000.0


class SearchController:
    def __init__(self, grid: Grid, sink: Optional[CellSink] = None, pacing: Optional[Pacing] = None,
                 sleep: Callable[[float], None] = time.sleep,
                 clock: Callable[[], float] = time.monotonic):
        self.grid = grid
        self.sink = sink or CellSink()
        self.pacing = pacing or Pacing()
        self.sleep = sleep
        self.clock = clock

        self.running = False
        self.cancel_requested = False
        self.algo = None
        self.outcome: Optional[SearchOutcome] = None
        self._explored = 0
        self._path: List[Cell] = []
        self._reveal: Optional[List[Cell]] = None
        self._next_due = 0.0

    # -------------------- lifecycle --------------------

    def begin(self, name: str) -> Optional[SearchOutcome]:
        """Start a run. Returns None if it started, else the rejection outcome."""
        algo = make_algo(name)
        if self.running:
            logger.info("search %s rejected: a run is already in progress", algo.name)
            return SearchOutcome(status="busy", algo=algo.name)
        if not self.grid.is_ready():
            logger.info("search %s skipped: start and end must both be set", algo.name)
            return SearchOutcome(status="not_ready", algo=algo.name)

        self.sink.on_clear()
        self.sink.on_explored_count_changed(0)
        self.sink.on_path_length_changed(0)

        self.algo = algo
        self.algo.init(self.grid)
        self.running = True
        self.cancel_requested = False
        self.outcome = None
        self._explored = 0
        self._path = []
        self._reveal = None
        self._next_due = 0.0
        logger.info("search %s started on %dx%d grid, %s -> %s",
                    algo.name, self.grid.size, self.grid.size, self.grid.start, self.grid.end)
        return None

    def request_cancel(self) -> None:
        if self.running and not self.cancel_requested:
            logger.debug("cancel requested for %s", self.algo.name)
        self.cancel_requested = True

    @property
    def delay(self) -> float:
        """Seconds to wait before the next unit of work."""
        return self.pacing.path_delay if self._reveal is not None else self.pacing.step_delay

    def advance(self) -> Optional[SearchOutcome]:
        """One algorithm step or one revealed path cell. Returns the outcome once the run ends."""
        if not self.running:
            return None
        if self.cancel_requested:
            return self._finish("cancelled")

        if self._reveal is not None:
            if self._reveal:
                self.sink.on_cell_state(self._reveal.pop(0), CellState.PATH)
                return None
            self.sink.on_path_length_changed(len(self._path) - 1)
            return self._finish("found")

        res = self.algo.step()
        for c in res.closed:
            self.sink.on_cell_state(c, CellState.VISITED)
        for c in res.opened:
            self.sink.on_cell_state(c, CellState.FRONTIER)
        if self.algo.explored != self._explored:
            self._explored = self.algo.explored
            self.sink.on_explored_count_changed(self._explored)

        if res.status == "done":
            if not res.path:
                return self._finish("no_path")
            self._path = res.path
            self._reveal = interior(res.path)
        elif res.status in ("no_path", "idle"):
            return self._finish("no_path")
        return None

    def tick(self, now: Optional[float] = None) -> Optional[SearchOutcome]:
        """Cooperative driver: at most one unit of work per call, once it is due."""
        if not self.running:
            return None
        now = self.clock() if now is None else now
        if now < self._next_due:
            return None
        out = self.advance()
        self._next_due = now + self.delay
        return out

    def run(self, name: str) -> SearchOutcome:
        """Blocking driver: step, sleep, repeat until the run ends."""
        rejected = self.begin(name)
        if rejected is not None:
            return rejected
        while True:
            out = self.advance()
            if out is not None:
                return out
            self.sleep(self.delay)

    def run_bfs(self) -> SearchOutcome:
        return self.run("bfs")

    def run_dfs(self) -> SearchOutcome:
        return self.run("dfs")

    def run_ids(self) -> SearchOutcome:
        return self.run("ids")

    def _finish(self, status: str) -> SearchOutcome:
        found = status == "found"
        self.outcome = SearchOutcome(
            status=status,
            found=found,
            explored=self._explored,
            path=list(self._path) if found else [],
            algo=self.algo.name,
        )
        logger.info("search %s finished: %s, explored=%d, path_len=%d",
                    self.outcome.algo, status, self.outcome.explored, self.outcome.path_len)
        self.running = False
        self.cancel_requested = False
        self.algo = None
        self._reveal = None
        return self.outcome

    # -------------------- guarded grid edits --------------------

    def _editable(self, what: str) -> bool:
        if self.running:
            logger.debug("%s ignored while a search is running", what)
            return False
        return True

    def set_cell_kind(self, r: int, c: int, kind: CellKind) -> bool:
        if not self._editable("set_cell_kind"):
            return False
        return self.grid.set_cell_kind(r, c, kind)

    def resize_grid(self, n: int) -> bool:
        if not self._editable("resize_grid"):
            return False
        self.grid.resize(n)
        self.sink.on_clear()
        return True

    def clear_all(self) -> bool:
        if not self._editable("clear_all"):
            return False
        self.grid.clear_all()
        self.sink.on_clear()
        self.sink.on_explored_count_changed(0)
        self.sink.on_path_length_changed(0)
        return True

    def randomize_walls(self, density: float = DEFAULT_WALL_DENSITY,
                        rng: Optional[random.Random] = None) -> bool:
        if not self._editable("randomize_walls"):
            return False
        self.grid.randomize_walls(density, rng)
        self.sink.on_clear()
        return True


def _run(name: str, grid: Grid, start: Optional[Cell], end: Optional[Cell],
         sink: Optional[CellSink], pace_ms: int, sleep: Callable[[float], None],
         controller: Optional[SearchController]) -> SearchOutcome:
    if controller is None:
        controller = SearchController(grid, sink, Pacing(step_ms=pace_ms), sleep=sleep)
    elif controller.grid is not grid:
        raise ValueError("controller drives a different grid")

    algo_name = make_algo(name).name
    if controller.running:
        logger.info("search %s rejected: a run is already in progress", algo_name)
        return SearchOutcome(status="busy", algo=algo_name)

    s = start if start is not None else grid.start
    e = end if end is not None else grid.end
    if s is None or e is None or s == e or not grid.in_bounds(s) or not grid.in_bounds(e):
        logger.info("search %s skipped: start and end must both be set", algo_name)
        return SearchOutcome(status="not_ready", algo=algo_name)

    if start is not None:
        controller.set_cell_kind(*start, CellKind.START)
    if end is not None:
        controller.set_cell_kind(*end, CellKind.END)
    return controller.run(name)


def run_bfs(grid: Grid, start: Optional[Cell] = None, end: Optional[Cell] = None,
            sink: Optional[CellSink] = None, pace_ms: int = DEFAULT_STEP_MS,
            sleep: Callable[[float], None] = time.sleep,
            controller: Optional[SearchController] = None) -> SearchOutcome:
    """
    Place start/end (if given) and run BFS to the end.

    Pass a controller to share its running and cancel flags with other
    callers; its own sink and pacing are used and sink/pace_ms/sleep are ignored.
    """
    return _run("bfs", grid, start, end, sink, pace_ms, sleep, controller)


def run_dfs(grid: Grid, start: Optional[Cell] = None, end: Optional[Cell] = None,
            sink: Optional[CellSink] = None, pace_ms: int = DEFAULT_STEP_MS,
            sleep: Callable[[float], None] = time.sleep,
            controller: Optional[SearchController] = None) -> SearchOutcome:
    return _run("dfs", grid, start, end, sink, pace_ms, sleep, controller)


def run_ids(grid: Grid, start: Optional[Cell] = None, end: Optional[Cell] = None,
            sink: Optional[CellSink] = None, pace_ms: int = DEFAULT_STEP_MS,
            sleep: Callable[[float], None] = time.sleep,
            controller: Optional[SearchController] = None) -> SearchOutcome:
    return _run("ids", grid, start, end, sink, pace_ms, sleep, controller)
