"""
Run lifecycle: readiness, mutual exclusion, cancellation, pacing and guarded edits.
"""

import random

import pytest

from gridsearch.app.overlay import OverlaySink
from gridsearch.core.control import (
    MIN_STEP_MS,
    CellSink,
    Pacing,
    SearchController,
    make_algo,
    run_bfs,
    run_dfs,
    run_ids,
)
from gridsearch.core.grid import Grid
from gridsearch.core.types import CellKind, CellState


class ClearCountingSink(CellSink):
    def __init__(self):
        self.clears = 0
        self.counts = []

    def on_clear(self) -> None:
        self.clears += 1

    def on_explored_count_changed(self, n: int) -> None:
        self.counts.append(n)


class TestReadiness:
    """Runs that never start."""

    def test_missing_end_is_not_ready(self) -> None:
        grid = Grid(3)
        grid.set_cell_kind(0, 0, CellKind.START)
        sink = ClearCountingSink()
        out = SearchController(grid, sink, sleep=lambda _s: None).run_bfs()
        assert out.status == "not_ready"
        assert not out.ready
        assert not out.found
        assert sink.clears == 0
        assert sink.counts == []

    def test_second_run_is_rejected_while_busy(self, open3, make_controller) -> None:
        ctl = make_controller(open3)
        assert ctl.begin("bfs") is None
        busy = ctl.begin("dfs")
        assert busy.status == "busy"
        assert ctl.running
        assert ctl.run_ids().status == "busy"

    def test_unknown_strategy(self, open3, make_controller) -> None:
        with pytest.raises(ValueError):
            make_algo("astar")
        with pytest.raises(ValueError):
            make_controller(open3).begin("dijkstra")

    def test_strategy_names_are_case_insensitive(self) -> None:
        assert make_algo("IDS").name == "IDS"

    def test_begin_resets_counters(self, open3) -> None:
        sink = ClearCountingSink()
        ctl = SearchController(open3, sink, sleep=lambda _s: None)
        ctl.run_bfs()
        assert sink.clears == 1
        assert sink.counts[0] == 0
        assert sink.counts[-1] == 9


class TestCancellation:
    """request_cancel() between steps."""

    @pytest.mark.parametrize("name", ["bfs", "dfs", "ids"])
    def test_cancel_stops_events(self, name) -> None:
        grid = Grid(8)
        grid.set_cell_kind(0, 0, CellKind.START)
        grid.set_cell_kind(7, 7, CellKind.END)
        sink = OverlaySink()
        seen_at_cancel = []

        def sleep(_s: float) -> None:
            if len(seen_at_cancel) == 0 and len(sink.events) >= 4:
                ctl.request_cancel()
                seen_at_cancel.append(len(sink.events))

        ctl = SearchController(grid, sink, Pacing(step_ms=0), sleep=sleep)
        out = ctl.run(name)

        assert out.status == "cancelled"
        assert not out.found
        assert out.path == []
        assert len(sink.events) == seen_at_cancel[0]
        assert sink.cells_in(CellState.PATH) == []
        assert sink.path_len == 0
        assert not ctl.running

    def test_cancel_leaves_partial_marks(self, open3) -> None:
        sink = OverlaySink()
        calls = []

        def sleep(_s: float) -> None:
            calls.append(_s)
            if len(calls) == 2:
                ctl.request_cancel()

        ctl = SearchController(open3, sink, sleep=sleep)
        out = ctl.run_bfs()
        assert out.status == "cancelled"
        assert out.explored == 2
        assert sink.cells_in(CellState.VISITED) == [(1, 0)]

    def test_cancel_is_idempotent_and_harmless_when_idle(self, open3, make_controller) -> None:
        ctl = make_controller(open3)
        ctl.request_cancel()
        ctl.request_cancel()
        out = ctl.run_bfs()
        assert out.found

    def test_cancel_during_path_reveal(self, open3) -> None:
        sink = OverlaySink()

        def sleep(_s: float) -> None:
            if sink.cells_in(CellState.PATH):
                ctl.request_cancel()

        ctl = SearchController(open3, sink, Pacing(step_ms=0), sleep=sleep)
        out = ctl.run_bfs()
        assert out.status == "cancelled"
        assert not out.found and out.path == []
        assert sink.cells_in(CellState.PATH) == [(2, 1)]
        assert sink.path_len == 0
        assert sink.explored == 9

    def test_cancel_through_tick(self, open3) -> None:
        sink = OverlaySink()
        ctl = SearchController(open3, sink, Pacing(step_ms=10))
        assert ctl.begin("bfs") is None
        ctl.tick(0.0)
        ctl.tick(1.0)
        ctl.request_cancel()
        # not due yet, so nothing happens
        assert ctl.tick(1.001) is None
        assert ctl.running
        out = ctl.tick(2.0)
        assert out.status == "cancelled"
        assert out.explored == 2
        assert not ctl.running
        assert ctl.tick(3.0) is None
        assert sink.explored == 2

    def test_controller_usable_after_cancel(self, open3, make_controller) -> None:
        ctl = make_controller(open3)
        ctl.begin("dfs")
        ctl.advance()
        ctl.request_cancel()
        ctl.request_cancel()
        assert ctl.advance().status == "cancelled"
        assert ctl.advance() is None
        assert ctl.run_bfs().found


class TestPacing:
    """Delays between steps and between revealed path cells."""

    def test_floor(self) -> None:
        assert Pacing(step_ms=0).step_delay == MIN_STEP_MS / 1000.0
        assert Pacing(step_ms=3).step_delay == MIN_STEP_MS / 1000.0
        assert Pacing(step_ms=50).step_delay == 0.05
        assert Pacing().path_delay == 0.02

    def test_negative_delay(self) -> None:
        with pytest.raises(ValueError):
            Pacing(step_ms=-1)

    def test_blocking_run_sleeps_between_units(self, open3) -> None:
        pacing = Pacing(step_ms=0)
        sleeps = []
        SearchController(open3, OverlaySink(), pacing, sleep=sleeps.append).run_bfs()
        # 9 expansions then 3 interior path cells and the closing length update
        assert sleeps.count(pacing.step_delay) == 8
        assert sleeps.count(pacing.path_delay) == 4
        assert len(sleeps) == 12

    def test_tick_waits_for_the_interval(self, open3) -> None:
        sink = OverlaySink()
        ctl = SearchController(open3, sink, Pacing(step_ms=10), clock=lambda: 0.0)
        assert ctl.begin("bfs") is None
        assert ctl.tick(0.0) is None
        assert sink.explored == 1
        ctl.tick(0.005)
        assert sink.explored == 1
        ctl.tick(0.011)
        assert sink.explored == 2

    def test_tick_runs_to_completion(self, open3) -> None:
        ctl = SearchController(open3, OverlaySink(), Pacing(step_ms=10))
        ctl.begin("ids")
        now, out = 0.0, None
        while out is None:
            out = ctl.tick(now)
            now += 1.0
        assert out.found and out.path_len == 4
        assert ctl.tick(now) is None


class TestGuardedEdits:
    """Grid edits go through while idle and are ignored mid-run."""

    def test_edits_ignored_while_running(self, open3, make_controller) -> None:
        ctl = make_controller(open3)
        ctl.begin("bfs")
        assert ctl.set_cell_kind(1, 1, CellKind.WALL) is False
        assert ctl.resize_grid(10) is False
        assert ctl.clear_all() is False
        assert ctl.randomize_walls(0.5, random.Random(0)) is False
        assert open3.size == 3
        assert open3.walls() == []
        assert open3.is_ready()

    def test_edits_apply_when_idle(self, open3, make_controller, sink) -> None:
        ctl = make_controller(open3)
        ctl.run_bfs()
        assert sink.states
        assert ctl.set_cell_kind(1, 1, CellKind.WALL) is True
        assert open3.is_wall((1, 1))
        assert ctl.randomize_walls(1.0, random.Random(0)) is True
        assert len(open3.walls()) == 9
        assert sink.states == {}
        assert ctl.resize_grid(4) is True
        assert open3.size == 4
        assert ctl.clear_all() is True
        assert sink.explored == 0 and sink.path_len == 0


class TestEntryPoints:
    """Module-level run_* helpers."""

    def test_run_bfs_places_endpoints(self) -> None:
        grid = Grid(4)
        out = run_bfs(grid, start=(0, 0), end=(3, 3), pace_ms=0, sleep=lambda _s: None)
        assert out.found and out.path_len == 6
        assert grid.start == (0, 0) and grid.end == (3, 3)

    def test_run_ids_with_sink(self, walled3) -> None:
        sink = OverlaySink()
        out = run_ids(walled3, sink=sink, pace_ms=0, sleep=lambda _s: None)
        assert out.found and out.algo == "IDS"
        assert sink.path_len == 4
        assert sink.explored == out.explored

    def test_missing_end_leaves_grid_untouched(self) -> None:
        grid = Grid(4)
        out = run_bfs(grid, start=(0, 0), pace_ms=0, sleep=lambda _s: None)
        assert out.status == "not_ready"
        assert grid.start is None
        assert grid.kind_of((0, 0)) is CellKind.EMPTY

    def test_start_on_existing_end_is_not_ready(self) -> None:
        grid = Grid(4)
        grid.set_cell_kind(2, 2, CellKind.END)
        out = run_dfs(grid, start=(2, 2), pace_ms=0, sleep=lambda _s: None)
        assert out.status == "not_ready"
        assert grid.end == (2, 2) and grid.start is None

    def test_shared_controller_can_be_cancelled(self, open3) -> None:
        sink = OverlaySink()
        calls = []

        def sleep(_s: float) -> None:
            calls.append(_s)
            if len(calls) == 3:
                ctl.request_cancel()

        ctl = SearchController(open3, sink, Pacing(step_ms=0), sleep=sleep)
        out = run_ids(open3, controller=ctl)
        assert out.status == "cancelled"
        assert not ctl.running

    def test_shared_controller_rejects_a_second_run(self, open3, make_controller) -> None:
        ctl = make_controller(open3)
        ctl.begin("dfs")
        out = run_bfs(open3, start=(1, 1), controller=ctl)
        assert out.status == "busy"
        assert open3.start == (0, 0)
        assert open3.kind_of((1, 1)) is CellKind.EMPTY

    def test_controller_for_another_grid(self, open3, walled3, make_controller) -> None:
        with pytest.raises(ValueError):
            run_bfs(open3, controller=make_controller(walled3))
