"""
Tests for path reconstruction from the parent arena.
"""

from gridsearch.core.grid import Grid
from gridsearch.core.path import NO_PARENT, interior, new_parent_arena, reconstruct_path


def _line_grid() -> Grid:
    return Grid.from_rows([
        "S.E",
        "...",
        "...",
    ])


class TestReconstructPath:
    """Walking parents from end back to start."""

    def test_follows_chain(self) -> None:
        grid = _line_grid()
        parent = new_parent_arena(grid)
        parent[grid.index((0, 2))] = grid.index((0, 1))
        parent[grid.index((0, 1))] = grid.index((0, 0))
        assert reconstruct_path(parent, grid) == [(0, 0), (0, 1), (0, 2)]

    def test_end_without_parent(self) -> None:
        grid = _line_grid()
        parent = new_parent_arena(grid)
        assert all(p == NO_PARENT for p in parent)
        assert reconstruct_path(parent, grid) == []

    def test_broken_chain(self) -> None:
        grid = _line_grid()
        parent = new_parent_arena(grid)
        parent[grid.index((0, 2))] = grid.index((1, 2))
        assert reconstruct_path(parent, grid) == []

    def test_cycle_never_reaching_start(self) -> None:
        grid = _line_grid()
        parent = new_parent_arena(grid)
        parent[grid.index((0, 2))] = grid.index((1, 2))
        parent[grid.index((1, 2))] = grid.index((0, 2))
        assert reconstruct_path(parent, grid) == []

    def test_not_ready_grid(self) -> None:
        grid = Grid(3)
        assert reconstruct_path(new_parent_arena(grid), grid) == []


class TestInterior:
    """Cells revealed as the path."""

    def test_excludes_endpoints_and_runs_end_first(self) -> None:
        assert interior([(0, 0), (0, 1), (0, 2), (1, 2)]) == [(0, 2), (0, 1)]

    def test_adjacent_endpoints_have_no_interior(self) -> None:
        assert interior([(0, 0), (0, 1)]) == []
        assert interior([]) == []
