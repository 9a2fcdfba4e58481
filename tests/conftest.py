import pytest

from gridsearch.app.overlay import OverlaySink
from gridsearch.core.control import Pacing, SearchController
from gridsearch.core.grid import Grid


def no_sleep(_seconds: float) -> None:
    pass


@pytest.fixture
def sink() -> OverlaySink:
    return OverlaySink()


@pytest.fixture
def open3() -> Grid:
    """3x3, no walls, start top-left, end bottom-right."""
    return Grid.from_rows([
        "S..",
        "...",
        "..E",
    ])


@pytest.fixture
def walled3() -> Grid:
    """3x3 with the centre walled off."""
    return Grid.from_rows([
        "S..",
        ".#.",
        "..E",
    ])


@pytest.fixture
def blocked3() -> Grid:
    """3x3 where the middle row cuts the end off."""
    return Grid.from_rows([
        "S..",
        "###",
        "..E",
    ])


@pytest.fixture
def make_controller(sink):
    def _make(grid: Grid, **kwargs) -> SearchController:
        kwargs.setdefault("sleep", no_sleep)
        kwargs.setdefault("pacing", Pacing(step_ms=0))
        return SearchController(grid, sink, **kwargs)
    return _make
