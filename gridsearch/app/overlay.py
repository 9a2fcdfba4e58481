# gridsearch/app/overlay.py
#!/usr/bin/env python3
from typing import Dict, List, Tuple

from gridsearch.core.control import CellSink
from gridsearch.core.types import Cell, CellState


class OverlaySink(CellSink):
    """Keeps the latest render state of every marked cell, plus the counters."""

    def __init__(self):
        self.states: Dict[Cell, CellState] = {}
        self.events: List[Tuple[Cell, CellState]] = []
        self.explored = 0
        self.path_len = 0

    def on_cell_state(self, cell: Cell, state: CellState) -> None:
        self.states[cell] = state
        self.events.append((cell, state))

    def on_explored_count_changed(self, n: int) -> None:
        self.explored = n

    def on_path_length_changed(self, n: int) -> None:
        self.path_len = n

    def on_clear(self) -> None:
        self.states.clear()
        self.events.clear()

    def reset(self) -> None:
        """Marks and counters both back to a blank board."""
        self.on_clear()
        self.on_explored_count_changed(0)
        self.on_path_length_changed(0)

    def cells_in(self, state: CellState) -> List[Cell]:
        return [c for c, s in self.states.items() if s is state]
