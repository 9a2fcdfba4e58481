# gridsearch/core/types.py
#!/usr/bin/env python3
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple, Optional, Dict, Any

Cell = Tuple[int, int]  # (row, col)


class CellKind(str, Enum):
    """What a cell *is*. Render state (frontier/visited/path) lives elsewhere."""
    EMPTY = "empty"
    WALL = "wall"
    START = "start"
    END = "end"


class CellState(str, Enum):
    """What a run reports about a cell."""
    FRONTIER = "frontier"
    VISITED = "visited"
    PATH = "path"


@dataclass
class StepResult:
    status: str                   # "idle" | "running" | "done" | "no_path"
    opened: List[Cell] = field(default_factory=list)    # became frontier this step
    closed: List[Cell] = field(default_factory=list)    # became visited this step
    current: Optional[Cell] = None
    path: Optional[List[Cell]] = None
    metrics: Dict[str, Any] = field(default_factory=dict)


@dataclass
class SearchOutcome:
    status: str                   # "found" | "no_path" | "cancelled" | "not_ready" | "busy"
    found: bool = False
    explored: int = 0
    path: List[Cell] = field(default_factory=list)      # start -> end, empty if not found
    algo: str = ""

    @property
    def path_len(self) -> int:
        return max(0, len(self.path) - 1)

    @property
    def ready(self) -> bool:
        return self.status != "not_ready"
