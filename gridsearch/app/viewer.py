#!/usr/bin/env python3
"""
Grid Search Viewer: BFS / DFS / IDS on an editable grid

- Keyboard:
    [B]/[D]/[I]  -> select algorithm (BFS / DFS / IDS)
    [SPACE]      -> run (or stop the current run)
    [X]          -> stop
    [1]..[4]     -> paint mode: start / end / wall / erase
    [W]          -> random walls
    [C]          -> clear all
    [ / ]        -> grid size down / up
    [+]/[-]      -> faster / slower
    [Q]/[ESC]    -> quit
- Mouse: left click (or drag, for walls/erase) paints with the active mode.

Settings:
- ENV: GRIDSEARCH_SIZE, GRIDSEARCH_ALGO, GRIDSEARCH_PACE_MS, ...
- CLI: --size=N --algo=bfs|dfs|ids --pace=MS (see gridsearch/app/settings.py)
"""

# --- bootstrap import path so `from gridsearch...` works when run as a script ---
import sys, logging
from pathlib import Path
_REPO_ROOT = Path(__file__).resolve().parents[2]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))
# -------------------------------------------------------------------------

from typing import Tuple, Optional
import pygame

from gridsearch.app.overlay import OverlaySink
from gridsearch.app.settings import MAX_SIZE, Settings, resolve_settings
from gridsearch.core.control import Pacing, SearchController
from gridsearch.core.grid import Grid, MIN_SIZE
from gridsearch.core.types import Cell, CellKind, CellState, SearchOutcome

# ---------- Config ----------
PANEL_W = 360            # right band: metrics + buttons
GRID_MARGIN = 16
FONT_NAME = None  # default pygame font
PACE_STEP_MS = 10
MAX_PACE_MS = 500

ALGO_LABELS = {"bfs": "BFS", "dfs": "DFS", "ids": "IDS"}
PAINT_MODES = (CellKind.START, CellKind.END, CellKind.WALL, CellKind.EMPTY)
MODE_LABELS = {CellKind.START: "Start", CellKind.END: "End", CellKind.WALL: "Wall", CellKind.EMPTY: "Erase"}

# Colors
WHITE       = (255,255,255)
BLACK       = (  0,  0,  0)
BLUE        = ( 70,130,180)
RED         = (220, 50, 47)
ASPHALT_GRAY= (200,200,200)
WALL_DARK   = ( 30, 32, 38)
NEON_CYAN_A = (0,150,255,110)
NEON_MAG_A  = (255,0,120,90)
NEON_MINT   = (0,255,200)

CARD_BG     = (24,28,36,220)
CARD_HI     = (255,255,255,18)
TEXT_LIGHT  = (230,235,240)
ACCENT_GOLD = (255,210,0)

STATE_FILL = {
    CellState.VISITED:  NEON_MAG_A,
    CellState.FRONTIER: NEON_CYAN_A,
    CellState.PATH:     NEON_MINT + (220,),
}

logger = logging.getLogger(__name__)


# ---------- Simple UI Button ----------
class UIButton:
    def __init__(self, label: str, rect: pygame.Rect, callback, *, togglable: bool = False):
        self.label = label
        self.rect = rect
        self.callback = callback
        self.hover = False
        self.togglable = togglable
        self.active = False  # highlight state

    def set_active(self, value: bool):
        self.active = bool(value)

    def draw(self, screen: pygame.Surface, font: pygame.font.Font):
        base = pygame.Surface(self.rect.size, pygame.SRCALPHA)
        bg_idle   = (36, 40, 48, 220)
        bg_hover  = (46, 50, 60, 230)
        bg_active = (58, 86, 160, 235)
        border_active = (120, 170, 255, 255)

        if self.active and self.togglable:
            bg = bg_active
        elif self.hover:
            bg = bg_hover
        else:
            bg = bg_idle

        pygame.draw.rect(base, bg, base.get_rect(), border_radius=10)
        hi = pygame.Surface((self.rect.width, 18), pygame.SRCALPHA)
        pygame.draw.rect(hi, (255,255,255,20), hi.get_rect(), border_radius=10)
        base.blit(hi, (0,0))
        screen.blit(base, self.rect.topleft)

        if self.active and self.togglable:
            pygame.draw.rect(screen, border_active, self.rect, width=2, border_radius=10)

        text = font.render(self.label, True, (235,238,242))
        screen.blit(text, text.get_rect(center=self.rect.center))

    def handle_mouse(self, event: pygame.event.Event) -> bool:
        if event.type == pygame.MOUSEMOTION:
            self.hover = self.rect.collidepoint(event.pos)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self.callback()
                return True
        return False


def cell_at_pixel(pos: Tuple[int, int], origin: Tuple[int, int], cell_size: int, size: int) -> Optional[Cell]:
    """(row, col) under a screen position, or None outside the grid."""
    x, y = pos
    ox, oy = origin
    if x < ox or y < oy or cell_size <= 0:
        return None
    col = (x - ox) // cell_size
    row = (y - oy) // cell_size
    if row >= size or col >= size:
        return None
    return (row, col)


# ---------- Viewer ----------
class Viewer:
    def __init__(self, settings: Settings):
        pygame.init()

        self.settings = settings
        self.grid = Grid(settings.size)
        self.grid.seed_endpoints()
        self.overlay = OverlaySink()
        self.controller = SearchController(self.grid, self.overlay, Pacing(step_ms=settings.pace_ms))

        self.font_small = pygame.font.Font(FONT_NAME, 14)
        self.font = pygame.font.Font(FONT_NAME, 18)
        self.font_big = pygame.font.Font(FONT_NAME, 22)

        win_w = 720 + PANEL_W
        win_h = 760
        self.screen = pygame.display.set_mode((win_w, win_h), pygame.RESIZABLE)
        pygame.display.set_caption("Grid Search — BFS / DFS / IDS")

        self._buttons: list[UIButton] = []
        self.selected_algo = settings.algo
        self.paint_mode = CellKind.WALL
        self._dragging = False
        self.state = "Idle"
        self.clock = pygame.time.Clock()

        self._layout(win_w, win_h)

    # ---------- layout ----------
    def _layout(self, win_w: int, win_h: int):
        """Compute integer cell_size that fits window and center the grid."""
        avail_w = max(1, win_w - PANEL_W - 2 * GRID_MARGIN)
        avail_h = max(1, win_h - 2 * GRID_MARGIN)
        n = self.grid.size
        self.cell_size = int(max(4, min(avail_w // n, avail_h // n)))

        grid_plate = n * self.cell_size + 2 * GRID_MARGIN
        left_x = max(0, (win_w - (grid_plate + PANEL_W)) // 2)
        top_y  = max(0, (win_h - grid_plate) // 2)

        self.canvas_rect = pygame.Rect(left_x, top_y, grid_plate, grid_plate)
        self._grid_origin = (self.canvas_rect.x + GRID_MARGIN,
                             self.canvas_rect.y + GRID_MARGIN)
        self._right_band = pygame.Rect(self.canvas_rect.right, 0,
                                       max(PANEL_W, win_w - self.canvas_rect.right), win_h)
        self._build_buttons()

    def run(self):
        while True:
            self._handle_events()
            out = self.controller.tick()
            if out is not None:
                self._on_finished(out)
            self._draw()
            self.clock.tick(60)

    # ---------- run control ----------
    def _start(self):
        rejected = self.controller.begin(self.selected_algo)
        if rejected is None:
            self.state = "Running"
        elif rejected.status == "not_ready":
            self.state = "Place start and end"
        self._refresh_active_states()

    def _stop(self):
        self.controller.request_cancel()

    def _toggle_run(self):
        if self.controller.running:
            self._stop()
        else:
            self._start()

    def _on_finished(self, out: SearchOutcome):
        self.state = {"found": "Done", "no_path": "No path", "cancelled": "Stopped"}.get(out.status, "Idle")
        logger.debug("viewer: %s run ended with %s", out.algo, out.status)
        self._refresh_active_states()

    # ---------- editing ----------
    def _paint(self, pos: Tuple[int, int], *, drag: bool):
        cell = cell_at_pixel(pos, self._grid_origin, self.cell_size, self.grid.size)
        if cell is None:
            return
        if drag and self.paint_mode not in (CellKind.WALL, CellKind.EMPTY):
            return
        if self.controller.set_cell_kind(cell[0], cell[1], self.paint_mode):
            self.overlay.reset()
            self.state = "Idle"

    def _resize(self, dn: int):
        n = max(MIN_SIZE, min(MAX_SIZE, self.grid.size + dn))
        if n == self.grid.size:
            return
        try:
            if self.controller.resize_grid(n):
                self.grid.seed_endpoints()
                self._layout(*self.screen.get_size())
                self.state = "Idle"
        except ValueError as ex:
            print(f"Failed to resize grid: {ex}")

    def _clear(self):
        if self.controller.clear_all():
            self.state = "Idle"

    def _random_walls(self):
        try:
            if self.controller.randomize_walls(self.settings.wall_density):
                self.grid.seed_endpoints()
                self.state = "Idle"
        except ValueError as ex:
            print(f"Failed to place walls: {ex}")

    def _switch_algo(self, key: str):
        if self.controller.running:
            return
        self.selected_algo = key
        self._refresh_active_states()

    def _set_mode(self, kind: CellKind):
        self.paint_mode = kind
        self._refresh_active_states()

    def _bump_speed(self, dv: int):
        # faster means a shorter pause
        pace = self.controller.pacing.step_ms - dv * PACE_STEP_MS
        self.controller.pacing.step_ms = int(max(0, min(MAX_PACE_MS, pace)))

    def _handle_events(self):
        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                pygame.quit(); sys.exit(0)
            elif e.type == pygame.KEYDOWN:
                if e.key in (pygame.K_ESCAPE, pygame.K_q):
                    pygame.quit(); sys.exit(0)
                elif e.key == pygame.K_SPACE:
                    self._toggle_run()
                elif e.key == pygame.K_x:
                    self._stop()
                elif e.key == pygame.K_b:
                    self._switch_algo("bfs")
                elif e.key == pygame.K_d:
                    self._switch_algo("dfs")
                elif e.key == pygame.K_i:
                    self._switch_algo("ids")
                elif e.key in (pygame.K_1, pygame.K_2, pygame.K_3, pygame.K_4):
                    self._set_mode(PAINT_MODES[e.key - pygame.K_1])
                elif e.key == pygame.K_w:
                    self._random_walls()
                elif e.key == pygame.K_c:
                    self._clear()
                elif e.key == pygame.K_LEFTBRACKET:
                    self._resize(-1)
                elif e.key == pygame.K_RIGHTBRACKET:
                    self._resize(+1)
                elif e.key in (pygame.K_PLUS, pygame.K_EQUALS):
                    self._bump_speed(+1)
                elif e.key in (pygame.K_MINUS, pygame.K_UNDERSCORE):
                    self._bump_speed(-1)
            elif e.type == pygame.VIDEORESIZE:
                w, h = max(640, e.w), max(480, e.h)
                self.screen = pygame.display.set_mode((w, h), pygame.RESIZABLE)
                self._layout(w, h)
            elif e.type == pygame.MOUSEBUTTONDOWN and e.button == 1:
                if any(b.handle_mouse(e) for b in list(self._buttons)):
                    continue
                self._dragging = True
                self._paint(e.pos, drag=False)
            elif e.type == pygame.MOUSEBUTTONUP and e.button == 1:
                self._dragging = False
            elif e.type == pygame.MOUSEMOTION:
                for b in self._buttons:
                    b.handle_mouse(e)
                if self._dragging:
                    self._paint(e.pos, drag=True)

    # ---------- drawing ----------
    def _draw(self):
        self._draw_backdrop()
        self._draw_grid()
        self._draw_metrics_and_buttons()
        pygame.display.flip()

    def _draw_backdrop(self):
        w, h = self.screen.get_size()
        top = (24, 26, 32); bot = (36, 40, 48)
        for y in range(h):
            t = y / max(1, h-1)
            c = (
                int(top[0] + (bot[0]-top[0]) * t),
                int(top[1] + (bot[1]-top[1]) * t),
                int(top[2] + (bot[2]-top[2]) * t),
            )
            pygame.draw.line(self.screen, c, (0, y), (w, y))

    def _draw_grid(self):
        cs = self.cell_size
        ox, oy = self._grid_origin
        n = self.grid.size

        for row in range(n):
            for col in range(n):
                rect = pygame.Rect(ox + col*cs, oy + row*cs, cs, cs)
                if self.grid.kinds[row][col] is CellKind.WALL:
                    pygame.draw.rect(self.screen, WALL_DARK, rect)
                else:
                    pygame.draw.rect(self.screen, ASPHALT_GRAY, rect)
                pygame.draw.rect(self.screen, BLACK, rect, 1)

        # overlays
        for (row, col), state in self.overlay.states.items():
            rect = pygame.Rect(ox + col*cs, oy + row*cs, cs, cs)
            s = pygame.Surface((cs, cs), pygame.SRCALPHA); s.fill(STATE_FILL[state])
            self.screen.blit(s, rect.topleft)

        if self.grid.start is not None:
            self._draw_badge(self.grid.start, BLUE, "S")
        if self.grid.end is not None:
            self._draw_badge(self.grid.end, RED, "E")

    def _draw_badge(self, cell: Cell, color: Tuple[int,int,int], letter: str):
        cs = self.cell_size
        ox, oy = self._grid_origin
        row, col = cell
        cx = ox + col*cs + cs//2
        cy = oy + row*cs + cs//2
        pygame.draw.circle(self.screen, color, (cx,cy), max(3, cs//2 - 2))
        if cs >= 14:
            txt = self.font_small.render(letter, True, WHITE)
            self.screen.blit(txt, txt.get_rect(center=(cx,cy)))

    # ---------- buttons + metrics ----------
    def _build_buttons(self):
        self._buttons.clear()
        rb = self._right_band
        x = rb.x + 16
        y = rb.y + 230  # leaves space for metrics card above
        w = max(160, rb.width - 32)
        h = 34
        gap = 8

        def add(label, cb, *, togglable=False, store_as: str | None = None, rect=None):
            btn = UIButton(label, rect or pygame.Rect(x, y, w, h), cb, togglable=togglable)
            self._buttons.append(btn)
            if store_as:
                setattr(self, store_as, btn)

        add("Run / Stop", self._toggle_run, togglable=True, store_as="btn_run"); y += h + gap

        half = (w - 8) // 2
        add("Random Walls", self._random_walls, rect=pygame.Rect(x, y, half, h))
        add("Clear All", self._clear, rect=pygame.Rect(x + half + 8, y, half, h)); y += h + gap

        add("Speed −", lambda: self._bump_speed(-1), rect=pygame.Rect(x, y, half, h))
        add("Speed +", lambda: self._bump_speed(+1), rect=pygame.Rect(x + half + 8, y, half, h)); y += h + gap

        add("Size −", lambda: self._resize(-1), rect=pygame.Rect(x, y, half, h))
        add("Size +", lambda: self._resize(+1), rect=pygame.Rect(x + half + 8, y, half, h)); y += h + gap

        third = (w - 16) // 3
        for i, key in enumerate(("bfs", "dfs", "ids")):
            add(ALGO_LABELS[key], lambda k=key: self._switch_algo(k), togglable=True,
                store_as=f"btn_algo_{key}", rect=pygame.Rect(x + i*(third + 8), y, third, h))
        y += h + gap

        quarter = (w - 24) // 4
        for i, kind in enumerate(PAINT_MODES):
            add(MODE_LABELS[kind], lambda k=kind: self._set_mode(k), togglable=True,
                store_as=f"btn_mode_{kind.value}", rect=pygame.Rect(x + i*(quarter + 8), y, quarter, h))

        self._refresh_active_states()

    def _refresh_active_states(self):
        if hasattr(self, "btn_run"):
            self.btn_run.set_active(self.controller.running)
        for key in ALGO_LABELS:
            btn = getattr(self, f"btn_algo_{key}", None)
            if btn:
                btn.set_active(self.selected_algo == key)
        for kind in PAINT_MODES:
            btn = getattr(self, f"btn_mode_{kind.value}", None)
            if btn:
                btn.set_active(self.paint_mode is kind)

    def _draw_metrics_and_buttons(self):
        rb = self._right_band
        self._refresh_active_states()

        card_h = 210
        card = pygame.Surface((rb.width - 20, card_h), pygame.SRCALPHA)
        pygame.draw.rect(card, CARD_BG, card.get_rect(), border_radius=14)
        hi = pygame.Surface((card.get_width(), 24), pygame.SRCALPHA)
        pygame.draw.rect(hi, CARD_HI, hi.get_rect(), border_radius=14)
        card.blit(hi, (0,0))
        self.screen.blit(card, (rb.x + 10, rb.y + 10))

        x0 = rb.x + 24
        y0 = rb.y + 18

        def line(text, big=False, color=TEXT_LIGHT):
            nonlocal y0
            f = self.font_big if big else self.font
            surf = f.render(text, True, color)
            self.screen.blit(surf, (x0, y0))
            y0 += surf.get_height() + 6

        line("Metrics", big=True, color=ACCENT_GOLD)
        line(f"Explored: {self.overlay.explored}")
        line(f"Path Len: {self.overlay.path_len}")
        line(f"State: {self.state}")
        line("-" * 26)
        line(f"Algo: {ALGO_LABELS[self.selected_algo]}")
        line(f"Grid: {self.grid.size} x {self.grid.size}")
        line(f"Delay: {self.controller.pacing.step_ms} ms")
        line(f"Paint: {MODE_LABELS[self.paint_mode]}")

        for b in self._buttons:
            b.draw(self.screen, self.font)


# ---------- main ----------
def main(settings: Optional[Settings] = None):
    settings = settings or resolve_settings()
    logging.basicConfig(level=settings.log_level,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    try:
        viewer = Viewer(settings)
    except (pygame.error, ValueError) as ex:
        print(f"Failed to start viewer: {ex}")
        sys.exit(1)
    viewer.run()

if __name__ == "__main__":
    main()
