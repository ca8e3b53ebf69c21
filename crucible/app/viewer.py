# crucible/app/viewer.py
#!/usr/bin/env python3
"""
Crucible Route Viewer — Minimal Controls + Metrics

- Keyboard:
    [1]/[2]      -> switch map
    [S]/[U]      -> select crucible (Small / Ultra)
    [H]/[A]      -> select frontier ordering (heuristic only / A*)
    [SPACE]      -> run/pause
    [N]          -> single step
    [R]          -> reset
    [+]/[-]      -> steps/sec
    [Q]/[ESC]    -> quit

Settings:
- ENV: CRUCIBLE_REGIME, CRUCIBLE_FRONTIER
- CLI: --regime=small|ultra --frontier=heuristic|astar
"""

import sys
import time
import logging
from typing import List, Tuple, Optional, Dict

import pygame

from crucible.app.config import MAP_DIR, configure_logging, resolve_settings
from crucible.core.city import load_city
from crucible.core.errors import CrucibleError
from crucible.core.search import CrucibleSearch
from crucible.core.types import Cell, CityGrid, Frontier, Regime, StepResult

logger = logging.getLogger(__name__)

# ---------- Config ----------
MAP_FILES = {
    "01_sample": MAP_DIR / "01_sample.txt",
    "02_unfortunate": MAP_DIR / "02_unfortunate.txt",
}
MAP_LABELS = {"01_sample": "Map 1: Sample", "02_unfortunate": "Map 2: Unfortunate"}
PANEL_W = 420            # right band: metrics + buttons
GRID_MARGIN = 16
CELL_SIZE_DEFAULT = 32
FONT_NAME = None  # default pygame font
MAX_STEPS_PER_SEC = 5000

# Colors
WHITE       = (255,255,255)
BLACK       = (  0,  0,  0)
BLUE        = ( 70,130,180)
RED         = (220, 50, 47)
COOL        = ( 60, 66, 80)   # cost 0
HOT         = (235,120, 40)   # cost 9
NEON_CYAN_A = (0,150,255,110)
NEON_MAG_A  = (255,0,120,90)
NEON_MINT   = (0,255,200)

CARD_BG     = (24,28,36,220)
CARD_HI     = (255,255,255,18)
TEXT_LIGHT  = (230,235,240)
ACCENT_GOLD = (255,210,0)


def heat_color(cost: int) -> Tuple[int, int, int]:
    t = max(0, min(9, cost)) / 9.0
    return tuple(int(a + (b - a) * t) for a, b in zip(COOL, HOT))


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
        if self.active and self.togglable:
            bg = (58, 86, 160, 235)
        elif self.hover:
            bg = (46, 50, 60, 230)
        else:
            bg = (36, 40, 48, 220)
        pygame.draw.rect(base, bg, base.get_rect(), border_radius=10)
        screen.blit(base, self.rect.topleft)

        if self.active and self.togglable:
            pygame.draw.rect(screen, (120, 170, 255, 255), self.rect, width=2, border_radius=10)

        text = font.render(self.label, True, (235,238,242))
        screen.blit(text, text.get_rect(center=self.rect.center))

    def handle_mouse(self, event: pygame.event.Event):
        if event.type == pygame.MOUSEMOTION:
            self.hover = self.rect.collidepoint(event.pos)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self.callback()


# ---------- Viewer ----------
class Viewer:
    def __init__(self, grid: CityGrid, map_key: str, regime: Regime, frontier: Frontier):
        pygame.init()

        self.grid = grid
        self.selected_map_key = map_key
        self.selected_regime = regime
        self.selected_frontier = frontier
        self.font_small = pygame.font.Font(FONT_NAME, 14)
        self.font = pygame.font.Font(FONT_NAME, 18)
        self.font_big = pygame.font.Font(FONT_NAME, 22)

        self.cell_size = self._auto_cell_size(grid)
        win_w = GRID_MARGIN*2 + grid.width * self.cell_size + PANEL_W
        win_h = max(GRID_MARGIN*2 + grid.height * self.cell_size, 620)
        self.screen = pygame.display.set_mode((win_w, win_h), pygame.RESIZABLE)
        pygame.display.set_caption(f"Crucible — {map_key}")

        self.open_cells: set[Cell] = set()
        self.closed_set: set[Cell] = set()
        self.path: List[Cell] = []
        self.running = False

        self._buttons: list[UIButton] = []
        self._layout(win_w, win_h)

        self.clock = pygame.time.Clock()
        self.steps_per_sec = 60
        self.state = "Idle"
        self._last_step_t = 0.0

        self.algo = self._make_algo()
        self._last_metrics: Dict = {}

    # ---------- layout ----------
    def _layout(self, win_w: int, win_h: int):
        """Compute integer cell_size that fits window and place the panel to its right."""
        avail_w = max(1, win_w - PANEL_W - 2 * GRID_MARGIN)
        avail_h = max(1, win_h - 2 * GRID_MARGIN)
        self.cell_size = int(max(8, min(avail_w // self.grid.width, avail_h // self.grid.height)))

        plate_w = self.grid.width * self.cell_size + 2 * GRID_MARGIN
        plate_h = self.grid.height * self.cell_size + 2 * GRID_MARGIN
        top_y = max(0, (win_h - plate_h) // 2)
        self.canvas_rect = pygame.Rect(0, top_y, plate_w, plate_h)
        self._grid_origin = (GRID_MARGIN, top_y + GRID_MARGIN)
        self._right_band = pygame.Rect(plate_w, 0, max(PANEL_W, win_w - plate_w), win_h)
        self._build_buttons()

    def _auto_cell_size(self, grid: CityGrid) -> int:
        target_h = 720 - GRID_MARGIN*2
        return max(8, min(CELL_SIZE_DEFAULT, target_h // grid.height))

    def run(self):
        while True:
            self._handle_events()
            if self.running:
                self._tick_algorithm()
            self._draw()
            self.clock.tick(60)

    def _tick_algorithm(self):
        # Several expansions per frame once the speed passes the frame rate
        now = time.time()
        elapsed = now - self._last_step_t
        due = int(elapsed * self.steps_per_sec)
        if due <= 0:
            return
        self._last_step_t = now
        for _ in range(min(due, max(1, self.steps_per_sec // 30))):
            self._do_step()
            if not self.running:
                break

    def _do_step(self):
        res: StepResult = self.algo.step()
        for c in res.closed: self.closed_set.add(c)
        self.open_cells = set(self.algo.open_cells)
        if res.path is not None: self.path = res.path
        if res.status == "done":
            self.state = "Done"; self.running = False
        elif res.status == "no_path":
            self.state = "No path"; self.running = False
        elif res.status in ("running","idle"):
            self.state = "Running" if self.running else "Idle"
        if res.metrics:
            self._last_metrics = res.metrics
        self._refresh_active_states()

    def _handle_events(self):
        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                pygame.quit(); sys.exit(0)
            elif e.type == pygame.KEYDOWN:
                if e.key in (pygame.K_ESCAPE, pygame.K_q):
                    pygame.quit(); sys.exit(0)
                elif e.key == pygame.K_SPACE:
                    self._toggle_run()
                elif e.key == pygame.K_r:
                    self._reset()
                elif e.key == pygame.K_n:
                    self._do_step()
                elif e.key in (pygame.K_PLUS, pygame.K_EQUALS):
                    self._bump_speed(+1)
                elif e.key in (pygame.K_MINUS, pygame.K_UNDERSCORE):
                    self._bump_speed(-1)
                elif e.key == pygame.K_1:
                    self._switch_map("01_sample")
                elif e.key == pygame.K_2:
                    self._switch_map("02_unfortunate")
                elif e.key == pygame.K_s:
                    self._switch_regime(Regime.SMALL)
                elif e.key == pygame.K_u:
                    self._switch_regime(Regime.ULTRA)
                elif e.key == pygame.K_h:
                    self._switch_frontier(Frontier.HEURISTIC)
                elif e.key == pygame.K_a:
                    self._switch_frontier(Frontier.ASTAR)
            elif e.type == pygame.VIDEORESIZE:
                self.screen = pygame.display.set_mode((e.w, e.h), pygame.RESIZABLE)
                self._layout(e.w, e.h)
            elif e.type in (pygame.MOUSEMOTION, pygame.MOUSEBUTTONDOWN):
                for b in self._buttons:
                    b.handle_mouse(e)

    def _make_algo(self) -> CrucibleSearch:
        algo = CrucibleSearch(name=f"{self.selected_regime.value}/{self.selected_frontier.value}",
                              regime=self.selected_regime, frontier=self.selected_frontier)
        algo.init(self.grid)
        return algo

    def _switch_map(self, key: str):
        if key not in MAP_FILES: return
        try:
            self.grid = load_city(MAP_FILES[key])
        except (OSError, CrucibleError) as ex:
            logger.error("Failed to load map %s: %s", key, ex)
            return
        self.selected_map_key = key
        pygame.display.set_caption(f"Crucible — {key}")
        self._layout(*self.screen.get_size())
        self._reset()

    def _switch_regime(self, regime: Regime):
        self.selected_regime = regime
        self._reset()

    def _switch_frontier(self, frontier: Frontier):
        self.selected_frontier = frontier
        self._reset()

    def _reset(self):
        self.running = False
        self.state = "Idle"
        self.algo = self._make_algo()
        self.open_cells = set()
        self.closed_set = set()
        self.path = []
        self._last_metrics = {}
        self._refresh_active_states()

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
            c = tuple(int(a + (b - a) * t) for a, b in zip(top, bot))
            pygame.draw.line(self.screen, c, (0, y), (w, y))

    def _draw_grid(self):
        cs = self.cell_size
        ox, oy = self._grid_origin
        show_digits = cs >= 16

        for row, values in enumerate(self.grid.rows()):
            for col, v in enumerate(values):
                rect = pygame.Rect(ox + col*cs, oy + row*cs, cs, cs)
                pygame.draw.rect(self.screen, heat_color(v), rect)
                pygame.draw.rect(self.screen, BLACK, rect, 1)
                if show_digits:
                    txt = self.font_small.render(str(v), True, TEXT_LIGHT)
                    self.screen.blit(txt, txt.get_rect(center=rect.center))

        # overlays
        s = pygame.Surface((cs, cs), pygame.SRCALPHA)
        s.fill(NEON_MAG_A)
        for (col,row) in self.closed_set:
            self.screen.blit(s, (ox + col*cs, oy + row*cs))
        s = pygame.Surface((cs, cs), pygame.SRCALPHA)
        s.fill(NEON_CYAN_A)
        for (col,row) in self.open_cells:
            self.screen.blit(s, (ox + col*cs, oy + row*cs))

        # path
        if len(self.path) >= 2:
            pts = [(ox + col*cs + cs//2, oy + row*cs + cs//2) for (col,row) in self.path]
            pygame.draw.lines(self.screen, NEON_MINT, False, pts, max(2, cs // 6))

        start = self.algo.start if self.algo.start is not None else (0, 0)
        goal = self.algo.goal if self.algo.goal is not None else self.grid.bottom_right
        self._draw_badge(start, BLUE, "S")
        self._draw_badge(goal, RED, "G")

    def _draw_badge(self, cell: Cell, color: Tuple[int,int,int], label: str):
        cs = self.cell_size
        ox, oy = self._grid_origin
        col,row = cell
        cx = ox + col*cs + cs//2
        cy = oy + row*cs + cs//2
        pygame.draw.circle(self.screen, color, (cx,cy), max(4, cs//2 - 2))
        txt = self.font_small.render(label, True, WHITE)
        self.screen.blit(txt, txt.get_rect(center=(cx,cy)))

    # ---------- buttons + metrics ----------
    def _build_buttons(self):
        self._buttons.clear()
        rb = self._right_band
        x = rb.x + 16
        y = rb.y + 250  # leaves space for metrics card above
        w = max(160, rb.width - 32)
        h = 34
        gap = 8

        def add(label, cb, *, togglable=False, store_as: str | None = None):
            btn = UIButton(label, pygame.Rect(x, y, w, h), cb, togglable=togglable)
            self._buttons.append(btn)
            if store_as:
                setattr(self, store_as, btn)

        add("Run / Pause", self._toggle_run, togglable=True, store_as="btn_run"); y += h + gap
        add("Step Once", self._do_step); y += h + gap
        add("Reset", self._reset);       y += h + gap

        half = (w-8)//2
        self._buttons.append(UIButton("Speed −", pygame.Rect(x, y, half, h), lambda: self._bump_speed(-1)))
        self._buttons.append(UIButton("Speed +", pygame.Rect(x + half + 8, y, half, h), lambda: self._bump_speed(+1)))
        y += h + gap

        add("Crucible: Small", lambda: self._switch_regime(Regime.SMALL), togglable=True, store_as="btn_small"); y += h + gap
        add("Crucible: Ultra", lambda: self._switch_regime(Regime.ULTRA), togglable=True, store_as="btn_ultra"); y += h + gap
        add("Frontier: Heuristic", lambda: self._switch_frontier(Frontier.HEURISTIC), togglable=True, store_as="btn_heur"); y += h + gap
        add("Frontier: A*", lambda: self._switch_frontier(Frontier.ASTAR), togglable=True, store_as="btn_astar"); y += h + gap

        add(MAP_LABELS["01_sample"], lambda: self._switch_map("01_sample"), togglable=True, store_as="btn_map1"); y += h + gap
        add(MAP_LABELS["02_unfortunate"], lambda: self._switch_map("02_unfortunate"), togglable=True, store_as="btn_map2")

        self._refresh_active_states()

    def _refresh_active_states(self):
        if hasattr(self, "btn_run"):
            self.btn_run.set_active(self.running)
        if hasattr(self, "btn_small"):
            self.btn_small.set_active(self.selected_regime is Regime.SMALL)
            self.btn_ultra.set_active(self.selected_regime is Regime.ULTRA)
        if hasattr(self, "btn_heur"):
            self.btn_heur.set_active(self.selected_frontier is Frontier.HEURISTIC)
            self.btn_astar.set_active(self.selected_frontier is Frontier.ASTAR)
        if hasattr(self, "btn_map1"):
            self.btn_map1.set_active(self.selected_map_key == "01_sample")
            self.btn_map2.set_active(self.selected_map_key == "02_unfortunate")

    def _toggle_run(self):
        if self.state in ("Done", "No path"):
            return
        self.running = not self.running
        self.state = "Running" if self.running else "Paused"
        self._refresh_active_states()

    def _bump_speed(self, direction: int):
        # doubles / halves so both a slow walk-through and a full drain are reachable
        sps = self.steps_per_sec * 2 if direction > 0 else self.steps_per_sec // 2
        self.steps_per_sec = int(max(1, min(MAX_STEPS_PER_SEC, sps)))

    def _draw_metrics_and_buttons(self):
        rb = self._right_band

        card_h = 230
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
        m = self._last_metrics
        line(f"Popped: {m.get('popped', 0)}")
        line(f"Open: {m.get('open_size', 0)}")
        line(f"Closed: {m.get('closed_count', 0)}")
        line(f"Path Len: {m.get('path_len', 0)}")
        if m.get("total_cost", None) is not None:
            line(f"Heat Loss: {m['total_cost']}")
        line("-" * 26)
        line(f"{self.state} | {MAP_LABELS.get(self.selected_map_key, 'Custom map')}")
        line(f"Crucible: {self.selected_regime.value} | Frontier: {self.selected_frontier.value}")
        line(f"Speed: {self.steps_per_sec} steps/s")

        for b in self._buttons:
            b.draw(self.screen, self.font)


# ---------- main ----------
def main():
    settings = resolve_settings()
    configure_logging(settings.log_level)
    key = "01_sample"
    try:
        grid = load_city(MAP_FILES[key])
    except (OSError, CrucibleError) as ex:
        logger.error("Failed to load default map: %s", ex)
        sys.exit(1)
    Viewer(grid, key, settings.regime, settings.frontier).run()

if __name__ == "__main__":
    main()
