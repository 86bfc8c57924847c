from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pygame

from mandala.config import coerce_color, load_config
from mandala.drawing.errors import DrawingError
from mandala.drawing.session import DrawingSession, SessionListener
from mandala.logging_config import setup_logging
from mandala.paths import ensure_directories, get_data_root
from mandala.render import PngExporter, render_items
from mandala.ui.common import (
    Button,
    create_fullscreen_window,
    is_gesture_interruption,
    is_pointer_motion,
    is_primary_pointer_event,
    pointer_event_pos,
)

logger = logging.getLogger(__name__)

Color = Tuple[int, int, int]
Point = Tuple[int, int]

TOOLS = ("pen", "eraser", "bucket")
STATUS_SECONDS = 4.0


def _palette_from_config(paint_config: Dict[str, Any]) -> List[Color]:
    palette = []
    for value in paint_config.get("palette", []):
        color = coerce_color(value, None)
        if color is not None:
            palette.append(color)
    return palette


def _size_values_from_config(paint_config: Dict[str, Any], default_width: float) -> List[float]:
    sizes = []
    for value in paint_config.get("size_values", []):
        try:
            size = float(value)
        except (TypeError, ValueError):
            continue
        if size > 0:
            sizes.append(size)
    return sizes or [default_width]


def _is_ctrl_key(event: pygame.event.Event, key: int, *, shift: bool = False) -> bool:
    if event.type != pygame.KEYDOWN or event.key != key:
        return False
    mods = event.mod
    if not mods & pygame.KMOD_CTRL:
        return False
    return bool(mods & pygame.KMOD_SHIFT) == shift


class PaintApp(SessionListener):
    def __init__(
        self,
        *,
        screen: Optional[pygame.Surface] = None,
        screen_rect: Optional[pygame.Rect] = None,
        clock: Optional[pygame.time.Clock] = None,
    ) -> None:
        self.config = load_config()
        self.data_root = get_data_root(self.config)
        dirs = ensure_directories(self.data_root, self.config)
        self.documents_dir = dirs["documents"]
        setup_logging(dirs["logs"], self.config.get("log_level", "INFO"))

        if screen is None:
            self.screen, self.screen_rect = create_fullscreen_window()
        else:
            self.screen = screen
            self.screen_rect = screen_rect or screen.get_rect()
        self.clock = clock or pygame.time.Clock()

        self.margin = 16
        self.menu_pad = 10
        self.menu_gap = 10
        self.menu_bg = (238, 234, 226)
        self.tool_size = max(44, min(56, int(self.screen_rect.height * 0.06)))
        panel_width = self.tool_size * 3 + self.menu_gap * 2 + self.menu_pad * 2
        self.controls_rect = pygame.Rect(
            self.margin,
            self.margin,
            panel_width,
            self.screen_rect.height - 2 * self.margin,
        )
        self.canvas_rect = pygame.Rect(
            self.controls_rect.right + self.margin,
            self.margin,
            self.screen_rect.width - panel_width - 3 * self.margin,
            self.screen_rect.height - 2 * self.margin,
        )

        paint_config = self.config.get("paint", {})
        self.background: Color = coerce_color(paint_config.get("background"), (255, 255, 255))
        self.palette = _palette_from_config(paint_config)
        line_color = coerce_color(paint_config.get("line_color"), (0, 0, 0))
        line_width = float(paint_config.get("line_width", 5.0))
        self.size_values = _size_values_from_config(paint_config, line_width)

        self.session = DrawingSession(
            line_color=line_color,
            line_width=line_width,
            fill_color=coerce_color(paint_config.get("fill_color"), None),
            background_color=self.background,
            exporter=PngExporter(self.canvas_rect.size, self.documents_dir, self.background),
        )
        self.session.add_listener(self)
        self.current_tool = "pen"
        self.current_color: Color = line_color

        self.canvas_surface = pygame.Surface(self.canvas_rect.size)
        self.canvas_dirty = True

        self.font = pygame.font.SysFont("sans", 18)
        self.status_text = ""
        self.status_until = 0.0

        self.action_buttons: Dict[str, Button] = {}
        self.tool_buttons: Dict[str, Button] = {}
        self.size_buttons: Dict[float, Button] = {}
        self.palette_buttons: List[Button] = []
        self._build_ui()
        self.pointer_down = False

    def _build_ui(self) -> None:
        self.action_buttons.clear()
        self.tool_buttons.clear()
        self.size_buttons.clear()
        self.palette_buttons.clear()

        pad = self.menu_pad
        gap = self.menu_gap
        left = self.controls_rect.left + pad
        top = self.controls_rect.top + pad
        inner_w = self.controls_rect.width - pad * 2
        tool_size = min(self.tool_size, int((inner_w - 2 * gap) / 3))

        labels = {"pen": "Pen", "eraser": "Erase", "bucket": "Fill"}
        for idx, tool in enumerate(TOOLS):
            rect = pygame.Rect(left + idx * (tool_size + gap), top, tool_size, tool_size)
            self.tool_buttons[tool] = Button(rect=rect, label=labels[tool], fill=(245, 245, 245))

        size_height = max(6, tool_size // 2)
        size_gap = max(2, gap // 4)
        size_top = top + tool_size + gap
        for idx, size in enumerate(self.size_values):
            rect = pygame.Rect(left, size_top + idx * (size_height + size_gap), inner_w, size_height)
            self.size_buttons[size] = Button(rect=rect, fill=self.menu_bg)
        size_bottom = size_top + len(self.size_values) * (size_height + size_gap)

        action_h = self.font.get_height() + 16
        bottom_top = self.controls_rect.bottom - pad - 3 * action_h - 2 * gap
        for idx, key in enumerate(("undo", "redo", "save")):
            rect = pygame.Rect(left, bottom_top + idx * (action_h + gap), inner_w, action_h)
            self.action_buttons[key] = Button(rect=rect, label=key.capitalize(), fill=(245, 245, 245))
        self.action_buttons["undo"].enabled = self.session.history.can_undo
        self.action_buttons["redo"].enabled = self.session.history.can_redo

        palette_top = size_bottom + gap
        palette_bottom = max(palette_top, bottom_top - gap)
        palette_rect = pygame.Rect(left, palette_top, inner_w, palette_bottom - palette_top)
        swatch_gap = 8
        rows = max(1, len(self.palette))
        swatch_height = max(14, (palette_rect.height - swatch_gap * (rows - 1)) // rows)
        for idx, color in enumerate(self.palette):
            rect = pygame.Rect(
                palette_rect.left,
                palette_rect.top + idx * (swatch_height + swatch_gap),
                palette_rect.width,
                swatch_height,
            )
            self.palette_buttons.append(Button(rect=rect, fill=color))

    # SessionListener

    def undo_availability_changed(self, available: bool) -> None:
        if "undo" in self.action_buttons:
            self.action_buttons["undo"].enabled = available

    def redo_availability_changed(self, available: bool) -> None:
        if "redo" in self.action_buttons:
            self.action_buttons["redo"].enabled = available

    def display_changed(self) -> None:
        self.canvas_dirty = True

    def drawing_saved(self, path: Path) -> None:
        self._show_status(f"Saved {path.name}")

    def save_failed(self, error: DrawingError) -> None:
        self._show_status(str(error))

    def _show_status(self, text: str) -> None:
        self.status_text = text
        self.status_until = pygame.time.get_ticks() / 1000.0 + STATUS_SECONDS

    def _select_tool(self, tool: str) -> None:
        self.current_tool = tool
        self.session.erase_mode = tool == "eraser"
        self.session.fill_mode = tool == "bucket"
        if tool == "bucket":
            self.session.fill_color = self.current_color

    def _select_color(self, color: Color) -> None:
        self.current_color = color
        self.session.line_color = color
        if self.current_tool == "bucket":
            self.session.fill_color = color

    def _local_pos(self, pos: Point) -> Point:
        return (pos[0] - self.canvas_rect.left, pos[1] - self.canvas_rect.top)

    def _handle_pointer_down(self, pos: Point) -> None:
        if self.canvas_rect.collidepoint(pos):
            self.session.begin_gesture(self._local_pos(pos))
            return

        for tool, button in self.tool_buttons.items():
            if button.hit(pos):
                self._select_tool(tool)
                return

        for size, button in self.size_buttons.items():
            if button.hit(pos):
                self.session.line_width = size
                return

        for idx, button in enumerate(self.palette_buttons):
            if button.hit(pos):
                self._select_color(self.palette[idx])
                return

        if self.action_buttons["undo"].hit(pos):
            self.session.undo()
        elif self.action_buttons["redo"].hit(pos):
            self.session.redo()
        elif self.action_buttons["save"].hit(pos):
            self.session.save_drawing()

    def _handle_pointer_move(self, pos: Point) -> None:
        self.session.extend_gesture(self._local_pos(pos))

    def _handle_pointer_up(self) -> None:
        self.session.end_gesture()

    def _handle_key(self, event: pygame.event.Event) -> None:
        if _is_ctrl_key(event, pygame.K_z):
            self.session.undo()
        elif _is_ctrl_key(event, pygame.K_y) or _is_ctrl_key(event, pygame.K_z, shift=True):
            self.session.redo()
        elif _is_ctrl_key(event, pygame.K_s):
            self.session.save_drawing()

    def _redraw_canvas(self) -> None:
        self.canvas_surface.fill(self.background)
        render_items(self.canvas_surface, self.session.draw_list())
        self.canvas_dirty = False

    def _render(self) -> None:
        if self.canvas_dirty:
            self._redraw_canvas()

        self.screen.fill((252, 248, 240))
        pygame.draw.rect(self.screen, self.menu_bg, self.controls_rect)
        self.screen.blit(self.canvas_surface, self.canvas_rect.topleft)
        pygame.draw.rect(self.screen, (200, 200, 200), self.canvas_rect, width=2)

        for tool, button in self.tool_buttons.items():
            button.draw(self.screen, self.font)
            if tool == self.current_tool:
                pygame.draw.rect(self.screen, (200, 60, 60), button.rect, width=3, border_radius=12)

        for size, button in self.size_buttons.items():
            button.draw(self.screen)
            line_y = button.rect.centery
            pygame.draw.line(
                self.screen,
                (30, 30, 30),
                (button.rect.left + 8, line_y),
                (button.rect.right - 8, line_y),
                max(1, int(round(size))),
            )
            if size == self.session.line_width:
                pygame.draw.rect(self.screen, (200, 60, 60), button.rect, width=3, border_radius=12)

        for idx, button in enumerate(self.palette_buttons):
            color = self.palette[idx]
            if color == self.current_color:
                pygame.draw.rect(self.screen, (200, 60, 60), button.rect, width=3)
                inner = button.rect.inflate(-4, -4)
                pygame.draw.rect(self.screen, color, inner, border_radius=10)
            else:
                button.draw(self.screen)

        for button in self.action_buttons.values():
            button.draw(self.screen, self.font)

        if self.status_text and pygame.time.get_ticks() / 1000.0 < self.status_until:
            text = self.font.render(self.status_text, True, (20, 20, 20))
            text_rect = text.get_rect(midbottom=(self.canvas_rect.centerx, self.canvas_rect.bottom - 12))
            self.screen.blit(text, text_rect)

        pygame.display.flip()

    def run(self, *, quit_on_exit: bool = True) -> None:
        running = True
        self._render()
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    self._handle_key(event)
                elif is_primary_pointer_event(event, is_down=True):
                    pos = pointer_event_pos(event, self.screen_rect)
                    if pos is None:
                        continue
                    self.pointer_down = True
                    self._handle_pointer_down(pos)
                elif is_pointer_motion(event):
                    if event.type == pygame.MOUSEMOTION:
                        if not (self.pointer_down or event.buttons[0]):
                            continue
                    elif not self.pointer_down:
                        continue
                    pos = pointer_event_pos(event, self.screen_rect)
                    if pos is None:
                        continue
                    self._handle_pointer_move(pos)
                elif is_primary_pointer_event(event, is_down=False):
                    self.pointer_down = False
                    self._handle_pointer_up()
                elif is_gesture_interruption(event):
                    self.pointer_down = False
                    self.session.cancel_gesture()

            self._render()
            self.clock.tick(60)

        if quit_on_exit:
            pygame.quit()


def main() -> None:
    try:
        PaintApp().run(quit_on_exit=True)
    except Exception:
        logger.exception("Paint app crashed")
        pygame.quit()
        raise


if __name__ == "__main__":
    main()
