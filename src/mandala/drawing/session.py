from __future__ import annotations

import enum
import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Protocol, Sequence, Union

from mandala.drawing.errors import DrawingError, EmptyDrawing, EncodingFailure, WriteFailure
from mandala.drawing.fill import resolve_fill
from mandala.drawing.history import (
    Action,
    ActionLog,
    Color,
    FilledRegion,
    HistoryListener,
    PendingStroke,
    Stroke,
)

logger = logging.getLogger(__name__)

DrawItem = Union[FilledRegion, Stroke]


class SessionState(enum.Enum):
    IDLE = "idle"
    STROKING = "stroking"


class SessionListener(HistoryListener):
    def drawing_saved(self, path: Path) -> None:
        pass

    def save_failed(self, error: DrawingError) -> None:
        pass


class Exporter(Protocol):
    def export(self, draw_list: Sequence[DrawItem], *, now: Optional[datetime] = None) -> Path:
        ...


class DrawingSession:
    """Owns the history and the in-progress stroke for one drawing surface.

    Input code calls the gesture methods; render code reads ``draw_list()``;
    ``save_drawing()`` hands the draw list to the exporter.
    """

    def __init__(
        self,
        *,
        line_color: Color = (0, 0, 0),
        line_width: float = 5.0,
        fill_color: Optional[Color] = None,
        background_color: Color = (255, 255, 255),
        exporter: Optional[Exporter] = None,
    ) -> None:
        self.line_color = line_color
        self.line_width = line_width
        self.fill_color = fill_color
        self.background_color = background_color
        self.fill_mode = False
        self.erase_mode = False
        self.exporter = exporter

        self.history = ActionLog()
        self.current_stroke: Optional[PendingStroke] = None
        self._listeners: List[SessionListener] = []

    @property
    def state(self) -> SessionState:
        return SessionState.IDLE if self.current_stroke is None else SessionState.STROKING

    @property
    def is_empty(self) -> bool:
        return not self.history.strokes and self.current_stroke is None

    def add_listener(self, listener: SessionListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)
        self.history.add_listener(listener)

    def remove_listener(self, listener: SessionListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)
        self.history.remove_listener(listener)

    def _display_changed(self) -> None:
        for listener in list(self._listeners):
            listener.display_changed()

    def _stroke_color(self) -> Color:
        return self.background_color if self.erase_mode else self.line_color

    def begin_gesture(self, point: Sequence[float]) -> Optional[Action]:
        if self.current_stroke is not None:
            logger.warning("Gesture began while another was in progress; committing the previous stroke")
            self.end_gesture()
        if self.fill_mode:
            region = resolve_fill(point, self.history.closed_strokes(), self.fill_color)
            if region is not None:
                self.history.append(region)
            return region
        self.current_stroke = PendingStroke(color=self._stroke_color(), width=self.line_width)
        self.current_stroke.add_point(point)
        self._display_changed()
        return None

    def extend_gesture(self, point: Sequence[float]) -> None:
        if self.current_stroke is None:
            return
        self.current_stroke.add_point(point)
        self._display_changed()

    def end_gesture(self) -> Optional[Stroke]:
        if self.current_stroke is None:
            return None
        stroke = self.current_stroke.freeze(closed=True)
        self.current_stroke = None
        self.history.append(stroke)
        return stroke

    def cancel_gesture(self) -> Optional[Stroke]:
        # A cancelled gesture keeps its stroke, same as a normal end.
        return self.end_gesture()

    def undo(self) -> Optional[Action]:
        return self.history.undo()

    def redo(self) -> Optional[Action]:
        return self.history.redo()

    def draw_list(self) -> List[DrawItem]:
        items: List[DrawItem] = list(self.history.fills)
        items.extend(self.history.strokes)
        if self.current_stroke is not None:
            items.append(self.current_stroke.freeze(closed=False))
        return items

    def save_drawing(self, now: Optional[datetime] = None) -> Optional[Path]:
        try:
            path = self._export(now)
        except DrawingError as exc:
            logger.warning("Saving drawing failed: %s", exc)
            for listener in list(self._listeners):
                listener.save_failed(exc)
            return None
        logger.info("Saved drawing to %s", path)
        for listener in list(self._listeners):
            listener.drawing_saved(path)
        return path

    def _export(self, now: Optional[datetime]) -> Path:
        if self.is_empty:
            raise EmptyDrawing()
        if self.exporter is None:
            raise EncodingFailure("No exporter configured for this drawing.")
        try:
            return self.exporter.export(self.draw_list(), now=now)
        except DrawingError:
            raise
        except OSError as exc:
            target = Path(exc.filename) if exc.filename else None
            raise WriteFailure(f"Could not write drawing: {exc}", path=target) from exc
        except Exception as exc:
            # pygame.error and anything else the exporter leaves unwrapped.
            raise EncodingFailure(f"Could not encode drawing: {exc}") from exc
