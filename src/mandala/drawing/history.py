from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple, Union

from mandala.drawing.geometry import Point, Polyline, as_point, build_path

logger = logging.getLogger(__name__)

Color = Tuple[int, int, int]


@dataclass(frozen=True)
class Stroke:
    points: Tuple[Point, ...]
    color: Color
    width: float
    closed: bool = False

    def path(self) -> Polyline:
        return build_path(self.points, closed=self.closed)

    def boundary(self) -> Polyline:
        return build_path(self.points, closed=True)


@dataclass
class PendingStroke:
    """The in-progress stroke; only the session mutates it."""

    color: Color
    width: float
    points: List[Point] = field(default_factory=list)

    def add_point(self, point: Sequence[float]) -> None:
        self.points.append(as_point(point))

    def freeze(self, *, closed: bool) -> Stroke:
        return Stroke(points=tuple(self.points), color=self.color, width=self.width, closed=closed)


@dataclass(frozen=True)
class FilledRegion:
    boundary: Polyline
    color: Color


Action = Union[Stroke, FilledRegion]


class HistoryListener:
    """Receives history notifications synchronously. Override what you need."""

    def undo_availability_changed(self, available: bool) -> None:
        pass

    def redo_availability_changed(self, available: bool) -> None:
        pass

    def display_changed(self) -> None:
        pass


class ActionLog:
    """Linear undo/redo history over strokes and filled regions.

    ``strokes`` and ``fills`` hold the visible primitives and always match
    ``committed``. Appending leaves ``undone`` untouched, so a later redo can
    bring back an action undone before the append.
    """

    def __init__(self) -> None:
        self._committed: List[Action] = []
        self._undone: List[Action] = []
        self._strokes: List[Stroke] = []
        self._fills: List[FilledRegion] = []
        self._listeners: List[HistoryListener] = []

    @property
    def committed(self) -> Tuple[Action, ...]:
        return tuple(self._committed)

    @property
    def undone(self) -> Tuple[Action, ...]:
        return tuple(self._undone)

    @property
    def strokes(self) -> Tuple[Stroke, ...]:
        return tuple(self._strokes)

    @property
    def fills(self) -> Tuple[FilledRegion, ...]:
        return tuple(self._fills)

    @property
    def can_undo(self) -> bool:
        return bool(self._committed)

    @property
    def can_redo(self) -> bool:
        return bool(self._undone)

    def __len__(self) -> int:
        return len(self._committed)

    def closed_strokes(self) -> List[Stroke]:
        return [stroke for stroke in self._strokes if stroke.closed]

    def add_listener(self, listener: HistoryListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: HistoryListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def append(self, action: Action) -> None:
        self._show(action)
        self._committed.append(action)
        logger.debug("Appended %s (%d committed)", type(action).__name__, len(self._committed))
        self._notify(undo=True, redo=False)

    def undo(self) -> Optional[Action]:
        if not self._committed:
            logger.debug("Nothing to undo")
            return None
        action = self._committed.pop()
        self._hide(action)
        self._undone.append(action)
        self._notify(undo=bool(self._committed), redo=True)
        return action

    def redo(self) -> Optional[Action]:
        if not self._undone:
            logger.debug("Nothing to redo")
            return None
        action = self._undone.pop()
        self._show(action)
        self._committed.append(action)
        self._notify(undo=True, redo=bool(self._undone))
        return action

    def _show(self, action: Action) -> None:
        if isinstance(action, Stroke):
            self._strokes.append(action)
        elif isinstance(action, FilledRegion):
            self._fills.append(action)
        else:
            raise TypeError(f"Unsupported action: {action!r}")

    def _hide(self, action: Action) -> None:
        if isinstance(action, Stroke):
            self._strokes.pop()
        else:
            self._fills.pop()

    def _notify(self, *, undo: bool, redo: bool) -> None:
        for listener in list(self._listeners):
            listener.undo_availability_changed(undo)
            listener.redo_availability_changed(redo)
            listener.display_changed()
