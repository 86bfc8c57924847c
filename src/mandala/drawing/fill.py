from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from mandala.drawing.geometry import EVEN_ODD, contains
from mandala.drawing.history import Color, FilledRegion, Stroke

logger = logging.getLogger(__name__)


def resolve_fill(
    tap_point: Sequence[float],
    closed_strokes: Iterable[Stroke],
    fill_color: Optional[Color],
) -> Optional[FilledRegion]:
    """Return a fill for the earliest committed stroke enclosing ``tap_point``.

    Strokes are checked in commit order and the first hit wins, even when a
    later stroke is drawn on top of it. Hit-testing uses the even-odd rule
    that pygame.draw.polygon paints with. ``None`` when no fill color is set or
    nothing encloses the point.
    """
    if fill_color is None:
        return None
    for stroke in closed_strokes:
        boundary = stroke.boundary()
        if contains(boundary, tap_point, EVEN_ODD):
            return FilledRegion(boundary=boundary, color=fill_color)
    logger.debug("No closed stroke encloses %s", tuple(tap_point))
    return None
