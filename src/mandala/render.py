from __future__ import annotations

import io
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence, Tuple

import pygame

from mandala.drawing.errors import EncodingFailure, WriteFailure
from mandala.drawing.geometry import Point, is_degenerate
from mandala.drawing.history import Color, FilledRegion, Stroke
from mandala.drawing.session import DrawItem

logger = logging.getLogger(__name__)

FILENAME_PREFIX = "mandala_"
TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"


def drawing_filename(now: Optional[datetime] = None) -> str:
    stamp = (now or datetime.now()).strftime(TIMESTAMP_FORMAT)
    return f"{FILENAME_PREFIX}{stamp}.png"


def _draw_fill(surface: pygame.Surface, region: FilledRegion) -> None:
    points = region.boundary.points
    if is_degenerate(points):
        return
    pygame.draw.polygon(surface, region.color, points)


def _draw_cap(surface: pygame.Surface, color: Color, pos: Point, width: float) -> None:
    radius = max(1, int(round(width / 2)))
    pygame.draw.circle(surface, color, pos, radius)


def _draw_stroke(surface: pygame.Surface, stroke: Stroke) -> None:
    points = stroke.points
    if not points:
        return
    if len(points) == 1:
        _draw_cap(surface, stroke.color, points[0], stroke.width)
        return
    line_width = max(1, int(round(stroke.width)))
    closed = stroke.closed and len(points) > 2
    pygame.draw.lines(surface, stroke.color, closed, points, line_width)
    # Round caps and joins.
    for point in points:
        _draw_cap(surface, stroke.color, point, stroke.width)


def render_items(surface: pygame.Surface, draw_list: Sequence[DrawItem]) -> None:
    for item in draw_list:
        if isinstance(item, FilledRegion):
            _draw_fill(surface, item)
        else:
            _draw_stroke(surface, item)


def compose(
    draw_list: Sequence[DrawItem],
    size: Tuple[int, int],
    background: Color = (255, 255, 255),
) -> pygame.Surface:
    surface = pygame.Surface(size)
    surface.fill(background)
    render_items(surface, draw_list)
    return surface


def encode_png(surface: pygame.Surface) -> bytes:
    buffer = io.BytesIO()
    try:
        pygame.image.save(surface, buffer, "png")
    except (pygame.error, ValueError) as exc:
        raise EncodingFailure(f"Could not encode drawing as PNG: {exc}") from exc
    return buffer.getvalue()


def _write_atomic(data: bytes, path: Path) -> None:
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    try:
        tmp_path.write_bytes(data)
        os.replace(tmp_path, path)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise


class PngExporter:
    def __init__(
        self,
        size: Tuple[int, int],
        documents_dir: Path,
        background: Color = (255, 255, 255),
    ) -> None:
        self.size = size
        self.documents_dir = documents_dir
        self.background = background

    def export(self, draw_list: Sequence[DrawItem], *, now: Optional[datetime] = None) -> Path:
        surface = compose(draw_list, self.size, self.background)
        data = encode_png(surface)
        path = self.documents_dir / drawing_filename(now)
        try:
            self.documents_dir.mkdir(parents=True, exist_ok=True)
            _write_atomic(data, path)
        except OSError as exc:
            raise WriteFailure(f"Could not write {path}: {exc}", path=path) from exc
        logger.debug("Wrote %d bytes to %s", len(data), path)
        return path
