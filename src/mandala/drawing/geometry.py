from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, NamedTuple, Sequence, Tuple

EVEN_ODD = "evenodd"
NONZERO = "nonzero"
FILL_RULES = (EVEN_ODD, NONZERO)


class Point(NamedTuple):
    x: float
    y: float


Segment = Tuple[Point, Point]


@dataclass(frozen=True)
class Polyline:
    points: Tuple[Point, ...]
    closed: bool = False

    def segments(self) -> Iterator[Segment]:
        for start, end in zip(self.points, self.points[1:]):
            yield start, end
        if self.closed and len(self.points) > 1:
            yield self.points[-1], self.points[0]

    def __len__(self) -> int:
        return len(self.points)


def as_point(value: Sequence[float]) -> Point:
    if isinstance(value, Point):
        return value
    x, y = value
    return Point(x, y)


def build_path(points: Iterable[Sequence[float]], closed: bool) -> Polyline:
    """Connect consecutive points with straight segments.

    A closed path gets an implicit segment from the last point back to the
    first; the closing point is not duplicated in ``points``.
    """
    return Polyline(points=tuple(as_point(point) for point in points), closed=closed)


def _cross(origin: Point, a: Point, b: Point) -> float:
    return (a.x - origin.x) * (b.y - origin.y) - (a.y - origin.y) * (b.x - origin.x)


def is_degenerate(points: Sequence[Point]) -> bool:
    """True when the points cannot bound any area."""
    distinct = list(dict.fromkeys(points))
    if len(distinct) < 3:
        return True
    origin, anchor = distinct[0], distinct[1]
    return all(_cross(origin, anchor, other) == 0 for other in distinct[2:])


def _crossings_even_odd(points: Sequence[Point], x: float, y: float) -> bool:
    inside = False
    count = len(points)
    j = count - 1
    for i in range(count):
        xi, yi = points[i]
        xj, yj = points[j]
        # Half-open interval on y so a vertex on the ray is counted once.
        if (yi > y) != (yj > y):
            x_cross = xi + (y - yi) * (xj - xi) / (yj - yi)
            if x < x_cross:
                inside = not inside
        j = i
    return inside


def _winding_number(points: Sequence[Point], x: float, y: float) -> int:
    winding = 0
    count = len(points)
    for i in range(count):
        start = points[i]
        end = points[(i + 1) % count]
        if start.y <= y:
            if end.y > y and _cross(start, end, Point(x, y)) > 0:
                winding += 1
        elif end.y <= y and _cross(start, end, Point(x, y)) < 0:
            winding -= 1
    return winding


def contains(path: Polyline, point: Sequence[float], fill_rule: str = EVEN_ODD) -> bool:
    """Point-in-polygon test over ``path`` treated as a closed boundary.

    ``fill_rule`` is ``"evenodd"`` (matches pygame's polygon fill) or
    ``"nonzero"``. Degenerate paths contain nothing.
    """
    if fill_rule not in FILL_RULES:
        raise ValueError(f"Unknown fill rule: {fill_rule!r}")
    if is_degenerate(path.points):
        return False
    x, y = point
    if fill_rule == EVEN_ODD:
        return _crossings_even_odd(path.points, x, y)
    return _winding_number(path.points, x, y) != 0
