import logging
from typing import List, Mapping, NamedTuple, Optional, Sequence, Union

import numpy as np
from numpy.typing import NDArray
from scipy.spatial import KDTree

from .config import ZoomRange
from .geometry import Extents

logger = logging.getLogger(__name__)

# candidate tick steps for the TVD scale axis
DIVISORS = [
    1, 2, 5, 10, 20, 50, 100, 200, 500, 1000, 2000, 5000, 10000, 20000,
    50000, 100000, 200000, 500000, 1000000, 2000000, 5000000
]


class Rect(NamedTuple):
    x: float
    y: float
    width: float
    height: float

    def contains(self, points) -> NDArray:
        """Boolean mask of the (n,2) points inside the rectangle, edges
        included."""
        points = np.asarray(points, dtype=float).reshape(-1, 2)
        return (
            (points[:, 0] >= self.x)
            & (points[:, 0] <= self.x + self.width)
            & (points[:, 1] >= self.y)
            & (points[:, 1] <= self.y + self.height)
        )


class Offset(NamedTuple):
    left: float = 0.
    top: float = 0.


def _as_tuple(cls, value):
    if value is None:
        return cls()
    if isinstance(value, cls):
        return value
    if isinstance(value, Mapping):
        return cls(**{k: float(value[k]) for k in cls._fields if k in value})
    return cls(*value)


def _js_round(x):
    return float(np.floor(x + 0.5))


class LinearScale:
    """
    Maps a continuous domain linearly onto an output range.

    Examples
    --------
    >>> scale = LinearScale((0, 10), (100, 200))
    >>> float(scale(5))
    150.0
    >>> float(scale.invert(150))
    5.0
    """
    def __init__(self, domain, range):
        self.domain = tuple(float(d) for d in domain)
        self.range = tuple(float(r) for r in range)
        assert len(self.domain) == 2 and len(self.range) == 2, (
            "domain and range must each have two values"
        )

    @property
    def factor(self) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if d0 == d1:
            return 0.
        return (r1 - r0) / (d1 - d0)

    def __call__(self, x):
        x = np.asarray(x, dtype=float)
        d0, d1 = self.domain
        r0, r1 = self.range
        if d0 == d1:
            return np.full_like(x, (r0 + r1) / 2)
        return r0 + (x - d0) * self.factor

    def invert(self, y):
        y = np.asarray(y, dtype=float)
        d0, d1 = self.domain
        r0, r1 = self.range
        if r0 == r1:
            return np.full_like(y, (d0 + d1) / 2)
        return d0 + (y - r0) * (d1 - d0) / (r1 - r0)

    def __repr__(self):
        return f"LinearScale(domain={self.domain}, range={self.range})"


class CoordinateMapper:
    """
    Maps diagram-plane points onto an output surface of ``width`` by
    ``height`` pixels.

    The domain of each axis is the matching side of ``extents``, narrowed
    to the ``zoom_range`` fractions. Both axes share the smaller of their
    two scale factors so a unit of md displacement and a unit of TVD cover
    the same distance on screen, and the content is centered along the axis
    with room to spare. The y axis grows downward with TVD.

    Parameters
    ----------
    extents: Extents
        The bounding extents of the drawing.
    width, height: float
        The size of the output surface.
    zoom_range: ZoomRange (default: None)
        The zoom window, defaults to the full extents.
    padding: float (default: 0)
        A margin kept clear on every side of the output surface.
    """
    def __init__(
        self,
        extents: Extents,
        width: float,
        height: float,
        zoom_range: Optional[ZoomRange] = None,
        padding: float = 0.,
    ):
        assert width >= 0 and height >= 0, "width and height must be >= 0"
        assert padding >= 0, "padding must be >= 0"
        assert not extents.is_empty, "extents are empty"

        self.extents = extents
        self.width = width
        self.height = height
        self.zoom_range = ZoomRange() if zoom_range is None else zoom_range
        self.padding = padding

        x_domain = self._zoom(
            extents.min_x, extents.max_x,
            self.zoom_range.x.range_from, self.zoom_range.x.range_to
        )
        y_domain = self._zoom(
            extents.min_y, extents.max_y,
            self.zoom_range.y.range_from, self.zoom_range.y.range_to
        )

        available = (
            max(width - 2 * padding, 0.), max(height - 2 * padding, 0.)
        )
        spans = (x_domain[1] - x_domain[0], y_domain[1] - y_domain[0])

        factors = [a / s for a, s in zip(available, spans) if s > 0]
        self.factor = min(factors) if factors else 0.

        x_range, y_range = (
            self._centered(a, s) for a, s in zip(available, spans)
        )

        self.x = LinearScale(x_domain, x_range)
        self.y = LinearScale(y_domain, y_range)

    @staticmethod
    def _zoom(lo, hi, range_from, range_to):
        span = hi - lo
        return (lo + range_from * span, lo + range_to * span)

    def _centered(self, available, span):
        start = self.padding + (available - span * self.factor) / 2
        return (start, start + span * self.factor)

    def map_points(self, points) -> NDArray:
        points = np.asarray(points, dtype=float).reshape(-1, 2)
        return np.stack((self.x(points[:, 0]), self.y(points[:, 1])), axis=1)

    def invert_points(self, points) -> NDArray:
        points = np.asarray(points, dtype=float).reshape(-1, 2)
        return np.stack(
            (self.x.invert(points[:, 0]), self.y.invert(points[:, 1])), axis=1
        )


def hit_test(
    polygons: Sequence,
    mapper: CoordinateMapper,
    rect: Union[Rect, Mapping],
    offset: Union[Offset, Mapping, None] = None,
) -> List:
    """
    Returns the row of every polygon with at least one vertex inside a
    selection rectangle.

    Parameters
    ----------
    polygons: list of PolygonRecord
        The markable polygons of a draw.
    mapper: CoordinateMapper
        The mapper used to draw the polygons.
    rect: Rect or dict
        The selection rectangle ``{x, y, width, height}`` in screen
        coordinates. Points on its edges are inside.
    offset: Offset or dict (default: None)
        The ``{left, top}`` position of the output surface on screen.

    Returns
    -------
    rows: list
        One row per selected polygon, in polygon order. A polygon straddling
        the rectangle without a vertex inside it is not selected.
    """
    rect = _as_tuple(Rect, rect)
    offset = np.array(_as_tuple(Offset, offset))

    rows = []
    for polygon in polygons:
        points = mapper.map_points(polygon.points) + offset
        if np.any(rect.contains(points)):
            rows.append(polygon.feature.row)

    logger.debug("Rectangle %s selected %d polygon(s)", rect, len(rows))

    return rows


def closest_feature(
    polygons: Sequence,
    mapper: CoordinateMapper,
    point,
    max_distance: float = np.inf,
) -> Optional[dict]:
    """
    Finds the polygon with the vertex closest to a screen point, for
    tooltips.

    Returns
    -------
    result: dict or None
        ``{'polygon', 'feature', 'distance', 'idx_vertex'}`` of the closest
        polygon, or None if no vertex lies within ``max_distance``.
    """
    if not polygons:
        return

    results = np.full((len(polygons), 2), np.inf)
    for i, polygon in enumerate(polygons):
        tree = KDTree(mapper.map_points(polygon.points))
        distance, idx_vertex = tree.query(
            point, distance_upper_bound=max_distance
        )
        if np.isfinite(distance):
            results[i] = np.array([distance, idx_vertex])

    winner = int(np.argmin(results[:, 0]))
    distance, idx_vertex = results[winner]
    if not np.isfinite(distance):
        return

    return {
        'polygon': polygons[winner],
        'feature': polygons[winner].feature,
        'distance': float(distance),
        'idx_vertex': int(idx_vertex),
    }


def tvd_ticks(
    min_y: float,
    max_y: float,
    pixel_height: float,
    min_separation: float = 80.,
) -> NDArray:
    """
    Tick values for the TVD scale axis.

    The number of ticks is chosen so they are at least ``min_separation``
    pixels apart, and the tick interval is rounded to a multiple of the
    largest of 1, 2, 5, 10, 20, 50... that does not exceed it.

    Examples
    --------
    >>> tvd_ticks(0, 1000, 400).tolist()
    [0.0, 200.0, 400.0, 600.0, 800.0, 1000.0]
    """
    assert min_separation > 0, "min_separation must be positive"
    dy = max_y - min_y
    if not dy > 0:
        return np.array([])

    tick_count = max(_js_round(pixel_height / min_separation), 1.)
    interval = _js_round(dy / tick_count)

    divisor = DIVISORS[-1]
    for idx in range(1, len(DIVISORS)):
        if interval / DIVISORS[idx] < 1:
            divisor = DIVISORS[idx - 1]
            break

    step = _js_round(interval / divisor) * divisor
    if step <= 0:
        step = float(divisor)

    first = np.ceil(min_y / step) * step
    count = int(np.floor((max_y - first) / step + 1e-9)) + 1

    return first + step * np.arange(max(count, 0), dtype=float)
