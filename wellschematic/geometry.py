import logging
from typing import NamedTuple, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from .exceptions import DuplicateMDError
from .objects import Waypoint, sort_by_md
from .utils import intersect, joint_is_open

logger = logging.getLogger(__name__)

SIDES = {
    'right': 1.,
    'left': -1.,
}


class WallSegment(NamedTuple):
    """
    A straight piece of the left or right borehole wall between two
    consecutive waypoints.
    """
    start_x: float
    start_y: float
    end_x: float
    end_y: float
    md: float = None
    seg_len: float = None
    corrected_start: bool = False
    corrected_end: bool = False

    @property
    def start(self) -> NDArray:
        return np.array([self.start_x, self.start_y])

    @property
    def end(self) -> NDArray:
        return np.array([self.end_x, self.end_y])


class Span(NamedTuple):
    """
    The borehole walls between the station at ``index`` and the station at
    ``index + 1``.
    """
    index: int
    left: WallSegment
    right: WallSegment

    def wall(self, side: str) -> WallSegment:
        assert side in SIDES, f"Unrecognized side {side}"
        return self.right if side == 'right' else self.left


class BoreholeOutline(NamedTuple):
    spans: Tuple[Span, ...] = ()

    @property
    def left(self) -> Tuple[WallSegment, ...]:
        return tuple(span.left for span in self.spans)

    @property
    def right(self) -> Tuple[WallSegment, ...]:
        return tuple(span.right for span in self.spans)

    def wall(self, side: str) -> Tuple[WallSegment, ...]:
        assert side in SIDES, f"Unrecognized side {side}"
        return self.right if side == 'right' else self.left


class Station(NamedTuple):
    """
    A waypoint with its projected position on the diagram plane.

    ``a1`` is the inclination of the span leaving the station, measured from
    the horizontal displacement axis, and ``a2 = pi / 2 - a1`` is the angle
    of the wall normal. The last station repeats the angles of the final
    span.
    """
    md: float
    tvd: float
    diameter: float
    center_x: float
    center_y: float
    a1: float
    a2: float
    seg_len: float

    @property
    def center(self) -> NDArray:
        return np.array([self.center_x, self.center_y])


class Extents(NamedTuple):
    min_x: float = np.inf
    max_x: float = -np.inf
    min_y: float = np.inf
    max_y: float = -np.inf

    @classmethod
    def from_points(cls, points) -> 'Extents':
        points = np.asarray(points, dtype=float).reshape(-1, 2)
        if not points.size:
            return cls()
        min_x, min_y = np.min(points, axis=0)
        max_x, max_y = np.max(points, axis=0)
        return cls(float(min_x), float(max_x), float(min_y), float(max_y))

    @property
    def is_empty(self) -> bool:
        return self.min_x > self.max_x or self.min_y > self.max_y

    @property
    def width(self) -> float:
        return 0. if self.is_empty else self.max_x - self.min_x

    @property
    def height(self) -> float:
        return 0. if self.is_empty else self.max_y - self.min_y

    def union(self, other: 'Extents') -> 'Extents':
        return Extents(
            min(self.min_x, other.min_x),
            max(self.max_x, other.max_x),
            min(self.min_y, other.min_y),
            max(self.max_y, other.max_y),
        )

    def contains(self, x, y) -> bool:
        return (
            self.min_x <= x <= self.max_x
            and self.min_y <= y <= self.max_y
        )


class GeometryResult(NamedTuple):
    """
    The projected trajectory: one ``Station`` per waypoint, the borehole
    outline with one ``Span`` per pair of consecutive stations and the
    bounding extents of all of it.
    """
    stations: Tuple[Station, ...] = ()
    outline: BoreholeOutline = BoreholeOutline()
    extents: Extents = Extents()

    @property
    def is_empty(self) -> bool:
        return len(self.stations) < 2

    @property
    def md_range(self) -> Tuple[float, float]:
        assert not self.is_empty, "Geometry is empty"
        return (self.stations[0].md, self.stations[-1].md)

    @property
    def md(self) -> NDArray:
        return np.array([station.md for station in self.stations])

    def centerline(self) -> NDArray:
        """Returns the (n,2) array of station centers."""
        return np.array(
            [station.center for station in self.stations]
        ).reshape(-1, 2)

    def wall_polyline(self, side: str) -> NDArray:
        """
        Returns the (2 * (n - 1), 2) array of wall points for one side,
        listing the start and end of each wall segment in turn.
        """
        return np.array([
            point
            for segment in self.outline.wall(side)
            for point in (segment.start, segment.end)
        ]).reshape(-1, 2)


def _split_arr(arr):
    return (arr[:-1], arr[1:])


def _get_a1(md, tvd):
    delta_md = np.abs(np.diff(md))
    delta_tvd = np.abs(np.diff(tvd))

    ratio = delta_tvd / delta_md

    if np.any(ratio > 1):
        logger.warning(
            "TVD changes by more than MD between %d waypoint pair(s), "
            "clipping these spans to vertical", int(np.sum(ratio > 1))
        )
        ratio = np.clip(ratio, 0., 1.)

    return np.arcsin(ratio)


def _get_centers(md, tvd, a1):
    center_x = np.zeros(len(md))
    center_x[1:] = np.cumsum(np.diff(md) * np.cos(a1))
    center_y = np.abs(tvd)

    return np.stack((center_x, center_y), axis=1)


def _get_walls(centers, diameter, a2):
    """
    Offsets both ends of each span by half of the leading waypoint's
    diameter along the span's wall normal.
    """
    normal = np.stack((np.cos(a2), -np.sin(a2)), axis=1)
    offset = normal * (diameter[:-1] / 2).reshape(-1, 1)
    start, end = _split_arr(centers)

    return {
        'right': (start + offset, end + offset),
        'left': (start - offset, end - offset),
    }


def correct_overlaps(
    segments: Sequence[WallSegment], md_start: float = 0.
) -> Tuple[WallSegment, ...]:
    """
    Snaps adjacent wall segments that overlap at a bend or diameter change
    to their intersection point, then re-derives each segment's length and
    measured depth from the corrected shape.

    Parameters
    ----------
    segments: list of WallSegment
        The wall segments of one side of the borehole, in order of md.
    md_start: float (default: 0.)
        The md assigned to the first segment.

    Returns
    -------
    segments: tuple of WallSegment
        The corrected segments. Joints that are already closed, or whose
        segments do not cross, are left untouched.
    """
    segments = list(segments)

    for i in range(len(segments) - 1):
        this_segment, next_segment = segments[i], segments[i + 1]

        if not joint_is_open(this_segment.end, next_segment.start):
            continue

        point = intersect(
            this_segment.start, this_segment.end,
            next_segment.start, next_segment.end
        )
        if point is None:
            continue

        x, y = point
        segments[i] = this_segment._replace(
            end_x=x, end_y=y, corrected_end=True
        )
        segments[i + 1] = next_segment._replace(
            start_x=x, start_y=y, corrected_start=True
        )

    md = md_start
    for i, segment in enumerate(segments):
        seg_len = float(np.hypot(
            segment.end_x - segment.start_x, segment.end_y - segment.start_y
        ))
        if i > 0:
            md += seg_len
        segments[i] = segment._replace(md=md, seg_len=seg_len)

    return tuple(segments)


def compute_geometry(waypoints: Sequence[Waypoint]) -> GeometryResult:
    """
    Projects a list of trajectory waypoints onto the diagram plane and
    constructs the borehole outline.

    Parameters
    ----------
    waypoints: list of Waypoint
        The trajectory waypoints, in any order. The measured depths must be
        unique, see ``wellschematic.classify.coalesce_waypoints``.

    Returns
    -------
    geometry: GeometryResult
        An empty result if there are fewer than two waypoints, since no
        wall segment can be defined.

    Raises
    ------
    DuplicateMDError
        If two waypoints share the same md.

    Notes
    -----
    The first center is placed at ``(0, |tvd|)``. Each following center is
    displaced horizontally by ``delta_md * cos(a1)`` of the preceding span
    while its vertical position is pinned to the supplied ``|tvd|``, so the
    input TVD stays authoritative over the derived geometry.
    """
    waypoints = sort_by_md(waypoints)
    if len(waypoints) < 2:
        logger.debug(
            "%d waypoint(s) provided, nothing to draw", len(waypoints)
        )
        return GeometryResult()

    md, tvd, diameter = np.array([
        [w.md, w.tvd, w.diameter] for w in waypoints
    ], dtype=float).T

    duplicates = np.flatnonzero(np.diff(md) == 0)
    if duplicates.size:
        raise DuplicateMDError(md[duplicates[0]])

    a1 = _get_a1(md, tvd)
    a2 = np.pi / 2 - a1
    centers = _get_centers(md, tvd, a1)
    seg_len = np.diff(md, prepend=md[0])

    stations = tuple(
        Station(
            md=float(md[i]), tvd=float(tvd[i]), diameter=float(diameter[i]),
            center_x=float(centers[i, 0]), center_y=float(centers[i, 1]),
            a1=float(a1[min(i, len(a1) - 1)]),
            a2=float(a2[min(i, len(a2) - 1)]),
            seg_len=float(seg_len[i])
        )
        for i in range(len(md))
    )

    walls = {
        side: correct_overlaps(
            [
                WallSegment(*start, *end)
                for start, end in zip(*points)
            ],
            md_start=md[0]
        )
        for side, points in _get_walls(centers, diameter, a2).items()
    }

    outline = BoreholeOutline(tuple(
        Span(i, left, right)
        for i, (left, right) in enumerate(zip(walls['left'], walls['right']))
    ))

    wall_points = np.array([
        point
        for side in walls.values()
        for segment in side
        for point in (segment.start, segment.end)
    ])
    extents = Extents.from_points(np.vstack((centers, wall_points)))

    logger.debug(
        "Computed geometry for %d stations, extents %s", len(stations), extents
    )

    return GeometryResult(stations, outline, extents)
