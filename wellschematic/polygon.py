"""
Closed rings of diagram-plane points outlining the features anchored along
the trajectory. Every function here is a pure function of the geometry,
the feature and the configured widths.
"""
import logging
import math
from typing import Iterator, List, NamedTuple, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from .exceptions import MDOutOfRangeError
from .geometry import SIDES, GeometryResult
from .objects import Feature, Gun, MDFill, MDValue, Perforation, Plug, sort_by_md
from .utils import get_normal, get_tangent, intersect, nearest_endpoint

logger = logging.getLogger(__name__)

# md overlap added to both ends of a value polygon so neighbours butt up
VALUE_OVERLAP = 5.


class PolygonRecord(NamedTuple):
    """
    A markable polygon retained for hit testing until the next draw.

    ``kind`` is either ``'value'`` or ``'fill'``.
    """
    points: NDArray
    feature: Feature
    kind: str


def match_waypoint(geometry: GeometryResult, md: float) -> int:
    """
    Finds the index of the span containing ``md``.

    The first station with an md greater than or equal to ``md`` is
    returned on an exact match, otherwise its predecessor. An exact match on
    the last station returns the final span, since the last station owns no
    wall segments.

    Raises
    ------
    MDOutOfRangeError
        If ``md`` lies outside the md range of the stations.
    """
    assert not geometry.is_empty, "Geometry is empty"
    md_min, md_max = geometry.md_range
    if not md_min <= md <= md_max:
        raise MDOutOfRangeError(md, md_min, md_max)

    mds = geometry.md
    index = int(np.searchsorted(mds, md, side='left'))

    if mds[index] == md:
        return min(index, len(mds) - 2)

    return index - 1


def in_range(
    geometry: GeometryResult, trailing_md: float, leading_md: float
) -> bool:
    """
    True if the md interval lies within the trajectory, which is a
    precondition of every polygon builder.
    """
    if geometry.is_empty:
        return False
    md_min, md_max = geometry.md_range
    return md_min <= trailing_md and leading_md <= md_max


def center_at(geometry: GeometryResult, index: int, md: float) -> NDArray:
    """
    The centerline position at ``md``, extrapolated from the station at
    ``index`` along its inclination.
    """
    station = geometry.stations[index]
    return station.center + (md - station.md) * get_tangent(station.a1)


def apex_point(
    geometry: GeometryResult, index: int, md: float, side: str, reach: float
) -> NDArray:
    station = geometry.stations[index]
    return (
        center_at(geometry, index, md)
        + SIDES[side] * reach * get_normal(station.a2)
    )


def wall_point(
    geometry: GeometryResult,
    index: int,
    md: float,
    side: str,
    reach: float = None
) -> NDArray:
    """
    Projects the centerline position at ``md`` onto a borehole wall.

    A ray is cast from the center outward along the wall normal by
    ``reach`` (the station's diameter by default) and intersected with the
    station's wall segment. If the ray does not cross the segment, the
    segment endpoint closest to the outer end of the ray is used instead.

    Parameters
    ----------
    geometry: GeometryResult
    index: int
        The span index, as returned by ``match_waypoint``.
    md: float
        The measured depth of the point.
    side: str
        Either ``'right'`` or ``'left'``.
    reach: float (default: None)
        The length of the ray.

    Returns
    -------
    point: (,2) array of floats
    """
    station = geometry.stations[index]
    reach = station.diameter if reach is None else reach

    center = center_at(geometry, index, md)
    outer = apex_point(geometry, index, md, side, reach)
    segment = geometry.outline.spans[index].wall(side)

    point = intersect(center, outer, segment.start, segment.end)
    if point is None:
        point = nearest_endpoint(outer, segment.start, segment.end)

    return point


def fill_polygon(
    geometry: GeometryResult, leading_md: float, trailing_md: float
) -> NDArray:
    """
    Builds the closed ring filling the borehole between two measured
    depths, following the walls through every station in between.

    Parameters
    ----------
    geometry: GeometryResult
    leading_md: float
        The deeper md of the interval.
    trailing_md: float
        The shallower md of the interval.

    Returns
    -------
    points: (n,2) array of floats
        The ring runs leading right, leading left, back up the left wall,
        trailing left, trailing right, down the right wall and closes on the
        leading right point.
    """
    leading = match_waypoint(geometry, leading_md)
    trailing = match_waypoint(geometry, trailing_md)

    leading_right = wall_point(geometry, leading, leading_md, 'right')
    leading_left = wall_point(geometry, leading, leading_md, 'left')
    trailing_left = wall_point(geometry, trailing, trailing_md, 'left')
    trailing_right = wall_point(geometry, trailing, trailing_md, 'right')

    left = geometry.outline.left
    right = geometry.outline.right

    points = [leading_right, leading_left]

    if leading > trailing:
        points.append(left[leading].start)
        for idx in range(leading - 1, trailing, -1):
            points.extend((left[idx].end, left[idx].start))
        points.append(left[trailing].end)

    points.extend((trailing_left, trailing_right))

    if leading > trailing:
        points.append(right[trailing].end)
        for idx in range(trailing + 1, leading):
            points.extend((right[idx].start, right[idx].end))
        points.append(right[leading].start)

    points.append(leading_right)

    return np.array(points)


def value_interval(values: Sequence[MDValue], i: int) -> Tuple[float, float]:
    """
    The (trailing, leading) md interval of the i-th of a list of md sorted
    values: half way to each neighbour plus ``VALUE_OVERLAP``.
    """
    value = values[i]
    prev_md = values[i - 1].md if i > 0 else value.md
    next_md = values[i + 1].md if i < len(values) - 1 else value.md

    trailing_md = value.md - (value.md - prev_md) / 2 - VALUE_OVERLAP
    leading_md = value.md + (next_md - value.md) / 2 + VALUE_OVERLAP

    return (trailing_md, leading_md)


def perforation_samples(
    perforation: Perforation, base_width: float
) -> NDArray:
    """
    The mds along a perforation, alternating wall-attached and apex samples
    and starting and ending on the wall.

    The interval is split into ``ceil(length / base_width)`` teeth. A point
    perforation gets a single tooth spanning ``base_width`` either side of
    its md.
    """
    assert base_width > 0, "base_width must be positive"
    start, end = sorted((perforation.start_md, perforation.end_md))

    if start == end:
        return np.array([start - base_width, start, start + base_width])

    count = math.ceil((end - start) / base_width)

    return np.linspace(start, end, count * 2 + 1)


def perforation_polygons(
    geometry: GeometryResult,
    perforation: Perforation,
    base_width: float,
    length: float,
    left: bool = True,
    right: bool = True,
) -> List[NDArray]:
    """
    Builds the saw-tooth rings of a perforation, which extend past the
    borehole wall by ``length``.

    Returns
    -------
    rings: list of (n,2) arrays
        The right ring (if ``right``) followed by the left ring (if
        ``left``).
    """
    samples = perforation_samples(perforation, base_width)
    indices = [match_waypoint(geometry, md) for md in samples]

    rings = []
    for side, enabled in (('right', right), ('left', left)):
        if not enabled:
            continue
        points = []
        for k, (md, index) in enumerate(zip(samples, indices)):
            if k % 2:
                reach = geometry.stations[index].diameter / 2 + length
                points.append(apex_point(geometry, index, md, side, reach))
            else:
                points.append(wall_point(geometry, index, md, side))
        points.append(points[0])
        rings.append(np.array(points))

    return rings


def gun_polygon(
    geometry: GeometryResult, gun: Gun, gun_width: float
) -> NDArray:
    """
    A lozenge centered on the gun's md, ``gun_width`` long either side and
    as wide as the borehole.
    """
    trailing_md, leading_md = gun.md - gun_width, gun.md + gun_width
    index = match_waypoint(geometry, gun.md)

    trailing_center = center_at(
        geometry, match_waypoint(geometry, trailing_md), trailing_md
    )
    leading_center = center_at(
        geometry, match_waypoint(geometry, leading_md), leading_md
    )

    return np.array([
        trailing_center,
        wall_point(geometry, index, gun.md, 'right'),
        leading_center,
        wall_point(geometry, index, gun.md, 'left'),
        trailing_center,
    ])


def _skip(feature, trailing_md, leading_md):
    logger.debug(
        "Skipping %s over md [%s, %s], outside of the trajectory",
        type(feature).__name__, trailing_md, leading_md
    )


def iter_value_polygons(
    geometry: GeometryResult, values: Sequence[MDValue]
) -> Iterator[Tuple[MDValue, NDArray]]:
    values = sort_by_md(values)
    for i, value in enumerate(values):
        trailing_md, leading_md = value_interval(values, i)
        if not in_range(geometry, trailing_md, leading_md):
            _skip(value, trailing_md, leading_md)
            continue
        yield value, fill_polygon(geometry, leading_md, trailing_md)


def iter_fill_polygons(
    geometry: GeometryResult, fills: Sequence[MDFill]
) -> Iterator[Tuple[MDFill, NDArray]]:
    """Fills run from the top of the trajectory down to the fill's md."""
    if geometry.is_empty:
        return
    for fill in fills:
        trailing_md, leading_md = geometry.md_range[0], fill.md
        if not in_range(geometry, trailing_md, leading_md):
            _skip(fill, trailing_md, leading_md)
            continue
        yield fill, fill_polygon(geometry, leading_md, trailing_md)


def iter_plug_polygons(
    geometry: GeometryResult, plugs: Sequence[Plug], plug_width: float
) -> Iterator[Tuple[Plug, NDArray]]:
    for plug in plugs:
        trailing_md, leading_md = plug.md - plug_width, plug.md + plug_width
        if not in_range(geometry, trailing_md, leading_md):
            _skip(plug, trailing_md, leading_md)
            continue
        yield plug, fill_polygon(geometry, leading_md, trailing_md)


def iter_perforation_polygons(
    geometry: GeometryResult,
    perforations: Sequence[Perforation],
    base_width: float,
    length: float,
    left: bool = True,
    right: bool = True,
) -> Iterator[Tuple[Perforation, List[NDArray]]]:
    for perforation in perforations:
        samples = perforation_samples(perforation, base_width)
        if not in_range(geometry, samples[0], samples[-1]):
            _skip(perforation, samples[0], samples[-1])
            continue
        yield perforation, perforation_polygons(
            geometry, perforation, base_width, length, left=left, right=right
        )


def iter_gun_polygons(
    geometry: GeometryResult, guns: Sequence[Gun], gun_width: float
) -> Iterator[Tuple[Gun, NDArray]]:
    for gun in guns:
        trailing_md, leading_md = gun.md - gun_width, gun.md + gun_width
        if not in_range(geometry, trailing_md, leading_md):
            _skip(gun, trailing_md, leading_md)
            continue
        yield gun, gun_polygon(geometry, gun, gun_width)
