from typing import Annotated, Literal, Optional

import numpy as np
from numpy.typing import NDArray

# joints closer than this on both axes are treated as coincident
JOINT_TOLERANCE = 0.1


def intersect(
    p1: Annotated[NDArray, Literal[2]],
    p2: Annotated[NDArray, Literal[2]],
    p3: Annotated[NDArray, Literal[2]],
    p4: Annotated[NDArray, Literal[2]],
) -> Optional[NDArray]:
    """
    Calculates the intersection point of two line segments.

    Parameters
    ----------
    p1, p2: (,2) arrays of floats
        The start and end points of the first segment.
    p3, p4: (,2) arrays of floats
        The start and end points of the second segment.

    Returns
    -------
    point: (,2) array of floats or None
        The [x, y] intersection, or None if either segment has zero length,
        the segments are parallel or the intersection of the two lines lies
        outside of either segment.

    Examples
    --------
    >>> intersect([0, 0], [2, 2], [0, 2], [2, 0])
    array([1., 1.])
    >>> intersect([0, 0], [1, 0], [0, 1], [1, 1]) is None
    True
    """
    x1, y1 = p1
    x2, y2 = p2
    x3, y3 = p3
    x4, y4 = p4

    if (x1 == x2 and y1 == y2) or (x3 == x4 and y3 == y4):
        return None

    denominator = (y4 - y3) * (x2 - x1) - (x4 - x3) * (y2 - y1)

    # parallel
    if denominator == 0:
        return None

    ua = ((x4 - x3) * (y1 - y3) - (y4 - y3) * (x1 - x3)) / denominator
    ub = ((x2 - x1) * (y1 - y3) - (y2 - y1) * (x1 - x3)) / denominator

    if ua < 0 or ua > 1 or ub < 0 or ub > 1:
        return None

    return np.array([x1 + ua * (x2 - x1), y1 + ua * (y2 - y1)])


def distance(p1, p2) -> float:
    return float(np.hypot(*(np.asarray(p2) - np.asarray(p1))))


def nearest_endpoint(point, start, end) -> NDArray:
    """
    Returns whichever of ``start`` or ``end`` is closer to ``point``. The end
    point is only returned when it is strictly closer, so a tie resolves to
    the start point.
    """
    if distance(point, end) < distance(point, start):
        return np.array(end, dtype=float)
    return np.array(start, dtype=float)


def joint_is_open(end, start, tolerance=JOINT_TOLERANCE) -> bool:
    """
    True if the end point of one segment and the start point of the next
    differ by more than ``tolerance`` along either axis.
    """
    return bool(np.any(
        np.abs(np.asarray(end) - np.asarray(start)) > tolerance
    ))


def get_normal(a2: float) -> NDArray:
    """
    The unit vector pointing from the centerline to the right borehole wall
    for a wall-normal angle ``a2`` in radians. The y axis points down (TVD).
    """
    return np.array([np.cos(a2), -np.sin(a2)])


def get_tangent(a1: float) -> NDArray:
    """
    The unit vector along the centerline for a segment inclination ``a1``
    (radians from horizontal displacement towards increasing TVD).
    """
    return np.array([np.cos(a1), np.sin(a1)])
