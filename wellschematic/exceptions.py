class WellschematicError(Exception):
    """Base class for errors raised by ``wellschematic``."""


class MDOutOfRangeError(WellschematicError, ValueError):
    """
    Raised when a measured depth is queried outside of the range spanned by
    the trajectory waypoints. Callers are expected to filter features
    against ``[stations[0].md, stations[-1].md]`` before building polygons.
    """
    def __init__(self, md, md_min, md_max):
        self.md = md
        self.md_min = md_min
        self.md_max = md_max
        super().__init__(
            f"md {md} is outside of the trajectory range [{md_min}, {md_max}]"
        )


class DuplicateMDError(WellschematicError, ValueError):
    """
    Raised when consecutive waypoints share the same measured depth, for
    which the inclination of the span is undefined.
    """
    def __init__(self, md):
        self.md = md
        super().__init__(
            f"duplicate waypoint md {md}, coalesce waypoints before computing "
            "the geometry"
        )


class RowLimitError(WellschematicError):
    def __init__(self, row_count, row_limit):
        self.row_count = row_count
        self.row_limit = row_limit
        super().__init__(
            f"Cannot render - too many rows (rowCount: {row_count}, "
            f"limit: {row_limit}). Filter to a smaller subset of values or "
            "increase the row limit in the configuration."
        )
