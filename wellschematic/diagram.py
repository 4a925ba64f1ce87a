import logging
from typing import Callable, List, NamedTuple, Optional, Tuple

import pandas as pd
from numpy.typing import NDArray

from .classify import check_row_limit, classify, records_from_dataframe
from .config import DiagramConfiguration, load_configuration
from .geometry import Extents, compute_geometry
from .mapper import CoordinateMapper, hit_test, tvd_ticks
from .objects import Feature, MarkMode
from .polygon import (
    PolygonRecord,
    iter_fill_polygons,
    iter_gun_polygons,
    iter_perforation_polygons,
    iter_plug_polygons,
    iter_value_polygons,
)

logger = logging.getLogger(__name__)


class Shape(NamedTuple):
    """
    A primitive emitted to the rendering surface, in diagram-plane
    coordinates.

    ``kind`` is one of ``'centerline'``, ``'boreline'``, ``'value'``,
    ``'fill'``, ``'plug'``, ``'perforation'`` or ``'gun'``.
    """
    kind: str
    points: NDArray
    feature: Optional[Feature] = None
    closed: bool = False
    color: Optional[str] = None


class Drawing(NamedTuple):
    shapes: Tuple[Shape, ...] = ()
    polygons: Tuple[PolygonRecord, ...] = ()
    extents: Extents = Extents()
    mapper: Optional[CoordinateMapper] = None
    ticks: Tuple[float, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.shapes

    def mapped(self, shape: Shape) -> NDArray:
        """Returns the points of a shape on the output surface."""
        assert self.mapper is not None, "Drawing is empty"
        return self.mapper.map_points(shape.points)


class WellboreDiagram:
    """
    Draws a wellbore schematic from a flat list of records and answers
    selection queries against the last draw.

    Parameters
    ----------
    configuration: DiagramConfiguration or dict (default: None)
        Defaults to ``wellschematic.config.load_configuration()``. A dict is
        treated as overrides of the defaults.

    Examples
    --------
    >>> diagram = WellboreDiagram()
    >>> drawing = diagram.draw([
    ...     {'layerType': 'Trajectory', 'md': 0, 'tvd': 0, 'diameter': 10},
    ...     {'layerType': 'Trajectory', 'md': 100, 'tvd': 100, 'diameter': 10},
    ...     {'layerType': 'Fill', 'md': 50, 'color': 'blue', 'row': 7},
    ... ], width=400, height=400)
    >>> [shape.kind for shape in drawing.shapes]
    ['centerline', 'boreline', 'boreline', 'fill']
    """
    def __init__(self, configuration=None):
        if configuration is None:
            configuration = load_configuration()
        elif isinstance(configuration, dict):
            configuration = load_configuration(**configuration)

        assert isinstance(configuration, DiagramConfiguration), (
            "configuration must be a DiagramConfiguration or a dict"
        )

        self.configuration = configuration
        self.drawing = Drawing()

    def draw(self, records, width: float, height: float) -> Drawing:
        """
        Classifies the records, computes the trajectory geometry, builds
        the feature polygons and maps them onto a ``width`` by ``height``
        surface.

        Parameters
        ----------
        records: list of dicts or pd.DataFrame
            See ``wellschematic.classify.classify``.
        width, height: float
            The size of the output surface.

        Returns
        -------
        drawing: Drawing
            Empty if there are fewer than two waypoints. The drawing is
            retained for selection queries until the next draw.

        Raises
        ------
        RowLimitError
            If there are more records than the configured row limit.
        """
        if isinstance(records, pd.DataFrame):
            records = records_from_dataframe(records)

        check_row_limit(records, self.configuration.row_limit)

        features = classify(records)
        geometry = compute_geometry(features.waypoints)

        if geometry.is_empty:
            self.drawing = Drawing()
            return self.drawing

        wellbore = self.configuration.wellbore
        shapes: List[Shape] = [
            Shape('centerline', geometry.centerline()),
            Shape('boreline', geometry.wall_polyline('left')),
            Shape('boreline', geometry.wall_polyline('right')),
        ]
        polygons: List[PolygonRecord] = []

        for value, points in iter_value_polygons(geometry, features.values):
            shapes.append(Shape('value', points, value, True, value.color))
            polygons.append(PolygonRecord(points, value, 'value'))

        for fill, points in iter_fill_polygons(geometry, features.fills):
            shapes.append(Shape('fill', points, fill, True, fill.color))
            polygons.append(PolygonRecord(points, fill, 'fill'))

        for plug, points in iter_plug_polygons(
            geometry, features.plugs, wellbore.plug_width
        ):
            shapes.append(
                Shape('plug', points, plug, True, wellbore.plug_color)
            )

        extents = geometry.extents
        for perforation, rings in iter_perforation_polygons(
            geometry,
            features.perforations,
            wellbore.perforation_base_width,
            wellbore.perforation_length,
            left=wellbore.perforation_left,
            right=wellbore.perforation_right,
        ):
            for points in rings:
                shapes.append(Shape(
                    'perforation', points, perforation, True,
                    wellbore.perforation_color
                ))
                extents = extents.union(Extents.from_points(points))

        for gun, points in iter_gun_polygons(
            geometry, features.guns, wellbore.gun_width
        ):
            shapes.append(Shape('gun', points, gun, True, wellbore.gun_color))

        mapper = CoordinateMapper(
            extents, width, height, zoom_range=wellbore.zoom_range
        )

        ticks = ()
        if wellbore.scales.tvd_scale_display:
            ticks = tuple(tvd_ticks(
                extents.min_y, extents.max_y, extents.height * mapper.factor
            ).tolist())

        self.drawing = Drawing(
            tuple(shapes), tuple(polygons), extents, mapper, ticks
        )

        logger.debug(
            "Drew %d shape(s) with %d markable polygon(s)",
            len(shapes), len(polygons)
        )

        return self.drawing

    def rectangle_selection(self, rect, offset=None) -> list:
        """
        Returns the rows of the markable polygons of the last draw with a
        vertex inside ``rect``, see ``wellschematic.mapper.hit_test``.
        """
        if self.drawing.mapper is None:
            return []
        return hit_test(self.drawing.polygons, self.drawing.mapper, rect, offset)

    def mark_rectangle(
        self,
        rect,
        offset=None,
        mark: Callable = None,
        toggle: bool = False,
    ) -> list:
        """
        Marks the rows selected by a rectangle through the host's ``mark``
        callable, which is called as ``mark(row, mode)``.

        An empty selection clears the marking of every markable row of the
        last draw. Otherwise each selected row is marked with ``'Toggle'``
        if ``toggle`` (e.g. with the ctrl key held) or ``'Replace'``.

        Returns
        -------
        rows: list
            The selected rows.
        """
        assert callable(mark), "mark must be callable"
        rows = self.rectangle_selection(rect, offset)

        if not rows:
            for polygon in self.drawing.polygons:
                mark(polygon.feature.row, MarkMode.SUBTRACT)
            return rows

        mode = MarkMode.TOGGLE if toggle else MarkMode.REPLACE
        for row in rows:
            mark(row, mode)

        return rows
