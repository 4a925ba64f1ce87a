import numpy as np
import pandas as pd
import pytest

from wellschematic.config import load_configuration
from wellschematic.diagram import WellboreDiagram
from wellschematic.exceptions import RowLimitError
from wellschematic.objects import MarkMode

WIDTH, HEIGHT = 300, 600

RECORDS = [
    {'layerType': 'Trajectory', 'md': md, 'tvd': md, 'diameter': 10}
    for md in (0, 100, 200, 300)
] + [
    {'layerType': 'Value', 'md': 100, 'value': 1., 'row': 'v1'},
    {'layerType': 'Value', 'md': 150, 'value': 2., 'row': 'v2'},
    {'layerType': 'Fill', 'md': 250, 'color': 'grey', 'row': 'f1'},
    {'layerType': 'Plug', 'md': 200, 'row': 'p1'},
    {'layerType': 'Perforation', 'startMD': 260, 'endMD': 270, 'row': 'x1'},
    {'layerType': 'Gun', 'md': 280, 'row': 'g1'},
]


@pytest.fixture
def diagram():
    diagram = WellboreDiagram()
    diagram.draw(RECORDS, WIDTH, HEIGHT)
    return diagram


def test_draw_order(diagram):
    assert [shape.kind for shape in diagram.drawing.shapes] == [
        'centerline', 'boreline', 'boreline', 'value', 'value', 'fill',
        'plug', 'perforation', 'perforation', 'gun'
    ]


def test_shape_colors(diagram):
    colors = {
        shape.kind: shape.color for shape in diagram.drawing.shapes
    }
    assert colors['fill'] == 'grey'
    assert colors['plug'] == 'black'
    assert colors['perforation'] == 'dimgrey'
    assert colors['gun'] == 'purple'
    assert all(
        shape.closed for shape in diagram.drawing.shapes
        if shape.kind not in ('centerline', 'boreline')
    )


def test_only_values_and_fills_are_markable(diagram):
    polygons = diagram.drawing.polygons
    assert [polygon.kind for polygon in polygons] == ['value', 'value', 'fill']
    assert [polygon.feature.row for polygon in polygons] == ['v1', 'v2', 'f1']


def test_perforations_grow_extents(diagram):
    extents = diagram.drawing.extents
    # perforation length past the wall
    assert np.isclose(extents.max_x, 35)
    assert np.isclose(extents.min_x, -35)
    assert np.isclose(extents.max_y, 300)


def test_mapped_shapes_fit_the_surface(diagram):
    drawing = diagram.drawing
    for shape in drawing.shapes:
        points = drawing.mapped(shape)
        assert np.all(points >= -1e-9)
        assert np.all(points[:, 0] <= WIDTH + 1e-9)
        assert np.all(points[:, 1] <= HEIGHT + 1e-9)


def test_ticks(diagram):
    ticks = diagram.drawing.ticks
    assert ticks[0] == 0
    assert ticks[-1] <= 300
    assert np.allclose(np.diff(ticks), ticks[1] - ticks[0])

    diagram = WellboreDiagram(
        {'wellbore': {'scales': {'tvd_scale_display': False}}}
    )
    assert diagram.draw(RECORDS, WIDTH, HEIGHT).ticks == ()


def test_perforation_toggle():
    diagram = WellboreDiagram(load_configuration(
        wellbore={'perforation_left': False}
    ))
    drawing = diagram.draw(RECORDS, WIDTH, HEIGHT)
    shapes = [shape for shape in drawing.shapes if shape.kind == 'perforation']
    assert len(shapes) == 1
    assert np.all(shapes[0].points[:, 0] > 0)


@pytest.mark.parametrize("records", [
    [],
    RECORDS[:1],
    [record for record in RECORDS if record['layerType'] != 'Trajectory'],
])
def test_fewer_than_two_waypoints_draws_nothing(records):
    diagram = WellboreDiagram()
    drawing = diagram.draw(records, WIDTH, HEIGHT)
    assert drawing.is_empty
    assert drawing.polygons == ()
    assert diagram.rectangle_selection(
        {'x': 0, 'y': 0, 'width': WIDTH, 'height': HEIGHT}
    ) == []


def test_row_limit():
    diagram = WellboreDiagram({'row_limit': len(RECORDS) - 1})
    with pytest.raises(RowLimitError):
        diagram.draw(RECORDS, WIDTH, HEIGHT)


def test_dataframe():
    df = pd.DataFrame(RECORDS).drop(columns='row')
    drawing = WellboreDiagram().draw(df, WIDTH, HEIGHT)
    assert [polygon.feature.row for polygon in drawing.polygons] == [4, 5, 6]


def test_rectangle_selection(diagram):
    rect = {'x': 0, 'y': 0, 'width': WIDTH, 'height': HEIGHT}
    assert diagram.rectangle_selection(rect) == ['v1', 'v2', 'f1']

    # the top of the hole only holds vertices of the fill
    rect = {'x': 0, 'y': 0, 'width': WIDTH, 'height': 100}
    assert diagram.rectangle_selection(rect) == ['f1']

    rect = {'x': 0, 'y': 0, 'width': WIDTH, 'height': 100}
    offset = {'left': 0, 'top': 200}
    assert diagram.rectangle_selection(rect, offset) == []


def test_mark_rectangle(diagram):
    calls = []

    def mark(row, mode):
        calls.append((row, mode))

    rect = {'x': 0, 'y': 0, 'width': WIDTH, 'height': 100}
    assert diagram.mark_rectangle(rect, mark=mark) == ['f1']
    assert calls == [('f1', 'Replace')]

    calls.clear()
    diagram.mark_rectangle(rect, mark=mark, toggle=True)
    assert calls == [('f1', MarkMode.TOGGLE)]

    # an empty selection clears the marking
    calls.clear()
    rect = {'x': WIDTH + 10, 'y': 0, 'width': 10, 'height': 10}
    assert diagram.mark_rectangle(rect, mark=mark) == []
    assert calls == [
        ('v1', 'Subtract'), ('v2', 'Subtract'), ('f1', 'Subtract')
    ]
