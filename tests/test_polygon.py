import numpy as np
import pytest

from wellschematic import polygon
from wellschematic.exceptions import MDOutOfRangeError
from wellschematic.geometry import compute_geometry
from wellschematic.objects import (
    Gun,
    MDFill,
    MDValue,
    Perforation,
    Plug,
    Waypoint,
)
from wellschematic.polygon import (
    VALUE_OVERLAP,
    fill_polygon,
    gun_polygon,
    in_range,
    iter_fill_polygons,
    iter_gun_polygons,
    iter_perforation_polygons,
    iter_plug_polygons,
    iter_value_polygons,
    match_waypoint,
    perforation_polygons,
    perforation_samples,
    value_interval,
    wall_point,
)


def _vertical(n=4, step=100., diameter=10.):
    return compute_geometry([
        Waypoint(md=i * step, tvd=i * step, diameter=diameter)
        for i in range(n)
    ])


@pytest.fixture
def geometry():
    return _vertical()


@pytest.mark.parametrize("md, expected", [
    (0, 0),
    (50, 0),
    (99.9, 0),
    (100, 1),
    (150, 1),
    (200, 2),
    (299, 2),
    (300, 2),  # the last station owns no span
])
def test_match_waypoint(geometry, md, expected):
    assert match_waypoint(geometry, md) == expected


@pytest.mark.parametrize("md", [-0.1, 300.1, np.nan])
def test_match_waypoint_out_of_range(geometry, md):
    with pytest.raises(MDOutOfRangeError):
        match_waypoint(geometry, md)


def test_out_of_range_is_a_value_error(geometry):
    with pytest.raises(ValueError):
        match_waypoint(geometry, 1000)


def test_in_range(geometry):
    assert in_range(geometry, 0, 300)
    assert not in_range(geometry, -1, 100)
    assert not in_range(geometry, 100, 301)
    assert not in_range(_vertical(n=1), 0, 0)


def test_scenario_c_fill_at_waypoint_md(geometry, monkeypatch):
    def _fallback(*args):
        raise AssertionError("nearest endpoint fallback taken")

    monkeypatch.setattr(polygon, 'nearest_endpoint', _fallback)

    assert match_waypoint(geometry, 100) == 1

    points = fill_polygon(geometry, 100, 0)
    assert np.allclose(points[0], geometry.outline.right[1].start)
    assert np.allclose(points[1], geometry.outline.left[1].start)


def test_wall_point_falls_back_to_nearest_endpoint(geometry):
    # a ray too short to reach the wall
    point = wall_point(geometry, 1, 150, 'right', reach=1.)
    assert np.allclose(point, geometry.outline.right[1].start)


def test_fill_polygon_single_span(geometry):
    points = fill_polygon(geometry, 80, 20)
    assert np.allclose(
        points,
        [[5, 80], [-5, 80], [-5, 20], [5, 20], [5, 80]]
    )


def test_fill_polygon_walks_the_walls(geometry):
    points = fill_polygon(geometry, 250, 0)

    # leading right, leading left, 4 left wall points, trailing left,
    # trailing right, 4 right wall points, leading right
    assert len(points) == 13
    assert np.allclose(points[0], points[-1])
    assert np.allclose(points[1:7, 0], -5)
    assert np.allclose(points[7:, 0], 5)
    assert np.isclose(points[0, 0], 5)
    assert np.allclose(
        points[:, 1],
        [250, 250, 200, 200, 100, 100, 0, 0, 100, 100, 200, 200, 250]
    )


def test_value_interval():
    values = [MDValue(md=md, value=1.) for md in (50, 100, 150)]
    assert value_interval(values, 0) == (50 - VALUE_OVERLAP, 75 + VALUE_OVERLAP)
    assert value_interval(values, 1) == (70, 130)
    assert value_interval(values, 2) == (125 - VALUE_OVERLAP, 155)


def test_value_polygons(geometry):
    values = [
        MDValue(md=md, value=v, row=i)
        for i, (md, v) in enumerate(((150, 2.), (100, 1.), (200, 3.)))
    ]
    results = list(iter_value_polygons(geometry, values))

    # sorted by md
    assert [value.md for value, _ in results] == [100, 150, 200]

    value, points = results[1]
    assert value.row == 0
    assert np.isclose(points[:, 1].min(), 120)
    assert np.isclose(points[:, 1].max(), 180)


def test_value_polygons_skip_out_of_range(geometry):
    values = [MDValue(md=0, value=1.), MDValue(md=100, value=2.)]
    results = list(iter_value_polygons(geometry, values))
    assert [value.md for value, _ in results] == [100]


def test_fill_polygons(geometry):
    fills = [MDFill(md=150), MDFill(md=301)]
    results = list(iter_fill_polygons(geometry, fills))
    assert len(results) == 1

    fill, points = results[0]
    assert fill.md == 150
    assert np.isclose(points[:, 1].min(), 0)
    assert np.isclose(points[:, 1].max(), 150)


def test_fill_polygons_empty_geometry():
    assert list(iter_fill_polygons(_vertical(n=1), [MDFill(md=0)])) == []


def test_plug_polygons(geometry):
    plugs = [Plug(md=5), Plug(md=100), Plug(md=295)]
    results = list(iter_plug_polygons(geometry, plugs, plug_width=10.))
    assert len(results) == 1

    plug, points = results[0]
    assert plug.md == 100
    assert np.isclose(points[:, 1].min(), 90)
    assert np.isclose(points[:, 1].max(), 110)
    assert np.allclose(points[0], points[-1])


def test_scenario_d_one_tooth(geometry):
    perforation = Perforation(start_md=100, end_md=105)
    assert np.allclose(
        perforation_samples(perforation, base_width=5.), [100, 102.5, 105]
    )

    rings = perforation_polygons(
        geometry, perforation, base_width=5., length=30.
    )
    assert len(rings) == 2
    for ring, sign in zip(rings, (1, -1)):
        # wall, apex, wall and back to the start
        assert len(ring) == 4
        assert np.allclose(ring[0], ring[-1])
        assert np.allclose(ring[[0, 2], 0], sign * 5)
        assert np.allclose(ring[1], [sign * 35, 102.5])


@pytest.mark.parametrize("left, right, expected", [
    (True, True, [1, -1]),
    (True, False, [-1]),
    (False, True, [1]),
    (False, False, []),
])
def test_perforation_sides(geometry, left, right, expected):
    rings = perforation_polygons(
        geometry, Perforation(start_md=100, end_md=120), base_width=5.,
        length=30., left=left, right=right
    )
    assert [np.sign(ring[1, 0]) for ring in rings] == expected


def test_perforation_teeth(geometry):
    perforation = Perforation(start_md=100, end_md=112)
    samples = perforation_samples(perforation, base_width=5.)
    # ceil(12 / 5) teeth
    assert len(samples) == 7
    assert samples[0] == 100 and samples[-1] == 112

    ring = perforation_polygons(
        geometry, perforation, base_width=5., length=30., left=False
    )[0]
    assert np.allclose(ring[1:-1:2, 0], 35)
    assert np.allclose(ring[0::2, 0], 5)


def test_point_perforation(geometry):
    perforation = Perforation(start_md=150, end_md=150)
    assert perforation.is_point
    assert np.allclose(
        perforation_samples(perforation, base_width=5.), [145, 150, 155]
    )


def test_perforation_polygons_skip_out_of_range(geometry):
    perforations = [
        Perforation(start_md=290, end_md=310),
        Perforation(start_md=0, end_md=0),
        Perforation(start_md=10, end_md=20),
    ]
    results = list(iter_perforation_polygons(
        geometry, perforations, base_width=5., length=30.
    ))
    assert len(results) == 1
    assert results[0][0].start_md == 10


def test_gun_polygon(geometry):
    points = gun_polygon(geometry, Gun(md=150), gun_width=5.)
    assert np.allclose(
        points,
        [[0, 145], [5, 150], [0, 155], [-5, 150], [0, 145]]
    )


def test_gun_polygons_skip_out_of_range(geometry):
    guns = [Gun(md=2), Gun(md=150)]
    results = list(iter_gun_polygons(geometry, guns, gun_width=5.))
    assert [gun.md for gun, _ in results] == [150]
