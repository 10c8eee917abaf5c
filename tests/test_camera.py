"""Tests for the camera and the parallel render loop."""

import math
import threading

import pytest

from conftest import assert_tuple_approx
from raytrace import shapes
from raytrace.camera import Camera, render, render_row
from raytrace.errors import CameraError, ConfigurationError
from raytrace.lights import AreaLight
from raytrace.materials import Material, glass
from raytrace.patterns import checker
from raytrace.shapes import cube, group, plane, sphere
from raytrace.transforms import rotation_y, scaling, translation, view_transform
from raytrace.tuples import WHITE, color, point, vector
from raytrace.world import World


def _default_camera(hsize=11, vsize=11):
    return Camera(hsize, vsize, math.pi / 2,
                  view_transform(point(0, 0, -5), point(0, 0, 0), vector(0, 1, 0)))


def _busy_world():
    """A small scene touching reflection, refraction, patterns and soft shadows."""
    floor = plane(material=Material(pattern=checker(WHITE, color(0.1, 0.1, 0.1)), reflective=0.3))
    ball = sphere(translation(-0.6, 1, 0.5), glass(reflective=0.2))
    box = cube(translation(1.2, 0.5, 1) @ scaling(0.5, 0.5, 0.5),
               Material(pattern=checker(color(1, 0, 0), color(0, 0, 1)), specular=0.3))
    light = AreaLight(point(-3, 4, -3), vector(1, 0, 0), 2, vector(0, 1, 0), 2, WHITE,
                      jitter=(0.2, 0.8, 0.5, 0.35))
    return World([floor, ball, box], [light])


class TestCamera:
    def test_construction(self):
        c = Camera(160, 120, math.pi / 2)
        assert (c.hsize, c.vsize, c.field_of_view) == (160, 120, math.pi / 2)
        assert c.transform.is_identity

    def test_pixel_size_horizontal_and_vertical(self):
        assert Camera(200, 125, math.pi / 2).pixel_size == pytest.approx(0.01)
        assert Camera(125, 200, math.pi / 2).pixel_size == pytest.approx(0.01)

    def test_ray_through_center(self):
        r = Camera(201, 101, math.pi / 2).ray_for_pixel(100, 50)
        assert_tuple_approx(r.origin, point(0, 0, 0))
        assert_tuple_approx(r.direction, vector(0, 0, -1))

    def test_ray_through_corner(self):
        r = Camera(201, 101, math.pi / 2).ray_for_pixel(0, 0)
        assert_tuple_approx(r.direction, vector(0.66519, 0.33259, -0.66851))

    def test_ray_when_camera_is_transformed(self):
        c = Camera(201, 101, math.pi / 2, rotation_y(math.pi / 4) @ translation(0, -2, 5))
        r = c.ray_for_pixel(100, 50)
        h = math.sqrt(2) / 2
        assert_tuple_approx(r.origin, point(0, 2, -5))
        assert_tuple_approx(r.direction, vector(h, 0, -h))

    @pytest.mark.parametrize("hsize,vsize,fov", [
        (0, 10, 1.0),
        (10, -1, 1.0),
        (10, 10, 0.0),
        (10, 10, math.pi),
        (10, 10, 2 * math.pi),
        (10.5, 10, 1.0),
    ])
    def test_invalid_camera(self, hsize, vsize, fov):
        with pytest.raises(CameraError):
            Camera(hsize, vsize, fov)


class TestRender:
    def test_default_world_center_pixel(self, default_world):
        canvas = render(default_world, _default_camera(), workers=2)
        assert_tuple_approx(canvas.pixel_at(5, 5), (0.38066, 0.47583, 0.2855))

    def test_render_row_matches_canvas(self, default_world):
        cam = _default_camera()
        canvas = render(default_world, cam, workers=3)
        assert canvas.rows[4] == render_row(default_world, cam, 4)

    def test_identical_for_any_worker_count(self):
        world = _busy_world()
        cam = Camera(24, 16, math.pi / 3,
                     view_transform(point(0, 2, -6), point(0, 0.5, 0), vector(0, 1, 0)))
        reference = render(world, cam, workers=1)
        for workers in (4, 16):
            assert render(world, cam, workers=workers) == reference

    def test_progress_called_once_per_row(self, default_world):
        calls = []
        render(default_world, _default_camera(7, 5), workers=4,
               progress=lambda done, total: calls.append((done, total)))
        assert calls == [(n, 5) for n in range(1, 6)]

    def test_group_bounds_are_filled_before_workers_start(self, monkeypatch):
        inner = group([sphere(translation(-1, 0, 0)), sphere(translation(1, 0, 0))])
        outer = group([inner, cube(translation(0, 3, 0))])
        world = World([outer, plane()], [AreaLight(point(-3, 4, -3), vector(1, 0, 0), 2,
                                                   vector(0, 1, 0), 2, WHITE)])
        computed_on = []
        real_group_bounds = shapes._group_bounds

        def recording_group_bounds(g):
            computed_on.append(threading.current_thread())
            return real_group_bounds(g)

        monkeypatch.setattr(shapes, "_group_bounds", recording_group_bounds)
        render(world, _default_camera(6, 4), workers=4)
        assert len(computed_on) == 2
        assert all(t is threading.main_thread() for t in computed_on)
        assert inner._bounds is not None and outer._bounds is not None

    def test_max_depth_zero_drops_reflections(self):
        world = _busy_world()
        cam = Camera(12, 8, math.pi / 3,
                     view_transform(point(0, 2, -6), point(0, 0.5, 0), vector(0, 1, 0)))
        assert render(world, cam, workers=2, max_depth=0) != render(world, cam, workers=2)

    @pytest.mark.slow
    def test_process_backend_matches_threads(self):
        world = _busy_world()
        cam = Camera(10, 6, math.pi / 3,
                     view_transform(point(0, 2, -6), point(0, 0.5, 0), vector(0, 1, 0)))
        threads = render(world, cam, workers=2, backend="thread")
        processes = render(world, cam, workers=2, backend="process")
        assert processes == threads

    @pytest.mark.parametrize("kwargs", [
        {"workers": 0},
        {"workers": -3},
        {"max_depth": -1},
        {"backend": "gpu"},
    ])
    def test_invalid_render_settings(self, default_world, kwargs):
        with pytest.raises(ConfigurationError):
            render(default_world, _default_camera(3, 3), **kwargs)
