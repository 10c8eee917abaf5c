"""Tests for primitive intersection, normals and group transforms."""

import math

import pytest

from conftest import assert_tuple_approx
from raytrace import shapes
from raytrace.errors import GeometryError
from raytrace.intersections import Intersection
from raytrace.rays import Ray
from raytrace.shapes import (
    ShapeKind, add_child, cone, cube, cylinder, group, intersect, local_intersect, normal_at,
    normal_to_world, plane, remove_child, smooth_triangle, sphere, triangle, world_to_object,
)
from raytrace.transforms import chain, rotation_y, rotation_z, scaling, translation
from raytrace.tuples import norm, point, vector


def ts(xs):
    return [i.t for i in xs]


class TestSphere:
    def test_ray_through_center(self):
        s = sphere()
        xs = intersect(s, Ray(point(0, 0, -5), vector(0, 0, 1)))
        assert ts(xs) == pytest.approx([4.0, 6.0])
        assert all(i.object is s for i in xs)

    def test_tangent_ray_gives_doubled_root(self):
        xs = intersect(sphere(), Ray(point(0, 1, -5), vector(0, 0, 1)))
        assert ts(xs) == pytest.approx([5.0, 5.0])

    def test_miss(self):
        assert intersect(sphere(), Ray(point(0, 2, -5), vector(0, 0, 1))) == []

    def test_zero_direction_has_no_roots(self):
        assert intersect(sphere(), Ray(point(0, 0, 0), vector(0, 0, 0))) == []

    def test_origin_inside_gives_one_negative_one_positive(self):
        xs = intersect(sphere(), Ray(point(0, 0, 0), vector(0, 0, 1)))
        assert ts(xs) == pytest.approx([-1.0, 1.0])

    def test_sphere_behind_ray(self):
        xs = intersect(sphere(), Ray(point(0, 0, 5), vector(0, 0, 1)))
        assert ts(xs) == pytest.approx([-6.0, -4.0])

    def test_scaled_and_translated(self):
        r = Ray(point(0, 0, -5), vector(0, 0, 1))
        assert ts(intersect(sphere(scaling(2, 2, 2)), r)) == pytest.approx([3.0, 7.0])
        assert intersect(sphere(translation(5, 0, 0)), r) == []

    def test_local_space_matches_world_space(self):
        t = chain(scaling(1, 2, 3), rotation_y(0.3), translation(0.5, -0.2, 1))
        s = sphere(t)
        r = Ray(point(0.3, 0.1, -6), norm(vector(0.05, 0.02, 1)))
        world_ts = ts(intersect(s, r))
        assert len(world_ts) == 2
        local_ts = ts(local_intersect(s, r.transform(t.inverse)))
        assert world_ts == pytest.approx(sorted(local_ts))
        # Every world hit lies on the unit sphere once taken back to local space
        for t_hit in world_ts:
            local = t.apply_inverse(r.position(t_hit))
            assert local[0] ** 2 + local[1] ** 2 + local[2] ** 2 == pytest.approx(1.0, abs=1e-6)

    def test_normals(self):
        s = sphere()
        k = math.sqrt(3) / 3
        assert_tuple_approx(normal_at(s, point(1, 0, 0)), vector(1, 0, 0))
        assert_tuple_approx(normal_at(s, point(k, k, k)), vector(k, k, k))

    def test_normal_on_translated_sphere(self):
        s = sphere(translation(0, 1, 0))
        n = normal_at(s, point(0, 1.70711, -0.70711))
        assert_tuple_approx(n, vector(0, 0.70711, -0.70711))

    def test_normal_on_transformed_sphere(self):
        s = sphere(scaling(1, 0.5, 1) @ rotation_z(math.pi / 5))
        h = math.sqrt(2) / 2
        assert_tuple_approx(normal_at(s, point(0, h, -h)), vector(0, 0.97014, -0.24254))

    def test_default_material(self):
        assert sphere().material.ambient == 0.1
        assert group().material is None


class TestPlane:
    def test_parallel_and_coplanar_rays_miss(self):
        p = plane()
        assert intersect(p, Ray(point(0, 10, 0), vector(0, 0, 1))) == []
        assert intersect(p, Ray(point(0, 0, 0), vector(0, 0, 1))) == []

    def test_hits_from_above_and_below(self):
        p = plane()
        assert ts(intersect(p, Ray(point(0, 1, 0), vector(0, -1, 0)))) == [1.0]
        assert ts(intersect(p, Ray(point(0, -1, 0), vector(0, 1, 0)))) == [1.0]

    def test_normal_is_constant(self):
        assert normal_at(plane(), point(10, 0, -10)) == vector(0, 1, 0)


class TestCube:
    @pytest.mark.parametrize("origin,direction,t1,t2", [
        ((5, 0.5, 0), (-1, 0, 0), 4, 6),
        ((-5, 0.5, 0), (1, 0, 0), 4, 6),
        ((0.5, 5, 0), (0, -1, 0), 4, 6),
        ((0.5, 0, -5), (0, 0, 1), 4, 6),
        ((0, 0.5, 0), (0, 0, 1), -1, 1),
    ])
    def test_hits(self, origin, direction, t1, t2):
        xs = intersect(cube(), Ray(point(*origin), vector(*direction)))
        assert ts(xs) == pytest.approx([t1, t2])

    @pytest.mark.parametrize("origin,direction", [
        ((-2, 0, 0), (0.2673, 0.5345, 0.8018)),
        ((0, -2, 0), (0.8018, 0.2673, 0.5345)),
        ((2, 0, 2), (0, 0, -1)),
        ((2, 2, 0), (-1, 0, 0)),
    ])
    def test_misses(self, origin, direction):
        assert intersect(cube(), Ray(point(*origin), vector(*direction))) == []

    def test_normals(self):
        c = cube()
        assert normal_at(c, point(1, 0.5, -0.8)) == vector(1, 0, 0)
        assert normal_at(c, point(-0.4, 0.3, -1)) == vector(0, 0, -1)
        assert normal_at(c, point(1, 1, 1)) == vector(1, 0, 0)


class TestCylinder:
    def test_misses(self):
        cyl = cylinder()
        assert intersect(cyl, Ray(point(1, 0, 0), vector(0, 1, 0))) == []
        assert intersect(cyl, Ray(point(0, 0, -5), norm(vector(1, 1, 1)))) == []

    @pytest.mark.parametrize("origin,direction,t0,t1", [
        ((1, 0, -5), (0, 0, 1), 5, 5),
        ((0, 0, -5), (0, 0, 1), 4, 6),
        ((0.5, 0, -5), (0.1, 1, 1), 6.80798, 7.08872),
    ])
    def test_hits(self, origin, direction, t0, t1):
        xs = intersect(cylinder(), Ray(point(*origin), norm(vector(*direction))))
        assert ts(xs) == pytest.approx([t0, t1], abs=1e-4)

    @pytest.mark.parametrize("origin,direction,count", [
        ((0, 1.5, 0), (0.1, 1, 0), 0),
        ((0, 3, -5), (0, 0, 1), 0),
        ((0, 0, -5), (0, 0, 1), 0),
        ((0, 2, -5), (0, 0, 1), 0),
        ((0, 1, -5), (0, 0, 1), 0),
        ((0, 1.5, -2), (0, 0, 1), 2),
    ])
    def test_truncated(self, origin, direction, count):
        cyl = cylinder(1, 2)
        assert len(intersect(cyl, Ray(point(*origin), norm(vector(*direction))))) == count

    @pytest.mark.parametrize("origin,direction", [
        ((0, 3, 0), (0, -1, 0)),
        ((0, 3, -2), (0, -1, 2)),
        ((0, 4, -2), (0, -1, 1)),
        ((0, 0, -2), (0, 1, 2)),
        ((0, -1, -2), (0, 1, 1)),
    ])
    def test_closed_caps(self, origin, direction):
        cyl = cylinder(1, 2, closed=True)
        assert len(intersect(cyl, Ray(point(*origin), norm(vector(*direction))))) == 2

    def test_normals(self):
        assert normal_at(cylinder(), point(1, 0, 0)) == vector(1, 0, 0)
        assert normal_at(cylinder(), point(0, 5, -1)) == vector(0, 0, -1)
        capped = cylinder(1, 2, closed=True)
        assert normal_at(capped, point(0.5, 1, 0)) == vector(0, -1, 0)
        assert normal_at(capped, point(0, 2, 0.5)) == vector(0, 1, 0)

    def test_min_above_max_is_rejected(self):
        with pytest.raises(GeometryError):
            cylinder(2, 1)


class TestCone:
    @pytest.mark.parametrize("origin,direction,t0,t1", [
        ((0, 0, -5), (0, 0, 1), 5, 5),
        ((0, 0, -5), (1, 1, 1), 8.66025, 8.66025),
        ((1, 1, -5), (-0.5, -1, 1), 4.55006, 49.44994),
    ])
    def test_hits(self, origin, direction, t0, t1):
        xs = intersect(cone(), Ray(point(*origin), norm(vector(*direction))))
        assert ts(xs) == pytest.approx([t0, t1], abs=1e-4)

    def test_ray_parallel_to_one_half(self):
        xs = intersect(cone(), Ray(point(0, 0, -1), norm(vector(0, 1, 1))))
        assert ts(xs) == pytest.approx([0.35355], abs=1e-4)

    @pytest.mark.parametrize("origin,direction,count", [
        ((0, 0, -5), (0, 1, 0), 0),
        ((0, 0, -0.25), (0, 1, 1), 2),
        ((0, 0, -0.25), (0, 1, 0), 4),
    ])
    def test_caps(self, origin, direction, count):
        c = cone(-0.5, 0.5, closed=True)
        assert len(intersect(c, Ray(point(*origin), norm(vector(*direction))))) == count

    def test_local_normals(self):
        from raytrace.primitives import cone_normal
        c = cone()
        assert cone_normal(c, point(0, 0, 0)) == vector(0, 0, 0)
        assert_tuple_approx(cone_normal(c, point(1, 1, 1)), vector(1, -math.sqrt(2), 1))
        assert_tuple_approx(cone_normal(c, point(-1, -1, 0)), vector(-1, 1, 0))


class TestTriangle:
    def make(self):
        return triangle(point(0, 1, 0), point(-1, 0, 0), point(1, 0, 0))

    def test_precomputed_edges_and_normal(self):
        t = self.make()
        assert t.e1 == vector(-1, -1, 0)
        assert t.e2 == vector(1, -1, 0)
        assert t.normal == vector(0, 0, -1)
        assert normal_at(t, point(0, 0.5, 0)) == vector(0, 0, -1)

    @pytest.mark.parametrize("origin,direction", [
        ((0, -1, -2), (0, 1, 0)),   # parallel to the triangle
        ((1, 1, -2), (0, 0, 1)),    # past the p1-p3 edge
        ((-1, 1, -2), (0, 0, 1)),   # past the p1-p2 edge
        ((0, -1, -2), (0, 0, 1)),   # past the p2-p3 edge
    ])
    def test_misses(self, origin, direction):
        assert intersect(self.make(), Ray(point(*origin), vector(*direction))) == []

    def test_hit_records_barycentrics(self):
        xs = intersect(self.make(), Ray(point(0, 0.5, -2), vector(0, 0, 1)))
        assert ts(xs) == pytest.approx([2.0])
        assert xs[0].u is not None and xs[0].v is not None

    def test_collinear_corners_are_rejected(self):
        with pytest.raises(GeometryError):
            triangle(point(0, 0, 0), point(1, 1, 1), point(2, 2, 2))


class TestSmoothTriangle:
    def make(self):
        return smooth_triangle(
            point(0, 1, 0), point(-1, 0, 0), point(1, 0, 0),
            vector(0, 1, 0), vector(-1, 0, 0), vector(1, 0, 0),
        )

    def test_intersection_stores_u_v(self):
        xs = intersect(self.make(), Ray(point(-0.2, 0.3, -2), vector(0, 0, 1)))
        assert xs[0].u == pytest.approx(0.45)
        assert xs[0].v == pytest.approx(0.25)

    def test_normal_is_interpolated(self):
        tri = self.make()
        i = Intersection(1, tri, 0.45, 0.25)
        assert_tuple_approx(normal_at(tri, point(0, 0, 0), i), vector(-0.5547, 0.83205, 0))


class TestGroups:
    def test_empty_group(self):
        assert intersect(group(), Ray(point(0, 0, 0), vector(0, 0, 1))) == []

    def test_children_keep_parent_link(self):
        s = sphere()
        g = group([s])
        assert s.parent is g and g.children == [s]

    def test_a_shape_belongs_to_one_group(self):
        s = sphere()
        group([s])
        with pytest.raises(ValueError):
            group([s])

    def test_remove_child_detaches(self):
        s = sphere()
        g = group([s])
        remove_child(g, s)
        assert s.parent is None and g.children == []

    def test_intersections_across_children(self):
        s1 = sphere()
        s2 = sphere(translation(0, 0, -3))
        s3 = sphere(translation(5, 0, 0))
        g = group([s1, s2, s3])
        xs = intersect(g, Ray(point(0, 0, -5), vector(0, 0, 1)))
        assert [i.object for i in xs] == [s2, s2, s1, s1]

    def test_group_transform_applies_to_children(self):
        g = group([sphere(translation(5, 0, 0))], transform=scaling(2, 2, 2))
        assert len(intersect(g, Ray(point(10, 0, -10), vector(0, 0, 1)))) == 2

    def test_group_has_no_normal(self):
        with pytest.raises(TypeError):
            normal_at(group(), point(0, 0, 0))

    def _nested(self):
        s = sphere(translation(5, 0, 0))
        g2 = group([s], transform=scaling(2, 2, 2))
        group([g2], transform=rotation_y(math.pi / 2))
        return s

    def test_world_to_object_walks_parents(self):
        s = self._nested()
        assert_tuple_approx(world_to_object(s, point(-2, 0, -10)), point(0, 0, -1))

    def test_normal_to_world_walks_parents(self):
        s = self._nested()
        k = math.sqrt(3) / 3
        assert_tuple_approx(normal_to_world(s, vector(k, k, k)), vector(0.2857, 0.4286, -0.8571))

    def test_normal_on_child(self):
        s = self._nested()
        n = normal_at(s, point(1.7321, 1.1547, -5.5774))
        assert_tuple_approx(n, vector(0.2857, 0.4286, -0.8571))

    def test_box_miss_skips_children(self, monkeypatch):
        calls = []
        original = shapes._LOCAL_INTERSECT[ShapeKind.SPHERE]

        def spy(shape, ray):
            calls.append(shape)
            return original(shape, ray)

        monkeypatch.setitem(shapes._LOCAL_INTERSECT, ShapeKind.SPHERE, spy)
        g = group([sphere()])
        assert intersect(g, Ray(point(0, 0, -5), vector(0, 1, 0))) == []
        assert calls == []
        assert len(intersect(g, Ray(point(0, 0, -5), vector(0, 0, 1)))) == 2
        assert len(calls) == 1

    def test_add_child_after_construction(self):
        g = group()
        s = sphere(translation(0, 0, 10))
        assert intersect(g, Ray(point(0, 0, 0), vector(0, 0, 1))) == []
        add_child(g, s)
        assert ts(intersect(g, Ray(point(0, 0, 0), vector(0, 0, 1)))) == pytest.approx([9.0, 11.0])
