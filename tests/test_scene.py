import math

import pytest

from shadowforge.scene import MIN_ELEVATION, LightModel, SceneTransform


def test_k_decreases_with_elevation():
    ks = [LightModel(elevation=e).k for e in range(int(MIN_ELEVATION), 90)]
    assert all(math.isfinite(k) for k in ks)
    assert all(a > b for a, b in zip(ks, ks[1:]))


def test_k_vanishes_at_zenith():
    assert LightModel(elevation=90.0).k == pytest.approx(0.0, abs=1e-9)


@pytest.mark.parametrize("elevation", [-30.0, 0.0, 2.0, MIN_ELEVATION])
def test_elevation_below_floor_is_clamped(elevation):
    light = LightModel(elevation=elevation)
    assert light.elevation_clamped == MIN_ELEVATION
    assert light.k == pytest.approx(1.0 / math.tan(math.radians(MIN_ELEVATION)))


@pytest.mark.parametrize("angle", range(0, 360, 15))
def test_shear_magnitude_is_k(angle):
    light = LightModel(angle=angle, elevation=35.0)
    sx, sy = light.shear
    assert sx * sx + sy * sy == pytest.approx(light.k ** 2)


def test_reference_scene_values():
    light = LightModel(angle=120.0, elevation=60.0)
    assert light.k == pytest.approx(0.577, abs=1e-3)
    assert light.shadow_length(200) == pytest.approx(115.47, abs=1e-2)
    sx, sy = light.shear
    assert sx == pytest.approx(0.289, abs=1e-3)
    assert sy == pytest.approx(-0.5, abs=1e-3)

    a, b, c, d, e, f = light.projection_matrix((0.0, 0.0))
    assert (a, d) == (1.0, 0.0)
    assert b == pytest.approx(-0.5 * 0.2887, abs=1e-3)
    assert e == pytest.approx(0.25, abs=1e-3)
    assert c == pytest.approx(0.0) and f == pytest.approx(0.0)


def test_projection_matrix_keeps_pivot_fixed():
    light = LightModel(angle=33.0, elevation=40.0)
    a, b, c, d, e, f = light.projection_matrix((80.0, 120.0))
    assert a * 80.0 + b * 120.0 + c == pytest.approx(80.0)
    assert d * 80.0 + e * 120.0 + f == pytest.approx(120.0)


def test_shadow_falls_away_from_light():
    light = LightModel(angle=120.0, elevation=60.0)
    px, py = 50.0, 100.0
    a, b, c, d, e, f = light.projection_matrix((px, py))
    # top of a 40px subject standing on the pivot
    tx, ty = a * px + b * (py - 40) + c, d * px + e * (py - 40) + f
    sx, sy = light.shadow_vector
    assert (tx - px) * sx + (ty - py) * sy > 0


def test_angle_wraps():
    assert LightModel(angle=480.0).direction == pytest.approx(LightModel(angle=120.0).direction)


def test_placement_geometry():
    p = SceneTransform(x=0.5, y=0.8, scale=0.5).placement((40, 80), (200, 150))
    assert (p.w, p.h) == (20.0, 40.0)
    assert p.pivot == pytest.approx((100.0, 120.0))
    assert (p.x, p.y) == pytest.approx((90.0, 80.0))
    assert p.pivot_index((200, 150)) == (100, 120)
    assert p.sprite_box() == (90, 80, 20, 40)


def test_anchor_stays_in_frame():
    p = SceneTransform(x=1.7, y=-0.2, scale=1.0).placement((10, 10), (200, 150))
    assert p.pivot == (200.0, 0.0)
    assert p.pivot_index((200, 150)) == (199, 0)


@pytest.mark.parametrize("scale", [0.0, -1.0])
def test_non_positive_scale_is_empty(scale):
    p = SceneTransform(scale=scale).placement((40, 80), (200, 150))
    assert p.is_empty
    assert not p.intersects((200, 150))


def test_edits_replace_whole_transform():
    t = SceneTransform()
    moved = t.moved(0.2, 0.3)
    assert (t.x, t.y) == (0.5, 0.8)
    assert (moved.x, moved.y, moved.scale) == (0.2, 0.3, t.scale)
    assert t.rescaled(2.0).scale == 2.0
