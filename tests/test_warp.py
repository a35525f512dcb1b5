"""Height-field warp of the flat shadow alpha."""

import numpy as np
import pytest

from shadowforge.config import ShadowTunables
from shadowforge.scene import LightModel
from shadowforge.warp import bilinear_sample, height_shift, sky_opacity, warp_alpha


@pytest.fixture
def ramp_alpha():
    # alpha grows by 4 per column
    cols = (np.arange(60) * 4).astype(np.uint8)
    return np.tile(cols, (20, 1))


def test_identity_without_depth(ramp_alpha):
    out = warp_alpha(ramp_alpha, None, LightModel(), (0, 0), depth_strength=80.0)
    assert np.array_equal(out, ramp_alpha)


def test_identity_with_zero_strength(ramp_alpha):
    depth = np.random.default_rng(3).integers(0, 256, ramp_alpha.shape, dtype=np.uint8)
    out = warp_alpha(ramp_alpha, depth, LightModel(), (0, 0), depth_strength=0.0)
    assert np.array_equal(out, ramp_alpha)


def test_sky_opacity_ramp():
    depth = np.array([0, 24, 25, 30, 50, 51, 255], dtype=np.uint8)
    expected = [0.0, 0.0, 0.0, 0.2, 1.0, 1.0, 1.0]
    assert sky_opacity(depth, 25.0, 25.0) == pytest.approx(expected)


def test_sky_pixels_stay_transparent():
    alpha = np.full((30, 40), 255, dtype=np.uint8)
    depth = np.full((30, 40), 200, dtype=np.uint8)
    depth[:, :20] = 10
    out = warp_alpha(alpha, depth, LightModel(angle=90.0, elevation=45.0), (30, 15), depth_strength=80.0)
    assert not out[:, :20].any()
    # level ground at the pivot height samples straight through
    assert (out[1:-2, 21:-2] == 255).all()


def test_horizon_band_scales_alpha():
    alpha = np.full((10, 10), 255, dtype=np.uint8)
    depth = np.full((10, 10), 35, dtype=np.uint8)
    out = warp_alpha(alpha, depth, LightModel(), (5, 5), depth_strength=50.0)
    assert out[4, 4] == 102


def test_noise_floor_drops_faint_alpha():
    alpha = np.full((10, 10), 8, dtype=np.uint8)
    depth = np.full((10, 10), 200, dtype=np.uint8)
    out = warp_alpha(alpha, depth, LightModel(), (5, 5), depth_strength=50.0, tunables=ShadowTunables())
    assert not out.any()


def test_bilinear_exact_on_grid():
    alpha = np.random.default_rng(7).integers(0, 256, (12, 9)).astype(np.uint8)
    ys, xs = np.mgrid[0:11, 0:8]
    sampled = bilinear_sample(alpha, xs.ravel().astype(np.float64), ys.ravel().astype(np.float64))
    assert np.array_equal(sampled, alpha[:11, :8].ravel().astype(np.float32))


def test_bilinear_midpoint():
    alpha = np.array([[0, 100], [100, 200]], dtype=np.uint8)
    assert bilinear_sample(alpha, np.array([0.5]), np.array([0.0]))[0] == pytest.approx(50.0)
    assert bilinear_sample(alpha, np.array([0.5]), np.array([0.5]))[0] == pytest.approx(100.0)


def test_height_shift_reference_values():
    light = LightModel(angle=120.0, elevation=60.0)
    assert (130 - 50) * (80 / 255) == pytest.approx(25.1, abs=0.05)
    assert float(height_shift(130, 50, 80.0, light)) == pytest.approx(14.49, abs=0.01)


def test_source_offset_follows_light_direction(ramp_alpha):
    depth = np.full(ramp_alpha.shape, 130, dtype=np.uint8)
    depth[0, 0] = 50  # ground under the pivot
    light = LightModel(angle=0.0, elevation=60.0)
    out = warp_alpha(ramp_alpha, depth, light, (0, 0), depth_strength=80.0)

    shift = float(height_shift(130, 50, 80.0, light))
    vx, vy = light.direction
    for col in range(20, 59):
        src_x = col - vx * shift
        expected = 4.0 * src_x
        assert abs(int(out[5, col]) - expected) <= 1.0
    # source left of the buffer: nothing to sample
    assert out[5, 10] == 0


def test_opposite_light_samples_the_other_side(ramp_alpha):
    depth = np.full(ramp_alpha.shape, 130, dtype=np.uint8)
    depth[0, 0] = 50
    light = LightModel(angle=180.0, elevation=60.0)
    out = warp_alpha(ramp_alpha, depth, light, (0, 0), depth_strength=80.0)
    shift = float(height_shift(130, 50, 80.0, light))
    assert abs(int(out[5, 20]) - 4.0 * (20 + shift)) <= 1.0
    assert out[5, 50] == 0
