import logging

import numpy as np

from .config import ShadowTunables
from .scene import LightModel

logger = logging.getLogger(__name__)


def sky_opacity(depth: np.ndarray, threshold: float, fade_range: float) -> np.ndarray:
    depth = depth.astype(np.float32)
    if fade_range <= 0:
        return (depth >= threshold).astype(np.float32)
    return np.clip((depth - threshold) / fade_range, 0.0, 1.0)


def bilinear_sample(alpha: np.ndarray, src_x: np.ndarray, src_y: np.ndarray) -> np.ndarray:
    """Sample ``alpha`` at float coordinates.

    Every coordinate must satisfy ``0 <= x < w - 1`` and ``0 <= y < h - 1``.
    """
    h, w = alpha.shape
    flat = alpha.ravel().astype(np.float32)
    x0 = np.floor(src_x).astype(np.int64)
    y0 = np.floor(src_y).astype(np.int64)
    dx = (src_x - x0).astype(np.float32)
    dy = (src_y - y0).astype(np.float32)

    i00 = y0 * w + x0
    i10 = i00 + 1
    i01 = i00 + w
    i11 = i01 + 1
    top = flat[i00] * (1.0 - dx) + flat[i10] * dx
    bot = flat[i01] * (1.0 - dx) + flat[i11] * dx
    return top * (1.0 - dy) + bot * dy


def height_shift(raw_depth, ground_val: float, depth_strength: float, light: LightModel):
    pixel_height = (np.asarray(raw_depth, dtype=np.float32) - ground_val) * (depth_strength / 255.0)
    return pixel_height / light.tan_elevation


def warp_alpha(
    flat_alpha: np.ndarray,
    depth: np.ndarray | None,
    light: LightModel,
    pivot_index: tuple[int, int],
    depth_strength: float,
    tunables: ShadowTunables = ShadowTunables(),
) -> np.ndarray:
    if depth is None or depth_strength <= 0:
        return flat_alpha.copy()

    h, w = flat_alpha.shape
    depth_f = depth.astype(np.float32)
    col, row = pivot_index
    ground_val = float(depth_f[row, col])

    opacity = sky_opacity(depth_f, tunables.sky_threshold, tunables.sky_fade_range).ravel()
    out = np.zeros(h * w, dtype=np.float32)

    # sky pixels keep alpha 0 and are never sampled
    active = np.flatnonzero(opacity > 0)
    if active.size == 0:
        logger.debug("warp: every pixel is masked as sky")
        return out.reshape(h, w).astype(np.uint8)

    ry, rx = np.divmod(active, w)
    shift = height_shift(depth_f.ravel()[active], ground_val, depth_strength, light)
    vx, vy = light.direction
    src_x = rx - vx * shift
    src_y = ry - vy * shift

    inside = (src_x >= 0) & (src_x < w - 1) & (src_y >= 0) & (src_y < h - 1)
    active = active[inside]
    sampled = bilinear_sample(flat_alpha, src_x[inside], src_y[inside])

    keep = sampled > tunables.noise_floor
    idx = active[keep]
    out[idx] = sampled[keep] * opacity[idx]
    logger.debug(
        "warp: ground=%.1f active=%d inside=%d written=%d",
        ground_val,
        ry.size,
        active.size,
        idx.size,
    )
    return np.clip(np.rint(out), 0, 255).astype(np.uint8).reshape(h, w)
