import logging
import math

import numpy as np
from PIL import Image, ImageFilter

from .config import GradientStops, ShadowConfig, ShadowTunables
from .scene import LightModel, Placement

logger = logging.getLogger(__name__)


def gradient_ramp(
    frame_size: tuple[int, int],
    origin: tuple[float, float],
    vector: tuple[float, float],
    length: float,
    stops: GradientStops,
) -> np.ndarray:
    """Linear gradient of alpha in [0, 1] from ``origin`` along ``vector``.

    Offsets before 0 or past 1 take the first or last stop. A zero-length
    gradient paints nothing, so the result is all zeros.
    """
    w, h = frame_size
    norm = math.hypot(*vector)
    if length <= 1e-6 or norm <= 1e-12:
        return np.zeros((h, w), dtype=np.float32)
    ux, uy = vector[0] / norm, vector[1] / norm
    yy, xx = np.indices((h, w), dtype=np.float32)
    t = ((xx - origin[0]) * ux + (yy - origin[1]) * uy) / length
    offsets = [s[0] for s in stops]
    alphas = [s[1] for s in stops]
    return np.interp(np.clip(t, 0.0, 1.0), offsets, alphas).astype(np.float32)


def soften(alpha: np.ndarray, radius: float) -> np.ndarray:
    img = Image.fromarray(np.clip(alpha, 0, 255).astype(np.uint8))
    if radius > 0:
        img = img.filter(ImageFilter.GaussianBlur(radius=radius))
    return np.asarray(img).astype(np.float32) / 255.0


def shadow_layer_from_alpha(alpha: np.ndarray) -> Image.Image:
    h, w = alpha.shape
    alpha_img = Image.fromarray(np.clip(np.rint(alpha * 255.0), 0, 255).astype(np.uint8))
    layer = Image.new("RGBA", (w, h), (0, 0, 0, 0))
    layer.putalpha(alpha_img)
    return layer


def composite_shadow(
    warped_alpha: np.ndarray,
    placement: Placement,
    light: LightModel,
    config: ShadowConfig,
    tunables: ShadowTunables = ShadowTunables(),
) -> Image.Image:
    h, w = warped_alpha.shape
    frame_size = (w, h)
    pivot = placement.pivot
    vector = light.shadow_vector
    shadow_len = light.shadow_length(placement.h)

    alpha = soften(warped_alpha, tunables.contact_blur)

    if config.light_size > 0:
        # contact hardening: sharp at the pivot, soft further out
        penumbra = soften(warped_alpha, config.light_size)
        penumbra *= gradient_ramp(
            frame_size, pivot, vector, shadow_len * tunables.penumbra_reach, tunables.penumbra_stops
        )
        penumbra *= tunables.penumbra_opacity
        alpha = penumbra + alpha * (1.0 - penumbra)

    alpha = alpha * gradient_ramp(frame_size, pivot, vector, shadow_len, tunables.fade_stops)
    opacity = min(1.0, max(0.0, config.opacity))
    logger.debug("penumbra: shadow_len=%.1f light_size=%.1f opacity=%.2f", shadow_len, config.light_size, opacity)
    return shadow_layer_from_alpha(alpha * opacity)
