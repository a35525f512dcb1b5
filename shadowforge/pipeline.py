"""Render entry point: cutout + scene + light + depth -> one RGBA frame.

Each call is pure with respect to its :class:`RenderInputs`; buffers are
created per call and nothing is cached between calls.
"""
import logging
import time
from dataclasses import dataclass, field

import numpy as np
from PIL import Image

from .composer import COMPOSITE, MASK_ONLY, check_mode, compose_frame
from .config import ShadowConfig, ShadowTunables
from .depth import prepare_depth
from .errors import STATUS_NOTHING_TO_DRAW, STATUS_OK, STATUS_WARP_DISABLED
from .penumbra import composite_shadow
from .projector import project_flat_shadow
from .scene import LightModel, SceneTransform
from .warp import warp_alpha

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class RenderInputs:
    background: Image.Image | None = None
    cutout: Image.Image | None = None
    depth: Image.Image | np.ndarray | None = None
    transform: SceneTransform = field(default_factory=SceneTransform)
    light: LightModel = field(default_factory=LightModel)
    config: ShadowConfig = field(default_factory=ShadowConfig)
    tunables: ShadowTunables = field(default_factory=ShadowTunables)

    @property
    def frame_size(self) -> tuple[int, int] | None:
        if self.background is None:
            return None
        return self.background.size


@dataclass
class RenderResult:
    image: Image.Image | None
    mode: str
    status: str = STATUS_OK
    warp_enabled: bool = False


def render_shadow_layer(inputs: RenderInputs) -> tuple[Image.Image, bool]:
    frame_size = inputs.frame_size
    placement = inputs.transform.placement(inputs.cutout.size, frame_size)
    t0 = time.perf_counter()

    flat = project_flat_shadow(
        inputs.cutout, placement, inputs.light, frame_size, squash=inputs.tunables.ground_squash
    )
    flat_alpha = np.asarray(flat.getchannel("A"))
    t1 = time.perf_counter()

    depth = prepare_depth(inputs.depth, frame_size)
    warp_enabled = depth is not None and inputs.config.depth_strength > 0
    warped = warp_alpha(
        flat_alpha,
        depth,
        inputs.light,
        placement.pivot_index(frame_size),
        inputs.config.depth_strength,
        inputs.tunables,
    )
    t2 = time.perf_counter()

    layer = composite_shadow(warped, placement, inputs.light, inputs.config, inputs.tunables)
    t3 = time.perf_counter()
    logger.debug(
        "shadow stages: project=%.1fms warp=%.1fms (enabled=%s) penumbra=%.1fms",
        (t1 - t0) * 1000.0,
        (t2 - t1) * 1000.0,
        warp_enabled,
        (t3 - t2) * 1000.0,
    )
    return layer, warp_enabled


def render(inputs: RenderInputs, mode: str = COMPOSITE, interactive: bool = False) -> RenderResult:
    check_mode(mode)
    if inputs.background is None or inputs.cutout is None or min(inputs.background.size) < 1:
        logger.debug("render skipped: background or cutout missing")
        return RenderResult(image=None, mode=mode, status=STATUS_NOTHING_TO_DRAW)

    frame_size = inputs.frame_size
    placement = inputs.transform.placement(inputs.cutout.size, frame_size)

    if mode == MASK_ONLY:
        image = compose_frame(inputs.background, None, inputs.cutout, placement, mode=mode)
        return RenderResult(image=image, mode=mode)

    shadow, warp_enabled = render_shadow_layer(inputs)
    image = compose_frame(
        inputs.background, shadow, inputs.cutout, placement, mode=mode, interactive=interactive
    )
    status = STATUS_OK if inputs.depth is not None else STATUS_WARP_DISABLED
    return RenderResult(image=image, mode=mode, status=status, warp_enabled=warp_enabled)
