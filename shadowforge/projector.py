import logging

from PIL import Image

from .scene import LightModel, Placement

logger = logging.getLogger(__name__)

_MIN_DET = 1e-4


def empty_layer(frame_size: tuple[int, int]) -> Image.Image:
    return Image.new("RGBA", frame_size, (0, 0, 0, 0))


def flatten_to_black(img: Image.Image) -> Image.Image:
    flat = Image.new("RGBA", img.size, (0, 0, 0, 0))
    flat.putalpha(img.getchannel("A"))
    return flat


def _cutout_matrix(
    forward: tuple[float, ...],
    placement: Placement,
    cutout_size: tuple[int, int],
) -> tuple[float, ...]:
    # frame pixel -> un-projected frame pixel -> cutout pixel
    a, b, c, d, e, f = forward
    det = a * e - b * d
    if abs(det) < _MIN_DET:
        det = _MIN_DET if det >= 0 else -_MIN_DET
    ia, ib = e / det, -b / det
    id_, ie = -d / det, a / det
    ic = -(ia * c + ib * f)
    if_ = -(id_ * c + ie * f)

    cw, ch = cutout_size
    fx = cw / placement.w
    fy = ch / placement.h
    return (
        fx * ia,
        fx * ib,
        fx * (ic - placement.x),
        fy * id_,
        fy * ie,
        fy * (if_ - placement.y),
    )


def project_flat_shadow(
    cutout: Image.Image,
    placement: Placement,
    light: LightModel,
    frame_size: tuple[int, int],
    squash: float = 0.5,
) -> Image.Image:
    if placement.is_empty or not placement.intersects(frame_size):
        logger.debug("flat shadow skipped: placement %s outside frame %s", placement, frame_size)
        return empty_layer(frame_size)

    forward = light.projection_matrix(placement.pivot, squash=squash)
    matrix = _cutout_matrix(forward, placement, cutout.size)
    projected = cutout.convert("RGBA").transform(
        frame_size, Image.AFFINE, matrix, resample=Image.BILINEAR, fillcolor=(0, 0, 0, 0)
    )
    return flatten_to_black(projected)
