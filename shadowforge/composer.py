from PIL import Image, ImageDraw

from .scene import Placement

COMPOSITE = "composite"
SHADOW_ONLY = "shadow"
MASK_ONLY = "mask"
LAYER_MODES = (COMPOSITE, SHADOW_ONLY, MASK_ONLY)

OUTLINE_COLOR = (59, 130, 246, 128)
HANDLE_COLOR = (59, 130, 246, 255)
HANDLE_RADIUS = 6


def check_mode(mode: str) -> str:
    if mode not in LAYER_MODES:
        raise ValueError(f"Unknown layer mode '{mode}'. Available: {', '.join(LAYER_MODES)}")
    return mode


def place_sprite(cutout: Image.Image, placement: Placement, frame_size: tuple[int, int]) -> Image.Image:
    layer = Image.new("RGBA", frame_size, (0, 0, 0, 0))
    x, y, w, h = placement.sprite_box()
    if w < 1 or h < 1 or not placement.intersects(frame_size):
        return layer
    sprite = cutout.convert("RGBA").resize((w, h), resample=Image.LANCZOS)
    layer.paste(sprite, (x, y))
    return layer


def draw_handles(frame: Image.Image, placement: Placement) -> Image.Image:
    overlay = Image.new("RGBA", frame.size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(overlay)
    x, y, w, h = placement.sprite_box()
    if w >= 1 and h >= 1:
        draw.rectangle((x, y, x + w, y + h), outline=OUTLINE_COLOR, width=1)
    px, py = placement.pivot
    r = HANDLE_RADIUS
    draw.ellipse((px - r, py - r, px + r, py + r), fill=HANDLE_COLOR, outline=(255, 255, 255, 255), width=2)
    return Image.alpha_composite(frame, overlay)


def compose_frame(
    background: Image.Image,
    shadow: Image.Image | None,
    cutout: Image.Image,
    placement: Placement,
    mode: str = COMPOSITE,
    interactive: bool = False,
) -> Image.Image:
    check_mode(mode)
    frame_size = background.size
    canvas = Image.new("RGBA", frame_size, (0, 0, 0, 0))

    if mode == MASK_ONLY:
        return Image.alpha_composite(canvas, place_sprite(cutout, placement, frame_size))

    if mode == COMPOSITE:
        canvas = background.convert("RGBA")
    if shadow is not None:
        canvas = Image.alpha_composite(canvas, shadow)
    if mode == SHADOW_ONLY:
        return canvas

    canvas = Image.alpha_composite(canvas, place_sprite(cutout, placement, frame_size))
    if interactive:
        canvas = draw_handles(canvas, placement)
    return canvas
