#!/usr/bin/env python3
import argparse
import logging
from pathlib import Path

import numpy as np
from PIL import Image

from .composer import COMPOSITE, MASK_ONLY, SHADOW_ONLY
from .config import ShadowConfig
from .depth import normalize_depth
from .logging_setup import setup_logging
from .pipeline import RenderInputs, render
from .scene import MIN_ELEVATION, LightModel, SceneTransform

logger = logging.getLogger(__name__)


def load_cutout(path: Path) -> Image.Image:
    raw = Image.open(path)
    has_alpha = raw.mode in ("RGBA", "LA") or (raw.mode == "P" and "transparency" in raw.info)
    if not has_alpha:
        logger.warning("%s has no alpha channel; the whole image is treated as the subject", path)
    return raw.convert("RGBA")


def load_depth(path: Path | None, normalize: bool) -> np.ndarray | None:
    if path is None:
        return None
    img = Image.open(path)
    if not normalize:
        return np.asarray(img.convert("L"))
    if img.mode == "P":
        img = img.convert("L")
    # stretch at native bit depth so 16-bit maps keep their precision
    depth = np.asarray(img)
    if depth.ndim == 3:
        depth = depth[..., 0]
    return normalize_depth(depth)


def build_parser() -> argparse.ArgumentParser:
    defaults = ShadowConfig()
    parser = argparse.ArgumentParser(description="Composite a cut-out subject with a depth-aware cast shadow.")
    parser.add_argument("--foreground", required=True, help="Path to the RGBA cutout (alpha = subject mask).")
    parser.add_argument("--background", required=True, help="Path to the background image.")
    parser.add_argument("--depth", default=None, help="Optional depth map (grayscale 0-255, 255 = nearest).")
    parser.add_argument("--normalize-depth", action="store_true", help="Min-max normalize the depth map first.")
    parser.add_argument("--angle", type=float, default=120.0, help="Light azimuth in degrees (0-360).")
    parser.add_argument("--elevation", type=float, default=60.0, help="Light elevation in degrees (0-90).")
    parser.add_argument("--min-elevation", type=float, default=MIN_ELEVATION, help="Elevation floor in degrees.")
    parser.add_argument("--scale", type=float, default=0.5, help="Scale factor for the cutout.")
    parser.add_argument("--x", type=float, default=0.5, help="Anchor x as a fraction of frame width.")
    parser.add_argument("--y", type=float, default=0.8, help="Anchor y as a fraction of frame height.")
    parser.add_argument("--shadow-opacity", type=float, default=defaults.opacity, help="Global shadow opacity.")
    parser.add_argument("--light-size", type=float, default=defaults.light_size, help="Penumbra blur radius.")
    parser.add_argument("--depth-strength", type=float, default=defaults.depth_strength, help="Depth warp strength.")
    parser.add_argument("--handles", action="store_true", help="Draw the placement outline and pivot handle.")
    parser.add_argument("--output", default="composite.png", help="Composite output path.")
    parser.add_argument("--shadow-only", default="shadow_only.png", help="Shadow layer output path.")
    parser.add_argument("--mask-debug", default="mask_debug.png", help="Subject mask output path.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only warnings and errors.")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args)

    inputs = RenderInputs(
        background=Image.open(args.background).convert("RGBA"),
        cutout=load_cutout(Path(args.foreground)),
        depth=load_depth(Path(args.depth) if args.depth else None, args.normalize_depth),
        transform=SceneTransform(x=args.x, y=args.y, scale=args.scale),
        light=LightModel(angle=args.angle, elevation=args.elevation, min_elevation=args.min_elevation),
        config=ShadowConfig(
            opacity=args.shadow_opacity,
            light_size=args.light_size,
            depth_strength=args.depth_strength,
        ),
    )

    outputs = ((COMPOSITE, args.output), (SHADOW_ONLY, args.shadow_only), (MASK_ONLY, args.mask_debug))
    for mode, path in outputs:
        result = render(inputs, mode=mode, interactive=args.handles and mode == COMPOSITE)
        if result.image is None:
            logger.error("nothing rendered for %s: %s", mode, result.status)
            return 1
        result.image.save(path)
        logger.info("wrote %s layer to %s (%s)", mode, path, result.status)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
