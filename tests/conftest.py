import numpy as np
import pytest
from PIL import Image

from _images import make_cutout
from shadowforge.pipeline import RenderInputs
from shadowforge.scene import LightModel, SceneTransform

FRAME_SIZE = (200, 150)


@pytest.fixture
def cutout() -> Image.Image:
    return make_cutout()


@pytest.fixture
def background() -> Image.Image:
    return Image.new("RGBA", FRAME_SIZE, (120, 140, 160, 255))


@pytest.fixture
def flat_depth() -> np.ndarray:
    w, h = FRAME_SIZE
    return np.full((h, w), 120, dtype=np.uint8)


@pytest.fixture
def inputs(background, cutout) -> RenderInputs:
    return RenderInputs(
        background=background,
        cutout=cutout,
        transform=SceneTransform(x=0.5, y=0.8, scale=0.5),
        light=LightModel(angle=120.0, elevation=60.0),
    )
