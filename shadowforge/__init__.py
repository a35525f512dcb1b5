from .config import ShadowConfig, ShadowTunables
from .controller import RenderController
from .errors import InferenceError
from .pipeline import RenderInputs, RenderResult, render, render_shadow_layer
from .scene import LightModel, Placement, SceneTransform

__all__ = [
    "InferenceError",
    "LightModel",
    "Placement",
    "RenderController",
    "RenderInputs",
    "RenderResult",
    "SceneTransform",
    "ShadowConfig",
    "ShadowTunables",
    "render",
    "render_shadow_layer",
]

__version__ = "0.1.0"
