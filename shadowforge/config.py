from dataclasses import dataclass, fields
from typing import Any, Mapping

GradientStops = tuple[tuple[float, float], ...]

_ALIASES = {
    "lightSize": "light_size",
    "depthStrength": "depth_strength",
}


@dataclass(frozen=True)
class ShadowConfig:
    opacity: float = 0.85
    light_size: float = 15.0
    depth_strength: float = 80.0

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "ShadowConfig":
        """Build from a plain record as handed over by a control surface.

        Accepts camelCase or snake_case keys; anything unknown is ignored.
        """
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in values.items():
            name = _ALIASES.get(key, key)
            if name in known and value is not None:
                kwargs[name] = float(value)
        return cls(**kwargs)


# Empirical values; they control the look, not the physics.
@dataclass(frozen=True)
class ShadowTunables:
    sky_threshold: float = 25.0
    sky_fade_range: float = 25.0
    noise_floor: float = 10.0
    contact_blur: float = 1.0
    penumbra_opacity: float = 0.6
    penumbra_reach: float = 1.2
    penumbra_stops: GradientStops = ((0.0, 0.0), (0.3, 0.8), (1.0, 1.0))
    fade_stops: GradientStops = ((0.0, 1.0), (0.6, 0.9), (1.0, 0.0))
    ground_squash: float = 0.5
