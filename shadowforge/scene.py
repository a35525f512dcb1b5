import math
from dataclasses import dataclass, replace

MIN_ELEVATION = 10.0


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


@dataclass(frozen=True)
class Placement:
    """Subject rectangle in frame pixels, anchored at its bottom-center pivot."""

    x: float
    y: float
    w: float
    h: float
    pivot_x: float
    pivot_y: float

    @property
    def pivot(self) -> tuple[float, float]:
        return self.pivot_x, self.pivot_y

    @property
    def is_empty(self) -> bool:
        return self.w <= 0 or self.h <= 0

    def intersects(self, frame_size: tuple[int, int]) -> bool:
        fw, fh = frame_size
        if self.is_empty:
            return False
        return self.x < fw and self.y < fh and self.x + self.w > 0 and self.y + self.h > 0

    def pivot_index(self, frame_size: tuple[int, int]) -> tuple[int, int]:
        fw, fh = frame_size
        col = int(_clamp(math.floor(self.pivot_x), 0, fw - 1))
        row = int(_clamp(math.floor(self.pivot_y), 0, fh - 1))
        return col, row

    def sprite_box(self) -> tuple[int, int, int, int]:
        return int(round(self.x)), int(round(self.y)), int(round(self.w)), int(round(self.h))


@dataclass(frozen=True)
class SceneTransform:
    x: float = 0.5
    y: float = 0.8
    scale: float = 0.5

    def moved(self, x: float, y: float) -> "SceneTransform":
        return replace(self, x=x, y=y)

    def rescaled(self, scale: float) -> "SceneTransform":
        return replace(self, scale=scale)

    def placement(self, cutout_size: tuple[int, int], frame_size: tuple[int, int]) -> Placement:
        fw, fh = frame_size
        cw, ch = cutout_size
        # the anchor must land on a pixel of the frame
        px = _clamp(self.x, 0.0, 1.0) * fw
        py = _clamp(self.y, 0.0, 1.0) * fh
        scale = self.scale if self.scale > 0 else 0.0
        w = cw * scale
        h = ch * scale
        return Placement(x=px - w / 2.0, y=py - h, w=w, h=h, pivot_x=px, pivot_y=py)


@dataclass(frozen=True)
class LightModel:
    """Directional light given as azimuth and elevation in degrees.

    ``direction`` points from the scene toward the light in image space
    (y down); the cast shadow extends along ``shadow_vector``.
    """

    angle: float = 120.0
    elevation: float = 60.0
    min_elevation: float = MIN_ELEVATION

    @property
    def azimuth(self) -> float:
        return self.angle % 360.0

    @property
    def elevation_clamped(self) -> float:
        floor = _clamp(self.min_elevation, 1e-3, 90.0)
        return _clamp(self.elevation, floor, 90.0)

    @property
    def tan_elevation(self) -> float:
        return math.tan(math.radians(self.elevation_clamped))

    @property
    def k(self) -> float:
        return 1.0 / self.tan_elevation

    @property
    def direction(self) -> tuple[float, float]:
        rad = math.radians(self.azimuth)
        return math.cos(rad), math.sin(rad)

    @property
    def shear(self) -> tuple[float, float]:
        vx, vy = self.direction
        return -self.k * vx, -self.k * vy

    @property
    def shadow_vector(self) -> tuple[float, float]:
        """Direction the flat shadow footprint extends from the pivot, away from the light."""
        vx, vy = self.direction
        return -vx, -vy

    def shadow_length(self, height: float) -> float:
        return max(0.0, height) * self.k

    def projection_matrix(self, pivot: tuple[float, float], squash: float = 0.5) -> tuple[float, ...]:
        sx, sy = self.shear
        px, py = pivot
        b = -squash * sx
        e = -squash * sy
        return (1.0, b, -b * py, 0.0, e, py - e * py)
