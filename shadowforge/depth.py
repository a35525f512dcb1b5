import numpy as np
from PIL import Image


def normalize_depth(raw: np.ndarray) -> np.ndarray:
    data = np.asarray(raw).astype(np.float32)
    if data.size == 0:
        return data.astype(np.uint8)
    lo = float(data.min())
    span = float(data.max()) - lo or 1.0
    return np.clip(np.rint((data - lo) / span * 255.0), 0, 255).astype(np.uint8)


def prepare_depth(depth: Image.Image | np.ndarray | None, frame_size: tuple[int, int]) -> np.ndarray | None:
    if depth is None:
        return None
    if isinstance(depth, np.ndarray):
        arr = depth
        if arr.ndim == 3:
            arr = arr[..., 0]
        depth = Image.fromarray(np.clip(arr, 0, 255).astype(np.uint8))
    depth = depth.convert("L")
    if depth.size != tuple(frame_size):
        depth = depth.resize(frame_size, resample=Image.BILINEAR)
    return np.asarray(depth)
