STATUS_OK = "ok"
STATUS_NOTHING_TO_DRAW = "nothing to draw"
STATUS_WARP_DISABLED = "warp disabled"
STATUS_PENDING = "pending"
STATUS_ERROR = "error"


class InferenceError(Exception):
    """An upstream model (segmentation or depth estimation) failed."""

    def __init__(self, kind: str, message: str = "") -> None:
        self.kind = kind
        super().__init__(f"{kind} inference failed" + (f": {message}" if message else ""))
