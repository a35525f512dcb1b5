import logging
import threading
from concurrent.futures import Executor, Future
from dataclasses import replace
from typing import Any, Callable

from .composer import COMPOSITE
from .errors import (
    STATUS_ERROR,
    STATUS_NOTHING_TO_DRAW,
    STATUS_PENDING,
    STATUS_WARP_DISABLED,
    InferenceError,
)
from .pipeline import RenderInputs, RenderResult, render

logger = logging.getLogger(__name__)

DEPTH = "depth"
CUTOUT = "cutout"
INFERENCE_KINDS = (DEPTH, CUTOUT)


class RenderController:
    """Holds the live inputs and re-renders on change.

    Inputs are replaced as whole objects under a lock, so a render always sees
    one consistent snapshot. Pending changes are coalesced: only the latest
    snapshot is ever rendered.
    """

    def __init__(
        self,
        inputs: RenderInputs | None = None,
        render_fn: Callable[..., RenderResult] = render,
    ) -> None:
        self._lock = threading.Lock()
        self._inputs = inputs or RenderInputs()
        self._render_fn = render_fn
        self._version = 0
        self._rendered_version = -1
        self._generations = {kind: 0 for kind in INFERENCE_KINDS}
        self._pending: set[str] = set()
        self._failed: set[str] = set()
        self._depth_from_user = self._inputs.depth is not None
        self.last_result: RenderResult | None = None

    @property
    def status(self) -> str:
        with self._lock:
            if self._pending:
                return STATUS_PENDING
            if CUTOUT in self._failed:
                return STATUS_ERROR
            if DEPTH in self._failed:
                return STATUS_WARP_DISABLED
            if self.last_result is not None:
                return self.last_result.status
            return STATUS_NOTHING_TO_DRAW

    def snapshot(self) -> tuple[int, RenderInputs]:
        with self._lock:
            return self._version, self._inputs

    def _invalidate(self, kind: str) -> None:
        # any request of this kind still in flight is now stale
        self._generations[kind] += 1
        self._pending.discard(kind)

    def update(self, **changes: Any) -> int:
        """Replace any of the ``RenderInputs`` fields and mark the scene dirty."""
        with self._lock:
            if "depth" in changes:
                self._depth_from_user = changes["depth"] is not None
                self._invalidate(DEPTH)
                self._failed.discard(DEPTH)
            elif "background" in changes and not self._depth_from_user:
                # inferred depth belongs to the previous background
                changes["depth"] = None
                self._invalidate(DEPTH)
            if "cutout" in changes:
                self._invalidate(CUTOUT)
                self._failed.discard(CUTOUT)
            self._inputs = replace(self._inputs, **changes)
            self._version += 1
            return self._version

    def render_pending(self, mode: str = COMPOSITE, interactive: bool = True) -> RenderResult | None:
        while True:
            with self._lock:
                version, inputs = self._version, self._inputs
                if version == self._rendered_version:
                    return None
            result = self._render_fn(inputs, mode=mode, interactive=interactive)
            with self._lock:
                if version != self._version:
                    logger.debug("discarding stale render v%d (now v%d)", version, self._version)
                    continue
                self._rendered_version = version
                self.last_result = result
                return result

    def begin_inference(self, kind: str) -> int:
        if kind not in INFERENCE_KINDS:
            raise ValueError(f"Unknown inference kind '{kind}'")
        with self._lock:
            self._generations[kind] += 1
            self._pending.add(kind)
            self._failed.discard(kind)
            return self._generations[kind]

    def complete_inference(
        self,
        kind: str,
        token: int,
        asset: Any = None,
        error: BaseException | None = None,
    ) -> bool:
        with self._lock:
            if token != self._generations.get(kind):
                logger.debug("ignoring stale %s result (token %d)", kind, token)
                return False
            self._pending.discard(kind)
            if error is not None:
                logger.warning("%s unavailable: %s", kind, error)
                self._failed.add(kind)
                if kind == DEPTH:
                    self._inputs = replace(self._inputs, depth=None)
                    self._depth_from_user = False
            else:
                self._failed.discard(kind)
                self._inputs = replace(self._inputs, **{kind: asset})
                if kind == DEPTH:
                    self._depth_from_user = False
            self._version += 1
            return True

    def submit_inference(self, kind: str, fn: Callable[[], Any], executor: Executor) -> Future:
        token = self.begin_inference(kind)

        def _done(future: Future) -> None:
            if future.cancelled():
                return
            exc = future.exception()
            if exc is not None and not isinstance(exc, InferenceError):
                exc = InferenceError(kind, str(exc))
            self.complete_inference(kind, token, None if exc else future.result(), exc)

        future = executor.submit(fn)
        future.add_done_callback(_done)
        return future
