# Background render scheduling
"""
Caller-side scheduling for interactive re-rendering.

Every submission gets a monotonically increasing sequence number. Rapid
submissions are coalesced (only the newest pending request is computed) and
a result is delivered only if its sequence number is still the newest when
it finishes; superseded results are discarded, never merged.
"""

import concurrent.futures
import threading
import time
from enum import Enum
from typing import Callable, Optional, Tuple

import numpy as np

from .adjustments import AdjustmentVector
from ..config import settings
from ..utils.errors import ErrorCategory, format_user_error, log_and_continue, safe_operation
from ..utils.logger import get_logger

logger = get_logger(__name__)

RenderFunc = Callable[[np.ndarray, AdjustmentVector], np.ndarray]


class RenderState(Enum):
    """Scheduler state."""
    IDLE = "idle"
    PENDING = "pending"
    COMPUTING = "computing"


class RenderScheduler:
    """
    Runs `render_func` on a worker thread, always converging on the latest request.

    Args:
        render_func: Callable taking (source, adjustments) and returning an image.
        on_result: Called with (sequence, image) for results that are still current.
            Runs on the worker thread while the scheduler lock is held.
        on_error: Called with (sequence, message) when the current request fails.
        debounce_seconds: Delay before picking up a request, to coalesce bursts.
    """

    def __init__(
        self,
        render_func: RenderFunc,
        on_result: Optional[Callable[[int, np.ndarray], None]] = None,
        on_error: Optional[Callable[[int, str], None]] = None,
        debounce_seconds: Optional[float] = None,
    ):
        if debounce_seconds is None:
            debounce_seconds = settings.SCHEDULER_DEFAULTS["debounce_seconds"]
        self._render_func = render_func
        self._on_result = on_result
        self._on_error = on_error
        self._debounce = max(0.0, float(debounce_seconds))

        self._executor = concurrent.futures.ThreadPoolExecutor(
            max_workers=settings.SCHEDULER_DEFAULTS["max_workers"],
            thread_name_prefix="spektra-render",
        )
        self._cond = threading.Condition()
        self._sequence = 0
        self._pending: Optional[Tuple[int, np.ndarray, AdjustmentVector]] = None
        self._state = RenderState.IDLE
        self._worker_active = False
        self._latest_result: Optional[Tuple[int, np.ndarray]] = None
        self._discarded = 0
        self._closed = False

    @property
    def state(self) -> RenderState:
        with self._cond:
            return self._state

    @property
    def latest_sequence(self) -> int:
        with self._cond:
            return self._sequence

    @property
    def discarded_count(self) -> int:
        """Number of finished renders dropped because a newer request existed."""
        with self._cond:
            return self._discarded

    def latest_result(self) -> Optional[Tuple[int, np.ndarray]]:
        with self._cond:
            return self._latest_result

    def submit(self, source: np.ndarray, adjustments: AdjustmentVector) -> int:
        """Queue a render request and return its sequence number."""
        with self._cond:
            if self._closed:
                raise RuntimeError("RenderScheduler has been shut down")
            self._sequence += 1
            seq = self._sequence
            self._pending = (seq, source, adjustments)
            if self._state is RenderState.IDLE:
                self._state = RenderState.PENDING
            if not self._worker_active:
                self._worker_active = True
                self._executor.submit(self._drain)
        logger.debug("Render request #%d queued", seq)
        return seq

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until no work is pending or running. Returns False on timeout."""
        with self._cond:
            return self._cond.wait_for(lambda: self._state is RenderState.IDLE, timeout=timeout)

    def shutdown(self, wait: bool = True) -> None:
        with self._cond:
            self._closed = True
        self._executor.shutdown(wait=wait)

    def _is_current(self, seq: int) -> bool:
        return seq == self._sequence

    def _drain(self) -> None:
        while True:
            if self._debounce:
                time.sleep(self._debounce)

            with self._cond:
                if self._pending is None:
                    self._worker_active = False
                    self._state = RenderState.IDLE
                    self._cond.notify_all()
                    return
                seq, source, adjustments = self._pending
                self._pending = None
                self._state = RenderState.COMPUTING

            result = None
            error = None
            try:
                result = self._render_func(source, adjustments)
            except Exception as e:
                error = e

            # Delivery happens under the lock so submit() cannot supersede seq
            # between the currency check and the callback.
            with self._cond:
                if self._pending is not None:
                    self._state = RenderState.PENDING

                if not self._is_current(seq):
                    self._discarded += 1
                    logger.debug("Discarding stale render #%d", seq)
                    continue

                if error is not None:
                    message = format_user_error(error, context="rendering")
                    log_and_continue(f"Render #{seq} failed: {error}", ErrorCategory.PROCESSING)
                    if self._on_error:
                        with safe_operation("delivering render error"):
                            self._on_error(seq, message)
                    continue

                self._latest_result = (seq, result)
                if self._on_result:
                    with safe_operation("delivering render result"):
                        self._on_result(seq, result)
