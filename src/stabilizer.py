"""Turn noisy per-frame predictions into debounced gestures and timeout events."""

import logging
import math
import time
from operator import attrgetter
from typing import List, NamedTuple, Optional, Union

from config import (
    BUFFER_SIZE,
    HOLD_TIMEOUT_SECONDS,
    IDLE_TIMEOUT_SECONDS,
    PREDICTION_THRESHOLD,
    SPACE_LABELS,
)

logger = logging.getLogger(__name__)


class RawPrediction(NamedTuple):
    label: str
    confidence: float


class StabilizedGesture(NamedTuple):
    label: str
    confidence: float
    at: float


class AutoSpeak(NamedTuple):
    at: float


class AutoClear(NamedTuple):
    at: float


TimeoutEvent = Union[AutoSpeak, AutoClear]


def clamp_confidence(value):
    """Clamp a classifier score into [0, 1]; NaN counts as no confidence."""
    value = float(value)
    if math.isnan(value):
        return 0.0
    return max(0.0, min(1.0, value))


class GestureStabilizer:
    """
    Collects raw predictions into a fixed-size window and decides once per
    full window. The winner is the most confident entry (first one on ties)
    and is only emitted when it clears the threshold. The window is emptied
    after every decision.

    Two clocks drive the timeout events returned by ``tick``:
    the idle clock (reset by every submitted prediction) fires ``AutoSpeak``,
    the hold clock (started by an accepted hold gesture) fires ``AutoClear``.
    Both fire once per crossing.
    """

    def __init__(
        self,
        buffer_size: int = BUFFER_SIZE,
        threshold: float = PREDICTION_THRESHOLD,
        idle_timeout: float = IDLE_TIMEOUT_SECONDS,
        hold_timeout: float = HOLD_TIMEOUT_SECONDS,
        hold_labels=None,
        now: Optional[float] = None,
    ) -> None:
        if buffer_size < 1:
            raise ValueError("buffer_size must be at least 1.")
        if not 0.0 <= threshold <= 1.0:
            raise ValueError("threshold must be within [0, 1].")
        if idle_timeout <= 0 or hold_timeout <= 0:
            raise ValueError("Timeouts must be positive.")

        self.buffer_size = buffer_size
        self.threshold = threshold
        self.idle_timeout = idle_timeout
        self.hold_timeout = hold_timeout
        self.hold_labels = set(SPACE_LABELS if hold_labels is None else hold_labels)

        self._window: List[RawPrediction] = []
        self._idle_since = time.monotonic() if now is None else now
        self._hold_since: Optional[float] = None

    @property
    def window_size(self) -> int:
        return len(self._window)

    @property
    def idle_since(self) -> float:
        return self._idle_since

    @property
    def hold_since(self) -> Optional[float]:
        return self._hold_since

    def reset(self, now: float) -> None:
        self._window.clear()
        self._idle_since = now
        self._hold_since = None

    def submit(self, prediction: RawPrediction, now: float) -> Optional[StabilizedGesture]:
        """Feed one raw prediction; returns a gesture when a full window wins."""
        entry = RawPrediction(str(prediction.label), clamp_confidence(prediction.confidence))
        self._window.append(entry)
        self._idle_since = now

        if len(self._window) < self.buffer_size:
            return None

        # max() keeps the first maximal element, so ties go to the earliest entry.
        best = max(self._window, key=attrgetter("confidence"))
        self._window.clear()

        if best.confidence < self.threshold:
            logger.debug(
                "Window discarded: best '%s' (%.2f) below %.2f",
                best.label,
                best.confidence,
                self.threshold,
            )
            return None

        if best.label in self.hold_labels:
            if self._hold_since is None:
                self._hold_since = now
        else:
            self._hold_since = None

        return StabilizedGesture(best.label, best.confidence, now)

    def tick(self, now: float) -> List[TimeoutEvent]:
        events: List[TimeoutEvent] = []

        if self._hold_since is not None and now - self._hold_since >= self.hold_timeout:
            self._hold_since = None
            events.append(AutoClear(now))

        if now - self._idle_since >= self.idle_timeout:
            self._idle_since = now
            events.append(AutoSpeak(now))

        return events
