"""
Double blink gesture recognition.

The openness signal is thresholded into "open" / "closed". Only the
transition into "closed" (a rising edge) counts as a blink, so one long
closure is never read as several blinks. Two blink starts less than
GESTURE_WINDOW seconds apart form the gesture.

The state machine is a pure reducer, step(state, sample, threshold), so it can
be driven deterministically from recorded samples. BlinkGestureDetector wraps
it with the current state for live use.
"""

from dataclasses import dataclass, replace
from typing import Optional, Tuple

from config import Config


@dataclass(frozen=True)
class OpennessSample:
    """Openness of both eyes in one frame."""
    value: float
    timestamp: float  # seconds, monotonic clock


@dataclass(frozen=True)
class BlinkState:
    is_blinking: bool = False
    last_blink_start_time: Optional[float] = None
    pending_blink_count: int = 0


@dataclass(frozen=True)
class GestureEvent:
    """Emitted once when the double blink is recognized."""
    timestamp: float
    blink_count: int


IDLE = BlinkState()


def step(state: BlinkState, sample: OpennessSample, threshold: Optional[float],
         window: float = Config.GESTURE_WINDOW,
         required: int = Config.GESTURE_BLINKS) -> Tuple[BlinkState, Optional[GestureEvent]]:
    """
    Advance the blink state machine by one sample.

    Args:
        state: Current state
        sample: New openness sample
        threshold: Calibrated threshold, or None when uncalibrated
        window: Max seconds between blink starts to keep counting
        required: Blink starts needed to recognize the gesture

    Returns:
        tuple: (new_state, GestureEvent or None)
    """
    if threshold is None:
        return state, None

    is_below = sample.value < threshold

    if is_below and not state.is_blinking:
        now = sample.timestamp
        last = state.last_blink_start_time
        if last is not None and now - last < window:
            count = state.pending_blink_count + 1
        else:
            count = 1

        if count >= required:
            # Stay in the blink until the eye reopens; count restarts from zero
            return (BlinkState(True, now, 0), GestureEvent(timestamp=now, blink_count=count))
        return BlinkState(True, now, count), None

    if not is_below and state.is_blinking:
        return replace(state, is_blinking=False), None

    return state, None


class BlinkGestureDetector:
    """
    Stateful wrapper around step() for a live sample stream.

    Not thread-safe on its own; the owner (DetectionSession) serializes calls.
    """

    def __init__(self, window=Config.GESTURE_WINDOW, required=Config.GESTURE_BLINKS):
        self.window = float(window)
        self.required = int(required)
        self._state = IDLE

    @property
    def state(self):
        return self._state

    def process(self, sample, threshold):
        """Feed one sample; returns a GestureEvent when the gesture completes."""
        previous = self._state
        self._state, event = step(previous, sample, threshold, self.window, self.required)

        if event is not None:
            print(f"[Gesture] Double blink recognized at t={event.timestamp:.2f}s")
        elif self._state.is_blinking and not previous.is_blinking:
            print(f"[Blink] Detected blink {self._state.pending_blink_count}/{self.required}")

        return event

    def reset(self):
        self._state = IDLE
