"""
Detection session: the single owner of calibration and blink state.

Samples may be produced on a capture thread while the UI calibrates from
another, so every read and mutation goes through one lock. After each sample
an immutable SessionSnapshot is published for presentation.
"""

import threading
from dataclasses import dataclass
from typing import Optional

from calibration import Calibration
from dispatch import DispatchResult
from gesture import BlinkGestureDetector, OpennessSample
from landmarks import NO_LANDMARK_OPENNESS, estimate_openness


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of the session for the UI or tests."""
    current_openness: float = NO_LANDMARK_OPENNESS
    blink_detected: bool = False
    threshold: Optional[float] = None
    open_value: Optional[float] = None
    blink_value: Optional[float] = None
    pending_blink_count: int = 0
    gestures_recognized: int = 0
    last_dispatch: Optional[DispatchResult] = None
    last_gesture_time: Optional[float] = None


class DetectionSession:
    """
    Owns Calibration and the BlinkGestureDetector for one detection run.

    Args:
        sink: DispatchSink fired once per recognized gesture
        calibration: Optional Calibration to share (a new one by default)
        detector: Optional BlinkGestureDetector (a new one by default)
    """

    def __init__(self, sink, calibration=None, detector=None):
        self.sink = sink
        self.calibration = calibration if calibration is not None else Calibration()
        self.detector = detector if detector is not None else BlinkGestureDetector()

        self._lock = threading.RLock()
        self._listeners = []
        self._current_sample = None
        self._gestures = 0
        self._last_dispatch = None
        self._last_gesture_time = None
        self._snapshot = self._build_snapshot()

    # Sample input -----------------------------------------------------

    def process_sample(self, sample):
        """
        Classify one openness sample and dispatch on a recognized gesture.

        Returns:
            SessionSnapshot: State after the sample
        """
        with self._lock:
            self._current_sample = sample
            threshold = self.calibration.threshold()
            event = self.detector.process(sample, threshold)

            if event is not None:
                self._gestures += 1
                self._last_gesture_time = event.timestamp
                self._last_dispatch = self._dispatch()

            return self._publish()

    def process_landmarks(self, left_points, right_points, timestamp):
        value = estimate_openness(left_points, right_points)
        return self.process_sample(OpennessSample(value=value, timestamp=timestamp))

    def process_no_face(self, timestamp):
        return self.process_sample(OpennessSample(value=NO_LANDMARK_OPENNESS, timestamp=timestamp))

    # Calibration actions ----------------------------------------------

    def calibrate_open(self):
        """Record the current openness as the open-eye reference."""
        with self._lock:
            if self._current_sample is None:
                print("[Warning] No openness sample yet - cannot calibrate open eyes")
                return None
            self.calibration.set_open(self._current_sample.value)
            return self._publish()

    def calibrate_blink(self):
        """Record the current openness as the closed-eye reference."""
        with self._lock:
            if self._current_sample is None:
                print("[Warning] No openness sample yet - cannot calibrate blink")
                return None
            self.calibration.set_blink(self._current_sample.value)
            return self._publish()

    def reset_calibration(self):
        with self._lock:
            self.calibration.reset()
            return self._publish()

    # Observable state -------------------------------------------------

    def snapshot(self):
        with self._lock:
            return self._snapshot

    def subscribe(self, callback):
        """Call callback(snapshot) after every state change."""
        with self._lock:
            self._listeners.append(callback)

    def unsubscribe(self, callback):
        with self._lock:
            if callback in self._listeners:
                self._listeners.remove(callback)

    def reset(self):
        """Drop blink state, e.g. when the sample stream stops."""
        with self._lock:
            self.detector.reset()
            self._current_sample = None
            return self._publish()

    # Internals --------------------------------------------------------

    def _dispatch(self):
        try:
            result = self.sink.trigger()
        except Exception as e:
            print(f"[Dispatch] Sink raised: {e}")
            return DispatchResult(ok=False, error=str(e))

        if not result.ok:
            print(f"[Warning] Gesture recognized but hotkey was not sent: {result.error}")
        return result

    def _build_snapshot(self):
        open_value, blink_value, threshold = self.calibration.snapshot()
        state = self.detector.state
        openness = self._current_sample.value if self._current_sample is not None else NO_LANDMARK_OPENNESS

        return SessionSnapshot(
            current_openness=openness,
            blink_detected=threshold is not None and state.is_blinking,
            threshold=threshold,
            open_value=open_value,
            blink_value=blink_value,
            pending_blink_count=state.pending_blink_count,
            gestures_recognized=self._gestures,
            last_dispatch=self._last_dispatch,
            last_gesture_time=self._last_gesture_time,
        )

    def _publish(self):
        self._snapshot = self._build_snapshot()
        for callback in list(self._listeners):
            callback(self._snapshot)
        return self._snapshot
