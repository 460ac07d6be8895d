"""
User calibration of the blink threshold.
"""

import threading


class Calibration:
    """
    Stores the user's reference openness values.

    Two references are captured from the live openness signal:
        - open:  eyes relaxed and open
        - blink: eyes closed

    The decision threshold is the midpoint of the two. Until both are set
    there is no threshold and blink classification is suppressed.

    Values are kept in memory only. There is no check that the open value is
    larger than the blink value; an inverted calibration still yields a
    threshold.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._open_value = None
        self._blink_value = None

    @property
    def open_value(self):
        with self._lock:
            return self._open_value

    @property
    def blink_value(self):
        with self._lock:
            return self._blink_value

    def set_open(self, value):
        """Store the open-eye reference and return the resulting threshold."""
        with self._lock:
            self._open_value = float(value)
            threshold = self._threshold_locked()
        print(f"[Calibration] Open eyes: {float(value):.3f}{self._describe(threshold)}")
        return threshold

    def set_blink(self, value):
        """Store the closed-eye reference and return the resulting threshold."""
        with self._lock:
            self._blink_value = float(value)
            threshold = self._threshold_locked()
        print(f"[Calibration] Blink: {float(value):.3f}{self._describe(threshold)}")
        return threshold

    def reset(self):
        """Clear both references."""
        with self._lock:
            self._open_value = None
            self._blink_value = None
        print("[Calibration] Reset - please calibrate again")

    def threshold(self):
        """Midpoint of both references, or None if either is missing."""
        with self._lock:
            return self._threshold_locked()

    def snapshot(self):
        """Return a consistent (open_value, blink_value, threshold) triple."""
        with self._lock:
            return self._open_value, self._blink_value, self._threshold_locked()

    def _threshold_locked(self):
        if self._open_value is None or self._blink_value is None:
            return None
        return (self._open_value + self._blink_value) / 2.0

    @staticmethod
    def _describe(threshold):
        if threshold is None:
            return ""
        return f" -> threshold {threshold:.3f}"
