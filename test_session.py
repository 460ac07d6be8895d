
import unittest
from unittest import mock
from dispatch import DispatchResult, DispatchSink
from gesture import OpennessSample
from session import DetectionSession

class SpySink(DispatchSink):
    def __init__(self, ok=True):
        self.calls = 0
        self.ok = ok

    def trigger(self):
        self.calls += 1
        if self.ok:
            return DispatchResult(ok=True)
        return DispatchResult(ok=False, error="not permitted")

class TestDetectionSession(unittest.TestCase):
    def _calibrated(self, sink):
        """Session calibrated to open=0.40, blink=0.20 (threshold 0.30)."""
        session = DetectionSession(sink)
        session.process_sample(OpennessSample(0.40, -10.0))
        session.calibrate_open()
        session.process_sample(OpennessSample(0.20, -9.0))
        session.calibrate_blink()
        session.process_sample(OpennessSample(0.40, -8.0))
        return session

    def _feed(self, session, samples):
        return [session.process_sample(OpennessSample(v, t)) for t, v in samples]

    def test_calibration_uses_current_openness(self):
        session = self._calibrated(SpySink())
        snap = session.snapshot()
        self.assertEqual(snap.open_value, 0.40)
        self.assertEqual(snap.blink_value, 0.20)
        self.assertAlmostEqual(snap.threshold, 0.30)

    def test_double_blink_dispatches_once(self):
        sink = SpySink()
        session = self._calibrated(sink)
        self._feed(session, [(0.0, 0.20), (0.3, 0.20), (0.5, 0.80), (0.9, 0.15), (1.0, 0.15)])
        self.assertEqual(sink.calls, 1)
        snap = session.snapshot()
        self.assertEqual(snap.gestures_recognized, 1)
        self.assertEqual(snap.pending_blink_count, 0)
        self.assertTrue(snap.last_dispatch.ok)
        self.assertEqual(snap.last_gesture_time, 0.9)

    def test_slow_double_blink_does_not_dispatch(self):
        sink = SpySink()
        session = self._calibrated(sink)
        self._feed(session, [(0.0, 0.20), (0.3, 0.20), (0.5, 0.80), (1.6, 0.15)])
        self.assertEqual(sink.calls, 0)
        self.assertEqual(session.snapshot().pending_blink_count, 1)

    def test_uncalibrated_session_never_dispatches(self):
        sink = SpySink()
        session = DetectionSession(sink)
        snaps = self._feed(session, [(0.0, 0.0), (0.1, 0.9), (0.2, 0.0), (0.3, 0.9), (0.4, 0.0)])
        self.assertEqual(sink.calls, 0)
        self.assertTrue(all(not s.blink_detected for s in snaps))
        self.assertIsNone(snaps[-1].threshold)
        self.assertEqual(snaps[-1].current_openness, 0.0)

    def test_blink_detected_follows_threshold(self):
        session = self._calibrated(SpySink())
        snaps = self._feed(session, [(0.0, 0.25), (0.1, 0.35)])
        self.assertTrue(snaps[0].blink_detected)
        self.assertFalse(snaps[1].blink_detected)

    def test_reset_calibration_suppresses_classification(self):
        sink = SpySink()
        session = self._calibrated(sink)
        session.reset_calibration()
        self._feed(session, [(0.0, 0.1), (0.2, 0.9), (0.4, 0.1)])
        self.assertEqual(sink.calls, 0)
        self.assertIsNone(session.snapshot().threshold)

    def test_failed_dispatch_is_reported_and_state_resets(self):
        """A denied hotkey does not wedge the detector; the next gesture fires again."""
        sink = SpySink(ok=False)
        session = self._calibrated(sink)
        self._feed(session, [(0.0, 0.1), (0.2, 0.9), (0.4, 0.1)])
        snap = session.snapshot()
        self.assertEqual(sink.calls, 1)
        self.assertFalse(snap.last_dispatch.ok)
        self.assertEqual(snap.last_dispatch.error, "not permitted")
        self.assertEqual(snap.pending_blink_count, 0)

        self._feed(session, [(0.5, 0.9), (3.0, 0.1), (3.1, 0.9), (3.4, 0.1)])
        self.assertEqual(sink.calls, 2)
        self.assertEqual(session.snapshot().gestures_recognized, 2)

    def test_raising_sink_is_contained(self):
        sink = mock.Mock()
        sink.trigger.side_effect = OSError("no display")
        session = self._calibrated(sink)
        self._feed(session, [(0.0, 0.1), (0.2, 0.9), (0.4, 0.1)])
        snap = session.snapshot()
        sink.trigger.assert_called_once_with()
        self.assertFalse(snap.last_dispatch.ok)
        self.assertIn("no display", snap.last_dispatch.error)

    def test_calibrate_without_sample_is_noop(self):
        session = DetectionSession(SpySink())
        self.assertIsNone(session.calibrate_open())
        self.assertIsNone(session.calibrate_blink())
        self.assertEqual(session.calibration.snapshot(), (None, None, None))

    def test_process_landmarks_and_no_face(self):
        session = DetectionSession(SpySink())
        snap = session.process_landmarks([(0.0, 0.0), (1.0, 0.2)], [(0.0, 0.0), (1.0, 0.4)], 0.0)
        self.assertAlmostEqual(snap.current_openness, 0.3)
        snap = session.process_no_face(0.1)
        self.assertEqual(snap.current_openness, 1.0)
        snap = session.process_landmarks(None, [(0.0, 0.0), (1.0, 0.4)], 0.2)
        self.assertEqual(snap.current_openness, 1.0)

    def test_no_face_ends_blink(self):
        session = self._calibrated(SpySink())
        session.process_sample(OpennessSample(0.1, 0.0))
        self.assertTrue(session.snapshot().blink_detected)
        self.assertFalse(session.process_no_face(0.1).blink_detected)

    def test_subscribers_receive_snapshots(self):
        session = self._calibrated(SpySink())
        received = []
        session.subscribe(received.append)
        self._feed(session, [(0.0, 0.1), (0.1, 0.9)])
        session.reset_calibration()
        self.assertEqual(len(received), 3)
        self.assertTrue(received[0].blink_detected)
        self.assertIsNone(received[2].threshold)

        session.unsubscribe(received.append)
        self._feed(session, [(0.2, 0.1)])
        self.assertEqual(len(received), 3)

    def test_subscriber_may_read_snapshot(self):
        session = DetectionSession(SpySink())
        seen = []
        session.subscribe(lambda snap: seen.append(session.snapshot() is snap))
        session.process_sample(OpennessSample(0.5, 0.0))
        self.assertEqual(seen, [True])

    def test_reset_drops_blink_state(self):
        session = self._calibrated(SpySink())
        session.process_sample(OpennessSample(0.1, 0.0))
        snap = session.reset()
        self.assertFalse(snap.blink_detected)
        self.assertEqual(snap.pending_blink_count, 0)
        self.assertEqual(snap.current_openness, 1.0)
        self.assertAlmostEqual(snap.threshold, 0.30)

if __name__ == '__main__':
    unittest.main()
