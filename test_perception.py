
import unittest
from unittest import mock
import numpy as np
import perception
from landmarks import LEFT_EYE_CONTOUR

class MockLandmark:
    def __init__(self, x, y):
        self.x = x
        self.y = y

class TestFaceLandmarkService(unittest.TestCase):
    def setUp(self):
        download = mock.patch.object(perception, "download_face_landmarker_model")
        download.start()
        self.addCleanup(download.stop)
        create = mock.patch.object(perception.mp_vision.FaceLandmarker, "create_from_options")
        self.create = create.start()
        self.addCleanup(create.stop)
        self.landmarker = self.create.return_value
        self.service = perception.FaceLandmarkService(model_path="unused.task")
        self.frame = np.zeros((8, 8, 3), dtype=np.uint8)

    def _results(self, faces):
        results = mock.Mock()
        results.face_landmarks = faces
        return results

    def test_uses_video_mode_with_tracking_confidence(self):
        options = self.create.call_args.args[0]
        self.assertEqual(options.running_mode, perception.mp_vision.RunningMode.VIDEO)
        self.assertEqual(options.min_tracking_confidence, perception.Config.MIN_TRACKING_CONFIDENCE)

    def test_timestamps_are_sent_in_milliseconds_and_increase(self):
        self.landmarker.detect_for_video.return_value = self._results([])
        self.service.detect(self.frame, 1.5)
        self.service.detect(self.frame, 1.5)  # same capture time
        self.service.detect(self.frame, 1.2)  # clock went backwards
        sent = [c.args[1] for c in self.landmarker.detect_for_video.call_args_list]
        self.assertEqual(sent, [1500, 1501, 1502])

    def test_no_face_returns_none(self):
        self.landmarker.detect_for_video.return_value = self._results([])
        self.assertIsNone(self.service.detect(self.frame, 0.0))

    def test_face_returns_eye_points(self):
        face = [MockLandmark(i / 1000.0, 0.5) for i in range(478)]
        self.landmarker.detect_for_video.return_value = self._results([face])
        eyes = self.service.detect(self.frame, 0.0)
        self.assertEqual(len(eyes.left), len(LEFT_EYE_CONTOUR))
        self.assertEqual(eyes.left[0], (0.033, 0.5))
        self.assertIsNotNone(eyes.right)

    def test_close_releases_landmarker(self):
        self.service.close()
        self.landmarker.close.assert_called_once_with()
        self.assertIsNone(self.service.face_landmarker)

if __name__ == '__main__':
    unittest.main()
