"""
Face landmark perception using MediaPipe FaceLandmarker (Tasks API).

Given a BGR frame, returns the normalized contour points of both eyes of the
first face, or None when no face is found.
"""

import os
import urllib.request
from dataclasses import dataclass
from typing import List, Optional, Tuple

import cv2
import mediapipe as mp
from mediapipe.tasks import python as mp_tasks
from mediapipe.tasks.python import vision as mp_vision

from config import Config
from landmarks import LEFT_EYE_CONTOUR, RIGHT_EYE_CONTOUR, eye_points


Point = Tuple[float, float]


@dataclass
class EyeLandmarks:
    """Eye contour points of one face in one frame."""
    left: Optional[List[Point]]
    right: Optional[List[Point]]


def download_face_landmarker_model(path=Config.FACE_LANDMARKER_MODEL_PATH,
                                   url=Config.FACE_LANDMARKER_MODEL_URL):
    """Download the FaceLandmarker model if it doesn't exist."""
    if not os.path.exists(path):
        print("[Info] Downloading FaceLandmarker model...")
        urllib.request.urlretrieve(url, path)
        print(f"[Info] Model downloaded to {path}")
    return path


class FaceLandmarkService:
    """
    Wraps the MediaPipe FaceLandmarker for single-face eye extraction.

    Runs in VIDEO mode so landmarks are tracked between frames; frames must be
    passed with increasing timestamps.
    """

    def __init__(self, model_path=Config.FACE_LANDMARKER_MODEL_PATH,
                 min_detection_confidence=Config.MIN_DETECTION_CONFIDENCE,
                 min_tracking_confidence=Config.MIN_TRACKING_CONFIDENCE):
        download_face_landmarker_model(model_path)

        base_options = mp_tasks.BaseOptions(model_asset_path=model_path)
        options = mp_vision.FaceLandmarkerOptions(
            base_options=base_options,
            running_mode=mp_vision.RunningMode.VIDEO,
            num_faces=1,
            min_face_detection_confidence=min_detection_confidence,
            min_face_presence_confidence=min_tracking_confidence,
            min_tracking_confidence=min_tracking_confidence,
            output_face_blendshapes=False,
            output_facial_transformation_matrixes=False
        )
        self.face_landmarker = mp_vision.FaceLandmarker.create_from_options(options)
        self._last_timestamp_ms = -1

    def detect(self, frame, timestamp):
        """
        Detect eye landmarks in a BGR frame.

        Args:
            frame: BGR image
            timestamp: Capture time in seconds (monotonic clock)

        Returns:
            EyeLandmarks or None if no face is found
        """
        rgb_frame = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=rgb_frame)
        # The landmarker rejects timestamps that do not increase
        timestamp_ms = max(int(timestamp * 1000), self._last_timestamp_ms + 1)
        self._last_timestamp_ms = timestamp_ms
        results = self.face_landmarker.detect_for_video(mp_image, timestamp_ms)

        if not results.face_landmarks:
            return None

        face = results.face_landmarks[0]
        return EyeLandmarks(
            left=eye_points(face, LEFT_EYE_CONTOUR),
            right=eye_points(face, RIGHT_EYE_CONTOUR),
        )

    def close(self):
        """Release resources."""
        if self.face_landmarker:
            self.face_landmarker.close()
            self.face_landmarker = None
