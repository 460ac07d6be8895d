"""
Configuration settings for the blink-to-hotkey system.
"""

import sys


class Config:
    """Configuration parameters for the blink hotkey bridge."""

    # Camera settings
    CAMERA_INDEX = 0
    CAMERA_WIDTH = 640
    CAMERA_HEIGHT = 480
    # Frames waiting for the consumer; older frames are dropped when it lags
    FRAME_QUEUE_SIZE = 2

    # Face landmarker (MediaPipe Tasks API)
    FACE_LANDMARKER_MODEL_PATH = "face_landmarker.task"
    FACE_LANDMARKER_MODEL_URL = (
        "https://storage.googleapis.com/mediapipe-models/face_landmarker/"
        "face_landmarker/float16/1/face_landmarker.task"
    )
    MIN_DETECTION_CONFIDENCE = 0.5
    MIN_TRACKING_CONFIDENCE = 0.5

    # Openness reported when no face / eye landmarks are found ("fully open")
    NO_LANDMARK_OPENNESS = 1.0

    # Double blink gesture parameters
    GESTURE_BLINKS = 2  # Rising edges required to fire the hotkey
    GESTURE_WINDOW = 1.0  # Max time (seconds) between consecutive blink starts

    # Hotkey sent on a recognized gesture
    PASTE_HOTKEY = ("command", "v") if sys.platform == "darwin" else ("ctrl", "v")

    # Preview window
    WINDOW_NAME = "Blink Hotkey"
    FLASH_DURATION = 0.6  # Seconds the "PASTE!" banner stays on screen

    # Visual feedback colors (BGR format)
    COLOR_GREEN = (0, 255, 0)
    COLOR_RED = (0, 0, 255)
    COLOR_YELLOW = (0, 255, 255)
    COLOR_ORANGE = (0, 165, 255)
    COLOR_WHITE = (255, 255, 255)
    COLOR_CYAN = (255, 255, 0)
