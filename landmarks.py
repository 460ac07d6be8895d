"""
MediaPipe face mesh eye landmarks and eye openness estimation.

The face landmarker returns 478 normalized landmarks per face. Each eye is
described by a 16-point contour; the openness of an eye is the height/width
ratio of the contour's axis-aligned bounding box. A closing eyelid shrinks the
height while the width stays roughly constant, so the ratio drops on a blink.
"""

import numpy as np

from config import Config


# =============================================================================
# MEDIAPIPE FACE MESH LANDMARKS
# =============================================================================

# Eye contour landmarks (complete eye outline, upper and lower lid)
LEFT_EYE_CONTOUR = [33, 7, 163, 144, 145, 153, 154, 155, 133, 173, 157, 158, 159, 160, 161, 246]
RIGHT_EYE_CONTOUR = [362, 382, 381, 380, 374, 373, 390, 249, 263, 466, 388, 387, 386, 385, 384, 398]

# Openness used when no landmarks are available (biased toward "no blink")
NO_LANDMARK_OPENNESS = Config.NO_LANDMARK_OPENNESS


def eye_points(face_landmarks, contour_indices):
    """
    Extract the normalized (x, y) points of one eye from face landmarks.

    Args:
        face_landmarks: Sequence of landmarks with .x and .y attributes
        contour_indices: Landmark indices describing the eye contour

    Returns:
        list: [(x, y), ...] or None if any landmark is missing
    """
    try:
        return [(float(face_landmarks[idx].x), float(face_landmarks[idx].y))
                for idx in contour_indices]
    except (IndexError, KeyError, AttributeError, TypeError):
        return None


def eye_openness_ratio(points):
    """
    Calculate the openness ratio of a single eye.

    ratio = bbox_height / bbox_width

    An empty set or a zero-width box (all points share an x coordinate) is
    defined as fully open and returns 1.0.

    Args:
        points: Sequence or (N, 2) array of (x, y) points

    Returns:
        float: Openness ratio (>= 0)
    """
    pts = np.asarray(points, dtype=float).reshape(-1, 2)
    if pts.size == 0:
        return 1.0

    width = float(pts[:, 0].max() - pts[:, 0].min())
    height = float(pts[:, 1].max() - pts[:, 1].min())

    if width == 0:
        return 1.0

    return height / width


def estimate_openness(left_points, right_points):
    """
    Average openness over both eyes.

    If either eye has no points the no-landmark default is returned instead,
    so a partially tracked face never produces a blink.
    """
    if left_points is None or len(left_points) == 0:
        return NO_LANDMARK_OPENNESS
    if right_points is None or len(right_points) == 0:
        return NO_LANDMARK_OPENNESS

    left_ratio = eye_openness_ratio(left_points)
    right_ratio = eye_openness_ratio(right_points)
    return (left_ratio + right_ratio) / 2.0
