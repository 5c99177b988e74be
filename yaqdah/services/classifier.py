# 얼굴 분석 결과 변환

import logging
import numpy as np

from yaqdah.models.alertness import ClassifierResult

logger = logging.getLogger(__name__)

# landmark_2d_106 indices (upper lid, lower lid, inner corner, outer corner)
LEFT_EYE_POINTS = (33, 40, 36, 39)
RIGHT_EYE_POINTS = (87, 94, 90, 93)

# Eye aspect ratios treated as fully closed / fully open
CLOSED_EAR = 0.12
OPEN_EAR = 0.30


def largest_face(faces):
    """주요 얼굴 (가장 큰 얼굴)"""
    if not faces:
        return None
    return max(faces, key=lambda face: (face.bbox[2] - face.bbox[0]) * (face.bbox[3] - face.bbox[1]))


def eye_aspect_ratio(landmarks, points):
    top, bottom, inner, outer = points
    height = np.linalg.norm(landmarks[top] - landmarks[bottom])
    width = np.linalg.norm(landmarks[inner] - landmarks[outer])
    if width == 0:
        return None
    return float(height / width)


def openness_probability(ear, closed_ear=CLOSED_EAR, open_ear=OPEN_EAR):
    """Linear map of an eye aspect ratio onto [0, 1]."""
    if ear is None:
        return None
    return float(np.clip((ear - closed_ear) / (open_ear - closed_ear), 0.0, 1.0))


def result_from_face(face, closed_ear=CLOSED_EAR, open_ear=OPEN_EAR):
    """
    Convert an InsightFace-style face into a ClassifierResult.

    Returns None when the face carries no usable landmarks; the state
    machine treats that as no signal.
    """
    landmarks = getattr(face, "landmark_2d_106", None)
    if landmarks is None:
        return None
    landmarks = np.asarray(landmarks, dtype=float)
    if landmarks.ndim != 2 or len(landmarks) < 106:
        logger.debug("Face has incomplete landmarks, skipping frame")
        return None

    left = openness_probability(eye_aspect_ratio(landmarks, LEFT_EYE_POINTS), closed_ear, open_ear)
    right = openness_probability(eye_aspect_ratio(landmarks, RIGHT_EYE_POINTS), closed_ear, open_ear)
    if left is None and right is None:
        return None

    yaw = None
    pose = getattr(face, "pose", None)
    if pose is not None and len(pose) >= 2:
        # InsightFace pose is (pitch, yaw, roll) in degrees
        yaw = float(pose[1])

    return ClassifierResult(
        left_eye_open=left,
        right_eye_open=right,
        head_yaw=yaw,
        tracking_id=getattr(face, "tracking_id", None),
    )


def result_from_faces(faces):
    face = largest_face(faces)
    if face is None:
        return None
    return result_from_face(face)
