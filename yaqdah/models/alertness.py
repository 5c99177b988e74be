"""
Data shapes shared by the decision core, the dispatcher and the HTTP layer.
"""
import math
import numbers
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import List, Optional


class AlertnessState(IntEnum):
    """Ordered alertness levels. INITIALIZING holds until the first classification."""
    INITIALIZING = 0
    AWAKE = 1
    DISTRACTED = 2
    DROWSY = 3
    ASLEEP = 4

    @property
    def label(self):
        return self.name


class InterventionKind(Enum):
    SPEAK_MESSAGE = "speak_message"
    PLAY_ALARM = "play_alarm"
    STOP_ALL = "stop_all"
    SEND_EMERGENCY_ALERT = "send_emergency_alert"


# Keys produced by the face detector, with snake_case aliases
_LEFT_EYE_KEYS = ("leftEyeOpenProbability", "left_eye_open")
_RIGHT_EYE_KEYS = ("rightEyeOpenProbability", "right_eye_open")
_YAW_KEYS = ("headEulerAngleY", "head_yaw")
_TRACKING_KEYS = ("trackingId", "tracking_id")


def _lookup(data, keys):
    for key in keys:
        if key in data:
            return data[key]
    return None


def _is_real(value):
    return isinstance(value, numbers.Real) and not isinstance(value, bool) and math.isfinite(value)


def _tracking_id(value):
    # Tracking metadata never blocks a frame
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError, OverflowError):
        return None


def _probability(value):
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError("eye probability cannot be a boolean")
    value = float(value)
    if math.isnan(value) or not 0.0 <= value <= 1.0:
        raise ValueError(f"eye probability out of range: {value}")
    return value


@dataclass(frozen=True)
class ClassifierResult:
    """Per-frame face classification. Lives for exactly one evaluation."""
    left_eye_open: Optional[float] = None
    right_eye_open: Optional[float] = None
    head_yaw: Optional[float] = None
    tracking_id: Optional[int] = None

    @property
    def eye_openness(self):
        """Mean of the available eye probabilities, or None when neither eye was classified."""
        values = [v for v in (self.left_eye_open, self.right_eye_open) if v is not None]
        if not values:
            return None
        return sum(values) / len(values)

    def is_usable(self):
        """True when the eye fields are real numbers in [0, 1] and the yaw, if any, is finite."""
        for value in (self.left_eye_open, self.right_eye_open):
            if value is not None and not (_is_real(value) and 0.0 <= value <= 1.0):
                return False
        if self.head_yaw is not None and not _is_real(self.head_yaw):
            return False
        return self.eye_openness is not None

    @classmethod
    def from_mapping(cls, data):
        """
        Build a result from the detector's JSON payload.

        Returns None when the payload carries no face or cannot be read;
        callers treat that as "no signal" for the frame.
        """
        if not isinstance(data, dict):
            return None
        try:
            left = _probability(_lookup(data, _LEFT_EYE_KEYS))
            right = _probability(_lookup(data, _RIGHT_EYE_KEYS))
            yaw = _lookup(data, _YAW_KEYS)
            yaw = float(yaw) if yaw is not None else None
            if yaw is not None and not math.isfinite(yaw):
                yaw = None
        except (TypeError, ValueError):
            return None
        if left is None and right is None:
            return None
        return cls(left_eye_open=left, right_eye_open=right, head_yaw=yaw,
                   tracking_id=_tracking_id(_lookup(data, _TRACKING_KEYS)))


@dataclass(frozen=True)
class InterventionRequest:
    """A side effect requested by the state machine, discarded once dispatched."""
    kind: InterventionKind
    state: AlertnessState
    request_id: int = 0
    manual: bool = False


@dataclass(frozen=True)
class SessionContext:
    """Snapshot of one monitoring session as seen by the presentation layer."""
    state: AlertnessState = AlertnessState.INITIALIZING
    sms_sent: bool = False
    paused: bool = False
    message: str = ""
    camera_index: int = 0
    listening: bool = False
    # Bumped on camera switch and pause so late sink completions can be discarded
    epoch: int = 0
    score: Optional[float] = None

    def to_dict(self):
        return {
            "state": self.state.label,
            "sms_sent": self.sms_sent,
            "paused": self.paused,
            "message": self.message,
            "camera_index": self.camera_index,
            "listening": self.listening,
            "score": self.score,
        }


@dataclass
class Evaluation:
    """Outcome of one state machine step."""
    context: SessionContext
    intents: List[InterventionRequest] = field(default_factory=list)
    transitioned: bool = False
