import pytest

from yaqdah.models.alertness import AlertnessState, ClassifierResult, SessionContext
from yaqdah.models.phrases import fallback_phrase, status_text


def test_from_detector_payload():
    result = ClassifierResult.from_mapping({
        "leftEyeOpenProbability": 0.9,
        "rightEyeOpenProbability": 0.7,
        "headEulerAngleY": -12.5,
        "trackingId": 3,
    })
    assert result == ClassifierResult(left_eye_open=0.9, right_eye_open=0.7, head_yaw=-12.5, tracking_id=3)
    assert result.eye_openness == pytest.approx(0.8)


def test_snake_case_aliases():
    result = ClassifierResult.from_mapping({"left_eye_open": 0.2, "head_yaw": 4})
    assert result.left_eye_open == 0.2
    assert result.right_eye_open is None
    assert result.eye_openness == 0.2


@pytest.mark.parametrize("payload", [
    None,
    [],
    {},
    {"trackingId": 1},
    {"leftEyeOpenProbability": "wide"},
    {"leftEyeOpenProbability": 1.5},
    {"leftEyeOpenProbability": -0.1, "rightEyeOpenProbability": 0.5},
    {"leftEyeOpenProbability": True},
    {"leftEyeOpenProbability": 0.5, "headEulerAngleY": "left"},
])
def test_unreadable_payloads_are_no_signal(payload):
    assert ClassifierResult.from_mapping(payload) is None


def test_nan_yaw_dropped():
    result = ClassifierResult.from_mapping({"leftEyeOpenProbability": 0.5, "headEulerAngleY": float("nan")})
    assert result.head_yaw is None


def test_states_are_ordered():
    assert AlertnessState.INITIALIZING < AlertnessState.AWAKE < AlertnessState.DISTRACTED
    assert AlertnessState.DROWSY < AlertnessState.ASLEEP


def test_context_to_dict():
    data = SessionContext(state=AlertnessState.DROWSY, message="hi").to_dict()
    assert data["state"] == "DROWSY"
    assert data["message"] == "hi"
    assert "epoch" not in data


def test_phrases_fall_back_to_english_for_unknown_language():
    assert fallback_phrase("ASLEEP", "fr") == "Wake up now!"
    assert fallback_phrase("DISTRACTED", "ar") == "الرجاء الانتباه"
    assert status_text("ready", "en") == "System running"


def test_infinite_yaw_dropped():
    result = ClassifierResult.from_mapping({"leftEyeOpenProbability": 0.5, "headEulerAngleY": float("inf")})
    assert result.head_yaw is None
    assert result.is_usable()


@pytest.mark.parametrize("tracking_id", ["abc", 1.5e400, [3], {"id": 3}])
def test_bad_tracking_id_keeps_eye_data(tracking_id):
    result = ClassifierResult.from_mapping({
        "leftEyeOpenProbability": 0.5,
        "rightEyeOpenProbability": 0.3,
        "trackingId": tracking_id,
    })
    assert result is not None
    assert result.tracking_id is None
    assert result.left_eye_open == 0.5
    assert result.right_eye_open == 0.3


def test_numeric_string_tracking_id_is_converted():
    result = ClassifierResult.from_mapping({"leftEyeOpenProbability": 0.5, "trackingId": "7"})
    assert result.tracking_id == 7
