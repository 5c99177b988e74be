import pytest

from yaqdah.models.alertness import ClassifierResult
from yaqdah.services.dispatcher import InterventionDispatcher
from yaqdah.services.session import MonitoringSession
from yaqdah.services.state_machine import AlertnessStateMachine, DecisionConfig

# Eye openness values that land in each default band
AWAKE_EYES = 1.0
DISTRACTED_EYES = 0.5
DROWSY_EYES = 0.3
ASLEEP_EYES = 0.0


def face(openness, yaw=None):
    return ClassifierResult(left_eye_open=openness, right_eye_open=openness, head_yaw=yaw)


class FakeAudio:
    def __init__(self):
        self.calls = []

    def speak(self, text):
        self.calls.append(("speak", text))

    def play_alarm(self):
        self.calls.append(("play_alarm",))

    def stop_all(self):
        self.calls.append(("stop_all",))


class FakeNotifier:
    def __init__(self, fail=False):
        self.alerts = []
        self.fail = fail

    def send_emergency_alert(self, manual=False):
        self.alerts.append(manual)
        if self.fail:
            raise RuntimeError("sms gateway down")
        return 1


def sync_runner(target, *args):
    target(*args)


@pytest.fixture
def machine():
    return AlertnessStateMachine(DecisionConfig(language="en"))


@pytest.fixture
def audio():
    return FakeAudio()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def dispatcher(audio, notifier):
    return InterventionDispatcher(
        audio=audio,
        notifier=notifier,
        message_source=lambda label: f"phrase for {label}",
        runner=sync_runner,
        language="en",
    )


@pytest.fixture
def session(machine, dispatcher):
    return MonitoringSession(machine, dispatcher, camera_count=2)
