"""
Alertness state machine.
Maps one classifier result at a time onto an alertness state and the
interventions that the transition calls for.
"""
import itertools
import logging
import time
from dataclasses import dataclass, replace

from yaqdah.models.alertness import (
    AlertnessState,
    Evaluation,
    InterventionKind,
    InterventionRequest,
    SessionContext,
)
from yaqdah.models.phrases import status_text
from yaqdah.services.cadence import CadenceGate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DecisionConfig:
    """Tunable thresholds for the drowsiness score and the speech cadence."""
    distracted_threshold: float = 0.35
    drowsy_threshold: float = 0.6
    asleep_threshold: float = 0.85
    head_weight: float = 0.5
    head_yaw_limit: float = 45.0
    speech_interval: float = 5.0
    language: str = "ar"

    def __post_init__(self):
        bands = (self.distracted_threshold, self.drowsy_threshold, self.asleep_threshold)
        if not 0.0 < bands[0] < bands[1] < bands[2] <= 1.0:
            raise ValueError(f"Score bands must increase strictly within (0, 1]: {bands}")
        if self.head_yaw_limit <= 0:
            raise ValueError("head_yaw_limit must be positive")

    @classmethod
    def from_config(cls, config):
        return cls(
            distracted_threshold=config["DISTRACTED_THRESHOLD"],
            drowsy_threshold=config["DROWSY_THRESHOLD"],
            asleep_threshold=config["ASLEEP_THRESHOLD"],
            head_weight=config["HEAD_WEIGHT"],
            head_yaw_limit=config["HEAD_YAW_LIMIT"],
            speech_interval=config["SPEECH_INTERVAL"],
            language=config.get("LANGUAGE", "ar"),
        )


def drowsiness_score(result, config):
    """Eye closure plus weighted head deviation, clamped to [0, 1]."""
    openness = result.eye_openness
    score = 1.0 - openness
    if result.head_yaw is not None and config.head_weight:
        deviation = min(abs(result.head_yaw) / config.head_yaw_limit, 1.0)
        score += config.head_weight * deviation
    return max(0.0, min(score, 1.0))


def state_for_score(score, config):
    if score < config.distracted_threshold:
        return AlertnessState.AWAKE
    if score < config.drowsy_threshold:
        return AlertnessState.DISTRACTED
    if score < config.asleep_threshold:
        return AlertnessState.DROWSY
    return AlertnessState.ASLEEP


class AlertnessStateMachine:
    """Single-session decision core.

    All mutation goes through process() and the manual override methods;
    readers take the immutable ``context`` snapshot.
    """

    def __init__(self, config=None, cadence=None, clock=None):
        self.config = config or DecisionConfig()
        self.cadence = cadence or CadenceGate(self.config.speech_interval)
        self.clock = clock or time.monotonic
        self.context = SessionContext(message=status_text("ready", self.config.language))
        self._request_ids = itertools.count(1)

    @property
    def state(self):
        return self.context.state

    def _request(self, kind, state, manual=False):
        return InterventionRequest(kind=kind, state=state, request_id=next(self._request_ids), manual=manual)

    def process(self, result, now=None):
        """
        Evaluate one classifier result.

        Args:
            result: ClassifierResult, or None when no face was found
            now: monotonic timestamp, defaults to the machine's clock

        Returns:
            Evaluation with the updated context and the intents to dispatch
        """
        if self.context.paused:
            return Evaluation(self.context)
        if result is None or not result.is_usable():
            return Evaluation(self.context)

        now = self.clock() if now is None else now
        score = drowsiness_score(result, self.config)
        new_state = state_for_score(score, self.config)

        if new_state == self.context.state:
            self.context = replace(self.context, score=score)
            return Evaluation(self.context)

        logger.info(f"Alertness {self.context.state.label} -> {new_state.label} (score {score:.2f})")
        self.context = replace(self.context, state=new_state, score=score)
        intents = self._enter(new_state, now)
        return Evaluation(self.context, intents, transitioned=True)

    def _enter(self, state, now):
        intents = []
        if state == AlertnessState.AWAKE:
            intents.append(self._request(InterventionKind.STOP_ALL, state))
            self.context = replace(self.context, sms_sent=False)
        elif state in (AlertnessState.DISTRACTED, AlertnessState.DROWSY):
            if self.cadence.try_dispatch(now):
                intents.append(self._request(InterventionKind.SPEAK_MESSAGE, state))
        elif state == AlertnessState.ASLEEP:
            self.context = replace(self.context, message=status_text("sos", self.config.language))
            intents.append(self._request(InterventionKind.PLAY_ALARM, state))
            if not self.context.sms_sent:
                intents.append(self._request(InterventionKind.SEND_EMERGENCY_ALERT, state))
                self.context = replace(self.context, sms_sent=True)
            if self.cadence.try_dispatch(now):
                intents.append(self._request(InterventionKind.SPEAK_MESSAGE, state))
        return intents

    def pause(self):
        if not self.context.paused:
            logger.info("Monitoring paused")
        self.context = replace(self.context, paused=True, epoch=self.context.epoch + 1)
        return self.context

    def resume(self):
        if self.context.paused:
            logger.info("Monitoring resumed")
        self.context = replace(self.context, paused=False)
        return self.context

    def manual_emergency(self):
        """Emergency alert requested by the driver. Never gated, never changes state."""
        logger.warning("Manual emergency alert triggered")
        intent = self._request(InterventionKind.SEND_EMERGENCY_ALERT, self.context.state, manual=True)
        return Evaluation(self.context, [intent])

    def stop_alarm(self):
        """Driver dismissed the alarm: back to AWAKE from any state and re-arm the alert."""
        previous = self.context.state
        self.context = replace(
            self.context,
            state=AlertnessState.AWAKE,
            sms_sent=False,
            message=status_text("alarm_stopped", self.config.language),
        )
        logger.info(f"Alarm acknowledged ({previous.label} -> AWAKE)")
        intent = self._request(InterventionKind.STOP_ALL, AlertnessState.AWAKE)
        return Evaluation(self.context, [intent], transitioned=previous != AlertnessState.AWAKE)

    def switch_camera(self, camera_index):
        self.context = replace(self.context, camera_index=camera_index, epoch=self.context.epoch + 1)
        return self.context

    def set_listening(self, listening):
        self.context = replace(self.context, listening=bool(listening))
        return self.context

    def apply_message(self, text, epoch):
        """Show text produced by a sink. Ignored when the session has moved on."""
        if epoch != self.context.epoch:
            logger.debug("Discarding message from a previous session epoch")
            return False
        self.context = replace(self.context, message=text)
        return True
