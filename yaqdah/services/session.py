"""
Monitoring session.
Binds one state machine to its dispatcher, enforces one evaluation in
flight, and exposes the manual controls used by the presentation layer.
"""
import logging
import threading

from yaqdah.models.alertness import InterventionKind
from yaqdah.models.phrases import status_text
from yaqdah.services.classifier import result_from_faces

logger = logging.getLogger(__name__)


class MonitoringSession:

    def __init__(self, machine, dispatcher, camera_count=1):
        self.machine = machine
        self.dispatcher = dispatcher
        self.camera_count = camera_count
        self.dropped_frames = 0
        self._in_flight = threading.Lock()
        self._state_lock = threading.RLock()
        self._latest_speech_id = 0

    @property
    def context(self):
        with self._state_lock:
            return self.machine.context

    def submit_result(self, result, now=None):
        """Evaluate a classifier result. Returns False when the frame was dropped."""
        return self._evaluate(lambda: result, now)

    def submit_frame(self, frame, detector=result_from_faces, now=None):
        """
        Run the detector on a frame and evaluate its result.

        Args:
            frame: anything the detector understands (faces list by default)
            detector: callable(frame) -> ClassifierResult or None
        """
        return self._evaluate(lambda: detector(frame), now)

    def _evaluate(self, classify, now):
        if not self._in_flight.acquire(blocking=False):
            self.dropped_frames += 1
            logger.debug("Evaluation still in flight, frame dropped")
            return False
        try:
            try:
                result = classify()
            except Exception as e:
                logger.error(f"Classifier failed, treating frame as no signal: {e}")
                result = None

            with self._state_lock:
                evaluation = self.machine.process(result, now)
                self._track_speech(evaluation.intents)
                epoch = evaluation.context.epoch
            self._dispatch(evaluation.intents, epoch)
            return True
        finally:
            self._in_flight.release()

    def _track_speech(self, intents):
        for request in intents:
            if request.kind == InterventionKind.SPEAK_MESSAGE:
                self._latest_speech_id = request.request_id

    def _dispatch(self, intents, epoch):
        if intents:
            self.dispatcher.dispatch(intents, on_message=self._message_handler(epoch))

    def _message_handler(self, epoch):
        def on_message(request, text):
            with self._state_lock:
                if request.request_id != self._latest_speech_id:
                    logger.debug(f"Discarding stale phrase for request #{request.request_id}")
                    return False
                return self.machine.apply_message(text, epoch)
        return on_message

    def pause(self):
        with self._state_lock:
            context = self.machine.pause()
            self.machine.apply_message(status_text("paused", self.machine.config.language), context.epoch)
            return self.machine.context

    def resume(self):
        with self._state_lock:
            context = self.machine.resume()
            self.machine.apply_message(status_text("ready", self.machine.config.language), context.epoch)
            return self.machine.context

    def manual_emergency(self):
        with self._state_lock:
            evaluation = self.machine.manual_emergency()
            self.machine.apply_message(status_text("manual_sos", self.machine.config.language), evaluation.context.epoch)
            epoch = evaluation.context.epoch
        self._dispatch(evaluation.intents, epoch)
        return self.context

    def stop_alarm(self):
        with self._state_lock:
            evaluation = self.machine.stop_alarm()
            # Any phrase still being generated belongs to the dismissed alarm
            self._latest_speech_id = 0
            epoch = evaluation.context.epoch
        self._dispatch(evaluation.intents, epoch)
        return self.context

    def switch_camera(self):
        """Advance to the next camera. Returns None when there is nothing to switch to."""
        if self.camera_count < 2:
            logger.warning("No other cameras found")
            return None
        with self._state_lock:
            index = (self.machine.context.camera_index + 1) % self.camera_count
            logger.info(f"Switching to camera {index}")
            return self.machine.switch_camera(index)

    def set_listening(self, listening):
        with self._state_lock:
            return self.machine.set_listening(listening)

    def snapshot(self):
        data = self.context.to_dict()
        data["dropped_frames"] = self.dropped_frames
        return data
