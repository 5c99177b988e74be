"""
Intervention dispatcher.
Turns the state machine's intents into calls on the audio, text and SMS
sinks. Slow work runs in the background so frame evaluation never waits.
"""
import logging
import threading

from yaqdah.models.alertness import InterventionKind
from yaqdah.models.phrases import fallback_phrase
from yaqdah.utils.helpers import truncate_text

logger = logging.getLogger(__name__)


def run_in_thread(target, *args):
    thread = threading.Thread(target=target, args=args, daemon=True)
    thread.start()
    return thread


class InterventionDispatcher:
    """
    Args:
        audio: object with speak(text), play_alarm() and stop_all()
        notifier: object with send_emergency_alert(manual=False)
        message_source: callable(state_label) -> phrase
        runner: callable(target, *args) used for background work
        language: language of the fallback phrases
    """

    def __init__(self, audio, notifier, message_source, runner=run_in_thread, language="ar"):
        self.audio = audio
        self.notifier = notifier
        self.message_source = message_source
        self.runner = runner
        self.language = language

    def dispatch(self, intents, on_message=None):
        """Handle intents in emission order. on_message(request, text) reports spoken phrases and
        returns False when the phrase should no longer be spoken."""
        for request in intents:
            try:
                self._dispatch_one(request, on_message)
            except Exception as e:
                logger.error(f"Dispatch of {request.kind.value} failed: {e}")

    def _dispatch_one(self, request, on_message):
        if request.kind == InterventionKind.STOP_ALL:
            self.audio.stop_all()
        elif request.kind == InterventionKind.PLAY_ALARM:
            self.audio.play_alarm()
        elif request.kind == InterventionKind.SEND_EMERGENCY_ALERT:
            logger.warning(f"Sending emergency alert (manual={request.manual})")
            self.runner(self._send_alert, request)
        elif request.kind == InterventionKind.SPEAK_MESSAGE:
            self.runner(self._speak, request, on_message)

    def _send_alert(self, request):
        try:
            self.notifier.send_emergency_alert(manual=request.manual)
        except Exception as e:
            logger.error(f"Emergency alert failed: {e}")

    def _speak(self, request, on_message):
        label = request.state.label
        try:
            text = self.message_source(label)
        except Exception as e:
            logger.error(f"Message generation failed for {label}: {e}")
            text = None
        if not text:
            text = fallback_phrase(label, self.language)

        logger.info(f"Intervention #{request.request_id} ({label}): {truncate_text(text, 60)}")
        if on_message is not None:
            try:
                if on_message(request, text) is False:
                    logger.info(f"Intervention #{request.request_id} superseded, not spoken")
                    return
            except Exception as e:
                logger.error(f"Message callback failed: {e}")
        try:
            self.audio.speak(text)
        except Exception as e:
            logger.error(f"Speech failed: {e}")
