# 음성 안내 및 경보음 재생

import os
import queue
import logging
import threading

import pygame
import pyttsx3

logger = logging.getLogger(__name__)


def select_voice(engine, language):
    """Voice id whose languages or name mention the target language, if any."""
    try:
        voices = engine.getProperty("voices") or []
    except Exception as e:
        logger.warning(f"Voice listing failed: {e}")
        return None

    for voice in voices:
        languages = [
            lang.decode(errors="ignore") if isinstance(lang, bytes) else str(lang)
            for lang in (getattr(voice, "languages", None) or [])
        ]
        if any(language in lang.lower() for lang in languages):
            return voice.id
    for voice in voices:
        if language in (getattr(voice, "id", "") or "").lower():
            return voice.id
    return None


class SpeechService:
    """Text-to-speech on a single worker thread.

    A new request replaces anything still waiting; the engine is only
    touched from the worker thread.
    """

    def __init__(self, language="ar", rate=150, engine_factory=None):
        self.language = language
        self.rate = rate
        self.engine_factory = engine_factory or pyttsx3.init
        self.engine = None
        self.is_speaking = False
        self.speech_queue = queue.Queue()
        self.worker_thread = threading.Thread(target=self._speech_worker, name="speech", daemon=True)
        self.worker_thread.start()

    def _init_engine(self):
        engine = self.engine_factory()
        engine.setProperty("rate", self.rate)
        voice = select_voice(engine, self.language)
        if voice:
            engine.setProperty("voice", voice)
        else:
            logger.warning(f"No '{self.language}' voice installed, using system default")
        return engine

    def _speech_worker(self):
        while True:
            text = self.speech_queue.get()
            if text is None:
                self.speech_queue.task_done()
                break

            self.is_speaking = True
            try:
                if self.engine is None:
                    self.engine = self._init_engine()
                self.engine.say(text)
                self.engine.runAndWait()
            except Exception as e:
                logger.error(f"TTS error: {e}")
                self.engine = None

            self.is_speaking = False
            self.speech_queue.task_done()

    def _drain(self):
        while True:
            try:
                self.speech_queue.get_nowait()
            except queue.Empty:
                return
            self.speech_queue.task_done()

    def speak(self, text):
        """Queue text, dropping anything not yet spoken."""
        if not text or not text.strip():
            return False
        self.stop()
        self.speech_queue.put(text.strip())
        return True

    def stop(self):
        self._drain()
        if self.engine is not None and self.is_speaking:
            try:
                self.engine.stop()
            except Exception as e:
                logger.warning(f"TTS stop failed: {e}")

    def wait_until_done(self):
        self.speech_queue.join()

    def shutdown(self):
        self.stop()
        self.speech_queue.put(None)


class AlarmPlayer:
    """Looping alarm sound through pygame's mixer."""

    def __init__(self, sound_path="sounds/alarm.mp3", mixer=None):
        self.sound_path = sound_path
        self._mixer = mixer
        self._lock = threading.Lock()

    @property
    def mixer(self):
        if self._mixer is None:
            if not pygame.mixer.get_init():
                pygame.mixer.init()
            self._mixer = pygame.mixer
        return self._mixer

    def is_playing(self):
        try:
            return bool(self.mixer.music.get_busy())
        except Exception as e:
            logger.warning(f"Mixer state unavailable: {e}")
            return False

    def play(self):
        """Start the alarm. Does nothing when it is already sounding."""
        with self._lock:
            try:
                if self.is_playing():
                    return False
                if not os.path.exists(self.sound_path):
                    logger.error(f"Alarm sound not found: {self.sound_path}")
                    return False
                self.mixer.music.load(self.sound_path)
                self.mixer.music.set_volume(1.0)
                self.mixer.music.play(loops=-1)
                logger.info("Alarm started")
                return True
            except Exception as e:
                logger.error(f"Alarm playback failed: {e}")
                return False

    def stop(self):
        with self._lock:
            try:
                if self._mixer is None and not pygame.mixer.get_init():
                    return
                self.mixer.music.stop()
            except Exception as e:
                logger.warning(f"Alarm stop failed: {e}")


class AudioService:
    """Speech plus alarm behind one stop_all()."""

    def __init__(self, speech, alarm):
        self.speech = speech
        self.alarm = alarm

    def speak(self, text):
        return self.speech.speak(text)

    def play_alarm(self):
        return self.alarm.play()

    def stop_all(self):
        self.alarm.stop()
        self.speech.stop()

    def shutdown(self):
        self.stop_all()
        self.speech.shutdown()

    @classmethod
    def from_config(cls, config):
        speech = SpeechService(language=config.get("LANGUAGE", "ar"), rate=config.get("SPEECH_RATE", 150))
        alarm = AlarmPlayer(config.get("ALARM_SOUND", "sounds/alarm.mp3"))
        return cls(speech, alarm)
