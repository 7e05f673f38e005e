"""One recognition session: stabilizer, sentence, suggestions and speech."""

import logging
import threading
import time
from collections import deque

from config import HISTORY_SIZE, SUGGESTION_LIMIT
from sentence import SentenceBuffer
from stabilizer import AutoClear, AutoSpeak, GestureStabilizer
from suggestions import suggest_words
from tts_elevenlabs import speak_text

logger = logging.getLogger(__name__)

NOTHING_TO_SPEAK = "nothing_to_speak"


class GestureSession:
    """
    Text sink for a single camera session. ``submit`` and ``tick`` may be
    called from different threads; a single lock serialises them together
    with the UI actions.
    """

    def __init__(
        self,
        stabilizer=None,
        sentence=None,
        speak=speak_text,
        clock=time.monotonic,
        speech_enabled=False,
        listeners=None,
    ):
        self.clock = clock
        self.stabilizer = GestureStabilizer(now=clock()) if stabilizer is None else stabilizer
        self.sentence = SentenceBuffer() if sentence is None else sentence
        self.speak = speak
        self.speech_enabled = speech_enabled
        self.listeners = list(listeners or [])
        self.current_gesture = None
        self.history = deque(maxlen=HISTORY_SIZE)
        self._lock = threading.Lock()

    # ------------------------ INPUT ------------------------
    def submit(self, prediction, now=None):
        now = self.clock() if now is None else now
        with self._lock:
            gesture = self.stabilizer.submit(prediction, now)
            if gesture is None:
                return None

            logger.info("Gesture accepted: %r (%.2f)", gesture.label, gesture.confidence)
            self.current_gesture = gesture
            self.history.appendleft(
                {"gesture": gesture.label, "confidence": gesture.confidence, "timestamp": time.time()}
            )
            self.sentence.apply(gesture.label)

            if self.speech_enabled and len(gesture.label) == 1 and gesture.label.strip():
                self._speak(gesture.label)

        self._notify(gesture)
        return gesture

    def tick(self, now=None):
        now = self.clock() if now is None else now
        with self._lock:
            events = self.stabilizer.tick(now)
            for event in events:
                if isinstance(event, AutoClear):
                    logger.info("Hold gesture timed out; clearing sentence.")
                    self._clear()
                elif isinstance(event, AutoSpeak):
                    self._speak_sentence()

        for event in events:
            self._notify(event)
        return events

    # ------------------------ ACTIONS ------------------------
    def speak_sentence(self):
        with self._lock:
            return self._speak_sentence()

    def clear(self):
        with self._lock:
            self._clear()

    def use_suggestion(self, word):
        with self._lock:
            self.sentence.replace(word)

    def set_speech_enabled(self, enabled):
        with self._lock:
            self.speech_enabled = bool(enabled)

    def reset(self, now=None):
        """Drop pending predictions and timers, keeping the sentence."""
        now = self.clock() if now is None else now
        with self._lock:
            self.stabilizer.reset(now)
            self.current_gesture = None

    # ------------------------ STATE ------------------------
    @property
    def text(self):
        return self.sentence.text

    @property
    def suggestions(self):
        return suggest_words(self.sentence.first_letter, limit=SUGGESTION_LIMIT)

    def snapshot(self):
        with self._lock:
            current = self.current_gesture
            return {
                "sentence": self.sentence.text,
                "first_letter": self.sentence.first_letter,
                "suggestions": self.suggestions,
                "current_gesture": current.label if current else None,
                "confidence": current.confidence if current else 0.0,
                "history": list(self.history),
                "speech_enabled": self.speech_enabled,
            }

    # ------------------------ HELPERS ------------------------
    def _clear(self):
        self.sentence.clear()
        self.history.clear()
        self.current_gesture = None

    def _speak_sentence(self):
        text = self.sentence.text
        if not text.strip():
            logger.info("Nothing to speak.")
            return False, NOTHING_TO_SPEAK
        return self._speak(text)

    def _speak(self, text):
        accepted, reason = self.speak(text)
        if not accepted:
            logger.info("Speech skipped for %r: %s", text, reason)
        return accepted, reason

    def _notify(self, event):
        for listener in self.listeners:
            listener(event)
