"""Lightweight ElevenLabs TTS helper for recognised letters and sentences."""

import logging
import os
import queue
import subprocess
import tempfile
import threading
import time
from collections import OrderedDict
from typing import Optional

import requests

import config

logger = logging.getLogger(__name__)

ELEVENLABS_URL_TEMPLATE = "https://api.elevenlabs.io/v1/text-to-speech/{voice_id}"
AUDIO_MIME_TYPE = "audio/mpeg"

_last_spoken_text: Optional[str] = None
_last_spoken_at: Optional[float] = None
_last_enqueued_text: Optional[str] = None
_last_enqueued_at: Optional[float] = None
_state_lock = threading.Lock()
_audio_cache: "OrderedDict[str, bytes]" = OrderedDict()
_tts_queue: "queue.Queue[tuple[str, float]]" = queue.Queue()
_worker_started = False


def is_configured() -> bool:
    return bool(config.ELEVENLABS_API_KEY and config.ELEVENLABS_VOICE_ID)


def speak_text(text: str) -> tuple[bool, str]:
    """
    Speak text via ElevenLabs, non-blocking.
    Enqueues playback on a background worker so the camera loop never waits.
    Returns (True, "accepted") when queued, (False, reason) when skipped.
    """
    global _last_enqueued_text, _last_enqueued_at

    text = (text or "").strip()
    if not text:
        return False, "empty_text"

    if not is_configured():
        logger.warning(
            "ElevenLabs not configured; set ELEVENLABS_API_KEY and ELEVENLABS_VOICE_ID."
        )
        return False, "not_configured"

    _start_worker_if_needed()

    now = time.monotonic()
    with _state_lock:
        if _last_spoken_text == text and _last_spoken_at is not None:
            if now - _last_spoken_at < config.TTS_REPEAT_COOLDOWN_SECONDS:
                return False, "repeat_cooldown_spoken"
        if _last_enqueued_text == text and _last_enqueued_at is not None:
            if now - _last_enqueued_at < config.TTS_REPEAT_COOLDOWN_SECONDS:
                return False, "repeat_cooldown_enqueued"
        _last_enqueued_text = text
        _last_enqueued_at = now
        _clear_pending_queue()
    _tts_queue.put((text, now))
    return True, "accepted"


def _fetch_tts_audio(text: str) -> bytes:
    url = ELEVENLABS_URL_TEMPLATE.format(voice_id=config.ELEVENLABS_VOICE_ID)
    headers = {
        "xi-api-key": config.ELEVENLABS_API_KEY,
        "Accept": AUDIO_MIME_TYPE,
        "Content-Type": "application/json",
    }
    payload = {
        "text": text,
        "model_id": config.ELEVENLABS_MODEL_ID,
        "voice_settings": {
            "stability": 0.35,
            "similarity_boost": 0.75,
        },
    }

    response = requests.post(
        url, headers=headers, json=payload, timeout=config.TTS_TIMEOUT_SECONDS
    )
    response.raise_for_status()
    if not response.content:
        raise ValueError("Empty ElevenLabs response.")
    return response.content


def _get_audio_bytes(text: str) -> bytes:
    """Return synthesized speech for the text, reusing recently fetched clips."""
    with _state_lock:
        cached = _audio_cache.get(text)
        if cached is not None:
            _audio_cache.move_to_end(text)
            return cached

    audio_bytes = _fetch_tts_audio(text)

    with _state_lock:
        _audio_cache[text] = audio_bytes
        while len(_audio_cache) > max(config.TTS_CACHE_MAX_ITEMS, 0):
            _audio_cache.popitem(last=False)
    return audio_bytes


def _play_audio_bytes(audio_bytes: bytes) -> bool:
    """Persist audio to a temp file and play it with available system tools."""
    with tempfile.NamedTemporaryFile(delete=False, suffix=".mp3") as tmp_file:
        tmp_file.write(audio_bytes)
        temp_path = tmp_file.name

    try:
        return _play_file(temp_path)
    finally:
        try:
            os.remove(temp_path)
        except OSError:
            logger.debug("Could not delete temp audio file: %s", temp_path)


def _play_file(file_path: str) -> bool:
    playback_commands = [
        ["afplay", file_path],  # macOS
        ["ffplay", "-nodisp", "-autoexit", "-loglevel", "error", file_path],
        ["mpg123", "-q", file_path],
    ]

    for cmd in playback_commands:
        try:
            subprocess.run(cmd, check=True, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
            return True
        except (FileNotFoundError, subprocess.CalledProcessError):
            continue

    # pydub needs ffmpeg too, but can use simpleaudio/pyaudio for output.
    try:
        from pydub import AudioSegment
        from pydub.playback import play

        play(AudioSegment.from_file(file_path))
        return True
    except Exception as exc:  # noqa: BLE001
        logger.debug("Audio playback fallback failed: %s", exc)
        return False


def _speak_queued(text: str, enqueued_at: float) -> bool:
    """Fetch and play one queued phrase. Returns True when it was played."""
    global _last_spoken_text, _last_spoken_at

    audio_bytes = _get_audio_bytes(text)
    if time.monotonic() - enqueued_at > config.TTS_MAX_LATENCY_SECONDS:
        logger.warning("Skipping late TTS playback for '%s'.", text)
        return False

    if not _play_audio_bytes(audio_bytes):
        logger.warning("Could not play audio for text '%s'.", text)
        return False

    with _state_lock:
        _last_spoken_text = text
        _last_spoken_at = time.monotonic()
    return True


def _clear_pending_queue() -> None:
    """Drop queued phrases so new text is not stuck behind stale letters."""
    try:
        while True:
            _tts_queue.get_nowait()
    except queue.Empty:
        return


def _worker_loop():
    while True:
        text, enqueued_at = _tts_queue.get()
        try:
            _speak_queued(text, enqueued_at)
        except Exception as exc:  # noqa: BLE001
            logger.error("ElevenLabs TTS failed for '%s': %s", text, exc)


def _start_worker_if_needed():
    global _worker_started
    if _worker_started:
        return
    worker = threading.Thread(target=_worker_loop, daemon=True)
    worker.start()
    _worker_started = True
