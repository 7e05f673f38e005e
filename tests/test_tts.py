import queue

import pytest

import config
import tts_elevenlabs


@pytest.fixture
def tts(monkeypatch):
    """ElevenLabs module with fake credentials, fresh state and no worker thread."""
    monkeypatch.setattr(config, "ELEVENLABS_API_KEY", "key")
    monkeypatch.setattr(config, "ELEVENLABS_VOICE_ID", "voice")
    monkeypatch.setattr(config, "TTS_REPEAT_COOLDOWN_SECONDS", 1.5)
    monkeypatch.setattr(tts_elevenlabs, "_tts_queue", queue.Queue())
    monkeypatch.setattr(tts_elevenlabs, "_audio_cache", tts_elevenlabs.OrderedDict())
    monkeypatch.setattr(tts_elevenlabs, "_last_spoken_text", None)
    monkeypatch.setattr(tts_elevenlabs, "_last_spoken_at", None)
    monkeypatch.setattr(tts_elevenlabs, "_last_enqueued_text", None)
    monkeypatch.setattr(tts_elevenlabs, "_last_enqueued_at", None)
    monkeypatch.setattr(tts_elevenlabs, "_start_worker_if_needed", lambda: None)
    return tts_elevenlabs


class FakeResponse:
    def __init__(self, content):
        self.content = content

    def raise_for_status(self):
        pass


def test_blank_text_is_rejected(tts):
    assert tts.speak_text("") == (False, "empty_text")
    assert tts.speak_text("   ") == (False, "empty_text")
    assert tts.speak_text(None) == (False, "empty_text")


def test_unconfigured_is_rejected(tts, monkeypatch):
    monkeypatch.setattr(config, "ELEVENLABS_API_KEY", "")
    assert tts.speak_text("HELLO") == (False, "not_configured")
    assert tts._tts_queue.empty()


def test_text_is_queued_once_within_cooldown(tts):
    assert tts.speak_text("HELLO") == (True, "accepted")
    assert tts.speak_text("HELLO") == (False, "repeat_cooldown_enqueued")
    assert tts.speak_text("HI") == (True, "accepted")

    assert tts._tts_queue.qsize() == 1
    assert tts._tts_queue.get_nowait()[0] == "HI"


def test_new_text_replaces_pending_text(tts):
    for letter in "ABCDEFGH":
        assert tts.speak_text(letter) == (True, "accepted")
    assert tts._tts_queue.qsize() == 1
    assert tts._tts_queue.get_nowait()[0] == "H"


def test_fetch_posts_text_to_voice(tts, monkeypatch):
    calls = []

    def fake_post(url, headers, json, timeout):
        calls.append((url, headers, json, timeout))
        return FakeResponse(b"mp3")

    monkeypatch.setattr(tts.requests, "post", fake_post)
    assert tts._fetch_tts_audio("HI") == b"mp3"

    url, headers, payload, _ = calls[0]
    assert url.endswith("/text-to-speech/voice")
    assert headers["xi-api-key"] == "key"
    assert payload["text"] == "HI"


def test_fetch_rejects_empty_audio(tts, monkeypatch):
    monkeypatch.setattr(tts.requests, "post", lambda *a, **kw: FakeResponse(b""))
    with pytest.raises(ValueError):
        tts._fetch_tts_audio("HI")


def test_audio_cache_reuses_and_evicts(tts, monkeypatch):
    fetched = []

    def fake_fetch(text):
        fetched.append(text)
        return text.encode()

    monkeypatch.setattr(tts, "_fetch_tts_audio", fake_fetch)
    monkeypatch.setattr(config, "TTS_CACHE_MAX_ITEMS", 2)

    for text in ["A", "A", "B", "C", "A"]:
        assert tts._get_audio_bytes(text) == text.encode()
    assert fetched == ["A", "B", "C", "A"]


def test_late_playback_is_skipped(tts, monkeypatch):
    played = []
    monkeypatch.setattr(tts, "_fetch_tts_audio", lambda text: b"mp3")
    monkeypatch.setattr(tts, "_play_audio_bytes", lambda audio: played.append(audio) or True)
    monkeypatch.setattr(config, "TTS_MAX_LATENCY_SECONDS", 5.0)

    assert tts._speak_queued("HI", enqueued_at=tts.time.monotonic() - 60) is False
    assert played == []

    assert tts._speak_queued("HI", enqueued_at=tts.time.monotonic()) is True
    assert played == [b"mp3"]
    assert tts._last_spoken_text == "HI"
    assert tts.speak_text("HI") == (False, "repeat_cooldown_spoken")
