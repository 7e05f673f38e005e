"""Central configuration for gesture stabilizing, inference and TTS."""

import os

from dotenv import load_dotenv

# Load environment variables from a .env file if available.
load_dotenv()


def _label_set(name, default):
    raw = os.getenv(name)
    if raw is None:
        return set(default)
    # A lone space is a valid label, so only split on commas.
    return {item for item in raw.split(",") if item}


# ------------------------ MODEL / INFERENCE ------------------------
MODEL_PATH = os.getenv("MODEL_PATH", "models/classifier.pth")
LABEL_MAP_PATH = os.getenv("LABEL_MAP_PATH", "label_map.json")
HAND_LANDMARKER_PATH = os.getenv("HAND_LANDMARKER_PATH", "models/hand_landmarker.task")
INPUT_SIZE = int(os.getenv("INPUT_SIZE", "224"))
# Minimum seconds between two frames handed to the classifier.
SAMPLE_INTERVAL_SECONDS = float(os.getenv("SAMPLE_INTERVAL_SECONDS", "0.5"))
# Demo mode emits a synthetic gesture this often.
DEMO_INTERVAL_SECONDS = float(os.getenv("DEMO_INTERVAL_SECONDS", "2"))

# ------------------------ STABILIZER ------------------------
PREDICTION_THRESHOLD = float(os.getenv("PREDICTION_THRESHOLD", "0.7"))
BUFFER_SIZE = int(os.getenv("BUFFER_SIZE", "5"))
IDLE_TIMEOUT_SECONDS = float(os.getenv("IDLE_TIMEOUT_SECONDS", "6"))
HOLD_TIMEOUT_SECONDS = float(os.getenv("HOLD_TIMEOUT_SECONDS", "5"))
TICK_INTERVAL_SECONDS = float(os.getenv("TICK_INTERVAL_SECONDS", "0.25"))

# Labels with a special meaning for the sentence buffer.
DELETE_LABELS = _label_set("DELETE_LABELS", {"DEL", "Backspace"})
SPACE_LABELS = _label_set("SPACE_LABELS", {"SPACE", " "})
IGNORED_LABELS = _label_set("IGNORED_LABELS", {"UNKNOWN", "UNCERTAIN"})
UNKNOWN_LABEL = "UNKNOWN"

# ------------------------ TEXT SINK ------------------------
SUGGESTION_LIMIT = int(os.getenv("SUGGESTION_LIMIT", "4"))
HISTORY_SIZE = int(os.getenv("HISTORY_SIZE", "10"))

# ------------------------ TTS (ElevenLabs) ------------------------
ELEVENLABS_API_KEY = os.getenv("ELEVENLABS_API_KEY", "")
ELEVENLABS_VOICE_ID = os.getenv("ELEVENLABS_VOICE_ID", "")
ELEVENLABS_MODEL_ID = os.getenv("ELEVENLABS_MODEL_ID", "eleven_multilingual_v2")
TTS_TIMEOUT_SECONDS = float(os.getenv("TTS_TIMEOUT_SECONDS", "10"))
# Skip playback if the TTS response arrives too late (seconds).
TTS_MAX_LATENCY_SECONDS = float(os.getenv("TTS_MAX_LATENCY_SECONDS", "5"))
# Avoid repeating the same text within this cooldown window (seconds).
TTS_REPEAT_COOLDOWN_SECONDS = float(os.getenv("TTS_REPEAT_COOLDOWN_SECONDS", "1.5"))
# Cache synthesized clips to avoid repeated network calls for common letters.
TTS_CACHE_MAX_ITEMS = int(os.getenv("TTS_CACHE_MAX_ITEMS", "26"))

# ------------------------ SHELLS ------------------------
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
PORT = int(os.getenv("PORT", "5000"))
