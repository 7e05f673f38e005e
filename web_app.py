import logging
import sys
import threading
import time
from pathlib import Path

import cv2
from flask import Flask, Response, jsonify, request

# Paths
ROOT_DIR = Path(__file__).resolve().parent
SRC_DIR = ROOT_DIR / "src"
# Ensure local src/ modules (config, session, etc.) are importable when running from repo root.
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from config import (
    HAND_LANDMARKER_PATH,
    LABEL_MAP_PATH,
    LOG_LEVEL,
    MODEL_PATH,
    PORT,
    TICK_INTERVAL_SECONDS,
)
from inference import create_inference_source
from overlay import HandTracker, draw_hand, draw_prediction, hand_bbox
from session import GestureSession

logger = logging.getLogger(__name__)

# Backend-only Flask app.
app = Flask(__name__)

_state_lock = threading.Lock()
# Stop event of the newest stream; None until /video_feed starts streaming.
_stream_stop = None
_session = None
_source = None


def get_session():
    global _session
    with _state_lock:
        if _session is None:
            _session = GestureSession()
        return _session


def get_source():
    """Pick the inference source once; the choice holds until restart."""
    global _source
    with _state_lock:
        if _source is None:
            _source = create_inference_source(MODEL_PATH, LABEL_MAP_PATH)
        return _source


def run_ticker(session, stop_event, interval=TICK_INTERVAL_SECONDS):
    """Drive the idle/hold timeouts independently of frame arrival."""
    while not stop_event.wait(interval):
        session.tick()


def start_stream():
    """Register a new stream, superseding the previous one."""
    global _stream_stop
    stop_event = threading.Event()
    with _state_lock:
        if _stream_stop is not None:
            _stream_stop.set()
        _stream_stop = stop_event
    return stop_event


def stop_stream():
    with _state_lock:
        if _stream_stop is not None:
            _stream_stop.set()


def is_streaming():
    with _state_lock:
        return _stream_stop is not None and not _stream_stop.is_set()


def generate_frames():
    """Stream webcam frames with recognition overlays as MJPEG."""
    stop_event = start_stream()
    session = get_session()
    source = get_source()
    session.reset()
    tracker = HandTracker(HAND_LANDMARKER_PATH)

    ticker = threading.Thread(target=run_ticker, args=(session, stop_event), daemon=True)
    ticker.start()

    logger.info("Inference started (%s).", "model" if source.is_model else "demo mode")
    cap = cv2.VideoCapture(0)
    try:
        while cap.isOpened() and not stop_event.is_set():
            ret, frame = cap.read()
            if not ret:
                continue

            prediction = source.sample(frame, time.monotonic())
            if prediction is not None:
                session.submit(prediction)

            # Overlay is drawn on the mirrored frame the user sees.
            frame = cv2.flip(frame, 1)
            points = tracker.detect(frame)
            frame = draw_hand(frame, points)
            current = session.current_gesture
            if current is not None:
                bbox = hand_bbox(points, frame.shape[1], frame.shape[0])
                frame = draw_prediction(frame, bbox, current.label, current.confidence)

            ok, buffer = cv2.imencode(".jpg", frame)
            if not ok:
                continue
            jpg_bytes = buffer.tobytes()
            yield (
                b"--frame\r\n"
                b"Content-Type: image/jpeg\r\n\r\n" + jpg_bytes + b"\r\n"
            )
    finally:
        # Only this stream's event; a newer stream keeps running.
        stop_event.set()
        cap.release()
        tracker.close()


def _json_body():
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else None


@app.route("/")
def index():
    return (
        "Backend is running. Use /video_feed for the MJPEG stream, /state for the "
        "recognised text and /stop_infer to stop inference.",
        200,
    )


@app.route("/video_feed")
def video_feed():
    return Response(
        generate_frames(), mimetype="multipart/x-mixed-replace; boundary=frame"
    )


@app.route("/stop_infer", methods=["POST"])
def stop_infer():
    stop_stream()
    get_session().reset()
    logger.info("Inference stopped.")
    return ("stopped", 200)


@app.route("/state")
def state():
    snapshot = get_session().snapshot()
    source = _source
    snapshot["model_loaded"] = bool(source is not None and source.is_model)
    snapshot["demo_mode"] = bool(source is not None and not source.is_model)
    snapshot["running"] = is_streaming()
    return jsonify(snapshot)


@app.route("/speak", methods=["POST"])
def speak():
    spoken, reason = get_session().speak_sentence()
    return jsonify({"spoken": spoken, "reason": reason})


@app.route("/clear", methods=["POST"])
def clear():
    get_session().clear()
    return jsonify({"sentence": ""})


@app.route("/suggestion", methods=["POST"])
def use_suggestion():
    body = _json_body()
    word = body.get("word") if body else None
    if not isinstance(word, str) or not word:
        return jsonify({"error": "Expected JSON body with a non-empty 'word'."}), 400
    session = get_session()
    session.use_suggestion(word)
    return jsonify({"sentence": session.text})


@app.route("/speech", methods=["POST"])
def toggle_speech():
    body = _json_body()
    enabled = body.get("enabled") if body else None
    if not isinstance(enabled, bool):
        return jsonify({"error": "Expected JSON body with boolean 'enabled'."}), 400
    get_session().set_speech_enabled(enabled)
    return jsonify({"speech_enabled": enabled})


if __name__ == "__main__":
    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app.run(host="0.0.0.0", port=PORT, debug=False)
