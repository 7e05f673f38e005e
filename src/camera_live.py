# src/camera_live.py
import logging
import time

import cv2

from config import HAND_LANDMARKER_PATH, LABEL_MAP_PATH, LOG_LEVEL, MODEL_PATH
from inference import create_inference_source
from overlay import HandTracker, draw_hand, draw_prediction, draw_sentence, hand_bbox
from session import GestureSession

SUGGESTION_KEYS = {ord(str(i)): i - 1 for i in range(1, 5)}


def handle_key(key, session):
    """Apply a keyboard shortcut. Returns False when the user wants to quit."""
    if key == ord("q"):
        return False
    if key == ord("c"):
        session.clear()
        print("Sentence cleared.")
    elif key == ord("s"):
        spoken, reason = session.speak_sentence()
        if not spoken:
            print(f"Not spoken: {reason}.")
    elif key == ord("v"):
        session.set_speech_enabled(not session.speech_enabled)
        print(f"Speech {'on' if session.speech_enabled else 'off'}.")
    elif key in SUGGESTION_KEYS:
        suggestions = session.suggestions
        index = SUGGESTION_KEYS[key]
        if index < len(suggestions):
            session.use_suggestion(suggestions[index])
    return True


def main():
    logging.basicConfig(level=LOG_LEVEL)
    source = create_inference_source(MODEL_PATH, LABEL_MAP_PATH)
    session = GestureSession(listeners=[lambda event: print(f"Event: {event}")])
    tracker = HandTracker(HAND_LANDMARKER_PATH)
    cap = cv2.VideoCapture(0)

    print("Keys: q quit | c clear | s speak | v toggle letter speech | 1-4 use suggestion")
    try:
        while cap.isOpened():
            ret, frame = cap.read()
            if not ret:
                continue

            now = time.monotonic()
            prediction = source.sample(frame, now)
            if prediction is not None:
                session.submit(prediction, now)
            # Single-threaded loop, so timeouts are checked once per frame.
            session.tick(now)

            frame = cv2.flip(frame, 1)
            points = tracker.detect(frame)
            frame = draw_hand(frame, points)
            current = session.current_gesture
            if current is not None:
                bbox = hand_bbox(points, frame.shape[1], frame.shape[0])
                frame = draw_prediction(frame, bbox, current.label, current.confidence)
            frame = draw_sentence(frame, session.text, session.suggestions)

            cv2.imshow("Sign to Speech", frame)
            if not handle_key(cv2.waitKey(1) & 0xFF, session):
                break
    finally:
        cap.release()
        tracker.close()
        cv2.destroyAllWindows()


if __name__ == "__main__":
    main()
