# src/overlay.py
import logging
import os

import cv2
import mediapipe as mp
from mediapipe.tasks import python as mp_python
from mediapipe.tasks.python import vision

logger = logging.getLogger(__name__)

# 21-point hand skeleton: wrist, thumb, index, middle, ring, pinky, palm
HAND_CONNECTIONS = [
    (0, 1), (1, 2), (2, 3), (3, 4),
    (0, 5), (5, 6), (6, 7), (7, 8),
    (5, 9), (9, 10), (10, 11), (11, 12),
    (9, 13), (13, 14), (14, 15), (15, 16),
    (13, 17), (0, 17), (17, 18), (18, 19), (19, 20),
]

BOX_COLOR = (136, 255, 0)      # BGR of #00ff88
CORNER_COLOR = (136, 68, 255)  # BGR of #ff4488
POINT_COLOR = (0, 0, 255)
LINE_COLOR = (0, 255, 0)
TEXT_COLOR = (240, 240, 240)


class HandTracker:
    """MediaPipe hand landmarker; disabled when the .task model is missing."""

    def __init__(self, model_path, min_confidence=0.7):
        self._landmarker = None
        if not model_path or not os.path.exists(model_path):
            logger.info("Hand landmarker model %s not found; overlay disabled.", model_path)
            return

        options = vision.HandLandmarkerOptions(
            base_options=mp_python.BaseOptions(model_asset_path=model_path),
            running_mode=vision.RunningMode.IMAGE,
            num_hands=1,
            min_hand_detection_confidence=min_confidence,
            min_hand_presence_confidence=min_confidence,
            min_tracking_confidence=min_confidence,
        )
        self._landmarker = vision.HandLandmarker.create_from_options(options)

    @property
    def enabled(self):
        return self._landmarker is not None

    def detect(self, frame):
        """Return pixel (x, y) points of the first detected hand, or []."""
        if self._landmarker is None:
            return []
        height, width = frame.shape[:2]
        rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        result = self._landmarker.detect(mp.Image(image_format=mp.ImageFormat.SRGB, data=rgb))
        if not result.hand_landmarks:
            return []
        return [(lmk.x * width, lmk.y * height) for lmk in result.hand_landmarks[0]]

    def close(self):
        if self._landmarker is not None:
            self._landmarker.close()
            self._landmarker = None


def hand_bbox(points, width, height):
    """Bounding box (x, y, w, h) of the points, clipped to the frame."""
    if not points:
        return None
    xs = [min(max(x, 0), width - 1) for x, _ in points]
    ys = [min(max(y, 0), height - 1) for _, y in points]
    x_min, y_min = int(min(xs)), int(min(ys))
    return x_min, y_min, int(max(xs)) - x_min, int(max(ys)) - y_min


def draw_hand(frame, points):
    for start, end in HAND_CONNECTIONS:
        if start < len(points) and end < len(points):
            p1 = tuple(int(v) for v in points[start])
            p2 = tuple(int(v) for v in points[end])
            cv2.line(frame, p1, p2, LINE_COLOR, 2)
    for point in points:
        cv2.circle(frame, tuple(int(v) for v in point), 4, POINT_COLOR, -1)
    return frame


def draw_prediction(frame, bbox, label, confidence, corner=20):
    """Box around the hand with corner ticks and '<label> (<pct>%)' above it."""
    if bbox is None:
        return frame
    x, y, w, h = bbox
    cv2.rectangle(frame, (x, y), (x + w, y + h), BOX_COLOR, 3)

    corners = [
        ((x, y + corner), (x, y), (x + corner, y)),
        ((x + w - corner, y), (x + w, y), (x + w, y + corner)),
        ((x, y + h - corner), (x, y + h), (x + corner, y + h)),
        ((x + w - corner, y + h), (x + w, y + h), (x + w, y + h - corner)),
    ]
    for a, b, c in corners:
        cv2.line(frame, a, b, CORNER_COLOR, 4)
        cv2.line(frame, b, c, CORNER_COLOR, 4)

    text = format_label(label, confidence)
    (text_w, text_h), _ = cv2.getTextSize(text, cv2.FONT_HERSHEY_SIMPLEX, 0.7, 2)
    top = max(y - text_h - 16, 0)
    cv2.rectangle(frame, (x, top), (x + text_w + 20, top + text_h + 14), (0, 0, 0), -1)
    cv2.putText(frame, text, (x + 10, top + text_h + 6), cv2.FONT_HERSHEY_SIMPLEX, 0.7, BOX_COLOR, 2)
    return frame


def draw_sentence(frame, sentence, suggestions=()):
    cv2.rectangle(frame, (0, 0), (frame.shape[1], 70), (22, 22, 22), -1)
    cv2.putText(frame, f"Sentence: {sentence}", (10, 28), cv2.FONT_HERSHEY_SIMPLEX, 0.7, TEXT_COLOR, 2)
    if suggestions:
        chips = "  ".join(f"{i}:{word}" for i, word in enumerate(suggestions, start=1))
        cv2.putText(frame, chips, (10, 58), cv2.FONT_HERSHEY_SIMPLEX, 0.6, LINE_COLOR, 1)
    return frame


def format_label(label, confidence):
    shown = "SPACE" if label == " " else label
    return f"{shown} ({confidence * 100:.0f}%)"
