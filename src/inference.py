"""Inference sources that turn camera frames into raw predictions."""

import json
import logging
import os
import pickle
import random
import string

import cv2
import numpy as np
import torch

from config import (
    DEMO_INTERVAL_SECONDS,
    INPUT_SIZE,
    SAMPLE_INTERVAL_SECONDS,
    UNKNOWN_LABEL,
)
from model import load_classifier
from stabilizer import RawPrediction

logger = logging.getLogger(__name__)

DEMO_GESTURES = ["A", "B", "C", "G", "L", "P", "X", "Y", " "]


def load_label_map(path):
    """Read {index: label} from JSON; without a file, classes are A-Z."""
    if not path or not os.path.exists(path):
        return dict(enumerate(string.ascii_uppercase))
    with open(path, "r") as f:
        label_map = json.load(f)
    return {int(k): v for k, v in label_map.items()}


class InferenceSource:
    """Base class: throttles frames and delegates to ``predict``."""

    is_model = False

    def __init__(self, interval):
        self.interval = interval
        self._last_sample_at = None

    def sample(self, frame, now):
        if self._last_sample_at is not None and now - self._last_sample_at < self.interval:
            return None
        self._last_sample_at = now
        return self.predict(frame)

    def predict(self, frame):
        raise NotImplementedError


class ModelInferenceSource(InferenceSource):
    is_model = True

    def __init__(self, model, labels, input_size=INPUT_SIZE, interval=SAMPLE_INTERVAL_SECONDS, device=None):
        super().__init__(interval)
        self.model = model
        self.labels = labels
        self.input_size = input_size
        self.device = device or next(model.parameters()).device

    def preprocess(self, frame):
        """BGR camera frame -> [1, 3, size, size] float tensor in [0, 1]."""
        frame = cv2.flip(frame, 1)
        rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        resized = cv2.resize(rgb, (self.input_size, self.input_size))
        array = resized.astype(np.float32) / 255.0
        tensor = torch.from_numpy(array).permute(2, 0, 1).unsqueeze(0)
        return tensor.to(self.device)

    def predict(self, frame):
        tensor = self.preprocess(frame)
        with torch.no_grad():
            logits = self.model(tensor)
            probs = torch.softmax(logits, dim=1)
            conf, pred_idx = torch.max(probs, dim=1)
        label = self.labels.get(pred_idx.item(), UNKNOWN_LABEL)
        return RawPrediction(label, conf.item())


class DemoInferenceSource(InferenceSource):
    """Synthetic predictions for running the app without a trained model."""

    def __init__(self, gestures=None, interval=DEMO_INTERVAL_SECONDS, rng=None):
        super().__init__(interval)
        self.gestures = list(gestures or DEMO_GESTURES)
        self.rng = rng or random.Random()

    def predict(self, frame):
        gesture = self.rng.choice(self.gestures)
        confidence = 0.8 + self.rng.random() * 0.2
        return RawPrediction(gesture, confidence)


def create_inference_source(model_path, label_map_path):
    """Use the trained classifier when it loads, otherwise fall back to demo mode."""
    labels = load_label_map(label_map_path)
    if not model_path or not os.path.exists(model_path):
        logger.warning("Model file %s not found, using demo mode.", model_path)
        return DemoInferenceSource()

    try:
        model = load_classifier(model_path, num_classes=len(labels))
    except (OSError, RuntimeError, EOFError, pickle.UnpicklingError) as exc:
        logger.warning("Model loading failed, using demo mode: %s", exc)
        return DemoInferenceSource()

    logger.info("Model loaded from %s (%d classes).", model_path, len(labels))
    return ModelInferenceSource(model, labels)
