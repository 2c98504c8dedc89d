# Copyright (C) 2026 BPS
# This file is part of Minigame AutoFish.
#
# Model and training data persistence (JSON model file + CSV dataset)

import csv
import json
import logging
import math
import os
import tempfile
from typing import List, Optional, Sequence

from config.defaults import MODEL_FILE_NAME, TRAINING_DATA_FILE_NAME
from core.exceptions import ModelStoreError
from .model import LogisticModel, ThresholdModel, Model, LOGISTIC_TYPE, THRESHOLD_TYPE
from .trainer import Sample

logger = logging.getLogger("AutoFish.model_store")

CSV_HEADER = ["error", "targetVelocity", "goalVelocity", "label"]
LEGACY_THRESHOLD_TYPE = "DecisionTree"


def _is_number(value) -> bool:
    return (isinstance(value, (int, float)) and not isinstance(value, bool)
            and math.isfinite(value))


def model_to_dict(model: Model, training_size: int = 0) -> dict:
    data = {
        "type": model.model_type,
        "accuracy": model.accuracy,
        "trainingSize": training_size,
    }
    if isinstance(model, LogisticModel):
        data["weights"] = list(model.weights)
        data["bias"] = model.bias
    elif isinstance(model, ThresholdModel):
        data["errorThreshold"] = model.error_threshold
        data["velocityThreshold"] = model.velocity_threshold
    else:
        raise TypeError(f"Unknown model type: {type(model).__name__}")
    return data


def model_from_dict(data) -> Optional[Model]:
    """Rebuild a model; None for anything partial, unknown or garbled"""
    if not isinstance(data, dict):
        return None
    model_type = data.get("type")
    accuracy = data.get("accuracy", 0.0)
    if not _is_number(accuracy):
        accuracy = 0.0

    if model_type == LOGISTIC_TYPE:
        weights = data.get("weights")
        bias = data.get("bias")
        if (not isinstance(weights, list) or len(weights) != 3
                or not all(_is_number(w) for w in weights) or not _is_number(bias)):
            return None
        return LogisticModel(weights=tuple(float(w) for w in weights), bias=float(bias),
                             accuracy=float(accuracy))

    if model_type in (THRESHOLD_TYPE, LEGACY_THRESHOLD_TYPE):
        error_threshold = data.get("errorThreshold", data.get("diffThreshold"))
        velocity_threshold = data.get("velocityThreshold", data.get("fishVelThreshold"))
        if not _is_number(error_threshold) or not _is_number(velocity_threshold):
            return None
        return ThresholdModel(error_threshold=float(error_threshold),
                              velocity_threshold=float(velocity_threshold),
                              accuracy=float(accuracy))
    return None


def _atomic_write(path: str, text: str):
    """Write the full text to a temp file next to path, then replace path"""
    directory = os.path.dirname(path) or "."
    os.makedirs(directory, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(prefix=".tmp_", dir=directory)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        os.replace(tmp_path, path)
    except OSError:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise


class ModelStore:
    """Reads and writes the trained model and its training data"""

    def __init__(self, directory: str):
        self.directory = directory

    @property
    def model_file(self) -> str:
        return os.path.join(self.directory, MODEL_FILE_NAME)

    @property
    def data_file(self) -> str:
        return os.path.join(self.directory, TRAINING_DATA_FILE_NAME)

    # ========== MODEL ==========

    def save_model(self, model: Model, training_size: int = 0):
        """
        Raises:
            ModelStoreError: the file could not be written
        """
        text = json.dumps(model_to_dict(model, training_size), indent=2) + "\n"
        try:
            _atomic_write(self.model_file, text)
        except OSError as e:
            raise ModelStoreError(f"Failed to save model to disk: {e}") from e
        logger.info(f"Model saved to: {self.model_file}")

    def load_model(self) -> Optional[Model]:
        """Saved model, or None when missing, unreadable or garbled"""
        if not os.path.exists(self.model_file):
            logger.info(f"No saved model found at: {self.model_file}")
            return None
        try:
            with open(self.model_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to load model from disk: {e}")
            return None

        model = model_from_dict(data)
        if model is None:
            logger.warning(f"Model file is incomplete or of unknown type: {self.model_file}")
        else:
            logger.info(f"Loaded model from: {self.model_file}")
        return model

    # ========== TRAINING DATA ==========

    def save_samples(self, samples: Sequence[Sample]):
        """
        Raises:
            ModelStoreError: the file could not be written
        """
        lines = [",".join(CSV_HEADER)]
        for s in samples:
            lines.append(f"{s.error:.6f},{s.target_velocity:.6f},{s.goal_velocity:.6f},{1 if s.label else 0}")
        try:
            _atomic_write(self.data_file, "\n".join(lines) + "\n")
        except OSError as e:
            raise ModelStoreError(f"Failed to save training data CSV: {e}") from e
        logger.info(f"Training data saved to: {self.data_file}")

    def load_samples(self) -> List[Sample]:
        """Saved samples; malformed rows are skipped, failures yield []"""
        if not os.path.exists(self.data_file):
            logger.info(f"No saved training data found at: {self.data_file}")
            return []
        samples = []
        try:
            with open(self.data_file, "r", encoding="utf-8", newline="") as f:
                reader = csv.reader(f)
                next(reader, None)  # header
                for row in reader:
                    if len(row) != 4:
                        continue
                    try:
                        error, target_vel, goal_vel = (float(v) for v in row[:3])
                        label = int(row[3].strip())
                    except ValueError:
                        continue
                    samples.append(Sample(error, target_vel, goal_vel, label == 1))
        except (OSError, csv.Error) as e:
            logger.warning(f"Failed to load training data from CSV: {e}")
            return []

        logger.info(f"Loaded {len(samples)} training data points from: {self.data_file}")
        return samples
