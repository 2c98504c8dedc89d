# Copyright (C) 2026 BPS
# This file is part of Minigame AutoFish.
#
# Online trainer: collects manual-control samples and fits a hold model

import logging
from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from core.exceptions import TrainingRefusedError
from .model import LogisticModel, ThresholdModel, Model, sigmoid

logger = logging.getLogger("AutoFish.trainer")

MIN_STD = 1e-6
PROGRESS_EVERY = 50


@dataclass(frozen=True)
class Sample:
    """One tick of manual control"""
    error: float
    target_velocity: float
    goal_velocity: float
    label: bool  # operator was holding


def _as_arrays(samples: Sequence[Sample]):
    features = np.array(
        [[s.error, s.target_velocity, s.goal_velocity] for s in samples], dtype=float
    )
    labels = np.array([1.0 if s.label else 0.0 for s in samples], dtype=float)
    return features, labels


def train_logistic(samples: Sequence[Sample], epochs: int = 100, learning_rate: float = 0.01) -> LogisticModel:
    """
    Fit a logistic regression on standardized features.

    Each epoch walks the whole sample set in collection order with one
    gradient step per sample. The fitted weights are mapped back to raw
    feature space so predict() needs no scaler.
    """
    features, labels = _as_arrays(samples)

    mean = features.mean(axis=0)
    std = features.std(axis=0)
    std[std < MIN_STD] = 1.0
    scaled = (features - mean) / std

    weights = np.zeros(3)
    bias = 0.0
    for _ in range(epochs):
        for row, label in zip(scaled, labels):
            error = sigmoid(bias + float(np.dot(weights, row))) - label
            bias -= learning_rate * error
            weights -= learning_rate * error * row

    predictions = (bias + scaled @ weights) > 0.0
    accuracy = float(np.mean(predictions == (labels > 0.5)))

    raw_weights = weights / std
    raw_bias = bias - float(np.sum(weights * mean / std))
    return LogisticModel(
        weights=tuple(float(w) for w in raw_weights),
        bias=float(raw_bias),
        accuracy=accuracy,
    )


def train_threshold(samples: Sequence[Sample]) -> ThresholdModel:
    """
    Exhaustive search over every distinct error x distinct target velocity
    pair for the rule `error > e_thr and target_vel > v_thr`.

    Ties keep the first pair in ascending (error, velocity) order.
    """
    features, labels = _as_arrays(samples)
    errors = features[:, 0]
    velocities = features[:, 1]
    positive = labels > 0.5
    n = len(samples)
    n_negative = int(np.count_nonzero(~positive))

    # Sort by velocity so "velocity > v_thr" is a suffix of the arrays
    order = np.argsort(velocities, kind="stable")
    v_sorted = velocities[order]
    e_sorted = errors[order]
    pos_sorted = positive[order]

    error_candidates = np.unique(errors)
    velocity_candidates = np.unique(velocities)
    suffix_start = np.searchsorted(v_sorted, velocity_candidates, side="right")

    best_accuracy = 0.0
    best_error = 0.0
    best_velocity = 0.0
    for error_threshold in error_candidates:
        above = e_sorted > error_threshold
        gained = (above & pos_sorted).astype(int)
        lost = (above & ~pos_sorted).astype(int)
        suffix_gained = np.append(np.cumsum(gained[::-1])[::-1], 0)
        suffix_lost = np.append(np.cumsum(lost[::-1])[::-1], 0)

        correct = n_negative + suffix_gained[suffix_start] - suffix_lost[suffix_start]
        idx = int(np.argmax(correct))
        accuracy = float(correct[idx]) / n
        if accuracy > best_accuracy:
            best_accuracy = accuracy
            best_error = float(error_threshold)
            best_velocity = float(velocity_candidates[idx])

    return ThresholdModel(
        error_threshold=best_error,
        velocity_threshold=best_velocity,
        accuracy=best_accuracy,
    )


def train_model(samples: Sequence[Sample], settings: dict = None) -> Model:
    """
    Logistic regression if it clears the accuracy bar, else the threshold rule.

    Raises:
        TrainingRefusedError: fewer samples than min_training_samples
    """
    settings = settings or {}
    min_samples = settings.get("min_training_samples", 10)
    if not samples:
        raise TrainingRefusedError("No training data available to train model.")
    if len(samples) < min_samples:
        raise TrainingRefusedError(
            f"Insufficient training data (need at least {min_samples} samples, have {len(samples)})."
        )

    logistic = train_logistic(
        samples,
        epochs=settings.get("training_epochs", 100),
        learning_rate=settings.get("learning_rate", 0.01),
    )
    if logistic.accuracy > settings.get("logistic_min_accuracy", 0.6):
        return logistic

    logger.info(f"Logistic fit too weak ({logistic.accuracy * 100:.1f} pct), using threshold rule")
    return train_threshold(samples)


class OnlineTrainer:
    """Sample buffer for one manual-control training session"""

    def __init__(self, settings: dict = None):
        self.settings = settings or {}
        self.samples: List[Sample] = []
        self.active = False

    def start(self):
        self.samples.clear()
        self.active = True
        logger.info("Training mode enabled. Manual control active - collecting data...")

    def add_sample(self, error: float, target_velocity: float, goal_velocity: float, label: bool):
        self.samples.append(Sample(error, target_velocity, goal_velocity, bool(label)))
        if len(self.samples) % PROGRESS_EVERY == 0:
            logger.info(f"Training data collected: {len(self.samples)} rows")

    def load(self, samples: Sequence[Sample]):
        """Replace the buffer with previously saved samples (not a session)"""
        self.samples = list(samples)

    def finish(self) -> Model:
        """
        End the session and fit a model on the collected samples.

        Raises:
            TrainingRefusedError: too few samples (the buffer is kept)
        """
        self.active = False
        return train_model(self.samples, self.settings)

    def reset(self):
        self.samples.clear()
        self.active = False
