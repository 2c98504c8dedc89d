# Copyright (C) 2026 BPS
# This file is part of Minigame AutoFish.
#
# Hold/release models: a tagged union of logistic regression and threshold rule

import math
from dataclasses import dataclass
from typing import Tuple, Union

LOGISTIC_TYPE = "Logistic"
THRESHOLD_TYPE = "Threshold"


@dataclass(frozen=True)
class LogisticModel:
    """sigmoid(bias + w . [error, target_vel, goal_vel]) > 0.5"""
    weights: Tuple[float, float, float]
    bias: float
    accuracy: float

    model_type = LOGISTIC_TYPE


@dataclass(frozen=True)
class ThresholdModel:
    """error > error_threshold and target_vel > velocity_threshold"""
    error_threshold: float
    velocity_threshold: float
    accuracy: float

    model_type = THRESHOLD_TYPE


Model = Union[LogisticModel, ThresholdModel]

# Built-in model shipped with the addon (~70.4% in-sample accuracy)
DEFAULT_MODEL = LogisticModel(
    weights=(2.941484, 10.936916, -20.971402),
    bias=-0.375856,
    accuracy=0.7041420118343196,
)


def sigmoid(z: float) -> float:
    # Split on sign so exp() never overflows
    if z >= 0:
        return 1.0 / (1.0 + math.exp(-z))
    ez = math.exp(z)
    return ez / (1.0 + ez)


def predict(model: Model, error: float, target_velocity: float, goal_velocity: float) -> bool:
    """Hold decision for one observation"""
    if isinstance(model, LogisticModel):
        w0, w1, w2 = model.weights
        z = model.bias + w0 * error + w1 * target_velocity + w2 * goal_velocity
        return sigmoid(z) > 0.5
    if isinstance(model, ThresholdModel):
        return error > model.error_threshold and target_velocity > model.velocity_threshold
    raise TypeError(f"Unknown model type: {type(model).__name__}")


def describe(model: Model) -> str:
    return f"{model.model_type} (accuracy {model.accuracy * 100:.1f} pct)"
