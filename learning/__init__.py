"""
Learning Module
===============
Hold/release models for the minigame and the online trainer that fits them.

Modules:
    - model: LogisticModel | ThresholdModel union, predict(), DEFAULT_MODEL
    - trainer: Sample, OnlineTrainer, train_logistic/train_threshold
    - model_store: JSON model file and CSV training data persistence
"""

from .model import LogisticModel, ThresholdModel, DEFAULT_MODEL, predict
from .trainer import Sample, OnlineTrainer, train_model
from .model_store import ModelStore

__all__ = [
    'LogisticModel',
    'ThresholdModel',
    'DEFAULT_MODEL',
    'predict',
    'Sample',
    'OnlineTrainer',
    'train_model',
    'ModelStore',
]
