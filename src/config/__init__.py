"""Reexportaciones para mantener compatibilidad con ``from src import config``."""

from __future__ import annotations

from .constants import (
    CONFIDENCE_DECIMALS,
    COORDINATE_DECIMALS,
    KALMAN_MEASUREMENT_NOISE,
    KALMAN_PROCESS_NOISE,
    MOVING_AVERAGE_LIMIT,
)
from .models import Config, DecoderConfig, FilterConfig, LabelConfig, ModelConfig
from .utils import from_yaml, load_default

__all__ = [
    # Models
    "Config",
    "DecoderConfig",
    "FilterConfig",
    "LabelConfig",
    "ModelConfig",

    # Utilities
    "load_default",
    "from_yaml",

    # Constants
    "MOVING_AVERAGE_LIMIT",
    "KALMAN_PROCESS_NOISE",
    "KALMAN_MEASUREMENT_NOISE",
    "COORDINATE_DECIMALS",
    "CONFIDENCE_DECIMALS",
]
