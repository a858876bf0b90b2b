"""Paquete que agrupa el ciclo por *frame* y la compuerta de inferencia en vivo."""

from .gate import GateStats, InferenceGate
from .streaming import KeypointPipeline, KeypointResult

__all__ = [
    "GateStats",
    "InferenceGate",
    "KeypointPipeline",
    "KeypointResult",
]
