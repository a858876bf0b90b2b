"""Tipos ligeros que describen heatmaps, puntos predichos y keypoints etiquetados."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Tuple, Union

import numpy as np

# Tensor (articulaciones, alto, ancho) de activaciones no negativas.
HeatmapTensor = np.ndarray


@dataclass(frozen=True)
class PredictedPoint:
    """Estimación (posición normalizada + confianza) de una articulación en un *frame*."""

    x: float
    y: float
    confidence: float

    @property
    def position(self) -> Tuple[float, float]:
        """Devuelve la posición ``(x, y)`` en coordenadas normalizadas."""

        return (self.x, self.y)


class _Absent:
    """Marcador único para "sin detección en este *frame*"."""

    _instance: Optional["_Absent"] = None

    def __new__(cls) -> "_Absent":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"

    def __reduce__(self):
        return (_Absent, ())


ABSENT = _Absent()

JointEstimate = Union[PredictedPoint, _Absent]


def is_present(estimate: object) -> bool:
    """Indica si ``estimate`` contiene un ``PredictedPoint``."""

    return isinstance(estimate, PredictedPoint)


def as_estimate(value: Optional[JointEstimate]) -> JointEstimate:
    """Acepta ``None`` como sinónimo de ``ABSENT`` en las fronteras entre etapas."""

    if value is None or value is ABSENT:
        return ABSENT
    if isinstance(value, PredictedPoint):
        return value
    raise TypeError(f"Expected PredictedPoint or ABSENT, got {type(value).__name__}")


_POINT_PATTERN = re.compile(r"^\(\s*([-+0-9.eE]+)\s*,\s*([-+0-9.eE]+)\s*\)$")


@dataclass(frozen=True)
class LabeledKeypoint:
    """Registro observable de una articulación, listo para mostrarse.

    ``point`` y ``confidence`` son cadenas con precisión fija; los valores de
    coma flotante completos se conservan en ``x``, ``y`` y ``score`` para el
    análisis posterior.
    """

    label: str
    point: str
    confidence: str
    index: int
    x: float
    y: float
    score: float

    def to_dict(self) -> dict[str, object]:
        """Exporta el keypoint a un diccionario simple."""

        return {
            "index": int(self.index),
            "label": self.label,
            "point": self.point,
            "confidence": self.confidence,
            "x": float(self.x),
            "y": float(self.y),
            "score": float(self.score),
        }

    @staticmethod
    def parse_point(text: str) -> Optional[Tuple[float, float]]:
        """Interpreta una cadena ``"(x, y)"`` devolviendo ``None`` si no es válida."""

        match = _POINT_PATTERN.match(text.strip())
        if match is None:
            return None
        try:
            return float(match.group(1)), float(match.group(2))
        except ValueError:
            return None


__all__ = [
    "ABSENT",
    "HeatmapTensor",
    "JointEstimate",
    "LabeledKeypoint",
    "PredictedPoint",
    "as_estimate",
    "is_present",
]
