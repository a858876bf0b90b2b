"""Decodificación de heatmaps a un punto predicho por articulación.

Cada canal del tensor es una rejilla de puntuaciones; el pico (argmax) aproxima
la posición de la articulación en la imagen. Reglas que se aplican aquí:

- Empates: gana la primera celda en orden fila-mayor (``np.argmax`` ya lo garantiza).
- Normalización: una única política por decodificador para que las coordenadas
  sean comparables entre *frames*.
- Canales vacíos, todo ceros o con valores no finitos producen ``ABSENT`` para
  esa articulación sin abortar el *frame* completo.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Union

import numpy as np

from src.core.errors import DecodeFailure
from src.core.types import CoordinateNormalization, as_normalization

from .constants import JOINT_COUNT
from .types import ABSENT, JointEstimate, PredictedPoint

if TYPE_CHECKING:
    from src.config.models import Config

logger = logging.getLogger(__name__)


def normalize_peak(
    row: int,
    col: int,
    height: int,
    width: int,
    normalization: CoordinateNormalization = CoordinateNormalization.EDGE,
) -> tuple[float, float]:
    """Lleva la celda ``(row, col)`` a coordenadas ``(x, y)`` en ``[0, 1]``."""

    if normalization is CoordinateNormalization.CELL:
        return (col + 0.5) / float(width), (row + 0.5) / float(height)
    # Un eje de una sola celda no tiene extensión: se fija en 0.
    x = col / float(width - 1) if width > 1 else 0.0
    y = row / float(height - 1) if height > 1 else 0.0
    return x, y


def decode_channel(
    grid: np.ndarray,
    *,
    normalization: CoordinateNormalization = CoordinateNormalization.EDGE,
    min_confidence: float = 0.0,
) -> JointEstimate:
    """Extrae el pico de una rejilla 2-D.

    Lanza ``DecodeFailure`` si la rejilla está malformada; devuelve ``ABSENT``
    cuando el pico no supera ``min_confidence`` (p. ej. canal todo ceros).
    """

    if grid.ndim != 2:
        raise DecodeFailure(f"Expected a 2-D score grid, got shape {grid.shape}")
    height, width = grid.shape
    if height == 0 or width == 0:
        raise DecodeFailure(f"Empty score grid with shape {grid.shape}")
    if not np.isfinite(grid).all():
        raise DecodeFailure("Score grid contains non-finite values")

    flat_index = int(np.argmax(grid))
    row, col = divmod(flat_index, width)
    score = float(grid[row, col])
    if score <= min_confidence:
        return ABSENT

    x, y = normalize_peak(row, col, height, width, normalization)
    return PredictedPoint(x=x, y=y, confidence=score)


class HeatmapDecoder:
    """Convierte un tensor de heatmaps en una secuencia de ``JointEstimate``.

    No guarda estado entre llamadas; es seguro invocarlo desde cualquier hilo.
    """

    def __init__(
        self,
        num_joints: int = JOINT_COUNT,
        *,
        normalization: Union[str, CoordinateNormalization, None] = None,
        min_confidence: float = 0.0,
    ) -> None:
        if int(num_joints) <= 0:
            raise ValueError(f"num_joints must be > 0, got {num_joints!r}")
        self.num_joints = int(num_joints)
        self.normalization = as_normalization(normalization)
        self.min_confidence = float(min_confidence)

    @classmethod
    def from_config(cls, cfg: "Config") -> "HeatmapDecoder":
        return cls(
            cfg.num_joints,
            normalization=cfg.decoder.normalization,
            min_confidence=float(cfg.decoder.min_confidence),
        )

    def decode(self, tensor: object) -> List[JointEstimate]:
        """Devuelve exactamente ``num_joints`` estimaciones para ``tensor``."""

        estimates: List[JointEstimate] = [ABSENT] * self.num_joints
        try:
            scores = np.asarray(tensor, dtype=float)
        except (TypeError, ValueError):
            logger.warning("Heatmap tensor could not be converted to a numeric array; all joints absent")
            return estimates

        # Los motores de inferencia suelen devolver un eje de lote de tamaño 1.
        if scores.ndim == 4 and scores.shape[0] == 1:
            scores = scores[0]
        if scores.ndim != 3:
            logger.warning("Malformed heatmap tensor with shape %s; all joints absent", scores.shape)
            return estimates

        channels = scores.shape[0]
        if channels != self.num_joints:
            logger.warning(
                "Heatmap tensor has %d channels but %d joints are tracked", channels, self.num_joints
            )

        for joint_index in range(min(channels, self.num_joints)):
            try:
                estimates[joint_index] = decode_channel(
                    scores[joint_index],
                    normalization=self.normalization,
                    min_confidence=self.min_confidence,
                )
            except DecodeFailure as exc:
                logger.debug("Joint %d decode failed: %s", joint_index, exc)
                estimates[joint_index] = ABSENT
        return estimates

    __call__ = decode


__all__ = ["HeatmapDecoder", "decode_channel", "normalize_peak"]
