"""Constantes compartidas de articulaciones empleadas por la estimación de pose."""

from __future__ import annotations

from typing import Tuple

# Tabla índice -> etiqueta en el orden de canales del modelo CPM de 14 puntos;
# su longitud fija el número de articulaciones.
JOINT_LABELS: Tuple[str, ...] = (
    "top",
    "neck",
    "R shoulder",
    "R elbow",
    "R wrist",
    "L shoulder",
    "L elbow",
    "L wrist",
    "R hip",
    "R knee",
    "R ankle",
    "L hip",
    "L knee",
    "L ankle",
)

JOINT_COUNT: int = len(JOINT_LABELS)

__all__ = ["JOINT_LABELS", "JOINT_COUNT"]
