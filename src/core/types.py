"""Tipos y utilidades comunes para normalizar etiquetas de configuración.

Las políticas del decodificador, del etiquetador y el estado de la compuerta de
inferencia circulan como texto libre desde YAML o la CLI; aquí se convierten a
``Enum`` una sola vez para evitar condicionales repetidos."""

from __future__ import annotations

from enum import Enum
from typing import Union


class CoordinateNormalization(str, Enum):
    """Forma de llevar (fila, columna) del heatmap al rango ``[0, 1]``."""

    EDGE = "edge"
    CELL = "cell"


class AbsentPolicy(str, Enum):
    """Qué hacer con las articulaciones sin detección al etiquetar."""

    OMIT = "omit"
    PLACEHOLDER = "placeholder"


class GateState(str, Enum):
    """Estados de la compuerta de inferencia."""

    IDLE = "idle"
    BUSY = "busy"


_NORMALIZATION_ALIAS_MAP = {
    "corner": CoordinateNormalization.EDGE.value,
    "center": CoordinateNormalization.CELL.value,
    "centre": CoordinateNormalization.CELL.value,
}

_ABSENT_ALIAS_MAP = {
    "drop": AbsentPolicy.OMIT.value,
    "skip": AbsentPolicy.OMIT.value,
    "sentinel": AbsentPolicy.PLACEHOLDER.value,
    "zero": AbsentPolicy.PLACEHOLDER.value,
}


def _normalize_label(value: str) -> str:
    """Limpiar una etiqueta textual para compararla de forma consistente."""

    normalized = value.strip().lower().replace("-", "_").replace(" ", "_")
    while "__" in normalized:
        normalized = normalized.replace("__", "_")
    return normalized


def as_normalization(value: Union[str, CoordinateNormalization, None]) -> CoordinateNormalization:
    """Convertir una entrada libre en ``CoordinateNormalization``.

    ``None`` o cadena vacía devuelven la política por defecto (``EDGE``). Un valor
    desconocido se propaga como ``ValueError``."""

    if isinstance(value, CoordinateNormalization):
        return value
    if not value:
        return CoordinateNormalization.EDGE
    normalized = _normalize_label(str(value))
    return CoordinateNormalization(_NORMALIZATION_ALIAS_MAP.get(normalized, normalized))


def as_absent_policy(value: Union[str, AbsentPolicy, None]) -> AbsentPolicy:
    """Convertir una entrada libre en ``AbsentPolicy`` (por defecto ``OMIT``)."""

    if isinstance(value, AbsentPolicy):
        return value
    if not value:
        return AbsentPolicy.OMIT
    normalized = _normalize_label(str(value))
    return AbsentPolicy(_ABSENT_ALIAS_MAP.get(normalized, normalized))
