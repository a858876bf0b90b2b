"""Modelos ``dataclass`` que describen la configuración del *streaming* de keypoints."""
from __future__ import annotations
from dataclasses import dataclass, field, is_dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional
import copy
import hashlib
import json

from src.core.errors import ConfigurationError
from src.core.types import as_absent_policy, as_normalization

# Importa valores por defecto definidos en los módulos de configuración central.
from .constants import (
    CONFIDENCE_DECIMALS,
    COORDINATE_DECIMALS,
    DEFAULT_ABSENT_POLICY,
    DEFAULT_COORDINATE_NORMALIZATION,
    DEFAULT_MIN_PEAK_CONFIDENCE,
    KALMAN_MEASUREMENT_NOISE,
    KALMAN_PROCESS_NOISE,
    MODEL_INPUT_HEIGHT,
    MODEL_INPUT_WIDTH,
    MOVING_AVERAGE_LIMIT,
)


def _default_labels() -> List[str]:
    # Importación diferida: la tabla de etiquetas vive junto a la estimación de pose.
    from src.B_pose_estimation.constants import JOINT_LABELS

    return list(JOINT_LABELS)


@dataclass
class DecoderConfig:
    """Parámetros de la decodificación de heatmaps."""
    normalization: str = DEFAULT_COORDINATE_NORMALIZATION
    min_confidence: float = DEFAULT_MIN_PEAK_CONFIDENCE


@dataclass
class FilterConfig:
    """Parámetros del banco de filtros (media móvil + Kalman)."""
    moving_average_limit: int = MOVING_AVERAGE_LIMIT
    kalman_q: float = KALMAN_PROCESS_NOISE
    kalman_r: float = KALMAN_MEASUREMENT_NOISE
    use_kalman: bool = True


@dataclass
class LabelConfig:
    """Tabla de etiquetas y formato de salida de los keypoints."""
    labels: List[str] = field(default_factory=_default_labels)
    coordinate_decimals: int = COORDINATE_DECIMALS
    confidence_decimals: int = CONFIDENCE_DECIMALS
    absent_policy: str = DEFAULT_ABSENT_POLICY


@dataclass
class ModelConfig:
    """Origen y tamaño de entrada del modelo de heatmaps."""
    model_path: Optional[Path] = None
    input_width: int = MODEL_INPUT_WIDTH
    input_height: int = MODEL_INPUT_HEIGHT
    swap_rb: bool = True


@dataclass
class Config:
    """Configuración de alto nivel consumida por el *streaming* completo."""
    decoder: DecoderConfig = field(default_factory=DecoderConfig)
    filters: FilterConfig = field(default_factory=FilterConfig)
    labels: LabelConfig = field(default_factory=LabelConfig)
    model: ModelConfig = field(default_factory=ModelConfig)

    @property
    def num_joints(self) -> int:
        """Número de articulaciones, fijado por la tabla de etiquetas."""
        return len(self.labels.labels)

    def copy(self) -> "Config":
        """Devuelve una copia profunda del objeto de configuración."""
        return copy.deepcopy(self)

    def validate(self) -> "Config":
        """Comprueba los contratos de construcción y falla pronto si se rompen."""
        if self.num_joints <= 0:
            raise ConfigurationError("labels must contain at least one joint")
        limit = self.filters.moving_average_limit
        if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
            raise ConfigurationError(
                f"moving_average_limit must be > 0, got {self.filters.moving_average_limit!r}"
            )
        if float(self.filters.kalman_q) <= 0 or float(self.filters.kalman_r) <= 0:
            raise ConfigurationError("kalman_q and kalman_r must be positive")
        if self.labels.coordinate_decimals < 0 or self.labels.confidence_decimals < 0:
            raise ConfigurationError("decimal precision cannot be negative")
        try:
            as_normalization(self.decoder.normalization)
            as_absent_policy(self.labels.absent_policy)
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc
        return self

    # --- Serialisation helpers -------------------------------------------------
    def _to_dict(self, convert_paths: bool = False) -> Dict[str, Any]:
        return _dataclass_to_dict(self, convert_paths=convert_paths)

    def to_dict(self) -> Dict[str, Any]:
        """Entrega la configuración como diccionario de Python."""
        return self._to_dict(convert_paths=False)

    def to_serializable_dict(self) -> Dict[str, Any]:
        """Genera una representación serializable en JSON."""
        return self._to_dict(convert_paths=True)

    # --- Fingerprint -----------------------------------------------------------
    def fingerprint(self) -> str:
        """Calcula un hash SHA1 de los parámetros que afectan a los keypoints emitidos."""
        payload = {
            "decoder": _dataclass_to_dict(self.decoder, convert_paths=True),
            "filters": _dataclass_to_dict(self.filters, convert_paths=True),
            "labels": _dataclass_to_dict(self.labels, convert_paths=True),
        }
        encoded = json.dumps(payload, sort_keys=True, ensure_ascii=False).encode("utf-8")
        return hashlib.sha1(encoded).hexdigest()


# --- Internal utilities -------------------------------------------------------

def _dataclass_to_dict(obj: Any, *, convert_paths: bool = False) -> Any:
    """Convierte recursivamente ``dataclasses`` (y anidados) en diccionarios."""
    if is_dataclass(obj):
        return {key: _dataclass_to_dict(value, convert_paths=convert_paths) for key, value in obj.__dict__.items()}
    if isinstance(obj, dict):
        return {key: _dataclass_to_dict(value, convert_paths=convert_paths) for key, value in obj.items()}
    if isinstance(obj, list):
        return [_dataclass_to_dict(value, convert_paths=convert_paths) for value in obj]
    if isinstance(obj, Path):
        return str(obj) if convert_paths else obj
    return obj


def _update_dataclass(instance: Any, updates: Dict[str, Any]) -> Any:
    """Actualiza recursivamente ``instance`` respetando los límites de cada ``dataclass``."""
    for key, value in updates.items():
        if not hasattr(instance, key):
            continue
        current = getattr(instance, key)
        if is_dataclass(current) and isinstance(value, dict):
            _update_dataclass(current, value)
        else:
            setattr(instance, key, value)
    return instance
