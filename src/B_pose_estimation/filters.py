"""Filtros temporales por articulación: media móvil y Kalman escalar."""

from __future__ import annotations

from collections import deque
from typing import Deque, Optional, Tuple

from src.config.constants import (
    KALMAN_INITIAL_COVARIANCE,
    KALMAN_INITIAL_ESTIMATE,
    KALMAN_MEASUREMENT_NOISE,
    KALMAN_PROCESS_NOISE,
)
from src.core.errors import ConfigurationError

from .types import ABSENT, JointEstimate, PredictedPoint, as_estimate


class MovingAverageFilter:
    """Ventana FIFO de tamaño fijo sobre las últimas estimaciones de una articulación.

    Las entradas ausentes ocupan hueco en la ventana (cuentan para el desalojo)
    pero no participan en el promedio.
    """

    def __init__(self, limit: int) -> None:
        if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
            raise ConfigurationError(f"MovingAverageFilter limit must be a positive int, got {limit!r}")
        self._limit = limit
        self._elements: Deque[JointEstimate] = deque(maxlen=limit)

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def elements(self) -> Tuple[JointEstimate, ...]:
        return tuple(self._elements)

    def __len__(self) -> int:
        return len(self._elements)

    def add(self, point: Optional[JointEstimate]) -> None:
        """Añade una estimación; ``deque(maxlen)`` desaloja la más antigua."""

        self._elements.append(as_estimate(point))

    def averaged_value(self) -> JointEstimate:
        """Posición media y **suma** de confianzas de las entradas presentes.

        La confianza se acumula en lugar de promediarse: refleja la certeza
        agregada de la ventana, no una probabilidad por muestra.
        """

        present = [item for item in self._elements if isinstance(item, PredictedPoint)]
        if not present:
            return ABSENT
        count = float(len(present))
        return PredictedPoint(
            x=sum(item.x for item in present) / count,
            y=sum(item.y for item in present) / count,
            confidence=sum(item.confidence for item in present),
        )

    def clear(self) -> None:
        self._elements.clear()


class KalmanFilter:
    """Filtro de Kalman escalar (modelo de posición constante).

    Recursión por medida ``m``::

        p_pred = p + q
        k = p_pred / (p_pred + r)
        x = x + k * (m - x)
        p = (1 - k) * p_pred
    """

    def __init__(
        self,
        q: float = KALMAN_PROCESS_NOISE,
        r: float = KALMAN_MEASUREMENT_NOISE,
        *,
        initial_estimate: float = KALMAN_INITIAL_ESTIMATE,
        initial_covariance: float = KALMAN_INITIAL_COVARIANCE,
    ) -> None:
        if q <= 0 or r <= 0:
            raise ConfigurationError(f"Kalman noise terms must be positive (q={q!r}, r={r!r})")
        if initial_covariance < 0:
            raise ConfigurationError(f"initial_covariance cannot be negative, got {initial_covariance!r}")
        self.q = float(q)
        self.r = float(r)
        self._initial_estimate = float(initial_estimate)
        self._initial_covariance = float(initial_covariance)
        self._x = self._initial_estimate
        self._p = self._initial_covariance

    @property
    def estimate(self) -> float:
        return self._x

    @property
    def covariance(self) -> float:
        return self._p

    def update(self, measurement: float) -> float:
        p_predict = self._p + self.q
        gain = p_predict / (p_predict + self.r)
        self._x = self._x + gain * (float(measurement) - self._x)
        self._p = (1.0 - gain) * p_predict
        return self._x

    def reset(self) -> None:
        self._x = self._initial_estimate
        self._p = self._initial_covariance


__all__ = ["KalmanFilter", "MovingAverageFilter"]
