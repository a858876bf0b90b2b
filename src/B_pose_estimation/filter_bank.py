"""Banco de filtros que suaviza las estimaciones de un *frame* completo."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Sequence

from src.config.constants import (
    KALMAN_MEASUREMENT_NOISE,
    KALMAN_PROCESS_NOISE,
    MOVING_AVERAGE_LIMIT,
)
from src.core.errors import ConfigurationError

from .filters import KalmanFilter, MovingAverageFilter
from .types import JointEstimate, PredictedPoint, as_estimate

if TYPE_CHECKING:
    from src.config.models import Config

logger = logging.getLogger(__name__)


@dataclass
class JointFilterState:
    """Estado persistente de una articulación: ventana de media móvil y Kalman por eje."""

    moving_average: MovingAverageFilter
    kalman_x: KalmanFilter
    kalman_y: KalmanFilter

    def reset(self) -> None:
        self.moving_average.clear()
        self.kalman_x.reset()
        self.kalman_y.reset()


class FilterBank:
    """Posee y coordina los filtros de todas las articulaciones.

    El tamaño se fija en la construcción. Solo el ciclo activo de
    decodificación y suavizado debe mutar el banco; ``reset`` lo devuelve al
    estado recién construido (necesario tras un cambio de cámara para no
    suavizar a través de un salto de coordenadas).
    """

    def __init__(
        self,
        num_joints: int,
        *,
        moving_average_limit: int = MOVING_AVERAGE_LIMIT,
        kalman_q: float = KALMAN_PROCESS_NOISE,
        kalman_r: float = KALMAN_MEASUREMENT_NOISE,
        use_kalman: bool = True,
    ) -> None:
        if int(num_joints) <= 0:
            raise ConfigurationError(f"num_joints must be > 0, got {num_joints!r}")
        self.use_kalman = bool(use_kalman)
        self._states: List[JointFilterState] = [
            JointFilterState(
                moving_average=MovingAverageFilter(moving_average_limit),
                kalman_x=KalmanFilter(kalman_q, kalman_r),
                kalman_y=KalmanFilter(kalman_q, kalman_r),
            )
            for _ in range(int(num_joints))
        ]

    @classmethod
    def from_config(cls, cfg: "Config") -> "FilterBank":
        return cls(
            cfg.num_joints,
            moving_average_limit=cfg.filters.moving_average_limit,
            kalman_q=float(cfg.filters.kalman_q),
            kalman_r=float(cfg.filters.kalman_r),
            use_kalman=bool(cfg.filters.use_kalman),
        )

    @property
    def size(self) -> int:
        return len(self._states)

    def __len__(self) -> int:
        return len(self._states)

    def state(self, joint_index: int) -> JointFilterState:
        return self._states[joint_index]

    def smooth_frame(self, points: Sequence[Optional[JointEstimate]]) -> List[JointEstimate]:
        """Suaviza las estimaciones de un *frame*, una por articulación.

        Si la ventana no tiene ninguna entrada presente se devuelve la
        estimación original sin tocar: el suavizado nunca inventa datos.
        """

        if len(points) != len(self._states):
            raise ValueError(f"Expected {len(self._states)} joint estimates, got {len(points)}")

        smoothed: List[JointEstimate] = []
        for state, raw in zip(self._states, points):
            estimate = as_estimate(raw)
            state.moving_average.add(estimate)
            averaged = state.moving_average.averaged_value()
            if not isinstance(averaged, PredictedPoint):
                smoothed.append(estimate)
                continue
            if not self.use_kalman:
                smoothed.append(averaged)
                continue
            smoothed.append(
                PredictedPoint(
                    x=state.kalman_x.update(averaged.x),
                    y=state.kalman_y.update(averaged.y),
                    confidence=averaged.confidence,
                )
            )
        return smoothed

    def reset(self) -> None:
        for state in self._states:
            state.reset()
        logger.debug("Filter bank reset (%d joints)", len(self._states))


__all__ = ["FilterBank", "JointFilterState"]
