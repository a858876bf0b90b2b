"""Interfaces base que comparten todos los modelos de heatmaps."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Optional

import numpy as np

from ..types import HeatmapTensor


class HeatmapModelBase(ABC):
    """Clase abstracta que define el contrato mínimo de un modelo de heatmaps.

    El modelo es un colaborador opaco: recibe un *frame* (``H, W, 3`` BGR
    ``uint8``) y devuelve un tensor ``(articulaciones, alto, ancho)``. Puede
    lanzar cualquier excepción; la compuerta de inferencia la trata como un
    *frame* descartado.
    """

    @abstractmethod
    def infer(self, frame: np.ndarray) -> HeatmapTensor:
        """Ejecuta el modelo sobre ``frame`` y devuelve el tensor de heatmaps."""

    def close(self) -> None:
        """Libera recursos asociados al modelo (sobrescribible)."""

    def __enter__(self):
        """Permite usar el modelo como *context manager* estándar."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> Optional[bool]:
        """Cierra el modelo al salir del contexto gestionado."""
        self.close()
        return None


class CallableHeatmapModel(HeatmapModelBase):
    """Adapta una función ``frame -> tensor`` al contrato ``HeatmapModelBase``."""

    def __init__(self, func: Callable[[np.ndarray], HeatmapTensor]) -> None:
        self._func = func

    def infer(self, frame: np.ndarray) -> HeatmapTensor:
        return self._func(frame)


def as_heatmap_model(model: "HeatmapModelBase | Callable[[np.ndarray], HeatmapTensor]") -> HeatmapModelBase:
    """Devuelve ``model`` tal cual o envuelto si es una función simple."""

    if isinstance(model, HeatmapModelBase):
        return model
    if callable(model):
        return CallableHeatmapModel(model)
    raise TypeError(f"Expected a HeatmapModelBase or callable, got {type(model).__name__}")


__all__ = ["CallableHeatmapModel", "HeatmapModelBase", "as_heatmap_model"]
