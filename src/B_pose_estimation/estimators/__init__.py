"""API pública de modelos de heatmaps disponibles en el paquete."""

from .base import CallableHeatmapModel, HeatmapModelBase, as_heatmap_model
from .opencv_dnn import OpenCVHeatmapModel, preprocess_frame

__all__ = [
    "HeatmapModelBase",
    "CallableHeatmapModel",
    "OpenCVHeatmapModel",
    "as_heatmap_model",
    "preprocess_frame",
]
