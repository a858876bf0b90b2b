"""Modelo de heatmaps tipo CPM ejecutado con el módulo DNN de OpenCV."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import TYPE_CHECKING, Tuple

import cv2
import numpy as np

from src.config.constants import MODEL_INPUT_HEIGHT, MODEL_INPUT_WIDTH

from ..types import HeatmapTensor
from .base import HeatmapModelBase

if TYPE_CHECKING:
    from src.config.models import Config

logger = logging.getLogger(__name__)


def preprocess_frame(
    frame: np.ndarray,
    input_size: Tuple[int, int] = (MODEL_INPUT_WIDTH, MODEL_INPUT_HEIGHT),
    *,
    swap_rb: bool = True,
) -> np.ndarray:
    """Convierte un *frame* BGR en el *blob* NCHW ``float32`` que espera la red."""

    if frame.ndim == 2:
        frame = cv2.cvtColor(frame, cv2.COLOR_GRAY2BGR)
    return cv2.dnn.blobFromImage(
        frame,
        scalefactor=1.0 / 255.0,
        size=(int(input_size[0]), int(input_size[1])),
        mean=(0.0, 0.0, 0.0),
        swapRB=bool(swap_rb),
        crop=False,
    )


class OpenCVHeatmapModel(HeatmapModelBase):
    """Carga una red (ONNX, Caffe, TensorFlow...) mediante ``cv2.dnn.readNet``.

    ``cv2.dnn.Net`` no es seguro entre hilos, por eso ``infer`` se serializa
    con un *lock* propio aunque la compuerta ya garantice una sola llamada.
    """

    def __init__(
        self,
        model_path: str | Path,
        *,
        input_width: int = MODEL_INPUT_WIDTH,
        input_height: int = MODEL_INPUT_HEIGHT,
        swap_rb: bool = True,
    ) -> None:
        path = Path(model_path).expanduser()
        if not path.is_file():
            raise FileNotFoundError(f"Model file does not exist: {path}")
        self._net = cv2.dnn.readNet(str(path))
        self._lock = threading.Lock()
        self.input_size = (int(input_width), int(input_height))
        self.swap_rb = bool(swap_rb)
        logger.info("Heatmap model loaded from %s (input=%s)", path, self.input_size)

    @classmethod
    def from_config(cls, cfg: "Config") -> "OpenCVHeatmapModel":
        if cfg.model.model_path is None:
            raise ValueError("cfg.model.model_path must be set to load an OpenCV model")
        return cls(
            cfg.model.model_path,
            input_width=cfg.model.input_width,
            input_height=cfg.model.input_height,
            swap_rb=cfg.model.swap_rb,
        )

    def infer(self, frame: np.ndarray) -> HeatmapTensor:
        blob = preprocess_frame(frame, self.input_size, swap_rb=self.swap_rb)
        with self._lock:
            self._net.setInput(blob)
            output = self._net.forward()
        heatmaps = np.asarray(output, dtype=np.float32)
        # (1, J, H, W) -> (J, H, W)
        if heatmaps.ndim == 4 and heatmaps.shape[0] == 1:
            heatmaps = heatmaps[0]
        return heatmaps

    def close(self) -> None:
        self._net = None


__all__ = ["OpenCVHeatmapModel", "preprocess_frame"]
