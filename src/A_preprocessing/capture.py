"""Lectura secuencial de *frames* desde un archivo de vídeo o una cámara."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterator, Optional, Union

import cv2
import numpy as np

from src.core.errors import VideoOpenError

logger = logging.getLogger(__name__)

CaptureSource = Union[str, int]


@dataclass(slots=True)
class CapturedFrame:
    """Un *frame* capturado junto con su marca temporal en segundos."""

    index: int
    timestamp_sec: float
    array: np.ndarray


def parse_capture_source(value: str) -> CaptureSource:
    """Interpreta ``"0"``, ``"1"``... como índice de cámara y el resto como ruta."""

    text = str(value).strip()
    return int(text) if text.isdigit() else text


def open_capture(source: CaptureSource) -> cv2.VideoCapture:
    """Abrir un `VideoCapture` y validar que el manejador sea válido."""

    cap = cv2.VideoCapture(source)
    if not cap.isOpened():
        cap.release()
        raise VideoOpenError(f"Could not open the capture source: {source}")
    return cap


def _frame_timestamp(cap: cv2.VideoCapture, index: int, fps: float) -> float:
    pos_msec = float(cap.get(cv2.CAP_PROP_POS_MSEC) or 0.0)
    if math.isfinite(pos_msec) and (pos_msec > 0 or index == 0):
        return pos_msec / 1000.0
    # Las cámaras en vivo no siempre informan la posición; usamos el índice.
    return index / fps if fps > 0 else float(index)


def iter_capture_frames(
    source: CaptureSource,
    *,
    max_frames: Optional[int] = None,
    mirror: bool = False,
) -> Iterator[CapturedFrame]:
    """Genera los *frames* de ``source`` hasta agotarlo o alcanzar ``max_frames``.

    ``mirror`` voltea horizontalmente cada *frame* (vista de cámara frontal).
    """

    cap = open_capture(source)
    try:
        fps = float(cap.get(cv2.CAP_PROP_FPS) or 0.0)
        if not math.isfinite(fps) or fps <= 0:
            fps = 0.0
        logger.info("Capture opened: source=%s fps=%.2f", source, fps)

        index = 0
        while max_frames is None or index < max_frames:
            ok, frame = cap.read()
            if not ok or frame is None:
                break
            timestamp = _frame_timestamp(cap, index, fps)
            if mirror:
                frame = cv2.flip(frame, 1)
            yield CapturedFrame(index=index, timestamp_sec=timestamp, array=frame)
            index += 1
        logger.info("Capture finished after %d frames", index)
    finally:
        cap.release()


__all__ = ["CaptureSource", "CapturedFrame", "iter_capture_frames", "open_capture", "parse_capture_source"]
