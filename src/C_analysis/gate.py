"""Compuerta de inferencia: como máximo un ciclo decodificar+suavizar en vuelo.

Los *frames* llegan desde la captura a su propio ritmo. Si la compuerta está
ocupada el *frame* se descarta (sin cola ni acumulación), de modo que la
latencia queda acotada por un único viaje de inferencia. El trabajo se envía a
un ``ThreadPoolExecutor`` de un solo hilo, que además serializa físicamente las
llamadas al modelo incluso después de un ``reset``.

Un ``reset`` incrementa la generación: el resultado tardío de un ciclo anterior
se descarta y el banco de filtros se limpia bajo el mismo *lock* que protege el
suavizado, así que nunca compite con un ciclo en curso. La generación se vuelve
a comprobar al contar el ciclo como completado: un ``reset`` que llega entre el
suavizado y la entrega también descarta el resultado.
"""

from __future__ import annotations

import atexit
import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from queue import Empty, SimpleQueue
from typing import Callable, Optional

import numpy as np

from src.B_pose_estimation.estimators.base import HeatmapModelBase, as_heatmap_model
from src.B_pose_estimation.types import HeatmapTensor
from src.core.errors import InferenceFailure
from src.core.types import GateState

from .streaming import KeypointPipeline, KeypointResult

logger = logging.getLogger(__name__)

KeypointCallback = Callable[[KeypointResult], None]


@dataclass(frozen=True)
class GateStats:
    """Contadores acumulados de la compuerta (instantánea inmutable)."""

    admitted: int = 0
    dropped: int = 0
    completed: int = 0
    failed: int = 0
    discarded: int = 0


class InferenceGate:
    """Admite un *frame* solo cuando no hay otro ciclo en vuelo."""

    def __init__(
        self,
        model: "HeatmapModelBase | Callable[[np.ndarray], HeatmapTensor]",
        pipeline: KeypointPipeline,
        *,
        on_keypoints: Optional[KeypointCallback] = None,
        executor: Optional[Executor] = None,
    ) -> None:
        self._model = as_heatmap_model(model)
        self._pipeline = pipeline
        self._on_keypoints = on_keypoints
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="inference")
        if self._owns_executor:
            atexit.register(self._executor.shutdown, wait=False, cancel_futures=True)
        self._closed = False

        # Orden de adquisición: _pipeline_lock antes que _state_lock.
        self._state_lock = threading.Lock()
        self._pipeline_lock = threading.Lock()
        self._state = GateState.IDLE
        self._generation = 0
        self._next_frame_index = 0
        self._inflight: Optional[Future] = None
        self._results: SimpleQueue = SimpleQueue()
        self._counts = {"admitted": 0, "dropped": 0, "completed": 0, "failed": 0, "discarded": 0}

    # --- Estado ---------------------------------------------------------------
    @property
    def state(self) -> GateState:
        with self._state_lock:
            return self._state

    @property
    def is_busy(self) -> bool:
        return self.state is GateState.BUSY

    @property
    def generation(self) -> int:
        with self._state_lock:
            return self._generation

    @property
    def stats(self) -> GateStats:
        with self._state_lock:
            return GateStats(**self._counts)

    @property
    def pipeline(self) -> KeypointPipeline:
        return self._pipeline

    # --- Entrada de frames ----------------------------------------------------
    def on_frame(self, frame: np.ndarray, timestamp: Optional[float] = None) -> bool:
        """Intenta admitir ``frame``; devuelve ``False`` si se descartó por estar ocupada."""

        with self._state_lock:
            frame_index = self._next_frame_index
            self._next_frame_index += 1
            if self._state is GateState.BUSY:
                self._counts["dropped"] += 1
                logger.debug("Frame %d dropped: inference in flight", frame_index)
                return False
            self._state = GateState.BUSY
            self._counts["admitted"] += 1
            generation = self._generation

        try:
            future = self._executor.submit(self._run_cycle, frame, frame_index, timestamp, generation)
        except RuntimeError:
            # Executor cerrado: deshacemos la admisión para no quedar BUSY.
            with self._state_lock:
                self._counts["admitted"] -= 1
                if self._generation == generation:
                    self._state = GateState.IDLE
            raise
        self._inflight = future
        return True

    def on_source_changed(self) -> None:
        """Alias de ``reset`` para el aviso de cambio de cámara de la captura."""

        self.reset()

    def reset(self) -> None:
        """Fuerza ``IDLE``, limpia los filtros e ignora resultados tardíos en vuelo."""

        with self._pipeline_lock:
            with self._state_lock:
                self._generation += 1
                was_busy = self._state is GateState.BUSY
                self._state = GateState.IDLE
                generation = self._generation
            self._pipeline.reset()
        logger.info("Inference gate reset (generation=%d, in_flight_discarded=%s)", generation, was_busy)

    # --- Ciclo en el hilo de trabajo ------------------------------------------
    def _infer(self, frame: np.ndarray, frame_index: int) -> HeatmapTensor:
        try:
            return self._model.infer(frame)
        except Exception as exc:
            raise InferenceFailure(f"Heatmap model failed on frame {frame_index}: {exc}") from exc

    def _run_cycle(
        self,
        frame: np.ndarray,
        frame_index: int,
        timestamp: Optional[float],
        generation: int,
    ) -> Optional[KeypointResult]:
        try:
            heatmaps = self._infer(frame, frame_index)
            with self._pipeline_lock:
                if not self._is_current(generation):
                    self._count("discarded")
                    logger.debug("Late result for frame %d discarded after reset", frame_index)
                    return None
                keypoints = self._pipeline.process(heatmaps)
                result = KeypointResult(
                    frame_index=frame_index,
                    timestamp=timestamp,
                    keypoints=tuple(keypoints),
                    generation=generation,
                )

            if not self._complete(generation):
                logger.debug("Result for frame %d discarded: reset during completion", frame_index)
                return None
            self._emit(result)
            return result
        except InferenceFailure as exc:
            self._count("failed")
            logger.warning("%s; frame dropped", exc)
            return None
        except Exception:
            self._count("failed")
            logger.exception("Keypoint pipeline failed for frame %d", frame_index)
            return None
        finally:
            self._release(generation)

    def _emit(self, result: KeypointResult) -> None:
        self._results.put(result)
        if self._on_keypoints is None:
            return
        try:
            self._on_keypoints(result)
        except Exception:
            logger.exception("Keypoint callback failed for frame %d", result.frame_index)

    def _is_current(self, generation: int) -> bool:
        with self._state_lock:
            return generation == self._generation

    def _complete(self, generation: int) -> bool:
        """Cuenta el ciclo como completado o descartado en un solo paso atómico."""

        with self._state_lock:
            if generation != self._generation:
                self._counts["discarded"] += 1
                return False
            self._counts["completed"] += 1
            return True

    def _count(self, key: str) -> None:
        with self._state_lock:
            self._counts[key] += 1

    def _release(self, generation: int) -> None:
        with self._state_lock:
            # Tras un reset la compuerta ya está IDLE (o BUSY por un frame nuevo).
            if generation == self._generation:
                self._state = GateState.IDLE

    # --- Salida ---------------------------------------------------------------
    def poll_latest(self) -> Optional[KeypointResult]:
        """Vacía la cola de resultados y devuelve el más reciente de la generación actual."""

        current = self.generation
        latest: Optional[KeypointResult] = None
        while True:
            try:
                result = self._results.get_nowait()
            except Empty:
                break
            if result.generation != current:
                continue
            latest = result
        return latest

    def join(self, timeout: Optional[float] = None) -> bool:
        """Espera al ciclo en vuelo; devuelve ``True`` si terminó dentro de ``timeout``."""

        future = self._inflight
        if future is None:
            return True
        done, _ = wait([future], timeout=timeout)
        return bool(done)

    def close(self, *, wait_for_inflight: bool = True) -> None:
        if not self._owns_executor or self._closed:
            return
        self._closed = True
        atexit.unregister(self._executor.shutdown)
        self._executor.shutdown(wait=wait_for_inflight, cancel_futures=True)

    def __enter__(self) -> "InferenceGate":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> Optional[bool]:
        self.close()
        return None


__all__ = ["GateStats", "InferenceGate", "KeypointCallback"]
