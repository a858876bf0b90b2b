"""Ciclo de procesamiento por *frame*: decodificar, suavizar y etiquetar.

``KeypointPipeline`` concentra las tres etapas puras (más el estado de los
filtros) para que la compuerta de inferencia solo tenga que decidir *cuándo*
se ejecuta un ciclo, no *cómo*.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Tuple

from src.B_pose_estimation.decoding import HeatmapDecoder
from src.B_pose_estimation.filter_bank import FilterBank
from src.B_pose_estimation.labeling import KeypointLabeler
from src.B_pose_estimation.types import LabeledKeypoint
from src.core.errors import ConfigurationError

if TYPE_CHECKING:
    from src.config.models import Config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeypointResult:
    """Keypoints emitidos para un *frame* admitido y completado."""

    frame_index: int
    timestamp: Optional[float]
    keypoints: Tuple[LabeledKeypoint, ...]
    generation: int = 0

    def to_dict(self) -> dict[str, object]:
        return {
            "frame_index": int(self.frame_index),
            "timestamp": self.timestamp,
            "keypoints": [keypoint.to_dict() for keypoint in self.keypoints],
        }


class KeypointPipeline:
    """Encadena ``HeatmapDecoder`` → ``FilterBank`` → ``KeypointLabeler``.

    El número de articulaciones debe coincidir en las tres etapas; se verifica
    en la construcción.
    """

    def __init__(self, decoder: HeatmapDecoder, filter_bank: FilterBank, labeler: KeypointLabeler) -> None:
        sizes = {
            "decoder": decoder.num_joints,
            "filter_bank": filter_bank.size,
            "labels": len(labeler.labels),
        }
        if len(set(sizes.values())) != 1:
            raise ConfigurationError(f"Joint count mismatch between pipeline stages: {sizes}")
        self.decoder = decoder
        self.filter_bank = filter_bank
        self.labeler = labeler

    @classmethod
    def from_config(cls, cfg: "Config") -> "KeypointPipeline":
        cfg.validate()
        return cls(
            HeatmapDecoder.from_config(cfg),
            FilterBank.from_config(cfg),
            KeypointLabeler.from_config(cfg),
        )

    @property
    def num_joints(self) -> int:
        return self.decoder.num_joints

    def process(self, tensor: object) -> List[LabeledKeypoint]:
        raw_points = self.decoder.decode(tensor)
        smoothed = self.filter_bank.smooth_frame(raw_points)
        keypoints = self.labeler.label(smoothed)
        logger.debug("Frame processed: %d/%d joints labeled", len(keypoints), self.num_joints)
        return keypoints

    __call__ = process

    def reset(self) -> None:
        self.filter_bank.reset()


__all__ = ["KeypointPipeline", "KeypointResult"]
