"""Etiquetado y formateo de las estimaciones suavizadas."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, List, Optional, Sequence, Union

import pandas as pd

from src.config.constants import CONFIDENCE_DECIMALS, COORDINATE_DECIMALS
from src.core.errors import ConfigurationError
from src.core.types import AbsentPolicy, as_absent_policy

from .constants import JOINT_LABELS
from .types import JointEstimate, LabeledKeypoint, PredictedPoint, as_estimate

if TYPE_CHECKING:
    from src.C_analysis.streaming import KeypointResult
    from src.config.models import Config

KEYPOINT_COLUMNS = ["frame_index", "timestamp", "index", "label", "x", "y", "score"]


class KeypointLabeler:
    """Une cada estimación con su etiqueta fija y genera el registro observable.

    El formato solo afecta a la presentación; ``x``, ``y`` y ``score`` mantienen
    la precisión completa.
    """

    def __init__(
        self,
        labels: Sequence[str] = JOINT_LABELS,
        *,
        coordinate_decimals: int = COORDINATE_DECIMALS,
        confidence_decimals: int = CONFIDENCE_DECIMALS,
        absent_policy: Union[str, AbsentPolicy, None] = AbsentPolicy.OMIT,
    ) -> None:
        if not labels:
            raise ConfigurationError("KeypointLabeler needs at least one label")
        self.labels = tuple(str(label) for label in labels)
        self.coordinate_decimals = int(coordinate_decimals)
        self.confidence_decimals = int(confidence_decimals)
        self.absent_policy = as_absent_policy(absent_policy)

    @classmethod
    def from_config(cls, cfg: "Config") -> "KeypointLabeler":
        return cls(
            cfg.labels.labels,
            coordinate_decimals=cfg.labels.coordinate_decimals,
            confidence_decimals=cfg.labels.confidence_decimals,
            absent_policy=cfg.labels.absent_policy,
        )

    def format_point(self, x: float, y: float) -> str:
        digits = self.coordinate_decimals
        return f"({x:.{digits}f}, {y:.{digits}f})"

    def format_confidence(self, confidence: float) -> str:
        return f"{confidence:.{self.confidence_decimals}f}"

    def label(self, points: Sequence[Optional[JointEstimate]]) -> List[LabeledKeypoint]:
        if len(points) != len(self.labels):
            raise ValueError(f"Expected {len(self.labels)} joint estimates, got {len(points)}")

        keypoints: List[LabeledKeypoint] = []
        for index, (name, raw) in enumerate(zip(self.labels, points)):
            estimate = as_estimate(raw)
            if isinstance(estimate, PredictedPoint):
                x, y, score = estimate.x, estimate.y, estimate.confidence
            elif self.absent_policy is AbsentPolicy.PLACEHOLDER:
                x, y, score = 0.0, 0.0, 0.0
            else:
                continue
            keypoints.append(
                LabeledKeypoint(
                    label=name,
                    point=self.format_point(x, y),
                    confidence=self.format_confidence(score),
                    index=index,
                    x=float(x),
                    y=float(y),
                    score=float(score),
                )
            )
        return keypoints

    __call__ = label


def keypoints_to_frame(results: Iterable["KeypointResult"]) -> pd.DataFrame:
    """Aplana una secuencia de resultados en un ``DataFrame`` largo (una fila por keypoint)."""

    rows: list[dict[str, object]] = []
    for result in results:
        for keypoint in result.keypoints:
            rows.append(
                {
                    "frame_index": int(result.frame_index),
                    "timestamp": float(result.timestamp) if result.timestamp is not None else float("nan"),
                    "index": int(keypoint.index),
                    "label": keypoint.label,
                    "x": float(keypoint.x),
                    "y": float(keypoint.y),
                    "score": float(keypoint.score),
                }
            )
    return pd.DataFrame.from_records(rows, columns=KEYPOINT_COLUMNS)


__all__ = ["KEYPOINT_COLUMNS", "KeypointLabeler", "keypoints_to_frame"]
