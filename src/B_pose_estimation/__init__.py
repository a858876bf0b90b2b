"""Exportaciones principales del paquete de estimación de pose en vivo."""

from .constants import JOINT_COUNT, JOINT_LABELS
from .decoding import HeatmapDecoder, decode_channel, normalize_peak
from .estimators import CallableHeatmapModel, HeatmapModelBase, OpenCVHeatmapModel
from .filter_bank import FilterBank, JointFilterState
from .filters import KalmanFilter, MovingAverageFilter
from .labeling import KeypointLabeler, keypoints_to_frame
from .types import ABSENT, HeatmapTensor, JointEstimate, LabeledKeypoint, PredictedPoint, is_present

__all__ = [
    "ABSENT",
    "HeatmapTensor",
    "JointEstimate",
    "LabeledKeypoint",
    "PredictedPoint",
    "is_present",
    "JOINT_COUNT",
    "JOINT_LABELS",
    "HeatmapDecoder",
    "decode_channel",
    "normalize_peak",
    "MovingAverageFilter",
    "KalmanFilter",
    "FilterBank",
    "JointFilterState",
    "KeypointLabeler",
    "keypoints_to_frame",
    "HeatmapModelBase",
    "CallableHeatmapModel",
    "OpenCVHeatmapModel",
]
