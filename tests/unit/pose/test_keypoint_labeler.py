from __future__ import annotations

import numpy as np
import pytest

from src.B_pose_estimation.labeling import KEYPOINT_COLUMNS, KeypointLabeler, keypoints_to_frame
from src.B_pose_estimation.types import ABSENT, LabeledKeypoint, PredictedPoint
from src.C_analysis.streaming import KeypointResult
from src.core.errors import ConfigurationError


def test_label_formats_and_omits_absent_joints():
    labeler = KeypointLabeler(["neck", "R shoulder", "L shoulder"])
    points = [
        PredictedPoint(x=0.12345, y=0.5, confidence=1.23456),
        ABSENT,
        PredictedPoint(x=1.0, y=0.0, confidence=0.005),
    ]

    keypoints = labeler.label(points)

    assert [kp.label for kp in keypoints] == ["neck", "L shoulder"]
    assert keypoints[0].point == "(0.123, 0.500)"
    assert keypoints[0].confidence == "1.23"
    assert keypoints[0].x == 0.12345  # precisión completa intacta
    assert keypoints[1].index == 2
    assert keypoints[1].point == "(1.000, 0.000)"


def test_placeholder_policy_emits_zeroed_records():
    labeler = KeypointLabeler(["a", "b"], absent_policy="placeholder")
    keypoints = labeler.label([ABSENT, PredictedPoint(x=0.5, y=0.5, confidence=0.5)])
    assert [kp.label for kp in keypoints] == ["a", "b"]
    assert keypoints[0].point == "(0.000, 0.000)"
    assert keypoints[0].confidence == "0.00"


def test_label_length_mismatch_is_rejected():
    with pytest.raises(ValueError):
        KeypointLabeler(["a", "b"]).label([ABSENT])
    with pytest.raises(ConfigurationError):
        KeypointLabeler([])


def test_parse_point_round_trips_formatted_text():
    assert LabeledKeypoint.parse_point("(0.125, 0.750)") == (0.125, 0.75)
    assert LabeledKeypoint.parse_point("not a point") is None


def test_keypoints_to_frame_flattens_results():
    labeler = KeypointLabeler(["a", "b"])
    results = [
        KeypointResult(
            frame_index=0,
            timestamp=0.0,
            keypoints=tuple(labeler.label([PredictedPoint(0.1, 0.2, 0.3), ABSENT])),
        ),
        KeypointResult(
            frame_index=2,
            timestamp=None,
            keypoints=tuple(labeler.label([PredictedPoint(0.4, 0.5, 0.6), PredictedPoint(0.7, 0.8, 0.9)])),
        ),
    ]

    df = keypoints_to_frame(results)

    assert list(df.columns) == KEYPOINT_COLUMNS
    assert len(df) == 3
    assert df["label"].tolist() == ["a", "a", "b"]
    assert np.isnan(df.loc[1, "timestamp"])
    assert keypoints_to_frame([]).empty
