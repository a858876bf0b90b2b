"""Prueba extremo a extremo: heatmaps sintéticos → keypoints etiquetados."""

from __future__ import annotations

import numpy as np
import pytest

from src import config
from src.B_pose_estimation.decoding import HeatmapDecoder
from src.B_pose_estimation.filter_bank import FilterBank
from src.B_pose_estimation.labeling import KeypointLabeler
from src.C_analysis.streaming import KeypointPipeline
from src.core.errors import ConfigurationError

LABELS = ["neck", "R knee"]

# (joint, row, col, score) por frame; el joint 0 falta en el tercero.
PEAKS = [
    [(0, 1, 2, 0.9), (1, 3, 0, 0.8)],
    [(0, 1, 3, 0.7), (1, 2, 0, 0.6)],
    [(1, 2, 1, 0.5)],
]


def _heatmaps() -> list[np.ndarray]:
    frames = []
    for peaks in PEAKS:
        tensor = np.zeros((2, 4, 4))
        for joint, row, col, score in peaks:
            tensor[joint, row, col] = score
        frames.append(tensor)
    return frames


def _expected_final() -> dict[str, tuple[float, float, float]]:
    """Media móvil (ventana 3) seguida de Kalman escalar, calculado a mano."""

    def kalman(measurements):
        x, p = 0.0, 1.0
        for m in measurements:
            p_pred = p + 0.1
            k = p_pred / (p_pred + 0.1)
            x = x + k * (m - x)
            p = (1 - k) * p_pred
        return x

    # Joint 0: ventanas [p1], [p1, p2], [p1, p2, ausente]
    j0_x = [2 / 3, (2 / 3 + 1) / 2, (2 / 3 + 1) / 2]
    j0_y = [1 / 3, 1 / 3, 1 / 3]
    # Joint 1: ventanas [q1], [q1, q2], [q1, q2, q3]
    j1_x = [0.0, 0.0, (0 + 0 + 1 / 3) / 3]
    j1_y = [1.0, (1 + 2 / 3) / 2, (1 + 2 / 3 + 2 / 3) / 3]
    return {
        "neck": (kalman(j0_x), kalman(j0_y), 0.9 + 0.7),
        "R knee": (kalman(j1_x), kalman(j1_y), 0.8 + 0.6 + 0.5),
    }


def test_end_to_end_matches_hand_computed_result():
    pipeline = KeypointPipeline(HeatmapDecoder(2), FilterBank(2), KeypointLabeler(LABELS))

    keypoints = []
    for tensor in _heatmaps():
        keypoints = pipeline.process(tensor)

    expected = _expected_final()
    assert [kp.label for kp in keypoints] == LABELS
    for kp in keypoints:
        ex, ey, escore = expected[kp.label]
        assert kp.x == pytest.approx(ex, abs=1e-6)
        assert kp.y == pytest.approx(ey, abs=1e-6)
        assert kp.score == pytest.approx(escore, abs=1e-6)
        assert kp.point == f"({ex:.3f}, {ey:.3f})"


def test_reset_clears_filter_history():
    pipeline = KeypointPipeline(HeatmapDecoder(2), FilterBank(2), KeypointLabeler(LABELS))
    frames = _heatmaps()
    first = pipeline.process(frames[0])
    pipeline.process(frames[1])

    pipeline.reset()

    assert pipeline.process(frames[0]) == first


def test_empty_output_when_every_joint_absent():
    pipeline = KeypointPipeline(HeatmapDecoder(2), FilterBank(2), KeypointLabeler(LABELS))
    assert pipeline.process(np.zeros((2, 4, 4))) == []


def test_stage_sizes_must_agree():
    with pytest.raises(ConfigurationError):
        KeypointPipeline(HeatmapDecoder(2), FilterBank(3), KeypointLabeler(LABELS))


def test_from_config_uses_fourteen_joint_table():
    pipeline = KeypointPipeline.from_config(config.load_default())
    tensor = np.zeros((14, 96, 96), dtype=np.float32)
    tensor[5, 10, 20] = 0.75

    keypoints = pipeline.process(tensor)

    assert [kp.label for kp in keypoints] == ["L shoulder"]
    assert keypoints[0].confidence == "0.75"
