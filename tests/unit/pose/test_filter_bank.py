from __future__ import annotations

import pytest

from src import config
from src.B_pose_estimation.filter_bank import FilterBank
from src.B_pose_estimation.types import ABSENT, PredictedPoint
from src.core.errors import ConfigurationError


def _frame(*coords):
    return [ABSENT if c is None else PredictedPoint(x=c[0], y=c[1], confidence=c[2]) for c in coords]


def test_smooth_frame_chains_moving_average_and_kalman():
    bank = FilterBank(1)
    first = bank.smooth_frame(_frame((0.5, 0.25, 0.8)))[0]

    gain = 1.1 / 1.2
    assert first.x == pytest.approx(gain * 0.5)
    assert first.y == pytest.approx(gain * 0.25)
    assert first.confidence == pytest.approx(0.8)


def test_absent_average_passes_original_point_through():
    bank = FilterBank(2)
    out = bank.smooth_frame([ABSENT, None])
    assert out == [ABSENT, ABSENT]
    assert bank.state(0).kalman_x.estimate == 0.0


def test_absent_frame_after_detection_reuses_window_average():
    bank = FilterBank(1, use_kalman=False)
    bank.smooth_frame(_frame((0.2, 0.4, 0.5)))
    out = bank.smooth_frame(_frame(None))[0]
    assert out == PredictedPoint(x=0.2, y=0.4, confidence=0.5)


def test_reset_behaves_like_fresh_bank():
    frames = [
        _frame((0.1, 0.2, 0.9), (0.7, 0.7, 0.3)),
        _frame((0.9, 0.1, 0.4), None),
        _frame((0.3, 0.3, 0.5), (0.2, 0.8, 0.6)),
    ]
    used = FilterBank(2)
    for frame in frames:
        used.smooth_frame(frame)
    used.reset()

    probe = _frame((0.6, 0.4, 0.7), (0.5, 0.5, 0.2))
    assert used.smooth_frame(probe) == FilterBank(2).smooth_frame(probe)


def test_frame_length_must_match_joint_count():
    bank = FilterBank(3)
    with pytest.raises(ValueError):
        bank.smooth_frame(_frame((0.1, 0.1, 0.1)))


def test_invalid_construction_fails_fast():
    with pytest.raises(ConfigurationError):
        FilterBank(2, moving_average_limit=0)
    with pytest.raises(ConfigurationError):
        FilterBank(0)


def test_from_config_sizes_bank_from_label_table():
    cfg = config.load_default()
    cfg.filters.moving_average_limit = 5
    bank = FilterBank.from_config(cfg)
    assert bank.size == len(cfg.labels.labels) == 14
    assert bank.state(0).moving_average.limit == 5
