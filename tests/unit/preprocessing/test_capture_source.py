from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

from src.A_preprocessing import capture
from src.A_preprocessing.capture import iter_capture_frames, parse_capture_source
from src.B_pose_estimation.estimators import preprocess_frame
from src.core.errors import VideoOpenError


def test_parse_capture_source_distinguishes_camera_index():
    assert parse_capture_source("0") == 0
    assert parse_capture_source(" 2 ") == 2
    assert parse_capture_source("clip.mp4") == "clip.mp4"


def test_missing_video_raises_video_open_error(tmp_path: Path):
    with pytest.raises(VideoOpenError):
        next(iter_capture_frames(str(tmp_path / "missing.mp4")))


class _FakeCapture:
    def __init__(self, frames):
        self._frames = list(frames)
        self.released = False

    def isOpened(self) -> bool:
        return True

    def read(self):
        if not self._frames:
            return False, None
        return True, self._frames.pop(0)

    def get(self, prop):
        return 10.0 if prop == capture.cv2.CAP_PROP_FPS else 0.0

    def release(self) -> None:
        self.released = True


def test_iter_capture_frames_yields_timestamps_and_mirrors(monkeypatch):
    frame = np.zeros((2, 3, 3), dtype=np.uint8)
    frame[:, 0] = 255
    fake = _FakeCapture([frame.copy() for _ in range(4)])
    monkeypatch.setattr(capture, "open_capture", lambda _source: fake)

    frames = list(iter_capture_frames("clip.mp4", max_frames=3, mirror=True))

    assert [f.index for f in frames] == [0, 1, 2]
    assert [f.timestamp_sec for f in frames] == pytest.approx([0.0, 0.1, 0.2])
    assert frames[0].array[0, 2, 0] == 255  # columna volteada
    assert fake.released


def test_preprocess_frame_builds_nchw_blob():
    frame = np.full((48, 64, 3), 255, dtype=np.uint8)
    blob = preprocess_frame(frame, (192, 192))
    assert blob.shape == (1, 3, 192, 192)
    assert blob.dtype == np.float32
    assert float(blob.max()) == pytest.approx(1.0)
