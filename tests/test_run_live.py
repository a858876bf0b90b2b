# tests/test_run_live.py

from pathlib import Path

import numpy as np
import pandas as pd

from src import run_live
from src.A_preprocessing.capture import CapturedFrame
from src.B_pose_estimation.estimators import HeatmapModelBase


class _FakeModel(HeatmapModelBase):
    closed = False

    def infer(self, frame):
        tensor = np.zeros((14, 4, 4), dtype=np.float32)
        tensor[1, 0, 0] = 0.9
        tensor[8, 3, 3] = 0.6
        return tensor

    def close(self) -> None:
        type(self).closed = True


def test_main_streams_video_and_exports_csv(monkeypatch, tmp_path: Path, capsys) -> None:
    model_path = tmp_path / "cpm.onnx"
    model_path.write_bytes(b"fake model")
    csv_path = tmp_path / "out" / "keypoints.csv"

    monkeypatch.setattr(run_live.OpenCVHeatmapModel, "from_config", classmethod(lambda cls, cfg: _FakeModel()))
    monkeypatch.setattr(
        run_live,
        "iter_capture_frames",
        lambda source, max_frames=None, mirror=False: (
            CapturedFrame(index=i, timestamp_sec=i / 30.0, array=np.zeros((4, 4, 3), dtype=np.uint8))
            for i in range(3)
        ),
    )

    exit_code = run_live.main(
        ["--model", str(model_path), "--video", "clip.mp4", "--csv", str(csv_path)]
    )

    assert exit_code == 0
    assert _FakeModel.closed
    df = pd.read_csv(csv_path)
    assert len(df) == 6
    assert set(df["label"]) == {"neck", "R hip"}
    out = capsys.readouterr().out
    assert "Frames admitidos: 3" in out
    assert "CONFIG_SHA1" in out


def test_main_reports_missing_model(tmp_path: Path) -> None:
    try:
        run_live.main(["--model", str(tmp_path / "nope.onnx"), "--camera", "0"])
    except SystemExit as exc:
        assert exc.code == 2
    else:  # pragma: no cover - parser.error always exits
        raise AssertionError("expected argparse to exit")


def test_parser_accepts_documented_flags() -> None:
    args = run_live.build_parser().parse_args(
        ["--model", "cpm.onnx", "--camera", "1", "--max_frames", "25", "--mirror", "--verbose"]
    )
    assert args.camera == 1
    assert args.max_frames == 25
    assert args.mirror is True
    assert args.realtime is False


def test_parser_rejects_non_positive_max_frames() -> None:
    try:
        run_live.build_parser().parse_args(["--model", "cpm.onnx", "--video", "a.mp4", "--max_frames", "0"])
    except SystemExit as exc:
        assert exc.code == 2
    else:  # pragma: no cover - argparse always exits
        raise AssertionError("expected SystemExit")
