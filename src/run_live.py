"""Command-line runner for the live keypoint stream."""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Iterable, List, Optional

from src import config
from src.A_preprocessing.capture import iter_capture_frames, parse_capture_source
from src.B_pose_estimation.estimators import OpenCVHeatmapModel
from src.B_pose_estimation.labeling import keypoints_to_frame
from src.C_analysis import InferenceGate, KeypointPipeline, KeypointResult

LOGGER = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"{value!r} no es un entero válido") from exc
    if number <= 0:
        raise argparse.ArgumentTypeError("El valor debe ser un entero positivo")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Ejecuta el streaming de keypoints sobre un vídeo o una cámara.",
    )
    parser.add_argument("--model", required=False, help="Ruta al modelo de heatmaps (ONNX, Caffe...).")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--video", help="Ruta al archivo de vídeo a procesar")
    source.add_argument("--camera", type=int, help="Índice de la cámara a abrir")
    parser.add_argument("--config", default=None, help="Archivo YAML con la configuración a aplicar.")
    parser.add_argument(
        "--max_frames",
        type=_positive_int,
        default=None,
        help="Número máximo de frames a leer de la fuente.",
    )
    parser.add_argument(
        "--realtime",
        action="store_true",
        help="Reproduce los vídeos a su ritmo real para que la compuerta descarte frames como en vivo.",
    )
    parser.add_argument(
        "--mirror",
        action="store_true",
        help="Voltea horizontalmente cada frame (cámara frontal).",
    )
    parser.add_argument("--csv", default=None, help="Ruta del CSV donde volcar todos los keypoints emitidos.")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Muestra mensajes de log detallados durante la ejecución.",
    )
    return parser


def _configure_logging(verbose: bool) -> None:
    level = logging.INFO if verbose else logging.WARNING
    logging.basicConfig(level=level, format="[%(levelname)s] %(name)s: %(message)s")


def _print_keypoints(result: KeypointResult) -> None:
    print(f"frame {result.frame_index}:")
    for keypoint in result.keypoints:
        print(f"  {keypoint.label:<12} {keypoint.point}  Confidence: {keypoint.confidence}")


def main(argv: Iterable[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)

    cfg = config.from_yaml(args.config) if args.config else config.load_default().validate()
    if args.model:
        cfg.model.model_path = Path(args.model).expanduser()
    if cfg.model.model_path is None:
        parser.error("Se necesita --model o model.model_path en la configuración")
    if not Path(cfg.model.model_path).is_file():
        parser.error(f"No se encontró el modelo: {cfg.model.model_path}")

    source = args.camera if args.camera is not None else parse_capture_source(args.video)
    realtime = bool(args.realtime) and args.camera is None
    emitted: List[KeypointResult] = []

    def _on_keypoints(result: KeypointResult) -> None:
        emitted.append(result)

    try:
        with OpenCVHeatmapModel.from_config(cfg) as model, InferenceGate(
            model,
            KeypointPipeline.from_config(cfg),
            on_keypoints=_on_keypoints,
        ) as gate:
            started = time.monotonic()
            for captured in iter_capture_frames(source, max_frames=args.max_frames, mirror=args.mirror):
                if realtime:
                    delay = captured.timestamp_sec - (time.monotonic() - started)
                    if delay > 0:
                        time.sleep(delay)
                elif args.camera is None:
                    # Sin ritmo real procesamos cada frame del archivo en orden.
                    gate.join()
                gate.on_frame(captured.array, captured.timestamp_sec)
                latest = gate.poll_latest()
                if latest is not None and args.verbose:
                    _print_keypoints(latest)
            gate.join()
            stats = gate.stats
    except Exception:  # pragma: no cover - surfaced to the CLI user
        LOGGER.exception("Fallo ejecutando el streaming de keypoints")
        return 1

    if emitted:
        _print_keypoints(emitted[-1])
    print(
        f"Frames admitidos: {stats.admitted} | descartados: {stats.dropped} | "
        f"fallidos: {stats.failed} | completados: {stats.completed}"
    )

    csv_path: Optional[Path] = Path(args.csv).expanduser() if args.csv else None
    if csv_path is not None:
        csv_path.parent.mkdir(parents=True, exist_ok=True)
        keypoints_to_frame(emitted).to_csv(csv_path, index=False)
        print(f"CSV de keypoints: {csv_path}")
    print(f"CONFIG_SHA1: {cfg.fingerprint()}")
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
