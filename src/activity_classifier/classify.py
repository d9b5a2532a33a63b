"""
Classify activities (walking / running / jumping) in an accelerometer CSV.

Usage examples:
    classify-activities data.csv --sampling-freq 100 --placement ankle --model-type rf
    classify-activities data.csv --sampling-freq 50 --placement hip --model-type svm \
        --skip-rows 10 --time-unit s --output results.csv
"""

import argparse
import logging
import os
import sys

from tabulate import tabulate

from .constants import CHUNK_SIZE, MODEL_TYPES, MODELS_DIR_ENV, PLACEMENTS, WINDOW_SIZE_SECONDS
from .data_loader import load_accelerometer_csv
from .errors import ActivityClassifierError, ChunkProcessingError, InsufficientSamples
from .inference import classify_activities
from .model_registry import ModelRegistry

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Classify walking, running and jumping from triaxial accelerometer data."
    )
    parser.add_argument("input", help="CSV file with a timestamp column and three acceleration columns (g)")
    parser.add_argument("--sampling-freq", type=float, required=True, help="Sampling frequency in Hz")
    parser.add_argument("--placement", choices=PLACEMENTS, required=True,
                        help="Where the accelerometer was worn")
    parser.add_argument("--model-type", choices=MODEL_TYPES, required=True,
                        help="rf (Random Forest), svm (Support Vector Machine), knn (K-Nearest Neighbors)")
    parser.add_argument("--time-col", default="timestamp")
    parser.add_argument("--x-col", default="acc_x")
    parser.add_argument("--y-col", default="acc_y")
    parser.add_argument("--z-col", default="acc_z")
    parser.add_argument("--window-size", type=float, default=WINDOW_SIZE_SECONDS,
                        help="Window size in seconds (default: %(default)s)")
    parser.add_argument("--chunk-size", type=int, default=CHUNK_SIZE,
                        help="Windows per classifier call (default: %(default)s)")
    parser.add_argument("--skip-rows", type=int, default=0,
                        help="Header lines before the column names (default: 0)")
    parser.add_argument("--time-unit", default=None,
                        help="Unit of numeric epoch timestamps, e.g. s or ms")
    parser.add_argument("--models-dir", default=None,
                        help="Folder of <placement>/<model_type>_model.pkl files "
                             f"(default: ${MODELS_DIR_ENV}, else ./models)")
    parser.add_argument("--drop-incomplete", action="store_true",
                        help="Drop a trailing window shorter than the window size")
    parser.add_argument("--output", default=None, help="Write predictions to this CSV")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def write_results(results, path: str) -> None:
    out_dir = os.path.dirname(path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    results.to_csv(path, index=False)
    print(f"Saved {len(results)} predictions to {path}")


def print_summary(results) -> None:
    counts = results["activity"].value_counts()
    rows = [[activity, int(n), n / len(results)] for activity, n in counts.items()]
    print("\nACTIVITY SUMMARY")
    print(tabulate(rows, headers=["Activity", "Windows", "Share"],
                   tablefmt="pretty", floatfmt=".2%"))


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        data = load_accelerometer_csv(args.input, skip_rows=args.skip_rows)
        results = classify_activities(
            data,
            time_col=args.time_col,
            x_col=args.x_col,
            y_col=args.y_col,
            z_col=args.z_col,
            sampling_freq=args.sampling_freq,
            placement=args.placement,
            model_type=args.model_type,
            window_size=args.window_size,
            chunk_size=args.chunk_size,
            registry=ModelRegistry(args.models_dir),
            drop_incomplete=args.drop_incomplete,
            time_unit=args.time_unit,
        )
    except ChunkProcessingError as e:
        logger.error("%s (%d windows classified before the failure)", e, len(e.partial_results))
        if isinstance(e.__cause__, InsufficientSamples):
            logger.error("Rerun with --drop-incomplete to skip a short trailing window")
        if args.output:
            write_results(e.partial_results, args.output)
        return 1
    except ActivityClassifierError as e:
        logger.error("%s", e)
        return 1

    if args.output:
        write_results(results, args.output)
    else:
        print(results.to_string(index=False))

    if len(results):
        print_summary(results)
    return 0


if __name__ == "__main__":
    sys.exit(main())
