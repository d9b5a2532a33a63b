"""
Chunked inference over an accelerometer stream.

Pipeline:
- cut the canonical frame into fixed-length windows (windowing.py)
- group windows into chunks of at most chunk_size
- extract one feature row per window (features.py)
- call classifier.predict once per chunk
- stamp each label with the first timestamp of its window

Output order always equals window order, whatever the chunk size.
"""

import logging
import math
from itertools import islice
from typing import Iterator, List, Optional

import numpy as np
import pandas as pd

from .constants import ACTIVITY_LABELS, CHUNK_SIZE, TIME_COL, WINDOW_SIZE_SECONDS
from .data_loader import to_canonical_frame
from .errors import ActivityClassifierError, ChunkProcessingError, InvalidConfiguration
from .features import extract_features, feature_frame
from .model_registry import ModelRegistry, validate_model_key
from .preprocessing import validate_sampling_freq
from .windowing import Window, count_windows, iter_windows, window_length_for

logger = logging.getLogger(__name__)

RESULT_COLUMNS = [TIME_COL, "activity"]


def _empty_results() -> pd.DataFrame:
    return pd.DataFrame(columns=RESULT_COLUMNS)


def _combine(parts: List[pd.DataFrame]) -> pd.DataFrame:
    if not parts:
        return _empty_results()
    return pd.concat(parts, ignore_index=True)


def to_activity_labels(labels) -> List[str]:
    """
    Normalize classifier output to activity names.

    Integer labels are treated as indices into ACTIVITY_LABELS; anything
    else must already be one of the names.
    """
    out = []
    for label in np.asarray(labels).tolist():
        if isinstance(label, int) and not isinstance(label, bool):
            if not 0 <= label < len(ACTIVITY_LABELS):
                raise ValueError(f"Label index {label} out of range for {ACTIVITY_LABELS}")
            out.append(ACTIVITY_LABELS[label])
        elif str(label) in ACTIVITY_LABELS:
            out.append(str(label))
        else:
            raise ValueError(f"Unknown activity label {label!r}, expected one of {ACTIVITY_LABELS}")
    return out


def _validate_chunk_size(chunk_size: int) -> None:
    if isinstance(chunk_size, bool) or not isinstance(chunk_size, (int, np.integer)) or chunk_size < 1:
        raise InvalidConfiguration(f"chunk_size must be a positive integer, got {chunk_size!r}")


class ChunkedInferenceEngine:
    """
    Turns a sample frame into one (timestamp, activity) row per window.

    Parameters:
        classifier :
            Object with predict(feature_frame) -> labels (scikit-learn API).
            Shared and read-only.
        sampling_freq : float
            Sampling frequency in Hz
        window_size : float, optional
            Window duration in seconds. Default: 1
        chunk_size : int, optional
            Windows per predict() call. Default: 1000
        drop_incomplete : bool, optional
            Drop a trailing window shorter than the window length.
            Default: False
        window_length : int, optional
            Samples per window; overrides window_size when given.

    Failure policy: the first window whose features cannot be computed (or a
    failing predict) stops the run with ChunkProcessingError. run() attaches
    the predictions of all chunks completed before the failure.
    """

    def __init__(
        self,
        classifier,
        sampling_freq: float,
        window_size: float = WINDOW_SIZE_SECONDS,
        chunk_size: int = CHUNK_SIZE,
        drop_incomplete: bool = False,
        window_length: Optional[int] = None,
    ):
        _validate_chunk_size(chunk_size)
        validate_sampling_freq(sampling_freq)
        if window_length is None:
            window_length = window_length_for(window_size, sampling_freq)
        elif window_length < 1:
            raise InvalidConfiguration(f"window_length must be > 0, got {window_length}")

        self.classifier = classifier
        self.sampling_freq = sampling_freq
        self.chunk_size = int(chunk_size)
        self.drop_incomplete = drop_incomplete
        self.window_length = int(window_length)

    def count_chunks(self, n_samples: int) -> int:
        n_windows = count_windows(n_samples, self.window_length, self.drop_incomplete)
        return math.ceil(n_windows / self.chunk_size)

    def _iter_window_chunks(self, frame: pd.DataFrame) -> Iterator[List[Window]]:
        windows = iter_windows(frame, self.window_length, self.drop_incomplete)
        while True:
            chunk = list(islice(windows, self.chunk_size))
            if not chunk:
                return
            yield chunk

    def _process_chunk(self, chunk_index: int, chunk: List[Window]) -> pd.DataFrame:
        rows = []
        for window in chunk:
            try:
                rows.append(extract_features(window.x, window.y, window.z, self.sampling_freq))
            except (ActivityClassifierError, ValueError) as e:
                raise ChunkProcessingError(chunk_index, window.index, None, str(e)) from e

        try:
            activities = to_activity_labels(self.classifier.predict(feature_frame(rows)))
        except Exception as e:
            raise ChunkProcessingError(chunk_index, None, None, f"prediction failed: {e}") from e

        if len(activities) != len(chunk):
            raise ChunkProcessingError(
                chunk_index, None, None,
                f"classifier returned {len(activities)} labels for {len(chunk)} windows",
            )

        return pd.DataFrame({
            TIME_COL: [window.timestamp for window in chunk],
            "activity": activities,
        })

    def iter_chunks(self, frame: pd.DataFrame) -> Iterator[pd.DataFrame]:
        """Lazily yield the prediction frame of each chunk, in order."""
        n_chunks = self.count_chunks(len(frame))
        logger.info("Processing %d chunks...", n_chunks)
        for chunk_index, chunk in enumerate(self._iter_window_chunks(frame)):
            logger.info("Processing chunk %d of %d", chunk_index + 1, n_chunks)
            yield self._process_chunk(chunk_index, chunk)

    def run(self, frame: pd.DataFrame) -> pd.DataFrame:
        """
        Classify every window of the canonical frame.

        Returns:
            pd.DataFrame
                Columns timestamp, activity; one row per window.

        Raises:
            ChunkProcessingError
                With partial_results holding every completed chunk.
        """
        results: List[pd.DataFrame] = []
        try:
            for part in self.iter_chunks(frame):
                results.append(part)
        except ChunkProcessingError as err:
            err.partial_results = _combine(results)
            raise

        logger.info("Combining results...")
        combined = _combine(results)
        logger.info("Done! %d windows classified", len(combined))
        return combined

    def __repr__(self) -> str:
        return (
            f"ChunkedInferenceEngine(sampling_freq={self.sampling_freq}, "
            f"window_length={self.window_length}, chunk_size={self.chunk_size}, "
            f"drop_incomplete={self.drop_incomplete})"
        )


def classify_activities(
    data: pd.DataFrame,
    time_col: str,
    x_col: str,
    y_col: str,
    z_col: str,
    sampling_freq: float,
    placement: str,
    model_type: str,
    window_size: float = WINDOW_SIZE_SECONDS,
    chunk_size: int = CHUNK_SIZE,
    registry: Optional[ModelRegistry] = None,
    drop_incomplete: bool = False,
    time_unit: Optional[str] = None,
) -> pd.DataFrame:
    """
    Classify walking / running / jumping from raw accelerometer data.

    Parameters:
        data : pd.DataFrame
            Raw samples, one row per sample, in arrival order
        time_col, x_col, y_col, z_col : str
            Names of the timestamp and acceleration (g) columns in data
        sampling_freq : float
            Sampling frequency in Hz
        placement : str
            "ankle", "lower_back" or "hip"
        model_type : str
            "rf", "svm" or "knn"
        window_size : float
            Window size in seconds. Default: 1
        chunk_size : int
            Number of windows per classifier call. Default: 1000
        registry : ModelRegistry, optional
            Where to load the model from. Default: ModelRegistry()
        drop_incomplete : bool
            Drop a short trailing window instead of classifying it
        time_unit : str, optional
            Convert numeric timestamps with pd.to_datetime(unit=time_unit)

    Returns:
        pd.DataFrame with columns timestamp and activity, one row per window.
    """
    # Everything configurable is checked before any data is touched
    validate_model_key(placement, model_type)
    _validate_chunk_size(chunk_size)
    validate_sampling_freq(sampling_freq)
    window_length = window_length_for(window_size, sampling_freq)

    logger.info("Processing data...")
    frame = to_canonical_frame(data, time_col, x_col, y_col, z_col, time_unit=time_unit)

    logger.info(
        "Creating windows of %d samples (%d windows)...",
        window_length, count_windows(len(frame), window_length, drop_incomplete),
    )

    logger.info("Loading model...")
    registry = registry if registry is not None else ModelRegistry()
    model = registry.get(placement, model_type)

    engine = ChunkedInferenceEngine(
        model,
        sampling_freq,
        chunk_size=chunk_size,
        drop_incomplete=drop_incomplete,
        window_length=window_length,
    )
    return engine.run(frame)
