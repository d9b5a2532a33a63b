"""
windowing.py

Fixed-length window segmentation of an accelerometer sample frame.

This module provides:
- window_length_for: window duration (seconds) -> samples per window
- iter_windows: lazy, non-overlapping windows over the canonical frame
- count_windows: number of windows iter_windows will produce

Windows are never padded or resampled. The last window may be shorter than
window_length; it is kept unless drop_incomplete is set.
"""

import math
from dataclasses import dataclass
from typing import Iterator

import numpy as np
import pandas as pd

from .constants import TIME_COL
from .errors import InvalidConfiguration


@dataclass(frozen=True, eq=False)
class Window:
    """
    One classification unit: rows [start, start + len(data)) of the frame.

    Attributes:
        index : int
            Position of the window in the stream (0-based)
        start : int
            Row offset of the first sample
        data : pd.DataFrame
            Canonical columns timestamp, x, y, z
    """

    index: int
    start: int
    data: pd.DataFrame

    def __len__(self) -> int:
        return len(self.data)

    @property
    def timestamp(self):
        """Timestamp of the first sample; used to stamp the prediction."""
        return self.data[TIME_COL].iloc[0]

    @property
    def x(self) -> np.ndarray:
        return self.data["x"].to_numpy(dtype=float)

    @property
    def y(self) -> np.ndarray:
        return self.data["y"].to_numpy(dtype=float)

    @property
    def z(self) -> np.ndarray:
        return self.data["z"].to_numpy(dtype=float)


def window_length_for(window_size: float, sampling_freq: float) -> int:
    """
    Number of samples per window for a duration in seconds.

    Rounded to the nearest sample so that e.g. 1.5 s at 25 Hz gives 38
    samples for every window instead of alternating 37/38.
    """
    if sampling_freq <= 0:
        raise InvalidConfiguration(f"sampling_freq must be > 0, got {sampling_freq}")
    if window_size <= 0:
        raise InvalidConfiguration(f"window_size must be > 0, got {window_size}")

    length = int(round(window_size * sampling_freq))
    if length < 1:
        raise InvalidConfiguration(
            f"window_size={window_size}s at {sampling_freq} Hz is shorter than one sample"
        )
    return length


def count_windows(n_samples: int, window_length: int, drop_incomplete: bool = False) -> int:
    if drop_incomplete:
        return n_samples // window_length
    return math.ceil(n_samples / window_length)


def iter_windows(
    frame: pd.DataFrame,
    window_length: int,
    drop_incomplete: bool = False,
) -> Iterator[Window]:
    """
    Yield consecutive windows of window_length rows, in input order.

    Parameters:
        frame : pd.DataFrame
            Canonical sample frame (see data_loader.to_canonical_frame)
        window_length : int
            Samples per window (> 0)
        drop_incomplete : bool
            Skip a trailing window shorter than window_length.
            Default: False (the short window is yielded as-is)

    Raises:
        InvalidConfiguration
            If window_length < 1. Raised on first iteration.
    """
    if window_length < 1:
        raise InvalidConfiguration(f"window_length must be > 0, got {window_length}")

    n_windows = count_windows(len(frame), window_length, drop_incomplete)
    for i in range(n_windows):
        start = i * window_length
        yield Window(index=i, start=start, data=frame.iloc[start:start + window_length])
