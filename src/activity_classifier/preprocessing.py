"""
Signal preprocessing utilities for accelerometer windows:
- Fill missing samples by linear interpolation
- Zero-phase low-pass filter used before orientation features
"""

from typing import List

import numpy as np
import pandas as pd
from scipy.signal import butter, filtfilt

from .constants import FILTER_CUTOFF_HZ, FILTER_ORDER
from .errors import InsufficientSamples, InvalidConfiguration


# Linearly interpolate missing values along the time axis (rows)
# A column with no values at all cannot be filled and is rejected
def interpolate_missing(df: pd.DataFrame, columns: List[str]) -> pd.DataFrame:
    out = df.copy()
    empty = [c for c in columns if out[c].isna().all() and len(out)]
    if empty:
        raise InvalidConfiguration(f"Columns {empty} contain no values")
    out[columns] = out[columns].interpolate(method="linear", axis=0, limit_direction="both")
    return out


# Shortest signal filtfilt accepts with its default padding:
# padlen = 3 * max(len(a), len(b)) and the signal must be longer than that
def min_filter_length(order: int = FILTER_ORDER) -> int:
    return 3 * (order + 1) + 1


# Filter design needs 0 < cutoff < Nyquist
def validate_sampling_freq(sampling_freq: float, cutoff_hz: float = FILTER_CUTOFF_HZ) -> None:
    if sampling_freq <= 0:
        raise InvalidConfiguration(f"sampling_freq must be > 0, got {sampling_freq}")
    nyquist = sampling_freq / 2.0
    if not 0 < cutoff_hz < nyquist:
        raise InvalidConfiguration(
            f"cutoff ({cutoff_hz} Hz) must be between 0 and Nyquist ({nyquist} Hz)"
        )


# Butterworth low-pass applied forward and backward (no phase shift)
# cutoff_hz is normalized to Nyquist (sampling_freq / 2)
def lowpass_filter(
    signal,
    sampling_freq: float,
    cutoff_hz: float = FILTER_CUTOFF_HZ,
    order: int = FILTER_ORDER,
) -> np.ndarray:
    validate_sampling_freq(sampling_freq, cutoff_hz)

    x = np.asarray(signal, dtype=float)
    min_len = min_filter_length(order)
    if x.size < min_len:
        raise InsufficientSamples(x.size, min_len, what="Filter input")

    b, a = butter(order, cutoff_hz / (sampling_freq / 2.0), btype="low")
    return filtfilt(b, a, x)
