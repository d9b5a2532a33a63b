"""
Transform one window of triaxial acceleration into a feature vector.

For each axis (x, y, z), compute:
- mean, sd, coefficient of variation
- skewness, kurtosis
- min, 25th percentile, median, 75th percentile, max
- mean and sd of the absolute signal

FREQUENCY-DOMAIN FEATURES (via FFT, per axis)
- dominant frequency and its magnitude
- total power
- median frequency

CROSS-AXIS / ORIENTATION
- Pearson correlation for (x,y), (x,z), (y,z)
- mean roll, pitch, yaw of the low-pass filtered signal

Ill-defined statistics (zero mean for cv, constant axes) raise
DegenerateSignal instead of handing NaN to the classifier.
"""

from typing import Dict, Iterable, List

import numpy as np
import pandas as pd
from scipy import stats

from .constants import AXES, CV_MEAN_EPSILON
from .errors import DegenerateSignal, InsufficientSamples, UndefinedCorrelation
from .preprocessing import lowpass_filter


TIME_FEATURES = [
    "mean", "sd", "cv", "skewness", "kurtosis",
    "min", "q25", "median", "q75", "max",
    "mean_amplitude", "sd_amplitude",
]
FREQ_FEATURES = [
    "dominant_frequency", "dominant_magnitude", "total_power", "median_frequency",
]
CORRELATION_FEATURES = ["corr_xy", "corr_xz", "corr_yz"]
ORIENTATION_FEATURES = ["roll", "pitch", "yaw"]

# Column order the trained models expect
FEATURE_NAMES: List[str] = CORRELATION_FEATURES + ORIENTATION_FEATURES + [
    f"{name}_{axis}" for axis in AXES for name in TIME_FEATURES + FREQ_FEATURES
]


def _is_constant(x: np.ndarray) -> bool:
    return bool(np.ptp(x) == 0)


def compute_time_features(x) -> Dict[str, float]:
    """
    Time-domain statistics of a 1D signal.

    skewness / kurtosis use the moment estimators b1 = m3 / s^3 and
    b2 = m4 / s^4 - 3 with s the sample standard deviation.
    """
    x = np.asarray(x, dtype=float)
    n = x.size
    if n < 2:
        raise InsufficientSamples(n, 2, what="Window axis")

    mean = float(np.mean(x))
    sd = float(np.std(x, ddof=1))

    if abs(mean) <= CV_MEAN_EPSILON:
        raise DegenerateSignal("cv", "mean is zero")
    if _is_constant(x):
        raise DegenerateSignal("skewness", "signal has zero variance")

    # scipy's biased estimators are m3 / m2^1.5 and m4 / m2^2
    scale = (n - 1) / n
    skewness = float(stats.skew(x, bias=True)) * scale ** 1.5
    kurtosis = float(stats.kurtosis(x, fisher=False, bias=True)) * scale ** 2 - 3.0

    amplitude = np.abs(x)
    q25, median, q75 = np.percentile(x, [25, 50, 75])

    return {
        "mean": mean,
        "sd": sd,
        "cv": sd / mean,
        "skewness": skewness,
        "kurtosis": kurtosis,
        "min": float(np.min(x)),
        "q25": float(q25),
        "median": float(median),
        "q75": float(q75),
        "max": float(np.max(x)),
        "mean_amplitude": float(np.mean(amplitude)),
        "sd_amplitude": float(np.std(amplitude, ddof=1)),
    }


def compute_frequency_features(x, sampling_freq: float) -> Dict[str, float]:
    """
    Spectral features over the non-negative half of the DFT.

    Bin k maps to k * (sampling_freq / 2) / (n // 2). argmax/argmin return
    the first hit, so ties resolve to the lowest frequency.
    """
    x = np.asarray(x, dtype=float)
    n = x.size
    if n < 1:
        raise InsufficientSamples(n, 1, what="Window axis")

    freqs = np.linspace(0.0, sampling_freq / 2.0, n // 2 + 1)
    magnitude = np.abs(np.fft.rfft(x))
    power = magnitude ** 2

    spectrum_power = float(np.sum(power))
    if spectrum_power <= 0:
        raise DegenerateSignal("median_frequency", "spectrum is all zeros")

    dominant_idx = int(np.argmax(magnitude))
    cumulative = np.cumsum(power) / spectrum_power
    median_idx = int(np.argmin(np.abs(cumulative - 0.5)))

    return {
        "dominant_frequency": float(freqs[dominant_idx]),
        "dominant_magnitude": float(magnitude[dominant_idx]),
        "total_power": spectrum_power / n,
        "median_frequency": float(freqs[median_idx]),
    }


def compute_correlations(x, y, z) -> Dict[str, float]:
    signals = {
        "x": np.asarray(x, dtype=float),
        "y": np.asarray(y, dtype=float),
        "z": np.asarray(z, dtype=float),
    }
    feats = {}
    for name in CORRELATION_FEATURES:
        pair = name.split("_")[1]
        a, b = signals[pair[0]], signals[pair[1]]
        for axis, values in ((pair[0], a), (pair[1], b)):
            if _is_constant(values):
                raise UndefinedCorrelation(pair, axis)
        feats[name] = float(np.corrcoef(a, b)[0, 1])
    return feats


# Mean roll / pitch / yaw (radians) of the low-pass filtered axes
def compute_orientation(x, y, z, sampling_freq: float) -> Dict[str, float]:
    xf = lowpass_filter(x, sampling_freq)
    yf = lowpass_filter(y, sampling_freq)
    zf = lowpass_filter(z, sampling_freq)

    roll = np.arctan2(yf, np.sqrt(xf ** 2 + zf ** 2))
    pitch = np.arctan2(-xf, np.sqrt(yf ** 2 + zf ** 2))
    yaw = np.arctan2(zf, np.sqrt(xf ** 2 + yf ** 2))

    return {
        "roll": float(np.mean(roll)),
        "pitch": float(np.mean(pitch)),
        "yaw": float(np.mean(yaw)),
    }


def extract_features(x, y, z, sampling_freq: float) -> Dict[str, float]:
    """
    Full feature vector for one window, keys in FEATURE_NAMES order.

    Raises InsufficientSamples, DegenerateSignal or UndefinedCorrelation
    when a feature cannot be computed for this window.
    """
    axes = {
        "x": np.asarray(x, dtype=float),
        "y": np.asarray(y, dtype=float),
        "z": np.asarray(z, dtype=float),
    }
    lengths = {a.size for a in axes.values()}
    if len(lengths) != 1:
        raise ValueError(f"x, y and z must have equal length, got {sorted(lengths)}")
    for axis, values in axes.items():
        if not np.all(np.isfinite(values)):
            raise DegenerateSignal(f"axis_{axis}", "window contains missing or non-finite samples")

    feats: Dict[str, float] = {}
    feats.update(compute_correlations(axes["x"], axes["y"], axes["z"]))
    feats.update(compute_orientation(axes["x"], axes["y"], axes["z"], sampling_freq))

    for axis in AXES:
        signal = axes[axis]
        axis_feats = compute_time_features(signal)
        axis_feats.update(compute_frequency_features(signal, sampling_freq))
        feats.update({f"{name}_{axis}": value for name, value in axis_feats.items()})

    return feats


# Stack feature dicts into the frame passed to classifier.predict()
def feature_frame(rows: Iterable[Dict[str, float]]) -> pd.DataFrame:
    return pd.DataFrame(list(rows), columns=FEATURE_NAMES)
