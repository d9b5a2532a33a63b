"""Common test fixtures: synthetic accelerometer streams and a fake classifier."""

import numpy as np
import pandas as pd
import pytest

from activity_classifier.constants import ACTIVITY_LABELS


def make_stream(n_samples: int, sampling_freq: float, seed: int = 0) -> pd.DataFrame:
    """
    Triaxial stream in g with distinct frequencies per axis, non-zero means
    and a little noise so no window is ever constant.
    """
    rng = np.random.default_rng(seed)
    t = np.arange(n_samples) / sampling_freq
    x = 0.2 + 0.8 * np.sin(2 * np.pi * 1.3 * t) + 0.02 * rng.standard_normal(n_samples)
    y = 1.0 + 0.5 * np.sin(2 * np.pi * 2.1 * t + 0.3) + 0.02 * rng.standard_normal(n_samples)
    z = -0.4 + 0.6 * np.cos(2 * np.pi * 0.9 * t) + 0.02 * rng.standard_normal(n_samples)
    timestamps = pd.Timestamp("2024-05-01 09:00:00") + pd.to_timedelta(t, unit="s")
    return pd.DataFrame({"time": timestamps, "acc_x": x, "acc_y": y, "acc_z": z})


def canonical(stream: pd.DataFrame) -> pd.DataFrame:
    return stream.rename(
        columns={"time": "timestamp", "acc_x": "x", "acc_y": "y", "acc_z": "z"}
    )


class FakeClassifier:
    """
    Deterministic stand-in for a trained model: the label depends only on the
    window's own features, so results must not depend on chunking.
    """

    def __init__(self):
        self.calls = []

    def predict(self, features: pd.DataFrame):
        self.calls.append(features.copy())
        idx = (np.abs(features["mean_x"].to_numpy()) * 100).astype(int) % len(ACTIVITY_LABELS)
        return np.array([ACTIVITY_LABELS[i] for i in idx])


@pytest.fixture
def stream_10hz():
    return make_stream(20, 10.0)


@pytest.fixture
def fake_classifier():
    return FakeClassifier()
