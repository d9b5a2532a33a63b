import numpy as np
import pandas as pd
import pytest

from activity_classifier.errors import InsufficientSamples, InvalidConfiguration
from activity_classifier.preprocessing import interpolate_missing, lowpass_filter, min_filter_length


@pytest.mark.parametrize("n", [10, 11, 50, 1000])
def test_output_length_matches_input(n):
    signal = np.random.default_rng(1).standard_normal(n)
    assert lowpass_filter(signal, 50.0).shape == (n,)


def test_min_filter_length_for_order_two():
    assert min_filter_length(2) == 10


def test_short_signal_raises_insufficient_samples():
    with pytest.raises(InsufficientSamples) as exc:
        lowpass_filter(np.ones(9), 50.0)
    assert exc.value.n_samples == 9
    assert exc.value.min_samples == 10


def test_high_frequency_is_attenuated_and_dc_kept():
    fs = 100.0
    t = np.arange(500) / fs
    noise = np.sin(2 * np.pi * 20 * t)
    filtered = lowpass_filter(1.0 + noise, fs)
    assert np.std(filtered[50:-50]) < 0.05 * np.std(noise)
    assert np.mean(filtered[50:-50]) == pytest.approx(1.0, abs=1e-2)


def test_zero_phase_on_slow_signal():
    fs = 100.0
    t = np.arange(1000) / fs
    slow = np.sin(2 * np.pi * 0.2 * t)
    filtered = lowpass_filter(slow, fs)
    # A causal filter would lag; forward-backward keeps the peak in place
    assert abs(int(np.argmax(filtered[:500])) - int(np.argmax(slow[:500]))) <= 2


@pytest.mark.parametrize("fs", [0.0, -10.0, 2.0])
def test_invalid_sampling_frequency(fs):
    with pytest.raises(InvalidConfiguration):
        lowpass_filter(np.ones(20), fs)


def test_interpolate_missing_fills_gaps_and_edges():
    df = pd.DataFrame({"x": [np.nan, 1.0, np.nan, 3.0, np.nan], "y": [1.0, 2.0, 3.0, 4.0, 5.0]})
    out = interpolate_missing(df, ["x", "y"])

    assert out["x"].tolist() == [1.0, 1.0, 2.0, 3.0, 3.0]
    assert out["y"].tolist() == [1.0, 2.0, 3.0, 4.0, 5.0]
    assert df["x"].isna().sum() == 3


def test_interpolate_missing_rejects_empty_column():
    df = pd.DataFrame({"x": [1.0, 2.0], "z": [np.nan, np.nan]})
    with pytest.raises(InvalidConfiguration):
        interpolate_missing(df, ["x", "z"])
