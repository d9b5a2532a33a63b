"""
Exceptions raised by the activity classification pipeline.

Configuration problems are raised immediately, before any data is touched.
Per-window problems (too few samples, constant signals) are raised by the
feature code and wrapped by the inference engine in a ChunkProcessingError
that says where the run stopped.
"""

from typing import Optional


class ActivityClassifierError(Exception):
    """Base class for every error raised by this package."""


class InvalidConfiguration(ActivityClassifierError, ValueError):
    pass


class InsufficientSamples(ActivityClassifierError, ValueError):
    def __init__(self, n_samples: int, min_samples: int, what: str = "signal"):
        self.n_samples = n_samples
        self.min_samples = min_samples
        super().__init__(
            f"{what} has {n_samples} samples, need at least {min_samples}"
        )


class DegenerateSignal(ActivityClassifierError, ValueError):
    """A statistic is undefined for the given input (e.g. constant axis)."""

    def __init__(self, feature: str, reason: str):
        self.feature = feature
        self.reason = reason
        super().__init__(f"{feature} is undefined: {reason}")


class UndefinedCorrelation(DegenerateSignal):
    def __init__(self, pair: str, axis: str):
        self.pair = pair
        self.axis = axis
        super().__init__(f"corr_{pair}", f"axis '{axis}' has zero variance")


class ModelNotFound(ActivityClassifierError, FileNotFoundError):
    def __init__(self, placement: str, model_type: str, path: str):
        self.placement = placement
        self.model_type = model_type
        self.path = path
        super().__init__(
            f"No trained '{model_type}' model for placement '{placement}' at {path}"
        )


class ChunkProcessingError(ActivityClassifierError, RuntimeError):
    """
    A chunk failed. Carries the chunk index, the index of the window that
    failed (None when the classifier itself failed) and the predictions of
    every chunk completed before the failure.
    """

    def __init__(
        self,
        chunk_index: int,
        window_index: Optional[int],
        partial_results,
        message: str,
    ):
        self.chunk_index = chunk_index
        self.window_index = window_index
        self.partial_results = partial_results
        where = f"chunk {chunk_index}"
        if window_index is not None:
            where += f", window {window_index}"
        super().__init__(f"Failed processing {where}: {message}")
