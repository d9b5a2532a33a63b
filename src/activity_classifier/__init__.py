"""Walking / running / jumping classification from triaxial accelerometer data."""

from .errors import (
    ActivityClassifierError,
    ChunkProcessingError,
    DegenerateSignal,
    InsufficientSamples,
    InvalidConfiguration,
    ModelNotFound,
    UndefinedCorrelation,
)
from .features import FEATURE_NAMES, extract_features
from .inference import ChunkedInferenceEngine, classify_activities
from .model_registry import ModelRegistry

__version__ = "0.1.0"
