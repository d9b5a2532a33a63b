import logging
import os
from typing import Callable, Dict, Optional, Tuple

import joblib

from .constants import MODEL_FILE_TEMPLATE, MODEL_TYPES, MODELS_DIR_ENV, MODELS_DIR_NAME, PLACEMENTS
from .errors import InvalidConfiguration, ModelNotFound

logger = logging.getLogger(__name__)


def validate_model_key(placement: str, model_type: str) -> None:
    if placement not in PLACEMENTS:
        raise InvalidConfiguration(
            f"Invalid placement '{placement}'. Must be one of: {', '.join(PLACEMENTS)}"
        )
    if model_type not in MODEL_TYPES:
        raise InvalidConfiguration(
            f"Invalid model type '{model_type}'. Must be one of: {', '.join(MODEL_TYPES)}"
        )


# Resolved at call time:
# $ACTIVITY_MODELS_DIR if set, else ./models under the working directory
def default_models_dir() -> str:
    return os.environ.get(MODELS_DIR_ENV) or os.path.abspath(MODELS_DIR_NAME)


class ModelRegistry:
    """
    Resolves (placement, model_type) to a trained classifier.

    Models are loaded lazily on first request and cached for the lifetime of
    the registry. Handles are shared; callers must treat them as read-only.

    Parameters:
        models_dir : str, optional
            Root folder laid out as <placement>/<model_type>_model.pkl.
            Default: default_models_dir()
        loader : callable
            path -> model. Default: joblib.load
    """

    def __init__(
        self,
        models_dir: Optional[str] = None,
        loader: Optional[Callable[[str], object]] = None,
    ):
        self.models_dir = models_dir if models_dir is not None else default_models_dir()
        self.loader = loader if loader is not None else joblib.load
        self._cache: Dict[Tuple[str, str], object] = {}

    def model_path(self, placement: str, model_type: str) -> str:
        return os.path.join(
            self.models_dir, placement, MODEL_FILE_TEMPLATE.format(model_type=model_type)
        )

    def register(self, placement: str, model_type: str, model) -> None:
        """Use an already-loaded model for this key (skips the loader)."""
        validate_model_key(placement, model_type)
        self._cache[(placement, model_type)] = model

    def get(self, placement: str, model_type: str):
        validate_model_key(placement, model_type)
        key = (placement, model_type)
        if key not in self._cache:
            path = self.model_path(placement, model_type)
            if not os.path.exists(path):
                raise ModelNotFound(placement, model_type, path)
            logger.info("Loading %s model for %s from %s", model_type, placement, path)
            self._cache[key] = self.loader(path)
        return self._cache[key]

    def __contains__(self, key) -> bool:
        return key in self._cache

    def __repr__(self) -> str:
        return f"ModelRegistry(models_dir={self.models_dir!r}, loaded={sorted(self._cache)})"

