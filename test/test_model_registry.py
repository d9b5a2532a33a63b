import os

import joblib
import numpy as np
import pytest
from sklearn.neighbors import KNeighborsClassifier

from activity_classifier.constants import ACTIVITY_LABELS
from activity_classifier.errors import InvalidConfiguration, ModelNotFound
from activity_classifier.features import FEATURE_NAMES, feature_frame
from activity_classifier.model_registry import ModelRegistry, default_models_dir, validate_model_key


def test_model_path_layout(tmp_path):
    registry = ModelRegistry(str(tmp_path))
    assert registry.model_path("lower_back", "svm") == os.path.join(
        str(tmp_path), "lower_back", "svm_model.pkl"
    )


@pytest.mark.parametrize("placement,model_type", [("foot", "rf"), ("ankle", "xgboost")])
def test_invalid_keys_rejected(tmp_path, placement, model_type):
    with pytest.raises(InvalidConfiguration):
        validate_model_key(placement, model_type)
    with pytest.raises(InvalidConfiguration):
        ModelRegistry(str(tmp_path)).get(placement, model_type)


def test_missing_artifact_raises_model_not_found(tmp_path):
    registry = ModelRegistry(str(tmp_path))
    with pytest.raises(ModelNotFound) as exc:
        registry.get("hip", "knn")
    assert exc.value.path == registry.model_path("hip", "knn")
    assert isinstance(exc.value, FileNotFoundError)


def test_models_are_loaded_once_and_cached(tmp_path):
    loaded = []

    def loader(path):
        loaded.append(path)
        return object()

    registry = ModelRegistry(str(tmp_path), loader=loader)
    path = registry.model_path("ankle", "rf")
    os.makedirs(os.path.dirname(path))
    open(path, "wb").close()

    first = registry.get("ankle", "rf")
    assert registry.get("ankle", "rf") is first
    assert loaded == [path]
    assert ("ankle", "rf") in registry


def test_registered_model_skips_loader(tmp_path):
    def loader(path):
        raise AssertionError("loader must not be called")

    registry = ModelRegistry(str(tmp_path), loader=loader)
    model = object()
    registry.register("hip", "svm", model)
    assert registry.get("hip", "svm") is model

    with pytest.raises(InvalidConfiguration):
        registry.register("wrist", "svm", model)


def test_joblib_round_trip_of_trained_classifier(tmp_path):
    rng = np.random.default_rng(3)
    X = feature_frame(
        dict(zip(FEATURE_NAMES, rng.standard_normal(len(FEATURE_NAMES)))) for _ in range(30)
    )
    y = [ACTIVITY_LABELS[i % 3] for i in range(30)]
    model = KNeighborsClassifier(n_neighbors=3).fit(X, y)

    registry = ModelRegistry(str(tmp_path))
    path = registry.model_path("ankle", "knn")
    os.makedirs(os.path.dirname(path))
    joblib.dump(model, path)

    loaded = registry.get("ankle", "knn")
    assert list(loaded.predict(X)) == list(model.predict(X))


def test_default_models_dir_follows_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("ACTIVITY_MODELS_DIR", str(tmp_path / "trained"))
    assert default_models_dir() == str(tmp_path / "trained")
    assert ModelRegistry().models_dir == str(tmp_path / "trained")


def test_default_models_dir_is_resolved_against_working_directory(tmp_path, monkeypatch):
    monkeypatch.delenv("ACTIVITY_MODELS_DIR", raising=False)
    monkeypatch.chdir(tmp_path)
    assert default_models_dir() == os.path.join(os.getcwd(), "models")
    assert ModelRegistry().model_path("ankle", "rf") == os.path.join(
        os.getcwd(), "models", "ankle", "rf_model.pkl"
    )
