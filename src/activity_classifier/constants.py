# Body locations a trained model variant exists for
PLACEMENTS = ["ankle", "lower_back", "hip"]

# Classifier families: rf (Random Forest), svm (Support Vector Machine),
# knn (K-Nearest Neighbors)
MODEL_TYPES = ["rf", "svm", "knn"]

# Activity labels (index-aligned: 0..2)
ACTIVITY_LABELS = ["walking", "running", "jumping"]

# Column names of the canonical sample frame
TIME_COL = "timestamp"
AXES = ["x", "y", "z"]

# WINDOWING / INFERENCE CONFIGURATION

# Window duration in seconds; window length in samples is
# round(WINDOW_SIZE_SECONDS * sampling_freq)
WINDOW_SIZE_SECONDS = 1

# Number of windows sent to the classifier in one predict() call
CHUNK_SIZE = 1000

# ORIENTATION LOW-PASS FILTER

# Butterworth order and cutoff (Hz) used before computing roll/pitch/yaw.
# The models were trained with butter(2, 1 / (fs / 2)), i.e. 1 Hz.
FILTER_ORDER = 2
FILTER_CUTOFF_HZ = 1.0

# |mean| below this makes the coefficient of variation undefined
CV_MEAN_EPSILON = 1e-12

# MODEL ARTIFACTS

# Layout: <models dir>/<placement>/<model_type>_model.pkl
# The models dir is $ACTIVITY_MODELS_DIR, else ./models under the working directory
MODELS_DIR_ENV = "ACTIVITY_MODELS_DIR"
MODELS_DIR_NAME = "models"
MODEL_FILE_TEMPLATE = "{model_type}_model.pkl"
