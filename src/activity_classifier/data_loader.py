import logging
from typing import Optional

import pandas as pd

from .constants import AXES, TIME_COL
from .errors import InvalidConfiguration
from .preprocessing import interpolate_missing

logger = logging.getLogger(__name__)


# Map caller column names onto the canonical frame: timestamp, x, y, z
# time_unit (e.g. "s", "ms") converts numeric epoch timestamps to datetimes
# Missing axis values are filled by linear interpolation
def to_canonical_frame(
    data: pd.DataFrame,
    time_col: str,
    x_col: str,
    y_col: str,
    z_col: str,
    time_unit: Optional[str] = None,
) -> pd.DataFrame:
    mapping = {time_col: TIME_COL, x_col: AXES[0], y_col: AXES[1], z_col: AXES[2]}

    missing = [c for c in mapping if c not in data.columns]
    if missing:
        raise InvalidConfiguration(
            f"Columns {missing} not found in data. "
            f"Available columns: {list(data.columns)}"
        )

    frame = data[list(mapping)].rename(columns=mapping).reset_index(drop=True)
    for axis, col in zip(AXES, (x_col, y_col, z_col)):
        try:
            frame[axis] = frame[axis].astype(float)
        except (ValueError, TypeError) as e:
            raise InvalidConfiguration(f"Column '{col}' is not numeric: {e}") from e

    n_missing = int(frame[AXES].isna().sum().sum())
    if n_missing:
        logger.warning("Interpolating %d missing acceleration values", n_missing)
        frame = interpolate_missing(frame, AXES)

    if time_unit is not None and pd.api.types.is_numeric_dtype(frame[TIME_COL]):
        frame[TIME_COL] = pd.to_datetime(frame[TIME_COL], unit=time_unit)

    return frame


# Accelerometer exports usually start with a device header;
# skip_rows is the number of lines before the column names
def load_accelerometer_csv(csv_path: str, skip_rows: int = 0) -> pd.DataFrame:
    df = pd.read_csv(csv_path, skiprows=skip_rows)
    logger.info("Loaded %d samples from %s", len(df), csv_path)
    return df
