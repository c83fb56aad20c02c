"""
Schema Validation at Ingestion

This module checks tables against the column schemas declared in
`heatcost.core.data_types` before any arithmetic happens on them.

Functions:
----------
- `validate_table(...)`: Checks required columns and nulls, coerces numeric columns, returns a copy.
- `validate_geometries(...)`: Rejects null, empty or invalid geometries.

Exceptions
----------
- DataError: Raised for missing columns, nulls in required fields,
  non-numeric values in numeric fields, or broken geometries.
"""


import logging

import geopandas as gpd
import pandas as pd

from heatcost.core.data_types import NULLABLE_COLUMNS, TABLE_SCHEMAS
from heatcost.core.errors import DataError

logger = logging.getLogger(__name__)

def validate_table(
    df: pd.DataFrame,
    kind: str,
    table_name: str
) -> pd.DataFrame:
    """
    Validates a table against a column schema and returns a validated copy.

    Float columns ("f") are coerced with `pd.to_numeric`; integer-valued inputs
    are accepted and converted to float. Identifier columns ("O") are cast to str.
Only the columns listed in `NULLABLE_COLUMNS[kind]` may contain NaN.

    Args:
        df (pd.DataFrame): Table to validate (not modified).
        kind (str): Key into `TABLE_SCHEMAS` and `NULLABLE_COLUMNS`, e.g. "segments".
        table_name (str): Name used in error messages.

    Returns:
        pd.DataFrame: A copy with coerced dtypes.

    Raises:
        DataError: If a required column is missing, null, or not numeric.
    """
    if kind not in TABLE_SCHEMAS:
        raise ValueError(f"Unknown table kind '{kind}', expected one of {sorted(TABLE_SCHEMAS)}.")
    schema = TABLE_SCHEMAS[kind]
    nullable = set(NULLABLE_COLUMNS.get(kind, []))
    columns = [name for name, _ in schema]

    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise DataError(f"Table '{table_name}' is missing required columns: {missing}")

    validated = df.copy()

    for name, kind in schema:
        if kind == "f":
            try:
                validated[name] = pd.to_numeric(validated[name], errors="raise").astype(float)
            except (TypeError, ValueError) as e:
                raise DataError(f"Column '{name}' of '{table_name}' is not numeric: {e}") from e
        elif kind == "O" and name != "geometry":
            if validated[name].notna().all():
                validated[name] = validated[name].astype(str)

        if name not in nullable:
            null_count = int(validated[name].isna().sum())
            if null_count:
                raise DataError(
                    f"Column '{name}' of '{table_name}' has {null_count} missing values."
                )

    logger.debug(f"Validated table '{table_name}' with {len(validated)} rows.")
    return validated

def validate_geometries(gdf: gpd.GeoDataFrame, table_name: str) -> None:
    """
    Checks that every geometry is present, non-empty and valid.

    Args:
        gdf (GeoDataFrame): Table to check.
        table_name (str): Name used in error messages.

    Raises:
        DataError: If any geometry is null, empty or invalid.
    """
    geoms = gdf.geometry
    null_mask = geoms.isna()
    if null_mask.any():
        raise DataError(f"Table '{table_name}' has {int(null_mask.sum())} missing geometries.")

    empty_mask = geoms.is_empty
    if empty_mask.any():
        raise DataError(f"Table '{table_name}' has {int(empty_mask.sum())} empty geometries.")

    invalid_mask = ~geoms.is_valid
    if invalid_mask.any():
        raise DataError(f"Table '{table_name}' has {int(invalid_mask.sum())} invalid geometries.")
