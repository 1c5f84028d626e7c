from __future__ import annotations

"""
Loading, cleaning and splitting of the healthcare stroke dataset.
"""

import logging
from pathlib import Path

import pandas as pd
from sklearn.model_selection import train_test_split

from .constants import (
    BINARY_COLUMNS,
    CATEGORY_DOMAINS,
    MISSING_TOKENS,
    NUMERIC_COLUMNS,
    RANDOM_STATE,
    REQUIRED_COLUMNS,
    TARGET,
    TRAIN_FRACTION,
)

logger = logging.getLogger(__name__)


def load_dataset(csv_path: Path) -> pd.DataFrame:
    """Read the raw CSV and check that every schema column is present."""
    csv_path = Path(csv_path)
    if not csv_path.exists():
        raise FileNotFoundError(f"Dataset not found: {csv_path}")

    df = pd.read_csv(csv_path)
    missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing:
        raise ValueError(f"{csv_path} is missing required columns: {missing}")

    logger.info("Loaded %d rows from %s", len(df), csv_path)
    return df


def coerce_schema(df: pd.DataFrame) -> pd.DataFrame:
    """
    Cast columns to the declared schema. Anything that does not fit becomes NA;
    no rows are removed here. Columns absent from df are skipped.
    """
    out = df.copy()
    for col, domain in CATEGORY_DOMAINS.items():
        if col not in out.columns:
            continue
        values = out[col].astype("string").str.strip()
        # mask first: pandas refuses out-of-domain values in a categorical dtype
        values = values.where(values.isin(domain))
        out[col] = values.astype(pd.CategoricalDtype(categories=domain))

    for col in NUMERIC_COLUMNS:
        if col not in out.columns:
            continue
        out[col] = pd.to_numeric(out[col], errors="coerce").astype(float)

    for col in BINARY_COLUMNS:
        if col not in out.columns:
            continue
        values = pd.to_numeric(out[col], errors="coerce")
        out[col] = values.where(values.isin([0, 1]))

    return out


def clean_dataset(df: pd.DataFrame) -> pd.DataFrame:
    """
    Apply the schema and drop every row with a missing required value.

    Malformed rows are excluded, never repaired or rejected with an error.
    """
    coerced = coerce_schema(df)
    cleaned = coerced.dropna(subset=REQUIRED_COLUMNS).copy()
    for col in BINARY_COLUMNS:
        cleaned[col] = cleaned[col].astype(int)

    dropped = len(df) - len(cleaned)
    if dropped:
        logger.info("Dropped %d incomplete or malformed rows (%d kept)", dropped, len(cleaned))
    return cleaned


def missing_value_counts(df: pd.DataFrame) -> pd.Series:
    """Per-column missing counts on the raw frame; placeholder tokens count as missing."""
    return (df.isna() | df.isin(MISSING_TOKENS)).sum()


def summarize_dataset(df: pd.DataFrame) -> dict:
    return {
        "rows": len(df),
        "describe": df.describe(),
        "class_counts": df[TARGET].value_counts().sort_index(),
        "positive_rate": float(df[TARGET].mean()) if len(df) else float("nan"),
    }


def make_train_test_split(
    df: pd.DataFrame,
    train_fraction: float = TRAIN_FRACTION,
    random_state: int | None = RANDOM_STATE,
):
    """Stratified random split on the label; same seed and input give the same partition."""
    if not 0 < train_fraction < 1:
        raise ValueError(f"train_fraction must be in (0, 1), got {train_fraction}")

    train_ids, test_ids = train_test_split(
        df.index,
        train_size=train_fraction,
        random_state=random_state,
        stratify=df[TARGET],
    )
    return df.loc[train_ids], df.loc[test_ids]
