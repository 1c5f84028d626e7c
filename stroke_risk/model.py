from __future__ import annotations

"""
The fitted stroke model: formula encoding, training, persistence and
single-record inference.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

import joblib
import numpy as np
import pandas as pd

from .constants import (
    CATEGORICAL_PREDICTORS,
    CATEGORY_DOMAINS,
    NUMERIC_PREDICTORS,
    TARGET,
    THRESHOLD,
)
from .data_prep import coerce_schema
from .logreg import LogisticRegressionMLE, sigmoid
from .metrics import threshold_probabilities

logger = logging.getLogger(__name__)

INTERCEPT = "(Intercept)"


class UnknownCategoryError(ValueError):
    """A categorical value the model never saw during training."""

    def __init__(self, column: str, value, known: list[str], source: str | None = None):
        self.column = column
        self.value = value
        self.known = list(known)
        self.source = source
        where = f" in {source}" if source else ""
        super().__init__(
            f"Unknown category {value!r} for {column!r}{where}; model knows {self.known}"
        )


def observed_vocabulary(train: pd.DataFrame, columns=CATEGORICAL_PREDICTORS) -> dict[str, list[str]]:
    """Levels present in the training frame, kept in declared domain order."""
    vocabulary = {}
    for col in columns:
        present = set(train[col].dropna().astype(str))
        vocabulary[col] = [level for level in CATEGORY_DOMAINS[col] if level in present]
    return vocabulary


def dummy_name(column: str, level: str) -> str:
    return f"{column}[{level}]"


def encode_predictors(
    df: pd.DataFrame,
    vocabulary: dict[str, list[str]],
    numeric_predictors: list[str] = NUMERIC_PREDICTORS,
    source: str | None = None,
) -> pd.DataFrame:
    """
    Build the design matrix: numeric predictors as-is plus one indicator per
    non-reference level. Values outside the vocabulary raise UnknownCategoryError,
    naming `source` (e.g. "test split") when given.
    """
    X = pd.DataFrame(index=df.index)
    for col in numeric_predictors:
        X[col] = pd.to_numeric(df[col], errors="coerce").astype(float)
    if X.isna().any().any():
        bad = list(X.columns[X.isna().any()])
        raise ValueError(f"Missing or non-numeric values in predictors: {bad}")

    for col, levels in vocabulary.items():
        values = df[col].astype(object)
        unknown = values[~values.isin(levels)]
        if len(unknown):
            raise UnknownCategoryError(col, unknown.iloc[0], levels, source=source)
        for level in levels[1:]:
            X[dummy_name(col, level)] = (values == level).astype(float)
    return X


@dataclass
class StrokeModel:
    """Coefficients of the fitted formula plus the vocabulary they were fitted on."""

    coefficients: pd.Series
    vocabulary: dict[str, list[str]]
    numeric_predictors: list[str] = field(default_factory=lambda: list(NUMERIC_PREDICTORS))
    n_iter: int = 0
    converged: bool = True
    deviance: float = float("nan")

    @property
    def feature_names(self) -> list[str]:
        return [name for name in self.coefficients.index if name != INTERCEPT]

    def design_matrix(self, df: pd.DataFrame, source: str | None = None) -> pd.DataFrame:
        X = encode_predictors(df, self.vocabulary, self.numeric_predictors, source=source)
        return X[self.feature_names]

    def predict_proba(self, df: pd.DataFrame, source: str | None = None) -> np.ndarray:
        """Return P(stroke=1) for each row of df."""
        X = self.design_matrix(df, source=source).to_numpy(dtype=float)
        coef = self.coefficients[self.feature_names].to_numpy(dtype=float)
        return sigmoid(self.coefficients[INTERCEPT] + X @ coef)

    def predict(self, df: pd.DataFrame, threshold: float = THRESHOLD) -> np.ndarray:
        return threshold_probabilities(self.predict_proba(df), threshold)


def fit_stroke_model(train: pd.DataFrame, max_iter: int = 25, tol: float = 1e-8) -> StrokeModel:
    """Fit stroke ~ numeric predictors + gender + smoking_status on the training frame."""
    vocabulary = observed_vocabulary(train)
    X = encode_predictors(train, vocabulary)
    y = train[TARGET].to_numpy(dtype=float)

    solver = LogisticRegressionMLE(max_iter=max_iter, tol=tol)
    solver.fit(X.to_numpy(), y)
    logger.info(
        "Fitted logistic regression on %d rows, %d features (%d iterations)",
        len(X),
        X.shape[1],
        solver.n_iter_,
    )

    coefficients = pd.Series(
        np.concatenate([[solver.intercept_], solver.coef_]),
        index=[INTERCEPT, *X.columns],
    )
    return StrokeModel(
        coefficients=coefficients,
        vocabulary=vocabulary,
        numeric_predictors=list(NUMERIC_PREDICTORS),
        n_iter=solver.n_iter_,
        converged=solver.converged_,
        deviance=solver.deviance_,
    )


def save_model(model: StrokeModel, path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    joblib.dump(model, path)
    logger.info("Saved model to %s", path)
    return path


def load_model(path: Path) -> StrokeModel:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Model file not found: {path}")
    model = joblib.load(path)
    if not isinstance(model, StrokeModel):
        raise TypeError(f"{path} does not contain a StrokeModel (got {type(model).__name__})")
    return model


def record_frame(record: Mapping, vocabulary: dict[str, list[str]] | None = None) -> pd.DataFrame:
    """
    One-row frame for a new patient, coerced with the same schema as the
    training data. Out-of-domain categories raise UnknownCategoryError; numeric
    fields that do not survive coercion are left as NA for encode_predictors.
    """
    needed = [*NUMERIC_PREDICTORS, *CATEGORICAL_PREDICTORS]
    missing = [col for col in needed if col not in record]
    if missing:
        raise ValueError(f"Record is missing fields: {missing}")

    raw = pd.DataFrame([dict(record)])
    frame = coerce_schema(raw)
    for col in CATEGORICAL_PREDICTORS:
        if frame[col].isna().iloc[0]:
            known = (vocabulary or CATEGORY_DOMAINS).get(col, CATEGORY_DOMAINS[col])
            raise UnknownCategoryError(col, raw[col].iloc[0], known, source="record")
    return frame


def score_record(model: StrokeModel, record: Mapping) -> float:
    return float(model.predict_proba(record_frame(record, model.vocabulary), source="record")[0])


def predict_record(model: StrokeModel, record: Mapping, threshold: float = THRESHOLD) -> int:
    """
    Predict the label for one new record using the model's own vocabulary.
    Unseen categorical values raise UnknownCategoryError; there is no fallback level.
    """
    return int(threshold_probabilities([score_record(model, record)], threshold)[0])
