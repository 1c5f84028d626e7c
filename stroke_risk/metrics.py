from __future__ import annotations

"""
Evaluation helpers: thresholding, the 2x2 confusion matrix and the metrics
derived from it, plus a coefficient dump.
"""

from dataclasses import dataclass

import numpy as np
import pandas as pd
from sklearn import metrics

from .constants import TARGET, THRESHOLD

LABELS = [0, 1]


@dataclass(frozen=True)
class ClassificationMetrics:
    accuracy: float
    precision: float
    recall: float
    f1: float
    confusion_matrix: np.ndarray

    def as_dict(self) -> dict:
        return {
            "accuracy": self.accuracy,
            "precision": self.precision,
            "recall": self.recall,
            "f1": self.f1,
        }


@dataclass(frozen=True)
class MetricsUnavailable:
    """Returned instead of metrics when the confusion matrix is not 2x2."""

    reason: str
    confusion_matrix: np.ndarray


def threshold_probabilities(probs, threshold: float = THRESHOLD) -> np.ndarray:
    """Label 1 only when p is strictly above the threshold; p == threshold gives 0."""
    return (np.asarray(probs, dtype=float) > threshold).astype(int)


def build_confusion_matrix(predicted, actual) -> np.ndarray:
    """
    Counts indexed [predicted][actual] over labels {0, 1}. Both axes are always
    materialized, even when a class never occurs.
    """
    # sklearn puts the first argument on the rows
    return metrics.confusion_matrix(
        np.asarray(predicted, dtype=int), np.asarray(actual, dtype=int), labels=LABELS
    )


def _ratio(numerator: float, denominator: float) -> float:
    return float(numerator / denominator) if denominator > 0 else 0.0


def metrics_from_confusion_matrix(matrix) -> ClassificationMetrics | MetricsUnavailable:
    """Accuracy, precision, recall and F1; any zero denominator yields 0."""
    matrix = np.asarray(matrix)
    if matrix.shape != (2, 2):
        return MetricsUnavailable(
            reason=f"confusion matrix has shape {matrix.shape}, expected (2, 2)",
            confusion_matrix=matrix,
        )

    tp = matrix[1, 1]
    accuracy = _ratio(matrix[0, 0] + tp, matrix.sum())
    precision = _ratio(tp, matrix[1, :].sum())
    recall = _ratio(tp, matrix[:, 1].sum())
    f1 = _ratio(2 * precision * recall, precision + recall)
    return ClassificationMetrics(
        accuracy=accuracy,
        precision=precision,
        recall=recall,
        f1=f1,
        confusion_matrix=matrix,
    )


def compute_classification_metrics(
    y_true: np.ndarray | pd.Series, probs: np.ndarray, threshold: float = THRESHOLD
) -> ClassificationMetrics | MetricsUnavailable:
    """Threshold the probabilities, count the matrix and derive the metrics."""
    preds = threshold_probabilities(probs, threshold)
    matrix = build_confusion_matrix(preds, y_true)
    return metrics_from_confusion_matrix(matrix)


def evaluate_model(model, test: pd.DataFrame, threshold: float = THRESHOLD):
    """Score the test frame with a fitted model; returns (result, probabilities)."""
    probs = model.predict_proba(test, source="test split")
    return compute_classification_metrics(test[TARGET].to_numpy(), probs, threshold), probs


def summarize_coefficients(
    coef: np.ndarray, feature_names: list[str], top_k: int = 8
) -> dict[str, pd.Series]:
    coef_series = pd.Series(coef, index=feature_names)
    coef_sorted = coef_series.sort_values()
    return {
        "positive": coef_sorted[coef_sorted > 0].tail(top_k)[::-1],
        "negative": coef_sorted[coef_sorted < 0].head(top_k),
    }
