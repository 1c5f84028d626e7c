"""
Stroke occurrence prediction on the healthcare stroke dataset.

This package contains the dataset schema, cleaning and splitting helpers, a
maximum-likelihood logistic regression, evaluation utilities and model
persistence used by main.py.
"""

from .constants import CATEGORY_DOMAINS, EXAMPLE_RECORD, TARGET
from .data_prep import (
    clean_dataset,
    load_dataset,
    make_train_test_split,
    missing_value_counts,
    summarize_dataset,
)
from .logreg import LogisticRegressionMLE
from .metrics import (
    ClassificationMetrics,
    MetricsUnavailable,
    build_confusion_matrix,
    compute_classification_metrics,
    evaluate_model,
    metrics_from_confusion_matrix,
    summarize_coefficients,
    threshold_probabilities,
)
from .model import (
    StrokeModel,
    UnknownCategoryError,
    fit_stroke_model,
    load_model,
    predict_record,
    save_model,
    score_record,
)

__all__ = [
    "CATEGORY_DOMAINS",
    "EXAMPLE_RECORD",
    "TARGET",
    "clean_dataset",
    "load_dataset",
    "make_train_test_split",
    "missing_value_counts",
    "summarize_dataset",
    "LogisticRegressionMLE",
    "ClassificationMetrics",
    "MetricsUnavailable",
    "build_confusion_matrix",
    "compute_classification_metrics",
    "evaluate_model",
    "metrics_from_confusion_matrix",
    "summarize_coefficients",
    "threshold_probabilities",
    "StrokeModel",
    "UnknownCategoryError",
    "fit_stroke_model",
    "load_model",
    "predict_record",
    "save_model",
    "score_record",
]
