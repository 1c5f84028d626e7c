from __future__ import annotations

"""
CLI entrypoint for the stroke experiment: load -> clean -> split -> fit ->
evaluate -> persist -> reload -> predict one illustrative record.
"""

import argparse
import logging
from pathlib import Path

import pandas as pd

from stroke_risk import (
    EXAMPLE_RECORD,
    TARGET,
    MetricsUnavailable,
    clean_dataset,
    evaluate_model,
    fit_stroke_model,
    load_dataset,
    load_model,
    make_train_test_split,
    missing_value_counts,
    predict_record,
    save_model,
    score_record,
    summarize_coefficients,
    summarize_dataset,
)
from stroke_risk.constants import DATA_PATH, MODEL_PATH, RANDOM_STATE, THRESHOLD, TRAIN_FRACTION


def describe_dataset(raw: pd.DataFrame, cleaned: pd.DataFrame):
    """Print missing-value counts of the raw file and a summary of the cleaned one."""
    print("Missing values per column (raw):")
    print(missing_value_counts(raw).to_string())

    summary = summarize_dataset(cleaned)
    print(f"\nRows after cleaning: {summary['rows']} (from {len(raw)})")
    print(f"Positive rate for stroke: {summary['positive_rate']:.3f}")
    print("\nSummary statistics:")
    print(summary["describe"].to_string())
    print("\nClass counts:")
    print(summary["class_counts"].to_string())


def print_metrics(label: str, result):
    """Nicely format the outcome of compute_classification_metrics."""
    cm = result.confusion_matrix
    if isinstance(result, MetricsUnavailable):
        print(f"[{label}] metrics unavailable: {result.reason}")
    else:
        names = {"accuracy": "Acc", "precision": "Prec", "recall": "Rec", "f1": "F1"}
        scores = " | ".join(f"{names[k]} {v:.3f}" for k, v in result.as_dict().items())
        print(f"[{label}] {scores}")
    print(f"    Confusion matrix [[pred0/act0, pred0/act1], [pred1/act0, pred1/act1]]: {cm.tolist()}")


def build_arg_parser():
    """CLI parser; every knob has a default so a bare run does the whole pipeline."""
    parser = argparse.ArgumentParser(
        description="Predict stroke occurrence with a logistic regression."
    )
    parser.add_argument("--csv-path", type=Path, default=DATA_PATH)
    parser.add_argument("--model-path", type=Path, default=MODEL_PATH)
    parser.add_argument("--train-fraction", type=float, default=TRAIN_FRACTION)
    parser.add_argument(
        "--random-state",
        type=int,
        default=RANDOM_STATE,
        help="Random seed for the stratified split.",
    )
    parser.add_argument("--threshold", type=float, default=THRESHOLD)
    parser.add_argument(
        "--plot-dir",
        type=Path,
        default=None,
        help="Write confusion matrix and ROC figures to this directory.",
    )
    parser.add_argument("--verbose", action="store_true", help="Log solver iterations.")
    return parser


def configure_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def run_pipeline(args: argparse.Namespace):
    raw = load_dataset(args.csv_path)
    cleaned = clean_dataset(raw)
    describe_dataset(raw, cleaned)

    train, test = make_train_test_split(
        cleaned, train_fraction=args.train_fraction, random_state=args.random_state
    )
    print(f"\nTrain size: {len(train)}, Test size: {len(test)}")

    model = fit_stroke_model(train)
    if not model.converged:
        print(f"Warning: solver stopped after {model.n_iter} iterations without converging.")

    print("\nCoefficients (log-odds):")
    print(model.coefficients.to_string())
    print(
        f"Residual deviance: {model.deviance:.2f} on {len(train) - len(model.coefficients)} "
        f"degrees of freedom ({model.n_iter} Newton iterations)"
    )
    top = summarize_coefficients(
        model.coefficients[model.feature_names].to_numpy(), model.feature_names, top_k=3
    )
    print(f"Strongest risk factors: {list(top['positive'].index)}")

    result, probs = evaluate_model(model, test, threshold=args.threshold)
    print()
    print_metrics("Logistic regression (test)", result)

    if args.plot_dir is not None:
        from stroke_risk.plots import plot_confusion_matrix, plot_roc_curve

        plot_confusion_matrix(result.confusion_matrix, args.plot_dir / "confusion_matrix.png")
        plot_roc_curve(test[TARGET], probs, args.plot_dir / "roc_curve.png")
        print(f"Plots written to {args.plot_dir}")

    save_model(model, args.model_path)
    reloaded = load_model(args.model_path)
    probability = score_record(reloaded, EXAMPLE_RECORD)
    label = predict_record(reloaded, EXAMPLE_RECORD, threshold=args.threshold)
    print(f"\nNew record: {EXAMPLE_RECORD}")
    print(f"Predicted stroke probability: {probability:.3f} -> label {label}")
    return result


def main(args: argparse.Namespace | None = None):
    """
    Parse arguments, set up logging and run the pipeline. Returns None so the
    console script exits with status 0.
    """
    args = args or build_arg_parser().parse_args()
    configure_logging(args.verbose)
    run_pipeline(args)


if __name__ == "__main__":
    main()
