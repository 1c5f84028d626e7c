from __future__ import annotations

"""
Optional figures for the evaluation step: confusion matrix and ROC curve.
"""

from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
from sklearn.metrics import ConfusionMatrixDisplay, auc, roc_curve


def plot_confusion_matrix(matrix, filename: Path, title: str = "Confusion Matrix: stroke") -> Path:
    """Save the [predicted][actual] matrix with actual labels on the rows, as sklearn draws it."""
    filename = Path(filename)
    filename.parent.mkdir(parents=True, exist_ok=True)

    disp = ConfusionMatrixDisplay(confusion_matrix=np.asarray(matrix).T, display_labels=[0, 1])
    disp.plot(cmap="Blues", values_format="d")
    plt.title(title)
    plt.tight_layout()
    plt.savefig(filename)
    plt.close("all")
    return filename


def plot_roc_curve(y_test, y_probs, filename: Path, title: str = "ROC Curve: stroke") -> Path | None:
    """Save the ROC curve; returns None when the test labels hold a single class."""
    y_test = np.asarray(y_test)
    if np.unique(y_test).size < 2:
        return None

    filename = Path(filename)
    filename.parent.mkdir(parents=True, exist_ok=True)

    fpr, tpr, _ = roc_curve(y_test, y_probs)
    roc_auc = auc(fpr, tpr)

    plt.figure(figsize=(8, 6))
    plt.plot(fpr, tpr, color="darkorange", lw=2, label=f"ROC curve (area = {roc_auc:.3f})")
    plt.plot([0, 1], [0, 1], color="navy", lw=2, linestyle="--")
    plt.xlim([0.0, 1.0])
    plt.ylim([0.0, 1.05])
    plt.xlabel("False Positive Rate")
    plt.ylabel("True Positive Rate")
    plt.title(title)
    plt.legend(loc="lower right")
    plt.grid(True)
    plt.tight_layout()
    plt.savefig(filename)
    plt.close()
    return filename
