from __future__ import annotations

"""
Unregularized logistic regression fitted by maximum likelihood with Newton
steps (iteratively reweighted least squares).
"""

import logging

import numpy as np

logger = logging.getLogger(__name__)


def sigmoid(z: np.ndarray) -> np.ndarray:
    z = np.clip(z, -500, 500)
    return 1.0 / (1.0 + np.exp(-z))


class LogisticRegressionMLE:
    """
    Plain maximum-likelihood logistic regression.
    The intercept is handled internally; coefficients stay in raw units.
    """

    def __init__(self, max_iter: int = 25, tol: float = 1e-8):
        self.max_iter = max_iter
        self.tol = tol
        self.weights_: np.ndarray | None = None
        self.n_iter_: int = 0
        self.converged_: bool = False
        self.deviance_: float = float("nan")

    @staticmethod
    def _add_bias(X: np.ndarray) -> np.ndarray:
        return np.hstack([np.ones((X.shape[0], 1)), X])

    @staticmethod
    def _deviance(y: np.ndarray, probs: np.ndarray) -> float:
        probs = np.clip(probs, 1e-15, 1 - 1e-15)
        return float(-2.0 * np.sum(y * np.log(probs) + (1 - y) * np.log(1 - probs)))

    def fit(self, X, y):
        """Fit by Newton-Raphson; stops on relative deviance change below tol."""
        X_arr = np.asarray(X, dtype=float)
        y_arr = np.asarray(y, dtype=float)
        if X_arr.shape[0] != y_arr.shape[0]:
            raise ValueError("X and y have a different number of rows.")
        if np.unique(y_arr).size < 2:
            raise ValueError("Logistic regression needs both classes in the training labels.")

        X_bias = self._add_bias(X_arr)
        weights = np.zeros(X_bias.shape[1])
        deviance = self._deviance(y_arr, sigmoid(X_bias @ weights))
        self.converged_ = False

        for step in range(1, self.max_iter + 1):
            probs = sigmoid(X_bias @ weights)
            w = probs * (1 - probs)
            grad = X_bias.T @ (y_arr - probs)
            hessian = X_bias.T @ (X_bias * w[:, None])
            # lstsq keeps aliased columns (e.g. an all-zero dummy) at a finite step
            delta = np.linalg.lstsq(hessian, grad, rcond=None)[0]
            weights = weights + delta

            new_deviance = self._deviance(y_arr, sigmoid(X_bias @ weights))
            logger.debug("[MLE] step=%d, deviance=%.6f", step, new_deviance)
            self.n_iter_ = step
            if abs(new_deviance - deviance) / (abs(new_deviance) + 0.1) < self.tol:
                deviance = new_deviance
                self.converged_ = True
                break
            deviance = new_deviance

        if not self.converged_:
            logger.warning(
                "Logistic regression did not converge in %d iterations", self.max_iter
            )

        self.weights_ = weights
        self.deviance_ = deviance
        self.intercept_ = float(weights[0])
        self.coef_ = weights[1:]
        return self

    def predict_proba(self, X) -> np.ndarray:
        """Return P(y=1) for each row in X."""
        if self.weights_ is None:
            raise RuntimeError("Model is not fitted.")
        X_arr = np.asarray(X, dtype=float)
        return sigmoid(self._add_bias(X_arr) @ self.weights_)
