import joblib
import numpy as np
import pandas as pd
import pytest

from stroke_risk import (
    EXAMPLE_RECORD,
    ClassificationMetrics,
    StrokeModel,
    UnknownCategoryError,
    evaluate_model,
    fit_stroke_model,
    load_model,
    predict_record,
    save_model,
    score_record,
)
from stroke_risk.model import INTERCEPT, encode_predictors, observed_vocabulary


def test_vocabulary_follows_training_data(fitted_model):
    assert fitted_model.vocabulary["gender"] == ["Female", "Male"]
    assert fitted_model.vocabulary["smoking_status"] == [
        "formerly smoked",
        "never smoked",
        "smokes",
        "Unknown",
    ]


def test_coefficients_use_reference_level_encoding(fitted_model):
    assert list(fitted_model.coefficients.index) == [
        INTERCEPT,
        "age",
        "hypertension",
        "heart_disease",
        "avg_glucose_level",
        "bmi",
        "gender[Male]",
        "smoking_status[never smoked]",
        "smoking_status[smokes]",
        "smoking_status[Unknown]",
    ]
    assert np.all(np.isfinite(fitted_model.coefficients))
    assert fitted_model.converged
    assert fitted_model.coefficients["age"] > 0


def test_observed_vocabulary_skips_unseen_levels(clean_df):
    subset = clean_df[clean_df["smoking_status"] != "smokes"]
    vocabulary = observed_vocabulary(subset)
    assert "smokes" not in vocabulary["smoking_status"]
    assert vocabulary["smoking_status"][0] == "formerly smoked"


def test_encode_predictors_indicators(clean_df):
    vocabulary = {"gender": ["Female", "Male"]}
    X = encode_predictors(clean_df, vocabulary)
    expected = (clean_df["gender"].astype(str) == "Male").astype(float)
    pd.testing.assert_series_equal(X["gender[Male]"], expected, check_names=False)
    assert "gender[Female]" not in X.columns


def test_fit_rejects_single_class(train_test):
    train, _ = train_test
    with pytest.raises(ValueError):
        fit_stroke_model(train[train["stroke"] == 0])


def test_evaluate_model_on_test_split(fitted_model, train_test):
    _, test = train_test
    result, probs = evaluate_model(fitted_model, test)
    assert isinstance(result, ClassificationMetrics)
    assert result.confusion_matrix.shape == (2, 2)
    assert result.confusion_matrix.sum() == len(test)
    assert len(probs) == len(test)
    for value in result.as_dict().values():
        assert 0.0 <= value <= 1.0


def test_persistence_round_trip(tmp_path, fitted_model, train_test):
    _, test = train_test
    path = save_model(fitted_model, tmp_path / "nested" / "model.joblib")
    reloaded = load_model(path)

    assert isinstance(reloaded, StrokeModel)
    pd.testing.assert_series_equal(reloaded.coefficients, fitted_model.coefficients)
    assert reloaded.vocabulary == fitted_model.vocabulary
    np.testing.assert_array_equal(reloaded.predict_proba(test), fitted_model.predict_proba(test))
    np.testing.assert_array_equal(reloaded.predict(test), fitted_model.predict(test))
    assert predict_record(reloaded, EXAMPLE_RECORD) == predict_record(fitted_model, EXAMPLE_RECORD)


def test_load_model_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_model(tmp_path / "missing.joblib")


def test_load_model_wrong_object(tmp_path):
    path = tmp_path / "other.joblib"
    joblib.dump({"not": "a model"}, path)
    with pytest.raises(TypeError):
        load_model(path)


def test_predict_record_matches_score(fitted_model):
    probability = score_record(fitted_model, EXAMPLE_RECORD)
    assert 0.0 <= probability <= 1.0
    assert predict_record(fitted_model, EXAMPLE_RECORD) == int(probability > 0.5)


def test_predict_record_tie_goes_to_zero():
    coefficients = pd.Series(
        [0.0, 0.0, 0.0, 0.0, 0.0, 0.0],
        index=[INTERCEPT, "age", "hypertension", "heart_disease", "avg_glucose_level", "bmi"],
    )
    model = StrokeModel(coefficients=coefficients, vocabulary={})
    assert score_record(model, EXAMPLE_RECORD) == 0.5
    assert predict_record(model, EXAMPLE_RECORD) == 0


def test_unknown_gender_is_rejected(fitted_model):
    record = dict(EXAMPLE_RECORD, gender="Nonbinary")
    with pytest.raises(UnknownCategoryError) as excinfo:
        predict_record(fitted_model, record)
    assert excinfo.value.column == "gender"
    assert excinfo.value.value == "Nonbinary"
    assert excinfo.value.known == ["Female", "Male"]
    assert isinstance(excinfo.value, ValueError)


def test_level_missing_from_training_is_rejected(fitted_model):
    # "Other" is in the declared domain but never appears in the training data
    record = dict(EXAMPLE_RECORD, gender="Other")
    with pytest.raises(UnknownCategoryError):
        predict_record(fitted_model, record)


def test_record_missing_field(fitted_model):
    record = {k: v for k, v in EXAMPLE_RECORD.items() if k != "bmi"}
    with pytest.raises(ValueError, match="bmi"):
        predict_record(fitted_model, record)


def test_record_non_numeric_field(fitted_model):
    record = dict(EXAMPLE_RECORD, bmi="N/A")
    with pytest.raises(ValueError, match="bmi"):
        predict_record(fitted_model, record)


def test_record_ignores_non_model_fields(fitted_model):
    base = predict_record(fitted_model, EXAMPLE_RECORD)
    record = dict(EXAMPLE_RECORD, work_type="Self-employed", ever_married="No")
    assert predict_record(fitted_model, record) == base


def test_record_with_out_of_range_flag_is_rejected(fitted_model):
    record = dict(EXAMPLE_RECORD, hypertension=7)
    with pytest.raises(ValueError, match="hypertension"):
        predict_record(fitted_model, record)


def test_record_categories_are_coerced_like_training_data(fitted_model):
    padded = dict(EXAMPLE_RECORD, gender=" Male", smoking_status="formerly smoked ")
    assert score_record(fitted_model, padded) == score_record(fitted_model, EXAMPLE_RECORD)


def test_record_out_of_domain_category_names_record(fitted_model):
    with pytest.raises(UnknownCategoryError, match="in record"):
        predict_record(fitted_model, dict(EXAMPLE_RECORD, smoking_status="vapes"))


def test_test_only_level_names_the_split(train_test):
    train, test = train_test
    test = test.copy()
    test.loc[test.index[0], "gender"] = "Other"
    model = fit_stroke_model(train)
    with pytest.raises(UnknownCategoryError, match="test split") as excinfo:
        evaluate_model(model, test)
    assert excinfo.value.source == "test split"
    assert excinfo.value.value == "Other"


def test_fit_records_residual_deviance(fitted_model, train_test):
    train, _ = train_test
    probs = fitted_model.predict_proba(train)
    y = train["stroke"].to_numpy()
    expected = -2.0 * np.sum(y * np.log(probs) + (1 - y) * np.log(1 - probs))
    assert fitted_model.deviance == pytest.approx(expected, rel=1e-6)
