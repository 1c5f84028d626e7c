import numpy as np
import pandas as pd
import pytest

from stroke_risk import clean_dataset, fit_stroke_model, make_train_test_split
from stroke_risk.constants import CATEGORY_DOMAINS

# Row positions of the deliberately broken records in make_raw_stroke_frame.
NA_BMI_ROWS = list(range(10))
BAD_GENDER_ROWS = [10, 11]
BAD_FLAG_ROWS = [12]
MISSING_SMOKING_ROWS = [13]
BROKEN_ROWS = NA_BMI_ROWS + BAD_GENDER_ROWS + BAD_FLAG_ROWS + MISSING_SMOKING_ROWS


def make_raw_stroke_frame(n: int = 600, seed: int = 0) -> pd.DataFrame:
    """Synthetic records shaped like the healthcare stroke CSV, with a few broken rows."""
    rng = np.random.default_rng(seed)
    age = rng.uniform(1, 90, n).round(1)
    hypertension = rng.binomial(1, 0.15, n)
    heart_disease = rng.binomial(1, 0.08, n)
    glucose = rng.normal(105, 40, n).clip(55, 280).round(2)
    bmi = rng.normal(28, 6, n).clip(12, 60).round(1)
    gender = rng.choice(["Female", "Male"], n)
    smoking = rng.choice(CATEGORY_DOMAINS["smoking_status"], n)

    logit = -6.0 + 0.06 * age + 0.5 * hypertension + 0.4 * heart_disease + 0.005 * glucose
    stroke = rng.binomial(1, 1.0 / (1.0 + np.exp(-logit)))

    df = pd.DataFrame(
        {
            "id": np.arange(1000, 1000 + n),
            "gender": gender,
            "age": age,
            "hypertension": hypertension,
            "heart_disease": heart_disease,
            "ever_married": rng.choice(CATEGORY_DOMAINS["ever_married"], n),
            "work_type": rng.choice(CATEGORY_DOMAINS["work_type"], n),
            "Residence_type": rng.choice(CATEGORY_DOMAINS["Residence_type"], n),
            "avg_glucose_level": glucose,
            "bmi": bmi.astype(object),
            "smoking_status": smoking.astype(object),
            "stroke": stroke,
        }
    )
    df.loc[NA_BMI_ROWS, "bmi"] = "N/A"
    df.loc[BAD_GENDER_ROWS, "gender"] = "Unspecified"
    df.loc[BAD_FLAG_ROWS, "hypertension"] = 2
    df.loc[MISSING_SMOKING_ROWS, "smoking_status"] = None
    return df


@pytest.fixture()
def raw_df() -> pd.DataFrame:
    return make_raw_stroke_frame()


@pytest.fixture()
def clean_df(raw_df: pd.DataFrame) -> pd.DataFrame:
    return clean_dataset(raw_df)


@pytest.fixture()
def train_test(clean_df: pd.DataFrame):
    return make_train_test_split(clean_df, train_fraction=0.8, random_state=42)


@pytest.fixture()
def fitted_model(train_test):
    train, _ = train_test
    return fit_stroke_model(train)


@pytest.fixture()
def stroke_csv(tmp_path, raw_df: pd.DataFrame):
    path = tmp_path / "healthcare-dataset-stroke-data.csv"
    raw_df.to_csv(path, index=False)
    return path
