"""
Dataset schema and pipeline defaults for the stroke experiment.
"""

from pathlib import Path

DATA_PATH = Path("data/healthcare-dataset-stroke-data.csv")
MODEL_PATH = Path("models/stroke_logreg.joblib")

TARGET = "stroke"

# Ordered domains; the first level observed in training is the reference level.
CATEGORY_DOMAINS = {
    "gender": ["Female", "Male", "Other"],
    "ever_married": ["No", "Yes"],
    "work_type": ["children", "Govt_job", "Never_worked", "Private", "Self-employed"],
    "Residence_type": ["Rural", "Urban"],
    "smoking_status": ["formerly smoked", "never smoked", "smokes", "Unknown"],
}

NUMERIC_COLUMNS = ["age", "avg_glucose_level", "bmi"]
BINARY_COLUMNS = ["hypertension", "heart_disease", TARGET]

REQUIRED_COLUMNS = [
    "gender",
    "age",
    "hypertension",
    "heart_disease",
    "ever_married",
    "work_type",
    "Residence_type",
    "avg_glucose_level",
    "bmi",
    "smoking_status",
    TARGET,
]

# stroke ~ age + hypertension + heart_disease + avg_glucose_level + bmi + gender + smoking_status
NUMERIC_PREDICTORS = ["age", "hypertension", "heart_disease", "avg_glucose_level", "bmi"]
CATEGORICAL_PREDICTORS = ["gender", "smoking_status"]

MISSING_TOKENS = ["N/A"]

TRAIN_FRACTION = 0.8
RANDOM_STATE = 42
THRESHOLD = 0.5

EXAMPLE_RECORD = {
    "gender": "Male",
    "age": 67.0,
    "hypertension": 0,
    "heart_disease": 1,
    "ever_married": "Yes",
    "work_type": "Private",
    "Residence_type": "Urban",
    "avg_glucose_level": 228.69,
    "bmi": 36.6,
    "smoking_status": "formerly smoked",
}
