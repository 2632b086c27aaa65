"""
Settings module for the scene-text evaluation package.
Loads model file locations from environment variables.
"""
from dotenv import load_dotenv
load_dotenv()

import os
from pathlib import Path
from typing import Optional


def get_env_var(name: str, default: Optional[str] = None) -> Optional[str]:
    """Get environment variable with optional default."""
    return os.getenv(name, default)

# ER filter cascade classifiers
NM1_CLASSIFIER_PATH = get_env_var("NM1_CLASSIFIER_PATH", "trained_classifierNM1.xml")
NM2_CLASSIFIER_PATH = get_env_var("NM2_CLASSIFIER_PATH", "trained_classifierNM2.xml")

# Multi-oriented grouping classifier
GROUPING_CLASSIFIER_PATH = get_env_var(
    "GROUPING_CLASSIFIER_PATH", "trained_classifier_erGrouping.xml"
)

# HMM decoder models
HMM_TRANSITIONS_PATH = get_env_var("HMM_TRANSITIONS_PATH", "transitions_OCRHMM.xml")
KNN_MODEL_PATH = get_env_var("KNN_MODEL_PATH", "OCRHMM_knn_model_data.xml.gz")
CNN_MODEL_PATH = get_env_var("CNN_MODEL_PATH", "OCRBeamSearch_CNN_model_data.xml.gz")

# Tesseract
TESSERACT_CMD = get_env_var("TESSERACT_CMD")
TESSERACT_LANG = get_env_var("TESSERACT_LANG", "eng")


def require_file(name: str, path: Optional[str]) -> str:
    """Validate that a model file setting points at an existing file."""
    if not path or not Path(path).is_file():
        raise FileNotFoundError(
            f"{name} not found: {path}. Set it as an environment variable "
            f"or in a .env file based on .env.template"
        )
    return path
