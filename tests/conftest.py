"""
Pytest configuration and shared fixtures for scene-text evaluation tests.
"""
import tempfile
from pathlib import Path

import numpy as np
import pytest

from scene_text_eval.config import EvaluationConfig, PipelineConfig
from scene_text_eval.models import Group, RecognitionOutput, Rect, SegmentationMode
from tests.mocks.mock_collaborators import (
    MockDetector,
    MockGrouper,
    MockRecognizer,
    make_region,
)

IMAGE_SHAPE = (100, 200)

# Group boxes; each gives a distinct cropped-buffer shape with a 5px margin
BOX_HELLO = Rect(50, 20, 30, 10)  # buffer (20, 40)
BOX_NOISE = Rect(100, 60, 20, 10)  # buffer (20, 30)
BOX_WORDS = Rect(150, 70, 25, 12)  # buffer (22, 35)


# Test data fixtures
@pytest.fixture
def matching_scenarios():
    """Ground truth / detection pairs with their expected statistics."""
    return [
        {
            "ground_truth": ["hello", "cat"],
            "detections": ["hello", "cot"],
            "expected": {"tp": 1, "fp": 1, "fn": 1, "total_edit_distance": 1, "ratio": 1 / 8},
        },
        {
            "ground_truth": ["abc"],
            "detections": ["abc", "zzzz"],
            "expected": {"tp": 1, "fp": 1, "fn": 0, "total_edit_distance": 4, "ratio": 4 / 3},
        },
        {
            "ground_truth": ["hello", "world"],
            "detections": ["world"],
            "expected": {"tp": 1, "fp": 0, "fn": 1, "total_edit_distance": 5, "ratio": 0.5},
        },
        {
            "ground_truth": ["hello", "cat", "mountain"],
            "detections": ["hello", "cot", "mountian", "xyz"],
            "expected": {"tp": 1, "fp": 3, "fn": 2, "total_edit_distance": 6, "ratio": 6 / 16},
        },
    ]


@pytest.fixture
def gray_image():
    """White grayscale image."""
    return np.full(IMAGE_SHAPE, 255, dtype=np.uint8)


@pytest.fixture
def color_image():
    """White BGR image."""
    return np.full(IMAGE_SHAPE + (3,), 255, dtype=np.uint8)


# Configuration fixtures
@pytest.fixture
def pipeline_config():
    """Pipeline configuration using cropped grayscale segmentation."""
    return PipelineConfig(segmentation_mode=SegmentationMode.CROPPED_GRAY)


@pytest.fixture
def evaluation_config():
    return EvaluationConfig()


# Mock fixtures
@pytest.fixture
def mock_detector():
    return MockDetector(
        {
            0: [
                make_region(0, 0, Rect(55, 22, 5, 4)),
                make_region(0, 1, Rect(105, 62, 4, 4)),
            ],
            1: [make_region(1, 0, Rect(155, 72, 6, 6))],
        }
    )


@pytest.fixture
def mock_grouper():
    return MockGrouper(
        [
            Group(regions=[(0, 0)], box=BOX_HELLO),
            Group(regions=[(0, 1)], box=BOX_NOISE),
            Group(regions=[(1, 0)], box=BOX_WORDS),
        ]
    )


@pytest.fixture
def recognizer_outputs():
    """Recognizer outputs keyed by cropped-buffer shape."""
    return {
        (20, 40): RecognitionOutput(
            text="hello\n",
            boxes=[Rect(2, 3, 20, 8)],
            words=["hello"],
            confidences=[90.0],
        ),
        (20, 30): RecognitionOutput(
            text="a\nb",
            boxes=[Rect(0, 0, 5, 5), Rect(6, 0, 5, 5)],
            words=["a", "b"],
            confidences=[95.0, 95.0],
        ),
        (22, 35): RecognitionOutput(
            text="oo cat world",
            boxes=[Rect(0, 0, 5, 8), Rect(6, 0, 8, 8), Rect(15, 1, 18, 9)],
            words=["oo", "cat", "world"],
            confidences=[99.0, 55.0, 95.0],
        ),
    }


@pytest.fixture
def mock_recognizer(recognizer_outputs):
    return MockRecognizer(recognizer_outputs)


# Temporary file fixtures
@pytest.fixture
def temp_dir():
    """Temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def sample_image_file(temp_dir):
    """White PNG image on disk."""
    import cv2

    image = np.full(IMAGE_SHAPE + (3,), 255, dtype=np.uint8)
    image_file = temp_dir / "scene.png"
    cv2.imwrite(str(image_file), image)
    return image_file
