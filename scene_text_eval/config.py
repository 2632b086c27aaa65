"""
Configuration classes for the scene-text pipeline and its evaluation.
"""
from dataclasses import dataclass, field
from typing import Dict

from scene_text_eval.models import (
    GroupingAlgorithm,
    RecognitionMethod,
    RecognizerFamily,
    RegionType,
    SegmentationMode,
)

# Default pipeline parameters
DEFAULT_PIPELINE_PARAMS = {
    "max_workers": 1,
    "group_padding": 15,
    "crop_margin": 5,
    "min_group_text_length": 3,
}

# Default evaluation parameters
DEFAULT_EVAL_PARAMS = {
    "use_levenshtein_distance": True,
    "include_match_details": True,
}

# Confidence thresholds (short, long) per recognizer family
DEFAULT_CONFIDENCE_THRESHOLDS: Dict[RecognizerFamily, Dict[str, float]] = {
    RecognizerFamily.GENERIC_OCR: {"min_confidence_short": 51.0, "min_confidence_long": 60.0},
    RecognizerFamily.HMM_DECODER: {"min_confidence_short": 0.0, "min_confidence_long": 0.0},
}

HMM_VOCABULARY = "abcdefghijklmnopqrtsuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"


@dataclass
class PipelineConfig:
    """Stage selection and tuning for a pipeline run."""

    region_type: RegionType = RegionType.ERSTATS
    grouping_algorithm: GroupingAlgorithm = GroupingAlgorithm.EXHAUSTIVE_SEARCH
    segmentation_mode: SegmentationMode = SegmentationMode.RAW_MASK
    recognition_method: RecognitionMethod = RecognitionMethod.HMM_KNN

    max_workers: int = DEFAULT_PIPELINE_PARAMS["max_workers"]
    group_padding: int = DEFAULT_PIPELINE_PARAMS["group_padding"]
    crop_margin: int = DEFAULT_PIPELINE_PARAMS["crop_margin"]
    min_group_text_length: int = DEFAULT_PIPELINE_PARAMS["min_group_text_length"]

    # Overrides for the recognizer family's thresholds, keyed like
    # DEFAULT_CONFIDENCE_THRESHOLDS entries
    confidence_overrides: Dict[str, float] = field(default_factory=dict)

    def __post_init__(self):
        # Stage selections may be given as enum values, e.g. "cropped_gray"
        self.region_type = RegionType(self.region_type)
        self.grouping_algorithm = GroupingAlgorithm(self.grouping_algorithm)
        self.segmentation_mode = SegmentationMode(self.segmentation_mode)
        self.recognition_method = RecognitionMethod(self.recognition_method)


@dataclass
class EvaluationConfig:
    """Configuration for ground-truth evaluation."""

    # Levenshtein C extension; False selects the pure-Python table
    use_levenshtein_distance: bool = DEFAULT_EVAL_PARAMS["use_levenshtein_distance"]
    include_match_details: bool = DEFAULT_EVAL_PARAMS["include_match_details"]
