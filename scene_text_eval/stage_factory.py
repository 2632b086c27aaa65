import logging
from typing import Callable, Dict

from scene_text_eval.detectors.base import BaseDetector
from scene_text_eval.detectors.erfilter import ERFilterDetector
from scene_text_eval.detectors.mser import MSERDetector
from scene_text_eval.grouping.base import BaseGrouper
from scene_text_eval.grouping.er_grouping import ERGrouper
from scene_text_eval.models import (
    GroupingAlgorithm,
    RecognitionMethod,
    RegionType,
    SegmentationMode,
)
from scene_text_eval.recognizers.base import BaseRecognizer
from scene_text_eval.recognizers.hmm_decoder import HMMDecoderRecognizer
from scene_text_eval.recognizers.tesseract import TesseractRecognizer

logger = logging.getLogger(__name__)

# Strategy registries mapping configuration values to constructors
DETECTOR_REGISTRY: Dict[RegionType, Callable[[], BaseDetector]] = {
    RegionType.ERSTATS: ERFilterDetector,
    RegionType.MSER: MSERDetector,
}

GROUPER_REGISTRY: Dict[GroupingAlgorithm, Callable[[], BaseGrouper]] = {
    GroupingAlgorithm.EXHAUSTIVE_SEARCH: lambda: ERGrouper(multi_oriented=False),
    GroupingAlgorithm.MULTI_ORIENTED: lambda: ERGrouper(multi_oriented=True),
}

RECOGNIZER_REGISTRY: Dict[RecognitionMethod, Callable[[], BaseRecognizer]] = {
    RecognitionMethod.TESSERACT: TesseractRecognizer,
    RecognitionMethod.HMM_KNN: lambda: HMMDecoderRecognizer(classifier="knn"),
    RecognitionMethod.HMM_CNN: lambda: HMMDecoderRecognizer(classifier="cnn"),
}


def _resolve(value, enum_type, registry, kind):
    """Accept an enum member or its string value and return the registered constructor."""
    if not isinstance(value, enum_type):
        try:
            value = enum_type(value)
        except ValueError:
            raise ValueError(f"Unsupported {kind}: '{value}'")
    if value not in registry:
        raise ValueError(f"Unsupported {kind}: '{value}'")
    return registry[value]


def create_detector(region_type: RegionType) -> BaseDetector:
    """
    Create a region detector.

    Args:
        region_type: RegionType member or its string value

    Returns:
        Detector instance
    """
    factory = _resolve(region_type, RegionType, DETECTOR_REGISTRY, "region type")
    logger.debug("Creating detector for %s", region_type)
    return factory()


def create_grouper(algorithm: GroupingAlgorithm) -> BaseGrouper:
    """Create a region grouper."""
    factory = _resolve(algorithm, GroupingAlgorithm, GROUPER_REGISTRY, "grouping algorithm")
    logger.debug("Creating grouper for %s", algorithm)
    return factory()


def create_recognizer(method: RecognitionMethod) -> BaseRecognizer:
    """Create a recognizer; model files are loaded here."""
    factory = _resolve(method, RecognitionMethod, RECOGNIZER_REGISTRY, "recognition method")
    logger.debug("Creating recognizer for %s", method)
    return factory()


def resolve_segmentation_mode(mode) -> SegmentationMode:
    """Accept a SegmentationMode member or its string value."""
    if isinstance(mode, SegmentationMode):
        return mode
    try:
        return SegmentationMode(mode)
    except ValueError:
        raise ValueError(f"Unsupported segmentation mode: '{mode}'")
