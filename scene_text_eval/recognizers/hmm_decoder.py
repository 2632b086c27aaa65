import logging
from typing import Optional

import cv2
import numpy as np

from scene_text_eval import settings
from scene_text_eval.config import HMM_VOCABULARY
from scene_text_eval.models import RecognitionOutput, Rect, RecognizerFamily
from scene_text_eval.recognizers.base import BaseRecognizer

logger = logging.getLogger(__name__)


def load_transition_probabilities(path: str, vocabulary_size: int) -> np.ndarray:
    """Read the character transition table from an OpenCV FileStorage file."""
    settings.require_file("HMM transition table", path)
    storage = cv2.FileStorage(path, cv2.FILE_STORAGE_READ)
    try:
        table = storage.getNode("transition_probabilities").mat()
    finally:
        storage.release()

    if table is None or table.shape != (vocabulary_size, vocabulary_size):
        raise ValueError(
            f"Expected a {vocabulary_size}x{vocabulary_size} transition table in {path}"
        )
    logger.debug(f"Loaded transition table from {path}")
    return table.astype(np.float64)


class HMMDecoderRecognizer(BaseRecognizer):
    """
    HMM decoder over a character classifier, from the OpenCV text module.

    The Python binding only returns the decoded string, so every word is
    reported with the whole buffer as its box and a confidence of 0.0.
    """

    family = RecognizerFamily.HMM_DECODER

    def __init__(
        self,
        classifier: str = "knn",
        classifier_path: Optional[str] = None,
        transitions_path: Optional[str] = None,
        vocabulary: str = HMM_VOCABULARY,
        min_confidence: float = 0.0,
    ):
        super().__init__(model_name=f"hmm_{classifier}")
        loaders = {
            "knn": ("loadOCRHMMClassifierNM", settings.KNN_MODEL_PATH),
            "cnn": ("loadOCRHMMClassifierCNN", settings.CNN_MODEL_PATH),
        }
        if classifier not in loaders:
            raise ValueError(f"Unknown HMM classifier: {classifier}")

        loader_name, default_path = loaders[classifier]
        classifier_path = settings.require_file(
            f"{classifier.upper()} classifier", classifier_path or default_path
        )
        transition_p = load_transition_probabilities(
            transitions_path or settings.HMM_TRANSITIONS_PATH, len(vocabulary)
        )
        emission_p = np.eye(len(vocabulary), dtype=np.float64)

        self.vocabulary = vocabulary
        self.min_confidence = min_confidence
        loader = getattr(cv2.text, loader_name)
        self.decoder = cv2.text.OCRHMMDecoder_create(
            loader(classifier_path), vocabulary, transition_p, emission_p
        )

    def recognize(self, segmentation: np.ndarray, crop: np.ndarray) -> RecognitionOutput:
        text = self.decoder.run(
            segmentation, crop, self.min_confidence, cv2.text.OCR_LEVEL_WORD
        )
        words = text.split()
        height, width = segmentation.shape[:2]
        box = Rect(0, 0, width, height)
        return RecognitionOutput(
            text=text,
            boxes=[box] * len(words),
            words=words,
            confidences=[0.0] * len(words),
        )
