import logging
from abc import ABC, abstractmethod

import numpy as np

from scene_text_eval.models import RecognitionOutput, RecognizerFamily


class BaseRecognizer(ABC):
    """Base abstract class for word recognizers."""

    family: RecognizerFamily

    def __init__(self, model_name: str):
        self.model_name = model_name
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def recognize(self, segmentation: np.ndarray, crop: np.ndarray) -> RecognitionOutput:
        """
        Recognize the words in one group's segmentation buffer.

        Args:
            segmentation: Buffer to decode
            crop: Mask or crop of the same group, same geometry as ``segmentation``

        Returns:
            Joined text plus per-word boxes (buffer coordinates), words and confidences
        """
        pass
