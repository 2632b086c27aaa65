import logging
from abc import ABC, abstractmethod
from typing import List

import numpy as np

from scene_text_eval.models import Region


class BaseDetector(ABC):
    """Base abstract class for character-region detectors."""

    def __init__(self) -> None:
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def detect(self, channel: np.ndarray, channel_index: int) -> List[Region]:
        """Extract candidate character regions from one single-channel image."""
        pass

    @staticmethod
    def _to_regions(point_sets: List[np.ndarray], channel_index: int) -> List[Region]:
        """Wrap raw point lists returned by OpenCV into Region objects."""
        return [
            Region(
                channel=channel_index,
                index=i,
                pixels=np.asarray(points, dtype=np.int32).reshape(-1, 2),
            )
            for i, points in enumerate(point_sets)
        ]
