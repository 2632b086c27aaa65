from typing import List

import cv2
import numpy as np

from scene_text_eval.detectors.base import BaseDetector
from scene_text_eval.models import Region

MSER_DELTA = 21
MSER_MIN_AREA_RATIO = 0.00002
MSER_MAX_AREA_RATIO = 0.05
MSER_MAX_VARIATION = 1.0
MSER_MIN_DIVERSITY = 0.7


class MSERDetector(BaseDetector):
    """
    Maximally-stable extremal region detector.

    MSER already finds both dark-on-light and light-on-dark regions, so only
    the first (grayscale) channel is processed; other channels yield nothing.
    """

    def detect(self, channel: np.ndarray, channel_index: int) -> List[Region]:
        if channel_index != 0:
            return []

        pixels = channel.shape[0] * channel.shape[1]
        mser = cv2.MSER_create(
            MSER_DELTA,
            int(MSER_MIN_AREA_RATIO * pixels),
            int(MSER_MAX_AREA_RATIO * pixels),
            MSER_MAX_VARIATION,
            MSER_MIN_DIVERSITY,
        )
        point_sets, _ = mser.detectRegions(channel)
        regions = self._to_regions(list(point_sets), channel_index)
        self.logger.debug(f"{len(regions)} MSER regions")
        return regions
