from typing import List

import cv2
import numpy as np

from scene_text_eval import settings
from scene_text_eval.detectors.base import BaseDetector
from scene_text_eval.models import Region

# First stage: threshold delta, min area, max area, min probability,
# non-max suppression, min probability difference
NM1_PARAMS = (8, 0.00015, 0.13, 0.2, True, 0.1)
NM2_MIN_PROBABILITY = 0.5


class ERFilterDetector(BaseDetector):
    """Extremal-region detector using the two-stage Neumann-Matas cascade."""

    def __init__(
        self,
        nm1_classifier_path: str = settings.NM1_CLASSIFIER_PATH,
        nm2_classifier_path: str = settings.NM2_CLASSIFIER_PATH,
    ):
        super().__init__()
        settings.require_file("NM1 classifier", nm1_classifier_path)
        settings.require_file("NM2 classifier", nm2_classifier_path)
        self.nm1_classifier_path = nm1_classifier_path
        self.nm2_classifier_path = nm2_classifier_path

    def _create_filters(self):
        # ERFilter objects keep per-run state, so each call builds its own pair
        er_filter1 = cv2.text.createERFilterNM1(
            cv2.text.loadClassifierNM1(self.nm1_classifier_path), *NM1_PARAMS
        )
        er_filter2 = cv2.text.createERFilterNM2(
            cv2.text.loadClassifierNM2(self.nm2_classifier_path), NM2_MIN_PROBABILITY
        )
        return er_filter1, er_filter2

    def detect(self, channel: np.ndarray, channel_index: int) -> List[Region]:
        er_filter1, er_filter2 = self._create_filters()
        point_sets = cv2.text.detectRegions(channel, er_filter1, er_filter2)
        regions = self._to_regions(list(point_sets), channel_index)
        self.logger.debug(f"Channel {channel_index}: {len(regions)} extremal regions")
        return regions
