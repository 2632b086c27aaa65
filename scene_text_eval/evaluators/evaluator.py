"""
Evaluator Module - Scores recognized words against ground-truth words.
"""

import logging
from typing import Iterable, List, Optional, Sequence

from scene_text_eval.config import EvaluationConfig
from scene_text_eval.evaluators.metrics.ground_truth_matching import (
    GroundTruthMatcher,
    sort_longest_first,
)
from scene_text_eval.evaluators.metrics.utils import get_distance_function
from scene_text_eval.models import MatchStats


class SceneTextEvaluator:
    """
    Evaluates the words reported for one image against its ground truth.

    Ground truth is cleaned (empty entries dropped) and ordered longest-first
    before being handed to the matcher. When no usable ground truth remains
    evaluation is skipped and ``evaluate`` returns None.
    """

    def __init__(self, config: Optional[EvaluationConfig] = None):
        """
        Initialize evaluator with configuration.

        Args:
            config: Optional evaluation configuration
        """
        self.config = config or EvaluationConfig()
        self.logger = logging.getLogger(self.__class__.__name__)
        self.matcher = GroundTruthMatcher(
            get_distance_function(self.config.use_levenshtein_distance)
        )

    @staticmethod
    def prepare_ground_truth(words: Iterable[str]) -> List[str]:
        """Drop empty entries and order the rest longest-first."""
        return sort_longest_first([word for word in words if len(word) > 0])

    def evaluate(
        self, ground_truth: Sequence[str], words_detection: Sequence[str]
    ) -> Optional[MatchStats]:
        """
        Evaluate detected words against ground truth.

        Args:
            ground_truth: Expected words, possibly containing empty entries
            words_detection: Accepted words in discovery order

        Returns:
            MatchStats, or None when there is no ground truth to evaluate against
        """
        words_gt = self.prepare_ground_truth(ground_truth)
        if not words_gt:
            self.logger.info("No ground truth supplied, skipping evaluation")
            return None

        stats = self.matcher.evaluate(words_gt, words_detection)
        self._log_report(stats, has_detections=bool(words_detection))
        return stats

    def _log_report(self, stats: MatchStats, has_detections: bool) -> None:
        self.logger.info(f"TOTAL_EDIT_DISTANCE = {stats.total_edit_distance}")
        self.logger.info(f"EDIT_DISTANCE_RATIO = {stats.ratio:g}")
        if not has_detections:
            return
        self.logger.info(f"TP = {stats.tp}")
        self.logger.info(f"FP = {stats.fp}")
        self.logger.info(f"FN = {stats.fn}")

        for match in stats.matches:
            self.logger.debug(
                f"GT word '{match.ground_truth}' best match '{match.detection}' "
                f"with dist {match.distance}"
            )
        for word in stats.unmatched_ground_truth:
            self.logger.debug(f"GT word '{word}' no match found")
        for word in stats.unmatched_detections:
            self.logger.debug(f"Detection word '{word}' no match found")
