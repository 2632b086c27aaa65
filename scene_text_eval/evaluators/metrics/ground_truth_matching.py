import logging
from typing import List, Optional, Sequence

import numpy as np

from scene_text_eval.evaluators.metrics.base import BaseMetric
from scene_text_eval.evaluators.metrics.utils import DistanceFunction, levenshtein_distance
from scene_text_eval.models import MatchStats, WordMatch


def sort_longest_first(words: Sequence[str]) -> List[str]:
    """Sort words by descending length; equal lengths keep their input order."""
    return sorted(words, key=len, reverse=True)


class GroundTruthMatcher(BaseMetric):
    """
    Greedy many-to-many matching of detected words against ground truth.

    Pairs are committed in rounds of increasing edit distance, so the most
    certain matches are resolved first and a distant ground-truth word cannot
    take a detection that is a near-perfect match for another word. This
    approximates, but is not, a minimum-cost bipartite assignment.
    """

    def __init__(self, distance: Optional[DistanceFunction] = None):
        self.distance = distance or levenshtein_distance
        self.logger = logging.getLogger(self.__class__.__name__)

    @property
    def name(self) -> str:
        return "ground_truth_matching"

    def build_distance_matrix(
        self, words_gt: Sequence[str], words_detection: Sequence[str]
    ) -> np.ndarray:
        """Edit distance between every ground-truth (row) and detection (column) pair."""
        matrix = np.zeros((len(words_gt), len(words_detection)), dtype=np.int64)
        for i, gt_word in enumerate(words_gt):
            for j, detected in enumerate(words_detection):
                matrix[i, j] = self.distance(gt_word, detected)
        return matrix

    def evaluate(self, ground_truth: Sequence[str], extracted: Sequence[str]) -> MatchStats:
        """
        Match detected words against ground-truth words.

        Args:
            ground_truth: Expected words; at least one must be non-empty
            extracted: Words accepted by the pipeline, in any order

        Returns:
            MatchStats with tp/fp/fn, total edit distance and ratio

        Raises:
            ValueError: If the ground truth holds no characters
        """
        words_gt = sort_longest_first(ground_truth)
        words_detection = list(extracted)

        num_gt_characters = sum(len(word) for word in words_gt)
        if num_gt_characters == 0:
            raise ValueError("Matching requires at least one non-empty ground-truth word")

        if not words_detection:
            # Nothing to match: every ground-truth character is unrecovered
            return MatchStats(
                fn=len(words_gt),
                total_edit_distance=num_gt_characters,
                ratio=1.0,
                unmatched_ground_truth=words_gt,
            )

        matrix = self.build_distance_matrix(words_gt, words_detection)
        max_dist = int(matrix.max())
        consumed = max_dist + 1

        stats = MatchStats()
        live_rows = list(range(len(words_gt)))
        matched_columns = set()

        for search_dist in range(max_dist + 1):
            position = 0
            while position < len(live_rows):
                row = live_rows[position]
                column = int(np.argmin(matrix[row]))
                if matrix[row, column] != search_dist:
                    position += 1
                    continue

                if search_dist == 0:
                    stats.tp += 1
                else:
                    stats.fp += 1
                    stats.fn += 1
                stats.total_edit_distance += search_dist
                stats.matches.append(
                    WordMatch(
                        ground_truth=words_gt[row],
                        detection=words_detection[column],
                        detection_index=column,
                        distance=search_dist,
                    )
                )
                matched_columns.add(column)
                matrix[:, column] = consumed
                # The next live row slides into this position
                del live_rows[position]

        for row in live_rows:
            stats.fn += 1
            stats.total_edit_distance += len(words_gt[row])
            stats.unmatched_ground_truth.append(words_gt[row])

        for column, detected in enumerate(words_detection):
            if column not in matched_columns:
                stats.fp += 1
                stats.total_edit_distance += len(detected)
                stats.unmatched_detections.append(detected)

        stats.ratio = stats.total_edit_distance / num_gt_characters
        self.logger.debug(
            f"Matched {len(stats.matches)} of {len(words_gt)} ground-truth words "
            f"over {max_dist + 1} distance rounds"
        )
        return stats
