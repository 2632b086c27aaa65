"""
Scene-text pipeline - detection, grouping, segmentation, recognition and evaluation.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable, Iterator, List, Optional, Sequence, Tuple

import cv2
import numpy as np

from scene_text_eval.config import EvaluationConfig, PipelineConfig
from scene_text_eval.detectors.base import BaseDetector
from scene_text_eval.evaluators.evaluator import SceneTextEvaluator
from scene_text_eval.evaluators.metrics.word_filter import FilterThresholds, WordPlausibilityFilter
from scene_text_eval.grouping.base import BaseGrouper
from scene_text_eval.models import AcceptedWord, Group, PipelineResult, Region, StageTimings
from scene_text_eval.recognizers.base import BaseRecognizer
from scene_text_eval.stage_factory import (
    create_detector,
    create_grouper,
    create_recognizer,
    resolve_segmentation_mode,
)
from scene_text_eval.utils.segmentation import GroupSegmenter


@dataclass
class GroupOutcome:
    """What processing one group contributes to the run."""

    index: int
    words: List[AcceptedWord] = field(default_factory=list)
    mask: Optional[np.ndarray] = None
    skipped: bool = False


class SceneTextPipeline:
    """
    Runs one image through detection, grouping, per-group recognition and
    evaluation, timing each stage.

    Channels and groups are independent of one another; with
    ``max_workers > 1`` they are processed on a thread pool and merged after
    the join in their original order, so results match a sequential run.
    """

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        evaluation_config: Optional[EvaluationConfig] = None,
        detector: Optional[BaseDetector] = None,
        grouper: Optional[BaseGrouper] = None,
        recognizer_factory: Optional[Callable[[], BaseRecognizer]] = None,
        evaluator: Optional[SceneTextEvaluator] = None,
    ):
        self.config = config or PipelineConfig()
        self.logger = logging.getLogger(self.__class__.__name__)

        # Strategies are resolved once, here
        self.detector = detector or create_detector(self.config.region_type)
        self.grouper = grouper or create_grouper(self.config.grouping_algorithm)
        self.recognizer_factory = recognizer_factory or (
            lambda: create_recognizer(self.config.recognition_method)
        )
        self.segmenter = GroupSegmenter(
            resolve_segmentation_mode(self.config.segmentation_mode),
            padding=self.config.group_padding,
            margin=self.config.crop_margin,
        )
        self.evaluator = evaluator or SceneTextEvaluator(evaluation_config)
        self.recognizer: Optional[BaseRecognizer] = None
        self.word_filter: Optional[WordPlausibilityFilter] = None

    @contextmanager
    def _stage(self, name: str, timings: StageTimings) -> Iterator[None]:
        start = time.perf_counter()
        try:
            yield
        except Exception as e:
            self.logger.error(f"Error during {name}: {str(e)}")
            raise
        elapsed = (time.perf_counter() - start) * 1000
        setattr(timings, name, elapsed)
        self.logger.info(f"TIME_{name.upper()} = {elapsed:.3f}")

    def _map(self, func: Callable, items: Sequence) -> List:
        """Apply func to every item, on a thread pool when configured; keeps item order."""
        if self.config.max_workers <= 1 or len(items) <= 1:
            return [func(item) for item in items]
        with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
            return list(executor.map(func, items))

    @staticmethod
    def build_channels(image: np.ndarray) -> Tuple[np.ndarray, List[np.ndarray]]:
        """Grayscale image plus the channels to detect on: grayscale and its inverse."""
        if image.ndim == 3:
            gray = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
        else:
            gray = image
        return gray, [gray, 255 - gray]

    def run(self, image: np.ndarray, ground_truth: Optional[Sequence[str]] = None) -> PipelineResult:
        """
        Process one image and, when ground truth is given, score the result.

        Args:
            image: BGR or grayscale image
            ground_truth: Expected words; empty or None skips evaluation

        Returns:
            PipelineResult with accepted words, timings and optional MatchStats
        """
        result = PipelineResult()
        timings = result.timings

        gray, channels = self.build_channels(image)

        with self._stage("region_detection", timings):
            regions: List[List[Region]] = self._map(
                lambda item: self.detector.detect(item[1], item[0]),
                list(enumerate(channels)),
            )

        with self._stage("grouping", timings):
            groups, _ = self.grouper.group(image, channels, regions)
        result.groups = groups

        with self._stage("ocr_initialization", timings):
            if self.recognizer is None:
                self.recognizer = self.recognizer_factory()
                self.word_filter = WordPlausibilityFilter(
                    FilterThresholds.for_family(
                        self.recognizer.family, self.config.confidence_overrides
                    )
                )

        with self._stage("ocr", timings):
            outcomes: List[GroupOutcome] = self._map(
                lambda item: self._process_group(item[0], item[1], gray, regions),
                list(enumerate(groups)),
            )

        composite = np.zeros(gray.shape[:2], dtype=np.uint8)
        for outcome in outcomes:
            if outcome.skipped:
                result.skipped_groups.append(outcome.index)
                continue
            result.words_detection.extend(outcome.words)
            if outcome.mask is not None:
                composite |= outcome.mask
        result.segmentation_mask = composite

        if ground_truth:
            with self._stage("evaluation", timings):
                result.stats = self.evaluator.evaluate(ground_truth, result.detected_texts)
        else:
            self.logger.info("No ground truth supplied, skipping evaluation")

        return result

    def _process_group(
        self,
        index: int,
        group: Group,
        gray: np.ndarray,
        regions: Sequence[Sequence[Region]],
    ) -> GroupOutcome:
        """Segment, recognize and filter one group."""
        outcome = GroupOutcome(index=index)
        segmented = self.segmenter.segment(gray, regions, group)
        output = self.recognizer.recognize(segmented.buffer, segmented.buffer)

        text = output.text.replace("\n", "")
        self.logger.info(f'OCR output = "{text}" length = {len(text)}')
        if len(text) < self.config.min_group_text_length:
            outcome.skipped = True
            return outcome

        dx, dy = segmented.origin
        for hypothesis in output.hypotheses():
            if not self.word_filter.accepts(hypothesis):
                continue
            outcome.words.append(
                AcceptedWord(
                    text=hypothesis.text,
                    box=hypothesis.box.translate(dx, dy),
                    confidence=hypothesis.confidence,
                    group_index=index,
                )
            )
            outcome.mask = segmented.mask

        return outcome
