"""
Metrics Module - Provides evaluation metrics for scene-text recognition output.
"""

from abc import ABC, abstractmethod
from typing import Any, Sequence


class BaseMetric(ABC):
    """Base class for all word-level evaluation metrics."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name of the metric."""
        pass

    @abstractmethod
    def evaluate(self, ground_truth: Sequence[str], extracted: Sequence[str]) -> Any:
        """
        Evaluate the metric between ground-truth words and detected words.

        Args:
            ground_truth: The expected words for the image
            extracted: The words reported by the pipeline

        Returns:
            Evaluation result (score, dataclass, etc.)
        """
        pass
