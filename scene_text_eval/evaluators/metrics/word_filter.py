import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from scene_text_eval.config import DEFAULT_CONFIDENCE_THRESHOLDS
from scene_text_eval.models import RawHypothesis, RecognizerFamily

LOW_CONFIDENCE_CHARS = frozenset("ilI")


def is_repetitive(s: str) -> bool:
    """
    Detect strings dominated by thin strokes or by a single repeated character.

    The string must be non-empty.
    """
    n = len(s)
    first = s[0]
    last = s[-1]
    thin = sum(1 for c in s if c in LOW_CONFIDENCE_CHARS)
    same_as_first = s.count(first)
    same_as_last = s.count(last)
    return thin > (n + 1) // 2 or same_as_first == n or same_as_last > (2 * n) // 3


@dataclass(frozen=True)
class FilterThresholds:
    """Confidence thresholds for one recognizer family."""

    min_confidence_short: float
    min_confidence_long: float

    @classmethod
    def for_family(
        cls, family: RecognizerFamily, overrides: Optional[Dict[str, float]] = None
    ) -> "FilterThresholds":
        values = dict(DEFAULT_CONFIDENCE_THRESHOLDS[family])
        values.update(overrides or {})
        return cls(**values)


class WordPlausibilityFilter:
    """Rejects recognition hypotheses unlikely to be genuine words."""

    def __init__(self, thresholds: FilterThresholds):
        self.thresholds = thresholds
        self.logger = logging.getLogger(self.__class__.__name__)

    def rejection_reason(self, hypothesis: RawHypothesis) -> Optional[str]:
        """Return the first rule the hypothesis breaks, or None if it is plausible."""
        text = hypothesis.text
        confidence = hypothesis.confidence

        if len(text) < 2:
            return "too_short"
        if confidence < self.thresholds.min_confidence_short:
            return "low_confidence"
        if len(text) == 2 and text[0] == text[1]:
            return "doubled_character"
        if len(text) < 4 and confidence < self.thresholds.min_confidence_long:
            return "low_confidence_short_word"
        if is_repetitive(text):
            return "repetitive"
        return None

    def accepts(self, hypothesis: RawHypothesis) -> bool:
        reason = self.rejection_reason(hypothesis)
        if reason is not None:
            self.logger.debug(
                f"Rejected '{hypothesis.text}' (confidence {hypothesis.confidence:.2f}): {reason}"
            )
            return False
        return True

    def filter(self, hypotheses: Iterable[RawHypothesis]) -> List[RawHypothesis]:
        return [h for h in hypotheses if self.accepts(h)]
