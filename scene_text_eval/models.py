from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

import numpy as np


class RegionType(Enum):
    """Character-region detection strategies."""

    ERSTATS = "erstats"
    MSER = "mser"


class GroupingAlgorithm(Enum):
    """Strategies for grouping regions into word candidates."""

    EXHAUSTIVE_SEARCH = "exhaustive_search"
    MULTI_ORIENTED = "multi_oriented"


class SegmentationMode(Enum):
    """How the per-group buffer handed to the recognizer is built."""

    RAW_MASK = "raw_mask"
    BLURRED_MASK = "blurred_mask"
    CROPPED_GRAY = "cropped_gray"
    CROPPED_ADAPTIVE = "cropped_adaptive"
    CROPPED_OTSU = "cropped_otsu"


class RecognitionMethod(Enum):
    """Recognition backends."""

    TESSERACT = "tesseract"
    HMM_KNN = "hmm_knn"
    HMM_CNN = "hmm_cnn"


class RecognizerFamily(Enum):
    """Recognizer families; each reports confidences on its own scale."""

    GENERIC_OCR = "generic_ocr"  # 0..100
    HMM_DECODER = "hmm_decoder"  # roughly -1..1


@dataclass(frozen=True)
class Rect:
    """Axis-aligned box in pixel coordinates."""

    x: int
    y: int
    width: int
    height: int

    @property
    def tl(self) -> Tuple[int, int]:
        return (self.x, self.y)

    @property
    def br(self) -> Tuple[int, int]:
        return (self.x + self.width, self.y + self.height)

    def translate(self, dx: int, dy: int) -> "Rect":
        return Rect(self.x + dx, self.y + dy, self.width, self.height)

    def pad(self, margin: int) -> "Rect":
        """Grow the box by ``margin`` pixels on every side."""
        return Rect(
            self.x - margin, self.y - margin, self.width + 2 * margin, self.height + 2 * margin
        )

    def clip(self, width: int, height: int) -> "Rect":
        """Clip the box to an image of the given size (origin first, then extent)."""
        x = max(self.x, 0)
        y = max(self.y, 0)
        return Rect(x, y, min(width - x - 1, self.width), min(height - y - 1, self.height))

    def contains(self, other: "Rect") -> bool:
        return (
            other.x >= self.x
            and other.y >= self.y
            and other.x + other.width <= self.x + self.width
            and other.y + other.height <= self.y + self.height
        )

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


@dataclass
class Region:
    """A connected component produced by a detector."""

    channel: int
    index: int
    pixels: np.ndarray  # N x 2 array of (x, y)
    has_parent: bool = True

    @property
    def bounding_rect(self) -> Rect:
        if len(self.pixels) == 0:
            return Rect(0, 0, 0, 0)
        xs = self.pixels[:, 0]
        ys = self.pixels[:, 1]
        x, y = int(xs.min()), int(ys.min())
        return Rect(x, y, int(xs.max()) - x + 1, int(ys.max()) - y + 1)


@dataclass
class Group:
    """Regions hypothesized to form one word, with their bounding box."""

    regions: List[Tuple[int, int]]  # (channel, index) references
    box: Rect


@dataclass(frozen=True)
class RawHypothesis:
    """A recognizer's proposal for one token inside a group."""

    text: str
    box: Rect
    confidence: float


@dataclass
class RecognitionOutput:
    """Everything a recognizer returns for one segmentation buffer."""

    text: str
    boxes: List[Rect] = field(default_factory=list)
    words: List[str] = field(default_factory=list)
    confidences: List[float] = field(default_factory=list)

    def hypotheses(self) -> List[RawHypothesis]:
        return [
            RawHypothesis(text=word, box=box, confidence=float(confidence))
            for word, box, confidence in zip(self.words, self.boxes, self.confidences)
        ]


@dataclass(frozen=True)
class AcceptedWord:
    """A hypothesis that passed the plausibility filter, in image coordinates."""

    text: str
    box: Rect
    confidence: float
    group_index: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "box": self.box.to_dict(),
            "confidence": self.confidence,
            "group_index": self.group_index,
        }


@dataclass(frozen=True)
class WordMatch:
    """A committed ground-truth / detection pair."""

    ground_truth: str
    detection: str
    detection_index: int
    distance: int

    @property
    def exact(self) -> bool:
        return self.distance == 0


@dataclass
class MatchStats:
    """Aggregate result of matching detections against ground truth."""

    tp: int = 0
    fp: int = 0
    fn: int = 0
    total_edit_distance: int = 0
    ratio: float = 0.0
    matches: List[WordMatch] = field(default_factory=list)
    unmatched_ground_truth: List[str] = field(default_factory=list)
    unmatched_detections: List[str] = field(default_factory=list)

    def to_dict(self, include_details: bool = True) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "tp": self.tp,
            "fp": self.fp,
            "fn": self.fn,
            "total_edit_distance": self.total_edit_distance,
            "edit_distance_ratio": self.ratio,
        }
        if include_details:
            data["matches"] = [asdict(m) for m in self.matches]
            data["unmatched_ground_truth"] = list(self.unmatched_ground_truth)
            data["unmatched_detections"] = list(self.unmatched_detections)
        return data


@dataclass
class StageTimings:
    """Elapsed wall time per pipeline stage, in milliseconds."""

    region_detection: float = 0.0
    grouping: float = 0.0
    ocr_initialization: float = 0.0
    ocr: float = 0.0
    evaluation: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass
class PipelineResult:
    """Output of one pipeline run over a single image."""

    words_detection: List[AcceptedWord] = field(default_factory=list)
    groups: List[Group] = field(default_factory=list)
    timings: StageTimings = field(default_factory=StageTimings)
    stats: Optional[MatchStats] = None
    segmentation_mask: Optional[np.ndarray] = None
    skipped_groups: List[int] = field(default_factory=list)

    @property
    def detected_texts(self) -> List[str]:
        return [word.text for word in self.words_detection]

    def to_dict(self, include_details: bool = True) -> Dict[str, Any]:
        return {
            "words_detection": [word.to_dict() for word in self.words_detection],
            "num_groups": len(self.groups),
            "skipped_groups": list(self.skipped_groups),
            "timings_ms": self.timings.to_dict(),
            "evaluation": self.stats.to_dict(include_details) if self.stats else None,
        }
