import logging
from dataclasses import dataclass
from typing import Callable, Dict, Sequence, Tuple

import cv2
import numpy as np

from scene_text_eval.models import Group, Rect, Region, SegmentationMode

logger = logging.getLogger(__name__)


@dataclass
class SegmentedGroup:
    """The recognizer input built for one group."""

    buffer: np.ndarray  # what the recognizer decodes
    origin: Tuple[int, int]  # image coordinates of buffer pixel (0, 0)
    mask: np.ndarray  # full-image buffer, composited for inspection


def draw_regions(
    shape: Tuple[int, int], regions: Sequence[Sequence[Region]], group: Group
) -> np.ndarray:
    """
    Paint the pixels of a group's regions into a zero mask.

    Root regions (no parent) span the whole channel and are never drawn.
    """
    mask = np.zeros(shape, dtype=np.uint8)
    for channel, index in group.regions:
        region = regions[channel][index]
        if not region.has_parent or len(region.pixels) == 0:
            continue
        mask[region.pixels[:, 1], region.pixels[:, 0]] = 255
    return mask


def crop(image: np.ndarray, rect: Rect) -> np.ndarray:
    x0, y0 = max(rect.x, 0), max(rect.y, 0)
    x1, y1 = max(rect.x + rect.width, 0), max(rect.y + rect.height, 0)
    return image[y0:y1, x0:x1].copy()


class GroupSegmenter:
    """Builds the per-group recognizer input for the configured mode."""

    def __init__(self, mode: SegmentationMode, padding: int = 15, margin: int = 5):
        self.mode = mode
        self.padding = padding
        self.margin = margin
        self._segment = self._get_strategy(mode)

    def _get_strategy(
        self, mode: SegmentationMode
    ) -> Callable[[np.ndarray, Sequence[Sequence[Region]], Group], SegmentedGroup]:
        strategies: Dict[SegmentationMode, Callable] = {
            SegmentationMode.RAW_MASK: self._mask,
            SegmentationMode.BLURRED_MASK: self._blurred_mask,
            SegmentationMode.CROPPED_GRAY: self._cropped,
            SegmentationMode.CROPPED_ADAPTIVE: self._cropped_adaptive,
            SegmentationMode.CROPPED_OTSU: self._cropped_otsu,
        }

        if mode not in strategies:
            raise ValueError(f"Unknown segmentation mode: {mode}")

        return strategies[mode]

    def segment(
        self, gray: np.ndarray, regions: Sequence[Sequence[Region]], group: Group
    ) -> SegmentedGroup:
        """
        Build the recognizer input for one group.

        Args:
            gray: Grayscale source image
            regions: Detected regions per channel
            group: The group to segment

        Returns:
            SegmentedGroup with the buffer, its origin and the full-image mask
        """
        return self._segment(gray, regions, group)

    def _mask(
        self,
        gray: np.ndarray,
        regions: Sequence[Sequence[Region]],
        group: Group,
        blur: bool = False,
    ) -> SegmentedGroup:
        mask = draw_regions(gray.shape[:2], regions, group)
        if blur:
            mask = cv2.GaussianBlur(mask, (3, 3), 0)

        p = self.padding
        buffer = cv2.copyMakeBorder(
            crop(mask, group.box), p, p, p, p, cv2.BORDER_CONSTANT, value=0
        )
        return SegmentedGroup(buffer=buffer, origin=(group.box.x - p, group.box.y - p), mask=mask)

    def _blurred_mask(
        self, gray: np.ndarray, regions: Sequence[Sequence[Region]], group: Group
    ) -> SegmentedGroup:
        return self._mask(gray, regions, group, blur=True)

    def _cropped(
        self,
        gray: np.ndarray,
        regions: Sequence[Sequence[Region]],
        group: Group,
        threshold: Callable[[np.ndarray], np.ndarray] = lambda img: img,
    ) -> SegmentedGroup:
        height, width = gray.shape[:2]
        roi = group.box.pad(self.margin).clip(width, height)
        logger.debug(f"Group crop {roi.x},{roi.y},{roi.width},{roi.height}")

        buffer = threshold(crop(gray, roi))
        mask = np.zeros((height, width), dtype=np.uint8)
        mask[roi.y : roi.y + buffer.shape[0], roi.x : roi.x + buffer.shape[1]] = buffer
        return SegmentedGroup(buffer=buffer, origin=(roi.x, roi.y), mask=mask)

    def _cropped_adaptive(
        self, gray: np.ndarray, regions: Sequence[Sequence[Region]], group: Group
    ) -> SegmentedGroup:
        return self._cropped(
            gray,
            regions,
            group,
            lambda img: cv2.adaptiveThreshold(
                img, 255, cv2.ADAPTIVE_THRESH_GAUSSIAN_C, cv2.THRESH_BINARY, 11, 2
            ),
        )

    def _cropped_otsu(
        self, gray: np.ndarray, regions: Sequence[Sequence[Region]], group: Group
    ) -> SegmentedGroup:
        return self._cropped(
            gray,
            regions,
            group,
            lambda img: cv2.threshold(img, 128, 255, cv2.THRESH_BINARY | cv2.THRESH_OTSU)[1],
        )
