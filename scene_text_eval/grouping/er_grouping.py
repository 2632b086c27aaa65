from typing import List, Optional, Sequence, Tuple

import cv2
import numpy as np

from scene_text_eval import settings
from scene_text_eval.grouping.base import BaseGrouper
from scene_text_eval.models import Group, Rect, Region

MULTI_ORIENTED_MIN_PROBABILITY = 0.5


class ERGrouper(BaseGrouper):
    """
    Groups extremal regions with OpenCV's erGrouping.

    Horizontal grouping runs an exhaustive search over region pairs and
    triplets; arbitrary-orientation grouping needs a trained classifier.
    Groups are built per channel, and each one references the regions of its
    channel that lie inside its box.
    """

    def __init__(self, multi_oriented: bool = False, classifier_path: Optional[str] = None):
        super().__init__()
        self.multi_oriented = multi_oriented
        self.classifier_path = classifier_path
        if multi_oriented:
            self.classifier_path = settings.require_file(
                "Grouping classifier", classifier_path or settings.GROUPING_CLASSIFIER_PATH
            )

    def _group_channel(
        self, image: np.ndarray, channel: np.ndarray, regions: Sequence[Region]
    ) -> List[Rect]:
        point_lists = [region.pixels.reshape(-1, 1, 2).tolist() for region in regions]
        if self.multi_oriented:
            rects = cv2.text.erGrouping(
                image,
                channel,
                point_lists,
                cv2.text.ERGROUPING_ORIENTATION_ANY,
                self.classifier_path,
                MULTI_ORIENTED_MIN_PROBABILITY,
            )
        else:
            rects = cv2.text.erGrouping(image, channel, point_lists)
        return [Rect(*(int(v) for v in rect)) for rect in rects]

    def group(
        self,
        image: np.ndarray,
        channels: Sequence[np.ndarray],
        regions: Sequence[Sequence[Region]],
    ) -> Tuple[List[Group], List[Rect]]:
        groups: List[Group] = []
        boxes: List[Rect] = []

        for channel_index, channel in enumerate(channels):
            channel_regions = regions[channel_index]
            if not channel_regions:
                continue

            for box in self._group_channel(image, channel, channel_regions):
                members = [
                    (region.channel, region.index)
                    for region in channel_regions
                    if box.contains(region.bounding_rect)
                ]
                groups.append(Group(regions=members, box=box))
                boxes.append(box)

        self.logger.debug(f"{len(groups)} word candidates")
        return groups, boxes
