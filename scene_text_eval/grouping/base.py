import logging
from abc import ABC, abstractmethod
from typing import List, Sequence, Tuple

import numpy as np

from scene_text_eval.models import Group, Rect, Region


class BaseGrouper(ABC):
    """Base abstract class for grouping character regions into word candidates."""

    def __init__(self) -> None:
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def group(
        self,
        image: np.ndarray,
        channels: Sequence[np.ndarray],
        regions: Sequence[Sequence[Region]],
    ) -> Tuple[List[Group], List[Rect]]:
        """
        Group regions into word candidates.

        Args:
            image: Source image
            channels: Channels the regions were extracted from
            regions: Regions per channel

        Returns:
            Groups and their bounding boxes, in matching order
        """
        pass
