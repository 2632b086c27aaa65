"""
Unit tests for group segmentation buffers.
"""
import numpy as np
import pytest

from scene_text_eval.models import Group, Rect, SegmentationMode
from scene_text_eval.utils.segmentation import GroupSegmenter, crop, draw_regions
from tests.mocks.mock_collaborators import make_region

BOX = Rect(50, 20, 30, 10)


@pytest.fixture
def gradient_image():
    """Grayscale image with a dark block on a light background."""
    image = np.full((100, 200), 220, dtype=np.uint8)
    image[22:28, 55:75] = 30
    return image


@pytest.fixture
def regions():
    return [[make_region(0, 0, Rect(55, 22, 5, 4))], [make_region(1, 0, Rect(70, 25, 3, 3))]]


@pytest.fixture
def group():
    return Group(regions=[(0, 0), (1, 0)], box=BOX)


class TestDrawRegions:
    """Tests for draw_regions."""

    def test_draws_group_pixels(self, regions, group):
        mask = draw_regions((100, 200), regions, group)
        assert mask.dtype == np.uint8
        assert mask[22, 55] == 255
        assert mask[27, 72] == 255
        assert mask.sum() == 255 * (5 * 4 + 3 * 3)

    def test_skips_root_regions(self, group):
        roots = [[make_region(0, 0, Rect(55, 22, 5, 4), has_parent=False)], []]
        mask = draw_regions((100, 200), roots, Group(regions=[(0, 0)], box=BOX))
        assert not mask.any()


class TestCrop:
    """Tests for crop."""

    def test_crop(self, gradient_image):
        patch = crop(gradient_image, Rect(55, 22, 20, 6))
        assert patch.shape == (6, 20)
        assert (patch == 30).all()

    def test_crop_is_copy(self, gradient_image):
        patch = crop(gradient_image, Rect(0, 0, 5, 5))
        patch[:] = 0
        assert gradient_image[0, 0] == 220


class TestGroupSegmenter:
    """Tests for every segmentation mode."""

    def test_raw_mask(self, gradient_image, regions, group):
        segmented = GroupSegmenter(SegmentationMode.RAW_MASK).segment(
            gradient_image, regions, group
        )
        assert segmented.buffer.shape == (10 + 30, 30 + 30)
        assert segmented.origin == (35, 5)
        # Region pixel (55, 22) lands at buffer (22 - 5, 55 - 35)
        assert segmented.buffer[17, 20] == 255
        assert segmented.buffer[0, 0] == 0
        assert segmented.mask.shape == gradient_image.shape
        assert segmented.mask[22, 55] == 255

    def test_blurred_mask(self, gradient_image, regions, group):
        segmented = GroupSegmenter(SegmentationMode.BLURRED_MASK).segment(
            gradient_image, regions, group
        )
        assert segmented.buffer.shape == (40, 60)
        assert segmented.origin == (35, 5)
        buffer = segmented.buffer
        assert np.any((buffer > 0) & (buffer < 255))

    def test_custom_padding(self, gradient_image, regions, group):
        segmented = GroupSegmenter(SegmentationMode.RAW_MASK, padding=4).segment(
            gradient_image, regions, group
        )
        assert segmented.buffer.shape == (18, 38)
        assert segmented.origin == (46, 16)

    def test_cropped_gray(self, gradient_image, regions, group):
        segmented = GroupSegmenter(SegmentationMode.CROPPED_GRAY).segment(
            gradient_image, regions, group
        )
        assert segmented.origin == (45, 15)
        assert segmented.buffer.shape == (20, 40)
        np.testing.assert_array_equal(segmented.buffer, gradient_image[15:35, 45:85])
        np.testing.assert_array_equal(segmented.mask[15:35, 45:85], segmented.buffer)
        assert not segmented.mask[:15].any()

    def test_cropped_clipped_at_border(self, gradient_image, regions):
        corner = Group(regions=[(0, 0)], box=Rect(0, 0, 30, 10))
        segmented = GroupSegmenter(SegmentationMode.CROPPED_GRAY).segment(
            gradient_image, regions, corner
        )
        assert segmented.origin == (0, 0)
        assert segmented.buffer.shape == (20, 40)

    def test_cropped_adaptive(self, gradient_image, regions, group):
        segmented = GroupSegmenter(SegmentationMode.CROPPED_ADAPTIVE).segment(
            gradient_image, regions, group
        )
        assert segmented.buffer.shape == (20, 40)
        assert set(np.unique(segmented.buffer)) <= {0, 255}

    def test_cropped_otsu(self, gradient_image, regions, group):
        segmented = GroupSegmenter(SegmentationMode.CROPPED_OTSU).segment(
            gradient_image, regions, group
        )
        buffer = segmented.buffer
        assert set(np.unique(buffer)) == {0, 255}
        # Dark block (rows 22-27, cols 55-74) maps to buffer offset (15, 45)
        assert buffer[22 - 15, 55 - 45] == 0
        assert buffer[0, 0] == 255

    def test_unknown_mode(self):
        with pytest.raises(ValueError):
            GroupSegmenter("sobel")
