"""
Unit tests for recognizer adapters.
"""
from unittest.mock import MagicMock, patch

import numpy as np
import pytest

from scene_text_eval.models import Rect, RecognizerFamily
from scene_text_eval.recognizers.hmm_decoder import (
    HMMDecoderRecognizer,
    load_transition_probabilities,
)
from scene_text_eval.recognizers.tesseract import TesseractRecognizer


@pytest.fixture
def tesseract_data():
    """image_to_data output: two lines, one empty token and one non-word box."""
    return {
        "text": ["", "OPEN", "24h", "", "SHOP"],
        "conf": ["-1", "91.5", "48", -1, 77],
        "left": [0, 2, 30, 0, 4],
        "top": [0, 3, 3, 0, 20],
        "width": [60, 25, 15, 0, 30],
        "height": [40, 10, 10, 0, 12],
        "block_num": [1, 1, 1, 1, 1],
        "par_num": [1, 1, 1, 1, 1],
        "line_num": [0, 1, 1, 2, 2],
    }


class TestTesseractRecognizer:
    """Tests for TesseractRecognizer."""

    def test_family(self):
        assert TesseractRecognizer.family == RecognizerFamily.GENERIC_OCR

    @patch("scene_text_eval.recognizers.tesseract.pytesseract")
    def test_recognize(self, mock_pytesseract, tesseract_data):
        mock_pytesseract.image_to_data.return_value = tesseract_data
        recognizer = TesseractRecognizer(lang="eng")
        buffer = np.zeros((40, 60), dtype=np.uint8)

        output = recognizer.recognize(buffer, buffer)

        assert output.words == ["OPEN", "24h", "SHOP"]
        assert output.confidences == [91.5, 48.0, 77.0]
        assert output.boxes[2] == Rect(4, 20, 30, 12)
        assert output.text == "OPEN 24h\nSHOP"
        kwargs = mock_pytesseract.image_to_data.call_args[1]
        assert kwargs["lang"] == "eng"
        assert kwargs["output_type"] is mock_pytesseract.Output.DICT


@pytest.fixture
def model_files(temp_dir):
    classifier = temp_dir / "knn.xml.gz"
    transitions = temp_dir / "transitions.xml"
    classifier.write_bytes(b"")
    transitions.write_text("<opencv_storage/>")
    return str(classifier), str(transitions)


class TestHMMDecoderRecognizer:
    """Tests for HMMDecoderRecognizer."""

    @patch("scene_text_eval.recognizers.hmm_decoder.cv2")
    def test_recognize(self, mock_cv2, model_files):
        mock_cv2.FileStorage.return_value.getNode.return_value.mat.return_value = np.ones((62, 62))
        decoder = mock_cv2.text.OCRHMMDecoder_create.return_value
        decoder.run.return_value = "open shop"

        recognizer = HMMDecoderRecognizer("knn", *model_files)
        buffer = np.zeros((30, 80), dtype=np.uint8)
        output = recognizer.recognize(buffer, buffer)

        assert recognizer.family == RecognizerFamily.HMM_DECODER
        assert output.text == "open shop"
        assert output.words == ["open", "shop"]
        assert output.boxes == [Rect(0, 0, 80, 30)] * 2
        assert output.confidences == [0.0, 0.0]
        mock_cv2.text.loadOCRHMMClassifierNM.assert_called_once_with(model_files[0])

        _, vocabulary, transitions, emissions = mock_cv2.text.OCRHMMDecoder_create.call_args[0]
        assert len(vocabulary) == 62
        assert transitions.shape == (62, 62)
        np.testing.assert_array_equal(emissions, np.eye(62))

    @patch("scene_text_eval.recognizers.hmm_decoder.cv2")
    def test_cnn_classifier(self, mock_cv2, model_files):
        mock_cv2.FileStorage.return_value.getNode.return_value.mat.return_value = np.ones((62, 62))
        HMMDecoderRecognizer("cnn", *model_files)
        mock_cv2.text.loadOCRHMMClassifierCNN.assert_called_once_with(model_files[0])

    def test_unknown_classifier(self, model_files):
        with pytest.raises(ValueError):
            HMMDecoderRecognizer("mlp", *model_files)

    def test_missing_classifier(self, temp_dir, model_files):
        with pytest.raises(FileNotFoundError):
            HMMDecoderRecognizer("knn", str(temp_dir / "none.gz"), model_files[1])

    @patch("scene_text_eval.recognizers.hmm_decoder.cv2")
    def test_transition_table_shape_checked(self, mock_cv2, model_files):
        mock_cv2.FileStorage.return_value.getNode.return_value.mat.return_value = np.ones((10, 10))
        with pytest.raises(ValueError):
            load_transition_probabilities(model_files[1], 62)
        mock_cv2.FileStorage.return_value.release.assert_called_once_with()

    @patch("scene_text_eval.recognizers.hmm_decoder.cv2")
    def test_transition_table_missing_node(self, mock_cv2, model_files):
        mock_cv2.FileStorage.return_value.getNode.return_value.mat.return_value = None
        with pytest.raises(ValueError):
            load_transition_probabilities(model_files[1], 62)
