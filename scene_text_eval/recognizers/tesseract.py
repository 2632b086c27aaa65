from typing import List, Optional

import numpy as np
import pytesseract

from scene_text_eval import settings
from scene_text_eval.models import RecognitionOutput, Rect, RecognizerFamily
from scene_text_eval.recognizers.base import BaseRecognizer


class TesseractRecognizer(BaseRecognizer):
    """Generic OCR engine; word confidences are on a 0-100 scale."""

    family = RecognizerFamily.GENERIC_OCR

    def __init__(
        self,
        lang: Optional[str] = None,
        config: str = "",
        tesseract_cmd: Optional[str] = None,
    ):
        super().__init__(model_name="tesseract")
        self.lang = lang or settings.TESSERACT_LANG
        self.config = config
        tesseract_cmd = tesseract_cmd or settings.TESSERACT_CMD
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

    def recognize(self, segmentation: np.ndarray, crop: np.ndarray) -> RecognitionOutput:
        data = pytesseract.image_to_data(
            segmentation,
            lang=self.lang,
            config=self.config,
            output_type=pytesseract.Output.DICT,
        )

        words: List[str] = []
        boxes: List[Rect] = []
        confidences: List[float] = []
        lines: List[List[str]] = []
        current_line = None

        for i in range(len(data["text"])):
            text = data["text"][i].strip()
            confidence = float(data["conf"][i])
            if not text or confidence == -1:
                continue

            line_key = (data["block_num"][i], data["par_num"][i], data["line_num"][i])
            if line_key != current_line:
                lines.append([])
                current_line = line_key
            lines[-1].append(text)

            words.append(text)
            boxes.append(
                Rect(data["left"][i], data["top"][i], data["width"][i], data["height"][i])
            )
            confidences.append(confidence)

        joined = "\n".join(" ".join(line) for line in lines)
        return RecognitionOutput(text=joined, boxes=boxes, words=words, confidences=confidences)
