import datetime
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import cv2
import numpy as np

from scene_text_eval.config import EvaluationConfig, PipelineConfig
from scene_text_eval.models import PipelineResult
from scene_text_eval.pipelines.scene_text import SceneTextPipeline

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)


class ImageLoadError(ValueError):
    """Raised when an input image exists but cannot be decoded."""


def load_image(image_path: str) -> np.ndarray:
    """
    Load an image, failing before any pipeline stage runs.

    Raises:
        FileNotFoundError: If the path does not exist
        ImageLoadError: If the file cannot be decoded as an image
    """
    path = Path(image_path)
    if not path.exists():
        raise FileNotFoundError(f"Image not found: {image_path}")

    image = cv2.imread(str(path))
    if image is None:
        raise ImageLoadError(f"Could not load image: {image_path}")
    return image


class SceneTextWorkflow:
    """
    Runs the scene-text pipeline on one image file and records the result.

    The report (accepted words, stage timings and, when ground truth is given,
    match statistics) is returned as a dictionary and optionally written to
    ``<output_dir>/<image stem>_results.json``.
    """

    def __init__(
        self,
        image_path: str,
        ground_truth: Optional[Sequence[str]] = None,
        config: Optional[PipelineConfig] = None,
        evaluation_config: Optional[EvaluationConfig] = None,
        output_dir: Optional[str] = None,
        pipeline: Optional[SceneTextPipeline] = None,
    ):
        """
        Initialize the workflow.

        Args:
            image_path: Image to process
            ground_truth: Expected words for the image
            config: Pipeline configuration
            evaluation_config: Evaluation configuration
            output_dir: Directory for the JSON report; nothing is written when None
            pipeline: Prebuilt pipeline, mainly for tests
        """
        self.image_path = Path(image_path)
        self.ground_truth: List[str] = list(ground_truth or [])
        self.config = config or PipelineConfig()
        self.evaluation_config = evaluation_config or EvaluationConfig()
        self.output_dir = Path(output_dir) if output_dir else None
        self.logger = logging.getLogger(self.__class__.__name__)

        # Fail on unreadable input before building any stage
        self.image = load_image(str(self.image_path))
        self.pipeline = pipeline or SceneTextPipeline(self.config, self.evaluation_config)

    def run(self) -> Dict[str, Any]:
        """Run the pipeline and return the report."""
        self.logger.info(f"Processing {self.image_path}")
        result = self.pipeline.run(self.image, self.ground_truth)
        report = self._build_report(result)

        if self.output_dir:
            self._save_report(report)

        return report

    def _build_report(self, result: PipelineResult) -> Dict[str, Any]:
        return {
            "document_info": {
                "image": str(self.image_path),
                "ground_truth": self.ground_truth,
                "timestamp": datetime.datetime.now().strftime("%Y%m%d_%H%M%S"),
                "config": {
                    "region_type": self.config.region_type.value,
                    "grouping_algorithm": self.config.grouping_algorithm.value,
                    "segmentation_mode": self.config.segmentation_mode.value,
                    "recognition_method": self.config.recognition_method.value,
                },
            },
            **result.to_dict(self.evaluation_config.include_match_details),
        }

    def _save_report(self, report: Dict[str, Any]) -> Path:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self.output_dir / f"{self.image_path.stem}_results.json"
        with open(path, "w", encoding="utf-8") as f:
            json.dump(report, f, ensure_ascii=False, indent=2)
        self.logger.info(f"Results saved to {path}")
        return path
