# =============================================================================
# CropHealth Monitor Backend
# services/analysis_service.py - Crop Health Analysis Service
#
# Runs the heuristic analysis pipeline (features -> health -> disease ->
# recommendation) on a decoded image and assembles the result. Used as the
# offline fallback to remote AI providers; it never raises to its caller.
# =============================================================================

import io
import random
import time
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple, Union

import numpy as np
from PIL import Image

from services.disease import disease_stage
from services.features import ImageFeatures, default_features, extract_features
from services.health import health_stage
from services.recommendations import get_care_tips, recommendation_stage
from services.results import run_stage
from services.vocabulary import disease_vocabulary, normalize_crop

logger = logging.getLogger(__name__)

FALLBACK_RECOMMENDATION = (
    'Continue monitoring plant health and maintain proper care routine.'
)


class ImageDecodeError(ValueError):
    """Raised when uploaded bytes cannot be decoded into an image."""


@dataclass(frozen=True)
class AnalysisResult:
    """
    Assembled outcome of one analysis.

    confidence and health come from the health scorer; disease and
    disease_confidence from the classifier. degraded_stages lists any
    stage that fell back to its default value.
    """
    crop: str
    confidence: int
    health: str
    health_score: int
    disease: str
    disease_confidence: int
    recommendation: str
    processing_time: float
    analysis_date: str
    features: ImageFeatures
    is_fallback: bool = False
    degraded_stages: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'crop': self.crop,
            'confidence': self.confidence,
            'health': self.health,
            'health_score': self.health_score,
            'disease': self.disease,
            'disease_confidence': self.disease_confidence,
            'recommendation': self.recommendation,
            'processing_time': round(self.processing_time, 2),
            'analysis_date': self.analysis_date,
            'features': self.features.to_dict(),
            'is_fallback': self.is_fallback,
            'degraded_stages': list(self.degraded_stages)
        }


class AnalysisService:
    """
    Heuristic crop health analysis service.

    This service handles:
    - Image decoding for uploaded bytes
    - Feature extraction, health scoring and disease classification
    - Recommendation and care tip lookup
    - Fallback results so callers always get a well-formed answer

    Randomness (confidence jitter, random disease pick) comes from a
    single injectable random source, so a seeded service is reproducible.
    """

    def __init__(self, seed: Optional[int] = None, rng: Optional[random.Random] = None):
        """
        Initialize the analysis service.

        Args:
            seed: Seed for a private random.Random (ignored if rng is given)
            rng: Random source exposing uniform() and choice()
        """
        self.rng = rng if rng is not None else random.Random(seed)

    @staticmethod
    def decode_image(image_data: bytes) -> Image.Image:
        """
        Decode raw upload bytes into an RGB Pillow image.

        Args:
            image_data: Raw image bytes

        Returns:
            Fully loaded RGB image

        Raises:
            ImageDecodeError: If the bytes are empty or not a readable image
        """
        if not image_data:
            raise ImageDecodeError('Empty image data')

        try:
            image = Image.open(io.BytesIO(image_data))
            image.load()
        except (OSError, ValueError, Image.DecompressionBombError) as e:
            raise ImageDecodeError(f"Could not decode image: {e}") from e

        if image.mode != 'RGB':
            image = image.convert('RGB')

        return image

    def analyze(
        self,
        image: Union[Image.Image, np.ndarray],
        crop_type: str
    ) -> AnalysisResult:
        """
        Analyze a decoded image.

        Args:
            image: Decoded Pillow image or pixel array
            crop_type: Crop type key (wheat, corn, tomato, potato, rice, ...)

        Returns:
            AnalysisResult; extraction errors fall back to the default
            feature vector and anything escaping the stages yields
            fallback_result()
        """
        start_time = time.perf_counter()
        logger.info(f"Starting analysis for {crop_type}")

        try:
            features = run_stage('features', extract_features, default_features, image)
            degraded = ('features',) if features.degraded else ()
            return self._assemble(features.value, crop_type, start_time, degraded)
        except Exception as e:
            logger.error(f"Analysis pipeline failed: {e}")
            return self.fallback_result(crop_type, start_time)

    def analyze_bytes(self, image_data: bytes, crop_type: str) -> AnalysisResult:
        """
        Decode and analyze uploaded image bytes.

        An undecodable upload is analyzed as the default feature vector
        with 'decode' recorded as a degraded stage.
        """
        try:
            image = self.decode_image(image_data)
        except ImageDecodeError as e:
            logger.warning(f"Image decode failed, using default features: {e}")
            return self.analyze_features(default_features(), crop_type, degraded=('decode',))

        return self.analyze(image, crop_type)

    def analyze_features(
        self,
        features: ImageFeatures,
        crop_type: str,
        degraded: Tuple[str, ...] = ()
    ) -> AnalysisResult:
        """Run the scoring stages on an already extracted feature vector."""
        start_time = time.perf_counter()
        try:
            return self._assemble(features, crop_type, start_time, degraded)
        except Exception as e:
            logger.error(f"Analysis pipeline failed: {e}")
            return self.fallback_result(crop_type, start_time)

    def _assemble(
        self,
        features: ImageFeatures,
        crop_type: str,
        start_time: float,
        degraded: Tuple[str, ...]
    ) -> AnalysisResult:
        health = health_stage(features, crop_type, self.rng)
        disease = disease_stage(features, crop_type, self.rng)
        recommendation = recommendation_stage(health.value, disease.value, crop_type)

        stages = {'health': health, 'disease': disease, 'recommendation': recommendation}
        degraded = degraded + tuple(name for name, stage in stages.items() if stage.degraded)

        result = AnalysisResult(
            crop=normalize_crop(crop_type),
            confidence=health.value.confidence,
            health=health.value.status,
            health_score=health.value.score,
            disease=disease.value.disease,
            disease_confidence=disease.value.confidence,
            recommendation=recommendation.value,
            processing_time=time.perf_counter() - start_time,
            analysis_date=datetime.now(timezone.utc).isoformat(),
            features=features,
            degraded_stages=degraded
        )

        if degraded:
            logger.warning(f"Analysis degraded in stages: {', '.join(degraded)}")

        logger.info(
            f"Analysis complete: {result.crop} - {result.health} "
            f"({result.confidence}%), {result.disease} ({result.disease_confidence}%)"
        )

        return result

    def fallback_result(self, crop_type: str, start_time: Optional[float] = None) -> AnalysisResult:
        """
        Result returned when the whole pipeline fails.

        Args:
            crop_type: Crop type key
            start_time: perf_counter() value at the start of the request

        Returns:
            AnalysisResult with fixed confidences, 'Good' health and a
            disease drawn from the crop's vocabulary
        """
        if start_time is None:
            start_time = time.perf_counter()

        return AnalysisResult(
            crop=normalize_crop(crop_type),
            confidence=75,
            health='Good',
            health_score=75,
            disease=self.rng.choice(disease_vocabulary(crop_type)),
            disease_confidence=70,
            recommendation=FALLBACK_RECOMMENDATION,
            processing_time=time.perf_counter() - start_time,
            analysis_date=datetime.now(timezone.utc).isoformat(),
            features=default_features(),
            is_fallback=True
        )

    def get_care_tips(self, crop_type: str) -> List[str]:
        return get_care_tips(crop_type)
