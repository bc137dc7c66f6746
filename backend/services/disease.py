# =============================================================================
# CropHealth Monitor Backend
# services/disease.py - Disease Classification
#
# Picks the most likely disease from the crop's vocabulary using the
# same colour features as the health scorer.
# =============================================================================

import random
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence

from services.features import ImageFeatures
from services.results import StageResult, run_stage
from services.vocabulary import HEALTHY, disease_vocabulary

MAX_DISEASE_CONFIDENCE = 95

# Ratio thresholds for each distress signal
BROWN_THRESHOLD = 15
YELLOW_THRESHOLD = 20
LOW_GREEN_THRESHOLD = 20


@dataclass(frozen=True)
class DiseaseAssessment:
    disease: str
    confidence: int

    @property
    def is_healthy(self) -> bool:
        return self.disease == HEALTHY

    def to_dict(self) -> Dict[str, Any]:
        return {
            'disease': self.disease,
            'confidence': self.confidence
        }


def unknown_disease() -> DiseaseAssessment:
    return DiseaseAssessment(disease='Unknown', confidence=50)


def find_disease(diseases: Sequence[str], pattern: str) -> str:
    """
    First disease whose name contains pattern (case-insensitive),
    falling back to the first entry of the vocabulary.
    """
    for disease in diseases:
        if pattern in disease.lower():
            return disease
    return diseases[0]


def _compute_disease(features: ImageFeatures, crop_type: str, rng) -> DiseaseAssessment:
    diseases = disease_vocabulary(crop_type)

    # Brown (necrosis) outranks yellow (chlorosis), which outranks low green
    if features.brown_ratio > BROWN_THRESHOLD:
        disease = find_disease(diseases, 'blight')
        confidence = 75 + features.brown_ratio
    elif features.yellow_ratio > YELLOW_THRESHOLD:
        disease = find_disease(diseases, 'rust')
        confidence = 70 + features.yellow_ratio
    elif features.green_ratio < LOW_GREEN_THRESHOLD:
        disease = rng.choice(diseases[:-1])
        confidence = 60 + rng.uniform(0, 20)
    else:
        disease = HEALTHY
        confidence = 85 + rng.uniform(0, 10)

    return DiseaseAssessment(
        disease=disease,
        confidence=int(round(min(MAX_DISEASE_CONFIDENCE, confidence)))
    )


def disease_stage(
    features: ImageFeatures,
    crop_type: str,
    rng: Optional[random.Random] = None
) -> StageResult[DiseaseAssessment]:
    return run_stage(
        'disease', _compute_disease, unknown_disease,
        features, crop_type, rng if rng is not None else random
    )


def classify_disease(
    features: ImageFeatures,
    crop_type: str,
    rng: Optional[random.Random] = None
) -> DiseaseAssessment:
    """
    Classify the most likely disease for a crop image.

    Branches are evaluated top-down:
    1. brown_ratio > 15  -> first 'blight' disease, confidence 75 + brown_ratio
    2. yellow_ratio > 20 -> first 'rust' disease, confidence 70 + yellow_ratio
    3. green_ratio < 20  -> random non-healthy disease, confidence 60-80
    4. otherwise         -> 'Healthy', confidence 85-95

    Confidence is capped at 95. Never raises: internal errors yield
    ('Unknown', 50).

    Args:
        features: Extracted image features
        crop_type: Crop type key (case-insensitive)
        rng: Random source (module random if None)

    Returns:
        DiseaseAssessment
    """
    return disease_stage(features, crop_type, rng).value
