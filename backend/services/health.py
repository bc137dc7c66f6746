# =============================================================================
# CropHealth Monitor Backend
# services/health.py - Health Scoring
#
# Maps image features and crop type to a 0-100 health score, a health
# status label and a jittered confidence value.
# =============================================================================

import random
from dataclasses import dataclass
from typing import Any, Dict, Optional

from services.features import ImageFeatures
from services.results import StageResult, run_stage
from services.vocabulary import normalize_crop

# Status thresholds, checked top-down
HEALTH_THRESHOLDS = (
    ('Excellent', 85),
    ('Good', 70),
    ('Fair', 55),
    ('Poor', 35),
)
CRITICAL = 'Critical'
UNKNOWN = 'Unknown'

HEALTH_STATUSES = tuple(label for label, _ in HEALTH_THRESHOLDS) + (CRITICAL,)

CONFIDENCE_MIN = 65
CONFIDENCE_MAX = 95
CONFIDENCE_JITTER = 5

# Crop-specific penalties: (feature attribute, threshold, penalty)
CROP_PENALTIES = {
    'wheat': ('yellow_ratio', 20, 20),    # Rust indicator
    'tomato': ('brown_ratio', 15, 25),    # Blight indicator
    'corn': ('yellow_ratio', 25, 15),     # Leaf spot indicator
}


@dataclass(frozen=True)
class HealthAssessment:
    status: str
    score: int
    confidence: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'status': self.status,
            'score': self.score,
            'confidence': self.confidence
        }


def unknown_health() -> HealthAssessment:
    return HealthAssessment(status=UNKNOWN, score=50, confidence=50)


def health_status(score: float) -> str:
    """Map a clamped score onto its status label."""
    for label, minimum in HEALTH_THRESHOLDS:
        if score >= minimum:
            return label
    return CRITICAL


def _compute_health(features: ImageFeatures, crop_type: str, rng) -> HealthAssessment:
    score = 50.0

    # Green vegetation indicates health
    if features.green_ratio > 30:
        score += (features.green_ratio - 30) * 1.5

    # Brown and yellow pixels indicate disease or stress
    score -= features.brown_ratio * 2
    score -= features.yellow_ratio * 1.5

    # Reasonable lighting
    if 60 < features.avg_brightness < 200:
        score += 10

    if features.avg_green > features.avg_red and features.avg_green > features.avg_blue:
        score += 15

    penalty = CROP_PENALTIES.get(normalize_crop(crop_type))
    if penalty:
        attribute, threshold, amount = penalty
        if getattr(features, attribute) > threshold:
            score -= amount

    score = max(0.0, min(100.0, score))

    jitter = rng.uniform(-CONFIDENCE_JITTER, CONFIDENCE_JITTER)
    confidence = max(CONFIDENCE_MIN, min(CONFIDENCE_MAX, score + jitter))

    return HealthAssessment(
        status=health_status(score),
        score=int(round(score)),
        confidence=int(round(confidence))
    )


def health_stage(
    features: ImageFeatures,
    crop_type: str,
    rng: Optional[random.Random] = None
) -> StageResult[HealthAssessment]:
    return run_stage(
        'health', _compute_health, unknown_health,
        features, crop_type, rng if rng is not None else random
    )


def score_health(
    features: ImageFeatures,
    crop_type: str,
    rng: Optional[random.Random] = None
) -> HealthAssessment:
    """
    Score crop health from image features.

    Never raises: any internal error yields status 'Unknown' with
    score and confidence 50.

    Args:
        features: Extracted image features
        crop_type: Crop type key (case-insensitive)
        rng: Random source for the confidence jitter (module random if None)

    Returns:
        HealthAssessment with score in [0, 100] and confidence in [65, 95]
    """
    return health_stage(features, crop_type, rng).value
