# =============================================================================
# CropHealth Monitor Backend
# services/recommendations.py - Recommendations & Care Tips
#
# Turns a health and disease assessment into a short recommendation text,
# and serves static per-crop care tips.
# =============================================================================

from typing import List, Tuple

from services.disease import DiseaseAssessment
from services.health import HealthAssessment
from services.results import StageResult, run_stage
from services.vocabulary import (
    CARE_TIPS,
    DEFAULT_CARE_TIPS,
    HEALTHY,
    normalize_crop,
)

MAX_RECOMMENDATIONS = 3

FALLBACK_RECOMMENDATION = (
    'Monitor plant health and consult agricultural expert if issues persist.'
)

URGENT_ACTIONS = (
    'Immediate attention required',
    'Check soil moisture and drainage',
    'Inspect for pests and diseases',
)

# Matched as substrings of the lower-cased disease name, in order
DISEASE_TREATMENTS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ('rust', (
        'Apply fungicide treatment',
        'Improve air circulation',
    )),
    ('blight', (
        'Remove affected leaves immediately',
        'Apply copper-based fungicide',
        'Reduce watering frequency',
    )),
    ('bacterial spot', (
        'Use bactericide treatment',
        'Avoid overhead watering',
    )),
)

GENERIC_TREATMENT = (
    'Consult agricultural expert for proper treatment',
    'Isolate affected plants if possible',
)

MAINTENANCE_ACTIONS = (
    'Monitor plant health regularly',
    'Maintain optimal watering schedule',
    'Ensure adequate nutrition',
)


def get_treatment(disease: str) -> List[str]:
    """
    Get the treatment fragments for a disease name.

    Args:
        disease: Disease name in any case

    Returns:
        Treatment fragments; the generic pair for unrecognised diseases
    """
    name = disease.lower()
    for key, actions in DISEASE_TREATMENTS:
        if key in name:
            return list(actions)
    return list(GENERIC_TREATMENT)


def _compose(health: HealthAssessment, disease: DiseaseAssessment, crop_type: str) -> str:
    if disease.disease == HEALTHY and health.status == 'Excellent':
        crop = normalize_crop(crop_type) or 'crop'
        return f"Your {crop} looks excellent! Continue current care routine and monitor regularly."

    recommendations = []

    if health.status in ('Critical', 'Poor'):
        recommendations.extend(URGENT_ACTIONS)

    if disease.disease != HEALTHY:
        recommendations.extend(get_treatment(disease.disease))

    if not recommendations:
        recommendations.extend(MAINTENANCE_ACTIONS)

    return '. '.join(recommendations[:MAX_RECOMMENDATIONS]) + '.'


def recommendation_stage(
    health: HealthAssessment,
    disease: DiseaseAssessment,
    crop_type: str
) -> StageResult[str]:
    return run_stage(
        'recommendation', _compose, lambda: FALLBACK_RECOMMENDATION,
        health, disease, crop_type
    )


def generate_recommendations(
    health: HealthAssessment,
    disease: DiseaseAssessment,
    crop_type: str
) -> str:
    """
    Build the recommendation text for an analysis.

    A healthy crop in excellent condition gets a single congratulatory
    message naming the crop by its normalized key, so ' Tomato ' reads
    as "Your tomato ..." and an empty or non-string crop as "Your crop
    ...". Otherwise urgent actions (Poor/Critical health), then
    disease treatment, then general maintenance when neither applied,
    truncated to the first three and joined into one text.

    Never raises: internal errors yield a generic monitoring sentence.
    """
    return recommendation_stage(health, disease, crop_type).value


def get_care_tips(crop_type: str) -> List[str]:
    """Three generic care tips for a crop, or general tips if unknown."""
    return list(CARE_TIPS.get(normalize_crop(crop_type), DEFAULT_CARE_TIPS))
