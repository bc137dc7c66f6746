# =============================================================================
# CropHealth Monitor Backend
# services/vocabulary.py - Static Crop Vocabularies
#
# Read-only per-crop tables shared by the scorer, classifier and
# recommendation generator: disease names and generic care tips.
# =============================================================================

from types import MappingProxyType
from typing import Any, Mapping, Tuple


HEALTHY = 'Healthy'

# =============================================================================
# Disease Vocabulary
# Ordered disease names per crop, terminated by 'Healthy'
# =============================================================================

CROP_DISEASES: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    'wheat': ('Rust', 'Blight', 'Powdery Mildew', 'Septoria', HEALTHY),
    'corn': ('Northern Corn Leaf Blight', 'Common Rust', 'Gray Leaf Spot', HEALTHY),
    'tomato': ('Early Blight', 'Late Blight', 'Bacterial Spot', 'Mosaic Virus', HEALTHY),
    'potato': ('Late Blight', 'Early Blight', 'Common Scab', HEALTHY),
    'rice': ('Brown Spot', 'Bacterial Blight', 'Blast', HEALTHY),
})

DEFAULT_DISEASES: Tuple[str, ...] = ('Unknown Disease', HEALTHY)

SUPPORTED_CROPS = tuple(CROP_DISEASES.keys())

# =============================================================================
# Care Tips
# Generic agronomy tips, independent of the disease vocabulary
# =============================================================================

CARE_TIPS: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    'wheat': (
        'Water deeply but less frequently',
        'Monitor for rust during humid conditions',
        'Harvest when grain moisture is 13-15%',
    ),
    'corn': (
        'Ensure consistent soil moisture during tasseling',
        'Watch for corn borer and rootworm',
        'Side-dress with nitrogen at V6 stage',
    ),
    'tomato': (
        'Provide consistent watering to prevent blossom end rot',
        'Stake or cage plants for support',
        'Remove suckers for better fruit development',
    ),
    'potato': (
        'Hill soil around plants as they grow',
        'Avoid overwatering to prevent rot',
        'Harvest after foliage dies back',
    ),
    'rice': (
        'Maintain 2-5cm water depth during growing season',
        'Monitor for blast disease in humid conditions',
        'Drain fields 2 weeks before harvest',
    ),
})

DEFAULT_CARE_TIPS: Tuple[str, ...] = (
    'Monitor plant health regularly',
    'Provide adequate water and nutrients',
    'Protect from pests and diseases',
)


def normalize_crop(crop_type: Any) -> str:
    """
    Lower-case and strip a crop type into a vocabulary key.

    Anything that is not a string (None, numbers from a JSON body)
    normalizes to the empty key, which maps to the generic vocabulary.
    """
    if not isinstance(crop_type, str):
        return ''
    return crop_type.strip().lower()


def disease_vocabulary(crop_type: str) -> Tuple[str, ...]:
    """
    Get the ordered disease vocabulary for a crop.

    Args:
        crop_type: Crop type in any case

    Returns:
        Tuple of disease names; the generic list for unknown crops
    """
    return CROP_DISEASES.get(normalize_crop(crop_type), DEFAULT_DISEASES)


def is_supported_crop(crop_type: str) -> bool:
    return normalize_crop(crop_type) in CROP_DISEASES
