# =============================================================================
# CropHealth Monitor Backend
# routes/crops.py - Crops Routes
#
# Handles crop information endpoints: supported crops, their disease
# vocabularies and care tips.
# =============================================================================

from flask import Blueprint

from extensions import limiter
from services.recommendations import get_care_tips
from services.vocabulary import CROP_DISEASES, SUPPORTED_CROPS, is_supported_crop
from utils import clean_crop, error_response, success_response

# Create blueprint
crops_bp = Blueprint('crops', __name__)


def crop_info(crop_name: str) -> dict:
    """
    Build the public description of a supported crop.

    Args:
        crop_name: Supported crop key

    Returns:
        dict: Name, display name, diseases and care tips
    """
    diseases = list(CROP_DISEASES[crop_name])
    return {
        'name': crop_name,
        'display_name': crop_name.title(),
        'diseases': diseases,
        'disease_count': len(diseases),
        'care_tips': get_care_tips(crop_name)
    }


# =============================================================================
# Get All Crops
# =============================================================================

@crops_bp.route('/', methods=['GET'])
@limiter.limit("100 per minute")
def get_all_crops():
    """
    Get list of all supported crops with their metadata.

    Response Example:
        {
            "success": true,
            "data": {
                "crops": [
                    {
                        "name": "wheat",
                        "display_name": "Wheat",
                        "diseases": ["Rust", "Blight", ...],
                        "disease_count": 5,
                        "care_tips": [...]
                    },
                    ...
                ],
                "total": 5
            }
        }
    """
    crops_list = [crop_info(name) for name in SUPPORTED_CROPS]

    return success_response({
        'crops': crops_list,
        'total': len(crops_list)
    })


@crops_bp.route('/names', methods=['GET'])
@limiter.limit("200 per minute")
def get_crop_names():
    """Get simple list of supported crop names."""
    return success_response(list(SUPPORTED_CROPS))


# =============================================================================
# Get Single Crop Details
# =============================================================================

@crops_bp.route('/<string:crop_name>', methods=['GET'])
@limiter.limit("100 per minute")
def get_crop(crop_name):
    """
    Get detailed information about a specific crop.

    Returns:
        200: Crop details
        404: Crop not found
    """
    crop_name = clean_crop(crop_name)

    if not is_supported_crop(crop_name):
        return error_response(
            f"Crop '{crop_name}' not found",
            details={'available_crops': list(SUPPORTED_CROPS)},
            status_code=404
        )

    return success_response(crop_info(crop_name))


# =============================================================================
# Get Crop Care Tips
# =============================================================================

@crops_bp.route('/<string:crop_name>/care-tips', methods=['GET'])
@limiter.limit("100 per minute")
def get_crop_care_tips(crop_name):
    """
    Get three care tips for a crop.

    Unknown crops get general tips rather than a 404, so the dashboard
    can show advice for any crop a user has added.
    """
    crop_name = clean_crop(crop_name)

    return success_response({
        'crop': crop_name,
        'care_tips': get_care_tips(crop_name),
        'is_supported': is_supported_crop(crop_name)
    })
