# =============================================================================
# CropHealth Monitor Backend
# routes/analyze.py - Crop Health Analysis Routes
#
# Handles image upload analysis endpoints. The heuristic engine always
# produces a result, so analysis itself never returns an error response;
# only malformed requests are rejected.
# =============================================================================

from flask import Blueprint, request, current_app

from extensions import limiter
from decorators import log_request, require_crop, validate_file_upload, validate_json
from services.analysis_service import AnalysisService
from services.recommendations import get_treatment
from utils import (
    clean_crop,
    decode_base64_image,
    error_response,
    get_health_color,
    success_response
)

# Create blueprint
analyze_bp = Blueprint('analyze', __name__)


def get_analysis_service() -> AnalysisService:
    """Get the service created at startup, or a fresh one if it is missing."""
    service = current_app.config.get('ANALYSIS_SERVICE')
    if service is None:
        service = AnalysisService(seed=current_app.config.get('ANALYSIS_RANDOM_SEED'))
        current_app.config['ANALYSIS_SERVICE'] = service
    return service


def _result_payload(service: AnalysisService, result) -> dict:
    data = result.to_dict()
    data['health_color'] = get_health_color(result.health)
    data['care_tips'] = service.get_care_tips(result.crop)
    return data


# =============================================================================
# Main Analysis Endpoint
# =============================================================================

@analyze_bp.route('/', methods=['POST'])
@limiter.limit("30 per minute")
@log_request
@require_crop
@validate_file_upload
def analyze(crop, file):
    """
    Analyze an uploaded crop photograph.

    Request:
        Content-Type: multipart/form-data

        Fields:
            crop (str): Crop type (wheat, corn, tomato, potato, rice, ...) - required
            image (file): Image file (png, jpg, jpeg, gif, webp) - required

    Returns:
        200: Analysis result. An undecodable image is analyzed with the
             default feature vector and reported in degraded_stages.
        400: Validation error

    Response Example:
        {
            "success": true,
            "data": {
                "crop": "tomato",
                "confidence": 88,
                "health": "Excellent",
                "disease": "Healthy",
                "disease_confidence": 91,
                "recommendation": "Your tomato looks excellent! ...",
                "processing_time": 0.03,
                "analysis_date": "2026-01-01T12:00:00+00:00",
                "features": {...},
                "health_color": "green",
                "care_tips": [...]
            }
        }
    """
    service = get_analysis_service()
    result = service.analyze_bytes(file.read(), crop)

    return success_response(_result_payload(service, result))


# =============================================================================
# Analysis from Base64 Image
# =============================================================================

@analyze_bp.route('/base64', methods=['POST'])
@limiter.limit("30 per minute")
@log_request
@validate_json('crop', 'image_base64')
def analyze_base64(data):
    """
    Analyze a crop photograph sent as a base64 string.

    Request Body:
        {
            "crop": "wheat",
            "image_base64": "data:image/jpeg;base64,..."
        }

    Returns:
        Same as the multipart endpoint; 400 if the payload is not base64
    """
    crop = clean_crop(data['crop'])
    if not crop:
        return error_response('Crop type is required', details={'field': 'crop'})

    try:
        image_data = decode_base64_image(str(data['image_base64']))
    except ValueError as e:
        current_app.logger.warning(f"Rejected base64 upload: {e}")
        return error_response('Image base64 data is invalid')

    service = get_analysis_service()
    result = service.analyze_bytes(image_data, crop)

    return success_response(_result_payload(service, result))


# =============================================================================
# Treatment Lookup
# =============================================================================

@analyze_bp.route('/treatment', methods=['GET'])
@limiter.limit("100 per minute")
def treatment():
    """
    Get treatment recommendations for a disease name.

    Query Parameters:
        disease (str): Disease name (required)

    Returns:
        200: Treatment fragments (generic advice for unknown diseases)
        400: Missing disease parameter
    """
    disease = request.args.get('disease', '').strip()

    if not disease:
        return error_response('Disease name is required')

    return success_response({
        'disease': disease,
        'treatment': get_treatment(disease)
    })
