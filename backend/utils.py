# =============================================================================
# CropHealth Monitor Backend
# utils.py - Utility Functions
#
# Common utility functions used across the application including
# validation, file handling, and response helpers.
# =============================================================================

import base64
import binascii

from flask import jsonify, current_app

from services.vocabulary import normalize_crop


# =============================================================================
# Validation Functions
# =============================================================================

def clean_crop(crop: str) -> str:
    """
    Normalize a crop type from a request field.

    Unknown crops are accepted; the analysis engine falls back to its
    generic vocabulary for them.

    Args:
        crop: Raw crop value from the request

    Returns:
        str: Lower-cased, stripped crop key (empty if missing)
    """
    return normalize_crop(crop)


# =============================================================================
# File Handling Functions
# =============================================================================

def allowed_file(filename: str) -> bool:
    """
    Check if uploaded file has an allowed extension.

    Args:
        filename: Name of the uploaded file

    Returns:
        bool: True if extension is allowed, False otherwise
    """
    allowed_extensions = current_app.config.get(
        'ALLOWED_EXTENSIONS',
        {'png', 'jpg', 'jpeg', 'gif', 'webp'}
    )
    return '.' in filename and \
           filename.rsplit('.', 1)[1].lower() in allowed_extensions


def decode_base64_image(data: str) -> bytes:
    """
    Decode a base64 image string, with or without a data URI prefix.

    Args:
        data: Base64 string such as 'data:image/jpeg;base64,...'

    Returns:
        bytes: Raw image bytes

    Raises:
        ValueError: If the payload is not valid base64
    """
    if ',' in data:
        data = data.split(',', 1)[1]

    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"Invalid base64 image data: {e}") from e


# =============================================================================
# Response Helpers
# =============================================================================

def success_response(data=None, message=None, status_code=200):
    """
    Create a standardized success response.

    Args:
        data: Response data (dict or list)
        message: Success message
        status_code: HTTP status code (default 200)

    Returns:
        tuple: (response, status_code)
    """
    response = {
        'success': True,
        'status': 'success'
    }

    if data is not None:
        response['data'] = data
    if message:
        response['message'] = message

    return jsonify(response), status_code


def error_response(error, details=None, status_code=400):
    """
    Create a standardized error response.

    Args:
        error: Error message
        details: Additional error details
        status_code: HTTP status code (default 400)

    Returns:
        tuple: (response, status_code)
    """
    response = {
        'success': False,
        'status': 'error',
        'error': error
    }

    if details:
        response['details'] = details

    return jsonify(response), status_code


# =============================================================================
# Misc Helpers
# =============================================================================

def get_health_color(status: str) -> str:
    """
    Get color name for a health status label.

    Args:
        status: Health status (Excellent, Good, Fair, Poor, Critical)

    Returns:
        str: Color name used by the dashboard
    """
    colors = {
        'excellent': 'green',
        'good': 'lightgreen',
        'fair': 'yellow',
        'poor': 'orange',
        'critical': 'red'
    }
    return colors.get((status or '').lower(), 'gray')
