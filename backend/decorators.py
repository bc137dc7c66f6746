# =============================================================================
# CropHealth Monitor Backend
# decorators.py - Reusable Decorators
#
# Request validation and logging decorators shared by the route blueprints.
# =============================================================================

from functools import wraps
from flask import request, current_app

from utils import allowed_file, clean_crop, error_response


def validate_json(*required_fields):
    """
    Validate that request contains JSON body with required fields.

    Passes the parsed body to the decorated function as the 'data'
    keyword argument.

    Usage:
        @analyze_bp.route('/base64', methods=['POST'])
        @validate_json('crop', 'image_base64')
        def analyze_base64(data):
            ...
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not request.is_json:
                return error_response('Content-Type must be application/json')

            data = request.get_json(silent=True)
            if not isinstance(data, dict):
                return error_response('Invalid JSON or empty request body')

            missing_fields = [
                field for field in required_fields
                if field not in data or data[field] in (None, '')
            ]

            if missing_fields:
                return error_response(
                    'Missing required fields',
                    details={'missing_fields': missing_fields}
                )

            kwargs['data'] = data

            return f(*args, **kwargs)
        return decorated_function
    return decorator


def require_crop(f):
    """
    Require a non-empty 'crop' form field and pass it normalized as 'crop'.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        crop = clean_crop(request.form.get('crop', ''))
        if not crop:
            return error_response(
                'Crop type is required',
                details={'field': 'crop'}
            )

        kwargs['crop'] = crop
        return f(*args, **kwargs)
    return decorated_function


def validate_file_upload(f):
    """
    Validate the uploaded image in the request.

    Accepts the 'image' or 'file' field, checks that a file was selected
    and that its extension is allowed. Passes the FileStorage object to
    the decorated function as 'file'.

    Usage:
        @analyze_bp.route('/', methods=['POST'])
        @validate_file_upload
        def analyze(file):
            ...
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        # FileStorage is falsy without a filename
        file = request.files.get('image')
        if file is None:
            file = request.files.get('file')

        if file is None:
            return error_response(
                'Image file is required',
                details={'field': 'image'}
            )

        if file.filename == '':
            return error_response('No file selected')

        if not allowed_file(file.filename):
            return error_response(
                'Invalid file type',
                details={
                    'allowed': sorted(current_app.config.get('ALLOWED_EXTENSIONS', []))
                }
            )

        kwargs['file'] = file
        return f(*args, **kwargs)
    return decorated_function


def log_request(f):
    """
    Log incoming request details and the response status code.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        current_app.logger.info(
            f"Request: {request.method} {request.path} "
            f"from {request.remote_addr}"
        )

        response = f(*args, **kwargs)

        if isinstance(response, tuple):
            status_code = response[1] if len(response) > 1 else 200
        else:
            status_code = getattr(response, 'status_code', 200)

        current_app.logger.info(
            f"Response: {status_code} for {request.method} {request.path}"
        )

        return response
    return decorated_function
