# =============================================================================
# CropHealth Monitor Backend
# extensions.py - Flask Extensions Initialization
#
# This module initializes Flask extensions without the app instance to prevent
# circular imports. Extensions are initialized with the app in the factory.
# =============================================================================

from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

# =============================================================================
# Cross-Origin Resource Sharing
# Enables the dashboard frontend to call the API from a different origin
# =============================================================================
cors = CORS()

# =============================================================================
# Rate Limiting
# Image analysis is CPU-bound, so uploads are throttled per client address.
# Default limits, storage and strategy come from the RATELIMIT_* config keys
# when init_app runs; constructor arguments would override them.
# =============================================================================
limiter = Limiter(key_func=get_remote_address)
