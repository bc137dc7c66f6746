# =============================================================================
# CropHealth Monitor Backend
# routes/__init__.py - Routes Package
#
# This package contains all API route blueprints organized by feature.
# =============================================================================

from .analyze import analyze_bp
from .crops import crops_bp

__all__ = [
    'analyze_bp',
    'crops_bp'
]
