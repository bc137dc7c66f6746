# =============================================================================
# CropHealth Monitor Backend
# services/__init__.py - Services Package
# 
# This package contains the heuristic crop health analysis engine.
# =============================================================================

from .analysis_service import AnalysisResult, AnalysisService, ImageDecodeError

__all__ = ['AnalysisResult', 'AnalysisService', 'ImageDecodeError']
