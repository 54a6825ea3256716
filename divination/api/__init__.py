"""
API package
"""

from .analysis import router as analysis_router
from .consultation import router as consultation_router

__all__ = ["analysis_router", "consultation_router"]
