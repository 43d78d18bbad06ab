"""
Application services.
"""

from .editing import EditingService, PerformAllResult

__all__ = ["EditingService", "PerformAllResult"]
