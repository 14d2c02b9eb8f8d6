"""Utility modules for Distiller.

Provides:
- logger: get_logger for namespaced logging
"""

from distiller.utils.logger import get_logger

__all__ = ["get_logger"]
