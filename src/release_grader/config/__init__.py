"""
Configuration module.

Handles loading of the deadline and project name tables and the
tracker connection settings.
"""

from .loader import ConfigLoader
from .models import GradingConfig, TrackerSettings

__all__ = ["ConfigLoader", "GradingConfig", "TrackerSettings"]
