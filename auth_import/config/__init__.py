"""
Configuration management for the auth import engine.
"""

from .config_loader import ConfigLoader
from .settings import ImportSettings, ProviderProfile, load_import_settings

__all__ = ["ConfigLoader", "ImportSettings", "ProviderProfile", "load_import_settings"]
