#!/usr/bin/env python3
"""
Configuration management for the matching web application.

The web layer shares core.config_loader's AppConfig; this module only adds
caching and project-root lookup.
"""

from pathlib import Path
from functools import lru_cache

from core.config_loader import AppConfig, load_config


@lru_cache()
def get_config() -> AppConfig:
    """
    Get application configuration with caching.

    Loads config.yaml from the project root and applies environment
    variable overrides. Result is cached for the lifetime of the process.

    Returns:
        AppConfig: The application configuration.
    """
    return load_config(str(get_project_root() / 'config.yaml'))


def get_project_root() -> Path:
    """Get the project root directory."""
    return Path(__file__).parent.parent.parent
