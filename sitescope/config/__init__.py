"""Configuration system for SiteScope."""

from .config import (
    SiteScopeConfig,
    ScanConfig,
    ThresholdsConfig,
    LoggingConfig,
    load_config,
    save_config,
)

__all__ = [
    "SiteScopeConfig",
    "ScanConfig",
    "ThresholdsConfig",
    "LoggingConfig",
    "load_config",
    "save_config",
]
