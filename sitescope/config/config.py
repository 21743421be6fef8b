"""
Configuration loading and models for SiteScope.

Project settings live in ``sitescope.yaml`` at the project root. Every
section is optional; missing keys fall back to the dataclass defaults.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "sitescope.yaml"

DEFAULT_INCLUDE = ["**/*.{ts,tsx,js,jsx}"]
DEFAULT_EXCLUDE = ["node_modules/**", "dist/**", ".next/**", "coverage/**"]


@dataclass
class ScanConfig:
    """Which files the source walker enumerates."""

    include: list[str] = field(default_factory=lambda: list(DEFAULT_INCLUDE))
    exclude: list[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE))
    max_workers: Optional[int] = None  # None = executor default


@dataclass
class ThresholdsConfig:
    """Limits used by the health check, metrics and issue detection."""

    large_file_lines: int = 300
    complex_component_lines: int = 200
    min_test_ratio: float = 0.3
    largest_files_count: int = 10


@dataclass
class LoggingConfig:
    """Configuration for logging.

    Attributes:
        level: Log verbosity level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        path: Optional log file destination.
        reset_on_start: If True, delete the log file on startup.
    """

    level: str = "INFO"
    path: Optional[str] = None
    reset_on_start: bool = True


def _default_aliases() -> dict[str, str]:
    return {"@/": ".", "~/": "."}


@dataclass
class SiteScopeConfig:
    """Top level configuration."""

    scan: ScanConfig = field(default_factory=ScanConfig)
    thresholds: ThresholdsConfig = field(default_factory=ThresholdsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    # alias prefix -> directory relative to the project root
    aliases: dict[str, str] = field(default_factory=_default_aliases)
    project_root: Path = field(default_factory=Path.cwd)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SiteScopeConfig:
        """Create a config object from a dictionary."""
        scan_data = data.get("scan") or {}
        thresholds_data = data.get("thresholds") or {}
        logging_data = data.get("logging") or {}

        scan = ScanConfig(
            include=_string_list(scan_data.get("include"), DEFAULT_INCLUDE),
            exclude=_string_list(scan_data.get("exclude"), DEFAULT_EXCLUDE),
            max_workers=scan_data.get("max_workers"),
        )

        # Filter only known fields to avoid TypeError on typos
        threshold_fields = set(ThresholdsConfig.__dataclass_fields__)
        thresholds = ThresholdsConfig(
            **{k: v for k, v in thresholds_data.items() if k in threshold_fields}
        )
        logging_fields = set(LoggingConfig.__dataclass_fields__)
        logging_config = LoggingConfig(
            **{k: v for k, v in logging_data.items() if k in logging_fields}
        )

        aliases_data = data.get("aliases")
        if isinstance(aliases_data, dict):
            aliases = {str(k): str(v) for k, v in aliases_data.items()}
        else:
            aliases = _default_aliases()

        return cls(
            scan=scan,
            thresholds=thresholds,
            logging=logging_config,
            aliases=aliases,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "scan": {
                "include": list(self.scan.include),
                "exclude": list(self.scan.exclude),
                "max_workers": self.scan.max_workers,
            },
            "thresholds": {
                "large_file_lines": self.thresholds.large_file_lines,
                "complex_component_lines": self.thresholds.complex_component_lines,
                "min_test_ratio": self.thresholds.min_test_ratio,
                "largest_files_count": self.thresholds.largest_files_count,
            },
            "logging": {
                "level": self.logging.level,
                "path": self.logging.path,
                "reset_on_start": self.logging.reset_on_start,
            },
            "aliases": dict(self.aliases),
        }


def _string_list(value: Any, default: list[str]) -> list[str]:
    if value is None:
        return list(default)
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return [str(item) for item in value]


def get_config_path(root_path: Path, config_file: str | None = None) -> Path:
    """Return the config path for ``root_path``.

    An explicit ``config_file`` may be absolute or relative to the root.
    """
    if config_file:
        candidate = Path(config_file)
        return candidate if candidate.is_absolute() else root_path / candidate
    return root_path / CONFIG_FILE_NAME


def load_config(root_path: Path, config_file: str | None = None) -> SiteScopeConfig:
    """Load configuration from a YAML file, falling back to defaults."""
    config_path = get_config_path(root_path, config_file=config_file)

    if not config_path.is_file():
        logger.debug("No config file found at %s, using defaults.", config_path)
        return SiteScopeConfig(project_root=root_path)

    logger.info("Loading config from %s", config_path)
    try:
        with config_path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"expected a mapping, got {type(data).__name__}")
        config = SiteScopeConfig.from_dict(data)
    except (OSError, yaml.YAMLError, ValueError, TypeError) as e:
        logger.error("Failed to load config file: %s", e)
        return SiteScopeConfig(project_root=root_path)

    config.project_root = root_path
    return config


def save_config(config: SiteScopeConfig, root_path: Path) -> Path:
    """Write ``config`` to ``sitescope.yaml`` under ``root_path``."""
    config_file = get_config_path(root_path)
    with config_file.open("w", encoding="utf-8") as f:
        yaml.dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)
    logger.info("Saved project config to %s", config_file)
    return config_file
