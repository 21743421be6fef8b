"""Tests for configuration loading."""

import logging

from sitescope.config import SiteScopeConfig, load_config, save_config
from sitescope.config.config import DEFAULT_EXCLUDE, DEFAULT_INCLUDE, get_config_path
from sitescope.core.logging_utils import configure_logging, normalize_log_level


def test_defaults_when_file_missing(tmp_path):
    config = load_config(tmp_path)

    assert config.project_root == tmp_path
    assert config.scan.include == DEFAULT_INCLUDE
    assert config.scan.exclude == DEFAULT_EXCLUDE
    assert config.thresholds.large_file_lines == 300
    assert config.thresholds.complex_component_lines == 200
    assert config.aliases == {"@/": ".", "~/": "."}
    assert config.logging.level == "INFO"


def test_yaml_overrides(tmp_path):
    (tmp_path / "sitescope.yaml").write_text(
        "scan:\n"
        "  include: '**/*.ts, **/*.tsx'\n"
        "  max_workers: 2\n"
        "thresholds:\n"
        "  large_file_lines: 500\n"
        "  unknown_key: 1\n"
        "aliases:\n"
        "  '@app/': src\n"
        "logging:\n"
        "  level: DEBUG\n"
    )

    config = load_config(tmp_path)

    assert config.scan.include == ["**/*.ts", "**/*.tsx"]
    assert config.scan.exclude == DEFAULT_EXCLUDE
    assert config.scan.max_workers == 2
    assert config.thresholds.large_file_lines == 500
    assert config.thresholds.min_test_ratio == 0.3
    assert config.aliases == {"@app/": "src"}
    assert config.logging.level == "DEBUG"


def test_invalid_yaml_falls_back_to_defaults(tmp_path, caplog):
    (tmp_path / "sitescope.yaml").write_text("scan: [unclosed\n")

    with caplog.at_level(logging.ERROR):
        config = load_config(tmp_path)

    assert config.thresholds.large_file_lines == 300
    assert "Failed to load config file" in caplog.text


def test_save_and_reload(tmp_path):
    config = SiteScopeConfig(project_root=tmp_path)
    config.thresholds.largest_files_count = 3

    path = save_config(config, tmp_path)

    assert path == get_config_path(tmp_path)
    assert load_config(tmp_path).thresholds.largest_files_count == 3


def test_explicit_config_file(tmp_path):
    (tmp_path / "custom.yml").write_text("thresholds:\n  complex_component_lines: 120\n")

    config = load_config(tmp_path, config_file="custom.yml")

    assert config.thresholds.complex_component_lines == 120


def test_normalize_log_level():
    assert normalize_log_level(None) == "INFO"
    assert normalize_log_level(" warn ") == "WARNING"
    assert normalize_log_level("nonsense") == "INFO"


def test_configure_logging_writes_file(tmp_path):
    root_logger = logging.getLogger()
    previous_level = root_logger.level
    previous_handlers = list(root_logger.handlers)
    log_file = tmp_path / "logs" / "sitescope.log"
    try:
        assert configure_logging("debug", log_file=log_file) == "DEBUG"
        logging.getLogger("sitescope.core.scanner").debug("census done")
    finally:
        for handler in root_logger.handlers[:]:
            if handler not in previous_handlers:
                root_logger.removeHandler(handler)
                handler.close()
        root_logger.setLevel(previous_level)

    assert "census done" in log_file.read_text(encoding="utf-8")
