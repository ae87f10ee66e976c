"""
bootstrap/config.py - Configuration and logging setup

Provides configuration loading from files, environment variables, and
defaults, and the root logging setup driven by it.
"""

from __future__ import annotations
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional
from pathlib import Path
import json
import logging
import os
import sys

from ..errors.taxonomy import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


# Settings that may be null in a config file
_NULLABLE_KEYS = {"logging.log_file"}


def _coerce(name: str, current: Any, value: Any) -> Any:
    """
    Check a config file value against the type of the setting it replaces.

    Booleans also accept the strings "true" / "false", as the environment does.

    Raises:
        ConfigurationError: If the value has the wrong type
    """
    if isinstance(current, bool):
        if isinstance(value, str) and value.lower() in ("true", "false"):
            return value.lower() == "true"
        if not isinstance(value, bool):
            raise ConfigurationError(f"Config value {name} must be a boolean, got {value!r}")
        return value

    if value is None and name in _NULLABLE_KEYS:
        return value
    if not isinstance(value, str):
        raise ConfigurationError(f"Config value {name} must be a string, got {value!r}")
    return value


@dataclass
class ClassifierConfig:
    """Requiredness classifier settings."""

    # Guard is_required/reset with a lock for multi-worker hosts
    synchronized: bool = False

    # Log every computed verdict at DEBUG
    trace_verdicts: bool = False

    @classmethod
    def from_env(cls) -> "ClassifierConfig":
        return cls(
            synchronized=_env_flag("BUILDGRAPH_SYNCHRONIZED"),
            trace_verdicts=_env_flag("BUILDGRAPH_TRACE_VERDICTS"),
        )


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = DEFAULT_LOG_FORMAT
    log_file: Optional[str] = None
    json_logs: bool = False

    @classmethod
    def from_env(cls) -> "LoggingConfig":
        return cls(
            level=os.getenv("BUILDGRAPH_LOG_LEVEL", "INFO"),
            format=os.getenv("BUILDGRAPH_LOG_FORMAT", DEFAULT_LOG_FORMAT),
            log_file=os.getenv("BUILDGRAPH_LOG_FILE"),
            json_logs=_env_flag("BUILDGRAPH_JSON_LOGS"),
        )


@dataclass
class BuildGraphConfig:
    """Root configuration."""

    classifier: ClassifierConfig = field(default_factory=ClassifierConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls) -> "BuildGraphConfig":
        """Create configuration from environment variables."""
        return cls(
            classifier=ClassifierConfig.from_env(),
            logging=LoggingConfig.from_env(),
        )

    @classmethod
    def from_file(cls, filepath: str) -> "BuildGraphConfig":
        """
        Load configuration from a JSON file, on top of the environment.

        Raises:
            ConfigurationError: If the file is not valid JSON, a section is
                not an object, or a value has the wrong type
        """
        path = Path(filepath)
        if not path.exists():
            logger.warning(f"Config file not found: {filepath}, using defaults")
            return cls.from_env()

        try:
            with open(path) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Cannot read config file {filepath}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {filepath} must contain a JSON object")

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "BuildGraphConfig":
        config = cls.from_env()

        for section in ("classifier", "logging"):
            section_data = data.get(section, {})
            if not isinstance(section_data, dict):
                raise ConfigurationError(
                    f"Config section '{section}' must be a JSON object, got {section_data!r}"
                )

            target = getattr(config, section)
            for key, value in section_data.items():
                name = f"{section}.{key}"
                if key in {f.name for f in fields(target)}:
                    setattr(target, key, _coerce(name, getattr(target, key), value))
                else:
                    logger.warning(f"Ignoring unknown config key: {name}")

        return config

    def to_dict(self) -> Dict[str, Any]:
        return {
            "classifier": {
                "synchronized": self.classifier.synchronized,
                "trace_verdicts": self.classifier.trace_verdicts,
            },
            "logging": {
                "level": self.logging.level,
                "format": self.logging.format,
                "log_file": self.logging.log_file,
                "json_logs": self.logging.json_logs,
            },
        }


def setup_logging(level: str = "INFO", log_file: str = None, json_format: bool = False,
                  fmt: str = DEFAULT_LOG_FORMAT) -> None:
    """
    Configure root logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional log file path
        json_format: Use JSON format for logs
        fmt: Format string for plain-text logs
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    if json_format:
        class JSONFormatter(logging.Formatter):
            def format(self, record):
                return json.dumps({
                    "timestamp": self.formatTime(record),
                    "level": record.levelname,
                    "logger": record.name,
                    "message": record.getMessage(),
                })

        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(fmt)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        file_handler.setLevel(log_level)
        root_logger.addHandler(file_handler)


# Global config instance
_config: Optional[BuildGraphConfig] = None


def load_config(filepath: str = None) -> BuildGraphConfig:
    """
    Load configuration from file or environment.

    Args:
        filepath: Optional path to JSON config file

    Returns:
        BuildGraphConfig instance
    """
    global _config

    if filepath:
        _config = BuildGraphConfig.from_file(filepath)
    else:
        default_paths = [
            "./buildgraph.json",
            os.path.expanduser("~/.buildgraph/config.json"),
        ]

        for path in default_paths:
            if Path(path).exists():
                logger.info(f"Loading config from: {path}")
                _config = BuildGraphConfig.from_file(path)
                return _config

        _config = BuildGraphConfig.from_env()

    return _config


def get_config() -> BuildGraphConfig:
    """Get current configuration, loading if needed."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def configure_logging(config: Optional[BuildGraphConfig] = None) -> None:
    """Apply the logging section of a configuration."""
    cfg = (config or get_config()).logging
    setup_logging(cfg.level, cfg.log_file, cfg.json_logs, fmt=cfg.format)
