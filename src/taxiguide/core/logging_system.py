"""Logging setup for the TaxiGuide command line tools.

Configures the root logger from a YAML file, writes to a platform-aware log
location, and rotates logs on each start, keeping the last few runs.

Platform-specific log locations:
    - macOS: ~/Library/Logs/TaxiGuide/taxiguide.log
    - Linux: ~/.taxiguide/logs/taxiguide.log
    - Windows: %AppData%/TaxiGuide/Logs/taxiguide.log

Typical usage example:
    from taxiguide.core.logging_system import get_logger, initialize_logging

    initialize_logging("config/logging.yaml")
    log = get_logger("taxiguide.cli")
    log.info("Routing to runway %s", runway)
"""

import logging
import os
import platform
import time
from pathlib import Path
from typing import Any

import yaml

_logging_config: dict[str, Any] = {}
_loggers_cache: dict[str, logging.Logger] = {}
_initialized = False


class LoggingError(Exception):
    """Raised when logging system operations fail."""


def get_platform_log_dir() -> Path:
    """Get platform-specific log directory.

    Returns:
        Path to the platform-appropriate log directory.

    Examples:
        >>> get_platform_log_dir()
        PosixPath('/home/username/.taxiguide/logs')
    """
    system = platform.system()

    if system == "Darwin":
        return Path.home() / "Library" / "Logs" / "TaxiGuide"
    elif system == "Windows":
        appdata = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
        return appdata / "TaxiGuide" / "Logs"
    else:
        return Path.home() / ".taxiguide" / "logs"


def rotate_logs(log_dir: Path, log_filename: str = "taxiguide.log", keep_count: int = 5) -> None:
    """Rotate logs on startup, keeping the last N runs.

    Renames the current log to ``<name>.1``, shifts older logs up by one and
    deletes the one beyond keep_count.

    Args:
        log_dir: Directory containing log files.
        log_filename: Base name of the log file.
        keep_count: Number of old logs to keep.
    """
    log_file = log_dir / log_filename

    if not log_file.exists():
        return

    oldest_log = log_dir / f"{log_filename}.{keep_count}"
    if oldest_log.exists():
        oldest_log.unlink()

    for i in range(keep_count - 1, 0, -1):
        old_log = log_dir / f"{log_filename}.{i}"
        if old_log.exists():
            old_log.rename(log_dir / f"{log_filename}.{i + 1}")

    log_file.rename(log_dir / f"{log_filename}.1")


def initialize_logging(config_path: str | Path | None = None, use_platform_dir: bool = True) -> None:
    """Initialize logging from YAML configuration.

    Call once at startup before any logging occurs.

    Args:
        config_path: Path to logging configuration YAML file.
            If None, uses default configuration.
        use_platform_dir: If True, log to the platform-specific directory.
            If False, use log_dir from the config (for development/testing).

    Raises:
        LoggingError: If the configuration cannot be loaded.
    """
    global _logging_config, _initialized

    if config_path:
        config_path = Path(config_path)
        if not config_path.exists():
            raise LoggingError(f"Logging config file not found: {config_path}")

        try:
            with config_path.open("r", encoding="utf-8") as f:
                loaded = yaml.safe_load(f) or {}
        except Exception as e:
            raise LoggingError(f"Failed to load logging config: {e}") from e

        _logging_config = _merge_defaults(loaded)
    else:
        _logging_config = _get_default_config()

    if use_platform_dir:
        _logging_config["log_dir"] = str(get_platform_log_dir())

    file_config = _logging_config["file_log"]
    if file_config.get("enabled", True):
        log_dir = Path(_logging_config["log_dir"])
        log_dir.mkdir(parents=True, exist_ok=True)
        rotate_logs(log_dir, file_config.get("filename", "taxiguide.log"), file_config.get("backup_count", 5))

    _configure_root_logger()
    _loggers_cache.clear()
    for name, component_config in _logging_config.get("components", {}).items():
        _apply_component_config(logging.getLogger(name), component_config or {})
    _initialized = True


def _get_default_config() -> dict[str, Any]:
    return {
        "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        "date_format": "%Y-%m-%d %H:%M:%S",
        "log_dir": "logs",
        "file_log": {
            "enabled": True,
            "filename": "taxiguide.log",
            "backup_count": 5,
        },
        "console": {
            "enabled": True,
            "level": "WARNING",
        },
        "components": {},
    }


def _merge_defaults(loaded: dict[str, Any]) -> dict[str, Any]:
    config = _get_default_config()
    for key, value in loaded.items():
        if isinstance(value, dict) and isinstance(config.get(key), dict):
            config[key] = {**config[key], **value}
        else:
            config[key] = value
    return config


def _level(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    if not isinstance(level, int):
        raise LoggingError(f"Unknown log level: {name}")
    return level


def _configure_root_logger() -> None:
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    console_config = _logging_config["console"]
    if console_config.get("enabled", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(_level(console_config.get("level", "WARNING")))
        console_handler.setFormatter(_get_formatter())
        root_logger.addHandler(console_handler)

    file_config = _logging_config["file_log"]
    if file_config.get("enabled", True):
        log_file = Path(_logging_config["log_dir"]) / file_config.get("filename", "taxiguide.log")

        # Rotation happens on startup, so overwrite here
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        file_handler.setLevel(_level(file_config.get("level", "DEBUG")))
        file_handler.setFormatter(_get_formatter())
        root_logger.addHandler(file_handler)


class MillisecondFormatter(logging.Formatter):
    """Formatter that appends milliseconds with a dot separator."""

    def formatTime(self, record, datefmt=None):
        ct = self.converter(record.created)
        s = time.strftime(datefmt or "%Y-%m-%d %H:%M:%S", ct)
        return f"{s}.{int(record.msecs):03d}"


def _get_formatter() -> logging.Formatter:
    fmt = _logging_config.get("format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    datefmt = _logging_config.get("date_format", "%Y-%m-%d %H:%M:%S")
    return MillisecondFormatter(fmt, datefmt)


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a component.

    Loggers are cached. A component can override its level, or be disabled,
    under the ``components`` section of the logging config.

    Args:
        name: Logger name (e.g. "taxiguide.airports.taxiway").

    Returns:
        Configured logger instance.

    Examples:
        >>> log = get_logger("taxiguide.cli")
        >>> log.info("Loaded %d segments", count)
    """
    if not _initialized:
        initialize_logging(use_platform_dir=True)

    if name in _loggers_cache:
        return _loggers_cache[name]

    logger = logging.getLogger(name)
    _apply_component_config(logger, _logging_config.get("components", {}).get(name) or {})

    _loggers_cache[name] = logger
    return logger


def _apply_component_config(logger: logging.Logger, component_config: dict[str, Any]) -> None:
    if component_config.get("enabled", True):
        if "level" in component_config:
            logger.setLevel(_level(component_config["level"]))
    else:
        logger.disabled = True


def shutdown_logging() -> None:
    """Flush and close all handlers.

    Handlers are detached from the root logger so a later
    initialize_logging() starts clean.
    """
    global _initialized

    logging.shutdown()
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
    _loggers_cache.clear()
    _initialized = False
