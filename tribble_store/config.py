"""
Store configuration.

Configuration lives in ``<root>/.tribble/tribble.yaml``:

```yaml
backlog_file: backlog
log_format: text      # or json
log_level: DEBUG      # optional
```

``backlog_file`` is relative to the data folder unless absolute.
Loading is an explicit call that returns a StoreConfig value; nothing
is initialised at import time.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .exceptions import ConfigError
from .file_ops import ensure_directory, file_exists, overwrite_file, read_file
from .logging_utils import ROOT_LOGGER, configure_structured_logging, get_store_logger

logger = get_store_logger("config")

DATA_FOLDER = ".tribble"
CONFIG_FILE = "tribble.yaml"
BACKLOG_FILE = "backlog"
LOG_FORMATS = ("text", "json")


@dataclass
class StoreConfig:
    """Paths and log settings used by the store.

    Attributes:
        root_dir: Project root
        data_folder: Folder under root_dir holding store files
        config_file: Settings file name inside the data folder
        backlog_file: Framed backlog file, relative to the data folder unless absolute
        log_format: "text" leaves handlers alone, "json" installs the JSON formatter
        log_level: Level name for the package logger, None to leave it unset
    """

    root_dir: Path = field(default_factory=lambda: Path("."))
    data_folder: str = DATA_FOLDER
    config_file: str = CONFIG_FILE
    backlog_file: str = BACKLOG_FILE
    log_format: str = "text"
    log_level: str | None = None

    def __post_init__(self) -> None:
        self.root_dir = Path(self.root_dir).expanduser()

    @property
    def data_dir(self) -> Path:
        return self.root_dir / self.data_folder

    @property
    def config_path(self) -> Path:
        return self.data_dir / self.config_file

    @property
    def backlog_path(self) -> Path:
        return self.data_dir / Path(self.backlog_file).expanduser()

    def to_dict(self) -> dict[str, Any]:
        """Serialize the persisted settings.

        root_dir, data_folder and config_file locate the document itself,
        so they are not stored in it.
        """
        data: dict[str, Any] = {
            "backlog_file": self.backlog_file,
            "log_format": self.log_format,
        }
        if self.log_level is not None:
            data["log_level"] = self.log_level
        return data

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        root_dir: Path,
        *,
        data_folder: str = DATA_FOLDER,
        config_file: str = CONFIG_FILE,
    ) -> StoreConfig:
        """Build a config from a settings mapping, ignoring unknown keys.

        Raises:
            ConfigError: If a known key has the wrong type or value
        """
        config = cls(root_dir=root_dir, data_folder=data_folder, config_file=config_file)
        source = str(config.config_path)

        backlog_file = data.get("backlog_file", BACKLOG_FILE)
        if not isinstance(backlog_file, str) or not backlog_file:
            raise ConfigError(source, "backlog_file must be a string")

        log_format = data.get("log_format", "text")
        if log_format not in LOG_FORMATS:
            raise ConfigError(source, f"log_format must be one of {', '.join(LOG_FORMATS)}")

        log_level = data.get("log_level")
        if log_level is not None:
            if not isinstance(log_level, str) or not isinstance(
                logging.getLevelName(log_level.upper()), int
            ):
                raise ConfigError(source, f"unknown log_level {log_level!r}")
            log_level = log_level.upper()

        config.backlog_file = backlog_file
        config.log_format = log_format
        config.log_level = log_level
        return config


def bootstrap_folders(*paths: Path) -> None:
    """Create each folder that does not exist yet."""
    for path in paths:
        if not file_exists(path):
            logger.info(f"Creating folder {path}")
            ensure_directory(path)


def save_config(config: StoreConfig) -> None:
    """Write the settings document, replacing any previous one."""
    ensure_directory(config.data_dir)
    document = yaml.safe_dump(config.to_dict(), sort_keys=True)
    overwrite_file(config.config_path, document.encode("utf-8"))


def apply_log_settings(config: StoreConfig) -> None:
    """Apply a config's log settings to the package logger."""
    package_logger = logging.getLogger(ROOT_LOGGER)
    level = logging.getLevelName(config.log_level) if config.log_level else None

    if config.log_format == "json":
        configure_structured_logging(level or logging.INFO, ROOT_LOGGER)
    elif level is not None:
        package_logger.setLevel(level)


def load_config(
    root_dir: Path | str = ".",
    *,
    data_folder: str = DATA_FOLDER,
    config_file: str = CONFIG_FILE,
    create: bool = True,
) -> StoreConfig:
    """Load configuration for a project root and apply its log settings.

    Args:
        root_dir: Project root directory
        data_folder: Folder under root_dir holding store files
        config_file: Settings file name inside the data folder
        create: Bootstrap the data folder and write defaults when no
                settings file exists. If False, defaults are returned
                without touching the disk.

    Returns:
        The loaded StoreConfig

    Raises:
        ConfigError: If the settings file is not a valid YAML mapping
        StorageIOError: If folders or files cannot be created or read
    """
    config = StoreConfig(root_dir=Path(root_dir), data_folder=data_folder, config_file=config_file)

    if not file_exists(config.config_path):
        if not create:
            return config
        logger.info("No config file found: creating config file")
        bootstrap_folders(config.data_dir)
        save_config(config)
        return config

    raw = read_file(config.config_path)
    try:
        data = yaml.safe_load(raw.decode("utf-8"))
    except (yaml.YAMLError, UnicodeDecodeError) as e:
        raise ConfigError(str(config.config_path), str(e)) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(str(config.config_path), "expected a mapping")

    config = StoreConfig.from_dict(
        data, config.root_dir, data_folder=data_folder, config_file=config_file
    )
    apply_log_settings(config)
    return config
