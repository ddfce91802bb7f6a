"""Configuration management for blocklog.

Loads settings from, in increasing priority:
1. Built-in defaults
2. A YAML file (``blocklog.yaml`` in the working directory, or ``BLOCKLOG_CONFIG``)
3. Environment variables (a local ``.env`` is loaded first)
"""

import logging
import os
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

import yaml
from dotenv import load_dotenv

from .db.engine import DATA_DIR
from .errors import ValidationError
from .utils.cycle import DEFAULT_CYCLE_START, parse_date

log = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = Path("blocklog.yaml")

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


@dataclass
class Config:
    """Runtime settings."""

    db_path: Path = field(default_factory=lambda: DATA_DIR / "blocklog.db")
    cycle_start: date = DEFAULT_CYCLE_START
    default_user: str = "local"
    log_level: str = "WARNING"
    history_limit: int = 50

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "db_path": str(self.db_path),
            "cycle_start": self.cycle_start.isoformat(),
            "default_user": self.default_user,
            "log_level": self.log_level,
            "history_limit": self.history_limit,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        """Create from dictionary, falling back to defaults for missing keys."""
        config = cls()
        if data.get("db_path"):
            config.db_path = Path(data["db_path"]).expanduser()
        if data.get("cycle_start"):
            config.cycle_start = parse_date(str(data["cycle_start"]))
        if data.get("default_user"):
            config.default_user = str(data["default_user"])
        if data.get("log_level"):
            config.log_level = str(data["log_level"]).upper()
        if data.get("history_limit") is not None:
            try:
                config.history_limit = int(data["history_limit"])
            except (TypeError, ValueError) as e:
                raise ValidationError(
                    f"history_limit must be an integer, got {data['history_limit']!r}"
                ) from e
        config.validate()
        return config

    def validate(self) -> None:
        """Validate settings.

        Raises:
            ValidationError: On the first invalid value
        """
        if self.cycle_start.isoweekday() != 1:
            raise ValidationError(
                f"cycle_start {self.cycle_start.isoformat()} must be a Monday"
            )
        if self.history_limit < 1:
            raise ValidationError("history_limit must be at least 1")
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValidationError(f"Unknown log level: {self.log_level}")


def _read_yaml(path: Path) -> dict:
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValidationError(f"{path} must contain a mapping of settings")
    log.info("Loaded configuration from %s", path)
    return data


def _env_overrides() -> dict:
    overrides = {}
    env_map = {
        "BLOCKLOG_DB_PATH": "db_path",
        "BLOCKLOG_CYCLE_START": "cycle_start",
        "BLOCKLOG_USER": "default_user",
        "BLOCKLOG_LOG_LEVEL": "log_level",
        "BLOCKLOG_HISTORY_LIMIT": "history_limit",
    }
    for env_name, key in env_map.items():
        if value := os.getenv(env_name):
            overrides[key] = value
    return overrides


def load_config(config_file: Path | None = None) -> Config:
    """Load configuration from YAML and the environment."""
    load_dotenv()

    data: dict = {}
    if config_file is None and os.getenv("BLOCKLOG_CONFIG"):
        config_file = Path(os.environ["BLOCKLOG_CONFIG"])
    if config_file is not None:
        data.update(_read_yaml(config_file))
    elif DEFAULT_CONFIG_FILE.exists():
        data.update(_read_yaml(DEFAULT_CONFIG_FILE))

    data.update(_env_overrides())
    return Config.from_dict(data)


def configure_logging(level: str = "WARNING") -> None:
    """Configure the root logger for CLI use."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
