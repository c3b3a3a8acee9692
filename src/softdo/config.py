"""Configuration management for SoftDo."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

SOFTDO_HOME = Path(os.environ.get("SOFTDO_HOME", Path.home() / "softdo"))
CONFIG_FILE = SOFTDO_HOME / "config" / "softdo.conf"
DATA_DIR = SOFTDO_HOME / "data"

TRUE_VALUES = {"1", "true", "yes", "y", "on"}


@dataclass
class Config:
    """SoftDo configuration."""

    tasks_file: str = field(default_factory=lambda: str(DATA_DIR / "tasks.json"))
    poll_interval_seconds: float = 10.0
    notifications_enabled: bool = True
    notification_title: str = "SoftDo Reminder"
    notification_timeout: int = 10
    app_name: str = "SoftDo"
    # Update check settings
    github_repo: str = "xxomega2077xx/softdo"
    skip_version: str = ""
    log_level: str = "INFO"

    @property
    def tasks_path(self) -> Path:
        return Path(self.tasks_file).expanduser()


def _parse_number(key: str, value: str, cast, default):
    try:
        return cast(value)
    except ValueError:
        logger.warning(f"Invalid value for {key.upper()}: {value!r}, using {default}")
        return default


def load_config(config_file: Path | None = None) -> Config:
    """Load configuration from softdo.conf file."""
    config = Config()
    config_file = config_file or CONFIG_FILE

    if not config_file.exists():
        return config

    for line in config_file.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = value.strip()

        # Handle quoted values with inline comments: "value" # comment
        if value.startswith('"') or value.startswith("'"):
            quote = value[0]
            end_quote = value.find(quote, 1)
            value = value[1:end_quote] if end_quote != -1 else value[1:]
        elif "#" in value:
            # Unquoted: strip inline comments
            value = value.split("#")[0].strip()

        match key:
            case "tasks_file":
                config.tasks_file = value
            case "poll_interval_seconds":
                interval = _parse_number(key, value, float, config.poll_interval_seconds)
                if interval > 0:
                    config.poll_interval_seconds = interval
                else:
                    logger.warning(f"POLL_INTERVAL_SECONDS must be positive, got {value!r}")
            case "notifications_enabled":
                config.notifications_enabled = value.lower() in TRUE_VALUES
            case "notification_title":
                config.notification_title = value
            case "notification_timeout":
                config.notification_timeout = _parse_number(key, value, int, config.notification_timeout)
            case "app_name":
                config.app_name = value
            case "github_repo":
                config.github_repo = value
            case "skip_version":
                config.skip_version = value
            case "log_level":
                config.log_level = value.upper()

    return config
