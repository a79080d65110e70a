"""
Application configuration loaded from .env and the process environment
"""

import os
from dataclasses import dataclass
from typing import Dict, Optional

from dotenv import load_dotenv

APP_VERSION = "2.0.0"

DEFAULT_DB_PATH = "expenses.db"
DEFAULT_EXPORT_DIR = "export"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FILE = "logs/expense_tracker.log"
DEFAULT_TREND_WINDOW_DAYS = 7


@dataclass(frozen=True)
class AppConfig:
    """Runtime settings"""
    db_path: str = DEFAULT_DB_PATH
    export_dir: str = DEFAULT_EXPORT_DIR
    log_level: str = DEFAULT_LOG_LEVEL
    log_file: Optional[str] = DEFAULT_LOG_FILE
    trend_window_days: int = DEFAULT_TREND_WINDOW_DAYS

    def as_display_dict(self) -> Dict[str, str]:
        """Values shown on the Settings screen"""
        return {
            'Database Path': self.db_path,
            'Export Path': self.export_dir,
            'Log Level': self.log_level,
            'Log File': self.log_file or 'disabled',
            'Trend Window (days)': str(self.trend_window_days),
            'Version': APP_VERSION,
        }


def _parse_positive_int(name: str, raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got '{raw}'")
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def load_config(env_file: Optional[str] = None) -> AppConfig:
    """
    Load settings.

    Values already present in the environment win over the .env file.

    Args:
        env_file: path of a .env file (None searches from the working directory)

    Returns:
        AppConfig instance
    """
    load_dotenv(dotenv_path=env_file)

    log_file = os.getenv("LOG_FILE", DEFAULT_LOG_FILE).strip()

    return AppConfig(
        db_path=os.getenv("EXPENSE_DB_PATH", DEFAULT_DB_PATH).strip() or DEFAULT_DB_PATH,
        export_dir=os.getenv("EXPORT_DIR", DEFAULT_EXPORT_DIR).strip() or DEFAULT_EXPORT_DIR,
        log_level=os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper() or DEFAULT_LOG_LEVEL,
        log_file=log_file or None,
        trend_window_days=_parse_positive_int(
            "TREND_WINDOW_DAYS",
            os.getenv("TREND_WINDOW_DAYS", str(DEFAULT_TREND_WINDOW_DAYS)).strip()
        ),
    )
