"""Common utilities: config, logging, time."""

from farm_reports.common.config import AppConfig, load_config
from farm_reports.common.logging import get_logger, setup_logging
from farm_reports.common.time_utils import in_window, parse_datetime, utc_now

__all__ = [
    "AppConfig",
    "load_config",
    "setup_logging",
    "get_logger",
    "utc_now",
    "parse_datetime",
    "in_window",
]
