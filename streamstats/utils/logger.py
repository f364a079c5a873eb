"""
Logging configuration with multi-handler setup and structured report logging
"""

import json
import logging
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler, TimedRotatingFileHandler
from pathlib import Path

from streamstats.utils.config import LoggingConfig

REPORT_LOGGER = "metrics.report"


class ReportLogFilter(logging.Filter):
    """
    Filter to isolate metric reports from general logging

    Only allows log records from the report logger to reach the
    report-specific handler.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Args:
            record: Log record to evaluate

        Returns:
            True if the record comes from the report logger
        """
        return record.name == REPORT_LOGGER


class StatsLogger:
    """
    Centralized logging setup for processes embedding the statistics engine

    Features:
    - Console handler (INFO+)
    - Size-rotating engine log (DEBUG+)
    - Daily-rotating JSON report log fed by the report logger
    """

    def __init__(self, config: dict):
        """
        Initialize logging infrastructure

        Args:
            config: Configuration dictionary with keys:
                - log_level: str (DEBUG, INFO, WARNING, ERROR)
                - log_dir: str (directory path for log files)

        Raises:
            ConfigurationError: If log_level is not a valid level name
            OSError: If log directory creation fails
        """
        settings = LoggingConfig(
            log_level=config.get('log_level', 'INFO'),
            log_dir=config.get('log_dir', 'logs'),
        )
        self.log_level = settings.log_level
        self.log_dir = Path(settings.log_dir)

        self.log_dir.mkdir(parents=True, exist_ok=True)
        self._setup_logging()

    @classmethod
    def from_config(cls, config: LoggingConfig) -> "StatsLogger":
        return cls({'log_level': config.log_level, 'log_dir': config.log_dir})

    def _setup_logging(self) -> None:
        """
        Configure root logger with all handlers

        Thread-safe: Uses logging module's built-in thread safety
        """
        root_logger = logging.getLogger()
        root_logger.setLevel(getattr(logging, self.log_level.upper()))

        # Clear existing handlers to avoid duplicates
        root_logger.handlers.clear()

        log_format = logging.Formatter(
            '%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s'
        )

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.INFO)
        console_handler.setFormatter(log_format)
        root_logger.addHandler(console_handler)

        # 10MB max, 5 backups
        file_handler = RotatingFileHandler(
            self.log_dir / 'streamstats.log',
            maxBytes=10*1024*1024,
            backupCount=5
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(log_format)
        root_logger.addHandler(file_handler)

        # Reports only, raw JSON lines, daily rotation with a week of history
        report_handler = TimedRotatingFileHandler(
            self.log_dir / 'reports.log',
            when='midnight',
            backupCount=7
        )
        report_handler.setLevel(logging.INFO)
        report_handler.addFilter(ReportLogFilter())
        root_logger.addHandler(report_handler)

    @staticmethod
    def log_report(report: dict) -> None:
        """
        Log a metrics report as one JSON line

        Args:
            report: JSON-serializable report, e.g. Statistics.json_report()

        Example:
            StatsLogger.log_report({'tag': 'db_query', 'p99': 41.2})
        """
        logger = logging.getLogger(REPORT_LOGGER)
        entry = {
            'logged_at': datetime.now(timezone.utc).isoformat(),
            **report
        }
        logger.info(json.dumps(entry, default=str))
