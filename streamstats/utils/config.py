"""
Configuration management with INI files and environment overrides
"""

import os
from configparser import ConfigParser, SectionProxy
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from streamstats.core.exceptions import ConfigurationError
from streamstats.utils.units import HOURS, SECONDS


@dataclass
class ReservoirConfig:
    """Exponentially decaying sample configuration"""
    size: int = 1028
    alpha: float = 0.015
    rescale_interval: float = 1 * HOURS  # milliseconds

    def __post_init__(self):
        if self.size <= 0:
            raise ConfigurationError(f"Reservoir size must be positive, got {self.size}")

        if self.alpha <= 0:
            raise ConfigurationError(f"Decay alpha must be positive, got {self.alpha}")

        if self.rescale_interval <= 0:
            raise ConfigurationError(
                f"Rescale interval must be positive, got {self.rescale_interval}ms"
            )


@dataclass
class MeterConfig:
    """Rate meter configuration"""
    samples: float = 1  # reporting unit in seconds
    timeframe: float = 60  # EWMA time period in seconds
    tick_interval: float = 5 * SECONDS  # milliseconds

    def __post_init__(self):
        if self.samples <= 0:
            raise ConfigurationError(f"Meter samples must be positive, got {self.samples}")

        if self.timeframe <= 0:
            raise ConfigurationError(f"Meter timeframe must be positive, got {self.timeframe}")

        if self.tick_interval <= 0:
            raise ConfigurationError(
                f"Tick interval must be positive, got {self.tick_interval}ms"
            )


@dataclass
class LoggingConfig:
    """Logging system configuration"""
    log_level: str = "INFO"
    log_dir: str = "logs"

    def __post_init__(self):
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.log_level.upper() not in valid_levels:
            raise ConfigurationError(
                f"Invalid log level: {self.log_level}. "
                f"Must be one of {valid_levels}"
            )


class ConfigManager:
    """
    Manages engine configuration from an INI file with environment overrides

    Every section is optional; a missing file or section yields defaults.
    Priority: ENV > INI file > dataclass defaults
    """

    CONFIG_FILE = "metrics.ini"

    def __init__(self, config_dir: str = "configs"):
        self.config_dir = Path(config_dir)
        self._reservoir_config = None
        self._meter_config = None
        self._logging_config = None

        self._load_configs()

    def _load_configs(self):
        """Load all configuration sections"""
        parser = self._read_parser()
        self._reservoir_config = self._load_reservoir_config(parser)
        self._meter_config = self._load_meter_config(parser)
        self._logging_config = self._load_logging_config(parser)

    def _read_parser(self) -> ConfigParser:
        parser = ConfigParser()
        config_file = self.config_dir / self.CONFIG_FILE
        if config_file.exists():
            parser.read(config_file)
        return parser

    @staticmethod
    def _section(parser: ConfigParser, name: str) -> Optional[SectionProxy]:
        return parser[name] if name in parser else None

    def _load_reservoir_config(self, parser: ConfigParser) -> ReservoirConfig:
        """Load reservoir configuration"""
        defaults = ReservoirConfig()
        section = self._section(parser, "reservoir")

        size = section.getint("size", defaults.size) if section else defaults.size
        alpha = section.getfloat("alpha", defaults.alpha) if section else defaults.alpha
        rescale_interval = (
            section.getfloat("rescale_interval", defaults.rescale_interval)
            if section else defaults.rescale_interval
        )

        size_env = os.getenv("STREAMSTATS_RESERVOIR_SIZE")
        alpha_env = os.getenv("STREAMSTATS_RESERVOIR_ALPHA")
        try:
            if size_env:
                size = int(size_env)
            if alpha_env:
                alpha = float(alpha_env)
        except ValueError as e:
            raise ConfigurationError(f"Invalid reservoir environment override: {e}") from e

        return ReservoirConfig(size=size, alpha=alpha, rescale_interval=rescale_interval)

    def _load_meter_config(self, parser: ConfigParser) -> MeterConfig:
        """Load meter configuration"""
        defaults = MeterConfig()
        section = self._section(parser, "meter")

        if section is None:
            samples = defaults.samples
            timeframe = defaults.timeframe
            tick_interval = defaults.tick_interval
        else:
            samples = section.getfloat("samples", defaults.samples)
            timeframe = section.getfloat("timeframe", defaults.timeframe)
            tick_interval = section.getfloat("tick_interval", defaults.tick_interval)

        tick_env = os.getenv("STREAMSTATS_TICK_INTERVAL")
        if tick_env:
            try:
                tick_interval = float(tick_env)
            except ValueError as e:
                raise ConfigurationError(f"Invalid STREAMSTATS_TICK_INTERVAL: {tick_env}") from e

        return MeterConfig(samples=samples, timeframe=timeframe, tick_interval=tick_interval)

    def _load_logging_config(self, parser: ConfigParser) -> LoggingConfig:
        """Load logging configuration"""
        section = self._section(parser, "logging")

        log_level = section.get("log_level", "INFO") if section else "INFO"
        log_dir = section.get("log_dir", "logs") if section else "logs"

        return LoggingConfig(
            log_level=os.getenv("STREAMSTATS_LOG_LEVEL", log_level),
            log_dir=os.getenv("STREAMSTATS_LOG_DIR", log_dir),
        )

    @property
    def reservoir_config(self) -> ReservoirConfig:
        """Get reservoir configuration"""
        return self._reservoir_config

    @property
    def meter_config(self) -> MeterConfig:
        """Get meter configuration"""
        return self._meter_config

    @property
    def logging_config(self) -> LoggingConfig:
        """Get logging configuration"""
        return self._logging_config
