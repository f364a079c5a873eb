"""
Custom exceptions for the statistics engine
"""


class StreamStatsError(Exception):
    """Base exception for statistics engine errors"""


class ConfigurationError(StreamStatsError):
    """Invalid metric or engine configuration"""


class InvalidMeasurementError(ConfigurationError):
    """Histogram asked for a measurement it does not provide"""
