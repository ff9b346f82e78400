"""
WiFiAnalytics - Utilities Package

Configuration, logging and timing helpers.
"""

from wifi_analytics.utils.config import (
    Config,
    EnvironmentConfig,
    GenerationConfig,
    OperationalConfig,
    SnowflakeConfig
)
from wifi_analytics.utils.logging_config import setup_logging
from wifi_analytics.utils.performance import PerformanceTimer, batched

__all__ = [
    "Config",
    "EnvironmentConfig",
    "GenerationConfig",
    "OperationalConfig",
    "SnowflakeConfig",
    "setup_logging",
    "PerformanceTimer",
    "batched"
]
