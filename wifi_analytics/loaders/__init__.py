"""
WiFiAnalytics - Data Loaders Package

Snowflake provisioning/loading and local file export.
"""

from wifi_analytics.loaders.file_exporter import FileExporter
from wifi_analytics.loaders.snowflake_loader import (
    SnowflakeConnection,
    SnowflakeEnvironmentManager,
    SnowflakeFactLoader,
    SnowflakeLoader,
    SnowflakeSchemaManager
)

__all__ = [
    "FileExporter",
    "SnowflakeConnection",
    "SnowflakeEnvironmentManager",
    "SnowflakeFactLoader",
    "SnowflakeLoader",
    "SnowflakeSchemaManager"
]
