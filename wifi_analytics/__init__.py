"""
WiFiAnalytics - WiFi Telemetry Analytics Demo Pipeline

Synthetic WiFi telemetry, JSON-to-relational transformation, governance,
semantic layer and validation for Snowflake.
"""

__version__ = "1.0.0"
