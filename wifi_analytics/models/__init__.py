"""
WiFiAnalytics - Data Models Package

Dataclass models for dimensions and facts.
"""

from wifi_analytics.models.dimensions import DimNetwork, DimAccessPoint
from wifi_analytics.models.facts import (
    ApStatusRecord,
    QosMetricRecord,
    RawTelemetryRecord
)

__all__ = [
    "DimNetwork",
    "DimAccessPoint",
    "ApStatusRecord",
    "QosMetricRecord",
    "RawTelemetryRecord"
]
