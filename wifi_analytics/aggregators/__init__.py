"""
WiFiAnalytics - Aggregators Package

Uptime, client load and QoS rollups.
"""

from wifi_analytics.aggregators.network_aggregator import (
    AggregateCalculator,
    ClientLoadProfile,
    NetworkUptime,
    QosAggregator,
    QosSummary,
    UptimeAggregator,
    UptimeSummary
)

__all__ = [
    "AggregateCalculator",
    "ClientLoadProfile",
    "NetworkUptime",
    "QosAggregator",
    "QosSummary",
    "UptimeAggregator",
    "UptimeSummary"
]
