"""
WiFiAnalytics - Transformers Package

JSON-to-relational transformation and analytical view logic.
"""

from wifi_analytics.transformers.json_transformer import (
    ApPerformanceRow,
    ConnectedDeviceRow,
    TelemetryTransformer,
    ap_performance_view_sql,
    cast_value,
    extract_path,
    flatten,
    flatten_connected_devices
)
from wifi_analytics.transformers.qos_analysis import (
    QosAnalysisRow,
    QosAnalyzer,
    network_qos_view_sql,
    qos_alert_category
)

__all__ = [
    "ApPerformanceRow",
    "ConnectedDeviceRow",
    "TelemetryTransformer",
    "ap_performance_view_sql",
    "cast_value",
    "extract_path",
    "flatten",
    "flatten_connected_devices",
    "QosAnalysisRow",
    "QosAnalyzer",
    "network_qos_view_sql",
    "qos_alert_category"
]
