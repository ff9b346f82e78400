"""
WiFiAnalytics - Data Generators Package

Synthetic generators for the dimension, staging and fact tables.
"""

from wifi_analytics.generators.access_point_generator import (
    AccessPointGenerator,
    generate_networks,
    mac_address_for
)
from wifi_analytics.generators.telemetry_generator import (
    TelemetryGenerator,
    build_connected_devices_sample
)
from wifi_analytics.generators.status_generator import StatusGenerator, snapshot_timestamps
from wifi_analytics.generators.qos_generator import QosGenerator
from wifi_analytics.generators.dataset_generator import DatasetGenerator, WifiDataset

__all__ = [
    "AccessPointGenerator",
    "generate_networks",
    "mac_address_for",
    "TelemetryGenerator",
    "build_connected_devices_sample",
    "StatusGenerator",
    "snapshot_timestamps",
    "QosGenerator",
    "DatasetGenerator",
    "WifiDataset"
]
