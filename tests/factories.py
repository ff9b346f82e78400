"""
WiFiAnalytics - Test Fixtures

Builders for model objects shared across test modules.
"""

from datetime import date, datetime
from typing import Optional

from wifi_analytics.models.dimensions import DimAccessPoint, DimNetwork
from wifi_analytics.models.facts import ApStatusRecord, QosMetricRecord, RawTelemetryRecord


def make_network(**overrides) -> DimNetwork:
    values = dict(
        network_id=1001,
        network_name="TechCorp HQ",
        customer_name="TechCorp Inc",
        industry="Corporate",
        location_city="San Francisco",
        location_country="USA",
        sla_uptime_target=0.9999,
        created_date=date(2023, 1, 15)
    )
    values.update(overrides)
    return DimNetwork(**values)


def make_access_point(**overrides) -> DimAccessPoint:
    values = dict(
        ap_id=1,
        network_id=1001,
        ap_mac_address="AA:BB:CC:DD:EE:FF",
        ap_model="Aruba AP-635",
        manufacturer="HPE Aruba",
        wifi_standard="Wi-Fi 6",
        max_client_capacity=128,
        deployment_date=date(2023, 6, 1),
        firmware_version="8.11.1.0",
        location_building="Main Building",
        location_floor=3,
        location_zone="Lobby"
    )
    values.update(overrides)
    return DimAccessPoint(**values)


def make_status(
    timestamp: datetime,
    ap_id: int = 1,
    network_id: int = 1001,
    status: str = "Online",
    clients: int = 20
) -> ApStatusRecord:
    return ApStatusRecord(timestamp, ap_id, network_id, status, clients, 30.0, 50.0)


def make_qos(
    timestamp: datetime,
    ap_id: int = 1,
    network_id: int = 1001,
    rssi: int = -60,
    throughput: float = 80.0,
    latency: int = 10,
    packet_loss: float = 0.2,
    clients: int = 20
) -> QosMetricRecord:
    return QosMetricRecord(timestamp, ap_id, network_id, rssi, throughput, latency, packet_loss,
                           clients, "Low", 7.0)


def make_telemetry(
    record_id: int,
    ap_id: Optional[object] = 1,
    status: str = "Online",
    clients: object = 40,
    cpu: object = 35.0,
    memory: object = 55.0,
    timestamp: str = "2024-01-15 10:30:00"
) -> RawTelemetryRecord:
    document = {
        "network_telemetry": {
            "ap_id": ap_id,
            "timestamp": timestamp,
            "status_metrics": {
                "operational_status": status,
                "connected_clients": clients,
                "resource_utilization": {"cpu_percent": cpu, "memory_percent": memory}
            },
            "location_context": {"building": "Main Building", "floor": 4, "zone": "Lobby"}
        }
    }
    return RawTelemetryRecord(record_id, document, datetime(2024, 1, 15, 11, 0))
