"""
WiFiAnalytics - Fact Models

Data models for fact and staging tables in the data warehouse.
Grain: Access point x timestamp
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional


TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass
class ApStatusRecord:
    """
    Fact record for access point operational status.

    Primary Key: snapshot_timestamp + ap_id
    Grain: Per access point, per 5-minute snapshot
    """
    snapshot_timestamp: datetime
    ap_id: int
    network_id: int
    status: str  # "Online" or "Offline"
    connected_client_count: int
    cpu_utilization_percent: float
    memory_utilization_percent: float

    COLUMNS = (
        "SNAPSHOT_TIMESTAMP", "AP_ID", "NETWORK_ID", "STATUS", "CONNECTED_CLIENT_COUNT",
        "CPU_UTILIZATION_PERCENT", "MEMORY_UTILIZATION_PERCENT"
    )

    def to_dict(self) -> dict:
        """Convert to dictionary for database insertion."""
        return {
            "snapshot_timestamp": self.snapshot_timestamp.strftime(TIMESTAMP_FORMAT),
            "ap_id": self.ap_id,
            "network_id": self.network_id,
            "status": self.status,
            "connected_client_count": self.connected_client_count,
            "cpu_utilization_percent": self.cpu_utilization_percent,
            "memory_utilization_percent": self.memory_utilization_percent
        }

    def to_row(self) -> tuple:
        """Return values in table column order."""
        return (
            self.snapshot_timestamp.strftime(TIMESTAMP_FORMAT), self.ap_id, self.network_id,
            self.status, self.connected_client_count, self.cpu_utilization_percent,
            self.memory_utilization_percent
        )

    @property
    def primary_key(self) -> str:
        """Return composite primary key."""
        return f"{self.snapshot_timestamp.strftime(TIMESTAMP_FORMAT)}|{self.ap_id}"

    @property
    def is_online(self) -> bool:
        """True when the AP reported Online."""
        return self.status == "Online"


@dataclass
class QosMetricRecord:
    """
    Fact record for WiFi quality of service measurements.

    Primary Key: metric_timestamp + ap_id
    Grain: Per access point, per minute
    """
    metric_timestamp: datetime
    ap_id: int
    network_id: int

    # Core QoS metrics
    rssi_dbm: int  # -90 to -30
    throughput_mbps: float
    latency_ms: int
    packet_loss_percent: float

    # Additional context
    connected_clients_sample: int
    interference_level: str  # High, Medium, Low, Minimal
    signal_quality_score: float  # 1.0 - 10.0

    COLUMNS = (
        "METRIC_TIMESTAMP", "AP_ID", "NETWORK_ID", "RSSI_DBM", "THROUGHPUT_MBPS",
        "LATENCY_MS", "PACKET_LOSS_PERCENT", "CONNECTED_CLIENTS_SAMPLE",
        "INTERFERENCE_LEVEL", "SIGNAL_QUALITY_SCORE"
    )

    def to_dict(self) -> dict:
        """Convert to dictionary for database insertion."""
        return {
            "metric_timestamp": self.metric_timestamp.strftime(TIMESTAMP_FORMAT),
            "ap_id": self.ap_id,
            "network_id": self.network_id,
            "rssi_dbm": self.rssi_dbm,
            "throughput_mbps": self.throughput_mbps,
            "latency_ms": self.latency_ms,
            "packet_loss_percent": self.packet_loss_percent,
            "connected_clients_sample": self.connected_clients_sample,
            "interference_level": self.interference_level,
            "signal_quality_score": self.signal_quality_score
        }

    def to_row(self) -> tuple:
        """Return values in table column order."""
        return (
            self.metric_timestamp.strftime(TIMESTAMP_FORMAT), self.ap_id, self.network_id,
            self.rssi_dbm, self.throughput_mbps, self.latency_ms, self.packet_loss_percent,
            self.connected_clients_sample, self.interference_level, self.signal_quality_score
        )

    @property
    def primary_key(self) -> str:
        """Return composite primary key."""
        return f"{self.metric_timestamp.strftime(TIMESTAMP_FORMAT)}|{self.ap_id}"


@dataclass
class RawTelemetryRecord:
    """
    Staging record holding one raw JSON telemetry document.

    Primary Key: record_id (autoincrement in the warehouse)
    """
    record_id: int
    telemetry_data: Dict[str, Any]
    ingested_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        """Convert to dictionary for database insertion."""
        return {
            "record_id": self.record_id,
            "telemetry_data": self.telemetry_data,
            "ingested_at": self.ingested_at.strftime(TIMESTAMP_FORMAT)
        }

    def to_json(self) -> str:
        """Serialize the telemetry document for PARSE_JSON."""
        return json.dumps(self.telemetry_data, sort_keys=True)

    @property
    def ap_id(self) -> Optional[Any]:
        """Raw ap_id value, if present."""
        return self.telemetry_data.get("network_telemetry", {}).get("ap_id")
