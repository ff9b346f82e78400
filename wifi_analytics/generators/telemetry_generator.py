"""
WiFiAnalytics - Raw Telemetry Generator

Produces raw JSON telemetry documents for the RAW staging table.
"""

import logging
import random
from datetime import datetime, timedelta
from typing import Any, Dict, List

from wifi_analytics.models.dimensions import DimAccessPoint
from wifi_analytics.models.facts import RawTelemetryRecord, TIMESTAMP_FORMAT


logger = logging.getLogger(__name__)


class TelemetryGenerator:
    """
    Generator for nested JSON telemetry.

    Document layout:
        {"network_telemetry": {
            "ap_id", "timestamp",
            "status_metrics": {"operational_status", "connected_clients",
                               "resource_utilization": {"cpu_percent", "memory_percent"}},
            "location_context": {"building", "floor", "zone"}}}
    """

    ONLINE_PCT = 98

    def __init__(self, rng: random.Random, reference_time: datetime):
        self.rng = rng
        self.reference_time = reference_time

    def generate(
        self,
        access_points: List[DimAccessPoint],
        records_per_ap: int = 15
    ) -> List[RawTelemetryRecord]:
        """
        Generate raw telemetry records for every access point.

        Args:
            access_points: Access point dimension rows
            records_per_ap: Documents per access point

        Returns:
            RawTelemetryRecord list with sequential record ids
        """
        records = []
        record_id = 0

        for access_point in access_points:
            for _ in range(records_per_ap):
                record_id += 1
                records.append(RawTelemetryRecord(
                    record_id=record_id,
                    telemetry_data=self.build_document(access_point),
                    ingested_at=self.reference_time
                ))

        logger.info(f"[OK] Generated {len(records)} raw telemetry documents")
        return records

    def build_document(self, access_point: DimAccessPoint) -> Dict[str, Any]:
        """Build one telemetry document for an access point."""
        measured_at = self.reference_time - timedelta(minutes=self.rng.randint(1, 1440))
        status = "Online" if self.rng.randint(1, 100) <= self.ONLINE_PCT else "Offline"

        return {
            "network_telemetry": {
                "ap_id": access_point.ap_id,
                "timestamp": measured_at.strftime(TIMESTAMP_FORMAT),
                "status_metrics": {
                    "operational_status": status,
                    "connected_clients": self.rng.randint(5, 128),
                    "resource_utilization": {
                        "cpu_percent": float(self.rng.randint(10, 85)),
                        "memory_percent": float(self.rng.randint(30, 90))
                    }
                },
                "location_context": {
                    "building": access_point.location_building,
                    "floor": access_point.location_floor,
                    "zone": access_point.location_zone
                }
            }
        }


def build_connected_devices_sample() -> Dict[str, Any]:
    """
    Nested telemetry with a connected_devices array.

    Used to demonstrate flattening arrays inside JSON documents.
    """
    return {
        "network_telemetry": {
            "ap_id": 12345,
            "timestamp": "2024-01-15T10:30:00Z",
            "connected_devices": [
                {"mac": "AA:BB:CC:DD:EE:01", "signal_strength": -45, "data_usage_mb": 125.5},
                {"mac": "AA:BB:CC:DD:EE:02", "signal_strength": -62, "data_usage_mb": 89.2},
                {"mac": "AA:BB:CC:DD:EE:03", "signal_strength": -38, "data_usage_mb": 256.8}
            ]
        }
    }
