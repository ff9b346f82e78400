"""
WiFiAnalytics - Data Model Tests

Unit tests for dimension and fact models.
"""

import json
import unittest
from datetime import datetime

from wifi_analytics.models.dimensions import DimAccessPoint, DimNetwork
from wifi_analytics.models.facts import ApStatusRecord, QosMetricRecord, RawTelemetryRecord

from factories import make_access_point, make_network


class TestDimensions(unittest.TestCase):
    """Test cases for dimension models."""

    def test_network_row_matches_columns(self):
        network = make_network()
        row = network.to_row()
        self.assertEqual(len(row), len(DimNetwork.COLUMNS))
        self.assertEqual(row[0], 1001)
        self.assertEqual(row[-1], "2023-01-15")

    def test_network_sla_percentage(self):
        self.assertAlmostEqual(make_network(sla_uptime_target=0.995).sla_uptime_pct, 99.5)

    def test_access_point_dict_keys_follow_columns(self):
        access_point = make_access_point()
        self.assertEqual(
            list(access_point.to_dict().keys()),
            [column.lower() for column in DimAccessPoint.COLUMNS]
        )

    def test_load_ratio(self):
        access_point = make_access_point(max_client_capacity=128)
        self.assertEqual(access_point.load_ratio(64), 0.5)

    def test_load_ratio_without_clients_or_capacity(self):
        self.assertIsNone(make_access_point().load_ratio(None))
        self.assertIsNone(make_access_point(max_client_capacity=0).load_ratio(10))


class TestFacts(unittest.TestCase):
    """Test cases for fact and staging models."""

    def setUp(self):
        self.timestamp = datetime(2024, 1, 15, 10, 5)

    def test_status_record_serialization(self):
        record = ApStatusRecord(self.timestamp, 7, 1001, "Online", 42, 35.5, 60.0)
        self.assertEqual(record.to_row()[0], "2024-01-15 10:05:00")
        self.assertEqual(record.primary_key, "2024-01-15 10:05:00|7")
        self.assertTrue(record.is_online)
        self.assertEqual(len(record.to_row()), len(ApStatusRecord.COLUMNS))

    def test_offline_status(self):
        record = ApStatusRecord(self.timestamp, 7, 1001, "Offline", 0, 5.0, 20.0)
        self.assertFalse(record.is_online)

    def test_qos_record_row_matches_columns(self):
        record = QosMetricRecord(self.timestamp, 7, 1001, -62, 80.0, 8, 0.25, 30, "Low", 7.5)
        self.assertEqual(len(record.to_row()), len(QosMetricRecord.COLUMNS))
        self.assertEqual(record.to_dict()["interference_level"], "Low")

    def test_raw_telemetry_json_and_ap_id(self):
        document = {"network_telemetry": {"ap_id": 12, "timestamp": "2024-01-15 10:05:00"}}
        record = RawTelemetryRecord(1, document, self.timestamp)
        self.assertEqual(record.ap_id, 12)
        self.assertEqual(json.loads(record.to_json()), document)
        self.assertEqual(record.to_dict()["ingested_at"], "2024-01-15 10:05:00")

    def test_raw_telemetry_without_root(self):
        self.assertIsNone(RawTelemetryRecord(2, {"other": {}}).ap_id)


if __name__ == "__main__":
    unittest.main()
