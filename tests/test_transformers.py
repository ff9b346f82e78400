"""
WiFiAnalytics - Transformer Tests

Unit tests for JSON extraction, casting and the analytical view logic.
"""

import unittest
from datetime import datetime

from wifi_analytics.generators.telemetry_generator import build_connected_devices_sample
from wifi_analytics.transformers.json_transformer import (
    TelemetryTransformer,
    ap_performance_view_sql,
    cast_value,
    classify_health,
    classify_load,
    extract_path,
    flatten,
    flatten_connected_devices,
    parse_timestamp,
    try_cast
)
from wifi_analytics.transformers.qos_analysis import (
    QosAnalyzer,
    day_of_week,
    network_qos_view_sql,
    qos_alert_category
)
from wifi_analytics.utils.config import EnvironmentConfig

from factories import make_access_point, make_network, make_qos, make_telemetry


class TestJsonExtraction(unittest.TestCase):
    """Test cases for path extraction and casting."""

    def setUp(self):
        self.document = {
            "network_telemetry": {
                "ap_id": 7,
                "status_metrics": {"resource_utilization": {"cpu_percent": 41.5}},
                "devices": [{"mac": "A"}, {"mac": "B"}]
            }
        }

    def test_extract_nested_path(self):
        self.assertEqual(
            extract_path(self.document, "network_telemetry:status_metrics:resource_utilization:cpu_percent"),
            41.5
        )

    def test_extract_array_index(self):
        self.assertEqual(extract_path(self.document, "network_telemetry:devices:1:mac"), "B")
        self.assertIsNone(extract_path(self.document, "network_telemetry:devices:5:mac"))

    def test_missing_path_returns_none(self):
        self.assertIsNone(extract_path(self.document, "network_telemetry:location_context:floor"))
        self.assertIsNone(extract_path(self.document, "network_telemetry:ap_id:deeper"))

    def test_parse_timestamp_formats(self):
        self.assertEqual(parse_timestamp("2024-01-15T10:30:00Z"), datetime(2024, 1, 15, 10, 30))
        self.assertEqual(parse_timestamp("2024-01-15 10:30:00"), datetime(2024, 1, 15, 10, 30))

    def test_cast_value(self):
        self.assertEqual(cast_value("42", "INTEGER"), 42)
        self.assertEqual(cast_value(12.3456, "DECIMAL(5,2)"), 12.35)
        self.assertEqual(cast_value(5, "VARCHAR"), "5")
        self.assertEqual(cast_value("1.5", "FLOAT"), 1.5)
        self.assertIsNone(cast_value(None, "INTEGER"))

    def test_cast_failures(self):
        with self.assertRaises(ValueError):
            cast_value("abc", "INTEGER")
        with self.assertRaises(ValueError):
            cast_value(True, "INTEGER")
        with self.assertRaises(ValueError):
            cast_value(1, "GEOGRAPHY")
        with self.assertRaises(ValueError):
            cast_value(float("inf"), "INTEGER")
        self.assertIsNone(try_cast("abc", "INTEGER"))
        self.assertIsNone(try_cast("not a time", "TIMESTAMP_NTZ"))
        self.assertIsNone(try_cast(float("inf"), "INTEGER"))
        self.assertIsNone(try_cast("1e400", "INTEGER"))
        self.assertIsNone(try_cast("NaN", "INTEGER"))

    def test_flatten_yields_index_and_value(self):
        entries = list(flatten(self.document, "network_telemetry:devices"))
        self.assertEqual(entries, [{"index": 0, "value": {"mac": "A"}}, {"index": 1, "value": {"mac": "B"}}])
        self.assertEqual(list(flatten(self.document, "network_telemetry:ap_id")), [])

    def test_flatten_connected_devices(self):
        rows = flatten_connected_devices(build_connected_devices_sample())
        self.assertEqual(len(rows), 3)
        self.assertEqual(rows[0].ap_id, 12345)
        self.assertEqual(rows[0].measurement_time, datetime(2024, 1, 15, 10, 30))
        self.assertEqual(rows[0].device_mac, "AA:BB:CC:DD:EE:01")
        self.assertEqual(rows[0].signal_strength_dbm, -45)
        self.assertEqual(rows[2].data_usage_mb, 256.8)


class TestClassification(unittest.TestCase):
    """Test cases for load and health categories."""

    def test_classify_load(self):
        self.assertEqual(classify_load(0.81), "High Load")
        self.assertEqual(classify_load(0.8), "Medium Load")
        self.assertEqual(classify_load(0.5), "Low Load")
        self.assertEqual(classify_load(None), "Low Load")

    def test_classify_health(self):
        self.assertEqual(classify_health("Offline", 10, 10, 0.1), "Critical")
        self.assertEqual(classify_health("Online", 81, 10, 0.1), "Warning")
        self.assertEqual(classify_health("Online", 10, 86, 0.1), "Warning")
        self.assertEqual(classify_health("Online", 10, 10, 0.91), "Warning")
        self.assertEqual(classify_health("Online", 80, 85, 0.9), "Healthy")
        self.assertEqual(classify_health(None, None, None, None), "Healthy")


class TestTelemetryTransformer(unittest.TestCase):
    """Test cases for raw telemetry to AP performance rows."""

    def setUp(self):
        self.transformer = TelemetryTransformer(
            [make_access_point(ap_id=1, max_client_capacity=100)],
            [make_network()]
        )

    def test_joined_record(self):
        row = self.transformer.transform_record(make_telemetry(10, ap_id=1, clients=85))
        self.assertEqual(row.record_id, 10)
        self.assertEqual(row.network_name, "TechCorp HQ")
        self.assertEqual(row.manufacturer, "HPE Aruba")
        self.assertEqual(row.connected_clients, 85)
        self.assertEqual(row.floor_number, 4)
        self.assertEqual(row.measurement_timestamp, datetime(2024, 1, 15, 10, 30))
        self.assertEqual(row.load_category, "High Load")
        self.assertEqual(row.health_status, "Healthy")

    def test_string_values_are_cast(self):
        row = self.transformer.transform_record(make_telemetry(11, ap_id="1", clients="60", cpu="82.456"))
        self.assertEqual(row.ap_id, 1)
        self.assertEqual(row.connected_clients, 60)
        self.assertEqual(row.cpu_utilization_percent, 82.46)
        self.assertEqual(row.load_category, "Medium Load")
        self.assertEqual(row.health_status, "Warning")

    def test_unmatched_record_keeps_telemetry(self):
        rows = self.transformer.to_performance_rows([make_telemetry(12, ap_id=999, status="Offline")])
        self.assertEqual(rows[0].ap_id, 999)
        self.assertIsNone(rows[0].network_name)
        self.assertEqual(rows[0].load_category, "Low Load")
        self.assertEqual(rows[0].health_status, "Critical")

    def test_bad_values_become_null(self):
        row = self.transformer.transform_record(make_telemetry(13, ap_id="x", clients="many"))
        self.assertIsNone(row.ap_id)
        self.assertIsNone(row.connected_clients)

    def test_non_finite_numbers_become_null(self):
        row = self.transformer.transform_record(make_telemetry(14, ap_id=1, clients="Infinity"))
        self.assertEqual(row.ap_id, 1)
        self.assertIsNone(row.connected_clients)

    def test_view_sql(self):
        sql = ap_performance_view_sql(EnvironmentConfig())
        self.assertIn("CREATE OR REPLACE VIEW ANALYTICS.VW_AP_PERFORMANCE", sql)
        self.assertIn("TELEMETRY_DATA:network_telemetry:ap_id::INTEGER", sql)
        self.assertIn("LEFT JOIN TRANSFORMED.DIM_NETWORKS", sql)


class TestQosAnalysis(unittest.TestCase):
    """Test cases for the QoS analysis view logic."""

    def setUp(self):
        self.timestamp = datetime(2024, 1, 15, 14, 30)
        self.analyzer = QosAnalyzer([make_access_point(max_client_capacity=128)], [make_network()])

    def test_alert_priority(self):
        self.assertEqual(qos_alert_category(-80, 10.0, 200, 1.0), "Coverage Gap")
        self.assertEqual(qos_alert_category(-70, 5.1, 200, 1.0), "Quality Issue")
        self.assertEqual(qos_alert_category(-70, 5.0, 101, 1.0), "Latency Problem")
        self.assertEqual(qos_alert_category(-70, 5.0, 100, 9.9), "Throughput Issue")
        self.assertEqual(qos_alert_category(-70, 5.0, 100, 10.0), "Normal")

    def test_day_of_week_starts_sunday(self):
        self.assertEqual(day_of_week(datetime(2024, 1, 14)), 0)
        self.assertEqual(day_of_week(datetime(2024, 1, 15)), 1)
        self.assertEqual(day_of_week(datetime(2024, 1, 13)), 6)

    def test_enriched_row(self):
        row = self.analyzer.analyze(make_qos(self.timestamp, rssi=-70, clients=64))
        self.assertEqual(row.signal_strength_category, "Okay")
        self.assertEqual(row.qos_alert_category, "Normal")
        self.assertEqual(row.capacity_utilization_percent, 50.0)
        self.assertEqual(row.hour_of_day, 14)

        exported = row.to_dict()
        self.assertEqual(exported["customer_name"], "TechCorp Inc")
        self.assertEqual(exported["measurement_date"], "2024-01-15")
        self.assertEqual(exported["day_of_week"], 1)

    def test_unmatched_access_point(self):
        row = self.analyzer.analyze(make_qos(self.timestamp, ap_id=99))
        self.assertIsNone(row.capacity_utilization_percent)
        self.assertIsNone(row.to_dict()["ap_model"])

    def test_iter_rows_is_lazy(self):
        rows = self.analyzer.iter_rows(make_qos(self.timestamp) for _ in range(3))
        self.assertEqual(len(list(rows)), 3)

    def test_view_sql(self):
        sql = network_qos_view_sql(EnvironmentConfig())
        self.assertIn("VW_NETWORK_QOS_ANALYSIS", sql)
        self.assertIn("NULLIF(ap.MAX_CLIENT_CAPACITY, 0)", sql)


if __name__ == "__main__":
    unittest.main()
