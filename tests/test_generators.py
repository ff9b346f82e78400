"""
WiFiAnalytics - Generator Tests

Unit tests for the synthetic data generators.
"""

import random
import re
import unittest
from datetime import date, datetime, timedelta
from itertools import islice
from unittest.mock import MagicMock

from wifi_analytics.generators import catalog
from wifi_analytics.generators.access_point_generator import (
    AccessPointGenerator,
    generate_networks,
    mac_address_for
)
from wifi_analytics.generators.dataset_generator import DatasetGenerator
from wifi_analytics.generators.qos_generator import (
    QosGenerator,
    interference_level,
    is_measured,
    load_penalty,
    lookup_client_load,
    time_of_day_offset
)
from wifi_analytics.generators.status_generator import (
    StatusGenerator,
    daily_load_factor,
    snapshot_timestamps,
    weekly_load_factor
)
from wifi_analytics.generators.telemetry_generator import TelemetryGenerator
from wifi_analytics.utils.config import GenerationConfig

from factories import make_access_point, make_network


REFERENCE_TIME = datetime(2024, 1, 17, 12, 0)
MONDAY = datetime(2024, 1, 15, 2, 0)
SATURDAY = datetime(2024, 1, 13, 12, 0)


class TestCatalog(unittest.TestCase):
    """Test cases for reference data helpers."""

    def test_signal_band_boundaries(self):
        expected = {
            -30: "Excellent", -50: "Excellent", -51: "Very Good", -67: "Very Good",
            -68: "Okay", -75: "Okay", -76: "Weak", -85: "Weak", -86: "Unusable", -90: "Unusable"
        }
        for rssi, name in expected.items():
            self.assertEqual(catalog.signal_band(rssi).name, name, rssi)

    def test_weekend_days(self):
        self.assertTrue(catalog.is_weekend(SATURDAY.weekday()))
        self.assertFalse(catalog.is_weekend(MONDAY.weekday()))


class TestAccessPointGenerator(unittest.TestCase):
    """Test cases for network and access point generation."""

    def setUp(self):
        self.networks = generate_networks()
        self.generator = AccessPointGenerator(random.Random(1), date(2024, 1, 17))

    def test_seed_networks(self):
        self.assertEqual(len(self.networks), 12)
        self.assertEqual(len({network.customer_name for network in self.networks}), 12)

    def test_ap_counts_by_industry(self):
        access_points = self.generator.generate(self.networks)
        self.assertEqual(len(access_points), 64)
        self.assertEqual([ap.ap_id for ap in access_points], list(range(1, 65)))

        per_network = {}
        for access_point in access_points:
            per_network[access_point.network_id] = per_network.get(access_point.network_id, 0) + 1
        self.assertEqual(per_network[1004], 8)  # Public Venue
        self.assertEqual(per_network[1005], 7)  # Education
        self.assertEqual(per_network[1002], 4)  # Retail

    def test_attributes_in_range(self):
        industries = {network.network_id: network.industry for network in self.networks}
        for access_point in self.generator.generate(self.networks):
            manufacturer, standard, stable, legacy = catalog.AP_MODELS[access_point.ap_model]
            self.assertEqual(access_point.manufacturer, manufacturer)
            self.assertEqual(access_point.wifi_standard, standard)
            self.assertIn(access_point.firmware_version, (stable, legacy))
            self.assertTrue(1 <= access_point.location_floor <= catalog.MAX_FLOOR)
            self.assertEqual(
                access_point.max_client_capacity,
                catalog.CAPACITY_BY_INDUSTRY.get(industries[access_point.network_id], catalog.DEFAULT_CAPACITY)
            )

    def test_pick_model_uses_cumulative_bounds(self):
        rng = MagicMock()
        generator = AccessPointGenerator(rng, date(2024, 1, 17))
        for draw, model in [(1, "Cisco Meraki MR46"), (30, "Cisco Meraki MR46"), (31, "Aruba AP-635"),
                            (90, "Juniper Mist AP43"), (100, "Ruckus R750")]:
            rng.randint.return_value = draw
            self.assertEqual(generator.pick_model(), model)

    def test_legacy_firmware_only_for_listed_manufacturers(self):
        rng = MagicMock()
        rng.randint.return_value = 1
        generator = AccessPointGenerator(rng, date(2024, 1, 17))
        self.assertEqual(generator.pick_firmware("Cisco Meraki MR46"), "28.7.1")
        self.assertEqual(generator.pick_firmware("Ruckus R750"), "1.4.2")

    def test_mac_address_format_and_stability(self):
        mac = mac_address_for(1001, 1)
        self.assertRegex(mac, re.compile(r"^([0-9A-F]{2}:){5}[0-9A-F]{2}$"))
        self.assertEqual(mac, mac_address_for(1001, 1))
        self.assertNotEqual(mac, mac_address_for(1001, 2))


class TestTelemetryGenerator(unittest.TestCase):
    """Test cases for raw JSON telemetry."""

    def test_document_structure(self):
        generator = TelemetryGenerator(random.Random(3), REFERENCE_TIME)
        records = generator.generate([make_access_point(ap_id=5), make_access_point(ap_id=6)], 3)

        self.assertEqual([record.record_id for record in records], [1, 2, 3, 4, 5, 6])
        root = records[0].telemetry_data["network_telemetry"]
        self.assertEqual(root["ap_id"], 5)
        self.assertIn(root["status_metrics"]["operational_status"], ("Online", "Offline"))
        self.assertTrue(5 <= root["status_metrics"]["connected_clients"] <= 128)
        self.assertEqual(root["location_context"]["zone"], "Lobby")

        measured = datetime.strptime(root["timestamp"], "%Y-%m-%d %H:%M:%S")
        self.assertTrue(REFERENCE_TIME - timedelta(minutes=1440) <= measured < REFERENCE_TIME)


class TestStatusGenerator(unittest.TestCase):
    """Test cases for status snapshot generation."""

    def test_snapshot_timestamps_stop_at_reference(self):
        start = datetime(2024, 1, 17)
        timestamps = list(snapshot_timestamps(start, 1, 5, start + timedelta(hours=1)))
        self.assertEqual(len(timestamps), 13)
        self.assertEqual(timestamps[-1], start + timedelta(hours=1))

    def test_daily_load_factor(self):
        self.assertEqual(daily_load_factor(13), 1.0)
        self.assertAlmostEqual(daily_load_factor(9), 0.65)
        self.assertAlmostEqual(daily_load_factor(3), 0.3)

    def test_weekly_load_factor(self):
        self.assertEqual(weekly_load_factor(SATURDAY, "Corporate"), 0.2)
        self.assertEqual(weekly_load_factor(SATURDAY, "Retail"), 1.3)
        self.assertEqual(weekly_load_factor(SATURDAY, "Healthcare"), 1.0)
        self.assertEqual(weekly_load_factor(MONDAY, "Corporate"), 1.0)

    def test_records_in_bounds(self):
        network = make_network()
        access_point = make_access_point()
        timestamps = [MONDAY + timedelta(minutes=5 * step) for step in range(50)]
        records = StatusGenerator(random.Random(5)).generate([access_point], [network], timestamps)

        self.assertEqual(len(records), 50)
        for record in records:
            self.assertGreaterEqual(record.connected_client_count, 0)
            self.assertTrue(5.0 <= record.cpu_utilization_percent <= 95.0)
            self.assertTrue(20.0 <= record.memory_utilization_percent <= 95.0)

    def test_firmware_issue_window(self):
        window = (MONDAY, MONDAY + timedelta(days=1))
        generator = StatusGenerator(random.Random(9), window)
        affected = make_access_point(ap_model="Cisco Meraki MR46", firmware_version="28.7.1")
        patched = make_access_point(ap_model="Cisco Meraki MR46", firmware_version="29.2.0")

        self.assertTrue(generator.in_firmware_issue(MONDAY + timedelta(hours=1), affected))
        self.assertFalse(generator.in_firmware_issue(MONDAY - timedelta(hours=1), affected))
        self.assertFalse(generator.in_firmware_issue(MONDAY + timedelta(hours=1), patched))

        offline = sum(
            1 for _ in range(2000)
            if generator.pick_status(MONDAY + timedelta(hours=1), affected) == "Offline"
        )
        self.assertGreater(offline / 2000, 0.08)


class TestQosGenerator(unittest.TestCase):
    """Test cases for QoS measurement generation."""

    def test_load_penalty(self):
        self.assertEqual(load_penalty(81), -15)
        self.assertEqual(load_penalty(80), -8)
        self.assertEqual(load_penalty(50), -3)
        self.assertEqual(load_penalty(20), 0)

    def test_time_of_day_offset(self):
        self.assertEqual(time_of_day_offset(12), -5)
        self.assertEqual(time_of_day_offset(10), -3)
        self.assertEqual(time_of_day_offset(18), 0)
        self.assertEqual(time_of_day_offset(22), 5)

    def test_interference_level(self):
        self.assertEqual(interference_level(-80, 0), "High")
        self.assertEqual(interference_level(-50, 101), "High")
        self.assertEqual(interference_level(-70, 0), "Medium")
        self.assertEqual(interference_level(-60, 0), "Low")
        self.assertEqual(interference_level(-50, 10), "Minimal")

    def test_measurement_hours(self):
        self.assertFalse(is_measured(datetime(2024, 1, 15, 5), "Corporate"))
        self.assertTrue(is_measured(datetime(2024, 1, 15, 22), "Corporate"))
        self.assertTrue(is_measured(datetime(2024, 1, 15, 3), "Healthcare"))

    def test_signal_strength_is_clamped(self):
        rng = MagicMock()
        rng.randint.return_value = 8
        rssi = QosGenerator(rng).signal_strength("Public Venue", "HPE Aruba", 0, MONDAY)
        self.assertEqual(rssi, catalog.RSSI_MAX)

    def test_measurement_follows_signal_band(self):
        generator = QosGenerator(random.Random(11))
        network = make_network()
        access_point = make_access_point()
        for minute in range(200):
            record = generator.measure(MONDAY + timedelta(minutes=minute), access_point, network, 40)
            band = catalog.signal_band(record.rssi_dbm)
            self.assertTrue(catalog.RSSI_MIN <= record.rssi_dbm <= catalog.RSSI_MAX)
            self.assertTrue(band.latency[0] <= record.latency_ms <= band.latency[1])
            self.assertTrue(band.quality[0] <= record.signal_quality_score <= band.quality[1])
            self.assertEqual(record.connected_clients_sample, 40)

    def test_missing_client_load_defaults_to_zero(self):
        record = QosGenerator(random.Random(2)).measure(MONDAY, make_access_point(), make_network(), None)
        self.assertEqual(record.connected_clients_sample, 0)

    def test_lookup_client_load_tolerance(self):
        index = {(1, MONDAY): 10}
        self.assertEqual(lookup_client_load(index, 1, MONDAY), 10)
        self.assertEqual(lookup_client_load(index, 1, MONDAY + timedelta(minutes=2)), 10)
        self.assertEqual(lookup_client_load(index, 1, MONDAY - timedelta(minutes=2)), 10)
        self.assertIsNone(lookup_client_load(index, 1, MONDAY + timedelta(minutes=3)))
        self.assertIsNone(lookup_client_load(index, 2, MONDAY))

    def test_off_hours_skipped_for_office_networks(self):
        records = list(QosGenerator(random.Random(4)).generate(
            [make_access_point()], [make_network()], [MONDAY, MONDAY.replace(hour=10)], {}
        ))
        self.assertEqual(len(records), 1)
        self.assertEqual(records[0].metric_timestamp.hour, 10)


class TestDatasetGenerator(unittest.TestCase):
    """Test cases for the dataset facade."""

    def setUp(self):
        self.config = GenerationConfig(seed=42, history_days=1, reference_time=REFERENCE_TIME)

    def test_dataset_summary(self):
        dataset = DatasetGenerator(self.config).generate()
        summary = dataset.summary()
        self.assertEqual(summary["networks"], 12)
        self.assertEqual(summary["access_points"], 64)
        self.assertEqual(summary["raw_telemetry"], 64 * 15)
        self.assertEqual(summary["status_records"], 288 * 64)
        self.assertEqual(dataset.history_start, datetime(2024, 1, 16))

    def test_same_seed_same_data(self):
        first = DatasetGenerator(self.config).generate()
        second = DatasetGenerator(self.config).generate()
        self.assertEqual(first.access_points, second.access_points)
        self.assertEqual(first.status_records[:500], second.status_records[:500])

    def test_different_seed_different_data(self):
        first = DatasetGenerator(self.config).generate()
        other = DatasetGenerator(GenerationConfig(seed=7, history_days=1, reference_time=REFERENCE_TIME)).generate()
        self.assertNotEqual(first.status_records[:500], other.status_records[:500])

    def test_qos_stream_is_repeatable(self):
        generator = DatasetGenerator(self.config)
        dataset = generator.generate()
        first = list(islice(generator.iter_qos(dataset), 200))
        second = list(islice(generator.iter_qos(dataset), 200))
        self.assertEqual(first, second)
        ap_ids = {ap.ap_id for ap in dataset.access_points}
        self.assertTrue(all(record.ap_id in ap_ids for record in first))


if __name__ == "__main__":
    unittest.main()
