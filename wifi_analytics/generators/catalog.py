"""
WiFiAnalytics - Reference Catalog

Fixed reference data used by the synthetic generators: seed networks,
access point hardware, industry profiles and signal quality bands.
"""

from datetime import date
from typing import Dict, List, Tuple

from wifi_analytics.models.dimensions import DimNetwork


SEED_NETWORKS: List[DimNetwork] = [
    DimNetwork(1001, "TechCorp HQ", "TechCorp Inc", "Corporate", "San Francisco", "USA", 0.9999, date(2023, 1, 15)),
    DimNetwork(1002, "Metro Mall WiFi", "Metro Shopping", "Retail", "New York", "USA", 0.999, date(2023, 2, 1)),
    DimNetwork(1003, "Grand Hotel Guest", "Grand Hotel Chain", "Hospitality", "London", "UK", 0.995, date(2023, 1, 20)),
    DimNetwork(1004, "Sports Arena", "City Sports Complex", "Public Venue", "Chicago", "USA", 0.999, date(2023, 3, 1)),
    DimNetwork(1005, "University Campus", "State University", "Education", "Boston", "USA", 0.99, date(2023, 1, 10)),
    DimNetwork(1006, "Distribution Center", "LogiFlow Corp", "Logistics", "Dallas", "USA", 0.999, date(2023, 2, 15)),
    DimNetwork(1007, "Medical Center", "Regional Health", "Healthcare", "Seattle", "USA", 0.9999, date(2023, 1, 25)),
    DimNetwork(1008, "Finance Tower", "Global Bank", "Financial", "Toronto", "Canada", 0.9999, date(2023, 2, 10)),
    DimNetwork(1009, "Manufacturing Plant", "Industrial Corp", "Manufacturing", "Detroit", "USA", 0.995, date(2023, 3, 5)),
    DimNetwork(1010, "Airport Terminal", "International Airport", "Transportation", "Miami", "USA", 0.9999, date(2023, 1, 30)),
    DimNetwork(1011, "Conference Center", "Event Spaces LLC", "Public Venue", "Las Vegas", "USA", 0.999, date(2023, 2, 20)),
    DimNetwork(1012, "Startup Hub", "Innovation District", "Corporate", "Austin", "USA", 0.995, date(2023, 3, 10)),
]


# Model -> (manufacturer, wifi standard, stable firmware, legacy firmware)
AP_MODELS: Dict[str, Tuple[str, str, str, str]] = {
    "Cisco Meraki MR46": ("Cisco Meraki", "Wi-Fi 6", "29.2.0", "28.7.1"),
    "Aruba AP-635": ("HPE Aruba", "Wi-Fi 6", "8.11.1.0", "8.10.0.2"),
    "Ubiquiti UniFi 6 Pro": ("Ubiquiti", "Wi-Fi 6", "7.0.23", "6.5.55"),
    "Juniper Mist AP43": ("Juniper Mist", "Wi-Fi 6", "1.4.2", "1.4.2"),
    "Ruckus R750": ("Ruckus Networks", "Wi-Fi 6E", "1.4.2", "1.4.2"),
}

# Cumulative percentile upper bounds for a single 1-100 draw
AP_MODEL_DISTRIBUTION: List[Tuple[int, str]] = [
    (30, "Cisco Meraki MR46"),
    (55, "Aruba AP-635"),
    (75, "Ubiquiti UniFi 6 Pro"),
    (90, "Juniper Mist AP43"),
    (100, "Ruckus R750"),
]

LEGACY_FIRMWARE_PCT = 15
LEGACY_FIRMWARE_MANUFACTURERS = ("Cisco Meraki", "HPE Aruba", "Ubiquiti")

# Firmware issue scenario
FIRMWARE_ISSUE_MODEL = "Cisco Meraki MR46"
FIRMWARE_ISSUE_VERSION = "28.7.1"
FIRMWARE_ISSUE_OFFLINE_PCT = 15

AP_COUNT_BY_INDUSTRY = {
    "Public Venue": 8,
    "Corporate": 6,
    "Education": 7,
    "Healthcare": 5,
}
DEFAULT_AP_COUNT = 4

CAPACITY_BY_INDUSTRY = {
    "Public Venue": 1024,
    "Corporate": 512,
    "Education": 256,
}
DEFAULT_CAPACITY = 128

BUILDINGS_BY_INDUSTRY = {
    "Corporate": ["Main Building", "East Wing", "West Wing"],
    "Retail": ["Shopping Center"],
    "Hospitality": ["Hotel Building"],
    "Education": ["Academic Building A", "Academic Building B", "Library", "Student Center"],
}
DEFAULT_BUILDINGS = ["Main Facility"]

LOCATION_ZONES = [
    "Conference Room", "Open Office", "Lobby", "Cafeteria", "Corridor", "Common Area"
]
MAX_FLOOR = 5

# Client load model
BASE_CLIENT_LOAD = {
    "Public Venue": 200,
    "Corporate": 100,
    "Education": 80,
}
DEFAULT_CLIENT_LOAD = 50
PEAK_HOUR = 13
WEEKEND_LOAD_FACTOR = {
    "Corporate": 0.2,
    "Retail": 1.3,
}

# Signal strength model
RSSI_BASE_BY_INDUSTRY = {
    "Public Venue": -45,
    "Corporate": -55,
    "Education": -60,
    "Healthcare": -50,
    "Retail": -65,
}
DEFAULT_RSSI_BASE = -60

HARDWARE_RSSI_OFFSET = {
    "Cisco Meraki": 5,
    "HPE Aruba": 8,
    "Juniper Mist": 6,
    "Ubiquiti": 0,
}
DEFAULT_HARDWARE_OFFSET = -3

WEEKEND_RSSI_OFFSET = {
    "Corporate": 8,
    "Retail": -5,
}

RSSI_MIN = -90
RSSI_MAX = -30
RSSI_JITTER = 8

STANDARD_THROUGHPUT_MULTIPLIER = {
    "Wi-Fi 6E": 1.2,
    "Wi-Fi 6": 1.0,
}
DEFAULT_THROUGHPUT_MULTIPLIER = 0.8

# Industries that operate around the clock; others are measured 06:00-22:59
ALWAYS_ON_INDUSTRIES = ("Public Venue", "Healthcare", "Transportation")
BUSINESS_HOURS = (6, 22)


class SignalBand:
    """One RSSI quality band and the QoS ranges that go with it."""

    def __init__(self, name, min_rssi, throughput, latency, packet_loss, quality):
        self.name = name
        self.min_rssi = min_rssi
        self.throughput = throughput
        self.latency = latency
        self.packet_loss = packet_loss
        self.quality = quality

    def __repr__(self) -> str:
        return f"SignalBand({self.name!r}, min_rssi={self.min_rssi})"


# Ordered strongest first; the last band catches everything below -85 dBm
SIGNAL_BANDS: List[SignalBand] = [
    SignalBand("Excellent", -50, (90, 100), (1, 5), (0.0, 0.1), (8.5, 10.0)),
    SignalBand("Very Good", -67, (70, 90), (3, 15), (0.1, 0.5), (6.5, 8.5)),
    SignalBand("Okay", -75, (40, 60), (10, 50), (0.5, 2.0), (4.0, 6.5)),
    SignalBand("Weak", -85, (10, 30), (25, 150), (2.0, 10.0), (2.0, 4.0)),
    SignalBand("Unusable", RSSI_MIN, (1, 10), (100, 500), (10.0, 25.0), (1.0, 2.0)),
]


def signal_band(rssi_dbm: int) -> SignalBand:
    """Return the quality band for an RSSI reading."""
    for band in SIGNAL_BANDS:
        if rssi_dbm >= band.min_rssi:
            return band
    return SIGNAL_BANDS[-1]


def is_weekend(weekday: int) -> bool:
    """Saturday and Sunday (datetime.weekday() 5 and 6)."""
    return weekday >= 5
