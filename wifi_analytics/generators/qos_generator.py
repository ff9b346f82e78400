"""
WiFiAnalytics - QoS Generator

Synthesises per-minute WiFi quality measurements. Signal strength (RSSI) is
built from additive contributions and clamped; throughput, latency, packet
loss and the quality score are then drawn from the band the RSSI falls in.

RSSI = industry base
     + hardware offset (manufacturer tier)
     + load penalty (connected clients)
     + time-of-day offset
     + weekend offset (industry specific)
     + uniform jitter in [-8, 8]
clamped to [-90, -30] dBm.
"""

import logging
import random
from datetime import datetime, timedelta
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from wifi_analytics.generators import catalog
from wifi_analytics.models.dimensions import DimAccessPoint, DimNetwork
from wifi_analytics.models.facts import QosMetricRecord


logger = logging.getLogger(__name__)

# Status snapshots within this many minutes supply the client load
CLIENT_LOAD_TOLERANCE_MINUTES = 2


def load_penalty(client_load: int) -> int:
    """RSSI penalty from client-generated interference."""
    if client_load > 80:
        return -15
    if client_load > 50:
        return -8
    if client_load > 20:
        return -3
    return 0


def time_of_day_offset(hour: int) -> int:
    """Lunch hour and business hours degrade signal; nights improve it."""
    if 12 <= hour <= 13:
        return -5
    if 9 <= hour <= 17:
        return -3
    if not 7 <= hour <= 19:
        return 5
    return 0


def weekend_offset(timestamp: datetime, industry: str) -> int:
    """Offices quieten at the weekend; retail gets busier."""
    if catalog.is_weekend(timestamp.weekday()):
        return catalog.WEEKEND_RSSI_OFFSET.get(industry, 0)
    return 0


def interference_level(rssi_dbm: int, client_load: int) -> str:
    """Classify interference from signal strength and client load."""
    if rssi_dbm <= -80 or client_load > 100:
        return "High"
    if rssi_dbm <= -70 or client_load > 50:
        return "Medium"
    if rssi_dbm <= -60 or client_load > 20:
        return "Low"
    return "Minimal"


def is_measured(timestamp: datetime, industry: str) -> bool:
    """Round-the-clock industries are always measured, others only 06:00-22:59."""
    if industry in catalog.ALWAYS_ON_INDUSTRIES:
        return True
    first_hour, last_hour = catalog.BUSINESS_HOURS
    return first_hour <= timestamp.hour <= last_hour


class QosGenerator:
    """
    Generator for QosMetricRecord facts.

    Every draw comes from the injected random source, so a fixed seed and
    the same inputs replay the same measurements.
    """

    def __init__(self, rng: random.Random):
        self.rng = rng

    def signal_strength(
        self,
        industry: str,
        manufacturer: str,
        client_load: int,
        timestamp: datetime
    ) -> int:
        """
        Compute RSSI in dBm for one measurement.

        Args:
            industry: Network industry class
            manufacturer: AP manufacturer (hardware tier)
            client_load: Connected clients at measurement time
            timestamp: Measurement time

        Returns:
            RSSI clamped to [-90, -30]
        """
        rssi = (
            catalog.RSSI_BASE_BY_INDUSTRY.get(industry, catalog.DEFAULT_RSSI_BASE)
            + catalog.HARDWARE_RSSI_OFFSET.get(manufacturer, catalog.DEFAULT_HARDWARE_OFFSET)
            + load_penalty(client_load)
            + time_of_day_offset(timestamp.hour)
            + weekend_offset(timestamp, industry)
            + self.rng.randint(-catalog.RSSI_JITTER, catalog.RSSI_JITTER)
        )
        return max(catalog.RSSI_MIN, min(catalog.RSSI_MAX, rssi))

    def measure(
        self,
        timestamp: datetime,
        access_point: DimAccessPoint,
        network: DimNetwork,
        client_load: Optional[int]
    ) -> QosMetricRecord:
        """
        Build one QoS measurement.

        Args:
            timestamp: Measurement time
            access_point: Measured access point
            network: Network the access point belongs to
            client_load: Connected clients, None when no snapshot matched

        Returns:
            QosMetricRecord
        """
        clients = client_load or 0
        rssi = self.signal_strength(network.industry, access_point.manufacturer, clients, timestamp)
        band = catalog.signal_band(rssi)

        multiplier = catalog.STANDARD_THROUGHPUT_MULTIPLIER.get(
            access_point.wifi_standard, catalog.DEFAULT_THROUGHPUT_MULTIPLIER
        )

        return QosMetricRecord(
            metric_timestamp=timestamp,
            ap_id=access_point.ap_id,
            network_id=access_point.network_id,
            rssi_dbm=rssi,
            throughput_mbps=round(self.rng.randint(*band.throughput) * multiplier, 2),
            latency_ms=self.rng.randint(*band.latency),
            packet_loss_percent=round(self.rng.uniform(*band.packet_loss), 2),
            connected_clients_sample=clients,
            interference_level=interference_level(rssi, clients),
            signal_quality_score=round(self.rng.uniform(*band.quality), 1)
        )

    def generate(
        self,
        access_points: List[DimAccessPoint],
        networks: List[DimNetwork],
        timestamps: Iterable[datetime],
        client_load_index: Dict[Tuple[int, datetime], int]
    ) -> Iterator[QosMetricRecord]:
        """
        Stream QoS measurements for every (timestamp, access point).

        Args:
            access_points: Access point dimension rows
            networks: Network dimension rows
            timestamps: Measurement timestamps
            client_load_index: Client counts keyed by (ap_id, snapshot time)

        Yields:
            QosMetricRecord, skipping off-hours for non 24/7 industries
        """
        network_lookup = {network.network_id: network for network in networks}
        count = 0

        for timestamp in timestamps:
            for access_point in access_points:
                network = network_lookup[access_point.network_id]
                if not is_measured(timestamp, network.industry):
                    continue
                client_load = lookup_client_load(client_load_index, access_point.ap_id, timestamp)
                count += 1
                yield self.measure(timestamp, access_point, network, client_load)

        logger.info(f"[OK] Generated {count} QoS measurements")


def lookup_client_load(
    index: Dict[Tuple[int, datetime], int],
    ap_id: int,
    timestamp: datetime,
    tolerance_minutes: int = CLIENT_LOAD_TOLERANCE_MINUTES
) -> Optional[int]:
    """
    Find the client count from the nearest status snapshot.

    Args:
        index: Client counts keyed by (ap_id, snapshot time)
        ap_id: Access point id
        timestamp: Measurement time
        tolerance_minutes: Maximum distance to a snapshot

    Returns:
        Client count, or None when no snapshot is close enough
    """
    for distance in range(tolerance_minutes + 1):
        for sign in (-1, 1) if distance else (1,):
            key = (ap_id, timestamp + timedelta(minutes=sign * distance))
            if key in index:
                return index[key]
    return None
