"""
WiFiAnalytics - Status Snapshot Generator

Generates access point status facts with daily and weekly seasonality and an
injected firmware stability issue.
"""

import logging
import random
from datetime import datetime, timedelta
from typing import Dict, Iterator, List, Optional, Tuple

from wifi_analytics.generators import catalog
from wifi_analytics.models.dimensions import DimAccessPoint, DimNetwork
from wifi_analytics.models.facts import ApStatusRecord


logger = logging.getLogger(__name__)


def snapshot_timestamps(
    start: datetime,
    days: int,
    interval_minutes: int,
    until: datetime
) -> Iterator[datetime]:
    """
    Yield evenly spaced timestamps from start, never later than until.

    Args:
        start: First timestamp (normally midnight N days ago)
        days: Length of the history in days
        interval_minutes: Spacing between timestamps
        until: Reference "now"; later timestamps are skipped
    """
    steps = days * 24 * 60 // interval_minutes
    for step in range(steps):
        timestamp = start + timedelta(minutes=step * interval_minutes)
        if timestamp > until:
            return
        yield timestamp


class StatusGenerator:
    """
    Generator for ApStatusRecord facts.

    Client load = base(industry) x daily curve x weekly factor x noise.
    CPU and memory follow the client load with bounded jitter.
    """

    RANDOM_OFFLINE_PER_MILLE = 5

    def __init__(
        self,
        rng: random.Random,
        firmware_issue_window: Optional[Tuple[datetime, datetime]] = None
    ):
        """
        Initialize the generator.

        Args:
            rng: Seeded random source
            firmware_issue_window: (start, end) of the injected firmware issue
        """
        self.rng = rng
        self.firmware_issue_window = firmware_issue_window

    def generate(
        self,
        access_points: List[DimAccessPoint],
        networks: List[DimNetwork],
        timestamps: List[datetime]
    ) -> List[ApStatusRecord]:
        """
        Generate one status record per (timestamp, access point).

        Args:
            access_points: Access point dimension rows
            networks: Network dimension rows
            timestamps: Snapshot timestamps

        Returns:
            ApStatusRecord list ordered by timestamp, then ap_id
        """
        network_lookup = {network.network_id: network for network in networks}
        records = []

        for timestamp in timestamps:
            for access_point in access_points:
                network = network_lookup[access_point.network_id]
                records.append(self.build_record(timestamp, access_point, network))

        logger.info(
            f"[OK] Generated {len(records)} status records "
            f"({len(timestamps)} snapshots x {len(access_points)} APs)"
        )
        return records

    def build_record(
        self,
        timestamp: datetime,
        access_point: DimAccessPoint,
        network: DimNetwork
    ) -> ApStatusRecord:
        """Build a single status snapshot."""
        status = self.pick_status(timestamp, access_point)
        clients = self.client_count(timestamp, network.industry)

        cpu = 15 + (clients / 200 * 60) + self.rng.randint(-10, 15)
        memory = 35 + (clients / 200 * 40) + self.rng.randint(-5, 10)

        return ApStatusRecord(
            snapshot_timestamp=timestamp,
            ap_id=access_point.ap_id,
            network_id=access_point.network_id,
            status=status,
            connected_client_count=clients,
            cpu_utilization_percent=round(min(95.0, max(5.0, cpu)), 2),
            memory_utilization_percent=round(min(95.0, max(20.0, memory)), 2)
        )

    def in_firmware_issue(self, timestamp: datetime, access_point: DimAccessPoint) -> bool:
        """True when the AP is affected by the injected firmware issue."""
        if self.firmware_issue_window is None:
            return False
        start, end = self.firmware_issue_window
        return (
            access_point.ap_model == catalog.FIRMWARE_ISSUE_MODEL
            and access_point.firmware_version == catalog.FIRMWARE_ISSUE_VERSION
            and start <= timestamp <= end
        )

    def pick_status(self, timestamp: datetime, access_point: DimAccessPoint) -> str:
        """Draw Online/Offline, including the firmware issue scenario."""
        if self.in_firmware_issue(timestamp, access_point):
            if self.rng.randint(1, 100) <= catalog.FIRMWARE_ISSUE_OFFLINE_PCT:
                return "Offline"
        if self.rng.randint(1, 1000) <= self.RANDOM_OFFLINE_PER_MILLE:
            return "Offline"
        return "Online"

    def client_count(self, timestamp: datetime, industry: str) -> int:
        """Connected clients with daily and weekly seasonality."""
        base = catalog.BASE_CLIENT_LOAD.get(industry, catalog.DEFAULT_CLIENT_LOAD)
        daily = daily_load_factor(timestamp.hour)
        weekly = weekly_load_factor(timestamp, industry)
        noise = 0.7 + 0.6 * self.rng.random()
        return max(0, round(base * daily * weekly * noise))


def daily_load_factor(hour: int) -> float:
    """Triangular business-day curve peaking at 13:00, floor of 0.3."""
    return 0.3 + 0.7 * max(0.0, 1 - abs(hour - catalog.PEAK_HOUR) / 8)


def weekly_load_factor(timestamp: datetime, industry: str) -> float:
    """Weekend multiplier for industries with weekly patterns."""
    if catalog.is_weekend(timestamp.weekday()):
        return catalog.WEEKEND_LOAD_FACTOR.get(industry, 1.0)
    return 1.0


def build_client_load_index(records: List[ApStatusRecord]) -> Dict[Tuple[int, datetime], int]:
    """Index connected client counts by (ap_id, snapshot_timestamp)."""
    return {
        (record.ap_id, record.snapshot_timestamp): record.connected_client_count
        for record in records
    }
