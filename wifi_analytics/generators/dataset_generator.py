"""
WiFiAnalytics - Dataset Generator

Runs the individual generators in dependency order and bundles the results.
"""

import logging
import random
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterator, List, Optional, Tuple

from wifi_analytics.generators.access_point_generator import AccessPointGenerator, generate_networks
from wifi_analytics.generators.qos_generator import QosGenerator
from wifi_analytics.generators.status_generator import (
    StatusGenerator,
    build_client_load_index,
    snapshot_timestamps
)
from wifi_analytics.generators.telemetry_generator import TelemetryGenerator
from wifi_analytics.models.dimensions import DimAccessPoint, DimNetwork
from wifi_analytics.models.facts import ApStatusRecord, RawTelemetryRecord
from wifi_analytics.utils.config import GenerationConfig
from wifi_analytics.utils.performance import PerformanceTimer


logger = logging.getLogger(__name__)


@dataclass
class WifiDataset:
    """
    In-memory bundle of the generated tables.

    QoS measurements are not held here; stream them with
    DatasetGenerator.iter_qos().
    """
    networks: List[DimNetwork]
    access_points: List[DimAccessPoint]
    raw_telemetry: List[RawTelemetryRecord]
    status_records: List[ApStatusRecord]
    reference_time: datetime
    history_start: datetime
    firmware_issue_window: Optional[Tuple[datetime, datetime]] = None
    _client_load_index: Optional[Dict[Tuple[int, datetime], int]] = field(default=None, repr=False)

    @property
    def client_load_index(self) -> Dict[Tuple[int, datetime], int]:
        """Client counts keyed by (ap_id, snapshot time), built on first use."""
        if self._client_load_index is None:
            self._client_load_index = build_client_load_index(self.status_records)
        return self._client_load_index

    def summary(self) -> Dict[str, int]:
        """Row counts per table."""
        return {
            "networks": len(self.networks),
            "access_points": len(self.access_points),
            "raw_telemetry": len(self.raw_telemetry),
            "status_records": len(self.status_records)
        }


class DatasetGenerator:
    """
    Facade over the individual generators.

    Each generator gets its own random stream derived from the seed, so
    changing the history length does not reshuffle the AP inventory.
    """

    def __init__(self, config: GenerationConfig):
        self.config = config

    def _rng(self, stream: str) -> random.Random:
        return random.Random(f"{self.config.seed}:{stream}")

    def generate(self) -> WifiDataset:
        """
        Generate networks, access points, raw telemetry and status snapshots.

        Returns:
            WifiDataset bundle
        """
        reference_time = self.config.resolve_reference_time()
        history_start = self.config.history_start()
        issue_window = self.config.firmware_issue_window()

        logger.info(
            f"[...] Generating dataset: {self.config.history_days} days ending "
            f"{reference_time.isoformat()} (seed={self.config.seed})"
        )

        networks = generate_networks()
        access_points = AccessPointGenerator(
            self._rng("access_points"), reference_time.date()
        ).generate(networks)

        raw_telemetry = TelemetryGenerator(
            self._rng("telemetry"), reference_time
        ).generate(access_points, self.config.raw_records_per_ap)

        timestamps = list(snapshot_timestamps(
            history_start,
            self.config.history_days,
            self.config.status_interval_minutes,
            reference_time
        ))
        with PerformanceTimer("generate_status"):
            status_records = StatusGenerator(
                self._rng("status"), issue_window
            ).generate(access_points, networks, timestamps)

        dataset = WifiDataset(
            networks=networks,
            access_points=access_points,
            raw_telemetry=raw_telemetry,
            status_records=status_records,
            reference_time=reference_time,
            history_start=history_start,
            firmware_issue_window=issue_window
        )
        logger.info(f"[OK] Dataset generated: {dataset.summary()}")
        return dataset

    def iter_qos(self, dataset: WifiDataset) -> Iterator:
        """
        Stream QoS measurements for a generated dataset.

        Each call restarts the QoS random stream, so repeated calls yield
        identical records.
        """
        timestamps = snapshot_timestamps(
            dataset.history_start,
            self.config.history_days,
            self.config.qos_interval_minutes,
            dataset.reference_time
        )
        return QosGenerator(self._rng("qos")).generate(
            dataset.access_points,
            dataset.networks,
            timestamps,
            dataset.client_load_index
        )
