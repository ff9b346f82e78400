"""
WiFiAnalytics - Network Aggregator

Rolls status snapshots and QoS measurements up to access point, network,
industry and manufacturer level.
"""

import logging
import statistics
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple

from wifi_analytics.models.dimensions import DimAccessPoint, DimNetwork
from wifi_analytics.models.facts import ApStatusRecord, QosMetricRecord


logger = logging.getLogger(__name__)


class AggregateCalculator:
    """
    Helper class for aggregate calculation operations.

    Provides shared calculation methods for aggregators.
    """

    @staticmethod
    def calculate_percentile(values: List[float], percentile: int) -> Optional[float]:
        """
        Calculate percentile value from a list.

        Args:
            values: List of numeric values
            percentile: Percentile to calculate (0-100)

        Returns:
            Percentile value or None if empty
        """
        if not values:
            return None

        sorted_values = sorted(values)
        index = (len(sorted_values) - 1) * percentile / 100
        lower = int(index)
        upper = lower + 1

        if upper >= len(sorted_values):
            return sorted_values[-1]

        weight = index - lower
        return sorted_values[lower] * (1 - weight) + sorted_values[upper] * weight

    @staticmethod
    def coefficient_of_variation(values: List[float]) -> Optional[float]:
        """
        Sample standard deviation divided by the mean.

        Returns:
            Coefficient, or None with fewer than two values or a zero mean
        """
        if len(values) < 2:
            return None
        mean = statistics.mean(values)
        if mean == 0:
            return None
        return statistics.stdev(values) / mean


@dataclass
class UptimeSummary:
    """Online share of status snapshots for one grouping key."""
    key: Tuple
    total_snapshots: int = 0
    online_snapshots: int = 0
    client_counts: List[int] = field(default_factory=list, repr=False)

    def add(self, record: ApStatusRecord) -> None:
        self.total_snapshots += 1
        if record.is_online:
            self.online_snapshots += 1
        self.client_counts.append(record.connected_client_count)

    @property
    def uptime_pct(self) -> Optional[float]:
        if not self.total_snapshots:
            return None
        return round(self.online_snapshots / self.total_snapshots * 100, 4)

    @property
    def avg_clients(self) -> Optional[float]:
        return round(statistics.mean(self.client_counts), 2) if self.client_counts else None

    @property
    def p95_clients(self) -> Optional[float]:
        value = AggregateCalculator.calculate_percentile(self.client_counts, 95)
        return round(value, 2) if value is not None else None


@dataclass
class NetworkUptime:
    """Network uptime measured against its SLA target."""
    network_id: int
    network_name: str
    customer_name: str
    industry: str
    sla_target_pct: float
    uptime_pct: Optional[float]

    @property
    def meets_sla(self) -> bool:
        return self.uptime_pct is not None and self.uptime_pct >= self.sla_target_pct

    @property
    def sla_gap_pct(self) -> Optional[float]:
        """Shortfall below target (0 when met)."""
        if self.uptime_pct is None:
            return None
        return round(max(0.0, self.sla_target_pct - self.uptime_pct), 4)

    def to_dict(self) -> dict:
        return {
            "network_id": self.network_id,
            "network_name": self.network_name,
            "customer_name": self.customer_name,
            "industry": self.industry,
            "sla_target_pct": self.sla_target_pct,
            "uptime_pct": self.uptime_pct,
            "meets_sla": self.meets_sla,
            "sla_gap_pct": self.sla_gap_pct
        }


def _in_window(timestamp: datetime, window: Optional[Tuple[datetime, datetime]]) -> bool:
    if window is None:
        return True
    start, end = window
    return start <= timestamp <= end


class UptimeAggregator:
    """
    Uptime rollups from status snapshots.

    Handles:
    - Per access point and per (model, firmware) uptime
    - Per network uptime and SLA compliance
    - Per industry averages and their spread
    """

    def __init__(self, access_points: List[DimAccessPoint], networks: List[DimNetwork]):
        self.ap_lookup = {ap.ap_id: ap for ap in access_points}
        self.networks = networks

    def ap_uptime(
        self,
        records: Iterable[ApStatusRecord],
        window: Optional[Tuple[datetime, datetime]] = None
    ) -> Dict[int, UptimeSummary]:
        """Uptime per access point, optionally restricted to a time window."""
        summaries: Dict[int, UptimeSummary] = {}
        for record in records:
            if not _in_window(record.snapshot_timestamp, window):
                continue
            if record.ap_id not in summaries:
                summaries[record.ap_id] = UptimeSummary(key=(record.ap_id,))
            summaries[record.ap_id].add(record)
        return summaries

    def firmware_uptime(
        self,
        records: Iterable[ApStatusRecord],
        window: Optional[Tuple[datetime, datetime]] = None
    ) -> Dict[Tuple[str, str], UptimeSummary]:
        """
        Uptime per (AP model, firmware version).

        Snapshots of access points missing from the dimension are skipped.
        """
        summaries: Dict[Tuple[str, str], UptimeSummary] = {}
        for record in records:
            access_point = self.ap_lookup.get(record.ap_id)
            if access_point is None or not _in_window(record.snapshot_timestamp, window):
                continue
            key = (access_point.ap_model, access_point.firmware_version)
            if key not in summaries:
                summaries[key] = UptimeSummary(key=key)
            summaries[key].add(record)
        return summaries

    def network_uptime(self, records: Iterable[ApStatusRecord]) -> List[NetworkUptime]:
        """
        Uptime and SLA compliance per network.

        Args:
            records: Status snapshots

        Returns:
            NetworkUptime per network, in network order
        """
        grouped: Dict[int, UptimeSummary] = defaultdict(lambda: UptimeSummary(key=()))
        for record in records:
            grouped[record.network_id].add(record)

        results = [
            NetworkUptime(
                network_id=network.network_id,
                network_name=network.network_name,
                customer_name=network.customer_name,
                industry=network.industry,
                sla_target_pct=round(network.sla_uptime_pct, 4),
                uptime_pct=grouped[network.network_id].uptime_pct if network.network_id in grouped else None
            )
            for network in self.networks
        ]

        breaches = [result.network_name for result in results if result.uptime_pct is not None and not result.meets_sla]
        if breaches:
            logger.info(f"[INFO] {len(breaches)} networks below SLA target")
        return results

    @staticmethod
    def industry_uptime(network_uptimes: List[NetworkUptime]) -> Dict[str, float]:
        """Average network uptime per industry."""
        grouped: Dict[str, List[float]] = defaultdict(list)
        for result in network_uptimes:
            if result.uptime_pct is not None:
                grouped[result.industry].append(result.uptime_pct)
        return {
            industry: round(statistics.mean(values), 4)
            for industry, values in sorted(grouped.items())
        }

    @staticmethod
    def industry_variation(network_uptimes: List[NetworkUptime]) -> Optional[float]:
        """Coefficient of variation across industry uptime averages."""
        averages = list(UptimeAggregator.industry_uptime(network_uptimes).values())
        return AggregateCalculator.coefficient_of_variation(averages)


class ClientLoadProfile:
    """Average connected clients by hour of day."""

    def __init__(self, online_only: bool = True):
        self.online_only = online_only

    def hourly_profile(self, records: Iterable[ApStatusRecord]) -> Dict[int, float]:
        """
        Average client count per hour of day.

        Args:
            records: Status snapshots

        Returns:
            Mapping hour (0-23) -> average clients, only hours with data
        """
        totals: Dict[int, List[int]] = defaultdict(lambda: [0, 0])
        for record in records:
            if self.online_only and not record.is_online:
                continue
            bucket = totals[record.snapshot_timestamp.hour]
            bucket[0] += record.connected_client_count
            bucket[1] += 1

        return {
            hour: round(total / count, 2)
            for hour, (total, count) in sorted(totals.items())
            if count
        }

    @staticmethod
    def peak_trough_ratio(profile: Dict[int, float]) -> Optional[float]:
        """Busiest hour average divided by quietest hour average."""
        if not profile:
            return None
        trough = min(profile.values())
        if trough <= 0:
            return None
        return round(max(profile.values()) / trough, 2)


@dataclass
class QosSummary:
    """Running QoS statistics for one group."""
    group: str
    measurements: int = 0
    rssi_total: int = 0
    min_rssi: Optional[int] = None
    throughput_total: float = 0.0
    latency_total: int = 0
    coverage_gaps: int = 0

    def add(self, record: QosMetricRecord) -> None:
        self.measurements += 1
        self.rssi_total += record.rssi_dbm
        self.throughput_total += record.throughput_mbps
        self.latency_total += record.latency_ms
        if self.min_rssi is None or record.rssi_dbm < self.min_rssi:
            self.min_rssi = record.rssi_dbm
        if record.rssi_dbm <= -80:
            self.coverage_gaps += 1

    @property
    def avg_rssi(self) -> Optional[float]:
        return round(self.rssi_total / self.measurements, 2) if self.measurements else None

    @property
    def avg_throughput(self) -> Optional[float]:
        return round(self.throughput_total / self.measurements, 2) if self.measurements else None

    @property
    def avg_latency(self) -> Optional[float]:
        return round(self.latency_total / self.measurements, 2) if self.measurements else None

    @property
    def coverage_gap_pct(self) -> Optional[float]:
        return round(self.coverage_gaps / self.measurements * 100, 2) if self.measurements else None

    def to_dict(self) -> dict:
        return {
            "group": self.group,
            "measurements": self.measurements,
            "avg_rssi": self.avg_rssi,
            "min_rssi": self.min_rssi,
            "avg_throughput": self.avg_throughput,
            "avg_latency": self.avg_latency,
            "coverage_gap_pct": self.coverage_gap_pct
        }


class QosAggregator:
    """
    Single-pass QoS rollups by manufacturer and by industry.

    Measurements are consumed as a stream; nothing per-record is retained.
    """

    def __init__(self, access_points: List[DimAccessPoint], networks: List[DimNetwork]):
        self.ap_lookup = {ap.ap_id: ap for ap in access_points}
        self.network_lookup = {network.network_id: network for network in networks}
        self.by_manufacturer: Dict[str, QosSummary] = {}
        self.by_industry: Dict[str, QosSummary] = {}

    def add(self, record: QosMetricRecord) -> None:
        access_point = self.ap_lookup.get(record.ap_id)
        network = self.network_lookup.get(record.network_id)
        if access_point is not None:
            self._summary(self.by_manufacturer, access_point.manufacturer).add(record)
        if network is not None:
            self._summary(self.by_industry, network.industry).add(record)

    def consume(self, records: Iterable[QosMetricRecord]) -> int:
        """Feed a stream of measurements; returns the number consumed."""
        count = 0
        for record in records:
            self.add(record)
            count += 1
        logger.info(f"[OK] Aggregated {count} QoS measurements")
        return count

    @staticmethod
    def _summary(groups: Dict[str, QosSummary], key: str) -> QosSummary:
        if key not in groups:
            groups[key] = QosSummary(group=key)
        return groups[key]

    def manufacturer_summaries(self) -> List[QosSummary]:
        """Summaries ordered strongest average signal first."""
        return sorted(self.by_manufacturer.values(), key=lambda summary: -(summary.avg_rssi or -999))

    def industry_summaries(self) -> List[QosSummary]:
        return sorted(self.by_industry.values(), key=lambda summary: -(summary.avg_rssi or -999))
