"""
WiFiAnalytics - QoS Analysis

Enriches QoS facts with network and access point context, signal
categories and alert flags. Mirrors the ANALYTICS.VW_NETWORK_QOS_ANALYSIS view.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Iterator, List, Optional

from wifi_analytics.generators.catalog import signal_band
from wifi_analytics.models.dimensions import DimAccessPoint, DimNetwork
from wifi_analytics.models.facts import QosMetricRecord
from wifi_analytics.utils.config import EnvironmentConfig


logger = logging.getLogger(__name__)


def qos_alert_category(
    rssi_dbm: int,
    packet_loss_percent: float,
    latency_ms: int,
    throughput_mbps: float
) -> str:
    """First matching alert wins: coverage, loss, latency, throughput."""
    if rssi_dbm <= -80:
        return "Coverage Gap"
    if packet_loss_percent > 5.0:
        return "Quality Issue"
    if latency_ms > 100:
        return "Latency Problem"
    if throughput_mbps < 10:
        return "Throughput Issue"
    return "Normal"


def day_of_week(timestamp: datetime) -> int:
    """Warehouse day-of-week numbering: 0 = Sunday ... 6 = Saturday."""
    return (timestamp.weekday() + 1) % 7


@dataclass
class QosAnalysisRow:
    """One row of the network QoS analysis view."""
    metric: QosMetricRecord
    network: Optional[DimNetwork]
    access_point: Optional[DimAccessPoint]

    @property
    def signal_strength_category(self) -> str:
        return signal_band(self.metric.rssi_dbm).name

    @property
    def qos_alert_category(self) -> str:
        return qos_alert_category(
            self.metric.rssi_dbm,
            self.metric.packet_loss_percent,
            self.metric.latency_ms,
            self.metric.throughput_mbps
        )

    @property
    def capacity_utilization_percent(self) -> Optional[float]:
        if self.access_point is None:
            return None
        ratio = self.access_point.load_ratio(self.metric.connected_clients_sample)
        return round(ratio * 100, 2) if ratio is not None else None

    @property
    def hour_of_day(self) -> int:
        return self.metric.metric_timestamp.hour

    @property
    def day_of_week(self) -> int:
        return day_of_week(self.metric.metric_timestamp)

    @property
    def measurement_date(self) -> date:
        return self.metric.metric_timestamp.date()

    def to_dict(self) -> dict:
        """Flatten into the view's column set."""
        row = self.metric.to_dict()
        network = self.network
        access_point = self.access_point
        row.update({
            "network_name": network.network_name if network else None,
            "customer_name": network.customer_name if network else None,
            "industry": network.industry if network else None,
            "location_city": network.location_city if network else None,
            "sla_uptime_target": network.sla_uptime_target if network else None,
            "ap_model": access_point.ap_model if access_point else None,
            "manufacturer": access_point.manufacturer if access_point else None,
            "wifi_standard": access_point.wifi_standard if access_point else None,
            "firmware_version": access_point.firmware_version if access_point else None,
            "location_building": access_point.location_building if access_point else None,
            "location_floor": access_point.location_floor if access_point else None,
            "location_zone": access_point.location_zone if access_point else None,
            "max_client_capacity": access_point.max_client_capacity if access_point else None,
            "signal_strength_category": self.signal_strength_category,
            "qos_alert_category": self.qos_alert_category,
            "capacity_utilization_percent": self.capacity_utilization_percent,
            "hour_of_day": self.hour_of_day,
            "day_of_week": self.day_of_week,
            "measurement_date": self.measurement_date.isoformat()
        })
        return row


class QosAnalyzer:
    """Joins QoS facts to the dimensions, like the analysis view."""

    def __init__(self, access_points: List[DimAccessPoint], networks: List[DimNetwork]):
        self.ap_lookup = {ap.ap_id: ap for ap in access_points}
        self.network_lookup = {network.network_id: network for network in networks}

    def analyze(self, metric: QosMetricRecord) -> QosAnalysisRow:
        """Enrich a single measurement."""
        return QosAnalysisRow(
            metric=metric,
            network=self.network_lookup.get(metric.network_id),
            access_point=self.ap_lookup.get(metric.ap_id)
        )

    def iter_rows(self, metrics: Iterable[QosMetricRecord]) -> Iterator[QosAnalysisRow]:
        """Lazily enrich a stream of measurements."""
        for metric in metrics:
            yield self.analyze(metric)


def network_qos_view_sql(env: EnvironmentConfig) -> str:
    """Render DDL for the network QoS analysis view."""
    transformed = env.transformed_schema

    return f"""
    CREATE OR REPLACE VIEW {env.analytics_schema}.VW_NETWORK_QOS_ANALYSIS AS
    SELECT
        q.METRIC_TIMESTAMP,
        q.AP_ID,
        q.NETWORK_ID,
        n.NETWORK_NAME,
        n.CUSTOMER_NAME,
        n.INDUSTRY,
        n.LOCATION_CITY,
        n.SLA_UPTIME_TARGET,
        ap.AP_MODEL,
        ap.MANUFACTURER,
        ap.WIFI_STANDARD,
        ap.FIRMWARE_VERSION,
        ap.LOCATION_BUILDING,
        ap.LOCATION_FLOOR,
        ap.LOCATION_ZONE,
        ap.MAX_CLIENT_CAPACITY,
        q.RSSI_DBM,
        q.THROUGHPUT_MBPS,
        q.LATENCY_MS,
        q.PACKET_LOSS_PERCENT,
        q.CONNECTED_CLIENTS_SAMPLE,
        q.INTERFERENCE_LEVEL,
        q.SIGNAL_QUALITY_SCORE,
        CASE
            WHEN q.RSSI_DBM >= -50 THEN 'Excellent'
            WHEN q.RSSI_DBM >= -67 THEN 'Very Good'
            WHEN q.RSSI_DBM >= -75 THEN 'Okay'
            WHEN q.RSSI_DBM >= -85 THEN 'Weak'
            ELSE 'Unusable'
        END AS signal_strength_category,
        CASE
            WHEN q.RSSI_DBM <= -80 THEN 'Coverage Gap'
            WHEN q.PACKET_LOSS_PERCENT > 5.0 THEN 'Quality Issue'
            WHEN q.LATENCY_MS > 100 THEN 'Latency Problem'
            WHEN q.THROUGHPUT_MBPS < 10 THEN 'Throughput Issue'
            ELSE 'Normal'
        END AS qos_alert_category,
        ROUND((q.CONNECTED_CLIENTS_SAMPLE::FLOAT / NULLIF(ap.MAX_CLIENT_CAPACITY, 0)) * 100, 2)
            AS capacity_utilization_percent,
        EXTRACT(HOUR FROM q.METRIC_TIMESTAMP) AS hour_of_day,
        EXTRACT(DAYOFWEEK FROM q.METRIC_TIMESTAMP) AS day_of_week,
        DATE_TRUNC('day', q.METRIC_TIMESTAMP) AS measurement_date
    FROM {transformed}.FACT_QOS_METRICS q
    LEFT JOIN {transformed}.DIM_ACCESS_POINTS ap ON q.AP_ID = ap.AP_ID
    LEFT JOIN {transformed}.DIM_NETWORKS n ON q.NETWORK_ID = n.NETWORK_ID
    """
