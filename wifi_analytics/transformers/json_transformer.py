"""
WiFiAnalytics - JSON Telemetry Transformer

Turns raw JSON telemetry into relational rows. Paths use the warehouse's
colon notation ("network_telemetry:status_metrics:connected_clients") so the
same expressions appear in the rendered view DDL and in the in-process
transformation.
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional

from wifi_analytics.models.dimensions import DimAccessPoint, DimNetwork
from wifi_analytics.models.facts import RawTelemetryRecord
from wifi_analytics.utils.config import EnvironmentConfig


logger = logging.getLogger(__name__)


ROOT = "network_telemetry"

# View column -> (JSON path, cast type)
TELEMETRY_FIELDS = {
    "ap_id": (f"{ROOT}:ap_id", "INTEGER"),
    "measurement_timestamp": (f"{ROOT}:timestamp", "TIMESTAMP_NTZ"),
    "status": (f"{ROOT}:status_metrics:operational_status", "VARCHAR"),
    "connected_clients": (f"{ROOT}:status_metrics:connected_clients", "INTEGER"),
    "cpu_utilization_percent": (f"{ROOT}:status_metrics:resource_utilization:cpu_percent", "DECIMAL(5,2)"),
    "memory_utilization_percent": (f"{ROOT}:status_metrics:resource_utilization:memory_percent", "DECIMAL(5,2)"),
    "building_name": (f"{ROOT}:location_context:building", "VARCHAR"),
    "floor_number": (f"{ROOT}:location_context:floor", "INTEGER"),
    "zone_name": (f"{ROOT}:location_context:zone", "VARCHAR"),
}


def extract_path(document: Any, path: str) -> Any:
    """
    Navigate a JSON document with a colon-separated path.

    Numeric segments index into arrays. Missing keys return None.

    Args:
        document: Parsed JSON value
        path: Path such as "network_telemetry:location_context:floor"

    Returns:
        The value at the path, or None
    """
    current = document
    for segment in path.split(":"):
        if isinstance(current, dict):
            current = current.get(segment)
        elif isinstance(current, list) and segment.isdigit():
            index = int(segment)
            current = current[index] if index < len(current) else None
        else:
            return None
        if current is None:
            return None
    return current


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO or 'YYYY-MM-DD HH:MM:SS' string into a naive datetime."""
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text).replace(tzinfo=None)


def cast_value(value: Any, sql_type: str) -> Any:
    """
    Cast an extracted JSON value to a warehouse type.

    Args:
        value: Extracted value (None passes through)
        sql_type: INTEGER, FLOAT, VARCHAR, TIMESTAMP_NTZ or DECIMAL(p,s)

    Returns:
        Cast value

    Raises:
        ValueError: If the value cannot be cast or the type is unknown
    """
    if value is None:
        return None

    base_type = sql_type.split("(")[0].upper()

    if base_type == "INTEGER":
        if isinstance(value, bool):
            raise ValueError(f"Cannot cast boolean to INTEGER: {value}")
        number = float(value)
        if not math.isfinite(number):
            raise ValueError(f"Cannot cast non-finite number to INTEGER: {value}")
        return int(round(number))
    if base_type == "FLOAT":
        return float(value)
    if base_type == "DECIMAL":
        scale = 0
        if "(" in sql_type:
            scale = int(sql_type.split(",")[1].rstrip(")").strip())
        return round(float(value), scale)
    if base_type == "VARCHAR":
        return value if isinstance(value, str) else str(value)
    if base_type == "TIMESTAMP_NTZ":
        return parse_timestamp(value)

    raise ValueError(f"Unsupported cast type: {sql_type}")


def try_cast(value: Any, sql_type: str) -> Any:
    """Like cast_value but returns None when the cast fails."""
    try:
        return cast_value(value, sql_type)
    except (TypeError, ValueError, OverflowError) as error:
        logger.debug(f"Cast of {value!r} to {sql_type} failed: {error}")
        return None


def flatten(document: Any, path: str) -> Iterator[Dict[str, Any]]:
    """
    Yield one entry per element of the array at path.

    Each entry carries the element under "value" and its position under
    "index". A missing path or a non-array value yields nothing.
    """
    array = extract_path(document, path)
    if not isinstance(array, list):
        return
    for index, element in enumerate(array):
        yield {"index": index, "value": element}


@dataclass
class ConnectedDeviceRow:
    """One client device flattened out of a telemetry document."""
    ap_id: Optional[int]
    measurement_time: Optional[datetime]
    device_mac: Optional[str]
    signal_strength_dbm: Optional[int]
    data_usage_mb: Optional[float]

    def to_dict(self) -> dict:
        return {
            "ap_id": self.ap_id,
            "measurement_time": self.measurement_time.isoformat() if self.measurement_time else None,
            "device_mac": self.device_mac,
            "signal_strength_dbm": self.signal_strength_dbm,
            "data_usage_mb": self.data_usage_mb
        }


def flatten_connected_devices(document: Dict[str, Any]) -> List[ConnectedDeviceRow]:
    """Expand the connected_devices array into per-device rows."""
    ap_id = try_cast(extract_path(document, f"{ROOT}:ap_id"), "INTEGER")
    measured = try_cast(extract_path(document, f"{ROOT}:timestamp"), "TIMESTAMP_NTZ")

    return [
        ConnectedDeviceRow(
            ap_id=ap_id,
            measurement_time=measured,
            device_mac=try_cast(extract_path(device["value"], "mac"), "VARCHAR"),
            signal_strength_dbm=try_cast(extract_path(device["value"], "signal_strength"), "INTEGER"),
            data_usage_mb=try_cast(extract_path(device["value"], "data_usage_mb"), "DECIMAL(10,2)")
        )
        for device in flatten(document, f"{ROOT}:connected_devices")
    ]


@dataclass
class ApPerformanceRow:
    """
    One row of the AP performance view.

    Telemetry fields come from the JSON document; network and AP context
    come from left joins on the dimensions and may be None.
    """
    record_id: int
    ap_id: Optional[int]
    measurement_timestamp: Optional[datetime]
    network_id: Optional[int]
    network_name: Optional[str]
    customer_name: Optional[str]
    industry: Optional[str]
    ap_model: Optional[str]
    manufacturer: Optional[str]
    status: Optional[str]
    connected_clients: Optional[int]
    cpu_utilization_percent: Optional[float]
    memory_utilization_percent: Optional[float]
    building_name: Optional[str]
    floor_number: Optional[int]
    zone_name: Optional[str]
    load_category: str
    health_status: str
    data_ingested_timestamp: Optional[datetime] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for export."""
        return {
            "record_id": self.record_id,
            "ap_id": self.ap_id,
            "measurement_timestamp": (
                self.measurement_timestamp.isoformat() if self.measurement_timestamp else None
            ),
            "network_id": self.network_id,
            "network_name": self.network_name,
            "customer_name": self.customer_name,
            "industry": self.industry,
            "ap_model": self.ap_model,
            "manufacturer": self.manufacturer,
            "status": self.status,
            "connected_clients": self.connected_clients,
            "cpu_utilization_percent": self.cpu_utilization_percent,
            "memory_utilization_percent": self.memory_utilization_percent,
            "building_name": self.building_name,
            "floor_number": self.floor_number,
            "zone_name": self.zone_name,
            "load_category": self.load_category,
            "health_status": self.health_status,
            "data_ingested_timestamp": (
                self.data_ingested_timestamp.isoformat() if self.data_ingested_timestamp else None
            )
        }


def classify_load(load_ratio: Optional[float]) -> str:
    """Bucket clients-to-capacity ratio."""
    if load_ratio is not None and load_ratio > 0.8:
        return "High Load"
    if load_ratio is not None and load_ratio > 0.5:
        return "Medium Load"
    return "Low Load"


def classify_health(
    status: Optional[str],
    cpu_percent: Optional[float],
    memory_percent: Optional[float],
    load_ratio: Optional[float]
) -> str:
    """Critical when offline, Warning on resource or capacity pressure."""
    if status == "Offline":
        return "Critical"
    if (cpu_percent is not None and cpu_percent > 80) or (memory_percent is not None and memory_percent > 85):
        return "Warning"
    if load_ratio is not None and load_ratio > 0.9:
        return "Warning"
    return "Healthy"


class TelemetryTransformer:
    """
    Transformer from raw telemetry documents to ApPerformanceRow.

    Handles:
    - Path extraction and casting
    - Left joins to the access point and network dimensions
    - Derived load and health categories
    """

    def __init__(self, access_points: List[DimAccessPoint], networks: List[DimNetwork]):
        self.ap_lookup = {ap.ap_id: ap for ap in access_points}
        self.network_lookup = {network.network_id: network for network in networks}

    def extract_fields(self, document: Dict[str, Any]) -> Dict[str, Any]:
        """Extract and cast every telemetry field of one document."""
        return {
            column: try_cast(extract_path(document, path), sql_type)
            for column, (path, sql_type) in TELEMETRY_FIELDS.items()
        }

    def transform_record(self, record: RawTelemetryRecord) -> ApPerformanceRow:
        """Transform one raw record into a performance row."""
        fields = self.extract_fields(record.telemetry_data)

        access_point = self.ap_lookup.get(fields["ap_id"])
        network = self.network_lookup.get(access_point.network_id) if access_point else None
        load_ratio = access_point.load_ratio(fields["connected_clients"]) if access_point else None

        return ApPerformanceRow(
            record_id=record.record_id,
            ap_id=fields["ap_id"],
            measurement_timestamp=fields["measurement_timestamp"],
            network_id=access_point.network_id if access_point else None,
            network_name=network.network_name if network else None,
            customer_name=network.customer_name if network else None,
            industry=network.industry if network else None,
            ap_model=access_point.ap_model if access_point else None,
            manufacturer=access_point.manufacturer if access_point else None,
            status=fields["status"],
            connected_clients=fields["connected_clients"],
            cpu_utilization_percent=fields["cpu_utilization_percent"],
            memory_utilization_percent=fields["memory_utilization_percent"],
            building_name=fields["building_name"],
            floor_number=fields["floor_number"],
            zone_name=fields["zone_name"],
            load_category=classify_load(load_ratio),
            health_status=classify_health(
                fields["status"],
                fields["cpu_utilization_percent"],
                fields["memory_utilization_percent"],
                load_ratio
            ),
            data_ingested_timestamp=record.ingested_at
        )

    def to_performance_rows(self, records: List[RawTelemetryRecord]) -> List[ApPerformanceRow]:
        """
        Transform raw telemetry into performance rows.

        Args:
            records: Raw telemetry staging records

        Returns:
            ApPerformanceRow list in the same order
        """
        rows = [self.transform_record(record) for record in records]
        unmatched = sum(1 for row in rows if row.network_name is None)
        if unmatched:
            logger.warning(f"[WARN] {unmatched} telemetry records did not match an access point")
        logger.info(f"[OK] Transformed {len(rows)} telemetry records")
        return rows


def _json_expr(alias: str, column: str) -> str:
    path, sql_type = TELEMETRY_FIELDS[column]
    return f"{alias}.TELEMETRY_DATA:{path}::{sql_type}"


def ap_performance_view_sql(env: EnvironmentConfig) -> str:
    """Render DDL for the AP performance view."""
    raw = f"{env.raw_schema}.RAW_NETWORK_TELEMETRY"
    aps = f"{env.transformed_schema}.DIM_ACCESS_POINTS"
    nets = f"{env.transformed_schema}.DIM_NETWORKS"

    return f"""
    CREATE OR REPLACE VIEW {env.analytics_schema}.VW_AP_PERFORMANCE AS
    SELECT
        t.RECORD_ID,
        {_json_expr('t', 'ap_id')} AS ap_id,
        {_json_expr('t', 'measurement_timestamp')} AS measurement_timestamp,
        ap.NETWORK_ID,
        n.NETWORK_NAME,
        n.CUSTOMER_NAME,
        n.INDUSTRY,
        ap.AP_MODEL,
        ap.MANUFACTURER,
        {_json_expr('t', 'status')} AS status,
        {_json_expr('t', 'connected_clients')} AS connected_clients,
        {_json_expr('t', 'cpu_utilization_percent')} AS cpu_utilization_percent,
        {_json_expr('t', 'memory_utilization_percent')} AS memory_utilization_percent,
        {_json_expr('t', 'building_name')} AS building_name,
        {_json_expr('t', 'floor_number')} AS floor_number,
        {_json_expr('t', 'zone_name')} AS zone_name,
        CASE
            WHEN connected_clients::FLOAT / NULLIF(ap.MAX_CLIENT_CAPACITY, 0) > 0.8 THEN 'High Load'
            WHEN connected_clients::FLOAT / NULLIF(ap.MAX_CLIENT_CAPACITY, 0) > 0.5 THEN 'Medium Load'
            ELSE 'Low Load'
        END AS load_category,
        CASE
            WHEN status = 'Offline' THEN 'Critical'
            WHEN cpu_utilization_percent > 80 OR memory_utilization_percent > 85 THEN 'Warning'
            WHEN connected_clients::FLOAT / NULLIF(ap.MAX_CLIENT_CAPACITY, 0) > 0.9 THEN 'Warning'
            ELSE 'Healthy'
        END AS health_status,
        t.INGESTED_AT AS data_ingested_timestamp
    FROM {raw} t
    LEFT JOIN {aps} ap
        ON {_json_expr('t', 'ap_id')} = ap.AP_ID
    LEFT JOIN {nets} n
        ON ap.NETWORK_ID = n.NETWORK_ID
    """
