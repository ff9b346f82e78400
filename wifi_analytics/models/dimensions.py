"""
WiFiAnalytics - Dimension Models

Data models for dimension tables in the data warehouse.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass
class DimNetwork:
    """
    Network dimension - a customer site or organization network.

    Primary Key: network_id
    """
    network_id: int
    network_name: str
    customer_name: str
    industry: str
    location_city: str
    location_country: str
    sla_uptime_target: float  # Fraction, e.g. 0.9999
    created_date: date

    COLUMNS = (
        "NETWORK_ID", "NETWORK_NAME", "CUSTOMER_NAME", "INDUSTRY",
        "LOCATION_CITY", "LOCATION_COUNTRY", "SLA_UPTIME_TARGET", "CREATED_DATE"
    )

    def to_dict(self) -> dict:
        """Convert to dictionary for database insertion."""
        return {
            "network_id": self.network_id,
            "network_name": self.network_name,
            "customer_name": self.customer_name,
            "industry": self.industry,
            "location_city": self.location_city,
            "location_country": self.location_country,
            "sla_uptime_target": self.sla_uptime_target,
            "created_date": self.created_date.isoformat()
        }

    def to_row(self) -> tuple:
        """Return values in table column order."""
        return (
            self.network_id, self.network_name, self.customer_name, self.industry,
            self.location_city, self.location_country, self.sla_uptime_target,
            self.created_date.isoformat()
        )

    @property
    def sla_uptime_pct(self) -> float:
        """SLA target expressed as a percentage."""
        return self.sla_uptime_target * 100


@dataclass
class DimAccessPoint:
    """
    Access point dimension - a physical AP belonging to one network.

    Primary Key: ap_id
    Foreign Key: network_id -> DimNetwork
    """
    ap_id: int
    network_id: int
    ap_mac_address: str
    ap_model: str
    manufacturer: str
    wifi_standard: str
    max_client_capacity: int
    deployment_date: date
    firmware_version: str
    location_building: str
    location_floor: int
    location_zone: str

    COLUMNS = (
        "AP_ID", "NETWORK_ID", "AP_MAC_ADDRESS", "AP_MODEL", "MANUFACTURER",
        "WIFI_STANDARD", "MAX_CLIENT_CAPACITY", "DEPLOYMENT_DATE", "FIRMWARE_VERSION",
        "LOCATION_BUILDING", "LOCATION_FLOOR", "LOCATION_ZONE"
    )

    def to_dict(self) -> dict:
        """Convert to dictionary for database insertion."""
        return {
            "ap_id": self.ap_id,
            "network_id": self.network_id,
            "ap_mac_address": self.ap_mac_address,
            "ap_model": self.ap_model,
            "manufacturer": self.manufacturer,
            "wifi_standard": self.wifi_standard,
            "max_client_capacity": self.max_client_capacity,
            "deployment_date": self.deployment_date.isoformat(),
            "firmware_version": self.firmware_version,
            "location_building": self.location_building,
            "location_floor": self.location_floor,
            "location_zone": self.location_zone
        }

    def to_row(self) -> tuple:
        """Return values in table column order."""
        return (
            self.ap_id, self.network_id, self.ap_mac_address, self.ap_model,
            self.manufacturer, self.wifi_standard, self.max_client_capacity,
            self.deployment_date.isoformat(), self.firmware_version,
            self.location_building, self.location_floor, self.location_zone
        )

    def load_ratio(self, client_count: Optional[int]) -> Optional[float]:
        """Connected clients as a fraction of capacity."""
        if client_count is None or not self.max_client_capacity:
            return None
        return client_count / self.max_client_capacity
