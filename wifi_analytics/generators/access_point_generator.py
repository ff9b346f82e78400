"""
WiFiAnalytics - Access Point Generator

Builds the network and access point dimensions.
"""

import hashlib
import logging
import random
from dataclasses import replace
from datetime import date, timedelta
from typing import List, Optional

from wifi_analytics.generators import catalog
from wifi_analytics.models.dimensions import DimAccessPoint, DimNetwork


logger = logging.getLogger(__name__)


def generate_networks() -> List[DimNetwork]:
    """Return fresh copies of the seed networks."""
    return [replace(network) for network in catalog.SEED_NETWORKS]


def mac_address_for(network_id: int, sequence: int) -> str:
    """
    Derive a stable MAC address from the network id and AP sequence.

    The first twelve hex digits of MD5("<network_id><sequence>") are split
    into colon-separated upper-case pairs.
    """
    digest = hashlib.md5(f"{network_id}{sequence}".encode("utf-8")).hexdigest()[:12].upper()
    return ":".join(digest[i:i + 2] for i in range(0, 12, 2))


class AccessPointGenerator:
    """
    Generator for the access point inventory.

    AP counts, capacity and building names depend on the network's industry;
    model and firmware are drawn at random.
    """

    def __init__(self, rng: random.Random, reference_date: Optional[date] = None):
        """
        Initialize the generator.

        Args:
            rng: Seeded random source
            reference_date: "Today" for deployment dates (default: today)
        """
        self.rng = rng
        self.reference_date = reference_date or date.today()

    def generate(self, networks: List[DimNetwork]) -> List[DimAccessPoint]:
        """
        Generate access points for every network.

        Args:
            networks: Network dimension rows

        Returns:
            Access points with ids 1..N in (network_id, sequence) order
        """
        access_points = []
        ap_id = 0

        for network in sorted(networks, key=lambda n: n.network_id):
            count = catalog.AP_COUNT_BY_INDUSTRY.get(network.industry, catalog.DEFAULT_AP_COUNT)
            for sequence in range(1, count + 1):
                ap_id += 1
                access_points.append(self._build_access_point(ap_id, network, sequence))

        logger.info(f"[OK] Generated {len(access_points)} access points for {len(networks)} networks")
        return access_points

    def _build_access_point(self, ap_id: int, network: DimNetwork, sequence: int) -> DimAccessPoint:
        model = self.pick_model()
        manufacturer, standard, _, _ = catalog.AP_MODELS[model]

        return DimAccessPoint(
            ap_id=ap_id,
            network_id=network.network_id,
            ap_mac_address=mac_address_for(network.network_id, sequence),
            ap_model=model,
            manufacturer=manufacturer,
            wifi_standard=standard,
            max_client_capacity=catalog.CAPACITY_BY_INDUSTRY.get(
                network.industry, catalog.DEFAULT_CAPACITY
            ),
            deployment_date=self.reference_date - timedelta(days=self.rng.randint(30, 365)),
            firmware_version=self.pick_firmware(model),
            location_building=self.rng.choice(
                catalog.BUILDINGS_BY_INDUSTRY.get(network.industry, catalog.DEFAULT_BUILDINGS)
            ),
            location_floor=self.rng.randint(1, catalog.MAX_FLOOR),
            location_zone=self.rng.choice(catalog.LOCATION_ZONES)
        )

    def pick_model(self) -> str:
        """Draw an AP model from the cumulative distribution."""
        draw = self.rng.randint(1, 100)
        for upper_bound, model in catalog.AP_MODEL_DISTRIBUTION:
            if draw <= upper_bound:
                return model
        return catalog.AP_MODEL_DISTRIBUTION[-1][1]

    def pick_firmware(self, model: str) -> str:
        """Choose stable or legacy firmware for a model."""
        manufacturer, _, stable, legacy = catalog.AP_MODELS[model]
        if manufacturer not in catalog.LEGACY_FIRMWARE_MANUFACTURERS:
            return stable
        if self.rng.randint(1, 100) <= catalog.LEGACY_FIRMWARE_PCT:
            return legacy
        return stable
