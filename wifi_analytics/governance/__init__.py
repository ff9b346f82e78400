"""
WiFiAnalytics - Governance Package

Column masking policies and role-based access control.
"""

from wifi_analytics.governance.masking import (
    DEFAULT_POLICIES,
    MASKED_TEXT,
    MaskingManager,
    MaskingPolicy,
    is_masked_value,
    mask_building_name,
    mask_floor_number,
    mask_zone_info
)
from wifi_analytics.governance.rbac import Grant, RbacModel, Role, validate_identifier

__all__ = [
    "DEFAULT_POLICIES",
    "MASKED_TEXT",
    "MaskingManager",
    "MaskingPolicy",
    "is_masked_value",
    "mask_building_name",
    "mask_floor_number",
    "mask_zone_info",
    "Grant",
    "RbacModel",
    "Role",
    "validate_identifier"
]
