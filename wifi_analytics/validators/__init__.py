"""
WiFiAnalytics - Validators Package

Pipeline validation against in-memory data or the warehouse.
"""

from wifi_analytics.validators.validation import (
    FAIL,
    INFO,
    PASS,
    WARN,
    DatasetValidator,
    ValidationReport,
    ValidationResult,
    WarehouseValidator
)

__all__ = [
    "FAIL",
    "INFO",
    "PASS",
    "WARN",
    "DatasetValidator",
    "ValidationReport",
    "ValidationResult",
    "WarehouseValidator"
]
