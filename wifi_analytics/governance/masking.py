"""
WiFiAnalytics - Dynamic Data Masking

Column masking policies for location data in the AP performance view.
Each policy exists twice: as SQL for the warehouse and as a Python callable
applying the same rule to ApPerformanceRow objects during dry runs.
"""

import dataclasses
import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional

from wifi_analytics.transformers.json_transformer import ApPerformanceRow
from wifi_analytics.utils.config import EnvironmentConfig


logger = logging.getLogger(__name__)


MASKED_TEXT = "***MASKED***"
PERFORMANCE_VIEW = "VW_AP_PERFORMANCE"

_LETTERS = re.compile(r"[A-Za-z]")


def mask_building_name(value: str) -> str:
    """Replace every letter with '*', keeping digits and punctuation."""
    return _LETTERS.sub("*", value)


def mask_zone_info(value: str) -> str:
    return MASKED_TEXT


def mask_floor_number(value: int) -> int:
    """Generalise floors: 1-2 -> 1, 3-5 -> 3, higher -> 5."""
    if value <= 2:
        return 1
    if value <= 5:
        return 3
    return 5


def is_masked_value(value: Any) -> bool:
    """True if a text value looks like the output of a masking policy."""
    return isinstance(value, str) and (value == MASKED_TEXT or "*" in value)


@dataclass
class MaskingPolicy:
    """
    One column masking policy.

    Attributes:
        name: Policy object name
        column: View column the policy is attached to
        data_type: STRING or NUMBER
        mask: Python rule for non-exempt roles
        masked_expression: SQL expression over `val` for non-exempt roles
    """
    name: str
    column: str
    data_type: str
    mask: Callable[[Any], Any]
    masked_expression: str

    def apply(self, value: Any, role: str, exempt_roles: Iterable[str]) -> Any:
        """Mask value unless role is exempt. None is never masked."""
        if value is None or role.upper() in {exempt.upper() for exempt in exempt_roles}:
            return value
        return self.mask(value)

    def create_sql(self, schema: str, exempt_roles: List[str]) -> str:
        """Render CREATE MASKING POLICY."""
        roles = ", ".join(f"'{role}'" for role in exempt_roles)
        return (
            f"CREATE MASKING POLICY IF NOT EXISTS {schema}.{self.name} "
            f"AS (val {self.data_type}) RETURNS {self.data_type} ->\n"
            f"    CASE\n"
            f"        WHEN val IS NULL THEN NULL\n"
            f"        WHEN CURRENT_ROLE() IN ({roles}) THEN val\n"
            f"        ELSE {self.masked_expression}\n"
            f"    END"
        )

    def attach_sql(self, schema: str, view: str = PERFORMANCE_VIEW) -> str:
        """Render ALTER VIEW ... SET MASKING POLICY."""
        return (
            f"ALTER VIEW {schema}.{view} MODIFY COLUMN {self.column} "
            f"SET MASKING POLICY {schema}.{self.name}"
        )

    def detach_sql(self, schema: str, view: str = PERFORMANCE_VIEW) -> str:
        return f"ALTER VIEW {schema}.{view} MODIFY COLUMN {self.column} UNSET MASKING POLICY"


DEFAULT_POLICIES = [
    MaskingPolicy(
        name="mask_building_name",
        column="building_name",
        data_type="STRING",
        mask=mask_building_name,
        masked_expression="REGEXP_REPLACE(val, '[A-Za-z]', '*')"
    ),
    MaskingPolicy(
        name="mask_zone_info",
        column="zone_name",
        data_type="STRING",
        mask=mask_zone_info,
        masked_expression=f"'{MASKED_TEXT}'"
    ),
    MaskingPolicy(
        name="mask_floor_number",
        column="floor_number",
        data_type="NUMBER",
        mask=mask_floor_number,
        masked_expression="CASE WHEN val <= 2 THEN 1 WHEN val <= 5 THEN 3 ELSE 5 END"
    ),
]


class MaskingManager:
    """
    Masking policies bound to an environment.

    Roles exempt from masking: the admin role and the analyst role.
    """

    def __init__(
        self,
        environment: Optional[EnvironmentConfig] = None,
        policies: Optional[List[MaskingPolicy]] = None
    ):
        self.environment = environment or EnvironmentConfig()
        self.policies = policies if policies is not None else list(DEFAULT_POLICIES)

    @property
    def exempt_roles(self) -> List[str]:
        return [self.environment.admin_role, self.environment.analyst_role]

    def is_exempt(self, role: str) -> bool:
        return role.upper() in {exempt.upper() for exempt in self.exempt_roles}

    def mask_row(self, row: ApPerformanceRow, role: str) -> ApPerformanceRow:
        """Return a copy of row as seen by role."""
        if self.is_exempt(role):
            return row
        changes = {
            policy.column: policy.apply(getattr(row, policy.column), role, self.exempt_roles)
            for policy in self.policies
        }
        return dataclasses.replace(row, **changes)

    def mask_rows(self, rows: List[ApPerformanceRow], role: str) -> List[ApPerformanceRow]:
        """
        Apply every policy to every row for the given role.

        Args:
            rows: Unmasked performance rows
            role: Querying role

        Returns:
            Masked copies (the same objects when the role is exempt)
        """
        masked = [self.mask_row(row, role) for row in rows]
        logger.info(
            f"[OK] Applied {len(self.policies)} masking policies to {len(rows)} rows "
            f"as {role} ({'exempt' if self.is_exempt(role) else 'masked'})"
        )
        return masked

    def create_policy_statements(self) -> List[str]:
        schema = self.environment.analytics_schema
        return [policy.create_sql(schema, self.exempt_roles) for policy in self.policies]

    def attach_policy_statements(self) -> List[str]:
        schema = self.environment.analytics_schema
        return [policy.attach_sql(schema) for policy in self.policies]

    def detach_policy_statements(self) -> List[str]:
        """Statements to unset the policies; a column holding a policy rejects SET."""
        schema = self.environment.analytics_schema
        return [policy.detach_sql(schema) for policy in self.policies]
