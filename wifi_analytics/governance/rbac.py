"""
WiFiAnalytics - Role-Based Access Control

Role definitions and their grants. The analyst role works across all three
schemas; the external role can only read the AP performance view, where
masking applies.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional

from wifi_analytics.utils.config import EnvironmentConfig


logger = logging.getLogger(__name__)


_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_$]*$")


def validate_identifier(name: str) -> str:
    """
    Check that name is a plain, unquoted Snowflake identifier.

    Raises:
        ValueError: If name contains anything beyond letters, digits, _ and $
    """
    if not name or not _IDENTIFIER.match(name):
        raise ValueError(f"Invalid identifier: {name!r}")
    return name


@dataclass
class Grant:
    """A single privilege on a securable object."""
    privilege: str
    object_type: str  # DATABASE, SCHEMA, WAREHOUSE, VIEW, TABLE
    object_name: str

    def to_sql(self, role: str) -> str:
        return f"GRANT {self.privilege} ON {self.object_type} {self.object_name} TO ROLE {role}"


@dataclass
class Role:
    """A role, its description and its grants."""
    name: str
    comment: str
    grants: List[Grant] = field(default_factory=list)
    # Creates and owns the objects it queries
    full_access: bool = False

    def create_sql(self) -> str:
        return f"CREATE ROLE IF NOT EXISTS {validate_identifier(self.name)} COMMENT = '{self.comment}'"

    def grant_statements(self) -> List[str]:
        return [grant.to_sql(self.name) for grant in self.grants]

    def can_select(self, object_name: str) -> bool:
        """True if the role may read the object (qualified or bare name)."""
        if self.full_access:
            return True
        target = object_name.upper()
        for grant in self.grants:
            name = grant.object_name.upper()
            if grant.privilege == "SELECT" and (name == target or name.endswith("." + target)):
                return True
        return False


class RbacModel:
    """
    Roles for the WiFi analytics environment.

    Usage:
        rbac = RbacModel(config.environment)
        for statement in rbac.statements():
            connection.execute(statement)
    """

    def __init__(self, environment: Optional[EnvironmentConfig] = None):
        self.environment = environment or EnvironmentConfig()
        for name in (
            self.environment.database, self.environment.warehouse,
            self.environment.analyst_role, self.environment.external_role
        ):
            validate_identifier(name)

    def _schema(self, schema: str) -> str:
        return f"{self.environment.database}.{schema}"

    def analyst_role(self) -> Role:
        """Full-access role used to build and query the demo."""
        env = self.environment
        grants = [
            Grant("USAGE", "DATABASE", env.database),
            Grant("USAGE", "SCHEMA", self._schema(env.raw_schema)),
            Grant("USAGE", "SCHEMA", self._schema(env.transformed_schema)),
            Grant("USAGE", "SCHEMA", self._schema(env.analytics_schema)),
            Grant("USAGE", "WAREHOUSE", env.warehouse),
            Grant("CREATE TABLE", "SCHEMA", self._schema(env.raw_schema)),
            Grant("CREATE TABLE", "SCHEMA", self._schema(env.transformed_schema)),
            Grant("CREATE TABLE", "SCHEMA", self._schema(env.analytics_schema)),
            Grant("CREATE VIEW", "SCHEMA", self._schema(env.analytics_schema)),
            Grant("CREATE SEMANTIC VIEW", "SCHEMA", self._schema(env.analytics_schema)),
            Grant("CREATE AGENT", "SCHEMA", self._schema(env.analytics_schema)),
        ]
        return Role(
            env.analyst_role, "Role for network administrators and analysts", grants, full_access=True
        )

    def external_role(self) -> Role:
        """Restricted role that only reads the masked performance view."""
        env = self.environment
        grants = [
            Grant("USAGE", "DATABASE", env.database),
            Grant("USAGE", "SCHEMA", self._schema(env.analytics_schema)),
            Grant("USAGE", "WAREHOUSE", env.warehouse),
            Grant("SELECT", "VIEW", f"{self._schema(env.analytics_schema)}.VW_AP_PERFORMANCE"),
        ]
        return Role(env.external_role, "Role for external analysts with limited data access", grants)

    def roles(self) -> List[Role]:
        return [self.analyst_role(), self.external_role()]

    def role(self, name: str) -> Optional[Role]:
        """Look up a role by name (case-insensitive)."""
        for role in self.roles():
            if role.name.upper() == name.upper():
                return role
        return None

    def statements(self, include_user_grants: bool = True) -> List[str]:
        """
        Render every CREATE ROLE and GRANT statement.

        Args:
            include_user_grants: Also grant the roles to the configured user

        Returns:
            SQL statements in execution order
        """
        statements = []
        for role in self.roles():
            statements.append(role.create_sql())
            statements.extend(role.grant_statements())

        grantee = self.environment.grantee_user
        if include_user_grants and grantee:
            validate_identifier(grantee)
            statements.extend(f"GRANT ROLE {role.name} TO USER {grantee}" for role in self.roles())
        elif include_user_grants:
            logger.info("[INFO] No grantee user configured; skipping role-to-user grants")

        return statements
