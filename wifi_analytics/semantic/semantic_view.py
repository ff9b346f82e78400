"""
WiFiAnalytics - Semantic View Definition

Declarative semantic model over the star schema: logical tables with
synonyms, relationships, facts, dimensions and metrics. The model is
validated locally and rendered to a CREATE SEMANTIC VIEW statement; query
translation is left to the warehouse.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from wifi_analytics.models.dimensions import DimAccessPoint, DimNetwork
from wifi_analytics.models.facts import ApStatusRecord, QosMetricRecord
from wifi_analytics.utils.config import EnvironmentConfig


logger = logging.getLogger(__name__)


class SemanticViewError(ValueError):
    """Raised when a semantic model references unknown tables or columns."""

    def __init__(self, problems: List[str]):
        self.problems = problems
        super().__init__("Invalid semantic view: " + "; ".join(problems))


# alias.column references inside metric expressions
_REFERENCE = re.compile(r"\b([A-Za-z_][A-Za-z0-9_]*)\.([A-Za-z_][A-Za-z0-9_]*)\b")


def _quote_list(values: List[str]) -> str:
    return ", ".join("'" + value.replace("'", "''") + "'" for value in values)


def _comment(text: Optional[str]) -> str:
    return f" COMMENT='{text.replace(chr(39), chr(39) * 2)}'" if text else ""


@dataclass
class SemanticTable:
    """A logical table backed by a physical table."""
    alias: str
    base_table: str
    primary_key: List[str]
    columns: List[str]
    synonyms: List[str] = field(default_factory=list)
    comment: Optional[str] = None

    def has_column(self, column: str) -> bool:
        return column.lower() in {name.lower() for name in self.columns}

    def to_sql(self) -> str:
        sql = f"{self.alias} AS {self.base_table}\n"
        sql += f"            PRIMARY KEY ({', '.join(self.primary_key)})"
        if self.synonyms:
            sql += f"\n            WITH SYNONYMS=({_quote_list(self.synonyms)})"
        if self.comment:
            sql += f"\n           {_comment(self.comment)}"
        return sql


@dataclass
class Relationship:
    """Foreign key from one logical table to another's primary key."""
    name: str
    from_table: str
    from_columns: List[str]
    to_table: str

    def to_sql(self) -> str:
        return f"{self.name} AS {self.from_table}({', '.join(self.from_columns)}) REFERENCES {self.to_table}"


@dataclass
class Fact:
    """Row-level numeric value."""
    table: str
    name: str
    expression: str
    comment: Optional[str] = None

    def to_sql(self) -> str:
        return f"{self.table}.{self.name} AS {self.expression}{_comment(self.comment)}"


@dataclass
class Dimension:
    """Attribute used for grouping and filtering."""
    table: str
    name: str
    expression: str
    synonyms: List[str] = field(default_factory=list)
    comment: Optional[str] = None

    def to_sql(self) -> str:
        sql = f"{self.table}.{self.name} AS {self.expression}"
        if self.synonyms:
            sql += f" WITH SYNONYMS=({_quote_list(self.synonyms)})"
        return sql + _comment(self.comment)


@dataclass
class Metric:
    """Aggregate expression over facts or columns."""
    table: str
    name: str
    expression: str
    comment: Optional[str] = None

    def to_sql(self) -> str:
        return f"{self.table}.{self.name} AS {self.expression}{_comment(self.comment)}"


@dataclass
class SemanticView:
    """
    A complete semantic model.

    Attributes:
        name: View name, e.g. NETWORK_ANALYTICS_SV
        schema: Schema the view is created in
        tables: Logical tables
        relationships: Joins between logical tables
        facts: Row-level values
        dimensions: Grouping attributes
        metrics: Aggregates
        comment: Description shown to the agent
    """
    name: str
    schema: str
    tables: List[SemanticTable]
    relationships: List[Relationship] = field(default_factory=list)
    facts: List[Fact] = field(default_factory=list)
    dimensions: List[Dimension] = field(default_factory=list)
    metrics: List[Metric] = field(default_factory=list)
    comment: Optional[str] = None

    @property
    def qualified_name(self) -> str:
        return f"{self.schema}.{self.name}"

    def table(self, alias: str) -> Optional[SemanticTable]:
        for table in self.tables:
            if table.alias == alias:
                return table
        return None

    def validate(self) -> None:
        """
        Check every reference in the model.

        Raises:
            SemanticViewError: Listing every problem found
        """
        problems = []

        aliases = [table.alias for table in self.tables]
        duplicates = sorted({alias for alias in aliases if aliases.count(alias) > 1})
        if duplicates:
            problems.append(f"duplicate table aliases {duplicates}")

        for table in self.tables:
            for column in table.primary_key:
                if not table.has_column(column):
                    problems.append(f"table {table.alias}: primary key column {column} not found")

        for relationship in self.relationships:
            source = self.table(relationship.from_table)
            target = self.table(relationship.to_table)
            if source is None:
                problems.append(f"relationship {relationship.name}: unknown table {relationship.from_table}")
            else:
                for column in relationship.from_columns:
                    if not source.has_column(column):
                        problems.append(
                            f"relationship {relationship.name}: column {column} not in {source.alias}"
                        )
            if target is None:
                problems.append(f"relationship {relationship.name}: unknown table {relationship.to_table}")
            elif source is not None and len(relationship.from_columns) != len(target.primary_key):
                problems.append(
                    f"relationship {relationship.name}: {len(relationship.from_columns)} columns "
                    f"do not match primary key of {target.alias}"
                )

        for item in list(self.facts) + list(self.dimensions):
            table = self.table(item.table)
            if table is None:
                problems.append(f"{item.name}: unknown table {item.table}")
            elif not table.has_column(item.expression):
                problems.append(f"{item.name}: column {item.expression} not in {item.table}")

        fact_names = {(fact.table, fact.name.lower()) for fact in self.facts}
        for metric in self.metrics:
            if self.table(metric.table) is None:
                problems.append(f"metric {metric.name}: unknown table {metric.table}")
            for alias, column in _REFERENCE.findall(metric.expression):
                table = self.table(alias)
                if table is None:
                    problems.append(f"metric {metric.name}: unknown table {alias}")
                elif not table.has_column(column) and (alias, column.lower()) not in fact_names:
                    problems.append(f"metric {metric.name}: {alias}.{column} is not a column or fact")

        names = [f"{item.table}.{item.name}".lower() for item in list(self.facts) + list(self.dimensions) + list(self.metrics)]
        clashes = sorted({name for name in names if names.count(name) > 1})
        if clashes:
            problems.append(f"duplicate names {clashes}")

        if problems:
            raise SemanticViewError(problems)

    def to_sql(self, replace: bool = True) -> str:
        """
        Render the CREATE SEMANTIC VIEW statement.

        The model is validated first.

        Raises:
            SemanticViewError: If the model is invalid
        """
        self.validate()
        indent = "        "
        create = "CREATE OR REPLACE SEMANTIC VIEW" if replace else "CREATE SEMANTIC VIEW"

        sections = [f"{create} {self.qualified_name}"]
        sections.append("    TABLES (\n" + ",\n".join(indent + t.to_sql() for t in self.tables) + "\n    )")
        if self.relationships:
            sections.append(
                "    RELATIONSHIPS (\n" + ",\n".join(indent + r.to_sql() for r in self.relationships) + "\n    )"
            )
        if self.facts:
            sections.append("    FACTS (\n" + ",\n".join(indent + f.to_sql() for f in self.facts) + "\n    )")
        if self.dimensions:
            sections.append(
                "    DIMENSIONS (\n" + ",\n".join(indent + d.to_sql() for d in self.dimensions) + "\n    )"
            )
        if self.metrics:
            sections.append("    METRICS (\n" + ",\n".join(indent + m.to_sql() for m in self.metrics) + "\n    )")
        if self.comment:
            sections.append(f"   {_comment(self.comment)}")
        return "\n".join(sections)

    def to_dict(self) -> Dict:
        """Structured form for export and inspection."""
        return {
            "name": self.qualified_name,
            "comment": self.comment,
            "tables": [
                {
                    "alias": table.alias,
                    "base_table": table.base_table,
                    "primary_key": table.primary_key,
                    "synonyms": table.synonyms,
                    "comment": table.comment
                }
                for table in self.tables
            ],
            "relationships": [
                {
                    "name": rel.name,
                    "from_table": rel.from_table,
                    "from_columns": rel.from_columns,
                    "to_table": rel.to_table
                }
                for rel in self.relationships
            ],
            "facts": [{"name": f"{f.table}.{f.name}", "expression": f.expression} for f in self.facts],
            "dimensions": [
                {"name": f"{d.table}.{d.name}", "expression": d.expression, "synonyms": d.synonyms}
                for d in self.dimensions
            ],
            "metrics": [{"name": f"{m.table}.{m.name}", "expression": m.expression} for m in self.metrics]
        }


def _columns(model) -> List[str]:
    return [column.lower() for column in model.COLUMNS]


def build_network_analytics_view(environment: Optional[EnvironmentConfig] = None) -> SemanticView:
    """
    Build the NETWORK_ANALYTICS_SV model.

    Args:
        environment: Object names (defaults when None)

    Returns:
        Validated SemanticView
    """
    env = environment or EnvironmentConfig()
    transformed = env.transformed_schema

    view = SemanticView(
        name="NETWORK_ANALYTICS_SV",
        schema=env.analytics_schema,
        tables=[
            SemanticTable(
                alias="networks",
                base_table=f"{transformed}.DIM_NETWORKS",
                primary_key=["network_id"],
                columns=_columns(DimNetwork),
                synonyms=["customer networks", "client sites", "locations"],
                comment="Customer networks managed by the WiFi service provider"
            ),
            SemanticTable(
                alias="access_points",
                base_table=f"{transformed}.DIM_ACCESS_POINTS",
                primary_key=["ap_id"],
                columns=_columns(DimAccessPoint),
                synonyms=["APs", "wireless access points", "wifi devices", "access point hardware"],
                comment="Physical access point devices with hardware specifications"
            ),
            SemanticTable(
                alias="ap_status",
                base_table=f"{transformed}.FACT_AP_STATUS",
                primary_key=["snapshot_timestamp", "ap_id"],
                columns=_columns(ApStatusRecord),
                synonyms=["network status", "infrastructure metrics", "uptime data"],
                comment="Infrastructure status and resource utilization metrics"
            ),
            SemanticTable(
                alias="qos_metrics",
                base_table=f"{transformed}.FACT_QOS_METRICS",
                primary_key=["metric_timestamp", "ap_id"],
                columns=_columns(QosMetricRecord),
                synonyms=[
                    "signal strength data", "wifi quality metrics", "coverage data",
                    "performance metrics", "QoS data"
                ],
                comment="Signal strength, throughput, and quality of service measurements"
            ),
        ],
        relationships=[
            Relationship("networks_to_access_points", "access_points", ["network_id"], "networks"),
            Relationship("access_points_to_status", "ap_status", ["ap_id"], "access_points"),
            Relationship("access_points_to_qos", "qos_metrics", ["ap_id"], "access_points"),
        ],
        facts=[
            Fact("ap_status", "connected_client_count", "connected_client_count",
                 "Number of connected devices"),
            Fact("qos_metrics", "rssi_dbm", "rssi_dbm", "Signal strength in dBm - core WiFi metric"),
            Fact("qos_metrics", "throughput_mbps", "throughput_mbps",
                 "Data throughput correlated with signal strength"),
            Fact("qos_metrics", "latency_ms", "latency_ms", "Network latency correlated with signal quality"),
            Fact("qos_metrics", "packet_loss_percent", "packet_loss_percent", "Packet loss percentage"),
            Fact("qos_metrics", "signal_quality_score", "signal_quality_score", "Overall signal quality score"),
        ],
        dimensions=[
            Dimension("networks", "customer_name", "customer_name",
                      ["client", "customer", "organization"], "Customer organization name"),
            Dimension("networks", "industry", "industry",
                      ["business type", "sector", "vertical"], "Customer industry classification"),
            Dimension("access_points", "manufacturer", "manufacturer",
                      ["vendor", "brand", "maker"], "Access point manufacturer"),
            Dimension("access_points", "ap_model", "ap_model",
                      ["model", "hardware model"], "Access point model"),
            Dimension("access_points", "wifi_standard", "wifi_standard",
                      ["wifi version", "wireless standard"], "WiFi technology standard"),
            Dimension("access_points", "firmware_version", "firmware_version",
                      ["firmware", "software version"], "Firmware version"),
            Dimension("qos_metrics", "interference_level", "interference_level",
                      ["interference", "signal interference", "noise level"],
                      "Interference level affecting signal quality"),
        ],
        metrics=[
            Metric("qos_metrics", "average_signal_strength", "AVG(qos_metrics.rssi_dbm)",
                   "Average signal strength for coverage analysis"),
            Metric("qos_metrics", "minimum_signal_strength", "MIN(qos_metrics.rssi_dbm)",
                   "Minimum signal strength indicating coverage gaps"),
            Metric("qos_metrics", "average_throughput", "AVG(qos_metrics.throughput_mbps)",
                   "Average throughput performance"),
            Metric("ap_status", "average_client_load", "AVG(ap_status.connected_client_count)",
                   "Average connected clients"),
        ],
        comment="Comprehensive WiFi analytics with signal strength, coverage analysis, and QoS metrics"
    )

    view.validate()
    logger.debug(
        f"Semantic view {view.qualified_name}: {len(view.tables)} tables, "
        f"{len(view.facts)} facts, {len(view.dimensions)} dimensions, {len(view.metrics)} metrics"
    )
    return view
