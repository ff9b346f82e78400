"""
WiFiAnalytics - Pipeline Validation

Checks every stage of the pipeline: object volumes, referential integrity,
JSON extraction, governance, semantic layer, business scenarios and an
end-to-end readiness summary.

Two runners share the same thresholds and result format:
- DatasetValidator works on in-memory generated data (dry runs, tests)
- WarehouseValidator runs the equivalent SQL through a Snowflake connection

Data problems never raise; they are reported as FAIL or WARN results.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

from wifi_analytics.aggregators.network_aggregator import (
    AggregateCalculator,
    ClientLoadProfile,
    UptimeAggregator
)
from wifi_analytics.generators import catalog
from wifi_analytics.generators.dataset_generator import WifiDataset
from wifi_analytics.governance.masking import MASKED_TEXT, PERFORMANCE_VIEW, MaskingManager, is_masked_value
from wifi_analytics.governance.rbac import RbacModel
from wifi_analytics.models.facts import QosMetricRecord
from wifi_analytics.semantic.agent import QUESTIONS_TABLE, AgentConfig
from wifi_analytics.semantic.semantic_view import SemanticView, SemanticViewError
from wifi_analytics.transformers.json_transformer import ApPerformanceRow, ROOT, extract_path
from wifi_analytics.utils.config import EnvironmentConfig


logger = logging.getLogger(__name__)


PASS = "PASS"
FAIL = "FAIL"
WARN = "WARN"
INFO = "INFO"

MIN_NETWORKS = 10
MIN_ACCESS_POINTS = 50
MIN_STATUS_RECORDS = 40000
MIN_RAW_RECORDS = 500
MIN_MASKING_POLICIES = 3
MIN_POLICY_APPLICATIONS = 3
MIN_ROLES = 2
MIN_AGENT_QUESTIONS = 10
FIRMWARE_UPTIME_THRESHOLD = 95.0
MIN_INDUSTRY_VARIATION = 0.1
MIN_PEAK_TROUGH_RATIO = 1.5
NETWORK_UPTIME_RANGE = (90.0, 100.0)


@dataclass
class ValidationResult:
    """One validation check outcome."""
    category: str
    test_name: str
    status: str  # PASS, FAIL, WARN, INFO
    details: str

    @property
    def passed(self) -> bool:
        return self.status != FAIL

    def to_dict(self) -> dict:
        return {
            "validation_category": self.category,
            "test_name": self.test_name,
            "status": self.status,
            "details": self.details
        }


@dataclass
class ValidationReport:
    """Ordered collection of results with a readiness verdict."""
    results: List[ValidationResult] = field(default_factory=list)

    def extend(self, results: Iterable[ValidationResult]) -> None:
        self.results.extend(results)

    def counts(self) -> Dict[str, int]:
        summary = {PASS: 0, FAIL: 0, WARN: 0, INFO: 0}
        for result in self.results:
            summary[result.status] = summary.get(result.status, 0) + 1
        return summary

    @property
    def failures(self) -> List[ValidationResult]:
        return [result for result in self.results if result.status == FAIL]

    @property
    def is_ready(self) -> bool:
        return bool(self.results) and not self.failures

    def find(self, test_name: str) -> Optional[ValidationResult]:
        for result in self.results:
            if result.test_name == test_name:
                return result
        return None

    def format_report(self) -> str:
        """Render results as an aligned text table."""
        lines = ["=" * 100, "VALIDATION REPORT", "=" * 100]
        for result in self.results:
            lines.append(
                f"[{result.status:<4}] {result.category:<30} {result.test_name:<30} {result.details}"
            )
        counts = self.counts()
        lines.append("-" * 100)
        lines.append(
            f"PASS={counts[PASS]} FAIL={counts[FAIL]} WARN={counts[WARN]} INFO={counts[INFO]} - "
            + ("READY FOR DEMONSTRATION" if self.is_ready else "ISSUES DETECTED - REVIEW ABOVE")
        )
        return "\n".join(lines)

    def log_summary(self) -> None:
        for result in self.results:
            if result.status == FAIL:
                logger.error(f"[ERROR] {result.test_name}: {result.details}")
            elif result.status == WARN:
                logger.warning(f"[WARN] {result.test_name}: {result.details}")
            else:
                logger.info(f"[{result.status}] {result.test_name}: {result.details}")
        counts = self.counts()
        logger.info(f"[DONE] Validation: {counts[PASS]} passed, {counts[FAIL]} failed, {counts[WARN]} warnings")


# Shared checks

def minimum_check(category: str, test_name: str, value: int, minimum: int, noun: str) -> ValidationResult:
    """PASS when value >= minimum, else FAIL."""
    status = PASS if value >= minimum else FAIL
    return ValidationResult(category, test_name, status, f"{value:,} {noun}")


def orphan_check(test_name: str, orphans: int, noun: str) -> ValidationResult:
    return ValidationResult(
        "Relationship Validation", test_name, PASS if orphans == 0 else FAIL, f"{orphans} {noun}"
    )


def nonzero_check(category: str, test_name: str, value: int, noun: str) -> ValidationResult:
    return ValidationResult(category, test_name, PASS if value > 0 else FAIL, f"{value:,} {noun}")


def firmware_check(affected_aps: int) -> ValidationResult:
    detected = affected_aps > 0
    return ValidationResult(
        "Business Scenario Validation",
        "Firmware Issue Detection",
        PASS if detected else WARN,
        "Firmware issue scenario: "
        + (f"Detectable in data ({affected_aps} APs below {FIRMWARE_UPTIME_THRESHOLD:g}% uptime)"
           if detected else "Not clearly detectable")
    )


def variation_check(coefficient: Optional[float]) -> ValidationResult:
    detected = coefficient is not None and coefficient > MIN_INDUSTRY_VARIATION
    shown = f"{coefficient:.3f}" if coefficient is not None else "n/a"
    return ValidationResult(
        "Business Scenario Validation",
        "Industry Variation",
        PASS if detected else WARN,
        f"Industry performance variation detected: {shown}"
    )


def temporal_check(ratio: Optional[float]) -> ValidationResult:
    detected = ratio is not None and ratio > MIN_PEAK_TROUGH_RATIO
    shown = f"{ratio:.2f}" if ratio is not None else "n/a"
    return ValidationResult(
        "Business Scenario Validation",
        "Temporal Patterns",
        PASS if detected else WARN,
        f"Peak/off-peak patterns: Peak to trough ratio: {shown}"
    )


def uptime_metric_check(avg_uptime: Optional[float]) -> ValidationResult:
    low, high = NETWORK_UPTIME_RANGE
    in_range = avg_uptime is not None and low <= avg_uptime <= high
    shown = f"{avg_uptime:.2f}%" if avg_uptime is not None else "n/a"
    return ValidationResult(
        "Semantic View Validation", "Metrics Calculation", PASS if in_range else WARN,
        f"Average network uptime: {shown}"
    )


def end_to_end_check(stage_counts: Dict[str, int]) -> ValidationResult:
    all_valid = all(count > 0 for count in stage_counts.values())
    details = ", ".join(f"{stage}: {count:,}" for stage, count in stage_counts.items())
    return ValidationResult("End-to-End Validation", "Complete Data Pipeline", PASS if all_valid else FAIL, details)


def readiness_result(results: List[ValidationResult]) -> ValidationResult:
    ready = all(result.status != FAIL for result in results)
    return ValidationResult(
        "Validation Summary",
        "Demo Readiness Status",
        PASS if ready else FAIL,
        "READY FOR DEMONSTRATION" if ready else "ISSUES DETECTED - REVIEW ABOVE"
    )


class DatasetValidator:
    """
    Validator for an in-memory generated dataset.

    Handles:
    - Volume and referential integrity checks
    - JSON extraction and cast checks on the performance rows
    - Governance, semantic view and agent configuration checks
    - Business scenario detection
    """

    def __init__(
        self,
        dataset: WifiDataset,
        performance_rows: List[ApPerformanceRow],
        masking: Optional[MaskingManager] = None,
        rbac: Optional[RbacModel] = None,
        semantic_view: Optional[SemanticView] = None,
        agent: Optional[AgentConfig] = None,
        environment: Optional[EnvironmentConfig] = None
    ):
        self.dataset = dataset
        self.performance_rows = performance_rows
        self.environment = environment or EnvironmentConfig()
        self.masking = masking or MaskingManager(self.environment)
        self.rbac = rbac or RbacModel(self.environment)
        self.semantic_view = semantic_view
        self.agent = agent
        self.uptime = UptimeAggregator(dataset.access_points, dataset.networks)

    def validate_environment(self) -> List[ValidationResult]:
        env = self.environment
        return [
            ValidationResult(
                "Environment Check", "Database Structure", INFO,
                f"Database: {env.database} (in-memory), Role: {env.analyst_role}"
            ),
            ValidationResult(
                "Environment Check", "Schema Access", PASS,
                f"Schemas: {env.raw_schema}, {env.transformed_schema}, {env.analytics_schema}"
            ),
        ]

    def validate_objects(self) -> List[ValidationResult]:
        """Row counts against demo minimums."""
        category = "Object Validation"
        data = self.dataset
        return [
            minimum_check(category, "DIM_NETWORKS", len(data.networks), MIN_NETWORKS, "networks created"),
            minimum_check(category, "DIM_ACCESS_POINTS", len(data.access_points), MIN_ACCESS_POINTS,
                          "access points created"),
            minimum_check(category, "FACT_AP_STATUS", len(data.status_records), MIN_STATUS_RECORDS,
                          "status records"),
            minimum_check(category, "RAW_NETWORK_TELEMETRY", len(data.raw_telemetry), MIN_RAW_RECORDS,
                          "JSON telemetry records"),
        ]

    def validate_relationships(
        self,
        qos_records: Optional[Iterable[QosMetricRecord]] = None
    ) -> List[ValidationResult]:
        """
        Orphan checks for every foreign key.

        Args:
            qos_records: Optional QoS stream; consumed once when given
        """
        network_ids = {network.network_id for network in self.dataset.networks}
        ap_ids = {ap.ap_id for ap in self.dataset.access_points}

        orphaned_aps = sum(1 for ap in self.dataset.access_points if ap.network_id not in network_ids)
        orphaned_facts = sum(1 for record in self.dataset.status_records if record.ap_id not in ap_ids)
        orphaned_networks = sum(
            1 for record in self.dataset.status_records if record.network_id not in network_ids
        )

        results = [
            orphan_check("AP to Network FK", orphaned_aps, "orphaned access points"),
            orphan_check("Fact to AP FK", orphaned_facts, "orphaned fact records"),
            orphan_check("Fact to Network FK", orphaned_networks, "orphaned network references"),
        ]

        if qos_records is not None:
            orphaned_qos = sum(1 for record in qos_records if record.ap_id not in ap_ids)
            results.append(orphan_check("QoS to AP FK", orphaned_qos, "orphaned QoS records"))

        return results

    def validate_transformations(self) -> List[ValidationResult]:
        """JSON extraction, view population and cast sanity."""
        category = "Transformation Validation"

        valid_extractions = sum(
            1 for record in self.dataset.raw_telemetry
            if extract_path(record.telemetry_data, f"{ROOT}:ap_id") is not None
            and extract_path(record.telemetry_data, f"{ROOT}:status_metrics:operational_status") is not None
        )
        view_records = sum(1 for row in self.performance_rows if row.ap_id is not None)
        valid_casts = sum(
            1 for row in self.performance_rows
            if row.ap_id is not None
            and row.measurement_timestamp is not None
            and row.connected_clients is not None and row.connected_clients >= 0
            and row.cpu_utilization_percent is not None and 0 <= row.cpu_utilization_percent <= 100
        )

        return [
            nonzero_check(category, "JSON Extraction", valid_extractions, "valid JSON extractions"),
            nonzero_check(category, "Analytical View Access", view_records, "records in analytical view"),
            nonzero_check(category, "Data Type Casting", valid_casts, "records with valid type casting"),
        ]

    def validate_governance(self, role: str) -> List[ValidationResult]:
        """Policy and role counts, then masking as seen by role."""
        category = "Governance Validation"
        policies = len(self.masking.create_policy_statements())
        applications = len(self.masking.attach_policy_statements())
        roles = sum(1 for access in self.rbac.roles() if access.can_select(PERFORMANCE_VIEW))

        masked_rows = self.masking.mask_rows(self.performance_rows[:100], role)
        has_masked = any(
            is_masked_value(row.building_name) or is_masked_value(row.zone_name) for row in masked_rows
        )

        return [
            minimum_check(category, "Masking Policies Created", policies, MIN_MASKING_POLICIES,
                          "masking policies created"),
            minimum_check(category, "Policy Applications", applications, MIN_POLICY_APPLICATIONS,
                          "columns with applied policies"),
            minimum_check(category, "Role Access Control", roles, MIN_ROLES,
                          f"roles can read {PERFORMANCE_VIEW}"),
            ValidationResult(
                category, "Masking Effectiveness", PASS if has_masked else INFO,
                f"Current role: {role} - Masking active: {str(has_masked).upper()}"
            ),
        ]

    def validate_semantic_layer(self) -> List[ValidationResult]:
        """Model validity, business entities and the uptime metric."""
        category = "Semantic View Validation"
        if self.semantic_view is None:
            return [ValidationResult(category, "Semantic View Definition", FAIL, "No semantic view defined")]

        try:
            self.semantic_view.validate()
            definition = ValidationResult(
                category, "Semantic View Definition", PASS,
                f"{self.semantic_view.qualified_name}: {len(self.semantic_view.tables)} tables, "
                f"{len(self.semantic_view.metrics)} metrics"
            )
        except SemanticViewError as error:
            definition = ValidationResult(category, "Semantic View Definition", FAIL, str(error))

        customers = len({network.customer_name for network in self.dataset.networks})
        aps = len(self.dataset.access_points)
        entities = ValidationResult(
            category, "Business Entities",
            PASS if customers >= MIN_NETWORKS and aps >= MIN_ACCESS_POINTS else FAIL,
            f"{customers} customers, {aps} access points"
        )

        network_uptime = [
            result.uptime_pct for result in self.uptime.network_uptime(self.dataset.status_records)
            if result.uptime_pct is not None
        ]
        average = sum(network_uptime) / len(network_uptime) if network_uptime else None

        return [definition, entities, uptime_metric_check(average)]

    def validate_intelligence(self) -> List[ValidationResult]:
        if self.agent is None:
            return [ValidationResult("Intelligence Validation", "Agent Test Questions", FAIL,
                                     "No agent configuration")]
        categories = self.agent.questions_by_category()
        count = sum(len(questions) for questions in categories.values())
        return [
            minimum_check("Intelligence Validation", "Agent Test Questions", count, MIN_AGENT_QUESTIONS,
                          f"test questions available in {len(categories)} categories")
        ]

    def firmware_affected_aps(self) -> int:
        """Issue-model APs on the issue firmware with uptime below threshold in the issue window."""
        window = self.dataset.firmware_issue_window
        issue_ap_ids = {
            ap.ap_id for ap in self.dataset.access_points
            if ap.ap_model == catalog.FIRMWARE_ISSUE_MODEL and ap.firmware_version == catalog.FIRMWARE_ISSUE_VERSION
        }
        if not issue_ap_ids:
            return 0
        summaries = self.uptime.ap_uptime(
            (record for record in self.dataset.status_records if record.ap_id in issue_ap_ids),
            window
        )
        return sum(
            1 for summary in summaries.values()
            if summary.uptime_pct is not None and summary.uptime_pct < FIRMWARE_UPTIME_THRESHOLD
        )

    def industry_variation(self) -> Optional[float]:
        """Coefficient of variation of average client load across industries."""
        network_industry = {network.network_id: network.industry for network in self.dataset.networks}
        totals: Dict[str, List[int]] = {}
        for record in self.dataset.status_records:
            industry = network_industry.get(record.network_id)
            if industry is None:
                continue
            bucket = totals.setdefault(industry, [0, 0])
            bucket[0] += record.connected_client_count
            bucket[1] += 1
        averages = [total / count for total, count in totals.values() if count]
        return AggregateCalculator.coefficient_of_variation(averages)

    def validate_business_scenarios(self) -> List[ValidationResult]:
        profile = ClientLoadProfile(online_only=True).hourly_profile(self.dataset.status_records)
        return [
            firmware_check(self.firmware_affected_aps()),
            variation_check(self.industry_variation()),
            temporal_check(ClientLoadProfile.peak_trough_ratio(profile)),
        ]

    def validate_end_to_end(self) -> List[ValidationResult]:
        data = self.dataset
        return [end_to_end_check({
            "Raw": len(data.raw_telemetry),
            "Dim": len(data.networks) + len(data.access_points),
            "Fact": len(data.status_records),
            "View": sum(1 for row in self.performance_rows if row.ap_id is not None),
            "Semantic": 1 if self.semantic_view is not None else 0,
        })]

    def run_all(
        self,
        role: Optional[str] = None,
        qos_records: Optional[Iterable[QosMetricRecord]] = None
    ) -> ValidationReport:
        """
        Run every check.

        Args:
            role: Role to evaluate masking for (default: external role)
            qos_records: Optional QoS stream for the QoS orphan check

        Returns:
            ValidationReport ending with the readiness summary
        """
        role = role or self.environment.external_role
        logger.info(f"[...] Validating dataset (masking role: {role})")

        report = ValidationReport()
        report.extend(self.validate_environment())
        report.extend(self.validate_objects())
        report.extend(self.validate_relationships(qos_records))
        report.extend(self.validate_transformations())
        report.extend(self.validate_governance(role))
        report.extend(self.validate_semantic_layer())
        report.extend(self.validate_intelligence())
        report.extend(self.validate_business_scenarios())
        report.extend(self.validate_end_to_end())
        report.extend([readiness_result(report.results)])
        return report


class WarehouseValidator:
    """
    Validator that queries Snowflake.

    Usage:
        with SnowflakeLoader(config.get_snowflake_config(), config.environment) as loader:
            report = WarehouseValidator(loader.connection, config.environment).run_all()
    """

    def __init__(
        self,
        connection,
        environment: Optional[EnvironmentConfig] = None,
        firmware_issue_window: Optional[Tuple[datetime, datetime]] = None
    ):
        """
        Initialize the validator.

        Args:
            connection: SnowflakeConnection (anything with execute(sql) -> list of dicts)
            environment: Object names
            firmware_issue_window: Restricts the firmware uptime check when given
        """
        self.connection = connection
        self.environment = environment or EnvironmentConfig()
        self.firmware_issue_window = firmware_issue_window

    @property
    def _raw(self) -> str:
        return f"{self.environment.raw_schema}.RAW_NETWORK_TELEMETRY"

    def _transformed(self, table: str) -> str:
        return f"{self.environment.transformed_schema}.{table}"

    def _analytics(self, name: str) -> str:
        return f"{self.environment.analytics_schema}.{name}"

    def _scalar(self, sql: str) -> Any:
        """First column of the first row, or None."""
        rows = self.connection.execute(sql)
        if not rows:
            return None
        return next(iter(rows[0].values()))

    def _count(self, sql: str) -> int:
        value = self._scalar(sql)
        return int(value) if value is not None else 0

    def validate_environment(self) -> List[ValidationResult]:
        rows = self.connection.execute(
            "SELECT CURRENT_DATABASE() AS DB, CURRENT_ROLE() AS ROLE_NAME, CURRENT_WAREHOUSE() AS WH"
        )
        if not rows:
            return [ValidationResult("Environment Check", "Database Structure", FAIL,
                                     "No session context returned")]
        row = rows[0]
        return [
            ValidationResult("Environment Check", "Database Structure", PASS,
                             f"Database: {row.get('DB')}, Role: {row.get('ROLE_NAME')}"),
            ValidationResult("Environment Check", "Warehouse Access", PASS if row.get("WH") else FAIL,
                             f"Warehouse: {row.get('WH') or 'NONE'}"),
        ]

    def validate_objects(self) -> List[ValidationResult]:
        category = "Object Validation"
        return [
            minimum_check(category, "DIM_NETWORKS",
                          self._count(f"SELECT COUNT(*) FROM {self._transformed('DIM_NETWORKS')}"),
                          MIN_NETWORKS, "networks created"),
            minimum_check(category, "DIM_ACCESS_POINTS",
                          self._count(f"SELECT COUNT(*) FROM {self._transformed('DIM_ACCESS_POINTS')}"),
                          MIN_ACCESS_POINTS, "access points created"),
            minimum_check(category, "FACT_AP_STATUS",
                          self._count(f"SELECT COUNT(*) FROM {self._transformed('FACT_AP_STATUS')}"),
                          MIN_STATUS_RECORDS, "status records"),
            minimum_check(category, "RAW_NETWORK_TELEMETRY",
                          self._count(f"SELECT COUNT(*) FROM {self._raw}"),
                          MIN_RAW_RECORDS, "JSON telemetry records"),
        ]

    def _orphans(self, child: str, parent: str, key: str) -> int:
        return self._count(
            f"SELECT COUNT(*) FROM {child} c LEFT JOIN {parent} p ON c.{key} = p.{key} "
            f"WHERE p.{key} IS NULL"
        )

    def validate_relationships(self) -> List[ValidationResult]:
        networks = self._transformed("DIM_NETWORKS")
        aps = self._transformed("DIM_ACCESS_POINTS")
        status = self._transformed("FACT_AP_STATUS")
        qos = self._transformed("FACT_QOS_METRICS")
        return [
            orphan_check("AP to Network FK", self._orphans(aps, networks, "NETWORK_ID"), "orphaned access points"),
            orphan_check("Fact to AP FK", self._orphans(status, aps, "AP_ID"), "orphaned fact records"),
            orphan_check("Fact to Network FK", self._orphans(status, networks, "NETWORK_ID"),
                         "orphaned network references"),
            orphan_check("QoS to AP FK", self._orphans(qos, aps, "AP_ID"), "orphaned QoS records"),
        ]

    def validate_transformations(self) -> List[ValidationResult]:
        category = "Transformation Validation"
        view = self._analytics("VW_AP_PERFORMANCE")
        return [
            nonzero_check(category, "JSON Extraction", self._count(
                f"SELECT COUNT(*) FROM {self._raw} "
                f"WHERE TELEMETRY_DATA:{ROOT}:ap_id IS NOT NULL "
                f"AND TELEMETRY_DATA:{ROOT}:status_metrics:operational_status IS NOT NULL"
            ), "valid JSON extractions"),
            nonzero_check(category, "Analytical View Access", self._count(
                f"SELECT COUNT(*) FROM {view} WHERE ap_id IS NOT NULL"
            ), "records in analytical view"),
            nonzero_check(category, "Data Type Casting", self._count(
                f"SELECT COUNT(*) FROM {view} WHERE ap_id IS NOT NULL "
                f"AND measurement_timestamp IS NOT NULL AND connected_clients >= 0 "
                f"AND cpu_utilization_percent BETWEEN 0 AND 100"
            ), "records with valid type casting"),
        ]

    def validate_governance(self, role: str) -> List[ValidationResult]:
        """Policy, role and masking checks; masking is evaluated as role."""
        category = "Governance Validation"
        env = self.environment
        view = f"{env.database}.{self._analytics('VW_AP_PERFORMANCE')}"

        policies = len(self.connection.execute(
            f"SHOW MASKING POLICIES IN SCHEMA {env.database}.{env.analytics_schema}"
        ))
        applications = self._count(
            f"SELECT COUNT(*) FROM TABLE({env.database}.INFORMATION_SCHEMA.POLICY_REFERENCES("
            f"REF_ENTITY_NAME => '{view}', REF_ENTITY_DOMAIN => 'VIEW')) "
            f"WHERE POLICY_KIND = 'MASKING_POLICY'"
        )
        roles = sum(
            1 for name in (env.analyst_role, env.external_role)
            if self.connection.execute(f"SHOW ROLES LIKE '{name}'")
        )

        self.connection.execute(f"USE ROLE {role}")
        try:
            masked = self._count(
                f"SELECT COUNT(*) FROM (SELECT building_name, zone_name "
                f"FROM {self._analytics(PERFORMANCE_VIEW)} LIMIT 100) "
                f"WHERE building_name LIKE '%*%' OR building_name = '{MASKED_TEXT}' "
                f"OR zone_name = '{MASKED_TEXT}'"
            )
        finally:
            self.connection.execute(f"USE ROLE {env.analyst_role}")

        return [
            minimum_check(category, "Masking Policies Created", policies, MIN_MASKING_POLICIES,
                          "masking policies created"),
            minimum_check(category, "Policy Applications", applications, MIN_POLICY_APPLICATIONS,
                          "columns with applied policies"),
            minimum_check(category, "Role Access Control", roles, MIN_ROLES, "roles configured"),
            ValidationResult(category, "Masking Effectiveness", PASS if masked else INFO,
                             f"Current role: {role} - Masking active: {str(masked > 0).upper()}"),
        ]

    def _semantic_query(self, clause: str) -> List[Dict[str, Any]]:
        return self.connection.execute(
            f"SELECT * FROM SEMANTIC_VIEW({self._analytics('NETWORK_ANALYTICS_SV')} {clause})"
        )

    def validate_semantic_layer(self) -> List[ValidationResult]:
        category = "Semantic View Validation"
        industry_rows = self._semantic_query("DIMENSIONS networks.industry METRICS ap_status.average_client_load")
        access = nonzero_check(category, "Semantic View Access", len(industry_rows),
                               "records accessible via semantic view")

        customers = len(self._semantic_query("DIMENSIONS networks.customer_name"))
        aps = self._count(f"SELECT COUNT(DISTINCT AP_ID) FROM {self._transformed('DIM_ACCESS_POINTS')}")
        entities = ValidationResult(
            category, "Business Entities",
            PASS if customers >= MIN_NETWORKS and aps >= MIN_ACCESS_POINTS else FAIL,
            f"{customers} customers, {aps} access points"
        )

        status = self._transformed("FACT_AP_STATUS")
        avg_uptime = self._scalar(
            f"SELECT AVG(uptime) FROM (SELECT NETWORK_ID, "
            f"AVG(CASE WHEN STATUS = 'Online' THEN 100.0 ELSE 0 END) AS uptime "
            f"FROM {status} GROUP BY NETWORK_ID)"
        )
        return [access, entities, uptime_metric_check(float(avg_uptime) if avg_uptime is not None else None)]

    def validate_intelligence(self) -> List[ValidationResult]:
        count = self._count(f"SELECT COUNT(*) FROM {self._analytics(QUESTIONS_TABLE)}")
        return [minimum_check("Intelligence Validation", "Agent Test Questions", count, MIN_AGENT_QUESTIONS,
                              "test questions available")]

    def validate_business_scenarios(self) -> List[ValidationResult]:
        status = self._transformed("FACT_AP_STATUS")
        aps = self._transformed("DIM_ACCESS_POINTS")

        window_filter = ""
        if self.firmware_issue_window:
            start, end = self.firmware_issue_window
            window_filter = f"AND f.SNAPSHOT_TIMESTAMP BETWEEN '{start:%Y-%m-%d %H:%M:%S}' AND '{end:%Y-%m-%d %H:%M:%S}'"

        affected = self._count(
            f"SELECT COUNT(*) FROM (SELECT f.AP_ID, "
            f"AVG(CASE WHEN f.STATUS = 'Online' THEN 100.0 ELSE 0 END) AS uptime "
            f"FROM {status} f JOIN {aps} ap ON f.AP_ID = ap.AP_ID "
            f"WHERE ap.AP_MODEL = '{catalog.FIRMWARE_ISSUE_MODEL}' "
            f"AND ap.FIRMWARE_VERSION = '{catalog.FIRMWARE_ISSUE_VERSION}' {window_filter} "
            f"GROUP BY f.AP_ID) WHERE uptime < {FIRMWARE_UPTIME_THRESHOLD}"
        )

        industry_rows = self._semantic_query("DIMENSIONS networks.industry METRICS ap_status.average_client_load")
        averages = [
            float(value) for row in industry_rows
            for key, value in row.items() if key.upper().endswith("AVERAGE_CLIENT_LOAD") and value is not None
        ]

        hourly = self.connection.execute(
            f"SELECT EXTRACT(HOUR FROM SNAPSHOT_TIMESTAMP) AS HOUR_OF_DAY, "
            f"AVG(CONNECTED_CLIENT_COUNT) AS AVG_CLIENTS FROM {status} "
            f"WHERE STATUS = 'Online' GROUP BY 1"
        )
        profile = {int(row["HOUR_OF_DAY"]): float(row["AVG_CLIENTS"]) for row in hourly}

        return [
            firmware_check(affected),
            variation_check(AggregateCalculator.coefficient_of_variation(averages)),
            temporal_check(ClientLoadProfile.peak_trough_ratio(profile)),
        ]

    def validate_end_to_end(self) -> List[ValidationResult]:
        return [end_to_end_check({
            "Raw": self._count(f"SELECT COUNT(*) FROM {self._raw}"),
            "Dim": self._count(f"SELECT COUNT(*) FROM {self._transformed('DIM_NETWORKS')}")
            + self._count(f"SELECT COUNT(*) FROM {self._transformed('DIM_ACCESS_POINTS')}"),
            "Fact": self._count(f"SELECT COUNT(*) FROM {self._transformed('FACT_AP_STATUS')}"),
            "View": self._count(f"SELECT COUNT(*) FROM {self._analytics('VW_AP_PERFORMANCE')}"),
            "Semantic": len(self._semantic_query("DIMENSIONS networks.industry")),
        })]

    def run_all(self, role: Optional[str] = None) -> ValidationReport:
        """Run every check against the warehouse."""
        role = role or self.environment.external_role
        logger.info(f"[...] Validating warehouse {self.environment.database} (masking role: {role})")

        report = ValidationReport()
        report.extend(self.validate_environment())
        report.extend(self.validate_objects())
        report.extend(self.validate_relationships())
        report.extend(self.validate_transformations())
        report.extend(self.validate_governance(role))
        report.extend(self.validate_semantic_layer())
        report.extend(self.validate_intelligence())
        report.extend(self.validate_business_scenarios())
        report.extend(self.validate_end_to_end())
        report.extend([readiness_result(report.results)])
        return report
