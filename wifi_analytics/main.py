"""
WiFiAnalytics - Main Entry Point

This module provides the main entry point for the WiFi analytics demo
pipeline: provisioning, synthetic data generation, transformation,
governance, semantic layer and validation.
"""

import argparse
import dataclasses
import logging
import sys
from datetime import datetime, timezone
from typing import Iterable, Iterator, List, Optional

from wifi_analytics.aggregators import QosAggregator, UptimeAggregator
from wifi_analytics.generators import DatasetGenerator, WifiDataset, build_connected_devices_sample
from wifi_analytics.governance import MaskingManager, RbacModel, is_masked_value
from wifi_analytics.governance.masking import PERFORMANCE_VIEW
from wifi_analytics.loaders import FileExporter, SnowflakeEnvironmentManager, SnowflakeLoader
from wifi_analytics.loaders.snowflake_loader import SnowflakeSchemaManager
from wifi_analytics.models import QosMetricRecord
from wifi_analytics.semantic import build_agent_config, build_network_analytics_view, questions_table_ddl
from wifi_analytics.transformers import (
    ApPerformanceRow,
    QosAnalyzer,
    TelemetryTransformer,
    flatten_connected_devices
)
from wifi_analytics.utils.config import Config
from wifi_analytics.utils.logging_config import setup_logging
from wifi_analytics.utils.performance import PerformanceTimer, format_perf_report
from wifi_analytics.validators import DatasetValidator, WarehouseValidator


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments.

    Args:
        argv: Argument list (default: sys.argv)

    Returns:
        Parsed argument namespace
    """
    parser = argparse.ArgumentParser(
        description="WiFiAnalytics - WiFi Telemetry Analytics Demo Pipeline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Generate, transform, govern and validate locally, writing files
  python -m wifi_analytics.main --full-pipeline --dry-run --export

  # Provision the Snowflake environment
  python -m wifi_analytics.main --provision

  # Generate 7 days of data and load it
  python -m wifi_analytics.main --generate --days 7 --seed 7

  # Validate the warehouse as the external role
  python -m wifi_analytics.main --validate --role EXTERNAL_ANALYST
        """
    )

    # Operation modes (mutually exclusive)
    mode_group = parser.add_mutually_exclusive_group(required=True)
    mode_group.add_argument(
        "--provision",
        action="store_true",
        help="Create database, schemas, warehouse and roles"
    )
    mode_group.add_argument(
        "--generate",
        action="store_true",
        help="Generate synthetic data and load it"
    )
    mode_group.add_argument(
        "--transform",
        action="store_true",
        help="Create analytical views over the loaded data"
    )
    mode_group.add_argument(
        "--govern",
        action="store_true",
        help="Create and attach masking policies"
    )
    mode_group.add_argument(
        "--semantic",
        action="store_true",
        help="Create the semantic view and agent test questions"
    )
    mode_group.add_argument(
        "--validate",
        action="store_true",
        help="Run pipeline validation"
    )
    mode_group.add_argument(
        "--full-pipeline",
        action="store_true",
        help="Run every stage in order"
    )
    mode_group.add_argument(
        "--test",
        action="store_true",
        help="Run connection tests only"
    )

    # Generation options
    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed (overrides RANDOM_SEED)"
    )
    parser.add_argument(
        "--days",
        type=int,
        help="Days of history to generate (overrides HISTORY_DAYS)"
    )
    parser.add_argument(
        "--role",
        type=str,
        help="Role to evaluate masking for (default: external role)"
    )

    # Output options
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Run in memory without connecting to Snowflake"
    )
    parser.add_argument(
        "--export",
        action="store_true",
        help="Write generated tables, views and SQL to the export directory"
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging"
    )

    args = parser.parse_args(argv)
    if args.days is not None and args.days <= 0:
        parser.error("--days must be positive")
    return args


def apply_overrides(config: Config, seed: Optional[int] = None, days: Optional[int] = None) -> Config:
    """Apply --seed / --days to the generation configuration."""
    changes = {}
    if seed is not None:
        changes["seed"] = seed
    if days is not None:
        changes["history_days"] = days
    if changes:
        config.generation = dataclasses.replace(config.generation, **changes)
    return config


def open_loader(config: Config) -> SnowflakeLoader:
    """Build a loader from environment credentials."""
    return SnowflakeLoader(
        config.get_snowflake_config(),
        config.environment,
        config.operational.batch_size
    )


def make_exporter(config: Config, export: bool) -> Optional[FileExporter]:
    if not export:
        return None
    return FileExporter(config.export_dir, config.operational.export_format)


def tap(records: Iterable[QosMetricRecord], aggregator: QosAggregator) -> Iterator[QosMetricRecord]:
    """Feed a QoS stream to an aggregator while passing it on."""
    for record in records:
        aggregator.add(record)
        yield record


class PipelineRun:
    """
    State shared between pipeline stages in one invocation.

    Handles:
    - Lazy dataset generation and transformation
    - Optional Snowflake loader (None for dry runs)
    - Optional file export
    """

    def __init__(
        self,
        config: Config,
        loader: Optional[SnowflakeLoader] = None,
        exporter: Optional[FileExporter] = None
    ):
        self.config = config
        self.loader = loader
        self.exporter = exporter
        self.generator = DatasetGenerator(config.generation)
        self._dataset: Optional[WifiDataset] = None
        self._performance_rows: Optional[List[ApPerformanceRow]] = None

    @property
    def dry_run(self) -> bool:
        return self.loader is None

    @property
    def dataset(self) -> WifiDataset:
        if self._dataset is None:
            with PerformanceTimer("generate_dataset"):
                self._dataset = self.generator.generate()
        return self._dataset

    @property
    def performance_rows(self) -> List[ApPerformanceRow]:
        if self._performance_rows is None:
            transformer = TelemetryTransformer(self.dataset.access_points, self.dataset.networks)
            with PerformanceTimer("transform_telemetry"):
                self._performance_rows = transformer.to_performance_rows(self.dataset.raw_telemetry)
        return self._performance_rows


def run_tests(config: Config) -> bool:
    """
    Run the Snowflake connection test.

    Args:
        config: Application configuration

    Returns:
        True if the test passed, False otherwise
    """
    logger = logging.getLogger(__name__)
    logger.info("[INFO] Running connection tests")

    logger.info("[...] Testing Snowflake connection")
    with open_loader(config) as loader:
        passed = loader.test_connection()

    if passed:
        logger.info("[DONE] All connection tests passed")
    else:
        logger.error("[ERROR] Some connection tests failed")
    return passed


def run_provision(run: PipelineRun) -> bool:
    """Create the warehouse environment, or render its SQL for a dry run."""
    logger = logging.getLogger(__name__)
    env = run.config.environment
    logger.info(f"[INFO] Provisioning environment {env.database}")

    if run.dry_run:
        statements = SnowflakeEnvironmentManager(None, env).provision_statements()
        logger.info(f"[INFO] Dry run: {len(statements)} provisioning statements rendered")
    else:
        statements = run.loader.environment_manager.provision_statements()
        run.loader.provision()
        run.loader.use_context(env.analyst_role)

    if run.exporter:
        run.exporter.write_sql("provision", statements)
    return True


def run_generate(run: PipelineRun) -> bool:
    """Generate the dataset and load or export it."""
    logger = logging.getLogger(__name__)
    dataset = run.dataset
    qos_loaded = 0

    if not run.dry_run:
        run.loader.use_context()
        run.loader.initialize_schema(replace=True)
        run.loader.load_networks(dataset.networks)
        run.loader.load_access_points(dataset.access_points)
        run.loader.load_raw_telemetry(dataset.raw_telemetry)
        run.loader.load_status_records(dataset.status_records)
        with PerformanceTimer("load_qos") as timer:
            qos_loaded = run.loader.load_qos_records(run.generator.iter_qos(dataset))
            timer.rows = qos_loaded

    if run.exporter:
        run.exporter.write_rows("dim_networks", (network.to_dict() for network in dataset.networks))
        run.exporter.write_rows("dim_access_points", (ap.to_dict() for ap in dataset.access_points))
        run.exporter.write_raw_telemetry(dataset.raw_telemetry)
        run.exporter.write_rows("fact_ap_status", (record.to_dict() for record in dataset.status_records))
        qos_loaded = run.exporter.write_rows(
            "fact_qos_metrics", (record.to_dict() for record in run.generator.iter_qos(dataset))
        )

    logger.info(f"[OK] Generation complete: {dataset.summary()}, qos_metrics={qos_loaded:,}")
    return True


def run_transform(run: PipelineRun) -> bool:
    """Build the analytical views."""
    logger = logging.getLogger(__name__)

    if not run.dry_run:
        run.loader.use_context()
        run.loader.create_views()
        return True

    dataset = run.dataset
    rows = run.performance_rows
    devices = flatten_connected_devices(build_connected_devices_sample())
    logger.info(f"[OK] {len(rows):,} AP performance rows, {len(devices)} flattened device rows")

    uptime = UptimeAggregator(dataset.access_points, dataset.networks)
    network_uptime = uptime.network_uptime(dataset.status_records)
    firmware_uptime = uptime.firmware_uptime(dataset.status_records, dataset.firmware_issue_window)
    qos = QosAggregator(dataset.access_points, dataset.networks)

    if run.exporter:
        run.exporter.write_rows("vw_ap_performance", (row.to_dict() for row in rows))
        run.exporter.write_rows("connected_devices", (device.to_dict() for device in devices))
        analyzer = QosAnalyzer(dataset.access_points, dataset.networks)
        run.exporter.write_rows(
            "vw_network_qos_analysis",
            (row.to_dict() for row in analyzer.iter_rows(tap(run.generator.iter_qos(dataset), qos)))
        )
        run.exporter.write_sql("views", SnowflakeSchemaManager(None, run.config.environment).get_view_ddl())
    else:
        qos.consume(run.generator.iter_qos(dataset))

    for industry, average in UptimeAggregator.industry_uptime(network_uptime).items():
        logger.info(f"[OK] {industry}: {average}% average network uptime")
    for summary in qos.manufacturer_summaries():
        logger.info(
            f"[OK] {summary.group}: avg RSSI {summary.avg_rssi} dBm, "
            f"coverage gaps {summary.coverage_gap_pct}%"
        )

    if run.exporter:
        run.exporter.write_rows("network_sla", (result.to_dict() for result in network_uptime))
        run.exporter.write_rows("firmware_uptime", (
            {
                "ap_model": model,
                "firmware_version": firmware,
                "snapshots": summary.total_snapshots,
                "uptime_pct": summary.uptime_pct,
                "avg_clients": summary.avg_clients,
                "p95_clients": summary.p95_clients
            }
            for (model, firmware), summary in sorted(firmware_uptime.items())
        ))
        run.exporter.write_rows("qos_by_manufacturer", (s.to_dict() for s in qos.manufacturer_summaries()))
        run.exporter.write_rows("qos_by_industry", (s.to_dict() for s in qos.industry_summaries()))
    return True


def run_govern(run: PipelineRun, role: str) -> bool:
    """Apply masking policies, or preview masking for role on a dry run."""
    logger = logging.getLogger(__name__)
    env = run.config.environment
    masking = MaskingManager(env)

    if not run.dry_run:
        run.loader.apply_governance(masking)
        run.loader.use_context()
        return True

    access = RbacModel(env).role(role)
    if access is not None and not access.can_select(PERFORMANCE_VIEW):
        logger.error(f"[ERROR] Role {role} has no SELECT on {PERFORMANCE_VIEW}")
        return False

    masked_rows = masking.mask_rows(run.performance_rows, role)
    masked_count = sum(1 for row in masked_rows if is_masked_value(row.building_name))
    logger.info(
        f"[OK] Masking preview for {role}: {masked_count:,} of {len(masked_rows):,} rows masked"
    )

    if run.exporter:
        run.exporter.write_rows(f"vw_ap_performance_{role.lower()}", (row.to_dict() for row in masked_rows))
        run.exporter.write_sql(
            "governance",
            RbacModel(env).statements() + masking.create_policy_statements() + masking.attach_policy_statements()
        )
    return True


def run_semantic(run: PipelineRun) -> bool:
    """Create the semantic view and agent question table."""
    logger = logging.getLogger(__name__)
    env = run.config.environment
    semantic_view = build_network_analytics_view(env)
    agent = build_agent_config(semantic_view, env)

    if not run.dry_run:
        run.loader.use_context()
        loaded = run.loader.create_semantic_layer(semantic_view, agent.test_questions)
        logger.info(f"[OK] {loaded} agent test questions loaded")
    else:
        logger.info(
            f"[OK] Semantic view {semantic_view.qualified_name} rendered, "
            f"{len(agent.test_questions)} agent test questions"
        )

    if run.exporter:
        run.exporter.write_sql("semantic_view", [semantic_view.to_sql(), questions_table_ddl(env)])
        run.exporter.write_json("agent_config", agent.to_dict())
    return True


def run_validation(run: PipelineRun, role: str) -> bool:
    """Validate the pipeline; returns False when any check fails."""
    logger = logging.getLogger(__name__)
    env = run.config.environment

    if run.dry_run:
        semantic_view = build_network_analytics_view(env)
        validator = DatasetValidator(
            run.dataset,
            run.performance_rows,
            masking=MaskingManager(env),
            rbac=RbacModel(env),
            semantic_view=semantic_view,
            agent=build_agent_config(semantic_view, env),
            environment=env
        )
        report = validator.run_all(role, run.generator.iter_qos(run.dataset))
    else:
        window = None
        if run.config.generation.reference_time is not None:
            window = run.config.generation.firmware_issue_window()
        run.loader.use_context()
        report = WarehouseValidator(run.loader.connection, env, window).run_all(role)

    report.log_summary()
    if run.exporter:
        run.exporter.write_rows("validation_report", (result.to_dict() for result in report.results))

    if report.is_ready:
        logger.info("[OK] READY FOR DEMONSTRATION")
    else:
        logger.error(f"[ERROR] {len(report.failures)} validation checks failed")
    return report.is_ready


def run_full_pipeline(run: PipelineRun, role: str) -> bool:
    """Run every stage in order, stopping at the first failure."""
    logger = logging.getLogger(__name__)
    logger.info("[INFO] Running full pipeline")

    stages = [
        ("provision", lambda: run_provision(run)),
        ("generate", lambda: run_generate(run)),
        ("transform", lambda: run_transform(run)),
        ("govern", lambda: run_govern(run, role)),
        ("semantic", lambda: run_semantic(run)),
        ("validate", lambda: run_validation(run, role)),
    ]
    for name, stage in stages:
        logger.info(f"[...] Stage: {name}")
        with PerformanceTimer(f"stage_{name}"):
            if not stage():
                logger.error(f"[ERROR] Stage {name} failed")
                return False
    return True


def execute(args: argparse.Namespace, config: Config) -> bool:
    """Dispatch the selected operation."""
    if args.test:
        return run_tests(config)

    role = args.role or config.environment.external_role
    exporter = make_exporter(config, args.export)

    if args.dry_run:
        return dispatch(args, PipelineRun(config, None, exporter), role)

    with open_loader(config) as loader:
        return dispatch(args, PipelineRun(config, loader, exporter), role)


def dispatch(args: argparse.Namespace, run: PipelineRun, role: str) -> bool:
    if args.provision:
        return run_provision(run)
    if args.generate:
        return run_generate(run)
    if args.transform:
        return run_transform(run)
    if args.govern:
        return run_govern(run, role)
    if args.semantic:
        return run_semantic(run)
    if args.validate:
        return run_validation(run, role)
    if args.full_pipeline:
        return run_full_pipeline(run, role)
    return False


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for WiFiAnalytics.

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    args = parse_arguments(argv)

    # Setup logging
    log_level = logging.DEBUG if args.verbose else logging.INFO
    setup_logging(level=log_level)
    logger = logging.getLogger(__name__)

    logger.info("=" * 60)
    logger.info("WiFiAnalytics - Starting")
    logger.info(f"Timestamp: {datetime.now(timezone.utc).isoformat()}")
    logger.info("=" * 60)

    # Load configuration
    try:
        config = apply_overrides(Config(), args.seed, args.days)
        logger.info("[OK] Configuration loaded")
    except Exception as error:
        logger.error(f"[ERROR] Failed to load configuration: {error}")
        return 1

    try:
        success = execute(args, config)

    except KeyboardInterrupt:
        logger.warning("[WARN] Operation interrupted by user")
        return 130

    except Exception as error:
        logger.error(f"[ERROR] Operation failed: {error}", exc_info=True)
        return 1

    if args.verbose:
        logger.debug(format_perf_report())

    logger.info("=" * 60)
    if success:
        logger.info("[DONE] WiFiAnalytics - Complete")
    else:
        logger.error("[ERROR] WiFiAnalytics - Failed")
    logger.info("=" * 60)

    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
