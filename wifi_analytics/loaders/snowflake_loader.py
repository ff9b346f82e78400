"""
WiFiAnalytics - Snowflake Loader

Handles environment provisioning, object creation and data loading for the
Snowflake data warehouse. Organized into focused classes behind a facade.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

import snowflake.connector as snowflake_connector
from snowflake.connector import DictCursor

from wifi_analytics.governance.masking import MaskingManager
from wifi_analytics.governance.rbac import RbacModel
from wifi_analytics.models.dimensions import DimAccessPoint, DimNetwork
from wifi_analytics.models.facts import (
    TIMESTAMP_FORMAT,
    ApStatusRecord,
    QosMetricRecord,
    RawTelemetryRecord
)
from wifi_analytics.semantic.agent import QUESTIONS_TABLE, AgentQuestion, questions_table_ddl
from wifi_analytics.semantic.semantic_view import SemanticView
from wifi_analytics.transformers.json_transformer import ap_performance_view_sql
from wifi_analytics.transformers.qos_analysis import network_qos_view_sql
from wifi_analytics.utils.config import EnvironmentConfig, SnowflakeConfig
from wifi_analytics.utils.performance import PerformanceTimer, batched


logger = logging.getLogger(__name__)


class SnowflakeConnection:
    """
    Manages Snowflake database connections.

    Handles:
    - Connection establishment and teardown
    - Connection testing
    - Query execution primitives
    """

    def __init__(self, config: SnowflakeConfig):
        """
        Initialize the Snowflake connection manager.

        Args:
            config: Snowflake connection configuration
        """
        self.config = config
        self.connection = None
        logger.info("[INFO] Initializing Snowflake connection manager")

    def connect(self) -> None:
        """Establish connection to Snowflake."""
        try:
            logger.info("[...] Connecting to Snowflake")

            self.connection = snowflake_connector.connect(
                account=self.config.account,
                user=self.config.user,
                password=self.config.password,
                database=self.config.database,
                schema=self.config.schema,
                warehouse=self.config.warehouse,
                role=self.config.role
            )

            logger.info("[OK] Connected to Snowflake")
            logger.debug(f"Database: {self.config.database}, Schema: {self.config.schema}")

        except Exception as error:
            logger.error(f"[ERROR] Failed to connect to Snowflake: {error}")
            raise

    def disconnect(self) -> None:
        """Close Snowflake connection."""
        if self.connection:
            self.connection.close()
            self.connection = None
            logger.debug("Disconnected from Snowflake")

    def execute(
        self,
        sql: str,
        params: Optional[Sequence[Any]] = None
    ) -> List[Dict[str, Any]]:
        """
        Execute SQL statement and return results.

        Args:
            sql: SQL statement
            params: Optional parameters for parameterized query

        Returns:
            List of result dictionaries

        Raises:
            RuntimeError: If called before connect()
        """
        if not self.connection:
            raise RuntimeError("Not connected to Snowflake. Call connect() first.")

        cursor = self.connection.cursor(DictCursor)
        try:
            if params:
                cursor.execute(sql, params)
            else:
                cursor.execute(sql)

            results: List[Dict[str, Any]] = cursor.fetchall()
            return results
        except Exception as error:
            logger.error(f"[ERROR] Statement failed: {error}")
            logger.debug(f"Failed SQL: {sql.strip()[:500]}")
            raise
        finally:
            cursor.close()

    def execute_statements(self, statements: Iterable[str]) -> int:
        """Execute statements in order; returns how many ran."""
        count = 0
        for statement in statements:
            self.execute(statement)
            count += 1
        return count

    def execute_many(
        self,
        sql: str,
        data: List[Any]
    ) -> int:
        """
        Execute SQL statement for multiple records.

        Args:
            sql: SQL statement with placeholders
            data: List of parameter tuples

        Returns:
            Number of rows affected
        """
        if not self.connection:
            raise RuntimeError("Not connected to Snowflake. Call connect() first.")

        if not data:
            return 0

        cursor = self.connection.cursor()
        try:
            cursor.executemany(sql, data)
            return cursor.rowcount or len(data)
        finally:
            cursor.close()

    def commit(self) -> None:
        """Commit the current transaction."""
        if self.connection:
            self.connection.commit()

    def use_role(self, role: str) -> None:
        """Switch the session role."""
        self.execute(f"USE ROLE {role}")
        logger.debug(f"Session role: {role}")

    def test_connection(self) -> bool:
        """
        Test Snowflake connection.

        Returns:
            True if connection is successful
        """
        try:
            self.connect()
            self.execute("SELECT CURRENT_TIMESTAMP()")
            logger.info("[OK] Snowflake connection test successful")
            self.disconnect()
            return True
        except Exception as error:
            logger.error(f"[ERROR] Snowflake connection test failed: {error}")
            return False

    def __enter__(self):
        """Context manager entry."""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.disconnect()
        return False


class SnowflakeEnvironmentManager:
    """
    Provisions account-level objects.

    Handles:
    - Database and schemas
    - Warehouse
    - Roles and grants
    """

    def __init__(self, connection: SnowflakeConnection, environment: EnvironmentConfig):
        self.connection = connection
        self.environment = environment
        self.rbac = RbacModel(environment)

    def environment_statements(self) -> List[str]:
        """Return CREATE statements for database, schemas and warehouse."""
        env = self.environment
        return [
            f"CREATE DATABASE IF NOT EXISTS {env.database} "
            f"COMMENT = 'WiFi Network Analytics Demo Database'",
            f"CREATE SCHEMA IF NOT EXISTS {env.database}.{env.raw_schema} "
            f"COMMENT = 'Raw JSON telemetry data from WiFi networks'",
            f"CREATE SCHEMA IF NOT EXISTS {env.database}.{env.transformed_schema} "
            f"COMMENT = 'Structured tables transformed from raw JSON'",
            f"CREATE SCHEMA IF NOT EXISTS {env.database}.{env.analytics_schema} "
            f"COMMENT = 'Analytical views and semantic models'",
            f"""CREATE WAREHOUSE IF NOT EXISTS {env.warehouse}
            WITH
            WAREHOUSE_SIZE = '{env.warehouse_size}'
            AUTO_SUSPEND = {env.auto_suspend_seconds}
            AUTO_RESUME = TRUE
            INITIALLY_SUSPENDED = TRUE
            COMMENT = 'Warehouse for WiFi Analytics Demo'"""
        ]

    def provision_statements(self) -> List[str]:
        """Every statement provisioning runs, in order."""
        return (
            [f"USE ROLE {self.environment.admin_role}"]
            + self.environment_statements()
            + self.rbac.statements()
        )

    def provision(self) -> int:
        """
        Create database, schemas, warehouse, roles and grants.

        Returns:
            Number of statements executed
        """
        logger.info(f"[...] Provisioning environment {self.environment.database}")
        count = self.connection.execute_statements(self.provision_statements())
        logger.info(f"[OK] Environment provisioned ({count} statements)")
        return count

    def use_context(self, role: Optional[str] = None) -> None:
        """Select role, database and warehouse for the session."""
        env = self.environment
        self.connection.use_role(role or env.analyst_role)
        self.connection.execute(f"USE DATABASE {env.database}")
        self.connection.execute(f"USE WAREHOUSE {env.warehouse}")


class SnowflakeSchemaManager:
    """
    Manages Snowflake object creation.

    Handles:
    - Dimension, staging and fact tables
    - Analytical views
    - Masking policies
    - Semantic view and agent question table
    """

    def __init__(self, connection: SnowflakeConnection, environment: EnvironmentConfig):
        """
        Initialize the schema manager.

        Args:
            connection: Active SnowflakeConnection instance
            environment: Object names
        """
        self.connection = connection
        self.environment = environment

    def initialize_schema(self, replace: bool = False) -> None:
        """
        Create tables.

        Args:
            replace: Drop and recreate existing tables (used before a full reload)
        """
        logger.info("[...] Initializing Snowflake schema")

        ddl_statements = (
            self._get_dimension_ddl(replace)
            + self._get_staging_ddl(replace)
            + self._get_fact_ddl(replace)
        )
        self.connection.execute_statements(ddl_statements)

        self.connection.commit()
        logger.info(f"[OK] Schema initialized ({len(ddl_statements)} tables)")

    def create_views(self) -> None:
        """Create the AP performance and QoS analysis views."""
        logger.info("[...] Creating analytical views")
        self.connection.execute_statements(self.get_view_ddl())
        logger.info("[OK] Analytical views created")

    def apply_governance(self, masking: Optional[MaskingManager] = None) -> int:
        """
        Create masking policies and attach them to the performance view.

        Columns are unset first so a rerun can reattach the policies.

        Returns:
            Number of policies applied
        """
        masking = masking or MaskingManager(self.environment)
        logger.info("[...] Applying masking policies")
        self.connection.use_role(self.environment.admin_role)
        self.connection.execute_statements(masking.detach_policy_statements())
        self.connection.execute_statements(masking.create_policy_statements())
        self.connection.execute_statements(masking.attach_policy_statements())
        logger.info(f"[OK] {len(masking.policies)} masking policies applied")
        return len(masking.policies)

    def create_semantic_layer(self, semantic_view: SemanticView) -> None:
        """Create the semantic view and the agent question table."""
        logger.info(f"[...] Creating semantic view {semantic_view.qualified_name}")
        self.connection.execute(semantic_view.to_sql())
        self.connection.execute(questions_table_ddl(self.environment))
        logger.info("[OK] Semantic layer created")

    def _create(self, replace: bool) -> str:
        return "CREATE OR REPLACE TABLE" if replace else "CREATE TABLE IF NOT EXISTS"

    def _get_dimension_ddl(self, replace: bool = False) -> List[str]:
        """Return DDL statements for dimension tables."""
        schema = self.environment.transformed_schema
        create = self._create(replace)

        dim_networks_ddl = f"""
        {create} {schema}.DIM_NETWORKS (
            NETWORK_ID INTEGER PRIMARY KEY,
            NETWORK_NAME VARCHAR(100),
            CUSTOMER_NAME VARCHAR(100),
            INDUSTRY VARCHAR(50),
            LOCATION_CITY VARCHAR(50),
            LOCATION_COUNTRY VARCHAR(50),
            SLA_UPTIME_TARGET DECIMAL(5,4),
            CREATED_DATE DATE
        )
        """

        dim_access_points_ddl = f"""
        {create} {schema}.DIM_ACCESS_POINTS (
            AP_ID INTEGER PRIMARY KEY,
            NETWORK_ID INTEGER,
            AP_MAC_ADDRESS VARCHAR(17),
            AP_MODEL VARCHAR(50),
            MANUFACTURER VARCHAR(50),
            WIFI_STANDARD VARCHAR(20),
            MAX_CLIENT_CAPACITY INTEGER,
            DEPLOYMENT_DATE DATE,
            FIRMWARE_VERSION VARCHAR(20),
            LOCATION_BUILDING VARCHAR(100),
            LOCATION_FLOOR INTEGER,
            LOCATION_ZONE VARCHAR(50),
            FOREIGN KEY (NETWORK_ID) REFERENCES {schema}.DIM_NETWORKS(NETWORK_ID)
        )
        """

        return [dim_networks_ddl, dim_access_points_ddl]

    def _get_staging_ddl(self, replace: bool = False) -> List[str]:
        """Return DDL for the raw JSON staging table."""
        raw_ddl = f"""
        {self._create(replace)} {self.environment.raw_schema}.RAW_NETWORK_TELEMETRY (
            RECORD_ID INTEGER AUTOINCREMENT,
            TELEMETRY_DATA VARIANT,
            INGESTED_AT TIMESTAMP_NTZ DEFAULT CURRENT_TIMESTAMP()
        )
        """
        return [raw_ddl]

    def _get_fact_ddl(self, replace: bool = False) -> List[str]:
        """Return DDL statements for fact tables."""
        schema = self.environment.transformed_schema
        create = self._create(replace)

        fact_status_ddl = f"""
        {create} {schema}.FACT_AP_STATUS (
            SNAPSHOT_TIMESTAMP TIMESTAMP_NTZ,
            AP_ID INTEGER,
            NETWORK_ID INTEGER,
            STATUS VARCHAR(20),
            CONNECTED_CLIENT_COUNT INTEGER,
            CPU_UTILIZATION_PERCENT DECIMAL(5,2),
            MEMORY_UTILIZATION_PERCENT DECIMAL(5,2),
            PRIMARY KEY (SNAPSHOT_TIMESTAMP, AP_ID),
            FOREIGN KEY (AP_ID) REFERENCES {schema}.DIM_ACCESS_POINTS(AP_ID),
            FOREIGN KEY (NETWORK_ID) REFERENCES {schema}.DIM_NETWORKS(NETWORK_ID)
        )
        """

        fact_qos_ddl = f"""
        {create} {schema}.FACT_QOS_METRICS (
            METRIC_TIMESTAMP TIMESTAMP_NTZ,
            AP_ID INTEGER,
            NETWORK_ID INTEGER,
            RSSI_DBM INTEGER,
            THROUGHPUT_MBPS DECIMAL(8,2),
            LATENCY_MS INTEGER,
            PACKET_LOSS_PERCENT DECIMAL(5,2),
            CONNECTED_CLIENTS_SAMPLE INTEGER,
            INTERFERENCE_LEVEL VARCHAR(20),
            SIGNAL_QUALITY_SCORE DECIMAL(3,1),
            PRIMARY KEY (METRIC_TIMESTAMP, AP_ID),
            FOREIGN KEY (AP_ID) REFERENCES {schema}.DIM_ACCESS_POINTS(AP_ID),
            FOREIGN KEY (NETWORK_ID) REFERENCES {schema}.DIM_NETWORKS(NETWORK_ID)
        )
        """

        return [fact_status_ddl, fact_qos_ddl]

    def get_view_ddl(self) -> List[str]:
        """Return DDL statements for the analytical views."""
        return [
            ap_performance_view_sql(self.environment),
            network_qos_view_sql(self.environment)
        ]


class SnowflakeFactLoader:
    """
    Loads table records to Snowflake.

    Handles:
    - Dimension rows
    - Raw JSON telemetry (via PARSE_JSON)
    - Status and QoS facts, in batches
    - Agent test questions
    """

    def __init__(
        self,
        connection: SnowflakeConnection,
        environment: EnvironmentConfig,
        batch_size: int = 10000
    ):
        """
        Initialize the fact loader.

        Args:
            connection: Active SnowflakeConnection instance
            environment: Object names
            batch_size: Rows per executemany call
        """
        self.connection = connection
        self.environment = environment
        self.batch_size = batch_size

    def _insert_rows(self, table: str, columns: Sequence[str], rows: Iterable[tuple]) -> int:
        """Insert rows in batches, committing after each batch."""
        placeholders = ", ".join(["%s"] * len(columns))
        sql = f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})"

        total = 0
        for batch in batched(rows, self.batch_size):
            total += self.connection.execute_many(sql, batch)
            self.connection.commit()
            logger.debug(f"{table}: {total} rows loaded")
        return total

    def truncate(self, table: str) -> None:
        self.connection.execute(f"TRUNCATE TABLE IF EXISTS {table}")

    def load_networks(self, networks: List[DimNetwork]) -> int:
        """
        Load network dimension rows.

        Args:
            networks: List of DimNetwork

        Returns:
            Number of records loaded
        """
        if not networks:
            return 0
        table = f"{self.environment.transformed_schema}.DIM_NETWORKS"
        logger.info(f"[...] Loading {len(networks)} networks")
        count = self._insert_rows(table, DimNetwork.COLUMNS, (network.to_row() for network in networks))
        logger.info(f"[OK] Loaded {count} networks")
        return count

    def load_access_points(self, access_points: List[DimAccessPoint]) -> int:
        """Load access point dimension rows."""
        if not access_points:
            return 0
        table = f"{self.environment.transformed_schema}.DIM_ACCESS_POINTS"
        logger.info(f"[...] Loading {len(access_points)} access points")
        count = self._insert_rows(table, DimAccessPoint.COLUMNS, (ap.to_row() for ap in access_points))
        logger.info(f"[OK] Loaded {count} access points")
        return count

    def load_raw_telemetry(self, records: List[RawTelemetryRecord]) -> int:
        """
        Load raw JSON documents into the VARIANT staging table.

        PARSE_JSON is not allowed in a VALUES clause, so rows go through
        INSERT ... SELECT.
        """
        if not records:
            return 0

        table = f"{self.environment.raw_schema}.RAW_NETWORK_TELEMETRY"
        sql = (
            f"INSERT INTO {table} (RECORD_ID, TELEMETRY_DATA, INGESTED_AT) "
            f"SELECT %s, PARSE_JSON(%s), %s"
        )
        logger.info(f"[...] Loading {len(records)} raw telemetry records")

        total = 0
        rows = (
            (record.record_id, record.to_json(), record.ingested_at.strftime(TIMESTAMP_FORMAT))
            for record in records
        )
        for batch in batched(rows, self.batch_size):
            total += self.connection.execute_many(sql, batch)
            self.connection.commit()

        logger.info(f"[OK] Loaded {total} raw telemetry records")
        return total

    def load_status_records(self, records: List[ApStatusRecord]) -> int:
        """Load status snapshot facts."""
        if not records:
            return 0
        table = f"{self.environment.transformed_schema}.FACT_AP_STATUS"
        logger.info(f"[...] Loading {len(records)} status records")
        with PerformanceTimer("load_status_records"):
            count = self._insert_rows(table, ApStatusRecord.COLUMNS, (record.to_row() for record in records))
        logger.info(f"[OK] Loaded {count} status records")
        return count

    def load_qos_records(self, records: Iterable[QosMetricRecord]) -> int:
        """
        Load QoS facts from a stream.

        Args:
            records: Iterable of QosMetricRecord (consumed once)

        Returns:
            Number of records loaded
        """
        table = f"{self.environment.transformed_schema}.FACT_QOS_METRICS"
        logger.info("[...] Loading QoS measurements")
        with PerformanceTimer("load_qos_records"):
            count = self._insert_rows(table, QosMetricRecord.COLUMNS, (record.to_row() for record in records))
        logger.info(f"[OK] Loaded {count} QoS records")
        return count

    def load_test_questions(self, questions: List[AgentQuestion]) -> int:
        """Replace the agent test question rows."""
        table = f"{self.environment.analytics_schema}.{QUESTIONS_TABLE}"
        self.truncate(table)
        count = self._insert_rows(
            table,
            ("QUESTION_ID", "CATEGORY", "QUESTION", "EXPECTED_INSIGHT"),
            (question.to_row() for question in questions)
        )
        logger.info(f"[OK] Loaded {count} agent test questions")
        return count


class SnowflakeLoader:
    """
    Facade class for Snowflake operations.

    Provides unified interface to SnowflakeConnection,
    SnowflakeEnvironmentManager, SnowflakeSchemaManager and SnowflakeFactLoader.
    """

    def __init__(
        self,
        config: SnowflakeConfig,
        environment: Optional[EnvironmentConfig] = None,
        batch_size: int = 10000
    ):
        """
        Initialize the Snowflake loader facade.

        Args:
            config: Snowflake connection configuration
            environment: Object names (defaults when None)
            batch_size: Rows per insert batch
        """
        self.environment = environment or EnvironmentConfig()
        self.connection = SnowflakeConnection(config)
        self.environment_manager = SnowflakeEnvironmentManager(self.connection, self.environment)
        self.schema_manager = SnowflakeSchemaManager(self.connection, self.environment)
        self.fact_loader = SnowflakeFactLoader(self.connection, self.environment, batch_size)

    def connect(self) -> None:
        """Establish connection to Snowflake."""
        self.connection.connect()

    def disconnect(self) -> None:
        """Close Snowflake connection."""
        self.connection.disconnect()

    def test_connection(self) -> bool:
        """Test Snowflake connection."""
        return self.connection.test_connection()

    def provision(self) -> int:
        """Create database, schemas, warehouse and roles."""
        return self.environment_manager.provision()

    def use_context(self, role: Optional[str] = None) -> None:
        """Select role, database and warehouse."""
        self.environment_manager.use_context(role)

    def initialize_schema(self, replace: bool = False) -> None:
        """Create tables."""
        self.schema_manager.initialize_schema(replace)

    def create_views(self) -> None:
        """Create analytical views."""
        self.schema_manager.create_views()

    def apply_governance(self, masking: Optional[MaskingManager] = None) -> int:
        """Create and attach masking policies."""
        return self.schema_manager.apply_governance(masking)

    def create_semantic_layer(self, semantic_view: SemanticView, questions: List[AgentQuestion]) -> int:
        """Create the semantic view and load the agent test questions."""
        self.schema_manager.create_semantic_layer(semantic_view)
        return self.fact_loader.load_test_questions(questions)

    def load_networks(self, networks: List[DimNetwork]) -> int:
        """Load network dimension."""
        return self.fact_loader.load_networks(networks)

    def load_access_points(self, access_points: List[DimAccessPoint]) -> int:
        """Load access point dimension."""
        return self.fact_loader.load_access_points(access_points)

    def load_raw_telemetry(self, records: List[RawTelemetryRecord]) -> int:
        """Load raw telemetry."""
        return self.fact_loader.load_raw_telemetry(records)

    def load_status_records(self, records: List[ApStatusRecord]) -> int:
        """Load status records."""
        return self.fact_loader.load_status_records(records)

    def load_qos_records(self, records: Iterable[QosMetricRecord]) -> int:
        """Load QoS records."""
        return self.fact_loader.load_qos_records(records)

    def __enter__(self):
        """Context manager entry."""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.disconnect()
        return False
