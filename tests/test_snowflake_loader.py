"""
WiFiAnalytics - Snowflake Loader Tests

Unit tests for the Snowflake connection, schema manager and fact loader.
The connector is mocked; no warehouse is contacted.
"""

import unittest
from datetime import datetime
from unittest.mock import MagicMock, patch

from wifi_analytics.loaders.snowflake_loader import (
    SnowflakeConnection,
    SnowflakeEnvironmentManager,
    SnowflakeFactLoader,
    SnowflakeLoader,
    SnowflakeSchemaManager
)
from wifi_analytics.models.facts import RawTelemetryRecord
from wifi_analytics.semantic.agent import build_test_questions
from wifi_analytics.utils.config import EnvironmentConfig, SnowflakeConfig

from factories import make_network, make_status


CONNECT_TARGET = "wifi_analytics.loaders.snowflake_loader.snowflake_connector.connect"


def make_snowflake_config() -> SnowflakeConfig:
    return SnowflakeConfig(account="acct", user="demo", password="secret")


class TestSnowflakeConnection(unittest.TestCase):
    """Test cases for SnowflakeConnection."""

    def test_execute_requires_connection(self):
        connection = SnowflakeConnection(make_snowflake_config())
        with self.assertRaises(RuntimeError):
            connection.execute("SELECT 1")
        with self.assertRaises(RuntimeError):
            connection.execute_many("INSERT", [(1,)])

    @patch(CONNECT_TARGET)
    def test_connect_passes_settings(self, mock_connect):
        connection = SnowflakeConnection(make_snowflake_config())
        connection.connect()
        kwargs = mock_connect.call_args.kwargs
        self.assertEqual(kwargs["account"], "acct")
        self.assertEqual(kwargs["database"], "WIFI_ANALYTICS")
        self.assertEqual(kwargs["warehouse"], "WIFI_ANALYTICS_WH")

    @patch(CONNECT_TARGET)
    def test_execute_returns_rows_and_closes_cursor(self, mock_connect):
        cursor = mock_connect.return_value.cursor.return_value
        cursor.fetchall.return_value = [{"COUNT": 3}]

        with SnowflakeConnection(make_snowflake_config()) as connection:
            rows = connection.execute("SELECT COUNT(*) AS COUNT FROM X")

        self.assertEqual(rows, [{"COUNT": 3}])
        cursor.execute.assert_called_once_with("SELECT COUNT(*) AS COUNT FROM X")
        cursor.close.assert_called_once()
        mock_connect.return_value.close.assert_called_once()

    @patch(CONNECT_TARGET)
    def test_execute_reraises_errors(self, mock_connect):
        cursor = mock_connect.return_value.cursor.return_value
        cursor.execute.side_effect = Exception("SQL compilation error")

        connection = SnowflakeConnection(make_snowflake_config())
        connection.connect()
        with self.assertRaises(Exception):
            connection.execute("SELECT * FROM MISSING")
        cursor.close.assert_called_once()

    @patch(CONNECT_TARGET)
    def test_execute_many(self, mock_connect):
        cursor = mock_connect.return_value.cursor.return_value
        cursor.rowcount = None

        connection = SnowflakeConnection(make_snowflake_config())
        connection.connect()
        self.assertEqual(connection.execute_many("INSERT", [(1,), (2,)]), 2)
        self.assertEqual(connection.execute_many("INSERT", []), 0)
        cursor.executemany.assert_called_once_with("INSERT", [(1,), (2,)])

    @patch(CONNECT_TARGET)
    def test_connection_test_failure(self, mock_connect):
        mock_connect.side_effect = Exception("Incorrect username or password")
        self.assertFalse(SnowflakeConnection(make_snowflake_config()).test_connection())


class TestSchemaManagers(unittest.TestCase):
    """Test cases for provisioning and DDL."""

    def setUp(self):
        self.connection = MagicMock()
        self.environment = EnvironmentConfig()

    def test_provision_statements(self):
        manager = SnowflakeEnvironmentManager(self.connection, self.environment)
        statements = manager.provision_statements()
        self.assertEqual(statements[0], "USE ROLE ACCOUNTADMIN")
        self.assertTrue(statements[1].startswith("CREATE DATABASE IF NOT EXISTS WIFI_ANALYTICS"))
        self.assertIn("CREATE WAREHOUSE IF NOT EXISTS WIFI_ANALYTICS_WH", statements[5])
        self.assertIn("CREATE ROLE IF NOT EXISTS EXTERNAL_ANALYST", " ".join(statements))

    def test_use_context(self):
        SnowflakeEnvironmentManager(self.connection, self.environment).use_context()
        self.connection.use_role.assert_called_once_with("NETWORK_ANALYST")
        self.connection.execute.assert_any_call("USE WAREHOUSE WIFI_ANALYTICS_WH")

    def test_initialize_schema(self):
        SnowflakeSchemaManager(self.connection, self.environment).initialize_schema()
        statements = self.connection.execute_statements.call_args.args[0]
        self.assertEqual(len(statements), 5)
        self.assertIn("CREATE TABLE IF NOT EXISTS TRANSFORMED.DIM_NETWORKS", statements[0])
        self.assertIn("TELEMETRY_DATA VARIANT", statements[2])
        self.connection.commit.assert_called_once()

    def test_initialize_schema_replace(self):
        SnowflakeSchemaManager(self.connection, self.environment).initialize_schema(replace=True)
        statements = self.connection.execute_statements.call_args.args[0]
        self.assertTrue(all("CREATE OR REPLACE TABLE" in statement for statement in statements))

    def test_apply_governance_switches_to_admin(self):
        applied = SnowflakeSchemaManager(self.connection, self.environment).apply_governance()
        self.assertEqual(applied, 3)
        self.connection.use_role.assert_called_once_with("ACCOUNTADMIN")
        self.assertEqual(self.connection.execute_statements.call_count, 3)

    def test_apply_governance_rerun_unsets_before_setting(self):
        manager = SnowflakeSchemaManager(self.connection, self.environment)
        manager.apply_governance()
        manager.apply_governance()

        batches = [call.args[0] for call in self.connection.execute_statements.call_args_list]
        self.assertEqual(len(batches), 6)
        for detach, create, attach in (batches[0:3], batches[3:6]):
            self.assertTrue(all("UNSET MASKING POLICY" in sql for sql in detach))
            self.assertTrue(all(sql.startswith("CREATE MASKING POLICY IF NOT EXISTS") for sql in create))
            self.assertTrue(all(" SET MASKING POLICY " in sql for sql in attach))
            self.assertEqual(
                [sql.split(" MODIFY COLUMN ")[1].split()[0] for sql in detach],
                [sql.split(" MODIFY COLUMN ")[1].split()[0] for sql in attach]
            )


class TestSnowflakeFactLoader(unittest.TestCase):
    """Test cases for batched loading."""

    def setUp(self):
        self.connection = MagicMock()
        self.connection.execute_many.side_effect = lambda sql, batch: len(batch)
        self.loader = SnowflakeFactLoader(self.connection, EnvironmentConfig(), batch_size=2)

    def test_status_records_loaded_in_batches(self):
        timestamp = datetime(2024, 1, 15, 10)
        records = [make_status(timestamp, ap_id=ap_id) for ap_id in range(1, 6)]

        self.assertEqual(self.loader.load_status_records(records), 5)
        self.assertEqual(self.connection.execute_many.call_count, 3)
        self.assertEqual(self.connection.commit.call_count, 3)

        sql = self.connection.execute_many.call_args.args[0]
        self.assertTrue(sql.startswith("INSERT INTO TRANSFORMED.FACT_AP_STATUS (SNAPSHOT_TIMESTAMP"))
        self.assertEqual(sql.count("%s"), 7)

    def test_empty_inputs_skip_database(self):
        self.assertEqual(self.loader.load_networks([]), 0)
        self.assertEqual(self.loader.load_raw_telemetry([]), 0)
        self.assertEqual(self.loader.load_qos_records(iter([])), 0)
        self.connection.execute_many.assert_not_called()

    def test_networks(self):
        self.assertEqual(self.loader.load_networks([make_network()]), 1)
        batch = self.connection.execute_many.call_args.args[1]
        self.assertEqual(batch[0][0], 1001)

    def test_raw_telemetry_uses_parse_json(self):
        record = RawTelemetryRecord(1, {"network_telemetry": {"ap_id": 1}}, datetime(2024, 1, 15))
        self.assertEqual(self.loader.load_raw_telemetry([record]), 1)

        sql, batch = self.connection.execute_many.call_args.args
        self.assertIn("SELECT %s, PARSE_JSON(%s), %s", sql)
        self.assertEqual(batch[0], (1, '{"network_telemetry": {"ap_id": 1}}', "2024-01-15 00:00:00"))

    def test_test_questions_truncate_first(self):
        questions = build_test_questions()
        self.assertEqual(self.loader.load_test_questions(questions), len(questions))
        self.connection.execute.assert_called_once_with("TRUNCATE TABLE IF EXISTS ANALYTICS.AGENT_TEST_QUESTIONS")


class TestSnowflakeLoaderFacade(unittest.TestCase):
    """Test cases for the facade wiring."""

    @patch(CONNECT_TARGET)
    def test_context_manager_connects(self, mock_connect):
        with SnowflakeLoader(make_snowflake_config()) as loader:
            self.assertIs(loader.connection.connection, mock_connect.return_value)
        self.assertIsNone(loader.connection.connection)

    def test_managers_share_connection(self):
        loader = SnowflakeLoader(make_snowflake_config(), batch_size=500)
        self.assertIs(loader.schema_manager.connection, loader.connection)
        self.assertIs(loader.fact_loader.connection, loader.connection)
        self.assertEqual(loader.fact_loader.batch_size, 500)


if __name__ == "__main__":
    unittest.main()
