"""
WiFiAnalytics - Governance Tests

Unit tests for masking policies and role-based access control.
"""

import unittest

from wifi_analytics.governance.masking import (
    MASKED_TEXT,
    MaskingManager,
    is_masked_value,
    mask_building_name,
    mask_floor_number,
    mask_zone_info
)
from wifi_analytics.governance.rbac import RbacModel, validate_identifier
from wifi_analytics.transformers.json_transformer import TelemetryTransformer
from wifi_analytics.utils.config import EnvironmentConfig

from factories import make_access_point, make_network, make_telemetry


class TestMaskFunctions(unittest.TestCase):
    """Test cases for individual masking rules."""

    def test_building_name_letters_masked(self):
        self.assertEqual(mask_building_name("Academic Building A"), "******** ******** *")
        self.assertEqual(mask_building_name("Hall 2-B"), "**** 2-*")

    def test_zone_fully_masked(self):
        self.assertEqual(mask_zone_info("Lobby"), MASKED_TEXT)

    def test_floor_generalised(self):
        self.assertEqual([mask_floor_number(floor) for floor in range(1, 8)], [1, 1, 3, 3, 3, 5, 5])

    def test_is_masked_value(self):
        self.assertTrue(is_masked_value(MASKED_TEXT))
        self.assertTrue(is_masked_value("**** ****"))
        self.assertFalse(is_masked_value("Main Building"))
        self.assertFalse(is_masked_value(3))


class TestMaskingManager(unittest.TestCase):
    """Test cases for role-dependent masking."""

    def setUp(self):
        self.environment = EnvironmentConfig()
        self.manager = MaskingManager(self.environment)
        transformer = TelemetryTransformer([make_access_point()], [make_network()])
        self.rows = transformer.to_performance_rows([make_telemetry(1), make_telemetry(2)])

    def test_external_role_sees_masked_location(self):
        masked = self.manager.mask_rows(self.rows, "EXTERNAL_ANALYST")
        self.assertEqual(masked[0].building_name, "**** ********")
        self.assertEqual(masked[0].zone_name, MASKED_TEXT)
        self.assertEqual(masked[0].floor_number, 3)
        self.assertEqual(masked[0].network_name, "TechCorp HQ")

    def test_source_rows_unchanged(self):
        self.manager.mask_rows(self.rows, "EXTERNAL_ANALYST")
        self.assertEqual(self.rows[0].building_name, "Main Building")

    def test_exempt_roles_see_clear_values(self):
        for role in ("NETWORK_ANALYST", "accountadmin"):
            masked = self.manager.mask_rows(self.rows, role)
            self.assertEqual(masked[0].building_name, "Main Building")
            self.assertEqual(masked[0].floor_number, 4)

    def test_null_values_stay_null(self):
        row = self.rows[0]
        row.building_name = None
        self.assertIsNone(self.manager.mask_row(row, "EXTERNAL_ANALYST").building_name)

    def test_policy_sql(self):
        creates = self.manager.create_policy_statements()
        attaches = self.manager.attach_policy_statements()
        self.assertEqual(len(creates), 3)
        self.assertIn("CREATE MASKING POLICY IF NOT EXISTS ANALYTICS.mask_building_name", creates[0])
        self.assertIn("WHEN val IS NULL THEN NULL", creates[0])
        self.assertIn("'ACCOUNTADMIN', 'NETWORK_ANALYST'", creates[0])
        self.assertEqual(
            attaches[2],
            "ALTER VIEW ANALYTICS.VW_AP_PERFORMANCE MODIFY COLUMN floor_number "
            "SET MASKING POLICY ANALYTICS.mask_floor_number"
        )
        self.assertIn("UNSET MASKING POLICY", self.manager.detach_policy_statements()[0])


class TestRbacModel(unittest.TestCase):
    """Test cases for roles and grants."""

    def test_validate_identifier(self):
        self.assertEqual(validate_identifier("NETWORK_ANALYST"), "NETWORK_ANALYST")
        for bad in ("", "1ROLE", "ROLE; DROP DATABASE X", "my-role"):
            with self.assertRaises(ValueError):
                validate_identifier(bad)

    def test_invalid_environment_rejected(self):
        with self.assertRaises(ValueError):
            RbacModel(EnvironmentConfig(external_role="bad role"))

    def test_external_role_reads_only_performance_view(self):
        rbac = RbacModel()
        external = rbac.role("external_analyst")
        self.assertTrue(external.can_select("VW_AP_PERFORMANCE"))
        self.assertTrue(external.can_select("WIFI_ANALYTICS.ANALYTICS.VW_AP_PERFORMANCE"))
        self.assertFalse(external.can_select("FACT_AP_STATUS"))
        self.assertTrue(rbac.role("NETWORK_ANALYST").can_select("FACT_AP_STATUS"))

    def test_statements_without_grantee(self):
        statements = RbacModel().statements()
        self.assertTrue(statements[0].startswith("CREATE ROLE IF NOT EXISTS NETWORK_ANALYST"))
        self.assertIn("GRANT CREATE SEMANTIC VIEW ON SCHEMA WIFI_ANALYTICS.ANALYTICS TO ROLE NETWORK_ANALYST",
                      statements)
        self.assertIn("GRANT SELECT ON VIEW WIFI_ANALYTICS.ANALYTICS.VW_AP_PERFORMANCE TO ROLE EXTERNAL_ANALYST",
                      statements)
        self.assertFalse(any(statement.startswith("GRANT ROLE") for statement in statements))

    def test_statements_with_grantee(self):
        statements = RbacModel(EnvironmentConfig(grantee_user="DEMO_USER")).statements()
        self.assertIn("GRANT ROLE NETWORK_ANALYST TO USER DEMO_USER", statements)
        self.assertIn("GRANT ROLE EXTERNAL_ANALYST TO USER DEMO_USER", statements)


if __name__ == "__main__":
    unittest.main()
