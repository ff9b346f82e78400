"""
WiFiAnalytics - Configuration Management

This module handles loading and validating configuration from environment variables
and configuration files.
"""

import os
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


@dataclass
class SnowflakeConfig:
    """Configuration for Snowflake connection."""
    account: str
    user: str
    password: str
    database: str = "WIFI_ANALYTICS"
    schema: str = "TRANSFORMED"
    warehouse: str = "WIFI_ANALYTICS_WH"
    role: Optional[str] = None


@dataclass
class EnvironmentConfig:
    """Names and sizing of the provisioned Snowflake objects."""
    database: str = "WIFI_ANALYTICS"
    raw_schema: str = "RAW"
    transformed_schema: str = "TRANSFORMED"
    analytics_schema: str = "ANALYTICS"
    warehouse: str = "WIFI_ANALYTICS_WH"
    warehouse_size: str = "MEDIUM"
    auto_suspend_seconds: int = 300
    admin_role: str = "ACCOUNTADMIN"
    analyst_role: str = "NETWORK_ANALYST"
    external_role: str = "EXTERNAL_ANALYST"
    grantee_user: Optional[str] = None


@dataclass
class GenerationConfig:
    """Configuration for synthetic data generation."""
    seed: int = 42
    history_days: int = 30
    status_interval_minutes: int = 5
    qos_interval_minutes: int = 1
    raw_records_per_ap: int = 15
    # Reference "now"; None means current local time at generation
    reference_time: Optional[datetime] = None
    # Firmware issue window as day offsets from the start of the history
    firmware_issue_start_day: int = 14
    firmware_issue_days: int = 7

    def resolve_reference_time(self) -> datetime:
        """Return the reference time truncated to the minute."""
        reference = self.reference_time or datetime.now()
        return reference.replace(second=0, microsecond=0, tzinfo=None)

    def history_start(self) -> datetime:
        """Midnight of the first generated day."""
        reference = self.resolve_reference_time()
        midnight = reference.replace(hour=0, minute=0)
        return midnight - timedelta(days=self.history_days)

    def firmware_issue_window(self) -> tuple:
        """Return (start, end) of the injected firmware issue."""
        start = self.history_start() + timedelta(days=self.firmware_issue_start_day)
        end = start + timedelta(days=self.firmware_issue_days)
        return start, end


@dataclass
class OperationalConfig:
    """Configuration for operational parameters."""
    batch_size: int = 10000
    export_format: str = "csv"


@dataclass
class Config:
    """
    Main configuration class that aggregates all configuration sections.

    Loads configuration from environment variables with .env file support.
    Snowflake credentials are only read when a connection is requested so
    that dry runs work without them.
    """
    environment: EnvironmentConfig = field(default_factory=EnvironmentConfig)
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    operational: OperationalConfig = field(default_factory=OperationalConfig)

    # Paths
    data_dir: Path = field(default_factory=lambda: Path("data"))
    log_dir: Path = field(default_factory=lambda: Path("data/logs"))
    export_dir: Path = field(default_factory=lambda: Path("data/exports"))

    def __post_init__(self):
        """Load configuration from environment after initialization."""
        # Load .env file if it exists
        env_file = Path(".env")
        if env_file.exists():
            load_dotenv(env_file)

        # Load environment object names
        self.environment = EnvironmentConfig(
            database=os.getenv("SNF_DATABASE", "WIFI_ANALYTICS"),
            raw_schema=os.getenv("SNF_RAW_SCHEMA", "RAW"),
            transformed_schema=os.getenv("SNF_TRANSFORMED_SCHEMA", "TRANSFORMED"),
            analytics_schema=os.getenv("SNF_ANALYTICS_SCHEMA", "ANALYTICS"),
            warehouse=os.getenv("SNF_WAREHOUSE", "WIFI_ANALYTICS_WH"),
            warehouse_size=os.getenv("SNF_WAREHOUSE_SIZE", "MEDIUM"),
            auto_suspend_seconds=int(os.getenv("SNF_AUTO_SUSPEND", "300")),
            analyst_role=os.getenv("ANALYST_ROLE", "NETWORK_ANALYST"),
            external_role=os.getenv("EXTERNAL_ROLE", "EXTERNAL_ANALYST"),
            grantee_user=os.getenv("SNF_GRANTEE_USER")
        )

        # Load generation configuration
        reference_time = os.getenv("REFERENCE_TIME")
        self.generation = GenerationConfig(
            seed=int(os.getenv("RANDOM_SEED", "42")),
            history_days=int(os.getenv("HISTORY_DAYS", "30")),
            status_interval_minutes=int(os.getenv("STATUS_INTERVAL_MINUTES", "5")),
            qos_interval_minutes=int(os.getenv("QOS_INTERVAL_MINUTES", "1")),
            raw_records_per_ap=int(os.getenv("RAW_RECORDS_PER_AP", "15")),
            reference_time=datetime.fromisoformat(reference_time) if reference_time else None,
            firmware_issue_start_day=int(os.getenv("FIRMWARE_ISSUE_START_DAY", "14")),
            firmware_issue_days=int(os.getenv("FIRMWARE_ISSUE_DAYS", "7"))
        )

        # Load operational configuration
        self.operational = OperationalConfig(
            batch_size=int(os.getenv("BATCH_SIZE", "10000")),
            export_format=os.getenv("EXPORT_FORMAT", "csv")
        )

        # Ensure data directories exist
        self._ensure_directories()

    def get_snowflake_config(self) -> SnowflakeConfig:
        """
        Build the Snowflake connection configuration.

        Returns:
            SnowflakeConfig populated from the environment

        Raises:
            ValueError: If a required credential is not set
        """
        return SnowflakeConfig(
            account=self._get_required_env("SNF_ACCOUNT"),
            user=self._get_required_env("SNF_USER"),
            password=self._get_required_env("SNF_PASSWORD"),
            database=self.environment.database,
            schema=self.environment.transformed_schema,
            warehouse=self.environment.warehouse,
            role=os.getenv("SNF_ROLE", self.environment.analyst_role)
        )

    def _get_required_env(self, key: str) -> str:
        """
        Get a required environment variable.

        Args:
            key: Environment variable name

        Returns:
            Environment variable value

        Raises:
            ValueError: If the environment variable is not set
        """
        value = os.getenv(key)
        if value is None:
            raise ValueError(f"Required environment variable {key} is not set")
        return value

    def _ensure_directories(self) -> None:
        """Create data directories if they don't exist."""
        for directory in [self.data_dir, self.log_dir, self.export_dir]:
            directory.mkdir(parents=True, exist_ok=True)
