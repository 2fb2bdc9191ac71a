"""
Application Configuration
Load settings from environment variables (.env file) and the database
config file (key=value lines).
"""

from pathlib import Path
from typing import Optional

from dotenv import dotenv_values
from pydantic import BaseModel, ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL

from supply_tracker.exceptions import ConfigurationError
from supply_tracker.logging_config import get_logger

logger = get_logger(__name__)

# Keys recognised in db_config.conf
DB_CONFIG_KEYS = ("host", "port", "dbname", "user", "password")


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Every field can be overridden with a SUPPLY_ prefixed variable,
    e.g. SUPPLY_DATA_DIR=/var/lib/supply.
    """

    # ========================================================================
    # STORAGE LOCATIONS
    # ========================================================================

    DATA_DIR: Path = Path(".")
    """Directory holding the data files, audit log, config and report"""

    EQUIPMENT_FILE: str = "equipment.dat"
    REQUEST_FILE: str = "requests.dat"
    AUDIT_LOG_FILE: str = "equipment.log"
    DB_CONFIG_FILE: str = "db_config.conf"
    REPORT_FILE: str = "inventory_report.txt"

    # ========================================================================
    # CAPACITY
    # ========================================================================

    MAX_ITEMS: int = 1000
    MAX_REQUESTS: int = 500

    # ========================================================================
    # LOGGING
    # ========================================================================

    LOG_DIR: str = "logs"
    LOG_LEVEL: str = "INFO"
    """Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL"""

    class Config:
        """Load from .env file"""
        env_file = ".env"
        env_prefix = "SUPPLY_"
        case_sensitive = True
        extra = "ignore"  # Ignore extra env variables

    def path_for(self, filename: str) -> Path:
        """Resolve a configured file name inside DATA_DIR."""
        return Path(self.DATA_DIR) / filename

    @property
    def equipment_path(self) -> Path:
        return self.path_for(self.EQUIPMENT_FILE)

    @property
    def request_path(self) -> Path:
        return self.path_for(self.REQUEST_FILE)

    @property
    def audit_log_path(self) -> Path:
        return self.path_for(self.AUDIT_LOG_FILE)

    @property
    def db_config_path(self) -> Path:
        return self.path_for(self.DB_CONFIG_FILE)

    @property
    def report_path(self) -> Path:
        return self.path_for(self.REPORT_FILE)


class DBConfig(BaseModel):
    """Connection parameters for the PostgreSQL backend."""

    host: str = "localhost"
    port: int = 5432
    dbname: str
    user: str
    password: str = ""

    def url(self) -> URL:
        """
        Build the SQLAlchemy URL.

        URL.create escapes the password, so characters like '@' or '/'
        in it don't break the connection string.
        """
        return URL.create(
            "postgresql+psycopg2",
            username=self.user,
            password=self.password or None,
            host=self.host,
            port=self.port,
            database=self.dbname,
        )


def load_db_config(path) -> DBConfig:
    """
    Read the key=value database config file.

    Args:
        path: Location of db_config.conf

    Returns:
        DBConfig with the recognised keys

    Raises:
        ConfigurationError: file missing, unreadable, or required keys absent
    """
    path = Path(path)

    if not path.is_file():
        raise ConfigurationError(f"Database config file not found: {path}")

    try:
        raw = dotenv_values(path)
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Could not read database config {path}: {e}")
        raise ConfigurationError(f"Database config file is unreadable: {path}") from e

    values = {
        key: value
        for key, value in raw.items()
        if key in DB_CONFIG_KEYS and value not in (None, "")
    }

    try:
        return DBConfig(**values)
    except PydanticValidationError as e:
        missing = ", ".join(str(err["loc"][0]) for err in e.errors())
        raise ConfigurationError(f"Invalid database config ({missing}) in {path}") from e


def load_settings(
    data_dir: Optional[str] = None,
    db_config: Optional[str] = None,
    log_level: Optional[str] = None,
) -> Settings:
    """Build Settings, letting explicit CLI values win over the environment."""
    overrides = {}
    if data_dir is not None:
        overrides["DATA_DIR"] = Path(data_dir)
    if db_config is not None:
        # path_for() joins onto DATA_DIR; an absolute path replaces it
        overrides["DB_CONFIG_FILE"] = str(Path(db_config).resolve())
    if log_level is not None:
        overrides["LOG_LEVEL"] = log_level.upper()
    return Settings(**overrides)
