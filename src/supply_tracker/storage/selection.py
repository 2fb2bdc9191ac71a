"""
Startup choice between the database and the file backend.

The decision is made once; a database that disappears later is reported
on each failed write, never by switching backends mid-session.
"""

from supply_tracker.config import load_db_config
from supply_tracker.exceptions import BackendUnavailableError
from supply_tracker.logging_config import get_logger
from supply_tracker.storage.database_backend import DatabaseBackend
from supply_tracker.storage.file_backend import FileBackend

logger = get_logger(__name__)


def open_backend(settings):
    """
    Connect to the configured database, or fall back to local files.

    Args:
        settings: Settings with db_config_path, equipment_path, request_path

    Returns:
        DatabaseBackend when the config loads and the server answers,
        otherwise FileBackend
    """
    try:
        db_config = load_db_config(settings.db_config_path)
        return DatabaseBackend.connect(db_config.url())
    except BackendUnavailableError as e:
        # ConfigurationError is a BackendUnavailableError too
        logger.warning(f"{e.message}. Falling back to file-based storage.")
        return FileBackend(settings.equipment_path, settings.request_path)
