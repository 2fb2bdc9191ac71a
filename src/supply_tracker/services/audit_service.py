# services/audit_service.py

"""
AUDIT SERVICE
-------------
One line per inventory action:
1. Appended to the local audit file as "[timestamp] message".
2. Mirrored to the audit_log table when the database backend is active.

A failure in either sink is logged and dropped. It never fails the
operation that triggered it.
"""

from supply_tracker.exceptions import InventoryError
from supply_tracker.logging_config import (
    close_audit_logger,
    get_logger,
    setup_audit_logger,
)

logger = get_logger(__name__)


class AuditTrail:
    def __init__(self, log_file=None, backend=None):
        """
        Args:
            log_file: path of the append-only audit file (None = no file)
            backend: PersistenceBackend whose record_audit() mirrors lines
        """
        self._file_logger = setup_audit_logger(log_file) if log_file is not None else None
        self._backend = backend

    def record(self, message: str) -> None:
        if self._file_logger is not None:
            try:
                self._file_logger.info(message)
            except OSError as e:
                # A lazily opened FileHandler raises from emit() when the file cannot be opened
                logger.warning(f"Audit entry not written to file: {e}")

        if self._backend is not None:
            try:
                self._backend.record_audit(message)
            except InventoryError as e:
                logger.warning(f"Audit entry not stored in backend: {e.message}")

    def close(self) -> None:
        if self._file_logger is not None:
            close_audit_logger(self._file_logger)
            self._file_logger = None
