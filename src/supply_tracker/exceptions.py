"""
Custom exceptions for the Tactical Supply tracker.

This module defines a hierarchy of exceptions used throughout the application
so the CLI layer can tell recoverable, typed failures (a missing record, a full
table, a bad field) apart from storage problems.
"""


class InventoryError(Exception):
    """
    Base exception for all inventory store errors.

    Catch this when you want to handle any store failure without caring
    about the specific type (the CLI menu loop does this).
    """

    def __init__(self, message: str = "Inventory operation failed"):
        self.message = message
        super().__init__(self.message)


# ============================================================================
# RECORD LOOKUP / CAPACITY
# ============================================================================


class NotFoundError(InventoryError):
    """
    Raised when an identifier or a name does not resolve to a record.

    Example:
        Creating a supply request for equipment ID 99999 that was never added.
    """

    def __init__(self, message: str = "Record not found"):
        super().__init__(message)


class CapacityExceededError(InventoryError):
    """
    Raised when a collection is already at its maximum size.

    Example:
        Adding equipment when 1000 items are already tracked.
    """

    def __init__(self, message: str = "Maximum record limit reached"):
        super().__init__(message)


# ============================================================================
# VALIDATION
# ============================================================================


class ValidationError(InventoryError):
    """
    Base exception for input validation errors.

    Raised when a field is outside its declared bounds (empty name,
    negative quantity, text too long for its fixed-width slot, etc.)
    """

    def __init__(self, message: str = "Invalid input"):
        super().__init__(message)


class InvalidTransitionError(ValidationError):
    """
    Raised when a supply request cannot move to the requested status.

    Example:
        Fulfilling a request that is still PENDING.
    """

    def __init__(self, message: str = "Invalid request status change"):
        super().__init__(message)


# ============================================================================
# STORAGE
# ============================================================================


class BackendUnavailableError(InventoryError):
    """
    Raised when the database backend cannot connect or a query fails.

    At startup this is recovered by falling back to file storage. During a
    later write it is reported to the caller; the in-memory change stays.
    """

    def __init__(self, message: str = "Database backend unavailable"):
        super().__init__(message)


class ConfigurationError(BackendUnavailableError):
    """Database config file is missing, unreadable or incomplete."""

    def __init__(self, message: str = "Database configuration could not be loaded"):
        super().__init__(message)


class StorageIOError(InventoryError):
    """
    Raised when stored data cannot be read or written: a local file
    that is unreadable, truncated or corrupt, or a database row whose
    codes are out of range.

    Example:
        equipment.dat is truncated, or the data directory is read-only
        when the shutdown save runs.
    """

    def __init__(self, message: str = "Local storage read/write failed"):
        super().__init__(message)
