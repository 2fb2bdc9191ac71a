"""
Relational backend (PostgreSQL through SQLAlchemy).

One Session is opened at startup and kept for the life of the process.
Every store mutation is written through and committed immediately, and
new rows get their identifiers from the database. All values travel as
bound parameters through the ORM.
"""

from contextlib import contextmanager

from sqlalchemy.exc import OperationalError, SQLAlchemyError

from supply_tracker.checksum import compute_checksum
from supply_tracker.database.crud import (
    create_audit_entry,
    create_equipment,
    create_request,
    get_all_equipment,
    get_all_requests,
    update_equipment_stock,
    update_request_status,
)
from supply_tracker.database.session import (
    build_engine,
    check_connection,
    init_db,
    make_session_factory,
)
from supply_tracker.exceptions import BackendUnavailableError, StorageIOError
from supply_tracker.logging_config import get_logger
from supply_tracker.models import (
    Classification,
    Equipment,
    Priority,
    RequestStatus,
    SupplyRequest,
)
from supply_tracker.storage.base import LoadedState, PersistenceBackend

logger = get_logger(__name__)

DIALECT_NAMES = {
    "postgresql": "PostgreSQL Database",
    "sqlite": "SQLite Database",
}


# ============================================================================
# ROW CONVERSION
# ============================================================================


def row_to_equipment(row) -> Equipment:
    return Equipment(
        id=row.id,
        name=row.name,
        description=row.description or "",
        quantity=row.quantity,
        min_threshold=row.min_threshold,
        unit=row.unit or "",
        location=row.location or "",
        classification=Classification(row.classification),
        last_updated=row.last_updated,
        checksum=row.checksum,
    )


def row_to_request(row) -> SupplyRequest:
    return SupplyRequest(
        req_id=row.req_id,
        equipment_id=row.equipment_id,
        requested_qty=row.requested_qty,
        requesting_unit=row.requesting_unit,
        priority=Priority(row.priority),
        request_time=row.request_time,
        status=RequestStatus(row.status),
    )


class DatabaseBackend(PersistenceBackend):
    def __init__(self, engine):
        """
        Verify the connection, create missing tables and open the session.

        Raises:
            BackendUnavailableError: the database cannot be reached
        """
        self.engine = engine
        self.name = DIALECT_NAMES.get(engine.dialect.name, f"{engine.dialect.name} database")

        try:
            check_connection(engine)
            init_db(engine)
        except SQLAlchemyError as e:
            engine.dispose()
            logger.error(f"Database connection failed: {e}")
            raise BackendUnavailableError(f"Database connection failed: {e}") from e

        self._session = make_session_factory(engine)()
        logger.info(f"Connected to {self.name}")

    @classmethod
    def connect(cls, url):
        """Build an engine for url and connect to it."""
        try:
            engine = build_engine(url)
        except (SQLAlchemyError, ImportError) as e:
            # ImportError: the DB driver (psycopg2) is not installed
            logger.error(f"Could not create database engine: {e}")
            raise BackendUnavailableError(f"Could not create database engine: {e}") from e
        return cls(engine)

    @contextmanager
    def _transaction(self, what: str):
        """Commit on success; roll back and translate SQLAlchemy errors."""
        try:
            yield self._session
            self._session.commit()
        except OperationalError as e:
            self._session.rollback()
            logger.error(f"Database connection error while {what}: {e}", exc_info=True)
            raise BackendUnavailableError("Unable to connect to database") from e
        except SQLAlchemyError as e:
            self._session.rollback()
            logger.error(f"Database error while {what}: {e}", exc_info=True)
            raise BackendUnavailableError(f"Database error while {what}") from e

    # ------------------------------------------------------------------
    # Contract
    # ------------------------------------------------------------------

    def load(self) -> LoadedState:
        try:
            equipment = [row_to_equipment(row) for row in get_all_equipment(self._session)]
            requests = [row_to_request(row) for row in get_all_requests(self._session)]
        except SQLAlchemyError as e:
            logger.error(f"Database error while loading: {e}", exc_info=True)
            raise BackendUnavailableError("Database error while loading inventory") from e
        except ValueError as e:
            # Enum column outside its range
            logger.error(f"Corrupt row in database: {e}")
            raise StorageIOError(f"Corrupt record in database: {e}") from e

        logger.info(f"Loaded {len(equipment)} equipment items from database")
        logger.info(f"Loaded {len(requests)} supply requests from database")

        return LoadedState(
            equipment=equipment,
            requests=requests,
            next_equipment_id=max((item.id for item in equipment), default=0) + 1,
            next_request_id=max((req.req_id for req in requests), default=0) + 1,
        )

    def save(self, equipment, requests, next_equipment_id, next_request_id) -> None:
        # Every mutation was already committed
        pass

    def insert_equipment(self, item: Equipment) -> int:
        with self._transaction(f"adding equipment '{item.name}'") as db:
            row = create_equipment(
                db,
                name=item.name,
                description=item.description,
                quantity=item.quantity,
                min_threshold=item.min_threshold,
                unit=item.unit,
                location=item.location,
                classification=int(item.classification),
                checksum=item.checksum,
                last_updated=item.last_updated,
            )
            # The id feeds the checksum, so refresh it in the same transaction
            row.checksum = compute_checksum(row)
            new_id = row.id
        return new_id

    def update_equipment(self, item: Equipment) -> None:
        with self._transaction(f"updating equipment {item.id}") as db:
            row = update_equipment_stock(
                db,
                item.id,
                quantity=item.quantity,
                checksum=item.checksum,
                last_updated=item.last_updated,
            )
        if row is None:
            logger.warning(f"Equipment {item.id} exists in memory but not in the database")
            raise BackendUnavailableError(f"Equipment ID {item.id} is missing from the database")

    def insert_request(self, request: SupplyRequest) -> int:
        with self._transaction(f"adding request for equipment {request.equipment_id}") as db:
            row = create_request(
                db,
                equipment_id=request.equipment_id,
                requested_qty=request.requested_qty,
                requesting_unit=request.requesting_unit,
                status=int(request.status),
                priority=int(request.priority),
                request_time=request.request_time,
            )
            new_id = row.req_id
        return new_id

    def update_request(self, request: SupplyRequest) -> None:
        with self._transaction(f"updating request {request.req_id}") as db:
            row = update_request_status(db, request.req_id, int(request.status))
        if row is None:
            logger.warning(f"Request {request.req_id} exists in memory but not in the database")
            raise BackendUnavailableError(f"Request REQ-{request.req_id} is missing from the database")

    def record_audit(self, message: str) -> None:
        with self._transaction("writing audit log") as db:
            create_audit_entry(db, message)

    def close(self) -> None:
        self._session.close()
        self.engine.dispose()
        logger.info("[OK] Database connections closed")
