"""
Persistence contract shared by the file and database backends.

The store calls insert_*/update_* on every mutation and save() once at
shutdown. Each backend makes one of the two paths real:

- FileBackend: insert/update are no-ops, save() rewrites the files.
- DatabaseBackend: insert/update write through, save() is a no-op.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional

from supply_tracker.models import Equipment, SupplyRequest


@dataclass
class LoadedState:
    """Everything a backend hands back at startup."""

    equipment: List[Equipment] = field(default_factory=list)
    requests: List[SupplyRequest] = field(default_factory=list)
    next_equipment_id: int = 1
    next_request_id: int = 1


class PersistenceBackend(ABC):
    # Shown in the banner and the exported report
    name = "Unknown"

    @abstractmethod
    def load(self) -> LoadedState:
        """Read the full durable state."""

    @abstractmethod
    def save(
        self,
        equipment: List[Equipment],
        requests: List[SupplyRequest],
        next_equipment_id: int,
        next_request_id: int,
    ) -> None:
        """Write the full current state."""

    @abstractmethod
    def insert_equipment(self, item: Equipment) -> Optional[int]:
        """Persist a new record; return the backend-assigned id, or None."""

    @abstractmethod
    def update_equipment(self, item: Equipment) -> None:
        pass

    @abstractmethod
    def insert_request(self, request: SupplyRequest) -> Optional[int]:
        """Persist a new request; return the backend-assigned id, or None."""

    @abstractmethod
    def update_request(self, request: SupplyRequest) -> None:
        pass

    def record_audit(self, message: str) -> None:
        """Mirror an audit line into durable storage (optional)."""

    def close(self) -> None:
        """Release held resources. Called once at shutdown."""
