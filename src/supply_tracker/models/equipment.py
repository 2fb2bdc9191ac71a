# equipment.py
from dataclasses import dataclass
from datetime import datetime

from .enums import Classification


@dataclass
class EquipmentDraft:
    """Caller-supplied fields of a new equipment record."""

    name: str
    description: str = ""
    quantity: int = 0
    min_threshold: int = 0
    unit: str = "ea"
    location: str = ""
    classification: Classification = Classification.UNCLASSIFIED


@dataclass
class Equipment:
    """
    One tracked stock-keeping unit.

    id, last_updated and checksum are owned by the store: id is assigned
    once, the other two are refreshed on every mutation.
    """

    id: int
    name: str
    description: str
    quantity: int
    min_threshold: int
    unit: str
    location: str
    classification: Classification
    last_updated: datetime
    checksum: str = ""
