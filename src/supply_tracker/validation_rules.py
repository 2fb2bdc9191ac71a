"""
Centralized Validation Rules for the Tactical Supply tracker.

=============================================================================
PURPOSE:
=============================================================================
This file is the SINGLE SOURCE OF TRUTH for field bounds.
The store (before anything is persisted) and the CLI prompts import from here.

Text limits are in UTF-8 bytes and leave room for the terminating NUL of
the fixed-width slots in equipment.dat / requests.dat.

=============================================================================
HOW TO USE:
=============================================================================
    from supply_tracker.validation_rules import EquipmentRules

    if quantity > EquipmentRules.QUANTITY_MAX:
        raise ValidationError(EquipmentRules.ERRORS["quantity_range"])

=============================================================================
"""

import unicodedata


class EquipmentRules:
    """
    Validation rules for equipment records.
    """

    # Fixed-width slot sizes (bytes) in the equipment file
    NAME_WIDTH = 64
    DESCRIPTION_WIDTH = 256
    UNIT_WIDTH = 32
    LOCATION_WIDTH = 64
    CHECKSUM_WIDTH = 16

    # Usable length = slot size minus the NUL terminator
    NAME_MAX = NAME_WIDTH - 1
    DESCRIPTION_MAX = DESCRIPTION_WIDTH - 1
    UNIT_MAX = UNIT_WIDTH - 1
    LOCATION_MAX = LOCATION_WIDTH - 1

    QUANTITY_MIN = 0
    QUANTITY_MAX = 999999

    THRESHOLD_MIN = 0
    THRESHOLD_MAX = 999999

    ERRORS = {
        "name_required": "Equipment name is required.",
        "name_too_long": f"Equipment name must be at most {NAME_MAX} characters.",
        "description_too_long": f"Description must be at most {DESCRIPTION_MAX} characters.",
        "unit_too_long": f"Unit must be at most {UNIT_MAX} characters.",
        "location_too_long": f"Location must be at most {LOCATION_MAX} characters.",
        "quantity_range": f"Quantity must be between {QUANTITY_MIN} and {QUANTITY_MAX}.",
        "threshold_range": f"Minimum threshold must be between {THRESHOLD_MIN} and {THRESHOLD_MAX}.",
        "classification": "Classification must be 0=Unclass, 1=Restricted, 2=Confidential or 3=Secret.",
    }


class RequestRules:
    """
    Validation rules for supply requests.
    """

    UNIT_WIDTH = 32
    UNIT_MAX = UNIT_WIDTH - 1

    QUANTITY_MIN = 1
    QUANTITY_MAX = 999999

    ERRORS = {
        "unit_required": "Requesting unit is required.",
        "unit_too_long": f"Requesting unit must be at most {UNIT_MAX} characters.",
        "quantity_range": f"Requested quantity must be between {QUANTITY_MIN} and {QUANTITY_MAX}.",
        "priority": "Priority must be 1=Low, 2=Normal, 3=High or 4=Critical.",
    }


def encoded_length(value: str) -> int:
    """Length of a text field as stored (UTF-8 bytes)."""
    return len(value.encode("utf-8"))


# NUL would cut a value short in the fixed-width file slots
CONTROL_CHARACTER_ERROR = "Text fields cannot contain control characters."


def has_control_characters(value: str) -> bool:
    return any(unicodedata.category(ch) == "Cc" for ch in value)
