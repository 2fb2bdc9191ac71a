"""
Derived fields of an equipment record.

Both functions are pure: they only read the record. The checksum is a
drift indicator for display and audit, not an integrity control.
"""

from supply_tracker.models import StockStatus

CHECKSUM_MODULUS = 10000


def compute_checksum(item) -> str:
    """
    4-digit code from id, quantity, threshold and the characters of the name.

    Args:
        item: Equipment (or anything with id/quantity/min_threshold/name)

    Returns:
        Zero-padded string, e.g. "0417"
    """
    total = item.id + item.quantity + item.min_threshold
    total += sum(ord(ch) for ch in item.name)
    return f"{total % CHECKSUM_MODULUS:04d}"


def stock_status(item) -> StockStatus:
    """
    Classify stock level against the minimum threshold.

    LOW when quantity <= threshold, WATCH up to floor(threshold * 1.5),
    otherwise OK. At quantity == threshold LOW wins.
    """
    if item.quantity <= item.min_threshold:
        return StockStatus.LOW
    # integer form of floor(threshold * 1.5)
    if item.quantity <= (item.min_threshold * 3) // 2:
        return StockStatus.WATCH
    return StockStatus.OK


def checksum_is_current(item) -> bool:
    return item.checksum == compute_checksum(item)
