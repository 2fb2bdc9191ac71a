from datetime import datetime

import pytest

from supply_tracker.checksum import checksum_is_current, compute_checksum, stock_status
from supply_tracker.models import Classification, Equipment, StockStatus


def _item(item_id=1, name="AB", quantity=10, min_threshold=5):
    return Equipment(
        id=item_id,
        name=name,
        description="",
        quantity=quantity,
        min_threshold=min_threshold,
        unit="ea",
        location="",
        classification=Classification.UNCLASSIFIED,
        last_updated=datetime(2026, 1, 1, 8, 0, 0),
    )


def test_checksum_sums_fields_and_name_characters():
    # 1 + 10 + 5 + ord("A") + ord("B") = 147
    assert compute_checksum(_item()) == "0147"


def test_checksum_wraps_at_ten_thousand():
    assert compute_checksum(_item(item_id=9000, name="", quantity=999, min_threshold=1)) == "0000"
    assert compute_checksum(_item(item_id=9000, name="", quantity=1000, min_threshold=1)) == "0001"


def test_checksum_changes_with_quantity():
    item = _item()
    before = compute_checksum(item)
    item.quantity += 1
    assert compute_checksum(item) != before


def test_checksum_is_current_detects_drift():
    item = _item()
    item.checksum = compute_checksum(item)
    assert checksum_is_current(item)
    item.quantity = 99
    assert not checksum_is_current(item)


@pytest.mark.parametrize(
    "quantity, expected",
    [
        (0, StockStatus.LOW),
        (10, StockStatus.LOW),
        (11, StockStatus.WATCH),
        (14, StockStatus.WATCH),
        (15, StockStatus.WATCH),
        (16, StockStatus.OK),
    ],
)
def test_stock_status_threshold_ten(quantity, expected):
    assert stock_status(_item(quantity=quantity, min_threshold=10)) == expected


def test_stock_status_floor_of_one_and_a_half():
    # floor(3 * 1.5) = 4
    assert stock_status(_item(quantity=4, min_threshold=3)) == StockStatus.WATCH
    assert stock_status(_item(quantity=5, min_threshold=3)) == StockStatus.OK
    # floor(1 * 1.5) = 1, so there is no WATCH band
    assert stock_status(_item(quantity=2, min_threshold=1)) == StockStatus.OK


def test_stock_status_zero_threshold():
    assert stock_status(_item(quantity=0, min_threshold=0)) == StockStatus.LOW
    assert stock_status(_item(quantity=1, min_threshold=0)) == StockStatus.OK
