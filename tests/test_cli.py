from __future__ import annotations

import pytest
from click.testing import CliRunner

from supply_tracker.main import main
from supply_tracker.models import EquipmentDraft
from supply_tracker.storage import FileBackend


@pytest.fixture()
def run_cli(tmp_path, restore_root_logging):
    def run(keystrokes):
        return CliRunner().invoke(main, ["--data-dir", str(tmp_path)], input=keystrokes)

    return run


def test_exit_saves_empty_state(run_cli, tmp_path):
    result = run_cli("0\n")

    assert result.exit_code == 0, result.output
    assert "OFFLINE MODE" in result.output
    assert (tmp_path / "equipment.dat").exists()
    assert (tmp_path / "requests.dat").exists()
    assert "System shutdown" in (tmp_path / "equipment.log").read_text(encoding="utf-8")


def test_add_equipment_and_request(run_cli, tmp_path):
    keystrokes = "".join(
        [
            "1\n",  # add equipment
            "Tent, Arctic 10-person\n",
            "Cold weather shelter\n",
            "5\n",
            "10\n",
            "ea\n",
            "Depot A\n",
            "1\n",
            "5\n",  # request supply
            "1\n",
            "8\n",
            "1st Platoon\n",
            "4\n",
            "8\n",  # low stock alert
            "0\n",
        ]
    )

    result = run_cli(keystrokes)

    assert result.exit_code == 0, result.output
    assert "Equipment added successfully. ID: 1" in result.output
    assert "Request ID: REQ-1" in result.output
    assert "CRITICAL: Tent, Arctic 10-person (ID: 1)" in result.output

    state = FileBackend(tmp_path / "equipment.dat", tmp_path / "requests.dat").load()
    assert [item.name for item in state.equipment] == ["Tent, Arctic 10-person"]
    assert state.equipment[0].quantity == 5
    assert state.requests[0].requesting_unit == "1st Platoon"


def test_store_errors_keep_the_menu_running(run_cli):
    result = run_cli("4\n42\n0\n")

    assert result.exit_code == 0, result.output
    assert "Equipment ID 42 not found" in result.output


def test_end_of_input_exits_cleanly(run_cli, tmp_path):
    result = run_cli("")

    assert result.exit_code == 0, result.output
    assert (tmp_path / "equipment.dat").exists()


ADD_TENT = "1\nTent\n\n5\n10\nea\nDepot A\n0\n"


def test_markup_in_user_text_is_printed_literally(run_cli, tmp_path):
    result = run_cli(ADD_TENT + "1\n[b]Kit[/b]\n\n2\n1\nea\n[/]\n0\n" + "3\n" + "2\n[/]\n0\n")

    assert result.exit_code == 0, result.output
    assert "[b]Kit[/b]" in result.output
    assert "No equipment found matching '[/]'" in result.output

    state = FileBackend(tmp_path / "equipment.dat", tmp_path / "requests.dat").load()
    assert [item.name for item in state.equipment] == ["Tent", "[b]Kit[/b]"]


def test_unexpected_menu_error_still_saves(run_cli, tmp_path, monkeypatch):
    def crash(self):
        self.store.add_equipment(EquipmentDraft(name="Tent", quantity=5))
        raise RuntimeError("terminal went away")

    monkeypatch.setattr("supply_tracker.main.SupplyConsole.run", crash)

    result = run_cli("")

    assert result.exit_code == 1
    assert isinstance(result.exception, RuntimeError)
    state = FileBackend(tmp_path / "equipment.dat", tmp_path / "requests.dat").load()
    assert [item.name for item in state.equipment] == ["Tent"]
