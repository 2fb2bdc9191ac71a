"""
Terminal menu for the Tactical Supply tracker.

A thin layer: it prompts, renders tables, and calls InventoryStore
operations. Every typed store failure is printed and the menu continues.
"""

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import IntPrompt, Prompt
from rich.table import Table

from supply_tracker.checksum import stock_status
from supply_tracker.exceptions import BackendUnavailableError, InventoryError
from supply_tracker.logging_config import get_logger
from supply_tracker.messages import (
    EquipmentMessages,
    RequestMessages,
    SystemMessages,
    format_message,
)
from supply_tracker.models import (
    Classification,
    EquipmentDraft,
    Priority,
    RequestStatus,
    StockStatus,
)
from supply_tracker.services.report_service import export_report
from supply_tracker.storage.file_backend import FileBackend
from supply_tracker.validation_rules import EquipmentRules, RequestRules

logger = get_logger(__name__)

STATUS_STYLES = {
    StockStatus.OK: "green",
    StockStatus.WATCH: "yellow",
    StockStatus.LOW: "bold red",
}

REQUEST_STYLES = {
    RequestStatus.PENDING: "yellow",
    RequestStatus.APPROVED: "green",
    RequestStatus.FULFILLED: "blue",
    RequestStatus.DENIED: "red",
}

CLASSIFICATION_STYLES = {
    Classification.UNCLASSIFIED: "white",
    Classification.RESTRICTED: "yellow",
    Classification.CONFIDENTIAL: "cyan",
    Classification.SECRET: "bold red",
}

MENU = [
    ("1", "Add Equipment"),
    ("2", "Check Inventory"),
    ("3", "List All Equipment"),
    ("4", "Update Quantity"),
    ("5", "Request Supply"),
    ("6", "Check Requests"),
    ("7", "Update Request Status"),
    ("8", "Low Stock Alert"),
    ("9", "Export Report"),
    ("0", "Exit System"),
]


class SupplyConsole:
    def __init__(self, store, report_path, console=None):
        self.store = store
        self.report_path = report_path
        self.console = console or Console()

    # ------------------------------------------------------------------
    # Prompt helpers
    # ------------------------------------------------------------------

    def _ask_int(self, prompt: str, minimum: int, maximum: int, default=None) -> int:
        kwargs = {} if default is None else {"default": default}
        while True:
            value = IntPrompt.ask(f"[cyan]{prompt}[/cyan]", console=self.console, **kwargs)
            if minimum <= value <= maximum:
                return value
            self.console.print(f"[yellow]Value must be between {minimum} and {maximum}.[/yellow]")

    def _ask_text(self, prompt: str, default: str = "") -> str:
        return Prompt.ask(f"[cyan]{prompt}[/cyan]", console=self.console, default=default)

    def _error(self, error: InventoryError) -> None:
        self.console.print(f"[red]{escape(error.message)}[/red]")

    # ------------------------------------------------------------------
    # Screens
    # ------------------------------------------------------------------

    def banner(self) -> None:
        if self.store.backend_name != FileBackend.name:
            mode = format_message(SystemMessages.DATABASE_MODE, backend=escape(self.store.backend_name))
        else:
            mode = SystemMessages.OFFLINE_MODE

        self.console.print(
            Panel(
                "[bold]TACTICAL SUPPLY MANAGEMENT SYSTEM[/bold]\n"
                f"{mode}\n"
                f"Equipment Count: [bold]{self.store.equipment_count}[/bold] items | "
                f"Supply Requests: [bold]{self.store.pending_request_count}[/bold] pending",
                border_style="green",
            )
        )

    def show_menu(self) -> str:
        self.banner()
        for key, label in MENU:
            self.console.print(f"  [green][{key}][/green] {label}")
        return Prompt.ask(
            "[bold yellow]TACTICAL-SUPPLY[/bold yellow]$",
            console=self.console,
            choices=[key for key, _ in MENU],
            show_choices=False,
        )

    def equipment_table(self, items, title: str) -> Table:
        table = Table(title=title)
        table.add_column("ID", justify="right")
        table.add_column("NAME")
        table.add_column("QTY", justify="right")
        table.add_column("UNIT")
        table.add_column("LOCATION")
        table.add_column("STATUS")

        for item in items:
            status = stock_status(item)
            table.add_row(
                str(item.id),
                escape(item.name),
                str(item.quantity),
                escape(item.unit),
                escape(item.location),
                f"[{STATUS_STYLES[status]}]{status.name}[/]",
            )
        return table

    def show_details(self, item) -> None:
        status = stock_status(item)
        style = CLASSIFICATION_STYLES[item.classification]
        self.console.print(
            Panel(
                f"ID: {item.id}\n"
                f"Name: {escape(item.name)}\n"
                f"Description: {escape(item.description)}\n"
                f"Quantity: {item.quantity} {escape(item.unit)}\n"
                f"Location: {escape(item.location)}\n"
                f"Min Threshold: {item.min_threshold}\n"
                f"Status: [{STATUS_STYLES[status]}]{status.name}[/]\n"
                f"Last Updated: {item.last_updated.strftime('%Y-%m-%d %H:%M:%S')}\n"
                f"Checksum: {item.checksum}",
                title=f"[{style}]{item.classification.name}[/]",
                border_style=style,
            )
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def add_equipment(self) -> None:
        draft = EquipmentDraft(
            name=self._ask_text("Equipment Name"),
            description=self._ask_text("Description"),
            quantity=self._ask_int("Initial Quantity", EquipmentRules.QUANTITY_MIN, EquipmentRules.QUANTITY_MAX),
            min_threshold=self._ask_int("Minimum Threshold", EquipmentRules.THRESHOLD_MIN, EquipmentRules.THRESHOLD_MAX),
            unit=self._ask_text("Unit (ea, box, case, etc.)", default="ea"),
            location=self._ask_text("Location"),
            classification=self._ask_int(
                "Classification (0=Unclass, 1=Restricted, 2=Confidential, 3=Secret)", 0, 3, default=0
            ),
        )
        equipment_id = self.store.add_equipment(draft)
        self.console.print(format_message(EquipmentMessages.ADDED, equipment_id=equipment_id))

    def check_inventory(self) -> None:
        query = self._ask_text("Search term")
        best = self.store.search_by_name(query)
        self.show_details(best)
        for item in self.store.search_all_by_name(query):
            if item.id != best.id:
                self.show_details(item)

    def list_equipment(self) -> None:
        items = self.store.list_equipment()
        if not items:
            self.console.print(EquipmentMessages.EMPTY_INVENTORY)
            return
        self.console.print(self.equipment_table(items, "COMPLETE INVENTORY LISTING"))
        self.console.print(f"[bold cyan]Total Equipment Items: {len(items)}[/bold cyan]")

    def update_quantity(self) -> None:
        equipment_id = self._ask_int("Equipment ID", 1, 999999)
        item = self.store.find_by_id(equipment_id)
        self.console.print(format_message(EquipmentMessages.CURRENT_QUANTITY, quantity=item.quantity, unit=escape(item.unit)))
        new_qty = self._ask_int("New quantity", EquipmentRules.QUANTITY_MIN, EquipmentRules.QUANTITY_MAX)
        try:
            self.store.update_quantity(equipment_id, new_qty)
        except BackendUnavailableError as e:
            self.console.print(format_message(SystemMessages.BACKEND_WRITE_FAILED, error=escape(e.message)))
            return
        self.console.print(EquipmentMessages.QUANTITY_UPDATED)

    def request_supply(self) -> None:
        equipment_id = self._ask_int("Equipment ID", 1, 999999)
        item = self.store.find_by_id(equipment_id)
        self.console.print(format_message(RequestMessages.REQUESTING, name=escape(item.name)))
        qty = self._ask_int("Quantity needed", RequestRules.QUANTITY_MIN, RequestRules.QUANTITY_MAX)
        unit = self._ask_text("Requesting unit")
        priority = self._ask_int("Priority (1=Low, 2=Normal, 3=High, 4=Critical)", 1, 4, default=2)
        req_id = self.store.add_request(equipment_id, qty, unit, Priority(priority))
        self.console.print(format_message(RequestMessages.SUBMITTED, req_id=req_id))

    def check_requests(self) -> None:
        requests = self.store.list_requests()
        if not requests:
            self.console.print(RequestMessages.NONE_ON_FILE)
            return

        table = Table(title="SUPPLY REQUEST STATUS")
        table.add_column("REQ-ID", justify="right")
        table.add_column("EQUIP-ID", justify="right")
        table.add_column("UNIT")
        table.add_column("QTY", justify="right")
        table.add_column("PRIORITY")
        table.add_column("STATUS")
        for request in requests:
            table.add_row(
                str(request.req_id),
                str(request.equipment_id),
                escape(request.requesting_unit),
                str(request.requested_qty),
                request.priority.name,
                f"[{REQUEST_STYLES[request.status]}]{request.status.name}[/]",
            )
        self.console.print(table)
        self.console.print(f"[bold cyan]Total Supply Requests: {len(requests)}[/bold cyan]")

    def update_request_status(self) -> None:
        req_id = self._ask_int("Request ID", 1, 999999)
        self.store.find_request(req_id)
        action = Prompt.ask(
            "[cyan]Action[/cyan]",
            console=self.console,
            choices=["approve", "deny", "fulfill"],
        )
        handlers = {
            "approve": self.store.approve_request,
            "deny": self.store.deny_request,
            "fulfill": self.store.fulfill_request,
        }
        try:
            request = handlers[action](req_id)
        except BackendUnavailableError as e:
            self.console.print(format_message(SystemMessages.BACKEND_WRITE_FAILED, error=escape(e.message)))
            return
        self.console.print(format_message(RequestMessages.STATUS_CHANGED, req_id=req_id, status=request.status.name))

    def low_stock_alert(self) -> None:
        items = self.store.list_low_stock()
        if not items:
            self.console.print(EquipmentMessages.LOW_STOCK_NONE)
            return
        for item in items:
            self.console.print(f"[bold red]CRITICAL:[/bold red] {escape(item.name)} (ID: {item.id})")
            self.console.print(f"    Current: {item.quantity}, Minimum: {item.min_threshold}")
            self.console.print(f"    Location: {escape(item.location)}")
        self.console.print(format_message(EquipmentMessages.LOW_STOCK_TOTAL, count=len(items)))

    def export_report(self) -> None:
        path = export_report(self.store, self.report_path)
        self.console.print(format_message(SystemMessages.REPORT_EXPORTED, path=escape(str(path))))

    # ------------------------------------------------------------------
    # Loop
    # ------------------------------------------------------------------

    def run(self) -> None:
        """Menu loop; returns when the user picks Exit or input ends."""
        commands = {
            "1": self.add_equipment,
            "2": self.check_inventory,
            "3": self.list_equipment,
            "4": self.update_quantity,
            "5": self.request_supply,
            "6": self.check_requests,
            "7": self.update_request_status,
            "8": self.low_stock_alert,
            "9": self.export_report,
        }

        while True:
            try:
                choice = self.show_menu()
            except (EOFError, KeyboardInterrupt):
                self.console.print()
                return

            if choice == "0":
                return

            try:
                commands[choice]()
            except InventoryError as e:
                self._error(e)
            except (EOFError, KeyboardInterrupt):
                self.console.print()
                return
