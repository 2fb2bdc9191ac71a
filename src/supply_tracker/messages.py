"""
User-facing messages for the Tactical Supply tracker.

This module centralizes the text the terminal menu shows so wording stays
consistent and can be changed in one place. Rich markup is allowed.
"""


class EquipmentMessages:
    """Messages for equipment operations."""

    ADDED = "[green]Equipment added successfully. ID: {equipment_id}[/green]"
    QUANTITY_UPDATED = "[green]Quantity updated successfully.[/green]"
    CURRENT_QUANTITY = "Current quantity: [bold]{quantity} {unit}[/bold]"
    NONE_FOUND = "[red]No equipment found matching '{query}'[/red]"
    EMPTY_INVENTORY = "[yellow]No equipment in inventory.[/yellow]"

    LOW_STOCK_NONE = "[green]All equipment levels are adequate.[/green]"
    LOW_STOCK_TOTAL = "[bold red]Total items requiring resupply: {count}[/bold red]"


class RequestMessages:
    """Messages for supply request operations."""

    SUBMITTED = "[green]Supply request submitted. Request ID: REQ-{req_id}[/green]"
    REQUESTING = "Requesting: [bold]{name}[/bold]"
    STATUS_CHANGED = "[green]REQ-{req_id} is now {status}.[/green]"
    NONE_ON_FILE = "[yellow]No supply requests on file.[/yellow]"


class SystemMessages:
    """General system messages."""

    STARTING = "Initializing Tactical Supply Management System..."
    READY = "System ready. Loaded {items} equipment items and {requests} requests."
    REPORT_EXPORTED = "[green]Report exported to '{path}'[/green]"
    SHUTTING_DOWN = "[yellow]Shutting down system...[/yellow]"
    SAVED = "[green]Data saved successfully.[/green]"
    OFFLINE = "[bold green]Tactical Supply Management System offline.[/bold green]"
    SAVE_FAILED = "[bold red]Data could not be saved: {error}[/bold red]"

    DATABASE_MODE = "[cyan]DATABASE MODE[/cyan] - {backend}"
    OFFLINE_MODE = "[yellow]OFFLINE MODE[/yellow] - Local File Storage"

    BACKEND_WRITE_FAILED = (
        "[bold red]{error}[/bold red]\n"
        "[yellow]The change is kept in memory but was not stored in the database.[/yellow]"
    )


def format_message(message: str, **kwargs) -> str:
    """
    Format a message template with provided values.

    Args:
        message: Message template with {placeholders}
        **kwargs: Values to fill in the placeholders

    Returns:
        Formatted message string

    Example:
        >>> format_message(RequestMessages.SUBMITTED, req_id=7)
        '[green]Supply request submitted. Request ID: REQ-7[/green]'
    """
    try:
        return message.format(**kwargs)
    except KeyError:
        # If placeholder not provided, return original message
        return message
