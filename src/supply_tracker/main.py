"""Main entry point for the Tactical Supply tracker."""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from supply_tracker.cli import SupplyConsole
from supply_tracker.config import load_settings
from supply_tracker.exceptions import InventoryError, StorageIOError
from supply_tracker.logging_config import get_logger, setup_logging
from supply_tracker.messages import SystemMessages, format_message
from supply_tracker.services import AuditTrail, InventoryStore
from supply_tracker.storage import open_backend

logger = get_logger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


@click.command()
@click.option("--data-dir", type=click.Path(file_okay=False), default=None,
              help="Directory for data files, audit log and report.")
@click.option("--db-config", type=click.Path(dir_okay=False), default=None,
              help="key=value database config file (default: <data-dir>/db_config.conf).")
@click.option("--log-level", type=click.Choice(LOG_LEVELS, case_sensitive=False), default=None,
              help="Application log level.")
def main(data_dir, db_config, log_level) -> None:
    """Run the Tactical Supply tracker menu."""
    settings = load_settings(data_dir=data_dir, db_config=db_config, log_level=log_level)

    Path(settings.DATA_DIR).mkdir(parents=True, exist_ok=True)
    setup_logging(
        log_dir=str(settings.path_for(settings.LOG_DIR)),
        log_level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    )

    console = Console()
    console.print(SystemMessages.STARTING)

    # Decided once: database if reachable, otherwise local files
    backend = open_backend(settings)
    audit = AuditTrail(settings.audit_log_path, backend=backend)
    store = InventoryStore(
        backend,
        audit=audit,
        max_items=settings.MAX_ITEMS,
        max_requests=settings.MAX_REQUESTS,
    )

    try:
        store.load()
    except InventoryError as e:
        logger.error(f"Startup load failed: {e.message}")
        console.print(f"[bold red]{escape(e.message)}[/bold red]")
        audit.close()
        backend.close()
        sys.exit(1)

    console.print(
        format_message(SystemMessages.READY, items=store.equipment_count, requests=store.request_count)
    )

    try:
        SupplyConsole(store, settings.report_path, console=console).run()
    finally:
        # Also runs when the menu dies on an unexpected error
        saved = shutdown(store, console)

    if not saved:
        sys.exit(1)


def shutdown(store, console) -> bool:
    """Save and release the store; False when the final save failed."""
    console.print(SystemMessages.SHUTTING_DOWN)
    try:
        store.shutdown()
    except StorageIOError as e:
        console.print(format_message(SystemMessages.SAVE_FAILED, error=escape(e.message)))
        return False

    console.print(SystemMessages.SAVED)
    console.print(SystemMessages.OFFLINE)
    return True


if __name__ == "__main__":
    main()
