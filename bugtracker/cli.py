"""
Bug Tracker - CLI Interface

Menu-driven loop for adding, listing, updating and deleting bugs.
"""

import logging
from enum import Enum

import click
from rich.console import Console
from rich.table import Table
from rich.text import Text

from . import __version__
from . import validators
from .config import DB_PATH, LOG_FORMAT, LOG_LEVEL
from .errors import NotFoundError, SchemaError, StorageOperationError
from .prompts import get_valid_input
from .store import BugStore

logger = logging.getLogger(__name__)


console = Console()
err_console = Console(stderr=True)

MENU = "\n1. Add Bug\n2. List Bugs\n3. Update Bug\n4. Delete Bug\n5. Exit"
LIST_COLUMNS = (
    ("ID", "id"),
    ("Title", "title"),
    ("Description", "description"),
    ("Status", "status"),
    ("Priority", "priority"),
    ("Date", "date"),
)


class LoopState(Enum):
    """Command loop states."""
    MENU_DISPLAY = "menu_display"
    AWAITING_CHOICE = "awaiting_choice"
    DISPATCH = "dispatch"
    TERMINATED = "terminated"


class CommandLoop:
    """
    Dispatches menu choices to the input collector and the store.

    Example:
        with BugStore("bugs.db") as store:
            store.ensure_schema()
            CommandLoop(store).run()
    """

    def __init__(self, store: BugStore, console: Console = console, err_console: Console = err_console):
        self.store = store
        self.console = console
        self.err_console = err_console
        self.state = LoopState.MENU_DISPLAY
        self._handlers = {
            "1": self.add_bug,
            "2": self.list_bugs,
            "3": self.update_bug,
            "4": self.delete_bug,
        }

    def run(self):
        """Loop until the user picks Exit or input ends."""
        while self.state != LoopState.TERMINATED:
            self.console.print(MENU, markup=False, highlight=False)
            self.state = LoopState.AWAITING_CHOICE
            try:
                choice = self.console.input("Choice: ")
                self.dispatch(choice)
            except KeyboardInterrupt:
                self.console.print("\n[dim]Interrupted. Choose 5 to exit.[/dim]")
                self.state = LoopState.MENU_DISPLAY
            except EOFError:
                self.state = LoopState.TERMINATED

    def dispatch(self, choice: str) -> LoopState:
        """Run the action for one menu choice and return the next state."""
        self.state = LoopState.DISPATCH
        if choice == "5":
            self.state = LoopState.TERMINATED
            return self.state

        handler = self._handlers.get(choice)
        if handler is None:
            self.console.print("Invalid option.")
        else:
            try:
                handler()
            except NotFoundError as e:
                self.console.print(f"Error: {e}", markup=False)
            except StorageOperationError as e:
                self.err_console.print(str(e), markup=False)
            except EOFError:
                self.state = LoopState.TERMINATED
                return self.state

        self.state = LoopState.MENU_DISPLAY
        return self.state

    def add_bug(self):
        title = get_valid_input("Title", validators.TITLE, console=self.console)
        description = get_valid_input("Description", validators.DESCRIPTION, console=self.console)
        priority = get_valid_input("Priority (Low, Medium, High)", validators.PRIORITY, console=self.console)

        self.store.insert(title, description, priority)
        self.console.print("Bug added.")

    def list_bugs(self):
        if self.store.count() == 0:
            self.console.print("No bugs found.")
            return

        table = Table(title="Bugs")
        for header, _ in LIST_COLUMNS:
            table.add_column(header)

        for bug in self.store.list_all():
            # Cells are user text; Text keeps brackets from being read as markup
            data = bug.to_dict()
            table.add_row(*(Text(str(data[key])) for _, key in LIST_COLUMNS))

        self.console.print(table)

    def update_bug(self):
        bug_id = get_valid_input("Bug ID to update", validators.BUG_ID, console=self.console)
        if not self.store.exists(bug_id):
            raise NotFoundError(bug_id)

        status = get_valid_input(
            "New Status (Open/In Progress/Resolved)", validators.STATUS, console=self.console
        )
        self.store.update_status(bug_id, status)
        self.console.print("Bug updated.")

    def delete_bug(self):
        bug_id = get_valid_input("Bug ID to delete", validators.BUG_ID, console=self.console)
        self.store.delete(bug_id)
        self.console.print("Bug deleted.")


@click.command()
@click.option("--db", "db_path", default=DB_PATH, show_default=True, help="SQLite database file")
@click.version_option(version=__version__)
def cli(db_path: str):
    """Bug Tracker - track bugs in a local SQLite file."""
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
    logger.info(f"Starting bug tracker with database {db_path}")

    store = BugStore(db_path)
    try:
        store.open()
        store.ensure_schema()
    except SchemaError as e:
        err_console.print(str(e), markup=False)
        store.close()
        raise SystemExit(1)

    with store:
        CommandLoop(store).run()


def main():
    """Entry point."""
    cli()


if __name__ == "__main__":
    main()
