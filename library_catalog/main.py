import subprocess
import sys
import webbrowser
from typing import Optional

import typer

import library_catalog.database as database
from library_catalog.app_factory import build_service
from library_catalog.config import configure_logging, settings
from library_catalog.library_service import InvalidOperationError, LibraryService
from library_catalog.members import SqliteMemberValidator
from library_catalog.notifications import SqliteNotificationLog
from library_catalog.ui_helpers import print_books_result, print_notifications_result, set_output_mode

APP_NAME = "Library Catalog CLI"


class ServiceManager:
    """Holds one LibraryService per database file."""
    _instance: Optional[LibraryService] = None
    _db_file_snapshot: Optional[str] = None

    @classmethod
    def get_instance(cls) -> LibraryService:
        current_db = database.DATABASE_FILE
        # Rebuild if the database file changed (e.g. per-test databases)
        if cls._instance is None or current_db != cls._db_file_snapshot:
            if cls._instance is not None:
                cls._instance.close()
            cls._instance = build_service(current_db)
            cls._db_file_snapshot = current_db
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        if cls._instance is not None:
            cls._instance.close()
        cls._instance = None
        cls._db_file_snapshot = None


# --- Typer CLI application ---
app = typer.Typer(help=APP_NAME)


@app.callback()
def _global_options(
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    )
):
    """Global options for the CLI (e.g. output mode)."""
    configure_logging()
    if output:
        set_output_mode(output)


@app.command("add")
def cli_add(title: str, copies: int):
    """Add copies of a title to the catalog."""
    service = ServiceManager.get_instance()
    try:
        service.add_book(title, copies)
    except ValueError as e:
        print(f"Error: {e}")
        raise typer.Exit(code=1)
    print(f"Added {copies} copies of {title.strip()}")


@app.command("borrow")
def cli_borrow(member_id: int, title: str):
    """Borrow one copy of a title for a member."""
    service = ServiceManager.get_instance()
    try:
        borrowed = service.borrow_book(member_id, title)
    except InvalidOperationError as e:
        print(f"Not allowed: {e}")
        raise typer.Exit(code=1)
    if borrowed:
        print(f"Member {member_id} borrowed {title}")
    else:
        print(f"{title} is not available.")


@app.command("return")
def cli_return(member_id: int, title: str):
    """Return one copy of a title."""
    service = ServiceManager.get_instance()
    if service.return_book(member_id, title):
        print(f"Member {member_id} returned {title}")
    else:
        print(f"{title} not found in catalog.")


@app.command("available")
def cli_available():
    """List titles with at least one copy on the shelf."""
    print_books_result(ServiceManager.get_instance().get_available_books())


@app.command("member-add")
def cli_member_add(member_id: int, name: str):
    """Register a member who may borrow books."""
    try:
        SqliteMemberValidator(database.DATABASE_FILE).register_member(member_id, name)
    except ValueError as e:
        print(f"Error: {e}")
        raise typer.Exit(code=1)
    print(f"Member {member_id} registered.")


@app.command("member-deactivate")
def cli_member_deactivate(member_id: int):
    """Stop a member from borrowing."""
    if SqliteMemberValidator(database.DATABASE_FILE).deactivate_member(member_id):
        print(f"Member {member_id} deactivated.")
    else:
        print(f"Member {member_id} not found.")


@app.command("notifications")
def cli_notifications(limit: int = typer.Option(20, "--limit", "-n", help="How many events to show")):
    """Show the most recent borrow/return notifications."""
    print_notifications_result(SqliteNotificationLog(database.DATABASE_FILE).recent(limit))


@app.command("serve")
def cli_serve(
    host: str = typer.Option(settings.api_host, help="Bind address"),
    port: int = typer.Option(settings.api_port, help="Port"),
    open_browser: bool = typer.Option(True, "--open/--no-open", help="Open the API docs in a browser"),
):
    """Start the HTTP API with uvicorn."""
    url = f"http://{host}:{port}/docs"
    print(f"Starting API on {url}")
    if open_browser:
        webbrowser.open(url)
    subprocess.run(
        [sys.executable, "-m", "uvicorn", "library_catalog.api:app", "--host", host, "--port", str(port)],
        check=False,
    )


if __name__ == "__main__":
    app()
