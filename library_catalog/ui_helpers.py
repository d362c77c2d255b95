import json
import os
from typing import Any, Dict, List

from rich.console import Console
from rich.table import Table

# Environment variable to control CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "LIB_CLI_OUTPUT"

_console = Console()


def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in {"plain", "json", "rich"}:
        os.environ[OUTPUT_MODE_ENV] = mode


def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, "plain").lower()


def print_books_result(books: List[Any]) -> None:
    """Print books in the current output mode.
    - plain: 'Title - N copies' lines, or 'No books available.'
    - json: JSON array of {title, copies}
    - rich: Rich table
    """
    mode = get_output_mode()

    if not books:
        print("No books available.")
        return

    if mode == "json":
        print(json.dumps([b.to_dict() for b in books], ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="📚 Available Books", show_lines=True, header_style="bold cyan")
        table.add_column("Title", style="white")
        table.add_column("Copies", style="magenta", justify="right")
        for b in books:
            table.add_row(b.title, str(b.copies))
        _console.print(table)
    else:
        for b in books:
            print(f"{b.title} - {b.copies} copies")


def print_notifications_result(events: List[Dict[str, Any]]) -> None:
    mode = get_output_mode()

    if not events:
        print("No notifications recorded.")
        return

    if mode == "json":
        print(json.dumps(events, ensure_ascii=False, default=str))
    elif mode == "rich":
        table = Table(title="🔔 Notifications", header_style="bold cyan")
        table.add_column("When", style="dim")
        table.add_column("Member", style="magenta", justify="right")
        table.add_column("Event")
        table.add_column("Title", style="white")
        for e in events:
            table.add_row(str(e.get("created_at", "")), str(e["member_id"]), e["kind"], e["title"])
        _console.print(table)
    else:
        for e in events:
            print(f"{e.get('created_at', '')} member {e['member_id']} {e['kind']} {e['title']}")
