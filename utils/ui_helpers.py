import os
import json
from typing import List, Any, Optional
from rich.console import Console
from rich.table import Table
from rich.markup import escape

# Environment variable to control CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "LIB_CLI_OUTPUT"
OUTPUT_MODES = {"plain", "json", "rich"}

_console = Console()

def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in OUTPUT_MODES:
        os.environ[OUTPUT_MODE_ENV] = mode

def get_output_mode() -> str:
    mode = os.environ.get(OUTPUT_MODE_ENV, "plain").lower()
    return mode if mode in OUTPUT_MODES else "plain"

def print_books(books: List[Any], header: Optional[str] = "---- Books ----",
                empty_message: str = "No books in library.") -> None:
    """Print books in the current output mode.
    - plain: optional header, then 'id | title | author | total: N | avail: M' lines
    - json: JSON array of book dicts
    - rich: Rich table
    """
    mode = get_output_mode()

    if not books:
        print(empty_message)
        return

    if mode == "json":
        print(json.dumps([b.to_dict() for b in books], ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="📚 Books", show_lines=True, header_style="bold cyan")
        table.add_column("ID", style="magenta", no_wrap=True)
        table.add_column("Title", style="white")
        table.add_column("Author", style="white")
        table.add_column("Total", justify="right")
        table.add_column("Available", justify="right")
        for b in books:
            table.add_row(escape(b.id), escape(b.title), escape(b.author), str(b.total_copies), str(b.available_copies))
        _console.print(table)
    else:
        if header:
            print(header)
        for b in books:
            print(str(b))

def print_members(members: List[Any]) -> None:
    """Print members in the current output mode.
    - plain: '---- Members ----' then '- id: name' lines
    - json: JSON array of member dicts
    - rich: Rich table
    """
    mode = get_output_mode()

    if not members:
        print("No members registered.")
        return

    if mode == "json":
        print(json.dumps([m.to_dict() for m in members], ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="👥 Members", show_lines=True, header_style="bold cyan")
        table.add_column("ID", style="magenta", no_wrap=True)
        table.add_column("Name", style="white")
        for m in members:
            table.add_row(escape(m.id), escape(m.name))
        _console.print(table)
    else:
        print("---- Members ----")
        for m in members:
            print(f"- {m}")
