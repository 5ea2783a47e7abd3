import logging
from typing import Optional

import typer
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

import database
import handlers
from config import settings
from library import Library
from utils.ui_helpers import print_books, print_members, set_output_mode

logger = logging.getLogger(__name__)

console = Console(soft_wrap=True)

MENU_ITEMS = [
    ("1", "Add Book"),
    ("2", "Remove Book"),
    ("3", "Register Member"),
    ("4", "Lend Book"),
    ("5", "Return Book"),
    ("6", "Search Books"),
    ("7", "List Books"),
    ("8", "List Members"),
    ("9", "Save Library"),
    ("0", "Exit"),
]

SEARCH_PROMPTS = {
    "id": "Enter ID: ",
    "title": "Enter title keyword: ",
    "author": "Enter author keyword: ",
}


def configure_logging() -> None:
    level = getattr(logging, settings.log_level.upper(), logging.WARNING)
    logging.basicConfig(level=level, format=settings.log_format)


def _say(message: str) -> None:
    # Messages carry user data, so never interpret them as markup
    console.print(message, markup=False, highlight=False)


def _ask(prompt: str) -> str:
    return console.input(prompt).strip()


# ------------------------- Menu actions ------------------------- #
def _rejected(problem: Optional[str]) -> bool:
    if problem:
        _say(problem)
        return True
    return False


def add_book_action(lib: Library) -> None:
    book_id = _ask("Enter book id (unique): ")
    if _rejected(handlers.check_new_book_id(lib, book_id)):
        return
    title = _ask("Enter title: ")
    author = _ask("Enter author: ")
    copies = _ask("Enter number of copies: ")
    _say(handlers.add_book(lib, book_id, title, author, copies))


def remove_book_action(lib: Library) -> None:
    book_id = _ask("Enter book id to remove: ")
    _say(handlers.remove_book(lib, book_id))


def register_member_action(lib: Library) -> None:
    member_id = _ask("Enter member id (unique): ")
    if _rejected(handlers.check_new_member_id(lib, member_id)):
        return
    name = _ask("Enter member name: ")
    _say(handlers.register_member(lib, member_id, name))


def lend_book_action(lib: Library) -> None:
    member_id = _ask("Enter member id: ")
    if _rejected(handlers.check_member(lib, member_id, handlers.LEND_MEMBER_NOT_FOUND)):
        return
    book_id = _ask("Enter book id to lend: ")
    _say(handlers.lend_book(lib, member_id, book_id))


def return_book_action(lib: Library) -> None:
    member_id = _ask("Enter member id: ")
    if _rejected(handlers.check_member(lib, member_id)):
        return
    book_id = _ask("Enter book id to return: ")
    _say(handlers.return_book(lib, member_id, book_id))


def search_action(lib: Library) -> None:
    _say("Search by: 1) ID  2) Title  3) Author")
    mode = handlers.SEARCH_MODES.get(_ask("Choose: "))
    if mode is None:
        _say("Invalid option.")
        return
    found = handlers.search_books(lib, mode, _ask(SEARCH_PROMPTS[mode]))
    print_books(found, header=None, empty_message="Not found." if mode == "id" else "No matches.")


def list_books_action(lib: Library) -> None:
    print_books(lib.list_books())


def list_members_action(lib: Library) -> None:
    print_members(lib.list_members())


ACTIONS = {
    "1": add_book_action,
    "2": remove_book_action,
    "3": register_member_action,
    "4": lend_book_action,
    "5": return_book_action,
    "6": search_action,
    "7": list_books_action,
    "8": list_members_action,
}


def save(lib: Library, data_file: str) -> bool:
    """Write the catalog to disk, reporting failures instead of raising."""
    try:
        database.save_library(lib, data_file)
    except OSError as e:
        logger.error("Could not save library to %s: %s", data_file, e)
        _say(f"Could not save library to {data_file}: {e}")
        return False
    return True


def render_menu() -> None:
    table = Table.grid(padding=(0, 2))
    table.add_column(justify="right", style="bold cyan", width=4)
    table.add_column(justify="left", style="white")
    for key, label in MENU_ITEMS:
        table.add_row(f"{key})", label)

    console.print(Panel(
        table,
        title="Main Menu",
        border_style="cyan",
        box=box.HEAVY,
        padding=(0, 2),
    ))


def run_menu(lib: Library, data_file: str) -> None:
    """Menu loop: one selection at a time until the user exits."""
    _say(f"=== {settings.app_name} v{settings.app_version} ===")
    while True:
        render_menu()
        try:
            choice = _ask("Choose an option: ")
            if choice == "0":
                if save(lib, data_file):
                    _say(f"Exiting. Data saved to {data_file}. Bye!")
                    return
            elif choice == "9":
                if save(lib, data_file):
                    _say("Saved.")
            elif choice in ACTIONS:
                ACTIONS[choice](lib)
            else:
                _say("Invalid option.")
        except EOFError:
            # Input closed: nothing more can be read, so exit as with "0"
            _say("")
            if not save(lib, data_file):
                raise typer.Exit(code=1)
            _say(f"Exiting. Data saved to {data_file}. Bye!")
            return
        print()


# --- Typer CLI Application ---
app = typer.Typer(help=f"{settings.app_name} CLI")

@app.callback(invoke_without_command=True)
def _global_options(
    ctx: typer.Context,
    data_file: Optional[str] = typer.Option(
        None,
        "--file",
        "-f",
        help="Data file to load and save (default: LIBRARY_DATA_FILE or library.db)",
    ),
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format for listings: plain | json | rich (default: plain)",
    ),
):
    """Load the catalog; with no command, start the interactive menu."""
    configure_logging()
    if output:
        set_output_mode(output)

    path = data_file or settings.data_file
    lib = Library()
    report = database.load_library(lib, path)
    ctx.obj = {"library": lib, "data_file": path, "report": report}

    if ctx.invoked_subcommand is None:
        if report.skipped:
            _say(f"Skipped {report.skipped} malformed line(s) in {path}.")
        if report.unreturned_copies:
            _say(
                f"Note: {report.unreturned_copies} copy(ies) were lent out when {path} was saved; "
                "those loans were not kept."
            )
        run_menu(lib, path)

@app.command("list")
def cli_list(ctx: typer.Context):
    """List all books."""
    print_books(ctx.obj["library"].list_books())

@app.command("members")
def cli_members(ctx: typer.Context):
    """List all members."""
    print_members(ctx.obj["library"].list_members())

@app.command("find")
def cli_find(ctx: typer.Context, book_id: str = typer.Argument(..., help="Book id")):
    """Show a single book by id."""
    found = handlers.search_books(ctx.obj["library"], "id", book_id)
    print_books(found, header=None, empty_message="Not found.")

@app.command("search")
def cli_search(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Keyword (case-insensitive substring)"),
    author: bool = typer.Option(False, "--author", "-a", help="Match authors instead of titles"),
):
    """Search books by title, or by author with --author."""
    found = handlers.search_books(ctx.obj["library"], "author" if author else "title", query)
    print_books(found, header=None, empty_message="No matches.")


if __name__ == "__main__":
    app()
