import json
import os

from typer.testing import CliRunner

import main
from main import app

runner = CliRunner()


def _write(path, text):
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)

def _run_menu(data_file, keys):
    return runner.invoke(app, ["--file", data_file], input="\n".join(keys) + "\n")


def test_exit_saves_and_returns_zero(data_file):
    result = _run_menu(data_file, ["0"])
    assert result.exit_code == 0
    assert "Main Menu" in result.stdout
    assert f"Exiting. Data saved to {data_file}. Bye!" in result.stdout
    assert os.path.exists(data_file)

def test_invalid_option_keeps_looping(data_file):
    result = _run_menu(data_file, ["42", "abc", "0"])
    assert result.exit_code == 0
    assert result.stdout.count("Invalid option.") == 2

def test_dune_scenario_through_menu(data_file):
    keys = [
        "1", "B1", "Dune", "Herbert", "2",
        "3", "M1", "Alice",
        "4", "M1", "B1",
        "4", "M1", "B1",
        "3", "M2", "Bob",
        "4", "M2", "B1",
        "3", "M3", "Carol",
        "4", "M3", "B1",
        "6", "2", "dun",
        "0",
    ]
    result = _run_menu(data_file, keys)
    assert result.exit_code == 0
    out = result.stdout
    assert "Book added: Dune by Herbert (copies: 2)" in out
    assert "Lent 'Dune' to Alice at" in out
    assert "This member already borrowed this book." in out
    assert "Lent 'Dune' to Bob at" in out
    assert "No available copies to lend." in out
    assert "B1 | Dune | Herbert | total: 2 | avail: 0" in out

    with open(data_file, encoding="utf-8") as f:
        saved = f.read().splitlines()
    assert saved == [
        "BOOK|B1|Dune|Herbert|2|0",
        "MEMBER|M1|Alice",
        "MEMBER|M2|Bob",
        "MEMBER|M3|Carol",
    ]

def test_invalid_number_aborts_add(data_file):
    result = _run_menu(data_file, ["1", "B1", "Dune", "Herbert", "lots", "7", "0"])
    assert "Invalid number." in result.stdout
    assert "No books in library." in result.stdout

def test_search_submenu_invalid_option(data_file):
    result = _run_menu(data_file, ["6", "9", "0"])
    assert "Search by: 1) ID  2) Title  3) Author" in result.stdout
    assert "Invalid option." in result.stdout

def test_search_messages(data_file):
    _write(data_file, "BOOK|B1|Dune|Herbert|1|1\n")
    result = _run_menu(data_file, ["6", "1", "B9", "6", "3", "tolkien", "6", "1", "B1", "0"])
    assert "Not found." in result.stdout
    assert "No matches." in result.stdout
    assert "B1 | Dune | Herbert | total: 1 | avail: 1" in result.stdout

def test_list_books_and_members(data_file):
    result = _run_menu(data_file, ["7", "8", "3", "M1", "Alice", "8", "0"])
    out = result.stdout
    assert "No books in library." in out
    assert "No members registered." in out
    assert "---- Members ----" in out
    assert "- M1: Alice" in out

def test_save_option(data_file):
    result = _run_menu(data_file, ["3", "M1", "Alice", "9", "0"])
    assert "Saved." in result.stdout
    with open(data_file, encoding="utf-8") as f:
        assert f.read() == "MEMBER|M1|Alice\n"

def test_loans_forgotten_after_restart(data_file):
    _run_menu(data_file, ["1", "B1", "Dune", "Herbert", "1", "3", "M1", "Alice", "4", "M1", "B1", "0"])
    result = _run_menu(data_file, ["5", "M1", "B1", "0"])
    assert "1 copy(ies) were lent out" in result.stdout
    assert "No record of this book being borrowed by this member." in result.stdout

def test_malformed_lines_reported_on_start(data_file):
    _write(data_file, "BOOK|X1|Title\nBOOK|B1|Dune|Herbert|2|2\n")
    result = _run_menu(data_file, ["7", "0"])
    assert f"Skipped 1 malformed line(s) in {data_file}." in result.stdout
    assert "B1 | Dune | Herbert | total: 2 | avail: 2" in result.stdout

def test_eof_saves_and_exits(data_file):
    result = runner.invoke(app, ["--file", data_file], input="3\nM1\nAlice\n")
    assert result.exit_code == 0
    assert "Exiting." in result.stdout
    with open(data_file, encoding="utf-8") as f:
        assert f.read() == "MEMBER|M1|Alice\n"

def test_failed_save_keeps_running(data_file, monkeypatch):
    def broken_save(lib, path=None):
        raise PermissionError("read-only")

    monkeypatch.setattr(main.database, "save_library", broken_save)
    result = _run_menu(data_file, ["9", "0"])
    assert result.stdout.count("Could not save library") == 3
    assert "Saved." not in result.stdout
    assert result.exit_code == 1

def test_list_command(data_file):
    _write(data_file, "BOOK|B1|Dune|Herbert|2|1\nBOOK|B2|Emma|Austen|1|1\n")
    result = runner.invoke(app, ["--file", data_file, "list"])
    assert result.exit_code == 0
    assert "---- Books ----" in result.stdout
    assert "B2 | Emma | Austen | total: 1 | avail: 1" in result.stdout

def test_list_command_json(data_file):
    _write(data_file, "BOOK|B1|Dune|Herbert|2|1\n")
    result = runner.invoke(app, ["--file", data_file, "--output", "json", "list"])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == [
        {"id": "B1", "title": "Dune", "author": "Herbert", "total_copies": 2, "available_copies": 1}
    ]

def test_members_command(data_file):
    result = runner.invoke(app, ["--file", data_file, "members"])
    assert result.exit_code == 0
    assert "No members registered." in result.stdout

def test_find_command(data_file):
    _write(data_file, "BOOK|B1|Dune|Herbert|2|2\n")
    assert "B1 | Dune" in runner.invoke(app, ["--file", data_file, "find", "B1"]).stdout
    assert "Not found." in runner.invoke(app, ["--file", data_file, "find", "B2"]).stdout

def test_search_command(data_file):
    _write(data_file, "BOOK|B1|Dune|Herbert|2|2\nBOOK|B2|Emma|Jane Austen|1|1\n")
    result = runner.invoke(app, ["--file", data_file, "search", "DUN"])
    assert "B1 | Dune" in result.stdout
    assert "B2" not in result.stdout
    result = runner.invoke(app, ["--file", data_file, "search", "--author", "austen"])
    assert "B2 | Emma" in result.stdout
    assert "No matches." in runner.invoke(app, ["--file", data_file, "search", "xyz"]).stdout

def test_empty_book_id_returns_to_menu(data_file):
    result = _run_menu(data_file, ["1", "", "7", "0"])
    assert result.exit_code == 0
    assert "ID cannot be empty." in result.stdout
    assert "Enter title:" not in result.stdout
    assert "No books in library." in result.stdout
    assert "Exiting." in result.stdout

def test_duplicate_ids_rejected_before_other_prompts(data_file):
    _write(data_file, "BOOK|B1|Dune|Herbert|1|1\nMEMBER|M1|Alice\n")
    result = _run_menu(data_file, ["1", "B1", "3", "M1", "8", "0"])
    assert "A book with that ID already exists." in result.stdout
    assert "Member with this ID already exists." in result.stdout
    assert "Enter title:" not in result.stdout
    assert "Enter member name:" not in result.stdout
    assert "- M1: Alice" in result.stdout

def test_lend_unknown_member_returns_to_menu(data_file):
    result = _run_menu(data_file, ["4", "ghost", "8", "0"])
    assert result.exit_code == 0
    assert "Member not found. Register first." in result.stdout
    assert "Enter book id to lend:" not in result.stdout
    assert "No members registered." in result.stdout

def test_return_unknown_member_returns_to_menu(data_file):
    result = _run_menu(data_file, ["5", "ghost", "7", "0"])
    assert "Member not found." in result.stdout
    assert "Enter book id to return:" not in result.stdout
    assert "No books in library." in result.stdout
