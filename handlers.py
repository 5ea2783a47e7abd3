"""Menu actions: parse the raw console input, delegate to the Library, describe the outcome.

Every handler returns a message for the user. Domain errors are turned into
messages here, so a failed action leaves the catalog exactly as it was. The
``check_*`` helpers let the menu reject an id as soon as it is typed, before
asking for the rest of the input.
"""
from datetime import datetime
from typing import List, Optional

from config import settings
from exceptions import BookNotFoundError, LibraryError, MemberNotFoundError
from library import DUPLICATE_BOOK_MESSAGE, DUPLICATE_MEMBER_MESSAGE, Library
from models import Book
from utils.validators import CopiesValidator, IdValidator

SEARCH_MODES = {"1": "id", "2": "title", "3": "author"}

LEND_MEMBER_NOT_FOUND = "Member not found. Register first."
RETURN_BOOK_NOT_FOUND = "Book not found in library records."


# ------------------------- Early checks ------------------------- #
def check_new_book_id(lib: Library, book_id: str) -> Optional[str]:
    """Return the message to show if ``book_id`` cannot be used for a new book."""
    try:
        book_id = IdValidator.require_id(book_id)
    except LibraryError as e:
        return str(e)
    if lib.find_book(book_id) is not None:
        return DUPLICATE_BOOK_MESSAGE
    return None


def check_new_member_id(lib: Library, member_id: str) -> Optional[str]:
    try:
        member_id = IdValidator.require_id(member_id)
    except LibraryError as e:
        return str(e)
    if lib.find_member(member_id) is not None:
        return DUPLICATE_MEMBER_MESSAGE
    return None


def check_member(lib: Library, member_id: str, missing_message: str = MemberNotFoundError.default_message) -> Optional[str]:
    if lib.find_member(member_id) is None:
        return missing_message
    return None


# ------------------------- Actions ------------------------- #
def add_book(lib: Library, book_id: str, title: str, author: str, copies_raw: str) -> str:
    try:
        book_id = IdValidator.require_id(book_id)
        copies = CopiesValidator.parse_copies(copies_raw)
        book = lib.add_book(book_id, title.strip(), author.strip(), copies)
    except LibraryError as e:
        return str(e)
    return f"Book added: {book.title} by {book.author} (copies: {book.total_copies})"


def remove_book(lib: Library, book_id: str) -> str:
    try:
        book = lib.remove_book(IdValidator.normalize_id(book_id))
    except LibraryError as e:
        return str(e)
    return f"Book removed: {book.title}"


def register_member(lib: Library, member_id: str, name: str) -> str:
    try:
        member = lib.register_member(IdValidator.require_id(member_id), name.strip())
    except LibraryError as e:
        return str(e)
    return f"Member registered: {member.name} (id: {member.id})"


def lend_book(lib: Library, member_id: str, book_id: str, now: Optional[datetime] = None) -> str:
    try:
        loan = lib.lend(IdValidator.normalize_id(member_id), IdValidator.normalize_id(book_id), when=now)
    except MemberNotFoundError:
        return LEND_MEMBER_NOT_FOUND
    except LibraryError as e:
        return str(e)
    book = lib.books[loan.book_id]
    member = lib.members[loan.member_id]
    return f"Lent '{book.title}' to {member.name} at {loan.time.strftime(settings.timestamp_format)}"


def return_book(lib: Library, member_id: str, book_id: str) -> str:
    try:
        loan = lib.return_loan(IdValidator.normalize_id(member_id), IdValidator.normalize_id(book_id))
    except BookNotFoundError:
        return RETURN_BOOK_NOT_FOUND
    except LibraryError as e:
        return str(e)
    book = lib.books[loan.book_id]
    member = lib.members[loan.member_id]
    return f"Book returned: '{book.title}'. Thank you, {member.name}."


def search_books(lib: Library, mode: str, term: str) -> List[Book]:
    """Search by ``id`` (exact), ``title`` or ``author`` (case-insensitive substring)."""
    term = (term or "").strip()
    if mode == "id":
        book = lib.find_book(term)
        return [book] if book else []
    if mode == "title":
        return lib.search_by_title(term)
    if mode == "author":
        return lib.search_by_author(term)
    raise ValueError(f"Unknown search mode: {mode}")
