from __future__ import annotations


class LibraryError(Exception):
    """Base exception for catalog errors."""

    default_message = "Library error."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class EmptyIdError(LibraryError, ValueError):
    """An id was blank after trimming."""

    default_message = "ID cannot be empty."


class DuplicateIdError(LibraryError):
    """A book or member with the same id is already in the catalog."""

    default_message = "An entry with that ID already exists."


class NotFoundError(LibraryError, LookupError):
    default_message = "Not found."


class BookNotFoundError(NotFoundError):
    default_message = "Book not found."


class MemberNotFoundError(NotFoundError):
    default_message = "Member not found."


class BookOnLoanError(LibraryError):
    """The book still has active loans and cannot be removed."""

    def __init__(self, book_id: str, count: int) -> None:
        self.book_id = book_id
        self.count = count
        super().__init__(f"Cannot remove book - {count} copy(ies) are currently lent out.")


class NoCopiesAvailableError(LibraryError):
    default_message = "No available copies to lend."


class AlreadyBorrowedError(LibraryError):
    """The member already holds a copy of this book."""

    default_message = "This member already borrowed this book."


class NoActiveLoanError(LibraryError):
    default_message = "No record of this book being borrowed by this member."


class InvalidNumberError(LibraryError, ValueError):
    """A copy count was not a non-negative integer."""

    default_message = "Invalid number."
