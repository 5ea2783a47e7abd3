from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


class Book:
    """A catalog title with a fixed number of physical copies."""

    def __init__(self, id: str, title: str, author: str, total_copies: int = 0,
                 available_copies: int | None = None) -> None:
        self.id = id
        self.title = title
        self.author = author
        self.total_copies = total_copies
        # A freshly added book has every copy on the shelf
        self.available_copies = total_copies if available_copies is None else available_copies

    def __str__(self) -> str:
        return f"{self.id} | {self.title} | {self.author} | total: {self.total_copies} | avail: {self.available_copies}"

    def __repr__(self) -> str:
        return f"Book(id={self.id!r}, title={self.title!r}, avail={self.available_copies}/{self.total_copies})"

    @property
    def copies_out(self) -> int:
        return self.total_copies - self.available_copies

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "total_copies": self.total_copies,
            "available_copies": self.available_copies,
        }


class Member:
    """A registered borrower."""

    def __init__(self, id: str, name: str) -> None:
        self.id = id
        self.name = name

    def __str__(self) -> str:
        return f"{self.id}: {self.name}"

    def __repr__(self) -> str:
        return f"Member(id={self.id!r}, name={self.name!r})"

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name}


@dataclass
class Loan:
    """
    An active borrow of one copy of a book by one member.

    The loan only exists while the copy is out; returning the book deletes it.

    Attributes:
        member_id (str): Id of the borrowing member.
        book_id (str): Id of the borrowed book.
        time (datetime): When the copy was lent.
    """
    member_id: str
    book_id: str
    time: datetime = field(default_factory=datetime.now)

    def matches(self, member_id: str, book_id: str) -> bool:
        return self.member_id == member_id and self.book_id == book_id
