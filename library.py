import logging
from datetime import datetime
from typing import Dict, List, Optional

from exceptions import (
    AlreadyBorrowedError,
    BookNotFoundError,
    BookOnLoanError,
    DuplicateIdError,
    InvalidNumberError,
    MemberNotFoundError,
    NoActiveLoanError,
    NoCopiesAvailableError,
)
from models import Book, Loan, Member
from utils.validators import IdValidator

logger = logging.getLogger(__name__)

DUPLICATE_BOOK_MESSAGE = "A book with that ID already exists."
DUPLICATE_MEMBER_MESSAGE = "Member with this ID already exists."


class Library:
    """Holds the catalog in memory: books and members by id, plus the active loans."""

    def __init__(self) -> None:
        self.books: Dict[str, Book] = {}
        self.members: Dict[str, Member] = {}
        self.loans: List[Loan] = []

    # ------------------------- Books ------------------------- #
    def add_book(self, book_id: str, title: str, author: str, copies: int) -> Book:
        """Add a new book with all of its copies available.

        Raises:
            EmptyIdError: If the id is blank.
            DuplicateIdError: If a book with the same id exists.
            InvalidNumberError: If copies is negative.
        """
        book_id = IdValidator.require_id(book_id)
        if book_id in self.books:
            raise DuplicateIdError(DUPLICATE_BOOK_MESSAGE)
        if copies < 0:
            raise InvalidNumberError()

        book = Book(book_id, title, author, copies, copies)
        self.books[book_id] = book
        logger.info("Book added | id=%s title=%s copies=%d", book_id, book.title, copies)
        return book

    def remove_book(self, book_id: str) -> Book:
        """Remove a book that has no copies out.

        Raises:
            BookNotFoundError: If no such book exists.
            BookOnLoanError: If any member currently holds a copy.
        """
        book = self._get_book(book_id)
        lent_count = len(self.active_loans(book_id=book.id))
        if lent_count > 0:
            raise BookOnLoanError(book.id, lent_count)

        del self.books[book.id]
        logger.info("Book removed | id=%s", book.id)
        return book

    def put_book(self, book: Book) -> None:
        """Insert or replace a book by id without any checks."""
        self.books[book.id] = book

    def find_book(self, book_id: str) -> Optional[Book]:
        return self.books.get(IdValidator.normalize_id(book_id))

    def list_books(self) -> List[Book]:
        return list(self.books.values())

    def search_by_title(self, keyword: str) -> List[Book]:
        kw = keyword.lower()
        return [b for b in self.books.values() if kw in b.title.lower()]

    def search_by_author(self, keyword: str) -> List[Book]:
        kw = keyword.lower()
        return [b for b in self.books.values() if kw in b.author.lower()]

    # ------------------------- Members ------------------------- #
    def register_member(self, member_id: str, name: str) -> Member:
        """Register a new member.

        Raises:
            EmptyIdError: If the id is blank.
            DuplicateIdError: If a member with the same id exists.
        """
        member_id = IdValidator.require_id(member_id)
        if member_id in self.members:
            raise DuplicateIdError(DUPLICATE_MEMBER_MESSAGE)

        member = Member(member_id, name)
        self.members[member_id] = member
        logger.info("Member registered | id=%s", member_id)
        return member

    def put_member(self, member: Member) -> None:
        """Insert or replace a member by id without any checks."""
        self.members[member.id] = member

    def find_member(self, member_id: str) -> Optional[Member]:
        return self.members.get(IdValidator.normalize_id(member_id))

    def list_members(self) -> List[Member]:
        return list(self.members.values())

    # ------------------------- Loans ------------------------- #
    def lend(self, member_id: str, book_id: str, when: Optional[datetime] = None) -> Loan:
        """Lend one copy of a book to a member.

        A member may hold several different books but never two copies of the same one.

        Raises:
            MemberNotFoundError
            BookNotFoundError
            NoCopiesAvailableError
            AlreadyBorrowedError
        """
        member = self._get_member(member_id)
        book = self._get_book(book_id)

        if book.available_copies <= 0:
            raise NoCopiesAvailableError()
        if self._find_loan(member.id, book.id) is not None:
            raise AlreadyBorrowedError()

        loan = Loan(member.id, book.id, when or datetime.now())
        book.available_copies -= 1
        self.loans.append(loan)
        logger.info("Book lent | member=%s book=%s avail=%d", member.id, book.id, book.available_copies)
        return loan

    def return_loan(self, member_id: str, book_id: str) -> Loan:
        """Close the member's loan on a book and put the copy back.

        Raises:
            MemberNotFoundError
            BookNotFoundError
            NoActiveLoanError
        """
        member = self._get_member(member_id)
        book = self._get_book(book_id)

        loan = self._find_loan(member.id, book.id)
        if loan is None:
            raise NoActiveLoanError()

        self.loans.remove(loan)
        # No clamp: lend/return symmetry keeps this within total_copies
        book.available_copies += 1
        logger.info("Book returned | member=%s book=%s avail=%d", member.id, book.id, book.available_copies)
        return loan

    def active_loans(self, member_id: Optional[str] = None, book_id: Optional[str] = None) -> List[Loan]:
        return [
            loan for loan in self.loans
            if (member_id is None or loan.member_id == member_id)
            and (book_id is None or loan.book_id == book_id)
        ]

    # ------------------------- Internal helpers ------------------------- #
    def _get_book(self, book_id: str) -> Book:
        book = self.find_book(book_id)
        if book is None:
            raise BookNotFoundError()
        return book

    def _get_member(self, member_id: str) -> Member:
        member = self.find_member(member_id)
        if member is None:
            raise MemberNotFoundError()
        return member

    def _find_loan(self, member_id: str, book_id: str) -> Optional[Loan]:
        for loan in self.loans:
            if loan.matches(member_id, book_id):
                return loan
        return None
