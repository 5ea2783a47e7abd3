"""Flat-file persistence for the catalog.

One record per line, fields separated by ``|``::

    BOOK|<id>|<title>|<author>|<totalCopies>|<availableCopies>
    MEMBER|<id>|<name>

Loans are never written. Loading is lenient: unknown record types and short
records are skipped and counted rather than treated as errors.
"""
import logging
import os
from dataclasses import dataclass
from typing import List, Optional, Union

from config import settings
from library import Library
from models import Book, Member
from utils.validators import FIELD_SEPARATOR, CopiesValidator, TextValidator

logger = logging.getLogger(__name__)

BOOK_RECORD = "BOOK"
MEMBER_RECORD = "MEMBER"
BOOK_FIELDS = 6
MEMBER_FIELDS = 3


@dataclass
class LoadReport:
    """What a load found in the data file."""
    found: bool = False
    books: int = 0
    members: int = 0
    skipped: int = 0
    # Copies that were out when the file was saved; their loans are gone
    unreturned_copies: int = 0


def encode_book(book: Book) -> str:
    return FIELD_SEPARATOR.join([
        BOOK_RECORD,
        book.id,
        TextValidator.sanitize_field(book.title),
        TextValidator.sanitize_field(book.author),
        str(book.total_copies),
        str(book.available_copies),
    ])


def encode_member(member: Member) -> str:
    return FIELD_SEPARATOR.join([MEMBER_RECORD, member.id, TextValidator.sanitize_field(member.name)])


def serialize_library(lib: Library) -> List[str]:
    """Encode every book, then every member, in insertion order."""
    lines = [encode_book(b) for b in lib.list_books()]
    lines.extend(encode_member(m) for m in lib.list_members())
    return lines


def decode_line(line: str) -> Optional[Union[Book, Member]]:
    """Decode one record, or return None if the line is not a usable record."""
    parts = line.split(FIELD_SEPARATOR)
    kind = parts[0]

    if kind == BOOK_RECORD and len(parts) >= BOOK_FIELDS:
        total = CopiesValidator.to_int_or_none(parts[4])
        if total is None:
            total = 0
        available = CopiesValidator.to_int_or_none(parts[5])
        if available is None:
            available = total
        book = Book(parts[1], parts[2], parts[3], total, available)
        return book if book.id.strip() else None

    if kind == MEMBER_RECORD and len(parts) >= MEMBER_FIELDS:
        member = Member(parts[1], parts[2])
        return member if member.id.strip() else None

    return None


def save_library(lib: Library, path: Optional[str] = None) -> int:
    """Overwrite the data file with the current books and members.

    Returns the number of records written. OSError propagates to the caller.
    """
    path = path or settings.data_file
    lines = serialize_library(lib)
    with open(path, "w", encoding="utf-8", newline="\n") as f:
        for line in lines:
            f.write(line + "\n")
    logger.info("Saved %d records to %s", len(lines), path)
    return len(lines)


def load_library(lib: Library, path: Optional[str] = None) -> LoadReport:
    """Read the data file into ``lib``, replacing entries with the same id.

    A missing file is not an error: the store is left untouched.
    """
    path = path or settings.data_file
    report = LoadReport()
    if not os.path.exists(path):
        logger.info("No data file at %s; starting empty", path)
        return report

    report.found = True
    loaded_ids = set()
    with open(path, "r", encoding="utf-8") as f:
        for lineno, raw in enumerate(f, 1):
            line = raw.rstrip("\r\n")
            if not line.strip():
                continue
            record = decode_line(line)
            if record is None:
                report.skipped += 1
                logger.warning("Skipping malformed line %d in %s: %r", lineno, path, line)
            elif isinstance(record, Book):
                lib.put_book(record)
                loaded_ids.add(record.id)
                report.books += 1
            else:
                lib.put_member(record)
                report.members += 1

    report.unreturned_copies = sum(max(lib.books[i].copies_out, 0) for i in loaded_ids)
    if report.unreturned_copies:
        logger.warning(
            "%d copy(ies) were lent out when %s was saved; those loans were not persisted",
            report.unreturned_copies, path,
        )
    logger.info(
        "Loaded %d books and %d members from %s (%d skipped)",
        report.books, report.members, path, report.skipped,
    )
    return report
