from typing import Optional

from exceptions import EmptyIdError, InvalidNumberError

FIELD_SEPARATOR = "|"


class IdValidator:
    """Validation for book and member ids typed at the console."""

    @staticmethod
    def normalize_id(raw: Optional[str]) -> str:
        if raw is None:
            return ""
        return raw.strip()

    @staticmethod
    def require_id(raw: Optional[str]) -> str:
        """Return the trimmed id or raise EmptyIdError."""
        cleaned = IdValidator.normalize_id(raw)
        if not cleaned:
            raise EmptyIdError()
        return cleaned


class CopiesValidator:

    @staticmethod
    def to_int_or_none(raw: Optional[str]) -> Optional[int]:
        if raw is None:
            return None
        try:
            return int(raw.strip())
        except ValueError:
            return None

    @staticmethod
    def parse_copies(raw: Optional[str]) -> int:
        """Parse a copy count; anything but a non-negative integer is rejected."""
        copies = CopiesValidator.to_int_or_none(raw)
        if copies is None or copies < 0:
            raise InvalidNumberError()
        return copies


class TextValidator:
    """Sanitisation for free-text fields written to the data file."""

    @staticmethod
    def sanitize_field(text: Optional[str]) -> str:
        if text is None:
            return ""
        # The separator cannot be escaped in the file format
        return text.replace(FIELD_SEPARATOR, " ")
