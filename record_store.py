import logging
import os
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from book import Book

logger = logging.getLogger(__name__)

DELIMITER = "|"

PathLike = Union[str, os.PathLike]


class RecordStoreError(Exception):
    """A record file could not be written."""


class MalformedRecordError(ValueError):
    """A stored line cannot be turned back into a record."""


def encode_book(book: Book) -> str:
    # Flags are written as True / False
    return DELIMITER.join((book.title, book.author, str(bool(book.available))))


def decode_book(line: str) -> Optional[Book]:
    """Parse one books-file line.

    Returns None for lines with fewer than three fields, raises
    MalformedRecordError when the availability flag is not a boolean.
    """
    parts = line.split(DELIMITER)
    if len(parts) < 3:
        return None
    return Book(parts[0], parts[1], available=parse_flag(parts[2]))


def parse_flag(raw: str) -> bool:
    token = raw.strip().lower()
    if token == "true":
        return True
    if token == "false":
        return False
    raise MalformedRecordError(f"'{raw}' is not a valid availability flag")


class RecordStore:
    """Reads and writes the books, users and loans files.

    Every save overwrites the whole file. A missing file loads as an empty
    collection. Problems met while loading are logged and collected in
    ``problems`` so the caller can show them to the operator.
    """

    def __init__(self, books_file: PathLike, users_file: PathLike,
                 loans_file: Optional[PathLike] = None, strict: bool = True) -> None:
        self.books_file = Path(books_file)
        self.users_file = Path(users_file)
        self.loans_file = Path(loans_file) if loans_file else None
        self.strict = strict
        self.problems: List[str] = []

    # ------------------------- Loading ------------------------- #
    def load_books(self) -> List[Book]:
        books: List[Book] = []
        for lineno, line in self._read_lines(self.books_file):
            try:
                book = decode_book(line)
            except MalformedRecordError as e:
                if self.strict:
                    self._report(f"{self.books_file}:{lineno}: {e}; remaining books not loaded")
                    break
                self._report(f"{self.books_file}:{lineno}: {e}; record skipped")
                continue
            if book is None:
                logger.debug(f"Skipping short line {lineno} in {self.books_file}")
                continue
            books.append(book)
        return books

    def load_users(self) -> List[str]:
        return [line.strip() for _, line in self._read_lines(self.users_file) if line.strip()]

    def load_loans(self) -> List[Tuple[str, str]]:
        if self.loans_file is None:
            return []
        loans: List[Tuple[str, str]] = []
        for lineno, line in self._read_lines(self.loans_file):
            parts = line.split(DELIMITER)
            if len(parts) < 2 or not parts[0].strip():
                logger.debug(f"Skipping short line {lineno} in {self.loans_file}")
                continue
            loans.append((parts[0].strip(), parts[1].strip()))
        return loans

    # ------------------------- Saving ------------------------- #
    def save_books(self, books: Iterable[Book]) -> None:
        self._write_lines(self.books_file, (encode_book(b) for b in books))

    def save_users(self, names: Iterable[str]) -> None:
        self._write_lines(self.users_file, names)

    def save_loans(self, loans: Iterable[Tuple[str, str]]) -> None:
        if self.loans_file is None:
            return
        self._write_lines(self.loans_file, (f"{name}{DELIMITER}{title}" for name, title in loans))

    # ------------------------- File helpers ------------------------- #
    def _read_lines(self, path: Path) -> List[Tuple[int, str]]:
        if not path.exists():
            return []
        try:
            with open(path, "r", encoding="utf-8") as f:
                content = f.read()
        except (OSError, UnicodeDecodeError) as e:
            self._report(f"Error loading {path}: {e}")
            return []
        return list(enumerate(content.splitlines(), 1))

    def _write_lines(self, path: Path, lines: Iterable[str]) -> None:
        text = "".join(f"{line}\n" for line in lines)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                f.write(text)
        except OSError as e:
            raise RecordStoreError(f"Error saving {path.name}: {e}") from e

    def _report(self, message: str) -> None:
        logger.warning(message)
        self.problems.append(message)
