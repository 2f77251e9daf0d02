from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List


class Role(Enum):
    """The two fixed roles a user can act under."""
    LIBRARIAN = "librarian"
    READER = "reader"


@dataclass
class User:
    """A librarian or a reader.

    Readers keep the keys of the books they currently hold in ``borrowed``,
    in borrow order. The keys point into the catalog's book arena, so
    availability is always read from the catalog's own Book objects.
    Librarians never use ``borrowed``.
    """
    name: str
    role: Role = Role.READER
    borrowed: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.name = self.name.strip()

    @property
    def key(self) -> str:
        return name_key(self.name)

    @property
    def is_reader(self) -> bool:
        return self.role is Role.READER

    @property
    def is_librarian(self) -> bool:
        return self.role is Role.LIBRARIAN

    def hold(self, book_key: str) -> None:
        if book_key not in self.borrowed:
            self.borrowed.append(book_key)

    def release(self, book_key: str) -> None:
        if book_key in self.borrowed:
            self.borrowed.remove(book_key)

    def holds(self, book_key: str) -> bool:
        return book_key in self.borrowed

    def to_dict(self) -> dict:
        return {"name": self.name, "role": self.role.value, "borrowed": list(self.borrowed)}


def name_key(name: str) -> str:
    return (name or "").strip().lower()
