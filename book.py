from __future__ import annotations


class Book:
    """Represents a single book in the catalog."""

    def __init__(self, title: str, author: str, available: bool = True) -> None:
        self.title = title.strip()
        self.author = author.strip()
        self.available = available

    @property
    def key(self) -> str:
        """Identity key: titles are unique regardless of casing."""
        return title_key(self.title)

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        status = "Available" if self.available else "Borrowed"
        return f"{self.title} by {self.author} ({status})"

    def __repr__(self) -> str:
        return f"Book(title={self.title!r}, author={self.author!r}, available={self.available!r})"

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "author": self.author,
            "available": self.available,
        }


def title_key(title: str) -> str:
    return (title or "").strip().lower()
