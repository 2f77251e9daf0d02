"""Librarian and reader actions over a Catalog.

Actors are plain ``User`` values tagged with a ``Role``. Each action checks
the tag first and answers ``Reason.WRONG_ROLE`` when the actor cannot
perform it. Borrow and return are the only transitions of a book between
Available and Borrowed.
"""
from typing import Optional

from book import title_key
from catalog import Catalog
from config import settings
from results import Reason, Result
from user import Role, User


def librarian(name: Optional[str] = None) -> User:
    """The session librarian. Librarians are not part of the persisted roster."""
    return User(name or settings.librarian_name, Role.LIBRARIAN)


def login_reader(catalog: Catalog, name: str) -> Result:
    """Find a reader by name, registering a new one when absent."""
    user = catalog.find_user(name)
    if user is not None:
        if not user.is_reader:
            return _wrong_role(user, "sign in as a reader")
        return Result.success(f"Welcome back, {user.name}.", data=user)

    registered = catalog.register_user(name)
    if not registered:
        return registered
    return Result.success("User not found. Created a new account.", data=registered.data,
                          warning=registered.warning)


# ------------------------- Librarian ------------------------- #
def add_book(catalog: Catalog, actor: User, title: str, author: str) -> Result:
    if not actor.is_librarian:
        return _wrong_role(actor, "add books")
    return catalog.add_book(title, author)


def remove_book(catalog: Catalog, actor: User, title: str) -> Result:
    if not actor.is_librarian:
        return _wrong_role(actor, "remove books")
    return catalog.remove_book(title)


def register_user(catalog: Catalog, actor: User, name: str) -> Result:
    if not actor.is_librarian:
        return _wrong_role(actor, "register users")
    return catalog.register_user(name)


def list_books(catalog: Catalog, actor: User) -> Result:
    if not actor.is_librarian:
        return _wrong_role(actor, "view the full catalog")
    books = catalog.list_books()
    if not books:
        return Result.success("No books available.", data=books)
    return Result.success("All books in library:", data=books)


def list_users(catalog: Catalog, actor: User) -> Result:
    if not actor.is_librarian:
        return _wrong_role(actor, "view users")
    users = catalog.list_users()
    if not users:
        return Result.success("No users registered.", data=users)
    return Result.success("Registered users:", data=users)


# ------------------------- Reader ------------------------- #
def borrow(catalog: Catalog, reader: User, title: str) -> Result:
    if not reader.is_reader:
        return _wrong_role(reader, "borrow books")

    book = catalog.find_book(title)
    if book is None:
        return Result.failure(Reason.NOT_FOUND, "Book not found.")
    if not book.available:
        return Result.failure(Reason.ALREADY_BORROWED, "Book is already borrowed.")

    book.available = False
    reader.hold(book.key)
    return Result.success(f"Book '{book.title}' borrowed successfully.", data=book,
                          warning=catalog.save_circulation())


def return_book(catalog: Catalog, reader: User, title: str) -> Result:
    if not reader.is_reader:
        return _wrong_role(reader, "return books")

    # Only this reader's own books count, not the whole catalog
    book = next((b for b in catalog.books_held_by(reader) if b.key == title_key(title)), None)
    if book is None:
        return Result.failure(Reason.NOT_HELD, "You don't have this book.")

    book.available = True
    reader.release(book.key)
    return Result.success(f"Book '{book.title}' returned successfully.", data=book,
                          warning=catalog.save_circulation())


def show_my_books(catalog: Catalog, reader: User) -> Result:
    if not reader.is_reader:
        return _wrong_role(reader, "hold books")
    books = catalog.books_held_by(reader)
    if not books:
        return Result.success("You don't have any books.", data=books)
    return Result.success(f"Your books ({reader.name}):", data=books)


def list_available_books(catalog: Catalog, actor: User) -> Result:
    books = catalog.list_books(available_only=True)
    if not books:
        return Result.success("No books available.", data=books)
    return Result.success("Available books:", data=books)


def _wrong_role(actor: User, action: str) -> Result:
    return Result.failure(Reason.WRONG_ROLE, f"{actor.name} is a {actor.role.value} and cannot {action}.")
