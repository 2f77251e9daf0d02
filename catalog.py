import logging
from typing import Any, Dict, List, Optional

from book import Book, title_key
from config import settings
from record_store import RecordStore, RecordStoreError
from results import Reason, Result
from user import Role, User, name_key
from utils.validators import TextValidator

logger = logging.getLogger(__name__)


class Catalog:
    """Authoritative registry of the books and users of one session.

    Books and users live in insertion-ordered arenas keyed by their
    lower-cased title/name. Readers refer to books by those keys. Every
    mutation is written back through the record store; a failed write is
    logged and returned as the result's warning while the in-memory change
    stands.
    """

    def __init__(self, store: RecordStore) -> None:
        self.store = store
        self._books: Dict[str, Book] = {}
        self._users: Dict[str, User] = {}
        self.load_problems: List[str] = []
        self._load()

    @classmethod
    def open(cls, books_file: Optional[str] = None, users_file: Optional[str] = None,
             loans_file: Optional[str] = None, strict: Optional[bool] = None) -> "Catalog":
        """Build a catalog over the configured record files."""
        store = RecordStore(
            books_file or settings.books_file,
            users_file or settings.users_file,
            loans_file or settings.loans_file,
            strict=settings.strict_load if strict is None else strict,
        )
        return cls(store)

    # ------------------------- Books ------------------------- #
    def add_book(self, title: str, author: str) -> Result:
        problem = TextValidator.problem("Title", title) or TextValidator.problem("Author", author)
        if problem:
            return Result.failure(Reason.INVALID, problem)
        if self.find_book(title):
            return Result.failure(Reason.ALREADY_EXISTS, "Book already exists.")

        book = Book(title, author)
        self._books[book.key] = book
        logger.info(f"Added book {book.title!r}")
        return Result.success("Book added successfully.", data=book, warning=self._save_books())

    def remove_book(self, title: str) -> Result:
        book = self.find_book(title)
        if not book:
            return Result.failure(Reason.NOT_FOUND, "Book not found.")
        if not book.available:
            return Result.failure(Reason.BOOK_BORROWED, "Cannot remove a borrowed book.")

        del self._books[book.key]
        logger.info(f"Removed book {book.title!r}")
        return Result.success("Book removed successfully.", data=book, warning=self._save_books())

    def find_book(self, title: str) -> Optional[Book]:
        return self._books.get(title_key(title))

    def list_books(self, available_only: bool = False) -> List[Book]:
        if available_only:
            return [b for b in self._books.values() if b.available]
        return list(self._books.values())

    # ------------------------- Users ------------------------- #
    def register_user(self, name: str) -> Result:
        problem = TextValidator.problem("Name", name)
        if problem:
            return Result.failure(Reason.INVALID, problem)
        if self.find_user(name):
            return Result.failure(Reason.ALREADY_EXISTS, "User already exists.")

        user = User(name, Role.READER)
        self._users[user.key] = user
        logger.info(f"Registered reader {user.name!r}")
        return Result.success("User registered successfully.", data=user, warning=self._save_users())

    def find_user(self, name: str) -> Optional[User]:
        return self._users.get(name_key(name))

    def list_users(self) -> List[User]:
        return list(self._users.values())

    # ------------------------- Circulation ------------------------- #
    def books_held_by(self, user: User) -> List[Book]:
        return [self._books[key] for key in user.borrowed if key in self._books]

    def holder_of(self, title: str) -> Optional[User]:
        key = title_key(title)
        for user in self._users.values():
            if user.holds(key):
                return user
        return None

    def save_circulation(self) -> Optional[str]:
        """Persist availability flags and outstanding loans after a borrow or return."""
        return self._save_books()

    def statistics(self) -> Dict[str, Any]:
        books = self.list_books()
        available = sum(1 for b in books if b.available)
        return {
            "total_books": len(books),
            "available_books": available,
            "borrowed_books": len(books) - available,
            "unique_authors": len({b.author.lower() for b in books}),
            "registered_users": len(self._users),
        }

    # ------------------------- Persistence ------------------------- #
    def _load(self) -> None:
        self.store.problems = []
        for book in self.store.load_books():
            if not book.key:
                self._problem("Skipped a book with an empty title")
            elif book.key in self._books:
                self._problem(f"Duplicate book {book.title!r} ignored")
            else:
                self._books[book.key] = book

        for name in self.store.load_users():
            if name_key(name) in self._users:
                self._problem(f"Duplicate user {name!r} ignored")
            else:
                user = User(name, Role.READER)
                self._users[user.key] = user

        for name, title in self.store.load_loans():
            self._attach_loan(name, title)

        # A borrowed flag with no reader behind it could never be cleared
        for book in self._books.values():
            if not book.available and self.holder_of(book.title) is None:
                book.available = True
                self._problem(f"Book {book.title!r} was marked borrowed but no reader holds it; returned to the shelf")

        self.load_problems = list(self.store.problems) + self.load_problems
        logger.info(f"Loaded {len(self._books)} books and {len(self._users)} users")

    def _attach_loan(self, name: str, title: str) -> None:
        user = self.find_user(name)
        book = self.find_book(title)
        if user is None or book is None:
            self._problem(f"Loan of {title!r} to {name!r} refers to an unknown user or book")
            return
        if book.available:
            self._problem(f"Loan of {title!r} to {name!r} ignored: the book is on the shelf")
            return
        holder = self.holder_of(title)
        if holder is not None and holder is not user:
            self._problem(f"Loan of {title!r} to {name!r} ignored: already held by {holder.name!r}")
            return
        user.hold(book.key)

    def _problem(self, message: str) -> None:
        logger.warning(message)
        self.load_problems.append(message)

    def _loans(self):
        for user in self._users.values():
            for book in self.books_held_by(user):
                yield user.name, book.title

    def _save_books(self) -> Optional[str]:
        try:
            self.store.save_books(self._books.values())
            self.store.save_loans(self._loans())
        except RecordStoreError as e:
            logger.error(f"Books were not saved: {e}")
            return str(e)
        return None

    def _save_users(self) -> Optional[str]:
        try:
            self.store.save_users(u.name for u in self._users.values())
        except RecordStoreError as e:
            logger.error(f"Users were not saved: {e}")
            return str(e)
        return None
