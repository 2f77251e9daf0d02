import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


@dataclass
class Settings:
    # Record files
    books_file: str = os.getenv("LIBRARY_BOOKS_FILE", "books.txt")
    users_file: str = os.getenv("LIBRARY_USERS_FILE", "users.txt")
    loans_file: str = os.getenv("LIBRARY_LOANS_FILE", "loans.txt")
    # Abort the rest of the books file on a malformed availability flag
    strict_load: bool = _flag("LIBRARY_STRICT_LOAD", "True")

    # Session
    librarian_name: str = os.getenv("LIBRARY_LIBRARIAN_NAME", "Admin")

    # Application
    app_name: str = os.getenv("APP_NAME", "Library Lending Tracker")
    log_level: str = os.getenv("LOG_LEVEL", "ERROR").upper()


settings = Settings()
