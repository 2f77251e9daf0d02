import logging
import os
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.prompt import Prompt
from rich import box

import roles
from catalog import Catalog
from config import settings
from results import Reason, Result
from user import User
from utils.ui_helpers import (
    OUTPUT_MODE_ENV,
    set_output_mode,
    get_output_mode,
    print_result,
    print_book_detail,
    print_book_list,
    print_user_list,
    print_problems,
    print_stats_result,
)

APP_NAME = settings.app_name

console = Console()

def _configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.ERROR),
        format="%(levelname)s %(name)s: %(message)s",
    )

def _catalog(ctx: typer.Context) -> Catalog:
    return ctx.obj

def _reader(catalog: Catalog, name: str) -> Optional[User]:
    """Sign a reader in, creating the account on first use."""
    login = roles.login_reader(catalog, name)
    # In json mode only the command's own result is printed
    if not login.ok or get_output_mode() != "json":
        print_result(login)
    if not login.ok:
        return None
    return login.data

# --- Typer CLI application ---
app = typer.Typer(help="Library lending tracker CLI")

@app.callback(invoke_without_command=True)
def _global_options(
    ctx: typer.Context,
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    ),
    books_file: Optional[str] = typer.Option(None, "--books-file", help="Books record file"),
    users_file: Optional[str] = typer.Option(None, "--users-file", help="Users record file"),
    loans_file: Optional[str] = typer.Option(None, "--loans-file", help="Loans record file"),
    lenient_load: bool = typer.Option(
        False, "--lenient-load", help="Skip malformed book records instead of stopping at the first one"
    ),
):
    """Global options; opens the catalog every command works on."""
    _configure_logging()
    if output:
        set_output_mode(output)
    catalog = Catalog.open(books_file, users_file, loans_file, strict=False if lenient_load else None)
    ctx.obj = catalog
    print_problems(catalog.load_problems)
    if ctx.invoked_subcommand is None:
        run_menu(catalog)

@app.command("list")
def cli_list(ctx: typer.Context, available: bool = typer.Option(False, "--available", "-a", help="Only books on the shelf")):
    """List all books in the catalog."""
    catalog = _catalog(ctx)
    if available:
        print_book_list(catalog.list_books(available_only=True), heading="Available books:")
    else:
        print_book_list(catalog.list_books(), heading="All books in library:")

@app.command("users")
def cli_users(ctx: typer.Context):
    """List registered readers."""
    print_user_list(_catalog(ctx).list_users())

@app.command("add")
def cli_add(ctx: typer.Context, title: str, author: str):
    """Add a book as the librarian."""
    print_result(roles.add_book(_catalog(ctx), roles.librarian(), title, author))

@app.command("remove")
def cli_remove(ctx: typer.Context, title: str):
    """Remove a book that is on the shelf."""
    print_result(roles.remove_book(_catalog(ctx), roles.librarian(), title))

@app.command("find")
def cli_find(ctx: typer.Context, title: str):
    """Find a book by title and show its details."""
    catalog = _catalog(ctx)
    book = catalog.find_book(title)
    if not book:
        print_result(Result.failure(Reason.NOT_FOUND, f"Book '{title}' not found."))
        return
    print_book_detail(book, catalog.holder_of(book.title))

@app.command("register")
def cli_register(ctx: typer.Context, name: str):
    """Register a new reader."""
    print_result(roles.register_user(_catalog(ctx), roles.librarian(), name))

@app.command("borrow")
def cli_borrow(ctx: typer.Context, name: str, title: str):
    """Borrow a book for a reader."""
    catalog = _catalog(ctx)
    reader = _reader(catalog, name)
    if reader:
        print_result(roles.borrow(catalog, reader, title))

@app.command("return")
def cli_return(ctx: typer.Context, name: str, title: str):
    """Return a book a reader holds."""
    catalog = _catalog(ctx)
    reader = _reader(catalog, name)
    if reader:
        print_result(roles.return_book(catalog, reader, title))

@app.command("my-books")
def cli_my_books(ctx: typer.Context, name: str):
    """Show the books a reader currently holds."""
    catalog = _catalog(ctx)
    reader = _reader(catalog, name)
    if reader:
        result = roles.show_my_books(catalog, reader)
        print_book_list(result.data, heading=result.message, empty_message=result.message)

@app.command("stats")
def cli_stats(ctx: typer.Context):
    """Show catalog statistics."""
    print_stats_result(_catalog(ctx).statistics())

@app.command("menu")
def cli_menu(ctx: typer.Context):
    """Start the interactive menu."""
    run_menu(_catalog(ctx))

# --- Interactive menus ---
def _render_menu(title: str, items) -> None:
    table = Table.grid(padding=(0, 2))
    table.add_column(justify="right", style="bold cyan", width=4)
    table.add_column(justify="left", style="white")
    for key, label, icon in items:
        table.add_row(f"[reverse]{key}[/]", f"{icon} {label}")
    console.print(Panel(table, title=title, border_style="cyan", box=box.HEAVY, padding=(1, 2)))

def _pause() -> None:
    Prompt.ask("\n[dim]Press Enter to continue[/]", default="", show_default=False)

def librarian_menu(catalog: Catalog) -> None:
    librarian = roles.librarian()
    items = [
        ("1", "Add book", "➕"),
        ("2", "Remove book", "🗑️"),
        ("3", "Register new user", "👤"),
        ("4", "View all books", "📚"),
        ("5", "View all users", "👥"),
        ("6", "Back to main menu", "↩️"),
    ]
    while True:
        console.clear()
        _render_menu(f"Librarian Menu - {librarian.name}", items)
        choice = Prompt.ask("Select option", choices=[k for k, _, _ in items], default="4")

        if choice == "1":
            title = Prompt.ask("Enter book title")
            author = Prompt.ask("Enter book author")
            print_result(roles.add_book(catalog, librarian, title, author))
        elif choice == "2":
            title = Prompt.ask("Enter book title to remove")
            print_result(roles.remove_book(catalog, librarian, title))
        elif choice == "3":
            name = Prompt.ask("Enter new username")
            print_result(roles.register_user(catalog, librarian, name))
        elif choice == "4":
            result = roles.list_books(catalog, librarian)
            print_book_list(result.data, heading=result.message, empty_message=result.message)
        elif choice == "5":
            print_user_list(roles.list_users(catalog, librarian).data)
        elif choice == "6":
            return
        _pause()

def reader_menu(catalog: Catalog) -> None:
    name = Prompt.ask("Enter your name")
    reader = _reader(catalog, name)
    if reader is None:
        _pause()
        return
    items = [
        ("1", "Borrow book", "📥"),
        ("2", "Return book", "📤"),
        ("3", "View my books", "📖"),
        ("4", "View all available books", "📚"),
        ("5", "Back to main menu", "↩️"),
    ]
    while True:
        console.clear()
        _render_menu(f"Reader Menu - {reader.name}", items)
        choice = Prompt.ask("Select option", choices=[k for k, _, _ in items], default="3")

        if choice == "1":
            title = Prompt.ask("Enter book title to borrow")
            print_result(roles.borrow(catalog, reader, title))
        elif choice == "2":
            title = Prompt.ask("Enter book title to return")
            print_result(roles.return_book(catalog, reader, title))
        elif choice == "3":
            result = roles.show_my_books(catalog, reader)
            print_book_list(result.data, heading=result.message, empty_message=result.message)
        elif choice == "4":
            result = roles.list_available_books(catalog, reader)
            print_book_list(result.data, heading=result.message, empty_message=result.message)
        elif choice == "5":
            return
        _pause()

def run_menu(catalog: Catalog) -> None:
    """Main menu: librarian login, reader login, exit."""
    if OUTPUT_MODE_ENV not in os.environ:
        set_output_mode("rich")
    items = [
        ("1", "Librarian login", "🧑‍🏫"),
        ("2", "Reader login", "📖"),
        ("3", "Exit", "🚪"),
    ]
    while True:
        console.clear()
        _render_menu(APP_NAME, items)
        choice = Prompt.ask("Select option", choices=[k for k, _, _ in items], default="2")

        if choice == "1":
            librarian_menu(catalog)
        elif choice == "2":
            reader_menu(catalog)
        elif choice == "3":
            console.print("[green]Goodbye![/]")
            break

def run() -> None:
    app()

if __name__ == "__main__":
    run()
