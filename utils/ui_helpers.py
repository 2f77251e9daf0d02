import os
import sys
import json
from typing import List, Any, Dict, Iterable
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.markup import escape

# Environment variable to control CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "LIB_CLI_OUTPUT"

_console = Console()

def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in {"plain", "json", "rich"}:
        os.environ[OUTPUT_MODE_ENV] = mode

def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, "plain").lower()

def _status(book: Any) -> str:
    return "Available" if getattr(book, "available", False) else "Borrowed"

def print_result(result: Any) -> None:
    """Print the message of an operation result, plus any persistence warning."""
    mode = get_output_mode()
    if mode == "json":
        payload = {
            "ok": result.ok,
            "message": result.message,
            "reason": result.reason.value if result.reason else None,
            "warning": result.warning,
        }
        print(json.dumps(payload, ensure_ascii=False))
        return

    if mode == "rich":
        style = "green" if result.ok else "yellow"
        _console.print(f"[{style}]{escape(result.message)}[/]")
        if result.warning:
            _console.print(f"[bold red]Warning:[/] {escape(result.warning)}")
    else:
        print(result.message)
        if result.warning:
            print(f"Warning: {result.warning}")

def print_book_list(books: List[Any], heading: str = "", empty_message: str = "No books available.") -> None:
    """Print books according to the current output mode.
    - plain: 'Title by Author (Available)' lines under an optional heading
    - json: JSON array of title, author, available
    - rich: Rich table
    """
    mode = get_output_mode()

    if mode == "json":
        print(json.dumps([b.to_dict() for b in books], ensure_ascii=False))
        return

    if not books:
        print(empty_message)
        return

    if mode == "rich":
        table = Table(title=f"📚 {heading or 'Books'}", show_lines=True, header_style="bold cyan")
        table.add_column("Title", style="white")
        table.add_column("Author", style="white")
        table.add_column("Status", style="magenta", no_wrap=True)
        for b in books:
            table.add_row(escape(b.title), escape(b.author), _status(b))
        _console.print(table)
    else:
        if heading:
            print(heading)
        for b in books:
            print(f"{b.title} by {b.author} ({_status(b)})")

def print_user_list(users: Iterable[Any], heading: str = "Registered users:") -> None:
    mode = get_output_mode()
    users = list(users)

    if mode == "json":
        print(json.dumps([u.to_dict() for u in users], ensure_ascii=False))
        return

    if not users:
        print("No users registered.")
        return

    if mode == "rich":
        table = Table(title="👥 Users", show_lines=True, header_style="bold cyan")
        table.add_column("Name", style="white")
        table.add_column("Books held", style="magenta", justify="right")
        for u in users:
            table.add_row(escape(u.name), str(len(u.borrowed)))
        _console.print(table)
    else:
        print(heading)
        for u in users:
            print(u.name)

def print_problems(problems: List[str]) -> None:
    """Report problems found while loading the record files."""
    if not problems:
        return
    mode = get_output_mode()
    if mode == "json":
        # Keep stdout parseable
        for p in problems:
            print(f"Warning: {p}", file=sys.stderr)
    elif mode == "rich":
        body = "\n".join(escape(p) for p in problems)
        _console.print(Panel.fit(body, title="⚠️ Load problems", border_style="yellow"))
    else:
        for p in problems:
            print(f"Warning: {p}")

def print_stats_result(stats: Dict[str, Any]) -> None:
    """Print statistics according to the current output mode.
    - plain: one 'Label: value' line per metric
    - json: JSON object
    - rich: Panel with the main metrics
    """
    mode = get_output_mode()

    if not stats:
        print("No statistics available.")
        return

    labels = [
        ("total_books", "Total Books"),
        ("available_books", "Available Books"),
        ("borrowed_books", "Borrowed Books"),
        ("unique_authors", "Unique Authors"),
        ("registered_users", "Registered Users"),
    ]

    if mode == "json":
        print(json.dumps({k: stats.get(k, 0) for k, _ in labels}, ensure_ascii=False))
    elif mode == "rich":
        content = "\n".join(f"[bold]{label}:[/] {stats.get(k, 0)}" for k, label in labels)
        _console.print(Panel.fit(content, title="📊 Stats", border_style="blue"))
    else:
        for k, label in labels:
            print(f"{label}: {stats.get(k, 0)}")

def print_book_detail(book: Any, holder: Any = None) -> None:
    """Print one book with its status and current holder.
    - plain: 'Book Found' followed by 'Label: value' lines
    - json: JSON object with the holder's name or null
    - rich: Panel
    """
    mode = get_output_mode()
    held_by = holder.name if holder else None

    if mode == "json":
        payload = dict(book.to_dict(), held_by=held_by)
        print(json.dumps(payload, ensure_ascii=False))
    elif mode == "rich":
        lines = [
            f"[bold]Title:[/] {escape(book.title)}",
            f"[bold]Author:[/] {escape(book.author)}",
            f"[bold]Status:[/] {_status(book)}",
        ]
        if held_by:
            lines.append(f"[bold]Held by:[/] {escape(held_by)}")
        _console.print(Panel.fit("\n".join(lines), title="🔍 Book Found", border_style="green"))
    else:
        print("Book Found")
        print(f"Title: {book.title}")
        print(f"Author: {book.author}")
        print(f"Status: {_status(book)}")
        if held_by:
            print(f"Held by: {held_by}")
