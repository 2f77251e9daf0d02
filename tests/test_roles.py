import pytest

import roles
from catalog import Catalog
from results import Reason
from user import Role


@pytest.fixture
def admin():
    return roles.librarian("Admin")


@pytest.fixture
def alice(catalog):
    return roles.login_reader(catalog, "Alice").data


def test_librarian_is_not_in_roster(catalog, admin):
    assert admin.role is Role.LIBRARIAN
    assert catalog.find_user("Admin") is None


def test_librarian_delegates_to_catalog(catalog, admin):
    assert roles.add_book(catalog, admin, "Dune", "Herbert").ok
    assert roles.register_user(catalog, admin, "Bob").ok

    books = roles.list_books(catalog, admin)
    assert [b.title for b in books.data] == ["Dune"]
    users = roles.list_users(catalog, admin)
    assert [u.name for u in users.data] == ["Bob"]

    assert roles.remove_book(catalog, admin, "dune").ok
    assert roles.list_books(catalog, admin).message == "No books available."


def test_login_reader_registers_on_first_use(catalog):
    first = roles.login_reader(catalog, "Alice")
    assert first.ok
    assert first.message.startswith("User not found")
    assert catalog.find_user("alice") is first.data

    again = roles.login_reader(catalog, "ALICE")
    assert again.data is first.data
    assert len(catalog.list_users()) == 1


def test_login_reader_rejects_invalid_name(catalog):
    assert roles.login_reader(catalog, "").reason is Reason.INVALID


def test_borrow_and_return_scenario(catalog, admin):
    roles.add_book(catalog, admin, "Dune", "Herbert")
    book = catalog.find_book("dune")
    assert book.available is True
    assert book.author == "Herbert"

    alice = roles.login_reader(catalog, "Alice").data
    bob = roles.login_reader(catalog, "Bob").data

    borrowed = roles.borrow(catalog, alice, "Dune")
    assert borrowed.ok
    assert book.available is False
    assert [b.title for b in roles.show_my_books(catalog, alice).data] == ["Dune"]

    second = roles.borrow(catalog, bob, "Dune")
    assert second.reason is Reason.ALREADY_BORROWED
    assert second.message == "Book is already borrowed."

    returned = roles.return_book(catalog, alice, "Dune")
    assert returned.ok
    assert book.available is True
    assert book.author == "Herbert"
    assert roles.show_my_books(catalog, alice).data == []


def test_borrow_missing_book(catalog, alice):
    result = roles.borrow(catalog, alice, "Nowhere")
    assert result.reason is Reason.NOT_FOUND
    assert result.message == "Book not found."


def test_return_only_looks_at_own_books(catalog, admin, alice):
    roles.add_book(catalog, admin, "Dune", "Herbert")
    bob = roles.login_reader(catalog, "Bob").data
    roles.borrow(catalog, bob, "Dune")

    result = roles.return_book(catalog, alice, "Dune")
    assert result.reason is Reason.NOT_HELD
    assert result.message == "You don't have this book."
    assert catalog.find_book("Dune").available is False
    assert catalog.holder_of("Dune") is bob


def test_return_ignores_case(catalog, admin, alice):
    roles.add_book(catalog, admin, "Dune", "Herbert")
    roles.borrow(catalog, alice, "Dune")
    assert roles.return_book(catalog, alice, "dUNE").ok


def test_show_my_books_empty(catalog, alice):
    result = roles.show_my_books(catalog, alice)
    assert result.ok
    assert result.message == "You don't have any books."
    assert result.data == []


def test_show_my_books_in_borrow_order(catalog, admin, alice):
    for title in ["Emma", "Dune", "Ulysses"]:
        roles.add_book(catalog, admin, title, "Someone")
    for title in ["Ulysses", "Emma"]:
        roles.borrow(catalog, alice, title)

    assert [b.title for b in roles.show_my_books(catalog, alice).data] == ["Ulysses", "Emma"]


def test_borrowed_book_cannot_be_removed(catalog, admin, alice):
    roles.add_book(catalog, admin, "Dune", "Herbert")
    roles.borrow(catalog, alice, "Dune")

    result = roles.remove_book(catalog, admin, "Dune")
    assert result.reason is Reason.BOOK_BORROWED
    assert catalog.find_book("Dune") is not None


def test_wrong_role_has_no_effect(catalog, admin, alice):
    assert roles.add_book(catalog, alice, "Dune", "Herbert").reason is Reason.WRONG_ROLE
    assert catalog.list_books() == []

    roles.add_book(catalog, admin, "Dune", "Herbert")
    assert roles.borrow(catalog, admin, "Dune").reason is Reason.WRONG_ROLE
    assert catalog.find_book("Dune").available is True
    assert roles.list_users(catalog, alice).reason is Reason.WRONG_ROLE


def test_borrowed_books_survive_restart(store, admin):
    catalog = Catalog(store)
    roles.add_book(catalog, admin, "Dune", "Herbert")
    alice = roles.login_reader(catalog, "Alice").data
    roles.borrow(catalog, alice, "Dune")

    restarted = Catalog(store)
    alice_again = restarted.find_user("Alice")
    assert restarted.find_book("Dune").available is False
    assert roles.return_book(restarted, alice_again, "Dune").ok
    assert restarted.find_book("Dune").available is True

    # And the return is persisted too
    assert Catalog(store).find_user("Alice").borrowed == []


def test_list_available_books(catalog, admin, alice):
    roles.add_book(catalog, admin, "Dune", "Herbert")
    roles.add_book(catalog, admin, "Emma", "Austen")
    roles.borrow(catalog, alice, "Emma")

    result = roles.list_available_books(catalog, alice)
    assert [b.title for b in result.data] == ["Dune"]
