import pytest

from catalog import Catalog
from record_store import RecordStore
from utils.ui_helpers import OUTPUT_MODE_ENV


@pytest.fixture(autouse=True)
def plain_output(monkeypatch):
    # CLI tests assert on plain text; restored after each test
    monkeypatch.setenv(OUTPUT_MODE_ENV, "plain")


@pytest.fixture
def data_files(tmp_path):
    # Each test gets its own record files
    return {
        "books": tmp_path / "books.txt",
        "users": tmp_path / "users.txt",
        "loans": tmp_path / "loans.txt",
    }


@pytest.fixture
def store(data_files):
    return RecordStore(data_files["books"], data_files["users"], data_files["loans"])


@pytest.fixture
def catalog(store):
    return Catalog(store)
