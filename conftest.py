import pytest

from library import Library
from utils.ui_helpers import OUTPUT_MODE_ENV


@pytest.fixture(autouse=True)
def plain_output(monkeypatch):
    # --output writes to os.environ; pin the mode so it is restored after each test
    monkeypatch.setenv(OUTPUT_MODE_ENV, "plain")


@pytest.fixture
def lib():
    return Library()


@pytest.fixture
def data_file(tmp_path):
    return str(tmp_path / "library.db")


@pytest.fixture
def dune_lib(lib):
    """Dune with two copies, lent once to M1."""
    lib.add_book("B1", "Dune", "Herbert", 2)
    lib.register_member("M1", "Alice")
    lib.register_member("M2", "Bob")
    lib.lend("M1", "B1")
    return lib
