import pytest


@pytest.fixture(autouse=True)
def _wide_terminal(monkeypatch):
    """Pin argparse's help wrapping width so rendered --help output is stable."""
    monkeypatch.setenv("COLUMNS", "200")
