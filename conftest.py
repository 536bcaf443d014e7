import pytest


def pytest_configure(config):
    # Register common markers used across the repo without requiring external plugins.
    config.addinivalue_line("markers", "sqlite: test touches an on-disk SQLite store")
    config.addinivalue_line("markers", "cli: test drives the typer CLI")


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    """Keep MODE_COUNTER_* settings from the developer's shell out of the tests."""
    import os

    for name in list(os.environ):
        if name.startswith("MODE_COUNTER_"):
            monkeypatch.delenv(name, raising=False)

    from mode_counter.config import get_config

    get_config.cache_clear()
    yield
    get_config.cache_clear()
