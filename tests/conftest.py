import pytest


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    # Local .env / shell values must not leak into unit tests.
    for name in ("DSALTA_API_KEY", "DSALTA_BASE_URL", "DSALTA_TIMEOUT_MS"):
        monkeypatch.delenv(name, raising=False)
