import pytest

from shawarma.config import set_config_for_test


@pytest.fixture(autouse=True)
def default_config(monkeypatch):
    """Every test starts from the built-in settings, whatever the shell exports."""
    for var in [
        "APP_ENV", "LOG_LEVEL", "DATA_BACKEND", "DATA_DIR", "OPERATING_DAYS",
        "WEEKLY_EXPENSE_BUDGET", "AVERAGE_DAILY_SALES_DAYS",
    ]:
        monkeypatch.delenv(var, raising=False)
    set_config_for_test(log_level="INFO")
    yield
