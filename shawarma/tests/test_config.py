import pytest
from shawarma.config import AppConfig, get_config, set_config_for_test
from shawarma.data.backends.csv_backend import CsvDataAccess
from shawarma.data.util import get_data_access

def test_defaults():
    """Stall trades Friday and Saturday out of the box."""
    config = AppConfig()
    assert config.operating_days == [4, 5]
    assert config.weekly_expense_budget == 40000
    assert config.data_backend == "csv"

def test_env_override(monkeypatch):
    """Operating days and budget can come from the environment."""
    monkeypatch.setenv("OPERATING_DAYS", "[5, 6]")
    monkeypatch.setenv("WEEKLY_EXPENSE_BUDGET", "25000")
    config = AppConfig()
    assert config.operating_days == [5, 6]
    assert config.weekly_expense_budget == 25000

def test_set_config_for_test_replaces_singleton():
    set_config_for_test(operating_days=[0], data_dir="elsewhere")
    assert get_config().operating_days == [0]
    assert get_config().data_dir == "elsewhere"

def test_get_data_access_csv(tmp_path):
    set_config_for_test(data_dir=str(tmp_path))
    da = get_data_access()
    assert isinstance(da, CsvDataAccess)
    assert da.data_dir == tmp_path

def test_get_data_access_unknown_kind():
    with pytest.raises(ValueError):
        get_data_access("supabase")

def test_operating_days_must_be_weekdays():
    with pytest.raises(ValueError):
        AppConfig(operating_days=[4, 7])
    assert AppConfig(operating_days=[5, 4, 5]).operating_days == [4, 5]
