from shawarma.data.backends.csv_backend import CsvDataAccess
from shawarma.seed_data import main


def test_seed_writes_orders_and_expenses(tmp_path):
    args = ["--weeks", "2", "--end-date", "2026-10-18", "--output-dir", str(tmp_path), "--seed", "1"]
    assert main(args) == 0

    store = CsvDataAccess(data_dir=tmp_path)
    orders = store.list_orders().data
    expenses = store.list_expenses().data
    assert orders
    assert all(o.has_consistent_total for o in orders)
    assert sum(o.date.weekday() in (4, 5) for o in orders) > len(orders) / 2

    weekly = [e for e in expenses if e.is_weekly]
    assert len(weekly) == 2
    assert all(e.amount == sum(e.breakdown.values()) for e in weekly)


def test_seed_refuses_to_overwrite(tmp_path):
    args = ["--weeks", "1", "--end-date", "2026-10-18", "--output-dir", str(tmp_path)]
    assert main(args) == 0
    assert main(args + ["--no-overwrite"]) == 2
