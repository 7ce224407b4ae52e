import pytest

from dues_api.db import SQLiteConnectionProvider
from dues_api.errors import QueryFailed, StoreUnavailable
from dues_api.repositories import DueRepository
from dues_api.schemas import DueCreate


def make_create(receipt_number="R-1"):
    return DueCreate(amount=69, status="Unpaid", due_type="Monthly", receipt_number=receipt_number)


class TestSQLiteConnectionProvider:
    def test_creates_dues_table(self, provider):
        with provider.connection() as db:
            rows = db.query("SELECT name FROM sqlite_master WHERE type = 'table' AND name = ?", ("dues",))
        assert rows == [{"name": "dues"}]

    def test_write_reports_insert_id_and_affected_rows(self, provider):
        with provider.connection() as db:
            result = db.execute(
                "INSERT INTO dues (due_date, amount, status, due_type, receipt_number) VALUES (?, ?, ?, ?, ?)",
                ("2025-01-01T00:00:00", 10, "Unpaid", "Monthly", "R-1"),
            )
        assert result.affected_rows == 1
        assert result.insert_id >= 1

    def test_rejected_statement_raises_query_failed(self, provider):
        with pytest.raises(QueryFailed):
            with provider.connection() as db:
                db.query("SELECT * FROM missing_table")

    def test_constraint_violation_raises_query_failed(self, provider):
        with pytest.raises(QueryFailed):
            with provider.connection() as db:
                db.execute("INSERT INTO dues (amount) VALUES (?)", (1,))

    def test_memory_database_rolls_back_on_error(self, provider):
        repo = DueRepository(provider)
        with pytest.raises(RuntimeError):
            with provider.connection() as db:
                db.execute(
                    "INSERT INTO dues (due_date, amount, status, due_type, receipt_number) VALUES (?, ?, ?, ?, ?)",
                    ("2025-01-01T00:00:00", 10, "Unpaid", "Monthly", "R-1"),
                )
                raise RuntimeError("boom")
        assert repo.list() == []

    def test_file_database_persists_between_providers(self, tmp_path):
        db_path = str(tmp_path / "data" / "dues.db")
        created = DueRepository(SQLiteConnectionProvider(db_path)).create(make_create())

        reopened = DueRepository(SQLiteConnectionProvider(db_path))
        fetched = reopened.get_by_id(created["id"])

        assert fetched is not None
        assert fetched["receipt_number"] == "R-1"

    def test_unopenable_path_raises_store_unavailable(self, tmp_path):
        with pytest.raises(StoreUnavailable):
            SQLiteConnectionProvider(str(tmp_path))
