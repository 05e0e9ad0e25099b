import pytest

from src.academy_system.academy_system.core.exceptions import DataAccessError
from src.academy_system.academy_system.database.memory_client import InMemoryTableClient


def test_insert_assigns_ids_and_enforces_unique_codes():
    client = InMemoryTableClient()
    [row] = client.insert("academy_users", [{"code": "P-1", "full_name": "A"}])
    assert row["id"] and row["created_at"]

    with pytest.raises(DataAccessError):
        client.insert("academy_users", [{"code": "P-1", "full_name": "B"}])


def test_range_filters_and_ordering():
    client = InMemoryTableClient()
    client.insert(
        "attendance_records",
        [{"date": "2026-03-03"}, {"date": "2026-02-28"}, {"date": "2026-03-01"}, {"date": None}],
    )

    rows = client.select(
        "attendance_records", gte={"date": "2026-03-01"}, lte={"date": "2026-03-31"}, order_by="date"
    )
    assert [r["date"] for r in rows] == ["2026-03-01", "2026-03-03"]

    everything = client.select("attendance_records", order_by="date", limit=3)
    assert [r["date"] for r in everything] == ["2026-02-28", "2026-03-01", "2026-03-03"]


def test_update_and_delete_need_filters():
    client = InMemoryTableClient()
    with pytest.raises(ValueError):
        client.update("academy_users", {"full_name": "X"}, eq={})
    with pytest.raises(ValueError):
        client.delete("academy_users", eq={})


def test_upsert_updates_existing_key():
    client = InMemoryTableClient()
    client.upsert("academy_settings", [{"key": "academy_name", "value": "A"}], on_conflict="key")
    client.upsert("academy_settings", [{"key": "academy_name", "value": "B"}], on_conflict="key")

    rows = client.select("academy_settings")
    assert [(r["key"], r["value"]) for r in rows] == [("academy_name", "B")]


def test_reads_are_copies():
    client = InMemoryTableClient()
    client.insert("academy_settings", [{"key": "k", "value": "v"}])
    client.select("academy_settings")[0]["value"] = "changed"
    assert client.select("academy_settings")[0]["value"] == "v"
