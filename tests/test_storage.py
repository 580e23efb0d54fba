import asyncio

import pytest

from config import settings
from models import init_db
from models.charging_log import ChargingLogRecord
from models.query import IdentifierQuery, DateRangeQuery
from services import charging_log_store, draft_store
from services.draft_store import apply_field_change
from services.errors import RecordValidationError, ResultLimitError, TransportError
from services.record_composer import compose


@pytest.fixture
def initialized_db(db_path):
    asyncio.run(init_db())
    return db_path


def test_cycle_count_increments_per_battery(initialized_db, valid_record):
    async def scenario():
        first = await charging_log_store.save([compose(valid_record)])
        second = await charging_log_store.save([compose(valid_record)])
        other = await charging_log_store.save([compose(dict(valid_record, batteryId="BAT-XYZ"))])
        return first, second, other, await charging_log_store.count_cycles("BAT-001")

    first, second, other, total = asyncio.run(scenario())
    assert first == {"BAT-001": 1}
    assert second == {"BAT-001": 2}
    assert other == {"BAT-XYZ": 1}
    assert total == 2


def test_concurrent_submissions_get_consecutive_cycles(initialized_db, valid_record):
    async def scenario():
        payload = compose(valid_record)
        results = await asyncio.gather(
            *(charging_log_store.save([payload]) for _ in range(5)))
        rows = await charging_log_store.search(IdentifierQuery(battery_id="BAT-001"))
        return results, rows

    results, rows = asyncio.run(scenario())
    assert sorted(r["BAT-001"] for r in results) == [1, 2, 3, 4, 5]
    assert sorted(r["chargingCycle"] for r in rows) == [1, 2, 3, 4, 5]


def test_search_limit_raises_instead_of_truncating(initialized_db, valid_record):
    async def scenario():
        for day in ("2024-05-01", "2024-05-02", "2024-05-03"):
            await charging_log_store.save([compose(dict(valid_record, date=day))])
        query = IdentifierQuery(battery_id="BAT-001")
        return (await charging_log_store.search(query, limit=3),
                await charging_log_store.search(query))

    at_limit, unlimited = asyncio.run(scenario())
    assert len(at_limit) == len(unlimited) == 3
    with pytest.raises(ResultLimitError, match="More than 2 rows"):
        asyncio.run(charging_log_store.search(IdentifierQuery(battery_id="BAT-001"), limit=2))


def test_unknown_battery_has_zero_cycles(initialized_db):
    assert asyncio.run(charging_log_store.count_cycles("NOPE")) == 0


def test_search_by_identifier_and_range(initialized_db, valid_record):
    async def scenario():
        for day in ("2024-05-01", "2024-05-05", "2024-05-20"):
            await charging_log_store.save([compose(dict(valid_record, date=day))])
        by_id = await charging_log_store.search(IdentifierQuery(battery_id="BAT-001"))
        by_range = await charging_log_store.search(
            DateRangeQuery(date_from="2024-05-01", date_to="2024-05-05"))
        return by_id, by_range

    by_id, by_range = asyncio.run(scenario())
    assert [r["date"] for r in by_id] == ["2024-05-01", "2024-05-05", "2024-05-20"]
    assert [r["date"] for r in by_range] == ["2024-05-01", "2024-05-05"]
    assert list(by_id[0])[:3] == ["id", "date", "customerName"]
    assert by_id[0]["chargeCurrent"] == pytest.approx(5.5)
    assert by_id[0]["duration"] == "1 hours 30 mins"
    assert [r["chargingCycle"] for r in by_id] == [1, 2, 3]


def test_storage_failure_becomes_transport_error(tmp_path, monkeypatch):
    # a directory cannot be opened as a database file
    monkeypatch.delenv("CHARGING_LOG_DB", raising=False)
    monkeypatch.setattr(settings, "SQLITE_DB_PATH", str(tmp_path))
    with pytest.raises(TransportError, match="Failed to fetch cycles"):
        asyncio.run(charging_log_store.count_cycles("BAT-001"))


def test_draft_round_trip_and_clear(initialized_db):
    async def scenario():
        assert await draft_store.load_draft("sess-1") is None
        await draft_store.change_field("sess-1", "batteryId", "BAT-5")
        state = await draft_store.change_field("sess-1", "chargeTimeInitial", "22:00")
        state = await draft_store.change_field("sess-1", "chargeTimeFinal", "01:00")
        loaded = await draft_store.load_draft("sess-1")
        other = await draft_store.load_draft("sess-2")
        removed = await draft_store.clear_draft("sess-1")
        return state, loaded, other, removed, await draft_store.load_draft("sess-1")

    state, loaded, other, removed, after = asyncio.run(scenario())
    assert state.record["batteryId"] == "BAT-5"
    assert state.record["durationDisplay"] == "3 hours"
    assert not state.is_valid
    assert "batteryId" not in state.errors
    assert "zone" in state.errors
    assert loaded.battery_id == "BAT-5"
    assert other is None
    assert removed is True
    assert after is None


def test_switching_away_from_others_clears_free_text():
    record = ChargingLogRecord()
    record = apply_field_change(record, "customerName", "Others")
    record = apply_field_change(record, "customerNameOther", "Acme")
    assert record.customer_name_other == "Acme"
    record = apply_field_change(record, "customerName", "CIL")
    assert record.customer_name_other == ""


def test_unknown_field_rejected():
    with pytest.raises(RecordValidationError):
        apply_field_change(ChargingLogRecord(), "batteryColour", "red")


def test_legacy_field_name_accepted_for_mutation():
    record = apply_field_change(ChargingLogRecord(), "droneno", "DR-1")
    assert record.drone_number == "DR-1"
