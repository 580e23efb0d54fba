"""
Battery Charging Log - Draft Store
Version: 1.0.0

Session-scoped draft of the charging log form. Every field change is
applied to the stored draft, the duration is recomputed, the record is
re-validated and the result is written straight back, so a reload can
resume where the operator stopped. Successful submission clears it.
"""

import logging
from datetime import datetime
from typing import Optional

import aiosqlite

from database import get_db, execute_one, execute_update, json_col, from_json
from models.charging_log import ChargingLogRecord, DraftState
from services import record_validator
from services.record_composer import recompute_duration
from services.errors import RecordValidationError, TransportError

logger = logging.getLogger(__name__)


def blank_record() -> ChargingLogRecord:
    return ChargingLogRecord()


def apply_field_change(record: ChargingLogRecord, field: str,
                       value: Optional[str]) -> ChargingLogRecord:
    """
    Apply one operator edit to a record.

    Picking a customer other than 'Others' discards the free-text name.
    The duration is always re-derived from the charge times.

    Raises:
        RecordValidationError: if the field does not exist
    """
    attribute = ChargingLogRecord.resolve_field(field)
    if attribute is None:
        raise RecordValidationError({field: "Unknown field"}, message=f"Unknown field '{field}'")

    update = {attribute: value or ""}
    if attribute == "customer_name" and not record_validator.is_other_customer(value or ""):
        update["customer_name_other"] = ""
    return recompute_duration(record.model_copy(update=update))


def to_state(record: ChargingLogRecord, updated_at: Optional[datetime] = None) -> DraftState:
    errors = record_validator.validate(record)
    return DraftState(
        record=record.to_wire(),
        errors=errors,
        is_valid=not errors,
        updated_at=updated_at,
    )


class DraftStore:
    """Draft cache backed by the drafts table"""

    async def load(self, session_key: str) -> Optional[ChargingLogRecord]:
        try:
            async with get_db() as db:
                row = await execute_one(
                    db, "SELECT record FROM drafts WHERE session_key = ?", (session_key,))
        except aiosqlite.Error as e:
            raise TransportError("Failed to load draft", cause=e) from e

        if not row:
            return None
        data = from_json(row["record"])
        if not isinstance(data, dict):
            logger.warning(f"Discarding unreadable draft for session {session_key}")
            return None
        return ChargingLogRecord.model_validate(data)

    async def save(self, session_key: str, record: ChargingLogRecord) -> DraftState:
        record = recompute_duration(record)
        now = datetime.now()
        try:
            async with get_db() as db:
                await execute_update(db, """
                    INSERT INTO drafts (session_key, record, updated_at)
                    VALUES (?, ?, ?)
                    ON CONFLICT(session_key) DO UPDATE SET
                        record = excluded.record,
                        updated_at = excluded.updated_at
                """, (session_key, json_col(record.to_wire()), now.isoformat()))
        except aiosqlite.Error as e:
            raise TransportError("Failed to save draft", cause=e) from e
        return to_state(record, now)

    async def clear(self, session_key: str) -> bool:
        try:
            async with get_db() as db:
                removed = await execute_update(
                    db, "DELETE FROM drafts WHERE session_key = ?", (session_key,))
        except aiosqlite.Error as e:
            raise TransportError("Failed to clear draft", cause=e) from e
        return removed > 0

    async def change_field(self, session_key: str, field: str,
                           value: Optional[str]) -> DraftState:
        record = await self.load(session_key) or blank_record()
        record = apply_field_change(record, field, value)
        return await self.save(session_key, record)


# Singleton
_drafts = DraftStore()


async def load_draft(session_key: str) -> Optional[ChargingLogRecord]:
    return await _drafts.load(session_key)


async def save_draft(session_key: str, record: ChargingLogRecord) -> DraftState:
    return await _drafts.save(session_key, record)


async def clear_draft(session_key: str) -> bool:
    return await _drafts.clear(session_key)


async def change_field(session_key: str, field: str, value: Optional[str]) -> DraftState:
    return await _drafts.change_field(session_key, field, value)
