"""
Battery Charging Log - Charging Log Store
Version: 1.1.0

Changelog:
v1.1.0 (2026-10-12): Dual entry written in one transaction; submitted_by
v1.0.0 (2026-09-28): Initial persistence and admin retrieval

Persists composed charging logs, maintains the running cycle count per
battery and serves the admin search queries. Rows come back with the
column names the admin table and CSV export show.
"""

import logging
from typing import Dict, List, Optional, Sequence

import aiosqlite

from database import get_db, execute_one, execute_all
from models.charging_log import ChargingLogPayload
from models.query import AdminQuery, IdentifierQuery
from services.errors import TransportError, ResultLimitError

logger = logging.getLogger(__name__)

# Export/display column order
_ROW_COLUMNS = """
    battery_id AS id,
    log_date AS date,
    customer_name AS customerName,
    zone,
    location,
    charge_current_a AS chargeCurrent,
    batt_volt_initial AS battVoltInitial,
    batt_volt_final AS battVoltFinal,
    charge_time_initial AS chargeTimeInitial,
    charge_time_final AS chargeTimeFinal,
    duration,
    drone_number AS droneno,
    uin,
    responsible_person AS name,
    temperature_status AS temp,
    deformation,
    other_notes AS others,
    charging_cycle AS chargingCycle,
    created_at AS createdAt
"""


class ChargingLogStore:
    """SQLite-backed persistence for charging logs"""

    async def _count(self, db, battery_id: str) -> int:
        row = await execute_one(
            db, "SELECT COUNT(*) AS cycles FROM charging_logs WHERE battery_id = ?",
            (battery_id,))
        return int(row["cycles"]) if row else 0

    async def _insert(self, db, payload: ChargingLogPayload,
                      submitted_by: Optional[str]) -> int:
        cycle = await self._count(db, payload.battery_id) + 1
        await db.execute("""
            INSERT INTO charging_logs
                (battery_id, log_date, customer_name, zone, location,
                 charge_current_a, batt_volt_initial, batt_volt_final,
                 charge_time_initial, charge_time_final, duration,
                 drone_number, uin, responsible_person, temperature_status,
                 deformation, other_notes, charging_cycle, submitted_by)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """, (
            payload.battery_id, payload.date, payload.customer_name,
            payload.zone, payload.location,
            payload.charge_current_amps, payload.batt_volt_initial,
            payload.batt_volt_final,
            payload.charge_time_initial, payload.charge_time_final,
            payload.duration_display,
            payload.drone_number, payload.uin, payload.responsible_person,
            payload.temperature_status.value, payload.deformation.value,
            payload.other_notes, cycle, submitted_by,
        ))
        return cycle

    async def save(self, payloads: Sequence[ChargingLogPayload],
                   submitted_by: Optional[str] = None) -> Dict[str, int]:
        """
        Insert one or more composed records atomically.

        Returns:
            Running cycle count per battery after the insert
        """
        cycles: Dict[str, int] = {}
        try:
            async with get_db() as db:
                try:
                    # Take the write lock before counting so concurrent
                    # submissions for one battery get consecutive cycles
                    await db.execute("BEGIN IMMEDIATE")
                    for payload in payloads:
                        cycles[payload.battery_id] = await self._insert(db, payload, submitted_by)
                    await db.commit()
                except aiosqlite.Error:
                    await db.rollback()
                    raise
        except aiosqlite.Error as e:
            logger.error(f"Failed to store charging log: {e}")
            raise TransportError("Submission failed", cause=e) from e

        logger.info(f"Stored {len(payloads)} charging log(s): {cycles}")
        return cycles

    async def count_cycles(self, battery_id: str) -> int:
        try:
            async with get_db() as db:
                return await self._count(db, battery_id)
        except aiosqlite.Error as e:
            logger.error(f"Cycle lookup failed for {battery_id}: {e}")
            raise TransportError("Failed to fetch cycles", cause=e) from e

    async def search(self, query: AdminQuery, limit: Optional[int] = None) -> List[dict]:
        """
        Rows matching the query, oldest first.

        With a limit, a result that would exceed it raises ResultLimitError
        instead of being cut short; without one every matching row is returned.
        """
        if isinstance(query, IdentifierQuery):
            where = "battery_id = ?"
            params = [query.battery_id]
        else:
            where = "log_date BETWEEN ? AND ?"
            params = [query.date_from, query.date_to]
        sql = f"""
            SELECT {_ROW_COLUMNS}
            FROM charging_logs
            WHERE {where}
            ORDER BY log_date, id
        """
        if limit is not None:
            sql += " LIMIT ?"
            params.append(limit + 1)

        try:
            async with get_db() as db:
                rows = await execute_all(db, sql, params)
        except aiosqlite.Error as e:
            logger.error(f"Search failed for {query!r}: {e}")
            raise TransportError("Error fetching data", cause=e) from e

        if limit is not None and len(rows) > limit:
            logger.warning(f"Search {query!r} exceeds {limit} rows")
            raise ResultLimitError(limit)
        return rows


# Singleton
_store = ChargingLogStore()


async def save(payloads: Sequence[ChargingLogPayload],
               submitted_by: Optional[str] = None) -> Dict[str, int]:
    return await _store.save(payloads, submitted_by)


async def count_cycles(battery_id: str) -> int:
    return await _store.count_cycles(battery_id)


async def search(query: AdminQuery, limit: Optional[int] = None) -> List[dict]:
    return await _store.search(query, limit)
