"""
Battery Charging Log - Database Models
Version: 1.1.0

Changelog:
v1.1.0 (2026-10-12): submitted_by column on charging_logs; drafts table keyed
                      by session instead of browser storage
v1.0.0 (2026-09-28): Initial schema (charging_logs)
"""

from .charging_log import (
    ChargingLogRecord, ChargingLogPayload, DualPayload, SubmissionResult,
    CycleLookupResult, DraftFieldChange, DraftState, TableView,
)
from .query import IdentifierQuery, DateRangeQuery, AdminQuery

import aiosqlite
import logging

logger = logging.getLogger(__name__)


async def _add_column_if_missing(db, table, column, col_type, default=None):
    """Idempotent ALTER TABLE ADD COLUMN"""
    cursor = await db.execute(f"PRAGMA table_info({table})")
    existing = {row[1] for row in await cursor.fetchall()}
    if column not in existing:
        default_clause = f" DEFAULT {default}" if default is not None else ""
        await db.execute(f"ALTER TABLE {table} ADD COLUMN {column} {col_type}{default_clause}")


async def init_db():
    """Initialize SQLite database with the charging log schema"""
    from database import get_db_path
    db_path = get_db_path()
    logger.info(f"Initializing database: {db_path}")

    async with aiosqlite.connect(db_path) as db:
        await db.execute("PRAGMA journal_mode=WAL")
        await db.execute("PRAGMA foreign_keys=ON")

        # ================================================================
        # CHARGING LOGS (one row per submitted battery charge)
        # ================================================================
        await db.execute("""
            CREATE TABLE IF NOT EXISTS charging_logs (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                battery_id TEXT NOT NULL,
                log_date TEXT NOT NULL,
                customer_name TEXT NOT NULL,
                zone TEXT NOT NULL,
                location TEXT NOT NULL,

                -- Electrical readings
                charge_current_a REAL,
                batt_volt_initial REAL NOT NULL,
                batt_volt_final REAL NOT NULL,

                -- Charge window (HH:MM) and derived duration text
                charge_time_initial TEXT NOT NULL,
                charge_time_final TEXT NOT NULL,
                duration TEXT,

                drone_number TEXT,
                uin TEXT,
                responsible_person TEXT NOT NULL,
                temperature_status TEXT NOT NULL
                    CHECK(temperature_status IN ('Normal', 'Overheat')),
                deformation TEXT NOT NULL CHECK(deformation IN ('Yes', 'No')),
                other_notes TEXT,

                -- Running cycle count for the battery at insert time
                charging_cycle INTEGER NOT NULL DEFAULT 1,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)
        await _add_column_if_missing(db, "charging_logs", "submitted_by", "TEXT")

        # ================================================================
        # DRAFTS (in-progress form per session, cleared on submit)
        # ================================================================
        await db.execute("""
            CREATE TABLE IF NOT EXISTS drafts (
                session_key TEXT PRIMARY KEY,
                record TEXT NOT NULL,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        # ================================================================
        # INDEXES
        # ================================================================
        await db.execute("CREATE INDEX IF NOT EXISTS idx_cl_battery ON charging_logs(battery_id)")
        await db.execute("CREATE INDEX IF NOT EXISTS idx_cl_date ON charging_logs(log_date)")

        await db.commit()

    logger.info("Database initialized successfully (charging log schema v1.1.0)")


__all__ = [
    'ChargingLogRecord', 'ChargingLogPayload', 'DualPayload',
    'SubmissionResult', 'CycleLookupResult', 'DraftFieldChange',
    'DraftState', 'TableView',
    'IdentifierQuery', 'DateRangeQuery', 'AdminQuery',
    'init_db'
]
