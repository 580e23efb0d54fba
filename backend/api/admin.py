"""
Battery Charging Log - Admin API
Version: 1.2.0

Changelog:
v1.2.0 (2026-10-18): Searches over the row limit fail with 413 instead of
                      truncating; export unlimited; UTF-8 download filenames
v1.1.0 (2026-10-12): Table view endpoint; export accepts either query mode
v1.0.0 (2026-09-28): Initial admin search and CSV export endpoints
"""

from fastapi import APIRouter, HTTPException, Query, Depends
from fastapi.responses import StreamingResponse
from typing import List, Optional
import io
import logging

from config import settings
from models.charging_log import TableView
from models.query import IdentifierQuery
from services import charging_log_store, export_adapter, query_builder
from services.errors import (
    QueryValidationError, TransportError, OperationInProgressError, EmptyResultError,
    ResultLimitError,
)
from services.session_guard import SessionContext, require_admin, in_flight

router = APIRouter(prefix="/admin/rows", tags=["admin"])
logger = logging.getLogger(__name__)


async def _run_search(session: SessionContext, action: str, query,
                      limit: Optional[int] = None) -> List[dict]:
    async with in_flight.hold(session.session_key, action):
        return await charging_log_store.search(query, limit)


@router.get("/search", response_model=List[dict])
async def search_by_battery(battery_id: Optional[str] = Query(None, alias="batteryId"),
                            session: SessionContext = Depends(require_admin)):
    """All charging logs for one battery (possibly empty)"""
    try:
        query = query_builder.build_identifier_query(battery_id)
        rows = await _run_search(session, "search", query, settings.SEARCH_LIMIT)
    except QueryValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ResultLimitError as e:
        raise HTTPException(status_code=413, detail=str(e))
    except OperationInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except TransportError as e:
        logger.error(f"Admin search error: {e.cause}")
        raise HTTPException(status_code=500, detail="Error fetching data")

    if not rows:
        logger.info(f"No data found for battery {query.battery_id}")
    return rows


@router.get("/by-date", response_model=List[dict])
async def search_by_date(date_from: Optional[str] = Query(None, alias="dateFrom"),
                         date_to: Optional[str] = Query(None, alias="dateTo"),
                         session: SessionContext = Depends(require_admin)):
    """All charging logs dated within the inclusive range"""
    try:
        query = query_builder.build_date_range_query(date_from, date_to)
        rows = await _run_search(session, "date-search", query, settings.SEARCH_LIMIT)
    except QueryValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ResultLimitError as e:
        raise HTTPException(status_code=413, detail=str(e))
    except OperationInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except TransportError as e:
        logger.error(f"fetchByDate error: {e.cause}")
        raise HTTPException(status_code=500, detail="Error fetching rows by date")
    return rows


@router.get("/table", response_model=TableView)
async def search_table(battery_id: Optional[str] = Query(None, alias="batteryId"),
                       date_from: Optional[str] = Query(None, alias="dateFrom"),
                       date_to: Optional[str] = Query(None, alias="dateTo"),
                       session: SessionContext = Depends(require_admin)):
    """Search rows laid out for on-screen display"""
    try:
        query = query_builder.build_query(battery_id, date_from, date_to)
        rows = await _run_search(session, "table", query, settings.SEARCH_LIMIT)
    except QueryValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ResultLimitError as e:
        raise HTTPException(status_code=413, detail=str(e))
    except OperationInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except TransportError as e:
        logger.error(f"Table search error: {e.cause}")
        raise HTTPException(status_code=500, detail="Error fetching data")

    table = export_adapter.to_table(rows)
    message = None if rows else "No data to display."
    return TableView(columns=table["columns"], rows=table["rows"], message=message)


@router.get("/export")
async def export_rows(battery_id: Optional[str] = Query(None, alias="batteryId"),
                      date_from: Optional[str] = Query(None, alias="dateFrom"),
                      date_to: Optional[str] = Query(None, alias="dateTo"),
                      session: SessionContext = Depends(require_admin)):
    """Download matching rows as CSV"""
    try:
        query = query_builder.build_query(battery_id, date_from, date_to)
        # ID and date-range downloads are separate actions
        action = "export" if isinstance(query, IdentifierQuery) else "date-export"
        rows = await _run_search(session, action, query)
        filename, csv_data = export_adapter.render_export(query, rows)
    except QueryValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except EmptyResultError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except OperationInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except TransportError as e:
        logger.error(f"Download error: {e.cause}")
        raise HTTPException(status_code=500, detail="Error downloading CSV")

    logger.info(f"Exporting {len(rows)} rows as {filename} for {session.user}")
    return StreamingResponse(
        io.BytesIO(csv_data),
        media_type=export_adapter.CSV_MEDIA_TYPE,
        headers={
            "Content-Disposition": export_adapter.content_disposition(filename)
        }
    )
