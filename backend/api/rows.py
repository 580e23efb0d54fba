"""
Battery Charging Log - Operator API Endpoints
Version: 1.1.0

Changelog:
v1.1.0 (2026-10-12): Dual battery submission; server-side draft with per-field
                      validation; duration preview
v1.0.0 (2026-09-28): Initial submission and cycle lookup endpoints
"""

from fastapi import APIRouter, HTTPException, Query, Body, Depends
from typing import Any, Dict
import logging

from models.charging_log import (
    ChargingLogRecord, SubmissionResult, CycleLookupResult, DraftFieldChange,
    DraftState, TemperatureStatus, Deformation, CUSTOMER_OPTIONS, LOCATIONS,
)
from services import charging_log_store, draft_store, record_composer
from services.cycle_classifier import classify
from services.duration import compute_duration
from services.errors import RecordValidationError, TransportError, OperationInProgressError
from services.session_guard import SessionContext, get_session, in_flight

router = APIRouter(prefix="/rows", tags=["rows"])
logger = logging.getLogger(__name__)


def _as_mapping(value: Any, side: str) -> Dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise RecordValidationError({side: "Must be an object"})
    return value


@router.post("", response_model=SubmissionResult)
async def submit_rows(body: Dict[str, Any] = Body(...),
                      session: SessionContext = Depends(get_session)):
    """
    Submit one charging log, or two as {"primary": ..., "secondary": ...}.

    Records are validated and composed before anything is stored; the
    session's draft is cleared once the insert succeeds.
    """
    try:
        async with in_flight.hold(session.session_key, "submit"):
            if "primary" in body or "secondary" in body:
                dual = record_composer.compose_dual(
                    _as_mapping(body.get("primary"), "primary"),
                    _as_mapping(body.get("secondary"), "secondary"),
                )
                payloads = [dual.primary, dual.secondary]
            else:
                payloads = [record_composer.compose(body)]

            cycles = await charging_log_store.save(payloads, submitted_by=session.user)

            try:
                await draft_store.clear_draft(session.session_key)
            except TransportError as e:
                logger.warning(f"Submitted, but draft for {session.session_key} not cleared: {e}")

    except RecordValidationError as e:
        raise HTTPException(status_code=422, detail={"message": e.message, "errors": e.errors})
    except OperationInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except TransportError as e:
        raise HTTPException(status_code=500, detail=e.message)

    charging_cycle = cycles.get(payloads[0].battery_id)
    message = "Submitted successfully"
    if charging_cycle:
        message += f". Cycles so far: {charging_cycle}"
    return SubmissionResult(message=message, charging_cycle=charging_cycle, cycles=cycles)


@router.get("/cycles", response_model=CycleLookupResult)
async def lookup_cycles(battery_id: str = Query("", alias="batteryId"),
                        session: SessionContext = Depends(get_session)):
    """Charging cycles recorded so far for a battery, with display tier"""
    battery_id = battery_id.strip()
    if not battery_id:
        raise HTTPException(status_code=400, detail="Please enter a Battery ID")

    try:
        async with in_flight.hold(session.session_key, "lookup"):
            cycles = await charging_log_store.count_cycles(battery_id)
    except OperationInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except TransportError as e:
        raise HTTPException(status_code=500, detail=e.message)

    status = classify(cycles)
    return CycleLookupResult(
        battery_id=battery_id,
        cycles=status.count,
        tier=status.tier.value,
        critical_marker=status.critical_marker,
        color=status.color,
        label=status.label,
    )


@router.get("/duration")
async def preview_duration(start: str = Query(""), end: str = Query("")):
    """Duration text for a pair of HH:MM times ("" if not computable yet)"""
    return {"start": start, "end": end, "duration": compute_duration(start, end)}


@router.get("/options")
async def form_options():
    """Values offered by the form's selectors"""
    return {
        "customerName": list(CUSTOMER_OPTIONS),
        "location": list(LOCATIONS),
        "temperatureStatus": [s.value for s in TemperatureStatus],
        "deformation": [d.value for d in Deformation],
    }


# Draft (resume an unsubmitted form)

@router.get("/draft", response_model=DraftState)
async def get_draft(session: SessionContext = Depends(get_session)):
    """Saved draft for this session, or the blank template"""
    try:
        record = await draft_store.load_draft(session.session_key)
    except TransportError as e:
        raise HTTPException(status_code=500, detail=e.message)
    return draft_store.to_state(record or draft_store.blank_record())


@router.put("/draft", response_model=DraftState)
async def replace_draft(record: ChargingLogRecord,
                        session: SessionContext = Depends(get_session)):
    """Store the whole form as the session's draft"""
    try:
        return await draft_store.save_draft(session.session_key, record)
    except TransportError as e:
        raise HTTPException(status_code=500, detail=e.message)


@router.patch("/draft", response_model=DraftState)
async def change_draft_field(change: DraftFieldChange,
                             session: SessionContext = Depends(get_session)):
    """Apply one field edit, re-validate and save"""
    try:
        return await draft_store.change_field(session.session_key, change.field, change.value)
    except RecordValidationError as e:
        raise HTTPException(status_code=422, detail={"message": e.message, "errors": e.errors})
    except TransportError as e:
        raise HTTPException(status_code=500, detail=e.message)


@router.delete("/draft")
async def discard_draft(session: SessionContext = Depends(get_session)):
    try:
        removed = await draft_store.clear_draft(session.session_key)
    except TransportError as e:
        raise HTTPException(status_code=500, detail=e.message)
    return {"success": True, "removed": removed}
