"""
Battery Charging Log - Record Composer
Version: 1.0.0

Builds the submission payload from validated operator records. Pure: no
I/O, and invalid records are rejected, never repaired.
"""

import logging
from typing import Dict, Optional

from models.charging_log import ChargingLogRecord, ChargingLogPayload, DualPayload
from services import record_validator
from services.duration import compute_duration
from services.errors import RecordValidationError

logger = logging.getLogger(__name__)


def resolve_customer_name(record: ChargingLogRecord) -> str:
    """Free-text name replaces the 'Others' sentinel"""
    if record_validator.is_other_customer(record.customer_name):
        return record.customer_name_other.strip()
    return record.customer_name


def recompute_duration(record: ChargingLogRecord) -> ChargingLogRecord:
    """Copy of the record with durationDisplay derived from the charge times"""
    duration = compute_duration(record.charge_time_initial, record.charge_time_final)
    return record.model_copy(update={"duration_display": duration})


def _optional_text(value: str) -> Optional[str]:
    value = value.strip()
    return value or None


def _optional_number(value: str) -> Optional[float]:
    value = value.strip()
    return float(value) if value else None


def _build_payload(record: ChargingLogRecord) -> ChargingLogPayload:
    return ChargingLogPayload(
        battery_id=record.battery_id.strip(),
        date=record.date.strip(),
        customer_name=resolve_customer_name(record),
        zone=record.zone.strip(),
        location=record.location.strip(),
        charge_current_amps=_optional_number(record.charge_current_amps),
        batt_volt_initial=float(record.batt_volt_initial),
        batt_volt_final=float(record.batt_volt_final),
        charge_time_initial=record.charge_time_initial.strip(),
        charge_time_final=record.charge_time_final.strip(),
        duration_display=record.duration_display,
        drone_number=_optional_text(record.drone_number),
        uin=_optional_text(record.uin),
        responsible_person=record.responsible_person.strip(),
        temperature_status=record.temperature_status.strip(),
        deformation=record.deformation.strip(),
        other_notes=_optional_text(record.other_notes),
    )


def compose(record: record_validator.RecordInput) -> ChargingLogPayload:
    """
    Validate one record and turn it into a submission payload.

    Raises:
        RecordValidationError: with the field error map if invalid
    """
    record = recompute_duration(record_validator.as_record(record))
    errors = record_validator.validate(record)
    if errors:
        raise RecordValidationError(errors)
    return _build_payload(record)


def compose_dual(primary: record_validator.RecordInput,
                 secondary: record_validator.RecordInput) -> DualPayload:
    """
    Compose the two records of a dual entry.

    Both records are validated before either is composed; errors are
    reported per side under "primary" / "secondary".
    """
    records = {
        "primary": recompute_duration(record_validator.as_record(primary)),
        "secondary": recompute_duration(record_validator.as_record(secondary)),
    }
    errors: Dict[str, Dict[str, str]] = {}
    for side, record in records.items():
        side_errors = record_validator.validate(record)
        if side_errors:
            errors[side] = side_errors
    if errors:
        logger.info(f"Dual entry rejected, invalid side(s): {', '.join(errors)}")
        raise RecordValidationError(errors, message="Both batteries must be filled in correctly")

    return DualPayload(
        primary=_build_payload(records["primary"]),
        secondary=_build_payload(records["secondary"]),
    )
