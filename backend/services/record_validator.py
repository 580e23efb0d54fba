"""
Battery Charging Log - Record Validator
Version: 1.1.0

Changelog:
v1.1.0 (2026-10-12): Single canonical mandatory-field set for single and
                      dual entry; format checks for times, date and selectors
v1.0.0 (2026-09-28): Initial field validation

Validates a charging log record and returns a field-keyed error map
(wire field name -> message). An empty map means the record may be
submitted. The same call is used after every field change and as the
final gate before submission; it holds no state.
"""

import math
import re
from datetime import date
from typing import Dict, Union, Mapping, Any

from config import settings
from models.charging_log import (
    ChargingLogRecord, TemperatureStatus, Deformation, LOCATIONS,
)
from services.duration import parse_clock

REQUIRED_MESSAGE = "This field is required"
OTHER_CUSTOMER_MESSAGE = "Please enter customer name"
NUMBER_MESSAGE = "Must be a number"
TIME_MESSAGE = "Must be a time (HH:MM)"
DATE_MESSAGE = "Must be a date (YYYY-MM-DD)"

# Must be non-blank for the record to be submitted
MANDATORY_FIELDS = (
    "battery_id",
    "date",
    "customer_name",
    "zone",
    "location",
    "batt_volt_initial",
    "batt_volt_final",
    "charge_time_initial",
    "charge_time_final",
    "responsible_person",
    "temperature_status",
    "deformation",
)

NUMERIC_FIELDS = ("charge_current_amps", "batt_volt_initial", "batt_volt_final")
TIME_FIELDS = ("charge_time_initial", "charge_time_final")

CHOICES = {
    "location": LOCATIONS,
    "temperature_status": tuple(s.value for s in TemperatureStatus),
    "deformation": tuple(d.value for d in Deformation),
}

_NUMBER_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")
_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

RecordInput = Union[ChargingLogRecord, Mapping[str, Any]]


def is_number(value: str) -> bool:
    """Finite base-10 decimal literal (no hex, inf or nan, no overflow like 1e999)"""
    value = value.strip()
    return bool(_NUMBER_RE.match(value)) and math.isfinite(float(value))


def is_iso_date(value: str) -> bool:
    value = value.strip()
    if not _ISO_DATE_RE.match(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def is_other_customer(customer_name: str) -> bool:
    return customer_name.strip() == settings.CUSTOMER_OTHER_SENTINEL


def as_record(record: RecordInput) -> ChargingLogRecord:
    if isinstance(record, ChargingLogRecord):
        return record
    return ChargingLogRecord.model_validate(dict(record))


class RecordValidator:
    """Field presence, conditional and format rules for a charging log"""

    def validate(self, record: RecordInput) -> Dict[str, str]:
        record = as_record(record)
        errors: Dict[str, str] = {}

        for attribute in ChargingLogRecord.model_fields:
            text = getattr(record, attribute).strip()
            wire = ChargingLogRecord.wire_name(attribute)

            if not text:
                if attribute in MANDATORY_FIELDS:
                    errors[wire] = REQUIRED_MESSAGE
                continue

            message = self._check_format(attribute, text)
            if message:
                errors[wire] = message

        if is_other_customer(record.customer_name) and not record.customer_name_other.strip():
            errors[ChargingLogRecord.wire_name("customer_name_other")] = OTHER_CUSTOMER_MESSAGE

        return errors

    def _check_format(self, attribute: str, text: str) -> str | None:
        if attribute in NUMERIC_FIELDS and not is_number(text):
            return NUMBER_MESSAGE
        if attribute in TIME_FIELDS and parse_clock(text) is None:
            return TIME_MESSAGE
        if attribute == "date" and not is_iso_date(text):
            return DATE_MESSAGE
        allowed = CHOICES.get(attribute)
        if allowed and text not in allowed:
            if len(allowed) > 5:
                return "Please select a value from the list"
            return f"Must be one of: {', '.join(allowed)}"
        return None


# Singleton
_validator = RecordValidator()


def validate(record: RecordInput) -> Dict[str, str]:
    return _validator.validate(record)


def is_valid(record: RecordInput) -> bool:
    return not _validator.validate(record)
