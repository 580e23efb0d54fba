"""
Battery Charging Log - Charging Log Models
Version: 1.1.0

Changelog:
v1.1.0 (2026-10-12): Accept legacy form field names (id, droneno, temp, ...)
v1.0.0 (2026-09-28): Initial charging log models
"""

from pydantic import BaseModel, ConfigDict, Field, AliasChoices, field_validator
from typing import Optional, Dict, List, Any
from datetime import datetime
from enum import Enum


class TemperatureStatus(str, Enum):
    """Battery temperature observed after charging"""
    NORMAL = "Normal"
    OVERHEAT = "Overheat"


class Deformation(str, Enum):
    """Visible deformation of the battery pack"""
    YES = "Yes"
    NO = "No"


CUSTOMER_OPTIONS = ("IFFCO", "CIL", "Others")

# States and union territories offered in the location selector
LOCATIONS = (
    "Andhra Pradesh",
    "Arunachal Pradesh",
    "Assam",
    "Bihar",
    "Chhattisgarh",
    "Goa",
    "Gujarat",
    "Haryana",
    "Himachal Pradesh",
    "Jharkhand",
    "Karnataka",
    "Kerala",
    "Madhya Pradesh",
    "Maharashtra",
    "Manipur",
    "Meghalaya",
    "Mizoram",
    "Nagaland",
    "Odisha",
    "Punjab",
    "Rajasthan",
    "Sikkim",
    "Tamil Nadu",
    "Telangana",
    "Tripura",
    "Uttar Pradesh",
    "Uttarakhand",
    "West Bengal",
    "Andaman and Nicobar Islands",
    "Chandigarh",
    "Dadra & Nagar Haveli and Daman & Diu",
    "Delhi (NCT)",
    "Jammu & Kashmir",
    "Ladakh",
    "Lakshadweep",
    "Puducherry",
)


def _wire(name: str, *legacy: str, description: str = ""):
    """Raw form field: camelCase on the wire, legacy form names accepted"""
    return Field(
        "",
        validation_alias=AliasChoices(name, *legacy),
        serialization_alias=name,
        description=description,
    )


class ChargingLogRecord(BaseModel):
    """
    One operator submission as typed into the form.

    Every field is kept as the raw string the operator entered; blank
    fields are "" (the blank template). Validation and coercion happen in
    services.record_validator / services.record_composer.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    battery_id: str = _wire("batteryId", "id", description="Battery ID")
    date: str = _wire("date", description="Charging date (YYYY-MM-DD)")
    customer_name: str = _wire("customerName", description="Customer or 'Others'")
    customer_name_other: str = _wire(
        "customerNameOther", "customerNameCustom",
        description="Free-text customer name when customerName is 'Others'")
    zone: str = _wire("zone")
    location: str = _wire("location", description="State / union territory")
    charge_current_amps: str = _wire("chargeCurrentAmps", "chargeCurrent",
                                     description="Charge current (A)")
    batt_volt_initial: str = _wire("battVoltInitial", description="Initial voltage (V)")
    batt_volt_final: str = _wire("battVoltFinal", description="Final voltage (V)")
    charge_time_initial: str = _wire("chargeTimeInitial", description="Start time HH:MM")
    charge_time_final: str = _wire("chargeTimeFinal", description="End time HH:MM")
    duration_display: str = _wire("durationDisplay", "duration",
                                  description="Derived from the charge times")
    drone_number: str = _wire("droneNumber", "droneno")
    uin: str = _wire("uin", description="UIN of UAS")
    responsible_person: str = _wire("responsiblePerson", "name")
    temperature_status: str = _wire("temperatureStatus", "temp")
    deformation: str = _wire("deformation")
    other_notes: str = _wire("otherNotes", "others")

    @field_validator("*", mode="before")
    @classmethod
    def _as_text(cls, value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, Enum):
            return str(value.value)
        return value if isinstance(value, str) else str(value)

    @classmethod
    def wire_name(cls, attribute: str) -> str:
        """camelCase wire name for a Python attribute"""
        return cls.model_fields[attribute].serialization_alias

    @classmethod
    def resolve_field(cls, name: str) -> Optional[str]:
        """Map a wire, legacy or attribute name to the Python attribute"""
        for attribute, info in cls.model_fields.items():
            if name == attribute or name in info.validation_alias.choices:
                return attribute
        return None

    def to_wire(self) -> Dict[str, str]:
        return self.model_dump(by_alias=True)


class ChargingLogPayload(BaseModel):
    """Composed record ready for persistence"""
    model_config = ConfigDict(populate_by_name=True)

    battery_id: str = Field(..., alias="batteryId")
    date: str
    customer_name: str = Field(..., alias="customerName")
    zone: str
    location: str
    charge_current_amps: Optional[float] = Field(None, alias="chargeCurrentAmps")
    batt_volt_initial: float = Field(..., alias="battVoltInitial")
    batt_volt_final: float = Field(..., alias="battVoltFinal")
    charge_time_initial: str = Field(..., alias="chargeTimeInitial")
    charge_time_final: str = Field(..., alias="chargeTimeFinal")
    duration_display: str = Field(..., alias="durationDisplay")
    drone_number: Optional[str] = Field(None, alias="droneNumber")
    uin: Optional[str] = None
    responsible_person: str = Field(..., alias="responsiblePerson")
    temperature_status: TemperatureStatus = Field(..., alias="temperatureStatus")
    deformation: Deformation
    other_notes: Optional[str] = Field(None, alias="otherNotes")


class DualPayload(BaseModel):
    """Two composed records sharing one submit action"""
    primary: ChargingLogPayload
    secondary: ChargingLogPayload


class SubmissionResult(BaseModel):
    """Response of the submission endpoint"""
    model_config = ConfigDict(populate_by_name=True)

    message: str
    charging_cycle: Optional[int] = Field(None, alias="chargingCycle")
    cycles: Dict[str, int] = Field(default_factory=dict,
                                   description="Running cycle count per submitted battery")


class CycleLookupResult(BaseModel):
    """Cycle count for a battery with its display classification"""
    model_config = ConfigDict(populate_by_name=True)

    battery_id: str = Field(..., alias="batteryId")
    cycles: int = Field(..., ge=0)
    tier: str
    critical_marker: bool = Field(False, alias="criticalMarker")
    color: str
    label: str


class DraftFieldChange(BaseModel):
    """Single field mutation typed by the operator"""
    field: str
    value: Optional[str] = ""


class DraftState(BaseModel):
    """Current draft with its live validation result"""
    model_config = ConfigDict(populate_by_name=True)

    record: Dict[str, str]
    errors: Dict[str, str] = Field(default_factory=dict)
    is_valid: bool = Field(False, alias="isValid")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")


class TableView(BaseModel):
    """On-screen projection of search rows"""
    columns: List[str] = Field(default_factory=list)
    rows: List[List[Any]] = Field(default_factory=list)
    message: Optional[str] = None
