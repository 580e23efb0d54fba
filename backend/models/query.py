"""
Battery Charging Log - Admin Query Models
Version: 1.0.0

Changelog:
v1.0.0 (2026-09-28): Initial query descriptors for admin search/export
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Union
from enum import Enum


class QueryMode(str, Enum):
    """Retrieval mode (mutually exclusive)"""
    IDENTIFIER = "identifier"
    DATE_RANGE = "date_range"


class IdentifierQuery(BaseModel):
    """All charging logs of one battery"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    battery_id: str = Field(..., alias="batteryId", min_length=1)

    @property
    def mode(self) -> QueryMode:
        return QueryMode.IDENTIFIER


class DateRangeQuery(BaseModel):
    """All charging logs dated within [date_from, date_to] inclusive"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    date_from: str = Field(..., alias="dateFrom", description="YYYY-MM-DD")
    date_to: str = Field(..., alias="dateTo", description="YYYY-MM-DD")

    @property
    def mode(self) -> QueryMode:
        return QueryMode.DATE_RANGE


AdminQuery = Union[IdentifierQuery, DateRangeQuery]
