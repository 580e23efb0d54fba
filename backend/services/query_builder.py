"""
Battery Charging Log - Admin Query Builder
Version: 1.0.0

Validates administrator search/export input and returns immutable query
descriptors. A failed build raises QueryValidationError before anything
is sent to the retrieval layer.
"""

import re
from typing import Optional

from models.query import IdentifierQuery, DateRangeQuery, AdminQuery
from services.errors import QueryValidationError

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def build_identifier_query(battery_id: Optional[str]) -> IdentifierQuery:
    battery_id = (battery_id or "").strip()
    if not battery_id:
        raise QueryValidationError("Please enter a Battery ID")
    return IdentifierQuery(battery_id=battery_id)


def build_date_range_query(date_from: Optional[str], date_to: Optional[str]) -> DateRangeQuery:
    """
    Inclusive date range query.

    Dates are fixed-width YYYY-MM-DD strings, so plain string comparison
    orders them correctly.
    """
    date_from = (date_from or "").strip()
    date_to = (date_to or "").strip()
    if not date_from or not date_to:
        raise QueryValidationError("Please select both From and To dates")
    if not _ISO_DATE_RE.match(date_from) or not _ISO_DATE_RE.match(date_to):
        raise QueryValidationError("Dates must be in YYYY-MM-DD format")
    if date_from > date_to:
        raise QueryValidationError("From date cannot be later than To date")
    return DateRangeQuery(date_from=date_from, date_to=date_to)


def build_query(battery_id: Optional[str] = None,
                date_from: Optional[str] = None,
                date_to: Optional[str] = None) -> AdminQuery:
    """Pick the query mode from whichever parameters were supplied"""
    has_id = bool((battery_id or "").strip())
    has_range = bool((date_from or "").strip() or (date_to or "").strip())
    if has_id and has_range:
        raise QueryValidationError("Search by Battery ID or by date range, not both")
    if has_id:
        return build_identifier_query(battery_id)
    if has_range:
        return build_date_range_query(date_from, date_to)
    raise QueryValidationError("Enter a Battery ID or a date range")
