"""
Battery Charging Log - Backend Services
Version: 1.1.0

Changelog:
v1.1.0 (2026-10-12): Draft store and session guard
v1.0.0 (2026-09-28): Initial services module
"""

from . import duration
from . import record_validator
from . import record_composer
from . import cycle_classifier
from . import query_builder
from . import export_adapter
from . import charging_log_store
from . import draft_store
