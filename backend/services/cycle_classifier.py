"""
Battery Charging Log - Cycle Classifier
Version: 1.0.0

Maps a battery's charging cycle count to the severity tier shown next to
the lookup result. The colour tier and the "Critical!" marker use two
separate thresholds (450 and 500 by default).
"""

from dataclasses import dataclass
from enum import Enum

from config import settings


class CycleTier(str, Enum):
    NONE = "none"
    NORMAL = "normal"
    WARNING = "warning"
    CRITICAL = "critical"


TIER_COLORS = {
    CycleTier.NONE: "gray",
    CycleTier.NORMAL: "green",
    CycleTier.WARNING: "yellow",
    CycleTier.CRITICAL: "red",
}


@dataclass(frozen=True)
class CycleStatus:
    count: int
    tier: CycleTier
    critical_marker: bool = False

    @property
    def color(self) -> str:
        return TIER_COLORS[self.tier]

    @property
    def label(self) -> str:
        text = f"Cycles: {self.count}"
        if self.critical_marker:
            text += " Critical!"
        return text


def classify(count: int) -> CycleStatus:
    """Severity tier for a cycle count; total over non-negative counts"""
    if count <= 0:
        return CycleStatus(count=0, tier=CycleTier.NONE)
    if count <= settings.CYCLE_NORMAL_MAX:
        tier = CycleTier.NORMAL
    elif count <= settings.CYCLE_WARNING_MAX:
        tier = CycleTier.WARNING
    else:
        tier = CycleTier.CRITICAL
    return CycleStatus(
        count=count,
        tier=tier,
        critical_marker=count > settings.CYCLE_CRITICAL_MARKER,
    )
