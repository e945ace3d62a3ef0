"""
Multi-System Overlap Detector

Finds conditions that are simultaneously likely and checks them against the
dangerous-overlap catalogue.  A catalogue entry matches only when every one
of its conditions is overlapping; partial matches are ignored.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence

from resus.core.reasoning.base import Differential
from resus.utils import get_logger
from .catalogue import CONDITION_SYSTEMS, DANGEROUS_OVERLAPS, DangerousOverlap, SystemCategory

logger = get_logger(__name__)

# A differential at or above this probability counts as active
OVERLAP_THRESHOLD = 0.6


@dataclass
class OverlapReport:
    overlapping: List[Differential] = field(default_factory=list)
    dangerous_overlaps: List[DangerousOverlap] = field(default_factory=list)
    systems_involved: List[SystemCategory] = field(default_factory=list)

    @property
    def is_multi_system(self) -> bool:
        return len(self.overlapping) >= 2

    def to_dict(self) -> dict:
        return {
            "overlapping": [d.to_dict() for d in self.overlapping],
            "dangerous_overlaps": [o.to_dict() for o in self.dangerous_overlaps],
            "systems_involved": [s.value for s in self.systems_involved],
        }


def detect(differentials: Sequence[Differential]) -> OverlapReport:
    """
    Build the overlap report for a ranked differential list.

    ``systems_involved`` keeps first-seen order across the overlapping
    differentials; ids missing from CONDITION_SYSTEMS contribute nothing.
    """
    overlapping = [d for d in differentials if d.probability >= OVERLAP_THRESHOLD]
    active_ids = {d.id for d in overlapping}

    dangerous = [o for o in DANGEROUS_OVERLAPS if o.conditions <= active_ids]

    systems: List[SystemCategory] = []
    for differential in overlapping:
        for system in CONDITION_SYSTEMS.get(differential.id, ()):
            if system not in systems:
                systems.append(system)

    if dangerous:
        logger.warning(
            "OverlapDetector: dangerous overlap(s): "
            + ", ".join(o.name for o in dangerous)
        )
    elif len(overlapping) >= 2:
        logger.info(
            f"OverlapDetector: {len(overlapping)} overlapping condition(s) with no catalogued protocol"
        )
    return OverlapReport(
        overlapping=overlapping,
        dangerous_overlaps=dangerous,
        systems_involved=systems,
    )
