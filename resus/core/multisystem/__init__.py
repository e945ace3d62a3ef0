"""
Multi-System Layer

Overlap detection, integrated protocols and intervention prioritization for
patients with more than one simultaneous life threat.
"""
from .catalogue import (
    CONDITION_SYSTEMS,
    DANGEROUS_OVERLAPS,
    DEFAULT_RANK,
    INTERVENTION_RANKS,
    DangerousOverlap,
    SystemCategory,
    rank_of,
)
from .overlap import OVERLAP_THRESHOLD, OverlapReport, detect
from .protocols import PROTOCOLS, IntegratedProtocol, ProtocolTemplate, synthesize
from .prioritizer import prioritize

__all__ = [
    "CONDITION_SYSTEMS",
    "DANGEROUS_OVERLAPS",
    "DEFAULT_RANK",
    "INTERVENTION_RANKS",
    "DangerousOverlap",
    "SystemCategory",
    "rank_of",
    "OVERLAP_THRESHOLD",
    "OverlapReport",
    "detect",
    "PROTOCOLS",
    "IntegratedProtocol",
    "ProtocolTemplate",
    "synthesize",
    "prioritize",
]
