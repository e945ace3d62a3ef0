"""Orders interventions so airway and breathing threats always come first."""
from __future__ import annotations

from typing import Iterable, List

from resus.core.interventions.base import Intervention
from .catalogue import rank_of


def prioritize(interventions: Iterable[Intervention]) -> List[Intervention]:
    """
    Return a new list sorted by urgency rank.

    Equal ranks keep their input order; ids missing from the rank table
    sort last with rank 100.
    """
    return sorted(interventions, key=lambda i: rank_of(i.id))
