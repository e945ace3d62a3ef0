"""
Smart clarifying questions drawn from the leading differentials.

The leading differential's questions confirm it; questions from the
runners-up help rule those alternatives out.
"""
from __future__ import annotations

import re
from typing import List, Sequence

from .base import ClinicalQuestion, Differential

DEFAULT_QUESTION_LIMIT = 3


def _slug(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "_", text.lower()).strip("_")[:48]


def build_questions(differentials: Sequence[Differential], limit: int = DEFAULT_QUESTION_LIMIT) -> List[ClinicalQuestion]:
    """
    Collect questions from the top ``limit`` differentials in rank order.

    Questions are deduplicated by text; the first differential to ask a
    question owns it.
    """
    seen = set()
    questions: List[ClinicalQuestion] = []
    for rank, differential in enumerate(differentials[:limit]):
        question_type = "confirmatory" if rank == 0 else "exclusionary"
        for text in differential.next_questions:
            if text in seen:
                continue
            seen.add(text)
            questions.append(ClinicalQuestion(
                id=f"{differential.id}_{_slug(text)}",
                text=text,
                question_type=question_type,
                differential_id=differential.id,
                impact=differential.probability,
            ))
    return questions
