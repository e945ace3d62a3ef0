"""
Unit Tests for Smart Question Selection
"""
from resus.core.reasoning import build_questions, generate
from resus.core.reasoning.base import Differential, DifferentialCategory


def _differential(diagnosis_id, probability, *questions):
    return Differential(
        id=diagnosis_id,
        diagnosis=diagnosis_id,
        probability=probability,
        category=DifferentialCategory.URGENT,
        next_questions=questions,
    )


def test_top_is_confirmatory_others_exclusionary():
    questions = build_questions([
        _differential("a", 0.8, "Fever?"),
        _differential("b", 0.5, "Rash?"),
    ])
    assert [(q.text, q.question_type) for q in questions] == [
        ("Fever?", "confirmatory"),
        ("Rash?", "exclusionary"),
    ]
    assert questions[0].id == "a_fever"
    assert questions[1].impact == 0.5


def test_duplicates_owned_by_first_asker():
    questions = build_questions([
        _differential("a", 0.8, "Known diabetes?"),
        _differential("b", 0.6, "Known diabetes?", "Vomiting?"),
    ])
    assert [q.differential_id for q in questions] == ["a", "b"]
    assert questions[1].text == "Vomiting?"


def test_limit_applies_to_differentials():
    differentials = [_differential(str(i), 0.9 - i / 10, f"Q{i}?") for i in range(5)]
    assert [q.text for q in build_questions(differentials)] == ["Q0?", "Q1?", "Q2?"]
    assert len(build_questions(differentials, limit=5)) == 5


def test_empty_input():
    assert build_questions([]) == []


def test_questions_from_real_differentials(dka_adult):
    questions = build_questions(generate(dka_adult))
    assert questions[0].text == "Fruity/sweet breath smell (ketones)?"
    assert all(q.differential_id == "dka" for q in questions)
    assert questions[0].to_dict()["type"] == "confirmatory"
