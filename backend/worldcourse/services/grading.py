"""Scoring rules for submissions.

Pure functions over question and answer lists, kept free of database access
so the recorder and the manual grading endpoint share one set of rules.

Multiple-choice answers are compared to the stored correct answer as exact,
case-sensitive strings; a missing answer is simply wrong. Text and file
answers score zero until an instructor grades them.
"""
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from worldcourse.errors import ValidationFailed
from worldcourse.models.enums import QuestionType
from worldcourse.utils import percentage

PENDING_FEEDBACK = "Pending manual grading"


@dataclass
class GradingResult:
    score: float
    total_points: float
    percentage: int
    details: list[dict[str, Any]] = field(default_factory=list)
    needs_manual_grading: bool = False


def _answer_at(answers: Sequence[Optional[str]], index: int) -> Optional[str]:
    if index < len(answers):
        return answers[index]
    return None


def auto_grade(questions: Sequence, answers: Sequence[Optional[str]]) -> GradingResult:
    """Grade the objective questions of a submission.

    ``questions`` are in display order; ``answers[i]`` answers ``questions[i]``.
    """
    score = 0.0
    total = 0.0
    details = []
    needs_manual = False

    for index, question in enumerate(questions):
        points = float(question.points or 0)
        total += points
        answer = _answer_at(answers, index)

        if question.type == QuestionType.multiple_choice:
            is_correct = answer is not None and answer == question.correct_answer
            awarded = points if is_correct else 0.0
            details.append({
                "question_index": index,
                "points_awarded": awarded,
                "max_points": points,
                "is_correct": is_correct,
                "feedback": "Correct" if is_correct else "Incorrect",
            })
            score += awarded
        else:
            needs_manual = True
            details.append({
                "question_index": index,
                "points_awarded": 0.0,
                "max_points": points,
                "is_correct": None,
                "feedback": PENDING_FEEDBACK,
            })

    return GradingResult(
        score=score,
        total_points=total,
        percentage=percentage(score, total),
        details=details,
        needs_manual_grading=needs_manual,
    )


def apply_late_penalty(score: float, penalty: Optional[float]) -> float:
    """Reduce a score by the fractional late penalty."""
    if not penalty:
        return score
    return round(score * (1 - penalty), 2)


def manual_grade(questions: Sequence, items: Sequence) -> tuple[float, list[dict[str, Any]]]:
    """Validate an instructor's per-question override and total it.

    ``items`` carry ``question_index``, ``points_awarded`` and ``comments``.
    The returned detail list replaces whatever grading the submission had.
    """
    details = []
    score = 0.0
    for item in sorted(items, key=lambda i: i.question_index):
        if item.question_index >= len(questions):
            raise ValidationFailed(f"Question index {item.question_index} is out of range")
        max_points = float(questions[item.question_index].points or 0)
        if item.points_awarded > max_points:
            raise ValidationFailed(
                f"Question {item.question_index} is worth at most {max_points:g} points"
            )
        details.append({
            "question_index": item.question_index,
            "points_awarded": float(item.points_awarded),
            "max_points": max_points,
            "comments": item.comments,
        })
        score += item.points_awarded
    return float(score), details
