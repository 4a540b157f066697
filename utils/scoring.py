"""
Quiz scoring.

Pure functions over an already-loaded quiz and a worker's answer sheet. The
quiz may be an ORM ``Quiz`` or any object whose ``questions`` items expose
``correct_option`` and ``points``.
"""
from dataclasses import dataclass
from fractions import Fraction
from typing import Optional, Sequence, Union


class InvalidAttemptError(ValueError):
    """Raised when an answer sheet does not line up with the quiz."""


@dataclass(frozen=True)
class QuizScore:
    correct_count: int
    incorrect_count: int
    earned_points: int
    total_points: int
    percentage_score: int


def round_half_up(value: Union[Fraction, int]) -> int:
    """Round a non-negative rational to the nearest integer, halves going up."""
    value = Fraction(value)
    if value < 0:
        raise ValueError("round_half_up expects a non-negative value")
    return int(value + Fraction(1, 2))


def percentage(part: int, whole: int) -> int:
    """Whole-number percentage of ``part`` in ``whole``; 0 for an empty whole."""
    if whole <= 0:
        return 0
    return round_half_up(Fraction(part * 100, whole))


def score_quiz(quiz, answers: Sequence[Optional[int]]) -> QuizScore:
    """
    Score an attempt.

    Args:
        quiz: Quiz with an ordered ``questions`` sequence
        answers: Selected option index per question, ``None`` when unanswered

    Returns:
        QuizScore for the attempt

    Raises:
        InvalidAttemptError: If the answer count differs from the question count
    """
    questions = list(quiz.questions)
    if len(answers) != len(questions):
        raise InvalidAttemptError(
            f"Expected {len(questions)} answers, got {len(answers)}"
        )

    correct_count = 0
    earned_points = 0
    total_points = 0
    for question, answer in zip(questions, answers):
        total_points += question.points
        # bool is an int subclass; True must not match option 1
        if answer is not None and not isinstance(answer, bool) and answer == question.correct_option:
            correct_count += 1
            earned_points += question.points

    return QuizScore(
        correct_count=correct_count,
        incorrect_count=len(questions) - correct_count,
        earned_points=earned_points,
        total_points=total_points,
        percentage_score=percentage(earned_points, total_points),
    )
