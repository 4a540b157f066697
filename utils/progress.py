"""
Dashboard progress metrics derived from quiz results, training view logs and
assignments that the caller has already fetched.
"""
from dataclasses import dataclass, field
from fractions import Fraction
from typing import Any, Iterable, List, Optional

from models.enums import AssignmentStatus
from utils.scoring import percentage, round_half_up


@dataclass
class ProgressSummary:
    user_id: int
    training_completion_percent: int
    # None means the user has no quiz results yet, which is not the same as 0%
    average_quiz_score_percent: Optional[int]
    quizzes_taken: int
    materials_viewed: int
    total_materials: int
    pending_quizzes: List[Any] = field(default_factory=list)
    pending_assignments: List[Any] = field(default_factory=list)

    @property
    def has_quiz_data(self) -> bool:
        return self.average_quiz_score_percent is not None


def _owned_by(records: Optional[Iterable[Any]], user_id) -> List[Any]:
    return [r for r in (records or []) if r.user_id == user_id]


def average_score(quiz_results: Iterable[Any]) -> Optional[int]:
    scores = [r.percentage_score for r in quiz_results]
    if not scores:
        return None
    return round_half_up(Fraction(sum(scores), len(scores)))


def training_completion(view_logs: Iterable[Any], materials: Iterable[Any]) -> int:
    """Percent of current materials viewed at least once. Logs for materials
    that no longer exist are ignored."""
    material_ids = {m.id for m in materials}
    viewed = {log.material_id for log in view_logs} & material_ids
    return percentage(len(viewed), len(material_ids))


def aggregate_progress(user, quiz_results=None, view_logs=None, materials=None,
                       quizzes=None, assignments=None) -> ProgressSummary:
    """
    Build the progress summary for ``user``.

    Records belonging to other users are skipped, so the full team's results
    and logs can be passed in unfiltered.
    """
    results = _owned_by(quiz_results, user.id)
    logs = _owned_by(view_logs, user.id)
    materials = list(materials or [])
    quizzes = list(quizzes or [])

    taken_quiz_ids = {r.quiz_id for r in results}
    material_ids = {m.id for m in materials}

    return ProgressSummary(
        user_id=user.id,
        training_completion_percent=training_completion(logs, materials),
        average_quiz_score_percent=average_score(results),
        quizzes_taken=len(results),
        materials_viewed=len({log.material_id for log in logs} & material_ids),
        total_materials=len(material_ids),
        pending_quizzes=[q for q in quizzes if q.id not in taken_quiz_ids],
        pending_assignments=[
            a for a in _owned_by(assignments, user.id)
            if a.status == AssignmentStatus.PENDING
        ],
    )
