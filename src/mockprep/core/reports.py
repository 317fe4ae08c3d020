"""Candidate-scoped and platform-scoped score aggregation.

Rounds without a ``zero_score`` are skipped by every average; they are never
counted as zero. All rounding is half-up to the nearest integer.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from mockprep.db.repositories import AttemptRow, Repository, RoundRow, ScoredRoundRow
from mockprep.errors import InputValidationError, NotFoundError
from mockprep.types import (
    CandidateStats,
    JobApplicationStatus,
    LeaderboardEntry,
    PlatformAnalytics,
    RecentAttempt,
    RoleCategory,
    RolePerformance,
    RoundReport,
)

logger = logging.getLogger(__name__)

RECENT_ATTEMPTS_LIMIT = 5
LEADERBOARD_LIMIT = 10


def round_half_up(value: float) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def average_score(scores: Iterable[float | None]) -> int:
    present = [float(score) for score in scores if score is not None]
    if not present:
        return 0
    return round_half_up(sum(present) / len(present))


def completion_rate(completed: int, total: int) -> int:
    if total <= 0:
        return 0
    return round_half_up(100 * completed / total)


def role_category_of(jd_payload: dict[str, Any] | None) -> RoleCategory:
    return RoleCategory.parse((jd_payload or {}).get("role_category"), RoleCategory.other)


def role_performance(rows: Sequence[ScoredRoundRow]) -> list[RolePerformance]:
    grouped: dict[RoleCategory, list[float]] = {}
    for row in rows:
        grouped.setdefault(role_category_of(row.jd_payload), []).append(row.score)

    return [
        RolePerformance(role=role, average_score=average_score(scores), attempts=len(scores))
        for role, scores in grouped.items()
    ]


def leaderboard(rows: Sequence[ScoredRoundRow], limit: int = LEADERBOARD_LIMIT) -> list[LeaderboardEntry]:
    names: dict[str, str] = {}
    grouped: dict[str, list[float]] = {}
    for row in rows:
        names.setdefault(row.candidate_id, row.candidate_name)
        grouped.setdefault(row.candidate_id, []).append(row.score)

    # Ranked on the exact mean; sorted() is stable, so ties keep first-occurrence order.
    ranked = sorted(grouped.items(), key=lambda item: sum(item[1]) / len(item[1]), reverse=True)
    return [
        LeaderboardEntry(
            candidate_id=candidate_id,
            name=names[candidate_id],
            average_score=average_score(scores),
            total_attempts=len(scores),
        )
        for candidate_id, scores in ranked[:limit]
    ]


def first_round_score(attempt: AttemptRow) -> float | None:
    if not attempt.sessions or not attempt.sessions[0].rounds:
        return None
    return attempt.sessions[0].rounds[0].zero_score


def summarize_candidate_attempts(attempts: Sequence[AttemptRow]) -> CandidateStats:
    """Build candidate stats from attempts ordered newest first."""
    completed = [attempt for attempt in attempts if attempt.status == JobApplicationStatus.completed]
    scores = [score for attempt in completed for score in attempt.scores()]

    recent = [
        RecentAttempt(
            id=attempt.application_id,
            title=attempt.title,
            status=attempt.status,
            created_at=attempt.created_at,
            role_category=role_category_of(attempt.jd_payload),
            score=first_round_score(attempt),
        )
        for attempt in attempts[:RECENT_ATTEMPTS_LIMIT]
    ]
    return CandidateStats(
        total_attempts=len(attempts),
        completed_attempts=len(completed),
        average_score=average_score(scores),
        recent_attempts=recent,
    )


def _round_summary(item: RoundRow, *, with_report: bool) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": item.id,
        "zero_score": item.zero_score,
        "ai_summary": item.ai_summary,
        "round_number": item.round_number,
        "round_type": item.round_type,
    }
    if with_report:
        data["report_data"] = item.report_data
        data["report_generated_at"] = item.report_generated_at
        data["recruiter_decision"] = item.recruiter_decision
    return data


def _attempt_summary(attempt: AttemptRow, *, with_report: bool) -> dict[str, Any]:
    return {
        "id": attempt.application_id,
        "job_description_id": attempt.job_description_id,
        "title": attempt.title,
        "created_at": attempt.created_at,
        "status": attempt.status,
        "sessions": [
            {
                "id": session.id,
                "rounds": [_round_summary(item, with_report=with_report) for item in session.rounds],
            }
            for session in attempt.sessions
        ],
    }


class ReportAggregator:
    def __init__(self, repo: Repository):
        self.repo = repo

    def candidate_stats(self, candidate_id: str) -> CandidateStats:
        attempts = self.repo.candidate_attempt_rows(candidate_id)
        return summarize_candidate_attempts(attempts)

    def analytics(self) -> PlatformAnalytics:
        total_mock_jobs = self.repo.count_mock_jobs()
        total_attempts = self.repo.count_mock_applications()
        completed_attempts = self.repo.count_mock_applications(JobApplicationStatus.completed)
        scored = self.repo.scored_mock_round_rows()

        logger.debug(
            "Aggregating analytics jobs=%s attempts=%s scored_rounds=%s",
            total_mock_jobs,
            total_attempts,
            len(scored),
        )
        return PlatformAnalytics(
            total_mock_jobs=total_mock_jobs,
            total_attempts=total_attempts,
            completed_attempts=completed_attempts,
            completion_rate=completion_rate(completed_attempts, total_attempts),
            average_score=average_score(row.score for row in scored),
            role_performance=role_performance(scored),
            leaderboard=leaderboard(scored),
        )

    def attempt_history(self, candidate_id: str, mock_job_id: str | None) -> dict[str, Any]:
        if not mock_job_id:
            raise InputValidationError("mock_job_id is required")

        job = self.repo.get_mock_job(mock_job_id)
        if job is None:
            raise NotFoundError("Mock job not found")

        attempts = self.repo.candidate_attempt_rows(candidate_id, job_description_id=job.id)
        return {
            "mock_job": {
                "id": job.id,
                "title": job.title,
                "description": job.description,
                "jd_payload": dict(job.jd_payload or {}),
                "is_mock": job.is_mock,
                "created_at": job.created_at,
            },
            "attempts": [_attempt_summary(attempt, with_report=False) for attempt in attempts],
        }

    def round_report(self, candidate_id: str, round_id: str | None) -> RoundReport:
        if not round_id:
            raise InputValidationError("Round ID is required")

        interview_round = self.repo.get_candidate_round(candidate_id, round_id)
        if interview_round is None:
            raise NotFoundError("Report not found")

        return RoundReport(
            zero_score=interview_round.zero_score,
            score_components=interview_round.score_components,
            ai_summary=interview_round.ai_summary,
            report_data=interview_round.report_data,
            report_generated_at=interview_round.report_generated_at,
            recruiter_decision=interview_round.recruiter_decision,
        )

    def completed_reports(self, candidate_id: str) -> list[dict[str, Any]]:
        attempts = self.repo.candidate_attempt_rows(candidate_id, status=JobApplicationStatus.completed)
        return [_attempt_summary(attempt, with_report=True) for attempt in attempts]
