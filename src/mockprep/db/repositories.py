from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from sqlalchemy import and_, func, select
from sqlalchemy.orm import Session

from mockprep.db.models import (
    Candidate,
    InterviewRound,
    InterviewSession,
    JobApplication,
    JobDescription,
    Recruiter,
)
from mockprep.types import InterviewRoundType, JobApplicationStatus, RoundStatus


@dataclass(slots=True)
class RoundRow:
    id: str
    round_number: int
    round_type: InterviewRoundType
    status: RoundStatus
    zero_score: float | None
    ai_summary: str | None
    score_components: dict[str, Any] | None
    report_data: dict[str, Any] | None
    report_generated_at: datetime | None
    recruiter_decision: str | None


@dataclass(slots=True)
class SessionRow:
    id: str
    rounds: list[RoundRow] = field(default_factory=list)


@dataclass(slots=True)
class AttemptRow:
    application_id: str
    job_description_id: str
    status: JobApplicationStatus
    created_at: datetime | None
    title: str
    jd_payload: dict[str, Any]
    sessions: list[SessionRow] = field(default_factory=list)

    def scores(self) -> list[float | None]:
        return [round_.zero_score for session in self.sessions for round_ in session.rounds]


@dataclass(slots=True)
class ScoredRoundRow:
    application_id: str
    candidate_id: str
    candidate_name: str
    jd_payload: dict[str, Any]
    score: float


@dataclass(slots=True)
class MockJobRow:
    id: str
    title: str
    description: str
    jd_payload: dict[str, Any]
    created_at: datetime | None
    updated_at: datetime | None
    attempt_count: int = 0


class Repository:
    def __init__(self, session: Session):
        self.session = session

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """Commit everything staged inside the block, or roll all of it back."""
        try:
            yield self.session
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    def create_candidate(self, name: str, email: str) -> Candidate:
        candidate = Candidate(name=name, email=email)
        self.session.add(candidate)
        self.session.commit()
        self.session.refresh(candidate)
        return candidate

    def get_candidate(self, candidate_id: str) -> Candidate | None:
        return self.session.get(Candidate, candidate_id)

    def get_recruiter(self, recruiter_id: str) -> Recruiter | None:
        return self.session.get(Recruiter, recruiter_id)

    def create_job(
        self,
        *,
        title: str,
        description: str,
        jd_payload: dict[str, Any] | None = None,
        is_mock: bool = False,
        recruiter_id: str | None = None,
    ) -> JobDescription:
        job = JobDescription(
            title=title,
            description=description,
            jd_payload=jd_payload or {},
            is_mock=is_mock,
            recruiter_id=recruiter_id,
        )
        self.session.add(job)
        self.session.commit()
        self.session.refresh(job)
        return job

    def get_mock_job(self, job_id: str) -> JobDescription | None:
        statement = select(JobDescription).where(
            and_(JobDescription.id == job_id, JobDescription.is_mock.is_(True))
        )
        return self.session.scalar(statement)

    def list_mock_jobs(self) -> list[JobDescription]:
        statement = (
            select(JobDescription)
            .where(JobDescription.is_mock.is_(True))
            .order_by(JobDescription.created_at.desc())
        )
        return list(self.session.scalars(statement).all())

    def list_mock_job_rows(self) -> list[MockJobRow]:
        attempts = (
            select(JobApplication.job_description_id, func.count(JobApplication.id).label("attempts"))
            .group_by(JobApplication.job_description_id)
            .subquery()
        )
        statement = (
            select(JobDescription, func.coalesce(attempts.c.attempts, 0))
            .outerjoin(attempts, attempts.c.job_description_id == JobDescription.id)
            .where(JobDescription.is_mock.is_(True))
            .order_by(JobDescription.created_at.desc())
        )
        return [
            MockJobRow(
                id=job.id,
                title=job.title,
                description=job.description,
                jd_payload=dict(job.jd_payload or {}),
                created_at=job.created_at,
                updated_at=job.updated_at,
                attempt_count=int(count),
            )
            for job, count in self.session.execute(statement).all()
        ]

    def update_mock_job(self, job_id: str, values: dict[str, Any]) -> JobDescription:
        job = self.get_mock_job(job_id)
        if job is None:
            raise ValueError(f"mock job {job_id} not found")

        for key, value in values.items():
            setattr(job, key, value)
        self.session.commit()
        self.session.refresh(job)
        return job

    def count_mock_jobs(self) -> int:
        statement = select(func.count(JobDescription.id)).where(JobDescription.is_mock.is_(True))
        return int(self.session.scalar(statement) or 0)

    def count_mock_applications(self, status: JobApplicationStatus | None = None) -> int:
        statement = (
            select(func.count(JobApplication.id))
            .join(JobDescription, JobDescription.id == JobApplication.job_description_id)
            .where(JobDescription.is_mock.is_(True))
        )
        if status is not None:
            statement = statement.where(JobApplication.status == status)
        return int(self.session.scalar(statement) or 0)

    # Staging helpers flush without committing; callers wrap them in transaction().

    def stage_application(
        self,
        *,
        candidate_id: str,
        job_description_id: str,
        status: JobApplicationStatus,
    ) -> JobApplication:
        application = JobApplication(
            candidate_id=candidate_id,
            job_description_id=job_description_id,
            status=status,
        )
        self.session.add(application)
        self.session.flush()
        return application

    def stage_session(self, *, application_id: str) -> InterviewSession:
        interview_session = InterviewSession(application_id=application_id)
        self.session.add(interview_session)
        self.session.flush()
        return interview_session

    def stage_round(
        self,
        *,
        session_id: str,
        round_number: int,
        round_type: InterviewRoundType,
        status: RoundStatus,
        started_at: datetime,
    ) -> InterviewRound:
        interview_round = InterviewRound(
            session_id=session_id,
            round_number=round_number,
            round_type=round_type,
            status=status,
            started_at=started_at,
        )
        self.session.add(interview_round)
        self.session.flush()
        return interview_round

    def candidate_attempt_rows(
        self,
        candidate_id: str,
        *,
        job_description_id: str | None = None,
        status: JobApplicationStatus | None = None,
    ) -> list[AttemptRow]:
        """Mock attempts of one candidate, newest first, with sessions and rounds attached."""
        statement = (
            select(JobApplication, JobDescription.title, JobDescription.jd_payload)
            .join(JobDescription, JobDescription.id == JobApplication.job_description_id)
            .where(
                and_(
                    JobApplication.candidate_id == candidate_id,
                    JobDescription.is_mock.is_(True),
                )
            )
            .order_by(JobApplication.created_at.desc(), JobApplication.id.asc())
        )
        if job_description_id is not None:
            statement = statement.where(JobApplication.job_description_id == job_description_id)
        if status is not None:
            statement = statement.where(JobApplication.status == status)

        attempts: dict[str, AttemptRow] = {}
        for application, title, jd_payload in self.session.execute(statement).all():
            attempts[application.id] = AttemptRow(
                application_id=application.id,
                job_description_id=application.job_description_id,
                status=application.status,
                created_at=application.created_at,
                title=title,
                jd_payload=dict(jd_payload or {}),
            )
        if not attempts:
            return []

        round_statement = (
            select(InterviewSession, InterviewRound)
            .outerjoin(InterviewRound, InterviewRound.session_id == InterviewSession.id)
            .where(InterviewSession.application_id.in_(list(attempts)))
            .order_by(
                InterviewSession.created_at.asc(),
                InterviewSession.id.asc(),
                InterviewRound.round_number.asc(),
            )
        )
        sessions: dict[str, SessionRow] = {}
        for interview_session, interview_round in self.session.execute(round_statement).all():
            session_row = sessions.get(interview_session.id)
            if session_row is None:
                session_row = SessionRow(id=interview_session.id)
                sessions[interview_session.id] = session_row
                attempts[interview_session.application_id].sessions.append(session_row)
            if interview_round is not None:
                session_row.rounds.append(_round_row(interview_round))

        return list(attempts.values())

    def get_candidate_round(self, candidate_id: str, round_id: str) -> InterviewRound | None:
        statement = (
            select(InterviewRound)
            .join(InterviewSession, InterviewSession.id == InterviewRound.session_id)
            .join(JobApplication, JobApplication.id == InterviewSession.application_id)
            .where(
                and_(
                    InterviewRound.id == round_id,
                    JobApplication.candidate_id == candidate_id,
                )
            )
        )
        return self.session.scalar(statement)

    def scored_mock_round_rows(self) -> list[ScoredRoundRow]:
        """Scored rounds of completed mock applications, oldest application first."""
        statement = (
            select(
                InterviewRound.zero_score,
                JobApplication.id,
                Candidate.id,
                Candidate.name,
                JobDescription.jd_payload,
            )
            .join(InterviewSession, InterviewSession.id == InterviewRound.session_id)
            .join(JobApplication, JobApplication.id == InterviewSession.application_id)
            .join(JobDescription, JobDescription.id == JobApplication.job_description_id)
            .join(Candidate, Candidate.id == JobApplication.candidate_id)
            .where(
                and_(
                    JobDescription.is_mock.is_(True),
                    JobApplication.status == JobApplicationStatus.completed,
                    InterviewRound.zero_score.is_not(None),
                )
            )
            .order_by(
                JobApplication.created_at.asc(),
                JobApplication.id.asc(),
                InterviewSession.created_at.asc(),
                InterviewRound.round_number.asc(),
            )
        )
        return [
            ScoredRoundRow(
                application_id=application_id,
                candidate_id=candidate_id,
                candidate_name=candidate_name,
                jd_payload=dict(jd_payload or {}),
                score=float(score),
            )
            for score, application_id, candidate_id, candidate_name, jd_payload in self.session.execute(
                statement
            ).all()
        ]


def _round_row(item: InterviewRound) -> RoundRow:
    return RoundRow(
        id=item.id,
        round_number=item.round_number,
        round_type=item.round_type,
        status=item.status,
        zero_score=item.zero_score,
        ai_summary=item.ai_summary,
        score_components=item.score_components,
        report_data=item.report_data,
        report_generated_at=item.report_generated_at,
        recruiter_decision=item.recruiter_decision,
    )
