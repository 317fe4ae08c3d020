from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Any
from urllib.parse import urlencode

from mockprep.config import Settings, get_settings
from mockprep.core.instructions import (
    difficulty_instructions,
    job_instructions,
    round_instructions,
    tools_for_role,
)
from mockprep.core.tokens import TokenIssuer
from mockprep.db.base import utcnow
from mockprep.db.models import Candidate, InterviewRound, InterviewSession, JobApplication, JobDescription
from mockprep.db.repositories import Repository
from mockprep.errors import EngineError, InputValidationError, InternalError, NotFoundError
from mockprep.types import (
    DifficultyLevel,
    InterviewRoundType,
    Invitation,
    InvitationPayload,
    JobApplicationStatus,
    RoleCategory,
    RoundStatus,
)

logger = logging.getLogger(__name__)

FIRST_ROUND_NUMBER = 1
FIRST_ROUND_TYPE = InterviewRoundType.skill_assessment


def resolve_role_category(jd_payload: dict[str, Any]) -> RoleCategory:
    value = jd_payload.get("role_category")
    if not value:
        return RoleCategory.engineering
    return RoleCategory.parse(value, RoleCategory.other)


def resolve_difficulty(jd_payload: dict[str, Any]) -> DifficultyLevel:
    return DifficultyLevel.parse(jd_payload.get("difficulty_level"), DifficultyLevel.mid)


def resolve_interview_tools(jd_payload: dict[str, Any], role_category: RoleCategory) -> list[str]:
    # An explicit list wins as stored, including an empty one.
    explicit = jd_payload.get("interview_tools")
    if isinstance(explicit, list):
        return [str(tool) for tool in explicit]
    return [tool.value for tool in tools_for_role(role_category)]


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item) for item in value)
    return str(value)


def build_redirect_url(base_url: str, token: str) -> str:
    return f"{base_url.rstrip('/')}/interview?{urlencode({'token': token})}"


class MockInterviewProvisioner:
    def __init__(
        self,
        repo: Repository,
        issuer: TokenIssuer,
        *,
        settings: Settings | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.repo = repo
        self.issuer = issuer
        self.settings = settings or get_settings()
        self.clock = clock

    def start_interview(self, *, candidate_id: str, mock_job_id: str | None) -> Invitation:
        if not mock_job_id:
            raise InputValidationError("mock_job_id is required")

        job = self.repo.get_mock_job(mock_job_id)
        if job is None:
            raise NotFoundError("Mock job not found")
        candidate = self.repo.get_candidate(candidate_id)
        if candidate is None:
            raise NotFoundError("Candidate not found")

        try:
            with self.repo.transaction():
                application = self.repo.stage_application(
                    candidate_id=candidate.id,
                    job_description_id=job.id,
                    status=JobApplicationStatus.in_progress,
                )
                interview_session = self.repo.stage_session(application_id=application.id)
                interview_round = self.repo.stage_round(
                    session_id=interview_session.id,
                    round_number=FIRST_ROUND_NUMBER,
                    round_type=FIRST_ROUND_TYPE,
                    status=RoundStatus.pending,
                    started_at=self.clock(),
                )
                payload = self._compose_payload(
                    job=job,
                    candidate=candidate,
                    application=application,
                    interview_session=interview_session,
                    interview_round=interview_round,
                )
                token = self.issuer.issue(
                    payload.model_dump(mode="json"),
                    timedelta(hours=self.settings.interview_token_ttl_hours),
                )
        except EngineError:
            raise
        except Exception as exc:
            logger.exception(
                "Failed to provision mock interview candidate_id=%s mock_job_id=%s",
                candidate_id,
                mock_job_id,
            )
            raise InternalError() from exc

        logger.info(
            "Started mock interview candidate_id=%s application_id=%s round_id=%s",
            payload.candidate_id,
            payload.application_id,
            payload.interview_round_id,
        )
        return Invitation(
            token=token,
            token_payload=payload,
            round_id=payload.interview_round_id,
            redirect_url=build_redirect_url(self.settings.interview_frontend_url, token),
        )

    def _compose_payload(
        self,
        *,
        job: JobDescription,
        candidate: Candidate,
        application: JobApplication,
        interview_session: InterviewSession,
        interview_round: InterviewRound,
    ) -> InvitationPayload:
        jd_payload = dict(job.jd_payload or {})
        role_category = resolve_role_category(jd_payload)
        difficulty_level = resolve_difficulty(jd_payload)
        recruiter = self.repo.get_recruiter(job.recruiter_id) if job.recruiter_id else None

        return InvitationPayload(
            candidate_id=candidate.id,
            recruiter_id=job.recruiter_id,
            job_description_id=job.id,
            application_id=application.id,
            interview_session_id=interview_session.id,
            interview_round_id=interview_round.id,
            round_type=interview_round.round_type,
            round_number=interview_round.round_number,
            title=job.title,
            candidate_name=candidate.name,
            recruiter_name=recruiter.name if recruiter else "",
            description=job.description,
            jd_skills=_text(jd_payload.get("skills")),
            jd_experience=_text(jd_payload.get("experience")),
            jd_location=_text(jd_payload.get("location")),
            interview_tools=resolve_interview_tools(jd_payload, role_category),
            role_category=role_category,
            difficulty_level=difficulty_level,
            round_specific_instructions=round_instructions(interview_round.round_type),
            job_specific_instructions=job_instructions(job.title),
            difficulty_instructions=difficulty_instructions(difficulty_level),
        )
