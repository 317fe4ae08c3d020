from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from mockprep.db.base import Base, TimestampMixin, new_id
from mockprep.types import InterviewRoundType, JobApplicationStatus, RoundStatus


def _enum_values(enum_cls: type[Enum]) -> list[str]:
    return [member.value for member in enum_cls]


def _enum_column(enum_cls: type[Enum]) -> SAEnum:
    return SAEnum(enum_cls, native_enum=False, values_callable=_enum_values, length=40)


class Candidate(TimestampMixin, Base):
    __tablename__ = "candidates"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)


class Recruiter(TimestampMixin, Base):
    __tablename__ = "recruiters"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)


class JobDescription(TimestampMixin, Base):
    __tablename__ = "job_descriptions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    jd_payload: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)
    is_mock: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)
    recruiter_id: Mapped[str | None] = mapped_column(
        ForeignKey("recruiters.id", ondelete="SET NULL"), nullable=True, index=True
    )


class JobApplication(TimestampMixin, Base):
    __tablename__ = "job_applications"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    candidate_id: Mapped[str] = mapped_column(ForeignKey("candidates.id", ondelete="CASCADE"), index=True)
    job_description_id: Mapped[str] = mapped_column(
        ForeignKey("job_descriptions.id", ondelete="CASCADE"), index=True
    )
    status: Mapped[JobApplicationStatus] = mapped_column(
        _enum_column(JobApplicationStatus), default=JobApplicationStatus.pending, nullable=False
    )


class InterviewSession(TimestampMixin, Base):
    __tablename__ = "interview_sessions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    application_id: Mapped[str] = mapped_column(
        ForeignKey("job_applications.id", ondelete="CASCADE"), index=True
    )


class InterviewRound(TimestampMixin, Base):
    __tablename__ = "interview_rounds"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    session_id: Mapped[str] = mapped_column(ForeignKey("interview_sessions.id", ondelete="CASCADE"), index=True)
    round_number: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    round_type: Mapped[InterviewRoundType] = mapped_column(_enum_column(InterviewRoundType), nullable=False)
    status: Mapped[RoundStatus] = mapped_column(
        _enum_column(RoundStatus), default=RoundStatus.pending, nullable=False
    )
    started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    # Written by the grading service; null means not yet scored.
    zero_score: Mapped[float | None] = mapped_column(Float, nullable=True)
    score_components: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    ai_summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    report_data: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    report_generated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    recruiter_decision: Mapped[str | None] = mapped_column(String(40), nullable=True)
