from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class _ValueEnum(str, Enum):
    @classmethod
    def parse(cls, value: Any, default: _ValueEnum) -> Any:
        """Map a raw payload value onto a member, falling back to ``default``."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            normalized = value.strip().lower()
            for member in cls:
                if member.value == normalized:
                    return member
        return default


class UserRole(_ValueEnum):
    candidate = "candidate"
    recruiter = "recruiter"
    admin = "admin"


class RoleCategory(_ValueEnum):
    engineering = "engineering"
    data_analytics = "data_analytics"
    business = "business"
    other = "other"


class DifficultyLevel(_ValueEnum):
    entry = "entry"
    mid = "mid"
    senior = "senior"
    expert = "expert"


class InterviewTool(_ValueEnum):
    code_editor = "code_editor"
    whiteboard = "whiteboard"
    file_upload = "file_upload"


class InterviewRoundType(_ValueEnum):
    skill_assessment = "skill_assessment"
    coding = "coding"
    technical = "technical"
    system_design = "system_design"
    behavioral = "behavioral"
    case_study = "case_study"
    culture_fit = "culture_fit"


class RoundStatus(_ValueEnum):
    pending = "pending"
    in_progress = "in_progress"
    completed = "completed"
    cancelled = "cancelled"


class JobApplicationStatus(_ValueEnum):
    pending = "pending"
    invited = "invited"
    in_progress = "in_progress"
    completed = "completed"
    accepted = "accepted"
    rejected = "rejected"


INVITATION_TOKEN_TYPE = "interview_invitation"


class Caller(BaseModel):
    id: str
    role: UserRole


class JDPayload(BaseModel):
    """Attribute bag stored on a job description; unknown keys are kept."""

    model_config = ConfigDict(extra="allow")

    role_category: RoleCategory | None = None
    difficulty_level: DifficultyLevel | None = None
    skills: list[str] | str = Field(default_factory=list)
    experience: str = ""
    location: str = ""
    employment_type: str = ""
    requirements: list[str] = Field(default_factory=list)
    responsibilities: list[str] = Field(default_factory=list)
    interview_tools: list[InterviewTool] | None = None


class InvitationPayload(BaseModel):
    candidate_id: str
    recruiter_id: str | None = None
    job_description_id: str
    application_id: str
    interview_session_id: str
    interview_round_id: str
    round_type: InterviewRoundType
    round_number: int
    type: Literal["interview_invitation"] = INVITATION_TOKEN_TYPE
    title: str
    candidate_name: str = ""
    recruiter_name: str = ""
    description: str = ""
    jd_skills: str = ""
    jd_experience: str = ""
    jd_location: str = ""
    interview_tools: list[str] = Field(default_factory=list)
    role_category: RoleCategory
    difficulty_level: DifficultyLevel
    round_specific_instructions: str
    job_specific_instructions: str
    difficulty_instructions: str


class Invitation(BaseModel):
    token: str
    token_payload: InvitationPayload
    round_id: str
    redirect_url: str


class RecentAttempt(BaseModel):
    id: str
    title: str
    status: JobApplicationStatus
    created_at: datetime | None = None
    role_category: RoleCategory
    score: float | None = None


class CandidateStats(BaseModel):
    total_attempts: int = 0
    completed_attempts: int = 0
    average_score: int = 0
    recent_attempts: list[RecentAttempt] = Field(default_factory=list)


class RolePerformance(BaseModel):
    role: RoleCategory
    average_score: int
    attempts: int


class LeaderboardEntry(BaseModel):
    candidate_id: str
    name: str
    average_score: int
    total_attempts: int


class PlatformAnalytics(BaseModel):
    total_mock_jobs: int = 0
    total_attempts: int = 0
    completed_attempts: int = 0
    completion_rate: int = 0
    average_score: int = 0
    role_performance: list[RolePerformance] = Field(default_factory=list)
    leaderboard: list[LeaderboardEntry] = Field(default_factory=list)


class RoundReport(BaseModel):
    zero_score: float | None = None
    score_components: dict[str, Any] | None = None
    ai_summary: str | None = None
    report_data: dict[str, Any] | None = None
    report_generated_at: datetime | None = None
    recruiter_decision: str | None = None


class ModelResponse(BaseModel):
    content: str
    raw: dict[str, Any] = Field(default_factory=dict)
