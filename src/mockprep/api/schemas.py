from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class GenerateMockJDRequest(BaseModel):
    title: str = ""
    description: str = ""


class StartMockInterviewRequest(BaseModel):
    mock_job_id: str = ""


class MockJobCreateRequest(BaseModel):
    title: str = ""
    description: str = ""
    jd_payload: dict[str, Any] = Field(default_factory=dict)


class MockJobUpdateRequest(BaseModel):
    job_id: str = ""
    title: str | None = None
    description: str | None = None
    jd_payload: dict[str, Any] | None = None


class MockJobResponse(BaseModel):
    id: str
    title: str
    description: str
    jd_payload: dict[str, Any]
    created_at: datetime | None = None
    updated_at: datetime | None = None
    attempt_count: int | None = None
