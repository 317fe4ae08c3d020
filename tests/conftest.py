from __future__ import annotations

import os
import tempfile
from datetime import UTC, datetime
from pathlib import Path

_TEST_DB = Path(tempfile.mkdtemp(prefix="mockprep-tests-")) / "mockprep.db"
os.environ["DATABASE_URL"] = f"sqlite:///{_TEST_DB}"
os.environ["DATA_DIR"] = str(_TEST_DB.parent)
os.environ["APP_ENV"] = "test"
os.environ["SEED_MOCK_JOBS"] = "false"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["INTERVIEW_FRONTEND_URL"] = "https://interview.example.com"

import pytest  # noqa: E402

from mockprep.db import models  # noqa: E402,F401
from mockprep.db.base import Base  # noqa: E402
from mockprep.db.models import (  # noqa: E402
    Candidate,
    InterviewRound,
    InterviewSession,
    JobApplication,
    JobDescription,
    Recruiter,
)
from mockprep.db.session import SessionLocal, engine  # noqa: E402
from mockprep.types import InterviewRoundType, JobApplicationStatus, RoundStatus  # noqa: E402


@pytest.fixture(autouse=True)
def reset_db() -> None:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


class Factory:
    def __init__(self, db) -> None:
        self.db = db
        self._counter = 0

    def _next(self) -> int:
        self._counter += 1
        return self._counter

    def candidate(self, name: str = "Ada Lovelace") -> Candidate:
        item = Candidate(name=name, email=f"candidate{self._next()}@example.com")
        self.db.add(item)
        self.db.commit()
        return item

    def recruiter(self, name: str = "Grace Hopper") -> Recruiter:
        item = Recruiter(name=name, email=f"recruiter{self._next()}@example.com")
        self.db.add(item)
        self.db.commit()
        return item

    def job(
        self,
        title: str = "Backend Engineer",
        *,
        jd_payload: dict | None = None,
        is_mock: bool = True,
        recruiter_id: str | None = None,
        description: str = "Build and operate APIs.",
    ) -> JobDescription:
        item = JobDescription(
            title=title,
            description=description,
            jd_payload=jd_payload or {},
            is_mock=is_mock,
            recruiter_id=recruiter_id,
        )
        self.db.add(item)
        self.db.commit()
        return item

    def attempt(
        self,
        candidate: Candidate,
        job: JobDescription,
        *,
        status: JobApplicationStatus = JobApplicationStatus.completed,
        scores: list[float | None] | None = None,
        created_at: datetime | None = None,
    ) -> JobApplication:
        application = JobApplication(
            candidate_id=candidate.id,
            job_description_id=job.id,
            status=status,
        )
        if created_at is not None:
            application.created_at = created_at
        self.db.add(application)
        self.db.flush()

        interview_session = InterviewSession(application_id=application.id)
        self.db.add(interview_session)
        self.db.flush()

        for number, score in enumerate(scores or [], start=1):
            self.db.add(
                InterviewRound(
                    session_id=interview_session.id,
                    round_number=number,
                    round_type=InterviewRoundType.skill_assessment,
                    status=RoundStatus.completed if score is not None else RoundStatus.pending,
                    started_at=datetime.now(UTC),
                    zero_score=score,
                    ai_summary=f"summary {number}" if score is not None else None,
                )
            )
        self.db.commit()
        return application


@pytest.fixture
def db():
    with SessionLocal() as session:
        yield session


@pytest.fixture
def factory(db) -> Factory:
    return Factory(db)
