from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from mockprep.db.models import JobDescription
from mockprep.db.repositories import MockJobRow, Repository
from mockprep.errors import InputValidationError, NotFoundError
from mockprep.types import JDPayload

logger = logging.getLogger(__name__)


def validate_jd_payload(raw: dict[str, Any] | None) -> dict[str, Any]:
    try:
        payload = JDPayload.model_validate(raw or {})
    except ValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        raise InputValidationError(f"Invalid jd_payload field '{location}': {first.get('msg', '')}") from exc
    return payload.model_dump(mode="json", exclude_none=True)


def _require_text(value: str | None, field: str) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise InputValidationError(f"{field} is required")
    return cleaned


class MockJobCatalog:
    def __init__(self, repo: Repository):
        self.repo = repo

    def list_mock_jobs(self) -> list[dict[str, Any]]:
        return [
            {"id": job.id, "title": job.title, "description": job.description}
            for job in self.repo.list_mock_jobs()
        ]

    def list_all_mock_jobs(self) -> list[MockJobRow]:
        return self.repo.list_mock_job_rows()

    def get_mock_job(self, job_id: str | None) -> JobDescription:
        if not job_id:
            raise InputValidationError("job_id is required")
        job = self.repo.get_mock_job(job_id)
        if job is None:
            raise NotFoundError("Mock job not found")
        return job

    def create_mock_job(
        self,
        *,
        title: str | None,
        description: str | None,
        jd_payload: dict[str, Any] | None,
    ) -> JobDescription:
        job = self.repo.create_job(
            title=_require_text(title, "title"),
            description=_require_text(description, "description"),
            jd_payload=validate_jd_payload(jd_payload),
            is_mock=True,
        )
        logger.info("Created mock job job_id=%s", job.id)
        return job

    def update_mock_job(
        self,
        job_id: str | None,
        *,
        title: str | None = None,
        description: str | None = None,
        jd_payload: dict[str, Any] | None = None,
    ) -> JobDescription:
        job = self.get_mock_job(job_id)

        values: dict[str, Any] = {}
        if title is not None:
            values["title"] = _require_text(title, "title")
        if description is not None:
            values["description"] = _require_text(description, "description")
        if jd_payload is not None:
            values["jd_payload"] = validate_jd_payload(jd_payload)
        if not values:
            return job

        updated = self.repo.update_mock_job(job.id, values)
        logger.info("Updated mock job job_id=%s fields=%s", updated.id, sorted(values))
        return updated
