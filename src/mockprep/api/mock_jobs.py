from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from mockprep.api.deps import get_caller, get_db
from mockprep.api.schemas import MockJobCreateRequest, MockJobResponse, MockJobUpdateRequest
from mockprep.core.access import AccessPolicy
from mockprep.core.catalog import MockJobCatalog
from mockprep.db.models import JobDescription
from mockprep.db.repositories import Repository
from mockprep.types import Caller

router = APIRouter(prefix="/job_posting", tags=["mock-jobs"])


def _job_response(job: JobDescription) -> MockJobResponse:
    return MockJobResponse(
        id=job.id,
        title=job.title,
        description=job.description,
        jd_payload=dict(job.jd_payload or {}),
        created_at=job.created_at,
        updated_at=job.updated_at,
    )


def _admin_catalog(caller: Caller, db: Session) -> MockJobCatalog:
    AccessPolicy(caller).require_admin()
    return MockJobCatalog(Repository(db))


@router.post("/create_mock_job")
def create_mock_job(
    payload: MockJobCreateRequest,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
) -> dict:
    job = _admin_catalog(caller, db).create_mock_job(
        title=payload.title,
        description=payload.description,
        jd_payload=payload.jd_payload,
    )
    return {"success": True, "message": "Mock job posting created", "data": _job_response(job)}


@router.get("/get_all_mock_jobs")
def get_all_mock_jobs(caller: Caller = Depends(get_caller), db: Session = Depends(get_db)) -> dict:
    rows = _admin_catalog(caller, db).list_all_mock_jobs()
    data = [
        MockJobResponse(
            id=row.id,
            title=row.title,
            description=row.description,
            jd_payload=row.jd_payload,
            created_at=row.created_at,
            updated_at=row.updated_at,
            attempt_count=row.attempt_count,
        )
        for row in rows
    ]
    return {"success": True, "message": "Mock job postings", "data": data}


@router.get("/get_mock_job_by_id")
def get_mock_job_by_id(
    job_id: str | None = None,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
) -> dict:
    job = _admin_catalog(caller, db).get_mock_job(job_id)
    return {"success": True, "message": "Mock job posting", "data": _job_response(job)}


@router.put("/update_mock_job_by_id")
def update_mock_job_by_id(
    payload: MockJobUpdateRequest,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
) -> dict:
    job = _admin_catalog(caller, db).update_mock_job(
        payload.job_id,
        title=payload.title,
        description=payload.description,
        jd_payload=payload.jd_payload,
    )
    return {"success": True, "message": "Mock job posting updated", "data": _job_response(job)}
