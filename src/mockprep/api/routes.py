from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from mockprep.api.deps import get_caller, get_db, get_jd_drafter, get_token_issuer
from mockprep.api.schemas import GenerateMockJDRequest, StartMockInterviewRequest
from mockprep.core.access import AccessPolicy
from mockprep.core.catalog import MockJobCatalog
from mockprep.core.jd_generator import MockJobDrafter
from mockprep.core.provisioner import MockInterviewProvisioner
from mockprep.core.reports import ReportAggregator
from mockprep.core.tokens import TokenIssuer
from mockprep.db.repositories import Repository
from mockprep.types import Caller

router = APIRouter(prefix="/mockinterview", tags=["mockinterview"])


@router.post("/generate_mock_interview_jd")
def generate_mock_interview_jd(
    payload: GenerateMockJDRequest,
    drafter: MockJobDrafter = Depends(get_jd_drafter),
) -> dict:
    jd = drafter.draft(title=payload.title, description=payload.description)
    return {"success": True, "message": "Mock interview JD generated successfully", "data": jd}


@router.get("/get_mockinterviews")
def get_mockinterviews(caller: Caller = Depends(get_caller), db: Session = Depends(get_db)) -> dict:
    AccessPolicy(caller).require_mock_catalog_access()
    jobs = MockJobCatalog(Repository(db)).list_mock_jobs()
    return {"success": True, "message": "Mock Job Postings!", "data": jobs}


@router.post("/start_mockinterview")
def start_mockinterview(
    payload: StartMockInterviewRequest,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> dict:
    candidate_id = AccessPolicy(caller).require_candidate()
    provisioner = MockInterviewProvisioner(Repository(db), issuer)
    invitation = provisioner.start_interview(candidate_id=candidate_id, mock_job_id=payload.mock_job_id)
    return {"success": True, "message": "Mock interview started", "data": invitation}


@router.get("/get_mockinterview_details_and_attempts")
def get_mockinterview_details_and_attempts(
    mock_job_id: str | None = None,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
) -> dict:
    candidate_id = AccessPolicy(caller).require_candidate()
    data = ReportAggregator(Repository(db)).attempt_history(candidate_id, mock_job_id)
    return {"success": True, "message": "Mock interview details and attempts", "data": data}


@router.get("/get_report")
def get_report(
    round_id: str | None = None,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
) -> dict:
    candidate_id = AccessPolicy(caller).require_candidate()
    report = ReportAggregator(Repository(db)).round_report(candidate_id, round_id)
    return {"success": True, "message": "Report fetched successfully for round", "report": report}


@router.get("/get_my_reports")
def get_my_reports(caller: Caller = Depends(get_caller), db: Session = Depends(get_db)) -> dict:
    candidate_id = AccessPolicy(caller).require_candidate()
    reports = ReportAggregator(Repository(db)).completed_reports(candidate_id)
    return {"success": True, "message": "My reports", "data": reports}


@router.get("/candidate_stats")
def candidate_stats(caller: Caller = Depends(get_caller), db: Session = Depends(get_db)) -> dict:
    candidate_id = AccessPolicy(caller).require_candidate()
    stats = ReportAggregator(Repository(db)).candidate_stats(candidate_id)
    return {"success": True, "message": "Candidate mock interview stats", "data": stats}


@router.get("/analytics")
def analytics(caller: Caller = Depends(get_caller), db: Session = Depends(get_db)) -> dict:
    AccessPolicy(caller).require_admin()
    data = ReportAggregator(Repository(db)).analytics()
    return {"success": True, "message": "Mock interview analytics", "data": data}
