import json

from fastapi.testclient import TestClient
from typer.testing import CliRunner

from mockprep.api.app import create_app
from mockprep.cli.app import app as cli_app
from mockprep.db.base import utcnow
from mockprep.db.models import InterviewRound, InterviewSession, JobApplication
from mockprep.db.repositories import Repository
from mockprep.db.session import SessionLocal
from mockprep.types import JobApplicationStatus, RoundStatus

ADMIN = {"X-User-Id": "admin-1", "X-User-Role": "admin"}


def _finish_round(round_id: str, score: float) -> None:
    """Stand-in for the interview runtime writing its evaluation back."""
    with SessionLocal() as db:
        interview_round = db.get(InterviewRound, round_id)
        interview_round.status = RoundStatus.completed
        interview_round.zero_score = score
        interview_round.score_components = {"communication": score, "problem_solving": score}
        interview_round.ai_summary = "Clear explanations, solid fundamentals."
        interview_round.report_data = {"strengths": ["communication"], "improvements": ["depth"]}
        interview_round.report_generated_at = utcnow()
        interview_session = db.get(InterviewSession, interview_round.session_id)
        application = db.get(JobApplication, interview_session.application_id)
        application.status = JobApplicationStatus.completed
        db.commit()


def test_mock_interview_lifecycle_from_posting_to_analytics() -> None:
    client = TestClient(create_app())

    job_resp = client.post(
        "/job_posting/create_mock_job",
        json={
            "title": "Senior Data Analyst",
            "description": "Own product analytics and experimentation.",
            "jd_payload": {"role_category": "data_analytics", "difficulty_level": "senior", "skills": ["SQL"]},
        },
        headers=ADMIN,
    )
    assert job_resp.status_code == 200
    job_id = job_resp.json()["data"]["id"]

    with SessionLocal() as db:
        candidate = Repository(db).create_candidate("Katherine Johnson", "katherine@example.com")
        candidate_headers = {"X-User-Id": candidate.id, "X-User-Role": "candidate"}

    listing = client.get("/mockinterview/get_mockinterviews", headers=candidate_headers)
    assert [item["id"] for item in listing.json()["data"]] == [job_id]

    first = client.post("/mockinterview/start_mockinterview", json={"mock_job_id": job_id}, headers=candidate_headers)
    second = client.post("/mockinterview/start_mockinterview", json={"mock_job_id": job_id}, headers=candidate_headers)
    assert first.status_code == 200 and second.status_code == 200
    first_round = first.json()["data"]["round_id"]
    assert first.json()["data"]["token_payload"]["interview_tools"] == ["code_editor", "whiteboard"]
    assert first.json()["data"]["token_payload"]["difficulty_level"] == "senior"

    with SessionLocal() as db:
        assert db.query(JobApplication).count() == 2

    _finish_round(first_round, 82.5)

    report = client.get("/mockinterview/get_report", params={"round_id": first_round}, headers=candidate_headers)
    assert report.status_code == 200
    assert report.json()["report"]["zero_score"] == 82.5
    assert report.json()["report"]["report_data"]["strengths"] == ["communication"]

    stats = client.get("/mockinterview/candidate_stats", headers=candidate_headers).json()["data"]
    assert stats["total_attempts"] == 2
    assert stats["completed_attempts"] == 1
    assert stats["average_score"] == 83
    assert [attempt["score"] for attempt in stats["recent_attempts"]] == [None, 82.5]

    my_reports = client.get("/mockinterview/get_my_reports", headers=candidate_headers).json()["data"]
    assert [item["sessions"][0]["rounds"][0]["id"] for item in my_reports] == [first_round]

    history = client.get(
        "/mockinterview/get_mockinterview_details_and_attempts",
        params={"mock_job_id": job_id},
        headers=candidate_headers,
    ).json()["data"]
    assert len(history["attempts"]) == 2

    analytics = client.get("/mockinterview/analytics", headers=ADMIN).json()["data"]
    assert analytics["total_mock_jobs"] == 1
    assert analytics["total_attempts"] == 2
    assert analytics["completion_rate"] == 50
    assert analytics["average_score"] == 83
    assert analytics["role_performance"] == [{"role": "data_analytics", "average_score": 83, "attempts": 1}]
    assert analytics["leaderboard"] == [
        {"candidate_id": candidate.id, "name": "Katherine Johnson", "average_score": 83, "total_attempts": 1}
    ]


def test_cli_creates_jobs_and_verifies_tokens(tmp_path) -> None:
    runner = CliRunner()
    jobs_file = tmp_path / "jobs.json"
    jobs_file.write_text(
        json.dumps(
            [
                {"title": "Mobile Engineer", "description": "iOS and Android", "jd_payload": {"role_category": "engineering"}},
                {"title": "", "description": "missing title"},
            ]
        ),
        encoding="utf-8",
    )

    created = runner.invoke(cli_app, ["jobs", "create", "--file", str(jobs_file)])
    assert created.exit_code == 0
    assert "Skipping" in created.output

    listed = runner.invoke(cli_app, ["jobs", "list"])
    assert listed.exit_code == 0
    assert "Mobile Engineer" in listed.output

    rejected = runner.invoke(cli_app, ["token", "verify", "--token", "not-a-token"])
    assert rejected.exit_code == 1
    assert '"invalid_signature"' in rejected.output
