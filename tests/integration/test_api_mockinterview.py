from fastapi.testclient import TestClient

from mockprep.api.app import create_app
from mockprep.api.deps import get_jd_drafter
from mockprep.config import get_settings
from mockprep.core.jd_generator import MockJobDrafter
from mockprep.core.tokens import build_token_issuer
from mockprep.db.models import InterviewRound


def _headers(user_id: str, role: str) -> dict[str, str]:
    return {"X-User-Id": user_id, "X-User-Role": role}


class StaticProvider:
    def __init__(self, result: dict):
        self.result = result
        self.prompts: list[str] = []

    def complete_json(self, **kwargs):
        self.prompts.append(kwargs["prompt"])
        return self.result


def test_listing_requires_caller_identity(factory) -> None:
    client = TestClient(create_app())

    response = client.get("/mockinterview/get_mockinterviews")

    assert response.status_code == 401
    assert response.json()["success"] is False


def test_recruiter_cannot_list_mock_jobs(factory) -> None:
    factory.job()
    client = TestClient(create_app())

    response = client.get("/mockinterview/get_mockinterviews", headers=_headers("rec-1", "recruiter"))

    assert response.status_code == 403
    assert response.json() == {
        "success": False,
        "message": "You are not authorised to get Mock Job Postings!",
    }


def test_candidate_lists_only_mock_jobs(factory) -> None:
    candidate = factory.candidate()
    mock = factory.job("Mock Backend Engineer")
    factory.job("Real Opening", is_mock=False)
    client = TestClient(create_app())

    response = client.get("/mockinterview/get_mockinterviews", headers=_headers(candidate.id, "candidate"))

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Mock Job Postings!"
    assert [item["id"] for item in body["data"]] == [mock.id]


def test_start_mockinterview_returns_invitation(factory) -> None:
    candidate = factory.candidate()
    job = factory.job("Backend Engineer", jd_payload={"role_category": "engineering"})
    client = TestClient(create_app())

    response = client.post(
        "/mockinterview/start_mockinterview",
        json={"mock_job_id": job.id},
        headers=_headers(candidate.id, "candidate"),
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["round_id"] == data["token_payload"]["interview_round_id"]
    assert data["redirect_url"].startswith("https://interview.example.com/interview?token=")
    payload = build_token_issuer(get_settings()).verify(data["token"])
    assert payload == data["token_payload"]
    assert payload["type"] == "interview_invitation"


def test_start_mockinterview_rejects_non_candidates_and_bad_input(factory) -> None:
    candidate = factory.candidate()
    real_job = factory.job("Real Opening", is_mock=False)
    client = TestClient(create_app())

    as_admin = client.post(
        "/mockinterview/start_mockinterview",
        json={"mock_job_id": real_job.id},
        headers=_headers("admin-1", "admin"),
    )
    missing_id = client.post(
        "/mockinterview/start_mockinterview",
        json={},
        headers=_headers(candidate.id, "candidate"),
    )
    real_posting = client.post(
        "/mockinterview/start_mockinterview",
        json={"mock_job_id": real_job.id},
        headers=_headers(candidate.id, "candidate"),
    )

    assert as_admin.status_code == 403
    assert missing_id.status_code == 400
    assert missing_id.json()["message"] == "mock_job_id is required"
    assert real_posting.status_code == 404


def test_get_report_is_scoped_to_round_owner(db, factory) -> None:
    owner = factory.candidate("Owner")
    stranger = factory.candidate("Stranger")
    factory.attempt(owner, factory.job(), scores=[91])
    round_id = db.query(InterviewRound).one().id
    client = TestClient(create_app())

    own = client.get(
        "/mockinterview/get_report",
        params={"round_id": round_id},
        headers=_headers(owner.id, "candidate"),
    )
    foreign = client.get(
        "/mockinterview/get_report",
        params={"round_id": round_id},
        headers=_headers(stranger.id, "candidate"),
    )
    missing = client.get("/mockinterview/get_report", headers=_headers(owner.id, "candidate"))

    assert own.status_code == 200
    assert own.json()["message"] == "Report fetched successfully for round"
    assert own.json()["report"]["zero_score"] == 91
    assert foreign.status_code == 404
    assert "report" not in foreign.json()
    assert missing.status_code == 400
    assert missing.json()["message"] == "Round ID is required"


def test_candidate_stats_and_reports(factory) -> None:
    candidate = factory.candidate()
    job = factory.job()
    factory.attempt(candidate, job, scores=[72])
    client = TestClient(create_app())
    headers = _headers(candidate.id, "candidate")

    stats = client.get("/mockinterview/candidate_stats", headers=headers)
    reports = client.get("/mockinterview/get_my_reports", headers=headers)
    history = client.get(
        "/mockinterview/get_mockinterview_details_and_attempts",
        params={"mock_job_id": job.id},
        headers=headers,
    )

    assert stats.status_code == 200
    assert stats.json()["data"]["average_score"] == 72
    assert stats.json()["data"]["recent_attempts"][0]["score"] == 72
    assert reports.status_code == 200
    assert len(reports.json()["data"]) == 1
    assert history.status_code == 200
    assert history.json()["data"]["mock_job"]["id"] == job.id


def test_analytics_is_admin_only(factory) -> None:
    candidate = factory.candidate("Ada")
    factory.attempt(candidate, factory.job(jd_payload={"role_category": "business"}), scores=[60])
    client = TestClient(create_app())

    denied = client.get("/mockinterview/analytics", headers=_headers(candidate.id, "candidate"))
    allowed = client.get("/mockinterview/analytics", headers=_headers("admin-1", "admin"))

    assert denied.status_code == 403
    assert allowed.status_code == 200
    data = allowed.json()["data"]
    assert data["total_mock_jobs"] == 1
    assert data["completion_rate"] == 100
    assert data["role_performance"] == [{"role": "business", "average_score": 60, "attempts": 1}]
    assert data["leaderboard"][0]["name"] == "Ada"


def test_generate_mock_interview_jd(factory) -> None:
    provider = StaticProvider({"title": "QA Engineer", "jd_payload": {"role_category": "engineering"}})
    app = create_app()
    app.dependency_overrides[get_jd_drafter] = lambda: MockJobDrafter(provider, settings=get_settings())
    client = TestClient(app)

    ok = client.post(
        "/mockinterview/generate_mock_interview_jd",
        json={"title": "QA Engineer", "description": "Automated testing"},
    )
    missing = client.post("/mockinterview/generate_mock_interview_jd", json={"title": "QA Engineer"})

    assert ok.status_code == 200
    assert ok.json()["data"]["title"] == "QA Engineer"
    assert missing.status_code == 400
    assert missing.json()["message"] == "Both title and description are required"
    assert provider.prompts == ["Job Title: QA Engineer\nDescription: Automated testing"]


def test_generate_mock_interview_jd_reports_provider_failure(factory) -> None:
    app = create_app()
    app.dependency_overrides[get_jd_drafter] = lambda: MockJobDrafter(StaticProvider({}), settings=get_settings())
    client = TestClient(app)

    response = client.post(
        "/mockinterview/generate_mock_interview_jd",
        json={"title": "QA Engineer", "description": "Automated testing"},
    )

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Failed to generate mock interview description"}


def test_malformed_body_maps_to_bad_request(factory) -> None:
    candidate = factory.candidate()
    client = TestClient(create_app())

    response = client.post(
        "/mockinterview/start_mockinterview",
        content="not json",
        headers={**_headers(candidate.id, "candidate"), "Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["success"] is False
