from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from mockprep.db.models import JobDescription

SAMPLE_MOCK_JOBS: list[dict[str, object]] = [
    {
        "title": "Backend Software Engineer",
        "description": (
            "Practice interview for a backend engineer building REST APIs, data models and "
            "background jobs for a growing product team."
        ),
        "jd_payload": {
            "experience": "2-3 Years",
            "skills": ["Python", "SQL", "REST APIs", "Docker"],
            "location": "Remote",
            "employment_type": "Full-time",
            "role_category": "engineering",
            "difficulty_level": "mid",
            "interview_tools": ["code_editor", "whiteboard"],
        },
    },
    {
        "title": "Data Analyst",
        "description": (
            "Practice interview for an analyst turning product and sales data into dashboards "
            "and recommendations."
        ),
        "jd_payload": {
            "experience": "1-2 Years",
            "skills": ["SQL", "Excel", "Tableau", "Statistics"],
            "location": "Remote",
            "employment_type": "Full-time",
            "role_category": "data_analytics",
            "difficulty_level": "entry",
        },
    },
    {
        "title": "Senior Product Manager",
        "description": (
            "Practice interview for a product manager owning roadmap, discovery and delivery "
            "for a B2B platform."
        ),
        "jd_payload": {
            "experience": "5+ Years",
            "skills": ["Roadmapping", "Stakeholder Management", "Analytics"],
            "location": "Remote",
            "employment_type": "Full-time",
            "role_category": "business",
            "difficulty_level": "senior",
        },
    },
]


def seed_mock_jobs(session: Session) -> int:
    inserted = 0
    for item in SAMPLE_MOCK_JOBS:
        exists = session.scalar(
            select(JobDescription.id).where(
                JobDescription.title == item["title"], JobDescription.is_mock.is_(True)
            )
        )
        if exists:
            continue

        session.add(
            JobDescription(
                title=item["title"],
                description=item["description"],
                jd_payload=item["jd_payload"],
                is_mock=True,
            )
        )
        inserted += 1

    session.commit()
    return inserted
