from __future__ import annotations

from mockprep.config import get_settings
from mockprep.db import models  # noqa: F401
from mockprep.db.base import Base
from mockprep.db.seed import seed_mock_jobs
from mockprep.db.session import engine, session_scope


def ensure_data_directories() -> None:
    settings = get_settings()
    settings.data_dir.mkdir(parents=True, exist_ok=True)


def init_database() -> dict[str, int]:
    settings = get_settings()
    ensure_data_directories()
    Base.metadata.create_all(bind=engine)

    inserted = 0
    if settings.seed_mock_jobs:
        with session_scope() as session:
            inserted = seed_mock_jobs(session)
    return {"seeded_mock_jobs": inserted}
