from __future__ import annotations

import json
from pathlib import Path

import typer
import uvicorn

from mockprep.api.app import create_app
from mockprep.config import get_settings
from mockprep.core.catalog import MockJobCatalog
from mockprep.core.reports import ReportAggregator
from mockprep.core.tokens import build_token_issuer
from mockprep.db.init import init_database
from mockprep.db.repositories import Repository
from mockprep.db.session import session_scope
from mockprep.errors import EngineError, TokenVerificationError
from mockprep.logging_config import configure_logging

app = typer.Typer(help="mockprep CLI")
jobs_app = typer.Typer(help="Mock job postings")
token_app = typer.Typer(help="Interview invitation tokens")
report_app = typer.Typer(help="Score reports")

app.add_typer(jobs_app, name="jobs")
app.add_typer(token_app, name="token")
app.add_typer(report_app, name="report")

_INITIALIZED = False


def ensure_initialized() -> None:
    global _INITIALIZED
    if _INITIALIZED:
        return
    init_database()
    _INITIALIZED = True


def _echo(payload: object) -> None:
    typer.echo(json.dumps(payload, indent=2, default=str))


@app.command("init")
def init_cmd() -> None:
    """Create tables and seed sample mock postings."""
    configure_logging()
    result = init_database()
    _echo({"ok": True, **result})


@jobs_app.command("list")
def jobs_list() -> None:
    configure_logging()
    ensure_initialized()
    with session_scope() as db:
        rows = MockJobCatalog(Repository(db)).list_all_mock_jobs()
        _echo(
            [
                {
                    "id": row.id,
                    "title": row.title,
                    "role_category": row.jd_payload.get("role_category"),
                    "difficulty_level": row.jd_payload.get("difficulty_level"),
                    "attempts": row.attempt_count,
                    "created_at": row.created_at.isoformat() if row.created_at else None,
                }
                for row in rows
            ]
        )


@jobs_app.command("create")
def jobs_create(file: Path = typer.Option(..., "--file", exists=True, readable=True)) -> None:
    """Create mock postings from a JSON object or list of objects."""
    configure_logging()
    ensure_initialized()
    payload = json.loads(file.read_text(encoding="utf-8"))
    items = payload if isinstance(payload, list) else [payload]

    with session_scope() as db:
        catalog = MockJobCatalog(Repository(db))
        created = []
        for item in items:
            try:
                job = catalog.create_mock_job(
                    title=item.get("title"),
                    description=item.get("description"),
                    jd_payload=item.get("jd_payload"),
                )
            except EngineError as exc:
                typer.echo(f"Skipping '{item.get('title', '')}': {exc.message}", err=True)
                continue
            created.append({"id": job.id, "title": job.title})
        _echo({"created": created})


@token_app.command("verify")
def token_verify(token: str = typer.Option(..., "--token")) -> None:
    configure_logging()
    issuer = build_token_issuer(get_settings())
    try:
        payload = issuer.verify(token)
    except TokenVerificationError as exc:
        _echo({"valid": False, "reason": exc.reason})
        raise typer.Exit(code=1) from exc
    _echo({"valid": True, "payload": payload})


@report_app.command("stats")
def report_stats(candidate_id: str = typer.Option(..., "--candidate-id")) -> None:
    configure_logging()
    ensure_initialized()
    with session_scope() as db:
        stats = ReportAggregator(Repository(db)).candidate_stats(candidate_id)
        _echo(stats.model_dump(mode="json"))


@report_app.command("analytics")
def report_analytics() -> None:
    configure_logging()
    ensure_initialized()
    with session_scope() as db:
        data = ReportAggregator(Repository(db)).analytics()
        _echo(data.model_dump(mode="json"))


@app.command("serve")
def serve(
    host: str | None = typer.Option(None, "--host"),
    port: int | None = typer.Option(None, "--port"),
    log_level: str | None = typer.Option(None, "--log-level"),
) -> None:
    configure_logging(log_level)
    ensure_initialized()
    settings = get_settings()
    app_instance = create_app()
    uvicorn.run(app_instance, host=host or settings.app_host, port=port or settings.app_port)


def main() -> None:
    app()
