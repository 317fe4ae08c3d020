from __future__ import annotations

from collections.abc import Generator

from fastapi import Request
from sqlalchemy.orm import Session

from mockprep.config import get_settings
from mockprep.core.jd_generator import MockJobDrafter
from mockprep.core.tokens import TokenIssuer, build_token_issuer
from mockprep.db.session import get_db_session
from mockprep.errors import AuthenticationError
from mockprep.llm.providers import build_openai_provider
from mockprep.types import Caller, UserRole


def get_db() -> Generator[Session, None, None]:
    yield from get_db_session()


def get_caller(request: Request) -> Caller:
    """Identity forwarded by the authenticating gateway in front of this service."""
    settings = get_settings()
    caller_id = (request.headers.get(settings.caller_id_header) or "").strip()
    role = UserRole.parse(request.headers.get(settings.caller_role_header), None)
    if not caller_id or role is None:
        raise AuthenticationError()
    return Caller(id=caller_id, role=role)


def get_token_issuer() -> TokenIssuer:
    return build_token_issuer(get_settings())


def get_jd_drafter() -> MockJobDrafter:
    settings = get_settings()
    return MockJobDrafter(build_openai_provider(settings), settings=settings)
