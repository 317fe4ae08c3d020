from __future__ import annotations

import logging
from typing import Any

from mockprep.config import Settings, get_settings
from mockprep.core.instructions import ROLE_TOOLS
from mockprep.errors import InputValidationError, InternalError
from mockprep.llm.prompts import EXPERIENCE_OPTIONS, MOCK_JD_SYSTEM_PROMPT, MOCK_JD_USER_PROMPT
from mockprep.llm.providers import GenerationOptions, LLMProvider
from mockprep.types import DifficultyLevel, InterviewTool, RoleCategory

logger = logging.getLogger(__name__)

JD_GENERATION_OPTIONS = GenerationOptions(temperature=0.1, max_tokens=1500)


def _quoted(values) -> str:
    return ", ".join(f"'{value}'" for value in values)


def build_system_prompt() -> str:
    tool_guidelines = "\n".join(
        f"- For {role.value} roles, set interview_tools to {[tool.value for tool in tools]}."
        for role, tools in ROLE_TOOLS.items()
    )
    return MOCK_JD_SYSTEM_PROMPT.format(
        experience_options=_quoted(EXPERIENCE_OPTIONS),
        role_categories=_quoted(member.value for member in RoleCategory),
        difficulty_levels=_quoted(member.value for member in DifficultyLevel),
        interview_tools=_quoted(member.value for member in InterviewTool),
        tool_guidelines=tool_guidelines,
    )


class MockJobDrafter:
    def __init__(self, provider: LLMProvider, *, settings: Settings | None = None):
        self.provider = provider
        self.settings = settings or get_settings()

    def draft(self, *, title: str | None, description: str | None) -> dict[str, Any]:
        title = (title or "").strip()
        description = (description or "").strip()
        if not title or not description:
            raise InputValidationError("Both title and description are required")

        try:
            draft = self.provider.complete_json(
                model=self.settings.openai_model_jd,
                prompt=MOCK_JD_USER_PROMPT.format(title=title, description=description),
                system=build_system_prompt(),
                options=JD_GENERATION_OPTIONS,
            )
        except Exception as exc:
            logger.exception("Mock JD generation failed title=%s", title)
            raise InternalError("Failed to generate mock interview description") from exc

        if not draft:
            logger.error("Empty or unparseable mock JD draft title=%s", title)
            raise InternalError("Failed to generate mock interview description")
        return draft
