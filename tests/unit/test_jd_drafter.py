import pytest

from mockprep.config import Settings
from mockprep.core.jd_generator import MockJobDrafter, build_system_prompt
from mockprep.errors import InputValidationError, InternalError


class FakeProvider:
    def __init__(self, result=None, error: Exception | None = None):
        self.result = result if result is not None else {}
        self.error = error
        self.calls: list[dict] = []

    def complete_json(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.result


def _drafter(provider: FakeProvider) -> MockJobDrafter:
    return MockJobDrafter(provider, settings=Settings(openai_model_jd="jd-model"))


@pytest.mark.parametrize(("title", "description"), [("", "desc"), ("Title", ""), (None, None), ("  ", "x")])
def test_draft_requires_title_and_description(title, description) -> None:
    provider = FakeProvider({"title": "x"})
    with pytest.raises(InputValidationError, match="Both title and description are required"):
        _drafter(provider).draft(title=title, description=description)
    assert provider.calls == []


def test_draft_sends_builder_prompt_and_returns_json() -> None:
    draft = {"title": "QA Engineer", "description": "...", "jd_payload": {"role_category": "engineering"}}
    provider = FakeProvider(draft)

    result = _drafter(provider).draft(title="QA Engineer", description="Manual and automated testing")

    assert result == draft
    call = provider.calls[0]
    assert call["model"] == "jd-model"
    assert call["prompt"] == "Job Title: QA Engineer\nDescription: Manual and automated testing"
    assert call["system"].strip().startswith("You are MockInterviewBuilder.")
    assert call["options"].temperature == 0.1
    assert call["options"].max_tokens == 1500


def test_draft_maps_provider_failure_to_internal_error() -> None:
    provider = FakeProvider(error=RuntimeError("connection reset"))
    with pytest.raises(InternalError) as excinfo:
        _drafter(provider).draft(title="QA", description="Testing")
    assert excinfo.value.message == "Failed to generate mock interview description"


def test_draft_rejects_empty_model_output() -> None:
    with pytest.raises(InternalError):
        _drafter(FakeProvider({})).draft(title="QA", description="Testing")


def test_system_prompt_lists_tool_table() -> None:
    prompt = build_system_prompt()
    assert "- For engineering roles, set interview_tools to ['code_editor', 'whiteboard']." in prompt
    assert "- For business roles, set interview_tools to ['whiteboard', 'file_upload']." in prompt
    assert "'entry', 'mid', 'senior', 'expert'" in prompt
    assert "{" in prompt and "{{" not in prompt
