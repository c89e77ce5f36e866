"""Tests for habitflow.habits.insights."""

import json
import sys
import types
from unittest.mock import MagicMock

import pytest

from habitflow.core.config import Config
from habitflow.core.exceptions import InsightError
from habitflow.habits.insights import SYSTEM_PROMPT, InsightService, build_messages
from habitflow.habits.models import Habit

# litellm is an optional dep; tests run against a stand-in module.
_litellm_mock = types.ModuleType("litellm")
_litellm_mock.completion = MagicMock()


@pytest.fixture(autouse=True)
def _mock_litellm():
    """Inject our mock litellm into sys.modules for all tests."""
    old = sys.modules.get("litellm")
    sys.modules["litellm"] = _litellm_mock
    _litellm_mock.completion.reset_mock(return_value=True, side_effect=True)
    yield
    if old is not None:
        sys.modules["litellm"] = old
    else:
        sys.modules.pop("litellm", None)


def _make_response(content="Your sleep habit fails mainly on weekends."):
    msg = MagicMock()
    msg.content = content
    choice = MagicMock()
    choice.message = msg
    return MagicMock(choices=[choice])


@pytest.fixture
def habits():
    return [
        Habit(id="1", name="Drink Water", target=8, unit="glasses"),
        Habit(id="2", name="Meditate", category="mindfulness", target=10, unit="minutes"),
    ]


class TestBuildMessages:
    def test_system_then_user(self, habits):
        messages = build_messages(habits)
        assert [m["role"] for m in messages] == ["system", "user"]
        assert messages[0]["content"] == SYSTEM_PROMPT

    def test_user_message_embeds_habit_json(self, habits):
        content = build_messages(habits)[1]["content"]
        start, end = content.index("["), content.rindex("]") + 1
        payload = json.loads(content[start:end])
        assert [h["name"] for h in payload] == ["Drink Water", "Meditate"]
        assert payload[1]["category"] == "mindfulness"


class TestGenerate:
    def test_returns_text(self, habits):
        _litellm_mock.completion.return_value = _make_response("  Data is insufficient.  ")
        service = InsightService(model="gpt-4o-mini", temperature=0.3, timeout=5, num_retries=0)

        assert service.generate(habits) == "Data is insufficient."

        kwargs = _litellm_mock.completion.call_args.kwargs
        assert kwargs["model"] == "gpt-4o-mini"
        assert kwargs["temperature"] == 0.3
        assert kwargs["timeout"] == 5
        assert kwargs["num_retries"] == 0
        assert len(kwargs["messages"]) == 2

    def test_no_habits(self):
        with pytest.raises(InsightError, match="Add some habits"):
            InsightService().generate([])
        _litellm_mock.completion.assert_not_called()

    def test_provider_error_wrapped(self, habits):
        _litellm_mock.completion.side_effect = RuntimeError("rate limited")
        with pytest.raises(InsightError, match="rate limited") as exc_info:
            InsightService().generate(habits)
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    @pytest.mark.parametrize("content", ["", "   ", None])
    def test_empty_response(self, habits, content):
        _litellm_mock.completion.return_value = _make_response(content)
        with pytest.raises(InsightError, match="empty"):
            InsightService().generate(habits)

    def test_no_choices(self, habits):
        _litellm_mock.completion.return_value = MagicMock(choices=[])
        with pytest.raises(InsightError):
            InsightService().generate(habits)

    def test_missing_litellm(self, habits, monkeypatch):
        monkeypatch.setitem(sys.modules, "litellm", None)
        with pytest.raises(ImportError, match="habitflow\\[insights\\]"):
            InsightService().generate(habits)


class TestFromConfig:
    def test_reads_insights_section(self, tmp_dir):
        config = Config(
            data_dir=tmp_dir,
            env_prefix="",
            defaults={"insights": {"model": "anthropic/claude-haiku", "temperature": 0.2, "timeout": 30}},
        )
        service = InsightService.from_config(config)
        assert service.model == "anthropic/claude-haiku"
        assert service.temperature == 0.2
        assert service.timeout == 30
        assert service.num_retries == 2
