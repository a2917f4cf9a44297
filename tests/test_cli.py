"""Tests for the command-line interface."""

import asyncio

import httpx
import pytest
from openai import AsyncOpenAI
from typer.testing import CliRunner
from unittest.mock import AsyncMock, MagicMock, call

from signup_agent import cli
from signup_agent.core.errors import FormAnalysisError, InvalidUrlError
from signup_agent.core.models import ActionOutcome, ClickAction, FillAction, OutcomeStatus, RunReport
from signup_agent.llm.client import LLMClient


runner = CliRunner()


@pytest.fixture
def run_agent(monkeypatch):
    """Replace the agent run and logging setup for CLI tests."""
    mock = AsyncMock(return_value=RunReport(
        url="https://example.com/signup",
        screenshot_path="/tmp/signup-1.png",
        outcomes=[
            ActionOutcome(action=FillAction(selector="#email", field="email"), status=OutcomeStatus.FILLED, detail="email"),
            ActionOutcome(action=ClickAction(selector="text=Submit"), status=OutcomeStatus.CLICKED, detail="role fallback"),
        ]
    ))
    monkeypatch.setattr(cli, "_run_agent", mock)
    monkeypatch.setattr(cli, "configure_logging", MagicMock())
    monkeypatch.setattr(cli.settings, "gemini_api_key", "test-key")
    return mock


class TestUrlHelpers:

    @pytest.mark.parametrize("url", ["https://example.com", "http://localhost:3000", "  https://ui.chaicode.com  "])
    def test_valid_urls(self, url):
        assert cli.validate_url(url) == url.strip()

    @pytest.mark.parametrize("url", ["example.com", "ftp://example.com", "", "https://"])
    def test_invalid_urls(self, url):
        with pytest.raises(InvalidUrlError):
            cli.validate_url(url)

    @pytest.mark.parametrize("route, expected", [
        ("signup", "/signup"),
        ("/auth/signup", "/auth/signup"),
        ("", ""),
        (None, ""),
        ("  ", ""),
    ])
    def test_normalize_route(self, route, expected):
        assert cli.normalize_route(route) == expected

    def test_extract_url_from_free_text(self):
        assert cli.extract_url("please fill https://ui.chaicode.com/auth/signup.") == "https://ui.chaicode.com/auth/signup"

    def test_extract_url_without_url(self):
        assert cli.extract_url("Hi, how are you?") is None

    @pytest.mark.parametrize("text", [
        "example.com",
        "fill the form on example.com/signup",
        "open www.example.com please",
    ])
    def test_extract_url_rejects_missing_scheme(self, text):
        with pytest.raises(InvalidUrlError):
            cli.extract_url(text)

    @pytest.mark.parametrize("text", [
        "what is node.js?",
        "my email is bob@gmail.com",
        "I saved it as notes.txt",
    ])
    def test_dotted_words_are_chat(self, text):
        assert cli.extract_url(text) is None


class TestFillCommand:

    def test_invalid_url_rejected_before_run(self, run_agent):
        result = runner.invoke(cli.app, ["fill", "--url", "example.com", "--route", ""])

        assert result.exit_code == 2
        assert "Invalid URL" in result.output
        run_agent.assert_not_called()

    def test_fill_with_options(self, run_agent):
        result = runner.invoke(cli.app, ["fill", "--url", "https://example.com", "--route", "signup"])

        assert result.exit_code == 0
        run_agent.assert_awaited_once_with("https://example.com", "/signup")
        assert "Navigating to: https://example.com/signup" in result.output

    def test_fill_prompts_for_missing_values(self, run_agent):
        result = runner.invoke(cli.app, ["fill"], input="https://example.com\n/auth/signup\n")

        assert result.exit_code == 0
        run_agent.assert_awaited_once_with("https://example.com", "/auth/signup")

    def test_collaborator_failure_exits_non_zero(self, run_agent):
        run_agent.side_effect = FormAnalysisError("Model response is not valid JSON")

        result = runner.invoke(cli.app, ["fill", "--url", "https://example.com", "--route", ""])

        assert result.exit_code == 1
        assert "Run aborted" in result.output

    def test_missing_credential(self, run_agent, monkeypatch):
        monkeypatch.setattr(cli.settings, "gemini_api_key", None)

        result = runner.invoke(cli.app, ["fill", "--url", "https://example.com", "--route", ""])

        assert result.exit_code == 1
        assert "GEMINI_API_KEY" in result.output
        run_agent.assert_not_called()


class TestChatCommand:

    @pytest.fixture
    def responder(self, monkeypatch):
        responder = MagicMock()
        responder.reply = AsyncMock(return_value="Hey there! Want to give me a URL?")
        monkeypatch.setattr("signup_agent.llm.responder.ConversationalResponder", MagicMock(return_value=responder))
        llm_client = MagicMock(close=AsyncMock())
        monkeypatch.setattr(cli, "_create_llm_client", MagicMock(return_value=llm_client))
        return responder

    def test_chat_routes_text_and_urls(self, run_agent, responder):
        result = runner.invoke(
            cli.app, ["chat"],
            input="Hi\nexample.com\nwhat is node.js?\nfill https://example.com/signup please\nexit\n"
        )

        assert result.exit_code == 0
        assert responder.reply.await_args_list == [call("Hi"), call("what is node.js?")]
        run_agent.assert_awaited_once_with("https://example.com/signup", "")
        assert "Invalid URL" in result.output
        assert "Bye" in result.output
        cli._create_llm_client.return_value.close.assert_awaited_once()

    def test_consecutive_replies_share_one_client_and_loop(self, run_agent, monkeypatch):
        loops = []

        async def handler(request):
            loops.append(asyncio.get_running_loop())
            return httpx.Response(200, json={
                "id": f"chatcmpl-{len(loops)}",
                "object": "chat.completion",
                "created": 0,
                "model": "gemini-2.5-flash",
                "choices": [{
                    "index": 0,
                    "message": {"role": "assistant", "content": f"reply number {len(loops)}"},
                    "finish_reason": "stop",
                }],
            })

        openai_client = AsyncOpenAI(
            api_key="test-key",
            base_url="http://model.test/v1",
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        )
        monkeypatch.setattr(
            cli, "_create_llm_client",
            lambda: LLMClient(openai_client=openai_client, settings=cli.settings)
        )

        result = runner.invoke(cli.app, ["chat"], input="Hi\nHello again\nexit\n")

        assert result.exit_code == 0
        assert "reply number 1" in result.output
        assert "reply number 2" in result.output
        assert "Model request failed" not in result.output
        assert len(loops) == 2
        assert loops[0] is loops[1]
        assert openai_client.is_closed()


def test_version():
    result = runner.invoke(cli.app, ["version"])
    assert result.exit_code == 0
    assert "Signup Form Agent v" in result.output


def test_config_hides_secrets(monkeypatch):
    monkeypatch.setattr(cli.settings, "gemini_api_key", "super-secret")
    result = runner.invoke(cli.app, ["config"])
    assert result.exit_code == 0
    assert "super-secret" not in result.output
