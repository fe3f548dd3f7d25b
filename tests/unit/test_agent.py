"""Unit tests for AgentService and AgentConfig.

Tests configuration validation and Gemini request building.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from pydantic import ValidationError

from gemini_chat.agent.chat_agent import AgentError, AgentService
from gemini_chat.agent.config import DEFAULT_MODEL, DEFAULT_SYSTEM_INSTRUCTION, AgentConfig
from gemini_chat.models.schemas import ChatMessage


@pytest.fixture
def no_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)


class TestAgentConfig:
    """Tests for AgentConfig validation."""

    def test_config_with_default_values(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Config uses fixed generation defaults when only API key provided."""
        monkeypatch.delenv("GEMINI_MODEL", raising=False)
        config = AgentConfig(api_key="test-key")

        assert config.model_name == DEFAULT_MODEL
        assert config.temperature == 0.7
        assert config.max_tokens == 512
        assert config.system_instruction == DEFAULT_SYSTEM_INSTRUCTION

    def test_config_reads_gemini_api_key(
        self, no_api_key: None, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("GEMINI_API_KEY", "env-key")

        assert AgentConfig().api_key == "env-key"

    def test_config_falls_back_to_google_api_key(
        self, no_api_key: None, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("GOOGLE_API_KEY", "google-key")

        assert AgentConfig().api_key == "google-key"

    def test_config_reads_model_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GEMINI_MODEL", "gemini-custom")

        assert AgentConfig(api_key="k").model_name == "gemini-custom"

    def test_config_fails_without_api_key(self, no_api_key: None) -> None:
        with pytest.raises(ValidationError) as exc_info:
            AgentConfig()

        assert "API key required" in str(exc_info.value)

    def test_config_rejects_whitespace_api_key(self) -> None:
        with pytest.raises(ValidationError):
            AgentConfig(api_key="   ")

    def test_config_strips_api_key_whitespace(self) -> None:
        assert AgentConfig(api_key="  key  ").api_key == "key"

    def test_config_rejects_out_of_range_temperature(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            AgentConfig(api_key="k", temperature=2.5)

        assert "temperature" in str(exc_info.value).lower()

    def test_config_rejects_zero_max_tokens(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            AgentConfig(api_key="k", max_tokens=0)

        assert "max_tokens" in str(exc_info.value).lower()


class TestBuildContents:
    """Tests for role translation into Gemini contents."""

    def test_maps_roles_and_text(self) -> None:
        contents = AgentService.build_contents([
            ChatMessage(role="user", content="hi"),
            ChatMessage(role="assistant", content="hello"),
        ])

        assert [c.role for c in contents] == ["user", "model"]
        assert [c.parts[0].text for c in contents] == ["hi", "hello"]

    def test_one_part_per_message(self) -> None:
        contents = AgentService.build_contents([ChatMessage(role="user", content="x")])

        assert len(contents[0].parts) == 1


def _mock_client(text: str | None = "Generated reply") -> MagicMock:
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock(return_value=MagicMock(text=text))
    return client


class TestAgentServiceGetResponse:
    """Tests for the single generate call."""

    @patch("gemini_chat.agent.chat_agent.genai.Client")
    async def test_sends_fixed_generation_settings(self, mock_client_class: MagicMock) -> None:
        client = _mock_client()
        mock_client_class.return_value = client
        service = AgentService(config=AgentConfig(api_key="test-key", model_name="gemini-test"))

        text = await service.get_response([ChatMessage(role="user", content="hello")])

        assert text == "Generated reply"
        mock_client_class.assert_called_once_with(api_key="test-key")
        kwargs = client.aio.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-test"
        assert kwargs["contents"][0].role == "user"
        assert kwargs["contents"][0].parts[0].text == "hello"
        assert kwargs["config"].max_output_tokens == 512
        assert kwargs["config"].temperature == 0.7
        assert kwargs["config"].system_instruction == DEFAULT_SYSTEM_INSTRUCTION

    @patch("gemini_chat.agent.chat_agent.genai.Client")
    async def test_missing_text_returns_empty_string(self, mock_client_class: MagicMock) -> None:
        mock_client_class.return_value = _mock_client(text=None)
        service = AgentService(config=AgentConfig(api_key="k"))

        assert await service.get_response([ChatMessage(role="user", content="hi")]) == ""

    @patch("gemini_chat.agent.chat_agent.genai.Client")
    async def test_provider_error_wrapped(self, mock_client_class: MagicMock) -> None:
        client = _mock_client()
        client.aio.models.generate_content.side_effect = RuntimeError("quota for key abc")
        mock_client_class.return_value = client
        service = AgentService(config=AgentConfig(api_key="k"))

        with pytest.raises(AgentError) as exc_info:
            await service.get_response([ChatMessage(role="user", content="hi")])

        assert "abc" not in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    @patch("gemini_chat.agent.chat_agent.genai.Client")
    async def test_client_construction_error_wrapped(self, mock_client_class: MagicMock) -> None:
        """SDK errors raised while building the client become AgentError."""
        mock_client_class.side_effect = ValueError("Missing key inputs argument")
        service = AgentService(config=AgentConfig(api_key="k"))

        with pytest.raises(AgentError, match="ValueError") as exc_info:
            await service.get_response([ChatMessage(role="user", content="hi")])

        assert isinstance(exc_info.value.__cause__, ValueError)

    @patch("gemini_chat.agent.chat_agent.genai.Client")
    async def test_client_built_once(self, mock_client_class: MagicMock) -> None:
        mock_client_class.return_value = _mock_client()
        service = AgentService(config=AgentConfig(api_key="k"))

        await service.get_response([ChatMessage(role="user", content="a")])
        await service.get_response([ChatMessage(role="user", content="b")])

        mock_client_class.assert_called_once()


class TestLazyConfiguration:
    """A missing API key is reported per request, never at construction."""

    def test_construction_without_key_succeeds(self, no_api_key: None) -> None:
        AgentService()

    @patch("gemini_chat.agent.chat_agent.genai.Client")
    async def test_missing_key_raises_agent_error(
        self, mock_client_class: MagicMock, no_api_key: None
    ) -> None:
        service = AgentService()

        with pytest.raises(AgentError, match="not configured"):
            await service.get_response([ChatMessage(role="user", content="hi")])

        mock_client_class.assert_not_called()

    @patch("gemini_chat.agent.chat_agent.genai.Client")
    async def test_key_configured_later_is_picked_up(
        self,
        mock_client_class: MagicMock,
        no_api_key: None,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        mock_client_class.return_value = _mock_client()
        service = AgentService()
        with pytest.raises(AgentError):
            await service.get_response([ChatMessage(role="user", content="hi")])

        monkeypatch.setenv("GEMINI_API_KEY", "late-key")

        assert await service.get_response([ChatMessage(role="user", content="hi")]) == "Generated reply"
        mock_client_class.assert_called_once_with(api_key="late-key")


class TestGetAgentService:
    """Tests for get_agent_service singleton function."""

    def test_singleton_returns_same_instance(self) -> None:
        import gemini_chat.agent.chat_agent as chat_agent_module

        chat_agent_module._agent_service = None

        first = chat_agent_module.get_agent_service()
        second = chat_agent_module.get_agent_service()

        assert first is second
