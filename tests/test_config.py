"""Tests for configuration loading and the generation client factory."""

from __future__ import annotations

from pathlib import Path

import pytest

from divination import config as config_module
from divination.agent.factory import GenerationClientFactory
from divination.agent.generation import AnthropicGenerationClient, OpenAIGenerationClient
from divination.config import AppSettings, Config


def test_defaults_are_valid_without_a_file() -> None:
    config = Config()

    assert config.orchestrator.max_review_iterations == 3
    assert config.server.request_timeout_seconds == 60.0
    assert config.model.openai.api_key_env == "OPENAI_API_KEY"


def test_from_yaml_overrides_sections(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text(
        "model:\n"
        "  primary: claude-sonnet-4-5\n"
        "orchestrator:\n"
        "  max_review_iterations: 5\n"
        "server:\n"
        "  request_timeout_seconds: 12\n"
        "  cors_origins: [https://oracle.example]\n"
    )

    config = Config.from_yaml(str(path))

    assert config.model.primary == "claude-sonnet-4-5"
    assert config.orchestrator.max_review_iterations == 5
    assert config.server.request_timeout_seconds == 12
    assert config.server.cors_origins == ["https://oracle.example"]
    assert config.model.deepseek.base_url == "https://api.deepseek.com"


def test_from_yaml_accepts_empty_file(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("")

    assert Config.from_yaml(str(path)) == Config()


def test_from_yaml_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="Configuration file not found"):
        Config.from_yaml(str(tmp_path / "missing.yaml"))


def test_negative_review_budget_is_rejected() -> None:
    with pytest.raises(ValueError):
        Config(orchestrator={"max_review_iterations": -1})


def test_repository_config_file_loads() -> None:
    config = Config.from_yaml(str(Path(__file__).resolve().parents[1] / "config.yaml"))

    assert config.orchestrator.max_review_iterations == 3


def test_get_config_caches_and_reload_refreshes(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("orchestrator:\n  max_review_iterations: 2\n")
    monkeypatch.setattr(config_module, "_config", None)
    monkeypatch.setenv("DIVINATION_CONFIG_PATH", str(path))

    first = config_module.get_config()
    path.write_text("orchestrator:\n  max_review_iterations: 7\n")

    assert config_module.get_config() is first
    assert config_module.reload_config().orchestrator.max_review_iterations == 7


def test_app_settings_read_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DIVINATION_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("DIVINATION_PORT", "9100")

    settings = AppSettings()

    assert settings.log_level == "DEBUG"
    assert settings.port == 9100


def test_get_api_key_reads_named_env_var(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")

    assert Config().get_api_key("openai") == "sk-test"
    assert Config().get_api_key("unknown") is None


@pytest.mark.parametrize(
    ("model_name", "env_var", "expected_type", "expected_model"),
    [
        ("gpt-4o", "OPENAI_API_KEY", OpenAIGenerationClient, "gpt-4o"),
        ("openai", "OPENAI_API_KEY", OpenAIGenerationClient, "gpt-4o-mini"),
        ("claude-sonnet-4-5", "ANTHROPIC_API_KEY", AnthropicGenerationClient, "claude-sonnet-4-5"),
        ("anthropic", "ANTHROPIC_API_KEY", AnthropicGenerationClient, "claude-sonnet-4-5"),
        ("deepseek", "DEEPSEEK_API_KEY", OpenAIGenerationClient, "deepseek-chat"),
    ],
)
def test_factory_selects_backend_by_model_name(
    monkeypatch: pytest.MonkeyPatch, model_name, env_var, expected_type, expected_model
) -> None:
    monkeypatch.setenv(env_var, "test-key")

    client = GenerationClientFactory.create(model_name, Config())

    assert isinstance(client, expected_type)
    assert client.model == expected_model


def test_factory_requires_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)

    with pytest.raises(ValueError, match="ANTHROPIC_API_KEY not found"):
        GenerationClientFactory.create("claude", Config())


def test_factory_rejects_unknown_models() -> None:
    with pytest.raises(ValueError, match="Unsupported model: llama"):
        GenerationClientFactory.create("llama", Config())


def test_factory_primary_and_fallback(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "test-key")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "test-key")
    config = Config()

    assert isinstance(GenerationClientFactory.create_primary(config), OpenAIGenerationClient)
    assert isinstance(GenerationClientFactory.create_fallback(config), AnthropicGenerationClient)
