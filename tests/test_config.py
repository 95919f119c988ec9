"""Tests for config module."""

import json

from jsdoc_builder.config import (
    CONFIG_FILE_NAME,
    DEFAULT_PROMPT_TEMPLATE,
    DEFAULT_TIMEOUT_MS,
    PROVIDER_DEFAULTS,
    load_config_file,
    merge_config,
    resolve_config,
)


def _write_config(path, data):
    path.write_text(json.dumps(data) if not isinstance(data, str) else data)
    return path


class TestLoadConfigFile:
    """Tests for load_config_file function."""

    def test_missing_file_returns_empty(self, tmp_path):
        assert load_config_file(tmp_path / "nope.json") == {}

    def test_default_path_is_current_directory(self, tmp_path):
        _write_config(tmp_path / CONFIG_FILE_NAME, {"includeReturnsWhenVoid": False})

        assert load_config_file() == {"includeReturnsWhenVoid": False}

    def test_invalid_json_returns_empty(self, tmp_path, caplog):
        path = _write_config(tmp_path / "bad.json", "{not json")

        assert load_config_file(path) == {}
        assert "bad.json" in caplog.text

    def test_non_object_root_returns_empty(self, tmp_path):
        path = _write_config(tmp_path / "list.json", [1, 2, 3])

        assert load_config_file(path) == {}


class TestMergeConfig:
    """Tests for merge_config function."""

    def test_nested_merge(self):
        base = {"ai": {"model": "a", "enabled": True}, "x": 1}

        merged = merge_config(base, {"ai": {"model": "b"}})

        assert merged == {"ai": {"model": "b", "enabled": True}, "x": 1}

    def test_base_is_not_mutated(self):
        base = {"ai": {"model": "a"}}

        merge_config(base, {"ai": {"model": "b"}})

        assert base == {"ai": {"model": "a"}}


class TestResolveConfig:
    """Tests for resolve_config function."""

    def test_defaults(self):
        config = resolve_config(environ={})

        assert config.template.description_line == "@description ${description}"
        assert config.template.param_line == "@param {${type}} ${name}"
        assert config.template.returns_line == "@returns {${returnType}}"
        assert config.include_returns_when_void is True
        assert config.ai.provider == "openai"
        assert config.ai.model == PROVIDER_DEFAULTS["openai"]["model"]
        assert config.ai.base_url == PROVIDER_DEFAULTS["openai"]["baseUrl"]
        assert config.ai.timeout_ms == DEFAULT_TIMEOUT_MS
        assert config.ai.prompt_template == DEFAULT_PROMPT_TEMPLATE

    def test_no_credential_disables_ai(self):
        config = resolve_config(inline={"ai": {"enabled": True}}, environ={})

        assert config.ai.api_key is None
        assert config.ai.enabled is False

    def test_openai_key_from_environment(self):
        config = resolve_config(environ={"OPENAI_API_KEY": "sk-env"})

        assert config.ai.api_key == "sk-env"
        assert config.ai.enabled is True

    def test_gemini_key_preference(self):
        environ = {"GEMINI_API_KEY": "gem", "GOOGLE_API_KEY": "goog"}

        config = resolve_config(inline={"ai": {"provider": "gemini"}}, environ=environ)

        assert config.ai.api_key == "gem"

    def test_google_key_fallback(self):
        config = resolve_config(
            inline={"ai": {"provider": "gemini"}},
            environ={"GOOGLE_API_KEY": "goog", "OPENAI_API_KEY": "sk"},
        )

        assert config.ai.api_key == "goog"

    def test_explicit_key_wins_over_environment(self):
        config = resolve_config(inline={"ai": {"apiKey": "inline"}}, environ={"OPENAI_API_KEY": "env"})

        assert config.ai.api_key == "inline"

    def test_disable_flag_overrides_everything(self, tmp_path):
        path = _write_config(tmp_path / "c.json", {"ai": {"enabled": True, "apiKey": "k"}})

        config = resolve_config(path, {"ai": {"enabled": True}}, disable_ai=True, environ={})

        assert config.ai.enabled is False

    def test_precedence_file_then_inline(self, tmp_path):
        path = _write_config(tmp_path / "c.json", {
            "includeReturnsWhenVoid": False,
            "template": {"paramLine": "file ${name}", "returnsLine": "file returns"},
        })

        config = resolve_config(path, {"template": {"paramLine": "inline ${name}"}}, environ={})

        assert config.include_returns_when_void is False
        assert config.template.param_line == "inline ${name}"
        assert config.template.returns_line == "file returns"
        assert config.template.description_line == "@description ${description}"

    def test_invalid_file_contributes_nothing(self, tmp_path):
        path = _write_config(tmp_path / "c.json", "][")

        config = resolve_config(path, environ={})

        assert config.include_returns_when_void is True

    def test_unknown_provider_defaults_to_openai(self):
        config = resolve_config(inline={"ai": {"provider": "anthropic"}}, environ={})

        assert config.ai.provider == "openai"

    def test_provider_is_case_insensitive(self):
        config = resolve_config(inline={"ai": {"provider": " Gemini "}}, environ={})

        assert config.ai.provider == "gemini"

    def test_switching_provider_applies_its_defaults(self):
        config = resolve_config(inline={"ai": {"provider": "gemini"}}, environ={})

        assert config.ai.model == PROVIDER_DEFAULTS["gemini"]["model"]
        assert config.ai.base_url == PROVIDER_DEFAULTS["gemini"]["baseUrl"]

    def test_custom_model_is_kept_on_provider_switch(self):
        config = resolve_config(
            inline={"ai": {"provider": "gemini", "model": "gemini-1.5-pro", "baseUrl": "http://proxy"}},
            environ={},
        )

        assert config.ai.model == "gemini-1.5-pro"
        assert config.ai.base_url == "http://proxy"

    def test_non_positive_timeout_gets_default(self):
        for value in (0, -5, "fast", True):
            config = resolve_config(inline={"ai": {"timeoutMs": value}}, environ={})
            assert config.ai.timeout_ms == DEFAULT_TIMEOUT_MS

    def test_custom_timeout(self):
        config = resolve_config(inline={"ai": {"timeoutMs": 500}}, environ={})

        assert config.ai.timeout_ms == 500

    def test_empty_prompt_template_gets_default(self):
        config = resolve_config(inline={"ai": {"promptTemplate": ""}}, environ={})

        assert config.ai.prompt_template == DEFAULT_PROMPT_TEMPLATE

    def test_wrong_types_fall_back_to_defaults(self):
        config = resolve_config(
            inline={"template": "oops", "includeReturnsWhenVoid": "no", "ai": {"enabled": "yes"}},
            environ={"OPENAI_API_KEY": "k"},
        )

        assert config.template.param_line == "@param {${type}} ${name}"
        assert config.include_returns_when_void is True
        assert config.ai.enabled is True

    def test_uses_process_environment_by_default(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "from-os")

        config = resolve_config()

        assert config.ai.api_key == "from-os"
