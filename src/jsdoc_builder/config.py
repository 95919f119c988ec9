"""Configuration resolution for jsdoc-builder."""

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from jsdoc_builder.models import AIConfig, NormalizedConfig, TemplateConfig

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "jsdoc-builder.config.json"

PROVIDERS = ("openai", "gemini")

PROVIDER_DEFAULTS = {
    "openai": {
        "model": "gpt-4o-mini",
        "baseUrl": "https://api.openai.com/v1/chat/completions",
    },
    "gemini": {
        "model": "gemini-2.0-flash",
        "baseUrl": "https://generativelanguage.googleapis.com/v1beta",
    },
}

PROVIDER_ENV_KEYS = {
    "openai": ("OPENAI_API_KEY",),
    "gemini": ("GEMINI_API_KEY", "GOOGLE_API_KEY"),
}

DEFAULT_TIMEOUT_MS = 15000

DEFAULT_PROMPT_TEMPLATE = (
    "Write a concise one-sentence JSDoc description for the following function.\n"
    "Function name: {{functionName}}\n"
    "Parameters ({{paramsCount}}): {{parameters}}\n"
    "Return type: {{returnType}}\n"
    "\n"
    "Code:\n"
    "{{code}}\n"
    "\n"
    "Reply with the description text only, without markdown or JSDoc tags."
)

DEFAULTS: dict[str, Any] = {
    "template": {
        "descriptionLine": "@description ${description}",
        "paramLine": "@param {${type}} ${name}",
        "returnsLine": "@returns {${returnType}}",
    },
    "includeReturnsWhenVoid": True,
    "ai": {
        "enabled": True,
        "provider": "openai",
        "model": PROVIDER_DEFAULTS["openai"]["model"],
        "baseUrl": PROVIDER_DEFAULTS["openai"]["baseUrl"],
        "timeoutMs": DEFAULT_TIMEOUT_MS,
        "promptTemplate": DEFAULT_PROMPT_TEMPLATE,
    },
}


def load_config_file(config_path: Path | None = None) -> dict[str, Any]:
    """Load the raw JSON config file.

    Args:
        config_path: Path to the config file. If None, uses
            ``jsdoc-builder.config.json`` in the current directory.

    Returns:
        The parsed JSON object, or an empty dict if the file is missing,
        unreadable, not valid JSON, or its root is not an object.
    """
    if config_path is None:
        config_path = Path.cwd() / CONFIG_FILE_NAME

    if not config_path.exists():
        return {}

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
        logger.warning(f"Ignoring config file {config_path}: {e}")
        return {}

    if not isinstance(data, dict):
        logger.warning(f"Ignoring config file {config_path}: root is not an object")
        return {}

    return data


def merge_config(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Deep-merge two config mappings, values from override winning."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = merge_config(current, value)
        else:
            merged[key] = value
    return merged


def resolve_config(
    config_path: Path | None = None,
    inline: Mapping[str, Any] | None = None,
    disable_ai: bool = False,
    environ: Mapping[str, str] | None = None,
) -> NormalizedConfig:
    """Build the normalized configuration for a run.

    Sources are merged in increasing precedence: built-in defaults, the
    on-disk config file, the inline config, and finally the AI-disable flag.

    Args:
        config_path: Config file location (defaults to the current directory)
        inline: Caller-supplied config object in the file's JSON shape
        disable_ai: Force ``ai.enabled`` off
        environ: Environment used for credential lookup (defaults to os.environ)

    Returns:
        NormalizedConfig with provider defaults and credentials applied.

    Notes:
        The provider's model and base URL defaults are applied to fields that
        are empty or still equal the *other* provider's default. A custom
        value that happens to match the other provider's default is therefore
        replaced as well.
    """
    if environ is None:
        environ = os.environ

    merged = merge_config(DEFAULTS, load_config_file(config_path))
    if inline:
        merged = merge_config(merged, inline)
    if disable_ai:
        merged = merge_config(merged, {"ai": {"enabled": False}})

    template = _section(merged, "template")
    ai = _section(merged, "ai")

    provider = _coerce_provider(ai.get("provider"))
    other = PROVIDERS[1] if provider == PROVIDERS[0] else PROVIDERS[0]

    model = _string(ai.get("model"), "")
    base_url = _string(ai.get("baseUrl"), "")
    if not model or model == PROVIDER_DEFAULTS[other]["model"]:
        model = PROVIDER_DEFAULTS[provider]["model"]
    if not base_url or base_url == PROVIDER_DEFAULTS[other]["baseUrl"]:
        base_url = PROVIDER_DEFAULTS[provider]["baseUrl"]

    api_key = _string(ai.get("apiKey"), "") or None
    if api_key is None:
        for env_key in PROVIDER_ENV_KEYS[provider]:
            if environ.get(env_key):
                api_key = environ[env_key]
                break

    enabled = _boolean(ai.get("enabled"), DEFAULTS["ai"]["enabled"])
    if api_key is None:
        enabled = False

    timeout_ms = ai.get("timeoutMs")
    if isinstance(timeout_ms, bool) or not isinstance(timeout_ms, (int, float)) or timeout_ms <= 0:
        timeout_ms = DEFAULT_TIMEOUT_MS

    return NormalizedConfig(
        template=TemplateConfig(
            description_line=_string(
                template.get("descriptionLine"), DEFAULTS["template"]["descriptionLine"]
            ),
            param_line=_string(template.get("paramLine"), DEFAULTS["template"]["paramLine"]),
            returns_line=_string(
                template.get("returnsLine"), DEFAULTS["template"]["returnsLine"]
            ),
        ),
        include_returns_when_void=_boolean(
            merged.get("includeReturnsWhenVoid"), DEFAULTS["includeReturnsWhenVoid"]
        ),
        ai=AIConfig(
            provider=provider,
            enabled=enabled,
            api_key=api_key,
            model=model,
            base_url=base_url,
            timeout_ms=int(timeout_ms),
            prompt_template=_string(ai.get("promptTemplate"), "") or DEFAULT_PROMPT_TEMPLATE,
        ),
    )


def _section(merged: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = merged.get(key)
    return value if isinstance(value, Mapping) else DEFAULTS[key]


def _coerce_provider(value: Any) -> str:
    if isinstance(value, str) and value.strip().lower() in PROVIDERS:
        return value.strip().lower()
    return PROVIDERS[0]


def _string(value: Any, default: str) -> str:
    return value if isinstance(value, str) else default


def _boolean(value: Any, default: bool) -> bool:
    return value if isinstance(value, bool) else default
