"""AI-generated function descriptions via OpenAI- or Gemini-style APIs."""

import asyncio
import logging
import re
from abc import ABC, abstractmethod
from typing import Any

import httpx

from jsdoc_builder.models import AIConfig, DocumentableTarget
from jsdoc_builder.templates import render_template

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a helpful assistant that generates concise JSDoc descriptions for functions. "
    "Provide only the description text without any markdown formatting, code blocks, "
    "or JSDoc syntax. Keep it brief and professional."
)

TEMPERATURE = 0.2

NEWLINE_RUN_RE = re.compile(r"\s*[\r\n]+\s*")


class DescriptionError(ValueError):
    """Raised when a provider returns no usable description."""


def fallback_description(name: str) -> str:
    return f"{name} function"


def clean_description(text: str) -> str:
    """Trim a description and collapse line breaks into single spaces."""
    return NEWLINE_RUN_RE.sub(" ", text.strip())


def build_prompt(template: str, target: DocumentableTarget) -> str:
    """Render the prompt template for a target."""
    if target.parameters:
        parameters = ", ".join(f"{p.name}: {p.type or 'any'}" for p in target.parameters)
    else:
        parameters = "none"
    return render_template(template, {
        "functionName": target.name,
        "paramsCount": len(target.parameters),
        "parameters": parameters,
        "returnType": target.return_type or "void",
        "code": target.snippet,
    })


class DescriptionProvider(ABC):
    """One text-generation API."""

    def __init__(self, config: AIConfig):
        self.config = config

    @abstractmethod
    async def generate(self, client: httpx.AsyncClient, prompt: str) -> str:
        """Send a prompt and return the raw description text.

        Raises:
            httpx.HTTPError: On transport errors or error status codes
            DescriptionError: If the response carries no usable text
        """
        pass


class OpenAIProvider(DescriptionProvider):
    """Chat-completions style API with bearer-token auth."""

    async def generate(self, client, prompt):
        payload = {
            "model": self.config.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            "temperature": TEMPERATURE,
        }
        headers = {"Authorization": f"Bearer {self.config.api_key}"}
        response = await client.post(self.config.base_url, json=payload, headers=headers)
        response.raise_for_status()
        return self.parse_response(response.json())

    @staticmethod
    def parse_response(data: Any) -> str:
        if not isinstance(data, dict):
            raise DescriptionError("Response is not a JSON object.")
        choices = data.get("choices")
        if not isinstance(choices, list) or not choices:
            raise DescriptionError("Response has no choices.")
        first_choice = choices[0]
        message = first_choice.get("message") if isinstance(first_choice, dict) else None
        if not isinstance(message, dict):
            raise DescriptionError("Response has no message in the first choice.")
        content = message.get("content")
        if not isinstance(content, str) or not content.strip():
            raise DescriptionError("Response message is empty.")
        return content


class GeminiProvider(DescriptionProvider):
    """generateContent style API with the key passed as a query parameter."""

    async def generate(self, client, prompt):
        url = f"{self.config.base_url.rstrip('/')}/models/{self.config.model}:generateContent"
        payload = {
            "systemInstruction": {"parts": [{"text": SYSTEM_PROMPT}]},
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {"temperature": TEMPERATURE},
        }
        response = await client.post(url, params={"key": self.config.api_key}, json=payload)
        response.raise_for_status()
        return self.parse_response(response.json())

    @staticmethod
    def parse_response(data: Any) -> str:
        if not isinstance(data, dict):
            raise DescriptionError("Response is not a JSON object.")
        candidates = data.get("candidates")
        if not isinstance(candidates, list) or not candidates:
            raise DescriptionError("Response has no candidates.")
        first_candidate = candidates[0]
        content = first_candidate.get("content") if isinstance(first_candidate, dict) else None
        parts = content.get("parts") if isinstance(content, dict) else None
        if not isinstance(parts, list):
            raise DescriptionError("Response candidate has no content parts.")
        text = "".join(
            part["text"] for part in parts
            if isinstance(part, dict) and isinstance(part.get("text"), str)
        )
        if not text.strip():
            raise DescriptionError("Response candidate text is empty.")
        return text


PROVIDER_CLASSES: dict[str, type[DescriptionProvider]] = {
    "openai": OpenAIProvider,
    "gemini": GeminiProvider,
}


class DescriptionService:
    """Produces the description line for a target.

    Without AI (disabled or no API key) every description is the
    deterministic fallback. With AI, one request is made per target; any
    failure is logged and also resolves to the fallback.
    """

    def __init__(self, config: AIConfig, transport: httpx.AsyncBaseTransport | None = None):
        self.config = config
        self.transport = transport
        self.provider = PROVIDER_CLASSES[config.provider](config) if self.enabled else None

    @property
    def enabled(self) -> bool:
        return self.config.enabled and bool(self.config.api_key)

    async def describe(self, target: DocumentableTarget) -> str:
        if self.provider is None:
            return fallback_description(target.name)

        prompt = build_prompt(self.config.prompt_template, target)
        timeout = self.config.timeout_ms / 1000

        try:
            async with httpx.AsyncClient(timeout=timeout, transport=self.transport) as client:
                text = await asyncio.wait_for(self.provider.generate(client, prompt), timeout)
        except asyncio.TimeoutError:
            logger.warning(
                f"AI description for {target.name} timed out after {self.config.timeout_ms}ms"
            )
            return fallback_description(target.name)
        except (httpx.HTTPError, ValueError) as e:
            # ValueError covers DescriptionError and undecodable JSON bodies
            logger.warning(f"Failed to generate AI description for {target.name}: {e}")
            return fallback_description(target.name)

        description = clean_description(text)
        return description or fallback_description(target.name)
