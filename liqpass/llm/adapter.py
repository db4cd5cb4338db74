"""Text-generation backends for the heuristic order checker.

Two transports are supported:

- ``gemini`` (default): Google Generative Language ``generateContent`` REST call.
- ``openai``: any OpenAI-compatible chat completion endpoint via the ``openai`` SDK.

Both are single calls bounded by a fixed timeout. Nothing is retried; the
caller decides what a failure means.
"""

import logging
from typing import Protocol

import httpx
from openai import AsyncOpenAI

from liqpass.config import LiqPassConfig

logger = logging.getLogger(__name__)


class TextModel(Protocol):
    """Anything that turns a prompt into raw response text."""

    @property
    def configured(self) -> bool: ...

    async def generate(self, prompt: str) -> str: ...


class GeminiTextModel:
    """Google Generative Language API client (``v1beta`` ``generateContent``)."""

    def __init__(
        self,
        config: LiqPassConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = config.google_mcp_base_url.rstrip("/")
        self.model = config.google_mcp_model
        self.timeout = config.heuristic_timeout
        self._api_key = config.google_mcp_api_key
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    def build_payload(self, prompt: str) -> dict:
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": 0.1,
                "maxOutputTokens": 512,
                "responseMimeType": "application/json",
            },
        }

    async def generate(self, prompt: str) -> str:
        """Send the prompt and return the first candidate's text ("" if absent)."""
        url = f"{self.base_url}/v1beta/models/{self.model}:generateContent"
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            resp = await client.post(
                url,
                params={"key": self._api_key},
                json=self.build_payload(prompt),
                headers={"Content-Type": "application/json"},
            )
            resp.raise_for_status()
            data = resp.json()

        try:
            return data["candidates"][0]["content"]["parts"][0]["text"] or ""
        except (KeyError, IndexError, TypeError):
            logger.warning("Gemini response carried no candidate text")
            return ""


class OpenAICompatibleTextModel:
    """Chat-completion backend for OpenAI-compatible providers."""

    def __init__(self, config: LiqPassConfig, client: AsyncOpenAI | None = None):
        self.model = config.google_mcp_model
        self._api_key = config.google_mcp_api_key
        self.client = client
        if self.client is None and self._api_key:
            self.client = AsyncOpenAI(
                base_url=config.google_mcp_base_url,
                api_key=self._api_key,
                timeout=config.heuristic_timeout,
                max_retries=0,
            )
        logger.info("OpenAI-compatible heuristic model: %s", self.model)

    @property
    def configured(self) -> bool:
        return self.client is not None

    async def generate(self, prompt: str) -> str:
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            temperature=0.1,
            max_tokens=512,
            response_format={"type": "json_object"},
        )
        return response.choices[0].message.content or ""


def build_text_model(config: LiqPassConfig) -> TextModel:
    """Pick the heuristic transport named by ``config.heuristic_provider``."""
    if config.heuristic_provider == "openai":
        return OpenAICompatibleTextModel(config)
    return GeminiTextModel(config)
