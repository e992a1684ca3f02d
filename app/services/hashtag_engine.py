"""Hashtag categorization via an OpenAI-compatible chat-completions provider.

The engine never fails the analysis: any provider problem (missing key,
transport error, non-2xx, unparseable completion) is logged and answered
with a fixed fallback bundle, so the extracted text still reaches the caller.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Protocol

import httpx

from app.core.config import Settings, settings
from app.exceptions import (
    HashtagEngineError,
    ProviderResponseError,
    ProviderUnavailableError,
)

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """\
You are a Viral Social Media Strategist. You analyse social media posts to maximise reach.
**Input:** The text content of a user's post.
**Task:** Analyse the core topics, tone, and industry.
**Output:** Return ONLY a JSON object with three arrays of hashtags:
1. 'safe': High-volume, broad tags (e.g., #Marketing, #Tech). Use these for baseline visibility.
2. 'rising': Trending, mid-volume tags relevant *right now* or to specific modern sub-cultures (e.g., #GenAI, #GrowthHacking).
3. 'niche': Specific, low-competition tags that target high-intent users (e.g., #SaaSMarketingTips).

**Rules:**
* Do not include the # symbol in the string, just the word.
* Ensure tags are CamelCase (e.g., 'DigitalMarketing', not 'digitalmarketing').
* Do not return any conversational text, only the JSON."""

# Role markers that could be used to smuggle instructions into the prompt.
_ROLE_MARKER = re.compile(r"(?:system|assistant|user)\s*:", re.IGNORECASE)
_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)

CATEGORIES = ("safe", "rising", "niche")


@dataclass
class HashtagBundle:
    """Hashtags grouped by reach category."""

    safe: list[str] = field(default_factory=list)
    rising: list[str] = field(default_factory=list)
    niche: list[str] = field(default_factory=list)
    is_fallback: bool = False

    @classmethod
    def fallback(cls) -> HashtagBundle:
        return cls(
            safe=["SocialMedia", "Marketing"],
            rising=["DigitalTrends"],
            niche=["ContentStrategy"],
            is_fallback=True,
        )


class ChatCompletionClient(Protocol):
    """Minimal capability the engine needs from an AI provider."""

    async def complete_chat(self, prompt: str) -> str:
        """Return the assistant message content for ``prompt``.

        Raises:
            HashtagEngineError: If the provider cannot produce a completion.
        """
        ...


class OpenRouterClient:
    """Chat-completions client for OpenRouter."""

    def __init__(self, config: Settings | None = None) -> None:
        self.config = config or settings

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.config.openrouter_api_key}",
            "HTTP-Referer": self.config.openrouter_referer,
            "X-Title": self.config.openrouter_title,
        }

    async def complete_chat(self, prompt: str) -> str:
        """POST a single-message chat completion and return its content.

        Raises:
            ProviderUnavailableError: Missing key, network failure or non-2xx.
            ProviderResponseError: Response body lacks a completion.
        """
        if not self.config.openrouter_api_key:
            raise ProviderUnavailableError("OPENROUTER_API_KEY is not configured")

        body = {
            "model": self.config.openrouter_model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.config.openrouter_temperature,
            "max_tokens": self.config.openrouter_max_tokens,
        }

        logger.info("Calling OpenRouter API with model: %s", self.config.openrouter_model)
        try:
            async with httpx.AsyncClient(
                base_url=self.config.openrouter_base_url,
                timeout=self.config.openrouter_timeout_seconds,
                headers=self._headers(),
            ) as client:
                response = await client.post("chat/completions", json=body)
        except httpx.TimeoutException as e:
            raise ProviderUnavailableError(f"Timeout calling OpenRouter: {e}") from e
        except httpx.RequestError as e:
            raise ProviderUnavailableError(f"Network error calling OpenRouter: {e}") from e

        if not response.is_success:
            logger.error(
                "OpenRouter API error: %d - %s", response.status_code, response.text[:500]
            )
            raise ProviderUnavailableError(
                f"OpenRouter returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ProviderResponseError(f"Unexpected OpenRouter response: {e}") from e

        if not isinstance(content, str) or not content.strip():
            raise ProviderResponseError("AI returned empty content")
        return content


def sanitize_input(text: str, max_chars: int = 5000) -> str:
    """Strip chat role markers and truncate to ``max_chars``."""
    cleaned = _ROLE_MARKER.sub("", text)
    return cleaned[:max_chars]


def build_prompt(text: str) -> str:
    return f"{SYSTEM_PROMPT}\n\nAnalyze this post:\n\n{text}"


def _normalize_tags(values: Any) -> list[str]:
    if not isinstance(values, list):
        return []
    tags: list[str] = []
    for value in values:
        if not isinstance(value, str):
            continue
        tag = value.strip().lstrip("#").strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def parse_bundle(content: str) -> HashtagBundle:
    """Parse a model completion into a :class:`HashtagBundle`.

    Accepts a bare JSON object or one embedded in surrounding prose or code
    fences. Category keys are matched case-insensitively; missing categories
    become empty lists.

    Raises:
        ProviderResponseError: If no JSON object can be recovered.
    """
    try:
        data = json.loads(content)
    except json.JSONDecodeError:
        match = _JSON_OBJECT.search(content)
        if match is None:
            raise ProviderResponseError("Could not parse AI response", content)
        try:
            data = json.loads(match.group(0))
        except json.JSONDecodeError as e:
            raise ProviderResponseError("Could not parse AI response", content) from e

    if not isinstance(data, dict):
        raise ProviderResponseError("AI response is not a JSON object", content)

    lowered = {str(k).lower(): v for k, v in data.items()}
    return HashtagBundle(**{name: _normalize_tags(lowered.get(name)) for name in CATEGORIES})


class HashtagEngine:
    """Generate categorized hashtags for a post's text."""

    def __init__(
        self,
        client: ChatCompletionClient | None = None,
        max_prompt_chars: int | None = None,
    ) -> None:
        self.client = client or OpenRouterClient()
        self.max_prompt_chars = max_prompt_chars or settings.max_prompt_chars

    async def analyze(self, text: str) -> HashtagBundle:
        """Return hashtags for ``text``, or the fallback bundle on any failure."""
        prompt = build_prompt(sanitize_input(text, self.max_prompt_chars))
        try:
            content = await self.client.complete_chat(prompt)
            bundle = parse_bundle(content)
        except ProviderUnavailableError as e:
            logger.error("AI provider unavailable: %s", e)
            return HashtagBundle.fallback()
        except HashtagEngineError as e:
            logger.error("Could not use AI response: %s", e)
            return HashtagBundle.fallback()
        except Exception:
            logger.exception("Unexpected error analyzing post")
            return HashtagBundle.fallback()

        logger.info(
            "Generated hashtags (safe=%d, rising=%d, niche=%d)",
            len(bundle.safe),
            len(bundle.rising),
            len(bundle.niche),
        )
        return bundle
