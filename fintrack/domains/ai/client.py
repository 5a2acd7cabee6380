"""Structured text generation against a hosted, OpenAI-compatible model.

Callers depend on the :class:`StructuredGenerator` protocol and always get a
:class:`GenerationResult` back; transport and parsing problems are reported
as a typed :class:`GenerationError` so a caller can tell an unreachable model
from one that answered with unusable output.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Protocol

from flask import current_app
from openai import OpenAI, OpenAIError

from fintrack.domains.ai.json_repair import ParseFailure, parse_model_json

logger = logging.getLogger(__name__)

ERROR_UNAVAILABLE = "unavailable"
ERROR_TRANSPORT = "transport"
ERROR_MALFORMED = "malformed"


@dataclass(frozen=True)
class PromptFields:
    system: str
    user: str
    temperature: float = 0.3
    max_tokens: int = 800
    history: List[Dict[str, str]] = field(default_factory=list)

    def messages(self) -> List[Dict[str, str]]:
        return [{"role": "system", "content": self.system}, *self.history, {"role": "user", "content": self.user}]


@dataclass(frozen=True)
class GenerationError:
    kind: str
    message: str
    raw_text: Optional[str] = None


@dataclass(frozen=True)
class GenerationResult:
    data: Optional[Dict[str, Any]] = None
    error: Optional[GenerationError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.data is not None

    @classmethod
    def success(cls, data: Dict[str, Any]) -> "GenerationResult":
        return cls(data=data)

    @classmethod
    def failure(cls, kind: str, message: str, raw_text: Optional[str] = None) -> "GenerationResult":
        return cls(error=GenerationError(kind=kind, message=message, raw_text=raw_text))


class StructuredGenerator(Protocol):
    def generate_structured_response(self, prompt: PromptFields) -> GenerationResult: ...


class UnavailableGenerator:
    """Used when no API key is configured or AI is switched off."""

    def __init__(self, reason: str = "ai_not_configured") -> None:
        self.reason = reason

    def generate_structured_response(self, prompt: PromptFields) -> GenerationResult:
        return GenerationResult.failure(ERROR_UNAVAILABLE, self.reason)


class OpenAICompatibleGenerator:
    """Chat-completions client that insists on a JSON object response."""

    def __init__(self, *, api_key: str, base_url: str, model: str, timeout: float = 30.0, client: Any = None) -> None:
        self.model = model
        self._client = client or OpenAI(api_key=api_key, base_url=base_url, timeout=timeout, max_retries=1)

    def generate_structured_response(self, prompt: PromptFields) -> GenerationResult:
        try:
            completion = self._client.chat.completions.create(
                model=self.model,
                messages=prompt.messages(),
                temperature=prompt.temperature,
                max_tokens=prompt.max_tokens,
                response_format={"type": "json_object"},
            )
        except OpenAIError as exc:
            logger.warning("LLM request failed: %s", exc)
            return GenerationResult.failure(ERROR_TRANSPORT, str(exc))

        text = completion.choices[0].message.content if completion.choices else None
        parsed = parse_model_json(text)
        if isinstance(parsed, ParseFailure):
            logger.warning("LLM returned unparsable output (%s): %s", parsed.reason, parsed.snippet)
            return GenerationResult.failure(ERROR_MALFORMED, parsed.reason, raw_text=text)
        if parsed.stage != "strict":
            logger.info("LLM output needed %s repair", parsed.stage)
        return GenerationResult.success(parsed.data)


def build_generator(config: Mapping[str, Any]) -> StructuredGenerator:
    if not config.get("ENABLE_AI", True):
        return UnavailableGenerator("ai_disabled")
    api_key = config.get("LLM_API_KEY")
    if not api_key:
        logger.warning("LLM_API_KEY not set; AI features will use fallback responses")
        return UnavailableGenerator()
    return OpenAICompatibleGenerator(
        api_key=api_key,
        base_url=config.get("LLM_BASE_URL"),
        model=config.get("LLM_MODEL"),
        timeout=float(config.get("LLM_TIMEOUT_SECONDS", 30)),
    )


def get_generator() -> StructuredGenerator:
    return current_app.extensions["llm_generator"]
