import json
import logging
import re
from collections.abc import AsyncIterator
from typing import Any, TypeVar

from openai import AsyncOpenAI
from pydantic import BaseModel, ValidationError

from sitewave.core.config import settings

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


def _extract_fenced_block(text: str) -> str | None:
    blocks = re.findall(r"```(?:json)?\s*(.*?)\s*```", text, re.DOTALL | re.IGNORECASE)
    return blocks[0].strip() if blocks else None


def strip_code_fences(text: str) -> str:
    if not text:
        return ""
    fenced = re.match(r"^\s*```[a-zA-Z0-9_-]*\s*([\s\S]*?)\s*```\s*$", text)
    if fenced:
        return fenced.group(1).strip()
    return text.strip()


def _extract_balanced_json_span(text: str) -> str | None:
    """Return the first balanced top-level JSON object or array in ``text``."""
    if not text:
        return None

    openers = [(text.find(ch), ch) for ch in "{[" if text.find(ch) != -1]
    if not openers:
        return None
    start, open_ch = min(openers)
    close_ch = "}" if open_ch == "{" else "]"

    depth = 0
    in_string = False
    escaped = False
    for idx in range(start, len(text)):
        ch = text[idx]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == open_ch:
            depth += 1
        elif ch == close_ch:
            depth -= 1
            if depth == 0:
                return text[start : idx + 1]
    return None


def json_candidates(raw_text: str) -> list[str]:
    """Candidate JSON strings pulled from a model reply, most specific first."""
    text = (raw_text or "").strip()
    if not text:
        return []

    candidates = [_extract_fenced_block(text), text, _extract_balanced_json_span(text)]
    # Some models prefix the object with a bare "json" token.
    if text.lower().startswith("json"):
        trimmed = text[4:].lstrip(": \n\r\t")
        candidates += [trimmed, _extract_balanced_json_span(trimmed)]

    unique: list[str] = []
    for candidate in candidates:
        if candidate and candidate.strip() and candidate.strip() not in unique:
            unique.append(candidate.strip())
    return unique


class LLMClient:
    """Chat-completion client for any OpenAI-compatible endpoint."""

    def __init__(
        self,
        model_name: str | None = None,
        base_url: str | None = None,
        api_key: str | None = None,
    ):
        self.model_name = model_name or settings.AI_DEFAULT_MODEL
        self.client = AsyncOpenAI(
            base_url=base_url or settings.OPENAI_BASE_URL,
            api_key=api_key or settings.OPENAI_API_KEY,
        )
        self.last_usage: dict[str, int] | None = None

    def _record_usage(self, response: Any) -> None:
        usage = getattr(response, "usage", None)
        if usage is None:
            self.last_usage = None
            return
        self.last_usage = {
            "prompt_tokens": getattr(usage, "prompt_tokens", 0) or 0,
            "completion_tokens": getattr(usage, "completion_tokens", 0) or 0,
            "total_tokens": getattr(usage, "total_tokens", 0) or 0,
        }

    @property
    def tokens_used(self) -> int:
        return self.last_usage["total_tokens"] if self.last_usage else 0

    async def _complete(self, system_prompt: str, user_prompt: str, temperature: float) -> str:
        response = await self.client.chat.completions.create(
            model=self.model_name,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=temperature,
        )
        if not getattr(response, "choices", None):
            logger.error("Received no choices from %s: %s", self.model_name, response)
            raise ValueError(f"Provider {self.model_name} returned no output")
        self._record_usage(response)
        return response.choices[0].message.content or ""

    async def generate_structured(
        self,
        system_prompt: str,
        user_prompt: str,
        response_schema: type[T],
        *,
        temperature: float = 0.7,
    ) -> T:
        """
        Generate a response matching ``response_schema``.

        The JSON schema is appended to the system prompt. A second attempt with
        a stricter instruction is made when the first reply does not parse.
        """
        schema_json = json.dumps(response_schema.model_json_schema())
        augmented_system_prompt = (
            f"{system_prompt}\n\n"
            "CRITICAL: Respond with ONLY valid JSON matching the following JSON Schema. "
            "Do not wrap it in markdown code blocks or add any text around it.\n\n"
            f"EXPECTED SCHEMA:\n{schema_json}"
        )
        attempt_prompts = [
            augmented_system_prompt,
            (
                f"{augmented_system_prompt}\n\n"
                "RETRY INSTRUCTIONS: Your previous response was invalid or incomplete. "
                "Return ONLY a single JSON object matching the schema, with no prose, "
                "headings or markdown fences."
            ),
        ]

        for attempt, system_prompt_attempt in enumerate(attempt_prompts, start=1):
            logger.info(
                "Structured request to %s (attempt %s/%s)",
                self.model_name,
                attempt,
                len(attempt_prompts),
            )
            text_response = await self._complete(
                system_prompt_attempt, user_prompt, temperature if attempt == 1 else 0
            )
            parse_errors: list[str] = []
            for candidate in json_candidates(text_response):
                try:
                    return response_schema.model_validate(json.loads(candidate, strict=False))
                except (json.JSONDecodeError, ValidationError) as exc:
                    parse_errors.append(str(exc))
            error = ValueError(
                "Unable to parse structured response: "
                + (" | ".join(parse_errors[:3]) or "empty content")
            )
            if attempt < len(attempt_prompts):
                logger.warning(
                    "Structured parsing failed for %s on attempt %s: %s. Retrying...",
                    self.model_name,
                    attempt,
                    error,
                )
                continue
            logger.error("Error parsing structured response from %s: %s", self.model_name, error)
            raise error
        raise RuntimeError("Structured generation failed")

    async def generate_text(
        self, system_prompt: str, user_prompt: str, *, temperature: float = 0.7
    ) -> str:
        """Generate plain text, with any wrapping code fence removed."""
        logger.info("Text request to %s", self.model_name)
        text_response = strip_code_fences(
            await self._complete(system_prompt, user_prompt, temperature)
        )
        if not text_response:
            raise ValueError("Model returned empty content")
        return text_response

    async def stream_text(
        self, system_prompt: str, user_prompt: str, *, temperature: float = 0.7
    ) -> AsyncIterator[str]:
        logger.info("Streaming text request to %s", self.model_name)
        stream = await self.client.chat.completions.create(
            model=self.model_name,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=temperature,
            stream=True,
        )
        async for chunk in stream:
            if not chunk.choices:
                continue
            delta = chunk.choices[0].delta.content
            if delta:
                yield delta

    async def generate_images(self, prompt: str, **params: Any) -> list[Any]:
        """Call the image endpoint and return the raw ``data`` entries."""
        logger.info("Image request to %s", self.model_name)
        response = await self.client.images.generate(
            model=self.model_name, prompt=prompt, **params
        )
        return list(response.data or [])
