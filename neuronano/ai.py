"""
Gemini client for the NeuroNano AI rewrite command.

Sends the whole buffer plus the user's instruction to the Gemini
generateContent endpoint and returns the rewritten file content, with any
markdown code fence the model wrapped around it removed.
"""
import os
from typing import Any

import httpx

from neuronano import logger
from neuronano.buffer import split_lines
from neuronano.errors import AiRequestError

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
GEMINI_MODEL = os.getenv("NEURONANO_GEMINI_MODEL", "gemini-2.5-flash")
DEFAULT_TIMEOUT_S = 60.0

PROMPT_TEMPLATE = (
    'You are an intelligent text editor engine. I will provide a file named "{filename}" '
    'with the following content. The user wants to: "{instruction}". RULES:\n\n'
    "Return ONLY the fully updated file content. No markdown code blocks. "
    "No conversational text.\n\n"
    "If the user asks for explanations, insert them as COMMENTS inside the code "
    "(using correct syntax for {filename}).\n\n"
    "Preserve indentation."
)


def ai_timeout() -> float:
    """Request timeout in seconds from NEURONANO_AI_TIMEOUT_S, 60 when unset or malformed."""
    value = os.getenv("NEURONANO_AI_TIMEOUT_S")
    if not value:
        return DEFAULT_TIMEOUT_S
    try:
        return float(value)
    except ValueError:
        logger.log(f"ignoring bad NEURONANO_AI_TIMEOUT_S: {value!r}")
        return DEFAULT_TIMEOUT_S


def build_prompt(code: str, filename: str, instruction: str) -> str:
    header = PROMPT_TEMPLATE.format(filename=filename, instruction=instruction)
    return f"{header}\n\nCODE:\n{code}"


def clean_markdown(text: str) -> str:
    """Strip a leading and a trailing ``` fence line, if present."""
    lines = split_lines(text)
    if not lines:
        return ""
    if lines[0].strip().startswith("```"):
        lines.pop(0)
    if lines and lines[-1].strip().startswith("```"):
        lines.pop()
    return "\n".join(lines)


def extract_text(payload: Any) -> str:
    """Pull candidates[0].content.parts[0].text out of a generateContent response."""
    try:
        text = payload["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError) as exc:
        raise AiRequestError("Invalid API response structure") from exc
    if not isinstance(text, str):
        raise AiRequestError("Invalid API response structure")
    return text


def _error_detail(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return ""
    if isinstance(payload, dict) and isinstance(payload.get("error"), dict):
        return str(payload["error"].get("message") or "")
    return ""


class GeminiClient:
    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        model: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self._client = http_client or httpx.AsyncClient(timeout=timeout or ai_timeout())
        self.model = model or GEMINI_MODEL

    @property
    def url(self) -> str:
        return f"{GEMINI_BASE_URL}/models/{self.model}:generateContent"

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "GeminiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def rewrite(self, api_key: str, code: str, filename: str, instruction: str) -> str:
        body = {"contents": [{"parts": [{"text": build_prompt(code, filename, instruction)}]}]}
        try:
            response = await self._client.post(self.url, params={"key": api_key}, json=body)
        except httpx.TimeoutException as exc:
            raise AiRequestError("Gemini API request timed out") from exc
        except httpx.HTTPError as exc:
            raise AiRequestError(f"Gemini API request failed: {exc}") from exc

        if not response.is_success:
            message = f"Gemini API Error: {response.status_code} {response.reason_phrase}".rstrip()
            detail = _error_detail(response)
            if detail:
                message = f"{message} ({detail})"
            raise AiRequestError(message)

        try:
            payload = response.json()
        except ValueError as exc:
            raise AiRequestError("Invalid API response structure") from exc
        return clean_markdown(extract_text(payload))


async def rewrite(api_key: str, code: str, filename: str, instruction: str) -> str:
    """Run one rewrite request with a short-lived client."""
    async with GeminiClient() as client:
        return await client.rewrite(api_key, code, filename, instruction)
