"""
Prompt -> Mermaid markup generation against an OpenAI-compatible
chat-completion endpoint.

Responses are validated at the boundary into a tagged result
(CompletionSuccess / CompletionFailure) instead of indexing into raw JSON.
"""
from typing import Any, Literal, Optional, Union

import httpx
from pydantic import BaseModel, ValidationError

from app.config import settings
from app.exceptions import (
    EmptyGenerationException,
    EmptyPromptException,
    GenerationInProgressException,
    MissingCredentialException,
    UpstreamErrorException,
)
from app.services.credential_service import CredentialHolder
from app.utils.logging_config import generation_logger

SYSTEM_PROMPT = (
    "You are a Mermaid diagram generator. Respond only with valid Mermaid "
    "diagram markup for the user's request. Do not include prose, explanations "
    "or markdown code fences."
)


# ==================== Wire models ====================

class CompletionMessage(BaseModel):
    role: Optional[str] = None
    content: Optional[str] = None


class CompletionChoice(BaseModel):
    message: Optional[CompletionMessage] = None


class ChatCompletion(BaseModel):
    choices: list[CompletionChoice] = []


class UpstreamErrorBody(BaseModel):
    message: Optional[str] = None


class ErrorEnvelope(BaseModel):
    error: Union[UpstreamErrorBody, str, None] = None


class CompletionSuccess(BaseModel):
    kind: Literal["success"] = "success"
    text: Optional[str] = None


class CompletionFailure(BaseModel):
    kind: Literal["failure"] = "failure"
    status_code: int
    message: str


CompletionResult = Union[CompletionSuccess, CompletionFailure]


def parse_completion_response(status_code: int, body: Any) -> CompletionResult:
    """Turn an HTTP status and decoded JSON body into a tagged result."""
    if not 200 <= status_code < 300:
        message = None
        try:
            envelope = ErrorEnvelope.model_validate(body) if isinstance(body, dict) else None
        except ValidationError:
            envelope = None
        if envelope is not None:
            if isinstance(envelope.error, UpstreamErrorBody):
                message = envelope.error.message
            elif isinstance(envelope.error, str):
                message = envelope.error
        return CompletionFailure(
            status_code=status_code,
            message=message or f"Generation endpoint returned HTTP {status_code}",
        )

    try:
        completion = ChatCompletion.model_validate(body)
    except ValidationError:
        return CompletionSuccess(text=None)
    if not completion.choices or completion.choices[0].message is None:
        return CompletionSuccess(text=None)
    return CompletionSuccess(text=completion.choices[0].message.content)


def build_messages(prompt: str) -> list[dict[str, str]]:
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": prompt},
    ]


# ==================== Client ====================

class GenerationClient:
    """
    Single-attempt generation client.

    in_progress is True while a request is in flight so callers can refuse a
    second submission; it is reset whether the request succeeds or fails.
    """

    def __init__(
        self,
        credentials: CredentialHolder,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.credentials = credentials
        self.base_url = (base_url or settings.LLM_BASE_URL).rstrip("/")
        self.model = model or settings.LLM_MODEL
        self.temperature = settings.LLM_TEMPERATURE if temperature is None else temperature
        self.max_tokens = max_tokens or settings.LLM_MAX_TOKENS
        self.timeout = timeout or settings.LLM_TIMEOUT_SECONDS
        self._transport = transport
        self.in_progress = False

    async def generate(self, prompt: str) -> str:
        """
        Send the prompt and return the first choice's text.

        Raises:
            EmptyPromptException: prompt is blank
            MissingCredentialException: no API key stored
            GenerationInProgressException: another request is in flight
            UpstreamErrorException: non-2xx status or transport failure
            EmptyGenerationException: 2xx without usable text
        """
        if not prompt or not prompt.strip():
            raise EmptyPromptException()
        api_key = self.credentials.get()
        if not api_key:
            raise MissingCredentialException()
        if self.in_progress:
            raise GenerationInProgressException()

        self.in_progress = True
        try:
            result = await self._request(prompt.strip(), api_key)
        finally:
            self.in_progress = False

        if isinstance(result, CompletionFailure):
            generation_logger.warning(
                f"Generation endpoint rejected request: HTTP {result.status_code} {result.message}"
            )
            raise UpstreamErrorException(result.message, result.status_code)
        if not result.text or not result.text.strip():
            generation_logger.warning("Generation endpoint returned no usable content")
            raise EmptyGenerationException()

        generation_logger.info(f"Generated {len(result.text)} characters of markup")
        return result.text

    async def _request(self, prompt: str, api_key: str) -> CompletionResult:
        payload = {
            "model": self.model,
            "messages": build_messages(prompt),
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        headers = {"Authorization": f"Bearer {api_key}"}
        generation_logger.debug(f"POST {self.base_url}/chat/completions model={self.model}")

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            try:
                response = await client.post(
                    f"{self.base_url}/chat/completions", json=payload, headers=headers
                )
            except httpx.HTTPError as e:
                generation_logger.error(f"Generation endpoint unreachable: {type(e).__name__}: {e}")
                raise UpstreamErrorException(
                    f"Could not reach the generation endpoint ({type(e).__name__})"
                ) from e

        try:
            body = response.json()
        except ValueError:
            body = None
        return parse_completion_response(response.status_code, body)
