"""
Generation capability adapter.

Wraps the Gemini chat model behind three calls used by the rest of the
system: schema-validated structured generation, plain text generation, and
verbatim text extraction from a PDF. Structured calls return a tagged union
so callers handle the "model answered but not in the expected shape" case
explicitly instead of probing fields.

Provider failures are classified into rate limit, quota exhaustion or a
generic generation failure. Nothing here retries.

Dependencies: langchain_core, langchain_google_genai, pydantic
System role: Single seam between the domain and the generative model
"""

import base64
import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, Sequence, TypeVar

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import BaseMessage, HumanMessage
from langchain_google_genai import ChatGoogleGenerativeAI
from pydantic import BaseModel

from askmynotes.configs.generation import GenerationSettings
from askmynotes.core.exceptions import (
    GenerationError,
    UpstreamError,
    UpstreamQuotaExhaustedError,
    UpstreamRateLimitedError,
)

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)

ModelFactory = Callable[[str, float, int | None], BaseChatModel]

_RATE_LIMIT_MARKERS = ("rate limit", "resource_exhausted", "too many requests")
_QUOTA_MARKERS = ("quota", "billing", "credit", "payment")


@dataclass(frozen=True)
class StructuredResult(Generic[SchemaT]):
    """The model returned output that validated against the requested schema."""

    value: SchemaT


@dataclass(frozen=True)
class RawTextResult:
    """The model answered, but its output did not parse into the schema."""

    text: str
    parse_error: str | None = None


def message_text(message: Any) -> str:
    """
    Flatten a chat message (or bare content) into plain text.

    Gemini may return content as a list of parts; only text parts are kept.
    """
    content = getattr(message, "content", message)
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    parts = []
    for part in content:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type") == "text":
            parts.append(part.get("text", ""))
    return "".join(parts)


def _exception_chain(exc: BaseException) -> list[BaseException]:
    """The exception followed by everything it wraps, without cycles."""
    chain = []
    current: BaseException | None = exc
    while current is not None and all(current is not seen for seen in chain):
        chain.append(current)
        current = current.__cause__ or current.__context__
    return chain


def _status_code(chain: Sequence[BaseException]) -> int | None:
    """First HTTP-like status code found along an exception chain."""
    for current in chain:
        for attr in ("status_code", "code"):
            value = getattr(current, attr, None)
            if isinstance(value, int) and not isinstance(value, bool):
                return value
    return None


def classify_upstream_error(exc: BaseException) -> UpstreamError:
    """
    Map a provider exception onto the upstream error taxonomy.

    Args:
        exc: Exception raised by the chat model

    Returns:
        UpstreamError: Rate limit, quota exhaustion or generic failure
    """
    if isinstance(exc, UpstreamError):
        return exc

    chain = _exception_chain(exc)
    status = _status_code(chain)
    text = " ".join(str(e) for e in chain).lower()
    details = {"error_type": type(exc).__name__, "status_code": status}

    # Gemini reports exhausted quota as 429 RESOURCE_EXHAUSTED
    if status == 402 or any(marker in text for marker in _QUOTA_MARKERS):
        error: UpstreamError = UpstreamQuotaExhaustedError(details)
    elif status == 429 or any(marker in text for marker in _RATE_LIMIT_MARKERS):
        error = UpstreamRateLimitedError(details)
    else:
        error = GenerationError(f"Generation failed: {exc}", details)

    logger.warning(
        f"{__name__}:classify_upstream_error - Provider call failed",
        extra={**details, "upstream_error": type(error).__name__, "retryable": error.retryable},
    )
    return error


def default_model_factory(settings: GenerationSettings) -> ModelFactory:
    """Factory building ChatGoogleGenerativeAI instances from settings."""

    def build(model: str, temperature: float, max_output_tokens: int | None) -> BaseChatModel:
        kwargs: dict[str, Any] = {
            "model": model,
            "temperature": temperature,
            "max_retries": settings.max_retries,
        }
        if max_output_tokens is not None:
            kwargs["max_output_tokens"] = max_output_tokens
        if settings.google_api_key:
            kwargs["google_api_key"] = settings.google_api_key
        return ChatGoogleGenerativeAI(**kwargs)

    return build


class GenerationClient:
    """
    Async facade over the chat model.

    Model instances are cached per (model, temperature, max tokens) so the
    underlying HTTP clients are reused across requests.
    """

    def __init__(
        self,
        settings: GenerationSettings,
        model_factory: ModelFactory | None = None,
    ) -> None:
        """
        Args:
            settings: Generation settings
            model_factory: Builds chat models; tests inject fakes here
        """
        self._settings = settings
        self._model_factory = model_factory or default_model_factory(settings)
        self._models: dict[tuple[str, float, int | None], BaseChatModel] = {}

    @property
    def settings(self) -> GenerationSettings:
        return self._settings

    def _model(
        self,
        model: str,
        temperature: float,
        max_output_tokens: int | None = None,
    ) -> BaseChatModel:
        key = (model, temperature, max_output_tokens)
        if key not in self._models:
            self._models[key] = self._model_factory(model, temperature, max_output_tokens)
        return self._models[key]

    async def generate_structured(
        self,
        messages: Sequence[BaseMessage],
        schema: type[SchemaT],
        *,
        model: str,
        temperature: float,
    ) -> StructuredResult[SchemaT] | RawTextResult:
        """
        Request one structured result validated against `schema`.

        Args:
            messages: Prompt messages
            schema: Pydantic model describing the expected payload
            model: Model identifier
            temperature: Sampling temperature

        Returns:
            StructuredResult when the output validated, RawTextResult otherwise

        Raises:
            UpstreamError: When the provider call itself fails
        """
        runnable = self._model(model, temperature).with_structured_output(schema, include_raw=True)
        try:
            output = await runnable.ainvoke(list(messages))
        except Exception as e:
            raise classify_upstream_error(e) from e

        parsed = output.get("parsed")
        if isinstance(parsed, schema):
            return StructuredResult(parsed)
        if isinstance(parsed, dict):
            try:
                return StructuredResult(schema.model_validate(parsed))
            except ValueError as e:
                output["parsing_error"] = e

        parse_error = output.get("parsing_error")
        raw_text = message_text(output.get("raw"))
        logger.warning(
            f"{__name__}:generate_structured - Structured output did not parse, using raw text",
            extra={
                "schema": schema.__name__,
                "parse_error": str(parse_error) if parse_error else None,
                "raw_len": len(raw_text),
            },
        )
        return RawTextResult(raw_text, str(parse_error) if parse_error else None)

    async def generate_text(
        self,
        messages: Sequence[BaseMessage],
        *,
        model: str,
        temperature: float,
        max_output_tokens: int | None = None,
    ) -> str:
        """
        Request plain text.

        Raises:
            UpstreamError: When the provider call fails
        """
        try:
            response = await self._model(model, temperature, max_output_tokens).ainvoke(
                list(messages)
            )
        except Exception as e:
            raise classify_upstream_error(e) from e
        return message_text(response)

    async def extract_document_text(
        self,
        data: bytes,
        mime_type: str,
        instruction: str,
    ) -> str:
        """
        Ask the model to transcribe a binary document.

        Args:
            data: Raw file bytes
            mime_type: Document MIME type (e.g. application/pdf)
            instruction: Extraction instruction

        Returns:
            str: Model output (may be empty)

        Raises:
            UpstreamError: When the provider call fails
        """
        message = HumanMessage(
            content=[
                {"type": "text", "text": instruction},
                {
                    "type": "media",
                    "mime_type": mime_type,
                    "data": base64.b64encode(data).decode("ascii"),
                },
            ]
        )
        return await self.generate_text(
            [message],
            model=self._settings.extraction_model,
            temperature=self._settings.extraction_temperature,
            max_output_tokens=self._settings.extraction_max_output_tokens,
        )
