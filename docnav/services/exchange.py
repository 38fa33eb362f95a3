"""Client for the remote question-answering service."""

from __future__ import annotations

from types import TracebackType
from typing import Any, Protocol

import httpx
from pydantic import ValidationError

from docnav.core.logging import get_logger
from docnav.models.chat import ExchangeRequest, ExchangeResult
from docnav.services.errors import ExchangeApplicationError, ExchangeTransportError

logger = get_logger(__name__)


class ExchangeClient(Protocol):
    async def exchange(self, question: str, conversation_id: str | None) -> ExchangeResult:
        """Send one question and return the structured answer."""
        ...


def _error_detail(response: httpx.Response) -> str | None:
    """Pull an ``error`` message out of a JSON error body, if any."""

    try:
        payload: Any = response.json()
    except ValueError:
        return None
    if isinstance(payload, dict):
        detail = payload.get("error")
        if isinstance(detail, str) and detail.strip():
            return detail
    return None


class HttpExchangeClient:
    """POST questions to the answering endpoint over HTTP.

    The client performs a single attempt per call. Callers that want retries
    or deadlines have to add them around :meth:`exchange`.

    ``headers`` and ``timeout`` configure the httpx client created here; an
    injected ``client`` must already carry them, so passing both is an error.
    """

    def __init__(
        self,
        endpoint: str,
        *,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if client is not None and (headers or timeout is not None):
            raise ValueError("headers and timeout cannot be combined with an injected client")

        self.endpoint = endpoint
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(headers=headers, timeout=timeout)

    async def __aenter__(self) -> "HttpExchangeClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def exchange(self, question: str, conversation_id: str | None) -> ExchangeResult:
        payload = ExchangeRequest(question=question, conversation_id=conversation_id).model_dump(by_alias=True)

        try:
            response = await self._client.post(self.endpoint, json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            message = _error_detail(exc.response) or f"Answering service returned HTTP {status_code}"
            logger.warning("exchange.http_status", status_code=status_code, endpoint=self.endpoint)
            raise ExchangeTransportError(message, status_code=status_code) from exc
        except httpx.HTTPError as exc:
            logger.warning("exchange.transport_error", endpoint=self.endpoint, error=str(exc))
            raise ExchangeTransportError(str(exc) or exc.__class__.__name__) from exc

        try:
            result = ExchangeResult.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            logger.warning("exchange.malformed_response", endpoint=self.endpoint, error=str(exc))
            raise ExchangeTransportError("Malformed response from answering service") from exc

        if result.error:
            raise ExchangeApplicationError(result.error)

        logger.debug(
            "exchange.completed",
            conversation_id=conversation_id,
            has_answer=bool(result.answer),
            source_count=len(result.sources) if result.sources is not None else None,
        )
        return result
