from __future__ import annotations
from dataclasses import dataclass
import json
from typing import Any, AsyncIterator, Iterator

import httpx
import requests

from llm.llm_errors import AuthOrApiError, ListGenerationError, NetworkError, UnknownError
from llm.llm_types import GenerationRequest, StreamEvent
from llm.stream_decoder import StreamDecoder

APP_TITLE = "Fake List Generator"


def _error_message_from_body(body: str, fallback: str) -> str:
    try:
        data: Any = json.loads(body)
    except (json.JSONDecodeError, TypeError):
        return fallback or body.strip() or "Unknown error"

    error = data.get("error") if isinstance(data, dict) else None
    message = error.get("message") if isinstance(error, dict) else None
    if isinstance(message, str) and message:
        return message
    return fallback or "Unknown error"


# ----- Main Client Implementation -----
@dataclass
class OpenAICompatChatClient:
    endpoint: str
    api_key: str
    # None means wait forever; a hung connection blocks the run
    timeout_s: float | None = None

    @property
    def completions_url(self) -> str:
        return f"{self.endpoint.rstrip('/')}/chat/completions"

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "X-Title": APP_TITLE,
        }

    # ----- INTERNALS -----

    @staticmethod
    def _translate_httpx_error(exc: httpx.HTTPError) -> ListGenerationError:
        if isinstance(exc, httpx.HTTPStatusError):
            response = exc.response
            return AuthOrApiError(
                status=response.status_code,
                message=_error_message_from_body(response.text, response.reason_phrase),
            )
        if isinstance(exc, (httpx.ConnectError, httpx.ConnectTimeout)):
            return NetworkError()
        return UnknownError(str(exc) or type(exc).__name__)

    @staticmethod
    def _translate_requests_error(exc: requests.exceptions.RequestException) -> ListGenerationError:
        if isinstance(exc, requests.exceptions.HTTPError) and exc.response is not None:
            response = exc.response
            return AuthOrApiError(
                status=response.status_code,
                message=_error_message_from_body(response.text, response.reason or ""),
            )
        if isinstance(exc, requests.exceptions.ConnectionError):
            return NetworkError()
        return UnknownError(str(exc) or type(exc).__name__)

    # ----- API: chat_stream, chat_stream_async -----

    def chat_stream(self, request: GenerationRequest, decoder: StreamDecoder) -> Iterator[StreamEvent]:
        try:
            response = requests.post(
                self.completions_url,
                json=request.to_payload(),
                headers=self._headers(),
                timeout=self.timeout_s,
                stream=True,
            )
        except requests.exceptions.RequestException as exc:
            raise self._translate_requests_error(exc) from exc

        with response:
            try:
                response.raise_for_status()
                yield from decoder.decode(response.iter_content(chunk_size=None))
            except requests.exceptions.RequestException as exc:
                raise self._translate_requests_error(exc) from exc

    async def chat_stream_async(
        self,
        request: GenerationRequest,
        decoder: StreamDecoder,
    ) -> AsyncIterator[StreamEvent]:
        async with httpx.AsyncClient(timeout=self.timeout_s) as client:
            try:
                async with client.stream(
                    "POST",
                    self.completions_url,
                    json=request.to_payload(),
                    headers=self._headers(),
                ) as response:
                    if response.is_error:
                        # the body has to be read before the error message is available
                        await response.aread()
                        response.raise_for_status()
                    async for event in decoder.decode_async(response.aiter_bytes()):
                        yield event
            except httpx.HTTPError as exc:
                raise self._translate_httpx_error(exc) from exc
