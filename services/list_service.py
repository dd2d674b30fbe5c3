from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Literal

from config.list_config import ResolvedConfig
from llm.llm_client import OpenAICompatChatClient
from llm.llm_errors import ConfigError, ListGenerationError, UnknownError
from llm.llm_types import GenerationRequest
from llm.stream_decoder import StreamDecoder
from services.prompt_renderer import render_prompt
from utils.terminal_ui import print_warning, write_fragment

GenerationState = Literal["idle", "sending", "streaming", "complete", "failed"]


@dataclass
class ListService:
    """Drives one list generation: render, send, stream, accumulate.

    Fragments go to ``sink`` in arrival order; the full text is returned
    once the stream ends.
    """

    config: ResolvedConfig
    sink: Callable[[str], None] = write_fragment
    client_factory: Callable[..., OpenAICompatChatClient] = OpenAICompatChatClient
    warn: Callable[[str], None] = print_warning
    state: GenerationState = field(default="idle", init=False)

    def build_request(self, count: int, concept: str) -> GenerationRequest:
        return GenerationRequest(
            model=self.config.model,
            prompt_text=render_prompt(self.config.prompt_template, count, concept),
        )

    def _prepare(self, count: int, concept: str) -> tuple[OpenAICompatChatClient, GenerationRequest, StreamDecoder]:
        if not self.config.api_key:
            self.state = "failed"
            raise ConfigError()
        client = self.client_factory(endpoint=self.config.endpoint, api_key=self.config.api_key)
        decoder = StreamDecoder(sink=self.sink)
        self.state = "sending"
        return client, self.build_request(count, concept), decoder

    def _complete(self, decoder: StreamDecoder) -> str:
        if not decoder.saw_done and not decoder.text:
            self.warn("Warning: Stream closed before any content was received")
        self.state = "complete"
        return decoder.text

    async def generate(self, count: int, concept: str) -> str:
        client, request, decoder = self._prepare(count, concept)
        try:
            async for _event in client.chat_stream_async(request, decoder):
                self.state = "streaming"
        except ListGenerationError:
            self.state = "failed"
            raise
        except Exception as exc:
            self.state = "failed"
            raise UnknownError(str(exc) or type(exc).__name__) from exc
        return self._complete(decoder)

    def generate_blocking(self, count: int, concept: str) -> str:
        client, request, decoder = self._prepare(count, concept)
        try:
            for _event in client.chat_stream(request, decoder):
                self.state = "streaming"
        except ListGenerationError:
            self.state = "failed"
            raise
        except Exception as exc:
            self.state = "failed"
            raise UnknownError(str(exc) or type(exc).__name__) from exc
        return self._complete(decoder)


async def generate(
    config: ResolvedConfig,
    count: int,
    concept: str,
    sink: Callable[[str], None] = write_fragment,
) -> str:
    return await ListService(config=config, sink=sink).generate(count, concept)
