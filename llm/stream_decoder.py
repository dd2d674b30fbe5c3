from __future__ import annotations

import codecs
from dataclasses import dataclass, field
import json
from typing import Any, AsyncIterable, AsyncIterator, Callable, Iterable, Iterator

from llm.llm_types import StreamAccumulator, StreamEvent

DATA_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"


def _extract_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _extract_delta_content(data: Any) -> str | None:
    if not isinstance(data, dict):
        return None
    choices = data.get("choices")
    first_choice = choices[0] if isinstance(choices, list) and choices and isinstance(choices[0], dict) else {}
    delta = first_choice.get("delta")
    delta_dict = delta if isinstance(delta, dict) else {}
    return _extract_str(delta_dict.get("content"))


def parse_stream_line(line: str) -> StreamEvent | None:
    """Turn one event-stream line into an event, or None when it carries nothing."""
    line = line.rstrip("\r")
    if not line.startswith(DATA_PREFIX):
        return None

    payload = line[len(DATA_PREFIX):]
    if payload.strip() == DONE_SENTINEL:
        return StreamEvent.done()

    try:
        data = json.loads(payload)
    except json.JSONDecodeError:
        return StreamEvent.malformed(payload)

    content = _extract_delta_content(data)
    if content:
        return StreamEvent.content(content)
    return None


@dataclass
class StreamDecoder:
    """Incremental decoder for a chat-completions event stream.

    Bytes are fed in as they arrive. Each content fragment is handed to
    ``sink`` and recorded before the next line is looked at, so output is
    never batched. Once the sentinel is seen, later input is ignored.
    """

    sink: Callable[[str], None] | None = None
    accumulator: StreamAccumulator = field(default_factory=StreamAccumulator)
    _buffer: str = field(default="", init=False, repr=False)
    _utf8: codecs.IncrementalDecoder = field(
        default_factory=lambda: codecs.getincrementaldecoder("utf-8")(errors="replace"),
        init=False,
        repr=False,
    )

    @property
    def saw_done(self) -> bool:
        return self.accumulator.saw_done

    @property
    def text(self) -> str:
        return self.accumulator.text

    def feed(self, chunk: bytes | str) -> list[StreamEvent]:
        if self.saw_done:
            return []
        if isinstance(chunk, bytes):
            chunk = self._utf8.decode(chunk)

        self._buffer += chunk
        *lines, self._buffer = self._buffer.split("\n")
        return self._handle_lines(lines)

    def finish(self) -> list[StreamEvent]:
        if self.saw_done:
            return []
        tail = self._buffer + self._utf8.decode(b"", final=True)
        self._buffer = ""
        if not tail:
            return []
        return self._handle_lines([tail])

    def _handle_lines(self, lines: list[str]) -> list[StreamEvent]:
        events: list[StreamEvent] = []
        for line in lines:
            event = parse_stream_line(line)
            if event is None:
                continue
            if event.kind == "content" and self.sink is not None:
                self.sink(event.text)
            self.accumulator.add(event)
            events.append(event)
            if event.kind == "done":
                self._buffer = ""
                break
        return events

    # ----- API: decode, decode_async -----

    def decode(self, chunks: Iterable[bytes | str]) -> Iterator[StreamEvent]:
        for chunk in chunks:
            yield from self.feed(chunk)
            if self.saw_done:
                return
        yield from self.finish()

    async def decode_async(self, chunks: AsyncIterable[bytes | str]) -> AsyncIterator[StreamEvent]:
        async for chunk in chunks:
            for event in self.feed(chunk):
                yield event
            if self.saw_done:
                return
        for event in self.finish():
            yield event
