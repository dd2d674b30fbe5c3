from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Literal

JSONDict = dict[str, Any]

DEFAULT_MAX_TOKENS = 2000
DEFAULT_TEMPERATURE = 0.7


@dataclass(frozen=True, slots=True)
class GenerationRequest:
    model: str
    prompt_text: str
    max_tokens: int = DEFAULT_MAX_TOKENS
    temperature: float = DEFAULT_TEMPERATURE
    stream: bool = True

    def to_payload(self) -> JSONDict:
        return {
            "model": self.model,
            "messages": [{"role": "user", "content": self.prompt_text}],
            "stream": self.stream,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }


@dataclass(frozen=True, slots=True)
class StreamEvent:
    kind: Literal["content", "done", "malformed"]
    text: str = ""

    @staticmethod
    def content(text: str) -> "StreamEvent":
        return StreamEvent(kind="content", text=text)

    @staticmethod
    def done() -> "StreamEvent":
        return StreamEvent(kind="done")

    @staticmethod
    def malformed(raw: str) -> "StreamEvent":
        return StreamEvent(kind="malformed", text=raw)


# ----- Accumulator for streaming -----
@dataclass
class StreamAccumulator:
    content_parts: list[str] = field(default_factory=list)
    saw_done: bool = False
    malformed_count: int = 0

    def add(self, event: StreamEvent) -> None:
        if event.kind == "content" and event.text:
            self.content_parts.append(event.text)
        elif event.kind == "done":
            self.saw_done = True
        elif event.kind == "malformed":
            self.malformed_count += 1

    @property
    def text(self) -> str:
        return "".join(self.content_parts)
