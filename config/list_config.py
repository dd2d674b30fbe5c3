from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any

DEFAULT_MODEL = "qwen/qwen-turbo"
DEFAULT_ENDPOINT = "https://openrouter.ai/api/v1"
DEFAULT_PROMPT_TEMPLATE = (
    "Generate a list of {count} {concept}. "
    "Each item should be on a new line, numbered from 1 to {count}."
)

PartialConfig = dict[str, Any]


@dataclass(frozen=True, slots=True)
class ResolvedConfig:
    model: str = DEFAULT_MODEL
    endpoint: str = DEFAULT_ENDPOINT
    api_key: str | None = None
    prompt_template: str = DEFAULT_PROMPT_TEMPLATE
    verbose: bool = False

    @staticmethod
    def from_values(
        model: str = DEFAULT_MODEL,
        endpoint: str = DEFAULT_ENDPOINT,
        api_key: str | None = None,
        prompt_template: str = DEFAULT_PROMPT_TEMPLATE,
        verbose: bool = False,
    ) -> "ResolvedConfig":
        return ResolvedConfig(
            model=model,
            endpoint=endpoint,
            api_key=ResolvedConfig._norm_optional_text(api_key),
            prompt_template=prompt_template,
            verbose=bool(verbose),
        )

    @staticmethod
    def defaults() -> PartialConfig:
        return {
            "model": DEFAULT_MODEL,
            "endpoint": DEFAULT_ENDPOINT,
            "api_key": None,
            "prompt_template": DEFAULT_PROMPT_TEMPLATE,
            "verbose": False,
        }

    @staticmethod
    def field_names() -> tuple[str, ...]:
        return tuple(f.name for f in fields(ResolvedConfig))

    @staticmethod
    def merge(*partials: PartialConfig) -> "ResolvedConfig":
        """Field-level merge: later partials win, keys they lack are left alone."""
        merged = ResolvedConfig.defaults()
        known = set(merged)
        for partial in partials:
            for key, value in partial.items():
                if key in known:
                    merged[key] = value
        return ResolvedConfig.from_values(**merged)

    def validate(self) -> None:
        for field_name, value in [
            ("model", self.model),
            ("endpoint", self.endpoint),
            ("prompt_template", self.prompt_template),
        ]:
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"{field_name} must be a non-empty string")
        if self.api_key is not None and not self.api_key.strip():
            raise ValueError("api_key must be non-empty when provided")

    @staticmethod
    def _norm_optional_text(value: str | None) -> str | None:
        if value is None:
            return None
        value = str(value).strip()
        return value or None
