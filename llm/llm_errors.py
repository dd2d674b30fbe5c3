from __future__ import annotations

from dataclasses import dataclass

MISSING_API_KEY_MESSAGE = (
    "API key is required. Set OPENROUTER_API_KEY environment variable or use --api-key option."
)


class ListGenerationError(RuntimeError):
    """Base for every failure that ends a generation run."""


class ConfigError(ListGenerationError):
    def __init__(self, message: str = MISSING_API_KEY_MESSAGE) -> None:
        super().__init__(message)


@dataclass(eq=False)
class AuthOrApiError(ListGenerationError):
    status: int
    message: str

    def __str__(self) -> str:
        return f"API Error: {self.status} - {self.message}"


class NetworkError(ListGenerationError):
    def __init__(self, message: str = "Network Error: Unable to connect to the API endpoint") -> None:
        super().__init__(message)


@dataclass(eq=False)
class UnknownError(ListGenerationError):
    message: str

    def __str__(self) -> str:
        return self.message
