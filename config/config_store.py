from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path
import sys
import tomllib
from typing import Any, Callable, Mapping

from config.list_config import PartialConfig, ResolvedConfig
from utils.terminal_ui import print_warning

APP_DIR_NAME = "fake-list-llm"
CONFIG_FILE_NAME = "config.toml"

# file key -> (ResolvedConfig field, accepted type)
RECOGNIZED_KEYS: dict[str, tuple[str, type]] = {
    "model": ("model", str),
    "endpoint": ("endpoint", str),
    "apiKey": ("api_key", str),
    "prompt": ("prompt_template", str),
    "verbose": ("verbose", bool),
}

DEFAULT_USER_CONFIG_TEMPLATE = """\
# Fake List Generator Configuration
# This file contains default settings for the fake-list-llm tool

# AI model to use (default: qwen/qwen-turbo)
model = "qwen/qwen-turbo"

# API endpoint URL (default: OpenRouter)
endpoint = "https://openrouter.ai/api/v1"

# API key (leave empty to use OPENROUTER_API_KEY environment variable)
# apiKey = "your-api-key-here"

# Default prompt template
# Use {count} and {concept} as placeholders
prompt = "Generate a list of {count} {concept}. Each item should be on a new line, numbered from 1 to {count}."

# Enable verbose output by default
verbose = false
"""


@dataclass(frozen=True, slots=True)
class ConfigSource:
    name: str
    path: Path


@dataclass
class ConfigStore:
    """Layered configuration: defaults < system < user < override < env < CLI.

    Platform, environment and home directory are injected so path resolution
    can be exercised for any OS without touching the real machine.
    """

    platform: str = field(default_factory=lambda: sys.platform)
    environ: Mapping[str, str] = field(default_factory=lambda: dict(os.environ))
    home: Path = field(default_factory=Path.home)
    warn: Callable[[str], None] = print_warning

    # ----- PATHS -----

    def system_config_path(self) -> Path:
        if self.platform == "darwin":
            return Path("/Library/Preferences") / APP_DIR_NAME / CONFIG_FILE_NAME
        if self.platform == "win32":
            program_data = self.environ.get("PROGRAMDATA") or "C:\\ProgramData"
            return Path(program_data) / APP_DIR_NAME / CONFIG_FILE_NAME
        return Path("/etc/xdg") / APP_DIR_NAME / CONFIG_FILE_NAME

    def user_config_path(self) -> Path:
        if self.platform == "darwin":
            base = self.home / "Library" / "Preferences"
        elif self.platform == "win32":
            base = self.home / "AppData" / "Roaming"
        else:
            xdg = self.environ.get("XDG_CONFIG_HOME")
            base = Path(xdg) if xdg else self.home / ".config"
        return base / APP_DIR_NAME / CONFIG_FILE_NAME

    def list_config_paths(self) -> list[Path]:
        return [self.system_config_path(), self.user_config_path()]

    def config_sources(self, override_path: str | Path | None = None) -> list[ConfigSource]:
        sources = [
            ConfigSource(name="system", path=self.system_config_path()),
            ConfigSource(name="user", path=self.user_config_path()),
        ]
        if override_path:
            sources.append(ConfigSource(name="override", path=Path(override_path).expanduser()))
        return sources

    # ----- LOADING -----

    def load_config_file(self, path: str | Path, *, required: bool = False) -> PartialConfig:
        path = Path(path)
        if not path.exists():
            if required:
                self.warn(f"Warning: Config file not found: {path}")
            return {}

        try:
            with path.open("rb") as fh:
                data = tomllib.load(fh)
        except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as exc:
            self.warn(f"Warning: Failed to load config file {path}: {exc}")
            return {}

        return self._to_partial(data, path)

    def _to_partial(self, data: dict[str, Any], path: Path) -> PartialConfig:
        partial: PartialConfig = {}
        for key, value in data.items():
            spec = RECOGNIZED_KEYS.get(key)
            if spec is None:
                continue
            field_name, expected = spec
            if not isinstance(value, expected):
                self.warn(
                    f"Warning: Ignoring '{key}' in {path}: expected {expected.__name__}, "
                    f"got {type(value).__name__}"
                )
                continue
            partial[field_name] = value
        return partial

    # ----- RESOLVE -----

    def resolve(
        self,
        override_path: str | Path | None = None,
        env_api_key: str | None = None,
        cli_overrides: Mapping[str, Any] | None = None,
    ) -> ResolvedConfig:
        partials: list[PartialConfig] = []
        for source in self.config_sources(override_path):
            partials.append(
                self.load_config_file(source.path, required=source.name == "override")
            )

        if env_api_key and env_api_key.strip():
            partials.append({"api_key": env_api_key})

        cli_partial = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
        # an empty --api-key falls back to the env or file key
        if isinstance(cli_partial.get("api_key"), str) and not cli_partial["api_key"].strip():
            del cli_partial["api_key"]
        partials.append(cli_partial)

        return ResolvedConfig.merge(*partials)

    # ----- SIDE EFFECTS -----

    def create_default_user_config(self) -> Path | None:
        user_config_path = self.user_config_path()
        config_dir = user_config_path.parent

        try:
            if not config_dir.exists():
                config_dir.mkdir(parents=True, exist_ok=True)
            if user_config_path.exists():
                return None
            user_config_path.write_text(DEFAULT_USER_CONFIG_TEMPLATE, encoding="utf-8")
        except OSError as exc:
            self.warn(f"Warning: Failed to create default config file: {exc}")
            return None
        return user_config_path
