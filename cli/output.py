from __future__ import annotations

from pathlib import Path

from config.list_config import ResolvedConfig
from utils.terminal_ui import Color, print_info


def print_config_paths(paths: list[Path], override_path: str | None = None) -> None:
    print("Configuration files are read in this order (later files win):")
    for index, path in enumerate(paths, start=1):
        print(f"  {index}. {path}")
    if override_path:
        print(f"  {len(paths) + 1}. {override_path} (--config)")
    print("OPENROUTER_API_KEY and command-line options override all files.")


def print_init_result(created: Path | None, user_config_path: Path) -> None:
    if created is not None:
        print(f"Created default config file: {created}")
    elif user_config_path.exists():
        print(f"Config file already exists: {user_config_path}")


def print_generation_banner(config: ResolvedConfig, count: int, concept: str) -> None:
    print_info(f"Using model: {config.model}", color=Color.DIM)
    print_info(f"Using endpoint: {config.endpoint}", color=Color.DIM)
    print_info(f"Generating {count} {concept}...", color=Color.DIM)
    print_info("---", color=Color.DIM)


def print_generation_footer() -> None:
    print_info("\n---", color=Color.DIM)
    print_info("Generation complete!", color=Color.GREEN)
