from __future__ import annotations

import argparse
import asyncio
import os
import sys
from typing import Mapping, Sequence

from cli.output import (
    print_config_paths,
    print_generation_banner,
    print_generation_footer,
    print_init_result,
)
from config.config_store import ConfigStore
from llm.llm_errors import ListGenerationError
from services.list_service import ListService
from utils.terminal_ui import print_error, write_fragment

VERSION = "1.0.0"
API_KEY_ENV_VAR = "OPENROUTER_API_KEY"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fake-list",
        description="Generate lists using OpenAI-compatible APIs",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    # optional so the diagnostic flags work on their own
    parser.add_argument("count", nargs="?", help="Number of items to generate")
    parser.add_argument("concept", nargs="?", help='Concept to generate (e.g., "band names", "colors", "animals")')

    parser.add_argument("-m", "--model", default=None, help="Model to use")
    parser.add_argument("-e", "--endpoint", default=None, help="API endpoint URL")
    parser.add_argument("-k", "--api-key", default=None, help=f"API key (defaults to {API_KEY_ENV_VAR} env var)")
    parser.add_argument(
        "-p",
        "--prompt",
        default=None,
        help="Custom prompt template (use {count} and {concept} as placeholders)",
    )
    parser.add_argument("--verbose", action="store_true", default=None, help="Enable verbose output")
    parser.add_argument("-c", "--config", default=None, help="Path to an additional config file")

    parser.add_argument("--show-config-paths", action="store_true", help="Show configuration file locations")
    parser.add_argument("--init-config", action="store_true", help="Create a default user config file")
    return parser


def parse_count(raw: str | None) -> int:
    try:
        count = int(str(raw).strip())
    except ValueError:
        raise ValueError("Count must be a positive number") from None
    if count <= 0:
        raise ValueError("Count must be a positive number")
    return count


def main(argv: Sequence[str] | None = None, environ: Mapping[str, str] | None = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(list(argv) if argv is not None else None)
    except SystemExit as exc:
        # --help/--version exit 0; argparse usage errors exit 2, reported as 1
        return 0 if exc.code in (0, None) else 1
    environ = os.environ if environ is None else environ

    store = ConfigStore(environ=dict(environ))

    if args.show_config_paths:
        print_config_paths(store.list_config_paths(), override_path=args.config)
        return 0
    if args.init_config:
        print_init_result(store.create_default_user_config(), store.user_config_path())
        return 0

    if args.count is None or args.concept is None:
        print_error("Error: missing required arguments <count> and <concept>")
        parser.print_usage(sys.stderr)
        return 1

    try:
        count = parse_count(args.count)
        config = store.resolve(
            override_path=args.config,
            env_api_key=environ.get(API_KEY_ENV_VAR),
            cli_overrides={
                "model": args.model,
                "endpoint": args.endpoint,
                "api_key": args.api_key,
                "prompt_template": args.prompt,
                "verbose": args.verbose,
            },
        )
        config.validate()

        if config.verbose:
            print_generation_banner(config, count, args.concept)

        text = asyncio.run(ListService(config=config).generate(count, args.concept))
        if text and not text.endswith("\n"):
            write_fragment("\n")

        if config.verbose:
            print_generation_footer()
        return 0
    except (ListGenerationError, ValueError) as exc:
        print_error(f"Error: {exc}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
