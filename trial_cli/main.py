"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m trial_cli run ["<question>"] [--mock] [--scenario clear|close|decisive]
                            [--threshold N] [--json] [--full] [--out DIR]
    python -m trial_cli show <hash> --dir DIR [--json]
    python -m trial_cli list --dir DIR [--json]
    python -m trial_cli config [--init|--show]

Exit codes for run:
    0  Trial resolved
    3  Trial escalated to human review
    1  Trial or configuration error

Environment Variables:
    TRIAL_LLM_PROVIDER          Default LLM provider (anthropic, openai, google, grok)
    TRIAL_LLM_API_KEY           Default LLM API key
    TRIAL_USE_MOCKS             Use mock evidence and mock reasoning services
    TRIAL_MOCK_SCENARIO         Mock scenario (clear, close, decisive)
    TRIAL_LOG_LEVEL             Log level (default: INFO)
    NEWS_API_KEY                NewsAPI key for the news evidence source
"""

from __future__ import annotations

import argparse
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from core.config import RuntimeConfig
from core.llm import SCENARIOS
from orchestrator import DEMO_QUESTION_ID, DEMO_QUESTION_TEXT, DEMO_THRESHOLD
from trial_cli.commands import config, run, show


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1

DEFAULT_CONFIG_PATHS = (
    Path("trialbyfire.yaml"),
    Path(".trialbyfire.yaml"),
    Path.home() / ".config" / "trialbyfire" / "config.yaml",
)


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def load_config(path: Path | None = None) -> RuntimeConfig:
    """
    Load configuration from a YAML file, then overlay environment variables.

    Without an explicit path the default locations are tried in order.
    """
    if path is not None:
        return RuntimeConfig.from_yaml(path).with_env_overrides()
    for candidate in DEFAULT_CONFIG_PATHS:
        if candidate.exists():
            return RuntimeConfig.from_yaml(candidate).with_env_overrides()
    return RuntimeConfig().with_env_overrides()


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="trialbyfire",
        description="TrialByFire CLI - Run adversarial trials and inspect archived transcripts.",
    )
    parser.add_argument(
        "--version", action="version", version="%(prog)s 0.1.0"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./trialbyfire.yaml or ~/.config/trialbyfire/config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Also write logs to this file",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- run command ---
    run_parser = subparsers.add_parser(
        "run",
        help="Run one adversarial trial",
        description="Gather evidence, run both advocates and the judge, and print the decision.",
    )
    run_parser.add_argument(
        "question",
        type=str,
        nargs="?",
        default=DEMO_QUESTION_TEXT,
        help="The YES/NO question to try (default: the demo question)",
    )
    run_parser.add_argument(
        "--id",
        type=str,
        default=DEMO_QUESTION_ID,
        help=f"Question identifier (default: {DEMO_QUESTION_ID})",
    )
    run_parser.add_argument(
        "--threshold",
        type=int,
        default=DEMO_THRESHOLD,
        help=f"Confidence threshold on the score margin (default: {DEMO_THRESHOLD})",
    )
    run_parser.add_argument(
        "--mock",
        action="store_true",
        default=False,
        help="Use mock evidence and mock reasoning services",
    )
    run_parser.add_argument(
        "--scenario",
        type=str,
        choices=list(SCENARIOS),
        default=None,
        help="Mock scenario to play (implies --mock)",
    )
    run_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Archive the transcript in this directory",
    )
    run_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output a JSON summary instead of readable text",
    )
    run_parser.add_argument(
        "--full",
        action="store_true",
        default=False,
        help="With --json, include the full transcript",
    )
    run_parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        default=False,
        help="Do not print progress messages",
    )
    run_parser.add_argument("--debug", action="store_true", help="Print tracebacks on errors")
    run_parser.set_defaults(func=run.run_cmd)

    # --- show command ---
    show_parser = subparsers.add_parser(
        "show",
        help="Print an archived transcript",
        description="Load a transcript by hash from an archive directory.",
    )
    show_parser.add_argument("transcript_hash", type=str, help="0x-prefixed transcript hash")
    show_parser.add_argument("--dir", "-d", type=str, required=True, help="Archive directory")
    show_parser.add_argument("--json", action="store_true", help="JSON output")
    show_parser.add_argument("--debug", action="store_true", help="Print tracebacks on errors")
    show_parser.set_defaults(func=show.show_cmd)

    # --- list command ---
    list_parser = subparsers.add_parser(
        "list",
        help="List archived transcript hashes",
    )
    list_parser.add_argument("--dir", "-d", type=str, required=True, help="Archive directory")
    list_parser.add_argument("--json", action="store_true", help="JSON output")
    list_parser.set_defaults(func=show.list_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="trialbyfire.yaml",
        help="Path for config file (default: trialbyfire.yaml)",
    )
    config_parser.set_defaults(func=config.config_cmd)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success or resolved, 1=error, 3=escalated)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    try:
        runtime_config = load_config(args.config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    # Setup logging
    log_level = args.log_level or runtime_config.log_level
    setup_logging(level=log_level, log_file=args.log_file)

    # Attach config to args for commands to use
    args.runtime_config = runtime_config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if getattr(args, "debug", False):
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
