"""CLI subcommand implementations."""

from . import config, run, show

__all__ = ["config", "run", "show"]
