"""CLI Config Command"""

from __future__ import annotations

import json
import sys
from argparse import Namespace
from pathlib import Path

import yaml

from core.config import RuntimeConfig

EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def config_cmd(args: Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(yaml.safe_dump(RuntimeConfig().to_dict(), sort_keys=False))
        print(f"Created configuration file: {config_path}")
        print("\nEdit this file to configure your settings.")
        print("You can also use environment variables (TRIAL_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.runtime_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    # Default: show help
    print("Usage: trialbyfire config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS
