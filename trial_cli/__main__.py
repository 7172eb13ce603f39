"""
Module execution entry point.

Allows running with: python -m trial_cli
"""

import sys
from trial_cli.main import main

if __name__ == "__main__":
    sys.exit(main())
