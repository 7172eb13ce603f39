"""
TrialByFire CLI

Command-line interface for running adversarial trials.

Usage:
    python -m trial_cli run "<question>" --mock --scenario decisive
    python -m trial_cli run "<question>" --json --out ./transcripts
    python -m trial_cli show 0x<hash> --dir ./transcripts
    python -m trial_cli config --show
"""

__version__ = "0.1.0"
