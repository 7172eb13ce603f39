"""
CLI Show Command

Print a transcript archived by `run --out`, looked up by its hash. The
file is re-hashed on read, so a tampered archive is reported as an error.
"""

from __future__ import annotations

import json
import sys
from argparse import Namespace

from core.schemas import TrialByFireException
from core.storage import DirectoryTranscriptStore

from .run import EXIT_RESOLVED, EXIT_RUNTIME_ERROR, print_transcript_human, transcript_summary


def show_cmd(args: Namespace) -> int:
    """Handle the show command."""
    store = DirectoryTranscriptStore(args.dir)
    try:
        transcript = store.get(args.transcript_hash)
    except TrialByFireException as e:
        print(f"Error: [{e.code}] {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if args.json:
        output = {
            "summary": transcript_summary(transcript, args.transcript_hash),
            "transcript": transcript.model_dump(mode="json"),
        }
        print(json.dumps(output, indent=2))
    else:
        print_transcript_human(transcript, args.transcript_hash)
    return EXIT_RESOLVED


def list_cmd(args: Namespace) -> int:
    """List the hashes archived in a directory."""
    store = DirectoryTranscriptStore(args.dir)
    hashes = store.hashes()
    if args.json:
        print(json.dumps(hashes, indent=2))
    elif not hashes:
        print(f"No transcripts in {store.root}")
    else:
        for digest in hashes:
            print(digest)
    return EXIT_RESOLVED
