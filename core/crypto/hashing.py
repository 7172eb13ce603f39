"""
Module 02 - Content Hashing

Transcripts and rubrics are addressed by the SHA-256 digest of their
canonical JSON, written as lowercase 0x-hex. These are the only two
hashes the ledger stores.
"""
from __future__ import annotations

import hashlib
import re
from typing import Any

from core.schemas.canonical import dumps_canonical
from core.schemas.market import ResolutionRubric
from core.schemas.transcript import TrialTranscript

_HASH_HEX_RE = re.compile(r"^0x[0-9a-f]{64}$")


def sha256(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def hash_canonical(obj: Any) -> bytes:
    """
    Digest of an object's canonical JSON encoding.

    Raises:
        CanonicalizationException: If obj holds a non-finite float or a
            value JSON cannot encode
    """
    return sha256(dumps_canonical(obj).encode("utf-8"))


def to_hex(data: bytes) -> str:
    return "0x" + data.hex()


def is_hash_hex(value: str) -> bool:
    """True for a lowercase 0x-prefixed 32-byte digest."""
    return isinstance(value, str) and bool(_HASH_HEX_RE.match(value))


def transcript_hash(transcript: TrialTranscript) -> str:
    """Content address of a trial transcript."""
    return to_hex(hash_canonical(transcript))


def rubric_hash(rubric: ResolutionRubric) -> str:
    """Commitment the ledger keeps in place of the rubric itself."""
    return to_hex(hash_canonical(rubric))


__all__ = [
    "sha256",
    "hash_canonical",
    "to_hex",
    "is_hash_hex",
    "transcript_hash",
    "rubric_hash",
]
