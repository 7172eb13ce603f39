"""
Content hashing for transcripts and rubrics.
"""
from .hashing import (
    sha256,
    hash_canonical,
    to_hex,
    is_hash_hex,
    transcript_hash,
    rubric_hash,
)

__all__ = [
    "sha256",
    "hash_canonical",
    "to_hex",
    "is_hash_hex",
    "transcript_hash",
    "rubric_hash",
]
