"""
Storage Module

Content-addressed transcript archive and the pending-trial map.
"""

from .pending import PendingTrials
from .transcripts import DirectoryTranscriptStore, InMemoryTranscriptStore, TranscriptStore

__all__ = [
    "DirectoryTranscriptStore",
    "InMemoryTranscriptStore",
    "PendingTrials",
    "TranscriptStore",
]
