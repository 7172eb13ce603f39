"""
Transcript Archive

Content-addressed storage for trial transcripts. The ledger only stores a
transcript's hash; the transcript itself is retrieved from here by that hash.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path

from core.crypto.hashing import is_hash_hex
from core.crypto.hashing import transcript_hash as hash_transcript
from core.schemas.canonical import dumps_canonical
from core.schemas.errors import ErrorCodes, TranscriptNotFoundException, TrialByFireException
from core.schemas.transcript import TrialTranscript
from core.schemas.versioning import assert_supported_schema_version

logger = logging.getLogger(__name__)


class TranscriptStore(ABC):
    """Key-value interface: transcript hash -> transcript."""

    @abstractmethod
    def put(self, transcript: TrialTranscript) -> str:
        """Archive a transcript and return its hash. Idempotent."""
        ...

    @abstractmethod
    def get(self, transcript_hash: str) -> TrialTranscript:
        """
        Raises:
            TranscriptNotFoundException: If nothing is archived under the hash
        """
        ...

    @abstractmethod
    def has(self, transcript_hash: str) -> bool:
        ...

    @abstractmethod
    def hashes(self) -> list[str]:
        ...


class InMemoryTranscriptStore(TranscriptStore):
    """Process-local archive, used by tests and the demo API."""

    def __init__(self) -> None:
        self._items: dict[str, TrialTranscript] = {}
        self._lock = threading.Lock()

    def put(self, transcript: TrialTranscript) -> str:
        key = hash_transcript(transcript)
        with self._lock:
            self._items.setdefault(key, transcript)
        return key

    def get(self, transcript_hash: str) -> TrialTranscript:
        with self._lock:
            try:
                return self._items[transcript_hash]
            except KeyError:
                raise TranscriptNotFoundException(transcript_hash) from None

    def has(self, transcript_hash: str) -> bool:
        with self._lock:
            return transcript_hash in self._items

    def hashes(self) -> list[str]:
        with self._lock:
            return sorted(self._items)

    def __len__(self) -> int:
        return len(self._items)


class DirectoryTranscriptStore(TranscriptStore):
    """
    One canonical-JSON file per transcript, named <hash>.json.

    Files are re-hashed on read; a file whose content does not match its
    name is rejected.
    """

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def _path(self, transcript_hash: str) -> Path:
        if not is_hash_hex(transcript_hash):
            raise TranscriptNotFoundException(transcript_hash)
        return self.root / f"{transcript_hash}.json"

    def put(self, transcript: TrialTranscript) -> str:
        key = hash_transcript(transcript)
        path = self._path(key)
        if path.exists():
            return key

        # write-then-rename so readers never see a partial file
        fd, tmp_name = tempfile.mkstemp(dir=self.root, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(dumps_canonical(transcript))
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.info("Archived transcript %s", key)
        return key

    def get(self, transcript_hash: str) -> TrialTranscript:
        path = self._path(transcript_hash)
        if not path.exists():
            raise TranscriptNotFoundException(transcript_hash)

        data = json.loads(path.read_text(encoding="utf-8"))
        assert_supported_schema_version(data.get("schema_version", "v1"))
        transcript = TrialTranscript.model_validate(data)

        actual = hash_transcript(transcript)
        if actual != transcript_hash:
            raise TrialByFireException(
                f"Archived transcript {transcript_hash} hashes to {actual}",
                code=ErrorCodes.TRANSCRIPT_HASH_MISMATCH,
                details={"expected": transcript_hash, "actual": actual},
            )
        return transcript

    def has(self, transcript_hash: str) -> bool:
        return is_hash_hex(transcript_hash) and self._path(transcript_hash).exists()

    def hashes(self) -> list[str]:
        return sorted(p.stem for p in self.root.glob("0x*.json"))
