"""
Module 01 - Schemas & Canonicalization
File: versioning.py

Purpose: Centralize schema version constants.
Kept import-free so every schema file can depend on it without cycles.
"""

from typing import Literal

# Current schema version - stamped on every transcript
SCHEMA_VERSION: str = "v1"

SchemaVersion = Literal["v1"]

SUPPORTED_SCHEMA_VERSIONS: frozenset[str] = frozenset({"v1"})


class UnsupportedSchemaVersionError(ValueError):
    """Raised when an archived artifact carries an unknown schema version."""

    def __init__(self, version: str) -> None:
        self.version = version
        super().__init__(
            f"Unsupported schema version: '{version}'. "
            f"Supported versions: {sorted(SUPPORTED_SCHEMA_VERSIONS)}"
        )


def assert_supported_schema_version(version: str) -> None:
    """Raise UnsupportedSchemaVersionError if version is not supported."""
    if version not in SUPPORTED_SCHEMA_VERSIONS:
        raise UnsupportedSchemaVersionError(version)
