"""
Module 01 - Schemas & Canonicalization
File: __init__.py

Purpose: Export the public API for the schemas module.
This is the main entry point for other modules to import schema definitions.
"""

# Version constants
from .versioning import (
    SCHEMA_VERSION,
    SUPPORTED_SCHEMA_VERSIONS,
    SchemaVersion,
    UnsupportedSchemaVersionError,
    assert_supported_schema_version,
)

# Canonical serialization API
from .canonical import (
    CANONICAL_JSON_SEPARATORS,
    canonical_equals,
    canonicalize_value,
    dumps_canonical,
    ensure_utc,
    format_datetime_canonical,
    loads_canonical,
)

# Error models and exceptions
from .errors import (
    CanonicalizationException,
    ErrorCodes,
    LedgerException,
    LedgerRejection,
    LLMCallException,
    SchemaValidationException,
    TranscriptNotFoundException,
    TrialByFireException,
    TrialError,
    TrialExecutionException,
)

# Trial models
from .market import MarketQuestion, ResolutionRubric, RubricCriterion, Side
from .evidence import EvidenceBundle, EvidenceItem
from .arguments import AdvocateArgument, CriterionArgument, Score
from .ruling import CriterionScore, JudgeRuling
from .decision import SettlementAction, SettlementDecision
from .transcript import TrialTranscript

__all__ = [
    # Versioning
    "SCHEMA_VERSION",
    "SUPPORTED_SCHEMA_VERSIONS",
    "SchemaVersion",
    "UnsupportedSchemaVersionError",
    "assert_supported_schema_version",
    # Canonical
    "CANONICAL_JSON_SEPARATORS",
    "canonical_equals",
    "canonicalize_value",
    "dumps_canonical",
    "ensure_utc",
    "format_datetime_canonical",
    "loads_canonical",
    # Errors
    "CanonicalizationException",
    "ErrorCodes",
    "LedgerException",
    "LedgerRejection",
    "LLMCallException",
    "SchemaValidationException",
    "TranscriptNotFoundException",
    "TrialByFireException",
    "TrialError",
    "TrialExecutionException",
    # Market
    "MarketQuestion",
    "ResolutionRubric",
    "RubricCriterion",
    "Side",
    # Evidence
    "EvidenceBundle",
    "EvidenceItem",
    # Arguments
    "AdvocateArgument",
    "CriterionArgument",
    "Score",
    # Ruling
    "CriterionScore",
    "JudgeRuling",
    # Decision
    "SettlementAction",
    "SettlementDecision",
    # Transcript
    "TrialTranscript",
]
