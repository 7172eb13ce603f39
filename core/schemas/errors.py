"""
Module 01 - Schemas & Canonicalization
File: errors.py

Purpose: Standard error taxonomy across the trial pipeline and the ledger.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.

Taxonomy:
    (a) source failure       - recovered inside evidence aggregation, never raised
    (b) schema failure       - SchemaValidationException, fatal to the trial
    (c) integrity failure    - not an exception; hallucinations escalate the market
    (d) ledger precondition  - LedgerException with a named LedgerRejection reason
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the system."""

    # Schema & Validation Errors
    SCHEMA_VALIDATION_ERROR = "SCHEMA_VALIDATION_ERROR"
    CANONICALIZATION_ERROR = "CANONICALIZATION_ERROR"
    UNSUPPORTED_VERSION = "UNSUPPORTED_VERSION"
    RUBRIC_COVERAGE_ERROR = "RUBRIC_COVERAGE_ERROR"

    # Evidence Errors
    SOURCE_UNAVAILABLE = "SOURCE_UNAVAILABLE"

    # Reasoning-service Errors
    LLM_CALL_FAILED = "LLM_CALL_FAILED"
    STAGE_TIMEOUT = "STAGE_TIMEOUT"

    # Pipeline Errors
    TRIAL_EXECUTION_ERROR = "TRIAL_EXECUTION_ERROR"

    # Storage Errors
    TRANSCRIPT_NOT_FOUND = "TRANSCRIPT_NOT_FOUND"
    TRANSCRIPT_HASH_MISMATCH = "TRANSCRIPT_HASH_MISMATCH"

    # Ledger Errors
    LEDGER_REJECTED = "LEDGER_REJECTED"


class LedgerRejection(str, Enum):
    """Named reasons a ledger operation is refused."""

    MARKET_NOT_FOUND = "MARKET_NOT_FOUND"
    DEADLINE_IN_PAST = "DEADLINE_IN_PAST"
    DEPOSIT_TOO_SMALL = "DEPOSIT_TOO_SMALL"
    MARKET_NOT_OPEN = "MARKET_NOT_OPEN"
    PAST_DEADLINE = "PAST_DEADLINE"
    DEADLINE_NOT_REACHED = "DEADLINE_NOT_REACHED"
    ZERO_AMOUNT = "ZERO_AMOUNT"
    SETTLEMENT_NOT_REQUESTED = "SETTLEMENT_NOT_REQUESTED"
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_VERDICT = "INVALID_VERDICT"
    MARKET_NOT_RESOLVED = "MARKET_NOT_RESOLVED"
    MARKET_NOT_ESCALATED = "MARKET_NOT_ESCALATED"
    MARKET_NOT_FINAL = "MARKET_NOT_FINAL"
    NO_WINNING_POSITION = "NO_WINNING_POSITION"
    NOTHING_TO_REFUND = "NOTHING_TO_REFUND"
    DEPOSIT_ALREADY_RETURNED = "DEPOSIT_ALREADY_RETURNED"
    TRANSFER_FAILED = "TRANSFER_FAILED"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class TrialError(BaseModel):
    """
    Base error model for structured error communication.

    Used for passing errors across the API boundary without exceptions.
    """

    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.SCHEMA_VALIDATION_ERROR],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class TrialByFireException(Exception):
    """
    Base exception for all trial and ledger errors.

    Carries structured error information and can be converted
    to a TrialError model.
    """

    def __init__(
        self,
        message: str,
        code: str = "TRIAL_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> TrialError:
        """Convert this exception to a TrialError model."""
        return TrialError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class CanonicalizationException(TrialByFireException):
    """Exception raised when canonical serialization fails."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CANONICALIZATION_ERROR,
            details=details,
        )


class SchemaValidationException(TrialByFireException):
    """Exception raised when model output fails schema validation."""

    def __init__(
        self,
        message: str,
        field_path: str | None = None,
        details: dict[str, Any] | None = None,
        code: str = ErrorCodes.SCHEMA_VALIDATION_ERROR,
    ) -> None:
        full_details = details or {}
        if field_path:
            full_details["field_path"] = field_path
        super().__init__(
            message=message,
            code=code,
            details=full_details,
        )


class LLMCallException(TrialByFireException):
    """Exception raised when a reasoning-service call errors or times out."""

    def __init__(
        self,
        message: str,
        role: str | None = None,
        timed_out: bool = False,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if role:
            full_details["role"] = role
        super().__init__(
            message=message,
            code=ErrorCodes.STAGE_TIMEOUT if timed_out else ErrorCodes.LLM_CALL_FAILED,
            details=full_details,
            retryable=True,
        )
        self.timed_out = timed_out


class TrialExecutionException(TrialByFireException):
    """Exception raised when a trial stage fails fatally."""

    def __init__(
        self,
        message: str,
        stage: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if stage:
            full_details["stage"] = stage
        super().__init__(
            message=message,
            code=ErrorCodes.TRIAL_EXECUTION_ERROR,
            details=full_details,
        )
        self.stage = stage


class TranscriptNotFoundException(TrialByFireException):
    """Exception raised when a transcript hash is not in the archive."""

    def __init__(self, transcript_hash: str) -> None:
        super().__init__(
            message=f"No transcript archived under {transcript_hash}",
            code=ErrorCodes.TRANSCRIPT_NOT_FOUND,
            details={"transcript_hash": transcript_hash},
        )


class LedgerException(TrialByFireException):
    """
    Exception raised when a ledger operation's precondition fails.

    The ledger state is never partially updated when this is raised.
    """

    def __init__(
        self,
        reason: LedgerRejection,
        message: str,
        market_id: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        full_details["reason"] = reason.value
        if market_id is not None:
            full_details["market_id"] = market_id
        super().__init__(
            message=message,
            code=ErrorCodes.LEDGER_REJECTED,
            details=full_details,
        )
        self.reason = reason
        self.market_id = market_id
