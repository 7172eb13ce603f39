"""
API Error Handling

Maps domain exceptions to structured JSON errors:

    {"ok": false, "error": {"code": ..., "message": ..., "details": {...}}}
"""

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from api.models.responses import ErrorDetail, ErrorResponse
from core.schemas import ErrorCodes, LedgerException, LedgerRejection, TrialByFireException


class APIError(Exception):
    """Base API error with structured response."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code=self.code,
                message=self.message,
                details=self.details,
            ),
        )


class InvalidRequestError(APIError):
    """Invalid request parameters."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            code="INVALID_REQUEST",
            message=message,
            status_code=400,
            details=details,
        )


_LEDGER_STATUS = {
    LedgerRejection.MARKET_NOT_FOUND: 404,
    LedgerRejection.UNAUTHORIZED: 403,
    LedgerRejection.TRANSFER_FAILED: 502,
}

_TRIAL_STATUS = {
    ErrorCodes.TRANSCRIPT_NOT_FOUND: 404,
    ErrorCodes.TRANSCRIPT_HASH_MISMATCH: 500,
    ErrorCodes.TRIAL_EXECUTION_ERROR: 502,
    ErrorCodes.LLM_CALL_FAILED: 502,
    ErrorCodes.STAGE_TIMEOUT: 504,
}


def status_for(exc: TrialByFireException) -> int:
    if isinstance(exc, LedgerException):
        return _LEDGER_STATUS.get(exc.reason, 409)
    return _TRIAL_STATUS.get(exc.code, 400)


def _error_content(code: str, message: str, details: dict[str, Any]) -> dict[str, Any]:
    return ErrorResponse(
        ok=False,
        error=ErrorDetail(code=code, message=message, details=details),
    ).model_dump(mode="json")


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle APIError exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(mode="json"),
    )


async def domain_error_handler(request: Request, exc: TrialByFireException) -> JSONResponse:
    """Handle trial and ledger exceptions."""
    code = exc.reason.value if isinstance(exc, LedgerException) else exc.code
    return JSONResponse(
        status_code=status_for(exc),
        content=_error_content(code, exc.message, exc.details),
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    return JSONResponse(
        status_code=500,
        content=_error_content(
            "INTERNAL_ERROR",
            "An unexpected error occurred",
            {"type": type(exc).__name__},
        ),
    )
