"""
API Error Responses
===================
Uniform error bodies for the HTTP layer. Internal codes and details are
logged; clients only see a short message and a code.

CRITICAL: Never expose which OTP check failed or any backend detail.
"""

from typing import Optional

import structlog
from fastapi import Request
from fastapi.responses import JSONResponse

logger = structlog.get_logger(__name__)


class ApiError(Exception):
    """Raised by routes and dependencies; rendered by ``api_error_handler``."""

    def __init__(self, status_code: int, message: str, code: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.code = code


def create_api_error(
    internal_code: str,
    message: str,
    status_code: int,
    log_message: Optional[str] = None,
) -> ApiError:
    """
    Create an ApiError, logging the technical detail.

    Args:
        internal_code: Stable code for debugging and clients
        message: Short user-facing message
        status_code: HTTP status code
        log_message: Technical message for logs (never returned)
    """
    if log_message:
        logger.warning("API error", code=internal_code, detail=log_message)
    return ApiError(status_code=status_code, message=message, code=internal_code)


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "code": exc.code},
    )


class ApiErrors:
    """Standard error factory methods."""

    @staticmethod
    def register_failed(log_detail: Optional[str] = None) -> ApiError:
        return create_api_error("REGISTER_FAILED", "Failed to register user.", 500, log_detail)

    @staticmethod
    def delivery_failed(log_detail: Optional[str] = None) -> ApiError:
        return create_api_error("OTP_SEND_FAILED", "Failed to deliver OTP.", 503, log_detail)

    @staticmethod
    def login_failed(log_detail: Optional[str] = None) -> ApiError:
        return create_api_error("LOGIN_FAILED", "Failed to login.", 500, log_detail)

    @staticmethod
    def invalid_otp(log_detail: Optional[str] = None) -> ApiError:
        return create_api_error("INVALID_OTP", "Invalid OTP or OTP expired.", 401, log_detail)

    @staticmethod
    def no_token(log_detail: Optional[str] = None) -> ApiError:
        return create_api_error("NO_TOKEN", "No token provided.", 401, log_detail)

    @staticmethod
    def invalid_token(log_detail: Optional[str] = None) -> ApiError:
        return create_api_error("INVALID_TOKEN", "Invalid token.", 403, log_detail)
