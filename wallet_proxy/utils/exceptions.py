from __future__ import annotations

from typing import Any, Optional

from wallet_proxy.utils.error_codes import ErrorCode, ERROR_MESSAGES


class ConfigurationError(RuntimeError):
    """Raised at startup when the process must not serve traffic."""


class ProxyException(Exception):
    """Base exception for request-scoped proxy failures.

    API response format is handled by the global exception handler, which turns
    every subclass into the same error envelope.
    """

    def __init__(
        self,
        message: str | None = None,
        *,
        code: ErrorCode = ErrorCode.E005,
        payload: Any = None,
        status_code: int = 500,
        headers: Optional[dict[str, str]] = None,
    ):
        if message is None:
            message = ERROR_MESSAGES.get(code, ERROR_MESSAGES[ErrorCode.E005])

        self.message = message
        self.code = code.value
        self.payload = payload
        self.status_code = status_code
        self.headers = headers or {}
        super().__init__(self.message)

    @property
    def client_error(self) -> Any:
        """Value placed in the envelope's `error` field."""
        if self.payload is not None:
            return self.payload
        return self.message


class ValidationError(ProxyException):
    def __init__(self, message: str | None = None):
        super().__init__(message, code=ErrorCode.E001, status_code=400)


class UpstreamError(ProxyException):
    """Non-2xx answer from the transaction service.

    `payload` is the upstream body, kept opaque and passed through as-is.
    """

    def __init__(self, status_code: int, payload: Any = None, *, message: str | None = None):
        super().__init__(message, code=ErrorCode.E002, payload=payload, status_code=status_code)


class NetworkError(ProxyException):
    def __init__(self, message: str | None = None):
        super().__init__(message, code=ErrorCode.E003, status_code=500)


class RateLimitError(ProxyException):
    def __init__(self, message: str | None = None, *, headers: Optional[dict[str, str]] = None):
        super().__init__(message, code=ErrorCode.E004, status_code=429, headers=headers)
