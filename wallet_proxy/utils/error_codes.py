from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Error codes carried by proxy failures."""

    E001 = "E001"  # Validation: Invalid client input
    E002 = "E002"  # Upstream: Non-2xx from transaction service
    E003 = "E003"  # Network: No response from transaction service
    E004 = "E004"  # RateLimit: Ingress budget exceeded
    E005 = "E005"  # Internal: Internal error


ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.E001: "Validation error",
    ErrorCode.E002: "Transaction service error",
    ErrorCode.E003: "Unable to reach transaction service",
    ErrorCode.E004: "Too many requests, try again later.",
    ErrorCode.E005: "Internal server error",
}
