from __future__ import annotations

import base64
import hashlib
import hmac
import json
import time
from dataclasses import dataclass
from typing import Any, Mapping


API_KEY_HEADER = "YAYA-API-KEY"
TIMESTAMP_HEADER = "YAYA-API-TIMESTAMP"
SIGNATURE_HEADER = "YAYA-API-SIGN"


@dataclass(frozen=True)
class SignatureHeaders:
    api_key: str
    timestamp: str
    signature: str
    content_type: str = "application/json"

    def as_headers(self) -> dict[str, str]:
        return {
            API_KEY_HEADER: self.api_key,
            TIMESTAMP_HEADER: self.timestamp,
            SIGNATURE_HEADER: self.signature,
            "Content-Type": self.content_type,
        }


def serialize_body(body: Mapping[str, Any] | None) -> bytes:
    """Serialize a request body exactly as it is sent and signed.

    Compact separators, key insertion order kept, UTF-8. An absent or empty
    body serializes to b"".
    """
    if not body:
        return b""
    return json.dumps(dict(body), separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def now_ms() -> int:
    return time.time_ns() // 1_000_000


def sign(
    secret: str | bytes,
    method: str,
    endpoint_path: str,
    body: Mapping[str, Any] | None = None,
    *,
    api_key: str,
    timestamp_ms: int | None = None,
) -> SignatureHeaders:
    """Compute the authentication headers for one upstream call.

    pre-hash = timestamp_ms + METHOD + endpoint_path + serialized body,
    signature = base64(HMAC-SHA256(secret, pre-hash)).

    `endpoint_path` is the upstream path (e.g. "/api/en/transaction/search"),
    not the route exposed by this service.
    """
    timestamp = str(now_ms() if timestamp_ms is None else int(timestamp_ms))
    key = secret.encode("utf-8") if isinstance(secret, str) else secret

    prehash = b"".join(
        (
            timestamp.encode("ascii"),
            method.upper().encode("ascii"),
            endpoint_path.encode("utf-8"),
            serialize_body(body),
        )
    )
    digest = hmac.new(key, prehash, hashlib.sha256).digest()

    return SignatureHeaders(
        api_key=api_key,
        timestamp=timestamp,
        signature=base64.b64encode(digest).decode("ascii"),
    )
