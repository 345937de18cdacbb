"""Hit the list route repeatedly and show how the ingress rate limit reacts.

Runs against a local proxy at http://localhost:5000 (override with argv[1]).
Prints request index, HTTP status and the RateLimit-Remaining header.
"""

from __future__ import annotations

import sys

import httpx


BASE = "http://localhost:5000"
COUNT = 20


def main() -> int:
    base = sys.argv[1] if len(sys.argv) > 1 else BASE
    with httpx.Client(base_url=base, timeout=10.0) as client:
        for i in range(1, COUNT + 1):
            try:
                r = client.get("/api/transactions")
            except httpx.RequestError as e:
                print(i, "ERR", type(e).__name__)
                continue
            remaining = r.headers.get("RateLimit-Remaining", "-")
            if r.status_code == 429:
                print(i, r.status_code, r.json().get("error"))
            else:
                print(i, r.status_code, remaining)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
