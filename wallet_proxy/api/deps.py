from fastapi import Request, Response

from wallet_proxy.config import settings
from wallet_proxy.core.gateway import UpstreamGateway
from wallet_proxy.core.rate_limit import FixedWindowRateLimiter
from wallet_proxy.utils.exceptions import RateLimitError
from wallet_proxy.utils.metrics import RATE_LIMIT_REJECTIONS_TOTAL


# One budget for the whole process, shared by every caller.
ingress_limiter = FixedWindowRateLimiter()


async def rate_limit(response: Response) -> None:
    if not settings.RATE_LIMIT_ENABLED:
        return

    decision = await ingress_limiter.hit(
        limit=settings.RATE_LIMIT_REQUESTS_PER_WINDOW,
        window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
    )
    if not decision.allowed:
        RATE_LIMIT_REJECTIONS_TOTAL.inc()
        raise RateLimitError(headers=decision.headers())

    response.headers.update(decision.headers())


def get_gateway(request: Request) -> UpstreamGateway:
    return request.app.state.gateway
