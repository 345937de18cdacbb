import logging

import uvicorn

from wallet_proxy.config import settings
from wallet_proxy.utils.observability import setup_logging

logger = logging.getLogger("wallet_proxy")


def main() -> None:
    setup_logging(settings.LOG_LEVEL)
    logger.info("YaYa Wallet API Server listening on http://%s:%d (env=%s)", settings.HOST, settings.PORT, settings.ENV)
    logger.info("Dashboard available at %s", ", ".join(settings.cors_origins) or "<no origin configured>")
    uvicorn.run(
        "wallet_proxy.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
