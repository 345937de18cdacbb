from fastapi import APIRouter, Depends

from wallet_proxy.api import deps
from wallet_proxy.api.routes import transactions

api_router = APIRouter()

_http_deps = [Depends(deps.rate_limit)]

api_router.include_router(transactions.router, prefix="/transactions", tags=["Transactions"], dependencies=_http_deps)
