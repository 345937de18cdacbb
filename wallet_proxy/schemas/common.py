from typing import Any, List

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class ErrorEnvelope(BaseModel):
    """Shape of every failed response, whatever the failure kind."""

    model_config = ConfigDict(populate_by_name=True)

    error: Any
    success: bool = False
    data: List[Any] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int
    total_pages: int = Field(0, alias="totalPages")


class HealthStatus(BaseModel):
    ok: bool = True
    timestamp: str
