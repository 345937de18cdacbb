from typing import Any, List, Optional

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class Transaction(BaseModel):
    """Known fields of an upstream transaction record.

    Records are passed through to the dashboard untouched; this model only
    documents what the transaction service is known to send.
    """

    model_config = ConfigDict(extra="allow")

    id: str
    sender: str
    receiver: str
    amount: float
    currency: str
    cause: Optional[str] = None
    created_at: Any = None
    sender_account_name: Optional[str] = None
    receiver_account_name: Optional[str] = None


class SearchRequest(BaseModel):
    query: str = Field(..., min_length=1, description="Sender, receiver, transaction id or cause")
    p: Optional[int] = Field(None, ge=1, description="1-based page number")
    limit: Optional[int] = Field(None, description="Page size, one of the allowed limits")


class TransactionPage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    data: List[Any] = Field(default_factory=list, description="Upstream records for this page")
    total: int = Field(..., ge=0)
    page: int = Field(..., ge=1)
    limit: int = Field(..., ge=1)
    total_pages: int = Field(..., ge=0, alias="totalPages")
    success: bool = True


class TransactionSearchPage(TransactionPage):
    search_query: str = Field(..., alias="searchQuery")
