"""
Sheetbase Tables - Schemas

Pydantic models for the generic table API.
"""

from typing import Any

from pydantic import BaseModel, Field

from sheetbase.schemas import PaginationMeta


class RecordIn(BaseModel):
    """A record to write; keys are header names."""
    values: dict[str, Any] = Field(..., description="Column name -> value")


class RowResponse(BaseModel):
    """One data row with the position it had in the fetch that produced it."""
    position: int = Field(..., ge=2, description="1-based row position (header is row 1)")
    record: dict[str, str]


class RowListResponse(BaseModel):
    items: list[RowResponse]
    meta: PaginationMeta


class HeadersResponse(BaseModel):
    table: str
    headers: list[str]


class AppendResponse(BaseModel):
    table: str
    key: str | None = Field(default=None, description="Stable key written on append, if the table has a key column")


class MutationResponse(BaseModel):
    table: str
    position: int | None = None


class BatchDeleteRequest(BaseModel):
    positions: list[int] = Field(..., min_length=1, description="Positions from a single read")


class BatchDeleteResponse(BaseModel):
    table: str
    deleted: int


class EnsureTableRequest(BaseModel):
    headers: list[str] = Field(default_factory=list)


class EnsureTableResponse(BaseModel):
    table: str
    created: bool
