"""
Sheetbase - Common Schemas.

Shared Pydantic models used across all modules.
"""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

from sheetbase.exceptions import ValidationException

T = TypeVar("T")


# =============================================================================
# Error Responses
# =============================================================================


class ErrorDetail(BaseModel):
    """Error detail structure."""

    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] | None = Field(default=None, description="Additional context")
    request_id: str | None = Field(default=None, description="Request ID for tracing")


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: ErrorDetail


# =============================================================================
# Pagination
# =============================================================================


class PaginationMeta(BaseModel):
    """Pagination metadata."""

    total_count: int = Field(ge=0)
    page_size: int = Field(ge=1, le=500)
    next_page_token: str | None = None
    has_more: bool = False


class PaginatedResponse(BaseModel, Generic[T]):
    """Generic paginated response."""

    items: list[T]
    meta: PaginationMeta


def paginate(items: list[T], page_size: int, page_token: str | None) -> tuple[list[T], PaginationMeta]:
    """
    Slice an already-fetched list.

    The remote store cannot page, so paging always happens after a full
    table read. The token is the offset of the next page.
    """
    try:
        offset = int(page_token) if page_token else 0
    except ValueError:
        raise ValidationException(f"Invalid page token: {page_token}") from None
    if offset < 0:
        raise ValidationException(f"Invalid page token: {page_token}")

    page = items[offset : offset + page_size]
    has_more = offset + len(page) < len(items)
    return page, PaginationMeta(
        total_count=len(items),
        page_size=page_size,
        next_page_token=str(offset + page_size) if has_more else None,
        has_more=has_more,
    )


# =============================================================================
# Health Check
# =============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., pattern="^(healthy|degraded)$")
    version: str
    features: dict[str, bool]
    app_env: str | None = None
    is_production: bool | None = None
    local_fallback: bool | None = None
    sheets_backend: str | None = None
