"""Sheetbase Tables - Router.

REST API endpoints over any table in the spreadsheet.
"""

import logging

from fastapi import APIRouter, Depends, Query, status

from sheetbase.core import TabularDatastore
from sheetbase.core.schema import position_of
from sheetbase.deps import get_datastore, require_tables
from sheetbase.modules.tables.schemas import (
    AppendResponse,
    BatchDeleteRequest,
    BatchDeleteResponse,
    EnsureTableRequest,
    EnsureTableResponse,
    HeadersResponse,
    MutationResponse,
    RecordIn,
    RowListResponse,
    RowResponse,
)
from sheetbase.schemas import paginate

router = APIRouter(
    prefix="/tables",
    tags=["tables"],
    dependencies=[require_tables],
)

logger = logging.getLogger(__name__)


@router.get("/{table}/headers", response_model=HeadersResponse)
async def get_headers(table: str, datastore: TabularDatastore = Depends(get_datastore)) -> HeadersResponse:
    """Current header row (always read fresh)."""
    return HeadersResponse(table=table, headers=await datastore.headers(table))


@router.get("/{table}/rows", response_model=RowListResponse)
async def list_rows(
    table: str,
    force_refresh: bool = Query(default=False),
    page_size: int = Query(default=100, ge=1, le=500),
    page_token: str | None = Query(default=None),
    datastore: TabularDatastore = Depends(get_datastore),
) -> RowListResponse:
    """
    List data rows with their positions.

    The whole table is fetched (or served from cache) and paged locally.
    Positions are only valid until the next delete on this table.
    """
    records = await datastore.read(table, force_refresh=force_refresh)
    rows = [RowResponse(position=position_of(i), record=r) for i, r in enumerate(records)]
    page, meta = paginate(rows, page_size, page_token)
    return RowListResponse(items=page, meta=meta)


@router.post("/{table}/rows", response_model=AppendResponse, status_code=status.HTTP_201_CREATED)
async def append_row(
    table: str, data: RecordIn, datastore: TabularDatastore = Depends(get_datastore)
) -> AppendResponse:
    """Append a record after the last row."""
    key = await datastore.append(table, data.values)
    return AppendResponse(table=table, key=key)


@router.put("/{table}/rows/{position}", response_model=MutationResponse)
async def update_row(
    table: str, position: int, data: RecordIn, datastore: TabularDatastore = Depends(get_datastore)
) -> MutationResponse:
    """Overwrite the row at a position."""
    await datastore.update(table, position, data.values)
    return MutationResponse(table=table, position=position)


@router.delete("/{table}/rows/{position}", response_model=MutationResponse)
async def delete_row(
    table: str, position: int, datastore: TabularDatastore = Depends(get_datastore)
) -> MutationResponse:
    """Remove the row at a position; rows below move up."""
    await datastore.delete(table, position)
    return MutationResponse(table=table, position=position)


@router.post("/{table}/rows/batch-delete", response_model=BatchDeleteResponse)
async def batch_delete_rows(
    table: str, data: BatchDeleteRequest, datastore: TabularDatastore = Depends(get_datastore)
) -> BatchDeleteResponse:
    """Remove several rows taken from one read (applied highest position first)."""
    deleted = await datastore.delete_many(table, data.positions)
    return BatchDeleteResponse(table=table, deleted=deleted)


@router.put("/{table}/records/{key}", response_model=MutationResponse)
async def update_record(
    table: str,
    key: str,
    data: RecordIn,
    key_column: str | None = Query(default=None),
    datastore: TabularDatastore = Depends(get_datastore),
) -> MutationResponse:
    """Overwrite the row carrying a key, located just before the write."""
    position = await datastore.update_by_key(table, key, data.values, key_column)
    return MutationResponse(table=table, position=position)


@router.delete("/{table}/records/{key}", response_model=MutationResponse)
async def delete_record(
    table: str,
    key: str,
    key_column: str | None = Query(default=None),
    datastore: TabularDatastore = Depends(get_datastore),
) -> MutationResponse:
    """Remove the row carrying a key, located just before the delete."""
    position = await datastore.delete_by_key(table, key, key_column)
    return MutationResponse(table=table, position=position)


@router.post("/{table}/ensure", response_model=EnsureTableResponse)
async def ensure_table(
    table: str, data: EnsureTableRequest, datastore: TabularDatastore = Depends(get_datastore)
) -> EnsureTableResponse:
    """Create the table if missing and write its header row if empty."""
    created = await datastore.ensure_table(table, data.headers)
    logger.info("ensure_table %s -> created=%s", table, created)
    return EnsureTableResponse(table=table, created=created)


@router.post("/{table}/clear", status_code=status.HTTP_204_NO_CONTENT)
async def clear_table(
    table: str,
    keep_header: bool = Query(default=True),
    datastore: TabularDatastore = Depends(get_datastore),
):
    """Blank every data row."""
    await datastore.clear(table, keep_header=keep_header)
    return None
