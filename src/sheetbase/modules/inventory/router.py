"""Sheetbase Inventory - Router.

CRUD endpoints for each inventory table, addressed by key:
/inventory/{entity} and /inventory/{entity}/{key}.
"""

import logging

from fastapi import APIRouter, Depends, Query, status

from sheetbase.core import TabularDatastore
from sheetbase.core.repository import SheetRepository
from sheetbase.deps import get_datastore, require_inventory
from sheetbase.modules.inventory.repository import REPOSITORIES
from sheetbase.schemas import PaginatedResponse, paginate

router = APIRouter(
    prefix="/inventory",
    tags=["inventory"],
    dependencies=[require_inventory],
)

logger = logging.getLogger(__name__)


def _register(slug: str, repository: type[SheetRepository]) -> None:
    model = repository.model

    async def list_items(
        force_refresh: bool = Query(default=False),
        page_size: int = Query(default=100, ge=1, le=500),
        page_token: str | None = Query(default=None),
        datastore: TabularDatastore = Depends(get_datastore),
    ):
        items = await repository(datastore).list(force_refresh=force_refresh)
        page, meta = paginate(items, page_size, page_token)
        return PaginatedResponse[model](items=page, meta=meta)

    async def create_item(item: model, datastore: TabularDatastore = Depends(get_datastore)):
        created = await repository(datastore).create(item)
        logger.info("Created %s row", slug)
        return created

    async def get_item(key: str, datastore: TabularDatastore = Depends(get_datastore)):
        return await repository(datastore).get_or_raise(key)

    async def update_item(key: str, item: model, datastore: TabularDatastore = Depends(get_datastore)):
        return await repository(datastore).update(key, item)

    async def delete_item(key: str, datastore: TabularDatastore = Depends(get_datastore)):
        await repository(datastore).delete(key)
        return None

    name = slug.replace("-", "_")
    router.add_api_route(
        f"/{slug}", list_items, methods=["GET"],
        response_model=PaginatedResponse[model], name=f"list_{name}",
    )
    router.add_api_route(
        f"/{slug}", create_item, methods=["POST"],
        response_model=model, status_code=status.HTTP_201_CREATED, name=f"create_{name}",
    )
    router.add_api_route(
        f"/{slug}/{{key}}", get_item, methods=["GET"],
        response_model=model, name=f"get_{name}",
    )
    router.add_api_route(
        f"/{slug}/{{key}}", update_item, methods=["PUT"],
        response_model=model, name=f"update_{name}",
    )
    router.add_api_route(
        f"/{slug}/{{key}}", delete_item, methods=["DELETE"],
        status_code=status.HTTP_204_NO_CONTENT, name=f"delete_{name}",
    )


for _slug, _repository in REPOSITORIES.items():
    _register(_slug, _repository)
