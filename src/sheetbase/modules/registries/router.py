"""Sheetbase Registries - Router.

Read derived value lists and add local values.
"""

from fastapi import APIRouter, Depends, status

from sheetbase.deps import require_registries
from sheetbase.modules.registries.schemas import (
    AllRegistriesResponse,
    RegistryValueCreate,
    RegistryValues,
)
from sheetbase.modules.registries.service import FieldRegistry, get_field_registry

router = APIRouter(prefix="/registries", tags=["registries"], dependencies=[require_registries])


@router.get("", response_model=AllRegistriesResponse)
async def list_registries(registry: FieldRegistry = Depends(get_field_registry)) -> AllRegistriesResponse:
    """Every registry with its current values."""
    return AllRegistriesResponse(registries=await registry.all_values())


@router.post("/refresh", response_model=AllRegistriesResponse)
async def refresh_registries(registry: FieldRegistry = Depends(get_field_registry)) -> AllRegistriesResponse:
    """Drop stored lists and rescan the table."""
    return AllRegistriesResponse(registries=await registry.refresh_all())


@router.get("/{name}", response_model=RegistryValues)
async def get_registry(name: str, registry: FieldRegistry = Depends(get_field_registry)) -> RegistryValues:
    return RegistryValues(name=name, values=await registry.values(name))


@router.post("/{name}", response_model=RegistryValues, status_code=status.HTTP_201_CREATED)
async def add_registry_value(
    name: str, data: RegistryValueCreate, registry: FieldRegistry = Depends(get_field_registry)
) -> RegistryValues:
    """Add a value locally; the table itself is not changed."""
    return RegistryValues(name=name, values=await registry.add_value(name, data.value))
