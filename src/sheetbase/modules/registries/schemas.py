"""
Sheetbase Registries - Schemas
"""

from pydantic import BaseModel, Field


class RegistryValues(BaseModel):
    name: str
    values: list[str]


class RegistryValueCreate(BaseModel):
    value: str = Field(..., min_length=1, max_length=200)


class AllRegistriesResponse(BaseModel):
    registries: dict[str, list[str]]
