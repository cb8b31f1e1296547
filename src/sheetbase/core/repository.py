"""
Sheetbase Core - Base Repository.

Abstract base class for entity repositories following the repository pattern.
A repository binds one pydantic model to one table and addresses rows by a
key column, never by position.
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from sheetbase.core.datastore import TabularDatastore
from sheetbase.exceptions import ConflictException, RecordNotFoundException, ValidationException

M = TypeVar("M", bound=BaseModel)


class SheetRepository(ABC, Generic[M]):
    """
    Abstract base repository for table-backed entities.

    Subclasses name the table, the model, and optionally a natural key
    column; without one the datastore's stable key column is used.
    """

    model: type[M]
    key_column: str | None = None

    def __init__(self, datastore: TabularDatastore):
        self._datastore = datastore

    @property
    @abstractmethod
    def table_name(self) -> str:
        """Return the table name for this repository."""
        ...

    @property
    def key(self) -> str:
        return self.key_column or self._datastore.key_column

    def _key_field(self) -> str:
        for name, field in self.model.model_fields.items():
            if (field.alias or name) == self.key:
                return name
        raise ValidationException(f"{self.model.__name__} has no field for key column '{self.key}'")

    def to_model(self, record: dict[str, Any]) -> M:
        return self.model.model_validate(record)

    def to_record(self, item: M) -> dict[str, Any]:
        return item.model_dump(by_alias=True, mode="json")

    async def list(self, force_refresh: bool = False) -> list[M]:
        """
        List every row of the table.

        Args:
            force_refresh: Bypass the datastore cache

        Returns:
            All rows as models, in sheet order
        """
        records = await self._datastore.read(self.table_name, force_refresh=force_refresh)
        return [self.to_model(r) for r in records]

    async def get(self, key: str) -> M | None:
        record = await self._datastore.find(self.table_name, key, self.key)
        return self.to_model(record) if record else None

    async def get_or_raise(self, key: str) -> M:
        """
        Get a single row by key, raise if not found.

        Raises:
            RecordNotFoundException: If no row carries the key
        """
        item = await self.get(key)
        if item is None:
            raise RecordNotFoundException(self.table_name, self.key, key)
        return item

    async def create(self, item: M) -> M:
        """
        Append a new row.

        A natural key is required and must not exist yet; a blank stable
        key is generated.

        Returns:
            The created item, including a generated key
        """
        field = self._key_field()
        current = getattr(item, field)
        if self.key_column and not current:
            raise ValidationException(f"{self.key} is required")
        if self.key_column:
            existing = await self._datastore.find(self.table_name, str(current), self.key, force_refresh=True)
            if existing is not None:
                raise ConflictException(
                    f"{self.table_name} already has {self.key}={current}",
                    details={"table": self.table_name, "key": str(current)},
                )
        generated = await self._datastore.append(self.table_name, self.to_record(item))
        if generated and not current and self.key_column is None:
            item = item.model_copy(update={field: generated})
        return item

    async def update(self, key: str, item: M) -> M:
        """
        Rewrite the row carrying ``key``; the key itself cannot change.

        Columns the model does not define keep their current cell values.

        Raises:
            RecordNotFoundException: If no row carries the key
        """
        item = item.model_copy(update={self._key_field(): key})
        current = await self._datastore.find(self.table_name, key, self.key, force_refresh=True)
        if current is None and not self._datastore.local_fallback:
            raise RecordNotFoundException(self.table_name, self.key, key)
        record = {**(current or {}), **self.to_record(item)}
        await self._datastore.update_by_key(self.table_name, key, record, self.key)
        return item

    async def delete(self, key: str) -> None:
        await self._datastore.delete_by_key(self.table_name, key, self.key)
