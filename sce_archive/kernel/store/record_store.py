"""
Record Store - uniform CRUD over one archive collection.

One store class serves accounts, content records and posts. The model class
supplies everything collection-specific:

- ``__entity_name__``: name used in NotFoundError
- ``__unique_fields__``: columns whose values must be unique

The store knows nothing about access policy; services call the policy first
and use the store as a plain data source.
"""

import asyncio
import re
import uuid
import weakref
from typing import Any, ClassVar, Dict, Generic, List, Mapping, Optional, Type, TypeVar, Union

from sqlalchemy import func, inspect as sa_inspect, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from sce_archive.errors import DuplicateKeyError, NotFoundError, ValidationError
from sce_archive.kernel.models.base import Base, generate_uuid, utcnow
from sce_archive.logging_config import get_logger

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=Base)

# Managed by the store; never written through update()
PROTECTED_FIELDS = frozenset({"id", "created_at", "updated_at"})


class RecordStore(Generic[ModelT]):
    """
    Async repository over a single model's table.

    Writes flush but do not commit; the session owner commits or rolls back.

    Uniqueness: the check-then-write sequence of insert/update runs under a
    per-collection asyncio.Lock, which serializes writers in this process.
    The table's UNIQUE constraints cover writers in other processes; a
    violation reported by the database surfaces as DuplicateKeyError too.
    """

    # event loop -> table name -> lock
    _locks: ClassVar["weakref.WeakKeyDictionary[asyncio.AbstractEventLoop, Dict[str, asyncio.Lock]]"] = (
        weakref.WeakKeyDictionary()
    )

    def __init__(self, session: AsyncSession, model: Type[ModelT]):
        self.session = session
        self.model = model
        self.entity_name: str = getattr(model, "__entity_name__", model.__tablename__)
        self.unique_fields: tuple = tuple(getattr(model, "__unique_fields__", ()))
        self.columns = {attr.key for attr in sa_inspect(model).column_attrs}

    def _lock(self) -> asyncio.Lock:
        loop = asyncio.get_running_loop()
        per_loop = self._locks.setdefault(loop, {})
        return per_loop.setdefault(self.model.__tablename__, asyncio.Lock())

    @staticmethod
    def _coerce_id(entity_id: Union[uuid.UUID, str]) -> Optional[uuid.UUID]:
        if isinstance(entity_id, uuid.UUID):
            return entity_id
        try:
            return uuid.UUID(str(entity_id))
        except ValueError:
            return None

    async def _find_conflict(
        self,
        values: Mapping[str, Any],
        exclude_id: Optional[uuid.UUID] = None,
    ) -> Optional[str]:
        """First unique field whose value is already taken by another row."""
        for field in self.unique_fields:
            value = values.get(field)
            if value is None:
                continue
            query = select(self.model.id).where(getattr(self.model, field) == value)
            if exclude_id is not None:
                query = query.where(self.model.id != exclude_id)
            result = await self.session.execute(query.limit(1))
            if result.first() is not None:
                return field
        return None

    def _field_from_integrity_error(self, exc: IntegrityError) -> Optional[str]:
        """Unique field named by a uniqueness violation; None for any other integrity error."""
        message = str(exc.orig) if exc.orig is not None else str(exc)
        if not re.search(r"unique|duplicate", message, re.IGNORECASE):
            return None
        for field in self.unique_fields:
            if re.search(rf"\b{field}\b", message):
                return field
        return self.unique_fields[0] if self.unique_fields else "id"

    async def _flush(self, values: Mapping[str, Any]) -> None:
        try:
            await self.session.flush()
        except IntegrityError as exc:
            await self.session.rollback()
            field = self._field_from_integrity_error(exc)
            if field is None:
                raise
            raise DuplicateKeyError(field, values.get(field)) from exc

    # -- Operations ----------------------------------------------------------

    async def insert(self, entity: ModelT) -> ModelT:
        """
        Add a new entity.

        Assigns id and timestamps when absent. Raises DuplicateKeyError naming
        the conflicting field; the collection is then left unchanged.
        """
        if getattr(entity, "id", None) is None:
            entity.id = generate_uuid()
        if "created_at" in self.columns:
            if entity.created_at is None:
                entity.created_at = utcnow()
            if entity.updated_at is None:
                entity.updated_at = entity.created_at

        values = {field: getattr(entity, field) for field in self.unique_fields}
        async with self._lock():
            conflict = await self._find_conflict(values)
            if conflict is not None:
                raise DuplicateKeyError(conflict, values[conflict])
            self.session.add(entity)
            await self._flush(values)

        logger.debug("Inserted %s", self.entity_name, extra={"entity_id": str(entity.id)})
        return entity

    async def find_all(self) -> List[ModelT]:
        """Every entity in insertion order."""
        query = select(self.model)
        if "created_at" in self.columns:
            query = query.order_by(self.model.created_at, self.model.id)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def find_by_id(self, entity_id: Union[uuid.UUID, str]) -> Optional[ModelT]:
        key = self._coerce_id(entity_id)
        if key is None:
            return None
        return await self.session.get(self.model, key)

    async def find_one_by(self, **criteria: Any) -> Optional[ModelT]:
        query = select(self.model)
        for field, value in criteria.items():
            query = query.where(getattr(self.model, field) == value)
        result = await self.session.execute(query.limit(1))
        return result.scalars().first()

    async def update(self, entity_id: Union[uuid.UUID, str], fields: Mapping[str, Any]) -> ModelT:
        """
        Merge ``fields`` into an entity and bump updated_at.

        Raises NotFoundError for an unknown id, ValidationError for a field
        that is not a writable column, DuplicateKeyError when a unique value
        is taken by another row.
        """
        entity = await self.find_by_id(entity_id)
        if entity is None:
            raise NotFoundError(self.entity_name, entity_id)

        for name in fields:
            if name not in self.columns or name in PROTECTED_FIELDS:
                raise ValidationError("validation.unknown_field", field=name)

        async with self._lock():
            conflict = await self._find_conflict(fields, exclude_id=entity.id)
            if conflict is not None:
                raise DuplicateKeyError(conflict, fields[conflict])
            for name, value in fields.items():
                setattr(entity, name, value)
            if "updated_at" in self.columns:
                entity.updated_at = utcnow()
            await self._flush(fields)

        return entity

    async def delete(self, entity_id: Union[uuid.UUID, str]) -> None:
        """Remove an entity; deleting a missing id is a NotFoundError every time."""
        entity = await self.find_by_id(entity_id)
        if entity is None:
            raise NotFoundError(self.entity_name, entity_id)
        await self.session.delete(entity)
        await self.session.flush()

    async def delete_all(self) -> int:
        """Remove every entity in the collection. Returns how many were removed."""
        entities = await self.find_all()
        for entity in entities:
            await self.session.delete(entity)
        await self.session.flush()
        return len(entities)

    async def count(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(self.model))
        return result.scalar_one()
