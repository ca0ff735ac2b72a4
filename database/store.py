"""
Record Store

Async create / read / update access to the persisted tables.

Every call is atomic for a single record only; there is no multi-record
transaction primitive, so callers that need several writes must handle
partial failure themselves.

Records are plain dictionaries with JSON friendly values (string ids,
ISO formatted dates, money as floats rounded to cents).
"""

import asyncio
import uuid
from abc import ABC, abstractmethod
from datetime import date, datetime
from decimal import Decimal
from functools import partial
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy import Date, Numeric, Uuid, asc, desc, inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from logger import logger


class StoreError(Exception):
    """A store call failed"""

    def __init__(self, message: str, table: str = None):
        self.message = message
        self.table = table
        super().__init__(message)


class RecordNotFoundError(StoreError):
    """The requested record does not exist"""

    def __init__(self, table: str, record_id: Any):
        self.record_id = record_id
        super().__init__(f"No record '{record_id}' in {table}", table)


class StoreWriteError(StoreError):
    """
    A single write was rejected.

    `operation` names the write (create_request, create_line, update_request,
    ...) and `target` identifies which record the write was for.
    """

    def __init__(self, operation: str, table: str, reason: str, target: Any = None):
        self.operation = operation
        self.target = target
        self.reason = reason
        message = f"{operation} on {table} failed: {reason}"
        if target is not None:
            message = f"{operation} on {table} ({target}) failed: {reason}"
        super().__init__(message, table)


class Store(ABC):
    """Abstract record store consumed by the request and catalog services"""

    @abstractmethod
    async def create(self, table: str, record: Dict[str, Any]) -> Dict[str, Any]:
        ...

    @abstractmethod
    async def update(
        self, table: str, record_id: str, patch: Dict[str, Any]
    ) -> Dict[str, Any]:
        ...

    @abstractmethod
    async def read(
        self,
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        ...

    @abstractmethod
    async def read_one(self, table: str, record_id: str) -> Dict[str, Any]:
        ...

    @abstractmethod
    async def delete(self, table: str, record_id: str) -> None:
        ...


class SQLAlchemyStore(Store):
    """
    Store backed by SQLAlchemy sessions.

    Each call opens a short lived session and runs in the default thread
    pool executor so the event loop never blocks on the database.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session] = None,
        table_models: Dict[str, Any] = None,
    ):
        if session_factory is None:
            from .db import SessionLocal

            session_factory = SessionLocal

        if table_models is None:
            from models import TABLE_MODELS

            table_models = TABLE_MODELS

        self.session_factory = session_factory
        self.table_models = table_models

    # ============================================
    # PUBLIC API
    # ============================================

    async def create(self, table, record):
        return await self._run(self._create, table, record)

    async def update(self, table, record_id, patch):
        return await self._run(self._update, table, record_id, patch)

    async def read(self, table, filters=None, order_by=None, descending=False, limit=None):
        return await self._run(self._read, table, filters, order_by, descending, limit)

    async def read_one(self, table, record_id):
        return await self._run(self._read_one, table, record_id)

    async def delete(self, table, record_id):
        return await self._run(self._delete, table, record_id)

    # ============================================
    # SYNC IMPLEMENTATIONS
    # ============================================

    async def _run(self, func, *args):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(func, *args))

    def _model(self, table: str):
        model = self.table_models.get(table)
        if model is None:
            raise StoreError(f"Unknown table '{table}'", table)
        return model

    def _create(self, table, record):
        model = self._model(table)
        db: Session = self.session_factory()
        try:
            entity = model(**self._coerce_values(model, record))
            db.add(entity)
            db.commit()
            return entity.to_dict()

        except SQLAlchemyError as e:
            db.rollback()
            logger.error(msg=f"create on {table} failed: {e}")
            raise StoreWriteError("create", table, str(e.__cause__ or e)) from e
        finally:
            db.close()

    def _update(self, table, record_id, patch):
        model = self._model(table)
        db: Session = self.session_factory()
        try:
            entity = db.get(model, self._to_uuid(table, record_id))
            if entity is None:
                raise RecordNotFoundError(table, record_id)

            for key, value in self._coerce_values(model, patch).items():
                setattr(entity, key, value)

            db.commit()
            return entity.to_dict()

        except SQLAlchemyError as e:
            db.rollback()
            logger.error(msg=f"update on {table} ({record_id}) failed: {e}")
            raise StoreWriteError("update", table, str(e.__cause__ or e), record_id) from e
        finally:
            db.close()

    def _read(self, table, filters, order_by, descending, limit):
        model = self._model(table)
        db: Session = self.session_factory()
        try:
            query = db.query(model)

            for key, value in self._coerce_values(model, filters or {}).items():
                query = query.filter(getattr(model, key) == value)

            if order_by:
                column = getattr(model, order_by)
                query = query.order_by(desc(column) if descending else asc(column))

            if limit:
                query = query.limit(limit)

            return [entity.to_dict() for entity in query.all()]

        except SQLAlchemyError as e:
            logger.error(msg=f"read on {table} failed: {e}")
            raise StoreError(str(e), table) from e
        finally:
            db.close()

    def _read_one(self, table, record_id):
        model = self._model(table)
        db: Session = self.session_factory()
        try:
            entity = db.get(model, self._to_uuid(table, record_id))
            if entity is None:
                raise RecordNotFoundError(table, record_id)
            return entity.to_dict()

        except SQLAlchemyError as e:
            logger.error(msg=f"read_one on {table} ({record_id}) failed: {e}")
            raise StoreError(str(e), table) from e
        finally:
            db.close()

    def _delete(self, table, record_id):
        model = self._model(table)
        db: Session = self.session_factory()
        try:
            entity = db.get(model, self._to_uuid(table, record_id))
            if entity is None:
                raise RecordNotFoundError(table, record_id)
            db.delete(entity)
            db.commit()

        except SQLAlchemyError as e:
            db.rollback()
            logger.error(msg=f"delete on {table} ({record_id}) failed: {e}")
            raise StoreWriteError("delete", table, str(e.__cause__ or e), record_id) from e
        finally:
            db.close()

    # ============================================
    # VALUE COERCION
    # ============================================

    @staticmethod
    def _to_uuid(table: str, record_id: Any) -> uuid.UUID:
        if isinstance(record_id, uuid.UUID):
            return record_id
        try:
            return uuid.UUID(str(record_id))
        except ValueError:
            raise RecordNotFoundError(table, record_id)

    @staticmethod
    def _coerce_values(model, values: Dict[str, Any]) -> Dict[str, Any]:
        """Convert JSON style values (string ids, ISO dates) to column types"""
        columns = inspect(model).columns
        coerced = {}

        for key, value in values.items():
            if key not in columns:
                raise StoreError(f"Unknown field '{key}'", model.__tablename__)

            column_type = columns[key].type

            if value is None:
                coerced[key] = None
            elif isinstance(column_type, Uuid) and not isinstance(value, uuid.UUID):
                coerced[key] = SQLAlchemyStore._to_uuid(model.__tablename__, value)
            elif isinstance(column_type, Date) and isinstance(value, str):
                coerced[key] = date.fromisoformat(value)
            elif isinstance(column_type, Date) and isinstance(value, datetime):
                coerced[key] = value.date()
            elif isinstance(column_type, Numeric) and not isinstance(value, Decimal):
                coerced[key] = Decimal(str(value))
            else:
                coerced[key] = value

        return coerced
