from .db import DBBase, DBBaseClass, SessionLocal, db_engine, init_models, time_now
from .store import (
    Store,
    SQLAlchemyStore,
    StoreError,
    StoreWriteError,
    RecordNotFoundError,
)

__all__ = [
    "DBBase",
    "DBBaseClass",
    "SessionLocal",
    "db_engine",
    "init_models",
    "time_now",
    "Store",
    "SQLAlchemyStore",
    "StoreError",
    "StoreWriteError",
    "RecordNotFoundError",
]
