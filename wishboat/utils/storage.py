"""The abstract storage layer of Wishboat.

The abstract storage layer is centred on the concept of Record, which is the smallest storable unit and can be either an atomic type or a composite type (see `RecordStorage`).

A `CommonStorage` is a `RecordStorage` of `dict` with `str` keys: a document store. Wishboat keeps every user, with the user's wishlist embedded, as one document.

We often want to read and write a specific type rather than a dictionary. `CommonStorageRecordWrapper` takes a `CommonStorage` and a `CommonStorageAdapter`, which takes care of the type conversion, and gives a `RecordStorage` reading and writing that type.
Most of the data structures in Wishboat are declared with `dataclasses.dataclass`, `DataclassCommonStorageAdapter` is the adapter for them.

The backend is `SQLStorage`: documents are kept as JSON in one SQL table, through SQLAlchemy.
"""
import asyncio
import dataclasses
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from typing import (
    Any,
    AsyncIterator,
    Awaitable,
    Callable,
    Dict,
    Generic,
    Iterator,
    List,
    Optional,
    Type,
    TypeVar,
)

from sqlalchemy import JSON, Integer, String, create_engine, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker
from sqlalchemy.pool import StaticPool

T = TypeVar("T")
R = TypeVar("R")

MEMORY_DATABASE = ":mem:"
"""The database path for an in-memory database."""


class StorageError(Exception):
    """The backend failed to read or write. The original exception is chained as `__cause__`."""


class RecordStorage(Generic[T]):
    """A protocol type which describes basic database operations on a type.

    This class describes all queries in `dict` with `str` as key. A record matchs a query when every key of the query is in the record with an equal value.
    """

    def store(self, record: T) -> Awaitable[T]:
        """Save a record as new."""
        ...

    def find(self, query: Dict[str, Any]) -> AsyncIterator[T]:
        """Find records which completely matchs `query`."""
        ...

    def find_one(self, query: Dict[str, Any]) -> Awaitable[Optional[T]]:
        """Find one record which completely matchs `query`."""
        ...

    def update_one(
        self, query: Dict[str, Any], updated: T, upsert: bool = False
    ) -> Awaitable[Optional[T]]:
        """Replace one record, which matchs `query`, with `updated`.
        If nothing matchs and `upsert` is `True`, `updated` is stored as new."""
        ...

    def remove_one(self, query: Dict[str, Any]) -> Awaitable[bool]:
        """Remove one record which matches `query`."""
        ...

    def remove(self, query: Dict[str, Any]) -> Awaitable[int]:
        """Remove all records match `query`."""
        ...


class CommonStorage(RecordStorage[Dict[str, Any]]):
    """A protocol type which is `RecordStorage` with `Dict[str, Any]` (read/write `dict`) for general purpose."""

    pass


class CommonStorageAdapter(Generic[T]):
    """Adapter for `CommonStorageRecordWrapper`.
    Implement `record2dict` and `dict2record` to transform the data between record and dict.
    """

    def record2dict(self, record: T) -> Dict[str, Any]:
        """Build a `dict` from `record`."""
        ...

    def dict2record(self, d: Dict[str, Any]) -> T:
        """Build a record from a `d`."""
        ...


class CommonStorageRecordWrapper(RecordStorage[T]):
    """
    A wrapper for `CommonStorage`, convert the common storage to a `RecordStorage` which can read and write a record type directly.

    The typical way to use this class is to extend this class, pass though the common storage and add an implementation of `CommonStorageAdapter`. For example:

    ````python
    class TokenRecordStorage(CommonStorageRecordWrapper[TokenRecord]):
        def __init__(self, common_storage: CommonStorage) -> None:
            super().__init__(common_storage, DataclassCommonStorageAdapter(TokenRecord))
    ````
    """

    def __init__(
        self, common_storage: CommonStorage, adapter: CommonStorageAdapter[T]
    ) -> None:
        self.common_storage = common_storage
        self.adapter = adapter
        super().__init__()

    async def store(self, record: T) -> T:
        d = self.adapter.record2dict(record)
        result = await self.common_storage.store(d)
        return self.adapter.dict2record(result)

    async def find(self, query: Dict[str, Any]) -> AsyncIterator[T]:
        async for doc in self.common_storage.find(query):
            yield self.adapter.dict2record(doc)

    async def find_one(self, query: Dict[str, Any]) -> Optional[T]:
        result = await self.common_storage.find_one(query)
        if result:
            return self.adapter.dict2record(result)
        else:
            return None

    async def update_one(
        self, query: Dict[str, Any], updated: T, upsert: bool = False
    ) -> Optional[T]:
        result = await self.common_storage.update_one(
            query, self.adapter.record2dict(updated), upsert=upsert
        )
        if result:
            return self.adapter.dict2record(result)
        return None

    async def remove(self, query: Dict[str, Any]) -> int:
        return await self.common_storage.remove(query)

    async def remove_one(self, query: Dict[str, Any]) -> bool:
        return await self.common_storage.remove_one(query)


class DataclassCommonStorageAdapter(Generic[T], CommonStorageAdapter[T]):
    """A `CommonStorageAdapter` for `dataclasses`.

    ..warning:: the checking is performed by dataclass itself. `dataclasses` does not check the actual data type, but checking the fields given.
    """

    def __init__(self, datacls: Type[T]) -> None:
        assert dataclasses.is_dataclass(datacls), "datacls should be a dataclass"
        self.datacls = datacls
        super().__init__()

    def dict2record(self, d: Dict[str, Any]) -> T:
        d = d.copy()
        d.pop("__id", None)
        return self.datacls(**d)  # type: ignore # it should work

    def record2dict(self, record: T) -> Dict[str, Any]:
        return dataclasses.asdict(record)  # type: ignore


class Base(DeclarativeBase):
    pass


class DocumentRow(Base):
    """One document of one collection. The document itself is the JSON `body`."""

    __tablename__ = "documents"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    collection: Mapped[str] = mapped_column(String, index=True)
    body: Mapped[Dict[str, Any]] = mapped_column(JSON)


class Database(object):
    """An SQLAlchemy engine, with the thread pool all its blocking calls run on.

    `path` is a file path for SQLite, `":mem:"` for an in-memory SQLite database, or any SQLAlchemy URL.

    ..note:: The executor has one worker, SQLite serializes writes anyway and
        the in-memory database lives in one connection shared by all calls.
    """

    def __init__(self, path: str) -> None:
        self.path = path
        self.engine = self.create_engine(path)
        self.session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)
        self.executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="wishboat.utils.storage.Database.executor"
        )
        Base.metadata.create_all(self.engine)
        super().__init__()

    @staticmethod
    def create_engine(path: str) -> Engine:
        if path == MEMORY_DATABASE:
            return create_engine(
                "sqlite://",
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        elif "://" in path:
            return create_engine(path)
        else:
            return create_engine(
                "sqlite:///{}".format(path),
                connect_args={"check_same_thread": False},
            )

    @contextmanager
    def session(self) -> Iterator[Session]:
        """A session in a transaction, committed when the block ends without exception."""
        with self.session_factory() as session:
            with session.begin():
                yield session

    def run(self, f: Callable[..., R], *args: Any) -> Awaitable[R]:
        """Run `f` on the executor. Backend errors come out as `StorageError`."""

        def call() -> R:
            try:
                return f(*args)
            except SQLAlchemyError as e:
                raise StorageError(str(e)) from e

        return asyncio.get_running_loop().run_in_executor(self.executor, call)

    def close(self) -> None:
        self.executor.shutdown(wait=True)
        self.engine.dispose()


class SQLStorage(CommonStorage):
    """An implementation of `CommonStorage` keeping documents of one collection in the `documents` table.

    The row id is exposed as the `"__id"` key of the documents read, and dropped from documents written.

    Related:

    - [SQLAlchemy ORM documentation](https://docs.sqlalchemy.org/en/20/orm/)
    """

    def __init__(self, database: Database, collection_name: str) -> None:
        self.database = database
        self.collection_name = collection_name
        super().__init__()

    @staticmethod
    def doc_match(doc: Dict[str, Any], match: Dict[str, Any]) -> bool:
        """Check if `doc` completely matchs `match`. Everything matchs an empty `match`."""
        for k in match:
            if k not in doc or doc[k] != match[k]:
                return False
        return True

    @staticmethod
    def _body(record: Dict[str, Any]) -> Dict[str, Any]:
        body = dict(record)
        body.pop("__id", None)
        return body

    @staticmethod
    def _doc(row: DocumentRow) -> Dict[str, Any]:
        doc = dict(row.body)
        doc["__id"] = row.id
        return doc

    def _where(self, query: Dict[str, Any]) -> List[Any]:
        """SQL conditions for the scalar values of `query`. Other values are matched by `doc_match`."""
        conds = [DocumentRow.collection == self.collection_name]
        for k, v in query.items():
            field = DocumentRow.body[k]
            if isinstance(v, bool):
                conds.append(field.as_boolean() == v)
            elif isinstance(v, int):
                conds.append(field.as_integer() == v)
            elif isinstance(v, float):
                conds.append(field.as_float() == v)
            elif isinstance(v, str):
                conds.append(field.as_string() == v)
        return conds

    def _rows(self, session: Session, query: Dict[str, Any]) -> List[DocumentRow]:
        stmt = select(DocumentRow).where(*self._where(query)).order_by(DocumentRow.id)
        return [row for row in session.scalars(stmt) if self.doc_match(row.body, query)]

    def store_sync(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """Store the `record` without thread pool."""
        with self.database.session() as session:
            row = DocumentRow(collection=self.collection_name, body=self._body(record))
            session.add(row)
            session.flush()
            return self._doc(row)

    def store(self, record: Dict[str, Any]) -> Awaitable[Dict[str, Any]]:
        return self.database.run(self.store_sync, record)

    def find_sync(self, query: Dict[str, Any]) -> List[Dict[str, Any]]:
        with self.database.session() as session:
            return [self._doc(row) for row in self._rows(session, query)]

    async def find(self, query: Dict[str, Any]) -> AsyncIterator[Dict[str, Any]]:
        for doc in await self.database.run(self.find_sync, query):
            yield doc

    async def find_one(self, query: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        async for doc in self.find(query):
            return doc
        return None

    def update_one_sync(
        self, query: Dict[str, Any], updated: Dict[str, Any], upsert: bool
    ) -> Optional[Dict[str, Any]]:
        with self.database.session() as session:
            rows = self._rows(session, query)
            if rows:
                row = rows[0]
                row.body = self._body(updated)
            elif upsert:
                row = DocumentRow(
                    collection=self.collection_name, body=self._body(updated)
                )
                session.add(row)
            else:
                return None
            session.flush()
            return self._doc(row)

    def update_one(
        self, query: Dict[str, Any], updated: Dict[str, Any], upsert: bool = False
    ) -> Awaitable[Optional[Dict[str, Any]]]:
        return self.database.run(self.update_one_sync, query, updated, upsert)

    def remove_sync(self, query: Dict[str, Any], limit: Optional[int]) -> int:
        with self.database.session() as session:
            rows = self._rows(session, query)[:limit]
            for row in rows:
                session.delete(row)
            return len(rows)

    def remove(self, query: Dict[str, Any]) -> Awaitable[int]:
        return self.database.run(self.remove_sync, query, None)

    async def remove_one(self, query: Dict[str, Any]) -> bool:
        return (await self.database.run(self.remove_sync, query, 1)) > 0
