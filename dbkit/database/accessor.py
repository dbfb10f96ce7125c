"""
Generic collection accessor.

A CollectionAccessor binds a registered connection, a collection name and
an advisory field schema, and exposes CRUD plus the listing query.
Documents are identified by a generated ``id`` string, not by ``_id``,
and ``_id`` is never returned.

Example:
    users = CollectionAccessor(registry, {"name": str, "email": str}, "users", "main")

    user = await users.create({"name": "Ayşe", "email": "ayse@example.com"})
    same = await users.find_by_id(user["id"])
    page = await users.find_listable({
        "take": 20,
        "search": {"fields": ["name", "email"], "value": "ay"},
        "sort": {"by": "createdDate", "type": "desc"},
    })
"""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ASCENDING
from pymongo.errors import PyMongoError

from dbkit.config.settings import DEFAULT_DB_NAME
from dbkit.database.registry import ConnectionRegistry
from dbkit.database.schema import FieldType, build_schema
from dbkit.query.listing import ListQuery, ListQueryBuilder
from dbkit.query.sanitizer import CREATED_FIELD, IDENTITY_FIELD, sanitize_update
from dbkit.utils.exceptions import CustomFunctionNotFoundError, NotConnectedError
from dbkit.utils.identity import generate_id, utcnow

logger = logging.getLogger(__name__)

# Keep the store's native key out of results
_PROJECTION = {"_id": 0}

CustomFunction = Callable[..., Any]


class CollectionAccessor:
    """CRUD and listing for one collection of one named connection."""

    def __init__(
        self,
        registry: ConnectionRegistry,
        schema: Mapping[str, Any],
        collection_name: str,
        db_name: str = DEFAULT_DB_NAME,
        list_builder: Optional[ListQueryBuilder] = None,
        extensions: Optional[Mapping[str, CustomFunction]] = None,
    ):
        self._registry = registry
        self._schema = build_schema(schema)
        self._collection_name = collection_name
        self._db_name = db_name
        self._list_builder = list_builder or ListQueryBuilder()
        self._extensions: Dict[str, CustomFunction] = dict(extensions or {})

    @property
    def collection_name(self) -> str:
        return self._collection_name

    @property
    def db_name(self) -> str:
        return self._db_name

    @property
    def schema(self) -> Dict[str, FieldType]:
        return dict(self._schema)

    def get_collection(self) -> AsyncIOMotorCollection:
        """
        Get the raw Motor collection for operations the accessor lacks.

        Raises:
            NotConnectedError: If the database name is no longer registered
        """
        connection = self._registry.get_connection(self._db_name)
        if connection is None:
            logger.error(f"No connection for {self._db_name}, cannot access {self._collection_name}")
            raise NotConnectedError(self._db_name)
        return connection.get_collection(self._collection_name)

    # ─────────────────────────────────────────────────────────────
    # Create / read
    # ─────────────────────────────────────────────────────────────

    async def create(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Insert a new document.

        Generates ``id`` when the data has none and stamps ``createdDate``.

        Returns:
            The stored document, without ``_id``
        """
        collection = self.get_collection()
        document = dict(data)
        if not document.get(IDENTITY_FIELD):
            document[IDENTITY_FIELD] = generate_id()
        document[CREATED_FIELD] = utcnow()

        logger.debug(f"Inserting document into {self._collection_name}: {document[IDENTITY_FIELD]}")
        try:
            await collection.insert_one(document)
        except PyMongoError as e:
            logger.error(f"Failed to insert document into {self._collection_name}: {e}")
            raise

        document.pop("_id", None)
        return document

    async def find_by_id(self, id: str) -> Optional[Dict[str, Any]]:
        """Find a document by its ``id``."""
        return await self.find_by_query({IDENTITY_FIELD: id})

    async def find_by_field(self, field: str, value: Any) -> Optional[Dict[str, Any]]:
        """Find the first document whose ``field`` equals ``value``."""
        return await self.find_by_query({field: value})

    async def find_by_query(self, query: Optional[Mapping[str, Any]]) -> Optional[Dict[str, Any]]:
        """Find the first document matching ``query``, or None."""
        collection = self.get_collection()
        try:
            return await collection.find_one(dict(query or {}), _PROJECTION)
        except PyMongoError as e:
            logger.error(f"Failed to query {self._collection_name}: {e}")
            raise

    async def list(self, query: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
        """All documents matching ``query``; every document when it is None."""
        collection = self.get_collection()
        try:
            cursor = collection.find(dict(query or {}), _PROJECTION)
            return await cursor.to_list(length=None)
        except PyMongoError as e:
            logger.error(f"Failed to list {self._collection_name}: {e}")
            raise

    async def is_id_exist(self, id: str) -> bool:
        return await self.is_query_exist({IDENTITY_FIELD: id})

    async def is_query_exist(self, query: Optional[Mapping[str, Any]]) -> bool:
        """True when at least one document matches ``query``."""
        collection = self.get_collection()
        try:
            found = await collection.find_one(dict(query or {}), {"_id": 1})
        except PyMongoError as e:
            logger.error(f"Failed to check existence in {self._collection_name}: {e}")
            raise
        return found is not None

    async def find_listable(
        self,
        query: Union[ListQuery, Mapping[str, Any], None] = None,
    ) -> List[Dict[str, Any]]:
        """
        One page of documents for a pageable, searchable list.

        Args:
            query: ListQuery or a mapping of its fields (take, skip, search,
                sort, dateFilter)

        Returns:
            The documents of the requested page, in sort order
        """
        plan = self._list_builder.build(query)
        collection = self.get_collection()

        try:
            cursor = collection.find(plan.filter, _PROJECTION)
            if plan.sort:
                cursor = cursor.sort(plan.sort)
            cursor = cursor.skip(plan.skip).limit(plan.limit)
            return await cursor.to_list(length=None)
        except PyMongoError as e:
            logger.error(f"Failed to list {self._collection_name}: {e}")
            raise

    # ─────────────────────────────────────────────────────────────
    # Update / delete
    # ─────────────────────────────────────────────────────────────

    async def update_by_id(self, id: str, data: Mapping[str, Any]) -> int:
        """
        Set the given fields on the document with this ``id``.

        Returns:
            Number of modified documents
        """
        collection = self.get_collection()
        update_data = sanitize_update(data)

        logger.debug(f"Updating document in {self._collection_name}: {id}")
        try:
            result = await collection.update_one({IDENTITY_FIELD: id}, {"$set": update_data})
        except PyMongoError as e:
            logger.error(f"Failed to update document in {self._collection_name}: {e}")
            raise
        return result.modified_count

    async def update_by_query(
        self,
        query: Optional[Mapping[str, Any]],
        data: Mapping[str, Any],
    ) -> int:
        """
        Set the given fields on every document matching ``query``.

        An empty or missing query updates nothing.

        Returns:
            Number of modified documents
        """
        collection = self.get_collection()
        if not query:
            logger.warning(f"Refusing update on {self._collection_name} without a query")
            return 0

        update_data = sanitize_update(data)
        try:
            result = await collection.update_many(dict(query), {"$set": update_data})
        except PyMongoError as e:
            logger.error(f"Failed to update documents in {self._collection_name}: {e}")
            raise
        return result.modified_count

    async def delete_by_id(self, id: str) -> int:
        """Delete the document with this ``id``. Returns the deleted count."""
        collection = self.get_collection()
        logger.debug(f"Deleting document from {self._collection_name}: {id}")
        try:
            result = await collection.delete_one({IDENTITY_FIELD: id})
        except PyMongoError as e:
            logger.error(f"Failed to delete document from {self._collection_name}: {e}")
            raise
        return result.deleted_count

    async def delete_by_query(self, query: Optional[Mapping[str, Any]]) -> int:
        """
        Delete every document matching ``query``.

        An empty or missing query deletes nothing.
        """
        collection = self.get_collection()
        if not query:
            logger.warning(f"Refusing delete on {self._collection_name} without a query")
            return 0

        try:
            result = await collection.delete_many(dict(query))
        except PyMongoError as e:
            logger.error(f"Failed to delete documents from {self._collection_name}: {e}")
            raise
        return result.deleted_count

    async def ensure_indexes(self) -> str:
        """Create the unique index on ``id``. Returns the index name."""
        collection = self.get_collection()
        logger.info(f"Ensuring indexes on {self._collection_name}")
        return await collection.create_index([(IDENTITY_FIELD, ASCENDING)], unique=True)

    # ─────────────────────────────────────────────────────────────
    # Extensions
    # ─────────────────────────────────────────────────────────────

    def register_custom_function(self, name: str, fn: CustomFunction) -> None:
        """
        Attach a named operation the generic surface does not cover.

        ``fn`` is called with this accessor as its first argument.
        """
        if not callable(fn):
            raise TypeError(f"Custom function '{name}' must be callable")
        self._extensions[name] = fn
        logger.debug(f"Registered custom function {name} on {self._collection_name}")

    def has_custom_function(self, name: str) -> bool:
        return name in self._extensions

    def call_custom_function(self, name: str, *args: Any, **kwargs: Any) -> Any:
        """
        Invoke a registered custom function.

        Returns whatever ``fn`` returns; await it when ``fn`` is async.

        Raises:
            CustomFunctionNotFoundError: If nothing is registered under ``name``
        """
        fn = self._extensions.get(name)
        if fn is None:
            raise CustomFunctionNotFoundError(name)
        return fn(self, *args, **kwargs)

    def __repr__(self) -> str:
        return f"CollectionAccessor(db={self._db_name!r}, collection={self._collection_name!r})"
