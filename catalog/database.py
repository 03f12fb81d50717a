"""
MongoDB data access for book records.
Handles collection provisioning, unique indexes, seeding and CRUD operations.
"""

from typing import List, Sequence

import structlog
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pymongo.errors import CollectionInvalid, DuplicateKeyError, OperationFailure, PyMongoError

from .errors import DataIntegrityError, DuplicateBookError, NotFoundError, StoreError
from .models import BookRecord

logger = structlog.get_logger(__name__)

# Server error code for an index that already exists under the same name
INDEX_ALREADY_EXISTS = 68

BOOK_ID_INDEX = [("id", 1)]
BOOK_IDENTITY_INDEX = [
    ("bookname", 1),
    ("bookauthor", 1),
    ("bookyear", 1),
    ("bookpages", 1),
]

SEED_BOOKS: List[BookRecord] = [
    BookRecord(
        book_id="example1",
        book_name="The Vortex",
        book_author="José Eustasio Rivera",
        book_edition="958-30-0804-4",
        book_pages="292",
        book_year="1924",
    ),
    BookRecord(
        book_id="example2",
        book_name="Frankenstein",
        book_author="Mary Shelley",
        book_edition="978-3-649-64609-9",
        book_pages="280",
        book_year="1818",
    ),
    BookRecord(
        book_id="example3",
        book_name="The Black Cat",
        book_author="Edgar Allan Poe",
        book_edition="978-3-99168-238-7",
        book_pages="280",
        book_year="1843",
    ),
]


async def prepare_store(
    client: AsyncIOMotorClient,
    database_name: str,
    collection_name: str
) -> AsyncIOMotorCollection:
    """
    Ensure the book collection and its unique indexes exist.

    Safe to call on every start. Index creation failing for any reason other
    than the index already existing raises ``StoreError``: the service must not
    run without the store enforcing book uniqueness.

    Args:
        client: Connected Motor client
        database_name: Name of the database
        collection_name: Name of the book collection

    Returns:
        The provisioned collection
    """
    database = client[database_name]

    try:
        names = await database.list_collection_names()
        logger.debug("Collections in database", database=database_name, collections=names)

        if collection_name not in names:
            try:
                await database.create_collection(collection_name)
                logger.info("Created collection", database=database_name, collection=collection_name)
            except CollectionInvalid:
                # Another process created it in between
                logger.debug("Collection already exists", collection=collection_name)
    except PyMongoError as e:
        logger.error("Failed to prepare collection", collection=collection_name, error=str(e))
        raise StoreError(f"failed to prepare collection {collection_name}: {e}") from e

    collection = database[collection_name]

    for keys in (BOOK_ID_INDEX, BOOK_IDENTITY_INDEX):
        try:
            await collection.create_index(keys, unique=True)
        except OperationFailure as e:
            if e.code == INDEX_ALREADY_EXISTS:
                logger.debug("Index already exists", keys=keys)
                continue
            logger.error("Failed to create index", keys=keys, error=str(e))
            raise StoreError(f"failed to create unique index on {keys}: {e}") from e
        except PyMongoError as e:
            logger.error("Failed to create index", keys=keys, error=str(e))
            raise StoreError(f"failed to create unique index on {keys}: {e}") from e

    logger.info("Book collection ready", database=database_name, collection=collection_name)
    return collection


async def seed_data(
    collection: AsyncIOMotorCollection,
    records: Sequence[BookRecord] = SEED_BOOKS
) -> int:
    """
    Insert the example books that are not in the collection yet.

    A seed book whose id or title/author/year/pages is already used by a
    different document was edited by a user and is left alone.

    Args:
        collection: Book collection
        records: Records to seed

    Returns:
        Number of records inserted

    Raises:
        DataIntegrityError: if a seed record matches more than one document
    """
    inserted = 0

    for record in records:
        document = record.to_document()
        matches = await collection.find(document).to_list(length=None)

        if len(matches) > 1:
            logger.error("More records were found", book_id=record.book_id, matches=len(matches))
            raise DataIntegrityError(
                f"seed book {record.book_id} matched {len(matches)} documents"
            )

        if matches:
            logger.debug("Seed book already present", book_id=record.book_id)
            continue

        try:
            result = await collection.insert_one(document)
        except DuplicateKeyError:
            # The id or the title/author/year/pages combination was taken by an edited book
            logger.warning("Seed book conflicts with an existing book, skipping", book_id=record.book_id)
            continue

        inserted += 1
        logger.info("Inserted seed book", book_id=record.book_id, mongo_id=str(result.inserted_id))

    return inserted


class BookRepository:
    """
    Data access for book records over a single collection.
    Driver failures are logged and re-raised as ``StoreError``.
    """

    def __init__(self, collection: AsyncIOMotorCollection):
        self.collection = collection

    async def insert(self, record: BookRecord) -> BookRecord:
        """
        Insert a book.

        Args:
            record: Book to insert

        Returns:
            The record with the store-assigned identifier

        Raises:
            DuplicateBookError: if the id or the title/author/year/pages
                combination is already taken
        """
        try:
            result = await self.collection.insert_one(record.to_document())
        except DuplicateKeyError as e:
            logger.error("Book violates a unique index", book_id=record.book_id, error=str(e))
            raise DuplicateBookError(f"book {record.book_id} already exists") from e
        except PyMongoError as e:
            logger.error("Failed to insert book", book_id=record.book_id, error=str(e))
            raise StoreError(f"failed to insert book {record.book_id}: {e}") from e

        logger.debug("Inserted book", book_id=record.book_id, mongo_id=str(result.inserted_id))
        return record.model_copy(update={"mongo_id": str(result.inserted_id)})

    async def find_all(self) -> List[BookRecord]:
        """All books, in the order the store returns them."""
        try:
            documents = await self.collection.find({}).to_list(length=None)
        except PyMongoError as e:
            logger.error("Failed to list books", error=str(e))
            raise StoreError(f"failed to list books: {e}") from e

        return [BookRecord.from_document(document) for document in documents]

    async def update(self, book_id: str, record: BookRecord) -> BookRecord:
        """
        Replace every field of the book with the given external id.

        A matched document left unchanged is still a success.

        Raises:
            NotFoundError: if no book has this id
        """
        try:
            result = await self.collection.update_one(
                {"id": book_id},
                {"$set": record.to_document()}
            )
        except PyMongoError as e:
            logger.error("Failed to update book", book_id=book_id, error=str(e))
            raise StoreError(f"failed to update book {book_id}: {e}") from e

        logger.debug(
            "Update result",
            book_id=book_id,
            matched=result.matched_count,
            modified=result.modified_count
        )
        if result.matched_count == 0:
            logger.error("No book found to update", book_id=book_id)
            raise NotFoundError(book_id)

        return record

    async def delete(self, book_id: str) -> None:
        """Delete the book with the given external id; absent ids are not an error."""
        try:
            result = await self.collection.delete_one({"id": book_id})
        except PyMongoError as e:
            logger.error("Failed to delete book", book_id=book_id, error=str(e))
            raise StoreError(f"failed to delete book {book_id}: {e}") from e

        logger.debug("Delete result", book_id=book_id, deleted=result.deleted_count)

    async def find_distinct_authors(self) -> List[str]:
        return await self._distinct("bookauthor")

    async def find_distinct_years(self) -> List[str]:
        return await self._distinct("bookyear")

    async def _distinct(self, field: str) -> List[str]:
        try:
            values = await self.collection.distinct(field)
        except PyMongoError as e:
            logger.error("Failed to query distinct values", field=field, error=str(e))
            raise StoreError(f"failed to query distinct {field}: {e}") from e

        return [str(value) for value in values]

    async def ping(self) -> bool:
        """Check that the store answers."""
        try:
            await self.collection.database.command("ping")
            return True
        except PyMongoError as e:
            logger.error("Database health check failed", error=str(e))
            return False
