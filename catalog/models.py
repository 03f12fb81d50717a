"""
Pydantic models for book records and their wire representation.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class BookDTO(BaseModel):
    """
    Flat wire representation of a book used at the HTTP boundary.
    Missing JSON fields decode to the empty string.
    """
    id: str = Field(default="", description="External book identifier")
    title: str = Field(default="", description="Book title")
    author: str = Field(default="", description="Book author")
    pages: str = Field(default="", description="Page count")
    edition: str = Field(default="", description="Edition or ISBN")
    year: str = Field(default="", description="Publication year")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "example2",
                "title": "Frankenstein",
                "author": "Mary Shelley",
                "pages": "280",
                "edition": "978-3-649-64609-9",
                "year": "1818",
            }
        }
    )

    def missing_required_fields(self) -> List[str]:
        """Names of the required fields that are empty."""
        return [name for name in ("id", "title", "author") if not getattr(self, name)]


class BookRecord(BaseModel):
    """
    Book as persisted in the store.

    Attribute aliases are the document field names, so ``to_document`` and
    ``from_document`` are plain dumps and loads by alias.
    """
    mongo_id: Optional[str] = Field(default=None, description="Store-generated identifier")
    book_id: str = Field(default="", alias="id")
    book_name: str = Field(default="", alias="bookname")
    book_author: str = Field(default="", alias="bookauthor")
    book_edition: str = Field(default="", alias="bookedition")
    book_pages: str = Field(default="", alias="bookpages")
    book_year: str = Field(default="", alias="bookyear")

    model_config = ConfigDict(populate_by_name=True)

    def to_dto(self) -> BookDTO:
        """Project the record onto the wire representation."""
        return BookDTO(
            id=self.book_id,
            title=self.book_name,
            author=self.book_author,
            pages=self.book_pages,
            edition=self.book_edition,
            year=self.book_year,
        )

    @classmethod
    def from_dto(cls, dto: BookDTO) -> "BookRecord":
        """Build a record without a store identifier from a DTO."""
        return cls(
            book_id=dto.id,
            book_name=dto.title,
            book_author=dto.author,
            book_edition=dto.edition,
            book_pages=dto.pages,
            book_year=dto.year,
        )

    def to_document(self) -> Dict[str, Any]:
        """
        MongoDB document for this record.

        The store identifier is never written; MongoDB assigns ``_id`` on insert.
        """
        return self.model_dump(by_alias=True, exclude={"mongo_id"})

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "BookRecord":
        """Load a record from a MongoDB document, keeping ``_id`` as a hex string."""
        data = dict(document)
        object_id = data.pop("_id", None)
        return cls(mongo_id=str(object_id) if object_id is not None else None, **data)

    def to_view(self) -> Dict[str, str]:
        """View model for the book table, keyed by the store identifier."""
        return {
            "ID": self.mongo_id or "",
            "BookName": self.book_name,
            "BookAuthor": self.book_author,
            "BookEdition": self.book_edition,
            "BookPages": self.book_pages,
        }


def dto_to_view(dto: BookDTO) -> Dict[str, str]:
    """View model for the book table, keyed by the external identifier."""
    return {
        "ID": dto.id,
        "BookName": dto.title,
        "BookAuthor": dto.author,
        "BookEdition": dto.edition,
        "BookPages": dto.pages,
    }


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Service status")
    version: str = Field(..., description="Service version")
    database_status: Optional[str] = Field(None, description="Record store status")
