"""
FastAPI backend for the bookstore catalog.

Serves the REST API under ``/api`` and HTML views rendered straight from
the record store.
"""

from contextlib import asynccontextmanager
from typing import List, Optional

import structlog
from fastapi import APIRouter, Depends, FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse
from motor.motor_asyncio import AsyncIOMotorClient

from catalog.database import BookRepository, prepare_store, seed_data
from catalog.errors import CatalogError, NotFoundError, StoreError, ValidationError
from catalog.models import BookDTO, BookRecord, HealthResponse
from catalog.rendering import JinjaRenderer, Renderer
from utilities.config import ServerConfig
from utilities.logger import request_logging_middleware

from . import __version__

logger = structlog.get_logger(__name__)

# Error type -> response status. NotFoundError stays a server error on update.
ERROR_STATUS = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    StoreError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def get_repository(request: Request) -> BookRepository:
    return request.app.state.repository


def get_renderer(request: Request) -> Renderer:
    return request.app.state.renderer


def render(renderer: Renderer, name: str, data=None) -> HTMLResponse:
    return HTMLResponse(content=renderer.render(name, data), status_code=status.HTTP_200_OK)


def require_book_id(book_id: str) -> str:
    """Reject an empty path identifier. The id is used exactly as given."""
    if not book_id:
        logger.error("Missing ID")
        raise ValidationError("missing book id")
    return book_id


# REST endpoints
api_router = APIRouter(prefix="/api", tags=["Books"])


@api_router.get("/books", response_model=List[BookDTO])
async def list_books(repository: BookRepository = Depends(get_repository)):
    """List every book."""
    books = await repository.find_all()
    return [book.to_dto() for book in books]


@api_router.post("/books", response_model=BookDTO, status_code=status.HTTP_201_CREATED)
async def create_book(book: BookDTO, repository: BookRepository = Depends(get_repository)):
    """
    Create a book.

    - **id**, **title** and **author** are required and must not be empty
    """
    missing = book.missing_required_fields()
    if missing:
        logger.error("Missing required fields", fields=missing)
        raise ValidationError(f"missing required fields: {', '.join(missing)}")

    created = await repository.insert(BookRecord.from_dto(book))
    logger.info("Book created", book_id=created.book_id)
    return created.to_dto()


@api_router.put("/books/{book_id}")
async def update_book(
    book_id: str,
    book: BookDTO,
    repository: BookRepository = Depends(get_repository)
):
    """
    Replace every field of a book. The path id wins over any id in the body.
    """
    book_id = require_book_id(book_id)
    book.id = book_id

    await repository.update(book_id, BookRecord.from_dto(book))
    logger.info("Book updated", book_id=book_id)
    return Response(status_code=status.HTTP_200_OK)


@api_router.delete("/books/{book_id}")
async def delete_book(book_id: str, repository: BookRepository = Depends(get_repository)):
    """Delete a book. Deleting an unknown id succeeds."""
    book_id = require_book_id(book_id)

    await repository.delete(book_id)
    logger.info("Book deleted", book_id=book_id)
    return Response(status_code=status.HTTP_200_OK)


@api_router.put("/books/")
@api_router.delete("/books/")
async def missing_book_id():
    """Update or delete without an identifier."""
    logger.error("Missing ID")
    raise ValidationError("missing book id")


@api_router.get("/authors", response_model=List[str], tags=["Authors"])
async def list_authors(repository: BookRepository = Depends(get_repository)):
    return await repository.find_distinct_authors()


@api_router.get("/years", response_model=List[str], tags=["Years"])
async def list_years(repository: BookRepository = Depends(get_repository)):
    return await repository.find_distinct_years()


# HTML views
view_router = APIRouter(tags=["Views"], include_in_schema=False)


@view_router.get("/")
async def index(renderer: Renderer = Depends(get_renderer)):
    return render(renderer, "index")


@view_router.get("/books")
async def books_view(
    repository: BookRepository = Depends(get_repository),
    renderer: Renderer = Depends(get_renderer)
):
    books = await repository.find_all()
    return render(renderer, "book-table", [book.to_view() for book in books])


@view_router.get("/authors")
async def authors_view(
    repository: BookRepository = Depends(get_repository),
    renderer: Renderer = Depends(get_renderer)
):
    return render(renderer, "author-list", await repository.find_distinct_authors())


@view_router.get("/years")
async def years_view(
    repository: BookRepository = Depends(get_repository),
    renderer: Renderer = Depends(get_renderer)
):
    return render(renderer, "year-list", await repository.find_distinct_years())


@view_router.get("/search")
async def search_view(renderer: Renderer = Depends(get_renderer)):
    return render(renderer, "search-bar")


@view_router.get("/create")
async def create_view():
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Health check endpoint
health_router = APIRouter(tags=["Health"])


@health_router.get("/health", response_model=HealthResponse)
async def health_check(repository: BookRepository = Depends(get_repository)):
    """Health check endpoint."""
    db_status = "healthy" if await repository.ping() else "unhealthy"
    return HealthResponse(
        status="healthy" if db_status == "healthy" else "degraded",
        version=__version__,
        database_status=db_status
    )


async def catalog_error_handler(request: Request, exc: CatalogError):
    """Map catalog errors to a status code with an empty body."""
    for error_type, status_code in ERROR_STATUS.items():
        if isinstance(exc, error_type):
            break
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    logger.error(
        "Request failed",
        path=request.url.path,
        error_type=type(exc).__name__,
        error=str(exc),
        status=status_code
    )
    return Response(status_code=status_code)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are a plain 400."""
    logger.error("Malformed request", path=request.url.path, errors=exc.errors())
    return Response(status_code=status.HTTP_400_BAD_REQUEST)


async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.error("Unhandled exception", path=request.url.path, error=str(exc))
    return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


def create_app(
    config: ServerConfig,
    renderer: Optional[Renderer] = None,
    repository: Optional[BookRepository] = None
) -> FastAPI:
    """
    Build the backend application.

    Without a ``repository`` the lifespan connects to MongoDB, provisions the
    collection and its indexes, and seeds the example books. Any failure there
    aborts startup.

    Args:
        config: Backend settings
        renderer: View renderer, Jinja2 templates by default
        repository: Pre-built data access, used instead of connecting
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting bookstore API", port=config.server_port)

        client = None
        if app.state.repository is None:
            client = AsyncIOMotorClient(
                config.database_uri,
                serverSelectionTimeoutMS=config.get_server_selection_timeout_ms()
            )
            try:
                await client.admin.command("ping")
                logger.info("Database connection established", database=config.db_name)

                collection = await prepare_store(client, config.db_name, config.collection_name)
                await seed_data(collection)
            except Exception as e:
                logger.critical("Failed to prepare database", error=str(e))
                client.close()
                raise

            app.state.repository = BookRepository(collection)

        yield

        logger.info("Shutting down bookstore API")
        if client is not None:
            client.close()

    app = FastAPI(
        title="Bookstore Catalog API",
        description="Browse, create, update and delete book records.",
        version=__version__,
        lifespan=lifespan
    )
    app.state.config = config
    app.state.renderer = renderer or JinjaRenderer()
    app.state.repository = repository

    app.middleware("http")(request_logging_middleware("api.access"))

    app.add_exception_handler(CatalogError, catalog_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    app.include_router(api_router)
    app.include_router(view_router)
    app.include_router(health_router)

    return app
