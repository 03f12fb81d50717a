"""
FastAPI frontend for the bookstore catalog.
Each view makes one call to the backend API and renders the result.
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import Depends, FastAPI, Request, Response, status
from fastapi.responses import HTMLResponse

from catalog.errors import TransportError
from catalog.models import HealthResponse, dto_to_view
from catalog.rendering import JinjaRenderer, Renderer
from utilities.config import FrontendConfig
from utilities.logger import request_logging_middleware

from . import __version__
from .backend_client import BackendClient

logger = structlog.get_logger(__name__)


def get_backend(request: Request) -> BackendClient:
    return request.app.state.backend


def get_renderer(request: Request) -> Renderer:
    return request.app.state.renderer


def render(renderer: Renderer, name: str, data=None) -> HTMLResponse:
    return HTMLResponse(content=renderer.render(name, data), status_code=status.HTTP_200_OK)


async def transport_error_handler(request: Request, exc: TransportError):
    """Backend failures become an empty 500."""
    logger.error("Backend call failed", path=request.url.path, error=str(exc))
    return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


def create_app(
    config: FrontendConfig,
    renderer: Optional[Renderer] = None,
    backend: Optional[BackendClient] = None
) -> FastAPI:
    """
    Build the frontend application.

    Args:
        config: Frontend settings
        renderer: View renderer, Jinja2 templates by default
        backend: Pre-built backend client, created from ``config.api_uri`` otherwise
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting bookstore frontend", port=config.server_port, api_uri=config.api_uri)
        yield
        logger.info("Shutting down bookstore frontend")
        await app.state.backend.close()

    app = FastAPI(
        title="Bookstore Catalog",
        version=__version__,
        lifespan=lifespan
    )
    app.state.config = config
    app.state.renderer = renderer or JinjaRenderer()
    app.state.backend = backend or BackendClient(config.api_uri, timeout=config.request_timeout)

    app.middleware("http")(request_logging_middleware("frontend.access"))
    app.add_exception_handler(TransportError, transport_error_handler)

    @app.get("/", include_in_schema=False)
    async def index(renderer: Renderer = Depends(get_renderer)):
        return render(renderer, "index")

    @app.get("/books", include_in_schema=False)
    async def books_view(
        backend: BackendClient = Depends(get_backend),
        renderer: Renderer = Depends(get_renderer)
    ):
        books = await backend.list_books()
        return render(renderer, "book-table", [dto_to_view(book) for book in books])

    @app.get("/authors", include_in_schema=False)
    async def authors_view(
        backend: BackendClient = Depends(get_backend),
        renderer: Renderer = Depends(get_renderer)
    ):
        return render(renderer, "author-list", await backend.list_authors())

    @app.get("/years", include_in_schema=False)
    async def years_view(
        backend: BackendClient = Depends(get_backend),
        renderer: Renderer = Depends(get_renderer)
    ):
        return render(renderer, "year-list", await backend.list_years())

    @app.get("/search", include_in_schema=False)
    async def search_view(renderer: Renderer = Depends(get_renderer)):
        return render(renderer, "search-bar")

    @app.get("/create", include_in_schema=False)
    async def create_view():
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check():
        """Health check endpoint."""
        return HealthResponse(status="healthy", version=__version__)

    return app
