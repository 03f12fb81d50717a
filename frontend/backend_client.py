"""
HTTP client for the backend's REST API.
"""

from typing import Any, List, Optional

import httpx
import structlog
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from catalog.errors import TransportError
from catalog.models import BookDTO

logger = structlog.get_logger(__name__)

_BOOK_LIST = TypeAdapter(List[BookDTO])
_STRING_LIST = TypeAdapter(List[str])


class BackendClient:
    """
    Async client for the backend API.

    Every call is a single GET; failures of any kind surface as
    ``TransportError``.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize the client.

        Args:
            base_url: Backend root URL, e.g. ``http://server:8080``
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport, mostly for tests
        """
        self.base_url = base_url.rstrip("/")
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def close(self) -> None:
        await self.client.aclose()

    async def list_books(self) -> List[BookDTO]:
        return self._decode(await self._get_json("/api/books"), _BOOK_LIST, "/api/books")

    async def list_authors(self) -> List[str]:
        return self._decode(await self._get_json("/api/authors"), _STRING_LIST, "/api/authors")

    async def list_years(self) -> List[str]:
        return self._decode(await self._get_json("/api/years"), _STRING_LIST, "/api/years")

    async def _get_json(self, path: str) -> Any:
        try:
            response = await self.client.get(path)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.error("Backend returned an error", path=path, status=e.response.status_code)
            raise TransportError(f"backend answered {e.response.status_code} for {path}") from e
        except httpx.HTTPError as e:
            logger.error("Backend request failed", path=path, error=str(e))
            raise TransportError(f"request to {path} failed: {e}") from e
        except ValueError as e:
            logger.error("Backend response is not JSON", path=path, error=str(e))
            raise TransportError(f"invalid JSON from {path}") from e

    @staticmethod
    def _decode(payload: Any, adapter: TypeAdapter, path: str):
        # A JSON null (empty slice from older backends) is an empty list
        if payload is None:
            return []
        try:
            return adapter.validate_python(payload)
        except PydanticValidationError as e:
            logger.error("Unexpected backend payload", path=path, error=str(e))
            raise TransportError(f"unexpected payload from {path}") from e
