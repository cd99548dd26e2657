"""Photo API client."""

from dataclasses import dataclass
from typing import Protocol, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError

from photo_feed.domain.errors import RequestConstructionError, TransportError

T = TypeVar("T")


class PhotoApiClient(Protocol):
    """Interface for photo API interactions."""

    def build_request(
        self, method: str, path: str, params: dict[str, object] | None = None
    ) -> httpx.Request:
        """Build a request for an API path."""

    async def execute(self, request: httpx.Request, response_type: type[T]) -> T:
        """Send a request and decode its JSON body into the given type."""

    async def close(self) -> None:
        """Release transport resources."""


@dataclass
class HttpxPhotoApiClient(PhotoApiClient):
    """HTTPX-backed photo API client."""

    base_url: str
    http_client: httpx.AsyncClient
    access_token: str | None = None
    timeout: float = 15

    @classmethod
    def create(
        cls, base_url: str, access_token: str | None = None, timeout: float = 15
    ) -> "HttpxPhotoApiClient":
        """Create a photo API client with a managed httpx session."""
        return cls(
            base_url=base_url,
            http_client=httpx.AsyncClient(),
            access_token=access_token,
            timeout=timeout,
        )

    def build_request(
        self, method: str, path: str, params: dict[str, object] | None = None
    ) -> httpx.Request:
        """Build a request against the configured base URL."""
        try:
            base = httpx.URL(self.base_url)
        except (httpx.InvalidURL, TypeError) as exc:
            raise RequestConstructionError(
                f"Invalid base URL: {self.base_url!r}"
            ) from exc
        if base.scheme not in {"http", "https"} or not base.host:
            raise RequestConstructionError(f"Invalid base URL: {self.base_url!r}")
        url = base.copy_with(path=base.path.rstrip("/") + path)
        headers = {"Accept": "application/json"}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return self.http_client.build_request(
            method,
            url,
            params=params,
            headers=headers,
            timeout=self.timeout,
        )

    async def execute(self, request: httpx.Request, response_type: type[T]) -> T:
        """Send a request and decode the response body."""
        try:
            response = await self.http_client.send(request)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise TransportError(
                f"{request.method} {request.url.path} failed: {exc}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportError(
                f"{request.method} {request.url.path} failed: {exc}"
            ) from exc
        try:
            return TypeAdapter(response_type).validate_json(response.content)
        except ValidationError as exc:
            raise TransportError(
                f"Unexpected response for {request.method} {request.url.path}: {exc}",
                status_code=response.status_code,
            ) from exc

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
