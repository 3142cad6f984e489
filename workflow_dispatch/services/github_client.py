"""Thin GitHub REST client used by the dispatch pipeline."""

from __future__ import annotations

import logging
from typing import Any, AsyncIterator, Dict, List, Optional, Tuple

import httpx

from workflow_dispatch import __version__
from workflow_dispatch.core.errors import GitHubAPIError, GitHubTransportError

logger = logging.getLogger("workflow_dispatch.services.github_client")

API_VERSION = "2022-11-28"
DEFAULT_PAGE_SIZE = 100


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return f"GitHub API request failed with status {response.status_code}"


def _decode_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        raise GitHubAPIError(
            f"GitHub API returned a non-JSON body for {response.request.url}",
            status_code=response.status_code,
            url=str(response.request.url),
        ) from exc


class PagedResource:
    """Restartable sequence of pages for a paginated list endpoint.

    Every iteration starts again from the first page and follows the
    ``Link: rel="next"`` header until the server stops sending one.
    """

    def __init__(
        self,
        client: "GitHubClient",
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        item_key: Optional[str] = None,
    ) -> None:
        self._client = client
        self._path = path
        self._params = dict(params or {})
        self._params.setdefault("per_page", DEFAULT_PAGE_SIZE)
        self._item_key = item_key

    def __aiter__(self) -> AsyncIterator[Tuple[List[Any], Any]]:
        return self._pages()

    async def _pages(self) -> AsyncIterator[Tuple[List[Any], Any]]:
        url: Optional[str] = self._path
        params: Optional[Dict[str, Any]] = self._params
        while url:
            response = await self._client.request("GET", url, params=params)
            body = _decode_json(response)
            yield self._items(body), body
            url = response.links.get("next", {}).get("url")
            # The next link already carries the query string.
            params = None

    def _items(self, body: Any) -> List[Any]:
        if self._item_key is None:
            if not isinstance(body, list):
                raise GitHubAPIError(f"Expected a list from {self._path}, got {type(body).__name__}")
            return body
        if not isinstance(body, dict):
            raise GitHubAPIError(f"Expected an object from {self._path}, got {type(body).__name__}")
        items = body.get(self._item_key) or []
        if not isinstance(items, list):
            raise GitHubAPIError(f"Expected '{self._item_key}' to be a list in {self._path}")
        return items


class GitHubClient:
    """Authenticated access to the handful of REST endpoints the action needs."""

    def __init__(
        self,
        token: str,
        *,
        base_url: str = "https://api.github.com",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": API_VERSION,
                "User-Agent": f"workflow-dispatch/{__version__}",
            },
        )

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    async def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send one request; failures surface as GitHubAPIError or GitHubTransportError."""

        try:
            response = await self._client.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            message = _error_message(exc.response)
            logger.debug(
                "github_http_error",
                extra={"status_code": exc.response.status_code, "url": str(exc.request.url)},
            )
            raise GitHubAPIError(
                message,
                status_code=exc.response.status_code,
                url=str(exc.request.url),
            ) from exc
        except httpx.RequestError as exc:
            raise GitHubTransportError(f"Failed to reach GitHub API: {exc}") from exc
        return response

    async def get_json(self, url: str, *, params: Optional[Dict[str, Any]] = None) -> Any:
        response = await self.request("GET", url, params=params)
        return _decode_json(response)

    async def post_json(self, path: str, payload: Dict[str, Any]) -> Tuple[int, Dict[str, Any]]:
        """POST ``payload`` and return the status code with the decoded body.

        Endpoints answering ``204 No Content`` yield an empty dict.
        """

        response = await self.request("POST", path, json=payload)
        if not response.content:
            return response.status_code, {}
        try:
            body = response.json()
        except ValueError:
            return response.status_code, {}
        return response.status_code, body if isinstance(body, dict) else {}

    def paginate(
        self,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        item_key: Optional[str] = None,
    ) -> PagedResource:
        return PagedResource(self, path, params=params, item_key=item_key)
