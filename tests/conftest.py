import logging
import sys
from pathlib import Path
from typing import Callable, Dict, List, Tuple

import httpx
import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from workflow_dispatch.core.config import get_settings  # noqa: E402
from workflow_dispatch.services.github_client import GitHubClient  # noqa: E402

API_BASE = "https://api.github.test"

_RUNNER_ENV = (
    "INPUT_WORKFLOW",
    "INPUT_TOKEN",
    "INPUT_REF",
    "INPUT_REPO",
    "INPUT_INPUTS",
    "GITHUB_REF",
    "GITHUB_REPOSITORY",
    "GITHUB_API_URL",
    "GITHUB_OUTPUT",
    "RUNNER_DEBUG",
    "ACTIONS_STEP_DEBUG",
    "WORKFLOW_DISPATCH_LOG_LEVEL",
    "WORKFLOW_DISPATCH_LOG_JSON",
)

CATALOG = [
    {"id": 1, "name": "build", "path": ".github/workflows/build.yml", "state": "active"},
    {"id": 2, "name": "deploy", "path": ".github/workflows/deploy.yml", "state": "active"},
]

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    for name in _RUNNER_ENV:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()

    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)
    get_settings.cache_clear()


class FakeGitHub:
    """Routes requests to per-endpoint handlers and records every call."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self._routes: Dict[Tuple[str, str], Handler] = {}

    def route(self, method: str, path: str, handler: Handler) -> None:
        self._routes[(method, path)] = handler

    def calls(self, method: str, path: str) -> List[httpx.Request]:
        return [req for req in self.requests if req.method == method and req.url.path == path]

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self._routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"message": "Not Found"})
        return handler(request)

    def client(self) -> GitHubClient:
        return GitHubClient("test-token", base_url=API_BASE, transport=httpx.MockTransport(self.handle))

    def serve_catalog(self, owner: str, repo: str, pages: List[List[dict]]) -> None:
        """Serve ``pages`` from list-workflows, linking each page to the next."""

        path = f"/repos/{owner}/{repo}/actions/workflows"

        def handler(request: httpx.Request) -> httpx.Response:
            page = int(request.url.params.get("page", "1"))
            headers = {}
            if page < len(pages):
                next_url = request.url.copy_set_param("page", str(page + 1))
                headers["Link"] = f'<{next_url}>; rel="next"'
            workflows = pages[page - 1]
            return httpx.Response(
                200,
                headers=headers,
                json={"total_count": sum(map(len, pages)), "workflows": workflows},
            )

        self.route("GET", path, handler)


@pytest.fixture()
def github() -> FakeGitHub:
    return FakeGitHub()
