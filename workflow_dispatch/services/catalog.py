"""Fetch the complete workflow catalog of a repository."""

from __future__ import annotations

from typing import Any, List

from pydantic import ValidationError

from workflow_dispatch.core.errors import GitHubAPIError
from workflow_dispatch.schemas.workflow import WorkflowDescriptor
from workflow_dispatch.services.github_client import GitHubClient


class CatalogFetcher:
    """Drains the paginated list-workflows endpoint into one ordered list.

    Transport and auth failures propagate unchanged. The raw entries of the
    most recent fetch are kept on ``last_payload`` for diagnostic capture.
    """

    def __init__(self, client: GitHubClient) -> None:
        self._client = client
        self.last_payload: List[Any] = []

    async def fetch_all(self, owner: str, repo: str, ref: str) -> List[WorkflowDescriptor]:
        pages = self._client.paginate(
            f"/repos/{owner}/{repo}/actions/workflows",
            params={"ref": ref},
            item_key="workflows",
        )

        raw_items: List[Any] = []
        async for items, _body in pages:
            raw_items.extend(items)

        self.last_payload = raw_items
        try:
            return [WorkflowDescriptor.model_validate(item) for item in raw_items]
        except ValidationError as exc:
            raise GitHubAPIError(f"Workflow list for {owner}/{repo} has an unexpected shape: {exc}") from exc
