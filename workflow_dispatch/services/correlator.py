"""Resolve the run a dispatch produced."""

from __future__ import annotations

from typing import Optional

from pydantic import ValidationError

from workflow_dispatch.core.errors import GitHubAPIError
from workflow_dispatch.schemas.workflow import DispatchOutcome, RunHandle
from workflow_dispatch.services.github_client import GitHubClient


class RunCorrelator:
    def __init__(self, client: GitHubClient) -> None:
        self._client = client

    async def correlate(self, outcome: DispatchOutcome) -> Optional[RunHandle]:
        """Read the run-collection URL from the dispatch answer and return its run id.

        Returns None without any request when the dispatch was not
        confirmed as queued with a URL to follow.
        """

        if not outcome.correlation_ready:
            return None

        body = await self._client.get_json(outcome.workflow_run_url)
        if not isinstance(body, dict) or body.get("id") is None:
            raise GitHubAPIError(
                "Workflow run response did not contain a run id",
                url=outcome.workflow_run_url,
            )
        try:
            return RunHandle.model_validate(body)
        except ValidationError as exc:
            raise GitHubAPIError(
                f"Workflow run response has an unexpected shape: {exc}",
                url=outcome.workflow_run_url,
            ) from exc
