"""Trigger a workflow_dispatch event."""

from __future__ import annotations

import logging

from workflow_dispatch.schemas.workflow import DispatchOutcome, DispatchRequest
from workflow_dispatch.services.github_client import GitHubClient

logger = logging.getLogger("workflow_dispatch.services.dispatch")


class DispatchInvoker:
    """Issues the trigger call and classifies the synchronous answer.

    Acceptance only means GitHub queued the event; the run may not exist
    yet, which is why correlation is a separate step.
    """

    def __init__(self, client: GitHubClient) -> None:
        self._client = client

    async def dispatch(
        self,
        owner: str,
        repo: str,
        workflow_id: int,
        request: DispatchRequest,
    ) -> DispatchOutcome:
        status_code, body = await self._client.post_json(
            f"/repos/{owner}/{repo}/actions/workflows/{workflow_id}/dispatches",
            request.model_dump(),
        )
        outcome = DispatchOutcome.from_response(status_code, body)
        logger.debug(
            "workflow_dispatch_response",
            extra={
                "workflow_id": workflow_id,
                "http_status": status_code,
                "status": outcome.raw_status,
                "correlation_ready": outcome.correlation_ready,
            },
        )
        return outcome
