"""Sequence catalog lookup, dispatch, and run correlation."""

from __future__ import annotations

import json
import logging
from typing import Optional

from workflow_dispatch.core.config import DispatchConfig
from workflow_dispatch.core.errors import GitHubAPIError, WorkflowNotFoundError, is_disabled_workflow_error
from workflow_dispatch.schemas.workflow import DispatchResult
from workflow_dispatch.services.catalog import CatalogFetcher
from workflow_dispatch.services.correlator import RunCorrelator
from workflow_dispatch.services.dispatch import DispatchInvoker
from workflow_dispatch.services.github_client import GitHubClient
from workflow_dispatch.services.matcher import match_workflow

LOGGER = logging.getLogger("workflow_dispatch.orchestrator")


class DispatchOrchestrator:
    """Run one fetch -> match -> dispatch -> correlate pass.

    Fatal conditions raise a WorkflowDispatchError subclass. A dispatch
    rejected because the workflow is disabled is reported as a successful
    result with ``disabled`` set and no ids.
    """

    def __init__(
        self,
        client: GitHubClient,
        *,
        fetcher: Optional[CatalogFetcher] = None,
        invoker: Optional[DispatchInvoker] = None,
        correlator: Optional[RunCorrelator] = None,
    ) -> None:
        self._fetcher = fetcher or CatalogFetcher(client)
        self._invoker = invoker or DispatchInvoker(client)
        self._correlator = correlator or RunCorrelator(client)

    async def run(self, config: DispatchConfig) -> DispatchResult:
        catalog = await self._fetcher.fetch_all(config.owner, config.repo, config.ref)

        if config.debug:
            LOGGER.debug("### START List Workflows response data")
            LOGGER.debug(json.dumps(self._fetcher.last_payload, indent=3))
            LOGGER.debug("### END:  List Workflows response data")

        workflow = match_workflow(catalog, config.workflow_ref)
        if workflow is None:
            raise WorkflowNotFoundError(config.workflow_ref, config.owner, config.repo)

        LOGGER.info(
            "Found workflow, id: %s, name: %s, path: %s",
            workflow.id,
            workflow.name,
            workflow.path,
        )

        LOGGER.info("Calling GitHub API to dispatch workflow...")
        try:
            outcome = await self._invoker.dispatch(config.owner, config.repo, workflow.id, config.request)
        except GitHubAPIError as exc:
            if is_disabled_workflow_error(exc):
                LOGGER.warning("Workflow is disabled, no action was taken")
                return DispatchResult(disabled=True)
            raise

        run = await self._correlator.correlate(outcome)
        if run is None:
            LOGGER.info("Workflow dispatch event was not confirmed. Status: %s", outcome.raw_status)
        else:
            LOGGER.info("Workflow run ID: %s", run.id)

        return DispatchResult(
            workflow_id=workflow.id,
            run_id=run.id if run else None,
            outcome=outcome,
        )
