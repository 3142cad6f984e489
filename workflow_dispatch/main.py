"""Action entrypoint."""

from __future__ import annotations

import argparse
import asyncio
import logging
from typing import Optional

from pydantic import ValidationError

from workflow_dispatch import __version__
from workflow_dispatch.core.config import (
    ActionSettings,
    InvocationContext,
    get_invocation_context,
    get_settings,
    resolve_dispatch_config,
)
from workflow_dispatch.core.errors import ConfigurationError, WorkflowDispatchError
from workflow_dispatch.core.logging import configure_logging
from workflow_dispatch.core.outputs import set_output
from workflow_dispatch.orchestrator import DispatchOrchestrator
from workflow_dispatch.schemas.workflow import DispatchResult
from workflow_dispatch.services.github_client import GitHubClient

LOGGER = logging.getLogger("workflow_dispatch.main")


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Trigger a workflow_dispatch event and report the run it produced.")
    parser.add_argument("--workflow", default=None, help="Workflow name, numeric id, or file path suffix.")
    parser.add_argument("--ref", default=None, help="Branch, tag, or commit to run the workflow on.")
    parser.add_argument("--repo", default=None, help="Target repository as owner/repo.")
    parser.add_argument("--inputs", default=None, help="Workflow inputs as a JSON object.")
    parser.add_argument("--token", default=None, help="Token used to call the GitHub API.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser.parse_args(argv)


def apply_overrides(settings: ActionSettings, args: argparse.Namespace) -> ActionSettings:
    """Command-line values win over environment values when given."""

    update = {
        field: value
        for field, value in (
            ("workflow", args.workflow),
            ("ref", args.ref),
            ("repo", args.repo),
            ("inputs", args.inputs),
            ("token", args.token),
        )
        if value
    }
    if args.verbose:
        update["runner_debug"] = True
    return settings.model_copy(update=update) if update else settings


async def dispatch(
    settings: ActionSettings,
    *,
    context: Optional[InvocationContext] = None,
    client: Optional[GitHubClient] = None,
) -> DispatchResult:
    """Resolve configuration and run the orchestrator against GitHub."""

    try:
        config = resolve_dispatch_config(settings, context or get_invocation_context(settings))
    except ConfigurationError:
        if client is not None:
            await client.aclose()
        raise
    client = client or GitHubClient(
        settings.token or "",
        base_url=settings.github_api_url,
        timeout=settings.http_timeout,
    )
    async with client:
        return await DispatchOrchestrator(client).run(config)


def publish_outputs(result: DispatchResult, settings: ActionSettings) -> None:
    if result.workflow_id is None:
        return
    if result.run_id is not None:
        set_output("runId", result.run_id, output_file=settings.github_output)
    set_output("workflowId", result.workflow_id, output_file=settings.github_output)


def run(settings: ActionSettings, *, client: Optional[GitHubClient] = None) -> int:
    """Execute one invocation and return the process exit status."""

    LOGGER.info("Workflow Dispatch Action v%s", __version__)
    try:
        result = asyncio.run(dispatch(settings, client=client))
    except WorkflowDispatchError as exc:
        LOGGER.error(str(exc))
        return 1

    if result.outcome is not None:
        LOGGER.info("API response status: %s", result.outcome.http_status)
    publish_outputs(result, settings)
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    try:
        settings = apply_overrides(get_settings(), args)
    except ValidationError as exc:
        configure_logging(ActionSettings.model_construct())
        LOGGER.error("Invalid configuration: %s", exc)
        return 1
    configure_logging(settings)
    return run(settings)
