"""Error taxonomy for a single dispatch invocation."""

from __future__ import annotations

from typing import Optional

DISABLED_WORKFLOW_SUFFIX = "a disabled workflow"


class WorkflowDispatchError(Exception):
    """Base class for every failure that should fail the invocation."""


class ConfigurationError(WorkflowDispatchError):
    """Raised when caller-supplied configuration cannot be used."""


class WorkflowNotFoundError(WorkflowDispatchError):
    """Raised when no catalog entry matches the workflow reference."""

    def __init__(self, workflow_ref: str, owner: str, repo: str) -> None:
        super().__init__(f"Unable to find workflow '{workflow_ref}' in {owner}/{repo}")
        self.workflow_ref = workflow_ref
        self.owner = owner
        self.repo = repo


class GitHubAPIError(WorkflowDispatchError):
    """Raised when the GitHub API answers with a non-success status."""

    def __init__(self, message: str, *, status_code: Optional[int] = None, url: Optional[str] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class GitHubTransportError(WorkflowDispatchError):
    """Raised when the GitHub API could not be reached at all."""


def is_disabled_workflow_error(exc: BaseException) -> bool:
    """Return True when the provider rejected a dispatch because the workflow is disabled."""

    # TODO: prefer a structured error code here if the REST API ever exposes one for this case.
    return str(exc).rstrip().endswith(DISABLED_WORKFLOW_SUFFIX)
