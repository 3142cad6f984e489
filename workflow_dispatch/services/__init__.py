"""Dispatch pipeline stages."""

from workflow_dispatch.services.catalog import CatalogFetcher  # noqa: F401
from workflow_dispatch.services.correlator import RunCorrelator  # noqa: F401
from workflow_dispatch.services.dispatch import DispatchInvoker  # noqa: F401
from workflow_dispatch.services.github_client import GitHubClient  # noqa: F401
from workflow_dispatch.services.matcher import match_workflow  # noqa: F401
