"""Locate a workflow in a catalog by name, id, or path suffix."""

from __future__ import annotations

from typing import Optional, Sequence

from workflow_dispatch.schemas.workflow import WorkflowDescriptor


def matches(workflow: WorkflowDescriptor, workflow_ref: str) -> bool:
    return (
        workflow.name == workflow_ref
        or str(workflow.id) == workflow_ref
        or workflow.path.endswith(workflow_ref)
    )


def match_workflow(catalog: Sequence[WorkflowDescriptor], workflow_ref: str) -> Optional[WorkflowDescriptor]:
    """Return the first catalog entry the reference identifies, in catalog order."""

    for workflow in catalog:
        if matches(workflow, workflow_ref):
            return workflow
    return None
