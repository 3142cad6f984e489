from .workflow import (
    DispatchOutcome,
    DispatchRequest,
    DispatchResult,
    DispatchStatus,
    RunHandle,
    WorkflowDescriptor,
)

__all__ = [
    "DispatchOutcome",
    "DispatchRequest",
    "DispatchResult",
    "DispatchStatus",
    "RunHandle",
    "WorkflowDescriptor",
]
