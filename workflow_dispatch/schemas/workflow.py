"""Pydantic models describing workflows, dispatches, and runs."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class WorkflowDescriptor(BaseModel):
    """One entry of a repository's workflow catalog."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    name: str
    path: str


class DispatchRequest(BaseModel):
    """Body of a workflow_dispatch trigger call."""

    model_config = ConfigDict(frozen=True)

    ref: str = Field(..., min_length=1)
    inputs: Dict[str, str] = Field(default_factory=dict)


class DispatchStatus(str, Enum):
    QUEUED = "queued"
    OTHER = "other"


class DispatchOutcome(BaseModel):
    """Synchronous answer to a dispatch call."""

    status: DispatchStatus = DispatchStatus.OTHER
    raw_status: Optional[str] = Field(
        default=None,
        description="Status string exactly as the provider returned it.",
    )
    workflow_run_url: Optional[str] = None
    http_status: int

    @property
    def correlation_ready(self) -> bool:
        return self.status is DispatchStatus.QUEUED and bool(self.workflow_run_url)

    @classmethod
    def from_response(cls, http_status: int, body: Dict[str, Any]) -> "DispatchOutcome":
        raw_status = body.get("status")
        status = DispatchStatus.QUEUED if raw_status == DispatchStatus.QUEUED.value else DispatchStatus.OTHER
        return cls(
            status=status,
            raw_status=raw_status if isinstance(raw_status, str) else None,
            workflow_run_url=body.get("workflow_url") or None,
            http_status=http_status,
        )


class RunHandle(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int


class DispatchResult(BaseModel):
    """What a finished invocation reports back to the runner."""

    workflow_id: Optional[int] = None
    run_id: Optional[int] = None
    disabled: bool = False
    outcome: Optional[DispatchOutcome] = None
