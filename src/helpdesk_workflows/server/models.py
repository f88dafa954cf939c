"""Pydantic models for the REST server."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from helpdesk_workflows.engine.workflow.model import (
    Stage,
    WorkflowGraph,
    WorkflowStatus,
    WorkflowType,
)
from helpdesk_workflows.engine.workflow.versions import Snapshot


class ApiIssue(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    level: str
    text: str
    stage_id: str | None = Field(default=None, alias="stageId")


class ApiValidationSummary(BaseModel):
    errors: int
    warnings: int
    infos: int
    severity: str
    label: str


class ValidationResponse(BaseModel):
    issues: list[ApiIssue]
    summary: ApiValidationSummary


class SimulateRequest(BaseModel):
    graph: WorkflowGraph
    context: dict[str, str] = Field(default_factory=dict)


class SimulationResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    path: list[Stage]
    halted_reason: str | None = Field(default=None, alias="haltedReason")


class DiffRequest(BaseModel):
    a: Snapshot
    b: Snapshot


class NewWorkflowRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1)
    type: WorkflowType = WorkflowType.SERVICE_REQUEST
    department_id: str = Field(default="", alias="departmentId")
    template_id: str | None = Field(default=None, alias="templateId")
    owner: str | None = None


class StatusRequest(BaseModel):
    status: WorkflowStatus


class PublishRequest(BaseModel):
    author: str | None = None
