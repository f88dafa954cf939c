"""Workflow REST API.

Two groups of routes, all mounted under `/api`:
- stateless wrappers over the pure engine (`/graphs/*`, `/snapshots/diff`)
- workflow lifecycle over the app's in-memory registry (`/workflows/*`)

Unknown workflow, version or template ids are turned into 404 responses by the
exception handlers installed in :func:`helpdesk_workflows.server.app.create_app`.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Query, Request, Response

from helpdesk_workflows import __version__
from helpdesk_workflows.engine.registry import WorkflowRegistry
from helpdesk_workflows.engine.workflow.diff import WorkflowDiff, diff_snapshots
from helpdesk_workflows.engine.workflow.model import WorkflowGraph
from helpdesk_workflows.engine.workflow.normalize import normalize
from helpdesk_workflows.engine.workflow.simulation import simulate
from helpdesk_workflows.engine.workflow.templates import TEMPLATES
from helpdesk_workflows.engine.workflow.validation import summarize_issues, validate
from helpdesk_workflows.engine.workflow.versions import Snapshot, VersionSummary
from helpdesk_workflows.server.models import (
    ApiIssue,
    ApiValidationSummary,
    DiffRequest,
    NewWorkflowRequest,
    PublishRequest,
    SimulateRequest,
    SimulationResponse,
    StatusRequest,
    ValidationResponse,
)

router = APIRouter()


def _registry(request: Request) -> WorkflowRegistry:
    registry = getattr(request.app.state, "registry", None)
    if not isinstance(registry, WorkflowRegistry):
        raise HTTPException(status_code=500, detail="Workflow registry not configured")
    return registry


@router.get("/health")
def health() -> dict[str, Any]:
    return {"status": "ok", "ok": True, "version": __version__}


@router.get("/templates")
def list_templates() -> list[dict[str, Any]]:
    return [t.to_json() for t in TEMPLATES]


@router.post("/graphs/normalize", response_model=WorkflowGraph)
def normalize_graph(graph: WorkflowGraph) -> WorkflowGraph:
    return normalize(graph)


@router.post("/graphs/validate", response_model=ValidationResponse)
def validate_graph(graph: WorkflowGraph) -> ValidationResponse:
    issues = validate(graph)
    summary = summarize_issues(issues)
    return ValidationResponse(
        issues=[ApiIssue.model_validate(i.to_json()) for i in issues],
        summary=ApiValidationSummary.model_validate(summary.to_json()),
    )


@router.post(
    "/graphs/simulate", response_model=SimulationResponse, response_model_exclude_none=True
)
def simulate_graph(req: SimulateRequest) -> SimulationResponse:
    result = simulate(req.graph, req.context)
    return SimulationResponse(path=result.path, halted_reason=result.halted_reason)


@router.post("/snapshots/diff", response_model=WorkflowDiff)
def diff_snapshot_pair(req: DiffRequest) -> WorkflowDiff:
    return diff_snapshots(req.a, req.b)


@router.post("/workflows", response_model=WorkflowGraph, status_code=201)
def create_workflow(req: NewWorkflowRequest, request: Request) -> WorkflowGraph:
    return _registry(request).create(
        name=req.name,
        workflow_type=req.type,
        department_id=req.department_id,
        template_id=req.template_id,
        owner=req.owner,
    )


@router.get("/workflows/{workflow_id}", response_model=WorkflowGraph)
def get_workflow(workflow_id: str, request: Request) -> WorkflowGraph:
    return _registry(request).get(workflow_id)


@router.put("/workflows/{workflow_id}", response_model=WorkflowGraph)
def save_workflow(workflow_id: str, graph: WorkflowGraph, request: Request) -> WorkflowGraph:
    if graph.id != workflow_id:
        raise HTTPException(status_code=409, detail="Graph id does not match the URL")
    return _registry(request).save(graph)


@router.delete("/workflows/{workflow_id}", status_code=204)
def delete_workflow(workflow_id: str, request: Request) -> Response:
    _registry(request).delete(workflow_id)
    return Response(status_code=204)


@router.post("/workflows/{workflow_id}/duplicate", response_model=WorkflowGraph, status_code=201)
def duplicate_workflow(workflow_id: str, request: Request) -> WorkflowGraph:
    return _registry(request).duplicate(workflow_id)


@router.put("/workflows/{workflow_id}/status", response_model=WorkflowGraph)
def set_workflow_status(workflow_id: str, req: StatusRequest, request: Request) -> WorkflowGraph:
    return _registry(request).set_status(workflow_id, req.status)


@router.post("/workflows/{workflow_id}/publish", response_model=list[VersionSummary])
def publish_workflow(
    workflow_id: str, request: Request, req: PublishRequest | None = None
) -> list[VersionSummary]:
    author = req.author if req is not None else None
    return _registry(request).publish(workflow_id, author=author)


@router.get("/workflows/{workflow_id}/versions", response_model=list[VersionSummary])
def list_versions(workflow_id: str, request: Request) -> list[VersionSummary]:
    return _registry(request).list_versions(workflow_id)


@router.get("/workflows/{workflow_id}/versions/{version_id}", response_model=Snapshot)
def get_version(workflow_id: str, version_id: str, request: Request) -> Snapshot:
    return _registry(request).get_version(workflow_id, version_id)


@router.get("/workflows/{workflow_id}/diff", response_model=WorkflowDiff)
def diff_versions(
    workflow_id: str,
    request: Request,
    a: str = Query(..., description="Older version id, e.g. v1"),
    b: str = Query(..., description="Newer version id, e.g. v2"),
) -> WorkflowDiff:
    return _registry(request).diff_versions(workflow_id, a, b)
