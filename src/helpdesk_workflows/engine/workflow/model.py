"""Workflow graph entities.

A workflow is an ordered list of stages plus one graph-level list of
transitions. Edges reference stages by id; there are no object pointers, so
every model here dumps to flat, JSON-serializable records.

The graph-level transition list is the only source of truth. Older payloads
that carry a `transitions` array on each stage are folded into it when the
graph is parsed (see :meth:`WorkflowGraph._fold_stage_transitions`).
"""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


def new_id() -> str:
    """Return a short opaque id for stages, transitions and workflows."""

    return uuid.uuid4().hex[:8]


class StageType(str, Enum):
    START = "start"
    STAGE = "stage"
    APPROVAL = "approval"
    END = "end"


class WorkflowType(str, Enum):
    SERVICE_REQUEST = "service_request"
    INCIDENT = "incident"
    CHANGE = "change"
    TASK = "task"


class WorkflowStatus(str, Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    ARCHIVED = "archived"


class Transition(BaseModel):
    """A directed edge between two stages, optionally guarded by a condition."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default="")
    from_: str = Field(alias="from")
    to: str
    condition: str | None = None
    name: str | None = None

    @property
    def pair(self) -> tuple[str, str]:
        return (self.from_, self.to)


class Stage(BaseModel):
    """One step of ticket handling.

    Host-side configuration the engine does not interpret (assignment,
    notifications, ...) is kept as extra fields so it survives snapshots and
    shows up in diffs.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str
    name: str = ""
    type: StageType = StageType.STAGE
    role: str | None = None
    sla_hours: float | None = Field(default=None, alias="slaHours", ge=0)
    entry_condition: str | None = Field(default=None, alias="entryCondition")
    description: str | None = None


class WorkflowGraph(BaseModel):
    """The mutable working copy of a workflow, as supplied by the host."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=new_id)
    name: str = ""
    type: WorkflowType = WorkflowType.SERVICE_REQUEST
    department_id: str = Field(default="", alias="departmentId")
    status: WorkflowStatus = WorkflowStatus.DRAFT
    owner: str | None = None
    updated_at: str | None = Field(default=None, alias="updatedAt")

    stages: list[Stage] = Field(default_factory=list)
    transitions: list[Transition] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _fold_stage_transitions(cls, data: Any) -> Any:
        """Accept payloads where transitions are mirrored on each stage.

        If the graph-level list is missing or empty it is derived from the
        per-stage arrays (an entry without `from` belongs to its stage).
        Otherwise the per-stage arrays are dropped.
        """

        if not isinstance(data, dict):
            return data
        raw_stages = data.get("stages")
        if not isinstance(raw_stages, list):
            return data

        stages: list[object] = []
        derived: list[dict[str, object]] = []
        for raw in raw_stages:
            if not isinstance(raw, dict):
                stages.append(raw)
                continue
            stage = dict(raw)
            mirror = stage.pop("transitions", None)
            stages.append(stage)
            if not isinstance(mirror, list):
                continue
            for item in mirror:
                if not isinstance(item, dict):
                    continue
                edge = dict(item)
                if not edge.get("from") and not edge.get("from_"):
                    edge["from"] = stage.get("id")
                if edge.get("to"):
                    derived.append(edge)

        out = dict(data)
        out["stages"] = stages
        top = data.get("transitions")
        if not isinstance(top, list) or not top:
            out["transitions"] = derived
        return out

    def stage_ids(self) -> set[str]:
        return {s.id for s in self.stages}

    def stage_by_id(self) -> dict[str, Stage]:
        return {s.id: s for s in self.stages}

    def find_stage(self, stage_id: str) -> Stage | None:
        for stage in self.stages:
            if stage.id == stage_id:
                return stage
        return None

    def first_of_type(self, stage_type: StageType) -> Stage | None:
        for stage in self.stages:
            if stage.type == stage_type:
                return stage
        return None

    def outgoing_index(self) -> dict[str, list[Transition]]:
        """Map each source stage id to its transitions, in declared order."""

        index: dict[str, list[Transition]] = {}
        for t in self.transitions:
            index.setdefault(t.from_, []).append(t)
        return index

    def outgoing(self, stage_id: str) -> list[Transition]:
        return [t for t in self.transitions if t.from_ == stage_id]

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
