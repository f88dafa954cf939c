"""Published snapshots and the per-workflow version history."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field

from .model import Stage, Transition, WorkflowGraph, WorkflowStatus, WorkflowType
from .normalize import normalize


class Snapshot(BaseModel):
    """Frozen content of a workflow at publish time."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str
    type: WorkflowType
    department_id: str = Field(default="", alias="departmentId")
    stages: list[Stage] = Field(default_factory=list)
    transitions: list[Transition] = Field(default_factory=list)

    def to_graph(self) -> WorkflowGraph:
        """Rebuild a working graph (new id, draft) from this snapshot."""

        return WorkflowGraph(
            name=self.name,
            type=self.type,
            department_id=self.department_id,
            stages=[s.model_copy(deep=True) for s in self.stages],
            transitions=[t.model_copy(deep=True) for t in self.transitions],
        )


class Version(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    created_at: datetime = Field(alias="createdAt")
    author: str | None = None
    snapshot: Snapshot


class VersionSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    label: str
    created_at: datetime = Field(alias="createdAt")
    author: str | None = None


def take_snapshot(graph: WorkflowGraph) -> Snapshot:
    """Normalize `graph` and capture a deep copy of its content."""

    norm = normalize(graph)
    return Snapshot(
        name=norm.name,
        type=norm.type,
        department_id=norm.department_id,
        stages=norm.stages,
        transitions=norm.transitions,
    )


def next_version_id(history: Sequence[Version]) -> str:
    return f"v{len(history) + 1}"


def publish(
    graph: WorkflowGraph,
    history: Sequence[Version],
    *,
    author: str | None = None,
    now: datetime | None = None,
) -> tuple[WorkflowGraph, Version]:
    """Freeze `graph` as the next version of `history`.

    Returns the normalized graph, now `active`, and the new version. The
    caller appends the version; neither argument is modified.
    """

    created = now or datetime.now(tz=UTC)
    norm = normalize(graph)
    version = Version(
        id=next_version_id(history),
        created_at=created,
        author=author,
        snapshot=take_snapshot(norm),
    )
    published = norm.model_copy(
        update={"status": WorkflowStatus.ACTIVE, "updated_at": created.isoformat()}
    )
    return published, version


def summarize_versions(history: Sequence[Version]) -> list[VersionSummary]:
    """List versions oldest first; the last one is labelled current."""

    current_id = history[-1].id if history else None
    return [
        VersionSummary(
            id=v.id,
            label=f"{v.id} (current)" if v.id == current_id else v.id,
            created_at=v.created_at,
            author=v.author,
        )
        for v in history
    ]
