"""Structural comparison of two published snapshots.

Stages are matched by id. A stage counts as changed when any of its fields
besides id and name differ, or when its outgoing transitions (declared order,
ids ignored) differ. Across the whole graph the transitions are also compared
as a set of (from, to) pairs and reported as a single changed/unchanged flag.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .model import Stage, Transition
from .versions import Snapshot

_IDENTITY_FIELDS = {"id", "name"}


class StageRename(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_: str = Field(alias="from")
    to: str


class WorkflowDiff(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    added_stages: list[str] = Field(default_factory=list, alias="addedStages")
    removed_stages: list[str] = Field(default_factory=list, alias="removedStages")
    renamed_stages: list[StageRename] = Field(default_factory=list, alias="renamedStages")
    changed_stages: list[str] = Field(default_factory=list, alias="changedStages")
    changed_transitions: int = Field(default=0, alias="changedTransitions")

    @property
    def is_empty(self) -> bool:
        return not (
            self.added_stages
            or self.removed_stages
            or self.renamed_stages
            or self.changed_stages
            or self.changed_transitions
        )


def _label(stage: Stage) -> str:
    return stage.name or stage.id


def _outgoing(snapshot: Snapshot) -> dict[str, list[dict[str, Any]]]:
    """Outgoing transitions per source stage, in declared order, without ids."""

    index: dict[str, list[dict[str, Any]]] = {}
    for t in snapshot.transitions:
        index.setdefault(t.from_, []).append(t.model_dump(mode="json", exclude={"id"}))
    return index


def _config(stage: Stage, outgoing: dict[str, list[dict[str, Any]]]) -> dict[str, Any]:
    config = stage.model_dump(mode="json", exclude=_IDENTITY_FIELDS)
    config["transitions"] = outgoing.get(stage.id, [])
    return config


def _edge_list(transitions: list[Transition]) -> list[tuple[str, str]]:
    return sorted((t.pair for t in transitions), key=lambda p: (p[0] + p[1], p))


def diff_snapshots(a: Snapshot, b: Snapshot) -> WorkflowDiff:
    """Compare snapshot `a` (older) with snapshot `b` (newer)."""

    a_stages = {s.id: s for s in a.stages}
    b_stages = {s.id: s for s in b.stages}

    added = [_label(s) for s in b.stages if s.id not in a_stages]
    removed = [_label(s) for s in a.stages if s.id not in b_stages]

    a_out, b_out = _outgoing(a), _outgoing(b)
    renamed: list[StageRename] = []
    changed: list[str] = []
    for stage_a in a.stages:
        stage_b = b_stages.get(stage_a.id)
        if stage_b is None:
            continue
        if stage_a.name != stage_b.name:
            renamed.append(StageRename(from_=stage_a.name, to=stage_b.name))
        if _config(stage_a, a_out) != _config(stage_b, b_out):
            changed.append(stage_b.name)

    transitions_changed = _edge_list(a.transitions) != _edge_list(b.transitions)

    return WorkflowDiff(
        added_stages=added,
        removed_stages=removed,
        renamed_stages=renamed,
        changed_stages=changed,
        changed_transitions=1 if transitions_changed else 0,
    )
