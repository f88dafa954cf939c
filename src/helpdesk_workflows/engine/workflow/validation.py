"""Static checks over a workflow graph.

Findings are returned as data for display next to the builder; the engine
never refuses to work with an invalid graph. The graph does not need to be
normalized first.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from .conditions import check_condition
from .model import Stage, StageType, Transition, WorkflowGraph

SLA_STAGE_TYPES = {StageType.STAGE, StageType.APPROVAL}


class IssueLevel(str, Enum):
    ERROR = "error"
    WARN = "warn"
    INFO = "info"


@dataclass(frozen=True, slots=True)
class Issue:
    id: str
    level: IssueLevel
    text: str
    stage_id: str | None = None

    def to_json(self) -> dict[str, object]:
        out: dict[str, object] = {"id": self.id, "level": self.level.value, "text": self.text}
        if self.stage_id is not None:
            out["stageId"] = self.stage_id
        return out


@dataclass(frozen=True, slots=True)
class ValidationSummary:
    """Counts per level plus the level that should be shown for the graph."""

    errors: int
    warnings: int
    infos: int

    @property
    def severity(self) -> str:
        if self.errors:
            return "error"
        if self.warnings:
            return "warn"
        return "ok"

    @property
    def label(self) -> str:
        if self.errors:
            return f"{self.errors} errors"
        if self.warnings:
            return f"{self.warnings} warnings"
        return "No errors"

    def to_json(self) -> dict[str, object]:
        return {
            "errors": self.errors,
            "warnings": self.warnings,
            "infos": self.infos,
            "severity": self.severity,
            "label": self.label,
        }


def summarize_issues(issues: Sequence[Issue]) -> ValidationSummary:
    counts = Counter(issue.level for issue in issues)
    return ValidationSummary(
        errors=counts[IssueLevel.ERROR],
        warnings=counts[IssueLevel.WARN],
        infos=counts[IssueLevel.INFO],
    )


def reachable_from(graph: WorkflowGraph, start_id: str) -> set[str]:
    """Stage ids reachable from `start_id` by following transitions.

    Targets that are not stages are recorded as seen but not expanded.
    """

    index = graph.outgoing_index()
    seen: set[str] = set()
    stack = [start_id]
    while stack:
        current = stack.pop()
        if current in seen:
            continue
        seen.add(current)
        stack.extend(t.to for t in index.get(current, []))
    return seen


def _stage_issues(
    stage: Stage, outgoing: list[Transition], stage_ids: set[str]
) -> list[Issue]:
    out: list[Issue] = []

    if not stage.name.strip():
        out.append(
            Issue(
                id=f"empty-{stage.id}",
                level=IssueLevel.ERROR,
                text="Stage name is required.",
                stage_id=stage.id,
            )
        )

    for t in outgoing:
        if t.to not in stage_ids:
            out.append(
                Issue(
                    id=f"ref-{stage.id}-{t.id}",
                    level=IssueLevel.ERROR,
                    text=f'Transition "{t.name or t.id}" points to a missing stage.',
                    stage_id=stage.id,
                )
            )

    entry_error = check_condition(stage.entry_condition)
    if entry_error is not None:
        out.append(
            Issue(
                id=f"entry-{stage.id}",
                level=IssueLevel.WARN,
                text=f"Entry condition never passes ({entry_error}).",
                stage_id=stage.id,
            )
        )
    for t in outgoing:
        cond_error = check_condition(t.condition)
        if cond_error is not None:
            out.append(
                Issue(
                    id=f"cond-{stage.id}-{t.id}",
                    level=IssueLevel.WARN,
                    text=f'Condition on transition "{t.name or t.id}" never passes ({cond_error}).',
                    stage_id=stage.id,
                )
            )

    if stage.type != StageType.END and not outgoing:
        out.append(
            Issue(
                id=f"deadend-{stage.id}",
                level=IssueLevel.WARN,
                text="No outgoing transitions (potential dead-end).",
                stage_id=stage.id,
            )
        )

    if stage.type in SLA_STAGE_TYPES and stage.sla_hours is None:
        out.append(
            Issue(
                id=f"sla-{stage.id}",
                level=IssueLevel.INFO,
                text="No SLA set for this stage (optional but recommended).",
                stage_id=stage.id,
            )
        )

    return out


def validate(graph: WorkflowGraph) -> list[Issue]:
    """Return the ordered list of findings for `graph`."""

    stages = graph.stages
    if not stages:
        return [Issue(id="no-stages", level=IssueLevel.ERROR, text="No stages in this workflow.")]

    issues: list[Issue] = []
    first, last = stages[0], stages[-1]
    starts = [s for s in stages if s.type == StageType.START]
    ends = [s for s in stages if s.type == StageType.END]

    if len(starts) != 1:
        issues.append(
            Issue(
                id="start-count",
                level=IssueLevel.ERROR,
                text=f"There must be exactly one Start stage (found {len(starts)}).",
                stage_id=starts[0].id if starts else None,
            )
        )
    if len(ends) != 1:
        issues.append(
            Issue(
                id="end-count",
                level=IssueLevel.ERROR,
                text=f"There must be exactly one End stage (found {len(ends)}).",
                stage_id=ends[0].id if ends else None,
            )
        )
    if first.type != StageType.START:
        issues.append(
            Issue(
                id="start-pos",
                level=IssueLevel.ERROR,
                text="Start stage should be the first item.",
                stage_id=first.id,
            )
        )
    if last.type != StageType.END:
        issues.append(
            Issue(
                id="end-pos",
                level=IssueLevel.ERROR,
                text="End stage should be the last item.",
                stage_id=last.id,
            )
        )

    stage_ids = graph.stage_ids()
    index = graph.outgoing_index()
    for stage in stages:
        issues.extend(_stage_issues(stage, index.get(stage.id, []), stage_ids))

    for t in graph.transitions:
        if t.from_ not in stage_ids:
            issues.append(
                Issue(
                    id=f"orphan-{t.id}",
                    level=IssueLevel.ERROR,
                    text=f'Transition "{t.name or t.id}" starts from a missing stage.',
                )
            )

    # Counter keeps first-seen order, so warnings follow stage order.
    for name, count in Counter(s.name for s in stages).items():
        if count > 1:
            issues.append(
                Issue(
                    id=f"dup-{name}",
                    level=IssueLevel.WARN,
                    text=f'Duplicate stage name "{name}". Rename to avoid confusion.',
                )
            )

    start_id = (starts[0] if starts else first).id
    end_id = (ends[0] if ends else last).id
    if end_id not in reachable_from(graph, start_id):
        issues.append(
            Issue(
                id="no-path",
                level=IssueLevel.WARN,
                text="End is not reachable from Start. Check transitions.",
            )
        )

    return issues
