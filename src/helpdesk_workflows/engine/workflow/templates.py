"""Starting points for new workflows.

Every new workflow begins as a straight line of stages. A template only
decides how many stages that line has.
"""

from __future__ import annotations

from dataclasses import dataclass

from .model import (
    Stage,
    StageType,
    Transition,
    WorkflowGraph,
    WorkflowStatus,
    WorkflowType,
    new_id,
)

MIN_STAGES = 3


@dataclass(frozen=True, slots=True)
class TemplateNotFound(Exception):
    template_id: str

    def __str__(self) -> str:
        return f"Template not found: {self.template_id}"


@dataclass(frozen=True, slots=True)
class WorkflowTemplate:
    id: str
    name: str
    type: WorkflowType
    stages_count: int
    description: str | None = None

    def to_json(self) -> dict[str, object]:
        out: dict[str, object] = {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "stagesCount": self.stages_count,
        }
        if self.description is not None:
            out["description"] = self.description
        return out


TEMPLATES: tuple[WorkflowTemplate, ...] = (
    WorkflowTemplate(
        id="tpl_onboarding",
        name="Employee Onboarding",
        type=WorkflowType.SERVICE_REQUEST,
        stages_count=6,
        description="HR + IT provisioning",
    ),
    WorkflowTemplate(
        id="tpl_password",
        name="Password Reset",
        type=WorkflowType.SERVICE_REQUEST,
        stages_count=3,
    ),
    WorkflowTemplate(
        id="tpl_incident",
        name="Incident Default",
        type=WorkflowType.INCIDENT,
        stages_count=5,
    ),
    WorkflowTemplate(
        id="tpl_change",
        name="Change Control",
        type=WorkflowType.CHANGE,
        stages_count=7,
    ),
)


def find_template(template_id: str) -> WorkflowTemplate | None:
    for template in TEMPLATES:
        if template.id == template_id:
            return template
    return None


def build_linear_stages(count: int) -> tuple[list[Stage], list[Transition]]:
    """Build `max(count, 3)` stages chained start -> ... -> end."""

    total = max(count, MIN_STAGES)
    stages: list[Stage] = []
    for i in range(total):
        if i == 0:
            name, stage_type = "New", StageType.START
        elif i == total - 1:
            name, stage_type = "Resolved", StageType.END
        else:
            name, stage_type = f"Stage {i}", StageType.STAGE
        stages.append(Stage(id=new_id(), name=name, type=stage_type))

    transitions = [
        Transition(id=new_id(), from_=src.id, to=dst.id)
        for src, dst in zip(stages, stages[1:])
    ]
    return stages, transitions


def new_workflow_graph(
    *,
    name: str,
    workflow_type: WorkflowType = WorkflowType.SERVICE_REQUEST,
    department_id: str = "",
    template_id: str | None = None,
    owner: str | None = None,
) -> WorkflowGraph:
    """Create a draft graph sized by `template_id` (3 stages without one).

    Raises:
        TemplateNotFound: if `template_id` is not a built-in template.
    """

    count = MIN_STAGES
    if template_id:
        template = find_template(template_id)
        if template is None:
            raise TemplateNotFound(template_id)
        count = template.stages_count

    stages, transitions = build_linear_stages(count)
    return WorkflowGraph(
        name=name,
        type=workflow_type,
        department_id=department_id,
        status=WorkflowStatus.DRAFT,
        owner=owner,
        stages=stages,
        transitions=transitions,
    )
