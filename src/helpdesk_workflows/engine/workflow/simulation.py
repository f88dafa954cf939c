"""Dry-run a ticket through a workflow graph.

The walk is a pure function of (graph, context). A stuck ticket is not an
error: the partial path comes back with a human-readable halt reason.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel, ConfigDict

from .conditions import evaluate_condition
from .model import Stage, StageType, Transition, WorkflowGraph

logger = logging.getLogger(__name__)

# Extra steps allowed beyond the stage count before the walk is treated as a loop.
LOOP_SLACK = 5

CHANNELS = ("email", "chat", "web", "phone")
PRIORITIES = ("low", "normal", "high", "urgent")
REQUESTERS = ("employee", "customer")
CATEGORIES = ("hardware", "software", "access", "billing", "other")


class TicketContext(BaseModel):
    """Sample ticket attributes the simulator routes on.

    Extra keys are allowed and can be referenced by conditions like the
    built-in ones.
    """

    model_config = ConfigDict(extra="allow")

    channel: Literal["email", "chat", "web", "phone"] = "email"
    priority: Literal["low", "normal", "high", "urgent"] = "normal"
    requester: Literal["employee", "customer"] = "employee"
    category: str = ""

    def as_context(self) -> dict[str, str]:
        return {k: "" if v is None else str(v) for k, v in self.model_dump().items()}


def random_ticket_context(rng: random.Random | None = None) -> TicketContext:
    """Draw a sample ticket. Pass a seeded `rng` for repeatable draws."""

    r = rng or random.Random()
    return TicketContext(
        channel=r.choice(CHANNELS),
        priority=r.choice(PRIORITIES),
        requester=r.choice(REQUESTERS),
        category=r.choice(CATEGORIES),
    )


@dataclass(frozen=True, slots=True)
class SimulationResult:
    path: list[Stage]
    halted_reason: str | None = None

    @property
    def completed(self) -> bool:
        return self.halted_reason is None and bool(self.path) and self.path[-1].type == StageType.END

    def to_json(self) -> dict[str, object]:
        out: dict[str, object] = {
            "path": [s.model_dump(mode="json", by_alias=True) for s in self.path]
        }
        if self.halted_reason is not None:
            out["haltedReason"] = self.halted_reason
        return out


def choose_transition(
    transitions: list[Transition], context: Mapping[str, str]
) -> Transition | None:
    """Pick the edge a ticket leaves by.

    The first guarded transition whose guard passes wins; otherwise the first
    unguarded one (the default branch). Declared order decides ties.
    """

    for t in transitions:
        if t.condition and evaluate_condition(t.condition, context):
            return t
    for t in transitions:
        if not t.condition:
            return t
    return None


def simulate(graph: WorkflowGraph, context: Mapping[str, str]) -> SimulationResult:
    stages = graph.stages
    if not stages:
        return SimulationResult(path=[])

    by_id = graph.stage_by_id()
    index = graph.outgoing_index()
    current = graph.first_of_type(StageType.START) or stages[0]
    path: list[Stage] = []

    def halt(reason: str) -> SimulationResult:
        logger.debug(
            "Simulation halted",
            extra={"workflow_id": graph.id, "stage_id": current.id, "reason": reason},
        )
        return SimulationResult(path=path, halted_reason=reason)

    for _ in range(len(stages) + LOOP_SLACK):
        path.append(current.model_copy(deep=True))
        if current.type == StageType.END:
            return SimulationResult(path=path)

        if not evaluate_condition(current.entry_condition, context):
            return halt(f'Entry condition on "{current.name}" failed.')

        chosen = choose_transition(index.get(current.id, []), context)
        if chosen is None:
            return halt(f'No outgoing transition from "{current.name}".')

        target = by_id.get(chosen.to)
        if target is None:
            return halt("Transition targets missing stage.")
        current = target

    return halt("Simulation aborted (possible loop).")
