from __future__ import annotations

from .model import StageType, Transition, WorkflowGraph


def dedupe_transitions(transitions: list[Transition]) -> list[Transition]:
    """Drop transitions repeating an earlier (from, to) pair."""

    seen: set[tuple[str, str]] = set()
    out: list[Transition] = []
    for t in transitions:
        if t.pair in seen:
            continue
        seen.add(t.pair)
        out.append(t)
    return out


def _derived_id(t: Transition, taken: set[str]) -> str:
    base = f"t-{t.from_}-{t.to}"
    candidate, n = base, 2
    while candidate in taken:
        candidate = f"{base}-{n}"
        n += 1
    return candidate


def normalize(graph: WorkflowGraph) -> WorkflowGraph:
    """Return a repaired deep copy of `graph`.

    - a missing start (end) type is put on the first (last) stage
    - transitions are de-duplicated by (from, to), first one wins
    - transitions without an id get `t-<from>-<to>` (suffixed if taken)

    Nothing is deleted besides duplicate edges; empty names and dangling
    references are left for :func:`validate` to report. The result is a fixed
    point: normalizing it again changes nothing.
    """

    out = graph.model_copy(deep=True)

    if out.stages and out.first_of_type(StageType.START) is None:
        out.stages[0].type = StageType.START
    if out.stages and out.first_of_type(StageType.END) is None:
        out.stages[-1].type = StageType.END

    transitions = dedupe_transitions(out.transitions)
    taken = {t.id for t in transitions if t.id}
    for t in transitions:
        if not t.id:
            t.id = _derived_id(t, taken)
            taken.add(t.id)
    out.transitions = transitions
    return out
