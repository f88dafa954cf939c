"""Unit tests for the graph model and normalization."""

from __future__ import annotations

from helpdesk_workflows.engine.workflow.model import StageType, WorkflowGraph
from helpdesk_workflows.engine.workflow.normalize import normalize


def test_legacy_stage_transitions_fold_into_graph_list() -> None:
    graph = WorkflowGraph.model_validate(
        {
            "name": "Legacy",
            "stages": [
                {"id": "a", "name": "A", "type": "start", "transitions": [{"id": "t1", "to": "b"}]},
                {
                    "id": "b",
                    "name": "B",
                    "transitions": [{"id": "t2", "from": "b", "to": "c", "condition": "x = 1"}],
                },
                {"id": "c", "name": "C", "type": "end", "transitions": []},
            ],
        }
    )

    assert [(t.id, t.from_, t.to) for t in graph.transitions] == [
        ("t1", "a", "b"),
        ("t2", "b", "c"),
    ]
    assert graph.transitions[1].condition == "x = 1"
    assert all("transitions" not in s.model_dump() for s in graph.stages)


def test_graph_level_transitions_win_over_stage_arrays() -> None:
    graph = WorkflowGraph.model_validate(
        {
            "stages": [
                {"id": "a", "name": "A", "transitions": [{"to": "c"}]},
                {"id": "b", "name": "B"},
                {"id": "c", "name": "C"},
            ],
            "transitions": [{"id": "t1", "from": "a", "to": "b"}],
        }
    )

    assert [t.pair for t in graph.transitions] == [("a", "b")]


def test_outgoing_index_keeps_declared_order(branching_graph: WorkflowGraph) -> None:
    index = branching_graph.outgoing_index()
    assert [t.id for t in index["triage"]] == ["t2", "t3"]
    assert branching_graph.outgoing("triage") == index["triage"]
    assert "done" not in index


def test_to_json_uses_wire_names(linear_graph: WorkflowGraph) -> None:
    payload = linear_graph.to_json()
    assert payload["departmentId"] == "it"
    assert payload["transitions"][0]["from"] == "s1"
    assert payload["stages"][1]["slaHours"] == 4


def test_unknown_stage_fields_are_kept() -> None:
    graph = WorkflowGraph.model_validate(
        {"stages": [{"id": "a", "name": "A", "assignment": {"queue": "L1"}}]}
    )
    assert graph.to_json()["stages"][0]["assignment"] == {"queue": "L1"}


def test_normalize_sets_missing_start_and_end() -> None:
    graph = WorkflowGraph.model_validate(
        {"stages": [{"id": "a", "name": "A"}, {"id": "b", "name": "B"}, {"id": "c", "name": "C"}]}
    )

    norm = normalize(graph)

    assert [s.type for s in norm.stages] == [StageType.START, StageType.STAGE, StageType.END]
    # Input untouched.
    assert [s.type for s in graph.stages] == [StageType.STAGE] * 3


def test_normalize_keeps_existing_start_anywhere() -> None:
    graph = WorkflowGraph.model_validate(
        {
            "stages": [
                {"id": "a", "name": "A"},
                {"id": "b", "name": "B", "type": "start"},
                {"id": "c", "name": "C", "type": "end"},
            ]
        }
    )

    norm = normalize(graph)

    assert norm.stages[0].type == StageType.STAGE
    assert norm.stages[1].type == StageType.START


def test_normalize_drops_duplicate_pairs_and_assigns_ids() -> None:
    graph = WorkflowGraph.model_validate(
        {
            "stages": [
                {"id": "a", "name": "A", "type": "start"},
                {"id": "b", "name": "B", "type": "end"},
            ],
            "transitions": [
                {"from": "a", "to": "b", "name": "first"},
                {"id": "t2", "from": "a", "to": "b", "name": "second"},
            ],
        }
    )

    norm = normalize(graph)

    assert len(norm.transitions) == 1
    assert norm.transitions[0].name == "first"
    assert norm.transitions[0].id
    assert graph.transitions[0].id == ""


def test_normalize_leaves_dangling_references_and_empty_names() -> None:
    graph = WorkflowGraph.model_validate(
        {
            "stages": [{"id": "a", "name": "", "type": "start"}, {"id": "b", "name": "B", "type": "end"}],
            "transitions": [{"id": "t1", "from": "a", "to": "ghost"}],
        }
    )

    norm = normalize(graph)

    assert norm.stages[0].name == ""
    assert norm.transitions[0].to == "ghost"


def test_normalize_is_idempotent(branching_graph: WorkflowGraph) -> None:
    messy = branching_graph.model_copy(deep=True)
    messy.stages[0].type = StageType.STAGE
    messy.transitions.append(messy.transitions[0].model_copy(update={"id": ""}))

    once = normalize(messy)
    twice = normalize(once)

    assert twice == once


def test_normalize_is_deterministic_for_transitions_without_ids() -> None:
    graph = WorkflowGraph.model_validate(
        {
            "stages": [
                {"id": "a", "name": "A", "type": "start"},
                {"id": "b", "name": "B"},
                {"id": "c", "name": "C", "type": "end"},
            ],
            "transitions": [
                {"from": "a", "to": "b"},
                {"id": "t-b-c", "from": "a", "to": "c"},
                {"from": "b", "to": "c"},
            ],
        }
    )

    once = normalize(graph)

    assert normalize(graph) == once
    assert normalize(once) == once
    assert [t.id for t in once.transitions] == ["t-a-b", "t-b-c", "t-b-c-2"]


def test_normalize_empty_graph() -> None:
    graph = WorkflowGraph(name="Empty")
    assert normalize(graph).stages == []
