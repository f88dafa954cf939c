"""Test configuration and fixtures."""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest

from helpdesk_workflows.engine.registry import WorkflowRegistry
from helpdesk_workflows.engine.workflow.model import WorkflowGraph


@pytest.fixture
def linear_graph() -> WorkflowGraph:
    """Provide a three-stage start -> middle -> end graph without guards."""
    return WorkflowGraph.model_validate(
        {
            "id": "wf1",
            "name": "Password Reset",
            "type": "service_request",
            "departmentId": "it",
            "stages": [
                {"id": "s1", "name": "New", "type": "start"},
                {"id": "s2", "name": "Verify identity", "type": "stage", "slaHours": 4},
                {"id": "s3", "name": "Resolved", "type": "end"},
            ],
            "transitions": [
                {"id": "t1", "from": "s1", "to": "s2"},
                {"id": "t2", "from": "s2", "to": "s3"},
            ],
        }
    )


@pytest.fixture
def branching_graph() -> WorkflowGraph:
    """Provide a graph that routes urgent tickets to an on-call stage."""
    return WorkflowGraph.model_validate(
        {
            "id": "wf2",
            "name": "Incident Default",
            "type": "incident",
            "stages": [
                {"id": "new", "name": "New", "type": "start"},
                {"id": "triage", "name": "Triage", "type": "stage", "slaHours": 1},
                {"id": "oncall", "name": "On-call", "type": "stage", "slaHours": 0.5},
                {"id": "queue", "name": "Queue", "type": "stage", "slaHours": 8},
                {"id": "done", "name": "Resolved", "type": "end"},
            ],
            "transitions": [
                {"id": "t1", "from": "new", "to": "triage"},
                {
                    "id": "t2",
                    "from": "triage",
                    "to": "oncall",
                    "condition": "priority in (high, urgent)",
                    "name": "Escalate",
                },
                {"id": "t3", "from": "triage", "to": "queue", "name": "Default"},
                {"id": "t4", "from": "oncall", "to": "done"},
                {"id": "t5", "from": "queue", "to": "done"},
            ],
        }
    )


@pytest.fixture
def registry() -> WorkflowRegistry:
    """Provide an empty in-memory registry."""
    return WorkflowRegistry(default_author="tester")


@pytest.fixture(autouse=True)
def _restore_root_logger() -> Iterator[None]:
    """Undo `configure_logging` calls made by the code under test."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if type(handler) is logging.StreamHandler:
            root.removeHandler(handler)
    root.setLevel(level)
