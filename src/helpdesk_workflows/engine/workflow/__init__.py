"""Workflow graph engine.

This package holds the pure parts of the builder:
- the graph model and its normalization
- the guard-condition language
- static validation
- ticket simulation
- snapshots, version ids and diffs

Nothing here performs I/O or keeps state between calls.
"""

from .conditions import ConditionSyntaxError, evaluate_condition, parse_condition
from .diff import WorkflowDiff, diff_snapshots
from .model import (
    Stage,
    StageType,
    Transition,
    WorkflowGraph,
    WorkflowStatus,
    WorkflowType,
)
from .normalize import normalize
from .simulation import SimulationResult, TicketContext, simulate
from .validation import Issue, IssueLevel, summarize_issues, validate
from .versions import Snapshot, Version, VersionSummary, publish, take_snapshot

__all__ = [
    "ConditionSyntaxError",
    "Issue",
    "IssueLevel",
    "SimulationResult",
    "Snapshot",
    "Stage",
    "StageType",
    "TicketContext",
    "Transition",
    "Version",
    "VersionSummary",
    "WorkflowDiff",
    "WorkflowGraph",
    "WorkflowStatus",
    "WorkflowType",
    "diff_snapshots",
    "evaluate_condition",
    "normalize",
    "parse_condition",
    "publish",
    "simulate",
    "summarize_issues",
    "take_snapshot",
    "validate",
]
