#!/usr/bin/env python3
"""Programmatic workflow example.

This demonstrates using the engine components directly:

* create a draft workflow from a built-in template
* add a routing branch guarded by a condition
* validate and simulate the graph
* publish twice and diff the two versions

Everything lives in memory; nothing is written to disk.
"""

from __future__ import annotations

import argparse
from typing import Sequence

from helpdesk_workflows.engine.config import EngineSettings
from helpdesk_workflows.engine.logging import configure_logging
from helpdesk_workflows.engine.registry import WorkflowRegistry
from helpdesk_workflows.engine.workflow import Transition, simulate, summarize_issues, validate
from helpdesk_workflows.engine.workflow.templates import TemplateNotFound


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build, simulate and publish a workflow.")
    parser.add_argument("--name", default="Laptop Request", help="Workflow name")
    parser.add_argument("--template", default="tpl_onboarding", help="Template id")
    parser.add_argument("--priority", default="urgent", help="Sample ticket priority")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    settings = EngineSettings()
    configure_logging(settings.log_level, json_output=settings.json_logs)

    registry = WorkflowRegistry(default_author=settings.default_author)
    try:
        graph = registry.create(name=args.name, template_id=args.template)
    except TemplateNotFound as exc:
        print(str(exc))
        return 2

    # Urgent tickets skip straight from the first stage to the last one.
    first, last = graph.stages[0], graph.stages[-1]
    graph.transitions.insert(
        0,
        Transition(
            from_=first.id,
            to=last.id,
            condition="priority in (urgent, high)",
            name="Fast lane",
        ),
    )
    registry.publish(graph.id)
    graph = registry.save(graph)

    summary = summarize_issues(validate(graph))
    print(f"Validation: {summary.label}")

    result = simulate(graph, {"priority": args.priority})
    print("Path: " + " -> ".join(stage.name for stage in result.path))
    if result.halted_reason:
        print(f"Halted: {result.halted_reason}")

    versions = registry.publish(graph.id)
    print("Versions: " + ", ".join(v.label for v in versions))

    diff = registry.diff_versions(graph.id, "v1", "v2")
    print(f"Transitions changed between v1 and v2: {bool(diff.changed_transitions)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
