"""CLI entrypoint for the workflow engine.

Reads workflow graphs from JSON files and runs the engine's pure operations on
them: normalize, validate, simulate and diff. Nothing is written back.

Exit codes:
- 0: success
- 1: unexpected failure
- 2: configuration or input error
- 4: findings (validation errors, or a simulation that halted)
"""

from __future__ import annotations

import argparse
import json
import logging
import random
import sys
from dataclasses import dataclass
from pathlib import Path

from pydantic import ValidationError

from helpdesk_workflows import __version__
from helpdesk_workflows.engine.config import EngineSettings
from helpdesk_workflows.engine.logging import configure_logging
from helpdesk_workflows.engine.workflow.diff import diff_snapshots
from helpdesk_workflows.engine.workflow.model import WorkflowGraph, WorkflowType
from helpdesk_workflows.engine.workflow.normalize import normalize
from helpdesk_workflows.engine.workflow.simulation import (
    CHANNELS,
    PRIORITIES,
    REQUESTERS,
    TicketContext,
    random_ticket_context,
    simulate,
)
from helpdesk_workflows.engine.workflow.templates import (
    TEMPLATES,
    TemplateNotFound,
    new_workflow_graph,
)
from helpdesk_workflows.engine.workflow.validation import summarize_issues, validate
from helpdesk_workflows.engine.workflow.versions import take_snapshot

logger = logging.getLogger(__name__)

EXIT_FINDINGS = 4


@dataclass(frozen=True, slots=True)
class GraphFileError(Exception):
    """Raised when a graph file cannot be read or does not describe a graph."""

    path: Path
    reason: str

    def __str__(self) -> str:
        return f"Cannot load workflow graph from {self.path}: {self.reason}"


def read_graph_file(path: Path) -> WorkflowGraph:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise GraphFileError(path, "file not found") from e
    except json.JSONDecodeError as e:
        raise GraphFileError(path, f"invalid JSON ({e.msg})") from e

    if not isinstance(raw, dict):
        raise GraphFileError(path, "expected a JSON object")

    try:
        return WorkflowGraph.model_validate(raw)
    except ValidationError as e:
        raise GraphFileError(path, str(e)) from e


def _print_json(payload: object) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="workflows",
        description="Validate, simulate and compare helpdesk workflow graphs",
    )
    parser.add_argument(
        "--version", action="version", version=f"helpdesk-workflows {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    normalize_cmd = subparsers.add_parser(
        "normalize", help="Print the normalized form of a workflow graph"
    )
    normalize_cmd.add_argument("path", type=Path, help="Workflow graph JSON file")

    validate_cmd = subparsers.add_parser("validate", help="Report structural issues")
    validate_cmd.add_argument("path", type=Path, help="Workflow graph JSON file")
    validate_cmd.add_argument("--json", action="store_true", help="Print issues as JSON")

    simulate_cmd = subparsers.add_parser(
        "simulate", help="Walk a sample ticket through the workflow"
    )
    simulate_cmd.add_argument("path", type=Path, help="Workflow graph JSON file")
    simulate_cmd.add_argument("--channel", choices=CHANNELS, default="email")
    simulate_cmd.add_argument("--priority", choices=PRIORITIES, default="normal")
    simulate_cmd.add_argument("--requester", choices=REQUESTERS, default="employee")
    simulate_cmd.add_argument("--category", default="", help="Free-text ticket category")
    simulate_cmd.add_argument(
        "--random",
        action="store_true",
        help="Ignore the ticket options above and draw a random sample ticket",
    )
    simulate_cmd.add_argument(
        "--seed", type=int, default=None, help="Seed for --random (repeatable draws)"
    )
    simulate_cmd.add_argument("--json", action="store_true", help="Print the result as JSON")

    diff_cmd = subparsers.add_parser(
        "diff", help="Compare two workflow graphs as if both were published"
    )
    diff_cmd.add_argument("old", type=Path, help="Older graph or snapshot JSON file")
    diff_cmd.add_argument("new", type=Path, help="Newer graph or snapshot JSON file")

    new_cmd = subparsers.add_parser("new", help="Print a new draft workflow graph")
    new_cmd.add_argument("--name", default="New workflow", help="Workflow name")
    new_cmd.add_argument(
        "--type",
        dest="workflow_type",
        choices=[t.value for t in WorkflowType],
        default=WorkflowType.SERVICE_REQUEST.value,
    )
    new_cmd.add_argument("--department", default="", help="Department id")
    new_cmd.add_argument("--template", default=None, help="Template id (see `templates`)")
    new_cmd.add_argument("--owner", default=None, help="Workflow owner")

    subparsers.add_parser("templates", help="List the built-in workflow templates")

    return parser


def _run_validate(args: argparse.Namespace) -> int:
    graph = read_graph_file(args.path)
    issues = validate(graph)
    summary = summarize_issues(issues)

    if args.json:
        _print_json({"issues": [i.to_json() for i in issues], "summary": summary.to_json()})
    else:
        for issue in issues:
            where = f" (stage {issue.stage_id})" if issue.stage_id else ""
            print(f"[{issue.level.value}] {issue.text}{where}")
        tips = f", {summary.infos} tips" if summary.infos else ""
        print(f"{summary.label}{tips}")

    logger.info(
        "Graph validated",
        extra={"path": str(args.path), "errors": summary.errors, "warnings": summary.warnings},
    )
    return EXIT_FINDINGS if summary.errors else 0


def _run_simulate(args: argparse.Namespace) -> int:
    graph = read_graph_file(args.path)
    if args.random:
        ticket = random_ticket_context(random.Random(args.seed))
    else:
        ticket = TicketContext(
            channel=args.channel,
            priority=args.priority,
            requester=args.requester,
            category=args.category,
        )

    result = simulate(graph, ticket.as_context())

    if args.json:
        _print_json({"context": ticket.as_context(), **result.to_json()})
    else:
        print("Ticket: " + ", ".join(f"{k}={v}" for k, v in ticket.as_context().items()))
        print(" -> ".join(stage.name for stage in result.path) or "(no stages)")
        if result.halted_reason:
            print(f"Halted: {result.halted_reason}")

    return EXIT_FINDINGS if result.halted_reason else 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = EngineSettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level, json_output=settings.json_logs)

    try:
        if args.command == "normalize":
            graph = read_graph_file(args.path)
            _print_json(normalize(graph).to_json())
            return 0

        if args.command == "validate":
            return _run_validate(args)

        if args.command == "simulate":
            return _run_simulate(args)

        if args.command == "diff":
            old = take_snapshot(read_graph_file(args.old))
            new = take_snapshot(read_graph_file(args.new))
            _print_json(diff_snapshots(old, new).model_dump(mode="json", by_alias=True))
            return 0

        if args.command == "new":
            graph = new_workflow_graph(
                name=args.name,
                workflow_type=WorkflowType(args.workflow_type),
                department_id=args.department,
                template_id=args.template,
                owner=args.owner,
            )
            _print_json(graph.to_json())
            return 0

        if args.command == "templates":
            for template in TEMPLATES:
                print(
                    f"{template.id}: {template.name} "
                    f"({template.type.value}, {template.stages_count} stages)"
                )
            return 0

        logger.error("Unknown command", extra={"command": args.command})
        return 2

    except (GraphFileError, TemplateNotFound) as e:
        logger.warning(str(e))
        print(str(e), file=sys.stderr)
        return 2

    except Exception:
        logger.exception("Command failed")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
