"""In-memory workflow registry.

Holds the working graph and the published version history of each workflow
for hosts that have no storage of their own (the CLI, the REST server, tests).
Nothing is written to disk; a process restart forgets everything.

Every read returns a deep copy, so callers can edit what they get back without
touching the registry's state.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import UTC, datetime

from helpdesk_workflows.engine.workflow.diff import WorkflowDiff, diff_snapshots
from helpdesk_workflows.engine.workflow.model import (
    WorkflowGraph,
    WorkflowStatus,
    WorkflowType,
    new_id,
)
from helpdesk_workflows.engine.workflow.normalize import normalize
from helpdesk_workflows.engine.workflow.templates import new_workflow_graph
from helpdesk_workflows.engine.workflow.versions import (
    Snapshot,
    Version,
    VersionSummary,
    publish as publish_version,
    summarize_versions,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class WorkflowNotFound(Exception):
    workflow_id: str

    def __str__(self) -> str:
        return f"Workflow not found: {self.workflow_id}"


@dataclass(frozen=True, slots=True)
class VersionNotFound(Exception):
    workflow_id: str
    version_id: str

    def __str__(self) -> str:
        return f"Version {self.version_id} not found for workflow {self.workflow_id}"


def _utc_iso_now() -> str:
    return datetime.now(tz=UTC).isoformat()


@dataclass
class _Entry:
    graph: WorkflowGraph
    versions: list[Version] = field(default_factory=list)


class WorkflowRegistry:
    """Thread-safe, process-local store of workflows and their versions."""

    def __init__(self, *, default_author: str = "You") -> None:
        self._lock = threading.Lock()
        self._entries: dict[str, _Entry] = {}
        self._default_author = default_author

    def _entry(self, workflow_id: str) -> _Entry:
        entry = self._entries.get(workflow_id)
        if entry is None:
            raise WorkflowNotFound(workflow_id)
        return entry

    def create(
        self,
        *,
        name: str,
        workflow_type: WorkflowType = WorkflowType.SERVICE_REQUEST,
        department_id: str = "",
        template_id: str | None = None,
        owner: str | None = None,
    ) -> WorkflowGraph:
        """Create a draft workflow laid out as a straight line of stages."""

        graph = new_workflow_graph(
            name=name,
            workflow_type=workflow_type,
            department_id=department_id,
            template_id=template_id,
            owner=owner,
        )
        graph.updated_at = _utc_iso_now()
        with self._lock:
            self._entries[graph.id] = _Entry(graph=graph)
        logger.info(
            "Workflow created",
            extra={"workflow_id": graph.id, "template_id": template_id, "stages": len(graph.stages)},
        )
        return graph.model_copy(deep=True)

    def list_ids(self) -> list[str]:
        with self._lock:
            return list(self._entries)

    def get(self, workflow_id: str) -> WorkflowGraph:
        with self._lock:
            return self._entry(workflow_id).graph.model_copy(deep=True)

    def save(self, graph: WorkflowGraph) -> WorkflowGraph:
        """Replace the working graph with a normalized copy of `graph`."""

        with self._lock:
            entry = self._entry(graph.id)
            saved = normalize(graph)
            saved.updated_at = _utc_iso_now()
            entry.graph = saved
            return saved.model_copy(deep=True)

    def set_status(self, workflow_id: str, status: WorkflowStatus) -> WorkflowGraph:
        with self._lock:
            entry = self._entry(workflow_id)
            entry.graph = entry.graph.model_copy(
                update={"status": status, "updated_at": _utc_iso_now()}
            )
            return entry.graph.model_copy(deep=True)

    def delete(self, workflow_id: str) -> None:
        """Drop the working graph and the whole version history."""

        with self._lock:
            self._entry(workflow_id)
            del self._entries[workflow_id]
        logger.info("Workflow deleted", extra={"workflow_id": workflow_id})

    def duplicate(self, workflow_id: str) -> WorkflowGraph:
        """Copy a workflow's current graph into a new draft with no history."""

        with self._lock:
            source = normalize(self._entry(workflow_id).graph)
            copy = source.model_copy(
                update={
                    "id": new_id(),
                    "name": f"{source.name} (Copy)",
                    "status": WorkflowStatus.DRAFT,
                    "updated_at": _utc_iso_now(),
                }
            )
            self._entries[copy.id] = _Entry(graph=copy)
        logger.info(
            "Workflow duplicated", extra={"workflow_id": workflow_id, "copy_id": copy.id}
        )
        return copy.model_copy(deep=True)

    def publish(self, workflow_id: str, *, author: str | None = None) -> list[VersionSummary]:
        """Snapshot the working graph as the next version and mark it active."""

        with self._lock:
            entry = self._entry(workflow_id)
            graph, version = publish_version(
                entry.graph, entry.versions, author=author or self._default_author
            )
            entry.graph = graph
            entry.versions.append(version)
            summaries = summarize_versions(entry.versions)
        logger.info(
            "Workflow published",
            extra={"workflow_id": workflow_id, "version_id": version.id, "author": version.author},
        )
        return summaries

    def list_versions(self, workflow_id: str) -> list[VersionSummary]:
        with self._lock:
            return summarize_versions(self._entry(workflow_id).versions)

    def get_version(self, workflow_id: str, version_id: str) -> Snapshot:
        with self._lock:
            for version in self._entry(workflow_id).versions:
                if version.id == version_id:
                    return version.snapshot.model_copy(deep=True)
        raise VersionNotFound(workflow_id, version_id)

    def diff_versions(self, workflow_id: str, a: str, b: str) -> WorkflowDiff:
        return diff_snapshots(self.get_version(workflow_id, a), self.get_version(workflow_id, b))
