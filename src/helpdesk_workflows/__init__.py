"""Helpdesk workflow engine.

Validates, simulates and versions ticket-handling workflows modeled as
graphs of stages and transitions:
- a pure engine (`helpdesk_workflows.engine.workflow`)
- an in-memory registry of workflows and their published versions
- a small CLI and a REST API over both
"""

__version__ = "0.1.0"

from helpdesk_workflows.engine.config import EngineSettings

__all__ = ["__version__", "EngineSettings"]
