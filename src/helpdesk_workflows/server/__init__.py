"""FastAPI server adapter for helpdesk-workflows.

Design intent:
- Keep engine logic in `helpdesk_workflows.engine.*`
- Keep server-specific concerns (routing, CORS, error mapping) here

Run with: `uvicorn helpdesk_workflows.server:create_app --factory`
"""

from __future__ import annotations

__all__ = ["create_app"]

from helpdesk_workflows.server.app import create_app
