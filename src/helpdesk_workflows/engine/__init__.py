"""Engine components.

- Settings loaded from .env
- Structured logging
- The `workflows` CLI
- The pure workflow engine (`workflow` subpackage) and an in-memory registry
"""
