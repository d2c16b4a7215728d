"""FastAPI server adapter for gh-reviewer.

Design intent:
- Keep webhook routing and workflow logic in `gh_reviewer.webhook` and `gh_reviewer.workflows`
- Keep HTTP concerns (signature check, status codes, response envelope) here
"""

from __future__ import annotations

__all__ = ["create_app"]

from gh_reviewer.server.app import create_app
