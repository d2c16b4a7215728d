"""gh-reviewer.

A GitHub App bot that reviews pull requests with a supervisor-agent workflow:
- webhook deliveries select a workflow (initial review or interactive assistant)
- a supervisor step picks which specialised agent runs next
- the final message of a run is posted back to the pull request
"""

__version__ = "0.1.0"

from gh_reviewer.config import BotSettings

__all__ = ["__version__", "BotSettings"]
