from gh_reviewer.github.client import (
    FileChange,
    GitHubClient,
    PullRequestComment,
    PullRequestDetails,
    ReviewComment,
)
from gh_reviewer.github.mentions import BotIdentity, should_exclude_file
from gh_reviewer.github.tools import GitHubToolkit

__all__ = [
    "BotIdentity",
    "FileChange",
    "GitHubClient",
    "GitHubToolkit",
    "PullRequestComment",
    "PullRequestDetails",
    "ReviewComment",
    "should_exclude_file",
]
