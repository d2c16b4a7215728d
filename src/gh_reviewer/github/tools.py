"""Agent tools backed by the GitHub client."""

from __future__ import annotations

from pydantic import BaseModel, Field

from gh_reviewer.engine.tools import AgentTool
from gh_reviewer.github.client import GitHubClient, ReviewComment


class RepositoryArgs(BaseModel):
    owner: str = Field(min_length=1, description="Repository owner (user or organisation)")
    repo: str = Field(min_length=1, description="Repository name")


class PullRequestArgs(RepositoryArgs):
    pull_number: int = Field(gt=0, description="Pull request number")


class FileContentArgs(RepositoryArgs):
    path: str = Field(min_length=1, description="File path relative to the repository root")
    ref: str | None = Field(default=None, description="Branch, tag or commit sha")


class ReviewCommentArgs(PullRequestArgs):
    body: str = Field(min_length=1, description="Comment text (GitHub markdown)")
    path: str = Field(min_length=1, description="File the comment refers to")
    line: int | None = Field(default=None, gt=0, description="Line in the new version of the file")
    commit_id: str | None = Field(default=None, description="Commit to anchor the comment to")


class GitHubToolkit:
    """Builds the GitHub tools agents can be given."""

    def __init__(self, client: GitHubClient) -> None:
        self.client = client

    def get_pull_request(self) -> AgentTool[PullRequestArgs]:
        return AgentTool(
            name="get_pull_request",
            description="Get pull request details: title, description, author, branches, size.",
            args_model=PullRequestArgs,
            handler=lambda a: self.client.get_pull_request(
                owner=a.owner, repo=a.repo, pull_number=a.pull_number
            ),
        )

    def get_pull_request_files(self) -> AgentTool[PullRequestArgs]:
        return AgentTool(
            name="get_pull_request_files",
            description="List the files changed in a pull request, with per-file patches.",
            args_model=PullRequestArgs,
            handler=lambda a: self.client.get_pull_request_files(
                owner=a.owner, repo=a.repo, pull_number=a.pull_number
            ),
        )

    def get_file_content(self) -> AgentTool[FileContentArgs]:
        return AgentTool(
            name="get_file_content",
            description="Get the full text of a file in the repository at an optional ref.",
            args_model=FileContentArgs,
            handler=lambda a: self.client.get_file_content(
                owner=a.owner, repo=a.repo, path=a.path, ref=a.ref
            ),
        )

    def get_pull_request_diff(self) -> AgentTool[PullRequestArgs]:
        return AgentTool(
            name="get_pull_request_diff",
            description="Get the unified diff of a pull request.",
            args_model=PullRequestArgs,
            handler=lambda a: self.client.get_pull_request_diff(
                owner=a.owner, repo=a.repo, pull_number=a.pull_number
            ),
        )

    def get_pr_comments(self) -> AgentTool[PullRequestArgs]:
        return AgentTool(
            name="get_pr_comments",
            description="List the conversation comments on a pull request, oldest first.",
            args_model=PullRequestArgs,
            handler=lambda a: self.client.list_pr_comments(
                owner=a.owner, repo=a.repo, pull_number=a.pull_number
            ),
        )

    def create_review_comment(self) -> AgentTool[ReviewCommentArgs]:
        def _create(a: ReviewCommentArgs) -> str:
            self.client.create_review_comment(
                owner=a.owner,
                repo=a.repo,
                pull_number=a.pull_number,
                comment=ReviewComment(body=a.body, path=a.path, line=a.line),
                commit_id=a.commit_id,
            )
            return "Review comment created"

        return AgentTool(
            name="create_review_comment",
            description="Create a review comment on a specific line of a pull request.",
            args_model=ReviewCommentArgs,
            handler=_create,
        )

    def read_tools(self) -> tuple[AgentTool, ...]:
        """The tools needed to read a pull request."""

        return (
            self.get_pull_request(),
            self.get_pull_request_files(),
            self.get_file_content(),
            self.get_pull_request_diff(),
        )
