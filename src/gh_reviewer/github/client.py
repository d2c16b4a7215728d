"""GitHub REST client used by the bot.

Installation tokens are minted with PyGithub's GitHub App support; everything
else goes through a `requests` session so responses can be parsed into small
dataclasses and tests can inject a fake session.
"""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from typing import Any, Literal

import requests
from github import Auth, GithubIntegration

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.github.com"
USER_AGENT = "gh-reviewer/0.1.0"

Side = Literal["LEFT", "RIGHT"]


@dataclass(frozen=True, slots=True)
class PullRequestDetails:
    number: int
    title: str
    body: str
    author: str
    state: str
    draft: bool
    mergeable: bool | None

    base_ref: str
    base_sha: str
    head_ref: str
    head_sha: str

    additions: int
    deletions: int
    changed_files: int


@dataclass(frozen=True, slots=True)
class FileChange:
    filename: str
    status: str
    additions: int
    deletions: int
    changes: int
    blob_url: str
    contents_url: str
    patch: str | None = None


@dataclass(frozen=True, slots=True)
class ReviewComment:
    """A comment anchored to a line of the diff."""

    body: str
    path: str
    line: int | None = None
    side: Side | None = None
    start_line: int | None = None
    start_side: Side | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"body": self.body, "path": self.path}
        for key in ("line", "side", "start_line", "start_side"):
            value = getattr(self, key)
            if value is not None:
                payload[key] = value
        return payload


@dataclass(frozen=True, slots=True)
class PullRequestComment:
    id: int
    author: str
    body: str
    created_at: str | None
    html_url: str | None


class GitHubClient:
    """Thin wrapper over the GitHub REST endpoints the bot needs."""

    def __init__(
        self,
        *,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        session: requests.Session | None = None,
    ) -> None:
        if not token:
            raise ValueError("GitHub token is required")

        self._rest_base_url = base_url.rstrip("/")
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
                "User-Agent": USER_AGENT,
            }
        )

    @classmethod
    def for_installation(
        cls,
        *,
        app_id: str,
        private_key: str,
        installation_id: int,
        base_url: str = DEFAULT_BASE_URL,
        integration: GithubIntegration | None = None,
    ) -> GitHubClient:
        """Authenticate as a GitHub App installation.

        The returned client holds an installation token, which GitHub expires
        after one hour.
        """

        if not app_id or not private_key:
            raise ValueError("GitHub App id and private key are required")

        integration = integration or GithubIntegration(
            auth=Auth.AppAuth(int(app_id), private_key), base_url=base_url.rstrip("/")
        )
        access = integration.get_access_token(installation_id)
        logger.info(
            "Authenticated as GitHub App installation",
            extra={"installation_id": installation_id, "expires_at": str(access.expires_at)},
        )
        return cls(token=access.token, base_url=base_url)

    def _repo_url(self, *, owner: str, repo: str, path: str = "") -> str:
        url = f"{self._rest_base_url}/repos/{owner.strip('/')}/{repo.strip('/')}"
        path = path.lstrip("/")
        return f"{url}/{path}" if path else url

    def _pulls_url(self, *, owner: str, repo: str, pull_number: int, suffix: str = "") -> str:
        if pull_number <= 0:
            raise ValueError("pull_number must be a positive integer")
        return self._repo_url(owner=owner, repo=repo, path=f"pulls/{pull_number}{suffix}")

    def _issues_url(self, *, owner: str, repo: str, issue_number: int, suffix: str = "") -> str:
        if issue_number <= 0:
            raise ValueError("issue_number must be a positive integer")
        return self._repo_url(owner=owner, repo=repo, path=f"issues/{issue_number}{suffix}")

    def _get_paginated_json_list(self, url: str) -> list[dict[str, Any]]:
        """Fetch a REST endpoint that returns a JSON list, up to 30 pages of 100 items."""

        items: list[dict[str, Any]] = []
        per_page = 100
        for page in range(1, 31):
            resp = self._session.get(
                url,
                params={"per_page": per_page, "page": page},
                timeout=30,
            )
            resp.raise_for_status()
            payload = resp.json()
            if not isinstance(payload, list):
                break

            items.extend(p for p in payload if isinstance(p, dict))

            if len(payload) < per_page:
                break
        return items

    @staticmethod
    def _safe_login(value: object) -> str:
        if isinstance(value, dict):
            login = value.get("login")
            if isinstance(login, str) and login.strip():
                return login
        return "unknown"

    @staticmethod
    def _parse_pull_request_json(data: dict[str, Any]) -> PullRequestDetails:
        number = data.get("number")
        if not isinstance(number, int) or number <= 0:
            raise ValueError("Invalid pull request response: missing number")

        head = data.get("head")
        base = data.get("base")
        if not isinstance(head, dict) or not isinstance(base, dict):
            raise ValueError("Invalid pull request response: missing head/base")

        mergeable = data.get("mergeable")
        return PullRequestDetails(
            number=number,
            title=str(data.get("title") or ""),
            body=str(data.get("body") or ""),
            author=GitHubClient._safe_login(data.get("user")),
            state=str(data.get("state") or ""),
            draft=bool(data.get("draft")),
            mergeable=mergeable if isinstance(mergeable, bool) else None,
            base_ref=str(base.get("ref") or ""),
            base_sha=str(base.get("sha") or ""),
            head_ref=str(head.get("ref") or ""),
            head_sha=str(head.get("sha") or ""),
            additions=int(data.get("additions") or 0),
            deletions=int(data.get("deletions") or 0),
            changed_files=int(data.get("changed_files") or 0),
        )

    def get_pull_request(self, *, owner: str, repo: str, pull_number: int) -> PullRequestDetails:
        url = self._pulls_url(owner=owner, repo=repo, pull_number=pull_number)
        resp = self._session.get(url, timeout=30)
        resp.raise_for_status()
        pr = self._parse_pull_request_json(resp.json())
        logger.debug(
            "Pull request fetched",
            extra={"repo": f"{owner}/{repo}", "pull_number": pr.number, "state": pr.state},
        )
        return pr

    def get_pull_request_files(
        self, *, owner: str, repo: str, pull_number: int
    ) -> list[FileChange]:
        url = self._pulls_url(owner=owner, repo=repo, pull_number=pull_number, suffix="/files")
        files: list[FileChange] = []
        for item in self._get_paginated_json_list(url):
            filename = item.get("filename")
            if not isinstance(filename, str) or not filename:
                continue
            patch = item.get("patch")
            files.append(
                FileChange(
                    filename=filename,
                    status=str(item.get("status") or ""),
                    additions=int(item.get("additions") or 0),
                    deletions=int(item.get("deletions") or 0),
                    changes=int(item.get("changes") or 0),
                    blob_url=str(item.get("blob_url") or ""),
                    contents_url=str(item.get("contents_url") or ""),
                    patch=patch if isinstance(patch, str) else None,
                )
            )
        return files

    def get_file_content(
        self, *, owner: str, repo: str, path: str, ref: str | None = None
    ) -> str:
        """Return the text of a file at `ref` (default branch when omitted).

        Raises:
            FileNotFoundError: if the path does not exist.
            IsADirectoryError: if the path is a directory.
        """

        url = self._repo_url(owner=owner, repo=repo, path=f"contents/{path.lstrip('/')}")
        params = {"ref": ref} if ref and ref.strip() else None
        resp = self._session.get(url, params=params, timeout=30)
        if resp.status_code == 404:
            raise FileNotFoundError(f"File not found: {path}")
        resp.raise_for_status()

        data = resp.json()
        if isinstance(data, list) or data.get("type") == "dir":
            raise IsADirectoryError(f"{path} is a directory")

        content = data.get("content")
        if not isinstance(content, str):
            raise ValueError(f"No content returned for {path}")
        if data.get("encoding") == "base64":
            return base64.b64decode(content.encode("utf-8")).decode("utf-8", errors="replace")
        return content

    def get_pull_request_diff(self, *, owner: str, repo: str, pull_number: int) -> str:
        url = self._pulls_url(owner=owner, repo=repo, pull_number=pull_number)
        resp = self._session.get(
            url, headers={"Accept": "application/vnd.github.diff"}, timeout=60
        )
        resp.raise_for_status()
        return resp.text

    def create_review_comment(
        self,
        *,
        owner: str,
        repo: str,
        pull_number: int,
        comment: ReviewComment,
        commit_id: str | None = None,
    ) -> int:
        """Comment on a line of the diff. Uses the PR head commit unless `commit_id` is given."""

        if not commit_id:
            commit_id = self.get_pull_request(
                owner=owner, repo=repo, pull_number=pull_number
            ).head_sha

        url = self._pulls_url(owner=owner, repo=repo, pull_number=pull_number, suffix="/comments")
        resp = self._session.post(
            url, json={**comment.to_payload(), "commit_id": commit_id}, timeout=30
        )
        resp.raise_for_status()
        comment_id = int(resp.json().get("id") or 0)
        logger.info(
            "Review comment created",
            extra={
                "repo": f"{owner}/{repo}",
                "pull_number": pull_number,
                "path": comment.path,
                "commit_id": commit_id,
            },
        )
        return comment_id

    def create_pr_comment(self, *, owner: str, repo: str, pull_number: int, body: str) -> int:
        url = self._issues_url(
            owner=owner, repo=repo, issue_number=pull_number, suffix="/comments"
        )
        resp = self._session.post(url, json={"body": body}, timeout=30)
        resp.raise_for_status()
        data: dict[str, Any] = resp.json()
        comment_id = int(data.get("id") or 0)
        logger.info(
            "PR comment created",
            extra={
                "repo": f"{owner}/{repo}",
                "pull_number": pull_number,
                "comment_id": comment_id,
                "author": self._safe_login(data.get("user")),
            },
        )
        return comment_id

    def list_pr_comments(
        self, *, owner: str, repo: str, pull_number: int
    ) -> list[PullRequestComment]:
        url = self._issues_url(
            owner=owner, repo=repo, issue_number=pull_number, suffix="/comments"
        )
        comments: list[PullRequestComment] = []
        for item in self._get_paginated_json_list(url):
            created_at = item.get("created_at")
            html_url = item.get("html_url")
            comments.append(
                PullRequestComment(
                    id=int(item.get("id") or 0),
                    author=self._safe_login(item.get("user")),
                    body=str(item.get("body") or ""),
                    created_at=created_at if isinstance(created_at, str) else None,
                    html_url=html_url if isinstance(html_url, str) else None,
                )
            )
        return comments

    def close(self) -> None:
        self._session.close()
