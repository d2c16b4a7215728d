from __future__ import annotations

import base64
from typing import Any
from unittest.mock import Mock

import pytest

from gh_reviewer.github.client import GitHubClient, ReviewComment

PR_JSON: dict[str, Any] = {
    "number": 7,
    "title": "Add retry",
    "body": None,
    "user": {"login": "octocat"},
    "state": "open",
    "draft": False,
    "mergeable": True,
    "head": {"ref": "feature", "sha": "abc123"},
    "base": {"ref": "main", "sha": "def456"},
    "additions": 10,
    "deletions": 2,
    "changed_files": 1,
}


def _response(payload: Any = None, *, status_code: int = 200, text: str = "") -> Mock:
    resp = Mock()
    resp.status_code = status_code
    resp.json.return_value = payload
    resp.text = text
    return resp


def _client(session: Mock) -> GitHubClient:
    session.headers = {}
    return GitHubClient(token="t0ken", base_url="https://api.github.com/", session=session)


def test_requires_token() -> None:
    with pytest.raises(ValueError):
        GitHubClient(token="", session=Mock())


def test_session_headers() -> None:
    session = Mock()
    _client(session)

    assert session.headers["Authorization"] == "Bearer t0ken"
    assert session.headers["Accept"] == "application/vnd.github+json"
    assert session.headers["User-Agent"].startswith("gh-reviewer/")


def test_get_pull_request_parses_response() -> None:
    session = Mock()
    session.get.return_value = _response(PR_JSON)

    pr = _client(session).get_pull_request(owner="acme", repo="widgets", pull_number=7)

    assert session.get.call_args.args[0] == "https://api.github.com/repos/acme/widgets/pulls/7"
    assert pr.title == "Add retry"
    assert pr.body == ""
    assert pr.author == "octocat"
    assert pr.head_sha == "abc123"
    assert pr.base_ref == "main"
    assert pr.mergeable is True


def test_get_pull_request_rejects_bad_number() -> None:
    with pytest.raises(ValueError, match="positive"):
        _client(Mock()).get_pull_request(owner="acme", repo="widgets", pull_number=0)


def test_files_are_paginated_and_filtered() -> None:
    first_page = [
        {"filename": f"f{i}.py", "status": "modified", "additions": 1, "patch": "@@"}
        for i in range(100)
    ]
    second_page = [{"filename": "last.py", "status": "added"}, {"status": "broken"}]
    session = Mock()
    session.get.side_effect = [_response(first_page), _response(second_page)]

    files = _client(session).get_pull_request_files(owner="acme", repo="widgets", pull_number=7)

    assert len(files) == 101
    assert files[0].patch == "@@"
    assert files[-1].filename == "last.py"
    assert files[-1].patch is None
    pages = [c.kwargs["params"]["page"] for c in session.get.call_args_list]
    assert pages == [1, 2]


def test_get_file_content_decodes_base64() -> None:
    encoded = base64.b64encode(b"print('hi')\n").decode()
    session = Mock()
    session.get.return_value = _response({"type": "file", "encoding": "base64", "content": encoded})

    text = _client(session).get_file_content(
        owner="acme", repo="widgets", path="/src/app.py", ref="feature"
    )

    assert text == "print('hi')\n"
    assert session.get.call_args.args[0].endswith("/contents/src/app.py")
    assert session.get.call_args.kwargs["params"] == {"ref": "feature"}


def test_get_file_content_missing_and_directory() -> None:
    session = Mock()
    session.get.side_effect = [_response(status_code=404), _response([{"name": "a.py"}])]
    client = _client(session)

    with pytest.raises(FileNotFoundError):
        client.get_file_content(owner="acme", repo="widgets", path="nope.py")
    with pytest.raises(IsADirectoryError):
        client.get_file_content(owner="acme", repo="widgets", path="src")


def test_get_pull_request_diff_requests_diff_media_type() -> None:
    session = Mock()
    session.get.return_value = _response(text="diff --git a/x b/x")

    diff = _client(session).get_pull_request_diff(owner="acme", repo="widgets", pull_number=7)

    assert diff == "diff --git a/x b/x"
    assert session.get.call_args.kwargs["headers"] == {"Accept": "application/vnd.github.diff"}


def test_create_review_comment_anchors_to_head_commit() -> None:
    session = Mock()
    session.get.return_value = _response(PR_JSON)
    session.post.return_value = _response({"id": 555})

    comment_id = _client(session).create_review_comment(
        owner="acme",
        repo="widgets",
        pull_number=7,
        comment=ReviewComment(body="Use a constant", path="app.py", line=3),
    )

    assert comment_id == 555
    url = session.post.call_args.args[0]
    assert url == "https://api.github.com/repos/acme/widgets/pulls/7/comments"
    assert session.post.call_args.kwargs["json"] == {
        "body": "Use a constant",
        "path": "app.py",
        "line": 3,
        "commit_id": "abc123",
    }


def test_create_review_comment_with_explicit_commit_skips_lookup() -> None:
    session = Mock()
    session.post.return_value = _response({"id": 1})

    _client(session).create_review_comment(
        owner="acme",
        repo="widgets",
        pull_number=7,
        comment=ReviewComment(body="x", path="a.py"),
        commit_id="fff",
    )

    session.get.assert_not_called()
    assert session.post.call_args.kwargs["json"]["commit_id"] == "fff"


def test_create_pr_comment_posts_to_issue_comments() -> None:
    session = Mock()
    session.post.return_value = _response({"id": 9, "user": {"login": "review-helper[bot]"}})

    comment_id = _client(session).create_pr_comment(
        owner="acme", repo="widgets", pull_number=7, body="Looks good"
    )

    assert comment_id == 9
    assert session.post.call_args.args[0].endswith("/repos/acme/widgets/issues/7/comments")
    assert session.post.call_args.kwargs["json"] == {"body": "Looks good"}


def test_list_pr_comments() -> None:
    session = Mock()
    session.get.return_value = _response(
        [
            {
                "id": 1,
                "user": {"login": "octocat"},
                "body": "@review-helper why?",
                "created_at": "2025-01-01T00:00:00Z",
                "html_url": "https://github.com/acme/widgets/pull/7#issuecomment-1",
            },
            {"id": 2, "user": None, "body": None},
        ]
    )

    comments = _client(session).list_pr_comments(owner="acme", repo="widgets", pull_number=7)

    assert [c.author for c in comments] == ["octocat", "unknown"]
    assert comments[1].body == ""
    assert comments[1].created_at is None


def test_for_installation_uses_installation_token(private_key_file) -> None:
    integration = Mock()
    integration.get_access_token.return_value = Mock(token="inst-token", expires_at=None)

    client = GitHubClient.for_installation(
        app_id="12345",
        private_key=private_key_file.read_text(),
        installation_id=42,
        integration=integration,
    )

    integration.get_access_token.assert_called_once_with(42)
    assert client._session.headers["Authorization"] == "Bearer inst-token"
    client.close()
