"""Recognising the bot in comments, and files not worth reviewing."""

from __future__ import annotations

import fnmatch
import re
from collections.abc import Iterable

GENERIC_HANDLES = ("ai-reviewer", "ai-code-reviewer")

DEFAULT_EXCLUDES = (
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    "poetry.lock",
    "uv.lock",
    "*.min.js",
    "*.min.css",
    "*.map",
    "dist/",
    "build/",
    "node_modules/",
    ".git/",
)


class BotIdentity:
    """The bot's GitHub login and the handles users may mention it by."""

    def __init__(self, username: str) -> None:
        self.username = username.strip()
        base = self.username.removesuffix("[bot]")
        handles = [self.username, base, *GENERIC_HANDLES]
        self.handles = tuple(dict.fromkeys(h for h in handles if h))

    def _mention_pattern(self, handle: str) -> str:
        return "@" + re.escape(handle) + r"(?![\w-])"

    def is_comment_from_bot(self, login: str) -> bool:
        login = login.strip()
        if login in (self.username, f"{self.username}[bot]"):
            return True
        return login.endswith("[bot]") or "github-actions" in login.lower()

    def is_bot_mentioned(self, body: str) -> bool:
        return any(
            re.search(self._mention_pattern(h), body, flags=re.IGNORECASE) for h in self.handles
        )

    def extract_command(self, body: str) -> str | None:
        """Text following the first mention of the bot, or None when there is none."""

        for handle in self.handles:
            match = re.search(
                self._mention_pattern(handle) + r"\s*(.*)", body, flags=re.IGNORECASE | re.DOTALL
            )
            if match is None:
                continue
            text = re.sub(r"\n\s*\n", "\n", match.group(1)).strip()
            return text or None
        return None


def should_exclude_file(filename: str, extra_patterns: Iterable[str] = ()) -> bool:
    """Lock files, build output and minified assets are skipped.

    Patterns with `*` are globs matched against the path and its basename; other
    patterns match as substrings.
    """

    basename = filename.rsplit("/", 1)[-1]
    for pattern in (*DEFAULT_EXCLUDES, *extra_patterns):
        if "*" in pattern:
            if fnmatch.fnmatch(filename, pattern) or fnmatch.fnmatch(basename, pattern):
                return True
        elif pattern in filename:
            return True
    return False
