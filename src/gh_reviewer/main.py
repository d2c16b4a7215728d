"""CLI entrypoint: run the webhook server, or run a workflow against one pull request."""

from __future__ import annotations

import argparse
import logging
import sys

from pydantic import ValidationError

from gh_reviewer import __version__
from gh_reviewer.config import BotSettings
from gh_reviewer.engine.errors import OrchestrationError
from gh_reviewer.engine.state import message_text
from gh_reviewer.logging import configure_logging
from gh_reviewer.prompts.loader import PromptLoadError
from gh_reviewer.webhook.registry import ServiceBundle, default_bundle_factory
from gh_reviewer.workflows.interactive import InteractiveContext

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_RUN_FAILED = 1
EXIT_CONFIG_ERROR = 2


def _parse_repository(value: str) -> tuple[str, str]:
    owner, sep, repo = value.strip().strip("/").partition("/")
    if not sep or not owner or not repo or "/" in repo:
        raise argparse.ArgumentTypeError("expected 'owner/repo'")
    return owner, repo


def _add_target_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--repo",
        "--repository",
        dest="repository",
        type=_parse_repository,
        required=True,
        help="Target repository in the form 'owner/repo'",
    )
    parser.add_argument("--pr", dest="pull_number", type=int, required=True, help="PR number")
    parser.add_argument(
        "--installation-id",
        type=int,
        required=True,
        help="GitHub App installation id for the repository",
    )
    parser.add_argument(
        "--post",
        action="store_true",
        help="Post the result as a PR comment instead of only printing it",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gh-reviewer",
        description="GitHub App that reviews pull requests with a team of LLM agents",
    )
    parser.add_argument("--version", action="version", version=f"gh-reviewer {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the webhook server")
    serve.add_argument("--host", default=None, help="Bind address (default: HOST)")
    serve.add_argument("--port", type=int, default=None, help="Bind port (default: PORT)")

    review = subparsers.add_parser("review", help="Review a pull request")
    _add_target_arguments(review)

    ask = subparsers.add_parser("ask", help="Ask the assistant a question about a pull request")
    _add_target_arguments(ask)
    ask.add_argument("--question", required=True, help="The question to ask")
    ask.add_argument(
        "--file", dest="specific_file", default=None, help="File the question is about"
    )
    ask.add_argument("--line", dest="line_number", type=int, default=None, help="Line in --file")

    return parser


def _serve(settings: BotSettings, args: argparse.Namespace) -> int:
    import uvicorn

    from gh_reviewer.server.app import create_app

    missing = settings.missing_github_app_settings()
    if missing:
        logger.warning(
            "GitHub App configuration is incomplete; webhooks will be rejected",
            extra={"missing": missing},
        )
    uvicorn.run(
        create_app(settings),
        host=args.host or settings.host,
        port=args.port or settings.port,
        log_config=None,
    )
    return EXIT_OK


def _run_once(settings: BotSettings, args: argparse.Namespace) -> int:
    # The webhook secret is only needed by the server.
    missing = [
        name
        for name in settings.missing_github_app_settings()
        if name != "GITHUB_WEBHOOK_SECRET"
    ]
    if missing:
        logger.error("GitHub App configuration is incomplete", extra={"missing": missing})
        return EXIT_CONFIG_ERROR

    owner, repo = args.repository
    number: int = args.pull_number
    try:
        bundle: ServiceBundle = default_bundle_factory(settings)(args.installation_id)
    except (PromptLoadError, ValueError, OSError) as e:
        logger.error("Could not set up services", extra={"error": str(e)})
        return EXIT_CONFIG_ERROR

    try:
        if args.command == "review":
            final = bundle.review.execute(owner, repo, number)
        else:
            context = InteractiveContext(
                kind="question",
                user_query=args.question,
                specific_file=args.specific_file,
                line_number=args.line_number,
            )
            final = bundle.assistant.execute(owner, repo, number, context)

        text = message_text(final).strip()
        print(text)
        if args.post and text:
            bundle.github.create_pr_comment(owner=owner, repo=repo, pull_number=number, body=text)
            logger.info("Result posted", extra={"repo": f"{owner}/{repo}", "pull_number": number})
    except OrchestrationError as e:
        logger.error(
            "Workflow run failed",
            extra={"repo": f"{owner}/{repo}", "pull_number": number, "error": str(e)},
        )
        return EXIT_RUN_FAILED
    finally:
        bundle.github.close()
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = BotSettings()
    except ValidationError as e:
        # Logging is not configured yet; keep it simple.
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    configure_logging(settings.log_level)

    if args.command == "serve":
        return _serve(settings, args)
    return _run_once(settings, args)


if __name__ == "__main__":
    raise SystemExit(main())
