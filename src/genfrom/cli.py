"""Command line interface for gen-from."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .config import load_context
from .errors import ConfigurationError
from .fetcher import GitHubFetcher, RemoteFetcher
from .pipeline import Pipeline, RunResult, RunState
from .prompter import Prompter, RichPrompter
from .reporting import ConsoleReporter, Reporter

LOGGER = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gen-from",
        description="Generate a project from a GitHub template repository",
    )
    parser.add_argument(
        "template",
        nargs="?",
        help="Template name, or owner/repo[#ref] of any repository on the forge",
    )
    parser.add_argument(
        "--here",
        action="store_true",
        help="Generate into the current directory instead of a new directory named after the project",
    )
    parser.add_argument(
        "--config-dir",
        type=Path,
        help="Directory holding templates.json, placeholders.json and an optional settings.json",
    )
    parser.add_argument("--verbose", action="store_true", help="Log debugging information to stderr")
    parser.add_argument("-v", "--version", action="store_true", help="Print the version and exit")
    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def exit_code(result: RunResult) -> int:
    """Map a run outcome to a process exit status; cancelling is not an error."""

    if result.state is RunState.FAILED:
        return 1
    return 0


def main(
    argv: Sequence[str] | None = None,
    *,
    prompter: Prompter | None = None,
    fetcher: RemoteFetcher | None = None,
    reporter: Reporter | None = None,
) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return 0

    configure_logging(args.verbose)
    reporter = reporter or ConsoleReporter()
    reporter.banner(__version__)

    try:
        context = load_context(args.config_dir)
    except ConfigurationError as exc:
        reporter.failed("configuration", str(exc))
        return 1

    owned_fetcher = fetcher is None
    fetcher = fetcher or GitHubFetcher()
    try:
        pipeline = Pipeline(context, prompter or RichPrompter(), fetcher, reporter)
        result = pipeline.run(args.template, here=args.here)
    finally:
        if owned_fetcher and isinstance(fetcher, GitHubFetcher):
            fetcher.close()

    LOGGER.debug("run finished in state %s", result.state.value)
    return exit_code(result)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
