"""Command line tool for serving and maintaining a chart repository."""

import argparse
import asyncio
import logging
import sys
import traceback

from chart_repo.exceptions import ChartRepoException

from . import get, push, serve

_LOGGER = logging.getLogger(__name__)


def _make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Command line utility for a chart repository with an index.yaml.",
    )
    parser.add_argument(
        "--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    )

    subparsers = parser.add_subparsers(dest="command", help="Command", required=True)

    serve.ServeAction.register(subparsers)
    push.PushAction.register(subparsers)
    get.GetAction.register(subparsers)
    return parser


def main(argv: list[str] | None = None) -> None:
    """Chart-repo command line tool main entry point."""
    parser = _make_parser()
    args = parser.parse_args(argv)

    if args.log_level:
        logging.basicConfig(level=args.log_level)

    action = args.cls()
    try:
        asyncio.run(action.run(**vars(args)))
    except ChartRepoException as err:
        if args.log_level == "DEBUG":
            traceback.print_exc(file=sys.stderr)
        print("chart-repo error: ", err, file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
