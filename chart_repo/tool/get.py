"""Chart-repo get action."""

import logging
from argparse import ArgumentParser, _SubParsersAction as SubParsersAction
from typing import Any, cast

from chart_repo.index import format_time

from .common import add_storage_flags, build_repository
from .format import JsonFormatter, PrintFormatter, YamlFormatter

_LOGGER = logging.getLogger(__name__)


class GetAction:
    """Get details about the charts in the index."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "get",
                aliases=["charts"],
                help="Print the charts in the index",
                description="Print information about the chart versions in the index",
            ),
        )
        args.add_argument(
            "chart",
            nargs="?",
            default=None,
            help="Only print versions of this chart",
        )
        args.add_argument(
            "--output",
            "-o",
            choices=["wide", "yaml", "json"],
            default=None,
            help="Output format of the command",
        )
        add_storage_flags(args)
        args.set_defaults(cls=cls)
        return args

    async def run(  # type: ignore[no-untyped-def]
        self,
        chart: str | None,
        output: str | None,
        **kwargs,  # pylint: disable=unused-argument
    ) -> None:
        """Async Action implementation."""
        repository = build_repository(**kwargs)
        catalog = await repository.read_catalog()
        entries = catalog.entries if catalog else {}
        if chart is not None:
            entries = {chart: entries[chart]} if chart in entries else {}

        if output in ("yaml", "json"):
            data = {
                name: [record.model_dump() for record in records]
                for name, records in entries.items()
            }
            if output == "yaml":
                YamlFormatter().print(data)
            else:
                JsonFormatter().print(data)
            return

        results: list[dict[str, Any]] = []
        cols = ["name", "version", "created"]
        if output == "wide":
            cols.extend(["digest", "urls"])
        for records in entries.values():
            for record in records:
                results.append(
                    {
                        "name": record.name,
                        "version": record.version,
                        "created": format_time(record.created),
                        "digest": record.digest or "",
                        "urls": ",".join(record.urls),
                    }
                )

        if not results:
            print(f"No charts found{f' named {chart}' if chart else ''}")
            return

        PrintFormatter(cols).print(results)
