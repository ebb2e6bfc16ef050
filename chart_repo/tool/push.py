"""Chart-repo push action."""

import logging
import pathlib
from argparse import ArgumentParser, _SubParsersAction as SubParsersAction
from typing import cast

import aiofiles

from chart_repo.archive import ChartArchive
from chart_repo.exceptions import ChartRepoException

from .common import add_repository_flags, build_repository

_LOGGER = logging.getLogger(__name__)


class PushAction:
    """Add chart archives to a repository on local disk."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "push",
                help="Add chart archives to the repository",
                description=(
                    "Store chart archives in the repository directory and add "
                    "them to the index without running a server."
                ),
            ),
        )
        args.add_argument(
            "archives",
            type=pathlib.Path,
            nargs="+",
            help="Chart archive (.tgz) files to add",
        )
        add_repository_flags(args)
        args.set_defaults(cls=cls)
        return args

    async def run(  # type: ignore[no-untyped-def]
        self,
        archives: list[pathlib.Path],
        **kwargs,  # pylint: disable=unused-argument
    ) -> None:
        """Async Action implementation."""
        repository = build_repository(**kwargs)
        for path in archives:
            try:
                async with aiofiles.open(path, mode="rb") as archive_file:
                    content = await archive_file.read()
            except OSError as err:
                raise ChartRepoException(f"Unable to read {path}: {err}") from err
            archive = ChartArchive.parse(content)
            name = archive.descriptor.name
            version = archive.descriptor.version
            if await repository.update(archive):
                print(f"Pushed {name} {version} as {archive.file_name}")
            else:
                print(f"Skipped {name} {version}: already in index")
