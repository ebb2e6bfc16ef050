"""Chart-repo serve action."""

import logging
from argparse import ArgumentParser, _SubParsersAction as SubParsersAction
from typing import cast

import uvicorn

from chart_repo.config import ServerConfig
from chart_repo.server import create_app

from .common import add_repository_flags, build_repository

_LOGGER = logging.getLogger(__name__)


class ServeAction:
    """Run the chart repository http server."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "serve",
                help="Run the chart repository server",
                description=(
                    "Serve chart downloads and accept chart uploads with POST "
                    "or PUT, maintaining index.yaml."
                ),
            ),
        )
        args.add_argument(
            "--host", default=ServerConfig.host, help="Address to listen on"
        )
        args.add_argument(
            "--port", type=int, default=ServerConfig.port, help="Port to listen on"
        )
        add_repository_flags(args)
        args.set_defaults(cls=cls)
        return args

    async def run(  # type: ignore[no-untyped-def]
        self,
        host: str,
        port: int,
        **kwargs,  # pylint: disable=unused-argument
    ) -> None:
        """Async Action implementation."""
        server_config = ServerConfig(host=host, port=port)
        repository = build_repository(**kwargs)
        if not repository.config.base_url:
            repository.config.base_url = (
                f"http://{server_config.host}:{server_config.port}/"
            )
        _LOGGER.info(
            "Serving charts on %s:%d with base url %s",
            server_config.host,
            server_config.port,
            repository.config.base_url,
        )
        server = uvicorn.Server(
            uvicorn.Config(
                create_app(repository),
                host=server_config.host,
                port=server_config.port,
                log_config=None,
            )
        )
        await server.serve()
