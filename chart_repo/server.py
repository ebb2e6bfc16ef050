"""HTTP application serving a chart repository.

- `POST` or `PUT` with a chart archive as the request body uploads the chart
  and adds it to the index. The request path is ignored.
- `GET` of any path returns the stored value with that key, e.g. `/index.yaml`
  or `/tomcat-0.4.1.tgz`.
- Any other method is rejected with 405.
"""

import logging
from pathlib import PurePosixPath

from fastapi import FastAPI, HTTPException, Request, Response, status
from fastapi.responses import PlainTextResponse

from .exceptions import (
    ArchiveError,
    ChartRepoException,
    CorruptCatalogError,
    InvalidKeyError,
    KeyNotFoundError,
    LockTimeoutError,
    StoreUnreachableError,
)
from .repository import ChartRepository

__all__ = [
    "create_app",
]

_LOGGER = logging.getLogger(__name__)

# Checked in order, the first matching class determines the response status
_ERROR_STATUS: list[tuple[type[ChartRepoException], int]] = [
    (ArchiveError, status.HTTP_400_BAD_REQUEST),
    (LockTimeoutError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (StoreUnreachableError, status.HTTP_502_BAD_GATEWAY),
    (CorruptCatalogError, status.HTTP_500_INTERNAL_SERVER_ERROR),
]

_MEDIA_TYPES = {
    ".yaml": "application/x-yaml",
    ".tgz": "application/gzip",
}


def error_status(err: ChartRepoException) -> int:
    """Return the http status code for a failed upload."""
    for cls, code in _ERROR_STATUS:
        if isinstance(err, cls):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def create_app(repository: ChartRepository) -> FastAPI:
    """Create the http application for the repository."""
    app = FastAPI(
        title="chart-repo",
        description="Chart repository that maintains index.yaml on upload.",
    )
    app.state.repository = repository

    @app.exception_handler(ChartRepoException)
    async def handle_error(request: Request, err: Exception) -> Response:
        assert isinstance(err, ChartRepoException)
        code = error_status(err)
        if code >= 500:
            _LOGGER.error("%s %s failed: %s", request.method, request.url.path, err)
        else:
            _LOGGER.info("%s %s rejected: %s", request.method, request.url.path, err)
        return PlainTextResponse(str(err), status_code=code)

    @app.api_route("/{path:path}", methods=["POST", "PUT"])
    async def upload(request: Request) -> Response:
        """Upload a chart archive."""
        content = await request.body()
        archive = await repository.upload(content)
        _LOGGER.debug("Upload of %s complete", archive.file_name)
        return Response(status_code=status.HTTP_200_OK)

    @app.get("/{path:path}")
    async def download(path: str) -> Response:
        """Download a stored index or chart archive."""
        if not path:
            raise HTTPException(status_code=404, detail="Not found")
        try:
            content = await repository.storage.get(path)
        except (KeyNotFoundError, InvalidKeyError) as err:
            raise HTTPException(status_code=404, detail="Not found") from err
        media_type = _MEDIA_TYPES.get(
            PurePosixPath(path).suffix, "application/octet-stream"
        )
        return Response(content=content, media_type=media_type)

    return app
