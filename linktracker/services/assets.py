"""Static asset server used for dashboard files and non-slug paths."""

import structlog
from starlette.exceptions import HTTPException
from starlette.requests import Request
from starlette.responses import Response
from starlette.staticfiles import StaticFiles

logger = structlog.get_logger()


class StaticAssetServer:
    """Serve files from a single directory.

    The directory does not need to exist: a deployment without a bundled
    dashboard simply answers 404 for every asset path.
    """

    def __init__(self, directory: str):
        self.directory = directory
        self._files = StaticFiles(directory=directory, check_dir=False)

    async def serve(self, path: str, request: Request) -> Response:
        """Return the file at ``path`` or raise HTTPException 404."""
        try:
            return await self._files.get_response(path, request.scope)
        except HTTPException as e:
            logger.debug("Asset not served", path=path, status_code=e.status_code)
            raise
