from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from vidcube.errors import StoreError
from vidcube.routes import router
from vidcube.settings import DEBUG_LISTING, HOST, LOG_FORMAT, LOG_LEVEL, PORT, PUBLIC_DIR
from vidcube.store import VideoStore

logger = logging.getLogger(__name__)


class SPAStaticFiles(StaticFiles):
    """StaticFiles that answers unknown paths with index.html."""

    async def get_response(self, path: str, scope):
        try:
            return await super().get_response(path, scope)
        except StarletteHTTPException as exc:
            if exc.status_code != 404:
                raise
        # Missing index.html falls through to the standard 404
        return await super().get_response("index.html", scope)


def debug_router(public_dir: Path) -> APIRouter:
    debug = APIRouter()

    @debug.get("/_ls")
    def list_public_dir():
        files = sorted(p.name for p in public_dir.iterdir()) if public_dir.is_dir() else []
        return {"publicDir": str(public_dir), "files": files}

    return debug


async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def create_app(
    public_dir: Path = PUBLIC_DIR,
    store: Optional[VideoStore] = None,
    debug_listing: bool = DEBUG_LISTING,
) -> FastAPI:
    app = FastAPI(title="VidCube")
    app.state.store = store if store is not None else VideoStore()
    app.add_exception_handler(StoreError, store_error_handler)

    # API first; the static mount at "/" catches everything else
    app.include_router(router)
    if debug_listing:
        app.include_router(debug_router(public_dir))

    if public_dir.is_dir():
        app.mount("/", SPAStaticFiles(directory=str(public_dir)), name="public")
    else:
        logger.warning("Public directory %s does not exist; only the API will answer", public_dir)
    return app


def configure_logging() -> None:
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)


def main(app: Optional[FastAPI] = None) -> None:
    import uvicorn

    configure_logging()
    logger.info("Serving %s on port %d", PUBLIC_DIR, PORT)
    uvicorn.run(app or create_app(), host=HOST, port=PORT)
