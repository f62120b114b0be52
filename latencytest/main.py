import logging
import os
import sys
from pathlib import Path
from typing import Optional

import uvicorn
from fastapi import APIRouter, BackgroundTasks, FastAPI, Request
from fastapi.responses import PlainTextResponse, Response, StreamingResponse
from fastapi.concurrency import run_in_threadpool

from latencytest.config import parse_args
from latencytest.metrics import LoadtestMetrics
from latencytest.middleware import InstrumentMiddleware, counted
from latencytest.sniff import SNIFF_LEN, detect_content_type

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"
DEFAULT_ASSET = STATIC_DIR / "image.jpg"
GREETING = "Hello from loadtest application."
CHUNK_SIZE = 64 * 1024
METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

router = APIRouter()


def _iter_file(f):
    with f:
        while True:
            chunk = f.read(CHUNK_SIZE)
            if not chunk:
                break
            yield chunk


def _inspect(f):
    """Sniff the content type and size, leaving the cursor at the start."""
    head = f.read(SNIFF_LEN)
    size = os.fstat(f.fileno()).st_size
    f.seek(0)
    return detect_content_type(head), size


@router.api_route("/file", methods=METHODS)
@counted
async def file_handler(request: Request):
    path = request.app.state.asset_path
    try:
        f = await run_in_threadpool(open, path, "rb")
    except OSError as e:
        logger.error("%s", e)
        return Response(status_code=404)
    try:
        content_type, size = await run_in_threadpool(_inspect, f)
    except OSError as e:
        f.close()
        logger.error("reading %s: %s", path, e)
        return Response(status_code=500)
    # closes the handle even if the body is never iterated
    cleanup = BackgroundTasks()
    cleanup.add_task(f.close)
    return StreamingResponse(
        _iter_file(f), media_type=content_type,
        headers={"Content-Length": str(size)}, background=cleanup,
    )


@router.api_route("/metrics", methods=METHODS)
@counted
async def metrics_handler(request: Request):
    payload, content_type = request.app.state.metrics.render()
    return Response(payload, media_type=content_type)


@router.api_route("/{rest:path}", methods=METHODS)
@counted
async def root_handler(request: Request):
    return PlainTextResponse(GREETING)


def create_app(metrics: Optional[LoadtestMetrics] = None, asset_path: Path = DEFAULT_ASSET) -> FastAPI:
    # no docs routes: they would shadow the catch-all
    app = FastAPI(title="latencytest", docs_url=None, redoc_url=None, openapi_url=None)
    app.state.metrics = metrics if metrics is not None else LoadtestMetrics()
    app.state.asset_path = Path(asset_path)
    app.include_router(router)
    for path in ("/", "/file", "/metrics"):
        logger.info("Registering %s handler", path)
    app.add_middleware(InstrumentMiddleware)
    return app


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO)

    if not STATIC_DIR.is_dir():
        logger.error("static assets missing: %s", STATIC_DIR)
        sys.exit(1)

    app = create_app()
    logger.info("Starting server on %s:%d", args.bind.host, args.bind.port)
    uvicorn.run(app, host=args.bind.host, port=args.bind.port)
