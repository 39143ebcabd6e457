"""FastAPI application entrypoint.

Run with `storeflow-api` (or `python -m storeflow.api.main`).
"""

from __future__ import annotations

import argparse
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storeflow.api.routes import config, floormap, health, heatmap, processing, stats, tracks
from storeflow.api.services.state import stop_engine

ROUTERS = (
    health.router,
    config.router,
    processing.router,
    tracks.router,
    heatmap.router,
    floormap.router,
    stats.router,
)


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    yield
    # Cancels the processing task and releases the video capture.
    stop_engine()


def create_app() -> FastAPI:
    application = FastAPI(title="StoreFlow Analytics API", version="0.1.0", lifespan=lifespan)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["*"],
    )
    for router in ROUTERS:
        application.include_router(router)
    return application


app = create_app()


def main() -> None:
    parser = argparse.ArgumentParser(description="Serve the StoreFlow analytics API")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--reload", action="store_true", help="Reload on code changes (dev only)")
    args = parser.parse_args()
    uvicorn.run("storeflow.api.main:app", host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
