"""FastAPI read API over the launch collection."""

import logging
from contextlib import asynccontextmanager
from typing import Any

from bson import ObjectId
from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware

from launchvault import __version__
from launchvault.config import Settings, get_settings
from launchvault.exceptions import LaunchNotFoundError
from launchvault.observability import instrument_app
from launchvault.services.launches import LaunchQueryService
from launchvault.storage import MongoStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v3/launches", tags=["Launches"])


def get_launch_service(request: Request) -> LaunchQueryService:
    service = getattr(request.app.state, "launch_service", None)
    if service is None:
        raise HTTPException(status_code=503, detail="Launch store not ready")
    return service


def _encode(data: Any) -> Any:
    """JSON-safe body; `_id` is only present when the client asked for it."""
    return jsonable_encoder(data, custom_encoder={ObjectId: str})


def _not_found(e: LaunchNotFoundError) -> HTTPException:
    logger.debug(f"404: {e}")
    return HTTPException(status_code=404, detail="Not Found")


@router.get("")
async def all_launches(
    request: Request, service: LaunchQueryService = Depends(get_launch_service)
):
    """All past and upcoming launches filtered by query string."""
    return _encode(await service.all(request.query_params))


@router.get("/latest")
async def latest_launch(
    request: Request, service: LaunchQueryService = Depends(get_launch_service)
):
    """Most recent launch."""
    try:
        return _encode(await service.latest(request.query_params))
    except LaunchNotFoundError as e:
        raise _not_found(e)


@router.get("/next")
async def next_launch(
    request: Request, service: LaunchQueryService = Depends(get_launch_service)
):
    """Next upcoming launch."""
    try:
        return _encode(await service.next(request.query_params))
    except LaunchNotFoundError as e:
        raise _not_found(e)


@router.get("/past")
async def past_launches(
    request: Request, service: LaunchQueryService = Depends(get_launch_service)
):
    return _encode(await service.past(request.query_params))


@router.get("/upcoming")
async def upcoming_launches(
    request: Request, service: LaunchQueryService = Depends(get_launch_service)
):
    return _encode(await service.upcoming(request.query_params))


@router.get("/{flight_number}")
async def one_launch(
    flight_number: str,
    request: Request,
    service: LaunchQueryService = Depends(get_launch_service),
):
    """One launch by flight number."""
    try:
        return _encode(await service.one(flight_number, request.query_params))
    except LaunchNotFoundError as e:
        raise _not_found(e)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the app; MongoDB is connected in the lifespan, not here."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store = MongoStore(
            settings.mongo_url,
            settings.mongo_database,
            settings.mongo_collection,
            timeout_ms=settings.mongo_timeout_ms,
        )
        await store.connect()
        app.state.store = store
        app.state.launch_service = LaunchQueryService(store.launches, settings.query)
        logger.info("launchvault API startup complete")

        yield

        logger.info("Shutting down launchvault API")
        store.close()

    app = FastAPI(title="launchvault API", version=__version__, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.get("/health", tags=["Health"])
    async def health_check(request: Request) -> dict[str, Any]:
        store: MongoStore | None = getattr(request.app.state, "store", None)
        db_connected = store is not None and await store.ping()
        return {
            "status": "healthy" if db_connected else "degraded",
            "service": "launchvault-api",
            "version": __version__,
            "database": store.info() if store is not None else None,
        }

    app.include_router(router)
    instrument_app(app, settings)
    return app
