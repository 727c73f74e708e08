"""
FastAPI HTTP Transport for the Ingest Service

Provides read-only REST endpoints:
- /health - Liveness probe
- /Orders - All order records
- /Products - All product records
- /Customers - All customer records

NOTE: Do NOT add `from __future__ import annotations` to this file.
PEP 563 breaks FastAPI's runtime introspection for parameter sources.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from src.contracts.records import EntityKind
from src.query.service import QueryService
from src.service.config import ServiceConfig
from src.storage.blobs import ensure_image_container
from src.storage.factory import close_stores, create_stores
from src.storage.protocols import EntityStore

logger = logging.getLogger(__name__)


def create_app(
    config: ServiceConfig | None = None,
    stores: dict[EntityKind, EntityStore] | None = None,
) -> FastAPI:
    """
    Create a FastAPI application for the read API.

    Args:
        config: Service configuration
        stores: Pre-built stores; when given, the app neither creates nor
            closes stores and skips blob provisioning

    Returns:
        FastAPI application instance
    """
    _config = config or ServiceConfig()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan handler."""
        logger.info(f"Starting ingest service: {_config.server_name}")

        owns_stores = stores is None
        active = stores if stores is not None else create_stores(
            _config.backend, _config.connection_string
        )

        if owns_stores and _config.backend == "azure" and _config.provision_image_container:
            await ensure_image_container(
                _config.connection_string or "", _config.image_container
            )

        app.state.query_service = QueryService(active)
        logger.info("Ingest service initialized")
        yield

        logger.info("Shutting down ingest service")
        if owns_stores:
            await close_stores(active)

    app = FastAPI(
        title="Queue Ingest Service",
        description="Read API over records ingested from the entity queues",
        version=_config.server_version,
        lifespan=lifespan,
    )

    @app.get("/health")
    async def liveness_check() -> JSONResponse:
        """Liveness probe - just checks if process is alive."""
        return JSONResponse(content={"status": "alive"}, status_code=200)

    @app.get("/")
    async def root() -> dict[str, Any]:
        """Root endpoint with service info."""
        return {
            "name": _config.server_name,
            "version": _config.server_version,
            "endpoints": {kind.label: f"/{kind.value}" for kind in EntityKind},
        }

    for kind in EntityKind:
        app.add_api_route(
            f"/{kind.value}",
            _list_endpoint(kind),
            methods=["GET"],
            name=f"list_{kind.label}",
        )

    return app


def _list_endpoint(kind: EntityKind):
    async def list_records(request: Request) -> Response:
        service: QueryService = request.app.state.query_service
        result = await service.list(kind)
        if not result.ok:
            return PlainTextResponse(result.error or "", status_code=result.status_code)
        return JSONResponse(
            content=jsonable_encoder(result.records), status_code=result.status_code
        )

    list_records.__doc__ = f"List every {kind.value[:-1].lower()} record."
    return list_records


async def run_http_server(
    config: ServiceConfig | None = None,
    stores: dict[EntityKind, EntityStore] | None = None,
) -> None:
    """
    Run the HTTP server.

    Args:
        config: Service configuration
        stores: Stores shared with an in-process worker
    """
    try:
        import uvicorn
    except ImportError as e:
        raise ImportError(
            "Uvicorn is required. Install with: pip install uvicorn"
        ) from e

    _config = config or ServiceConfig()
    app = create_app(_config, stores)

    logger.info(f"Starting HTTP server on {_config.host}:{_config.port}")

    server_config = uvicorn.Config(
        app,
        host=_config.host,
        port=_config.port,
        log_level=_config.log_level.lower(),
    )
    server = uvicorn.Server(server_config)
    await server.serve()
