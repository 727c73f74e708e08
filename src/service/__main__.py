"""
Ingest Service - CLI Entry Point

Usage:
    python -m src.service [--mode http|worker|all] [options]

Examples:
    # Read API only
    python -m src.service --mode http --port 7071

    # Queue worker against Azure Storage (connection string from env)
    python -m src.service --mode worker --backend azure

    # Both in one process, sharing in-memory stores
    python -m src.service --mode all
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from src.common.logging import configure_sanitized_logging
from src.service.config import ServiceConfig


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Queue Ingest Service",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--mode",
        choices=["http", "worker", "all"],
        default="all",
        help="What to run (default: all)",
    )
    parser.add_argument(
        "--backend",
        choices=["memory", "azure"],
        default=None,
        help="Storage/queue backend (default: from config or memory)",
    )

    # HTTP options
    parser.add_argument(
        "--host",
        default=None,
        help="Host to bind (default: from config or 0.0.0.0)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to bind (default: from config or 7071)",
    )

    # Logging
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error"],
        default=None,
        help="Log level (default: from config or info)",
    )

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> ServiceConfig:
    """Build configuration from args and environment."""
    overrides = {}

    if args.backend:
        overrides["backend"] = args.backend
    if args.host:
        overrides["host"] = args.host
    if args.port:
        overrides["port"] = args.port
    if args.log_level:
        overrides["log_level"] = args.log_level.upper()

    return ServiceConfig(**overrides)


async def run(config: ServiceConfig, mode: str) -> None:
    """Run the requested components in one event loop."""
    from src.messaging.worker import IngestionWorker
    from src.service.app import run_http_server
    from src.service.wiring import build_pipelines, create_source
    from src.storage.blobs import ensure_image_container
    from src.storage.factory import close_stores, create_stores

    if mode == "worker" and config.backend == "memory":
        logging.getLogger(__name__).warning(
            "Worker on the memory backend: the in-process queue has no external "
            "producers, so nothing will be ingested. Use --backend azure."
        )

    stores = create_stores(config.backend, config.connection_string)
    if config.backend == "azure" and config.provision_image_container:
        await ensure_image_container(config.connection_string or "", config.image_container)

    source = create_source(config)
    worker = IngestionWorker(
        source,
        build_pipelines(config, stores),
        batch_size=config.batch_size,
        poll_interval_seconds=config.poll_interval_seconds,
    )

    try:
        if mode == "http":
            await run_http_server(config, stores)
        elif mode == "worker":
            await worker.run()
        else:
            await asyncio.gather(run_http_server(config, stores), worker.run())
    finally:
        await source.close()
        await close_stores(stores)


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    args = parse_args(argv)
    config = build_config(args)
    configure_sanitized_logging(level=getattr(logging, config.log_level.upper()))

    logger = logging.getLogger(__name__)
    logger.info(f"Starting ingest service ({args.mode}, backend={config.backend})")

    try:
        asyncio.run(run(config, args.mode))
    except KeyboardInterrupt:
        logger.info("Shutting down...")
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
