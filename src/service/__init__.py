"""
Queue Ingest Service

Queue worker and read-only HTTP API for orders, products and customers.

Usage:
    # As a service
    python -m src.service --mode all

    # Programmatic
    from src.service import ServiceConfig, create_app
"""

__version__ = "0.1.0"

from .app import create_app
from .config import ServiceConfig
from .wiring import EntityBinding, build_bindings, build_pipelines, create_source

__all__ = [
    "EntityBinding",
    "ServiceConfig",
    "build_bindings",
    "build_pipelines",
    "create_app",
    "create_source",
]
