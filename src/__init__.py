"""Queue Ingest - queue-triggered ingestion of orders, products and customers."""

__version__ = "0.1.0"
