"""Read-only retrieval of ingested records."""

from src.query.service import QueryFailed, QueryResult, QueryService

__all__ = ["QueryFailed", "QueryResult", "QueryService"]
