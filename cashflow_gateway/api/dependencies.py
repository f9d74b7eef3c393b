"""Dependency injection for FastAPI endpoints"""

from fastapi import Request
from cashflow_gateway.infrastructure.clients.ledger import LedgerSyncClient


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_ledger_sync_client() -> LedgerSyncClient:
    """Provide ledger sync client instance"""
    return LedgerSyncClient()
