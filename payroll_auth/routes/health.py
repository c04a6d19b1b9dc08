"""GET /health — Liveness check."""

from fastapi import APIRouter, Request

from ..store import InMemoryUserStore

router = APIRouter()


@router.get("/health")
async def health(request: Request):
    users = request.app.state.user_store
    return {
        "status": "ok",
        "store": "memory" if isinstance(users, InMemoryUserStore) else "sql",
    }
