"""
Health check endpoint.
"""

from fastapi import APIRouter, Depends

from core import ConnectionRegistry

from ..dependencies import get_registry


router = APIRouter()


@router.get("/health")
async def health(registry: ConnectionRegistry = Depends(get_registry)) -> dict:
    """Health check endpoint."""
    return {"status": "ok", "connections": len(registry)}
