"""
Presence endpoint.
"""

from fastapi import APIRouter, Depends

from core import ConnectionRegistry, Identity

from ..dependencies import get_registry


router = APIRouter()


@router.get("/chat/presence")
async def presence(registry: ConnectionRegistry = Depends(get_registry)) -> list[Identity]:
    """List identities that currently have an open stream."""
    return registry.identities()
