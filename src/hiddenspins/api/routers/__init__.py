"""API router initialization.

All sub-routers are collected into `api_router`, which main.py mounts under the
configured prefix (/api by default). Each router file defines its own prefix.
"""

from fastapi import APIRouter

from hiddenspins.api.routers import artists, drafts, platforms, users

api_router = APIRouter()

api_router.include_router(artists.router)
api_router.include_router(users.router)
api_router.include_router(drafts.router)
api_router.include_router(platforms.router)

__all__ = [
    "api_router",
    "artists",
    "drafts",
    "platforms",
    "users",
]
