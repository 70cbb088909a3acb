"""API module for Hidden Spins.

Structure:
- routers/: endpoints (artists, users, drafts, platforms)
- schemas/: pydantic request/response models (camelCase on the wire)
- dependencies.py: services from app.state
- exception_handlers.py: domain exception -> HTTP status mapping
"""

from hiddenspins.api.routers import api_router

__all__ = ["api_router"]
