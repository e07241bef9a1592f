"""
HireBoard - Request dependencies for the applicant store.

The store does not authenticate. Board sessions identify the acting user
with the X-HireBoard-User header; the value only labels notes and
timeline entries.

Usage in routers:
    from ..dependencies import get_actor

    @router.post("/{applicant_id}/notes")
    def add_note(..., actor: str = Depends(get_actor)):
        ...
"""
from typing import Optional

from fastapi import Header

from .config import settings


def get_actor(
    x_hireboard_user: Optional[str] = Header(None, alias="X-HireBoard-User", max_length=254),
) -> str:
    """Acting user for this request, or the configured default actor."""
    if x_hireboard_user and x_hireboard_user.strip():
        return x_hireboard_user.strip()
    return settings.store.default_actor
