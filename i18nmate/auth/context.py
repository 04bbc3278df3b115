"""
Auth context - who is making the request and which project they act on.

This is the lightweight object passed to route handlers. Ownership is the
only access rule: a user sees their own projects and nothing else.
"""

from __future__ import annotations

from dataclasses import dataclass

from i18nmate.core.errors import ApiError, ExportMessages
from i18nmate.core.models import Project
from i18nmate.core.utils import is_uuid
from i18nmate.storage.base import TranslationStorage

INVALID_PROJECT_ID_DETAILS = {"constraint": "validation", "field": "project_id"}


@dataclass
class AuthContext:
    """
    Authorization context for a request.

    Usage in routes:
        async def my_route(ctx: AuthContext = Depends(require_project_owner)):
            print(f"User {ctx.user_id} working on {ctx.project.name}")
    """

    user_id: str
    project: Project | None = None

    @property
    def project_id(self) -> str | None:
        return self.project.id if self.project else None


def validate_project_id(project_id: str | None) -> str:
    """
    Check a project ID is present and well formed.

    Raises:
        ApiError: 400 if missing or not a UUID
    """
    if not project_id:
        raise ApiError(400, ExportMessages.PROJECT_ID_REQUIRED)
    if not is_uuid(project_id):
        raise ApiError(400, ExportMessages.INVALID_PROJECT_ID, dict(INVALID_PROJECT_ID_DETAILS))
    return project_id


async def resolve_project(storage: TranslationStorage, project_id: str, user_id: str) -> Project:
    """
    Load a project owned by the user.

    A missing project and someone else's project produce the same 404.
    """
    project = await storage.get_project(project_id, user_id)
    if project is None:
        raise ApiError(404, ExportMessages.PROJECT_NOT_FOUND)
    return project
