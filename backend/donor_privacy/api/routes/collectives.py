"""Collective Route — GET a collective page rendered for the requesting viewer.

Invariants:
    - Viewer identity arrives already authenticated, as a user id in the
      configured header; absent header means an unauthenticated viewer
    - Malformed viewer ids are rejected as validation errors, never guessed
    - Response is produced whole or not at all
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Request
from fastapi.exceptions import RequestValidationError

from donor_privacy.config import get_settings
from donor_privacy.core.domain_types import UserId
from donor_privacy.core.repository_protocols import Repositories
from donor_privacy.infrastructure.database import DatabaseSessionManager, get_db_manager
from donor_privacy.infrastructure.repositories import build_sql_repositories
from donor_privacy.schemas.collective import CollectiveGraphResponse
from donor_privacy.services.render_collective import render_collective

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/collectives", tags=["collectives"])


def get_repositories(
    manager: DatabaseSessionManager = Depends(get_db_manager),
) -> Repositories:
    """FastAPI dependency: SQL repositories sharing the app's session manager."""
    return build_sql_repositories(manager.session)


def get_viewer_id(request: Request) -> UserId | None:
    """Authenticated viewer id forwarded by the upstream auth layer."""
    header = get_settings().viewer_header
    raw = request.headers.get(header)
    if not raw:
        return None
    try:
        return UserId(UUID(raw))
    except ValueError:
        raise RequestValidationError([{
            "loc": ("header", header),
            "msg": "viewer id must be a UUID",
            "type": "uuid_parsing",
        }])


@router.get("/{slug}", response_model=CollectiveGraphResponse)
async def get_collective(
    slug: str,
    viewer_id: UserId | None = Depends(get_viewer_id),
    repositories: Repositories = Depends(get_repositories),
):
    """Collective with members, orders and transactions, redacted for the viewer."""
    return await render_collective(slug, viewer_id, repositories)
