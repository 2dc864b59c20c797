"""Collective Rendering — load, resolve viewer, redact: one sanitized page per request.

Invariants:
    - Sequence is fetch → decide → project; nothing is returned if any step raises
    - The loaded subject is the redaction subject (recipient side of every order)
"""

import logging
from typing import Any

from donor_privacy.core.domain_types import UserId
from donor_privacy.core.repository_protocols import Repositories
from donor_privacy.services.load_entity_graph import EntityGraphLoader
from donor_privacy.services.redaction_service import RedactionService

logger = logging.getLogger(__name__)


async def render_collective(
    slug: str, viewer_id: UserId | None, repositories: Repositories,
) -> dict[str, Any]:
    service = RedactionService(repositories.memberships, repositories.users)
    viewer = await service.resolve_viewer(viewer_id)
    graph = await EntityGraphLoader(repositories).load_by_slug(slug)
    view = await service.redact(graph, viewer, graph.subject)
    logger.info(
        f"Rendered collective {slug}",
        extra={
            "collective_id": str(graph.subject.id),
            "viewer_id": str(viewer.id) if viewer else None,
        },
    )
    return view
