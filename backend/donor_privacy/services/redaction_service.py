"""Redaction Service — the redact() entry point used by the hosting query layer.

Invariants:
    - Roles resolved once per distinct anonymous owner, then reused at every occurrence
    - Returns an independent sanitized projection; the EntityGraph is untouched
    - All-or-nothing: any lookup failure raises before a projection is built
    - Missing subject, or one other than the rendered collective, raises
      ConfigurationError before any lookup is issued

Design Decisions:
    - Fresh RelationshipResolver per call: memo lifetime equals one response
"""

import logging
from typing import Any

from donor_privacy.core.domain_types import UserId
from donor_privacy.core.entity_graph import EntityGraph
from donor_privacy.core.errors import ConfigurationError, ErrorContext
from donor_privacy.core.identity import Collective, User
from donor_privacy.core.redact_graph import redact_graph
from donor_privacy.core.repository_protocols import (
    MembershipRepository,
    UserRepository,
)
from donor_privacy.services.guarded_lookup import guarded_lookup
from donor_privacy.services.relationship_resolver import RelationshipResolver

logger = logging.getLogger(__name__)


class RedactionService:
    """Applies the visibility policy to one rendered collective graph."""

    def __init__(self, memberships: MembershipRepository, users: UserRepository):
        self._memberships = memberships
        self._users = users

    async def resolve_viewer(self, viewer_id: UserId | None) -> User | None:
        """Live user behind an authenticated id, or None (treated as PUBLIC)."""
        if viewer_id is None:
            return None
        user = await guarded_lookup(
            "user", viewer_id, self._users.get_user(viewer_id),
        )
        if user is None or not user.is_live:
            logger.info(
                "Viewer does not resolve to a live user, rendering as public",
                extra={"viewer_id": str(viewer_id)},
            )
            return None
        return user

    async def redact(
        self,
        graph: EntityGraph,
        viewer: User | None,
        subject: Collective | None,
    ) -> dict[str, Any]:
        if subject is None:
            raise ConfigurationError(
                "redact() called without a subject collective",
            )
        if subject.id != graph.subject.id:
            raise ConfigurationError(
                "redact() subject does not match the rendered collective",
                ErrorContext(collective_id=str(graph.subject.id)),
            )
        resolver = RelationshipResolver(self._memberships)
        roles = await resolver.resolve_roles(
            viewer, subject, sorted(graph.anonymous_owner_ids()),
        )
        return redact_graph(graph, roles)
