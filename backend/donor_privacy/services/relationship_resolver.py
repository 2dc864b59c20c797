"""Relationship Resolver — computes a viewer's Role relative to a subject collective.

Invariants:
    - One resolver per response: membership lookups are memoized per
      (viewer, collective) for its lifetime and never shared across requests
    - Subject and host lookups are issued concurrently; concurrent callers
      await the same in-flight lookup
    - A missing subject raises ConfigurationError (no fail-closed decision possible)
    - Missing or deleted viewers resolve to PUBLIC; missing memberships to OTHER
    - Repository failures propagate as LookupFailure

Design Decisions:
    - Memo stores asyncio Tasks, not results: deduplicates lookups that are
      still in flight when a second owner's role is requested
    - SELF short-circuits before any lookup: it depends only on ids
"""

import asyncio
import logging
from typing import Iterable

from donor_privacy.core.domain_types import CollectiveId, Role, UserId
from donor_privacy.core.errors import ConfigurationError
from donor_privacy.core.identity import Collective, Membership, User
from donor_privacy.core.repository_protocols import MembershipRepository
from donor_privacy.core.resolve_role import decide_role
from donor_privacy.services.guarded_lookup import guarded_lookup

logger = logging.getLogger(__name__)


class RelationshipResolver:
    """Request-scoped role resolution."""

    def __init__(self, memberships: MembershipRepository):
        self._memberships = memberships
        self._lookups: dict[tuple[UserId, CollectiveId], asyncio.Task] = {}

    async def resolve_role(
        self,
        viewer: User | None,
        subject: Collective | None,
        target_owner_user_id: UserId | None,
    ) -> Role:
        if subject is None:
            raise ConfigurationError(
                "Role resolution requires the subject collective being rendered",
            )
        if viewer is None or not viewer.is_live:
            return Role.PUBLIC
        if viewer.id == target_owner_user_id:
            role = Role.SELF
        else:
            subject_membership, host_membership = await asyncio.gather(
                self._lookup(viewer.id, subject.id),
                self._lookup(viewer.id, subject.host_collective_id),
            )
            role = decide_role(
                viewer.id, target_owner_user_id, subject_membership, host_membership,
            )
        logger.debug(
            f"Resolved {role.value} for viewer on collective {subject.slug}",
            extra={
                "viewer_id": str(viewer.id),
                "collective_id": str(subject.id),
                "role": role.value,
            },
        )
        return role

    async def resolve_roles(
        self,
        viewer: User | None,
        subject: Collective | None,
        owner_ids: Iterable[UserId],
    ) -> dict[UserId, Role]:
        """Role for each anonymous owner, resolved concurrently."""
        owners = list(owner_ids)
        roles = await asyncio.gather(
            *(self.resolve_role(viewer, subject, owner) for owner in owners),
        )
        return dict(zip(owners, roles))

    def _lookup(
        self, user_id: UserId, collective_id: CollectiveId | None,
    ) -> "asyncio.Future[Membership | None]":
        if collective_id is None:
            done = asyncio.get_running_loop().create_future()
            done.set_result(None)
            return done
        key = (user_id, collective_id)
        task = self._lookups.get(key)
        if task is None:
            task = asyncio.ensure_future(guarded_lookup(
                "membership", f"{user_id}/{collective_id}",
                self._memberships.get_membership(user_id, collective_id),
            ))
            self._lookups[key] = task
        return task
