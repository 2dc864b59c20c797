"""Entity Graph Loader — assembles the read-only snapshot rendered for a subject.

Invariants:
    - Fetches members, orders and transactions of the subject, then every
      collective and user they reference, each id at most once
    - Independent lookups are issued concurrently
    - Unknown slug raises ResourceNotFoundError; repository failures raise LookupFailure
"""

import asyncio
import logging

from donor_privacy.core.entity_graph import EntityGraph, build_entity_graph
from donor_privacy.core.errors import ResourceNotFoundError
from donor_privacy.core.identity import Collective
from donor_privacy.core.repository_protocols import Repositories
from donor_privacy.services.guarded_lookup import guarded_lookup

logger = logging.getLogger(__name__)


class EntityGraphLoader:
    """Query-side snapshot builder for one collective page."""

    def __init__(self, repositories: Repositories):
        self._repos = repositories

    async def load_by_slug(self, slug: str) -> EntityGraph:
        subject = await guarded_lookup(
            "collective", slug, self._repos.collectives.get_collective_by_slug(slug),
        )
        if subject is None:
            raise ResourceNotFoundError("Collective", slug)
        return await self.load(subject)

    async def load(self, subject: Collective) -> EntityGraph:
        memberships, orders, transactions = await asyncio.gather(
            guarded_lookup(
                "members", subject.id,
                self._repos.memberships.list_members(subject.id),
            ),
            guarded_lookup(
                "orders", subject.id, self._repos.ledger.list_orders(subject.id),
            ),
            guarded_lookup(
                "transactions", subject.id,
                self._repos.ledger.list_transactions(subject.id),
            ),
        )

        collective_ids = {m.member_collective_id for m in memberships}
        collective_ids |= {o.from_collective_id for o in orders}
        collective_ids |= {t.from_collective_id for t in transactions}
        collective_ids.discard(None)
        collective_ids.discard(subject.id)
        collectives = await asyncio.gather(*(
            guarded_lookup(
                "collective", cid, self._repos.collectives.get_collective(cid),
            )
            for cid in sorted(collective_ids)
        ))
        collectives = [c for c in collectives if c is not None]

        user_ids = {c.created_by_user_id for c in [subject, *collectives]}
        user_ids |= {o.created_by_user_id for o in orders}
        user_ids |= {t.created_by_user_id for t in transactions}
        user_ids.discard(None)
        users = await asyncio.gather(*(
            guarded_lookup("user", uid, self._repos.users.get_user(uid))
            for uid in sorted(user_ids)
        ))

        logger.debug(
            f"Loaded {len(memberships)} members, {len(orders)} orders, "
            f"{len(transactions)} transactions for {subject.slug}",
            extra={"collective_id": str(subject.id)},
        )
        return build_entity_graph(
            subject,
            memberships=memberships,
            orders=orders,
            transactions=transactions,
            collectives=collectives,
            users=[u for u in users if u is not None],
        )
