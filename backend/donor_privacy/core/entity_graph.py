"""Entity Graph — read-only snapshot of everything rendered for one subject collective.

Invariants:
    - Frozen: redaction projects from it, never writes into it
    - memberships/orders/transactions all belong to the subject collective
    - collectives/users maps hold every entity those records reference
      (a missing reference is rendered as null, never guessed)
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from donor_privacy.core.domain_types import CollectiveId, UserId
from donor_privacy.core.identity import (
    AnonymousProxyCollective,
    Collective,
    Membership,
    Order,
    Transaction,
    User,
)


@dataclass(frozen=True)
class EntityGraph:
    subject: Collective
    memberships: tuple[Membership, ...] = ()
    orders: tuple[Order, ...] = ()
    transactions: tuple[Transaction, ...] = ()
    collectives: Mapping[CollectiveId, Collective] = field(
        default_factory=lambda: MappingProxyType({}),
    )
    users: Mapping[UserId, User] = field(
        default_factory=lambda: MappingProxyType({}),
    )

    def collective(self, collective_id: CollectiveId | None) -> Collective | None:
        if collective_id is None:
            return None
        if collective_id == self.subject.id:
            return self.subject
        return self.collectives.get(collective_id)

    def user(self, user_id: UserId | None) -> User | None:
        if user_id is None:
            return None
        return self.users.get(user_id)

    def anonymous_owner_ids(self) -> frozenset[UserId]:
        """Owners of every anonymous proxy that appears anywhere in the graph."""
        referenced = [self.subject]
        referenced += [self.collective(m.member_collective_id) for m in self.memberships]
        referenced += [self.collective(o.from_collective_id) for o in self.orders]
        referenced += [self.collective(t.from_collective_id) for t in self.transactions]
        return frozenset(
            c.owner_user_id for c in referenced
            if isinstance(c, AnonymousProxyCollective)
        )


def build_entity_graph(
    subject: Collective,
    memberships=(),
    orders=(),
    transactions=(),
    collectives=(),
    users=(),
) -> EntityGraph:
    """Assemble a graph from iterables of entities, indexing the lookups by id."""
    return EntityGraph(
        subject=subject,
        memberships=tuple(memberships),
        orders=tuple(orders),
        transactions=tuple(transactions),
        collectives=MappingProxyType({c.id: c for c in collectives}),
        users=MappingProxyType({u.id: u for u in users}),
    )
