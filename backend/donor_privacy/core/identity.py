"""Identity Model — users, collective variants, memberships, orders, transactions.

Invariants:
    - All entities are frozen: canonical data is never mutated by the policy
    - Collective is a closed union: StandardCollective | AnonymousProxyCollective | HostCollective
    - An AnonymousProxyCollective has exactly one owner, fixed at creation,
      and its created_by_user_id is that owner
    - A Transaction inherits created_by_user_id and from_collective_id from its Order

Design Decisions:
    - Tagged variants over a string `type` field: render paths match on the class,
      so the anonymity branch cannot be forgotten at a call site
    - Plain dataclasses over ORM objects: core never sees SQLAlchemy
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from donor_privacy.core.domain_types import (
    ANONYMOUS_NAME,
    CollectiveId,
    CollectiveType,
    MemberRole,
    MembershipId,
    OrderId,
    TransactionId,
    UserId,
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class User:
    id: UserId
    email: str
    first_name: str | None
    last_name: str | None
    slug: str
    created_at: datetime = field(default_factory=_utcnow)
    deleted_at: datetime | None = None

    @property
    def is_live(self) -> bool:
        return self.deleted_at is None


@dataclass(frozen=True)
class StandardCollective:
    id: CollectiveId
    slug: str
    name: str
    currency: str
    created_by_user_id: UserId | None = None
    host_collective_id: CollectiveId | None = None

    @property
    def type(self) -> CollectiveType:
        return CollectiveType.STANDARD


@dataclass(frozen=True)
class HostCollective:
    id: CollectiveId
    slug: str
    name: str
    currency: str
    created_by_user_id: UserId | None = None
    host_collective_id: CollectiveId | None = None

    @property
    def type(self) -> CollectiveType:
        return CollectiveType.HOST


@dataclass(frozen=True)
class AnonymousProxyCollective:
    """Donor-identity shield. Its stored name is never rendered."""
    id: CollectiveId
    slug: str
    owner_user_id: UserId
    currency: str
    name: str = ANONYMOUS_NAME
    host_collective_id: CollectiveId | None = None

    @property
    def type(self) -> CollectiveType:
        return CollectiveType.ANONYMOUS_PROXY

    @property
    def created_by_user_id(self) -> UserId:
        return self.owner_user_id


Collective = StandardCollective | AnonymousProxyCollective | HostCollective


@dataclass(frozen=True)
class Membership:
    """Grants user_id a role over collective_id.

    member_collective_id is the collective listed in the collective's members
    (a profile, an anonymous proxy or a host); None for privilege-only rows.
    """
    id: MembershipId
    user_id: UserId
    collective_id: CollectiveId
    role: MemberRole
    member_collective_id: CollectiveId | None = None


@dataclass(frozen=True)
class Order:
    id: OrderId
    from_collective_id: CollectiveId
    to_collective_id: CollectiveId
    total_amount: int
    currency: str
    created_by_user_id: UserId
    description: str | None = None


@dataclass(frozen=True)
class Transaction:
    id: TransactionId
    order_id: OrderId
    from_collective_id: CollectiveId
    created_by_user_id: UserId
    amount: int
    currency: str
    description: str | None = None

    @classmethod
    def for_order(
        cls, order: Order, transaction_id: TransactionId | None = None,
    ) -> "Transaction":
        """Ledger record for an executed order; identity fields are inherited."""
        return cls(
            id=transaction_id or TransactionId(uuid.uuid4()),
            order_id=order.id,
            from_collective_id=order.from_collective_id,
            created_by_user_id=order.created_by_user_id,
            amount=order.total_amount,
            currency=order.currency,
            description=order.description,
        )


def is_anonymous(collective: Collective | None) -> bool:
    return isinstance(collective, AnonymousProxyCollective)


def new_anonymous_profile(
    owner: User, currency: str = "USD", collective_id: CollectiveId | None = None,
) -> AnonymousProxyCollective:
    """Create the anonymous proxy a user donates through.

    The slug is opaque so it carries nothing of the owner's profile.
    """
    proxy_id = collective_id or CollectiveId(uuid.uuid4())
    return AnonymousProxyCollective(
        id=proxy_id,
        slug=f"anonymous-{proxy_id.hex[:12]}",
        owner_user_id=owner.id,
        currency=currency,
    )


def collective_of_type(
    collective_type: CollectiveType,
    *,
    id: CollectiveId,
    slug: str,
    name: str,
    currency: str,
    created_by_user_id: UserId | None,
    host_collective_id: CollectiveId | None = None,
) -> Collective:
    """Build the variant for a stored `type` value (used at the persistence boundary)."""
    match collective_type:
        case CollectiveType.ANONYMOUS_PROXY:
            if created_by_user_id is None:
                raise ValueError(f"anonymous proxy {id} has no owner")
            return AnonymousProxyCollective(
                id=id, slug=slug, owner_user_id=created_by_user_id,
                currency=currency, name=name,
                host_collective_id=host_collective_id,
            )
        case CollectiveType.HOST:
            return HostCollective(
                id=id, slug=slug, name=name, currency=currency,
                created_by_user_id=created_by_user_id,
                host_collective_id=host_collective_id,
            )
        case CollectiveType.STANDARD:
            return StandardCollective(
                id=id, slug=slug, name=name, currency=currency,
                created_by_user_id=created_by_user_id,
                host_collective_id=host_collective_id,
            )
    raise ValueError(f"unknown collective type: {collective_type!r}")
