"""Boundary Protocols — contracts between the policy core and the persistence shell.

Invariants:
    - Core NEVER imports from shell: dependency arrows point inward only
    - Lookups that find nothing return None (absence is not an error)
    - Lookups that fail raise (LookupFailure from SQL implementations)

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Async in Protocol: implementations do IO, but the pure functions that
      consume their results are never async; services/ orchestrates the calls
"""

from dataclasses import dataclass
from typing import Protocol

from donor_privacy.core.domain_types import CollectiveId, UserId
from donor_privacy.core.identity import (
    Collective,
    Membership,
    Order,
    Transaction,
    User,
)


class MembershipRepository(Protocol):
    """Contract for membership lookups, implemented by shell."""
    async def get_membership(
        self, user_id: UserId, collective_id: CollectiveId,
    ) -> Membership | None: ...
    async def list_members(self, collective_id: CollectiveId) -> list[Membership]: ...


class CollectiveRepository(Protocol):
    """Contract for collective lookups, implemented by shell."""
    async def get_collective(self, collective_id: CollectiveId) -> Collective | None: ...
    async def get_collective_by_slug(self, slug: str) -> Collective | None: ...


class UserRepository(Protocol):
    """Contract for user lookups, implemented by shell."""
    async def get_user(self, user_id: UserId) -> User | None: ...


class LedgerRepository(Protocol):
    """Contract for orders and transactions received by a collective."""
    async def list_orders(self, to_collective_id: CollectiveId) -> list[Order]: ...
    async def list_transactions(
        self, collective_id: CollectiveId,
    ) -> list[Transaction]: ...


@dataclass(frozen=True)
class Repositories:
    """Everything the shell injects for one request."""
    collectives: CollectiveRepository
    memberships: MembershipRepository
    users: UserRepository
    ledger: LedgerRepository
