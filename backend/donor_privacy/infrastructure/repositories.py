"""SQL Repositories — SQLAlchemy implementations of the core boundary Protocols.

Invariants:
    - Every lookup opens its own session, so independent lookups may run concurrently
    - ORM rows are mapped to frozen core entities before leaving this module
    - A row that does not exist returns None / []; a failing query raises LookupFailure
    - get_membership returns the most privileged row when a user holds several

Design Decisions:
    - Session factory injected (db_manager.session in the app, a test sessionmaker
      in tests): repositories never reach for the global singleton
"""

import logging
from contextlib import AbstractAsyncContextManager
from typing import Callable

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from donor_privacy.core.domain_types import (
    CollectiveId,
    CollectiveType,
    MemberRole,
    MembershipId,
    OrderId,
    TransactionId,
    UserId,
)
from donor_privacy.core.errors import DatabaseError, LookupFailure
from donor_privacy.core.identity import (
    Collective,
    Membership,
    Order,
    Transaction,
    User,
    collective_of_type,
)
from donor_privacy.core.repository_protocols import Repositories
from donor_privacy.core.resolve_role import most_privileged
from donor_privacy.models.collective import Collective as CollectiveRow
from donor_privacy.models.membership import Membership as MembershipRow
from donor_privacy.models.order import Order as OrderRow
from donor_privacy.models.transaction import Transaction as TransactionRow
from donor_privacy.models.user import User as UserRow

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]


# ─── Row mapping ─────────────────────────────────────────────────

def to_user(row: UserRow) -> User:
    return User(
        id=UserId(row.id),
        email=row.email,
        first_name=row.first_name,
        last_name=row.last_name,
        slug=row.slug,
        created_at=row.created_at,
        deleted_at=row.deleted_at,
    )


def to_collective(row: CollectiveRow) -> Collective:
    return collective_of_type(
        CollectiveType(row.type),
        id=CollectiveId(row.id),
        slug=row.slug,
        name=row.name,
        currency=row.currency,
        created_by_user_id=UserId(row.created_by_user_id) if row.created_by_user_id else None,
        host_collective_id=(
            CollectiveId(row.host_collective_id) if row.host_collective_id else None
        ),
    )


def to_membership(row: MembershipRow) -> Membership:
    return Membership(
        id=MembershipId(row.id),
        user_id=UserId(row.user_id),
        collective_id=CollectiveId(row.collective_id),
        role=MemberRole(row.role),
        member_collective_id=(
            CollectiveId(row.member_collective_id) if row.member_collective_id else None
        ),
    )


def to_order(row: OrderRow) -> Order:
    return Order(
        id=OrderId(row.id),
        from_collective_id=CollectiveId(row.from_collective_id),
        to_collective_id=CollectiveId(row.to_collective_id),
        total_amount=row.total_amount,
        currency=row.currency,
        created_by_user_id=UserId(row.created_by_user_id),
        description=row.description,
    )


def to_transaction(row: TransactionRow) -> Transaction:
    return Transaction(
        id=TransactionId(row.id),
        order_id=OrderId(row.order_id),
        from_collective_id=CollectiveId(row.from_collective_id),
        created_by_user_id=UserId(row.created_by_user_id),
        amount=row.amount,
        currency=row.currency,
        description=row.description,
    )


# ─── Repositories ────────────────────────────────────────────────

class _SqlRepository:
    def __init__(self, session_factory: SessionFactory):
        self._session_factory = session_factory

    async def _fetch_all(self, entity: str, key: object, query) -> list:
        try:
            async with self._session_factory() as db:
                result = await db.execute(query)
                return list(result.scalars().all())
        except (SQLAlchemyError, DatabaseError) as e:
            logger.error(
                f"{entity} query failed for {key}: {e}",
                extra={"error_code": "LOOKUP_FAILURE"},
            )
            raise LookupFailure(entity, str(key)) from e

    async def _fetch_one(self, entity: str, key: object, query):
        rows = await self._fetch_all(entity, key, query)
        return rows[0] if rows else None


class SqlCollectiveRepository(_SqlRepository):
    async def get_collective(self, collective_id: CollectiveId) -> Collective | None:
        row = await self._fetch_one(
            "collective", collective_id,
            select(CollectiveRow).where(CollectiveRow.id == collective_id),
        )
        return to_collective(row) if row else None

    async def get_collective_by_slug(self, slug: str) -> Collective | None:
        row = await self._fetch_one(
            "collective", slug,
            select(CollectiveRow).where(CollectiveRow.slug == slug),
        )
        return to_collective(row) if row else None


class SqlMembershipRepository(_SqlRepository):
    async def get_membership(
        self, user_id: UserId, collective_id: CollectiveId,
    ) -> Membership | None:
        rows = await self._fetch_all(
            "membership", f"{user_id}/{collective_id}",
            select(MembershipRow)
            .where(MembershipRow.user_id == user_id)
            .where(MembershipRow.collective_id == collective_id),
        )
        return most_privileged(to_membership(r) for r in rows)

    async def list_members(self, collective_id: CollectiveId) -> list[Membership]:
        rows = await self._fetch_all(
            "members", collective_id,
            select(MembershipRow)
            .where(MembershipRow.collective_id == collective_id)
            .where(MembershipRow.member_collective_id.isnot(None))
            .order_by(MembershipRow.created_at),
        )
        return [to_membership(r) for r in rows]


class SqlUserRepository(_SqlRepository):
    async def get_user(self, user_id: UserId) -> User | None:
        row = await self._fetch_one(
            "user", user_id, select(UserRow).where(UserRow.id == user_id),
        )
        return to_user(row) if row else None


class SqlLedgerRepository(_SqlRepository):
    async def list_orders(self, to_collective_id: CollectiveId) -> list[Order]:
        rows = await self._fetch_all(
            "orders", to_collective_id,
            select(OrderRow)
            .where(OrderRow.to_collective_id == to_collective_id)
            .order_by(OrderRow.created_at),
        )
        return [to_order(r) for r in rows]

    async def list_transactions(
        self, collective_id: CollectiveId,
    ) -> list[Transaction]:
        rows = await self._fetch_all(
            "transactions", collective_id,
            select(TransactionRow)
            .where(TransactionRow.collective_id == collective_id)
            .order_by(TransactionRow.created_at),
        )
        return [to_transaction(r) for r in rows]


def build_sql_repositories(session_factory: SessionFactory) -> Repositories:
    return Repositories(
        collectives=SqlCollectiveRepository(session_factory),
        memberships=SqlMembershipRepository(session_factory),
        users=SqlUserRepository(session_factory),
        ledger=SqlLedgerRepository(session_factory),
    )
