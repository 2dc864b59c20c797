"""Collective Graph Schemas — response shape for a sanitized collective page.

Invariants:
    - Redacted scalars are Optional and serialize as null, never omitted
    - Shapes mirror core/redact_graph.py output one-to-one

Design Decisions:
    - Every field the policy may null is typed `| None` even when the stored
      column is non-nullable (user id, user slug, collective slug)
"""

from uuid import UUID

from pydantic import BaseModel


class UserView(BaseModel):
    """User node; personal identity fields null when redacted."""
    id: UUID | None
    slug: str | None
    email: str | None
    first_name: str | None
    last_name: str | None


class CollectiveView(BaseModel):
    """Collective node; anonymous proxies render name 'anonymous'."""
    id: UUID
    slug: str | None
    name: str
    type: str
    currency: str
    created_by_user: UserView | None


class MemberView(BaseModel):
    id: UUID
    role: str
    member: CollectiveView | None


class OrderView(BaseModel):
    id: UUID
    description: str | None
    total_amount: int
    currency: str
    created_by_user: UserView | None
    from_collective: CollectiveView | None


class TransactionView(BaseModel):
    id: UUID
    description: str | None
    amount: int
    currency: str
    created_by_user: UserView | None


class CollectiveGraphResponse(CollectiveView):
    """Root page: the subject collective with its members and ledger."""
    members: list[MemberView]
    orders: list[OrderView]
    transactions: list[TransactionView]
