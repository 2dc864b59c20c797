"""Redaction Projection — renders a sanitized copy of an EntityGraph for resolved roles.

Invariants:
    - Output is built from fresh dicts; the EntityGraph is never mutated
    - Every anonymous occurrence of one owner uses that owner's single Role,
      so members, orders, order.from_collective and transactions agree
    - Owners without a resolved Role are rendered as PUBLIC (fail closed)
    - Non-anonymous users and collectives are rendered unredacted
    - A creator whose from-collective is missing from the snapshot is redacted

Design Decisions:
    - Roles passed in as a mapping: all IO (membership lookups) stays in services/
    - Snake_case keys: the schema layer decides the wire shape
"""

from typing import Any, Mapping

from donor_privacy.core.domain_types import CollectiveId, Role, UserId
from donor_privacy.core.entity_graph import EntityGraph
from donor_privacy.core.identity import (
    AnonymousProxyCollective,
    Collective,
    Membership,
    Order,
    Transaction,
    User,
)
from donor_privacy.core.visibility_policy import (
    ANONYMOUS_COLLECTIVE_FIELDS,
    ANONYMOUS_COLLECTIVE_MASKS,
    ANONYMOUS_OWNER_FIELDS,
    apply_field_policy,
)

RoleMap = Mapping[UserId, Role]


def redact_graph(graph: EntityGraph, roles: RoleMap) -> dict[str, Any]:
    """Render the subject collective with its members, orders and transactions."""
    view = _render_collective(graph, graph.subject, roles)
    view["members"] = [_render_member(graph, m, roles) for m in graph.memberships]
    view["orders"] = [_render_order(graph, o, roles) for o in graph.orders]
    view["transactions"] = [
        _render_transaction(graph, t, roles) for t in graph.transactions
    ]
    return view


def role_for_owner(roles: RoleMap, owner_user_id: UserId) -> Role:
    return roles.get(owner_user_id, Role.PUBLIC)


# ─── Node renderers ──────────────────────────────────────────────

def _render_user(user: User | None) -> dict[str, Any] | None:
    if user is None:
        return None
    return {
        "id": user.id,
        "slug": user.slug,
        "email": user.email,
        "first_name": user.first_name,
        "last_name": user.last_name,
    }


def _render_owner(user: User | None, role: Role) -> dict[str, Any] | None:
    view = _render_user(user)
    if view is None:
        return None
    return apply_field_policy(view, role, ANONYMOUS_OWNER_FIELDS)


def _render_collective(
    graph: EntityGraph, collective: Collective | None, roles: RoleMap,
) -> dict[str, Any] | None:
    if collective is None:
        return None
    view = {
        "id": collective.id,
        "slug": collective.slug,
        "name": collective.name,
        "type": collective.type.value,
        "currency": collective.currency,
    }
    creator = graph.user(collective.created_by_user_id)
    match collective:
        case AnonymousProxyCollective(owner_user_id=owner_id):
            role = role_for_owner(roles, owner_id)
            view = apply_field_policy(
                view, role, ANONYMOUS_COLLECTIVE_FIELDS, ANONYMOUS_COLLECTIVE_MASKS,
            )
            view["created_by_user"] = _render_owner(creator, role)
        case _:
            view["created_by_user"] = _render_user(creator)
    return view


def _render_creator(
    graph: EntityGraph,
    created_by_user_id: UserId,
    from_collective_id: CollectiveId,
    roles: RoleMap,
) -> dict[str, Any] | None:
    """Acting user of an order or transaction, judged by who it was paid from."""
    user = graph.user(created_by_user_id)
    match graph.collective(from_collective_id):
        case AnonymousProxyCollective(owner_user_id=owner_id):
            return _render_owner(user, role_for_owner(roles, owner_id))
        case None:
            return _render_owner(user, Role.PUBLIC)
        case _:
            return _render_user(user)


def _render_member(
    graph: EntityGraph, membership: Membership, roles: RoleMap,
) -> dict[str, Any]:
    member = graph.collective(membership.member_collective_id)
    return {
        "id": membership.id,
        "role": membership.role.value,
        "member": _render_collective(graph, member, roles),
    }


def _render_order(graph: EntityGraph, order: Order, roles: RoleMap) -> dict[str, Any]:
    from_collective = graph.collective(order.from_collective_id)
    return {
        "id": order.id,
        "description": order.description,
        "total_amount": order.total_amount,
        "currency": order.currency,
        "created_by_user": _render_creator(
            graph, order.created_by_user_id, order.from_collective_id, roles,
        ),
        "from_collective": _render_collective(graph, from_collective, roles),
    }


def _render_transaction(
    graph: EntityGraph, transaction: Transaction, roles: RoleMap,
) -> dict[str, Any]:
    return {
        "id": transaction.id,
        "description": transaction.description,
        "amount": transaction.amount,
        "currency": transaction.currency,
        "created_by_user": _render_creator(
            graph, transaction.created_by_user_id,
            transaction.from_collective_id, roles,
        ),
    }
